"""Execute SQL statements with positional parameter binding"""

import logging
from typing import Any, Optional, Union, Sequence

import pandas as pd

from sqlfluent.context import ConnectionContext

from .result import QueryResult

logger = logging.getLogger(__name__)


class Executor:
    """Run compiled ``(sql, bindings)`` pairs against a connection context"""

    def __init__(self, context: Union[str, ConnectionContext], **overrides: Any):
        """Initialize with a server name or ConnectionContext instance"""
        if isinstance(context, str):
            self.context = ConnectionContext(server=context, **overrides)
        else:
            self.context = context

    def run(
        self,
        sql: str,
        bindings: Optional[Sequence[Any]] = None
    ) -> QueryResult:
        """Execute SQL and return a QueryResult

        Bindings are passed positionally and must match the ``?``
        placeholders in ``sql`` one for one. Driver errors propagate.
        """
        cursor = self.context.cursor
        if bindings is None:
            logger.debug("Executing: %s", sql)
            cursor.execute(sql)
        else:
            bindings = list(bindings)
            logger.debug("Executing: %s (%d bindings)", sql, len(bindings))
            cursor.execute(sql, bindings)
        return QueryResult(_cursor=cursor)

    def run_many(
        self,
        sql: str,
        rows: Sequence[Sequence[Any]]
    ) -> QueryResult:
        """Execute one statement once per binding row"""
        cursor = self.context.cursor
        logger.debug("Executing batch: %s (%d rows)", sql, len(rows))
        cursor.executemany(sql, [list(row) for row in rows])
        return QueryResult(_cursor=cursor)

    def close(self) -> None:
        """Close the underlying context when it owns its connection"""
        self.context.close()


def execute_sql(
    sql: str,
    context: Union[str, ConnectionContext],
    bindings: Optional[Sequence[Any]] = None,
    **overrides: Any
) -> QueryResult:
    """Execute SQL and return a QueryResult

    Args:
        sql: SQL statement with ``?`` placeholders
        context: ConnectionContext object or server name
        bindings: Positional values for the placeholders
        **overrides: Runtime overrides (only used if context is a string)

    Example:
        >>> result = execute_sql("DELETE FROM sessions WHERE expired = ?", "master", [True])
        >>> print(f"Deleted {result.rowcount} rows")
    """
    return Executor(context, **overrides).run(sql, bindings)


def query(
    sql: str,
    context: Union[str, ConnectionContext],
    bindings: Optional[Sequence[Any]] = None,
    **overrides: Any
) -> pd.DataFrame:
    """Execute SQL and return results as a DataFrame"""
    return Executor(context, **overrides).run(sql, bindings).to_df()
