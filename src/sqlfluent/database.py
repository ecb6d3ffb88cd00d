"""High-level facade: server configuration, queries and transactions.

Example:
    >>> Database.configure("master", {"account": "acme", "user": "app"})
    >>> Database.table("users").where("active", True).get()
    >>> Database.update("users", {"name": "John"}).where("id", 1).execute()
    >>> Database.transaction(lambda: Database.create("orders", {"user_id": 1}))
"""

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar, Union

from sqlfluent.config import register_server
from sqlfluent.context import ConnectionContext
from sqlfluent.exceptions import DuplicateServerConfiguration, TransactionFailure
from sqlfluent.primitives import Executor
from sqlfluent.query import QueryBuilder
from sqlfluent.transactions import executor_for, registry

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "master"

T = TypeVar("T")


class QueryReturnType(Enum):
    """Shape of the value returned by ``Database.query``"""
    ALL = "all"
    FIRST = "first"
    COUNT = "count"
    DATAFRAME = "dataframe"


class ServerChain:
    """Entry points bound to one server"""

    def __init__(self, server: str, context: Optional[ConnectionContext] = None):
        self.server = server
        self._context = context

    def table(self, table: str) -> QueryBuilder:
        return QueryBuilder(self.server, self._context).table(table)

    def query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        return_type: QueryReturnType = QueryReturnType.ALL,
    ) -> Any:
        return Database.query(sql, params, return_type, server=self.server, context=self._context)

    def __repr__(self) -> str:
        return f"ServerChain(server={self.server!r})"


class UpdateChain:
    """UPDATE statement with fixed data awaiting its conditions

    Example:
        >>> Database.update("users", {"name": "John"}).where("id", 1).execute()
    """

    def __init__(
        self,
        table: str,
        data: Mapping[str, Any],
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ):
        self._data = dict(data)
        self._builder = QueryBuilder(server, context).table(table)

    def where(self, column: Any, operator: Any = None, *value: Any) -> 'UpdateChain':
        self._builder.where(column, operator, *value)
        return self

    def or_where(self, column: Any, operator: Any = None, *value: Any) -> 'UpdateChain':
        self._builder.or_where(column, operator, *value)
        return self

    def where_raw(self, expression: str, bindings: Optional[Sequence[Any]] = None) -> 'UpdateChain':
        self._builder.where_raw(expression, bindings)
        return self

    def compile(self) -> tuple[str, list[Any]]:
        return self._builder.compile_update(self._data)

    def execute(self) -> int:
        """Run the UPDATE and return the number of affected rows"""
        return self._builder.update(self._data)


class Database:
    """Class-level API for configuring servers, running queries and transactions"""

    @staticmethod
    def configure(server: str, config: Mapping[str, Any]) -> None:
        """Register a server profile at runtime

        Raises:
            DuplicateServerConfiguration: If the server is already registered
        """
        if not register_server(server, dict(config)):
            raise DuplicateServerConfiguration(server)
        logger.debug("Registered server '%s'", server)

    @staticmethod
    def server(server: str, context: Optional[ConnectionContext] = None) -> ServerChain:
        return ServerChain(server, context)

    @staticmethod
    def table(
        table: str,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> QueryBuilder:
        """Start a query builder for a table"""
        return QueryBuilder(server, context).table(table)

    @staticmethod
    def query(
        sql: str,
        params: Optional[Sequence[Any]] = None,
        return_type: QueryReturnType = QueryReturnType.ALL,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> Any:
        """Execute raw SQL with positional parameters

        Args:
            sql: SQL with ``?`` placeholders
            params: Values for the placeholders
            return_type: ALL (list of rows), FIRST (row or None), COUNT
                (affected rows) or DATAFRAME (pandas DataFrame)
            server: Server to run on when no context is given
            context: Explicit connection context
        """
        with executor_for(server, context) as executor:
            result = executor.run(sql, params)
            if return_type is QueryReturnType.FIRST:
                return result.fetch_one()
            if return_type is QueryReturnType.COUNT:
                return result.rowcount
            if return_type is QueryReturnType.DATAFRAME:
                return result.to_df()
            return result.fetch_all()

    @staticmethod
    def create(table: str, data: Mapping[str, Any], server: str = DEFAULT_SERVER) -> Optional[int]:
        """Insert a row and return its id when the driver reports one"""
        return QueryBuilder(server).table(table).create(data)

    @staticmethod
    def replace(table: str, data: Mapping[str, Any], server: str = DEFAULT_SERVER) -> Optional[int]:
        """Insert or replace a row using REPLACE INTO"""
        return QueryBuilder(server).table(table).replace(data)

    @staticmethod
    def update(table: str, data: Mapping[str, Any], server: str = DEFAULT_SERVER) -> UpdateChain:
        return UpdateChain(table, data, server)

    @staticmethod
    def delete(
        table: str,
        conditions: Mapping[str, Union[Any, tuple[str, Any]]],
        server: str = DEFAULT_SERVER,
    ) -> int:
        """Delete rows matching all conditions

        Each condition is ``column: value`` or ``column: (operator, value)``.
        """
        builder = QueryBuilder(server).table(table)
        for column, value in conditions.items():
            if isinstance(value, tuple):
                operator, val = value
                builder.where(column, operator, val)
            else:
                builder.where(column, value)
        return builder.delete()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @staticmethod
    def begin_transaction(
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> ConnectionContext:
        """Open a transaction on a server

        Statements run through builders for the same server use the
        transaction's connection until ``commit`` or ``rollback``.
        An open transaction already held on the server by another context
        is rolled back and its context closed.

        Returns:
            The context holding the transaction
        """
        created = context is None
        if context is None:
            context = ConnectionContext(server=server)

        try:
            Executor(context).run("BEGIN")
        except Exception:
            if created:
                context.close()
            raise

        previous = registry.open(server, context)
        if previous is not None and previous is not context:
            logger.warning("Transaction already open on server '%s'; rolling it back", server)
            try:
                Executor(previous).run("ROLLBACK")
            finally:
                previous.close()
        logger.info("Began transaction on server '%s'", server)
        return context

    @staticmethod
    def commit(server: str = DEFAULT_SERVER) -> None:
        """Commit the open transaction on a server"""
        context = registry.get(server)
        if context is None:
            logger.warning("No open transaction to commit on server '%s'", server)
            return

        Executor(context).run("COMMIT")
        registry.pop(server)
        context.close()
        logger.info("Committed transaction on server '%s'", server)

    @staticmethod
    def rollback(server: str = DEFAULT_SERVER) -> None:
        """Roll back the open transaction on a server"""
        context = registry.pop(server)
        if context is None:
            logger.warning("No open transaction to roll back on server '%s'", server)
            return

        try:
            Executor(context).run("ROLLBACK")
        finally:
            context.close()
        logger.info("Rolled back transaction on server '%s'", server)

    @staticmethod
    def transaction(
        callback: Callable[[], T],
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> T:
        """Run ``callback`` inside a transaction

        Commits when the callback returns. If it raises (or the commit
        fails) the transaction is rolled back and ``TransactionFailure`` is
        raised from the original exception.

        Returns:
            Whatever the callback returns
        """
        Database.begin_transaction(server, context)
        try:
            result = callback()
            Database.commit(server)
            return result
        except Exception as e:
            logger.warning("Transaction on server '%s' failed: %s", server, e)
            try:
                Database.rollback(server)
            except Exception:
                logger.exception("Rollback on server '%s' failed", server)
            raise TransactionFailure(server, str(e)) from e
