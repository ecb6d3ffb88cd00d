"""A unified, simplified interface for query results"""
from typing import Any, Optional
from dataclasses import dataclass
import pandas as pd


@dataclass
class QueryResult:
    """A unified, simplified interface for DB-API cursor results"""
    _cursor: Any

    @property
    def query_id(self) -> Optional[str]:
        """Driver query ID when the driver exposes one (Snowflake sfqid)"""
        return getattr(self._cursor, "sfqid", None)

    @property
    def rowcount(self) -> int:
        """The number of rows affected or returned"""
        return self._cursor.rowcount if self._cursor.rowcount is not None else -1

    @property
    def last_insert_id(self) -> Optional[int]:
        """Row ID generated by the last INSERT, if the driver reports one"""
        return getattr(self._cursor, "lastrowid", None)

    @property
    def description(self) -> Optional[list[tuple]]:
        """A description of the result columns"""
        return self._cursor.description

    @property
    def columns(self) -> list[str]:
        """Result column names, empty for statements without a result set"""
        if not self._cursor.description:
            return []
        return [desc[0] for desc in self._cursor.description]

    def fetch_one(self) -> Optional[tuple[Any, ...]]:
        """Fetch the next row of a query result set"""
        return self._cursor.fetchone()

    def fetch_all(self) -> list[tuple[Any, ...]]:
        """Fetch all remaining rows of a query result set"""
        result = self._cursor.fetchall()
        return list(result) if result else []

    def to_df(self, lowercase_columns: bool = True) -> pd.DataFrame:
        """Fetch all results as a single DataFrame with optional column casing"""
        if hasattr(self._cursor, "fetch_pandas_all"):
            df = self._cursor.fetch_pandas_all()
        elif self._cursor.description:
            df = pd.DataFrame(self.fetch_all(), columns=self.columns)
        else:
            df = pd.DataFrame()

        if lowercase_columns and len(df.columns) > 0:
            df.columns = df.columns.str.lower()

        return df

    def __repr__(self) -> str:
        return (
            f"QueryResult(query_id={self.query_id!r}, "
            f"rowcount={self.rowcount})"
        )
