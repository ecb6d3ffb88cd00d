"""Primitive operations wrapping direct DB-API cursor calls"""

from sqlfluent.primitives.result import QueryResult
from sqlfluent.primitives.execute import Executor, execute_sql, query

__all__ = [
    "QueryResult",
    "Executor",
    "execute_sql",
    "query",
]
