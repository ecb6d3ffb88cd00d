"""Fluent query builder.

Every fluent method mutates the builder in place and returns it, so calls
chain. Nothing touches a connection until a terminal method (``get``,
``first``, ``count``, ``insert``, ``update``, ``delete``, ...) runs; the
``compile*`` methods are pure and may be called any number of times.

Each clause keeps its own bindings. They are concatenated only at compile
time, in the order their placeholders appear in the SQL text, so calling
``having()`` before ``where()`` (or ``select_raw()`` last) never shifts a
value onto the wrong ``?``.
"""

from typing import Any, Callable, ContextManager, Mapping, Optional, Sequence, Union

import pandas as pd

from sqlfluent.context import ConnectionContext
from sqlfluent.primitives import Executor
from sqlfluent.transactions import executor_for
from sqlfluent.utils.query import SafeQuery

from .case import CaseExpression
from .conditions import (
    AND,
    OR,
    EMPTY,
    ColumnCompare,
    ConditionEntry,
    Nested,
    Predicate,
    Raw,
    Subquery,
    compile_conditions,
    split_operator,
)
from .join import INNER, LEFT, RIGHT, JoinClause

Callback = Callable[['QueryBuilder'], Any]
Row = Mapping[str, Any]


class QueryBuilder:
    """Build SELECT, UPDATE, DELETE and INSERT statements with a fluent API

    Args:
        server: Server name used when the builder executes and no context
            was given and no transaction is open for that server
        context: Explicit connection context to execute against

    Example:
        >>> q = (QueryBuilder()
        ...      .table("users")
        ...      .where("age", ">", 18)
        ...      .or_where("status", "active"))
        >>> q.compile()
        ('SELECT * FROM users WHERE age > ? OR status = ?', [18, 'active'])
    """

    def __init__(
        self,
        server: str = "master",
        context: Optional[ConnectionContext] = None,
    ):
        self._server = server
        self._context = context

        self._table: str = ""
        self._distinct = False
        self._columns: list[str] = []
        self._select_bindings: list[Any] = []
        self._sets: dict[str, Any] = {}
        self._wheres: list[ConditionEntry] = []
        self._joins: list[JoinClause] = []
        self._groups: list[str] = []
        self._havings: list[ConditionEntry] = []
        self._orders: list[str] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    @property
    def server(self) -> str:
        return self._server

    def _scratch(self) -> 'QueryBuilder':
        """Fresh builder for callbacks, bound to the same server"""
        return QueryBuilder(self._server, self._context)

    def _build_sub(self, callback: Callback) -> tuple[str, list[Any]]:
        sub = self._scratch()
        callback(sub)
        return sub.compile()

    # ------------------------------------------------------------------
    # SELECT / SET
    # ------------------------------------------------------------------

    def table(self, table: str) -> 'QueryBuilder':
        """Set the table to query"""
        self._table = table
        return self

    def select(self, *columns: Union[str, Callback]) -> 'QueryBuilder':
        """Replace the selected columns

        Strings are used verbatim. A callable receives a scratch builder
        and its compiled SELECT is embedded in parentheses. Calling with
        no columns resets the selection to ``*``.
        """
        self._columns = []
        self._select_bindings = []
        for column in columns:
            if callable(column):
                sql, bindings = self._build_sub(column)
                self._columns.append(f"({sql})")
                self._select_bindings.extend(bindings)
            else:
                self._columns.append(column)
        return self

    def select_raw(self, expression: str, bindings: Optional[Sequence[Any]] = None) -> 'QueryBuilder':
        """Append a raw SELECT expression such as ``COUNT(*) AS total``"""
        self._columns.append(expression)
        if bindings:
            self._select_bindings.extend(bindings)
        return self

    def select_sub(self, callback: Callback, alias: str) -> 'QueryBuilder':
        """Append an aliased sub-select column"""
        sql, bindings = self._build_sub(callback)
        self._columns.append(f"({sql}) AS {alias}")
        self._select_bindings.extend(bindings)
        return self

    def distinct(self) -> 'QueryBuilder':
        """Emit SELECT DISTINCT"""
        self._distinct = True
        return self

    def set(self, column: str, value: Any) -> 'QueryBuilder':
        """Add a column/value assignment for UPDATE

        Setting the same column again replaces its value in place.
        """
        self._sets[column] = value
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def _add_where(self, column: Union[str, Callback], operator: Any, value: Any, boolean: str) -> 'QueryBuilder':
        if callable(column):
            nested = self._scratch()
            column(nested)
            self._wheres.append(Nested(tuple(nested._wheres), boolean))
            return self

        operator, value = split_operator(operator, value)
        self._wheres.append(Predicate(f"{column} {operator} ?", value, boolean))
        return self

    def where(self, column: Union[str, Callback], operator: Any = None, value: Any = EMPTY) -> 'QueryBuilder':
        """Add an AND condition

        ``where("status", "active")`` is shorthand for
        ``where("status", "=", "active")``. Passing a callable opens a
        parenthesized group built on a scratch builder::

            q.where(lambda g: g.where("a", 1).or_where("b", 2))
        """
        return self._add_where(column, operator, value, AND)

    def or_where(self, column: Union[str, Callback], operator: Any = None, value: Any = EMPTY) -> 'QueryBuilder':
        """Add an OR condition, same forms as ``where``"""
        return self._add_where(column, operator, value, OR)

    def where_raw(self, expression: str, bindings: Optional[Sequence[Any]] = None, boolean: str = AND) -> 'QueryBuilder':
        """Add a raw condition, e.g. ``where_raw("created_at BETWEEN ? AND ?", [start, end])``"""
        self._wheres.append(Raw(expression, tuple(bindings or ()), boolean))
        return self

    def or_where_raw(self, expression: str, bindings: Optional[Sequence[Any]] = None) -> 'QueryBuilder':
        return self.where_raw(expression, bindings, OR)

    def where_column(self, first: str, operator: str, second: str, boolean: str = AND) -> 'QueryBuilder':
        """Compare two columns"""
        self._wheres.append(ColumnCompare(f"{first} {operator} {second}", boolean))
        return self

    def or_where_column(self, first: str, operator: str, second: str) -> 'QueryBuilder':
        return self.where_column(first, operator, second, OR)

    def where_sub(self, column: str, operator: str, callback: Callback, boolean: str = AND) -> 'QueryBuilder':
        """Compare a column against a subquery

        Example:
            >>> q.where_sub("id", "IN", lambda s: s.table("orders").select("user_id"))
        """
        sql, bindings = self._build_sub(callback)
        self._wheres.append(Subquery(column, operator, sql, tuple(bindings), boolean))
        return self

    def or_where_sub(self, column: str, operator: str, callback: Callback) -> 'QueryBuilder':
        return self.where_sub(column, operator, callback, OR)

    def where_in(
        self,
        column: str,
        values: Union[Sequence[Any], Callback],
        boolean: str = AND,
        negate: bool = False,
    ) -> 'QueryBuilder':
        """Add ``column IN (?, ...)``; a callable builds the list as a subquery"""
        operator = "NOT IN" if negate else "IN"
        if callable(values):
            return self.where_sub(column, operator, values, boolean)

        values = list(values)
        if not values:
            # IN () is not valid SQL; keep the intended truth value instead
            return self.where_raw("1 = 1" if negate else "0 = 1", None, boolean)

        placeholders = ", ".join("?" for _ in values)
        self._wheres.append(Raw(f"{column} {operator} ({placeholders})", tuple(values), boolean))
        return self

    def or_where_in(self, column: str, values: Union[Sequence[Any], Callback]) -> 'QueryBuilder':
        return self.where_in(column, values, OR)

    def where_not_in(self, column: str, values: Union[Sequence[Any], Callback], boolean: str = AND) -> 'QueryBuilder':
        return self.where_in(column, values, boolean, negate=True)

    def where_null(self, column: str, boolean: str = AND, negate: bool = False) -> 'QueryBuilder':
        """Add ``column IS NULL`` (or ``IS NOT NULL`` when negated)"""
        suffix = "IS NOT NULL" if negate else "IS NULL"
        self._wheres.append(Raw(f"{column} {suffix}", (), boolean))
        return self

    def or_where_null(self, column: str) -> 'QueryBuilder':
        return self.where_null(column, OR)

    def where_not_null(self, column: str, boolean: str = AND) -> 'QueryBuilder':
        return self.where_null(column, boolean, negate=True)

    def where_between(self, column: str, low: Any, high: Any, boolean: str = AND) -> 'QueryBuilder':
        self._wheres.append(Raw(f"{column} BETWEEN ? AND ?", (low, high), boolean))
        return self

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def _add_join(
        self,
        type: str,
        table: str,
        first: Union[str, Callback],
        operator: Optional[str],
        second: Optional[str],
    ) -> 'QueryBuilder':
        if callable(first):
            scratch = self._scratch()
            first(scratch)
            self._joins.append(JoinClause.nested(type, table, tuple(scratch._wheres)))
            return self

        if second is None:
            operator, second = "=", operator
        self._joins.append(JoinClause.fixed(type, table, first, operator or "=", second or ""))
        return self

    def join(
        self,
        table: str,
        first: Union[str, Callback],
        operator: Optional[str] = None,
        second: Optional[str] = None,
    ) -> 'QueryBuilder':
        """Add an INNER JOIN

        Either a fixed comparison, ``join("profiles", "users.id", "=",
        "profiles.user_id")``, or a callable that builds the ON clause with
        ``on``/``where`` on a scratch builder::

            q.left_join("profiles", lambda j: j.on("users.id", "profiles.user_id")
                                               .where("profiles.active", 1))
        """
        return self._add_join(INNER, table, first, operator, second)

    def left_join(
        self,
        table: str,
        first: Union[str, Callback],
        operator: Optional[str] = None,
        second: Optional[str] = None,
    ) -> 'QueryBuilder':
        return self._add_join(LEFT, table, first, operator, second)

    def right_join(
        self,
        table: str,
        first: Union[str, Callback],
        operator: Optional[str] = None,
        second: Optional[str] = None,
    ) -> 'QueryBuilder':
        return self._add_join(RIGHT, table, first, operator, second)

    def on(self, first: str, operator: str = "=", second: Optional[str] = None, boolean: str = AND) -> 'QueryBuilder':
        """Add a column comparison for use inside a join callback

        ``on("a", "b")`` is shorthand for ``on("a", "=", "b")``. Entries go
        into the same sequence as ``where`` and chain the same way.
        """
        if second is None:
            operator, second = "=", operator
        self._wheres.append(ColumnCompare(f"{first} {operator} {second}", boolean))
        return self

    def or_on(self, first: str, operator: str = "=", second: Optional[str] = None) -> 'QueryBuilder':
        return self.on(first, operator, second, OR)

    # ------------------------------------------------------------------
    # GROUP / HAVING / ORDER / LIMIT
    # ------------------------------------------------------------------

    def group_by(self, *columns: str) -> 'QueryBuilder':
        self._groups.extend(columns)
        return self

    def _add_having(self, column: Union[str, Callback], operator: Any, value: Any, boolean: str) -> 'QueryBuilder':
        if callable(column):
            nested = self._scratch()
            column(nested)
            self._havings.append(Nested(tuple(nested._havings), boolean))
            return self

        operator, value = split_operator(operator, value)
        self._havings.append(Predicate(f"{column} {operator} ?", value, boolean))
        return self

    def having(self, column: Union[str, Callback], operator: Any = None, value: Any = EMPTY) -> 'QueryBuilder':
        """Add a HAVING condition, e.g. ``having("COUNT(id)", ">", 5)``"""
        return self._add_having(column, operator, value, AND)

    def or_having(self, column: Union[str, Callback], operator: Any = None, value: Any = EMPTY) -> 'QueryBuilder':
        return self._add_having(column, operator, value, OR)

    def having_raw(self, expression: str, bindings: Optional[Sequence[Any]] = None, boolean: str = AND) -> 'QueryBuilder':
        """Add a raw HAVING expression, e.g. ``having_raw("SUM(amount) > ?", [100])``"""
        self._havings.append(Raw(expression, tuple(bindings or ()), boolean))
        return self

    def order_by(self, column: str, direction: str = "ASC") -> 'QueryBuilder':
        self._orders.append(f"{column} {direction}")
        return self

    def order_by_desc(self, column: str) -> 'QueryBuilder':
        return self.order_by(column, "DESC")

    def limit(self, limit: int) -> 'QueryBuilder':
        self._limit = int(limit)
        return self

    def offset(self, offset: int) -> 'QueryBuilder':
        self._offset = int(offset)
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def when(
        self,
        condition: Any,
        callback: Callable[['QueryBuilder', Any], Any],
        default: Optional[Callable[['QueryBuilder', Any], Any]] = None,
    ) -> 'QueryBuilder':
        """Run ``callback(self, condition)`` unless condition is None or False

        Only ``None`` and ``False`` count as false; ``0`` and ``""`` run
        the callback. Otherwise ``default`` runs if given.
        """
        if condition is not None and condition is not False:
            callback(self, condition)
        elif default is not None:
            default(self, condition)
        return self

    def case(self) -> CaseExpression:
        """Start a CASE expression for use in ``select_raw``"""
        return CaseExpression()

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _append_joins(self, query: SafeQuery) -> None:
        for join in self._joins:
            query.append(*join.compile())

    def _append_tail(self, query: SafeQuery, limit: Optional[int]) -> None:
        query.when(self._orders, "ORDER BY " + ", ".join(self._orders))
        query.when(limit is not None, f"LIMIT {limit}")

    def _compile_select(self, limit: Optional[int]) -> tuple[str, list[Any]]:
        query = SafeQuery("SELECT DISTINCT" if self._distinct else "SELECT")
        query.append(", ".join(self._columns) if self._columns else "*", self._select_bindings)
        query.when(self._table, f"FROM {self._table}")
        self._append_joins(query)
        query.append(*compile_conditions(self._wheres, "WHERE"))
        query.when(self._groups, "GROUP BY " + ", ".join(self._groups))
        query.append(*compile_conditions(self._havings, "HAVING"))
        self._append_tail(query, limit)
        query.when(self._offset is not None, f"OFFSET {self._offset}")
        return query.as_tuple()

    def compile(self) -> tuple[str, list[Any]]:
        """Compile the SELECT statement to ``(sql, bindings)``

        Clauses are emitted in SQL order (columns, FROM, JOIN, WHERE,
        GROUP BY, HAVING, ORDER BY, LIMIT, OFFSET) and bindings follow the
        same order, independent of the order the fluent calls were made.
        """
        return self._compile_select(self._limit)

    def to_sql(self) -> str:
        """SELECT text without bindings"""
        return self.compile()[0]

    @property
    def bindings(self) -> list[Any]:
        """Bindings of the compiled SELECT"""
        return self.compile()[1]

    def compile_count(self) -> tuple[str, list[Any]]:
        """Wrap the SELECT in ``SELECT COUNT(*)``"""
        sql, bindings = self.compile()
        return f"SELECT COUNT(*) AS aggregate FROM ({sql}) AS aggregate_table", bindings

    def compile_update(self, data: Optional[Row] = None) -> tuple[str, list[Any]]:
        """Compile an UPDATE from ``set()`` calls plus optional ``data``"""
        sets = dict(self._sets)
        if data:
            sets.update(data)

        query = SafeQuery(f"UPDATE {self._table}")
        self._append_joins(query)
        if sets:
            query.append("SET " + ", ".join(f"{column} = ?" for column in sets), sets.values())
        query.append(*compile_conditions(self._wheres, "WHERE"))
        self._append_tail(query, self._limit)
        return query.as_tuple()

    def compile_delete(self) -> tuple[str, list[Any]]:
        """Compile a DELETE using the current WHERE, ORDER BY and LIMIT"""
        if self._joins:
            query = SafeQuery(f"DELETE {self._table} FROM {self._table}")
            self._append_joins(query)
        else:
            query = SafeQuery(f"DELETE FROM {self._table}")
        query.append(*compile_conditions(self._wheres, "WHERE"))
        self._append_tail(query, self._limit)
        return query.as_tuple()

    def compile_insert(self, rows: Union[Row, Sequence[Row]], verb: str = "INSERT") -> tuple[str, list[Any]]:
        """Compile a single or multi-row INSERT

        Column order comes from the first row; later rows are read in that
        order. ``verb="REPLACE"`` emits ``REPLACE INTO``.
        """
        if isinstance(rows, Mapping):
            rows = [rows]
        columns = list(rows[0].keys()) if rows else []

        placeholders = "(" + ", ".join("?" for _ in columns) + ")"
        values = ", ".join(placeholders for _ in rows) or "()"
        bindings: list[Any] = []
        for row in rows:
            bindings.extend(row.get(column) for column in columns)

        query = SafeQuery(f"{verb} INTO {self._table}")
        query.append("(" + ", ".join(columns) + ")")
        query.append(f"VALUES {values}", bindings)
        return query.as_tuple()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _executor(self) -> ContextManager[Executor]:
        """Executor for this builder's explicit, transactional or fresh context"""
        return executor_for(self._server, self._context)

    def get(self) -> list[tuple[Any, ...]]:
        """Run the SELECT and return all rows"""
        with self._executor() as executor:
            return executor.run(*self.compile()).fetch_all()

    def first(self) -> Optional[tuple[Any, ...]]:
        """Run the SELECT with ``LIMIT 1`` and return the row or None"""
        with self._executor() as executor:
            return executor.run(*self._compile_select(1)).fetch_one()

    def count(self) -> int:
        with self._executor() as executor:
            row = executor.run(*self.compile_count()).fetch_one()
        return int(row[0]) if row else 0

    def exists(self) -> bool:
        return self.count() > 0

    def to_df(self, lowercase_columns: bool = True) -> pd.DataFrame:
        """Run the SELECT and return a pandas DataFrame"""
        with self._executor() as executor:
            return executor.run(*self.compile()).to_df(lowercase_columns=lowercase_columns)

    def insert(self, data: Union[Row, Sequence[Row]]) -> Optional[int]:
        """Insert one or more rows and return the last inserted id, if reported"""
        with self._executor() as executor:
            return executor.run(*self.compile_insert(data)).last_insert_id

    def create(self, data: Row) -> Optional[int]:
        """Insert a single row and return its id"""
        return self.insert(data)

    def replace(self, data: Union[Row, Sequence[Row]]) -> Optional[int]:
        """Insert or replace rows with ``REPLACE INTO``"""
        with self._executor() as executor:
            return executor.run(*self.compile_insert(data, verb="REPLACE")).last_insert_id

    def update(self, data: Optional[Row] = None) -> int:
        """Run the UPDATE and return the number of affected rows"""
        with self._executor() as executor:
            return executor.run(*self.compile_update(data)).rowcount

    def delete(self) -> int:
        """Run the DELETE and return the number of affected rows"""
        with self._executor() as executor:
            return executor.run(*self.compile_delete()).rowcount

    def __repr__(self) -> str:
        return f"QueryBuilder(server={self._server!r}, table={self._table!r})"
