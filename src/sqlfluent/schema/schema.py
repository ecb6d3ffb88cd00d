"""Schema facade: build and run DDL through the Database layer"""

from typing import Any, Callable, Optional

from sqlfluent.context import ConnectionContext
from sqlfluent.database import DEFAULT_SERVER, Database, QueryReturnType
from sqlfluent.utils.identifiers import quote_identifier, quote_string

from .blueprint import TableBlueprint

BlueprintCallback = Callable[[TableBlueprint], Any]


class Schema:
    """Create, alter, inspect and drop tables

    The generated DDL is MySQL dialect. Pass a ``context`` wrapping a
    MySQL-compatible connection to run it somewhere other than a
    configured server.

    Example:
        >>> Schema.create("users", lambda t: t.id().string("name", 100).timestamps())
        >>> Schema.table("users", lambda t: t.string("email", 150).after("name"))
    """

    @staticmethod
    def _run(sql: str, server: str, context: Optional[ConnectionContext] = None) -> int:
        return Database.query(sql, return_type=QueryReturnType.COUNT, server=server, context=context)

    @staticmethod
    def _build(
        table: str,
        callback: BlueprintCallback,
        mode: str,
        server: str,
        context: Optional[ConnectionContext],
    ) -> Optional[int]:
        blueprint = TableBlueprint(table)
        callback(blueprint)

        sql = blueprint.to_sql(mode)
        if not sql:
            return None
        return Schema._run(sql, server, context)

    @staticmethod
    def create(
        table: str,
        callback: BlueprintCallback,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> Optional[int]:
        """Run CREATE TABLE IF NOT EXISTS for the blueprint the callback fills

        Returns None without executing when the blueprint is empty.
        """
        return Schema._build(table, callback, "create", server, context)

    @staticmethod
    def table(
        table: str,
        callback: BlueprintCallback,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> Optional[int]:
        """Run ALTER TABLE ... ADD for every definition the callback adds"""
        return Schema._build(table, callback, "alter", server, context)

    @staticmethod
    def rename_table(
        source: str,
        target: str,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> int:
        return Schema._run(
            f"ALTER TABLE {quote_identifier(source)} RENAME TO {quote_identifier(target)}", server, context
        )

    @staticmethod
    def drop(table: str, server: str = DEFAULT_SERVER, context: Optional[ConnectionContext] = None) -> int:
        return Schema._run(f"DROP TABLE {quote_identifier(table)}", server, context)

    @staticmethod
    def drop_if_exists(
        table: str, server: str = DEFAULT_SERVER, context: Optional[ConnectionContext] = None
    ) -> int:
        return Schema._run(f"DROP TABLE IF EXISTS {quote_identifier(table)}", server, context)

    @staticmethod
    def drop_column(
        table: str,
        column: str,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> int:
        return Schema._run(
            f"ALTER TABLE {quote_identifier(table)} DROP COLUMN {quote_identifier(column)}", server, context
        )

    @staticmethod
    def rename_column(
        table: str,
        source: str,
        target: str,
        type: str,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> int:
        return Schema._run(
            f"ALTER TABLE {quote_identifier(table)} CHANGE "
            f"{quote_identifier(source)} {quote_identifier(target)} {type}",
            server,
            context,
        )

    @staticmethod
    def add_index(
        table: str,
        column: str,
        index_name: Optional[str] = None,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> int:
        index_name = index_name or f"{column}_index"
        return Schema._run(
            f"ALTER TABLE {quote_identifier(table)} ADD INDEX "
            f"{quote_identifier(index_name)} ({quote_identifier(column)})",
            server,
            context,
        )

    @staticmethod
    def drop_index(
        table: str,
        index_name: str,
        server: str = DEFAULT_SERVER,
        context: Optional[ConnectionContext] = None,
    ) -> int:
        return Schema._run(
            f"ALTER TABLE {quote_identifier(table)} DROP INDEX {quote_identifier(index_name)}", server, context
        )

    @staticmethod
    def truncate(table: str, server: str = DEFAULT_SERVER, context: Optional[ConnectionContext] = None) -> int:
        """Delete all rows, keeping the table structure"""
        return Schema._run(f"TRUNCATE TABLE {quote_identifier(table)}", server, context)

    @staticmethod
    def has_table(table: str, server: str = DEFAULT_SERVER, context: Optional[ConnectionContext] = None) -> bool:
        rows = Database.query(f"SHOW TABLES LIKE {quote_string(table)}", server=server, context=context)
        return len(rows) > 0
