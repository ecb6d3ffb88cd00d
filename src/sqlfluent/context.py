"""Database connection context.

Provides a clean abstraction for managing connection lifecycle for the
executor and the facades built on top of it.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from sqlfluent.connection import SnowflakeConnector


class ConnectionContext:
    """Manages connection and cursor lifecycle with lazy initialization.

    You can:
    - Pass a server name (creates connection on demand)
    - Pass an existing DB-API connection (creates cursor on demand)
    - Pass both connection and cursor (reuses both)

    Any connection using the qmark paramstyle works, which makes an
    in-memory ``sqlite3`` connection a convenient local backend.

    Example:
        >>> ctx = ConnectionContext(server="master")
        >>> Executor(ctx).run("SELECT * FROM users WHERE id = ?", [1])

        >>> import sqlite3
        >>> ctx = ConnectionContext(connection=sqlite3.connect(":memory:"))

    Note:
        When using server-based initialization, the context manages its own
        connector lifecycle. When using an explicit connection/cursor, the
        caller is responsible for closing them.
    """

    def __init__(
        self,
        server: Optional[str] = None,
        connection: Optional[Any] = None,
        cursor: Optional[Any] = None,
        **overrides: Any,
    ):
        """Initialize context with a server name or a connection

        Args:
            server: Server name for lazy connection creation
            connection: Existing DB-API connection object
            cursor: Existing cursor object
            **overrides: Runtime overrides for connection creation
        """
        if server is None and connection is None:
            raise ValueError(
                "ConnectionContext requires either 'server' or 'connection'"
            )
        if server is not None and connection is not None:
            raise ValueError(
                "ConnectionContext: provide either 'server' or 'connection', not both"
            )

        self._server = server
        self._connection = connection
        self._cursor = cursor
        self._overrides = overrides
        self._connector: Optional["SnowflakeConnector"] = None
        self._owns_connector = False

    @property
    def server(self) -> Optional[str]:
        """Server name this context connects to, None for wrapped connections"""
        return self._server

    @property
    def owns_connection(self) -> bool:
        """True when the context created its connection and must close it"""
        return self._server is not None

    @property
    def connection(self) -> Any:
        """Get connection, creating if needed"""
        if self._connection is None:
            from sqlfluent.connection import SnowflakeConnector

            assert self._server is not None
            self._connector = SnowflakeConnector(
                server=self._server, **self._overrides
            )
            conn, cur = self._connector.connect()
            self._connection = conn
            self._cursor = cur
            self._owns_connector = True

        return self._connection

    @property
    def cursor(self) -> Any:
        """Get cursor, creating if needed"""
        if self._cursor is None:
            self._cursor = self.connection.cursor()

        return self._cursor

    def close(self) -> None:
        """Close connection if owned by this context"""
        if self._owns_connector and self._connector is not None:
            self._connector.close()
            self._connector = None
            self._connection = None
            self._cursor = None

    def __enter__(self) -> "ConnectionContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._connection is not None:
            return "ConnectionContext(connection=<active>)"
        else:
            return f"ConnectionContext(server='{self._server}')"
