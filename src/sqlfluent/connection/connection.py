"""Database connection management with server profile support."""

import logging
from typing import Optional, Tuple, Any, Literal

from snowflake.connector import SnowflakeConnection
from snowflake.connector.cursor import SnowflakeCursor
import snowflake.connector

from .base import BaseConnector

logger = logging.getLogger(__name__)


class SnowflakeConnector(BaseConnector):
    """
    Connection manager for a configured server with context manager protocol.

    Loads connection parameters for a server profile and manages the
    connection lifecycle. Connections are opened with ``paramstyle="qmark"``
    so the ``?`` placeholders emitted by the query builder bind positionally.

    Args:
        server: Name of the server profile to load
        **kwargs: Additional connection parameters to override profile settings

    Example:
        >>> with SnowflakeConnector(server="master") as (conn, cur):
        ...     cur.execute("SELECT * FROM users WHERE id = ?", [1])
        ...     print(cur.fetchone())
    """

    def __init__(self, server: str, **kwargs: Any) -> None:
        super().__init__(server, **kwargs)

        self._connection: Optional[SnowflakeConnection] = None
        self._cursor: Optional[SnowflakeCursor] = None

    def connect(self) -> Tuple[SnowflakeConnection, SnowflakeCursor]:
        """
        Establish the connection if not already connected.

        Returns:
            Tuple of (connection, cursor) objects
        """
        if self._connection is None:
            params = self.connect_params()
            params.setdefault("paramstyle", "qmark")
            logger.debug("Connecting to server '%s'", self._server)
            self._connection = snowflake.connector.connect(**params)  # type: ignore[misc]
            self._cursor = self._connection.cursor()

        assert self._connection is not None
        assert self._cursor is not None
        return self._connection, self._cursor

    def close(self) -> None:
        """Close the cursor and connection, releasing resources."""
        if self._cursor:
            self._cursor.close()
            self._cursor = None
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("Closed connection to server '%s'", self._server)

    def __enter__(self) -> Tuple[SnowflakeConnection, SnowflakeCursor]:
        return self.connect()

    def __exit__(
        self,
        exc_type: Any,
        exc_val: Any,
        exc_tb: Any
    ) -> Literal[False]:
        """Close the connection, always propagating exceptions."""
        self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._connection else "not connected"
        return f"SnowflakeConnector(server='{self._server}', {status})"
