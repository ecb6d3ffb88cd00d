"""Unit tests for ConnectionContext class."""

import sqlite3

import pytest
from unittest.mock import Mock, patch

from sqlfluent.context import ConnectionContext


class TestConnectionContextInitialization:
    """Tests for ConnectionContext initialization."""

    def test_init_with_server(self):
        """Test initialization with a server name."""
        ctx = ConnectionContext(server="master")

        assert ctx.server == "master"
        assert ctx._connection is None
        assert ctx._cursor is None
        assert ctx.owns_connection is True

    def test_init_with_connection(self):
        """Test initialization with an existing connection."""
        mock_conn = Mock()
        ctx = ConnectionContext(connection=mock_conn)

        assert ctx.server is None
        assert ctx._connection is mock_conn
        assert ctx.owns_connection is False

    def test_init_with_overrides(self):
        """Test that runtime overrides are kept for connection creation."""
        ctx = ConnectionContext(server="master", warehouse="COMPUTE_WH", role="ANALYST")

        assert ctx._overrides == {"warehouse": "COMPUTE_WH", "role": "ANALYST"}

    def test_init_requires_server_or_connection(self):
        """Test that initialization fails without server or connection."""
        with pytest.raises(ValueError, match="requires either 'server' or 'connection'"):
            ConnectionContext()

    def test_init_rejects_both(self):
        """Test that server and connection are mutually exclusive."""
        with pytest.raises(ValueError, match="not both"):
            ConnectionContext(server="master", connection=Mock())


class TestConnectionContextLazyLoading:
    """Tests for lazy connection and cursor creation."""

    @patch('sqlfluent.connection.SnowflakeConnector')
    def test_connection_created_on_first_access(self, mock_connector_cls):
        """Test that the connector is only built when the connection is needed."""
        mock_conn, mock_cur = Mock(), Mock()
        mock_connector_cls.return_value.connect.return_value = (mock_conn, mock_cur)

        ctx = ConnectionContext(server="master", warehouse="WH")
        mock_connector_cls.assert_not_called()

        assert ctx.connection is mock_conn
        assert ctx.cursor is mock_cur
        mock_connector_cls.assert_called_once_with(server="master", warehouse="WH")

    def test_cursor_created_from_connection(self):
        """Test that a wrapped connection gets a cursor on demand, once."""
        mock_conn = Mock()
        ctx = ConnectionContext(connection=mock_conn)

        first = ctx.cursor
        second = ctx.cursor

        assert first is second
        mock_conn.cursor.assert_called_once()

    def test_existing_cursor_reused(self):
        """Test that a supplied cursor is used as is."""
        mock_conn, mock_cur = Mock(), Mock()
        ctx = ConnectionContext(connection=mock_conn, cursor=mock_cur)

        assert ctx.cursor is mock_cur
        mock_conn.cursor.assert_not_called()

    def test_sqlite_connection(self):
        """Test wrapping a real DB-API connection."""
        conn = sqlite3.connect(":memory:")
        try:
            ctx = ConnectionContext(connection=conn)
            ctx.cursor.execute("SELECT ? + ?", [1, 2])

            assert ctx.cursor.fetchone() == (3,)
        finally:
            conn.close()


class TestConnectionContextLifecycle:
    """Tests for close and context manager behavior."""

    @patch('sqlfluent.connection.SnowflakeConnector')
    def test_close_owned_connection(self, mock_connector_cls):
        """Test that an owned connector is closed and state reset."""
        mock_connector_cls.return_value.connect.return_value = (Mock(), Mock())

        ctx = ConnectionContext(server="master")
        _ = ctx.connection
        ctx.close()

        mock_connector_cls.return_value.close.assert_called_once()
        assert ctx._connection is None
        assert ctx._cursor is None

    def test_close_does_not_touch_wrapped_connection(self):
        """Test that a caller's connection is left open."""
        mock_conn = Mock()
        ctx = ConnectionContext(connection=mock_conn)
        _ = ctx.cursor
        ctx.close()

        mock_conn.close.assert_not_called()
        assert ctx.connection is mock_conn

    @patch('sqlfluent.connection.SnowflakeConnector')
    def test_context_manager(self, mock_connector_cls):
        """Test with-block usage closes an owned connection."""
        mock_connector_cls.return_value.connect.return_value = (Mock(), Mock())

        with ConnectionContext(server="master") as ctx:
            _ = ctx.cursor

        mock_connector_cls.return_value.close.assert_called_once()

    def test_repr(self):
        """Test string representation."""
        assert repr(ConnectionContext(server="master")) == "ConnectionContext(server='master')"
        assert repr(ConnectionContext(connection=Mock())) == "ConnectionContext(connection=<active>)"
