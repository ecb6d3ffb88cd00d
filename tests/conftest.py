"""Pytest configuration and shared fixtures."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from sqlfluent.config import config as server_config
from sqlfluent.context import ConnectionContext
from sqlfluent.transactions import registry


@pytest.fixture(autouse=True)
def isolated_registries():
    """Keep runtime servers and open transactions from leaking between tests."""
    saved_servers = dict(server_config._registry)
    yield
    server_config._registry.clear()
    server_config._registry.update(saved_servers)
    for server in registry.servers():
        registry.pop(server)


@pytest.fixture
def mock_ctx():
    """ConnectionContext stand-in whose cursor records executed SQL."""
    ctx = MagicMock(spec=ConnectionContext)
    ctx.cursor = MagicMock()
    ctx.cursor.fetchall.return_value = []
    ctx.cursor.fetchone.return_value = None
    ctx.cursor.rowcount = 0
    return ctx


@pytest.fixture
def sqlite_ctx():
    """In-memory sqlite database with users and orders tables.

    sqlite3 uses the qmark paramstyle, so compiled builder output runs on it
    unchanged. Autocommit mode lets BEGIN/COMMIT/ROLLBACK pass straight through.
    """
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.execute(
        "CREATE TABLE users ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, age INTEGER, status TEXT)"
    )
    conn.execute(
        "CREATE TABLE orders ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, user_id INTEGER, total REAL, status TEXT)"
    )
    ctx = ConnectionContext(connection=conn)
    yield ctx
    conn.close()
