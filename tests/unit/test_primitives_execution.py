"""Unit tests for Executor and the execution helpers."""

from unittest.mock import patch

import pandas as pd
import pytest

from sqlfluent.primitives import Executor, QueryResult, execute_sql, query


class TestExecutor:
    """Tests for Executor."""

    def test_run_without_bindings(self, mock_ctx):
        """Test that SQL without bindings is executed alone."""
        result = Executor(mock_ctx).run("SELECT 1")

        mock_ctx.cursor.execute.assert_called_once_with("SELECT 1")
        assert isinstance(result, QueryResult)

    def test_run_with_bindings(self, mock_ctx):
        """Test that bindings are passed positionally as a list."""
        Executor(mock_ctx).run("SELECT * FROM users WHERE id = ? AND active = ?", (5, True))

        mock_ctx.cursor.execute.assert_called_once_with(
            "SELECT * FROM users WHERE id = ? AND active = ?", [5, True]
        )

    def test_run_with_empty_bindings(self, mock_ctx):
        """Test that an empty binding list is still passed through."""
        Executor(mock_ctx).run("SELECT * FROM users", [])

        mock_ctx.cursor.execute.assert_called_once_with("SELECT * FROM users", [])

    def test_driver_errors_propagate(self, mock_ctx):
        """Test that cursor errors are not swallowed."""
        mock_ctx.cursor.execute.side_effect = RuntimeError("syntax error")

        with pytest.raises(RuntimeError, match="syntax error"):
            Executor(mock_ctx).run("SELEC 1")

    def test_run_many(self, mock_ctx):
        """Test batch execution."""
        Executor(mock_ctx).run_many("INSERT INTO t (a) VALUES (?)", [(1,), (2,)])

        mock_ctx.cursor.executemany.assert_called_once_with("INSERT INTO t (a) VALUES (?)", [[1], [2]])

    def test_server_name_builds_context(self):
        """Test that a server name creates a ConnectionContext with overrides."""
        with patch('sqlfluent.primitives.execute.ConnectionContext') as mock_ctx_cls:
            executor = Executor("master", warehouse="WH")

        mock_ctx_cls.assert_called_once_with(server="master", warehouse="WH")
        assert executor.context is mock_ctx_cls.return_value

    def test_close(self, mock_ctx):
        """Test that close delegates to the context."""
        Executor(mock_ctx).close()

        mock_ctx.close.assert_called_once()


class TestHelpers:
    """Tests for execute_sql and query."""

    def test_execute_sql(self, mock_ctx):
        """Test the one-shot helper."""
        mock_ctx.cursor.rowcount = 3

        result = execute_sql("DELETE FROM sessions WHERE expired = ?", mock_ctx, [True])

        mock_ctx.cursor.execute.assert_called_once_with("DELETE FROM sessions WHERE expired = ?", [True])
        assert result.rowcount == 3

    def test_query_returns_dataframe(self, mock_ctx):
        """Test that query() returns a DataFrame."""
        mock_ctx.cursor.fetch_pandas_all.return_value = pd.DataFrame({"N": [1]})

        df = query("SELECT 1 AS n", mock_ctx)

        assert list(df.columns) == ["n"]
