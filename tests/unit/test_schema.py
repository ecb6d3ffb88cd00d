"""Unit tests for the Schema facade."""

from unittest.mock import patch

import pytest

from sqlfluent.database import QueryReturnType
from sqlfluent.schema import Schema


@pytest.fixture
def mock_query():
    with patch('sqlfluent.schema.schema.Database.query', return_value=0) as mock:
        yield mock


def last_sql(mock_query) -> str:
    return mock_query.call_args.args[0]


class TestSchema:
    """Tests for Schema operations."""

    def test_create(self, mock_query):
        """Test that create runs the compiled CREATE TABLE."""
        Schema.create("users", lambda t: t.id().string("name", 100))

        mock_query.assert_called_once_with(
            "CREATE TABLE IF NOT EXISTS `users` "
            "(`id` INT UNSIGNED AUTO_INCREMENT PRIMARY KEY, `name` VARCHAR(100) NULL);",
            return_type=QueryReturnType.COUNT,
            server="master",
            context=None,
        )

    def test_create_empty_runs_nothing(self, mock_query):
        """Test that an empty blueprint is not executed."""
        assert Schema.create("users", lambda t: None) is None
        mock_query.assert_not_called()

    def test_table_alters(self, mock_query):
        """Test that table() runs ALTER TABLE ... ADD on the given server."""
        Schema.table("users", lambda t: t.string("email", 150).after("name"), server="replica")

        assert last_sql(mock_query) == "ALTER TABLE `users` ADD `email` VARCHAR(150) NULL AFTER `name`;"
        assert mock_query.call_args.kwargs["server"] == "replica"

    @pytest.mark.parametrize("call", [
        lambda ctx: Schema.create("a", lambda t: t.id(), context=ctx),
        lambda ctx: Schema.drop_column("a", "c", context=ctx),
        lambda ctx: Schema.drop_index("a", "by_c", context=ctx),
        lambda ctx: Schema.has_table("a", context=ctx),
    ])
    def test_context_forwarded(self, mock_query, mock_ctx, call):
        """Test that an explicit connection context reaches Database.query."""
        mock_query.return_value = []
        call(mock_ctx)

        assert mock_query.call_args.kwargs["context"] is mock_ctx

    @pytest.mark.parametrize("call,expected", [
        (lambda: Schema.rename_table("a", "b"), "ALTER TABLE `a` RENAME TO `b`"),
        (lambda: Schema.drop("a"), "DROP TABLE `a`"),
        (lambda: Schema.drop_if_exists("a"), "DROP TABLE IF EXISTS `a`"),
        (lambda: Schema.drop_column("a", "c"), "ALTER TABLE `a` DROP COLUMN `c`"),
        (lambda: Schema.rename_column("a", "c", "d", "VARCHAR(50)"), "ALTER TABLE `a` CHANGE `c` `d` VARCHAR(50)"),
        (lambda: Schema.add_index("a", "c"), "ALTER TABLE `a` ADD INDEX `c_index` (`c`)"),
        (lambda: Schema.add_index("a", "c", "by_c"), "ALTER TABLE `a` ADD INDEX `by_c` (`c`)"),
        (lambda: Schema.drop_index("a", "by_c"), "ALTER TABLE `a` DROP INDEX `by_c`"),
        (lambda: Schema.truncate("a"), "TRUNCATE TABLE `a`"),
    ])
    def test_statements(self, mock_query, call, expected):
        """Test the SQL run by each table operation."""
        call()

        assert last_sql(mock_query) == expected

    def test_identifiers_escaped(self, mock_query):
        """Test that backticks in names are doubled."""
        Schema.drop("we`ird")

        assert last_sql(mock_query) == "DROP TABLE `we``ird`"

    def test_has_table(self, mock_query):
        """Test has_table against the SHOW TABLES result."""
        mock_query.return_value = [("users",)]
        assert Schema.has_table("users") is True
        assert last_sql(mock_query) == "SHOW TABLES LIKE 'users'"

        mock_query.return_value = []
        assert Schema.has_table("missing") is False
