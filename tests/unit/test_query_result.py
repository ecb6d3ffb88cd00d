"""Tests for QueryResult wrapper class."""

from unittest.mock import Mock
import pandas as pd

from sqlfluent.primitives.result import QueryResult


class TestQueryResult:
    """Tests for QueryResult class."""

    def test_query_result_properties(self):
        """Test that QueryResult exposes cursor properties."""
        mock_cursor = Mock()
        mock_cursor.sfqid = "01bf9ad6-0515-eff2-0000-89c52392cd3e"
        mock_cursor.rowcount = 42
        mock_cursor.lastrowid = 7
        mock_cursor.description = [
            ("ID", "NUMBER", None, None, None, None, None),
            ("NAME", "VARCHAR", None, None, None, None, None),
        ]

        result = QueryResult(_cursor=mock_cursor)

        assert result.query_id == "01bf9ad6-0515-eff2-0000-89c52392cd3e"
        assert result.rowcount == 42
        assert result.last_insert_id == 7
        assert result.columns == ["ID", "NAME"]

    def test_optional_driver_attributes(self):
        """Test cursors without sfqid or lastrowid."""
        cursor = Mock(spec=["rowcount", "description", "fetchall", "fetchone"])
        cursor.rowcount = None
        cursor.description = None

        result = QueryResult(_cursor=cursor)

        assert result.query_id is None
        assert result.last_insert_id is None
        assert result.rowcount == -1
        assert result.columns == []

    def test_fetch(self):
        """Test fetch_one and fetch_all."""
        mock_cursor = Mock()
        mock_cursor.fetchone.return_value = (1, "A")
        mock_cursor.fetchall.return_value = [(1, "A"), (2, "B")]

        result = QueryResult(_cursor=mock_cursor)

        assert result.fetch_one() == (1, "A")
        assert result.fetch_all() == [(1, "A"), (2, "B")]

    def test_fetch_all_empty(self):
        """Test that an empty or None result set gives an empty list."""
        mock_cursor = Mock()
        mock_cursor.fetchall.return_value = None

        assert QueryResult(_cursor=mock_cursor).fetch_all() == []

    def test_query_result_to_df(self):
        """Test to_df() with fetch_pandas_all."""
        mock_cursor = Mock()
        mock_cursor.fetch_pandas_all.return_value = pd.DataFrame({"ID": [1, 2, 3], "NAME": ["A", "B", "C"]})

        df = QueryResult(_cursor=mock_cursor).to_df()

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 3
        assert list(df.columns) == ["id", "name"]

    def test_to_df_keeps_case(self):
        """Test to_df() without lowercasing."""
        mock_cursor = Mock()
        mock_cursor.fetch_pandas_all.return_value = pd.DataFrame({"ID": [1]})

        df = QueryResult(_cursor=mock_cursor).to_df(lowercase_columns=False)

        assert list(df.columns) == ["ID"]

    def test_to_df_generic_cursor(self):
        """Test to_df() built from fetchall on a plain DB-API cursor."""
        cursor = Mock(spec=["rowcount", "description", "fetchall", "fetchone"])
        cursor.description = [("ID",), ("NAME",)]
        cursor.fetchall.return_value = [(1, "A"), (2, "B")]

        df = QueryResult(_cursor=cursor).to_df()

        assert list(df.columns) == ["id", "name"]
        assert df["name"].tolist() == ["A", "B"]

    def test_to_df_without_result_set(self):
        """Test to_df() for a statement that returned no columns."""
        cursor = Mock(spec=["rowcount", "description", "fetchall", "fetchone"])
        cursor.description = None

        assert QueryResult(_cursor=cursor).to_df().empty

    def test_query_result_repr(self):
        """Test string representation."""
        mock_cursor = Mock()
        mock_cursor.sfqid = "test-query-123"
        mock_cursor.rowcount = 5

        assert repr(QueryResult(_cursor=mock_cursor)) == "QueryResult(query_id='test-query-123', rowcount=5)"
