"""Unit tests for CaseExpression and JoinClause."""

from sqlfluent.query import CaseExpression, JoinClause
from sqlfluent.query.conditions import OR, ColumnCompare, Predicate


class TestCaseExpression:
    """Tests for CASE rendering."""

    def test_full_expression(self):
        """Test branches, ELSE and alias."""
        case = (CaseExpression()
                .when("status = 1", "'Active'")
                .when("status = 0", "'Inactive'")
                .else_("'Unknown'")
                .end("status_label"))

        assert case == (
            "CASE WHEN status = 1 THEN 'Active' WHEN status = 0 THEN 'Inactive' "
            "ELSE 'Unknown' END AS status_label"
        )

    def test_without_alias_or_else(self):
        """Test rendering with only WHEN branches."""
        assert CaseExpression().when("x > 0", "1").end() == "CASE WHEN x > 0 THEN 1 END"

    def test_last_else_wins(self):
        """Test that else_ replaces an earlier ELSE."""
        case = CaseExpression().when("a", "1").else_("2").else_("3")

        assert case.end() == "CASE WHEN a THEN 1 ELSE 3 END"

    def test_str(self):
        """Test that str() renders without alias."""
        assert str(CaseExpression().when("a", "b")) == "CASE WHEN a THEN b END"


class TestJoinClause:
    """Tests for JoinClause compilation."""

    def test_fixed(self):
        """Test a fixed column comparison."""
        join = JoinClause.fixed("INNER", "orders", "users.id", "=", "orders.user_id")

        assert not join.is_nested
        assert join.compile() == ("INNER JOIN orders ON users.id = orders.user_id", [])

    def test_nested_strips_where_keyword(self):
        """Test that a callback-built ON clause drops the WHERE keyword."""
        join = JoinClause.nested(
            "LEFT",
            "orders",
            (ColumnCompare("users.id = orders.user_id"), Predicate("orders.status = ?", "paid", OR)),
        )

        assert join.is_nested
        assert join.compile() == (
            "LEFT JOIN orders ON users.id = orders.user_id OR orders.status = ?",
            ["paid"],
        )

    def test_nested_keeps_inner_where_text(self):
        """Test that only the leading keyword is removed."""
        join = JoinClause.nested("INNER", "t", (ColumnCompare("t.note = 'WHERE x'"),))

        assert join.compile()[0] == "INNER JOIN t ON t.note = 'WHERE x'"

    def test_nested_without_conditions(self):
        """Test that a callback adding no conditions still yields a valid ON clause."""
        join = JoinClause.nested("LEFT", "profiles", ())

        assert join.compile() == ("LEFT JOIN profiles ON 1 = 1", [])
