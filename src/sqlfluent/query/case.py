"""Builder for SQL CASE expressions"""

from typing import Optional


class CaseExpression:
    """Accumulate WHEN/THEN branches into a single CASE expression

    Conditions and results are raw SQL fragments and are not
    parameterized; escape any literal values before passing them in.

    Example:
        >>> (CaseExpression()
        ...     .when("status = 1", "'Active'")
        ...     .when("status = 0", "'Inactive'")
        ...     .else_("'Unknown'")
        ...     .end("status_label"))
        "CASE WHEN status = 1 THEN 'Active' WHEN status = 0 THEN 'Inactive' ELSE 'Unknown' END AS status_label"
    """

    def __init__(self) -> None:
        self._cases: list[str] = []
        self._else: Optional[str] = None

    def when(self, condition: str, result: str) -> 'CaseExpression':
        """Append one WHEN ... THEN ... branch"""
        self._cases.append(f"WHEN {condition} THEN {result}")
        return self

    def else_(self, result: str) -> 'CaseExpression':
        """Set the ELSE branch, replacing any earlier one"""
        self._else = f"ELSE {result}"
        return self

    def end(self, alias: Optional[str] = None) -> str:
        """Render the expression, optionally aliased"""
        parts = ["CASE", *self._cases]
        if self._else:
            parts.append(self._else)
        parts.append("END")
        case = " ".join(parts)
        if alias:
            case += f" AS {alias}"
        return case

    def __str__(self) -> str:
        return self.end()
