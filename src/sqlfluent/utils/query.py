"""Utilities for assembling SQL text with safe parameter binding"""

from typing import Any, Iterable


class SafeQuery:
    """Accumulate SQL fragments and their bindings in lockstep

    Each fragment is appended together with the values for the
    placeholders it contains, so the final binding list always lines up
    with the ``?`` tokens in the text regardless of how many fragments
    were skipped.
    """

    def __init__(self, base: str = ""):
        """Initialize with an optional base SQL keyword"""
        self._parts: list[str] = [base] if base else []
        self._bindings: list[Any] = []

    def append(self, template: str, bindings: Iterable[Any] = ()) -> 'SafeQuery':
        """Add a fragment and the values bound by its placeholders"""
        if template:
            self._parts.append(template)
        self._bindings.extend(bindings)
        return self

    def when(self, condition: Any, template: str, *values: Any) -> 'SafeQuery':
        """Add a clause and maybe bind values when condition is truthy"""
        if condition:
            self.append(template, values)
        return self

    def sql(self) -> str:
        """Get the SQL string with placeholders"""
        return " ".join(self._parts)

    def bindings(self) -> list[Any]:
        """Get a copy of the bindings list"""
        return list(self._bindings)

    def as_tuple(self) -> tuple[str, list[Any]]:
        """Get both SQL and bindings as a tuple"""
        return self.sql(), self.bindings()
