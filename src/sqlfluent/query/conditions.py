"""Condition tree backing WHERE, HAVING and join ON clauses.

A clause is an ordered sequence of entries. Every entry carries the
conjunction (``AND``/``OR``) that attaches it to the entry before it, and
the values bound by the placeholders in its own text. Compilation walks
the sequence once, emitting text and bindings side by side, so the
bindings always match the ``?`` tokens in order no matter how deeply
groups are nested.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence, Union

AND = "AND"
OR = "OR"


class _Empty:
    """Marker for an omitted operator argument"""

    def __repr__(self) -> str:
        return "EMPTY"


# Identity-compared, so it never collides with None, False or 0
EMPTY = _Empty()


@dataclass(frozen=True)
class Predicate:
    """``column operator ?`` with one bound value"""
    text: str
    value: Any
    boolean: str = AND

    @property
    def bindings(self) -> tuple[Any, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Raw:
    """Caller-supplied SQL fragment with its own bindings"""
    text: str
    bindings: tuple[Any, ...] = ()
    boolean: str = AND


@dataclass(frozen=True)
class ColumnCompare:
    """Two columns compared to each other"""
    text: str
    boolean: str = AND

    @property
    def bindings(self) -> tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class Nested:
    """Parenthesized group of entries attached by a single conjunction"""
    children: tuple['ConditionEntry', ...] = field(default_factory=tuple)
    boolean: str = AND

    @property
    def bindings(self) -> tuple[Any, ...]:
        values: list[Any] = []
        for child in self.children:
            values.extend(child.bindings)
        return tuple(values)


@dataclass(frozen=True)
class Subquery:
    """Column compared against a compiled subquery"""
    column: str
    operator: str
    sql: str
    bindings: tuple[Any, ...] = ()
    boolean: str = AND

    @property
    def text(self) -> str:
        return f"{self.column} {self.operator} ({self.sql})"


ConditionEntry = Union[Predicate, Raw, ColumnCompare, Nested, Subquery]


def split_operator(operator: Any, value: Any) -> tuple[Any, Any]:
    """Resolve the two-argument shorthand ``(column, value)`` to ``=``"""
    if value is EMPTY:
        return "=", operator
    return operator, value


def compile_conditions(
    entries: Sequence[ConditionEntry],
    keyword: str = "",
) -> tuple[str, list[Any]]:
    """Compile a condition sequence to ``(text, bindings)``

    Args:
        entries: Condition entries in call order
        keyword: Clause keyword such as ``WHERE`` or ``HAVING``; emitted
            only when at least one entry renders

    Returns:
        Tuple of SQL text and the bindings for its placeholders

    Example:
        >>> compile_conditions([Predicate("a = ?", 1), Predicate("b = ?", 2, OR)], "WHERE")
        ('WHERE a = ? OR b = ?', [1, 2])
    """
    parts: list[str] = []
    bindings: list[Any] = []

    for entry in entries:
        if isinstance(entry, Nested):
            inner, inner_bindings = compile_conditions(entry.children)
            if not inner:
                continue
            text = f"({inner})"
            values: Sequence[Any] = inner_bindings
        else:
            text = entry.text
            values = entry.bindings

        # Leading conjunction is dropped at every level
        if parts:
            parts.append(f"{entry.boolean} {text}")
        else:
            parts.append(text)
        bindings.extend(values)

    if not parts:
        return "", []

    body = " ".join(parts)
    if keyword:
        return f"{keyword} {body}", bindings
    return body, bindings
