"""Join specifications for the query builder"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .conditions import ConditionEntry, compile_conditions

INNER = "INNER"
LEFT = "LEFT"
RIGHT = "RIGHT"

_WHERE_PREFIX = "WHERE "


@dataclass(frozen=True)
class JoinClause:
    """One ``{TYPE} JOIN table ON ...`` clause

    Either ``first``/``operator``/``second`` describe a fixed column
    comparison, or ``conditions`` holds the WHERE entries captured from a
    scratch builder that a join callback populated.
    """
    type: str
    table: str
    first: Optional[str] = None
    operator: str = "="
    second: Optional[str] = None
    conditions: tuple[ConditionEntry, ...] = field(default_factory=tuple)

    @classmethod
    def fixed(cls, type: str, table: str, first: str, operator: str, second: str) -> 'JoinClause':
        return cls(type=type, table=table, first=first, operator=operator, second=second)

    @classmethod
    def nested(cls, type: str, table: str, conditions: tuple[ConditionEntry, ...]) -> 'JoinClause':
        return cls(type=type, table=table, conditions=tuple(conditions))

    @property
    def is_nested(self) -> bool:
        return self.first is None

    def compile(self) -> tuple[str, list[Any]]:
        """Render the join and the bindings of its ON condition"""
        if not self.is_nested:
            return f"{self.type} JOIN {self.table} ON {self.first} {self.operator} {self.second}", []

        on_clause, bindings = compile_conditions(self.conditions, "WHERE")
        if on_clause.startswith(_WHERE_PREFIX):
            on_clause = on_clause[len(_WHERE_PREFIX):]
        if not on_clause:
            # Callback added no conditions
            on_clause = "1 = 1"
        return f"{self.type} JOIN {self.table} ON {on_clause}", bindings
