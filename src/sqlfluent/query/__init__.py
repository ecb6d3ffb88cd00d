"""Query construction: condition tree, joins, CASE expressions and the fluent builder"""

from .builder import QueryBuilder
from .case import CaseExpression
from .join import JoinClause
from .conditions import (
    EMPTY,
    ColumnCompare,
    Nested,
    Predicate,
    Raw,
    Subquery,
    compile_conditions,
)

__all__ = [
    "QueryBuilder",
    "CaseExpression",
    "JoinClause",
    "EMPTY",
    "ColumnCompare",
    "Nested",
    "Predicate",
    "Raw",
    "Subquery",
    "compile_conditions",
]
