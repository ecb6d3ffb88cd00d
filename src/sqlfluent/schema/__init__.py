"""DDL construction: table blueprints and the Schema facade"""

from .blueprint import TableBlueprint
from .schema import Schema

__all__ = [
    "TableBlueprint",
    "Schema",
]
