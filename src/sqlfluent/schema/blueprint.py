"""Table blueprint compiling column definitions to CREATE / ALTER TABLE"""

import re
import warnings
from decimal import Decimal
from numbers import Number
from typing import Any, Optional, Sequence

from sqlfluent.utils.identifiers import quote_identifier, quote_string

# String literals, possibly containing doubled quotes
_LITERAL = re.compile(r"'(?:[^']|'')*'")
_NULL_TOKEN = re.compile(r"\bNULL\b")
_NULLABILITY = re.compile(r"\bDEFAULT NULL\b|\bNOT NULL\b|\bNULL\b")
_NUMERIC = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _outside_literals(fragment: str) -> list[str]:
    """Segments of a fragment that are not inside quoted string literals"""
    return _LITERAL.split(fragment)


def _has_null_token(fragment: str) -> bool:
    return any(_NULL_TOKEN.search(segment) for segment in _outside_literals(fragment))


def _strip_nullability(fragment: str) -> str:
    """Remove NULL / NOT NULL / DEFAULT NULL outside literals, keeping literals intact"""
    literals = _LITERAL.findall(fragment)
    segments = [
        re.sub(r"\s{2,}", " ", _NULLABILITY.sub("", segment))
        for segment in _outside_literals(fragment)
    ]

    rebuilt = segments[0]
    for literal, segment in zip(literals, segments[1:]):
        rebuilt += literal + segment
    return rebuilt.strip()


class TableBlueprint:
    """Accumulate column and constraint definitions for one table

    Definitions are kept in insertion order, keyed by column name or by a
    synthetic key for constraints (``unique_<col>``, ``index_<col>``,
    ``primary_<col>``). Column helpers also make their column the target
    of the modifier helpers (``default``, ``nullable``, ``not_null``, ...),
    which edit that definition in place.

    Example:
        >>> t = TableBlueprint("users")
        >>> t.id().string("name", 100).not_null().timestamps()
        >>> t.to_sql("create")
        'CREATE TABLE IF NOT EXISTS `users` (`id` INT UNSIGNED AUTO_INCREMENT PRIMARY KEY, ...);'
    """

    def __init__(self, table: str):
        self.table = table
        self.columns: dict[str, str] = {}
        self.options: dict[str, Any] = {}
        self.last_column: Optional[str] = None

    def _define_column(self, name: str, type: str) -> 'TableBlueprint':
        """Add a nullable column and make it the modifier target"""
        self.columns[name] = f"{quote_identifier(name)} {type} NULL"
        self.last_column = name
        return self

    # Column definitions

    def id(self, name: str = "id", starting_index: int = 0, length: Optional[int] = None) -> 'TableBlueprint':
        """Auto-incrementing unsigned integer primary key

        A positive ``starting_index`` adds ``AUTO_INCREMENT=n`` to CREATE.
        """
        int_type = f"INT({length})" if length else "INT"
        self.columns[name] = f"{quote_identifier(name)} {int_type} UNSIGNED AUTO_INCREMENT PRIMARY KEY"
        self.last_column = name

        if starting_index > 0:
            self.options["AUTO_INCREMENT"] = starting_index
        return self

    def string(self, name: str, length: int = 255) -> 'TableBlueprint':
        return self._define_column(name, f"VARCHAR({length})")

    def text(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "TEXT")

    def integer(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "INT")

    def big_integer(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "BIGINT")

    def decimal(self, name: str, precision: int = 8, scale: int = 2) -> 'TableBlueprint':
        return self._define_column(name, f"DECIMAL({precision},{scale})")

    def boolean(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "TINYINT(1)")

    def date(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "DATE")

    def timestamp(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "TIMESTAMP")

    def datetime(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "DATETIME")

    def json(self, name: str) -> 'TableBlueprint':
        return self._define_column(name, "JSON")

    def enum(self, name: str, values: Sequence[str]) -> 'TableBlueprint':
        enum_list = ",".join(quote_string(str(value)) for value in values)
        return self._define_column(name, f"ENUM({enum_list})")

    def timestamps(self) -> 'TableBlueprint':
        """Add ``created_at`` and ``updated_at`` maintained by the database"""
        self.columns["created_at"] = "`created_at` TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP"
        self.columns["updated_at"] = (
            "`updated_at` TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"
        )
        return self

    # Constraints, never modifier targets

    def unique(self, column: str) -> 'TableBlueprint':
        self.columns[f"unique_{column}"] = f"UNIQUE ({quote_identifier(column)})"
        return self

    def index(self, column: str, index_name: Optional[str] = None) -> 'TableBlueprint':
        index_name = index_name or f"index_{column}"
        self.columns[index_name] = f"INDEX {quote_identifier(index_name)} ({quote_identifier(column)})"
        return self

    def primary(self, column: str) -> 'TableBlueprint':
        self.columns[f"primary_{column}"] = f"PRIMARY KEY ({quote_identifier(column)})"
        return self

    # Modifiers for the last defined column

    def _target(self, modifier: str) -> Optional[str]:
        if self.last_column is None or self.last_column not in self.columns:
            warnings.warn(
                f"{modifier}() called on table {self.table!r} before any column was defined; ignored",
                UserWarning,
                stacklevel=3,
            )
            return None
        return self.last_column

    def default(self, value: Any) -> 'TableBlueprint':
        """Append a DEFAULT clause

        ``None`` or ``"NULL"`` gives ``DEFAULT NULL``, booleans ``1``/``0``,
        numbers and numeric strings are emitted bare, anything else is
        quoted with single quotes doubled.
        """
        key = self._target("default")
        if key is None:
            return self

        if value is None or str(value).upper() == "NULL":
            clause = "DEFAULT NULL"
        elif isinstance(value, bool):
            clause = f"DEFAULT {int(value)}"
        elif isinstance(value, (Number, Decimal)) or _NUMERIC.fullmatch(str(value)):
            clause = f"DEFAULT {value}"
        else:
            clause = f"DEFAULT {quote_string(str(value))}"

        self.columns[key] += f" {clause}"
        return self

    def default_now(self) -> 'TableBlueprint':
        key = self._target("default_now")
        if key is not None:
            self.columns[key] += " DEFAULT CURRENT_TIMESTAMP"
        return self

    def update_now(self) -> 'TableBlueprint':
        key = self._target("update_now")
        if key is not None:
            self.columns[key] += " ON UPDATE CURRENT_TIMESTAMP"
        return self

    def nullable(self) -> 'TableBlueprint':
        """Append NULL unless the definition already has a NULL token"""
        key = self._target("nullable")
        if key is not None and not _has_null_token(self.columns[key]):
            self.columns[key] += " NULL"
        return self

    def not_null(self) -> 'TableBlueprint':
        """Make the column NOT NULL

        Standalone ``NULL`` tokens (including a ``DEFAULT NULL`` clause) are
        removed first, so the definition ends up with exactly one
        ``NOT NULL``. Quoted defaults such as ``'null'`` are left alone.
        """
        key = self._target("not_null")
        if key is not None:
            self.columns[key] = _strip_nullability(self.columns[key]) + " NOT NULL"
        return self

    def comment(self, text: str) -> 'TableBlueprint':
        key = self._target("comment")
        if key is not None:
            self.columns[key] += f" COMMENT {quote_string(text)}"
        return self

    def after(self, column: str) -> 'TableBlueprint':
        """Position the column after another one (ALTER only)"""
        key = self._target("after")
        if key is not None:
            self.columns[key] += f" AFTER {quote_identifier(column)}"
        return self

    # Compilation

    def to_sql(self, mode: str) -> str:
        """Compile to ``create`` or ``alter`` DDL; other modes give ``""``"""
        if not self.columns:
            return ""

        table = quote_identifier(self.table)

        if mode == "create":
            sql = f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(self.columns.values())})"
            for key, value in self.options.items():
                sql += f" {key}={value}"
            return sql + ";"

        if mode == "alter":
            additions = ", ".join(f"ADD {definition}" for definition in self.columns.values())
            return f"ALTER TABLE {table} {additions};"

        return ""

    def __repr__(self) -> str:
        return f"TableBlueprint({self.table!r}, columns={list(self.columns)!r})"
