"""Quoting helpers for identifiers and string literals"""


def quote_identifier(name: str) -> str:
    """Wrap a name in backticks, doubling any embedded backtick"""
    return "`" + name.replace("`", "``") + "`"


def quote_string(value: str) -> str:
    """Render a SQL string literal, doubling embedded single quotes"""
    return "'" + value.replace("'", "''") + "'"
