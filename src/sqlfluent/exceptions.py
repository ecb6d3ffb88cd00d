"""
Exception hierarchy for the facade layer.

The query and schema builders raise nothing of their own; malformed input
compiles to SQL that the database rejects. These errors belong to server
configuration and transaction handling.
"""

from typing import Optional


class DatabaseError(Exception):
    """Base exception for sqlfluent errors."""
    pass


class DuplicateServerConfiguration(DatabaseError):
    """Raised when configuring a server name that is already registered."""

    def __init__(self, server: str):
        self.server = server
        super().__init__(f"Server '{server}' is already registered")


class TransactionFailure(DatabaseError):
    """Raised when a transaction callback fails; the transaction has been rolled back.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, server: str, message: Optional[str] = None):
        self.server = server
        super().__init__(message or f"Transaction on server '{server}' failed")
