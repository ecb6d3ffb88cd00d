"""Process-wide registry of open transactions.

Maps a server name to the connection context currently holding an open
transaction on that server. Builders consult it so that statements issued
between ``Database.begin_transaction`` and ``commit``/``rollback`` run on
the transaction's connection. All access goes through one lock.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlfluent.context import ConnectionContext
from sqlfluent.primitives import Executor


class TransactionRegistry:
    """Thread-safe server -> ConnectionContext mapping"""

    def __init__(self) -> None:
        self._active: dict[str, ConnectionContext] = {}
        self._lock = threading.Lock()

    def get(self, server: str) -> Optional[ConnectionContext]:
        with self._lock:
            return self._active.get(server)

    def open(self, server: str, context: ConnectionContext) -> Optional[ConnectionContext]:
        """Record an open transaction and return the context it replaced, if any"""
        with self._lock:
            previous = self._active.get(server)
            self._active[server] = context
            return previous

    def pop(self, server: str) -> Optional[ConnectionContext]:
        with self._lock:
            return self._active.pop(server, None)

    def servers(self) -> list[str]:
        with self._lock:
            return list(self._active)


registry = TransactionRegistry()


@contextmanager
def executor_for(server: str, context: Optional[ConnectionContext] = None) -> Iterator[Executor]:
    """Yield an Executor for a statement on ``server``

    Uses the explicit context when given, else the context holding an open
    transaction on the server, else a fresh context that is closed once
    the statement's results have been consumed.
    """
    if context is not None:
        yield Executor(context)
        return

    active = registry.get(server)
    if active is not None:
        yield Executor(active)
        return

    fresh = ConnectionContext(server=server)
    try:
        yield Executor(fresh)
    finally:
        fresh.close()
