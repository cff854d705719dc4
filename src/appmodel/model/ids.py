"""
Client Id Generation
====================
Produces the `client_id` of every model.

A client id only identifies a model inside the running process: it is handed
out by a counter, so two sessions will reuse the same ids.

Classes:
    IdGenerator: Protocol with a single `next()` operation.
    CounterIdGenerator: Thread-safe incrementing counter ("c1", "c2", ...).
"""
from __future__ import annotations

import itertools
import threading
from typing import Protocol, runtime_checkable

from appmodel.config import CLIENT_ID_PREFIX


@runtime_checkable
class IdGenerator(Protocol):
    """Anything that can hand out a fresh id string."""

    def next(self) -> str:
        ...


class CounterIdGenerator:
    """Monotonically increasing ids formatted as `<prefix><n>`."""

    def __init__(self, prefix: str = CLIENT_ID_PREFIX, start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            value = next(self._counter)
        return f"{self.prefix}{value}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(prefix={self.prefix!r})"


# Shared by every model that is not given its own generator
DEFAULT_ID_GENERATOR: IdGenerator = CounterIdGenerator()
