"""
Process-wide keyed locks.

Services are rebuilt for every request, so locks that must serialize work
across requests live in module-level registries rather than on instances.
An entry exists only while some thread holds or waits on its key, so the
registry does not grow with every key ever seen.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Hashable, Iterator


@dataclass
class _Entry:
    lock: Lock = field(default_factory=Lock)
    users: int = 0


class KeyedLocks:
    """
    Hands out one lock per key.

    Usage:
        >>> locks = KeyedLocks()
        >>> with locks.hold(("user-1", "catalog", "bench")):
        ...     ...
    """

    def __init__(self):
        self._entries: Dict[Hashable, _Entry] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
