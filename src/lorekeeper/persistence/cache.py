# ABOUTME: Thread-safe in-memory mapping mirroring a persisted table
# ABOUTME: Supports atomic generation-stamped publishing of a fully loaded population

from __future__ import annotations

import itertools
import threading
from collections.abc import Mapping


class ConcurrentCache[K, V]:
    """Internally synchronized key/value cache.

    Reloads either publish a complete replacement mapping in one step
    (``publish``) or rebuild in place after ``clear`` with ``try_add``. Every
    reload that publishes takes a generation number before it scans the store;
    publishing an older generation than the one currently visible is a no-op,
    so overlapping reloads settle on the newest scan.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[K, V] = {}
        self._lock = threading.RLock()
        self._generations = itertools.count(1)
        self._published_generation = 0

    def get(self, key: K) -> tuple[bool, V | None]:
        """Return ``(hit, value)`` for ``key``."""
        with self._lock:
            if key not in self._entries:
                return (False, None)
            return (True, self._entries[key])

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def try_add(self, key: K, value: V) -> bool:
        """Add ``key`` only if absent. Returns False when the key already exists."""
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = value
            return True

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value

    def remove(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict[K, V]:
        """Copy of the visible entries."""
        with self._lock:
            return dict(self._entries)

    def keys(self) -> list[K]:
        with self._lock:
            return list(self._entries)

    @property
    def generation(self) -> int:
        """Generation of the population currently visible."""
        with self._lock:
            return self._published_generation

    def next_generation(self) -> int:
        """Reserve a generation number for a reload about to scan the store."""
        with self._lock:
            return next(self._generations)

    def publish(self, entries: Mapping[K, V], generation: int) -> bool:
        """Atomically replace the visible entries with ``entries``.

        Returns False (and changes nothing) when a newer generation is already visible.
        """
        replacement = dict(entries)
        with self._lock:
            if generation < self._published_generation:
                return False
            self._entries = replacement
            self._published_generation = generation
            return True

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"size": len(self._entries), "generation": self._published_generation}
