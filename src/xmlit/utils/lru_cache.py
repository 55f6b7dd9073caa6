"""Thread-safe LRU cache for compiled templates.

Keys are template sources or names; values are Template objects. A single
lock guards the ordered dict, and the factory in ``get_or_set`` runs outside
the lock, so two threads may build the same template. Templates are
immutable, so whichever result is stored last is equivalent.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)


class LRUCache:
    """Bounded mapping that evicts the least recently used entry.

    Attributes:
        maxsize: Maximum number of entries (0 disables caching)

    Example:
        >>> cache = LRUCache(maxsize=2)
        >>> cache.get_or_set("a", lambda: 1)
        1
        >>> cache.info()
        {'hits': 0, 'misses': 1, 'size': 1, 'maxsize': 2}
    """

    __slots__ = ("_data", "_hits", "_lock", "_misses", "maxsize")

    def __init__(self, maxsize: int = 400):
        if maxsize < 0:
            raise ValueError(f"maxsize must be >= 0, got {maxsize}")
        self.maxsize = maxsize
        self._data: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            try:
                value = self._data[key]
            except KeyError:
                self._misses += 1
                return None
            self._data.move_to_end(key)
            self._hits += 1
            return value

    def set(self, key: Hashable, value: Any) -> None:
        if not self.maxsize:
            return
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                evicted, _ = self._data.popitem(last=False)
                logger.debug("evicted %r from template cache", evicted)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is None:
            value = factory()
            self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def info(self) -> dict[str, int]:
        """Hit/miss counters and current size."""
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._data),
                "maxsize": self.maxsize,
            }

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
