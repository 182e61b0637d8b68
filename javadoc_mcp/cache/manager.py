"""Cache manager for fully extracted class documentation.

Parsing a class page is the only expensive operation after startup, so the
coordinator memoizes extraction results here. Capacity is fixed; the least
recently used entry is evicted when a new key arrives at capacity.
"""

import logging
import threading
from collections import OrderedDict
from typing import Dict, Generic, List, Optional, TypeVar, Any

from javadoc_mcp.schemas import ClassDocumentation

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheManager(Generic[T]):
    """Bounded LRU cache keyed by string."""

    def __init__(self, max_size: int = 50):
        """Initialize cache manager.

        Args:
            max_size: Maximum number of entries held at once
        """
        if max_size < 1:
            raise ValueError(f"Cache size must be positive, got {max_size}")

        self.max_size = max_size
        self._entries: "OrderedDict[str, T]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        """Return the cached value and mark it most recently used.

        Args:
            key: Cache key

        Returns:
            Cached value, or None on a miss
        """
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def set(self, key: str, value: T) -> None:
        """Store a value, evicting the least recently used entry if full.

        Args:
            key: Cache key
            value: Value to store
        """
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted {evicted} from cache")
            self._entries[key] = value
            self._entries.move_to_end(key)

    def has(self, key: str) -> bool:
        """Check membership without touching recency."""
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Current number of entries."""
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Size, capacity and keys ordered from least to most recently used
        """
        with self._lock:
            keys: List[str] = list(self._entries.keys())
        return {
            "size": len(keys),
            "max_size": self.max_size,
            "keys": keys,
        }


class DetailCache(CacheManager[ClassDocumentation]):
    """Cache of extracted class documentation keyed by fully-qualified name."""
