"""
LRU Store - bounded fingerprint -> resource mapping.

Thread Safety:
- NOT thread-safe by design (no internal locks)
- ShapeCacheService serializes every access through its own lock
"""

from collections import OrderedDict
from typing import Any, List, Optional, Tuple


class LruStore:
    """
    Strict least-recently-used store with a fixed capacity.

    get() and put() both count as a touch; peek() does not.

    Usage:
        store = LruStore(capacity=2)
        store.put("A", a)
        store.put("B", b)
        store.get("A")                 # A becomes most recent
        store.put("C", c)              # returns ("B", b)
    """

    def __init__(self, capacity: int):
        """
        Initialize empty store.

        Args:
            capacity: Maximum number of entries (> 0)
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[str, Any]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        """Value for key (marked most recently used), or None."""
        value = self._entries.get(key)
        if value is not None:
            self._entries.move_to_end(key)
        return value

    def peek(self, key: str) -> Optional[Any]:
        """Value for key without touching it, or None."""
        return self._entries.get(key)

    def put(self, key: str, value: Any) -> Optional[Tuple[str, Any]]:
        """
        Insert or replace key as most recently used.

        Returns:
            The evicted (key, value) pair, or None when nothing was evicted
        """
        self._entries[key] = value
        self._entries.move_to_end(key)
        if len(self._entries) > self.capacity:
            return self._entries.popitem(last=False)
        return None

    def keys(self) -> List[str]:
        """Keys from least to most recently used (snapshot)."""
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LruStore(size={len(self._entries)}, capacity={self.capacity})"
