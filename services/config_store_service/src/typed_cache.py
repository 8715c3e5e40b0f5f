import threading
from typing import Any, Callable, Dict, Hashable, Tuple, TypeVar

T = TypeVar("T")

CacheKey = Tuple[str, str, Hashable]


class TypedCache:
    """
    Cache of derived values keyed by (accessor kind, config key, default).

    Computation runs outside the lock, so two threads may compute the same
    entry; the first stored value wins and is returned to both.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, Any] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, key: CacheKey, compute: Callable[[], T]) -> T:
        with self._lock:
            if key in self._entries:
                return self._entries[key]

        value = compute()

        with self._lock:
            return self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries
