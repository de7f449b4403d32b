"""Simple memory-backed storage backend

This backend stores Python objects in a dict keyed by the prefixed storage key.
Values are kept by reference; callers that mutate a loaded object mutate the
stored one.
"""
from threading import RLock
from typing import Dict, Any, Optional

from .base import StorageBackend, coerce_value


class MemoryStorage(StorageBackend):
    def __init__(self, key_prefix: str = "", label: Optional[str] = None) -> None:
        super().__init__(key_prefix, label)
        self._lock = RLock()
        self._store: Dict[str, Any] = {}

    def save(self, key: str, value: Any) -> Optional[Any]:
        with self._lock:
            k = self.storage_key(key)
            previous = self._store.get(k)
            self._store[k] = value
            return previous

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        with self._lock:
            value = self._store.get(self.storage_key(key))
        return coerce_value(value, value_type, key)

    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        with self._lock:
            k = self.storage_key(key)
            # a value of the wrong type stays in place
            value = coerce_value(self._store.get(k), value_type, key)
            self._store.pop(k, None)
            return value

    def keys(self) -> list[str]:
        """Return the stored storage keys (prefix included)."""
        with self._lock:
            return list(self._store)
