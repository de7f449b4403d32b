"""Backends used to force failures and overlaps in accessor tests."""
import threading
import time
from typing import Any, Optional

from storage_util.errors import StorageError, StorageErrorKind
from storage_util.storage.base import StorageBackend
from storage_util.storage.memory_backend import MemoryStorage


class FailingStorage(StorageBackend):
    """Every call fails with the configured exception."""

    def __init__(self, exc: Optional[Exception] = None, key_prefix: str = "") -> None:
        super().__init__(key_prefix, label="failing")
        self.exc = exc or StorageError(StorageErrorKind.IO, "disk unavailable")

    def save(self, key: str, value: Any) -> Optional[Any]:
        raise self.exc

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        raise self.exc

    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        raise self.exc


class FlakyReadStorage(MemoryStorage):
    """Memory storage whose reads fail while `fail_reads` is set."""

    def __init__(self, key_prefix: str = "") -> None:
        super().__init__(key_prefix, label="flaky")
        self.fail_reads = False
        self.saves = 0

    def save(self, key: str, value: Any) -> Optional[Any]:
        self.saves += 1
        return super().save(key, value)

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        if self.fail_reads:
            raise StorageError(StorageErrorKind.IO, "read timed out", key)
        return super().load(key, value_type)


class SlowStorage(StorageBackend):
    """Non-atomic read-modify-write backend that tracks overlapping calls.

    Without outside serialization, two concurrent saves both see the same
    previous value and one update is lost from the history.
    """

    def __init__(self, delay: float = 0.005, barrier: Optional[threading.Barrier] = None) -> None:
        super().__init__("", label="slow")
        self.delay = delay
        self.barrier = barrier
        self._data: dict = {}
        self._guard = threading.Lock()
        self.active = 0
        self.max_active = 0

    def _enter(self) -> None:
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def _leave(self) -> None:
        with self._guard:
            self.active -= 1

    def save(self, key: str, value: Any) -> Optional[Any]:
        self._enter()
        try:
            previous = self._data.get(key)
            if self.barrier is not None:
                self.barrier.wait()
            time.sleep(self.delay)
            self._data[key] = value
            return previous
        finally:
            self._leave()

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        self._enter()
        try:
            time.sleep(self.delay)
            return self._data.get(key)
        finally:
            self._leave()

    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        self._enter()
        try:
            return self._data.pop(key, None)
        finally:
            self._leave()
