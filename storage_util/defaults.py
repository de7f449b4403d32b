"""Process-wide defaults used when an accessor is built without explicit collaborators."""
from __future__ import annotations
import threading
from typing import Optional

from storage_util.logs.handlers import LoggingHandler
from storage_util.logs.logger import LogHandler
from storage_util.storage.base import StorageBackend
from storage_util.storage.memory_backend import MemoryStorage

_lock = threading.Lock()
_storage: Optional[StorageBackend] = None
_log_handler: Optional[LogHandler] = LoggingHandler()


def get_default_storage() -> StorageBackend:
    global _storage
    with _lock:
        if _storage is None:
            _storage = MemoryStorage(label="default")
        return _storage


def set_default_storage(storage: StorageBackend) -> None:
    global _storage
    with _lock:
        _storage = storage


def get_default_log_handler() -> Optional[LogHandler]:
    with _lock:
        return _log_handler


def set_default_log_handler(handler: Optional[LogHandler]) -> None:
    """Install the handler new accessors pick up; None turns record emission off."""
    global _log_handler
    with _lock:
        _log_handler = handler


def reset_defaults() -> None:
    global _storage, _log_handler
    with _lock:
        _storage = None
        _log_handler = LoggingHandler()
