"""Storage backends for key accessors."""
from __future__ import annotations
from pathlib import Path
from typing import Optional

from .base import StorageBackend, coerce_value
from .file_backend import FileStorage
from .interfaces import StorageProtocol
from .memory_backend import MemoryStorage
from .serializer import JSONSerializer, PickleSerializer, YAMLSerializer, get_serializer

BACKENDS = ("memory", "file")


def create_storage(
    backend: str = "memory",
    serializer: str = "pickle",
    key_prefix: str = "",
    data_dir: str | Path = "./data",
    label: Optional[str] = None,
) -> StorageBackend:
    """Build a backend by name.

    `serializer` and `data_dir` only apply to the file backend.
    """
    if backend == "memory":
        return MemoryStorage(key_prefix=key_prefix, label=label)
    if backend == "file":
        return FileStorage(
            data_dir=data_dir,
            key_prefix=key_prefix,
            serializer=get_serializer(serializer),
            label=label,
        )
    raise ValueError(f"Unknown storage backend {backend!r}; expected one of {BACKENDS}")


__all__ = [
    "StorageBackend",
    "StorageProtocol",
    "MemoryStorage",
    "FileStorage",
    "PickleSerializer",
    "JSONSerializer",
    "YAMLSerializer",
    "coerce_value",
    "create_storage",
    "get_serializer",
]
