"""Observable single-key accessors over pluggable key-value storage backends."""

from .accessor import NO_POSTFIX, KeyAccessor, Postfix, PostfixSource, SimpleAccessor
from .errors import StorageError, StorageErrorKind, UnexpectedError
from .identification import IdentificationInfo
from .keys import build_key
from .storage import FileStorage, MemoryStorage, StorageBackend, create_storage

__all__ = [
    "KeyAccessor",
    "SimpleAccessor",
    "Postfix",
    "PostfixSource",
    "NO_POSTFIX",
    "StorageError",
    "StorageErrorKind",
    "UnexpectedError",
    "IdentificationInfo",
    "build_key",
    "StorageBackend",
    "MemoryStorage",
    "FileStorage",
    "create_storage",
]
