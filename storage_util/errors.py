"""Error taxonomy for storage operations.

Backends raise :class:`StorageError` for failures they understand. Anything
else that escapes a backend call is wrapped in :class:`UnexpectedError` by the
accessor so log records always carry one of the two kinds.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional


class StorageErrorKind(str, Enum):
    IO = "io"
    ENCODING = "encoding"
    DECODING = "decoding"
    TYPE_MISMATCH = "type mismatch"
    BACKEND = "backend"


class StorageError(Exception):
    """Backend-native failure. ``kind`` is preserved through logging."""

    def __init__(self, kind: StorageErrorKind, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key:
            return f"{self.kind.value}: {self.message} (key {self.key!r})"
        return f"{self.kind.value}: {self.message}"


class UnexpectedError(Exception):
    """Wraps a failure that is not a :class:`StorageError`."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


def classify_error(exc: BaseException) -> Exception:
    if isinstance(exc, (StorageError, UnexpectedError)):
        return exc
    return UnexpectedError(exc)
