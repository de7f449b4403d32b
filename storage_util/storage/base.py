"""Storage backend interface definitions.

Defines the StorageBackend abstract class consumed by key accessors. A
backend persists single values under full keys; the accessor has already
joined its key and the call postfix, the backend prepends its own prefix.

Missing keys are not failures: ``load`` and ``delete`` return ``None``.
Everything a backend cannot do raises :class:`StorageError`.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from storage_util.errors import StorageError, StorageErrorKind
from storage_util.identification import IdentificationInfo
from storage_util.keys import build_key


def coerce_value(value: Any, value_type: Optional[type], key: Optional[str] = None) -> Any:
    """Check a loaded value against the type the caller expects.

    Pydantic models are rebuilt from plain mappings so text serializers can
    round-trip them.
    """
    if value is None or value_type is None or isinstance(value, value_type):
        return value
    if issubclass(value_type, BaseModel):
        try:
            return value_type.model_validate(value)
        except ValidationError as e:
            raise StorageError(StorageErrorKind.TYPE_MISMATCH, str(e), key) from e
    raise StorageError(
        StorageErrorKind.TYPE_MISMATCH,
        f"expected {value_type.__name__}, got {type(value).__name__}",
        key,
    )


class StorageBackend(ABC):
    """Abstract storage backend.

    Implementations must be thread-safe if used concurrently. Accessors only
    serialize calls made through the same accessor instance.
    """

    def __init__(self, key_prefix: str = "", label: Optional[str] = None) -> None:
        self.key_prefix = key_prefix
        self.identification_info = IdentificationInfo.capture(
            type(self).__name__, label=label, extra=f"Prefix: {key_prefix}" if key_prefix else None
        )

    def storage_key(self, key: str) -> str:
        return build_key(self.key_prefix, key)

    @abstractmethod
    def save(self, key: str, value: Any) -> Optional[Any]:
        """Store `value` under `key` and return the value it replaced, if any."""

    @abstractmethod
    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        """Return the value stored under `key`, or None when there is none."""

    @abstractmethod
    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        """Remove `key` and return the deleted value, or None if it was absent."""
