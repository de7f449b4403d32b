"""Structured description of one accessor operation."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from storage_util.identification import IdentificationInfo
from storage_util.keys import build_key

V = TypeVar("V")


@dataclass(frozen=True)
class Info:
    """Correlation data fixed for the lifetime of an accessor."""

    key_prefix: str
    key: str
    storage: IdentificationInfo
    item: IdentificationInfo


@dataclass
class Details(Generic[V]):
    """Per-call data, filled in while the operation runs.

    `existance` is whether a value was present before the operation took
    effect; it stays None when the operation could not tell.
    """

    operation: str
    new_value: Optional[V] = None
    old_value: Optional[V] = None
    existance: Optional[bool] = None
    key_postfix: Optional[str] = None
    comment: Optional[str] = None
    error: Optional[Exception] = None


@dataclass(frozen=True)
class LogRecord(Generic[V]):
    info: Info
    details: Details[V]

    @property
    def full_key(self) -> str:
        return build_key(self.info.key_prefix, self.info.key, self.details.key_postfix)

    def as_dict(self) -> dict[str, Any]:
        d = self.details
        return {
            "key": self.full_key,
            "operation": d.operation,
            "existance": d.existance,
            "new_value": d.new_value,
            "old_value": d.old_value,
            "comment": d.comment,
            "error": str(d.error) if d.error is not None else None,
            "storage": str(self.info.storage),
            "item": str(self.info.item),
        }
