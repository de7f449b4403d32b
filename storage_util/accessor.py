"""Observable accessor for a single logical key in a storage backend.

A :class:`KeyAccessor` is bound to one key, one backend and one log handler.
Every public call

- reads the postfix from its postfix source once,
- builds the full key (``key.postfix``; the backend adds its prefix),
- runs the backend call while holding the accessor's own lock,
- emits exactly one :class:`~storage_util.logs.record.LogRecord`,

and never raises. Failures are reported as ``False``/``None`` and the only
place that tells "absent" from "failed" is the record's ``error`` field.

The lock is per instance. Two accessors built for the same key and backend
are not serialized against each other; callers that need that must share one
accessor or coordinate outside of it.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, Union, runtime_checkable

from storage_util import defaults
from storage_util.errors import classify_error
from storage_util.identification import IdentificationInfo
from storage_util.keys import build_key
from storage_util.logs.logger import LogHandler, Logger
from storage_util.logs.record import Details, Info
from storage_util.storage.base import StorageBackend

logger = logging.getLogger(__name__)

V = TypeVar("V")
P = TypeVar("P", bound="PostfixSource")

SAVE = "save"
SAVE_IF_NOT_EXIST = "save if not exist"
LOAD = "load"
DELETE = "delete"
IS_EXISTS = "is exists"

_DEFAULT: Any = object()


@runtime_checkable
class PostfixSource(Protocol):
    @property
    def key_postfix(self) -> Optional[str]: ...


@dataclass(frozen=True)
class Postfix:
    key_postfix: Optional[str] = None


NO_POSTFIX = Postfix()

PostfixLike = Union[PostfixSource, str, None]


def read_postfix(source: PostfixLike) -> Optional[str]:
    if source is None or isinstance(source, str):
        return source
    return source.key_postfix


class KeyAccessor(Generic[V, P]):
    """Save/load/delete values stored under one key, qualified per call by a postfix.

    Args:
        key: base key, fixed for the lifetime of the accessor.
        storage: backend; the process default (see ``storage_util.defaults``)
            when omitted.
        log_handler: receives one record per call. Omit it to use the process
            default, pass None to emit nothing.
        label: free-text tag shown in the accessor's identification info.
        value_type: expected type of stored values, forwarded to the backend
            on reads.
        file, line: override the recorded creation site.
    """

    def __init__(
        self,
        key: str,
        storage: Optional[StorageBackend] = None,
        log_handler: Optional[LogHandler] = _DEFAULT,
        label: Optional[str] = None,
        value_type: Optional[type] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self.key = key
        self.storage = storage if storage is not None else defaults.get_default_storage()
        self.value_type = value_type
        if log_handler is _DEFAULT:
            log_handler = defaults.get_default_log_handler()

        self.identification_info = IdentificationInfo.capture(
            type(self).__name__, label=label, extra=f"Key: {key}", file=file, line=line
        )
        self._lock = threading.Lock()
        self._logger: Logger[V] = Logger(
            Info(
                key_prefix=self.storage.key_prefix,
                key=key,
                storage=self.storage.identification_info,
                item=self.identification_info,
            ),
            log_handler,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, storage={self.storage.identification_info.type_description})"

    def _full_key(self, postfix_source: Union[P, str, None], details: Details[V]) -> str:
        details.key_postfix = read_postfix(postfix_source)
        return build_key(self.key, details.key_postfix)

    def save(self, value: V, postfix_source: Union[P, str, None] = None) -> bool:
        """Write `value`, replacing whatever is stored. Returns False on failure."""
        with self._lock:
            details: Details[V] = Details(SAVE, new_value=value)
            try:
                old_value = self.storage.save(self._full_key(postfix_source, details), value)
                details.old_value = old_value
                details.existance = old_value is not None
                return True
            except Exception as e:
                details.error = classify_error(e)
                return False
            finally:
                self._logger.log(details)

    def save_if_not_exist(self, value: V, postfix_source: Union[P, str, None] = None) -> bool:
        """Write `value` only when nothing is stored yet.

        Returns True both when the value was written and when an existing value
        was preserved. A failed read counts as "nothing stored", so a transient
        read error leads to an overwrite attempt.
        """
        with self._lock:
            details: Details[V] = Details(SAVE_IF_NOT_EXIST)
            try:
                full_key = self._full_key(postfix_source, details)
                try:
                    existing = self.storage.load(full_key, self.value_type)
                except Exception as e:
                    logger.debug("Read of %s failed, treating as absent: %s", full_key, e)
                    existing = None

                if existing is not None:
                    details.old_value = existing
                    details.existance = True
                    details.comment = "old value preserved"
                    return True

                details.new_value = value
                old_value = self.storage.save(full_key, value)
                details.old_value = old_value
                details.existance = old_value is not None
                details.comment = "value saved"
                return True
            except Exception as e:
                details.error = classify_error(e)
                return False
            finally:
                self._logger.log(details)

    def load(self, postfix_source: Union[P, str, None] = None) -> Optional[V]:
        """Return the stored value, or None when absent or unreadable."""
        with self._lock:
            details: Details[V] = Details(LOAD)
            try:
                value = self.storage.load(self._full_key(postfix_source, details), self.value_type)
                details.old_value = value
                details.existance = value is not None
                return value
            except Exception as e:
                details.existance = False
                details.error = classify_error(e)
                return None
            finally:
                self._logger.log(details)

    def delete(self, postfix_source: Union[P, str, None] = None) -> None:
        """Remove the stored value. Failures only show up in the log record."""
        with self._lock:
            details: Details[V] = Details(DELETE)
            try:
                value = self.storage.delete(self._full_key(postfix_source, details), self.value_type)
                details.old_value = value
                details.existance = value is not None
            except Exception as e:
                details.error = classify_error(e)
            finally:
                self._logger.log(details)

    def is_exists(self, postfix_source: Union[P, str, None] = None) -> bool:
        """Whether a value is stored. A failed read reports False, like `load`."""
        with self._lock:
            details: Details[V] = Details(IS_EXISTS)
            try:
                value = self.storage.load(self._full_key(postfix_source, details), self.value_type)
                details.old_value = value
                details.existance = value is not None
                return value is not None
            except Exception as e:
                details.existance = False
                details.error = classify_error(e)
                return False
            finally:
                self._logger.log(details)


class SimpleAccessor(Generic[V]):
    """Accessor for a key that never takes a postfix."""

    def __init__(
        self,
        key: str,
        storage: Optional[StorageBackend] = None,
        log_handler: Optional[LogHandler] = _DEFAULT,
        label: Optional[str] = None,
        value_type: Optional[type] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self._accessor: KeyAccessor[V, Postfix] = KeyAccessor(
            key, storage, log_handler, label, value_type, file, line
        )

    @property
    def key(self) -> str:
        return self._accessor.key

    @property
    def storage(self) -> StorageBackend:
        return self._accessor.storage

    @property
    def identification_info(self) -> IdentificationInfo:
        return self._accessor.identification_info

    def save(self, value: V) -> bool:
        return self._accessor.save(value, NO_POSTFIX)

    def save_if_not_exist(self, value: V) -> bool:
        return self._accessor.save_if_not_exist(value, NO_POSTFIX)

    def load(self) -> Optional[V]:
        return self._accessor.load(NO_POSTFIX)

    def delete(self) -> None:
        self._accessor.delete(NO_POSTFIX)

    def is_exists(self) -> bool:
        return self._accessor.is_exists(NO_POSTFIX)
