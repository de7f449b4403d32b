from __future__ import annotations
import logging
from typing import Generic, Optional, Protocol, TypeVar, runtime_checkable

from .record import Details, Info, LogRecord

logger = logging.getLogger(__name__)

V = TypeVar("V")


@runtime_checkable
class LogHandler(Protocol):
    """Receives finished records synchronously, inside the calling operation.

    Handlers should not raise; `Logger` reports anything that escapes anyway.
    """

    def handle(self, record: LogRecord) -> None: ...


class Logger(Generic[V]):
    """Binds correlation info and forwards records to a handler."""

    def __init__(self, info: Info, log_handler: Optional[LogHandler] = None) -> None:
        self.info = info
        self.log_handler = log_handler

    def log(self, details: Details[V]) -> None:
        if self.log_handler is None:
            return
        record = LogRecord(info=self.info, details=details)
        try:
            self.log_handler.handle(record)
        except Exception:
            logger.exception("Log handler %r failed for %s", self.log_handler, record.full_key)
