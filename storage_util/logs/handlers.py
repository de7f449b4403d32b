from __future__ import annotations
import logging
from typing import Optional

from .formatter import RecordFormatter, SingleLineFormatter
from .logger import LogHandler
from .record import LogRecord

RECORDS_LOGGER = "storage_util.records"

logger = logging.getLogger(__name__)


class LoggingHandler:
    """Formats records and emits them through stdlib logging.

    Records carrying an error are emitted at `error_level` so failed
    operations stand out from absent values.
    """

    def __init__(
        self,
        formatter: Optional[RecordFormatter] = None,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
        error_level: int = logging.WARNING,
    ) -> None:
        self.formatter = formatter or SingleLineFormatter()
        self.logger = logger or logging.getLogger(RECORDS_LOGGER)
        self.level = level
        self.error_level = error_level

    def handle(self, record: LogRecord) -> None:
        level = self.error_level if record.details.error is not None else self.level
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, self.formatter.format(record))


class MultiHandler:
    """Fans a record out to several handlers; one failing does not stop the rest."""

    def __init__(self, *handlers: LogHandler) -> None:
        self.handlers = list(handlers)

    def handle(self, record: LogRecord) -> None:
        for handler in self.handlers:
            try:
                handler.handle(record)
            except Exception:
                logger.exception("Handler %r failed for %s", handler, record.full_key)
