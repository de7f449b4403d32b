from .formatter import JSONFormatter, RecordFormatter, SingleLineFormatter
from .handlers import LoggingHandler, MultiHandler
from .logger import LogHandler, Logger
from .record import Details, Info, LogRecord

__all__ = [
    "Details",
    "Info",
    "LogRecord",
    "LogHandler",
    "Logger",
    "RecordFormatter",
    "SingleLineFormatter",
    "JSONFormatter",
    "LoggingHandler",
    "MultiHandler",
]
