"""Renderers turning a LogRecord into one line of text.

Formatters are interchangeable; the accessor never depends on any of them.
"""
from __future__ import annotations
import json
from typing import Protocol

from .record import LogRecord

SEPARATOR = " | "


class RecordFormatter(Protocol):
    def format(self, record: LogRecord) -> str: ...


class SingleLineFormatter:
    """`key | OPERATION | true/false | new | old [| comment] [| ERROR: ...]`."""

    def format(self, record: LogRecord) -> str:
        d = record.details
        parts = [
            record.full_key,
            d.operation.upper(),
            str(d.existance).lower() if d.existance is not None else "Not exist",
            str(d.new_value) if d.new_value is not None else "nil",
            str(d.old_value) if d.old_value is not None else "nil",
        ]
        if d.comment is not None:
            parts.append(d.comment)
        if d.error is not None:
            parts.append(f"ERROR: {d.error}")
        return SEPARATOR.join(parts)


class JSONFormatter:
    """One JSON object per record; values fall back to `str()`."""

    def format(self, record: LogRecord) -> str:
        return json.dumps(record.as_dict(), default=str, sort_keys=True)
