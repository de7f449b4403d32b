"""Diagnostic identity attached to accessors and backends.

The values here only end up in log records; nothing branches on them.
"""
from __future__ import annotations
import inspect
import itertools
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

_PACKAGE_DIR = Path(__file__).resolve().parent

_instance_counter = itertools.count(1)
_counter_lock = threading.Lock()


def _next_instance() -> int:
    with _counter_lock:
        return next(_instance_counter)


def caller_site() -> Tuple[str, int]:
    """Return ``(file, line)`` of the nearest frame outside this package."""
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = frame.f_code.co_filename
            if not Path(filename).resolve().is_relative_to(_PACKAGE_DIR):
                return filename, frame.f_lineno
            frame = frame.f_back
        return "<unknown>", 0
    finally:
        del frame


@dataclass(frozen=True)
class IdentificationInfo:
    type_name: str
    file: str
    line: int
    label: Optional[str] = None
    extra: Optional[str] = None
    instance: int = field(default_factory=_next_instance)

    @property
    def type_description(self) -> str:
        if self.label:
            return f"{self.type_name}({self.label})"
        return self.type_name

    @classmethod
    def capture(
        cls,
        type_name: str,
        *,
        label: Optional[str] = None,
        extra: Optional[str] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ) -> "IdentificationInfo":
        """Build an info for an object created right now.

        The creation site defaults to the first caller outside ``storage_util``.
        """
        if file is None or line is None:
            site_file, site_line = caller_site()
            file = site_file if file is None else file
            line = site_line if line is None else line
        return cls(type_name=type_name, file=file, line=line, label=label, extra=extra)

    def __str__(self) -> str:
        parts = [f"{self.type_description}#{self.instance}", f"{Path(self.file).name}:{self.line}"]
        if self.extra:
            parts.append(self.extra)
        return " ".join(parts)
