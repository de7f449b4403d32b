"""Simple file-backed storage backend.

This backend stores one serialized value per storage key under
`<data_dir>/<quoted storage key><serializer extension>`, with the key
percent-encoded so distinct keys never share a file. It provides atomic writes by
writing to a temporary file then renaming.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any, Optional
from urllib.parse import quote

from storage_util.errors import StorageError, StorageErrorKind

from .base import StorageBackend, coerce_value
from .serializer import PickleSerializer, Serializer

logger = logging.getLogger(__name__)


class FileStorage(StorageBackend):
    def __init__(
        self,
        data_dir: str | Path = "./data",
        key_prefix: str = "",
        serializer: Optional[Serializer] = None,
        label: Optional[str] = None,
    ) -> None:
        super().__init__(key_prefix, label)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.serializer = serializer or PickleSerializer()
        self._lock = RLock()

    def _path_for(self, key: str) -> Path:
        safe_key = quote(self.storage_key(key), safe=":")
        return self.data_dir / f"{safe_key}{self.serializer.extension}"

    def _read(self, path: Path, key: str) -> Optional[Any]:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(StorageErrorKind.IO, str(e), key) from e
        try:
            return self.serializer.load(data)
        except Exception as e:
            raise StorageError(StorageErrorKind.DECODING, str(e), key) from e

    def save(self, key: str, value: Any) -> Optional[Any]:
        try:
            data = self.serializer.dump(value)
        except Exception as e:
            raise StorageError(StorageErrorKind.ENCODING, str(e), key) from e

        path = self._path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with self._lock:
            try:
                previous = self._read(path, key)
            except StorageError as e:
                # Unreadable leftovers must not block the overwrite.
                logger.warning("Replacing unreadable value at %s: %s", path, e)
                previous = None
            try:
                with open(tmp, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                tmp.replace(path)
            except OSError as e:
                try:
                    tmp.unlink(missing_ok=True)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp)
                raise StorageError(StorageErrorKind.IO, str(e), key) from e
        logger.debug("FileStorage wrote %s (%d bytes)", path, len(data))
        return previous

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        with self._lock:
            value = self._read(self._path_for(key), key)
        return coerce_value(value, value_type, key)

    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]:
        path = self._path_for(key)
        with self._lock:
            value = coerce_value(self._read(path, key), value_type, key)
            if value is None:
                return None
            try:
                path.unlink()
            except FileNotFoundError:
                return None
            except OSError as e:
                raise StorageError(StorageErrorKind.IO, str(e), key) from e
        return value
