"""Document Store: in-memory resource collections mirrored to a JSON file.

Invariants:
    - load() swaps the whole mapping only after a complete, valid parse;
      a failed load leaves the previous data untouched
    - persist() is a no-op when read-only; otherwise the file equals a
      serialization of the in-memory data after it returns
    - get() returns the LIVE list, so handlers always see current state
    - The recorded file stamp tracks our own writes, so a persist is not
      mistaken for an external edit by the watcher

Design Decisions:
    - One store object per app, passed by handle (app.state), no module global
    - Temp file + os.replace: readers never see a half-written file
    - Synchronous file IO inside handlers keeps mutation + persist atomic
      with respect to other requests on the event loop
"""

import json
import logging
import os
from pathlib import Path

from mockapi.core.domain_types import Collection, StoreData
from mockapi.core.errors import DataFileError, PersistError
from mockapi.core.records import parse_json

logger = logging.getLogger(__name__)


class DocumentStore:
    """Owns the resource name → records mapping for one running server."""

    def __init__(self, path: str | os.PathLike, readonly: bool = False):
        self.path = Path(path)
        self.readonly = readonly
        self._data: StoreData = {}
        self._stamp: tuple[int, int] | None = None

    def load(self) -> None:
        """Read and parse the backing file. Raises DataFileError."""
        text, stamp = self.read_file()
        self.apply(text, stamp)

    def read_file(self) -> tuple[str, tuple[int, int] | None]:
        """Raw file text plus its stamp. Safe to run off the event loop."""
        if not self.path.is_file():
            raise DataFileError(f"Data file not found: {self.path}", str(self.path))
        try:
            stamp = self._current_stamp()
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DataFileError(
                f"Cannot read data file {self.path}: {e}", str(self.path),
            ) from e
        return text, stamp

    def apply(self, text: str, stamp: tuple[int, int] | None = None) -> None:
        """Parse file text and swap it in. Raises DataFileError."""
        data = parse_store(text, str(self.path))
        self._data = data
        self._stamp = stamp

    def persist(self) -> None:
        """Overwrite the backing file with the current data. Raises PersistError."""
        if self.readonly:
            return
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp.write_text(serialize_store(self._data), encoding="utf-8")
            os.replace(tmp, self.path)
            self._stamp = self._current_stamp()
            logger.debug(f"Persisted {self.path}", extra={"data_file": str(self.path)})
        except (OSError, ValueError) as e:
            raise PersistError(str(e), str(self.path)) from e

    def get(self, resource: str) -> Collection:
        return self._data.get(resource, [])

    def set(self, resource: str, records: Collection) -> None:
        self._data[resource] = records

    def resources(self) -> list[str]:
        """Resource names in file order."""
        return list(self._data)

    def file_stamp(self) -> tuple[int, int] | None:
        """(mtime_ns, size) of the backing file, None when it is gone."""
        try:
            return self._current_stamp()
        except OSError:
            return None

    def changed_on_disk(self) -> bool:
        """True when the file stamp differs from the last load/persist."""
        return self.file_stamp() != self._stamp

    def _current_stamp(self) -> tuple[int, int]:
        stat = self.path.stat()
        return stat.st_mtime_ns, stat.st_size


def parse_store(text: str, path: str) -> StoreData:
    """Parse a data file body into resource collections. Raises DataFileError."""
    try:
        raw = parse_json(text)
    except ValueError as e:
        raise DataFileError(f"Invalid JSON in {path}: {e}", path) from e
    if not isinstance(raw, dict):
        raise DataFileError(
            f"{path} must contain an object of resource collections", path,
        )
    for name, records in raw.items():
        if not isinstance(records, list) or not all(
            isinstance(r, dict) for r in records
        ):
            raise DataFileError(
                f"Resource '{name}' in {path} must be a list of objects", path,
            )
    return raw


def serialize_store(data: StoreData) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
