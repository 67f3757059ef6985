"""
JSON file record store.

Every piece of persisted state (users, results, question sets) is a
JSON array of objects kept in its own document.  Documents are
addressed by a slash separated ``name`` such as ``"users"``,
``"results/all_results"`` or ``"questions/chapter_1"``; the file
implementation maps a name to ``<base_dir>/<name>.json``.

The store knows nothing about the records it holds.  Callers load the
whole sequence, transform it and save the whole sequence back.  Use
``update`` for read-modify-write cycles: it holds a per-document lock
for the entire cycle so that concurrent writers in one process cannot
lose each other's changes.  Separate processes sharing the same files
are not coordinated; the last save wins.

``get_store`` returns the process wide store.  Tests install an
``InMemoryStore`` (or a file store rooted in a temporary directory)
with ``set_store``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .config import settings
from .exceptions import ParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")
Record = Dict[str, Any]


class RecordStore:
    """Load-all/save-all access to named JSON array documents."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # Storage primitives implemented by subclasses

    def _read(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, name: str, text: str) -> None:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def names(self, folder: str) -> List[str]:
        """Return the sorted document names stored directly under ``folder``.

        Names are returned without the folder prefix, e.g. ``names("questions")``
        gives ``["chapter_1", "mock_2"]``.
        """
        raise NotImplementedError

    # Public API

    def load(self, name: str) -> List[Record]:
        """Return the records of ``name``, or an empty list if it does not exist.

        Raises ``ParseError`` if the document exists but is not a JSON
        array.
        """
        text = self._read(name)
        if text is None:
            return []
        return self._decode(name, text)

    def save(self, name: str, records: List[Record]) -> None:
        """Replace the contents of ``name`` with ``records``."""
        text = json.dumps(list(records), indent=2, ensure_ascii=False)
        with self.lock(name):
            self._write(name, text)

    def update(self, name: str, fn: Callable[[List[Record]], T]) -> T:
        """Run a locked read-modify-write cycle on ``name``.

        ``fn`` receives the loaded list, mutates it in place and returns
        the value handed back to the caller.  If ``fn`` raises, nothing
        is written.
        """
        with self.lock(name):
            records = self.load(name)
            result = fn(records)
            self.save(name, records)
            return result

    def lock(self, name: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.RLock()
            return lock

    @staticmethod
    def _decode(name: str, text: str) -> List[Record]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Stored data for '{name}' is corrupt: {exc}") from exc
        if not isinstance(data, list):
            raise ParseError(f"Stored data for '{name}' is not a list")
        return data


class JsonFileStore(RecordStore):
    """Record store backed by ``.json`` files below ``base_dir``."""

    def __init__(self, base_dir: str | os.PathLike) -> None:
        super().__init__()
        self.base_dir = Path(base_dir).resolve()

    def path_for(self, name: str) -> Path:
        path = (self.base_dir / f"{name}.json").resolve()
        if self.base_dir not in path.parents:
            raise ValueError(f"Invalid document name: {name!r}")
        return path

    def _read(self, name: str) -> Optional[str]:
        path = self.path_for(name)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()

    def _write(self, name: str, text: str) -> None:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and swap it in so readers never
        # see a half written document.
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def names(self, folder: str) -> List[str]:
        directory = self.base_dir / folder
        if not directory.is_dir():
            return []
        return sorted(p.stem for p in directory.glob("*.json") if p.is_file())


class InMemoryStore(RecordStore):
    """Record store that keeps serialised documents in a dictionary.

    Documents are stored as JSON text so that parse failures behave the
    same way as with files.  ``put_raw`` lets tests plant corrupt data.
    """

    def __init__(self) -> None:
        super().__init__()
        self._documents: Dict[str, str] = {}

    def put_raw(self, name: str, text: str) -> None:
        self._documents[name] = text

    def raw(self, name: str) -> Optional[str]:
        return self._documents.get(name)

    def _read(self, name: str) -> Optional[str]:
        return self._documents.get(name)

    def _write(self, name: str, text: str) -> None:
        self._documents[name] = text

    def exists(self, name: str) -> bool:
        return name in self._documents

    def names(self, folder: str) -> List[str]:
        prefix = folder.rstrip("/") + "/"
        return sorted(
            key[len(prefix):]
            for key in self._documents
            if key.startswith(prefix) and "/" not in key[len(prefix):]
        )


_store: Optional[RecordStore] = None


def get_store() -> RecordStore:
    """Return the process wide store, creating a file store on first use."""
    global _store
    if _store is None:
        _store = JsonFileStore(settings.data_dir)
    return _store


def set_store(store: Optional[RecordStore]) -> None:
    """Install ``store`` as the process wide store (``None`` resets it)."""
    global _store
    _store = store


def init_storage() -> None:
    """Create the data and upload folders and install the file store.

    Called on application startup.  Existing stores installed through
    ``set_store`` are left in place.
    """
    data_dir = Path(settings.data_dir)
    for directory in (data_dir, data_dir / "questions", data_dir / "results", Path(settings.upload_dir)):
        directory.mkdir(parents=True, exist_ok=True)
    store = get_store()
    logger.info("Record store ready (%s)", getattr(store, "base_dir", type(store).__name__))


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with milliseconds and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_record_id(prefix: str, records: List[Record]) -> str:
    """Return ``<prefix>_<epoch ms>``, suffixed when that id is already taken."""
    base = f"{prefix}_{int(time.time() * 1000)}"
    taken = {r.get("id") for r in records}
    candidate, n = base, 1
    while candidate in taken:
        candidate = f"{base}_{n}"
        n += 1
    return candidate
