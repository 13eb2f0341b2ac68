"""
Key-Value Backends
==================

Blob storage behind the profile store.

    - KeyValueBackend: Protocol (read/write a string blob by key)
    - JsonFileBackend: One JSON file per key in a directory
    - InMemoryBackend: Dict-backed, for tests and ephemeral runs

Backends may raise on failure (OSError etc.). The ProfileStore turns
every failure into a report, never a crash.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol


logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Protocol for blob persistence."""

    def read(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None if absent."""
        ...

    def write(self, key: str, blob: str) -> None:
        """Store blob under key, replacing any previous value."""
        ...


class JsonFileBackend:
    """
    Stores each key as `<directory>/<key>.json`.

    Writes go to a temporary file in the same directory followed by an
    atomic rename, so a reader never observes a partial blob.
    """

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory).expanduser()
        logger.info(f"JsonFileBackend initialized: directory={self.directory}")

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, blob: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class InMemoryBackend:
    """Dict-backed backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, blob: str) -> None:
        self._data[key] = blob
        self.write_count += 1
