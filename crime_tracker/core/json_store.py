from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Base class for failures reading or writing the data file."""


class StoreReadError(PersistenceError):
    """Raised when the data file exists but cannot be read or parsed."""


class StoreWriteError(PersistenceError):
    """Raised when the data file cannot be written."""


class JsonFileStore:
    """A single JSON document on disk, always replaced as a whole."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path).expanduser().resolve()

    @property
    def path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.exists()

    def read(self, default: Any) -> Any:
        if not self._file_path.exists():
            return default
        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"Cannot read {self._file_path}: {exc}") from exc
        if not raw.strip():
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreReadError(f"{self._file_path} is not valid JSON: {exc}") from exc

    def write(self, value: Any) -> None:
        directory = self._file_path.parent
        tmp_name = None
        try:
            payload = json.dumps(value, indent=2, ensure_ascii=False)
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._file_path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._file_path)
        except (OSError, ValueError) as exc:
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StoreWriteError(f"Cannot write {self._file_path}: {exc}") from exc

    def move_aside(self, suffix: str) -> Path:
        target = self._file_path.with_name(f"{self._file_path.name}.{suffix}")
        try:
            self._file_path.replace(target)
        except OSError as exc:
            raise StoreWriteError(f"Cannot move {self._file_path} to {target}: {exc}") from exc
        logger.info("Moved %s to %s", self._file_path, target)
        return target
