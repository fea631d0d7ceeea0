from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from .json_store import JsonFileStore, StoreReadError, StoreWriteError
from .models import CrimeRecord, Database, Officer

logger = logging.getLogger(__name__)

FORMAT_TAG = "crime-tracker"
SCHEMA_VERSION = 1

_HASH_PATTERN = re.compile(r"[0-9a-f]{64}")


class LoadStatus(enum.Enum):
    LOADED = "loaded"
    MISSING = "missing"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class LoadResult:
    database: Database
    status: LoadStatus
    error: str | None = None
    backup_path: Path | None = None


class DatabaseStore:
    """Whole-file persistence for the officer list and crime records."""

    def __init__(self, db_path: Path, clock: Callable[[], datetime] = datetime.now) -> None:
        self._json = JsonFileStore(db_path)
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._json.path

    def load(self) -> LoadResult:
        if not self._json.exists():
            logger.info("No data file at %s, starting with an empty database", self.path)
            return LoadResult(database=Database(), status=LoadStatus.MISSING)

        try:
            payload = self._json.read(None)
            database = Database() if payload is None else self._decode(payload)
        except StoreReadError as exc:
            return self._unreadable(str(exc))

        logger.info(
            "Loaded %d officer(s) and %d record(s) from %s",
            len(database.officers),
            len(database.crimes),
            self.path,
        )
        return LoadResult(database=database, status=LoadStatus.LOADED)

    def save(self, database: Database) -> bool:
        try:
            self._json.write(self._encode(database))
        except StoreWriteError as exc:
            logger.error("Failed to save database: %s", exc)
            return False
        logger.debug("Saved database to %s", self.path)
        return True

    def _unreadable(self, error: str) -> LoadResult:
        logger.warning("Failed to load database, starting fresh: %s", error)
        backup_path = None
        try:
            backup_path = self._json.move_aside(f"corrupt-{self._clock().strftime('%Y%m%d%H%M%S')}")
        except StoreWriteError as exc:
            logger.error("Unreadable data file was left in place and will be overwritten: %s", exc)
        else:
            logger.warning("Unreadable data file kept at %s", backup_path)
        return LoadResult(
            database=Database(),
            status=LoadStatus.UNREADABLE,
            error=error,
            backup_path=backup_path,
        )

    def _encode(self, database: Database) -> dict:
        return {
            "format": FORMAT_TAG,
            "version": SCHEMA_VERSION,
            "officers": [
                {"username": officer.username, "password_hash": officer.password_hash}
                for officer in database.officers
            ],
            "crimes": [self._encode_crime(record) for record in database.crimes],
        }

    def _encode_crime(self, record: CrimeRecord) -> dict:
        return {
            "id": record.id,
            "offender_name": record.offender_name,
            "crime_type": record.crime_type,
            "description": record.description,
            "police_in_charge": record.police_in_charge,
            "punishment": record.punishment,
            "reported_at": record.reported_at.isoformat(),
        }

    def _decode(self, payload: object) -> Database:
        if not isinstance(payload, dict):
            raise StoreReadError(f"{self.path} does not contain a JSON object")
        if payload.get("format") != FORMAT_TAG:
            raise StoreReadError(f"{self.path} is not a crime tracker data file")
        version = payload.get("version")
        if not isinstance(version, int) or version < 1 or version > SCHEMA_VERSION:
            raise StoreReadError(f"Unsupported data file version: {version!r}")

        try:
            officers = [self._to_officer(entry) for entry in payload.get("officers", [])]
            crimes = [self._to_crime(entry) for entry in payload.get("crimes", [])]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreReadError(f"Malformed entry in {self.path}: {exc!r}") from exc

        usernames = [officer.username.casefold() for officer in officers]
        if len(set(usernames)) != len(usernames):
            raise StoreReadError(f"Duplicate officer username in {self.path}")
        if len({record.id for record in crimes}) != len(crimes):
            raise StoreReadError(f"Duplicate crime record id in {self.path}")
        return Database(officers=officers, crimes=crimes)

    def _to_officer(self, entry: dict) -> Officer:
        password_hash = _text(entry, "password_hash")
        if not _HASH_PATTERN.fullmatch(password_hash):
            raise ValueError(f"password_hash is not a sha256 hex digest: {password_hash!r}")
        return Officer(username=_text(entry, "username"), password_hash=password_hash)

    def _to_crime(self, entry: dict) -> CrimeRecord:
        return CrimeRecord(
            id=_text(entry, "id"),
            offender_name=_text(entry, "offender_name"),
            crime_type=_text(entry, "crime_type"),
            description=_text(entry, "description"),
            police_in_charge=_text(entry, "police_in_charge"),
            punishment=_text(entry, "punishment"),
            reported_at=datetime.fromisoformat(_text(entry, "reported_at")),
        )


def _text(entry: dict, key: str) -> str:
    value = entry[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value
