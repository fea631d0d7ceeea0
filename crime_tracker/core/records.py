from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import uuid4

from .models import (
    PENDING_PUNISHMENT,
    UNKNOWN_OFFENDER,
    UNSPECIFIED_CRIME,
    CrimeRecord,
    Database,
    PunishmentEntry,
    Session,
)
from .storage import DatabaseStore

logger = logging.getLogger(__name__)


class NotAuthenticated(RuntimeError):
    """Raised when a record is created without a logged-in officer."""


class RecordService:
    """Creates crime records and answers the listing and search queries."""

    def __init__(
        self,
        database: Database,
        store: DatabaseStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._database = database
        self._store = store
        self._clock = clock

    def add_crime(
        self,
        session: Session,
        *,
        offender_name: str = "",
        crime_type: str = "",
        description: str = "",
        police_in_charge: str = "",
        punishment: str = "",
    ) -> CrimeRecord:
        if session.officer is None:
            raise NotAuthenticated("Login required to record a crime.")

        record = CrimeRecord(
            id=str(uuid4()),
            offender_name=offender_name.strip() or UNKNOWN_OFFENDER,
            crime_type=crime_type.strip() or UNSPECIFIED_CRIME,
            description=description.strip(),
            police_in_charge=police_in_charge.strip() or session.officer.username,
            punishment=punishment.strip() or PENDING_PUNISHMENT,
            reported_at=self._clock(),
        )
        self._database.crimes.append(record)
        self._store.save(self._database)
        logger.info("Officer %r recorded crime %s", session.officer.username, record.id)
        return record

    def list_all(self) -> list[CrimeRecord]:
        return sorted(self._database.crimes, key=lambda record: record.reported_at)

    def search_by_offender(self, query: str) -> list[CrimeRecord]:
        needle = query.strip().casefold()
        return [record for record in self._database.crimes if needle in record.offender_name.casefold()]

    def list_punishments(self) -> list[PunishmentEntry]:
        return [
            PunishmentEntry(id=record.id, offender_name=record.offender_name, punishment=record.punishment)
            for record in self._database.crimes
        ]
