from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

UNKNOWN_OFFENDER = "Unknown"
UNSPECIFIED_CRIME = "Unspecified"
PENDING_PUNISHMENT = "Pending"


@dataclass(frozen=True)
class Officer:
    username: str
    password_hash: str  # sha256 hex digest

    def matches(self, username: str) -> bool:
        return self.username.casefold() == username.casefold()


@dataclass(frozen=True)
class CrimeRecord:
    id: str
    offender_name: str
    crime_type: str
    description: str
    police_in_charge: str  # username of the responsible officer
    punishment: str  # Pending | Arrest | Fine | ...
    reported_at: datetime

    def as_text(self) -> str:
        lines = [
            f"ID: {self.id}",
            f"Offender: {self.offender_name}",
            f"Crime Type: {self.crime_type}",
            f"Description: {self.description}",
            f"Police in charge: {self.police_in_charge}",
            f"Punishment: {self.punishment}",
            f"Reported At: {self.reported_at.strftime('%Y-%m-%d %H:%M')}",
            "---------------------------",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class PunishmentEntry:
    id: str
    offender_name: str
    punishment: str

    def as_text(self) -> str:
        return f"ID: {self.id} | Offender: {self.offender_name} | Punishment: {self.punishment}"


@dataclass
class Database:
    """Everything that gets persisted: officers and crime records, in insertion order."""

    officers: list[Officer] = field(default_factory=list)
    crimes: list[CrimeRecord] = field(default_factory=list)

    def find_officer(self, username: str) -> Officer | None:
        for officer in self.officers:
            if officer.matches(username):
                return officer
        return None


@dataclass
class Session:
    officer: Officer | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.officer is not None

    def clear(self) -> None:
        self.officer = None
