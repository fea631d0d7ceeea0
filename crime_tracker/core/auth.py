from __future__ import annotations

import logging

from .hashing import hash_password, verify_password
from .models import Database, Officer, Session
from .storage import DatabaseStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 4


class AuthError(RuntimeError):
    """Raised when a login attempt is rejected."""


class OfficerNotFound(AuthError):
    def __init__(self, username: str) -> None:
        super().__init__("No such officer.")
        self.username = username


class WrongPassword(AuthError):
    def __init__(self, username: str) -> None:
        super().__init__("Wrong password.")
        self.username = username


class ValidationError(ValueError):
    """Raised when a registration request is rejected."""


class EmptyUsername(ValidationError):
    def __init__(self) -> None:
        super().__init__("Username cannot be empty.")


class DuplicateUsername(ValidationError):
    def __init__(self, username: str) -> None:
        super().__init__("Username already exists.")
        self.username = username


class PasswordTooShort(ValidationError):
    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password too short (min {min_length} chars).")
        self.min_length = min_length


class AuthService:
    """Officer login and registration against the in-memory database."""

    def __init__(
        self,
        database: Database,
        store: DatabaseStore,
        *,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        admin_username: str = "admin",
        admin_password: str = "admin",
    ) -> None:
        self._database = database
        self._store = store
        self._min_password_length = min_password_length
        self._admin_username = admin_username
        self._admin_password = admin_password

    def bootstrap(self) -> Officer | None:
        """Create the default admin account when none exists. Returns it if it was created."""
        if self._database.find_officer(self._admin_username) is not None:
            return None

        officer = Officer(
            username=self._admin_username,
            password_hash=hash_password(self._admin_password),
        )
        self._database.officers.append(officer)
        self._store.save(self._database)
        logger.info("Default admin account %r created with the default password", self._admin_username)
        return officer

    def login(self, session: Session, username: str, password: str) -> Officer:
        username = username.strip()
        officer = self._database.find_officer(username)
        if officer is None:
            logger.info("Login failed: unknown officer %r", username)
            raise OfficerNotFound(username)
        if not verify_password(password, officer.password_hash):
            logger.info("Login failed: wrong password for %r", officer.username)
            raise WrongPassword(officer.username)

        session.officer = officer
        logger.info("Officer %r logged in", officer.username)
        return officer

    def check_username(self, username: str) -> str:
        username = username.strip()
        if not username:
            raise EmptyUsername()
        if self._database.find_officer(username) is not None:
            raise DuplicateUsername(username)
        return username

    def register(self, username: str, password: str) -> Officer:
        username = self.check_username(username)
        if len(password) < self._min_password_length:
            raise PasswordTooShort(self._min_password_length)

        officer = Officer(username=username, password_hash=hash_password(password))
        self._database.officers.append(officer)
        self._store.save(self._database)
        logger.info("Registered officer %r", officer.username)
        return officer

    def logout(self, session: Session) -> None:
        if session.officer is not None:
            logger.info("Officer %r logged out", session.officer.username)
        session.clear()
