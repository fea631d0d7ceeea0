from __future__ import annotations

import enum
import logging
import sys
from typing import Callable, TextIO

from ..core.auth import AuthError, AuthService, ValidationError
from ..core.models import Session
from ..core.records import RecordService
from .line_reader import InvalidInput, LineReader

logger = logging.getLogger(__name__)

EXIT_OK = 0


class Action(enum.Enum):
    CONTINUE = "continue"
    EXIT = "exit"


class Shell:
    """Menu loop. Holds the session; never exits the process itself."""

    def __init__(
        self,
        auth: AuthService,
        records: RecordService,
        reader: LineReader,
        stdout: TextIO | None = None,
    ) -> None:
        self._auth = auth
        self._records = records
        self._reader = reader
        self._stdout = stdout or sys.stdout
        self.session = Session()
        self._logged_out_menu: dict[str, Callable[[], Action]] = {
            "1": self._on_login,
            "2": self._on_register,
            "3": self._on_exit,
        }
        self._logged_in_menu: dict[str, Callable[[], Action]] = {
            "1": self._on_add_crime,
            "2": self._on_view_all,
            "3": self._on_search,
            "4": self._on_view_punishments,
            "5": self._on_logout,
            "6": self._on_exit,
        }

    def run(self) -> int:
        self._println("=== Crime Tracking Information System ===")
        while True:
            try:
                action = self.step()
            except EOFError:
                self._println("")
                action = self._on_exit()
            except InvalidInput as exc:
                self._println(str(exc))
                action = Action.CONTINUE
            if action is Action.EXIT:
                return EXIT_OK

    def step(self) -> Action:
        if self.session.is_authenticated:
            menu = self._logged_in_menu
            self._println(f"\nLogged in as: {self.session.officer.username}")
            self._println("1) Record a new crime")
            self._println("2) View all crime records")
            self._println("3) Search crimes by offender name")
            self._println("4) View punishments list")
            self._println("5) Logout")
            self._println("6) Exit")
        else:
            menu = self._logged_out_menu
            self._println("\n1) Login\n2) Register new officer\n3) Exit")

        choice = self._reader.read_line("Choose: ").strip()
        handler = menu.get(choice)
        if handler is None:
            logger.debug("Ignoring menu choice %r", choice)
            self._println("Invalid choice.")
            return Action.CONTINUE
        return handler()

    def _on_login(self) -> Action:
        username = self._reader.read_line("Username: ").strip()
        password = self._reader.read_secret("Password: ")
        try:
            officer = self._auth.login(self.session, username, password)
        except AuthError as exc:
            self._println(str(exc))
            return Action.CONTINUE
        self._println(f"Login successful. Welcome, {officer.username}!")
        return Action.CONTINUE

    def _on_register(self) -> Action:
        username = self._reader.read_line("Choose a username: ").strip()
        try:
            self._auth.check_username(username)
            password = self._reader.read_secret("Choose a password: ")
            self._auth.register(username, password)
        except ValidationError as exc:
            self._println(str(exc))
            return Action.CONTINUE
        self._println("Officer registered. You can now login.")
        return Action.CONTINUE

    def _on_add_crime(self) -> Action:
        self._println("\n--- Record New Crime ---")
        offender = self._reader.read_line("Offender name: ")
        crime_type = self._reader.read_line("Crime type (e.g., Theft, Assault): ")
        description = self._reader.read_line("Description: ")
        police_in_charge = self._reader.read_line("Police in charge (press Enter to use your username): ")
        punishment = self._reader.read_line("Punishment/Disposition (e.g., Arrest, Fine, Pending): ")

        record = self._records.add_crime(
            self.session,
            offender_name=offender,
            crime_type=crime_type,
            description=description,
            police_in_charge=police_in_charge,
            punishment=punishment,
        )
        self._println(f"Crime recorded with ID: {record.id}")
        return Action.CONTINUE

    def _on_view_all(self) -> Action:
        self._println("\n--- All Crime Records ---")
        records = self._records.list_all()
        if not records:
            self._println("No crime records found.")
            return Action.CONTINUE
        for record in records:
            self._println(record.as_text())
        return Action.CONTINUE

    def _on_search(self) -> Action:
        query = self._reader.read_line("Enter offender name to search (partial allowed): ").strip()
        found = self._records.search_by_offender(query)
        if not found:
            self._println(f"No records found for: {query.lower()}")
            return Action.CONTINUE
        self._println(f"{len(found)} record(s) found:")
        for record in found:
            self._println(record.as_text())
        return Action.CONTINUE

    def _on_view_punishments(self) -> Action:
        self._println("\n--- Punishments / Dispositions ---")
        entries = self._records.list_punishments()
        if not entries:
            self._println("No crime records.")
            return Action.CONTINUE
        for entry in entries:
            self._println(entry.as_text())
        return Action.CONTINUE

    def _on_logout(self) -> Action:
        self._auth.logout(self.session)
        self._println("Logged out.")
        return Action.CONTINUE

    def _on_exit(self) -> Action:
        if self.session.is_authenticated:
            self._println("Exiting... Saving database.")
        else:
            self._println("Exiting... Goodbye.")
        self.session.clear()
        return Action.EXIT

    def _println(self, text: str) -> None:
        self._stdout.write(text + "\n")
        self._stdout.flush()
