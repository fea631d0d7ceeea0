from __future__ import annotations

import getpass
import io
import sys
from typing import TextIO


class InvalidInput(ValueError):
    """Raised when a console line cannot be decoded."""

    def __init__(self) -> None:
        super().__init__("Invalid input.")


def _printable(text: str) -> str:
    # Lone surrogates (undecodable bytes under surrogateescape) become "?".
    return text.encode("utf-8", "replace").decode("utf-8")


class LineReader:
    """Reads one line of console input per prompt, echoing everything."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        if isinstance(self._stdin, io.TextIOWrapper):
            self._stdin.reconfigure(errors="replace")

    def read_line(self, prompt: str) -> str:
        self._stdout.write(prompt)
        self._stdout.flush()
        try:
            line = self._stdin.readline()
        except UnicodeDecodeError as exc:
            raise InvalidInput() from exc
        if not line:
            raise EOFError
        return _printable(line.rstrip("\r\n"))

    def read_secret(self, prompt: str) -> str:
        return self.read_line(prompt)


class MaskedLineReader(LineReader):
    """Like LineReader, but passwords are not echoed when stdin is a terminal."""

    def read_secret(self, prompt: str) -> str:
        if not self._stdin.isatty():
            return super().read_secret(prompt)
        try:
            secret = getpass.getpass(prompt, stream=self._stdout)
        except UnicodeDecodeError as exc:
            raise InvalidInput() from exc
        return _printable(secret)
