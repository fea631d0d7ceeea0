from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Sequence

from .config import LOG_LEVELS, Settings, settings as default_settings
from .core.auth import AuthService
from .core.records import RecordService
from .core.storage import DatabaseStore, LoadResult, LoadStatus
from .ui.line_reader import LineReader, MaskedLineReader
from .ui.shell import Shell

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: Settings) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_file = config.log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=5_000_000,
                backupCount=5,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=config.log_level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="crime-tracker",
        description="Console crime tracking system for a police station.",
    )
    parser.add_argument("--data-file", type=Path, help="path of the JSON data file")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="log verbosity")
    return parser.parse_args(argv)


def _describe_load(result: LoadResult) -> str:
    if result.status is LoadStatus.MISSING:
        return "No existing database found. A new database will be created."
    if result.status is LoadStatus.UNREADABLE:
        return f"Failed to load database. Starting fresh. Error: {result.error}"
    database = result.database
    return f"Database loaded ({len(database.officers)} officer(s), {len(database.crimes)} record(s))."


def run(config: Settings, reader: LineReader | None = None) -> int:
    store = DatabaseStore(config.data_file)
    result = store.load()
    print(_describe_load(result))
    if result.backup_path is not None:
        print(f"The unreadable file was moved to {result.backup_path}.")

    database = result.database
    auth = AuthService(
        database,
        store,
        min_password_length=config.min_password_length,
        admin_username=config.default_admin_username,
        admin_password=config.default_admin_password,
    )
    if auth.bootstrap() is not None:
        print(
            f"Default admin account created (username: {config.default_admin_username}, "
            f"password: {config.default_admin_password}). Please change ASAP."
        )

    shell = Shell(auth, RecordService(database, store), reader or MaskedLineReader())
    exit_code = shell.run()
    if not store.save(database):
        print("Failed to save database on exit.")
    return exit_code


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    overrides = {}
    if args.data_file is not None:
        overrides["data_file"] = args.data_file
    if args.log_level:
        overrides["log_level"] = args.log_level
    config = default_settings.model_copy(update=overrides) if overrides else default_settings

    configure_logging(config)
    logger.info("Using data file %s", config.data_file)
    sys.exit(run(config))


if __name__ == "__main__":
    main()
