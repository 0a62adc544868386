"""Run log: one append-only file per run plus a console echo."""

import getpass
import logging
import os
import socket
from datetime import datetime
from typing import Callable, Optional

from rich.console import Console
from rich.highlighter import NullHighlighter
from rich.logging import RichHandler

from domainbuild import __version__
from domainbuild.constants import (
    LOG_FILE_PATTERN,
    LOG_RECORD_DATEFMT,
    LOG_TIMESTAMP_FORMAT,
    SCRIPT_NAME,
)
from domainbuild.errors import BuildError
from domainbuild.errors_catalog import actionable_error

LOGGER_NAME = "domainbuild"

# Lines written verbatim, both to the file and to the console.
PLAIN = 25
logging.addLevelName(PLAIN, "PLAIN")

LEVELS = {
    "INFO": logging.INFO,
    "PLAIN": PLAIN,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class EchoFormatter(logging.Formatter):
    """Console form of a record: a level prefix, except for PLAIN lines."""

    PREFIXES = {
        logging.INFO: "INFO: ",
        PLAIN: "",
        logging.WARNING: "WARNING: ",
        logging.ERROR: "ERROR: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        return self.PREFIXES.get(record.levelno, f"{record.levelname}: ") + record.getMessage()


def echo_handler(console: Console, level: int, below: Optional[int] = None) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_level=False,
        show_path=False,
        markup=False,
        highlighter=NullHighlighter(),
        keywords=[],
    )
    handler.setLevel(level)
    handler.setFormatter(EchoFormatter())
    if below is not None:
        handler.addFilter(lambda record: record.levelno < below)
    return handler


class BuildLog:
    """Handle on the run's log file and the logger that writes to it."""

    def __init__(self, path: str, logger: logging.Logger):
        self.path = path
        self.logger = logger

    @classmethod
    def create(
        cls,
        log_dir: str,
        clock: Callable[[], datetime] = datetime.now,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ) -> "BuildLog":
        started = clock()
        path = os.path.join(
            log_dir,
            LOG_FILE_PATTERN.format(timestamp=started.strftime(LOG_TIMESTAMP_FORMAT)),
        )

        try:
            os.makedirs(log_dir, exist_ok=True)
            with open(path, "a", encoding="utf-8") as file_obj:
                file_obj.write(cls._header(started))
        except OSError as exc:
            raise BuildError(
                f"{actionable_error('log_file_unavailable', path=log_dir)} ({exc.strerror})"
            ) from exc

        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.INFO)
        logger.propagate = False

        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s", datefmt=LOG_RECORD_DATEFMT)
        )
        logger.addHandler(file_handler)
        # Errors go to stderr, everything else from INFO up to stdout.
        logger.addHandler(echo_handler(console or Console(), logging.INFO, below=logging.ERROR))
        logger.addHandler(echo_handler(error_console or Console(stderr=True), logging.ERROR))

        return cls(path=path, logger=logger)

    @staticmethod
    def _header(started: datetime) -> str:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = "unknown"

        return (
            "=== Debian Domain Build Log ===\n"
            f"Script: {SCRIPT_NAME}\n"
            f"Version: {__version__}\n"
            f"Started: {started.strftime('%a %b %d %H:%M:%S %Y')}\n"
            f"User: {user}\n"
            f"Hostname: {socket.gethostname()}\n"
            "================================\n"
            "\n"
        )

    def record(self, level: str, message: str):
        self.logger.log(LEVELS[level], message)

    def close(self):
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
