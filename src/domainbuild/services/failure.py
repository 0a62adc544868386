"""Last line of defense for failures nobody anticipated."""

import os
import shutil
import subprocess
import traceback
from typing import Callable, Optional, Sequence

from rich.markup import escape

from domainbuild.constants import DEFAULT_LOG_VIEWERS
from domainbuild.errors import CommandFailedError

TROUBLESHOOTING_STEPS = (
    "Check if running as root (use sudo)",
    "Verify internet connection for package installation",
    "Ensure all required packages are available",
    "Check disk space availability",
    "Verify user account permissions",
)


class GuiLogViewer:
    """Opens a file in the first available desktop text editor."""

    def __init__(
        self,
        candidates: Sequence[str] = DEFAULT_LOG_VIEWERS,
        which: Callable[[str], Optional[str]] = shutil.which,
        popen=subprocess.Popen,
    ):
        self.candidates = tuple(candidates)
        self.which = which
        self.popen = popen

    def open(self, path: str) -> Optional[str]:
        for name in self.candidates:
            if self.which(name):
                self.popen(
                    [name, path],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
                return name
        return None


class FailureHandler:
    """Records an unexpected failure and points the operator at the log."""

    def __init__(self, logger, console, log_path: str, viewer: Optional[GuiLogViewer] = None):
        self.logger = logger
        self.console = console
        self.log_path = log_path
        self.viewer = viewer

    def handle(self, exc: BaseException, location: Optional[str] = None) -> int:
        if isinstance(exc, CommandFailedError):
            failed_command = exc.command
            exit_code = exc.exit_code or 1
        else:
            failed_command = f"{type(exc).__name__}: {exc}"
            exit_code = 1

        where = location or self.source_location(exc)
        self.logger.error("Script failed at %s", where)
        self.logger.error("Failed command: %s", failed_command)
        self.logger.error("Exit code: %s", exit_code)

        path = escape(self.log_path)
        self.console.print("")
        self.console.print("==========================================")
        self.console.print("[bold red]SCRIPT FAILED - TROUBLESHOOTING REQUIRED[/bold red]")
        self.console.print("==========================================")
        self.console.print("")
        self.console.print(f"A detailed log has been created: {path}")
        self.console.print("")
        self.console.print("Opening log file in GNOME text editor for troubleshooting...")
        self._open_viewer()

        self.console.print("")
        self.console.print("Please review the log file for detailed error information.")
        self.console.print("Common troubleshooting steps:")
        for number, step in enumerate(TROUBLESHOOTING_STEPS, start=1):
            self.console.print(f"{number}. {step}")
        self.console.print("")

        return exit_code

    def _open_viewer(self):
        opened = None
        if self.viewer is not None:
            try:
                opened = self.viewer.open(self.log_path)
            except Exception as exc:
                self.logger.warning("Could not launch log viewer: %s", exc)

        if opened:
            self.logger.info("Opened log file in %s", opened)
            return

        self.console.print(
            f"GNOME text editor not found. Please manually open: {escape(self.log_path)}"
        )
        self.logger.warning("GNOME text editor not found, manual log review required")

    @staticmethod
    def source_location(exc: BaseException) -> str:
        frames = traceback.extract_tb(exc.__traceback__)
        if not frames:
            return "<unknown>"
        frame = frames[-1]
        return f"{os.path.basename(frame.filename)}:{frame.lineno} in {frame.name}"
