"""Subprocess execution service for domainbuild."""

import os
import subprocess

from domainbuild.models import CommandOutcome, CommandSpec

COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126
# A command killed by signal N reports 128 + N, as a shell would.
SIGNAL_EXIT_BASE = 128


def exit_status(returncode: int) -> int:
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


class CommandRunner:
    """Runs system commands and reports their exit status and combined output."""

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module

    def execute(self, spec: CommandSpec) -> CommandOutcome:
        env = None
        if spec.env:
            env = dict(os.environ)
            env.update(spec.env)

        try:
            if spec.interactive:
                result = self.subprocess.run(
                    list(spec.argv),
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    input=spec.stdin,
                    env=env,
                )
                return CommandOutcome(exit_code=exit_status(result.returncode))

            # Tools like getent may print bytes that are not valid UTF-8.
            result = self.subprocess.run(
                list(spec.argv),
                text=True,
                encoding="utf-8",
                errors="replace",
                input=spec.stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=env,
            )
        except FileNotFoundError:
            self.logger.debug("Command not found: %s", spec.argv[0])
            return CommandOutcome(
                exit_code=COMMAND_NOT_FOUND,
                output=f"{spec.argv[0]}: command not found",
            )
        except PermissionError as exc:
            return CommandOutcome(
                exit_code=COMMAND_NOT_EXECUTABLE,
                output=f"{spec.argv[0]}: {exc.strerror}",
            )

        if result.returncode < 0:
            self.logger.debug("%s terminated by signal %s", spec.argv[0], -result.returncode)
        return CommandOutcome(
            exit_code=exit_status(result.returncode),
            output=(result.stdout or "").strip(),
        )
