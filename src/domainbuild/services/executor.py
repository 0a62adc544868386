"""Uniform wrapper for every system-changing command."""

from typing import Optional

from rich.markup import escape

from domainbuild.errors import CommandFailedError, FatalStepError
from domainbuild.errors_catalog import catalog_entry
from domainbuild.models import CommandSpec, StepResult


class StepExecutor:
    """Logs, then either runs or narrates a command depending on demo mode.

    The executor never decides whether a failure is fatal on its own. Call
    sites pass ``check=True`` to escalate a non-zero exit, optionally with an
    ``error_code`` from the error catalog when the failure is anticipated and
    has a targeted remediation.
    """

    def __init__(self, commands, logger, console, demo_mode: bool):
        self.commands = commands
        self.logger = logger
        self.console = console
        self.demo_mode = demo_mode

    def run(
        self,
        spec: CommandSpec,
        description: str,
        check: bool = False,
        error_code: Optional[str] = None,
        **error_args: str,
    ) -> StepResult:
        rendered = spec.render()
        self.logger.info("Executing: %s", description)
        self.logger.info("Command: %s", rendered)

        if self.demo_mode:
            self.logger.info("Demo Mode: Command would be executed")
            self.console.print(f"  \\[DEMO] Would execute: {escape(description)}")
            return StepResult(description=description, command=rendered, executed=False)

        outcome = self.commands.execute(spec)
        if outcome.output:
            self.logger.info("Output: %s", outcome.output)
        self.logger.info("Exit code: %s", outcome.exit_code)

        result = StepResult(
            description=description,
            command=rendered,
            executed=True,
            output=outcome.output,
            exit_code=outcome.exit_code,
        )

        if check and not result.succeeded:
            if error_code:
                message, hint = catalog_entry(error_code, **error_args)
                raise FatalStepError(message, hint)
            raise CommandFailedError(rendered, description, outcome.exit_code)

        return result
