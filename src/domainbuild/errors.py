"""Domain errors for domainbuild."""


class BuildError(RuntimeError):
    """Raised when the build cannot continue safely."""


class ConfigurationError(BuildError):
    """Raised when a required run parameter is missing."""


class FatalStepError(BuildError):
    """An essential step failed in a way the build anticipates."""

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.message = message
        self.hint = hint


class CommandFailedError(RuntimeError):
    """A checked command exited non-zero without a targeted remediation."""

    def __init__(self, command: str, description: str, exit_code: int):
        super().__init__(f"{description} failed ({exit_code}): {command}")
        self.command = command
        self.description = description
        self.exit_code = exit_code


class BuildCancelled(Exception):
    """The operator declined to proceed."""
