"""Shared domain models for domainbuild."""

import shlex
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from . import constants


@dataclass(frozen=True)
class RunConfig:
    """Operator-supplied parameters, fixed once the summary is confirmed."""

    hostname: str
    domain_admin: str
    domain_name: str
    it_admins: Tuple[str, ...]
    main_user: str
    emergency_password: Optional[str] = field(default=None, repr=False)
    demo_mode: bool = False


@dataclass(frozen=True)
class CommandSpec:
    """A system command as the executor sees it."""

    argv: Tuple[str, ...]
    stdin: Optional[str] = field(default=None, repr=False)
    secret_stdin: bool = False
    interactive: bool = False
    env: Optional[Mapping[str, str]] = None

    def render(self) -> str:
        text = shlex.join(self.argv)
        if self.secret_stdin:
            return f"{text} < [redacted]"
        if self.stdin is not None:
            lines = len(self.stdin.splitlines())
            return f"{text} < [stdin: {lines} line(s)]"
        return text


def command(*argv: str, **kwargs: Any) -> CommandSpec:
    return CommandSpec(argv=tuple(argv), **kwargs)


@dataclass(frozen=True)
class CommandOutcome:
    exit_code: int
    output: str = ""


@dataclass(frozen=True)
class StepResult:
    description: str
    command: str
    executed: bool
    output: Optional[str] = None
    exit_code: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return not self.executed or self.exit_code == 0


@dataclass(frozen=True)
class PipelineStep:
    name: str
    title: str
    action: Callable[[RunConfig], None]


@dataclass(frozen=True)
class BuildSettings:
    """Site defaults that the operator does not type in at every run."""

    log_dir: str = constants.DEFAULT_LOG_DIR
    emergency_account: str = constants.DEFAULT_EMERGENCY_ACCOUNT
    admin_group: str = constants.DEFAULT_ADMIN_GROUP
    domain_packages: Tuple[str, ...] = constants.DEFAULT_DOMAIN_PACKAGES
    extra_packages: Tuple[str, ...] = constants.DEFAULT_EXTRA_PACKAGES
    enable_services: Tuple[str, ...] = constants.DEFAULT_ENABLE_SERVICES
    sleep_targets: Tuple[str, ...] = constants.DEFAULT_SLEEP_TARGETS
    reboot_delay_seconds: int = constants.DEFAULT_REBOOT_DELAY_SECONDS
    log_viewers: Tuple[str, ...] = constants.DEFAULT_LOG_VIEWERS

    @property
    def sudoers_file(self) -> str:
        return f"{constants.SUDOERS_DIR}/{self.emergency_account.lower()}"


def join_names(names: Sequence[str]) -> str:
    return " ".join(names) if names else "(none)"
