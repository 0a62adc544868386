import logging
import time
from typing import Callable, List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .errors import BuildCancelled, BuildError, CommandFailedError, FatalStepError
from .models import BuildSettings, PipelineStep, RunConfig, join_names
from .services.accounts import AccountService
from .services.build_log import PLAIN
from .services.collector import ConfigurationCollector, account_exists
from .services.command_runner import CommandRunner
from .services.domain import DomainService
from .services.executor import StepExecutor
from .services.failure import FailureHandler, GuiLogViewer
from .services.host import HostService
from .services.packages import PackageService
from .services.prompts import Prompter
from .services.software import SoftwareService

console = Console()
logger = logging.getLogger("domainbuild")

INTERRUPTED_EXIT_CODE = 130


class DomainBuilder:
    def __init__(
        self,
        settings: Optional[BuildSettings] = None,
        demo_mode: bool = False,
        log_path: str = "",
        commands=None,
        prompter: Optional[Prompter] = None,
        viewer=None,
        output: Optional[Console] = None,
        account_lookup: Callable[[str], bool] = account_exists,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or BuildSettings()
        self.demo_mode = demo_mode
        self.log_path = log_path
        self.console = output or console
        self.current_step_name: Optional[str] = None

        self.commands = commands or CommandRunner(logger=logger)
        self.prompter = prompter or Prompter(demo_mode=demo_mode)
        self.executor = StepExecutor(
            commands=self.commands,
            logger=logger,
            console=self.console,
            demo_mode=demo_mode,
        )
        self.collector = ConfigurationCollector(
            prompter=self.prompter,
            logger=logger,
            console=self.console,
            settings=self.settings,
            account_lookup=account_lookup,
        )
        self.account_service = AccountService(
            executor=self.executor,
            logger=logger,
            console=self.console,
            settings=self.settings,
            account_lookup=account_lookup,
        )
        self.host_service = HostService(
            executor=self.executor,
            logger=logger,
            console=self.console,
            prompter=self.prompter,
            settings=self.settings,
            sleep=sleep,
        )
        self.package_service = PackageService(
            executor=self.executor,
            logger=logger,
            console=self.console,
            settings=self.settings,
        )
        self.domain_service = DomainService(executor=self.executor, logger=logger, console=self.console)
        self.software_service = SoftwareService(
            executor=self.executor,
            logger=logger,
            console=self.console,
            prompter=self.prompter,
        )
        self.failure_handler = FailureHandler(
            logger=logger,
            console=self.console,
            log_path=log_path,
            viewer=viewer if viewer is not None else GuiLogViewer(self.settings.log_viewers),
        )

    def steps(self) -> List[PipelineStep]:
        account = self.settings.emergency_account
        accounts = self.account_service
        host = self.host_service
        packages = self.package_service
        domain = self.domain_service
        return [
            PipelineStep("account-creation", f"Creating {account} Account", accounts.create_emergency_account),
            PipelineStep("hostname", "Setting Hostname", host.set_hostname),
            PipelineStep("sudo-install", "Installing Sudo", packages.install_sudo),
            PipelineStep("ssh-install", "Installing SSH Server", packages.install_ssh_server),
            PipelineStep("service-config", "Configuring System Services", host.configure_services),
            PipelineStep("domain-packages", "Installing Domain Packages", packages.install_domain_packages),
            PipelineStep("domain-join", "Joining Domain", domain.join_domain),
            PipelineStep("mkhomedir-config", "Configuring Mkhomedir", domain.configure_mkhomedir),
            PipelineStep("user-config", "Configuring Domain Users", accounts.configure_domain_users),
            PipelineStep("extra-packages", "Final Setup", packages.install_extra_packages),
            PipelineStep(
                "optional-software",
                "Additional Software Installation",
                self.software_service.install_additional_software,
            ),
            PipelineStep("completion-summary", "Setup Complete", self.print_completion_summary),
            PipelineStep("reboot-prompt", "Reboot", host.prompt_reboot),
        ]

    def display_banner(self):
        if self.demo_mode:
            self.console.print(
                Panel.fit(
                    "No changes will be made to the system",
                    title="DEMO MODE",
                    border_style="yellow",
                )
            )
        else:
            self.console.print(
                Panel.fit("Domain Setup Script", title="Debian Domain Build", border_style="blue")
            )
        self.console.print("")

    def display_step(self, title: str):
        self.console.rule(f"[bold]{escape(title)}[/bold]")
        self.console.print("")

    def _run_step(self, step: PipelineStep, config: RunConfig):
        self.current_step_name = step.name
        self.display_step(step.title)
        logger.info("Starting step: %s", step.name)
        if self.demo_mode:
            self.console.print("[yellow]Demo Mode: no changes will be made in this step[/yellow]")

        step.action(config)

        logger.info("Completed step: %s", step.name)
        self.console.print("")
        self.current_step_name = None

    def print_completion_summary(self, config: RunConfig):
        if config.demo_mode:
            self.console.print(
                f"Demo complete: this machine would be configured and joined to {escape(config.domain_name)}."
            )
        else:
            self.console.print(
                f"Your Debian machine is now configured and joined to {escape(config.domain_name)}!"
            )
        logger.info("Setup completed successfully for domain: %s", config.domain_name)
        self.console.print("")

        lines = [
            "Configuration Summary:",
            f"  Hostname: {config.hostname}",
            f"  Domain: {config.domain_name}",
            f"  IT Admins: {join_names(config.it_admins)} (sudo access configured)",
            f"  Main User: {config.main_user} (sudo access configured)",
            f"  {self.settings.emergency_account} emergency account: Created with sudo access",
            "  SSH Server: Installed and enabled",
            "  Domain Join: Completed successfully",
            "  Home directories: Created for all users",
        ]
        for line in lines:
            logger.log(PLAIN, line)

        self.console.print("")
        self.console.print("Next steps:")
        self.console.print("1. Test user logins and sudo access")
        self.console.print("2. Verify SSH connectivity")
        self.console.print("3. Test domain authentication")
        self.console.print("4. Verify all software installations")
        self.console.print("")

    def run(self) -> int:
        try:
            self.display_banner()
            self.display_step("User Configuration")
            config = self.collector.collect(self.demo_mode)

            for step in self.steps():
                self._run_step(step, config)

            logger.info("Script execution completed successfully")
            return 0

        except BuildCancelled:
            return 0
        except FatalStepError as exc:
            logger.error(exc.message)
            self.console.print(f"[bold red]Error:[/bold red] {escape(exc.message)}")
            if exc.hint:
                self.console.print(escape(exc.hint))
            return 1
        except BuildError as exc:
            logger.error(str(exc))
            self.console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
            return 1
        except (KeyboardInterrupt, click.Abort):
            self.console.print("")
            self.console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.warning("Operation cancelled by user")
            return INTERRUPTED_EXIT_CODE
        except CommandFailedError as exc:
            location = f"step '{self.current_step_name}' ({exc.description})"
            return self.failure_handler.handle(exc, location=location)
        except Exception as exc:
            location = None
            if self.current_step_name:
                location = f"step '{self.current_step_name}' ({FailureHandler.source_location(exc)})"
            return self.failure_handler.handle(exc, location=location)
