"""Interactive collection of the run parameters."""

import pwd
from typing import Callable, List, Optional

from rich.markup import escape

from domainbuild.errors import BuildCancelled, ConfigurationError
from domainbuild.models import BuildSettings, RunConfig, join_names
from domainbuild.services.build_log import PLAIN


def account_exists(name: str) -> bool:
    try:
        pwd.getpwnam(name)
    except KeyError:
        return False
    return True


class ConfigurationCollector:
    """Prompts for every field of a RunConfig and gates on a confirmed summary."""

    def __init__(
        self,
        prompter,
        logger,
        console,
        settings: BuildSettings,
        account_lookup: Callable[[str], bool] = account_exists,
    ):
        self.prompter = prompter
        self.logger = logger
        self.console = console
        self.settings = settings
        self.account_lookup = account_lookup

    def collect(self, demo_mode: bool) -> RunConfig:
        self.logger.info("Starting user configuration")
        if demo_mode:
            self.console.print(
                "Demo Mode: Prompting for user information (no changes will be made)"
            )
            self.console.print("")

        self.console.print("Please provide the following information:")
        self.console.print("")

        hostname = self._required(
            "What should the PC's hostname be set to?", "Hostname", "Hostname"
        )
        domain_admin = self._required(
            "Domain admin account (e.g. admin@domain.com)",
            "Domain admin",
            "Domain admin account",
        )
        domain_name = self._required(
            "Domain name to join (e.g. domain.com)",
            "Domain name",
            "Domain name",
        )
        it_admins = self._collect_it_admins()

        self.console.print("")
        main_user = self._required(
            "Main end user account (e.g. user@domain.com)",
            "Main user",
            "Main end user account",
        )

        emergency_password = None if demo_mode else self._collect_emergency_password()

        config = RunConfig(
            hostname=hostname,
            domain_admin=domain_admin,
            domain_name=domain_name,
            it_admins=tuple(it_admins),
            main_user=main_user,
            emergency_password=emergency_password,
            demo_mode=demo_mode,
        )

        self._print_summary(config)
        if demo_mode:
            gate = "Proceed with demo configuration? (y/N)"
        else:
            gate = "Proceed with configuration? (y/N)"
        if not self.prompter.confirm(gate, demo_label=False):
            self.logger.info("Configuration cancelled by user")
            self.console.print("Configuration cancelled")
            raise BuildCancelled()

        self.logger.info("User configuration completed")
        self.console.print("")
        return config

    def _required(self, question: str, log_label: str, field_label: str) -> str:
        value = self.prompter.ask(question)
        self.logger.info("%s: %s", log_label, value)
        if not value:
            raise ConfigurationError(f"{field_label} is required")
        return value

    def _collect_it_admins(self) -> List[str]:
        self.console.print("")
        self.console.print("Adding IT admin users...")
        self.console.print("Enter IT admin usernames (e.g. ITADMIN@domain.com)")
        self.console.print("Type one username and press Enter, then type another and press Enter")
        self.console.print("When you are finished, just press Enter with no text")
        self.console.print("")

        admins: List[str] = []
        while True:
            admin = self.prompter.ask(
                "IT Admin username (e.g. ITADMIN@domain.com, or press Enter to finish)"
            )
            if not admin:
                break
            admins.append(admin)
            self.console.print(f"Added: {escape(admin)} (Total: {len(admins)})")
            self.logger.info("Added IT admin: %s", admin)

        if not admins:
            self.logger.warning("No IT admin users were added")
        return admins

    def _collect_emergency_password(self) -> Optional[str]:
        account = self.settings.emergency_account
        if self.account_lookup(account):
            self.logger.info("%s account already exists, no password needed", account)
            return None

        self.console.print("")
        self.console.print(f"Set the password for the {escape(account)} emergency account.")
        while True:
            password = self.prompter.ask_secret(f"Enter password for {account} account")
            confirmation = self.prompter.ask_secret(f"Confirm password for {account} account")
            if password == confirmation:
                return password
            self.console.print("Passwords do not match. Please try again.")
            self.logger.warning("%s password confirmation failed", account)

    def _print_summary(self, config: RunConfig):
        if config.demo_mode:
            password_state = "[not collected in demo mode]"
        elif config.emergency_password is None:
            password_state = "[account exists]"
        else:
            password_state = "[set]"

        self.console.print("")
        lines = [
            "Configuration Summary:",
            f"  Hostname: {config.hostname}",
            f"  Domain Admin: {config.domain_admin}",
            f"  Domain: {config.domain_name}",
            f"  IT Admins: {join_names(config.it_admins)}",
            f"  Main User: {config.main_user}",
            f"  {self.settings.emergency_account} password: {password_state}",
        ]
        for line in lines:
            self.logger.log(PLAIN, line)
        self.console.print("")
