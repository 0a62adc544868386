"""Local emergency account and domain user provisioning."""

from typing import Callable

from rich.markup import escape

from domainbuild.constants import SUDOERS_MODE
from domainbuild.errors import BuildError
from domainbuild.models import BuildSettings, RunConfig, command
from domainbuild.services.collector import account_exists


class AccountService:
    def __init__(
        self,
        executor,
        logger,
        console,
        settings: BuildSettings,
        account_lookup: Callable[[str], bool] = account_exists,
    ):
        self.executor = executor
        self.logger = logger
        self.console = console
        self.settings = settings
        self.account_lookup = account_lookup

    def create_emergency_account(self, config: RunConfig):
        account = self.settings.emergency_account
        self.console.print(f"Creating {escape(account)} emergency account...")
        self.console.print("This account should only be used in emergency situations.")
        self.console.print("")

        if self.account_lookup(account):
            self.console.print(f"{escape(account)} account already exists. Skipping creation.")
            self.logger.info("%s account already exists, skipping creation", account)
            return

        if config.emergency_password is None and not config.demo_mode:
            raise BuildError(f"No password was collected for the {account} account.")

        self.executor.run(
            command("useradd", "-m", "-s", "/bin/bash", "-G", self.settings.admin_group, account),
            f"Create {account} user",
            check=True,
        )
        self.executor.run(
            command(
                "chpasswd",
                stdin=f"{account}:{config.emergency_password or ''}\n",
                secret_stdin=True,
            ),
            f"Set {account} password",
            check=True,
        )

        sudoers_file = self.settings.sudoers_file
        self.executor.run(
            command("tee", "-a", sudoers_file, stdin=f"{account} ALL=(ALL:ALL) ALL\n"),
            f"Create sudoers entry for {account}",
            check=True,
        )
        self.executor.run(
            command("chmod", SUDOERS_MODE, sudoers_file),
            f"Restrict permissions on {sudoers_file}",
            check=True,
        )

        self.console.print(f"{escape(account)} account created successfully")
        self.console.print(f"Username: {escape(account)}")
        self.console.print("Password: \\[set by user]")
        self.logger.info("%s account created successfully", account)
        self.console.print("")
        self.console.print("[bold]IMPORTANT: This account is for emergency access only![/bold]")
        self.console.print("Do not use for regular operations.")

    def configure_domain_users(self, config: RunConfig):
        self.console.print("Configuring domain users...")
        self.console.print("")

        for admin in config.it_admins:
            self.console.print(f"Configuring IT admin: {escape(admin)}")
            self.logger.info("Configuring IT admin: %s", admin)
            self._configure_user(admin, "IT admin")
            self.console.print(f"  Configured: {escape(admin)}")

        self.console.print("")
        self.console.print(f"Configuring main user: {escape(config.main_user)}")
        self.logger.info("Configuring main user: %s", config.main_user)
        self._configure_user(config.main_user, "main user")
        self.console.print(f"  Configured: {escape(config.main_user)}")

        self.console.print("")
        self.console.print("Current sudoers:")
        result = self.executor.run(
            command("getent", "group", self.settings.admin_group),
            "Display current sudoers",
        )
        if result.executed and result.output:
            self.console.print(escape(result.output))

        self.console.print("")
        self.console.print("Note: A reboot may be required for sudo permissions to take full effect")
        self.logger.info("Domain user configuration completed successfully")

    def _configure_user(self, user: str, role: str):
        group = self.settings.admin_group
        self.executor.run(command("realm", "permit", user), f"Permit logon for {role}", check=True)

        # Both group mechanisms are attempted; a failure in either is not fatal.
        soft_steps = (
            (command("adduser", user, group), f"Add {role} to {group} group"),
            (command("usermod", "-aG", group, user), f"Add {role} to {group} group (alternative method)"),
            (command("mkhomedir_helper", user), f"Create home directory for {role}"),
        )
        for spec, description in soft_steps:
            result = self.executor.run(spec, description)
            if not result.succeeded:
                self.logger.warning("%s failed for %s (exit code %s)", description, user, result.exit_code)
