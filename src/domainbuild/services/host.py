"""Host identity, service manager and reboot handling."""

import time

from rich.markup import escape

from domainbuild.constants import HOSTS_FILE
from domainbuild.models import BuildSettings, RunConfig, command


class HostService:
    def __init__(self, executor, logger, console, prompter, settings: BuildSettings, sleep=time.sleep):
        self.executor = executor
        self.logger = logger
        self.console = console
        self.prompter = prompter
        self.settings = settings
        self.sleep = sleep

    def set_hostname(self, config: RunConfig):
        hostname = config.hostname
        self.console.print(f"Setting hostname to: {escape(hostname)}")
        self.executor.run(
            command("hostnamectl", "set-hostname", hostname),
            "Set system hostname",
            check=True,
        )
        self.executor.run(
            command("sed", "-i", f"s/127.0.1.1.*/127.0.1.1\\t{hostname}/", HOSTS_FILE),
            f"Update {HOSTS_FILE}",
            check=True,
        )
        self.console.print("Hostname configured successfully")
        self.logger.info("Hostname configuration completed successfully")

    def configure_services(self, config: RunConfig):
        self.console.print("Configuring system services...")
        for unit in self.settings.enable_services:
            self.executor.run(command("systemctl", "enable", unit), f"Enable {unit} service", check=True)
            self.executor.run(command("systemctl", "start", unit), f"Start {unit} service", check=True)

        if self.settings.sleep_targets:
            self.executor.run(
                command("systemctl", "mask", *self.settings.sleep_targets),
                "Mask sleep targets",
                check=True,
            )
        self.console.print("System services configured successfully")
        self.logger.info("System service configuration completed successfully")

    def prompt_reboot(self, config: RunConfig):
        delay = self.settings.reboot_delay_seconds
        self.console.print("A reboot is recommended to ensure all changes take effect properly.")
        self.console.print(
            "This is especially important for sudo permissions to take effect immediately."
        )
        self.console.print("")

        wants_reboot = self.prompter.confirm(
            "Would you like to reboot now so that sudoer permissions take effect? (Y/n)",
            default=True,
        )
        if not wants_reboot:
            if config.demo_mode:
                self.console.print("Demo Mode: Would skip reboot")
                self.logger.info("Demo Mode: Reboot skipped by user")
            else:
                self.console.print(
                    "Please reboot manually when convenient to ensure sudo permissions take effect"
                )
                self.logger.info("Manual reboot requested by user")
            return

        if config.demo_mode:
            self.logger.info("Demo Mode: Would initiate system reboot")
            self.console.print(f"Demo Mode: Would reboot in {delay} seconds...")
            self.console.print("Demo Mode: No actual reboot will occur")
        else:
            self.logger.info("Initiating system reboot")
            self.console.print(f"Rebooting in {delay} seconds...")
            self.console.print("Press Ctrl+C to cancel")
            try:
                self.sleep(delay)
            except KeyboardInterrupt:
                self.console.print("")
                self.console.print("Reboot cancelled. Please reboot manually when convenient.")
                self.logger.warning("Reboot cancelled by operator")
                return

        self.executor.run(command("reboot"), "Reboot system", check=True)
