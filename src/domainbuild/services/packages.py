"""Package manager operations for the build steps."""

from typing import Sequence

from domainbuild.constants import APT_ENV
from domainbuild.models import BuildSettings, CommandSpec, RunConfig, command


def apt_install(packages: Sequence[str], *options: str) -> CommandSpec:
    return command("apt-get", "install", "-y", *options, *packages, env=APT_ENV)


def apt_update() -> CommandSpec:
    return command("apt-get", "update", "-qq", env=APT_ENV)


class PackageService:
    """Installs the baseline, directory-integration and convenience packages."""

    def __init__(self, executor, logger, console, settings: BuildSettings):
        self.executor = executor
        self.logger = logger
        self.console = console
        self.settings = settings

    def install_sudo(self, config: RunConfig):
        self.console.print("Installing sudo package...")
        self.executor.run(apt_update(), "Update package lists", check=True)
        self.executor.run(
            apt_install(["sudo"]),
            "Install sudo package",
            check=True,
            error_code="sudo_install_failed",
        )
        self.console.print("Sudo installed successfully")
        self.logger.info("Sudo installation completed successfully")

    def install_ssh_server(self, config: RunConfig):
        self.console.print("Installing SSH server...")
        self.executor.run(
            apt_install(["openssh-server"]),
            "Install SSH server",
            check=True,
            error_code="ssh_install_failed",
        )

        self.console.print("Enabling and starting SSH service...")
        self.executor.run(
            command("systemctl", "enable", "ssh", "--now"),
            "Enable and start SSH service",
            check=True,
        )
        self.executor.run(command("systemctl", "daemon-reload"), "Reload systemd daemon", check=True)
        self.console.print("SSH server installed and configured successfully")
        self.logger.info("SSH server installation completed successfully")

    def install_domain_packages(self, config: RunConfig):
        packages = self.settings.domain_packages
        self.console.print("Installing domain packages...")
        self.executor.run(
            apt_install(packages),
            "Install domain packages",
            check=True,
            error_code="domain_packages_failed",
            packages=", ".join(packages),
        )
        self.console.print("Domain packages installed successfully")
        self.logger.info("Domain package installation completed successfully")

    def install_extra_packages(self, config: RunConfig):
        self.console.print("Updating package lists...")
        self.executor.run(apt_update(), "Update package lists", check=True)

        self.console.print("Installing additional packages...")
        self.executor.run(
            apt_install(self.settings.extra_packages, "-qq"),
            "Install additional packages",
            check=True,
        )
        self.console.print("Additional packages installed")
        self.logger.info("Additional packages installed successfully")
