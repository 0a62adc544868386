"""Directory membership: realm join and PAM home directory creation."""

from rich.markup import escape

from domainbuild.constants import PAM_MKHOMEDIR_CONTENT, PAM_MKHOMEDIR_PROFILE
from domainbuild.models import RunConfig, command


class DomainService:
    def __init__(self, executor, logger, console):
        self.executor = executor
        self.logger = logger
        self.console = console

    def join_domain(self, config: RunConfig):
        self.console.print(f"Joining domain: {escape(config.domain_name)}")
        self.console.print(f"Using admin account: {escape(config.domain_admin)}")
        self.console.print("")

        # realm asks for the admin password on the terminal.
        self.executor.run(
            command(
                "realm",
                "join",
                "-U",
                config.domain_admin,
                "--install=/",
                "-v",
                config.domain_name,
                interactive=True,
            ),
            "Join domain using realm",
            check=True,
            error_code="domain_join_failed",
            domain=config.domain_name,
        )
        self.console.print("Domain join completed successfully")
        self.logger.info("Domain join completed successfully")

    def configure_mkhomedir(self, config: RunConfig):
        self.console.print("Configuring mkhomedir for automatic home directory creation...")
        self.executor.run(
            command("tee", PAM_MKHOMEDIR_PROFILE, stdin=PAM_MKHOMEDIR_CONTENT),
            "Create mkhomedir PAM profile",
            check=True,
        )
        self.executor.run(
            command("pam-auth-update", "--package"),
            "Update PAM configuration",
            check=True,
        )
        self.console.print("Mkhomedir configuration completed successfully")
        self.logger.info("Mkhomedir configuration completed successfully")
