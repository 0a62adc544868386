"""Operator-supplied software: shell installers and Debian packages."""

import os
from typing import Callable

from rich.markup import escape

from domainbuild.constants import APT_ENV
from domainbuild.models import RunConfig, command

SUPPORTED_TYPES = ("sh", "deb")


class SoftwareService:
    """Installs whatever the operator points at, one file at a time.

    Nothing here is fatal to the build: a missing file, an unsupported
    extension, or an installer that exits non-zero is reported and the loop
    asks for the next path.
    """

    def __init__(
        self,
        executor,
        logger,
        console,
        prompter,
        file_exists: Callable[[str], bool] = os.path.isfile,
    ):
        self.executor = executor
        self.logger = logger
        self.console = console
        self.prompter = prompter
        self.file_exists = file_exists

    def install_additional_software(self, config: RunConfig):
        self.console.print("You can now install additional software packages.")
        self.console.print("")

        if not self.prompter.confirm("Do you have additional software to install? (y/N)"):
            self.console.print("Skipping additional software installation")
            self.logger.info("Additional software installation skipped by user")
            return

        self._install_loop()
        self.console.print("")
        self._ask_software_categories()

    def _install_loop(self):
        self.console.print("")
        self.console.print("Supported file types:")
        self.console.print("- .sh files (will be made executable and run)")
        self.console.print("- .deb files (will be installed)")
        self.console.print("")

        processed = 0
        while True:
            path = self.prompter.ask("Enter path to software file (or press Enter to finish)")
            if not path:
                break

            if not self.file_exists(path):
                self.console.print(f"Error: File not found: {escape(path)}")
                self.logger.error("Software file not found: %s", path)
                continue

            if self.install_file(path):
                processed += 1
            self.console.print("")

        if processed:
            self.console.print("Additional software installation completed")
            self.console.print(f"Installed/processed {processed} software package(s)")
            self.logger.info("Additional software installation completed: %s packages", processed)
        else:
            self.console.print("No additional software was installed")
            self.logger.info("No additional software was installed")

    def install_file(self, path: str) -> bool:
        """Dispatch on extension. Returns False when the file type is not supported."""
        file_name = os.path.basename(path)
        extension = os.path.splitext(file_name)[1].lstrip(".").lower()
        absolute_path = os.path.abspath(path)

        if extension not in SUPPORTED_TYPES:
            self.console.print(f"Unsupported file type: {escape(extension or file_name)}")
            self.console.print("Supported types: .sh, .deb")
            self.logger.warning("Unsupported file type: %s", extension or file_name)
            return False

        self.console.print("")
        self.console.print(f"Processing: {escape(file_name)}")
        self.logger.info("Processing software file: %s", file_name)

        if extension == "sh":
            self.console.print(f"Detected shell script: {escape(file_name)}")
            self.console.print("Making executable and running...")
            self.executor.run(command("chmod", "+x", absolute_path), "Make script executable")
            result = self.executor.run(
                command(absolute_path, interactive=True),
                f"Run script {file_name}",
            )
            if result.succeeded:
                self.console.print("Success")
                self.logger.info("Successfully executed script: %s", file_name)
            else:
                self.console.print("Failed")
                self.console.print("Check the script output for errors")
                self.logger.error("Failed to execute script: %s", file_name)
            return True

        self.console.print(f"Detected Debian package: {escape(file_name)}")
        self.console.print("Installing package...")
        result = self.executor.run(
            command("dpkg", "-i", absolute_path, interactive=True, env=APT_ENV),
            f"Install package {file_name}",
        )
        if result.succeeded:
            self.console.print("Success")
            self.logger.info("Successfully installed package: %s", file_name)
        else:
            self.console.print("Failed")
            self.console.print("Check the installation output for errors")
            self.logger.error("Failed to install package: %s", file_name)

        fixup = self.executor.run(
            command("apt-get", "install", "-f", "-y", "-qq", env=APT_ENV),
            "Fix package dependencies",
        )
        if not fixup.succeeded:
            self.logger.warning("Dependency fix-up exited with code %s", fixup.exit_code)
        return True

    def _ask_software_categories(self):
        self.console.print("Additional software categories:")
        if self.prompter.confirm("Do you need to install inventory management software? (y/N)"):
            self.console.print(
                "Please provide the path to your inventory management software installer"
            )
            self.logger.info("User requested inventory management software installation")

        if self.prompter.confirm("Do you need to install anti-virus software? (y/N)"):
            self.console.print("Please provide the path to your anti-virus software installer")
            self.logger.info("User requested anti-virus software installation")
