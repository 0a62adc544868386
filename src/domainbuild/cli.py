import os
import tempfile
from dataclasses import replace

import click

from .constants import DEFAULT_CONFIG_FILE, DEFAULT_LOG_DIR, SCRIPT_NAME
from .core import DomainBuilder
from .errors import BuildError
from .services.build_log import BuildLog
from .services.config_loader import ConfigLoader

BANNER = "=== Debian Domain Build ===\nDomain Setup Script\n"

EXAMPLES = f"""\
  sudo {SCRIPT_NAME}                    # Standard build process
  sudo {SCRIPT_NAME} --demo             # Demo mode
  sudo {SCRIPT_NAME} --help             # Show help"""

HELP_EPILOG = f"""\b
Examples:
{EXAMPLES}

\b
Features:
  - Configures hostname
  - Installs and configures sudo
  - Installs and enables SSH server
  - Joins system to domain using realm
  - Configures IT admin users as sudoers
  - Configures main user as sudoer
  - Creates home directories for all users
  - Installs additional software
  - Handles automatic reboot after setup
  - Comprehensive logging and error handling
  - Automatic log file opening on failure

\b
Requirements:
  - Must be run as root (sudo)
  - Fresh Debian installation
  - Internet connection for package installation
  - Domain admin credentials
"""


class BuildCommand(click.Command):
    """Click command with the build's own help banner and unknown-option handling."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as exc:
            click.echo(f"Unknown option: {exc.option_name}")
        except click.UsageError as exc:
            click.echo(f"Error: {exc.format_message()}")
        click.echo("Use --help for usage information")
        ctx.exit(1)

    def format_help(self, ctx, formatter):
        formatter.write(BANNER)
        formatter.write_paragraph()
        super().format_help(ctx, formatter)


def _is_root() -> bool:
    return os.geteuid() == 0


def _print_root_usage():
    click.echo("Error: This script must be run as root (use sudo)")
    click.echo(f"Usage: sudo {SCRIPT_NAME} [OPTIONS]")
    click.echo("")
    click.echo("Examples:")
    click.echo(EXAMPLES)


@click.command(cls=BuildCommand, epilog=HELP_EPILOG)
@click.option(
    "--demo",
    is_flag=True,
    default=False,
    help="Demo mode - show what would happen without making changes",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML settings file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option(
    "--log-dir",
    required=False,
    type=click.Path(file_okay=False),
    help=(
        f"Directory for the run log (default: {DEFAULT_LOG_DIR}, or the system temp "
        "directory for demo runs without root)."
    ),
)
def main(demo, config, log_dir):
    """Configure a fresh Debian installation and join it to a domain.

    \b
    The build prompts for:
      - PC hostname
      - Domain admin account
      - Domain name to join
      - IT admin usernames (multiple can be added)
      - Main end user account
      - Emergency account password (standard runs only)
    """
    is_root = _is_root()
    if not demo and not is_root:
        _print_root_usage()
        raise SystemExit(1)

    try:
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        settings = ConfigLoader().load(resolved_config, log_dir=log_dir)
        if demo and not is_root and log_dir is None and settings.log_dir == DEFAULT_LOG_DIR:
            # /root is not writable without privileges.
            settings = replace(settings, log_dir=tempfile.gettempdir())
        build_log = BuildLog.create(settings.log_dir)
    except BuildError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Log file initialized: {build_log.path}")
    if is_root:
        build_log.record("INFO", "Root privileges verified")

    try:
        builder = DomainBuilder(settings=settings, demo_mode=demo, log_path=build_log.path)
        exit_code = builder.run()
    finally:
        build_log.close()

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
