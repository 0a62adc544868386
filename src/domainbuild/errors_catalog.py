"""Actionable error catalog for domainbuild."""

from typing import Dict, Tuple

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "sudo_install_failed": {
        "what": "Failed to install sudo",
        "next": "Check the package sources in /etc/apt/sources.list and the network connection.",
    },
    "ssh_install_failed": {
        "what": "Failed to install SSH server",
        "next": "Run `apt-get install -y openssh-server` manually to see the package manager error.",
    },
    "domain_packages_failed": {
        "what": "Failed to install domain packages",
        "next": "Make sure {packages} are available from the configured package sources.",
    },
    "domain_join_failed": {
        "what": "Failed to join domain",
        "next": "Please check your domain admin credentials and domain name ({domain}).",
    },
    "log_file_unavailable": {
        "what": "Could not create log file in {path}",
        "next": "Run as root or pass `--log-dir` pointing at a writable directory.",
    },
}


def catalog_entry(code: str, **kwargs: str) -> Tuple[str, str]:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    return template["what"].format(**kwargs), template["next"].format(**kwargs)


def actionable_error(code: str, **kwargs: str) -> str:
    what, next_step = catalog_entry(code, **kwargs)
    return f"{what}. Suggested action: {next_step}"
