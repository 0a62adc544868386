"""
domainbuild - Debian domain build and provisioning tool
"""

__version__ = "2.0.0"

from .core import DomainBuilder
from .errors import BuildError

__all__ = ["DomainBuilder", "BuildError"]
