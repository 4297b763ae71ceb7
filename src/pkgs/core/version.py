"""
Version detection for the --version banner.
"""

import platform
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version


def get_version() -> str:
    """Get the installed pkgs version, or 'dev' when running from source."""
    try:
        return pkg_version("pkgs")
    except PackageNotFoundError:
        return "dev"


def get_version_banner() -> str:
    """Build the ``pkgs <version> (<os>/<arch>)`` banner."""
    return f"pkgs {get_version()} ({sys.platform}/{platform.machine().lower()})"
