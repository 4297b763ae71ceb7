"""
Native package manager detection.
"""

import logging
import shutil
from dataclasses import dataclass
from typing import Optional

from src.pkgs.operations.repository_families import RepositoryFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    """Package manager found on the host."""

    name: str
    binary: str
    family: RepositoryFamily


# Probed in order; the first binary found on PATH wins
KNOWN_PACKAGE_MANAGERS = (
    PackageManager("brew", "brew", RepositoryFamily.HOMEBREW),
    PackageManager("apt", "apt", RepositoryFamily.DEBIAN),
    PackageManager("apt-get", "apt-get", RepositoryFamily.DEBIAN),
    PackageManager("dnf", "dnf", RepositoryFamily.REDHAT),
    PackageManager("yum", "yum", RepositoryFamily.REDHAT),
    PackageManager("apk", "apk", RepositoryFamily.ALPINE),
    PackageManager("pacman", "pacman", RepositoryFamily.ARCH),
)


def _command_exists(command: str) -> bool:
    """Check if a command exists on PATH."""
    return shutil.which(command) is not None


def detect_package_manager(
    forced_family: Optional[str] = None,
) -> Optional[PackageManager]:
    """
    Identify the package manager available on this system.

    Args:
        forced_family: Family value from configuration; when set, the first
            known package manager of that family is returned without probing

    Returns:
        The detected PackageManager, or None if nothing supported is found

    Raises:
        ValueError: If forced_family is not a known family
    """
    if forced_family:
        family = RepositoryFamily(forced_family)
        for manager in KNOWN_PACKAGE_MANAGERS:
            if manager.family == family:
                logger.debug("Using configured package manager family %s", family)
                return manager

    for manager in KNOWN_PACKAGE_MANAGERS:
        if _command_exists(manager.binary):
            logger.debug("Detected package manager %s", manager.name)
            return manager

    logger.warning("No supported package manager detected")
    return None
