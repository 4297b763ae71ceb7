"""
Package manager families and their repository file conventions.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from src.pkgs.core.prompt import ask_for_confirmation


class RepositoryFamily(str, Enum):
    """Native package manager family detected on the host."""

    DEBIAN = "debian"
    REDHAT = "redhat"
    ALPINE = "alpine"
    ARCH = "arch"
    HOMEBREW = "macos"


@dataclass(frozen=True)
class RepositoryFamilyConfig:
    """Static file locations and syntax for one family."""

    base_dir: str = ""
    file_suffix: str = ""
    comment_marker: str = "#"
    enable_key: str = ""
    keys_dir: str = ""
    main_file: str = ""


DEFAULT_FAMILY_CONFIGS: Dict[RepositoryFamily, RepositoryFamilyConfig] = {
    RepositoryFamily.DEBIAN: RepositoryFamilyConfig(
        base_dir="/etc/apt/sources.list.d",
        file_suffix=".list",
        keys_dir="/etc/apt/keyrings",
        main_file="/etc/apt/sources.list",
    ),
    RepositoryFamily.REDHAT: RepositoryFamilyConfig(
        base_dir="/etc/yum.repos.d",
        file_suffix=".repo",
        enable_key="enabled",
    ),
    RepositoryFamily.ALPINE: RepositoryFamilyConfig(
        base_dir="/etc/apk",
        keys_dir="/etc/apk/keys",
        main_file="/etc/apk/repositories",
    ),
    RepositoryFamily.ARCH: RepositoryFamilyConfig(
        base_dir="/etc",
        main_file="/etc/pacman.conf",
    ),
    RepositoryFamily.HOMEBREW: RepositoryFamilyConfig(),
}

# Keys that may be overridden from the configuration file
_OVERRIDABLE_FIELDS = ("base_dir", "keys_dir", "main_file")


def get_family_config(
    family: RepositoryFamily, overrides: Optional[Dict[str, Any]] = None
) -> RepositoryFamilyConfig:
    """
    Get the file conventions for a family.

    Args:
        family: Package manager family
        overrides: Optional mapping with base_dir, keys_dir or main_file,
            normally the ``repositories.<family>`` configuration section

    Returns:
        RepositoryFamilyConfig with any overrides applied
    """
    config = DEFAULT_FAMILY_CONFIGS[family]
    if not overrides:
        return config

    changes = {
        key: str(value)
        for key, value in overrides.items()
        if key in _OVERRIDABLE_FIELDS and value
    }
    return replace(config, **changes)


@dataclass
class RepositoryOptions:
    """Per-invocation settings passed into every mutator call."""

    assume_yes: bool = False
    confirm: Callable[[str], bool] = ask_for_confirmation

    def confirm_overwrite(self, prompt: str) -> bool:
        """Return True when the operator (or non-interactive mode) allows it."""
        if self.assume_yes:
            return True
        return self.confirm(prompt)
