"""
Pytest configuration and shared fixtures for pkgs tests.
"""

# pylint: disable=redefined-outer-name

from unittest.mock import Mock

import pytest

from src.pkgs.operations.repository_families import (
    RepositoryFamilyConfig,
    RepositoryOptions,
)


@pytest.fixture
def confirm():
    """Confirmation callback that declines unless told otherwise."""
    return Mock(return_value=False)


@pytest.fixture
def options(confirm):
    """Interactive options wired to the mock confirmation callback."""
    return RepositoryOptions(assume_yes=False, confirm=confirm)


@pytest.fixture
def yes_options(confirm):
    """Non-interactive options."""
    return RepositoryOptions(assume_yes=True, confirm=confirm)


@pytest.fixture
def debian_config(tmp_path):
    """Debian family configuration rooted in a temporary directory."""
    base_dir = tmp_path / "sources.list.d"
    base_dir.mkdir()
    return RepositoryFamilyConfig(
        base_dir=str(base_dir),
        file_suffix=".list",
        keys_dir=str(tmp_path / "keyrings"),
        main_file=str(tmp_path / "sources.list"),
    )


@pytest.fixture
def redhat_config(tmp_path):
    """RedHat family configuration rooted in a temporary directory."""
    base_dir = tmp_path / "yum.repos.d"
    base_dir.mkdir()
    return RepositoryFamilyConfig(
        base_dir=str(base_dir), file_suffix=".repo", enable_key="enabled"
    )


@pytest.fixture
def alpine_config(tmp_path):
    """Alpine family configuration rooted in a temporary directory."""
    return RepositoryFamilyConfig(
        base_dir=str(tmp_path),
        keys_dir=str(tmp_path / "keys"),
        main_file=str(tmp_path / "repositories"),
    )


@pytest.fixture
def arch_config(tmp_path):
    """Arch family configuration rooted in a temporary directory."""
    return RepositoryFamilyConfig(
        base_dir=str(tmp_path), main_file=str(tmp_path / "pacman.conf")
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove pkgs environment overrides for the duration of a test."""
    for key in ("PKGS_YES", "PKGS_LOG_LEVEL", "PKGS_LOG_FILE"):
        monkeypatch.delenv(key, raising=False)
