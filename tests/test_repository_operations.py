#!/usr/bin/env python3
"""
Tests for the RepositoryOperations orchestrator.
"""

# pylint: disable=redefined-outer-name,protected-access

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.pkgs.operations.alpine_repository_operations import (
    AlpineRepositoryOperations,
)
from src.pkgs.operations.arch_repository_operations import ArchRepositoryOperations
from src.pkgs.operations.debian_repository_operations import (
    DebianRepositoryOperations,
)
from src.pkgs.operations.homebrew_repository_operations import (
    HomebrewRepositoryOperations,
)
from src.pkgs.operations.redhat_repository_operations import (
    RedHatRepositoryOperations,
)
from src.pkgs.operations.repository_errors import RepositoryConflictError
from src.pkgs.operations.repository_families import RepositoryFamily
from src.pkgs.operations.repository_operations import RepositoryOperations


@pytest.fixture
def config_manager(tmp_path):
    """Config manager pointing the RedHat family at a temporary directory."""
    manager = MagicMock()
    manager.get_repository_overrides.return_value = {
        "base_dir": str(tmp_path),
        "unknown": "ignored",
    }
    return manager


class TestInit:
    """Test handler selection."""

    @pytest.mark.parametrize(
        "family, handler_class",
        [
            (RepositoryFamily.DEBIAN, DebianRepositoryOperations),
            (RepositoryFamily.REDHAT, RedHatRepositoryOperations),
            (RepositoryFamily.ALPINE, AlpineRepositoryOperations),
            (RepositoryFamily.ARCH, ArchRepositoryOperations),
            (RepositoryFamily.HOMEBREW, HomebrewRepositoryOperations),
        ],
    )
    def test_handler_per_family(self, family, handler_class):
        """Test that each family gets its own implementation."""
        ops = RepositoryOperations(family)
        assert isinstance(ops.handler, handler_class)

    def test_family_from_string(self):
        """Test that family values are accepted as strings."""
        assert RepositoryOperations("macos").family == RepositoryFamily.HOMEBREW

    def test_unknown_family(self):
        """Test that unknown families are rejected."""
        with pytest.raises(ValueError):
            RepositoryOperations("gentoo")

    def test_config_overrides_applied(self, tmp_path, config_manager):
        """Test that repositories.<family> overrides reach the handler."""
        ops = RepositoryOperations(RepositoryFamily.REDHAT, config_manager)

        config_manager.get_repository_overrides.assert_called_once_with("redhat")
        assert ops.handler.config.base_dir == str(tmp_path)
        assert ops.handler.config.file_suffix == ".repo"


class TestResults:
    """Test conversion of handler outcomes into result dictionaries."""

    @pytest.mark.asyncio
    async def test_success(self, tmp_path, config_manager):
        """Test a successful add through the orchestrator."""
        ops = RepositoryOperations(RepositoryFamily.REDHAT, config_manager)

        result = await ops.add_repository({"name": "myrepo", "url": "https://x/"})

        assert result["success"] is True
        assert result["changed"] is True
        assert os.path.isfile(tmp_path / "myrepo.repo")

    @pytest.mark.asyncio
    async def test_not_found(self, config_manager):
        """Test that NotFound becomes a failure dictionary."""
        ops = RepositoryOperations(RepositoryFamily.REDHAT, config_manager)

        result = await ops.enable_repository({"name": "missing"})

        assert result["success"] is False
        assert result["error_type"] == "not_found"
        assert "missing" in result["error"]

    @pytest.mark.asyncio
    async def test_unsupported(self):
        """Test that unsupported operations fail with their hint."""
        ops = RepositoryOperations(RepositoryFamily.ARCH)

        result = await ops.disable_repository({"name": "core"})

        assert result == {
            "success": False,
            "error": "For Arch Linux, you need to manually edit /etc/pacman.conf "
            "to disable repositories.",
            "error_type": "unsupported",
        }

    @pytest.mark.asyncio
    async def test_conflict(self):
        """Test that a declined prompt is a conflict result."""
        ops = RepositoryOperations(RepositoryFamily.DEBIAN)
        with patch.object(
            ops.handler,
            "add_repository",
            AsyncMock(side_effect=RepositoryConflictError("Operation cancelled by user")),
        ):
            result = await ops.add_repository({"name": "x", "url": "deb http://x"})

        assert result["error_type"] == "conflict"

    @pytest.mark.asyncio
    async def test_os_error(self):
        """Test that stray OS errors map to io_failure."""
        ops = RepositoryOperations(RepositoryFamily.DEBIAN)
        with patch.object(
            ops.handler,
            "list_repositories",
            AsyncMock(side_effect=PermissionError("denied")),
        ):
            result = await ops.list_repositories()

        assert result == {
            "success": False,
            "error": "denied",
            "error_type": "io_failure",
        }

    @pytest.mark.asyncio
    async def test_list(self, tmp_path, config_manager):
        """Test that listings report a count."""
        (tmp_path / "a.repo").write_text("[a]\nbaseurl=https://a\n[b]\nenabled=0\n")
        ops = RepositoryOperations(RepositoryFamily.REDHAT, config_manager)

        result = await ops.list_repositories()

        assert result["success"] is True
        assert result["count"] == 2

    @pytest.mark.asyncio
    async def test_default_options(self):
        """Test that options default to interactive mode."""
        ops = RepositoryOperations(RepositoryFamily.DEBIAN)
        mock_add = AsyncMock(return_value={"success": True})
        with patch.object(ops.handler, "add_key", mock_add):
            await ops.add_key({"name": "k", "url": "https://x/k"})

        options = mock_add.call_args[0][2]
        assert options.assume_yes is False

    @pytest.mark.asyncio
    async def test_undecodable_file_is_io_failure(self, tmp_path, config_manager):
        """Test that a file that is not UTF-8 fails with io_failure."""
        repo_file = tmp_path / "docker.list"
        repo_file.write_bytes(b"# caf\xe9\n# deb http://x jammy main\n")
        ops = RepositoryOperations(RepositoryFamily.DEBIAN, config_manager)

        result = await ops.enable_repository({"name": "docker"})

        assert result["success"] is False
        assert result["error_type"] == "io_failure"
        assert str(repo_file) in result["error"]
        assert repo_file.read_bytes() == b"# caf\xe9\n# deb http://x jammy main\n"

    @pytest.mark.asyncio
    async def test_undecodable_existing_file_on_add(self, tmp_path, config_manager):
        """Test that add does not prompt over a file it cannot decode."""
        repo_file = tmp_path / "docker.list"
        repo_file.write_bytes(b"deb http://x caf\xe9 main\n")
        ops = RepositoryOperations(RepositoryFamily.DEBIAN, config_manager)

        result = await ops.add_repository(
            {"name": "docker", "url": "deb http://x jammy main"}
        )

        assert result["error_type"] == "io_failure"
        assert repo_file.read_bytes() == b"deb http://x caf\xe9 main\n"
