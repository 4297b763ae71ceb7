#!/usr/bin/env python3
"""
Tests for RedHatRepositoryOperations class.
"""

# pylint: disable=redefined-outer-name,protected-access

import os
from unittest.mock import AsyncMock, patch

import pytest

from src.pkgs.operations.redhat_repository_operations import (
    REPO_TEMPLATE,
    RedHatRepositoryOperations,
)
from src.pkgs.operations.repository_errors import (
    RepositoryArgumentError,
    RepositoryConflictError,
    RepositoryNetworkError,
    RepositoryNotFoundError,
    RepositoryUnsupportedError,
)
from src.pkgs.operations.repository_families import RepositoryFamilyConfig

DOCKER_REPO = "[docker-ce-stable]\nname=Docker\nbaseurl=https://x\nenabled=1\n"


@pytest.fixture
def redhat_ops(redhat_config):
    """Create a RedHatRepositoryOperations instance on temporary paths."""
    return RedHatRepositoryOperations(redhat_config)


def _write(redhat_config, name, content):
    path = os.path.join(redhat_config.base_dir, name)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
    return path


def _read(path):
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def _serve(content):
    """Fake download_file writing ``content`` to the destination."""

    async def fake_download(_url, destination):
        with open(destination, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    return fake_download


class TestDockerScenario:
    """The docker-ce-stable disable scenario."""

    @pytest.mark.asyncio
    async def test_disable_then_disable_again(
        self, redhat_ops, redhat_config, options
    ):
        """Test disabling flips enabled and a second disable does not write."""
        path = _write(redhat_config, "docker.repo", DOCKER_REPO)

        result = await redhat_ops.disable_repository("docker-ce-stable", options)

        assert result["success"] is True
        assert result["changed"] is True
        assert _read(path) == (
            "[docker-ce-stable]\nname=Docker\nbaseurl=https://x\nenabled=0\n"
        )

        with patch.object(redhat_ops, "_write", AsyncMock()) as mock_write:
            again = await redhat_ops.disable_repository("docker-ce-stable", options)

        assert again["success"] is True
        assert again["already_satisfied"] is True
        assert "already disabled" in again["result"]
        mock_write.assert_not_called()


class TestEnableDisable:
    """Test enabling and disabling repository sections."""

    @pytest.mark.asyncio
    async def test_enable_only_touches_target_section(
        self, redhat_ops, redhat_config, options
    ):
        """Test that other sections in the same file are untouched."""
        content = (
            "[fedora]\nname=Fedora\nenabled=0\n\n"
            "[fedora-debuginfo]\nname=Fedora Debug\nenabled=0\n"
        )
        path = _write(redhat_config, "fedora.repo", content)

        result = await redhat_ops.enable_repository("fedora", options)

        assert result["changed"] is True
        assert _read(path) == content.replace("enabled=0", "enabled=1", 1)

    @pytest.mark.asyncio
    async def test_disable_inserts_missing_key(
        self, redhat_ops, redhat_config, options
    ):
        """Test that a section without the key gets one after the header."""
        path = _write(redhat_config, "x.repo", "[x]\nname=X\n[y]\nname=Y\n")

        await redhat_ops.disable_repository("x", options)

        assert _read(path) == "[x]\nenabled=0\nname=X\n[y]\nname=Y\n"

    @pytest.mark.asyncio
    async def test_enable_searches_all_files(
        self, redhat_ops, redhat_config, options
    ):
        """Test that the declaring file is found among several."""
        _write(redhat_config, "a.repo", "[foo-extra]\nenabled=0\n")
        path = _write(redhat_config, "b.repo", "[foo]\nenabled=0\n")

        result = await redhat_ops.enable_repository("foo", options)

        assert result["file_path"] == path
        assert _read(path) == "[foo]\nenabled=1\n"
        assert _read(os.path.join(redhat_config.base_dir, "a.repo")) == (
            "[foo-extra]\nenabled=0\n"
        )

    @pytest.mark.asyncio
    async def test_enable_by_name_value(self, redhat_ops, redhat_config, options):
        """Test the fallback match on the name= value."""
        path = _write(redhat_config, "c.repo", "[copr-x]\nname=Copr X\nenabled=0\n")

        result = await redhat_ops.enable_repository("Copr X", options)

        assert result["changed"] is True
        assert "copr-x" in result["result"]
        assert _read(path) == "[copr-x]\nname=Copr X\nenabled=1\n"

    @pytest.mark.asyncio
    async def test_enable_twice_is_idempotent(
        self, redhat_ops, redhat_config, options
    ):
        """Test that enabling an enabled repository reports it."""
        _write(redhat_config, "docker.repo", DOCKER_REPO)

        result = await redhat_ops.enable_repository("docker-ce-stable", options)

        assert result["already_satisfied"] is True
        assert "already enabled" in result["result"]

    @pytest.mark.asyncio
    async def test_unknown_repository(self, redhat_ops, redhat_config, options):
        """Test that an unknown id is NotFound."""
        _write(redhat_config, "docker.repo", DOCKER_REPO)

        with pytest.raises(RepositoryNotFoundError):
            await redhat_ops.enable_repository("nothing", options)


class TestAddRepository:
    """Test adding repositories."""

    @pytest.mark.asyncio
    async def test_add_generated_definition(
        self, redhat_ops, redhat_config, options
    ):
        """Test that a plain URL becomes a minimal definition."""
        result = await redhat_ops.add_repository(
            "myrepo", "https://example.com/repo/", options
        )

        path = os.path.join(redhat_config.base_dir, "myrepo.repo")
        assert result["changed"] is True
        assert _read(path) == (
            "[myrepo]\nname=myrepo\nbaseurl=https://example.com/repo/\n"
            "enabled=1\ngpgcheck=0\n"
        )

    @pytest.mark.asyncio
    async def test_add_plain_url_requires_name(self, redhat_ops, options):
        """Test that a generated definition needs a name."""
        with pytest.raises(RepositoryArgumentError):
            await redhat_ops.add_repository("", "https://example.com/repo/", options)

    @pytest.mark.asyncio
    async def test_add_repo_file_url(self, redhat_ops, redhat_config, options):
        """Test that a .repo URL is downloaded and stored verbatim."""
        with patch(
            "src.pkgs.core.download.download_file", side_effect=_serve(DOCKER_REPO)
        ):
            result = await redhat_ops.add_repository(
                "", "https://download.docker.com/linux/fedora/docker-ce.repo", options
            )

        path = os.path.join(redhat_config.base_dir, "docker-ce.repo")
        assert result["changed"] is True
        assert result["file_path"] == path
        assert _read(path) == DOCKER_REPO

    @pytest.mark.asyncio
    async def test_add_identical_is_noop(
        self, redhat_ops, redhat_config, options, confirm
    ):
        """Test that identical content is not rewritten and does not prompt."""
        _write(
            redhat_config,
            "myrepo.repo",
            REPO_TEMPLATE.format(id="myrepo", url="https://x/"),
        )

        with patch.object(redhat_ops, "_write", AsyncMock()) as mock_write:
            result = await redhat_ops.add_repository("myrepo", "https://x/", options)

        assert result["already_satisfied"] is True
        confirm.assert_not_called()
        mock_write.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_different_declined(
        self, redhat_ops, redhat_config, options, confirm
    ):
        """Test that a declined overwrite is a conflict."""
        path = _write(redhat_config, "myrepo.repo", "[myrepo]\nbaseurl=old\n")

        with pytest.raises(RepositoryConflictError):
            await redhat_ops.add_repository("myrepo", "https://x/", options)

        confirm.assert_called_once()
        assert _read(path) == "[myrepo]\nbaseurl=old\n"

    @pytest.mark.asyncio
    async def test_add_download_failure_leaves_no_files(
        self, redhat_ops, redhat_config, options
    ):
        """Test that a failed download writes nothing."""
        with patch(
            "src.pkgs.core.download.download_file",
            AsyncMock(side_effect=RepositoryNetworkError("bad status 404")),
        ):
            with pytest.raises(RepositoryNetworkError):
                await redhat_ops.add_repository("", "https://x/missing.repo", options)

        assert os.listdir(redhat_config.base_dir) == []

    @pytest.mark.asyncio
    async def test_add_key_unsupported(self, redhat_ops, options):
        """Test that keys are not installed separately."""
        with pytest.raises(RepositoryUnsupportedError, match="gpgkey"):
            await redhat_ops.add_key("x", "https://x/key", options)


class TestDefinitionUrls:
    """Test .repo URL helpers."""

    def test_is_definition_url(self, redhat_ops):
        """Test recognising a .repo URL."""
        assert redhat_ops.is_definition_url("https://x/docker-ce.repo")
        assert not redhat_ops.is_definition_url("https://x/repo/")

    def test_derive_name(self, redhat_ops):
        """Test deriving the repository name from the URL."""
        assert redhat_ops.derive_name("https://x/a/docker-ce.repo") == "docker-ce"


class TestListRepositories:
    """Test listing YUM repositories."""

    @pytest.mark.asyncio
    async def test_list_sections(self, redhat_ops, redhat_config):
        """Test that every section of every file is listed."""
        _write(redhat_config, "docker.repo", DOCKER_REPO)
        _write(
            redhat_config,
            "_copr-user-proj.repo",
            "[copr:user:proj]\nname=Copr proj\nmetalink=https://m/\n",
        )

        repos = await redhat_ops.list_repositories()

        by_name = {repo["name"]: repo for repo in repos}
        assert by_name["docker-ce-stable"]["url"] == "https://x"
        assert by_name["docker-ce-stable"]["type"] == "YUM"
        assert by_name["docker-ce-stable"]["enabled"] is True
        assert by_name["copr:user:proj"]["type"] == "COPR"
        assert by_name["copr:user:proj"]["url"] == "https://m/"
        assert by_name["copr:user:proj"]["enabled_by_default"] is True

    @pytest.mark.asyncio
    async def test_list_missing_directory(self, tmp_path):
        """Test listing when the repository directory is missing."""
        ops = RedHatRepositoryOperations(
            RepositoryFamilyConfig(base_dir=str(tmp_path / "none"), file_suffix=".repo")
        )
        with pytest.raises(RepositoryNotFoundError):
            await ops.list_repositories()
