"""
Homebrew repository operations.

Homebrew repositories are taps managed by ``brew`` itself; nothing here edits
files directly.
"""

from typing import Any, Dict, List

from src.i18n import _
from src.pkgs.core.async_utils import run_command_async
from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_errors import (
    RepositoryArgumentError,
    RepositoryIOError,
)
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
)


class HomebrewRepositoryOperations(RepositoryFamilyOperations):
    """Repository operations for Homebrew taps."""

    family = RepositoryFamily.HOMEBREW

    unsupported_messages = {
        "enable_repository": (
            "For Homebrew, taps are always enabled if they are installed. "
            "If you need to add a tap, use 'pkgs add-repo tap-name' instead."
        ),
        "disable_repository": (
            "For Homebrew, you can use 'brew untap' to remove a tap completely. "
            "There is no direct way to disable a tap while keeping it installed."
        ),
        "add_key": (
            "For Homebrew, keys are managed automatically when adding taps. "
            "Use 'brew tap' to add a repository."
        ),
    }

    async def _brew(self, *args: str):
        command = ["brew", *args]
        self.logger.debug("Running %s", " ".join(command))
        try:
            return await run_command_async(command)
        except FileNotFoundError as error:
            raise RepositoryIOError(_("brew executable not found: %s") % error) from error

    async def add_repository(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """
        Add a tap with ``brew tap``.

        With both values, ``name`` is the tap and ``url`` its git remote;
        with one, that value is the tap name.
        """
        tap_name = name or url
        if not tap_name:
            raise RepositoryArgumentError(_("A tap name is required"))
        # Validate tap name format (should be user/repo)
        if "/" not in tap_name:
            raise RepositoryArgumentError(
                _("Invalid tap format. Use 'user/repo' format")
            )

        args = ["tap", tap_name]
        if name and url and url != name:
            args.append(url)

        result = await self._brew(*args)
        self.logger.debug(
            "brew tap command result: exit_code=%s, stdout=%s, stderr=%s",
            result.returncode,
            result.stdout[:200],
            result.stderr[:200],
        )

        if result.returncode != 0:
            self.logger.error("Failed to add tap %s: %s", tap_name, result.stderr)
            raise RepositoryIOError(_("Failed to add tap: %s") % result.stderr.strip())

        self.logger.info("Tap %s added successfully", tap_name)
        return self._changed(_("Tap %s added successfully") % tap_name)

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List installed taps."""
        result = await self._brew("tap")
        if result.returncode != 0:
            raise RepositoryIOError(
                _("Failed to list Homebrew taps: %s") % result.stderr.strip()
            )

        return [
            {
                "name": tap,
                "type": "TAP",
                "url": tap,
                "enabled": True,
                "file_path": "",
            }
            for tap in (line.strip() for line in result.stdout.splitlines())
            if tap
        ]
