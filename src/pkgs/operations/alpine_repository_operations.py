"""
Alpine-family (apk) repository operations.

All repositories live in the single ``/etc/apk/repositories`` file, one URL
per line. Entries added by this tool are preceded by a ``# <name>`` comment so
they can later be enabled by name.
"""

import os
from typing import Any, Dict, List, Optional, Tuple

from src.i18n import _
from src.pkgs.core.download import fetch_remote_filename
from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_errors import (
    RepositoryArgumentError,
    RepositoryNotFoundError,
)
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
)


def _split_line_ending(line: str) -> Tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body) :]


class AlpineRepositoryOperations(RepositoryFamilyOperations):
    """Repository operations for apk-based systems."""

    family = RepositoryFamily.ALPINE

    @property
    def repositories_file(self) -> str:
        return self.config.main_file

    def _name_marker(self, name: str) -> str:
        return f"{self.config.comment_marker} {name}"

    def _is_comment(self, text: str) -> bool:
        return text.strip().startswith(self.config.comment_marker)

    def _uncomment(self, text: str) -> str:
        """Strip the comment marker (and one space) while keeping indentation."""
        stripped = text.lstrip()
        indent = text[: len(text) - len(stripped)]
        rest = stripped[len(self.config.comment_marker) :]
        if rest.startswith(" "):
            rest = rest[1:]
        return indent + rest

    def _comment(self, text: str) -> str:
        return f"{self.config.comment_marker} {text}"

    # ========== Operations ==========

    async def add_repository(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Append a named repository block to the repositories file."""
        if not name or not url:
            raise RepositoryArgumentError(
                _("Both a repository name and a repository URL are required")
            )

        repo_file = self.repositories_file
        content = await self._read_text(repo_file)

        if url in content:
            return self._already(
                _("Repository already exists in %s") % repo_file, repo_file
            )

        if content and not content.endswith("\n"):
            content += "\n"
        content += f"\n{self._name_marker(name)}\n{url}\n"

        await self._write(repo_file, content)
        self.logger.info("Added repository %s", name)
        return self._changed(_("Repository added to %s") % repo_file, repo_file)

    async def enable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """
        Uncomment the URL line that follows a ``# <name>`` marker.

        Only the comment-plus-URL layout written by ``add_repository`` can be
        enabled by name.
        """
        repo_file = self.repositories_file
        content = await self._read_text(repo_file)
        lines = content.splitlines(keepends=True)
        marker = self._name_marker(name)

        marker_index = next(
            (index for index, line in enumerate(lines) if line.strip() == marker),
            None,
        )
        if marker_index is None:
            raise RepositoryNotFoundError(
                _(
                    "Repository %s not found in %s. Enabling by name requires a "
                    "'%s' line directly above the repository URL, as written by "
                    "'pkgs add-repo'."
                )
                % (name, repo_file, marker)
            )

        url_index = marker_index + 1
        if url_index >= len(lines) or not lines[url_index].strip():
            raise RepositoryNotFoundError(
                _("No repository URL follows '%s' in %s") % (marker, repo_file)
            )

        body, ending = _split_line_ending(lines[url_index])
        if not self._is_comment(body):
            return self._already(
                _("Repository %s is already enabled in %s") % (name, repo_file),
                repo_file,
            )

        lines[url_index] = self._uncomment(body) + ending
        await self._write(repo_file, "".join(lines))
        return self._changed(
            _("Successfully enabled repository %s in %s") % (name, repo_file),
            repo_file,
        )

    async def disable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """
        Comment out every active line belonging to a repository.

        A line belongs to the repository when it contains ``/<name>`` or
        directly follows the ``# <name>`` marker.
        """
        repo_file = self.repositories_file
        content = await self._read_text(repo_file)
        lines = content.splitlines(keepends=True)
        marker = self._name_marker(name)
        needle = "/" + name

        modified = False
        already_disabled = False
        follows_marker = False
        for index, line in enumerate(lines):
            body, ending = _split_line_ending(line)
            stripped = body.strip()
            matches = needle in stripped or follows_marker
            follows_marker = stripped == marker

            if not stripped or stripped == marker:
                continue
            if self._is_comment(stripped):
                already_disabled = already_disabled or matches
                continue
            if matches:
                lines[index] = self._comment(body) + ending
                modified = True

        if not modified:
            if already_disabled:
                return self._already(
                    _("Repository %s is already disabled in %s") % (name, repo_file),
                    repo_file,
                )
            raise RepositoryNotFoundError(
                _("Repository %s not found in %s") % (name, repo_file)
            )

        await self._write(repo_file, "".join(lines))
        return self._changed(
            _("Successfully disabled repository %s in %s") % (name, repo_file),
            repo_file,
        )

    async def add_key(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Download a key into ``/etc/apk/keys``, naming it after the server's file name if needed."""
        if not url:
            raise RepositoryArgumentError(_("A key URL is required"))
        if not name:
            name = await fetch_remote_filename(url)
        if not name:
            raise RepositoryArgumentError(
                _("Could not determine a file name for key %s") % url
            )

        key_path = os.path.join(self.config.keys_dir, os.path.basename(name))
        return await self._install_key(url, key_path, options)

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List every repository URL, commented ones as disabled."""
        repo_file = self.repositories_file
        content = await self._read_text(repo_file)

        repositories = []
        pending_name: Optional[str] = None
        for line in content.splitlines():
            line = line.strip()
            if not line:
                pending_name = None
                continue

            enabled = not line.startswith(self.config.comment_marker)
            if not enabled:
                text = self._uncomment(line).strip()
                if "://" not in text:
                    # A bare comment names the entry below it
                    pending_name = text or None
                    continue
                line = text

            repositories.append(
                {
                    "name": pending_name or line,
                    "type": "APK",
                    "url": line,
                    "enabled": enabled,
                    "file_path": repo_file,
                }
            )
            pending_name = None

        return repositories
