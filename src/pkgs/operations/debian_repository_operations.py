"""
Debian-family (apt) repository operations.

Repositories live one per file in ``sources.list.d/<name>.list``; a
repository is disabled by commenting out its ``deb``/``deb-src`` lines.
"""

import os
from typing import Any, Dict, List, Tuple

from src.i18n import _
from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_errors import RepositoryArgumentError
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
)
from src.pkgs.operations.repository_locator import list_repository_files

SOURCE_KEYWORDS = ("deb", "deb-src")


def _is_source_line(text: str) -> bool:
    """Check whether uncommented text is a deb/deb-src definition."""
    parts = text.split(None, 1)
    return bool(parts) and parts[0] in SOURCE_KEYWORDS


class DebianRepositoryOperations(RepositoryFamilyOperations):
    """Repository operations for apt-based systems."""

    family = RepositoryFamily.DEBIAN

    def _repo_path(self, name: str) -> str:
        return os.path.join(self.config.base_dir, name + self.config.file_suffix)

    # ========== Line helpers ==========

    def _uncomment(self, line: str) -> Tuple[str, bool]:
        """Strip the comment marker (and one space) from a commented source line."""
        marker = self.config.comment_marker
        stripped = line.lstrip()
        if not stripped.startswith(marker):
            return line, False

        rest = stripped[len(marker) :]
        if not _is_source_line(rest.strip()):
            return line, False

        indent = line[: len(line) - len(stripped)]
        if rest.startswith(" "):
            rest = rest[1:]
        return indent + rest, True

    def _comment(self, line: str) -> Tuple[str, bool]:
        """Comment out an active source line."""
        stripped = line.strip()
        if not stripped or stripped.startswith(self.config.comment_marker):
            return line, False
        if not _is_source_line(stripped):
            return line, False
        return f"{self.config.comment_marker} {line}", True

    async def _toggle(self, name: str, enable: bool) -> Dict[str, Any]:
        repo_path = self._repo_path(name)
        content = await self._read_text(repo_path)
        transform = self._uncomment if enable else self._comment

        modified = False
        lines = []
        for line in content.splitlines(keepends=True):
            body = line.rstrip("\r\n")
            new_body, changed = transform(body)
            lines.append(new_body + line[len(body) :])
            modified = modified or changed

        if not modified:
            if enable:
                message = _(
                    "Repository is already enabled or contains no valid repository entries."
                )
            else:
                message = _("Repository is already disabled.")
            return self._already(message, repo_path)

        await self._write(repo_path, "".join(lines))
        if enable:
            message = _("Successfully enabled repository in %s") % repo_path
        else:
            message = _("Successfully disabled repository in %s") % repo_path
        return self._changed(message, repo_path)

    # ========== Operations ==========

    async def add_repository(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Write ``<name>.list`` containing a single repository line."""
        if not name or not url:
            raise RepositoryArgumentError(
                _("Both a repository name and a repository line are required")
            )

        self._ensure_dir(self.config.base_dir)
        repo_path = self._repo_path(name)

        if not await self._write_new_file(repo_path, url + "\n", options):
            return self._already(
                _("Repository already exists in %s") % repo_path, repo_path
            )

        self.logger.info("Added repository %s", name)
        return self._changed(_("Repository added to %s") % repo_path, repo_path)

    async def enable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Uncomment the repository lines in ``<name>.list``."""
        return await self._toggle(name, enable=True)

    async def disable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Comment out the repository lines in ``<name>.list``."""
        return await self._toggle(name, enable=False)

    async def add_key(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Download a key into the keyrings directory as ``<name>.asc``."""
        if not name or not url:
            raise RepositoryArgumentError(_("Both a key name and a key URL are required"))
        key_path = os.path.join(self.config.keys_dir, name + ".asc")
        return await self._install_key(url, key_path, options)

    # ========== Listing ==========

    def _parse_list_sources_file(self, content: str, filepath: str) -> list:
        """Parse a one-line-per-source .list file."""
        repositories = []
        name = os.path.basename(filepath)
        for suffix in (".list", ".sources"):
            if name.endswith(suffix):
                name = name[: -len(suffix)]

        for line in content.splitlines():
            line = line.strip()
            if not line:
                continue

            enabled = not line.startswith(self.config.comment_marker)
            if not enabled:
                line = line.lstrip(self.config.comment_marker).strip()

            if not _is_source_line(line):
                continue

            repositories.append(
                {
                    "name": name,
                    "type": "APT",
                    "url": line,
                    "enabled": enabled,
                    "file_path": filepath,
                }
            )

        return repositories

    def _parse_deb822_sources_file(self, content: str, filepath: str) -> list:
        """Parse a DEB822 format .sources file."""
        repositories = []
        current_entry: Dict[str, Any] = {}
        name = os.path.basename(filepath)[: -len(".sources")]

        def flush():
            if current_entry.get("uris"):
                url = " ".join(
                    current_entry.get(key, "")
                    for key in ("types", "uris", "suites", "components")
                ).strip()
                repositories.append(
                    {
                        "name": name,
                        "type": "APT",
                        "url": url,
                        "enabled": current_entry.get("enabled", True),
                        "file_path": filepath,
                    }
                )

        for line in content.splitlines():
            line = line.rstrip()

            # Blank line ends a stanza
            if not line:
                flush()
                current_entry = {}
                continue

            if line.startswith("#") or line[0] in (" ", "\t") or ":" not in line:
                continue

            key, _sep, value = line.partition(":")
            key = key.strip().lower()
            value = value.strip()
            if key == "enabled":
                current_entry["enabled"] = value.lower() != "no"
            elif key in ("types", "uris", "suites", "components"):
                current_entry[key] = value

        flush()
        return repositories

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List repositories from sources.list and sources.list.d."""
        repositories = []

        if self.config.main_file and os.path.isfile(self.config.main_file):
            content = await self._read_text(self.config.main_file)
            repositories.extend(
                self._parse_list_sources_file(content, self.config.main_file)
            )

        if not os.path.isdir(self.config.base_dir):
            return repositories

        for filepath in list_repository_files(self.config.base_dir, ""):
            if filepath.endswith(".list"):
                parser = self._parse_list_sources_file
            elif filepath.endswith(".sources"):
                parser = self._parse_deb822_sources_file
            else:
                continue
            content = await self._read_text(filepath)
            repositories.extend(parser(content, filepath))

        return repositories
