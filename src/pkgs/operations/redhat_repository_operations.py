"""
RedHat-family (dnf/yum) repository operations.

Repositories are sections of ini-style ``.repo`` files; several repositories
may share one file, so enabling or disabling one means finding the file that
declares it and editing only that section.
"""

import os
from typing import Any, Dict, List, Tuple

from src.i18n import _
from src.pkgs.core.async_utils import read_file_async
from src.pkgs.core.download import downloaded_file, filename_from_url
from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_errors import (
    RepositoryArgumentError,
    RepositoryIOError,
    RepositoryNotFoundError,
)
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
)
from src.pkgs.operations.repository_locator import (
    find_repository_file,
    find_repository_file_by_name,
    list_repository_files,
)
from src.pkgs.operations.repository_parser import (
    get_section_value,
    is_section_enabled,
    parse_sections,
    set_section_enabled,
)

REPO_TEMPLATE = "[{id}]\nname={id}\nbaseurl={url}\nenabled=1\ngpgcheck=0\n"


class RedHatRepositoryOperations(RepositoryFamilyOperations):
    """Repository operations for dnf/yum-based systems."""

    family = RepositoryFamily.REDHAT

    unsupported_messages = {
        "add_key": (
            "For dnf/yum-based systems, keys are typically added with the repository. "
            "Use 'pkgs add-repo' with a .repo file that sets gpgkey."
        ),
    }

    def is_definition_url(self, url: str) -> bool:
        """Check whether a URL points at a remote ``.repo`` file."""
        return url.endswith(self.config.file_suffix)

    def derive_name(self, url: str) -> str:
        """Repository name from a ``.repo`` URL's file name."""
        name = filename_from_url(url)
        if name.endswith(self.config.file_suffix):
            name = name[: -len(self.config.file_suffix)]
        return name

    async def _fetch_definition(self, url: str) -> str:
        """Download a remote .repo file and return its text."""
        self.logger.info("Downloading repository file from %s", url)
        async with downloaded_file(url, suffix=self.config.file_suffix) as tmp_path:
            try:
                return await read_file_async(tmp_path)
            except (OSError, UnicodeDecodeError) as error:
                raise RepositoryIOError(
                    _("Failed to read downloaded repository file: %s") % error
                ) from error

    async def add_repository(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """
        Add a repository.

        A URL ending in ``.repo`` is downloaded and stored verbatim; any other
        URL becomes the baseurl of a minimal generated definition.
        """
        if not url:
            raise RepositoryArgumentError(_("A repository URL is required"))

        definition_url = self.is_definition_url(url)
        if not name:
            if not definition_url:
                raise RepositoryArgumentError(
                    _("A repository name is required unless the URL is a .repo file")
                )
            name = self.derive_name(url)

        self._ensure_dir(self.config.base_dir)
        repo_path = os.path.join(self.config.base_dir, name + self.config.file_suffix)

        if definition_url:
            content = await self._fetch_definition(url)
        else:
            content = REPO_TEMPLATE.format(id=name, url=url)

        if not await self._write_new_file(repo_path, content, options):
            return self._already(
                _("Repository already exists in %s") % repo_path, repo_path
            )

        if definition_url:
            message = _("Repository file added to %s") % repo_path
        else:
            message = _("Repository added to %s") % repo_path
        return self._changed(message, repo_path)

    def _locate(self, name: str) -> Tuple[str, str]:
        """
        Find the file and section id for a repository.

        Exact section ids are tried across every file before falling back to
        matching ``name=`` values.
        """
        base_dir = self.config.base_dir
        suffix = self.config.file_suffix

        repo_file, found = find_repository_file(base_dir, suffix, name)
        if found:
            return repo_file, name

        repo_file, section_id, found = find_repository_file_by_name(
            base_dir, suffix, name
        )
        if found:
            return repo_file, section_id

        raise RepositoryNotFoundError(
            _("Repository %s not found in any %s file") % (name, suffix)
        )

    async def _set_enabled(self, name: str, enable: bool) -> Dict[str, Any]:
        repo_file, section_id = self._locate(name)
        content = await self._read_text(repo_file)

        new_content, changed = set_section_enabled(
            content, section_id, enable, self.config.enable_key
        )
        if not changed:
            if enable:
                message = _("Repository %s is already enabled in %s")
            else:
                message = _("Repository %s is already disabled in %s")
            return self._already(message % (section_id, repo_file), repo_file)

        await self._write(repo_file, new_content)
        if enable:
            message = _("Successfully enabled repository %s in %s")
        else:
            message = _("Successfully disabled repository %s in %s")
        return self._changed(message % (section_id, repo_file), repo_file)

    async def enable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Set ``enabled=1`` on a repository section."""
        return await self._set_enabled(name, enable=True)

    async def disable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Set ``enabled=0`` on a repository section."""
        return await self._set_enabled(name, enable=False)

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List every section of every .repo file."""
        if not os.path.isdir(self.config.base_dir):
            raise RepositoryNotFoundError(
                _("Repository directory %s does not exist") % self.config.base_dir
            )

        repositories = []
        for repo_file in list_repository_files(
            self.config.base_dir, self.config.file_suffix
        ):
            content = await self._read_text(repo_file)
            for section in parse_sections(content):
                body = section.text
                enabled = is_section_enabled(body, self.config.enable_key)
                repositories.append(
                    {
                        "name": section.id,
                        "type": "COPR"
                        if "copr" in os.path.basename(repo_file).lower()
                        else "YUM",
                        "description": get_section_value(body, "name") or "",
                        "url": get_section_value(body, "baseurl")
                        or get_section_value(body, "metalink")
                        or get_section_value(body, "mirrorlist")
                        or "",
                        "enabled": enabled is not False,
                        "enabled_by_default": enabled is None,
                        "file_path": repo_file,
                    }
                )

        return repositories
