"""
Arch-family (pacman) repository operations.

Repositories are sections of ``/etc/pacman.conf``. Editing that file is left
to the administrator, so only listing is implemented.
"""

from typing import Any, Dict, List

from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_families import RepositoryFamily
from src.pkgs.operations.repository_parser import get_section_value, parse_sections

# pacman.conf section holding global settings rather than a repository
OPTIONS_SECTION = "options"


class ArchRepositoryOperations(RepositoryFamilyOperations):
    """Repository operations for pacman-based systems."""

    family = RepositoryFamily.ARCH

    unsupported_messages = {
        "add_repository": (
            "For Arch Linux, you need to manually edit /etc/pacman.conf "
            "to add repositories."
        ),
        "enable_repository": (
            "For Arch Linux, you need to manually edit /etc/pacman.conf "
            "to enable repositories."
        ),
        "disable_repository": (
            "For Arch Linux, you need to manually edit /etc/pacman.conf "
            "to disable repositories."
        ),
        "add_key": (
            "For Arch Linux, keys are typically added with "
            "'pacman-key --recv-keys' and 'pacman-key --lsign-key'."
        ),
    }

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List the repository sections of pacman.conf."""
        conf_file = self.config.main_file
        content = await self._read_text(conf_file)

        repositories = []
        for section in parse_sections(content):
            if section.id == OPTIONS_SECTION:
                continue
            body = section.text
            repositories.append(
                {
                    "name": section.id,
                    "type": "PACMAN",
                    "url": get_section_value(body, "Server")
                    or get_section_value(body, "Include")
                    or "",
                    "enabled": True,
                    "file_path": conf_file,
                }
            )

        return repositories
