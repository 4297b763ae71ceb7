"""
Repository operations for pkgs.

This module acts as an orchestrator that delegates to the implementation for
the detected package manager family and turns repository errors into result
dictionaries.
"""

import logging
from typing import Any, Dict, Optional, Type

from src.i18n import _
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
from src.pkgs.operations.repository_base import RepositoryFamilyOperations
from src.pkgs.operations.repository_errors import ErrorKind, RepositoryError
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
    get_family_config,
)

FAMILY_OPERATIONS: Dict[RepositoryFamily, Type[RepositoryFamilyOperations]] = {
    RepositoryFamily.DEBIAN: DebianRepositoryOperations,
    RepositoryFamily.REDHAT: RedHatRepositoryOperations,
    RepositoryFamily.ALPINE: AlpineRepositoryOperations,
    RepositoryFamily.ARCH: ArchRepositoryOperations,
    RepositoryFamily.HOMEBREW: HomebrewRepositoryOperations,
}


class RepositoryOperations:
    """Manages repository operations for one package manager family."""

    def __init__(
        self,
        family: RepositoryFamily,
        config_manager=None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the repository operations manager."""
        self.family = RepositoryFamily(family)
        self.logger = logger or logging.getLogger(__name__)

        overrides = (
            config_manager.get_repository_overrides(self.family.value)
            if config_manager
            else None
        )
        handler_class = FAMILY_OPERATIONS[self.family]
        self.handler = handler_class(
            get_family_config(self.family, overrides), self.logger
        )

    async def _run(self, description: str, operation, *args) -> Dict[str, Any]:
        """Await a handler call and convert failures into a result dictionary."""
        try:
            return await operation(*args)
        except RepositoryError as error:
            self.logger.error(_("Error %s: %s"), description, error)
            return error.to_result()
        except OSError as error:
            self.logger.error(_("Error %s: %s"), description, error)
            return {
                "success": False,
                "error": str(error),
                "error_type": ErrorKind.IO_FAILURE.value,
            }

    async def add_repository(
        self, parameters: Dict[str, Any], options: Optional[RepositoryOptions] = None
    ) -> Dict[str, Any]:
        """
        Add a repository.

        Args:
            parameters: ``name`` and ``url`` of the repository
            options: Per-invocation options such as non-interactive mode

        Returns:
            Result dictionary with success status and message
        """
        name = parameters.get("name", "")
        url = parameters.get("url", "")
        self.logger.info(_("Adding repository: %s"), name or url)
        return await self._run(
            "adding repository",
            self.handler.add_repository,
            name,
            url,
            options or RepositoryOptions(),
        )

    async def enable_repository(
        self, parameters: Dict[str, Any], options: Optional[RepositoryOptions] = None
    ) -> Dict[str, Any]:
        """Enable a repository by ``name``."""
        name = parameters.get("name", "")
        self.logger.info(_("Enabling repository: %s"), name)
        return await self._run(
            "enabling repository",
            self.handler.enable_repository,
            name,
            options or RepositoryOptions(),
        )

    async def disable_repository(
        self, parameters: Dict[str, Any], options: Optional[RepositoryOptions] = None
    ) -> Dict[str, Any]:
        """Disable a repository by ``name``."""
        name = parameters.get("name", "")
        self.logger.info(_("Disabling repository: %s"), name)
        return await self._run(
            "disabling repository",
            self.handler.disable_repository,
            name,
            options or RepositoryOptions(),
        )

    async def add_key(
        self, parameters: Dict[str, Any], options: Optional[RepositoryOptions] = None
    ) -> Dict[str, Any]:
        """Install a signing key from ``url``, stored under ``name``."""
        name = parameters.get("name", "")
        url = parameters.get("url", "")
        self.logger.info(_("Adding key from %s"), url)
        return await self._run(
            "adding key",
            self.handler.add_key,
            name,
            url,
            options or RepositoryOptions(),
        )

    async def _list(self) -> Dict[str, Any]:
        repositories = await self.handler.list_repositories()
        return {
            "success": True,
            "repositories": repositories,
            "count": len(repositories),
        }

    async def list_repositories(self) -> Dict[str, Any]:
        """List configured repositories."""
        self.logger.info(_("Listing repositories"))
        return await self._run("listing repositories", self._list)
