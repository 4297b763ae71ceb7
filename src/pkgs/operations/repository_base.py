"""
Base class for per-family repository operations.

Subclasses override the operations their package manager supports; anything
left alone reports itself as unsupported with a family-specific hint.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union

from src.i18n import _
from src.pkgs.core.async_utils import (
    read_bytes_async,
    read_file_async,
    write_file_atomic_async,
)
from src.pkgs.core.download import downloaded_file
from src.pkgs.operations.repository_errors import (
    RepositoryConflictError,
    RepositoryIOError,
    RepositoryNotFoundError,
    RepositoryUnsupportedError,
)
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryFamilyConfig,
    RepositoryOptions,
    get_family_config,
)


class RepositoryFamilyOperations:
    """Repository add/enable/disable/list for one package manager family."""

    family: RepositoryFamily = None

    # Untranslated hints shown when an operation is not implemented
    unsupported_messages: Dict[str, str] = {}

    def __init__(
        self,
        config: Optional[RepositoryFamilyConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or get_family_config(self.family)
        self.logger = logger or logging.getLogger(__name__)

    # ========== Operations ==========

    async def add_repository(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Add a repository."""
        raise self._unsupported("add_repository")

    async def enable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Enable a repository."""
        raise self._unsupported("enable_repository")

    async def disable_repository(
        self, name: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Disable a repository."""
        raise self._unsupported("disable_repository")

    async def add_key(
        self, name: str, url: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Install a repository signing key."""
        raise self._unsupported("add_key")

    async def list_repositories(self) -> List[Dict[str, Any]]:
        """List configured repositories."""
        raise self._unsupported("list_repositories")

    # ========== Helpers ==========

    def _unsupported(self, operation: str) -> RepositoryUnsupportedError:
        message = self.unsupported_messages.get(
            operation, "This operation is not supported for this package manager."
        )
        return RepositoryUnsupportedError(_(message))

    @staticmethod
    def _changed(message: str, file_path: str = "") -> Dict[str, Any]:
        """Result for an operation that modified the system."""
        return {
            "success": True,
            "result": message,
            "changed": True,
            "already_satisfied": False,
            "file_path": file_path,
        }

    @staticmethod
    def _already(message: str, file_path: str = "") -> Dict[str, Any]:
        """Result for an operation whose target was already in the desired state."""
        return {
            "success": True,
            "result": message,
            "changed": False,
            "already_satisfied": True,
            "file_path": file_path,
        }

    async def _read_text(self, file_path: str) -> str:
        """Read a repository file, translating failures into repository errors."""
        if not os.path.isfile(file_path):
            raise RepositoryNotFoundError(
                _("Repository file %s does not exist") % file_path
            )
        try:
            return await read_file_async(file_path)
        except (OSError, UnicodeDecodeError) as error:
            raise RepositoryIOError(
                _("Failed to read file %s: %s") % (file_path, error)
            ) from error

    async def _write(self, file_path: str, content: Union[str, bytes]) -> None:
        """Atomically replace a repository file."""
        try:
            await write_file_atomic_async(file_path, content)
        except OSError as error:
            raise RepositoryIOError(
                _("Failed to write file %s: %s") % (file_path, error)
            ) from error
        self.logger.info("Wrote %s", file_path)

    @staticmethod
    def _ensure_dir(path: str) -> None:
        try:
            os.makedirs(path, mode=0o755, exist_ok=True)
        except OSError as error:
            raise RepositoryIOError(
                _("Failed to create directory %s: %s") % (path, error)
            ) from error

    async def _write_new_file(
        self,
        file_path: str,
        content: Union[str, bytes],
        options: RepositoryOptions,
    ) -> bool:
        """
        Write a file created by an "add" operation.

        Identical existing content is left alone without prompting; differing
        content is only replaced after confirmation.

        Returns:
            True if the file was written, False if it already matched

        Raises:
            RepositoryConflictError: If the operator declined to overwrite
        """
        if os.path.exists(file_path):
            try:
                if isinstance(content, bytes):
                    existing = await read_bytes_async(file_path)
                else:
                    existing = await read_file_async(file_path)
            except (OSError, UnicodeDecodeError) as error:
                raise RepositoryIOError(
                    _("Failed to read file %s: %s") % (file_path, error)
                ) from error

            if existing == content:
                self.logger.debug("%s already has the requested content", file_path)
                return False

            prompt = (
                _("Repository file %s already exists. Do you want to overwrite it?")
                % file_path
            )
            if not options.confirm_overwrite(prompt):
                raise RepositoryConflictError(_("Operation cancelled by user"))

        await self._write(file_path, content)
        return True

    async def _install_key(
        self, url: str, key_path: str, options: RepositoryOptions
    ) -> Dict[str, Any]:
        """Download a key and store it at ``key_path``."""
        self._ensure_dir(os.path.dirname(key_path))
        async with downloaded_file(url) as tmp_path:
            try:
                key_data = await read_bytes_async(tmp_path)
            except OSError as error:
                raise RepositoryIOError(
                    _("Failed to read file %s: %s") % (tmp_path, error)
                ) from error

        if not await self._write_new_file(key_path, key_data, options):
            return self._already(_("Key already present in %s") % key_path, key_path)
        return self._changed(_("Successfully added key to %s") % key_path, key_path)
