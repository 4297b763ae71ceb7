"""
Locate the repository definition file that declares a given repository id.

There is no global index of repository ids, so every definition file in the
directory has to be scanned.
"""

import logging
import os
from typing import List, Optional, Tuple

from src.i18n import _
from src.pkgs.operations.repository_errors import RepositoryIOError
from src.pkgs.operations.repository_parser import (
    get_section_value,
    header_pattern,
    parse_sections,
)

logger = logging.getLogger(__name__)


def list_repository_files(base_dir: str, suffix: str) -> List[str]:
    """
    List definition files in a directory, sorted by name.

    Raises:
        RepositoryIOError: If the directory cannot be listed
    """
    try:
        filenames = sorted(os.listdir(base_dir))
    except OSError as error:
        raise RepositoryIOError(
            _("Failed to list repository files in %s: %s") % (base_dir, error)
        ) from error

    return [
        os.path.join(base_dir, filename)
        for filename in filenames
        if filename.endswith(suffix)
        and os.path.isfile(os.path.join(base_dir, filename))
    ]


def _read_candidate(filepath: str) -> Optional[str]:
    """Read one candidate file; unreadable files yield None."""
    try:
        with open(filepath, "r", encoding="utf-8") as file_handle:
            return file_handle.read()
    except (OSError, UnicodeDecodeError) as error:
        logger.warning("Skipping unreadable repository file %s: %s", filepath, error)
        return None


def find_repository_file(base_dir: str, suffix: str, repo_id: str) -> Tuple[str, bool]:
    """
    Find the first file whose sections include ``[repo_id]`` exactly.

    Args:
        base_dir: Directory holding repository definition files
        suffix: File name suffix to consider (e.g. ".repo")
        repo_id: Case-sensitive repository id

    Returns:
        Tuple of (file path, True) for the first match in listing order,
        or ("", False) when no file declares the id

    Raises:
        RepositoryIOError: If the directory cannot be listed
    """
    pattern = header_pattern(repo_id)
    if pattern is None:
        return "", False

    for filepath in list_repository_files(base_dir, suffix):
        content = _read_candidate(filepath)
        if content is None:
            continue
        if pattern.search(content):
            logger.debug("Repository %s found in %s", repo_id, filepath)
            return filepath, True

    return "", False


def find_repository_file_by_name(
    base_dir: str, suffix: str, name: str
) -> Tuple[str, str, bool]:
    """
    Find the first section whose ``name=`` value equals ``name``.

    Only meant as a fallback once an exact id search has failed.

    Returns:
        Tuple of (file path, section id, True), or ("", "", False)
    """
    for filepath in list_repository_files(base_dir, suffix):
        content = _read_candidate(filepath)
        if content is None:
            continue
        for section in parse_sections(content):
            value = get_section_value(section.text, "name")
            if value is not None and value.strip() == name:
                logger.debug(
                    "Repository name %s matched section %s in %s",
                    name,
                    section.id,
                    filepath,
                )
                return filepath, section.id, True

    return "", "", False
