"""
Single-file HTTP downloads for repository definitions and signing keys.
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import unquote, urlparse

import aiofiles
import aiohttp

from src.i18n import _
from src.pkgs.operations.repository_errors import RepositoryNetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# Downloads are allowed to take as long as they need
NO_TIMEOUT = aiohttp.ClientTimeout(total=None)


async def download_file(url: str, destination: str) -> None:
    """
    Download ``url`` into ``destination``.

    Raises:
        RepositoryNetworkError: On transport errors or a non-2xx status
    """
    logger.info("Downloading %s to %s", url, destination)
    try:
        async with aiohttp.ClientSession(timeout=NO_TIMEOUT) as session:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise RepositoryNetworkError(
                        _("Failed to download %s: bad status %s")
                        % (url, response.status)
                    )
                async with aiofiles.open(destination, "wb") as file_handle:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        await file_handle.write(chunk)
    except aiohttp.ClientError as error:
        raise RepositoryNetworkError(
            _("Failed to download %s: %s") % (url, error)
        ) from error


@asynccontextmanager
async def downloaded_file(url: str, suffix: str = "") -> AsyncIterator[str]:
    """
    Download ``url`` to a temporary file and yield its path.

    The temporary file is removed when the context exits, whether or not the
    download or the caller's processing succeeded.
    """
    file_descriptor, tmp_path = tempfile.mkstemp(prefix="pkgs-", suffix=suffix)
    os.close(file_descriptor)
    try:
        await download_file(url, tmp_path)
        yield tmp_path
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _filename_from_disposition(disposition: str) -> Optional[str]:
    """Pull the file name out of a Content-Disposition header."""
    if "filename=" not in disposition:
        return None
    name = disposition.split("filename=", 1)[1].split(";", 1)[0]
    name = name.strip("\"' ")
    return os.path.basename(name) or None


def filename_from_url(url: str) -> str:
    """Last path segment of a URL."""
    return os.path.basename(unquote(urlparse(url).path))


async def fetch_remote_filename(url: str) -> str:
    """
    Work out the file name a server intends for ``url``.

    Uses the Content-Disposition header of a HEAD request, falling back to
    the last segment of the URL path.

    Raises:
        RepositoryNetworkError: If the HEAD request fails
    """
    try:
        async with aiohttp.ClientSession(timeout=NO_TIMEOUT) as session:
            async with session.head(url, allow_redirects=True) as response:
                disposition = response.headers.get("Content-Disposition", "")
    except aiohttp.ClientError as error:
        raise RepositoryNetworkError(
            _("Failed to get key information from %s: %s") % (url, error)
        ) from error

    name = _filename_from_disposition(disposition) if disposition else None
    return name or filename_from_url(url)
