"""
Async helpers for subprocesses and file I/O.

Repository files are always replaced atomically: new content goes to a
temporary file in the target's directory which is then renamed over the
target, so a failed write never leaves a truncated file behind.
"""

import asyncio
import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Union

import aiofiles


@dataclass
class AsyncProcessResult:
    """Result from async subprocess execution, mimics subprocess.CompletedProcess."""

    returncode: int
    stdout: str
    stderr: str


async def run_command_async(
    cmd: List[str],
    timeout: Optional[float] = None,
    cwd: Optional[str] = None,
) -> AsyncProcessResult:
    """
    Run a command without a shell and collect its output.

    Args:
        cmd: Command and arguments
        timeout: Seconds to wait, or None to wait indefinitely
        cwd: Working directory for the command

    Returns:
        AsyncProcessResult with returncode, stdout, stderr

    Raises:
        asyncio.TimeoutError: If the command times out
        FileNotFoundError: If the executable does not exist
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise

    return AsyncProcessResult(
        returncode=process.returncode,
        stdout=stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else "",
        stderr=stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else "",
    )


async def read_file_async(filepath: str, encoding: str = "utf-8") -> str:
    """Read a text file without blocking the event loop, line endings untouched."""
    async with aiofiles.open(
        filepath, mode="r", encoding=encoding, newline=""
    ) as file_handle:
        return await file_handle.read()


async def read_bytes_async(filepath: str) -> bytes:
    """Read a binary file without blocking the event loop."""
    async with aiofiles.open(filepath, mode="rb") as file_handle:
        return await file_handle.read()


async def write_file_atomic_async(
    filepath: str, content: Union[str, bytes], permissions: int = 0o644
) -> None:
    """
    Replace a file's content atomically.

    An existing file keeps its permission bits; new files get ``permissions``.

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    parent_dir = os.path.dirname(filepath) or "."
    try:
        mode = os.stat(filepath).st_mode & 0o7777
    except FileNotFoundError:
        mode = permissions

    file_descriptor, tmp_path = tempfile.mkstemp(dir=parent_dir, prefix=".pkgs_")
    try:
        if isinstance(content, bytes):
            async with aiofiles.open(file_descriptor, "wb", closefd=True) as handle:
                await handle.write(content)
        else:
            async with aiofiles.open(
                file_descriptor, "w", encoding="utf-8", newline="", closefd=True
            ) as handle:
                await handle.write(content)

        os.chmod(tmp_path, mode)
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
