"""Local file system adapter.

Implements the FileSystem port using pathlib and os.
This is the default adapter for file system operations.
"""

import errno
import os
from pathlib import Path
from typing import BinaryIO


class LocalFileSystem:
    """Local file system implementation using pathlib.

    This adapter implements the FileSystem port protocol for standard
    local file system operations. All paths should be absolute and already
    confined by the path resolver; no containment checks happen here.
    """

    def exists(self, path: str) -> bool:
        """Check if path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists, False otherwise.
        """
        return Path(path).exists()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def stat(self, path: str) -> os.stat_result:
        return Path(path).stat()

    def read(self, path: str) -> bytes:
        """Read file contents.

        Args:
            path: Absolute path to file.

        Returns:
            File contents as bytes.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        return Path(path).read_bytes()

    def write(self, path: str, content: bytes) -> int:
        """Write content to file.

        Unlike a plain save helper, missing parent directories are not
        created: writing below a missing directory fails like a native write.

        Args:
            path: Absolute path to file.
            content: Content to write.

        Returns:
            Number of bytes written.
        """
        return Path(path).write_bytes(content)

    def open(self, path: str, mode: str) -> BinaryIO:
        return open(path, mode)

    def mkdir(self, path: str, parents: bool = False) -> None:
        """Create directory.

        Args:
            path: Directory path to create.
            parents: Create parent directories if needed.

        Raises:
            FileExistsError: If the path already exists.
        """
        Path(path).mkdir(parents=parents, exist_ok=False)

    def rmdir(self, path: str) -> None:
        Path(path).rmdir()

    def unlink(self, path: str) -> None:
        target = Path(path)
        if target.is_dir():
            # Linux reports EISDIR but macOS reports EPERM; normalize
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
        target.unlink()

    def rename(self, source: str, target: str) -> None:
        os.replace(source, target)

    def touch(self, path: str, mtime: float | None = None) -> None:
        """Create an empty file or update its timestamps.

        Args:
            path: Absolute path to file.
            mtime: Timestamp for both atime and mtime, or None for now.

        Raises:
            FileNotFoundError: If the parent directory doesn't exist.
        """
        target = Path(path)
        target.touch(exist_ok=True)
        if mtime is not None:
            os.utime(target, (mtime, mtime))

    def list_dir(self, path: str) -> list[str]:
        """List entry names in the order the OS enumerates them.

        Args:
            path: Directory to list.

        Returns:
            Entry names, without "." and "..".
        """
        return os.listdir(path)
