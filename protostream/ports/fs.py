"""File System port interface.

Defines the real-filesystem primitives the dispatcher delegates to once a
protocol path has been resolved and checked. Enables testing and potential
alternative storage backends.

Implementations must raise the standard OSError subclasses
(FileNotFoundError, FileExistsError, PermissionError, ...) so failures can
be classified as not-found, already-exists, not-empty or generic I/O.
"""

import os
from typing import BinaryIO, Protocol


class FileSystem(Protocol):
    """Protocol for file system operations on absolute real paths."""

    def exists(self, path: str) -> bool:
        """Check if path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists, False otherwise.
        """
        ...

    def is_dir(self, path: str) -> bool:
        """Check if path is an existing directory."""
        ...

    def stat(self, path: str) -> os.stat_result:
        """Stat a path.

        Raises:
            FileNotFoundError: If path doesn't exist.
        """
        ...

    def read(self, path: str) -> bytes:
        """Read file contents.

        Args:
            path: Absolute path to file.

        Returns:
            File contents as bytes.

        Raises:
            FileNotFoundError: If file doesn't exist.
            IsADirectoryError: If path is a directory.
        """
        ...

    def write(self, path: str, content: bytes) -> int:
        """Write content to file, truncating existing content.

        Args:
            path: Absolute path to file.
            content: Content to write.

        Returns:
            Number of bytes written.

        Raises:
            FileNotFoundError: If the parent directory doesn't exist.
        """
        ...

    def open(self, path: str, mode: str) -> BinaryIO:
        """Open a binary file object.

        Args:
            path: Absolute path to file.
            mode: Binary open mode (e.g. "rb", "wb", "r+b").
        """
        ...

    def mkdir(self, path: str, parents: bool = False) -> None:
        """Create directory.

        Args:
            path: Directory path to create.
            parents: Create parent directories if needed.

        Raises:
            FileExistsError: If the path already exists.
            FileNotFoundError: If the parent is missing and parents=False.
        """
        ...

    def rmdir(self, path: str) -> None:
        """Remove an empty directory.

        Raises:
            FileNotFoundError: If the directory doesn't exist.
            OSError: With errno ENOTEMPTY if the directory has entries.
        """
        ...

    def unlink(self, path: str) -> None:
        """Remove a file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            IsADirectoryError: If path is a directory.
        """
        ...

    def rename(self, source: str, target: str) -> None:
        """Rename source to target, replacing an existing target file."""
        ...

    def touch(self, path: str, mtime: float | None = None) -> None:
        """Create an empty file or update its access/modification times.

        Args:
            path: Absolute path to file.
            mtime: Timestamp to set, or None for the current time.
        """
        ...

    def list_dir(self, path: str) -> list[str]:
        """List entry names of a directory in enumeration order.

        The "." and ".." entries are not included.

        Raises:
            FileNotFoundError: If the directory doesn't exist.
            NotADirectoryError: If path is not a directory.
        """
        ...
