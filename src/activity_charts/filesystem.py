"""
FileSystem abstraction for Activity Charts.

PURPOSE: Injectable file system interface for testability.
AI CONTEXT: Lets storage tests run against an in-memory filesystem.

DESIGN:
- Protocol defines the interface
- RealFileSystem uses actual os operations
- MockFileSystem in tests/conftest.py stores data in memory for tests

USAGE:
    # Production
    storage = StorageManager(filesystem=RealFileSystem())

    # Tests (MockFileSystem from conftest.py)
    storage = StorageManager(storage_dir="/test", filesystem=mock_fs)
"""

from __future__ import annotations

import os
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """
    Protocol for the file operations used by the storage layer.

    All paths are strings. Implementations are RealFileSystem for
    production and MockFileSystem for tests.
    """

    def exists(self, path: str) -> bool:
        """
        Check if path exists (file or directory).

        Args:
            path: Path to check.

        Returns:
            True if the path exists. Never raises.
        """
        ...

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create directory and all parent directories.

        Args:
            path: Directory to create.
            exist_ok: If True, don't raise if directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """
        Read file contents as text.

        Args:
            path: File to read.
            encoding: Text encoding (default utf-8).

        Returns:
            File contents as a string.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Write text to file, overwriting existing content.

        Args:
            path: File to write.
            content: String content.
            encoding: Text encoding (default utf-8).

        Raises:
            PermissionError: If file is read-only.
        """
        ...

    def rename(self, src: str, dst: str) -> None:
        """
        Move src to dst, replacing dst if it exists.

        Business context: Storage writes to a temporary file and renames
        it over the target so readers never observe a half-written file.

        Args:
            src: Existing file.
            dst: Destination path.

        Raises:
            FileNotFoundError: If source doesn't exist.
        """
        ...


class RealFileSystem:
    """
    Real file system implementation using the os module.

    Each method delegates directly to the corresponding os or built-in
    function.
    """

    def exists(self, path: str) -> bool:  # pragma: no cover
        """Delegate to os.path.exists()."""
        return os.path.exists(path)

    def makedirs(self, path: str, exist_ok: bool = False) -> None:  # pragma: no cover
        """Delegate to os.makedirs()."""
        os.makedirs(path, exist_ok=exist_ok)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:  # pragma: no cover
        """Read a text file from disk."""
        with open(path, encoding=encoding) as f:
            return f.read()

    def write_text(
        self, path: str, content: str, encoding: str = "utf-8"
    ) -> None:  # pragma: no cover
        """Write a text file to disk, creating parent directories."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding=encoding) as f:
            f.write(content)

    def rename(self, src: str, dst: str) -> None:  # pragma: no cover
        """Delegate to os.replace() so an existing dst is overwritten."""
        os.replace(src, dst)
