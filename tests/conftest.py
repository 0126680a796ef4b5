"""
Pytest configuration and shared fixtures for Activity Charts tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- MemoryOrderStore: Dict-backed byte store for board tests
- Shared fixtures available to all test modules
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta

import pytest

from activity_charts.board import ChartBoard
from activity_charts.config import Config
from activity_charts.models import Record
from activity_charts.storage import StorageManager

# Saturday, mid-year, far from any DST or year boundary
FIXED_NOW = datetime(2024, 6, 15, 12, 0)


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using dictionaries:
    - _files: dict mapping path -> content (str)
    - _dirs: set of directory paths
    - _read_only: paths whose writes raise PermissionError

    FEATURES:
    - No actual I/O operations
    - Fast test execution
    - Easy to inspect state
    - Supports write failure simulation
    """

    def __init__(self) -> None:
        """
        Initialize empty mock file system.

        Business context: Mock filesystem enables testing storage
        operations without actual disk I/O, making tests fast and
        deterministic.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.list_files()
            []
        """
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        self._read_only: set[str] = set()

    def exists(self, path: str) -> bool:
        """
        Check if path exists in mock filesystem.

        Args:
            path: Absolute path to check.

        Returns:
            True if path is a mock file or directory.
        """
        return path in self._files or path in self._dirs

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create mock directory and parent directories.

        Args:
            path: Absolute path of directory to create.
            exist_ok: If True, don't raise if directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False,
                or if path is an existing file.
        """
        if path in self._dirs:
            if not exist_ok:
                raise OSError(f"Directory exists: {path}")
            return

        if path in self._files:
            raise OSError(f"Path is a file, not directory: {path}")

        # Create all parent directories
        parts = path.rstrip("/").split("/")
        for i in range(1, len(parts) + 1):
            parent = "/".join(parts[:i])
            if parent:
                self._dirs.add(parent)

    def read_text(self, path: str, _encoding: str = "utf-8") -> str:
        """
        Read mock file contents.

        Args:
            path: Absolute path to file to read.
            _encoding: Ignored (mock stores strings directly).

        Returns:
            File contents.

        Raises:
            FileNotFoundError: If path is not a mock file.
        """
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]

    def write_text(self, path: str, content: str, _encoding: str = "utf-8") -> None:
        """
        Write content to mock file.

        Args:
            path: Absolute path to file.
            content: Text to store.
            _encoding: Ignored.

        Raises:
            PermissionError: If path was marked read-only.
        """
        if path in self._read_only:
            raise PermissionError(f"Permission denied: {path}")
        self._files[path] = content

    def rename(self, src: str, dst: str) -> None:
        """
        Move a mock file, replacing any file at dst.

        Raises:
            FileNotFoundError: If src is not a mock file.
            PermissionError: If dst was marked read-only.
        """
        if src not in self._files:
            raise FileNotFoundError(f"No such file: {src}")
        if dst in self._read_only:
            raise PermissionError(f"Permission denied: {dst}")
        self._files[dst] = self._files.pop(src)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def get_file(self, path: str) -> str | None:
        """Return file content, or None when the file does not exist."""
        return self._files.get(path)

    def set_file(self, path: str, content: str) -> None:
        """Create or overwrite a file directly, bypassing read-only flags."""
        self._files[path] = content

    def set_read_only(self, path: str) -> None:
        """Make writes to path (or renames onto it) raise PermissionError."""
        self._read_only.add(path)

    def list_files(self) -> list[str]:
        """All file paths, sorted for deterministic assertions."""
        return sorted(self._files)


class MemoryOrderStore:
    """
    Dict-backed OrderStore for board tests.

    Keeps every value written so tests can assert on the exact bytes
    the board persisted.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.values: dict[str, bytes] = dict(initial or {})
        self.writes: list[tuple[str, bytes]] = []

    def get(self, key: str) -> bytes | None:
        return self.values.get(key)

    def set(self, key: str, data: bytes) -> None:
        self.values[key] = data
        self.writes.append((key, data))


class MemoryRecordSource:
    """RecordSource over a mutable list of records."""

    def __init__(self, records: list[Record] | None = None) -> None:
        self.records: list[Record] = list(records or [])

    def query_all(self) -> list[Record]:
        return list(self.records)


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    """
    Reset Config test overrides around every test.

    Yields:
        None. Overrides set inside a test are cleared on teardown.
    """
    Config.reset_test_overrides()
    yield
    Config.reset_test_overrides()


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Provide a fresh MockFileSystem instance.

    Example:
        >>> def test_storage(mock_fs):
        ...     storage = StorageManager(storage_dir="/test", filesystem=mock_fs)
    """
    return MockFileSystem()


@pytest.fixture
def storage(mock_fs: MockFileSystem) -> StorageManager:
    """StorageManager over the mock filesystem at /test/storage."""
    return StorageManager(storage_dir="/test/storage", filesystem=mock_fs)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used by aggregation and statistics tests."""
    return FIXED_NOW


@pytest.fixture
def sample_records(now: datetime) -> list[Record]:
    """
    Five records: three at now, two ten days earlier.

    Yields weekly=3, active_days=2, daily_average=2.5 against now.
    """
    earlier = now - timedelta(days=10)
    return [Record(now, id=f"r{i}") for i in range(3)] + [
        Record(earlier, id=f"e{i}") for i in range(2)
    ]


@pytest.fixture
def record_source(sample_records: list[Record]) -> MemoryRecordSource:
    """Record source preloaded with sample_records."""
    return MemoryRecordSource(sample_records)


@pytest.fixture
def order_store() -> MemoryOrderStore:
    """Empty in-memory order store."""
    return MemoryOrderStore()


@pytest.fixture
def board(
    record_source: MemoryRecordSource, order_store: MemoryOrderStore, now: datetime
) -> ChartBoard:
    """Loaded ChartBoard over in-memory collaborators and a fixed clock."""
    chart_board = ChartBoard(record_source, order_store, clock=lambda: now)
    chart_board.load()
    return chart_board
