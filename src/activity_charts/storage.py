"""
Storage management for Activity Charts.

PURPOSE: Centralized JSON file I/O for records and preferences.
AI CONTEXT: Implements the record source and the key-value byte store the board consumes.

STORAGE STRUCTURE:
    .activity_charts/
    ├── records.json       # List: {"id", "timestamp"} records
    └── preferences.json   # Dict: key -> base64 encoded bytes

ERROR HANDLING STRATEGY:
- File not found: Return empty structure (dict or list)
- JSON corruption or non-UTF-8 bytes: Log error, return empty structure
- Malformed record: Log warning, skip that record
- Write failure: Log error, return False, don't crash

USAGE:
    # Production
    storage = StorageManager()
    records = storage.query_all()
    storage.set("chartOrder", b"[...]")

    # Testing with MockFileSystem
    storage = StorageManager(storage_dir="/test", filesystem=mock_fs)
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from .config import Config
from .filesystem import RealFileSystem
from .models import Record

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .filesystem import FileSystem

__all__ = ["OrderStore", "RecordSource", "StorageManager"]

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Read-only snapshot access to all records."""

    def query_all(self) -> Sequence[Record]:
        """Return every stored record."""
        ...


class OrderStore(Protocol):
    """Key-value store of opaque bytes."""

    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None."""
        ...

    def set(self, key: str, data: bytes) -> None:
        """Store bytes under key."""
        ...


class StorageManager:
    """
    JSON file I/O manager with comprehensive error handling.

    DESIGN PRINCIPLES:
    1. Fail-safe: Never crash the caller on I/O errors
    2. Predictable: Always return valid data structures
    3. Idempotent: Safe to initialize multiple times
    4. Logged: All errors recorded for debugging
    5. Testable: FileSystem can be injected for mocking

    WRITES:
    Content goes to '<file>.tmp' first and is renamed over the target, so
    a crash mid-write leaves the previous file intact.

    THREAD SAFETY:
    Not thread-safe. One ChartBoard owns one StorageManager.
    """

    def __init__(
        self,
        storage_dir: str | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """
        Initialize storage with directory structure.

        Args:
            storage_dir: Custom storage path. Default: Config.get_storage_dir()
            filesystem: FileSystem implementation. Default: RealFileSystem

        Creates:
            - Storage directory
            - Empty records.json and preferences.json if missing
        """
        self.storage_dir = storage_dir or Config.get_storage_dir()
        self._fs: FileSystem = filesystem or RealFileSystem()
        self.records_file = os.path.join(self.storage_dir, Config.RECORDS_FILE)
        self.preferences_file = os.path.join(self.storage_dir, Config.PREFERENCES_FILE)

        self._initialize_storage()

    def _initialize_storage(self) -> None:
        """
        Create directory structure and initialize empty files.

        ERROR HANDLING:
        Logs errors but doesn't raise - allows degraded operation.
        """
        try:
            self._fs.makedirs(self.storage_dir, exist_ok=True)

            if not self._fs.exists(self.records_file):
                self._write_json(self.records_file, [])
            if not self._fs.exists(self.preferences_file):
                self._write_json(self.preferences_file, {})

            logger.info(f"Storage initialized: {self.storage_dir}")
        except OSError as e:
            logger.error(f"Failed to initialize storage: {e}")

    def _read_json(self, file_path: str, default: Any) -> Any:
        """
        Read JSON file with error handling.

        Args:
            file_path: Path to JSON file
            default: Value to return on any error or type mismatch

        Returns:
            Parsed JSON data, or default if unreadable or not the same
            container type as default.
        """
        try:
            content = self._fs.read_text(file_path)
            data = json.loads(content)
        except FileNotFoundError:
            return default
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            return default
        except OSError as e:
            logger.error(f"Error reading {file_path}: {e}")
            return default

        if not isinstance(data, type(default)):
            logger.error(f"Unexpected {type(data).__name__} in {file_path}")
            return default
        return data

    def _write_json(self, file_path: str, data: Any) -> bool:
        """
        Write JSON file with error handling.

        Args:
            file_path: Path to JSON file
            data: Data to serialize

        Returns:
            True on success, False on failure.
        """
        tmp_path = f"{file_path}.tmp"
        try:
            content = json.dumps(data, indent=2, default=str)
            self._fs.write_text(tmp_path, content)
            self._fs.rename(tmp_path, file_path)
            return True
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            return False

    # =========================================================================
    # RECORD OPERATIONS
    # =========================================================================

    def query_all(self) -> list[Record]:
        """
        Load all records.

        Returns:
            List of Record, in stored order. Malformed entries are skipped.
        """
        records: list[Record] = []
        for item in self._read_json(self.records_file, []):
            try:
                records.append(Record.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed record {item!r}: {e}")
        return records

    def add_record(self, timestamp: datetime | None = None) -> Record | None:
        """
        Create and append a single record.

        Args:
            timestamp: Creation time. Defaults to now.

        Returns:
            The stored Record, or None if the write failed.
        """
        record = Record.create(timestamp)
        items: list[dict[str, Any]] = self._read_json(self.records_file, [])
        items.append(record.to_dict())
        if not self._write_json(self.records_file, items):
            return None
        return record

    def clear_records(self) -> bool:
        """
        Remove every record.

        Returns:
            True on success.
        """
        success = self._write_json(self.records_file, [])
        if success:
            logger.info("All records cleared")
        return success

    # =========================================================================
    # PREFERENCE OPERATIONS (key-value byte store)
    # =========================================================================

    def get(self, key: str) -> bytes | None:
        """
        Get bytes stored under a preference key.

        Args:
            key: Preference key, e.g. Config.ORDER_KEY

        Returns:
            Stored bytes, or None if absent or undecodable.
        """
        value = self._read_json(self.preferences_file, {}).get(key)
        if not isinstance(value, str):
            return None
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Invalid preference value for {key}: {e}")
            return None

    def set(self, key: str, data: bytes) -> None:
        """
        Store bytes under a preference key.

        Failures are logged, not raised.

        Args:
            key: Preference key
            data: Bytes to store
        """
        preferences: dict[str, Any] = self._read_json(self.preferences_file, {})
        preferences[key] = base64.b64encode(data).decode("ascii")
        self._write_json(self.preferences_file, preferences)
