"""
Configuration for Activity Charts.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Storage: File paths and the persisted chart order key
- Windows: Trailing day/week spans used by the aggregates
- Charts: Fixed titles, subtitles and time-of-day slots
- Dashboard: Default bind address

ENVIRONMENT VARIABLES:
- ACTIVITY_CHARTS_STORAGE_DIR: Override storage directory (default: .activity_charts)

USAGE:
    from activity_charts.config import Config
    storage_dir = Config.get_storage_dir()
    days = Config.HEATMAP_WINDOW_DAYS
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for Activity Charts.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    WINDOW MODEL:
    Both day windows include their start and end dates, so the heatmap
    spans HEATMAP_WINDOW_DAYS + 1 calendar days and the trend line spans
    LINE_WINDOW_DAYS + 1 calendar days.

    STORAGE STRUCTURE:
        .activity_charts/
        ├── records.json       # List of {id, timestamp}
        └── preferences.json   # Dict: key -> base64 encoded bytes
    """

    # =========================================================================
    # STORAGE CONFIGURATION
    # =========================================================================
    STORAGE_DIR: ClassVar[str] = ".activity_charts"
    RECORDS_FILE: ClassVar[str] = "records.json"
    PREFERENCES_FILE: ClassVar[str] = "preferences.json"

    ORDER_KEY: ClassVar[str] = "chartOrder"
    """Preference key holding the serialized chart order."""

    # =========================================================================
    # AGGREGATION WINDOWS
    # =========================================================================
    WEEKLY_WINDOW_DAYS: ClassVar[int] = 7
    HEATMAP_WINDOW_DAYS: ClassVar[int] = 365
    BAR_WINDOW_WEEKS: ClassVar[int] = 12
    LINE_WINDOW_DAYS: ClassVar[int] = 30

    # =========================================================================
    # CHART PRESENTATION
    # =========================================================================
    CHART_TITLES: ClassVar[dict[str, tuple[str, str]]] = {
        "heatmap": ("Activity Heatmap", "Creation activity over the past year"),
        "bar": ("Weekly Totals", "Records created in the last 12 weeks"),
        "pie": ("Time of Day", "When records are created"),
        "line": ("30-Day Trend", "Daily records over the last 30 days"),
    }

    TIME_SLOTS: ClassVar[tuple[tuple[str, str, int, int], ...]] = (
        ("morning", "Morning (6-12)", 6, 12),
        ("afternoon", "Afternoon (12-18)", 12, 18),
        ("evening", "Evening (18-24)", 18, 24),
        ("night", "Night (0-6)", 0, 6),
    )
    """Pie slots as (key, label, start hour inclusive, end hour exclusive)."""

    # =========================================================================
    # DASHBOARD
    # =========================================================================
    DEFAULT_HOST: ClassVar[str] = "127.0.0.1"
    DEFAULT_PORT: ClassVar[int] = 8000

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _storage_dir_override: ClassVar[str | None] = None

    @classmethod
    def get_storage_dir(cls) -> str:
        """
        Get the directory holding records and preferences.

        Uses a priority system: test overrides first, then the
        ACTIVITY_CHARTS_STORAGE_DIR environment variable, then the
        STORAGE_DIR default relative to the working directory.

        Business context: Keeping data per working directory mirrors a
        per-project notebook. The environment variable lets a user point
        every invocation at one shared store.

        Returns:
            Storage directory path string.

        Raises:
            None: Environment lookup never raises.

        Example:
            >>> Config.get_storage_dir()
            '.activity_charts'
        """
        if cls._storage_dir_override is not None:
            return cls._storage_dir_override
        return os.environ.get("ACTIVITY_CHARTS_STORAGE_DIR", cls.STORAGE_DIR)

    @classmethod
    def chart_title(cls, kind_value: str) -> tuple[str, str]:
        """
        Look up the (title, subtitle) pair for a chart kind value.

        Args:
            kind_value: ChartKind value such as 'heatmap'.

        Returns:
            Tuple of title and subtitle strings.

        Raises:
            KeyError: If kind_value is not a known chart kind.
        """
        return cls.CHART_TITLES[kind_value]

    @classmethod
    def set_test_overrides(cls, storage_dir: str | None = None) -> None:
        """
        Set test overrides for environment-based settings.

        Must be paired with reset_test_overrides() in teardown.

        Args:
            storage_dir: Override for storage directory. None to clear.
        """
        cls._storage_dir_override = storage_dir

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Reset all test overrides to use environment variables."""
        cls._storage_dir_override = None
