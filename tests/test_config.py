"""Tests for config module."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from activity_charts.config import Config
from activity_charts.models import ChartKind


class TestConfigConstants:
    """Tests for Config constant values."""

    def test_windows(self) -> None:
        """Verifies the aggregation window lengths.

        Business context:
        The heatmap, bar chart and trend line are labelled "past year",
        "last 12 weeks" and "last 30 days"; the constants must match.
        """
        assert Config.WEEKLY_WINDOW_DAYS == 7
        assert Config.HEATMAP_WINDOW_DAYS == 365
        assert Config.BAR_WINDOW_WEEKS == 12
        assert Config.LINE_WINDOW_DAYS == 30

    def test_every_kind_has_title(self) -> None:
        """Verifies chart_title resolves every ChartKind value."""
        for kind in ChartKind:
            title, subtitle = Config.chart_title(kind.value)
            assert title
            assert subtitle

    def test_unknown_title_raises(self) -> None:
        """Verifies chart_title raises KeyError for unknown kinds."""
        with pytest.raises(KeyError):
            Config.chart_title("radar")

    def test_time_slots_cover_every_hour_once(self) -> None:
        """Verifies the four pie slots partition 0-23 without overlap."""
        hours = [h for _, _, start, end in Config.TIME_SLOTS for h in range(start, end)]

        assert sorted(hours) == list(range(24))

    def test_config_is_frozen(self) -> None:
        """Verifies Config instances cannot be modified."""
        config = Config()
        with pytest.raises(FrozenInstanceError):
            config.STORAGE_DIR = "/elsewhere"  # type: ignore[misc]


class TestStorageDir:
    """Tests for get_storage_dir priority."""

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verifies the default is STORAGE_DIR with no env or override."""
        monkeypatch.delenv("ACTIVITY_CHARTS_STORAGE_DIR", raising=False)

        assert Config.get_storage_dir() == ".activity_charts"

    def test_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verifies the environment variable replaces the default."""
        monkeypatch.setenv("ACTIVITY_CHARTS_STORAGE_DIR", "/data/charts")

        assert Config.get_storage_dir() == "/data/charts"

    def test_override_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verifies test overrides take priority over the environment.

        Business context:
        Tests must never touch a developer's real data directory, even
        when the variable is set in their shell.
        """
        monkeypatch.setenv("ACTIVITY_CHARTS_STORAGE_DIR", "/data/charts")
        Config.set_test_overrides(storage_dir="/tmp/test")

        assert Config.get_storage_dir() == "/tmp/test"

        Config.reset_test_overrides()

        assert Config.get_storage_dir() == "/data/charts"
