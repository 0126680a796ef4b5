"""Tests for share summaries."""

from __future__ import annotations

from datetime import datetime

import pytest

from activity_charts.sharing import ShareSummary
from activity_charts.statistics import OverallStatistics


@pytest.fixture
def summary() -> ShareSummary:
    """Share summary for the canonical five-record example."""
    return ShareSummary.from_statistics(
        OverallStatistics(total=5, weekly=3, active_days=2, daily_average=2.5),
        timestamp=datetime(2024, 6, 15, 12, 0),
    )


class TestShareSummary:
    """Tests for ShareSummary text building."""

    def test_content_lists_four_statistics(self, summary: ShareSummary) -> None:
        """Verifies the content has one line per statistic.

        Business context:
        Shared text is pasted into chats and notes, so every number
        must be readable on its own line with a label.
        """
        assert summary.content.splitlines() == [
            "📈 Total records: 5",
            "📅 This week: 3",
            "🔥 Active days: 2",
            "⚡ Daily average: 2.5",
        ]

    def test_metadata_mirrors_statistics(self, summary: ShareSummary) -> None:
        """Verifies metadata carries the raw statistic values."""
        assert summary.metadata == {
            "total": 5,
            "weekly": 3,
            "active_days": 2,
            "daily_average": 2.5,
        }

    def test_formatted_text(self, summary: ShareSummary) -> None:
        """Verifies the full text has title, content and generated-at line."""
        text = summary.formatted_text()

        assert text.startswith("📊 My Creation Statistics\n")
        assert summary.content in text
        assert "🕒 Generated: 2024-06-15 12:00" in text
        assert text.endswith("Shared from Activity Charts")

    def test_compact_text_is_single_line(self, summary: ShareSummary) -> None:
        """Verifies compact text joins content on one line after the title."""
        text = summary.compact_text()

        assert "\n" not in text
        assert text.startswith("My Creation Statistics - 📈 Total records: 5, ")

    def test_to_dict(self, summary: ShareSummary) -> None:
        """Verifies the JSON form includes the rendered text."""
        data = summary.to_dict()

        assert data["title"] == "My Creation Statistics"
        assert data["timestamp"] == "2024-06-15T12:00:00"
        assert data["text"] == summary.formatted_text()

    def test_empty_statistics(self) -> None:
        """Verifies zero statistics render with a 0.0 average."""
        summary = ShareSummary.from_statistics(OverallStatistics(0, 0, 0, 0.0))

        assert "⚡ Daily average: 0.0" in summary.content
