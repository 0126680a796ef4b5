"""
Share summaries for Activity Charts.

PURPOSE: Plain-text statistics summary handed to a share target.
AI CONTEXT: Text building only - invoking an OS share sheet is the caller's job.

USAGE:
    summary = ShareSummary.from_statistics(board.overall_statistics())
    print(summary.formatted_text())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .models import local_now
from .statistics import OverallStatistics

__all__ = ["ShareSummary"]

SHARE_TITLE = "My Creation Statistics"
APP_NAME = "Activity Charts"


@dataclass
class ShareSummary:
    """Title, content and metadata of one statistics share."""

    title: str
    content: str
    timestamp: datetime = field(default_factory=local_now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_statistics(
        cls, stats: OverallStatistics, timestamp: datetime | None = None
    ) -> ShareSummary:
        """
        Build the statistics share from an OverallStatistics snapshot.

        Args:
            stats: Snapshot to describe.
            timestamp: Generation time. Defaults to now.

        Returns:
            ShareSummary whose metadata mirrors the four statistics.

        Example:
            >>> summary = ShareSummary.from_statistics(OverallStatistics(10, 3, 4, 2.5))
            >>> summary.metadata["daily_average"]
            2.5
        """
        content = "\n".join(
            [
                f"📈 Total records: {stats.total}",
                f"📅 This week: {stats.weekly}",
                f"🔥 Active days: {stats.active_days}",
                f"⚡ Daily average: {stats.daily_average:.1f}",
            ]
        )
        return cls(
            title=SHARE_TITLE,
            content=content,
            timestamp=timestamp or local_now(),
            metadata=stats.to_dict(),
        )

    def formatted_text(self) -> str:
        """Full share text with title, content and generation time."""
        generated = self.timestamp.strftime("%Y-%m-%d %H:%M")
        return "\n".join(
            [
                f"📊 {self.title}",
                "",
                self.content,
                "",
                f"🕒 Generated: {generated}",
                f"🏷️ Shared from {APP_NAME}",
            ]
        )

    def compact_text(self) -> str:
        """Single-line share text."""
        return f"{self.title} - {', '.join(self.content.splitlines())}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "title": self.title,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
            "text": self.formatted_text(),
        }
