"""
Data models for Activity Charts.

PURPOSE: Type-safe dataclasses representing records, chart kinds and chart entries.
AI CONTEXT: These models define the shapes shared by aggregation, ordering and storage.

MODEL HIERARCHY:
- Record: A timestamped creation record (owned by the record store)
- ChartKind: Closed enumeration of the four aggregates
- Bucket / DailyCount: Units of plotted data
- HeatmapPayload / BucketPayload: Tagged payload union keyed by ChartKind
- ChartEntry: One generated aggregate with its display position
- PersistedOrderEntry: The (kind, position) pair that survives restarts

TIME HANDLING:
Naive datetimes are treated as local time. Aware datetimes are converted
to the local zone and made naive before calendar bucketing, so every
day/hour comparison happens in one frame.

USAGE:
    record = Record.create()
    entry = ChartEntry(ChartKind.PIE, "Time of Day", "...", BucketPayload(()), 2)
    moved = entry.with_position(0)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Any

__all__ = [
    "Bucket",
    "BucketPayload",
    "ChartEntry",
    "ChartKind",
    "ChartPayload",
    "DailyCount",
    "HeatmapPayload",
    "PersistedOrderEntry",
    "Record",
    "local_now",
    "to_local",
]


def to_local(moment: datetime) -> datetime:
    """
    Normalize a datetime to naive local time.

    Business context: Calendar days and hours of day are user-facing
    concepts, so a record created at 23:30 local time must land on that
    local day regardless of how its timestamp was stored.

    Args:
        moment: Naive (assumed local) or timezone-aware datetime.

    Returns:
        Naive datetime in the local time zone.

    Example:
        >>> from datetime import UTC
        >>> to_local(datetime(2026, 1, 1, tzinfo=UTC)).tzinfo is None
        True
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def local_now() -> datetime:
    """Return the current naive local time."""
    return datetime.now()


class ChartKind(Enum):
    """
    Closed set of chart aggregates.

    Member order is the default display order. Values are the stable
    identifiers written to persisted chart order data.
    """

    HEATMAP = "heatmap"
    BAR = "bar"
    PIE = "pie"
    LINE = "line"

    @classmethod
    def parse(cls, value: str) -> ChartKind | None:
        """
        Resolve a kind from its value or member name, case-insensitively.

        Args:
            value: Identifier such as 'pie' or 'PIE'.

        Returns:
            Matching ChartKind, or None if value names no kind.

        Example:
            >>> ChartKind.parse('Line')
            <ChartKind.LINE: 'line'>
            >>> ChartKind.parse('radar') is None
            True
        """
        normalized = value.strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        return None


@dataclass(frozen=True)
class Record:
    """
    Timestamped creation record.

    Only the timestamp matters to aggregation. The id exists so the
    record store can address individual records.
    """

    timestamp: datetime
    id: str = ""

    @classmethod
    def create(cls, timestamp: datetime | None = None) -> Record:
        """
        Factory method to create a record with a generated id.

        Args:
            timestamp: Creation time. Defaults to the current local time.

        Returns:
            New Record instance.

        Example:
            >>> record = Record.create(datetime(2026, 3, 1, 9, 0))
            >>> len(record.id)
            32
        """
        return cls(timestamp=timestamp or local_now(), id=uuid.uuid4().hex)

    @property
    def local_timestamp(self) -> datetime:
        """Timestamp normalized to naive local time."""
        return to_local(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize record to dictionary for JSON storage.

        Returns:
            Dict with 'id' and ISO 8601 'timestamp'.
        """
        return {"id": self.id, "timestamp": self.timestamp.isoformat()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        """
        Deserialize record from dictionary.

        Accepts a trailing 'Z' as UTC for timestamps written by other tools.

        Args:
            data: Dict as produced by to_dict().

        Returns:
            Record instance.

        Raises:
            KeyError: If 'timestamp' is missing.
            ValueError: If 'timestamp' is not ISO 8601.
            TypeError: If 'timestamp' is not a string.
        """
        raw = data["timestamp"]
        if not isinstance(raw, str):
            raise TypeError(f"timestamp must be a string, got {type(raw).__name__}")
        return cls(
            timestamp=datetime.fromisoformat(raw.replace("Z", "+00:00")),
            id=str(data.get("id", "")),
        )


@dataclass(frozen=True)
class Bucket:
    """Labelled value plotted by bar, pie and line charts."""

    label: str
    value: float
    date: date | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize bucket for JSON responses."""
        return {
            "label": self.label,
            "value": self.value,
            "date": self.date.isoformat() if self.date else None,
            "category": self.category,
        }


@dataclass(frozen=True)
class DailyCount:
    """Record count for one calendar day, plotted by the heatmap."""

    date: date
    count: int

    @property
    def weekday(self) -> int:
        """ISO weekday, Monday=1 through Sunday=7."""
        return self.date.isoweekday()

    @property
    def week(self) -> int:
        """ISO week number of the year."""
        return self.date.isocalendar().week

    def to_dict(self) -> dict[str, Any]:
        """Serialize day count for JSON responses."""
        return {"date": self.date.isoformat(), "count": self.count}


@dataclass(frozen=True)
class HeatmapPayload:
    """Dense, ascending sequence of day counts."""

    days: tuple[DailyCount, ...]

    def to_dict(self) -> dict[str, Any]:
        """Serialize payload with its type tag."""
        return {"type": "daily", "days": [d.to_dict() for d in self.days]}


@dataclass(frozen=True)
class BucketPayload:
    """Ordered sequence of labelled buckets."""

    buckets: tuple[Bucket, ...]

    def to_dict(self) -> dict[str, Any]:
        """Serialize payload with its type tag."""
        return {"type": "buckets", "buckets": [b.to_dict() for b in self.buckets]}


ChartPayload = HeatmapPayload | BucketPayload


@dataclass(frozen=True)
class ChartEntry:
    """
    One generated aggregate, tagged by kind, carrying a display position.

    Entries are values: a fresh set is built on every aggregation pass and
    only `kind` identifies an entry across passes. Position changes go
    through with_position(), which returns a copy.
    """

    kind: ChartKind
    title: str
    subtitle: str
    payload: ChartPayload
    position: int

    def with_position(self, position: int) -> ChartEntry:
        """
        Return a copy of this entry at a new position.

        Args:
            position: New display position.

        Returns:
            ChartEntry identical except for position. Returns self when
            the position is unchanged.
        """
        if position == self.position:
            return self
        return replace(self, position=position)

    @property
    def is_empty(self) -> bool:
        """True when the payload carries no plotted values."""
        match self.payload:
            case HeatmapPayload(days=days):
                return all(d.count == 0 for d in days)
            case BucketPayload(buckets=buckets):
                return all(b.value == 0 for b in buckets)
        return True

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize entry for JSON API responses.

        Returns:
            Dict with kind value, title, subtitle, position and payload.
        """
        return {
            "kind": self.kind.value,
            "title": self.title,
            "subtitle": self.subtitle,
            "position": self.position,
            "payload": self.payload.to_dict(),
        }


@dataclass(frozen=True)
class PersistedOrderEntry:
    """The only durable part of a chart entry: its kind and position."""

    kind: ChartKind
    position: int

    @classmethod
    def from_entry(cls, entry: ChartEntry) -> PersistedOrderEntry:
        """Capture the ordering fields of a chart entry."""
        return cls(kind=entry.kind, position=entry.position)
