"""
Chart aggregation for Activity Charts.

PURPOSE: Bucket a record set into the four fixed chart aggregates.
AI CONTEXT: Pure data processing - no rendering, no I/O, no ordering state.

AGGREGATES (generation order = default position):
0. Heatmap: One DailyCount per day from now-365d through today (366 days)
1. Bar: Records per ISO week over the last 12 weeks, non-empty weeks only
2. Pie: Records per time-of-day slot over ALL records, non-empty slots only
3. Line: One Bucket per day from now-30d through today (31 days)

WINDOW NOTE:
Both day windows include their first and last day. The resulting 366 and
31 entry counts are deliberate and pinned by tests.

BAR ORDERING NOTE:
Weekly buckets are sorted by their "YYYY-Www" label as strings. Within a
single year this is chronological; across a year boundary the order is
whatever the string comparison yields.

USAGE:
    aggregator = ChartAggregator()
    entries = aggregator.generate(records, now)
    # entries[0].kind is ChartKind.HEATMAP, positions are 0..3
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from .config import Config
from .models import (
    Bucket,
    BucketPayload,
    ChartEntry,
    ChartKind,
    ChartPayload,
    DailyCount,
    HeatmapPayload,
    Record,
    local_now,
    to_local,
)

__all__ = ["ChartAggregator", "week_key"]


def week_key(moment: datetime | date) -> str:
    """
    Build the ISO week label used to group bar chart records.

    Args:
        moment: Date or datetime to label.

    Returns:
        String 'YYYY-Www' using the ISO year and zero-padded ISO week.

    Example:
        >>> week_key(date(2026, 3, 4))
        '2026-W10'
    """
    iso = moment.isocalendar()
    return f"{iso.year}-W{iso.week:02d}"


def _day_range(first: date, last: date) -> list[date]:
    """Every calendar day from first through last, inclusive."""
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


class ChartAggregator:
    """
    Builder for the four chart entries.

    DESIGN:
    - Stateless: Each method reads only its arguments
    - Independent: Each aggregate scans the full record set on its own
    - Total: Every method accepts the empty record set
    """

    def generate(self, records: Sequence[Record], now: datetime | None = None) -> list[ChartEntry]:
        """
        Produce the four chart entries in default order.

        Business context: This is the only place chart data is computed.
        The board calls it on every load and refresh, then merges the
        result with the user's saved ordering.

        Args:
            records: Full record set.
            now: Reference time. Defaults to the current local time.

        Returns:
            List of exactly four ChartEntry values: Heatmap, Bar, Pie, Line
            at positions 0, 1, 2, 3.

        Example:
            >>> entries = ChartAggregator().generate([])
            >>> [e.kind.value for e in entries]
            ['heatmap', 'bar', 'pie', 'line']
        """
        current = to_local(now or local_now())
        payloads: list[tuple[ChartKind, ChartPayload]] = [
            (ChartKind.HEATMAP, self.heatmap(records, current)),
            (ChartKind.BAR, self.weekly_bars(records, current)),
            (ChartKind.PIE, self.time_of_day(records)),
            (ChartKind.LINE, self.daily_trend(records, current)),
        ]
        entries = []
        for position, (kind, payload) in enumerate(payloads):
            title, subtitle = Config.chart_title(kind.value)
            entries.append(
                ChartEntry(
                    kind=kind,
                    title=title,
                    subtitle=subtitle,
                    payload=payload,
                    position=position,
                )
            )
        return entries

    def heatmap(self, records: Sequence[Record], now: datetime) -> HeatmapPayload:
        """
        Count records per day over the trailing year.

        Args:
            records: Full record set.
            now: Reference time.

        Returns:
            HeatmapPayload with one DailyCount per day from
            (now - 365 days) through now's date: 366 ascending, gap-free
            entries, zero for days without records.
        """
        current = to_local(now)
        counts = Counter(r.local_timestamp.date() for r in records)
        first = (current - timedelta(days=Config.HEATMAP_WINDOW_DAYS)).date()
        days = tuple(DailyCount(date=d, count=counts[d]) for d in _day_range(first, current.date()))
        return HeatmapPayload(days=days)

    def weekly_bars(self, records: Sequence[Record], now: datetime) -> BucketPayload:
        """
        Count records per ISO week over the last 12 weeks.

        Records at or after `now - 12 weeks` qualify. Weeks without records
        produce no bucket.

        Args:
            records: Full record set.
            now: Reference time.

        Returns:
            BucketPayload of weekly buckets sorted by label string, each
            with category 'week'.
        """
        start = to_local(now) - timedelta(weeks=Config.BAR_WINDOW_WEEKS)
        counts = Counter(
            week_key(r.local_timestamp) for r in records if r.local_timestamp >= start
        )
        buckets = tuple(
            Bucket(label=key, value=float(counts[key]), category="week") for key in sorted(counts)
        )
        return BucketPayload(buckets=buckets)

    def time_of_day(self, records: Sequence[Record]) -> BucketPayload:
        """
        Count records per time-of-day slot.

        Unlike the other aggregates this one has no date window: every
        record contributes by its local hour.

        Args:
            records: Full record set.

        Returns:
            BucketPayload in slot order Morning, Afternoon, Evening, Night,
            omitting slots with zero records.
        """
        hours = Counter(r.local_timestamp.hour for r in records)
        buckets = []
        for key, label, start_hour, end_hour in Config.TIME_SLOTS:
            count = sum(hours[h] for h in range(start_hour, end_hour))
            if count > 0:
                buckets.append(Bucket(label=label, value=float(count), category=key))
        return BucketPayload(buckets=tuple(buckets))

    def daily_trend(self, records: Sequence[Record], now: datetime) -> BucketPayload:
        """
        Count records per day over the trailing 30 days.

        Args:
            records: Full record set.
            now: Reference time.

        Returns:
            BucketPayload with one bucket per day from (now - 30 days)
            through now's date: 31 ascending entries labelled 'MM-DD',
            each carrying its date, zero for days without records.
        """
        current = to_local(now)
        first = (current - timedelta(days=Config.LINE_WINDOW_DAYS)).date()
        last = current.date()
        counts = Counter(
            d for d in (r.local_timestamp.date() for r in records) if first <= d <= last
        )
        buckets = tuple(
            Bucket(label=d.strftime("%m-%d"), value=float(counts[d]), date=d)
            for d in _day_range(first, last)
        )
        return BucketPayload(buckets=buckets)
