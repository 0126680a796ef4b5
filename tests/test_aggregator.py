"""Tests for chart aggregation."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from activity_charts.aggregator import ChartAggregator, week_key
from activity_charts.models import BucketPayload, ChartKind, HeatmapPayload, Record


@pytest.fixture
def aggregator() -> ChartAggregator:
    """Provide a ChartAggregator instance."""
    return ChartAggregator()


class TestGenerate:
    """Tests for the four-entry generation pass."""

    def test_default_order_and_positions(
        self, aggregator: ChartAggregator, sample_records: list[Record], now: datetime
    ) -> None:
        """Verifies generate returns Heatmap, Bar, Pie, Line at positions 0-3.

        Business context:
        The default order is what a first-time user sees and what the
        merge falls back to for kinds missing from a saved order.
        """
        entries = aggregator.generate(sample_records, now)

        assert [e.kind for e in entries] == list(ChartKind)
        assert [e.position for e in entries] == [0, 1, 2, 3]

    def test_titles_and_payload_types(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies each kind carries its title and matching payload variant."""
        heatmap, bar, pie, line = aggregator.generate([], now)

        assert heatmap.title == "Activity Heatmap"
        assert isinstance(heatmap.payload, HeatmapPayload)
        assert bar.title == "Weekly Totals"
        assert pie.title == "Time of Day"
        assert line.title == "30-Day Trend"
        for entry in (bar, pie, line):
            assert isinstance(entry.payload, BucketPayload)

    def test_empty_records_still_produce_four_entries(
        self, aggregator: ChartAggregator, now: datetime
    ) -> None:
        """Verifies no records yields four entries with empty or zero payloads."""
        entries = aggregator.generate([], now)

        assert len(entries) == 4
        assert all(e.is_empty for e in entries)


class TestHeatmap:
    """Tests for the trailing-year daily counts."""

    def test_length_is_366_days(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies the window includes both endpoints: 366 entries.

        Business context:
        The heatmap covers "the past year including today". Pinning the
        count keeps the inclusive window from silently changing.
        """
        payload = aggregator.heatmap([], now)

        assert len(payload.days) == 366
        assert payload.days[0].date == date(2023, 6, 16)
        assert payload.days[-1].date == date(2024, 6, 15)

    def test_days_ascending_without_gaps(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies consecutive entries are exactly one day apart."""
        days = aggregator.heatmap([], now).days

        assert all(b.date - a.date == timedelta(days=1) for a, b in zip(days, days[1:]))

    def test_counts_per_day(
        self, aggregator: ChartAggregator, sample_records: list[Record], now: datetime
    ) -> None:
        """Verifies records land on their local calendar day."""
        days = {d.date: d.count for d in aggregator.heatmap(sample_records, now).days}

        assert days[date(2024, 6, 15)] == 3
        assert days[date(2024, 6, 5)] == 2
        assert sum(days.values()) == 5

    def test_records_outside_window_ignored(
        self, aggregator: ChartAggregator, now: datetime
    ) -> None:
        """Verifies records older than the window are not counted."""
        records = [Record(now - timedelta(days=400))]

        assert sum(d.count for d in aggregator.heatmap(records, now).days) == 0


class TestWeeklyBars:
    """Tests for per-ISO-week buckets."""

    def test_week_key_format(self) -> None:
        """Verifies 'YYYY-Www' with ISO year and zero-padded week."""
        assert week_key(date(2024, 3, 4)) == "2024-W10"
        assert week_key(datetime(2024, 1, 2, 8)) == "2024-W01"

    def test_week_key_uses_iso_year(self) -> None:
        """Verifies late-December days in ISO week 1 use the next year."""
        assert week_key(date(2024, 12, 30)) == "2025-W01"

    def test_buckets_sorted_by_key(
        self, aggregator: ChartAggregator, sample_records: list[Record], now: datetime
    ) -> None:
        """Verifies one bucket per week with records, sorted by label."""
        buckets = aggregator.weekly_bars(sample_records, now).buckets

        assert [(b.label, b.value) for b in buckets] == [("2024-W23", 2.0), ("2024-W24", 3.0)]
        assert all(b.category == "week" for b in buckets)

    def test_lower_bound_is_inclusive(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies a record exactly twelve weeks old is kept, one second older is not."""
        start = now - timedelta(weeks=12)
        records = [Record(start), Record(start - timedelta(seconds=1))]

        buckets = aggregator.weekly_bars(records, now).buckets

        assert sum(b.value for b in buckets) == 1.0

    def test_no_records_no_buckets(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies weeks without records produce no bucket at all."""
        assert aggregator.weekly_bars([], now).buckets == ()


class TestTimeOfDay:
    """Tests for the time-of-day pie slots."""

    def test_slot_boundaries(self, aggregator: ChartAggregator) -> None:
        """Verifies each slot includes its start hour and excludes its end hour.

        Business context:
        A record at exactly 12:00 is an afternoon record; users reading
        the pie expect the labelled hour ranges to be exact.
        """
        day = datetime(2024, 6, 1)
        hours = [6, 11, 12, 17, 18, 23, 0, 5]
        records = [Record(day.replace(hour=h, minute=59 if h % 6 else 0)) for h in hours]

        buckets = aggregator.time_of_day(records).buckets

        assert [(b.category, b.value) for b in buckets] == [
            ("morning", 2.0),
            ("afternoon", 2.0),
            ("evening", 2.0),
            ("night", 2.0),
        ]

    def test_zero_slots_omitted(self, aggregator: ChartAggregator) -> None:
        """Verifies only slots with records appear, in slot order."""
        records = [Record(datetime(2024, 6, 1, 21)), Record(datetime(2024, 6, 1, 7))]

        buckets = aggregator.time_of_day(records).buckets

        assert [b.label for b in buckets] == ["Morning (6-12)", "Evening (18-24)"]

    def test_no_date_window(self, aggregator: ChartAggregator) -> None:
        """Verifies arbitrarily old records still contribute."""
        records = [Record(datetime(2001, 1, 1, 14))]

        assert aggregator.time_of_day(records).buckets[0].category == "afternoon"


class TestDailyTrend:
    """Tests for the 30-day line."""

    def test_length_is_31_days(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies the window includes both endpoints: 31 entries."""
        buckets = aggregator.daily_trend([], now).buckets

        assert len(buckets) == 31
        assert buckets[0].date == date(2024, 5, 16)
        assert buckets[-1].date == date(2024, 6, 15)

    def test_labels_are_month_day(self, aggregator: ChartAggregator, now: datetime) -> None:
        """Verifies labels use 'MM-DD'."""
        buckets = aggregator.daily_trend([], now).buckets

        assert buckets[0].label == "05-16"
        assert buckets[-1].label == "06-15"

    def test_counts_per_day(
        self, aggregator: ChartAggregator, sample_records: list[Record], now: datetime
    ) -> None:
        """Verifies counts land on the right day and sum to records in window."""
        buckets = {b.date: b.value for b in aggregator.daily_trend(sample_records, now).buckets}

        assert buckets[date(2024, 6, 15)] == 3.0
        assert buckets[date(2024, 6, 5)] == 2.0
        assert sum(buckets.values()) == 5.0
