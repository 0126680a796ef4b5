"""
Statistics calculator for Activity Charts.

PURPOSE: Summary counts over a record set.
AI CONTEXT: Pure data processing - no visualization, no I/O.

METRICS:
1. Total: Number of records
2. Weekly: Records within the trailing 7 days (both ends inclusive)
3. Active days: Distinct local calendar days with at least one record
4. Daily average: Total / active days, 0.0 when there are no active days

USAGE:
    calculator = StatisticsCalculator()
    stats = calculator.overall_statistics(records, now)
    print(stats.daily_average)
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import NamedTuple

from .config import Config
from .models import Record, local_now, to_local

__all__ = ["OverallStatistics", "StatisticsCalculator"]


class OverallStatistics(NamedTuple):
    """Snapshot of the four summary statistics."""

    total: int
    weekly: int
    active_days: int
    daily_average: float

    def to_dict(self) -> dict[str, int | float]:
        """Serialize statistics for JSON responses."""
        return self._asdict()


class StatisticsCalculator:
    """
    Calculator for record summary statistics.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Total: Every method is defined for the empty set
    - Clock-injectable: `now` is a parameter, defaulting to local time
    """

    def weekly_count(self, records: Sequence[Record], now: datetime | None = None) -> int:
        """
        Count records created within the trailing week.

        A record counts when `now - 7 days <= timestamp <= now`, so a record
        exactly seven days old is included.

        Business context: The weekly count is the headline "this week"
        figure in the dashboard and the share summary.

        Args:
            records: Records to inspect.
            now: Reference time. Defaults to the current local time.

        Returns:
            Number of records in the window. 0 for an empty set.

        Example:
            >>> calc = StatisticsCalculator()
            >>> now = datetime(2026, 5, 10, 12, 0)
            >>> calc.weekly_count([Record(now), Record(now - timedelta(days=8))], now)
            1
        """
        current = to_local(now or local_now())
        start = current - timedelta(days=Config.WEEKLY_WINDOW_DAYS)
        return sum(1 for r in records if start <= r.local_timestamp <= current)

    def active_days(self, records: Sequence[Record]) -> int:
        """
        Count distinct local calendar days containing at least one record.

        Args:
            records: Records to inspect.

        Returns:
            Number of distinct days. 0 for an empty set.

        Example:
            >>> calc = StatisticsCalculator()
            >>> calc.active_days([Record(datetime(2026, 1, 1, 9)), Record(datetime(2026, 1, 1, 22))])
            1
        """
        return len({r.local_timestamp.date() for r in records})

    def daily_average(self, records: Sequence[Record], active_days: int | None = None) -> float:
        """
        Average records per active day.

        Args:
            records: Records to inspect.
            active_days: Precomputed active day count. Computed from
                records when omitted.

        Returns:
            len(records) / active_days, or 0.0 when active_days is 0.

        Example:
            >>> calc = StatisticsCalculator()
            >>> calc.daily_average([], active_days=0)
            0.0
        """
        days = self.active_days(records) if active_days is None else active_days
        if days <= 0:
            return 0.0
        return len(records) / days

    def overall_statistics(
        self, records: Sequence[Record], now: datetime | None = None
    ) -> OverallStatistics:
        """
        Compute total, weekly, active days and daily average together.

        All four values are evaluated against a single `now` snapshot so the
        weekly count cannot drift from the other figures mid-calculation.

        Business context: This tuple feeds the dashboard statistics strip,
        the CLI report and the share summary.

        Args:
            records: Records to inspect.
            now: Reference time. Defaults to the current local time.

        Returns:
            OverallStatistics(total, weekly, active_days, daily_average).
            (0, 0, 0, 0.0) for an empty set.

        Example:
            >>> StatisticsCalculator().overall_statistics([])
            OverallStatistics(total=0, weekly=0, active_days=0, daily_average=0.0)
        """
        snapshot = now or local_now()
        active = self.active_days(records)
        return OverallStatistics(
            total=len(records),
            weekly=self.weekly_count(records, snapshot),
            active_days=active,
            daily_average=self.daily_average(records, active_days=active),
        )
