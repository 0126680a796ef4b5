"""
Presenters for Activity Charts dashboards.

PURPOSE: Testable layer between the chart board and the UI.
AI CONTEXT: View models are pure transformations; ChartPresenter renders PNGs.

DESIGN PRINCIPLES:
1. Presenters read the board, return view models (dataclasses)
2. No dependency on a specific web framework
3. View models are unit-testable without matplotlib
4. Chart rendering dispatches on the payload type, never on optional fields

USAGE:
    presenter = DashboardPresenter(board)
    overview = presenter.get_overview()
    png = ChartPresenter(board).render_chart(ChartKind.PIE)
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .models import BucketPayload, ChartEntry, ChartKind, HeatmapPayload
from .sharing import ShareSummary

if TYPE_CHECKING:
    from .board import ChartBoard
    from .statistics import OverallStatistics

__all__ = [
    "ChartPresenter",
    "ChartViewModel",
    "DashboardOverview",
    "DashboardPresenter",
    "StatisticsViewModel",
    "pie_colors",
]

# Chart color palette for consistent styling
KIND_COLORS: dict[ChartKind, str] = {
    ChartKind.HEATMAP: "#f97316",
    ChartKind.BAR: "#3b82f6",
    ChartKind.PIE: "#22c55e",
    ChartKind.LINE: "#a855f7",
}

# Keyed by time slot so a slot keeps its color when others are empty
PIE_COLORS: dict[str, str] = {
    "morning": "#f59e0b",
    "afternoon": "#3b82f6",
    "evening": "#a855f7",
    "night": "#64748b",
}
PIE_FALLBACK_COLOR = "#94a3b8"


def pie_colors(buckets: Any) -> list[str]:
    """Slot colors for pie buckets, matched by bucket category."""
    return [PIE_COLORS.get(b.category or "", PIE_FALLBACK_COLOR) for b in buckets]


@dataclass
class StatisticsViewModel:
    """View model for the statistics strip."""

    total: int
    weekly: int
    active_days: int
    daily_average: float

    @classmethod
    def from_statistics(cls, stats: OverallStatistics) -> StatisticsViewModel:
        """Build from an OverallStatistics snapshot."""
        return cls(
            total=stats.total,
            weekly=stats.weekly,
            active_days=stats.active_days,
            daily_average=stats.daily_average,
        )

    @property
    def daily_average_display(self) -> str:
        """
        Format the daily average with one decimal.

        Returns:
            String like "2.5", or "—" when there is no activity.
        """
        if self.active_days == 0:
            return "—"
        return f"{self.daily_average:.1f}"


@dataclass
class ChartViewModel:
    """View model for one chart card."""

    kind: str
    title: str
    subtitle: str
    position: int
    point_count: int
    total: float
    peak_label: str | None

    @property
    def image_url(self) -> str:
        """URL of the rendered chart PNG."""
        return f"/charts/{self.kind}.png"

    @property
    def summary(self) -> str:
        """
        One-line description of the chart contents.

        Returns:
            "No data yet" for empty charts, otherwise total and peak.
        """
        if self.total == 0:
            return "No data yet"
        summary = f"{self.total:.0f} records"
        if self.peak_label:
            summary += f" · peak {self.peak_label}"
        return summary


@dataclass
class DashboardOverview:
    """Complete view model for the dashboard page."""

    statistics: StatisticsViewModel | None = None
    charts: list[ChartViewModel] = field(default_factory=list)
    dragging: str | None = None
    share_text: str = ""


def _chart_view_model(entry: ChartEntry) -> ChartViewModel:
    """Summarize a chart entry for display."""
    match entry.payload:
        case HeatmapPayload(days=days):
            points = [(d.date.isoformat(), float(d.count)) for d in days]
        case BucketPayload(buckets=buckets):
            points = [(b.label, b.value) for b in buckets]
    total = sum(value for _, value in points)
    peak = max(points, key=lambda p: p[1], default=None)
    return ChartViewModel(
        kind=entry.kind.value,
        title=entry.title,
        subtitle=entry.subtitle,
        position=entry.position,
        point_count=len(points),
        total=total,
        peak_label=peak[0] if peak and peak[1] > 0 else None,
    )


class DashboardPresenter:
    """
    Presenter for the main dashboard view.

    Reads the displayed chart order from the board, so an open drag
    preview is what the page shows.
    """

    def __init__(self, board: ChartBoard) -> None:
        """
        Initialize dashboard presenter.

        Args:
            board: ChartBoard owning the displayed order. Loaded on first
                use if it has not been loaded yet.
        """
        self.board = board

    def get_overview(self) -> DashboardOverview:
        """
        Get complete overview data for the dashboard.

        Business context: One call gathers everything the page shows so
        the statistics strip and the charts come from the same snapshot.

        Returns:
            DashboardOverview with statistics, chart cards in display
            order, the dragged kind (if any) and the share text.

        Example:
            >>> overview = DashboardPresenter(board).get_overview()
            >>> [c.kind for c in overview.charts]
            ['heatmap', 'bar', 'pie', 'line']
        """
        if not self.board.loaded:
            self.board.load()
        stats = self.board.overall_statistics()
        dragging = self.board.dragging
        return DashboardOverview(
            statistics=StatisticsViewModel.from_statistics(stats),
            charts=self.get_charts(),
            dragging=dragging.value if dragging else None,
            share_text=ShareSummary.from_statistics(stats).formatted_text(),
        )

    def get_charts(self) -> list[ChartViewModel]:
        """Chart cards in display order."""
        return [_chart_view_model(entry) for entry in self.board.entries]


class ChartPresenter:
    """
    Presenter for rendering chart images.

    Uses matplotlib for server-side chart rendering.
    Returns PNG images as bytes.
    """

    def __init__(self, board: ChartBoard) -> None:
        """
        Initialize chart presenter.

        Args:
            board: ChartBoard providing the chart entries.
        """
        self.board = board

    def _entry(self, kind: ChartKind) -> ChartEntry:
        """Find the displayed entry for a kind, loading the board if needed."""
        if not self.board.loaded:
            self.board.load()
        for entry in self.board.entries:
            if entry.kind == kind:
                return entry
        raise KeyError(kind.value)

    def render_chart(self, kind: ChartKind) -> bytes:
        """
        Render one chart as PNG.

        Business context: Server-side rendering keeps the dashboard a
        plain HTML page; the same PNGs can be saved or shared.

        Args:
            kind: Chart to render.

        Returns:
            PNG image bytes at 100 DPI.

        Raises:
            ImportError: If matplotlib is not installed. Caller should
                catch this and provide a fallback.
            KeyError: If the board has no entry for kind.

        Example:
            >>> png = ChartPresenter(board).render_chart(ChartKind.LINE)
            >>> png[:8]
            b'\\x89PNG\\r\\n\\x1a\\n'
        """
        # Lazy import matplotlib to keep it optional
        import matplotlib

        matplotlib.use("Agg")  # Non-interactive backend
        import matplotlib.pyplot as plt

        entry = self._entry(kind)

        if entry.is_empty and kind != ChartKind.HEATMAP:
            fig, _ax = self._render_empty(entry.title)
        else:
            match entry.payload:
                case HeatmapPayload(days=days):
                    fig, _ax = self._render_heatmap(entry.title, days)
                case BucketPayload(buckets=buckets) if kind == ChartKind.PIE:
                    fig, _ax = self._render_pie(entry.title, buckets)
                case BucketPayload(buckets=buckets) if kind == ChartKind.LINE:
                    fig, _ax = self._render_line(entry.title, buckets)
                case BucketPayload(buckets=buckets):
                    fig, _ax = self._render_bar(entry.title, buckets)

        buf = io.BytesIO()
        plt.tight_layout()
        plt.savefig(buf, format="png", dpi=100, bbox_inches="tight")
        plt.close(fig)
        buf.seek(0)
        return buf.read()

    def _render_empty(self, title: str) -> Any:
        """
        Render placeholder chart when there is nothing to plot.

        Returns:
            Matplotlib figure and axes.
        """
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(6, 3))
        ax.text(0.5, 0.5, "No data yet", ha="center", va="center", fontsize=14)
        ax.set_title(title)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.axis("off")
        return fig, ax

    def _render_heatmap(self, title: str, days: Any) -> Any:
        """
        Render day counts as a weekday-by-week grid.

        Columns are consecutive weeks starting at the first day's week,
        rows are ISO weekdays Monday through Sunday.
        """
        import matplotlib.pyplot as plt

        first = days[0].date
        week_count = ((days[-1].date - first).days + first.weekday()) // 7 + 1
        grid = [[float("nan")] * week_count for _ in range(7)]
        for day in days:
            column = ((day.date - first).days + first.weekday()) // 7
            grid[day.weekday - 1][column] = day.count

        fig, ax = plt.subplots(figsize=(10, 2.2))
        ax.imshow(grid, aspect="auto", cmap="Oranges", interpolation="nearest")
        ax.set_yticks(range(7))
        ax.set_yticklabels(["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"], fontsize=7)
        ax.set_xticks([])
        ax.set_title(title)
        for spine in ax.spines.values():
            spine.set_visible(False)
        return fig, ax

    def _render_bar(self, title: str, buckets: Any) -> Any:
        """Render weekly buckets as vertical bars."""
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(6, 3))
        labels = [b.label for b in buckets]
        ax.bar(labels, [b.value for b in buckets], color=KIND_COLORS[ChartKind.BAR])
        ax.set_ylabel("Records")
        ax.set_title(title)
        ax.tick_params(axis="x", labelrotation=45, labelsize=8)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        return fig, ax

    def _render_pie(self, title: str, buckets: Any) -> Any:
        """Render time-of-day slots as a pie."""
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(4, 4))
        ax.pie(
            [b.value for b in buckets],
            labels=[b.label for b in buckets],
            colors=pie_colors(buckets),
            autopct="%1.0f%%",
            startangle=90,
        )
        ax.set_title(title)
        ax.axis("equal")
        return fig, ax

    def _render_line(self, title: str, buckets: Any) -> Any:
        """Render daily buckets as a line with markers."""
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(6, 3))
        values = [b.value for b in buckets]
        ax.plot(
            range(len(values)),
            values,
            marker="o",
            markersize=3,
            color=KIND_COLORS[ChartKind.LINE],
        )
        step = max(1, len(buckets) // 6)
        ax.set_xticks(range(0, len(buckets), step))
        ax.set_xticklabels([b.label for b in buckets][::step], fontsize=8)
        ax.set_ylabel("Records")
        ax.set_title(title)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        return fig, ax
