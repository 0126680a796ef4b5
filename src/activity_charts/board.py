"""
Chart board session for Activity Charts.

PURPOSE: Single owner of the displayed chart order for one session.
AI CONTEXT: All load/refresh/drag state transitions go through ChartBoard.

LIFECYCLE:
    load()            cold start: aggregate + merge with persisted order
    refresh()         re-aggregate + merge with the current order
    begin_drag(kind)  open the one allowed drag session
    preview_reorder() compute a live preview from the committed order
    commit_reorder()  persist and adopt the preview (closes the session)
    cancel_drag()     drop the preview, keep the committed order

CONCURRENCY MODEL:
- One RLock guards every transition; lists are swapped, never mutated
- Aggregation may run in a worker thread (refresh_async); only the final
  swap happens under the lock
- A refresh that lands while a drag is open is parked as pending and
  applied when the drag ends, re-merged against the order the user chose

USAGE:
    board = ChartBoard(storage, storage)
    board.load()
    board.begin_drag(ChartKind.LINE)
    board.preview_reorder(ChartKind.LINE, ChartKind.HEATMAP)
    board.commit_reorder()
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .aggregator import ChartAggregator
from .config import Config
from .models import ChartEntry, ChartKind, PersistedOrderEntry, Record, local_now
from .ordering import merge_order, reference_from, renumber, reorder
from .persistence import deserialize, serialize
from .statistics import OverallStatistics, StatisticsCalculator

if TYPE_CHECKING:
    from .storage import OrderStore, RecordSource

__all__ = [
    "BoardResult",
    "ChartBoard",
    "DragSessionError",
]

logger = logging.getLogger(__name__)


class DragSessionError(RuntimeError):
    """Raised when the drag session API is used out of sequence."""


@dataclass
class BoardResult:
    """
    Result from a board command issued by the CLI or web layer.

    Attributes:
        success: Whether the command took effect.
        message: Human-readable result message.
        data: Optional dict with command-specific data.
        error: Optional error message if success is False.
    """

    success: bool
    message: str
    data: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict, omitting empty data/error.

        Example:
            >>> BoardResult(success=True, message="Moved").to_dict()
            {'success': True, 'message': 'Moved'}
        """
        result: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
        }
        if self.data:
            result["data"] = self.data
        if self.error:
            result["error"] = self.error
        return result


class ChartBoard:
    """
    Session state holding the ordered chart list.

    STATE:
    - committed: Last order the user committed (or loaded/refreshed)
    - preview: Live reorder preview while a drag is open, else None
    - dragging: Kind being dragged, else None
    - pending: Aggregates from a refresh deferred by an open drag

    The displayed list is the preview while dragging, otherwise the
    committed list. Only commit_reorder() writes to the order store.
    """

    def __init__(
        self,
        record_source: RecordSource,
        order_store: OrderStore,
        aggregator: ChartAggregator | None = None,
        statistics: StatisticsCalculator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize an empty, unloaded board.

        Business context: Collaborators are injected so the same board
        drives the CLI, the web dashboard and the tests. StorageManager
        satisfies both the record source and order store protocols.

        Args:
            record_source: Provides query_all() snapshots of records.
            order_store: Byte store holding the persisted chart order.
            aggregator: ChartAggregator. Defaults to a new instance.
            statistics: StatisticsCalculator. Defaults to a new instance.
            clock: Returns the reference time. Defaults to local now.

        Example:
            >>> storage = StorageManager()
            >>> board = ChartBoard(storage, storage)
            >>> board.load()
        """
        self.record_source = record_source
        self.order_store = order_store
        self.aggregator = aggregator or ChartAggregator()
        self.statistics = statistics or StatisticsCalculator()
        self._clock = clock or local_now
        self._lock = threading.RLock()
        self._committed: list[ChartEntry] = []
        self._preview: list[ChartEntry] | None = None
        self._dragging: ChartKind | None = None
        self._pending: list[ChartEntry] | None = None
        self._loaded = False

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def entries(self) -> list[ChartEntry]:
        """Displayed list: the preview while dragging, else committed."""
        with self._lock:
            if self._preview is not None:
                return list(self._preview)
            return list(self._committed)

    @property
    def committed(self) -> list[ChartEntry]:
        """Last committed list."""
        with self._lock:
            return list(self._committed)

    @property
    def dragging(self) -> ChartKind | None:
        """Kind being dragged, or None outside a drag session."""
        return self._dragging

    @property
    def has_pending_refresh(self) -> bool:
        """True when a refresh is waiting for the drag session to end."""
        return self._pending is not None

    @property
    def loaded(self) -> bool:
        """True once load() has run."""
        return self._loaded

    # =========================================================================
    # LOAD / REFRESH
    # =========================================================================

    def saved_order(self) -> list[PersistedOrderEntry]:
        """
        Read the persisted chart order.

        Returns:
            List of PersistedOrderEntry, empty when nothing usable is stored.
        """
        return deserialize(self.order_store.get(Config.ORDER_KEY)) or []

    def generate_chart_data(
        self, records: Sequence[Record], now: datetime | None = None
    ) -> list[ChartEntry]:
        """
        Aggregate records and order them by the persisted chart order.

        Pure with respect to board state: nothing is stored.

        Args:
            records: Records to aggregate.
            now: Reference time. Defaults to the board clock.

        Returns:
            Four chart entries in persisted order (default order on first
            run or when the saved order is unreadable).
        """
        generated = self.aggregator.generate(records, now or self._clock())
        return merge_order(generated, self.saved_order())

    def load(self, now: datetime | None = None) -> list[ChartEntry]:
        """
        Cold start: build the displayed list from records and saved order.

        Args:
            now: Reference time. Defaults to the board clock.

        Returns:
            The displayed list after loading.
        """
        records = self.record_source.query_all()
        result = self.generate_chart_data(records, now)
        with self._lock:
            self._loaded = True
            if self._dragging is not None:
                self._pending = result
                logger.info("Load deferred until drag session ends")
                return self.entries
            self._committed = result
            logger.debug("Loaded %d records into chart board", len(records))
            return list(self._committed)

    def refresh(self, now: datetime | None = None) -> list[ChartEntry]:
        """
        Recompute aggregates while preserving the displayed order.

        Loads instead when the board has not been loaded yet, so the
        persisted order still applies.

        Args:
            now: Reference time. Defaults to the board clock.

        Returns:
            The displayed list. Unchanged while a drag session is open;
            the new data is applied when the session ends.
        """
        if not self._loaded:
            return self.load(now)
        generated = self._aggregate(now)
        return self._apply_refresh(generated)

    async def refresh_async(self, now: datetime | None = None) -> list[ChartEntry]:
        """
        Refresh with aggregation in a worker thread.

        Business context: Aggregating a large record store takes long
        enough to stall an event loop. The expensive part runs off-loop;
        the swap into board state stays atomic.

        Args:
            now: Reference time. Defaults to the board clock.

        Returns:
            The displayed list after the refresh was applied or deferred.
        """
        if not self._loaded:
            return await asyncio.to_thread(self.load, now)
        generated = await asyncio.to_thread(self._aggregate, now)
        return self._apply_refresh(generated)

    def _aggregate(self, now: datetime | None) -> list[ChartEntry]:
        """Query records and build default-ordered entries."""
        records = self.record_source.query_all()
        return self.aggregator.generate(records, now or self._clock())

    def _apply_refresh(self, generated: list[ChartEntry]) -> list[ChartEntry]:
        """Merge fresh entries into committed state, or park them."""
        with self._lock:
            if self._dragging is not None:
                self._pending = generated
                logger.info("Refresh deferred until drag session ends")
                return self.entries
            self._committed = merge_order(generated, reference_from(self._committed))
            return list(self._committed)

    def _apply_pending(self) -> None:
        """Merge a parked refresh against the committed order. Lock held."""
        if self._pending is None:
            return
        self._committed = merge_order(self._pending, reference_from(self._committed))
        self._pending = None
        logger.info("Applied deferred refresh")

    # =========================================================================
    # DRAG SESSION
    # =========================================================================

    def begin_drag(self, kind: ChartKind) -> bool:
        """
        Open a drag session for one chart.

        Args:
            kind: Kind the user started dragging.

        Returns:
            True if the session opened. False if another session is open
            or the kind is not on the board; the call is then ignored.
        """
        with self._lock:
            if self._dragging is not None:
                logger.warning(
                    "Ignoring drag of %s: %s is already being dragged",
                    kind.value,
                    self._dragging.value,
                )
                return False
            if kind not in {entry.kind for entry in self._committed}:
                logger.warning("Ignoring drag of %s: not on the board", kind.value)
                return False
            self._dragging = kind
            self._preview = None
            return True

    def preview_reorder(self, dragged: ChartKind, drop_onto: ChartKind) -> list[ChartEntry]:
        """
        Compute the live preview for hovering dragged over drop_onto.

        The preview is always derived from the committed order, so repeated
        calls with the same arguments yield the same list and committed
        state is never touched.

        Args:
            dragged: Kind being dragged; must match the open session.
            drop_onto: Kind under the pointer.

        Returns:
            The preview list, now also the displayed list.

        Raises:
            DragSessionError: If no drag session is open or dragged is not
                the kind the session was opened for.
        """
        with self._lock:
            if self._dragging is None:
                raise DragSessionError("No drag session is open")
            if dragged != self._dragging:
                raise DragSessionError(
                    f"Drag session is for {self._dragging.value}, not {dragged.value}"
                )
            self._preview = reorder(self._committed, dragged, drop_onto)
            return list(self._preview)

    def commit_reorder(self, entries: Sequence[ChartEntry] | None = None) -> bytes:
        """
        Adopt an order, persist it and close any drag session.

        The committed list is rebuilt from the current chart data in the
        order of `entries`, so stale payloads or positions in the argument
        cannot leak into board state.

        Args:
            entries: Order to commit. Defaults to the open preview, or the
                committed list when there is none.

        Returns:
            The serialized order that was written to the order store.
        """
        with self._lock:
            if entries is None:
                entries = self._preview if self._preview is not None else self._committed
            reference = reference_from(renumber(entries))
            self._committed = merge_order(self._committed, reference)
            self._preview = None
            self._dragging = None
            data = serialize(self._committed)
            self.order_store.set(Config.ORDER_KEY, data)
            logger.info(
                "Committed chart order: %s", ", ".join(e.kind.value for e in self._committed)
            )
            self._apply_pending()
            return data

    def cancel_drag(self) -> list[ChartEntry]:
        """
        Close the drag session without saving.

        Returns:
            The committed list, which is displayed again.
        """
        with self._lock:
            self._preview = None
            self._dragging = None
            self._apply_pending()
            return list(self._committed)

    def move(self, dragged: ChartKind, drop_onto: ChartKind) -> bytes:
        """
        Run a whole drag gesture: begin, preview, commit.

        Args:
            dragged: Kind to move.
            drop_onto: Kind whose slot it takes.

        Returns:
            The serialized order written to the order store.

        Raises:
            DragSessionError: If a drag session is already open or dragged
                is not on the board.
        """
        with self._lock:
            if not self.begin_drag(dragged):
                raise DragSessionError(f"Cannot start dragging {dragged.value}")
            self.preview_reorder(dragged, drop_onto)
            return self.commit_reorder()

    def reset_order(self) -> list[ChartEntry]:
        """
        Forget the saved order and show charts in default order.

        Returns:
            The committed list in default order.

        Raises:
            DragSessionError: If a drag session is open.
        """
        with self._lock:
            if self._dragging is not None:
                raise DragSessionError("Cannot reset order during a drag session")
            self.order_store.set(Config.ORDER_KEY, b"")
            default_order = list(ChartKind)
            self._committed = renumber(
                sorted(self._committed, key=lambda e: default_order.index(e.kind))
            )
            return list(self._committed)

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def overall_statistics(
        self,
        records: Sequence[Record] | None = None,
        now: datetime | None = None,
    ) -> OverallStatistics:
        """
        Compute summary statistics for display and sharing.

        Args:
            records: Records to use. Defaults to a fresh query.
            now: Reference time. Defaults to the board clock.

        Returns:
            OverallStatistics(total, weekly, active_days, daily_average).
        """
        if records is None:
            records = self.record_source.query_all()
        return self.statistics.overall_statistics(records, now or self._clock())
