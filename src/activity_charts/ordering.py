"""
Chart ordering for Activity Charts.

PURPOSE: Reconcile saved orderings with fresh aggregates and apply drag moves.
AI CONTEXT: Pure list transformations keyed by ChartKind - no state, no I/O.

OPERATIONS:
- merge_order: The single reconciliation primitive. Used for cold start
  (reference = persisted order) and for refresh (reference = displayed order).
- reorder: Move one entry onto another entry's slot.
- reference_from: Capture (kind, position) pairs of a displayed list.

INVARIANT:
Every list returned here has one entry per kind and position == index.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .models import ChartEntry, ChartKind, PersistedOrderEntry

__all__ = ["merge_order", "reference_from", "renumber", "reorder"]

logger = logging.getLogger(__name__)


def renumber(entries: Iterable[ChartEntry]) -> list[ChartEntry]:
    """
    Reassign each entry's position to its index.

    Args:
        entries: Entries in their final display order.

    Returns:
        New list with positions 0..n-1.
    """
    return [entry.with_position(index) for index, entry in enumerate(entries)]


def _check_positions(entries: Sequence[ChartEntry]) -> None:
    """Assert one entry per kind and position == index."""
    kinds = [entry.kind for entry in entries]
    assert len(set(kinds)) == len(kinds), f"duplicate chart kinds: {kinds}"
    assert all(e.position == i for i, e in enumerate(entries)), "positions out of sync"


def merge_order(
    generated: Sequence[ChartEntry],
    reference: Sequence[PersistedOrderEntry],
) -> list[ChartEntry]:
    """
    Merge a reference ordering into freshly generated chart entries.

    ALGORITHM:
    1. Walk reference in order; for each kind found in generated, copy the
       reference position onto that entry and collect it.
    2. Append generated entries whose kind was not consumed, in generated
       order and keeping their generated positions (first run, or kinds
       the reference predates).
    3. Stable-sort by position.
    4. Renumber positions to indices.

    Kinds in reference that generated lacks are dropped. A kind repeated in
    reference is taken at its first occurrence only.

    Business context: The user's chosen order must survive both restarts
    (reference comes from storage) and pull-to-refresh (reference comes
    from what is on screen), while chart data is always regenerated.

    Args:
        generated: Fresh entries, normally the four default-position
            entries from ChartAggregator.generate().
        reference: Ordering to honor. May be empty.

    Returns:
        New list containing exactly the kinds of generated, with
        positions equal to indices.

    Example:
        >>> ref = [PersistedOrderEntry(ChartKind.PIE, 0), PersistedOrderEntry(ChartKind.BAR, 1)]
        >>> [e.kind.value for e in merge_order(generated, ref)]
        ['pie', 'heatmap', 'bar', 'line']
    """
    by_kind = {entry.kind: entry for entry in generated}
    consumed: set[ChartKind] = set()
    merged: list[ChartEntry] = []

    for saved in reference:
        entry = by_kind.get(saved.kind)
        if entry is None or saved.kind in consumed:
            continue
        consumed.add(saved.kind)
        merged.append(entry.with_position(saved.position))

    merged.extend(entry for entry in generated if entry.kind not in consumed)

    result = renumber(sorted(merged, key=lambda entry: entry.position))
    if __debug__:
        _check_positions(result)
    return result


def reorder(
    entries: Sequence[ChartEntry],
    dragged: ChartKind,
    drop_onto: ChartKind,
) -> list[ChartEntry]:
    """
    Move the dragged entry into the drop target's slot.

    The dragged entry is removed and reinserted at the index the target
    held before the move; entries in between shift by one.

    Args:
        entries: Current ordered entries. Not modified.
        dragged: Kind being dragged.
        drop_onto: Kind being dropped onto.

    Returns:
        New renumbered list. When dragged == drop_onto, or either kind is
        absent, a list equal to the input (positions untouched).

    Example:
        >>> order = reorder(default_entries, ChartKind.LINE, ChartKind.HEATMAP)
        >>> [e.kind.value for e in order]
        ['line', 'heatmap', 'bar', 'pie']
    """
    if dragged == drop_onto:
        return list(entries)

    kinds = [entry.kind for entry in entries]
    if dragged not in kinds or drop_onto not in kinds:
        logger.debug("Ignoring reorder of %s onto %s: kind not present", dragged, drop_onto)
        return list(entries)

    from_index = kinds.index(dragged)
    to_index = kinds.index(drop_onto)

    moved = list(entries)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return renumber(moved)


def reference_from(entries: Iterable[ChartEntry]) -> list[PersistedOrderEntry]:
    """
    Capture the ordering of a displayed list as merge reference.

    Args:
        entries: Displayed chart entries.

    Returns:
        PersistedOrderEntry per entry, in list order.
    """
    return [PersistedOrderEntry.from_entry(entry) for entry in entries]
