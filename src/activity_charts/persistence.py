"""
Chart order persistence for Activity Charts.

PURPOSE: Encode and decode the durable part of the chart order.
AI CONTEXT: Only (kind, position) pairs are stored - chart data is always regenerated.

WIRE FORMAT:
    UTF-8 JSON array, list order preserved:
    [{"kind":"pie","position":0},{"kind":"bar","position":1}, ...]

ERROR HANDLING STRATEGY:
- Empty or missing bytes: None (treated as first run)
- Invalid UTF-8, invalid JSON, wrong shape: log warning, return None
- Unknown kind identifier: drop that pair, keep the rest
- Never raises
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from .models import ChartEntry, ChartKind, PersistedOrderEntry

__all__ = ["deserialize", "serialize"]

logger = logging.getLogger(__name__)


def serialize(entries: Iterable[ChartEntry | PersistedOrderEntry]) -> bytes:
    """
    Encode the (kind, position) pairs of an ordered list.

    Args:
        entries: Chart entries or persisted order entries, in display order.

    Returns:
        UTF-8 encoded compact JSON array.

    Example:
        >>> serialize([PersistedOrderEntry(ChartKind.PIE, 0)])
        b'[{"kind":"pie","position":0}]'
    """
    pairs = [{"kind": entry.kind.value, "position": entry.position} for entry in entries]
    return json.dumps(pairs, separators=(",", ":")).encode("utf-8")


def deserialize(data: bytes | None) -> list[PersistedOrderEntry] | None:
    """
    Decode persisted chart order bytes.

    Business context: A corrupt or missing preference must never stop the
    dashboard from loading. Callers treat None exactly like a first run.

    Args:
        data: Bytes produced by serialize(), or None.

    Returns:
        List of PersistedOrderEntry in stored order, or None when data is
        empty or cannot be decoded.

    Example:
        >>> deserialize(b'')
        >>> deserialize(b'not json')
        >>> deserialize(b'[{"kind":"line","position":0}]')
        [PersistedOrderEntry(kind=<ChartKind.LINE: 'line'>, position=0)]
    """
    if not data:
        return None

    try:
        decoded = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        logger.warning(f"Ignoring unreadable chart order: {e}")
        return None

    if not isinstance(decoded, list):
        logger.warning("Ignoring chart order: expected a list")
        return None

    result: list[PersistedOrderEntry] = []
    for item in decoded:
        if not isinstance(item, dict):
            logger.warning("Ignoring chart order: entry is not an object")
            return None
        raw_kind = item.get("kind")
        position = item.get("position")
        # bool is an int subclass; reject it explicitly
        if (
            not isinstance(raw_kind, str)
            or not isinstance(position, int)
            or isinstance(position, bool)
        ):
            logger.warning("Ignoring chart order: malformed entry %r", item)
            return None
        kind = ChartKind.parse(raw_kind)
        if kind is None:
            logger.warning("Dropping unknown chart kind %r from saved order", raw_kind)
            continue
        result.append(PersistedOrderEntry(kind=kind, position=position))
    return result
