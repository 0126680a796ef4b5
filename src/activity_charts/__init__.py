"""
Activity Charts.

PURPOSE: Turn timestamped creation records into four reorderable activity charts.
AI CONTEXT: This package is the aggregation-and-ordering engine plus thin shells.

PACKAGE STRUCTURE:
- models.py: Records, chart kinds, payloads and chart entries
- statistics.py: Weekly count, active days and daily average
- aggregator.py: Heatmap, bar, pie and line bucketing
- ordering.py: Order merge and drag reorder
- persistence.py: Chart order byte encoding
- storage.py: JSON record store and key-value byte store
- board.py: Single-owner chart board session with drag lifecycle
- sharing.py: Plain-text statistics summary for sharing
- presenters.py: View models and matplotlib chart rendering
- web/: FastAPI dashboard
- config.py: Configuration constants

QUICK START:
    # Print statistics and current chart order
    python -m activity_charts report

    # Launch dashboard
    python -m activity_charts dashboard
"""

from activity_charts.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
