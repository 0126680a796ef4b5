"""Version information for activity-charts."""

__version__ = "1.0.0"
__version_date__ = "2026-10-18"

__title__ = "activity_charts"
__description__ = "Aggregate timestamped creation records into four reorderable activity charts"
__url__ = "https://github.com/activity-charts/activity-charts"

__author__ = "Activity Charts Contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Activity Charts Contributors"

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
