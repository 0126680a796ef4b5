"""
Web dashboard module for Activity Charts.

PURPOSE: FastAPI-based web UI over one ChartBoard.
AI CONTEXT: Thin shell - ordering and aggregation live in the core modules.

FEATURES:
- Dashboard page with charts in the user's order
- Server-side chart rendering (matplotlib)
- Drag-reorder JSON API (begin / preview / commit / cancel)

USAGE:
    # Via CLI
    activity-charts dashboard

    # Programmatically
    from activity_charts.web import create_app
    app = create_app()
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]
