"""
FastAPI routes for the Activity Charts dashboard.

PURPOSE: Thin route handlers that delegate to the board and presenters.
AI CONTEXT: Routes should be simple - ordering logic lives in ChartBoard.

ROUTE STRUCTURE:
- / : Dashboard page (full HTML)
- /charts/{kind}.png : PNG chart images
- /api/* : JSON endpoints (charts, statistics, share, records, drag session)
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from ..board import BoardResult, ChartBoard, DragSessionError
from ..models import ChartKind
from ..presenters import ChartPresenter, DashboardOverview, DashboardPresenter
from ..sharing import ShareSummary

__all__ = [
    "router",
    "get_board",
    "get_dashboard_presenter",
    "get_chart_presenter",
]

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class RecordCreate(BaseModel):
    """Body of POST /api/records. Timestamp defaults to now."""

    timestamp: datetime | None = None


class DragBegin(BaseModel):
    """Body of POST /api/drag/begin."""

    kind: ChartKind


class DragMove(BaseModel):
    """Body of drag preview and one-shot move requests."""

    dragged: ChartKind
    drop_onto: ChartKind


class OrderCommit(BaseModel):
    """Body of POST /api/drag/commit. Omit kinds to commit the preview."""

    kinds: list[ChartKind] | None = None


# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_board(request: Request) -> ChartBoard:
    """
    Return the application's ChartBoard, loading it on first use.

    Args:
        request: Incoming request; the board lives on app.state.

    Returns:
        The single ChartBoard owned by this application.
    """
    board: ChartBoard = request.app.state.board
    if not board.loaded:
        board.load()
    return board


def get_dashboard_presenter(
    board: Annotated[ChartBoard, Depends(get_board)],
) -> DashboardPresenter:
    """Create a DashboardPresenter over the application board."""
    return DashboardPresenter(board)


def get_chart_presenter(
    board: Annotated[ChartBoard, Depends(get_board)],
) -> ChartPresenter:
    """Create a ChartPresenter over the application board."""
    return ChartPresenter(board)


def _order_payload(board: ChartBoard) -> dict[str, Any]:
    """Displayed order plus drag state, as returned by the order endpoints."""
    return {
        "order": [entry.kind.value for entry in board.entries],
        "dragging": board.dragging.value if board.dragging else None,
        "pending_refresh": board.has_pending_refresh,
    }


# ============================================================================
# Full Page Routes
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
) -> HTMLResponse:
    """
    Render the dashboard page with statistics and charts in display order.

    Returns:
        HTMLResponse containing the complete page.
    """
    overview = presenter.get_overview()
    return HTMLResponse(content=_render_dashboard_html(overview))


# ============================================================================
# Chart Routes (PNG images)
# ============================================================================


@router.get("/charts/{kind}.png")
async def chart_image(
    kind: str,
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> Response:
    """
    Generate and serve one chart as a PNG image.

    Falls back to an SVG placeholder if matplotlib is not installed.

    Raises:
        HTTPException: 404 if the kind names no chart.
    """
    chart_kind = ChartKind.parse(kind)
    if chart_kind is None:
        raise HTTPException(status_code=404, detail=f"Unknown chart kind: {kind}")
    try:
        png_bytes = presenter.render_chart(chart_kind)
        return Response(content=png_bytes, media_type="image/png")
    except ImportError:
        return Response(
            content=_placeholder_chart_svg(chart_kind.value.title()),
            media_type="image/svg+xml",
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"No chart {chart_kind.value}") from e


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get("/api/charts")
async def api_charts(board: Annotated[ChartBoard, Depends(get_board)]) -> dict[str, Any]:
    """Displayed chart entries with payloads, in order."""
    return {
        "charts": [entry.to_dict() for entry in board.entries],
        **_order_payload(board),
    }


@router.get("/api/statistics")
async def api_statistics(board: Annotated[ChartBoard, Depends(get_board)]) -> dict[str, Any]:
    """Total, weekly, active days and daily average."""
    return board.overall_statistics().to_dict()


@router.get("/api/share")
async def api_share(board: Annotated[ChartBoard, Depends(get_board)]) -> dict[str, Any]:
    """Share summary text and metadata."""
    return ShareSummary.from_statistics(board.overall_statistics()).to_dict()


@router.post("/api/records")
async def api_add_record(
    body: RecordCreate,
    board: Annotated[ChartBoard, Depends(get_board)],
) -> dict[str, Any]:
    """
    Store a new record and refresh the board.

    The record store must support add_record(); the default
    StorageManager does.
    """
    store = board.record_source
    add_record = getattr(store, "add_record", None)
    if add_record is None:
        raise HTTPException(status_code=405, detail="Record source is read-only")
    record = add_record(body.timestamp)
    if record is None:
        result = BoardResult(success=False, message="Record not saved", error="write failed")
        return result.to_dict()
    await board.refresh_async()
    return BoardResult(
        success=True,
        message="Record added",
        data={"record": record.to_dict(), **_order_payload(board)},
    ).to_dict()


@router.post("/api/refresh")
async def api_refresh(board: Annotated[ChartBoard, Depends(get_board)]) -> dict[str, Any]:
    """Recompute aggregates, keeping the displayed order."""
    await board.refresh_async()
    return _order_payload(board)


@router.post("/api/drag/begin")
async def api_drag_begin(
    body: DragBegin,
    board: Annotated[ChartBoard, Depends(get_board)],
) -> dict[str, Any]:
    """Open a drag session; 409 if one is already open or the chart is not shown."""
    if not board.begin_drag(body.kind):
        if board.dragging is not None:
            detail = f"A drag session is already open for {board.dragging.value}"
        else:
            detail = f"Chart {body.kind.value} is not on the board"
        raise HTTPException(status_code=409, detail=detail)
    return BoardResult(success=True, message="Drag started", data=_order_payload(board)).to_dict()


@router.post("/api/drag/preview")
async def api_drag_preview(
    body: DragMove,
    board: Annotated[ChartBoard, Depends(get_board)],
) -> dict[str, Any]:
    """Compute the live preview order; 409 without an open session."""
    try:
        board.preview_reorder(body.dragged, body.drop_onto)
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _order_payload(board)


@router.post("/api/drag/commit")
async def api_drag_commit(
    body: OrderCommit,
    board: Annotated[ChartBoard, Depends(get_board)],
) -> dict[str, Any]:
    """
    Commit the preview, or an explicit kind order, and persist it.

    An explicit order must name each kind exactly once.
    """
    entries = None
    if body.kinds is not None:
        if sorted(k.value for k in body.kinds) != sorted(k.value for k in ChartKind):
            raise HTTPException(status_code=422, detail="kinds must list every chart kind once")
        by_kind = {entry.kind: entry for entry in board.committed}
        entries = [by_kind[kind] for kind in body.kinds]
    board.commit_reorder(entries)
    return BoardResult(success=True, message="Order saved", data=_order_payload(board)).to_dict()


@router.post("/api/drag/cancel")
async def api_drag_cancel(board: Annotated[ChartBoard, Depends(get_board)]) -> dict[str, Any]:
    """Discard the preview and restore the committed order."""
    board.cancel_drag()
    return _order_payload(board)


@router.post("/api/order/move")
async def api_order_move(
    body: DragMove,
    board: Annotated[ChartBoard, Depends(get_board)],
) -> dict[str, Any]:
    """Move one chart onto another's slot in a single request."""
    try:
        board.move(body.dragged, body.drop_onto)
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return BoardResult(success=True, message="Order saved", data=_order_payload(board)).to_dict()


# ============================================================================
# Template Rendering Helpers
# ============================================================================

_DASHBOARD_CSS = """
:root {
    --bg: #0f172a;
    --surface: #1e293b;
    --border: #334155;
    --text: #f1f5f9;
    --text-muted: #94a3b8;
    --primary: #3b82f6;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
    font-family: system-ui, -apple-system, sans-serif;
    background: var(--bg);
    color: var(--text);
    line-height: 1.6;
    padding: 1rem;
}
.container { max-width: 960px; margin: 0 auto; }
header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    margin-bottom: 1.5rem;
    padding-bottom: 1rem;
    border-bottom: 1px solid var(--border);
}
h1 { font-size: 1.5rem; font-weight: 600; }
.hint { color: var(--text-muted); font-size: 0.875rem; }
.stats { display: flex; gap: 1.5rem; }
.stat { text-align: right; }
.stat .value { font-size: 1.25rem; font-weight: 600; }
.stat .label { font-size: 0.75rem; color: var(--text-muted); }
.panel {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 0.5rem;
    padding: 1rem;
    margin-bottom: 1rem;
    cursor: grab;
}
.panel.dragging { opacity: 0.6; }
.panel h2 { font-size: 1rem; font-weight: 500; }
.panel .subtitle { font-size: 0.875rem; color: var(--text-muted); }
.chart-container { display: flex; justify-content: center; padding: 1rem 0; }
.chart-container img { max-width: 100%; height: auto; border-radius: 0.25rem; }
"""

_DRAG_SCRIPT = """
let dragged = null;
let dropped = false;
function post(url, body) {
    return fetch(url, {method: 'POST', headers: {'Content-Type': 'application/json'},
                       body: JSON.stringify(body || {})});
}
document.querySelectorAll('.panel[data-kind]').forEach(function (card) {
    card.addEventListener('dragstart', function () {
        dragged = card.dataset.kind; dropped = false;
        card.classList.add('dragging');
        post('/api/drag/begin', {kind: dragged});
    });
    card.addEventListener('dragover', function (e) { e.preventDefault(); });
    card.addEventListener('dragenter', function () {
        if (dragged) { post('/api/drag/preview', {dragged: dragged, drop_onto: card.dataset.kind}); }
    });
    card.addEventListener('drop', function (e) {
        e.preventDefault(); dropped = true;
        post('/api/drag/commit').then(function () { location.reload(); });
    });
    card.addEventListener('dragend', function () {
        card.classList.remove('dragging');
        if (!dropped) { post('/api/drag/cancel'); }
        dragged = null;
    });
});
"""


def _placeholder_chart_svg(title: str) -> bytes:
    """
    Generate a placeholder SVG when matplotlib is unavailable.

    Args:
        title: Chart title to display in the placeholder.

    Returns:
        UTF-8 encoded SVG bytes.
    """
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200">
        <rect width="100%" height="100%" fill="#f1f5f9"/>
        <text x="50%" y="50%" text-anchor="middle" fill="#64748b" font-size="16">
            {html.escape(title)} Chart (install matplotlib)
        </text>
    </svg>"""
    return svg.encode("utf-8")


def _render_dashboard_html(overview: DashboardOverview) -> str:
    """
    Render the complete dashboard HTML page from overview data.

    Args:
        overview: DashboardOverview with statistics and chart cards.

    Returns:
        Complete HTML document string.
    """
    stats_html = ""
    if overview.statistics:
        s = overview.statistics
        stats_html = "".join(
            f'<div class="stat"><div class="value">{value}</div>'
            f'<div class="label">{label}</div></div>'
            for value, label in (
                (s.total, "Total"),
                (s.weekly, "This week"),
                (s.active_days, "Active days"),
                (s.daily_average_display, "Daily avg"),
            )
        )

    cards_html = "\n".join(
        f"""<div class="panel" draggable="true" data-kind="{c.kind}">
            <h2>{html.escape(c.title)}</h2>
            <div class="subtitle">{html.escape(c.subtitle)} · {html.escape(c.summary)}</div>
            <div class="chart-container">
                <img src="{c.image_url}" alt="{html.escape(c.title)}">
            </div>
        </div>"""
        for c in overview.charts
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Activity Charts</title>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body>
    <div class="container">
        <header>
            <div>
                <h1>📊 Activity Charts</h1>
                <span class="hint">Drag charts to change their order</span>
            </div>
            <div class="stats">{stats_html}</div>
        </header>
        {cards_html}
    </div>
    <script>{_DRAG_SCRIPT}</script>
</body>
</html>"""
