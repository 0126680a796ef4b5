"""
CLI entry point for Activity Charts.

PURPOSE: Command-line interface for the dashboard, reports and chart order.
AI CONTEXT: Main entry points for package execution.

USAGE:
    # Print statistics and chart order (default)
    python -m activity_charts

    # Or via CLI command (after install)
    activity-charts

    # Run with subcommands
    activity-charts dashboard             # Launch web dashboard
    activity-charts add --at 2024-06-15T10:30:00
    activity-charts clear                 # Delete every stored record
    activity-charts move line heatmap     # Put the line chart in heatmap's slot
    activity-charts reset-order           # Back to the default order
    activity-charts share --compact       # One-line statistics summary
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from functools import lru_cache

from .board import BoardResult, ChartBoard, DragSessionError
from .config import Config
from .models import ChartKind
from .sharing import ShareSummary
from .storage import StorageManager

# Constants
PROG_NAME = "activity-charts"
STORAGE_ENV_VAR = "ACTIVITY_CHARTS_STORAGE_DIR"
EXIT_OK = 0
EXIT_INVALID = 2


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def _open_board(storage_dir: str | None = None) -> ChartBoard:
    """Create a loaded board backed by a StorageManager.

    Args:
        storage_dir: Storage directory. Defaults to Config.get_storage_dir().

    Returns:
        ChartBoard with the persisted order applied.
    """
    storage = StorageManager(storage_dir=storage_dir)
    board = ChartBoard(storage, storage)
    board.load()
    return board


def _parse_kind(value: str) -> ChartKind | None:
    """Parse a chart kind argument, logging the valid choices on failure."""
    kind = ChartKind.parse(value)
    if kind is None:
        choices = ", ".join(k.value for k in ChartKind)
        _log(f"Unknown chart kind '{value}' (choose from: {choices})", emoji="⚠️")
    return kind


def _format_order(board: ChartBoard) -> str:
    """Numbered chart order, one line per chart."""
    return "\n".join(
        f"{entry.position + 1}. {entry.kind.value:<8} {entry.title}" for entry in board.entries
    )


def run_dashboard(
    host: str = Config.DEFAULT_HOST,
    port: int = Config.DEFAULT_PORT,
    storage_dir: str | None = None,
) -> None:
    """
    Launch the web dashboard.

    Starts a FastAPI server showing the statistics strip and the four
    charts in the user's order. Charts can be dragged to reorder them.

    Business context: The dashboard is the interactive surface; every
    other subcommand is a scriptable view of the same board.

    Args:
        host: Network interface to bind to. Default '127.0.0.1' for
            local-only access. Use '0.0.0.0' for network access.
        port: TCP port for the HTTP server. Default 8000.
        storage_dir: Storage directory for the server's board. Passed
            through the environment because uvicorn builds the app.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Raises:
        OSError: If port is already in use.
        ImportError: If FastAPI/uvicorn are not installed.

    Example:
        >>> # From command line:
        >>> # activity-charts dashboard --port 3000
        >>> run_dashboard(port=3000)
        🚀 Starting dashboard at http://127.0.0.1:3000
    """
    from .web import run_dashboard as start_web

    if storage_dir:
        os.environ[STORAGE_ENV_VAR] = storage_dir
    _log(f"Starting dashboard at http://{host}:{port}", emoji="🚀")
    _log("Press Ctrl+C to stop")
    start_web(host=host, port=port)


def run_report(board: ChartBoard | None = None) -> int:
    """
    Print statistics and the current chart order to stdout.

    Args:
        board: Optional ChartBoard for testability. Defaults to a board
            over the configured storage directory.

    Returns:
        Exit code 0.
    """
    board = board or _open_board()
    stats = board.overall_statistics()
    lines = [
        "Activity Charts Report",
        "=" * 40,
        f"Total records:  {stats.total}",
        f"This week:      {stats.weekly}",
        f"Active days:    {stats.active_days}",
        f"Daily average:  {stats.daily_average:.1f}",
        "",
        "Chart order:",
        _format_order(board),
    ]
    # Note: Using print() intentionally for stdout piping support
    print("\n".join(lines))
    return EXIT_OK


def run_add(at: str | None = None, board: ChartBoard | None = None) -> int:
    """
    Store one record and refresh the board.

    Args:
        at: ISO 8601 timestamp. Defaults to now.
        board: Optional ChartBoard for testability.

    Returns:
        0 on success, 2 if the timestamp cannot be parsed or stored.
    """
    timestamp = None
    if at:
        try:
            timestamp = datetime.fromisoformat(at.replace("Z", "+00:00"))
        except ValueError:
            _log(f"Invalid timestamp '{at}', expected ISO 8601", emoji="⚠️")
            return EXIT_INVALID

    board = board or _open_board()
    add_record = getattr(board.record_source, "add_record", None)
    record = add_record(timestamp) if add_record else None
    if record is None:
        _log("Record could not be saved", emoji="❌")
        return EXIT_INVALID
    board.refresh()
    _log(f"Added record at {record.timestamp.isoformat()}", emoji="➕")
    return EXIT_OK


def run_clear(board: ChartBoard | None = None) -> int:
    """
    Delete every stored record and refresh the board.

    The chart order is kept.

    Args:
        board: Optional ChartBoard for testability.

    Returns:
        0 on success, 2 if the records could not be cleared.
    """
    board = board or _open_board()
    clear_records = getattr(board.record_source, "clear_records", None)
    if clear_records is None or not clear_records():
        _log("Records could not be cleared", emoji="❌")
        return EXIT_INVALID
    board.refresh()
    _log("All records cleared", emoji="🗑️")
    return EXIT_OK


def run_order(board: ChartBoard | None = None) -> int:
    """Print the current chart order. Returns exit code 0."""
    board = board or _open_board()
    print(_format_order(board))
    return EXIT_OK


def run_move(dragged: str, drop_onto: str, board: ChartBoard | None = None) -> int:
    """
    Move one chart into another chart's slot and persist the order.

    Args:
        dragged: Kind to move, e.g. 'line'.
        drop_onto: Kind whose slot it takes, e.g. 'heatmap'.
        board: Optional ChartBoard for testability.

    Returns:
        0 on success, 2 for unknown kinds or a refused move.

    Example:
        >>> # activity-charts move line heatmap
        >>> run_move("line", "heatmap")
        0
    """
    dragged_kind = _parse_kind(dragged)
    target_kind = _parse_kind(drop_onto)
    if dragged_kind is None or target_kind is None:
        return EXIT_INVALID

    board = board or _open_board()
    try:
        board.move(dragged_kind, target_kind)
    except DragSessionError as e:
        result = BoardResult(success=False, message="Move refused", error=str(e))
    else:
        result = BoardResult(success=True, message=f"Moved {dragged_kind.value}")

    if not result.success:
        _log(f"{result.message}: {result.error}", emoji="⚠️")
        return EXIT_INVALID
    _log(result.message, emoji="✅")
    print(_format_order(board))
    return EXIT_OK


def run_reset_order(board: ChartBoard | None = None) -> int:
    """Forget the saved order and print the default order. Returns 0."""
    board = board or _open_board()
    board.reset_order()
    _log("Chart order reset", emoji="🔄")
    print(_format_order(board))
    return EXIT_OK


def run_share(compact: bool = False, board: ChartBoard | None = None) -> int:
    """
    Print the statistics share text.

    Args:
        compact: Print a single line instead of the full text.
        board: Optional ChartBoard for testability.

    Returns:
        Exit code 0.
    """
    board = board or _open_board()
    summary = ShareSummary.from_statistics(board.overall_statistics())
    print(summary.compact_text() if compact else summary.formatted_text())
    return EXIT_OK


def main() -> int:
    """
    Main CLI entry point for Activity Charts.

    Parses command-line arguments and dispatches to the appropriate
    subcommand handler. If no subcommand is specified, prints the report.

    Business context: This is the entry point installed as the
    'activity-charts' console script.

    Subcommands:
    - dashboard [--host HOST] [--port PORT]: Launch web dashboard
    - report: Print statistics and chart order (default)
    - add [--at ISO]: Store a record
    - order: Print chart order
    - move DRAGGED ONTO: Move a chart into another chart's slot
    - reset-order: Restore the default order
    - clear: Delete every stored record
    - share [--compact]: Print share text

    Returns:
        Exit code 0 for success, 2 for invalid input.

    Raises:
        SystemExit: On --help or argument parsing errors.

    Example:
        >>> # From command line:
        >>> # activity-charts move pie bar
        >>> sys.exit(main())  # Typical usage pattern
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Activity Charts - statistics and reorderable charts for creation records",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--storage-dir",
        default=None,
        help=f"Storage directory (default: ${STORAGE_ENV_VAR} or {Config.STORAGE_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Launch web dashboard",
    )
    dashboard_parser.add_argument(
        "--host",
        default=Config.DEFAULT_HOST,
        help=f"Bind address (default: {Config.DEFAULT_HOST})",
    )
    dashboard_parser.add_argument(
        "--port",
        type=int,
        default=Config.DEFAULT_PORT,
        help=f"Port number (default: {Config.DEFAULT_PORT})",
    )

    # Report command
    subparsers.add_parser(
        "report",
        help="Print statistics and chart order to stdout",
    )

    # Add command
    add_parser = subparsers.add_parser(
        "add",
        help="Store a creation record",
    )
    add_parser.add_argument(
        "--at",
        default=None,
        help="ISO 8601 timestamp (default: now)",
    )
    subparsers.add_parser(
        "clear",
        help="Delete every stored record",
    )

    # Order commands
    subparsers.add_parser(
        "order",
        help="Print the current chart order",
    )
    move_parser = subparsers.add_parser(
        "move",
        help="Move a chart into another chart's slot",
    )
    move_parser.add_argument("dragged", help="Chart to move (heatmap, bar, pie, line)")
    move_parser.add_argument("drop_onto", metavar="onto", help="Chart whose slot it takes")
    subparsers.add_parser(
        "reset-order",
        help="Restore the default chart order",
    )

    # Share command
    share_parser = subparsers.add_parser(
        "share",
        help="Print statistics share text",
    )
    share_parser.add_argument(
        "--compact",
        action="store_true",
        help="Print a single line",
    )

    args = parser.parse_args()

    if args.command == "dashboard":
        run_dashboard(host=args.host, port=args.port, storage_dir=args.storage_dir)
        return EXIT_OK

    board = _open_board(args.storage_dir)
    if args.command == "add":
        return run_add(at=args.at, board=board)
    elif args.command == "clear":
        return run_clear(board=board)
    elif args.command == "order":
        return run_order(board=board)
    elif args.command == "move":
        return run_move(args.dragged, args.drop_onto, board=board)
    elif args.command == "reset-order":
        return run_reset_order(board=board)
    elif args.command == "share":
        return run_share(compact=args.compact, board=board)
    # Default: report
    return run_report(board=board)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
