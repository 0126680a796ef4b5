"""Main test module for activity-charts."""

import sys
from unittest.mock import patch

import activity_charts


class TestVersion:
    """Test version information."""

    def test_version_exists(self) -> None:
        """Verifies that version string is defined in package.

        Business context:
        Version information is required for package distribution and
        user troubleshooting.
        """
        assert activity_charts.__version__ is not None

    def test_version_format(self) -> None:
        """Verifies version follows MAJOR.MINOR.PATCH with numeric parts."""
        parts = activity_charts.__version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_title(self) -> None:
        """Verifies the package title matches the import name."""
        assert activity_charts.__title__ == "activity_charts"


class TestModuleEntryPoint:
    """Tests for python -m activity_charts."""

    def test_main_module_delegates_to_cli(self) -> None:
        """Verifies __main__ runs cli.main and exits with its code."""
        import runpy

        with (
            patch("activity_charts.cli.main", return_value=0) as mock_main,
            patch.object(sys, "argv", ["activity-charts"]),
        ):
            try:
                runpy.run_module("activity_charts", run_name="__main__")
            except SystemExit as exc:
                assert exc.code == 0
        mock_main.assert_called_once()
