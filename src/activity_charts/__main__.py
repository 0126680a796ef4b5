"""
Package entry point for python -m execution.

USAGE:
    python -m activity_charts            # Print statistics report
    python -m activity_charts dashboard  # Launch web dashboard
    python -m activity_charts order      # Show chart order
"""

import sys

from activity_charts.cli import main

if __name__ == "__main__":
    sys.exit(main())
