"""Convenience launcher for the spillover report.

Usage:
  python spillover_report.py --project ABC --days 14 --output spillover.txt

Any value not given on the command line is prompted for interactively unless
``--no-input`` is passed.
"""

import sys

from sprint_spillover.app import main

if __name__ == "__main__":
    sys.exit(main())
