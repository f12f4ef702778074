#!/usr/bin/env python3
"""
Launcher script for the AR pose smoothing tools.

Usage:
    python run.py replay session.csv --output smoothed.json
    python run.py --help    # Show CLI options
"""

if __name__ == "__main__":
    import sys

    from arsmooth.cli import main
    sys.exit(main())
