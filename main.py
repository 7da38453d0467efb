"""
Warpmark - Main Entry Point
===========================
Stamps a tiled, warped, rotated text watermark onto a photograph.

Usage:
    python main.py [input] [output] [--text TEXT] [--rotation DEG] ...

The command line itself lives in warpmark/cli.py.
"""

import sys

from warpmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
