"""
Watermake - Main Entry Point
============================
Stamps a text watermark onto an image or every image in a directory.

Usage:
    python main.py <input-path> [-t text] [-o output] [-p position] ...
    watermark <input-path> ...      (installed console script)

Architecture:
    - Model: watermake/core/ (font lookup, rendering)
    - Batch: watermake/workers/ (directory processing)
    - Front end: watermake/cli.py (argument parsing and validation)
"""

import sys

from watermake.cli import main

if __name__ == "__main__":
    sys.exit(main())
