#!/usr/bin/env python3
"""rut - a small terminal text editor.

Usage:
    python main.py <filename>

Controls:
    Arrow keys: Move cursor (keeps the column where the line allows)
    Ctrl-Left/Ctrl-Right: Previous/next word boundary
    Home/End: Start/end of line
    Backspace/Delete: Delete before/at cursor
    Ctrl-S: Save file in the background
    Ctrl-C: Quit
"""

import sys
from rut.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
