"""rut CLI entry point.

Allows running via `python -m rut` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .constants import EditorConstants
from .logsetup import setup_logging
from .settings import Settings

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """Open the file named on the command line and edit it.

    Returns:
        Process exit status
    """
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(EditorConstants.USAGE, file=sys.stderr)
        return 1
    filename = args[0]

    settings = Settings().load()
    setup_logging(settings)

    # Lazy import to keep usage errors free of terminal setup
    from .editor import Editor
    from .terminal import TerminalSizeError

    try:
        editor = Editor(filename, settings=settings)
    except (OSError, ValueError) as e:
        logger.error("Could not open %s: %s", filename, e)
        print(f"Error opening {filename}: {e}", file=sys.stderr)
        return 1

    try:
        return editor.run()
    except TerminalSizeError as e:
        editor.close()
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
