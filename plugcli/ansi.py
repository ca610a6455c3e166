"""Terminal colors for log records and help output.

Colors are off when NO_COLOR is set or the stream isn't a terminal,
FORCE_COLOR turns them on regardless.
"""

import logging
import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "CYAN",
    "DIM",
    "LEVEL_STYLES",
    "RED",
    "RESET",
    "YELLOW",
    "HelpStyles",
    "colorize",
    "should_colorize",
]

RESET = "\x1b[0m"

BOLD = "1"
DIM = "2"
RED = "31"
YELLOW = "33"
CYAN = "36"

# Log levels without an entry are printed as is
LEVEL_STYLES: dict[int, tuple[str, ...]] = {
    logging.WARNING: (YELLOW,),
    logging.ERROR: (RED,),
    logging.CRITICAL: (RED, BOLD),
}


class HelpStyles:
    """Styles of the help sections."""

    NAMESPACE = (CYAN, BOLD)
    COMMAND = (BOLD,)
    ALIAS = (DIM,)


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell whether `stream` (stderr by default) should get colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    stream = sys.stderr if stream is None else stream
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, *codes: str) -> str:
    """Wrap `text` in the SGR sequence made of `codes`."""
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}{RESET}"
