"""Terminal Utilities Module."""

import locale
import os
import sys
from functools import lru_cache


@lru_cache(maxsize=1)
def supports_utf8() -> bool:
    """Check if the terminal supports UTF-8 encoding.

    Returns:
        bool: True if stdout encodes UTF-8, False otherwise
    """
    encoding = getattr(sys.stdout, "encoding", None) or locale.getpreferredencoding(
        False
    )
    return encoding.lower().replace("-", "").startswith("utf8")


@lru_cache(maxsize=1)
def supports_color() -> bool:
    """Check if the terminal supports ANSI color codes.

    Honours the ``NO_COLOR`` convention and requires stdout to be a TTY.

    Returns:
        bool: True if the terminal supports color, False otherwise
    """
    if "NO_COLOR" in os.environ:
        return False

    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False

    if sys.platform == "win32":
        return (
            "ANSICON" in os.environ
            or "WT_SESSION" in os.environ  # Windows Terminal
            or os.environ.get("TERM_PROGRAM") == "vscode"
        )

    return os.environ.get("TERM") != "dumb"
