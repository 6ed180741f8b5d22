from __future__ import annotations

import os as _os
from typing import Optional, TextIO

from termcolor import colored

DEBUG_PY_TRACE_ENV = "WRYNECK_DEBUG_PY_TRACE"

COLOR_MODES = ("auto", "always", "never")


def debug_py_trace_enabled() -> bool:
    """Check whether internal failures should print a Python traceback."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in ("1", "true", "yes", "on")


def color_flag(mode: str) -> Optional[bool]:
    """Map a ``--color`` mode to the tri-state flag ``paint`` takes."""
    match mode:
        case "auto":
            return None
        case "always":
            return True
        case "never":
            return False
        case _:
            raise ValueError(f"unknown color mode {mode!r}")


def paint(text: str, color_name: str, color: Optional[bool] = None) -> str:
    """Color ``text``.

    ``None`` defers to termcolor's own detection (tty, NO_COLOR, FORCE_COLOR);
    ``True``/``False`` force it on or off.
    """
    if color is None:
        return colored(text, color_name)
    if color:
        return colored(text, color_name, force_color=True)
    return colored(text, color_name, no_color=True)


def stream_color(stream: TextIO, color: Optional[bool] = None) -> bool:
    """Resolve the tri-state flag for text written to ``stream``.

    ``auto`` follows termcolor's environment switches, then asks ``stream``
    itself whether it is a terminal (termcolor alone only looks at stdout).
    """
    if color is not None:
        return color
    if "ANSI_COLORS_DISABLED" in _os.environ or "NO_COLOR" in _os.environ:
        return False
    if "FORCE_COLOR" in _os.environ:
        return True
    if _os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty is not None and isatty())
