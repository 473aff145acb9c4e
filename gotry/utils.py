"""Shared output helpers: colouring, logging, relative paths."""
from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(os.environ.get("GOTRY_ROOT", Path.cwd())).resolve()

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def c(text: str, color: str, stream=None) -> str:
    """Wrap text in an ANSI colour code when the stream is a terminal."""
    if color not in COLORS or not _use_color(stream or sys.stdout):
        return text
    return f"{COLORS[color]}{text}{COLORS['reset']}"


def log(msg: str) -> None:
    """Print a diagnostic line to stderr."""
    print(msg, file=sys.stderr)


def rel(path: str | Path) -> str:
    """Path relative to PROJECT_ROOT when it lies below it, else unchanged."""
    p = Path(path)
    try:
        return str(p.resolve().relative_to(PROJECT_ROOT))
    except ValueError:
        return str(path)
