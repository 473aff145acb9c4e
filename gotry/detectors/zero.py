"""Zero-value classification for return operands."""
from __future__ import annotations

import re

from ..nodes import BasicLit, CompositeLit, Ident, LitKind, Node

_LEGACY_OCTAL_RE = re.compile(r"0[0-7_]+")


def _parse_int(text: str) -> int | None:
    """Parse a Go integer literal (any base prefix, underscores, legacy octal)."""
    try:
        if _LEGACY_OCTAL_RE.fullmatch(text):
            return int(text.replace("_", ""), 8)
        return int(text, 0)
    except ValueError:
        return None


def _parse_float(text: str) -> float | None:
    """Parse a Go float literal, decimal or hexadecimal mantissa."""
    try:
        return float(text)
    except ValueError:
        pass
    if text[:2].lower() == "0x":
        try:
            return float.fromhex(text.replace("_", ""))
        except ValueError:
            return None
    return None


def is_zero(x: Node | None) -> bool:
    """Report whether x is a zero value: nil, a zero literal, or an empty composite literal."""
    if isinstance(x, Ident):
        return x.name == "nil"
    if isinstance(x, CompositeLit):
        return len(x.elts) == 0
    if not isinstance(x, BasicLit) or not x.value:
        return False

    v = x.value
    if x.kind is LitKind.INT:
        return _parse_int(v) == 0
    if x.kind is LitKind.FLOAT:
        return _parse_float(v) == 0
    if x.kind is LitKind.IMAG:
        return _parse_float(v[:-1]) == 0
    if x.kind is LitKind.CHAR:
        return v == "0"  # '\x00' and friends are not recognized
    if x.kind is LitKind.STRING:
        return v in ('""', "``")
    return False
