"""Classification counters and their reports."""
from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass


class Kind(enum.IntEnum):
    FUNC = 0
    FUNC_ERROR = enum.auto()
    STMT = enum.auto()
    IF = enum.auto()
    IF_ERR = enum.auto()
    TRY_CAND = enum.auto()
    NON_ERR_NAME = enum.auto()
    RETURN_EXPR = enum.auto()
    SHARED_RETURN_EXPR = enum.auto()
    SINGLE_STMT = enum.auto()
    COMPLEX_BLOCK = enum.auto()
    HAS_ELSE = enum.auto()


def _kind(desc: str, parent: Kind, report: bool = False) -> dict:
    return {"desc": desc, "parent": parent, "report": report}


# report: positions are collected and can be listed with -l
KIND_INFO: dict[Kind, dict] = {
    Kind.FUNC: _kind("func declarations", Kind.FUNC),
    Kind.FUNC_ERROR: _kind("func declarations returning an error", Kind.FUNC),
    Kind.STMT: _kind("statements", Kind.STMT),
    Kind.IF: _kind("if statements", Kind.STMT),
    Kind.IF_ERR: _kind("if <err> != nil statements", Kind.IF),
    Kind.TRY_CAND: _kind("try candidates", Kind.IF_ERR, report=True),
    Kind.NON_ERR_NAME: _kind('<err> name is different from "err"', Kind.IF_ERR, report=True),
    Kind.RETURN_EXPR: _kind("{ return ... zero values ..., expr }", Kind.IF_ERR, report=True),
    Kind.SHARED_RETURN_EXPR: _kind("single statement return expr shared by all handlers in a func",
                                   Kind.RETURN_EXPR, report=True),
    Kind.SINGLE_STMT: _kind("single statement then branch", Kind.IF_ERR, report=True),
    Kind.COMPLEX_BLOCK: _kind("complex then branch; cannot use try", Kind.IF_ERR, report=True),
    Kind.HAS_ELSE: _kind("non-empty else branch; cannot use try", Kind.IF_ERR, report=True),
}

# buckets listed after this one are if <err> != nil statements that are not candidates
_NON_CANDIDATES_AFTER = Kind.NON_ERR_NAME


@dataclass(frozen=True)
class Position:
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


class Stats:
    """Run-wide counters, one per Kind, plus positions for reporting kinds."""

    def __init__(self):
        self.counts: dict[Kind, int] = defaultdict(int)
        self.positions: dict[Kind, list[Position]] = defaultdict(list)

    def count(self, kind: Kind, pos: Position) -> None:
        self.counts[kind] += 1
        if KIND_INFO[kind]["report"]:
            self.positions[kind].append(pos)

    def merge(self, other: "Stats") -> None:
        """Add other's counts; its positions are appended after ours."""
        for kind, n in other.counts.items():
            self.counts[kind] += n
        for kind, plist in other.positions.items():
            self.positions[kind].extend(plist)

    def __getitem__(self, kind: Kind) -> int:
        return self.counts.get(kind, 0)

    # -- Reports --

    def format_count(self, kind: Kind, listed: bool = False) -> str:
        info = KIND_INFO[kind]
        x = self[kind]
        total = self[info["parent"]]
        # don't divide by zero
        pct = x * 100 / total if total else 100.0
        hint = ""
        if info["report"] and not listed:
            hint = " (use -l flag to list file positions)"
        return f"{x:7d} ({pct:5.1f}% of {total:7d}) {info['desc']}{hint}"

    def format_counts(self, listed: bool = False) -> list[str]:
        lines = ["--- stats ---"]
        for kind in Kind:
            lines.append(self.format_count(kind, listed))
            if kind is _NON_CANDIDATES_AFTER:
                lines.append("--- non-try candidates ---")
        return lines

    def format_positions(self) -> list[str]:
        lines = []
        for kind in Kind:
            plist = self.positions.get(kind)
            if not plist:
                continue
            lines.append(f"--- {KIND_INFO[kind]['desc']} ---")
            for i, pos in enumerate(plist, 1):
                lines.append(f"{i:7d}  {pos}")
            lines.append("")
        return lines
