"""Rewrite try candidates in place to use try(...)."""
from __future__ import annotations

from ..detectors.idiom import Match
from ..errors import RewriteError
from ..nodes import (AssignStmt, Block, CallExpr, ExprStmt, Ident, Node,
                     is_blanks)

TRY = "try"


def _try_call(call: Node, end: int) -> CallExpr:
    """Build try(call); the span covers the call through end."""
    fun = Ident(TRY, pos=call.pos, end=call.pos, line=call.line, dirty=True)
    return CallExpr(fun, [call], pos=call.pos, end=end, line=call.line, dirty=True)


def rewrite_assign(a: AssignStmt, end: int) -> Node:
    """Drop the trailing error target of a and wrap its call in try(...).

    Returns a (mutated) if targets remain, otherwise an expression
    statement holding the try call.
    """
    rhs = _try_call(a.rhs[0], end)
    lhs = a.lhs[:-1]
    if is_blanks(lhs):
        return ExprStmt(rhs, pos=a.pos, end=a.end, line=a.line, dirty=True)
    a.lhs = lhs
    a.rhs = [rhs]
    a.dirty = True
    return a


def rewrite_candidate(m: Match, block: Block | None = None, index: int = -1) -> None:
    """Collapse the try candidate m, whose if statement is block.stmts[index].

    When the assignment precedes the if statement, it is replaced by its
    rewritten form and the if statement's slot is tombstoned; the caller
    compacts the block. When the assignment is the if statement's
    initializer only the initializer is replaced and no block is needed.
    """
    if not m.accepted or m.assign is None:
        raise RewriteError(f"line {m.stmt.line}: not a try candidate")
    stmt = m.stmt
    if m.from_init:
        if stmt.init is not m.assign:
            raise RewriteError(f"line {stmt.line}: initializer does not match candidate")
        stmt.init = rewrite_assign(m.assign, stmt.end)
        return

    if block is None or index < 1 or block.stmts[index] is not stmt:
        raise RewriteError(f"line {stmt.line}: if statement is not at index {index}")
    if block.stmts[index - 1] is not m.assign:
        raise RewriteError(f"line {stmt.line}: assignment does not precede if statement")
    new = rewrite_assign(m.assign, stmt.end)
    # the rewritten statement now stands in for both source statements
    new.end = stmt.end
    block.stmts[index - 1] = new
    block.tombstone(index)
