"""Recognition of the assign / if err != nil / return idiom.

Candidates look like this, where the vi are arbitrary targets (there may be
none), f() is any call and the return yields zero values followed by err:

    v1, ..., vn, err = f()      // or :=
    if err != nil {
        return ..., err
    }

or, with the assignment as the if statement's initializer:

    if v1, ..., vn, err := f(); err != nil {
        return ..., err
    }
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..nodes import (AssignStmt, BinaryExpr, CallExpr, FuncType, Ident,
                     IfStmt, Node, ReturnStmt, is_name)
from ..stats import Kind
from .zero import is_zero

DEFAULT_ERR_NAME = "err"


@dataclass
class Match:
    """Outcome of matching one if statement.

    ``reason`` is the bucket the if statement is classified under: TRY_CAND
    on success, a rejection bucket otherwise, or None when it is not an
    error test at all or its candidate is not a suitable assignment.
    """
    stmt: IfStmt
    reason: Optional[Kind] = None
    errname: Optional[str] = None
    assign: Optional[AssignStmt] = None
    from_init: bool = False
    ret: Optional[ReturnStmt] = None  # set once the handler is a single return

    @property
    def accepted(self) -> bool:
        return self.reason is Kind.TRY_CAND

    @property
    def is_err_test(self) -> bool:
        return self.errname is not None

    @property
    def trailing(self) -> Optional[Node]:
        """Last operand of the handler's return, None for a naked return."""
        if self.ret is None or not self.ret.results:
            return None
        return self.ret.results[-1]


def has_error_result(sig: FuncType | None, error_type: str = "error") -> bool:
    """Report whether sig has a final result whose type is named error_type."""
    if sig is None or sig.results is None or not sig.results.fields:
        return False
    return is_name(sig.results.fields[-1].type, error_type)


def bind_err_test(cond: Node | None, err_name: str = "") -> str | None:
    """Return the error variable name if cond is "<name> != nil", else None.

    With an empty err_name any identifier is accepted.
    """
    if not isinstance(cond, BinaryExpr) or cond.op != "!=":
        return None
    if not isinstance(cond.x, Ident) or not is_name(cond.y, "nil"):
        return None
    name = cond.x.name
    if err_name and name != err_name:
        return None
    return name


def is_err_return(ret: ReturnStmt, errname: str) -> bool:
    """Report whether ret is naked or returns zero values followed by errname."""
    if not ret.results:
        return True
    *head, last = ret.results
    return all(is_zero(x) for x in head) and is_name(last, errname)


def is_err_assign(s: Node | None, errname: str) -> bool:
    """Report whether s is "..., errname = f()" or "..., errname := f()"."""
    if not isinstance(s, AssignStmt) or s.tok not in ("=", ":="):
        return False
    return (len(s.lhs) > 0 and is_name(s.lhs[-1], errname)
            and len(s.rhs) == 1 and isinstance(s.rhs[0], CallExpr))


def match_if(stmt: IfStmt, prev: Node | None, err_name: str = "") -> Match:
    """Classify stmt as a try candidate or record why it is not one.

    prev is the statement preceding stmt in its block (None if there is
    none); it is only consulted when stmt has no initializer.
    """
    m = Match(stmt)
    m.errname = bind_err_test(stmt.cond, err_name)
    if m.errname is None:
        return m

    body = stmt.body.stmts if stmt.body is not None else []
    if len(body) != 1:
        m.reason = Kind.COMPLEX_BLOCK
        return m
    if not isinstance(body[0], ReturnStmt):
        m.reason = Kind.SINGLE_STMT
        return m
    m.ret = body[0]

    if not is_err_return(m.ret, m.errname):
        m.reason = Kind.RETURN_EXPR
        return m
    if stmt.else_ is not None:
        m.reason = Kind.HAS_ELSE
        return m

    m.from_init = stmt.init is not None
    candidate = stmt.init if m.from_init else prev
    if not is_err_assign(candidate, m.errname):
        return m
    m.assign = candidate
    m.reason = Kind.TRY_CAND
    return m
