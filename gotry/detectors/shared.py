"""Per-function detection of a shared error-wrapping return expression.

A function whose error handlers all fail to be try candidates only because
each returns the same wrapped error (``return ..., wrap(err)``) could use a
single deferred wrapper instead. ``SharedTrailing`` collects those trailing
expressions while the function is walked.
"""
from __future__ import annotations

from typing import Optional

from ..nodes import Node, is_name
from .equal import equal
from .idiom import Match


class SharedTrailing:
    """Accumulates structurally equal trailing return expressions.

    ``exprs`` is [] until the first expression is seen and None once the
    function is known not to share one expression.
    """

    def __init__(self):
        self.exprs: Optional[list[Node]] = []

    @property
    def valid(self) -> bool:
        return self.exprs is not None

    def invalidate(self) -> None:
        self.exprs = None

    def add(self, x: Node) -> None:
        if self.exprs is None:
            return
        if self.exprs and not equal(self.exprs[0], x):
            self.invalidate()
            return
        self.exprs.append(x)

    def observe(self, m: Match) -> None:
        """Fold in an if statement whose handler is a single return."""
        if m.ret is None:
            return
        trailing = m.trailing
        if m.accepted:
            self.invalidate()
        elif trailing is not None and not is_name(trailing, m.errname):
            self.add(trailing)
        else:
            self.invalidate()

    def shared(self) -> list[Node]:
        """The shared expressions, or [] if fewer than two were captured."""
        if self.exprs is None or len(self.exprs) < 2:
            return []
        return list(self.exprs)
