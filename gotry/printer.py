"""Render a (possibly rewritten) File back to Go source.

Untouched subtrees are copied verbatim from the original source, so
formatting and comments survive. Only nodes marked dirty by a rewrite are
printed from the tree, and the text between dirty regions is taken from
the original source using node spans.
"""
from __future__ import annotations

from .nodes import AssignStmt, CallExpr, ExprStmt, File, Ident, Node, iter_children


class _Printer:
    def __init__(self, file: File):
        self.source = file.source
        self._dirty: dict[int, bool] = {}

    def has_dirty(self, node: Node) -> bool:
        key = id(node)
        if key not in self._dirty:
            self._dirty[key] = node.dirty or any(self.has_dirty(ch) for ch in iter_children(node))
        return self._dirty[key]

    def render(self, node: Node) -> bytes:
        if node.dirty:
            return self.print_dirty(node)
        if not self.has_dirty(node):
            return self.source[node.pos:node.end]
        out = []
        cur = node.pos
        for ch in sorted((ch for ch in iter_children(node) if self.has_dirty(ch)),
                         key=lambda ch: ch.pos):
            out.append(self.source[cur:ch.pos])
            out.append(self.render(ch))
            cur = ch.end
        out.append(self.source[cur:node.end])
        return b"".join(out)

    def print_dirty(self, node: Node) -> bytes:
        if isinstance(node, AssignStmt):
            lhs = b", ".join(self.render(x) for x in node.lhs)
            rhs = b", ".join(self.render(x) for x in node.rhs)
            return lhs + b" " + node.tok.encode() + b" " + rhs
        if isinstance(node, ExprStmt):
            return self.render(node.x)
        if isinstance(node, CallExpr):
            args = b", ".join(self.render(x) for x in node.args)
            return self.render(node.fun) + b"(" + args + b")"
        if isinstance(node, Ident):
            return node.name.encode()
        raise TypeError(f"cannot print rewritten {type(node).__name__}")


def render(file: File) -> bytes:
    """Source text of file with all rewrites applied."""
    return _Printer(file).render(file)
