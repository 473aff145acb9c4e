"""Tree walker: finds (and optionally rewrites) try candidates in a file."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .config import Config
from .detectors.idiom import DEFAULT_ERR_NAME, Match, has_error_result, match_if
from .detectors.shared import SharedTrailing
from .fixers.try_rewrite import rewrite_candidate
from .nodes import (Block, CaseClause, CommClause, File, ForStmt, FuncDecl,
                    IfStmt, LabeledStmt, Node, RangeStmt, SelectStmt,
                    SwitchStmt, TypeSwitchStmt)
from .stats import Kind, Position, Stats


@dataclass
class _FuncState:
    """State of the function declaration being walked."""
    modified: bool = False
    shared: SharedTrailing = field(default_factory=SharedTrailing)


class Walker:
    """Walks the functions of one file, counting into stats.

    Only functions whose last result is the configured error type are
    searched; function literals are never entered.
    """

    def __init__(self, file: File, config: Config, stats: Stats):
        self.file = file
        self.config = config
        self.stats = stats
        self._fn: Optional[_FuncState] = None

    def _count(self, kind: Kind, node: Node) -> None:
        self.stats.count(kind, Position(self.file.filename, node.line))

    def walk(self) -> bool:
        """Walk every function declaration; return True if the tree was modified."""
        modified = False
        for decl in self.file.decls:
            if isinstance(decl, FuncDecl) and self.walk_func(decl):
                modified = True
        return modified

    def walk_func(self, decl: FuncDecl) -> bool:
        self._count(Kind.FUNC, decl)
        if decl.body is None:
            return False
        if not has_error_result(decl.type, self.config.error_type):
            return False
        self._count(Kind.FUNC_ERROR, decl)

        self._fn = _FuncState()
        try:
            self.walk_block(decl.body)
            for x in self._fn.shared.shared():
                self._count(Kind.SHARED_RETURN_EXPR, x)
            return self._fn.modified
        finally:
            self._fn = None

    def walk_block(self, block: Block | None) -> None:
        if block is None:
            return
        prev: Optional[Node] = None
        for i, s in enumerate(block.stmts):
            self._count(Kind.STMT, s)
            if isinstance(s, IfStmt):
                self.walk_if(s, prev, block, i)
            else:
                self._walk_nested(s)
            prev = s
        block.compact()

    def _walk_nested(self, s: Node) -> None:
        """Recurse into the blocks of a block-bearing statement."""
        if isinstance(s, Block):
            self.walk_block(s)
        elif isinstance(s, (ForStmt, RangeStmt, SelectStmt, SwitchStmt,
                            TypeSwitchStmt, CaseClause, CommClause)):
            self.walk_block(s.body)
        elif isinstance(s, LabeledStmt) and s.stmt is not None:
            # the labeled statement has no predecessor of its own
            self._count(Kind.STMT, s.stmt)
            if isinstance(s.stmt, IfStmt):
                self.walk_if(s.stmt, None, None, -1)
            else:
                self._walk_nested(s.stmt)

    def _walk_if_blocks(self, s: IfStmt) -> None:
        self.walk_block(s.body)
        if isinstance(s.else_, Block):
            self.walk_block(s.else_)
        elif isinstance(s.else_, IfStmt):
            self._count(Kind.STMT, s.else_)
            self.walk_if(s.else_, None, None, -1)

    def walk_if(self, s: IfStmt, prev: Optional[Node], block: Optional[Block],
                index: int) -> None:
        """Walk the branches of s, then classify s itself.

        block and index locate s for rewriting; an else-if or a labeled if
        has no block of its own and can only match through its initializer.
        """
        self._count(Kind.IF, s)
        self._walk_if_blocks(s)

        m = match_if(s, prev, self.config.err_name)
        self._classify(m)
        if m.accepted and self.config.rewrite:
            rewrite_candidate(m, block, index)
            self._fn.modified = True

    def _classify(self, m: Match) -> None:
        if not m.is_err_test:
            return
        s = m.stmt
        self._count(Kind.IF_ERR, s)
        if m.errname != DEFAULT_ERR_NAME:
            self._count(Kind.NON_ERR_NAME, s)
        if m.reason is Kind.TRY_CAND:
            self._count(Kind.TRY_CAND, s if m.from_init else m.assign)
        elif m.reason is Kind.HAS_ELSE:
            self._count(Kind.HAS_ELSE, s.else_)
        elif m.reason in (Kind.SINGLE_STMT, Kind.COMPLEX_BLOCK):
            self._count(m.reason, s.body)
        elif m.reason is Kind.RETURN_EXPR:
            self._count(Kind.RETURN_EXPR, m.ret)
        self._fn.shared.observe(m)


def walk(file: File, config: Config, stats: Stats) -> bool:
    """Walk file, counting into stats; return True if the tree was modified."""
    return Walker(file, config, stats).walk()
