"""Go syntax tree node model.

A closed set of dataclass variants covering the Go declarations, statements
and expressions the walker and the structural comparator care about.
Every node carries source metadata (byte span, line, dirty flag) as
keyword-only fields; metadata never takes part in matching or equality.
Dataclass ``__eq__`` is disabled so that nodes compare by identity;
structural equality lives in ``gotry.detectors.equal``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Iterator, Optional

_META = ("pos", "end", "line", "dirty")


@dataclass(eq=False)
class Node:
    pos: int = field(default=-1, kw_only=True, repr=False)
    end: int = field(default=-1, kw_only=True, repr=False)
    line: int = field(default=0, kw_only=True, repr=False)
    # set on nodes created or changed by a rewrite
    dirty: bool = field(default=False, kw_only=True, repr=False)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of node in field order."""
    for f in fields(node):
        if f.name in _META:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


# -- Expressions --

class LitKind(enum.Enum):
    INT = "INT"
    FLOAT = "FLOAT"
    IMAG = "IMAG"
    CHAR = "CHAR"
    STRING = "STRING"


class ChanDir(enum.Enum):
    BOTH = "chan"
    SEND = "chan<-"
    RECV = "<-chan"


@dataclass(eq=False)
class Ident(Node):
    name: str = ""


@dataclass(eq=False)
class BasicLit(Node):
    kind: LitKind = LitKind.INT
    value: str = ""


@dataclass(eq=False)
class CompositeLit(Node):
    type: Optional[Node] = None
    elts: list = field(default_factory=list)
    incomplete: bool = False


@dataclass(eq=False)
class FuncLit(Node):
    type: Optional["FuncType"] = None
    body: Optional["Block"] = None


@dataclass(eq=False)
class ParenExpr(Node):
    x: Optional[Node] = None


@dataclass(eq=False)
class SelectorExpr(Node):
    x: Optional[Node] = None
    sel: Optional[Ident] = None


@dataclass(eq=False)
class IndexExpr(Node):
    """x[i] or, for generic instantiation, x[T1, T2]."""
    x: Optional[Node] = None
    indices: list = field(default_factory=list)


@dataclass(eq=False)
class SliceExpr(Node):
    x: Optional[Node] = None
    low: Optional[Node] = None
    high: Optional[Node] = None
    max: Optional[Node] = None
    slice3: bool = False


@dataclass(eq=False)
class TypeAssertExpr(Node):
    x: Optional[Node] = None
    type: Optional[Node] = None  # None for x.(type)


@dataclass(eq=False)
class CallExpr(Node):
    fun: Optional[Node] = None
    args: list = field(default_factory=list)
    ellipsis: bool = False


@dataclass(eq=False)
class StarExpr(Node):
    x: Optional[Node] = None


@dataclass(eq=False)
class UnaryExpr(Node):
    op: str = ""
    x: Optional[Node] = None


@dataclass(eq=False)
class BinaryExpr(Node):
    x: Optional[Node] = None
    op: str = ""
    y: Optional[Node] = None


@dataclass(eq=False)
class KeyValueExpr(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None


@dataclass(eq=False)
class EllipsisExpr(Node):
    elt: Optional[Node] = None


@dataclass(eq=False)
class Field(Node):
    names: list = field(default_factory=list)
    type: Optional[Node] = None
    tag: Optional[BasicLit] = None


@dataclass(eq=False)
class FieldList(Node):
    fields: list = field(default_factory=list)


@dataclass(eq=False)
class ArrayType(Node):
    len: Optional[Node] = None  # None for slices
    elt: Optional[Node] = None


@dataclass(eq=False)
class StructType(Node):
    fields: Optional[FieldList] = None
    incomplete: bool = False


@dataclass(eq=False)
class FuncType(Node):
    params: Optional[FieldList] = None
    results: Optional[FieldList] = None


@dataclass(eq=False)
class InterfaceType(Node):
    methods: Optional[FieldList] = None
    incomplete: bool = False


@dataclass(eq=False)
class MapType(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None


@dataclass(eq=False)
class ChanType(Node):
    dir: ChanDir = ChanDir.BOTH
    value: Optional[Node] = None


@dataclass(eq=False)
class BadExpr(Node):
    """An expression of a kind the model does not represent."""
    kind: str = ""


# -- Statements --

@dataclass(eq=False)
class Block(Node):
    stmts: list = field(default_factory=list)

    def tombstone(self, index: int) -> None:
        """Mark slot index as removed; call compact() once iteration is done."""
        self.stmts[index] = None

    def compact(self) -> bool:
        """Drop tombstoned slots, keeping survivor order. Returns True if any were dropped."""
        survivors = [s for s in self.stmts if s is not None]
        dropped = len(survivors) != len(self.stmts)
        self.stmts = survivors
        return dropped


@dataclass(eq=False)
class ExprStmt(Node):
    x: Optional[Node] = None


@dataclass(eq=False)
class AssignStmt(Node):
    lhs: list = field(default_factory=list)
    tok: str = "="
    rhs: list = field(default_factory=list)


@dataclass(eq=False)
class ReturnStmt(Node):
    results: list = field(default_factory=list)


@dataclass(eq=False)
class IfStmt(Node):
    init: Optional[Node] = None
    cond: Optional[Node] = None
    body: Optional[Block] = None
    else_: Optional[Node] = None  # Block or IfStmt


@dataclass(eq=False)
class ForStmt(Node):
    init: Optional[Node] = None
    cond: Optional[Node] = None
    post: Optional[Node] = None
    body: Optional[Block] = None


@dataclass(eq=False)
class RangeStmt(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None
    tok: str = ""
    x: Optional[Node] = None
    body: Optional[Block] = None


@dataclass(eq=False)
class CaseClause(Node):
    exprs: list = field(default_factory=list)  # empty for default
    body: Optional[Block] = None


@dataclass(eq=False)
class CommClause(Node):
    comm: Optional[Node] = None  # None for default
    body: Optional[Block] = None


@dataclass(eq=False)
class SwitchStmt(Node):
    init: Optional[Node] = None
    tag: Optional[Node] = None
    body: Optional[Block] = None  # CaseClause statements


@dataclass(eq=False)
class TypeSwitchStmt(Node):
    init: Optional[Node] = None
    assign: Optional[Node] = None  # x := y.(type) or y.(type)
    body: Optional[Block] = None


@dataclass(eq=False)
class SelectStmt(Node):
    body: Optional[Block] = None  # CommClause statements


@dataclass(eq=False)
class LabeledStmt(Node):
    label: Optional[Ident] = None
    stmt: Optional[Node] = None


@dataclass(eq=False)
class IncDecStmt(Node):
    x: Optional[Node] = None
    tok: str = "++"


@dataclass(eq=False)
class SendStmt(Node):
    chan: Optional[Node] = None
    value: Optional[Node] = None


@dataclass(eq=False)
class GoStmt(Node):
    call: Optional[Node] = None


@dataclass(eq=False)
class DeferStmt(Node):
    call: Optional[Node] = None


@dataclass(eq=False)
class BranchStmt(Node):
    tok: str = ""  # break, continue, goto, fallthrough
    label: Optional[Ident] = None


@dataclass(eq=False)
class DeclStmt(Node):
    kind: str = ""  # var, const, type


@dataclass(eq=False)
class EmptyStmt(Node):
    pass


@dataclass(eq=False)
class BadStmt(Node):
    kind: str = ""


# -- Declarations --

@dataclass(eq=False)
class FuncDecl(Node):
    name: Optional[Ident] = None
    recv: Optional[FieldList] = None
    type: Optional[FuncType] = None
    body: Optional[Block] = None  # None for declarations without a body


@dataclass(eq=False)
class GenDecl(Node):
    kind: str = ""  # import, var, const, type


@dataclass(eq=False)
class File(Node):
    filename: str = ""
    source: bytes = b""
    package: str = ""
    decls: list = field(default_factory=list)


BLANK = "_"


def is_name(x: Optional[Node], name: str) -> bool:
    """Report whether x is an identifier with the given name."""
    return isinstance(x, Ident) and x.name == name


def is_blanks(exprs: list) -> bool:
    """Report whether exprs is empty or holds only blank identifiers."""
    return all(is_name(x, BLANK) for x in exprs)
