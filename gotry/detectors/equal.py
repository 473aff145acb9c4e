"""Structural equality of Go expressions.

``equal`` reports whether two expression trees describe the same Go
expression, ignoring source positions and comments. It is conservative:
any node kind it does not know how to compare, function literals included,
is reported as unequal. Literals are compared by kind and exact spelling,
so ``0x10`` and ``16`` differ.
"""
from __future__ import annotations

from typing import Callable

from ..nodes import (ArrayType, BasicLit, CallExpr, ChanType, CompositeLit,
                     EllipsisExpr, FieldList, FuncType, Ident, IndexExpr,
                     InterfaceType, KeyValueExpr, MapType, Node, ParenExpr,
                     SelectorExpr, SliceExpr, StarExpr, StructType,
                     TypeAssertExpr, UnaryExpr, BinaryExpr)


def equal(x: Node | None, y: Node | None) -> bool:
    """Report whether x and y describe the same Go expression."""
    if x is None or y is None:
        return x is None and y is None
    if type(x) is not type(y):
        return False
    cmp = _EQUAL_BY_TYPE.get(type(x))
    if cmp is None:
        return False
    return cmp(x, y)


def equal_list(xs: list, ys: list) -> bool:
    if len(xs) != len(ys):
        return False
    return all(equal(x, y) for x, y in zip(xs, ys))


def equal_idents(xs: list, ys: list) -> bool:
    if len(xs) != len(ys):
        return False
    return all(x.name == y.name for x, y in zip(xs, ys))


def equal_fields(x: FieldList | None, y: FieldList | None) -> bool:
    if x is None or y is None:
        return x is None and y is None
    if len(x.fields) != len(y.fields):
        return False
    for fx, fy in zip(x.fields, y.fields):
        if not (equal_idents(fx.names, fy.names) and equal(fx.type, fy.type)
                and equal(fx.tag, fy.tag)):
            return False
    return True


# -- Per-kind comparators (both arguments have the same type) --

_EQUAL_BY_TYPE: dict[type, Callable[[Node, Node], bool]] = {
    Ident: lambda x, y: x.name == y.name,
    BasicLit: lambda x, y: x.kind is y.kind and x.value == y.value,
    EllipsisExpr: lambda x, y: equal(x.elt, y.elt),
    CompositeLit: lambda x, y: (not x.incomplete and not y.incomplete
                                and equal(x.type, y.type)
                                and equal_list(x.elts, y.elts)),
    ParenExpr: lambda x, y: equal(x.x, y.x),
    SelectorExpr: lambda x, y: equal(x.x, y.x) and equal(x.sel, y.sel),
    IndexExpr: lambda x, y: equal(x.x, y.x) and equal_list(x.indices, y.indices),
    SliceExpr: lambda x, y: (equal(x.x, y.x) and equal(x.low, y.low)
                             and equal(x.high, y.high) and equal(x.max, y.max)
                             and x.slice3 == y.slice3),
    TypeAssertExpr: lambda x, y: equal(x.x, y.x) and equal(x.type, y.type),
    CallExpr: lambda x, y: (equal(x.fun, y.fun) and equal_list(x.args, y.args)
                            and x.ellipsis == y.ellipsis),
    StarExpr: lambda x, y: equal(x.x, y.x),
    UnaryExpr: lambda x, y: x.op == y.op and equal(x.x, y.x),
    BinaryExpr: lambda x, y: equal(x.x, y.x) and x.op == y.op and equal(x.y, y.y),
    KeyValueExpr: lambda x, y: equal(x.key, y.key) and equal(x.value, y.value),
    ArrayType: lambda x, y: equal(x.len, y.len) and equal(x.elt, y.elt),
    StructType: lambda x, y: (not x.incomplete and not y.incomplete
                              and equal_fields(x.fields, y.fields)),
    FuncType: lambda x, y: (equal_fields(x.params, y.params)
                            and equal_fields(x.results, y.results)),
    InterfaceType: lambda x, y: (not x.incomplete and not y.incomplete
                                 and equal_fields(x.methods, y.methods)),
    MapType: lambda x, y: equal(x.key, y.key) and equal(x.value, y.value),
    ChanType: lambda x, y: x.dir is y.dir and equal(x.value, y.value),
}
