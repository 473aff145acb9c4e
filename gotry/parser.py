"""Go source parsing: tree-sitter concrete syntax tree to gotry.nodes."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import tree_sitter_go
from tree_sitter import Language, Parser

from . import nodes
from .errors import ParseError

GO_LANGUAGE = Language(tree_sitter_go.language())
_parser = Parser(GO_LANGUAGE)

_IDENT_TYPES = frozenset({
    "identifier", "field_identifier", "type_identifier", "package_identifier",
    "label_name", "blank_identifier", "nil", "true", "false", "iota",
})

_LIT_KINDS = {
    "int_literal": nodes.LitKind.INT,
    "float_literal": nodes.LitKind.FLOAT,
    "imaginary_literal": nodes.LitKind.IMAG,
    "rune_literal": nodes.LitKind.CHAR,
    "interpreted_string_literal": nodes.LitKind.STRING,
    "raw_string_literal": nodes.LitKind.STRING,
}

_DECL_KINDS = {
    "import_declaration": "import",
    "var_declaration": "var",
    "const_declaration": "const",
    "type_declaration": "type",
}


def _named(ts) -> list:
    """Named children of a tree-sitter node, without comments."""
    if ts is None:
        return []
    return [ch for ch in ts.named_children if ch.type != "comment"]


def _flat(ts) -> Iterator:
    """Like _named, but looks through statement_list wrappers."""
    for ch in _named(ts):
        if ch.type == "statement_list":
            yield from _named(ch)
        else:
            yield ch


def _token(ts, *choices: str) -> str:
    """First anonymous child of ts whose type is one of choices, or ''."""
    for ch in ts.children:
        if not ch.is_named and ch.type in choices:
            return ch.type
    return ""


def _first_error(ts):
    if ts.type == "ERROR" or ts.is_missing:
        return ts
    for ch in ts.children:
        if ch.has_error or ch.is_missing:
            found = _first_error(ch)
            if found is not None:
                return found
    return None


class _Converter:
    """Builds gotry.nodes from one tree-sitter tree, table driven per node type."""

    def __init__(self, source: bytes, filename: str):
        self.source = source
        self.filename = filename
        self._expr_dispatch: dict[str, Callable] = {
            "parenthesized_expression": self._paren,
            "parenthesized_type": self._paren,
            "selector_expression": self._selector,
            "qualified_type": self._qualified_type,
            "index_expression": self._index,
            "slice_expression": self._slice,
            "type_assertion_expression": self._type_assert,
            "type_conversion_expression": self._type_conversion,
            "type_instantiation_expression": self._type_instantiation,
            "generic_type": self._generic_type,
            "call_expression": self._call,
            "unary_expression": self._unary,
            "binary_expression": self._binary,
            "composite_literal": self._composite_lit,
            "literal_value": self._composite_lit,
            "func_literal": self._func_lit,
            "pointer_type": self._pointer_type,
            "array_type": self._array_type,
            "slice_type": self._array_type,
            "implicit_length_array_type": self._array_type,
            "map_type": self._map_type,
            "channel_type": self._chan_type,
            "function_type": self.func_type,
            "struct_type": self._struct_type,
            "interface_type": self._interface_type,
            "negated_type": self._negated_type,
            "type_elem": self._type_elem,
        }
        self._stmt_dispatch: dict[str, Callable] = {
            "block": self.block,
            "expression_statement": self._expr_stmt,
            "send_statement": self._send,
            "inc_statement": self._inc_dec,
            "dec_statement": self._inc_dec,
            "assignment_statement": self._assign,
            "short_var_declaration": self._assign,
            "receive_statement": self._receive,
            "return_statement": self._return,
            "go_statement": self._go,
            "defer_statement": self._defer,
            "if_statement": self._if,
            "for_statement": self._for,
            "expression_switch_statement": self._switch,
            "type_switch_statement": self._type_switch,
            "select_statement": self._select,
            "labeled_statement": self._labeled,
            "empty_labeled_statement": self._labeled,
            "break_statement": self._branch,
            "continue_statement": self._branch,
            "goto_statement": self._branch,
            "fallthrough_statement": self._branch,
            "var_declaration": self._decl_stmt,
            "const_declaration": self._decl_stmt,
            "type_declaration": self._decl_stmt,
            "empty_statement": self._empty,
        }

    # -- Helpers --

    def text(self, ts) -> str:
        return self.source[ts.start_byte:ts.end_byte].decode("utf-8", errors="replace")

    def meta(self, ts) -> dict:
        return {"pos": ts.start_byte, "end": ts.end_byte, "line": ts.start_point[0] + 1}

    def ident(self, ts) -> nodes.Ident:
        return nodes.Ident(self.text(ts), **self.meta(ts))

    def exprs(self, ts) -> list:
        """Convert an expression_list (or a single expression)."""
        if ts is None:
            return []
        if ts.type == "expression_list":
            return [self.expr(ch) for ch in _named(ts)]
        return [self.expr(ts)]

    def field(self, ts, name: str):
        return self.expr(ts.child_by_field_name(name))

    # -- File and declarations --

    def file(self, root) -> nodes.File:
        f = nodes.File(filename=self.filename, source=self.source,
                       pos=0, end=len(self.source), line=1)
        for ch in _named(root):
            if ch.type == "package_clause":
                pkg = _named(ch)
                f.package = self.text(pkg[0]) if pkg else ""
            elif ch.type in ("function_declaration", "method_declaration"):
                f.decls.append(self.func_decl(ch))
            else:
                f.decls.append(nodes.GenDecl(_DECL_KINDS.get(ch.type, ch.type), **self.meta(ch)))
        return f

    def func_decl(self, ts) -> nodes.FuncDecl:
        recv = ts.child_by_field_name("receiver")
        body = ts.child_by_field_name("body")
        return nodes.FuncDecl(
            name=self.ident(ts.child_by_field_name("name")),
            recv=self.field_list(recv) if recv is not None else None,
            type=self.func_type(ts),
            body=self.block(body) if body is not None else None,
            **self.meta(ts))

    def func_type(self, ts) -> nodes.FuncType:
        """Signature of a function declaration, literal, type or method element."""
        params = ts.child_by_field_name("parameters")
        return nodes.FuncType(
            params=self.field_list(params) if params is not None else nodes.FieldList(),
            results=self.results(ts.child_by_field_name("result")),
            **self.meta(ts))

    def results(self, ts) -> nodes.FieldList | None:
        if ts is None:
            return None
        if ts.type == "parameter_list":
            return self.field_list(ts)
        # single unnamed result type
        only = nodes.Field(type=self.expr(ts), **self.meta(ts))
        return nodes.FieldList([only], **self.meta(ts))

    def field_list(self, ts) -> nodes.FieldList:
        fl = nodes.FieldList(**self.meta(ts))
        for ch in _named(ts):
            names = [self.ident(x) for x in ch.children_by_field_name("name")]
            typ = self.field(ch, "type")
            if ch.type == "variadic_parameter_declaration":
                typ = nodes.EllipsisExpr(typ, **self.meta(ch))
            elif ch.type != "parameter_declaration":
                continue
            fl.fields.append(nodes.Field(names, typ, **self.meta(ch)))
        return fl

    # -- Expressions --

    def expr(self, ts) -> nodes.Node | None:
        if ts is None:
            return None
        if ts.type in _IDENT_TYPES:
            return self.ident(ts)
        kind = _LIT_KINDS.get(ts.type)
        if kind is not None:
            return nodes.BasicLit(kind, self.text(ts), **self.meta(ts))
        convert = self._expr_dispatch.get(ts.type)
        if convert is None:
            return nodes.BadExpr(ts.type, **self.meta(ts))
        return convert(ts)

    def _paren(self, ts):
        inner = _named(ts)
        return nodes.ParenExpr(self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _selector(self, ts):
        return nodes.SelectorExpr(self.field(ts, "operand"), self.field(ts, "field"),
                                  **self.meta(ts))

    def _qualified_type(self, ts):
        return nodes.SelectorExpr(self.field(ts, "package"), self.field(ts, "name"),
                                  **self.meta(ts))

    def _index(self, ts):
        return nodes.IndexExpr(self.field(ts, "operand"), [self.field(ts, "index")],
                               **self.meta(ts))

    def _slice(self, ts):
        capacity = ts.child_by_field_name("capacity")
        return nodes.SliceExpr(self.field(ts, "operand"), self.field(ts, "start"),
                               self.field(ts, "end"), self.expr(capacity),
                               slice3=capacity is not None, **self.meta(ts))

    def _type_assert(self, ts):
        return nodes.TypeAssertExpr(self.field(ts, "operand"), self.field(ts, "type"),
                                    **self.meta(ts))

    def _type_conversion(self, ts):
        # T(x) is a call as far as the model is concerned
        return nodes.CallExpr(self.field(ts, "type"), [self.field(ts, "operand")],
                              **self.meta(ts))

    def _type_instantiation(self, ts):
        typ = ts.child_by_field_name("type")
        args = [self.expr(ch) for ch in _named(ts) if typ is None or ch.id != typ.id]
        return nodes.IndexExpr(self.expr(typ), args, **self.meta(ts))

    def _generic_type(self, ts):
        targs = ts.child_by_field_name("type_arguments")
        return nodes.IndexExpr(self.field(ts, "type"),
                               [self.expr(ch) for ch in _named(targs)], **self.meta(ts))

    def _call(self, ts):
        fun = self.field(ts, "function")
        targs = ts.child_by_field_name("type_arguments")
        if targs is not None:
            fun = nodes.IndexExpr(fun, [self.expr(ch) for ch in _named(targs)],
                                  pos=fun.pos, end=targs.end_byte, line=fun.line)
        args, ellipsis = [], False
        for arg in _named(ts.child_by_field_name("arguments")):
            if arg.type == "variadic_argument":
                ellipsis = True
                inner = _named(arg)
                args.append(self.expr(inner[0]) if inner else None)
            else:
                args.append(self.expr(arg))
        return nodes.CallExpr(fun, args, ellipsis, **self.meta(ts))

    def _unary(self, ts):
        op = ts.child_by_field_name("operator").type
        x = self.field(ts, "operand")
        if op == "*":
            return nodes.StarExpr(x, **self.meta(ts))
        return nodes.UnaryExpr(op, x, **self.meta(ts))

    def _binary(self, ts):
        return nodes.BinaryExpr(self.field(ts, "left"), ts.child_by_field_name("operator").type,
                                self.field(ts, "right"), **self.meta(ts))

    def _composite_lit(self, ts):
        if ts.type == "literal_value":
            # elided type inside an outer composite literal
            return nodes.CompositeLit(None, self._elements(ts), **self.meta(ts))
        return nodes.CompositeLit(self.field(ts, "type"),
                                  self._elements(ts.child_by_field_name("body")),
                                  **self.meta(ts))

    def _elements(self, ts) -> list:
        elts = []
        for ch in _named(ts):
            if ch.type == "keyed_element":
                parts = _named(ch)
                key = ch.child_by_field_name("key")
                value = ch.child_by_field_name("value")
                if key is None:
                    key = parts[0]
                if value is None:
                    value = parts[-1]
                elts.append(nodes.KeyValueExpr(self._element(key), self._element(value),
                                               **self.meta(ch)))
            else:
                elts.append(self._element(ch))
        return elts

    def _element(self, ts):
        if ts.type == "literal_element":
            inner = _named(ts)
            return self.expr(inner[0]) if inner else nodes.BadExpr(ts.type, **self.meta(ts))
        return self.expr(ts)

    def _func_lit(self, ts):
        body = ts.child_by_field_name("body")
        return nodes.FuncLit(self.func_type(ts), self.block(body) if body is not None else None,
                             **self.meta(ts))

    def _pointer_type(self, ts):
        inner = _named(ts)
        return nodes.StarExpr(self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _array_type(self, ts):
        elt = self.field(ts, "element")
        if ts.type == "slice_type":
            length = None
        elif ts.type == "implicit_length_array_type":
            length = nodes.EllipsisExpr(None, **self.meta(ts))
        else:
            length = self.field(ts, "length")
        return nodes.ArrayType(length, elt, **self.meta(ts))

    def _map_type(self, ts):
        return nodes.MapType(self.field(ts, "key"), self.field(ts, "value"), **self.meta(ts))

    def _chan_type(self, ts):
        toks = [ch.type for ch in ts.children if not ch.is_named]
        if toks[:1] == ["<-"]:
            direction = nodes.ChanDir.RECV
        elif "<-" in toks:
            direction = nodes.ChanDir.SEND
        else:
            direction = nodes.ChanDir.BOTH
        return nodes.ChanType(direction, self.field(ts, "value"), **self.meta(ts))

    def _struct_type(self, ts):
        fl = nodes.FieldList(**self.meta(ts))
        for decls in _named(ts):
            if decls.type != "field_declaration_list":
                continue
            for fd in _named(decls):
                if fd.type != "field_declaration":
                    continue
                names = [self.ident(x) for x in fd.children_by_field_name("name")]
                typ = self.field(fd, "type")
                if not names and _token(fd, "*"):
                    typ = nodes.StarExpr(typ, **self.meta(fd))
                tag = fd.child_by_field_name("tag")
                fl.fields.append(nodes.Field(names, typ, self.expr(tag), **self.meta(fd)))
        return nodes.StructType(fl, **self.meta(ts))

    def _interface_type(self, ts):
        fl = nodes.FieldList(**self.meta(ts))
        for el in _named(ts):
            if el.type in ("method_elem", "method_spec"):
                name = self.ident(el.child_by_field_name("name"))
                fl.fields.append(nodes.Field([name], self.func_type(el), **self.meta(el)))
            else:
                fl.fields.append(nodes.Field([], self.expr(el), **self.meta(el)))
        return nodes.InterfaceType(fl, **self.meta(ts))

    def _negated_type(self, ts):
        inner = _named(ts)
        return nodes.UnaryExpr("~", self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _type_elem(self, ts):
        # a single type, or a union T1 | T2 | ...
        terms = [self.expr(ch) for ch in _named(ts)]
        if not terms:
            return nodes.BadExpr(ts.type, **self.meta(ts))
        x = terms[0]
        for y in terms[1:]:
            x = nodes.BinaryExpr(x, "|", y, **self.meta(ts))
        return x

    # -- Statements --

    def stmt(self, ts) -> nodes.Node:
        convert = self._stmt_dispatch.get(ts.type)
        if convert is None:
            return nodes.BadStmt(ts.type, **self.meta(ts))
        return convert(ts)

    def opt_stmt(self, ts) -> nodes.Node | None:
        return self.stmt(ts) if ts is not None else None

    def block(self, ts) -> nodes.Block:
        return nodes.Block([self.stmt(ch) for ch in _flat(ts)], **self.meta(ts))

    def _expr_stmt(self, ts):
        inner = _named(ts)
        return nodes.ExprStmt(self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _send(self, ts):
        return nodes.SendStmt(self.field(ts, "channel"), self.field(ts, "value"),
                              **self.meta(ts))

    def _inc_dec(self, ts):
        inner = _named(ts)
        tok = "++" if ts.type == "inc_statement" else "--"
        return nodes.IncDecStmt(self.expr(inner[0]) if inner else None, tok, **self.meta(ts))

    def _assign(self, ts):
        if ts.type == "short_var_declaration":
            tok = ":="
        else:
            tok = self.text(ts.child_by_field_name("operator"))
        return nodes.AssignStmt(self.exprs(ts.child_by_field_name("left")), tok,
                                self.exprs(ts.child_by_field_name("right")), **self.meta(ts))

    def _receive(self, ts):
        left = ts.child_by_field_name("left")
        right = self.field(ts, "right")
        if left is None:
            return nodes.ExprStmt(right, **self.meta(ts))
        return nodes.AssignStmt(self.exprs(left), _token(ts, "=", ":="), [right],
                                **self.meta(ts))

    def _return(self, ts):
        inner = _named(ts)
        return nodes.ReturnStmt(self.exprs(inner[0]) if inner else [], **self.meta(ts))

    def _go(self, ts):
        inner = _named(ts)
        return nodes.GoStmt(self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _defer(self, ts):
        inner = _named(ts)
        return nodes.DeferStmt(self.expr(inner[0]) if inner else None, **self.meta(ts))

    def _if(self, ts):
        alt = ts.child_by_field_name("alternative")
        if alt is None:
            else_ = None
        elif alt.type == "if_statement":
            else_ = self._if(alt)
        else:
            else_ = self.block(alt)
        return nodes.IfStmt(self.opt_stmt(ts.child_by_field_name("initializer")),
                            self.field(ts, "condition"),
                            self.block(ts.child_by_field_name("consequence")),
                            else_, **self.meta(ts))

    def _for(self, ts):
        body = ts.child_by_field_name("body")
        clause = next((ch for ch in _named(ts) if ch.id != body.id), None)
        meta = self.meta(ts)
        if clause is None:
            return nodes.ForStmt(body=self.block(body), **meta)
        if clause.type == "for_clause":
            return nodes.ForStmt(self.opt_stmt(clause.child_by_field_name("initializer")),
                                 self.field(clause, "condition"),
                                 self.opt_stmt(clause.child_by_field_name("update")),
                                 self.block(body), **meta)
        if clause.type == "range_clause":
            left = self.exprs(clause.child_by_field_name("left"))
            return nodes.RangeStmt(left[0] if left else None,
                                   left[1] if len(left) > 1 else None,
                                   _token(clause, "=", ":="), self.field(clause, "right"),
                                   self.block(body), **meta)
        return nodes.ForStmt(cond=self.expr(clause), body=self.block(body), **meta)

    def _clause_block(self, ts, skip: list) -> nodes.Block:
        """Statements of a case clause, skipping the clause's own header nodes."""
        skip_ids = {x.id for x in skip if x is not None}
        stmts = [self.stmt(ch) for ch in _flat(ts) if ch.id not in skip_ids]
        if stmts:
            return nodes.Block(stmts, pos=stmts[0].pos, end=stmts[-1].end, line=stmts[0].line)
        return nodes.Block(pos=ts.end_byte, end=ts.end_byte, line=ts.end_point[0] + 1)

    def _clauses_block(self, ts, convert: Callable) -> nodes.Block:
        """The braced clause list of a switch or select statement."""
        brace = next((ch for ch in ts.children if ch.type == "{"), ts)
        clauses = [convert(ch) for ch in _named(ts)
                   if ch.type.endswith("_case")]
        return nodes.Block(clauses, pos=brace.start_byte, end=ts.end_byte,
                           line=brace.start_point[0] + 1)

    def _case(self, ts):
        if ts.type == "type_case":
            header = ts.children_by_field_name("type")
        elif ts.type == "expression_case":
            header = [ts.child_by_field_name("value")]
        else:
            header = []
        exprs = []
        for h in header:
            exprs.extend(self.exprs(h))
        return nodes.CaseClause(exprs, self._clause_block(ts, header), **self.meta(ts))

    def _comm(self, ts):
        comm = ts.child_by_field_name("communication")
        return nodes.CommClause(self.opt_stmt(comm), self._clause_block(ts, [comm]),
                                **self.meta(ts))

    def _switch(self, ts):
        return nodes.SwitchStmt(self.opt_stmt(ts.child_by_field_name("initializer")),
                                self.field(ts, "value"),
                                self._clauses_block(ts, self._case), **self.meta(ts))

    def _type_switch(self, ts):
        value = ts.child_by_field_name("value")
        alias = ts.child_by_field_name("alias")
        guard = nodes.TypeAssertExpr(self.expr(value), None, **self.meta(value))
        if alias is not None:
            assign = nodes.AssignStmt(self.exprs(alias), ":=", [guard], **self.meta(alias))
        else:
            assign = nodes.ExprStmt(guard, **self.meta(value))
        return nodes.TypeSwitchStmt(self.opt_stmt(ts.child_by_field_name("initializer")),
                                    assign, self._clauses_block(ts, self._case),
                                    **self.meta(ts))

    def _select(self, ts):
        def convert(ch):
            return self._comm(ch) if ch.type == "communication_case" else self._case(ch)
        return nodes.SelectStmt(self._clauses_block(ts, convert), **self.meta(ts))

    def _labeled(self, ts):
        label = ts.child_by_field_name("label")
        if label is None:
            label = _named(ts)[0]
        inner = [ch for ch in _flat(ts) if ch.id != label.id]
        return nodes.LabeledStmt(self.ident(label), self.stmt(inner[0]) if inner else None,
                                 **self.meta(ts))

    def _branch(self, ts):
        tok = ts.type[:-len("_statement")]
        label = _named(ts)
        return nodes.BranchStmt(tok, self.ident(label[0]) if label else None, **self.meta(ts))

    def _decl_stmt(self, ts):
        return nodes.DeclStmt(_DECL_KINDS[ts.type], **self.meta(ts))

    def _empty(self, ts):
        return nodes.EmptyStmt(**self.meta(ts))


def parse_source(source: bytes | str, filename: str = "<input>") -> nodes.File:
    """Parse Go source into a File; raises ParseError on syntax errors."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = _parser.parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root) or root
        row, col = bad.start_point[0], bad.start_point[1]
        msg = f"missing {bad.type}" if bad.is_missing else "syntax error"
        raise ParseError(filename, row + 1, col + 1, msg)
    return _Converter(source, filename).file(root)


def parse_file(path: str | Path) -> nodes.File:
    """Read and parse a Go file. OSError propagates to the caller."""
    return parse_source(Path(path).read_bytes(), str(path))
