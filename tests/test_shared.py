"""Test detection of a trailing return expression shared by all handlers."""
import textwrap

from gotry.config import Config
from gotry.detectors.idiom import Match
from gotry.detectors.shared import SharedTrailing
from gotry.nodes import CallExpr, Ident, ReturnStmt
from gotry.parser import parse_source
from gotry.stats import Kind, Stats
from gotry.walker import walk


def _walk(src: str) -> Stats:
    stats = Stats()
    walk(parse_source(textwrap.dedent(src), "x.go"), Config(), stats)
    return stats


def _wrap(name="wrap"):
    return CallExpr(Ident(name), [Ident("err")])


class TestSharedTrailing:
    def test_needs_two(self):
        st = SharedTrailing()
        st.add(_wrap())
        assert st.valid
        assert st.shared() == []
        st.add(_wrap())
        assert len(st.shared()) == 2

    def test_mismatch_invalidates(self):
        st = SharedTrailing()
        st.add(_wrap())
        st.add(_wrap())
        st.add(_wrap("otherWrap"))
        assert not st.valid
        assert st.shared() == []
        st.add(_wrap())
        assert st.shared() == []

    def test_observe_ignores_non_returns(self):
        st = SharedTrailing()
        st.observe(Match(stmt=None, errname="err", reason=Kind.SINGLE_STMT))
        assert st.valid
        assert st.exprs == []

    def test_observe_plain_err_invalidates(self):
        st = SharedTrailing()
        ret = ReturnStmt([Ident("err")])
        st.observe(Match(stmt=None, errname="err", reason=Kind.HAS_ELSE, ret=ret))
        assert not st.valid

    def test_observe_naked_return_invalidates(self):
        st = SharedTrailing()
        st.observe(Match(stmt=None, errname="err", reason=Kind.HAS_ELSE, ret=ReturnStmt()))
        assert not st.valid


class TestSharedInFunctions:
    def test_two_equal_wrappers(self):
        stats = _walk("""\
            package p

            func f() (int, error) {
            \terr := a()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \terr = b()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \treturn 1, nil
            }
        """)
        assert stats[Kind.RETURN_EXPR] == 2
        assert stats[Kind.SHARED_RETURN_EXPR] == 2
        assert [str(p) for p in stats.positions[Kind.SHARED_RETURN_EXPR]] == ["x.go:6", "x.go:10"]

    def test_different_wrapper_invalidates(self):
        stats = _walk("""\
            package p

            func f() (int, error) {
            \terr := a()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \terr = b()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \terr = c()
            \tif err != nil {
            \t\treturn 0, otherWrap(err)
            \t}
            \treturn 1, nil
            }
        """)
        assert stats[Kind.RETURN_EXPR] == 3
        assert stats[Kind.SHARED_RETURN_EXPR] == 0

    def test_candidate_invalidates(self):
        stats = _walk("""\
            package p

            func f() (int, error) {
            \terr := a()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \terr = b()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \terr = c()
            \tif err != nil {
            \t\treturn 0, err
            \t}
            \treturn 1, nil
            }
        """)
        assert stats[Kind.TRY_CAND] == 1
        assert stats[Kind.SHARED_RETURN_EXPR] == 0

    def test_scoped_per_function(self):
        stats = _walk("""\
            package p

            func f() error {
            \tif err := a(); err != nil {
            \t\treturn wrap(err)
            \t}
            \treturn nil
            }

            func g() error {
            \tif err := b(); err != nil {
            \t\treturn wrap(err)
            \t}
            \treturn nil
            }
        """)
        assert stats[Kind.RETURN_EXPR] == 2
        assert stats[Kind.SHARED_RETURN_EXPR] == 0
