"""Test collapsing try candidates and rendering the result."""
import textwrap

import pytest

from gotry.config import Config
from gotry.detectors.idiom import match_if
from gotry.errors import RewriteError
from gotry.fixers.try_rewrite import rewrite_candidate
from gotry.parser import parse_source
from gotry.printer import render
from gotry.stats import Stats
from gotry.walker import walk


def _rewrite(src: str) -> str:
    tree = parse_source(textwrap.dedent(src), "x.go")
    walk(tree, Config(rewrite=True), Stats())
    return render(tree).decode()


class TestRewrite:
    def test_separate_statement_form(self):
        out = _rewrite("""\
            package p

            func f() (int, error) {
            \tv, err := g()
            \tif err != nil {
            \t\treturn 0, err
            \t}
            \treturn v, nil
            }
        """)
        assert out == textwrap.dedent("""\
            package p

            func f() (int, error) {
            \tv := try(g())
            \treturn v, nil
            }
        """)

    def test_plain_assignment(self):
        out = _rewrite("""\
            package p

            func f() (n int, err error) {
            \tn, err = g(1, "x")
            \tif err != nil {
            \t\treturn
            \t}
            \treturn n, nil
            }
        """)
        assert "\tn = try(g(1, \"x\"))\n\treturn n, nil\n" in out
        assert "if err" not in out

    def test_only_error_target(self):
        out = _rewrite("""\
            package p

            func f() error {
            \terr := g()
            \tif err != nil {
            \t\treturn err
            \t}
            \treturn nil
            }
        """)
        assert "\ttry(g())\n\treturn nil\n" in out

    def test_blank_targets(self):
        out = _rewrite("""\
            package p

            func f() error {
            \t_, _, err := g()
            \tif err != nil {
            \t\treturn err
            \t}
            \treturn nil
            }
        """)
        assert "\ttry(g())\n" in out
        assert "_" not in out

    def test_initializer_form_keeps_if(self):
        out = _rewrite("""\
            package p

            func f() error {
            \tif v, myErr := g(); myErr != nil {
            \t\treturn myErr
            \t}
            \treturn nil
            }
        """)
        assert "\tif v := try(g()); myErr != nil {\n\t\treturn myErr\n\t}\n" in out

    def test_several_candidates_in_one_block(self):
        out = _rewrite("""\
            package p

            func f() (int, error) {
            \ta, err := g()
            \tif err != nil {
            \t\treturn 0, err
            \t}
            \tb, err := h(a)
            \tif err != nil {
            \t\treturn 0, err
            \t}
            \treturn a + b, nil
            }
        """)
        assert out == textwrap.dedent("""\
            package p

            func f() (int, error) {
            \ta := try(g())
            \tb := try(h(a))
            \treturn a + b, nil
            }
        """)

    def test_untouched_code_keeps_formatting(self):
        src = textwrap.dedent("""\
            package p

            // f does things.
            func f() (int, error) {
            \tx :=   1 // odd spacing
            \tv, err := g(x)
            \tif err != nil {
            \t\treturn 0, err
            \t}
            \treturn v, nil
            }

            func h() int { return 2 }
        """)
        out = _rewrite(src)
        assert "// f does things.\n" in out
        assert "\tx :=   1 // odd spacing\n" in out
        assert "func h() int { return 2 }\n" in out

    def test_rejected_matches_are_left_alone(self):
        src = textwrap.dedent("""\
            package p

            func f() (int, error) {
            \tv, err := g()
            \tif err != nil {
            \t\treturn 0, wrap(err)
            \t}
            \treturn v, nil
            }
        """)
        assert _rewrite(src) == src


class TestRewriteCandidate:
    def test_rejects_unaccepted_match(self):
        tree = parse_source(textwrap.dedent("""\
            package p

            func f() error {
            \terr := g()
            \tif err != nil {
            \t\treturn wrap(err)
            \t}
            \treturn nil
            }
        """))
        block = tree.decls[0].body
        m = match_if(block.stmts[1], block.stmts[0])
        with pytest.raises(RewriteError):
            rewrite_candidate(m, block, 1)

    def test_tombstones_until_compacted(self):
        tree = parse_source(textwrap.dedent("""\
            package p

            func f() error {
            \terr := g()
            \tif err != nil {
            \t\treturn err
            \t}
            \treturn nil
            }
        """))
        block = tree.decls[0].body
        m = match_if(block.stmts[1], block.stmts[0])
        rewrite_candidate(m, block, 1)
        assert len(block.stmts) == 3
        assert block.stmts[1] is None
        assert block.compact()
        assert len(block.stmts) == 2

    def test_wrong_index(self):
        tree = parse_source(textwrap.dedent("""\
            package p

            func f() error {
            \terr := g()
            \tif err != nil {
            \t\treturn err
            \t}
            \treturn nil
            }
        """))
        block = tree.decls[0].body
        m = match_if(block.stmts[1], block.stmts[0])
        with pytest.raises(RewriteError):
            rewrite_candidate(m, block, 2)
