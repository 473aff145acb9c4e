"""Test structural equality of Go expressions."""
import pytest

from gotry.detectors.equal import equal
from gotry.parser import parse_source


def _expr(src: str):
    """Parse src as the right-hand side of an assignment inside a function."""
    f = parse_source(f"package p\n\nfunc f() {{\n\t_ = {src}\n}}\n")
    return f.decls[0].body.stmts[0].rhs[0]


class TestEqual:
    @pytest.mark.parametrize("src", [
        "x",
        "wrap(err)",
        'fmt.Errorf("read %s: %w", name, err)',
        "a[i]",
        "s[1:n]",
        "s[1:n:m]",
        "x.(T)",
        "*p",
        "-x",
        "a + b*c",
        "(x)",
        "[]int{1, 2}",
        "map[string]int{\"a\": 1}",
        "T{Name: n}",
        "f(xs...)",
        "make(chan<- int)",
        "struct{ a int }{}",
        "[...]string{\"x\"}",
    ])
    def test_reflexive(self, src):
        assert equal(_expr(src), _expr(src))

    def test_positions_ignored(self):
        a = _expr("wrap(err)")
        b = _expr("wrap( err )")
        assert a.pos == b.pos
        assert a.end != b.end
        assert equal(a, b)

    def test_literal_spelling_matters(self):
        assert not equal(_expr("0x10"), _expr("16"))

    def test_literal_kind_matters(self):
        assert not equal(_expr("1"), _expr("1.0"))

    def test_different_calls(self):
        assert not equal(_expr("wrap(err)"), _expr("otherWrap(err)"))
        assert not equal(_expr("wrap(err)"), _expr("wrap(err, 1)"))
        assert not equal(_expr("f(xs)"), _expr("f(xs...)"))

    def test_different_operators(self):
        assert not equal(_expr("a + b"), _expr("a - b"))
        assert not equal(_expr("-x"), _expr("!x"))

    def test_different_kinds(self):
        assert not equal(_expr("x"), _expr("f(x)"))
        assert not equal(_expr("s[1:2]"), _expr("s[1:2:3]"))

    def test_function_literals_never_equal(self):
        src = "func() error { return nil }"
        assert not equal(_expr(src), _expr(src))

    def test_none(self):
        assert equal(None, None)
        assert not equal(None, _expr("x"))
        assert not equal(_expr("x"), None)

    def test_channel_direction(self):
        assert not equal(_expr("make(chan<- int)"), _expr("make(<-chan int)"))
        assert not equal(_expr("make(chan int)"), _expr("make(chan<- int)"))
