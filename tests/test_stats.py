"""Test the counters and their reports."""
from gotry.stats import KIND_INFO, Kind, Position, Stats


def _pos(line, filename="a.go"):
    return Position(filename, line)


class TestStats:
    def test_count_and_lookup(self):
        stats = Stats()
        stats.count(Kind.FUNC, _pos(1))
        stats.count(Kind.FUNC, _pos(9))
        assert stats[Kind.FUNC] == 2
        assert stats[Kind.IF] == 0

    def test_positions_only_for_reporting_kinds(self):
        stats = Stats()
        stats.count(Kind.STMT, _pos(3))
        stats.count(Kind.TRY_CAND, _pos(4))
        stats.count(Kind.TRY_CAND, _pos(2))
        assert Kind.STMT not in stats.positions
        assert stats.positions[Kind.TRY_CAND] == [_pos(4), _pos(2)]

    def test_every_kind_has_info(self):
        assert set(KIND_INFO) == set(Kind)
        assert not KIND_INFO[Kind.IF_ERR]["report"]
        assert KIND_INFO[Kind.SHARED_RETURN_EXPR]["parent"] is Kind.RETURN_EXPR

    def test_merge(self):
        a, b = Stats(), Stats()
        a.count(Kind.TRY_CAND, _pos(1, "a.go"))
        b.count(Kind.TRY_CAND, _pos(1, "b.go"))
        b.count(Kind.FUNC, _pos(1, "b.go"))
        a.merge(b)
        assert a[Kind.TRY_CAND] == 2
        assert a[Kind.FUNC] == 1
        assert [str(p) for p in a.positions[Kind.TRY_CAND]] == ["a.go:1", "b.go:1"]


class TestReports:
    def test_format_count_percentage(self):
        stats = Stats()
        for line in range(4):
            stats.count(Kind.FUNC, _pos(line))
        stats.count(Kind.FUNC_ERROR, _pos(1))
        assert stats.format_count(Kind.FUNC_ERROR) == (
            "      1 ( 25.0% of       4) func declarations returning an error")

    def test_format_count_empty_parent(self):
        assert Stats().format_count(Kind.IF) == (
            "      0 (100.0% of       0) if statements")

    def test_hint_for_reporting_kinds(self):
        stats = Stats()
        assert stats.format_count(Kind.TRY_CAND).endswith(
            "try candidates (use -l flag to list file positions)")
        assert stats.format_count(Kind.TRY_CAND, listed=True).endswith("try candidates")

    def test_format_counts_layout(self):
        lines = Stats().format_counts()
        assert lines[0] == "--- stats ---"
        assert len(lines) == len(Kind) + 2
        i = lines.index("--- non-try candidates ---")
        assert "different from" in lines[i - 1]
        assert lines[i + 1].endswith("expr }" + " (use -l flag to list file positions)")

    def test_format_positions(self):
        stats = Stats()
        stats.count(Kind.HAS_ELSE, _pos(7))
        stats.count(Kind.TRY_CAND, _pos(3, "b.go"))
        stats.count(Kind.TRY_CAND, _pos(5, "b.go"))
        assert stats.format_positions() == [
            "--- try candidates ---",
            "      1  b.go:3",
            "      2  b.go:5",
            "",
            "--- non-empty else branch; cannot use try ---",
            "      1  a.go:7",
            "",
        ]

    def test_format_positions_empty(self):
        assert Stats().format_positions() == []
