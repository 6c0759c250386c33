import pytest

from pegtree.peg import FailureKind, PegSyntaxError, parse_rules, parse_peg_grammar
from pegtree.peg.errors import FurthestFailure, snippet_caret_at_pos


def _fail(src):
    with pytest.raises(PegSyntaxError) as info:
        parse_rules(src)
    return info.value


@pytest.mark.parametrize("src", ["", "   \t", "# just a comment\n\n"])
def test_empty_grammar(src):
    e = _fail(src)
    assert e.kind is FailureKind.EMPTY_GRAMMAR
    assert "identifier" in e.expected


def test_structural_failure_missing_arrow():
    e = _fail("A 'x'")
    assert e.kind is FailureKind.STRUCTURAL
    assert e.pos == 2
    assert (e.line, e.col) == (1, 3)
    assert e.expected == ("'<-'",)


def test_lexical_failure_bad_identifier():
    e = _fail("9 <- 'x'")
    assert e.kind is FailureKind.LEXICAL
    assert e.pos == 0
    assert e.expected == ("identifier",)


def test_trailing_input():
    src = "A <- 'x' extra-garbage"
    e = _fail(src)
    assert e.kind is FailureKind.TRAILING_INPUT
    assert e.pos == src.index("-garbage")
    assert "end of input" in e.expected
    assert "'/'" in e.expected


def test_error_position_on_later_line():
    e = _fail("A <- 'x'\nB <- 'y' )")
    assert e.kind is FailureKind.TRAILING_INPUT
    assert (e.line, e.col) == (2, 10)
    assert e.lineno == 2
    assert e.text == "B <- 'y' )"
    assert str(e).endswith("B <- 'y' )\n         ^")


def test_unterminated_literal_points_at_end():
    src = "A <- 'abc"
    e = _fail(src)
    assert e.pos == len(src)
    assert "closing '" in e.expected


def test_comment_at_end_of_input_is_reported():
    src = "A <- 'x' # no newline"
    e = _fail(src)
    assert e.kind is FailureKind.TRAILING_INPUT
    assert e.pos == len(src)
    assert e.expected == ("end of line",)


def test_bad_escape_is_reported():
    e = _fail(r"A <- '\q'")
    assert e.pos == 7
    assert "escape sequence" in e.expected


def test_lookahead_for_arrow_is_not_reported():
    e = _fail("A <- B %")
    assert "'<-'" not in e.expected


def test_is_a_syntax_error():
    with pytest.raises(SyntaxError, match=r"PEG trailing-input error at 1:10"):
        parse_peg_grammar("A <- 'x' }")


def test_furthest_failure_is_monotonic():
    f = FurthestFailure()
    f.record(3, "a")
    f.record(1, "b")
    f.record(3, "c")
    assert f.offset == 3
    assert f.expected == {"a", "c"}
    f.record(5, "d")
    assert f.expected == {"d"}


def test_snippet_caret():
    assert snippet_caret_at_pos("ab\ncd", 4) == "cd\n ^"
    assert snippet_caret_at_pos("ab\rcd", 0) == "ab\n^"
