import pytest

from pegtree.peg.ast import Range, Ranges
from pegtree.peg.lexical import LexicalParser


def _lx(src):
    return LexicalParser(src)


# ---- spacing / comments ----

def test_spacing_skips_blanks_and_comments():
    lx = _lx(" \t# note\r\n\n  # more\rX")
    assert lx.spacing() == " \t# note\r\n\n  # more\r"
    assert lx.cur.peek() == "X"


def test_spacing_consumes_nothing_and_succeeds():
    lx = _lx("X")
    assert lx.spacing() == ""
    assert lx.cur.position == 0


def test_comment_needs_line_end():
    lx = _lx("# runs to end of input")
    assert lx.comment() is None
    assert lx.cur.position == 0
    # spacing stops in front of it
    assert lx.spacing() == ""
    assert lx.failure.expected == {"end of line"}


def test_end_of_line_forms():
    assert _lx("\r\nX").end_of_line() == "\r\n"
    assert _lx("\nX").end_of_line() == "\n"
    assert _lx("\rX").end_of_line() == "\r"
    assert _lx("X").end_of_line() is None


# ---- identifiers / tokens ----

def test_identifier_with_trailing_spacing():
    lx = _lx("_rule9  # c\nnext")
    assert lx.identifier() == "_rule9"
    assert lx.cur.rest() == "next"


@pytest.mark.parametrize("src", ["9abc", "-x", "", "é"])
def test_identifier_rejects_bad_start(src):
    lx = _lx(src)
    assert lx.identifier() is None
    assert lx.cur.position == 0


def test_identifier_is_ascii_only():
    lx = _lx("abé")
    assert lx.identifier() == "ab"
    assert lx.cur.rest() == "é"


def test_token_and_spacing():
    lx = _lx("<-   x")
    assert lx.token("<-") == "<-"
    assert lx.cur.rest() == "x"
    assert lx.token("/") is None
    assert lx.cur.rest() == "x"


def test_token_at_end_of_input():
    lx = _lx("<-")
    assert lx.token("<-") == "<-"
    assert lx.cur.at_end


# ---- chars and escapes ----

@pytest.mark.parametrize("src,expected", [
    (r"\n", "\n"),
    (r"\r", "\r"),
    (r"\t", "\t"),
    (r"\'", "'"),
    (r'\"', '"'),
    (r"\[", "["),
    (r"\]", "]"),
    (r"\\", "\\"),
    (r"\101", "A"),
    (r"\277", chr(0o277)),
    (r"\12", "\n"),
    (r"\7", "\x07"),
    ("x", "x"),
])
def test_char_decoding(src, expected):
    lx = _lx(src)
    assert lx.char() == expected
    assert lx.cur.at_end


def test_three_digit_octal_needs_leading_0_to_2():
    # \377 is not a 3-digit escape; it decodes as \37 followed by '7'
    lx = _lx(r"\377")
    assert lx.char() == chr(0o37)
    assert lx.cur.rest() == "7"


def test_octal_stops_at_non_octal_digit():
    lx = _lx(r"\18")
    assert lx.char() == "\x01"
    assert lx.cur.rest() == "8"


@pytest.mark.parametrize("src", [r"\x41", r"\8", "\\"])
def test_bad_escape_is_a_failure(src):
    lx = _lx(src)
    assert lx.char() is None
    assert lx.cur.position == 0


def test_char_at_end_of_input():
    assert _lx("").char() is None


# ---- literals ----

def test_single_and_double_quoted_literals():
    assert _lx("'abc' ").literal() == "abc"
    assert _lx('"a\'b"').literal() == "a'b"
    assert _lx("''").literal() == ""


def test_literal_escapes_closing_quote():
    lx = _lx(r"'it\'s' rest")
    assert lx.literal() == "it's"
    assert lx.cur.rest() == "rest"


def test_literal_may_span_lines():
    assert _lx("'a\nb'").literal() == "a\nb"


@pytest.mark.parametrize("src", ["'abc", "\"abc'", r"'\q'", "abc"])
def test_literal_failures_restore(src):
    lx = _lx(src)
    assert lx.literal() is None
    assert lx.cur.position == 0


# ---- ranges and classes ----

def test_range_two_char_form_first():
    lx = _lx("a-z")
    assert lx.range() == Range("a", "z")
    assert lx.cur.at_end


def test_range_falls_back_to_single_char():
    lx = _lx("a-")
    assert lx.range() == Range("a", "a")
    assert lx.cur.rest() == "-"


def test_class_collects_ranges():
    lx = _lx("[a-z0-9_] x")
    cs = lx.char_class()
    assert cs == Ranges([Range("a", "z"), Range("0", "9"), Range("_", "_")])
    assert lx.cur.rest() == "x"


def test_class_with_escapes():
    cs = _lx(r"[\]\\\n\055]").char_class()
    assert cs == Ranges([Range("]", "]"), Range("\\", "\\"), Range("\n", "\n"), Range("-", "-")])


def test_empty_class():
    assert _lx("[]").char_class() == Ranges([])


def test_dash_before_close_bracket_swallows_it():
    # Range <- Char '-' Char takes ']' as the range end
    lx = _lx("[a-]")
    assert lx.char_class() is None
    assert lx.cur.position == 0


def test_unterminated_class():
    lx = _lx("[abc")
    assert lx.char_class() is None
    assert lx.cur.position == 0
