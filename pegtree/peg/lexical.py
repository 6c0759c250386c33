# pegtree/peg/lexical.py
from __future__ import annotations
import regex as re
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .ast import Range, Ranges
from .cursor import Cursor
from .errors import FurthestFailure

# Lexical syntax of PEG (trailing Spacing belongs to each token):
#   Identifier <- IdentStart IdentCont* Spacing
#   IdentStart <- [a-zA-Z_]
#   IdentCont  <- IdentStart / [0-9]
#   Literal    <- ['] (!['] Char)* ['] Spacing
#               / ["] (!["] Char)* ["] Spacing
#   Class      <- '[' (!']' Range)* ']' Spacing
#   Range      <- Char '-' Char / Char
#   Char       <- '\\' [nrt'"\[\]\\]
#               / '\\' [0-2][0-7][0-7]
#               / '\\' [0-7][0-7]?
#               / !'\\' .
#   Spacing    <- (Space / Comment)*
#   Comment    <- '#' (!EndOfLine .)* EndOfLine
#   Space      <- ' ' / '\t' / EndOfLine
#   EndOfLine  <- '\r\n' / '\n' / '\r'

_IDENT_START_RE = re.compile(r"[A-Za-z_]")
_IDENT_CONT_RE = re.compile(r"[A-Za-z0-9_]")
_OCTAL_HI_RE = re.compile(r"[0-2]")
_OCTAL_RE = re.compile(r"[0-7]")

_SIMPLE_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t",
    "'": "'", '"': '"', "[": "[", "]": "]", "\\": "\\",
}


def _is(pattern, ch: Optional[str]) -> bool:
    return ch is not None and pattern.fullmatch(ch) is not None


class LexicalParser:
    """Token-level sub-parsers over a Cursor.

    Each method returns its decoded value, or None after restoring the
    cursor to where it was on entry. Expected tokens are reported to
    `self.failure` so the top level can describe the furthest failure.
    """

    def __init__(self, src: str):
        self.cur = Cursor(src)
        self.failure = FurthestFailure()
        self._quiet = 0

    def _expect(self, what: str) -> None:
        if not self._quiet:
            self.failure.record(self.cur.position, what)

    @contextmanager
    def _lookahead(self) -> Iterator[None]:
        """Failures inside a predicate are not reported."""
        self._quiet += 1
        try:
            yield
        finally:
            self._quiet -= 1

    def _match(self, text: str) -> bool:
        """Consume `text` if it is next; no spacing."""
        if self.cur.peek_string(len(text)) == text:
            self.cur.next_string(len(text))
            return True
        return False

    # ---- spacing ----

    def spacing(self) -> str:
        """Spacing never fails; returns what it skipped."""
        out = []
        while True:
            s = self.space()
            if s is None:
                s = self.comment()
            if s is None:
                return "".join(out)
            out.append(s)

    def space(self) -> Optional[str]:
        ch = self.cur.peek()
        if ch == " " or ch == "\t":
            return self.cur.next()
        return self.end_of_line()

    def comment(self) -> Optional[str]:
        cp = self.cur.checkpoint()
        if not self._match("#"):
            return None
        body = []
        while not self.cur.at_end:
            mark = self.cur.checkpoint()
            if self.end_of_line() is not None:
                self.cur.restore(mark)
                break
            body.append(self.cur.next())
        eol = self.end_of_line()
        if eol is not None:
            return "#" + "".join(body) + eol
        # comment running into end of input is not a comment
        self._expect("end of line")
        self.cur.restore(cp)
        return None

    def end_of_line(self) -> Optional[str]:
        if self._match("\r\n"):
            return "\r\n"
        ch = self.cur.peek()
        if ch == "\n" or ch == "\r":
            return self.cur.next()
        return None

    # ---- tokens ----

    def token(self, text: str) -> Optional[str]:
        """Punctuation token (`<-`, `/`, `(` ...) followed by Spacing."""
        if not self._match(text):
            self._expect(repr(text))
            return None
        self.spacing()
        return text

    def identifier(self) -> Optional[str]:
        ch = self.cur.peek()
        if not _is(_IDENT_START_RE, ch):
            self._expect("identifier")
            return None
        chars = [self.cur.next()]
        while _is(_IDENT_CONT_RE, self.cur.peek()):
            chars.append(self.cur.next())
        self.spacing()
        return "".join(chars)

    def literal(self) -> Optional[str]:
        for quote in ("'", '"'):
            cp = self.cur.checkpoint()
            if not self._match(quote):
                continue
            chars = []
            while True:
                ch = self.cur.peek()
                if ch is None or ch == quote:
                    break
                c = self.char()
                if c is None:
                    break
                chars.append(c)
            if self._match(quote):
                self.spacing()
                return "".join(chars)
            self._expect(f"closing {quote}")
            self.cur.restore(cp)
        self._expect("literal")
        return None

    def char_class(self) -> Optional[Ranges]:
        cp = self.cur.checkpoint()
        if not self._match("["):
            self._expect("character class")
            return None
        ranges: List[Range] = []
        while True:
            ch = self.cur.peek()
            if ch is None or ch == "]":
                break
            r = self.range()
            if r is None:
                break
            ranges.append(r)
        if self._match("]"):
            self.spacing()
            return Ranges(ranges)
        self._expect("']'")
        self.cur.restore(cp)
        return None

    def range(self) -> Optional[Range]:
        cp = self.cur.checkpoint()
        start = self.char()
        if start is not None and self._match("-"):
            end = self.char()
            if end is not None:
                return Range(start, end)
        self.cur.restore(cp)
        c = self.char()
        if c is not None:
            return Range(c, c)
        self.cur.restore(cp)
        return None

    # ---- characters ----

    def char(self) -> Optional[str]:
        """One decoded character; escape forms are tried in priority order."""
        cp = self.cur.checkpoint()
        if self._match("\\"):
            after = self.cur.checkpoint()
            c = self.cur.next()
            if c is not None and c in _SIMPLE_ESCAPES:
                return _SIMPLE_ESCAPES[c]
            self.cur.restore(after)

            d1, d2, d3 = self.cur.next(), self.cur.next(), self.cur.next()
            if _is(_OCTAL_HI_RE, d1) and _is(_OCTAL_RE, d2) and _is(_OCTAL_RE, d3):
                return chr(_digit(d1) * 64 + _digit(d2) * 8 + _digit(d3))
            self.cur.restore(after)

            d1 = self.cur.next()
            if _is(_OCTAL_RE, d1):
                if _is(_OCTAL_RE, self.cur.peek()):
                    return chr(_digit(d1) * 8 + _digit(self.cur.next()))
                return chr(_digit(d1))
            # a backslash that starts no escape is an error, not a literal
            self.cur.restore(after)
            self._expect("escape sequence")
            self.cur.restore(cp)
            return None
        ch = self.cur.next()
        if ch is None:
            self._expect("character")
        return ch


def _digit(ch: str) -> int:
    return ord(ch) - ord("0")
