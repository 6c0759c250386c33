# pegtree/peg/errors.py
"""Failure reporting for the PEG front end.

Sub-parsers never raise: they return None and restore the cursor. Along the
way they report what they expected into a `FurthestFailure`, which only ever
keeps the rightmost offset seen. The top level turns that into one
`PegSyntaxError` when the whole parse fails.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Set, Tuple

from .cursor import Cursor


class FailureKind(Enum):
    LEXICAL = "lexical"                # expected token absent
    STRUCTURAL = "structural"          # tokens matched but a construct did not complete
    TRAILING_INPUT = "trailing-input"  # definitions parsed, input remains
    EMPTY_GRAMMAR = "empty-grammar"    # no definition at all


class FurthestFailure:
    """Rightmost failure offset and what was expected there."""

    def __init__(self) -> None:
        self.offset = -1
        self.expected: Set[str] = set()

    def record(self, offset: int, what: str) -> None:
        if offset > self.offset:
            self.offset = offset
            self.expected = {what}
        elif offset == self.offset:
            self.expected.add(what)

    def __repr__(self) -> str:
        return f"FurthestFailure(offset={self.offset}, expected={sorted(self.expected)})"


# ---------- snippet utils ----------

def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line holding pos; CR and LF both end a line."""
    start = max(src.rfind("\n", 0, pos), src.rfind("\r", 0, pos)) + 1
    end = len(src)
    for eol in ("\n", "\r"):
        j = src.find(eol, pos)
        if j != -1 and j < end:
            end = j
    return start, end

def snippet_caret_at_pos(src: str, pos: int) -> str:
    """Source line containing pos with a caret under it."""
    start, end = _line_bounds(src, pos)
    line_text = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line_text}\n{caret}"

def _describe(expected: Tuple[str, ...]) -> str:
    if not expected:
        return "nothing"
    if len(expected) == 1:
        return expected[0]
    return ", ".join(expected[:-1]) + " or " + expected[-1]


class PegSyntaxError(SyntaxError):
    """The grammar text could not be parsed as a whole.

    `pos` is the absolute offset of the furthest failure; `lineno`/`offset`
    keep their usual SyntaxError meaning (1-based line and column).
    """

    def __init__(self, kind: FailureKind, src: str, offset: int,
                 line: int, col: int, expected: Tuple[str, ...] = ()):
        self.kind = kind
        self.pos = offset
        self.line = line
        self.col = col
        self.expected = expected
        self.snippet = snippet_caret_at_pos(src, offset)
        msg = f"PEG {kind.value} error at {line}:{col}: expected {_describe(expected)}"
        line_start, line_end = _line_bounds(src, offset)
        super().__init__(msg, (None, line, col, src[line_start:line_end]))
        self.msg = msg

    def __str__(self) -> str:
        return f"{self.msg}\n{self.snippet}"

    @classmethod
    def from_failure(cls, kind: FailureKind, cursor: Cursor,
                     failure: FurthestFailure,
                     fallback_offset: Optional[int] = None) -> "PegSyntaxError":
        offset = failure.offset
        if offset < 0:
            offset = cursor.position if fallback_offset is None else fallback_offset
        line, col = cursor.line_col(offset)
        return cls(kind, cursor.source, offset, line, col, tuple(sorted(failure.expected)))
