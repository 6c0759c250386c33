# pegtree/peg/cursor.py
from __future__ import annotations
from typing import NamedTuple, Optional, Tuple


class Checkpoint(NamedTuple):
    """Opaque snapshot of a cursor position."""
    owner: int
    position: int


class Cursor:
    """Position-addressable character stream over an immutable buffer.

    The buffer is never copied or mutated; only `position` moves.
    Every lookahead/consume method returns None instead of raising when
    the input is exhausted.
    """

    def __init__(self, source: str):
        self._src = source
        self._n = len(source)
        self._pos = 0

    @property
    def source(self) -> str:
        return self._src

    @property
    def position(self) -> int:
        return self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= self._n

    def peek(self) -> Optional[str]:
        if self._pos >= self._n:
            return None
        return self._src[self._pos]

    def next(self) -> Optional[str]:
        if self._pos >= self._n:
            return None
        ch = self._src[self._pos]
        self._pos += 1
        return ch

    def peek_string(self, n: int) -> Optional[str]:
        # all-or-nothing: never a partial string
        if n < 0 or self._pos + n > self._n:
            return None
        return self._src[self._pos:self._pos + n]

    def next_string(self, n: int) -> Optional[str]:
        s = self.peek_string(n)
        if s is not None:
            self._pos += n
        return s

    def checkpoint(self) -> Checkpoint:
        return Checkpoint(id(self), self._pos)

    def restore(self, cp: Checkpoint) -> None:
        if cp.owner != id(self):
            raise ValueError("checkpoint belongs to another cursor")
        if cp.position > self._pos:
            raise ValueError(
                f"cannot restore forward: checkpoint {cp.position} is ahead of {self._pos}"
            )
        self._pos = cp.position

    def rest(self) -> str:
        """Unconsumed input (debug aid)."""
        return self._src[self._pos:]

    def line_col(self, offset: Optional[int] = None) -> Tuple[int, int]:
        """1-based (line, col) of `offset` (default: current position).

        CR, LF and CRLF each count as one line end, matching the grammar's
        EndOfLine rule.
        """
        if offset is None:
            offset = self._pos
        offset = max(0, min(offset, self._n))
        line = 1
        line_start = 0
        i = 0
        while i < offset:
            ch = self._src[i]
            if ch == "\r" and i + 1 < self._n and self._src[i + 1] == "\n":
                if i + 1 >= offset:
                    break
                i += 2
                line += 1
                line_start = i
                continue
            if ch in "\r\n":
                line += 1
                line_start = i + 1
            i += 1
        return line, offset - line_start + 1

    def __repr__(self) -> str:
        return f"Cursor(pos={self._pos}, len={self._n})"
