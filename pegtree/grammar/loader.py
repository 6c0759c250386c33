"""Grammar file loader."""

from __future__ import annotations
from pathlib    import Path


def load_grammar_text(path: str, encoding: str = "utf-8") -> str:
    """
    Load grammar text as-is. Line endings are kept: the PEG lexer accepts
    CR, LF and CRLF, and literals may legitimately contain them.
    """
    with Path(path).open("r", encoding=encoding, newline="") as f:
        return f.read()
