# pegtree/peg/__init__.py
"""PEG front end for pegtree.

This package provides:
- a Cursor with checkpoint/restore backtracking
- AST nodes for PEG expressions, rules and character sets
- a plain backtracking (non-packrat) parser for PEG grammar text

Parsed grammars are structure only: rule references are not resolved and
nothing here matches input against a grammar.
"""

from .ast import (
    Expression, Terminal, NonTerminal, AnyTerminal, CharacterClass,
    Sequence, PrioritizedChoice, ZeroOrMore, OneOrMore, Option,
    AndPredicate, NotPredicate, Range, Ranges, CharSet, Rule, PegGrammar,
)
from .cursor import Cursor, Checkpoint
from .errors import FailureKind, PegSyntaxError
from .parser import PegParser, parse_peg_grammar, parse_rules, try_parse_rules
