# pegtree/__init__.py
"""pegtree: parse PEG grammar text into a tree of rules and expressions."""

__version__ = "0.1.0"

from .peg import (
    Expression, Terminal, NonTerminal, AnyTerminal, CharacterClass,
    Sequence, PrioritizedChoice, ZeroOrMore, OneOrMore, Option,
    AndPredicate, NotPredicate, Range, Ranges, CharSet, Rule, PegGrammar,
    Cursor, Checkpoint, FailureKind, PegSyntaxError,
    PegParser, parse_peg_grammar, parse_rules, try_parse_rules,
)
