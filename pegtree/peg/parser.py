# pegtree/peg/parser.py
from __future__ import annotations
from typing import List, Optional

from .ast import (
    Expression, Terminal, NonTerminal, AnyTerminal, CharacterClass,
    Sequence, PrioritizedChoice, ZeroOrMore, OneOrMore, Option,
    AndPredicate, NotPredicate, Rule, PegGrammar,
)
from .errors import FailureKind, PegSyntaxError
from .lexical import LexicalParser

# Hierarchical syntax of PEG, binding loosest first:
#   Grammar    <- Spacing Definition+ EndOfFile
#   Definition <- Identifier LEFTARROW Expression
#   Expression <- Sequence (SLASH Sequence)*
#   Sequence   <- Prefix*
#   Prefix     <- (AND / NOT)? Suffix
#   Suffix     <- Primary (QUESTION / STAR / PLUS)?
#   Primary    <- Identifier !LEFTARROW
#               / OPEN Expression CLOSE
#               / Literal / Class / DOT
#
# Plain backtracking, no memoization: an alternative that fails is simply
# re-tried from its checkpoint, so nested optional constructs can re-parse
# the same text many times.

_SUFFIXES = (("?", Option), ("*", ZeroOrMore), ("+", OneOrMore))
_PREFIXES = (("&", AndPredicate), ("!", NotPredicate))


class PegParser(LexicalParser):

    def __init__(self, src: str):
        super().__init__(src)
        self.definitions_parsed = 0

    def parse_grammar(self) -> Optional[List[Rule]]:
        cp = self.cur.checkpoint()
        self.spacing()
        rules: List[Rule] = []
        while True:
            rule = self.parse_definition()
            if rule is None:
                break
            rules.append(rule)
        self.definitions_parsed = len(rules)
        if rules and self.cur.at_end:
            return rules
        if rules:
            self._expect("end of input")
        self.cur.restore(cp)
        return None

    def parse_definition(self) -> Optional[Rule]:
        cp = self.cur.checkpoint()
        name = self.identifier()
        if name is not None and self.token("<-") is not None:
            return Rule(name, self.parse_expression())
        self.cur.restore(cp)
        return None

    def parse_expression(self) -> Expression:
        # Sequence never fails, so neither does Expression
        alts = [self.parse_sequence()]
        while self.token("/") is not None:
            alts.append(self.parse_sequence())
        # a single alternative still gets its own choice node
        return PrioritizedChoice(alts)

    def parse_sequence(self) -> Sequence:
        items: List[Expression] = []
        while True:
            item = self.parse_prefix()
            if item is None:
                break
            items.append(item)
        return Sequence(items)

    def parse_prefix(self) -> Optional[Expression]:
        cp = self.cur.checkpoint()
        for op, node in _PREFIXES:
            if self.token(op) is not None:
                suffix = self.parse_suffix()
                if suffix is not None:
                    return node(suffix)
            self.cur.restore(cp)
        suffix = self.parse_suffix()
        if suffix is not None:
            return suffix
        self.cur.restore(cp)
        return None

    def parse_suffix(self) -> Optional[Expression]:
        primary = self.parse_primary()
        if primary is None:
            return None
        for op, node in _SUFFIXES:
            if self.token(op) is not None:
                return node(primary)
        return primary

    def parse_primary(self) -> Optional[Expression]:
        cp = self.cur.checkpoint()

        name = self.identifier()
        if name is not None:
            with self._lookahead():
                arrow = self.token("<-")
            if arrow is None:
                return NonTerminal(name)
            # start of the next definition
        self.cur.restore(cp)

        if self.token("(") is not None:
            expr = self.parse_expression()
            if self.token(")") is not None:
                return expr
        self.cur.restore(cp)

        text = self.literal()
        if text is not None:
            return Terminal(text)
        charset = self.char_class()
        if charset is not None:
            return CharacterClass(charset)
        if self.token(".") is not None:
            return AnyTerminal()
        self.cur.restore(cp)
        return None

    # ---- failure classification ----

    def syntax_error(self) -> PegSyntaxError:
        """Describe why parse_grammar() returned None."""
        probe = LexicalParser(self.cur.source)
        probe.spacing()
        body_start = probe.cur.position
        if probe.cur.at_end:
            kind = FailureKind.EMPTY_GRAMMAR
        elif self.definitions_parsed:
            kind = FailureKind.TRAILING_INPUT
        elif probe.identifier() is not None and self.failure.offset >= probe.cur.position:
            kind = FailureKind.STRUCTURAL
        else:
            kind = FailureKind.LEXICAL
        return PegSyntaxError.from_failure(kind, self.cur, self.failure,
                                           fallback_offset=body_start)


def try_parse_rules(src: str) -> Optional[List[Rule]]:
    """Rules in source order, or None if `src` is not a complete grammar.

    Parsing recurses once per nesting level, so parentheses nested deeper
    than roughly 180 levels raise RecursionError under the default
    interpreter recursion limit instead of returning.
    """
    return PegParser(src).parse_grammar()


def parse_rules(src: str) -> List[Rule]:
    """Like try_parse_rules() but raises PegSyntaxError on failure."""
    p = PegParser(src)
    rules = p.parse_grammar()
    if rules is None:
        raise p.syntax_error()
    return rules


def parse_peg_grammar(src: str) -> PegGrammar:
    """Parse PEG grammar text into an ordered PegGrammar."""
    return PegGrammar(parse_rules(src))
