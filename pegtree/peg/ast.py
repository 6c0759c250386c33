# pegtree/peg/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union

# ---- character sets ----

@dataclass(frozen=True)
class Range:
    """Inclusive character range; start == end for a single character."""
    start: str
    end: str

    def contains(self, c: str) -> bool:
        return self.start <= c <= self.end

    def __contains__(self, c: str) -> bool:
        return self.contains(c)

    def __str__(self) -> str:
        if self.start == self.end:
            return _escape_char(self.start, "]")
        return f"{_escape_char(self.start, ']')}-{_escape_char(self.end, ']')}"


@dataclass(frozen=True)
class Ranges:
    """Union of character sets, tested left to right."""
    sets: Tuple["CharSet", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sets", tuple(self.sets))

    def contains(self, c: str) -> bool:
        return any(s.contains(c) for s in self.sets)

    def __contains__(self, c: str) -> bool:
        return self.contains(c)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.sets)

CharSet = Union[Range, Ranges]

# ---- expression nodes ----

@dataclass(frozen=True)
class Expression:
    """Base of the closed set of PEG expression nodes."""

    def __new__(cls, *args, **kwargs):
        if cls is Expression:
            raise TypeError("Expression is abstract; build one of its variants")
        return super().__new__(cls)

    @property
    def children(self) -> Tuple["Expression", ...]:
        return ()

    def walk(self) -> Iterator["Expression"]:
        """Pre-order traversal, self first, children in source order."""
        stack: List[Expression] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __str__(self) -> str:
        return _render_top(self)

@dataclass(frozen=True)
class Terminal(Expression):
    text: str  # decoded text

@dataclass(frozen=True)
class NonTerminal(Expression):
    name: str  # unresolved rule name

@dataclass(frozen=True)
class AnyTerminal(Expression):
    pass

@dataclass(frozen=True)
class CharacterClass(Expression):
    charset: CharSet

    def contains(self, c: str) -> bool:
        return self.charset.contains(c)

@dataclass(frozen=True)
class Sequence(Expression):
    items: Tuple[Expression, ...] = ()  # empty = always succeeds

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def children(self) -> Tuple[Expression, ...]:
        return self.items

@dataclass(frozen=True)
class PrioritizedChoice(Expression):
    alternatives: Tuple[Expression, ...]

    def __post_init__(self) -> None:
        alts = tuple(self.alternatives)
        if not alts:
            raise ValueError("PrioritizedChoice needs at least one alternative")
        object.__setattr__(self, "alternatives", alts)

    @property
    def children(self) -> Tuple[Expression, ...]:
        return self.alternatives

@dataclass(frozen=True)
class _Unary(Expression):
    inner: Expression

    @property
    def children(self) -> Tuple[Expression, ...]:
        return (self.inner,)

@dataclass(frozen=True)
class ZeroOrMore(_Unary):
    pass

@dataclass(frozen=True)
class OneOrMore(_Unary):
    pass

@dataclass(frozen=True)
class Option(_Unary):
    pass

@dataclass(frozen=True)
class AndPredicate(_Unary):
    pass  # positive lookahead (&)

@dataclass(frozen=True)
class NotPredicate(_Unary):
    pass  # negative lookahead (!)

# ---- rules ----

@dataclass(frozen=True)
class Rule:
    name: str
    expression: Expression

    def nonterminal_names(self) -> List[str]:
        """Referenced rule names, first occurrence order. Nothing is resolved."""
        seen: List[str] = []
        for node in self.expression.walk():
            if isinstance(node, NonTerminal) and node.name not in seen:
                seen.append(node.name)
        return seen

    def __str__(self) -> str:
        return f"{self.name} <- {_render_top(self.expression)}"

@dataclass
class PegGrammar:
    """Rules in source order. The first rule is the start rule by convention."""
    rules: List[Rule] = field(default_factory=list)

    @property
    def start(self) -> str:
        return self.rules[0].name

    def names(self) -> List[str]:
        return [r.name for r in self.rules]

    def rule(self, name: str) -> Rule:
        for r in self.rules:
            if r.name == name:
                return r
        raise KeyError(name)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __str__(self) -> str:
        return "\n".join(str(r) for r in self.rules)

# ---- debug rendering ----
# Output re-parses to an equal tree for anything the parser produced.

_SIMPLE_ESCAPES = {
    "\n": "\\n", "\r": "\\r", "\t": "\\t", "\\": "\\\\",
    "'": "\\'", '"': '\\"', "[": "\\[", "]": "\\]",
}

def _escape_char(c: str, special: str) -> str:
    if c in _SIMPLE_ESCAPES and (c in special or c in "\n\r\t\\"):
        return _SIMPLE_ESCAPES[c]
    code = ord(c)
    if code < 0x20 or code == 0x7F or (c == "-" and special == "]"):
        if code <= 0o277:
            return "\\%03o" % code
    return c

def _render_top(node: Expression) -> str:
    if isinstance(node, PrioritizedChoice):
        return _render_choice(node)
    return _render(node)

def _render_choice(node: PrioritizedChoice) -> str:
    alts = []
    for alt in node.alternatives:
        if isinstance(alt, Sequence):
            alts.append(" ".join(_render(i) for i in alt.items))
        else:
            alts.append(_render(alt))
    return " / ".join(alts)

def _render(node: Expression) -> str:
    if isinstance(node, Terminal):
        return "'" + "".join(_escape_char(c, "'") for c in node.text) + "'"
    if isinstance(node, NonTerminal):
        return node.name
    if isinstance(node, AnyTerminal):
        return "."
    if isinstance(node, CharacterClass):
        return f"[{node.charset}]"
    if isinstance(node, PrioritizedChoice):
        return f"({_render_choice(node)})"
    if isinstance(node, Sequence):
        return "(" + " ".join(_render(i) for i in node.items) + ")"
    if isinstance(node, (ZeroOrMore, OneOrMore, Option)):
        op = {ZeroOrMore: "*", OneOrMore: "+", Option: "?"}[type(node)]
        if isinstance(node.inner, _Unary):
            return f"({_render(node.inner)}){op}"
        return _render(node.inner) + op
    if isinstance(node, (AndPredicate, NotPredicate)):
        op = "&" if isinstance(node, AndPredicate) else "!"
        if isinstance(node.inner, (AndPredicate, NotPredicate)):
            return f"{op}({_render(node.inner)})"
        return op + _render(node.inner)
    raise TypeError(f"not a PEG expression node: {node!r}")
