# pegtree/pegc.py
"""pegc – pegtree CLI

Examples
    $ python -m pegtree.pegc check tests/grammars/peg.peg -D
    $ python -m pegtree.pegc dump tests/grammars/peg.peg
    $ python -m pegtree.pegc check --text "A <- 'x' / B"

Commands
--------
- check : parse the grammar and print a one-line summary
- dump  : parse the grammar and print each rule (debug rendering, one per line)

With -D/--debug the pipeline steps and the AST repr go to stderr.
"""

from __future__ import annotations
import argparse
import sys
from typing import Optional

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)

# ------------------------------
# pipeline
# ------------------------------

def _load_source(args) -> str:
    if args.text is not None:
        if args.debug: _eprint("[DEBUG] source from --text | chars=%d" % len(args.text))
        return args.text
    from .grammar.loader import load_grammar_text
    src = load_grammar_text(args.file, encoding=args.encoding)
    if args.debug: _eprint("[DEBUG] source loaded | file=%s chars=%d" % (args.file, len(src)))
    return src


def _load_pipeline(args):
    from .peg import parse_peg_grammar

    src = _load_source(args)
    g = parse_peg_grammar(src)
    if args.debug: _eprint("[DEBUG] AST ready | rules=%d start=%s" % (len(g), g.start))
    return g

# ------------------------------
# debug output
# ------------------------------

def _print_ast(g) -> None:
    _eprint("\n[AST]")
    for rule in g:
        _eprint(repr(rule))

def _print_references(g) -> None:
    _eprint("\n[References]")
    defined = set(g.names())
    for rule in g:
        refs = rule.nonterminal_names()
        marks = [n if n in defined else n + "(?)" for n in refs]
        _eprint(f"  {rule.name:>12} : {', '.join(marks) if marks else '(none)'}")

# ------------------------------
# commands
# ------------------------------

def _run(args, action) -> int:
    try:
        g = _load_pipeline(args)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except (OSError, UnicodeDecodeError) as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_ast(g)
        _print_references(g)

    action(g)
    return 0


def cmd_check(args) -> int:
    return _run(args, lambda g: print(f"[CHECK OK] rules={len(g)} start={g.start}"))


def cmd_dump(args) -> int:
    def _dump(g) -> None:
        for rule in g:
            print(rule)
    return _run(args, _dump)

# ------------------------------
# entry point
# ------------------------------

def _add_source_args(p: argparse.ArgumentParser) -> None:
    src_group = p.add_mutually_exclusive_group(required=True)
    src_group.add_argument("file", nargs="?", help="PEG grammar file")
    src_group.add_argument("--text", help="grammar text given inline")
    p.add_argument("--encoding", default="utf-8", help="grammar file encoding (default: utf-8)")
    p.add_argument("-D", "--debug", action="store_true", help="print pipeline steps and the AST to stderr")


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="pegc", description="pegtree PEG grammar front end")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="parse a grammar and print a summary")
    _add_source_args(p_check)
    p_check.set_defaults(func=cmd_check)

    p_dump = sub.add_parser("dump", help="parse a grammar and print its rules")
    _add_source_args(p_dump)
    p_dump.set_defaults(func=cmd_dump)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
