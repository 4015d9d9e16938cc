"""
Parse a sentence with an arbitrary context-free grammar and print one
derivation tree.

    earleytree GRAMMAR_FILE INPUT_FILE [--show-grammar] [--show-chart]
    earleytree --demo
"""

import argparse
import logging
import sys
from pathlib import Path

from . import data
from .errors import EarleyError, Rejected
from .forest import DEFAULT_MAX_DEPTH, extract
from .grammar import Grammar, load_grammar, parse_rules
from .recognizer import recognize
from .render import display_tree, format_chart, format_grammar, format_tree
from .tokenizer import tokenize

log = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="earleytree", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("grammar", type=Path, nargs="?", help="Path to the grammar file")
    parser.add_argument("input", type=Path, nargs="?", help="Path to the file holding the sentence to parse")
    parser.add_argument("-s", "--start", help="Start symbol (default is the head of the first rule)")
    parser.add_argument("--demo", action="store_true", help="Parse the bundled demo sentences")
    parser.add_argument("--show-grammar", action="store_true", help="Print the loaded grammar")
    parser.add_argument("--show-chart", action="store_true", help="Print every state set of the chart")
    parser.add_argument("--no-pretty", dest="pretty_print", action="store_false",
                        help="Skip the NLTK text drawing of the tree")
    parser.add_argument("--draw", action="store_true", help="Open the tree in an NLTK window")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help=f"Maximum derivation depth (default {DEFAULT_MAX_DEPTH})")

    # for verbosity of logging
    parser.set_defaults(logging_level=logging.INFO)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", dest="logging_level", action="store_const", const=logging.DEBUG)
    verbosity.add_argument("-q", "--quiet", dest="logging_level", action="store_const", const=logging.WARNING)
    return parser


def parse_sentence(grammar: Grammar, sentence: str, args: argparse.Namespace) -> None:
    """
    Runs one sentence through the tokenizer, recognizer and extractor and
    prints what ``args`` asks for.

    :raises EarleyError: On any tokenizing, rejection or reconstruction failure.
    """

    tokens = tokenize(grammar, sentence)
    chart = recognize(grammar, tokens)
    if args.show_chart:
        print(format_chart(chart, grammar))
        print()
    tree = extract(chart, grammar, max_depth=args.max_depth)
    print(format_tree(tree, grammar))
    display_tree(tree, grammar, pretty_print=args.pretty_print, draw=args.draw)


def run_demo(args: argparse.Namespace) -> int:
    grammar = parse_rules(data.rules, start=args.start)
    if args.show_grammar:
        print(format_grammar(grammar))
        print()

    print(f"Parsing {len(data.sentence_list)} sentences:")
    unexpected = 0
    for idx, sentence in enumerate(data.sentence_list, start=1):
        grammatical = not sentence.startswith("*")
        sentence = sentence.lstrip("*")
        print()
        print(f"Parsing ({'' if grammatical else 'un'}grammatical) sentence number {idx}: {sentence}")
        try:
            parse_sentence(grammar, sentence, args)
            accepted = True
        except Rejected as e:
            print(e)
            accepted = False
        if accepted != grammatical:
            print("THIS IS NOT EXPECTED.")
            unexpected += 1
    return 1 if unexpected else 0


def run(args: argparse.Namespace) -> int:
    if args.demo:
        return run_demo(args)

    grammar = load_grammar(args.grammar, start=args.start)
    if args.show_grammar:
        print(format_grammar(grammar))
        print()
    sentence = args.input.read_text(encoding="utf-8")
    parse_sentence(grammar, sentence, args)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.logging_level, format="%(levelname)s %(name)s: %(message)s")

    if not args.demo and (args.grammar is None or args.input is None):
        parser.print_usage(sys.stderr)
        print("error: a grammar file and an input file are required (or use --demo)", file=sys.stderr)
        return 1

    try:
        return run(args)
    except (EarleyError, OSError) as e:
        log.debug("Parse failed", exc_info=True)
        parser.print_usage(sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
