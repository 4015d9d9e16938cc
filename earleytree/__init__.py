"""Earley chart parser that rebuilds one derivation tree per accepted sentence."""

from dataclasses import dataclass

from .errors import AstReconstructionFailure, EarleyError, GrammarFormatError, Rejected, UnknownTerminalError
from .forest import DEFAULT_MAX_DEPTH, Edge, ParseNode, extract, index_edges
from .grammar import Grammar, Rule, Symbol, load_grammar, parse_rules
from .recognizer import Chart, EarleyItem, StateSet, accepts, recognize
from .tokenizer import Token, tokenize

__version__ = "0.1.0"


@dataclass
class ParseResult:
    tokens: list[Token]
    chart: Chart
    tree: ParseNode


def parse(grammar: Grammar, text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """
    Tokenizes ``text``, builds its chart and extracts one derivation tree.

    :raises UnknownTerminalError: If the text holds an atom that is not a terminal.
    :raises Rejected: If the sentence is not in the language.
    :raises AstReconstructionFailure: If no tree can be rebuilt from an accepting chart.
    """

    tokens = tokenize(grammar, text)
    chart = recognize(grammar, tokens)
    tree = extract(chart, grammar, max_depth=max_depth)
    return ParseResult(tokens, chart, tree)


__all__ = [
    "AstReconstructionFailure", "Chart", "DEFAULT_MAX_DEPTH", "EarleyError", "EarleyItem", "Edge",
    "Grammar", "GrammarFormatError", "ParseNode", "ParseResult", "Rejected", "Rule", "StateSet",
    "Symbol", "Token", "UnknownTerminalError", "accepts", "extract", "index_edges", "load_grammar",
    "parse", "parse_rules", "recognize", "tokenize",
]
