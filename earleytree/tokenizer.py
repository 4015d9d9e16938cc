"""Splits input text into terminal tokens of a grammar."""

import logging
from dataclasses import dataclass

from .errors import UnknownTerminalError
from .grammar import END_OF_INPUT_ID, END_OF_INPUT_NAME, Grammar

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    terminal: int
    text: str


END_OF_INPUT = Token(END_OF_INPUT_ID, END_OF_INPUT_NAME)


def tokenize(grammar: Grammar, text: str) -> list[Token]:
    """
    Tokenizes ``text`` against the terminal symbols of ``grammar``.

    The text is trimmed and split on whitespace; every atom must be the exact
    name of a terminal. One end-of-input token is always appended, so the
    result is never empty.

    :param grammar: The grammar whose terminals are recognized.
    :param text: The raw input text.
    :return: The tokens, followed by the end-of-input token.
    :raises UnknownTerminalError: If an atom is not the name of a terminal.
    """

    terminals = grammar.terminals
    result: list[Token] = []
    for position, atom in enumerate(text.split(), start=1):
        symbol = terminals.get(atom)
        if symbol is None:
            raise UnknownTerminalError(atom, position)
        result.append(Token(symbol.id, atom))
    result.append(END_OF_INPUT)
    log.debug("Tokenized %d atom(s)", len(result) - 1)
    return result
