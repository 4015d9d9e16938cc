"""
Grammar model: symbols, rules and the loader for the ``HEAD -> BODY`` text format.

A grammar is immutable once built. Symbol id 0 is always the end-of-input
terminal; every other symbol gets the next id the first time it is seen.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .errors import GrammarFormatError

log = logging.getLogger(__name__)

END_OF_INPUT_ID = 0
END_OF_INPUT_NAME = "End of input"
ARROW = "->"
ALTERNATIVE = "|"


@dataclass(frozen=True)
class Symbol:
    id: int
    name: str
    is_terminal: bool


@dataclass(frozen=True)
class Rule:
    id: int
    head: int
    body: tuple[int, ...]


@dataclass(frozen=True)
class Grammar:
    """
    A context-free grammar: a symbol table keyed by id, rules in declaration
    order and the designated start symbol.

    The lookup tables are derived in ``__post_init__`` and never change.
    """

    symbols: tuple[Symbol, ...]
    rules: tuple[Rule, ...]
    start: int
    _by_name: MappingProxyType = field(init=False, repr=False, compare=False)
    _by_head: MappingProxyType = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        by_head: dict[int, list[Rule]] = {}
        for rule in self.rules:
            by_head.setdefault(rule.head, []).append(rule)
        object.__setattr__(self, "_by_name", MappingProxyType({s.name: s for s in self.symbols}))
        object.__setattr__(self, "_by_head",
                           MappingProxyType({head: tuple(rules) for head, rules in by_head.items()}))

    def symbol(self, symbol_id: int) -> Symbol:
        return self.symbols[symbol_id]

    def symbol_named(self, name: str) -> Symbol:
        """
        Looks a symbol up by its name.

        :param name: The symbol name, without quotes.
        :return: The matching symbol.
        :raises KeyError: If no symbol has that name.
        """

        return self._by_name[name]

    def rules_for(self, head: int) -> tuple[Rule, ...]:
        """Rules whose head is ``head``, in declaration order."""
        return self._by_head.get(head, ())

    def is_terminal(self, symbol_id: int) -> bool:
        return self.symbols[symbol_id].is_terminal

    def name(self, symbol_id: int) -> str:
        return self.symbols[symbol_id].name

    @property
    def start_symbol(self) -> Symbol:
        return self.symbols[self.start]

    @property
    def terminals(self) -> dict[str, Symbol]:
        """Terminal symbols keyed by name, end-of-input included."""
        return {s.name: s for s in self.symbols if s.is_terminal}


def split_alternatives(atoms: list[str]) -> list[list[str]]:
    """
    Splits a rule body at every bare ``|`` atom. A quoted ``'|'`` is a
    terminal and does not split.

    :param atoms: The body atoms of one rule line.
    :return: One list of atoms per alternative, possibly empty ones.
    """

    parts: list[list[str]] = [[]]
    for atom in atoms:
        if atom == ALTERNATIVE:
            parts.append([])
        else:
            parts[-1].append(atom)
    return parts


def _unquote(atom: str) -> str | None:
    """Returns the terminal name of a ``'x'`` atom, or None when the atom is not quoted."""
    if len(atom) >= 2 and atom[0] == "'" and atom[-1] == "'":
        return atom[1:-1]
    return None


class _SymbolTable:
    """Mutable symbol table used while reading the grammar text."""

    def __init__(self):
        self.names: list[str] = [END_OF_INPUT_NAME]
        self.terminal: list[bool] = [True]
        self.ids: dict[str, int] = {END_OF_INPUT_NAME: END_OF_INPUT_ID}

    def see(self, name: str, is_terminal: bool) -> int:
        if name in self.ids:
            return self.ids[name]
        self.ids[name] = len(self.names)
        self.names.append(name)
        self.terminal.append(is_terminal)
        return self.ids[name]

    def see_head(self, name: str) -> int:
        symbol_id = self.see(name, False)
        # heads are never terminals, whatever was seen first
        self.terminal[symbol_id] = False
        return symbol_id

    def freeze(self) -> tuple[Symbol, ...]:
        return tuple(Symbol(i, name, term) for i, (name, term) in enumerate(zip(self.names, self.terminal)))


def parse_rules(rules_string: str, start: str | None = None) -> Grammar:
    """
    Parses grammar text into a :class:`Grammar`.

    Each non-empty line that does not start with ``#`` must read
    ``HEAD -> ATOM ATOM ...``. A quoted atom such as ``'+'`` is a terminal,
    an unquoted atom is a non-terminal unless it was already seen as a
    terminal, and a bare ``|`` separates alternatives of the same head.
    Any symbol that appears as a head is a non-terminal, even if it was
    first seen quoted.

    :param rules_string: The grammar text, one rule per line.
    :param start: Name of the start symbol. Defaults to the head of the first rule.
    :return: The immutable grammar.
    :raises GrammarFormatError: If a line is malformed, a body or alternative is
        empty, the grammar has no rules, or ``start`` is not a non-terminal.
    """

    table = _SymbolTable()
    raw_rules: list[tuple[int, tuple[int, ...]]] = []

    for line_idx, raw in enumerate(rules_string.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        atoms = line.split()
        if atoms[0] == ARROW:
            raise GrammarFormatError(f"empty LHS in rule: {line}", line_idx)
        if len(atoms) < 2 or atoms[1] != ARROW:
            raise GrammarFormatError(f"missing '{ARROW}' in rule: {line}", line_idx)
        if _unquote(atoms[0]) is not None:
            raise GrammarFormatError(f"quoted LHS in rule: {line}", line_idx)

        head = table.see_head(atoms[0])
        for alt in split_alternatives(atoms[2:]):
            if not alt:
                raise GrammarFormatError(f"empty RHS alternative in rule: {line}", line_idx)
            body = []
            for atom in alt:
                name = _unquote(atom)
                if name == '':
                    raise GrammarFormatError(f"empty quoted terminal in rule: {line}", line_idx)
                if name is None:
                    body.append(table.see(atom, False))
                else:
                    body.append(table.see(name, True))
            raw_rules.append((head, tuple(body)))

    if not raw_rules:
        raise GrammarFormatError("grammar has no rules")

    symbols = table.freeze()
    rules = tuple(Rule(i, head, body) for i, (head, body) in enumerate(raw_rules))

    if start is None:
        start_id = rules[0].head
    else:
        start_id = table.ids.get(start)
        if start_id is None or symbols[start_id].is_terminal:
            raise GrammarFormatError(f"start symbol {start!r} is not a non-terminal of the grammar")

    heads = {rule.head for rule in rules}
    for symbol in symbols:
        if not symbol.is_terminal and symbol.id not in heads:
            log.warning("Non-terminal %r has no rules and derives nothing", symbol.name)

    grammar = Grammar(symbols, rules, start_id)
    log.debug("Grammar loaded: %d symbols, %d rules, start=%s",
              len(symbols), len(rules), symbols[start_id].name)
    return grammar


def load_grammar(path: str | Path, start: str | None = None) -> Grammar:
    """Reads a grammar file (UTF-8) and parses it with :func:`parse_rules`."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_rules(text, start=start)
