"""
Earley recognizer.

Builds the chart, one state set per input position, with prediction, scan
and completion. The chart records insertion order in every state set; the
forest extractor relies on that order to pick the same derivation every time.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from .grammar import Grammar, Rule
from .tokenizer import Token

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EarleyItem:
    """A dotted rule: ``rule`` with ``dot`` body symbols matched, started at chart index ``origin``."""

    rule: Rule
    dot: int
    origin: int

    @property
    def is_complete(self) -> bool:
        return self.dot == len(self.rule.body)

    @property
    def next_symbol(self) -> int | None:
        """The body symbol right after the dot, or None for a complete item."""
        if self.is_complete:
            return None
        return self.rule.body[self.dot]

    def advance(self) -> "EarleyItem":
        return EarleyItem(self.rule, self.dot + 1, self.origin)


class StateSet:
    """
    An ordered set of Earley items.

    Iteration and indexing follow insertion order; a hash set rejects
    duplicates at insertion time. Indexing while items are being appended is
    how the closure walks the set as a worklist.
    """

    def __init__(self, items=()):
        self._items: list[EarleyItem] = []
        self._seen: set[EarleyItem] = set()
        for item in items:
            self.add(item)

    def add(self, item: EarleyItem) -> bool:
        """Appends ``item`` unless an equal item is present. Returns True if it was added."""
        if item in self._seen:
            return False
        self._seen.add(item)
        self._items.append(item)
        return True

    def __contains__(self, item) -> bool:
        return item in self._seen

    def __getitem__(self, index: int) -> EarleyItem:
        return self._items[index]

    def __iter__(self) -> Iterator[EarleyItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StateSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"StateSet({self._items!r})"

    def complete_items(self) -> list[EarleyItem]:
        return [item for item in self._items if item.is_complete]


class Chart:
    """
    The state sets built from ``tokens``, one more than there are tokens.

    ``chart[i]`` holds the items valid after consuming ``i`` tokens. The last
    token is always the end-of-input token, so ``chart[len(tokens) - 1]`` is
    the set reached after the last real token.
    """

    def __init__(self, tokens: list[Token], sets: list[StateSet]):
        self.tokens = list(tokens)
        self.sets = sets

    @property
    def token_count(self) -> int:
        """Number of real tokens, the end-of-input token excluded."""
        return len(self.tokens) - 1

    def accepted(self, start: int) -> bool:
        """
        Whether the chart recognizes the input: the set after the last real
        token holds a complete item for ``start`` that began at 0.
        """

        for item in self.sets[self.token_count]:
            if item.is_complete and item.rule.head == start and item.origin == 0:
                return True
        return False

    def __getitem__(self, index: int) -> StateSet:
        return self.sets[index]

    def __iter__(self) -> Iterator[StateSet]:
        return iter(self.sets)

    def __len__(self) -> int:
        return len(self.sets)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chart):
            return NotImplemented
        return self.tokens == other.tokens and self.sets == other.sets


def _close(state_set: StateSet, position: int, grammar: Grammar, chart: list[StateSet]) -> None:
    """
    Runs prediction and completion on ``state_set`` until no item is added.

    The set grows while it is walked; the index cursor picks up every
    appended item, so the loop stops at the fixed point.

    :param state_set: The set at ``position``, already holding its scanned items.
    :param position: Chart index of ``state_set``.
    :param grammar: The grammar being recognized.
    :param chart: The sets built so far; ``chart[position]`` is ``state_set``.
    """

    predicted = completed = 0
    i = 0
    while i < len(state_set):
        item = state_set[i]
        symbol = item.next_symbol
        if symbol is None:
            # completion: advance every item of the origin set waiting for this head
            head = item.rule.head
            for waiting in chart[item.origin]:
                if waiting.next_symbol == head and state_set.add(waiting.advance()):
                    completed += 1
        elif not grammar.is_terminal(symbol):
            for rule in grammar.rules_for(symbol):
                if state_set.add(EarleyItem(rule, 0, position)):
                    predicted += 1
        i += 1
    log.debug(f"Column {position}: {len(state_set)} items ({predicted} predicted, {completed} completed)")


def _scan(state_set: StateSet, token: Token) -> StateSet:
    """Advances every item of ``state_set`` that expects ``token``'s terminal."""
    next_set = StateSet()
    for item in state_set:
        if item.next_symbol == token.terminal:
            next_set.add(item.advance())
    return next_set


def recognize(grammar: Grammar, tokens: list[Token]) -> Chart:
    """
    Builds the Earley chart for ``tokens``.

    Rejection is not an error: it shows as a chart whose last real set holds
    no complete start item (see :meth:`Chart.accepted`).

    :param grammar: The grammar to recognize with.
    :param tokens: Tokens from :func:`earleytree.tokenizer.tokenize`, end-of-input last.
    :return: The chart, with ``len(tokens) + 1`` state sets.
    """

    sets: list[StateSet] = [StateSet(EarleyItem(rule, 0, 0) for rule in grammar.rules_for(grammar.start))]
    for position, token in enumerate(tokens):
        current = sets[position]
        _close(current, position, grammar, sets)
        next_set = _scan(current, token)
        log.debug(f"Scanned {token.text!r} at {position}: {len(next_set)} items")
        sets.append(next_set)
    # the set after end-of-input is only ever reached by scanning, close it for completeness
    _close(sets[-1], len(tokens), grammar, sets)

    chart = Chart(tokens, sets)
    log.debug(f"Chart built: {len(chart)} sets, accepted={chart.accepted(grammar.start)}")
    return chart


def accepts(chart: Chart, grammar: Grammar) -> bool:
    """Whether ``chart`` recognizes its input as a sentence of ``grammar``."""
    return chart.accepted(grammar.start)
