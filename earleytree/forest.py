"""
Derivation tree extraction from a finished Earley chart.

Complete items are re-indexed as edges keyed by their origin; a tree is then
rebuilt top-down, looking for a split of each rule body into edges and
tokens that exactly covers the span. When a sentence is ambiguous the first
derivation found is returned: rules in declaration order, edges in index
order (longer spans first, then chart order). No other preference applies.
"""

import logging
from dataclasses import dataclass, field

from .errors import AstReconstructionFailure, Rejected
from .grammar import Grammar, Rule
from .recognizer import Chart

log = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 400


@dataclass(frozen=True)
class Edge:
    """One completed derivation of ``rule.head`` spanning ``[origin, end)``."""

    origin: int
    end: int
    rule: Rule

    @property
    def head(self) -> int:
        return self.rule.head


@dataclass
class ParseNode:
    """A node of the derivation tree. Terminal leaves carry the matched token text."""

    symbol: int
    children: list["ParseNode"] = field(default_factory=list)
    text: str | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def leaves(self) -> list["ParseNode"]:
        if self.is_leaf:
            return [self]
        out = []
        for child in self.children:
            out.extend(child.leaves())
        return out

    def depth(self) -> int:
        if self.is_leaf:
            return 1
        return 1 + max(child.depth() for child in self.children)


def index_edges(chart: Chart) -> list[list[Edge]]:
    """
    Turns the complete items of ``chart`` into edges grouped by origin.

    State sets are walked from last to first, so each list holds the longer
    spans first; edges ending at the same index keep their chart order.

    :param chart: The finished chart.
    :return: ``edges[origin]`` lists every edge that starts at ``origin``.
    """

    edges: list[list[Edge]] = [[] for _ in range(len(chart))]
    for end in range(len(chart) - 1, -1, -1):
        for item in chart[end]:
            if item.is_complete:
                edges[item.origin].append(Edge(item.origin, end, item.rule))
    return edges


class _Extractor:
    """Holds the lookups shared by one extraction: edges, tokens and memo tables."""

    def __init__(self, chart: Chart, grammar: Grammar, max_depth: int):
        self.grammar = grammar
        self.tokens = chart.tokens
        self.edges = index_edges(chart)
        self.max_depth = max_depth
        self.failed_splits: set[tuple[int, int, int, int]] = set()
        self.active: set[tuple[int, int, int]] = set()

    def leaf(self, symbol: int, position: int) -> ParseNode:
        return ParseNode(symbol, text=self.tokens[position].text)

    def find_split(self, frm: int, to: int, rule: Rule, index: int) -> list[Edge | int] | None:
        """
        Matches ``rule.body[index:]`` against the span ``[frm, to)``.

        A non-terminal is covered by an edge starting at ``frm`` with the same
        head and an end not past ``to``; a terminal by the token at ``frm``.
        Candidates are tried in index order and the search backtracks on
        failure.

        :return: The pieces in reverse body order, an :class:`Edge` per
            non-terminal and a token position per terminal, or None when no
            split exists.
        """

        if index == len(rule.body):
            return [] if frm == to else None
        key = (frm, to, rule.id, index)
        if key in self.failed_splits:
            return None

        symbol = rule.body[index]
        if self.grammar.is_terminal(symbol):
            if frm < to and self.tokens[frm].terminal == symbol:
                rest = self.find_split(frm + 1, to, rule, index + 1)
                if rest is not None:
                    rest.append(frm)
                    return rest
        else:
            for edge in self.edges[frm]:
                if edge.head != symbol or edge.end > to:
                    continue
                rest = self.find_split(edge.end, to, rule, index + 1)
                if rest is not None:
                    rest.append(edge)
                    return rest

        self.failed_splits.add(key)
        return None

    def build_tree(self, frm: int, to: int, symbol: int, depth: int = 0) -> ParseNode | None:
        """
        Rebuilds one derivation of ``symbol`` over ``[frm, to)``.

        :return: The subtree, or None if no candidate edge can be turned into
            a tree for this exact span.
        :raises AstReconstructionFailure: If the tree nests deeper than ``max_depth``.
        """

        if self.grammar.is_terminal(symbol):
            return self.leaf(symbol, frm)
        if depth > self.max_depth:
            raise AstReconstructionFailure(
                f"Derivation nests deeper than max_depth={self.max_depth}")

        key = (frm, to, symbol)
        if key in self.active:
            # unit-rule cycle, e.g. A -> B and B -> A over the same span
            return None
        self.active.add(key)
        try:
            for edge in self.edges[frm]:
                if edge.head != symbol or edge.end != to:
                    continue
                node = self._build_from_edge(edge, depth)
                if node is not None:
                    return node
                log.debug(f"Backtracking from {self.grammar.name(symbol)} [{frm}, {to}) via rule {edge.rule.id}")
            return None
        finally:
            self.active.discard(key)

    def _build_from_edge(self, edge: Edge, depth: int) -> ParseNode | None:
        rule = edge.rule
        body = rule.body
        if all(self.grammar.is_terminal(s) for s in body):
            if edge.end - edge.origin != len(body):
                return None
            children = [self.leaf(s, edge.origin + k) for k, s in enumerate(body)]
            return ParseNode(rule.head, children)

        split = self.find_split(edge.origin, edge.end, rule, 0)
        if split is None:
            return None

        children = []
        inner_from = edge.origin
        for piece, symbol in zip(reversed(split), body):
            if isinstance(piece, Edge):
                child = self.build_tree(inner_from, piece.end, symbol, depth + 1)
                if child is None:
                    return None
                inner_from = piece.end
            else:
                child = self.leaf(symbol, piece)
                inner_from = piece + 1
            children.append(child)
        return ParseNode(rule.head, children)


def extract(chart: Chart, grammar: Grammar, max_depth: int = DEFAULT_MAX_DEPTH) -> ParseNode:
    """
    Extracts one derivation tree from a finished chart.

    Acceptance is checked first; then the tree for the start symbol is
    rebuilt over ``[0, n)``, ``n`` being the index of the end-of-input token.

    :param chart: A chart from :func:`earleytree.recognizer.recognize`.
    :param grammar: The grammar the chart was built with.
    :param max_depth: Maximum nesting of non-terminal nodes.
    :return: The root of the derivation tree.
    :raises Rejected: If the chart does not accept the input.
    :raises AstReconstructionFailure: If the input is accepted yet no tree can be rebuilt.
    """

    if not chart.accepted(grammar.start):
        raise Rejected(chart.token_count)

    extractor = _Extractor(chart, grammar, max_depth)
    tree = extractor.build_tree(0, len(chart.tokens) - 1, grammar.start)
    if tree is None:
        raise AstReconstructionFailure(
            f"No derivation of {grammar.name(grammar.start)!r} could be rebuilt from the chart")
    return tree
