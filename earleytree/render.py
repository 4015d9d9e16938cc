"""Human-readable output for grammars, charts and derivation trees."""

from nltk import Tree

from .forest import ParseNode
from .grammar import Grammar, Rule
from .recognizer import Chart, EarleyItem

DOT = "•"


def format_rule(rule: Rule, grammar: Grammar) -> str:
    body = " ".join(grammar.name(s) for s in rule.body)
    return f"{grammar.name(rule.head)} -> {body}"


def format_grammar(grammar: Grammar) -> str:
    """Start symbol line followed by one line per rule, in declaration order."""
    lines = [f"Start symbol: {grammar.start_symbol.name}"]
    lines.extend(format_rule(rule, grammar) for rule in grammar.rules)
    return "\n".join(lines)


def format_item(item: EarleyItem, grammar: Grammar) -> str:
    names = [grammar.name(s) for s in item.rule.body]
    names.insert(item.dot, DOT)
    return f"({item.origin}) {grammar.name(item.rule.head)} -> {' '.join(names)}"


def format_chart(chart: Chart, grammar: Grammar, show_tokens: bool = True) -> str:
    """
    Lists the items of every state set. Between two sets a line gives the
    index of the token consumed, and its text when ``show_tokens`` is set.

    :param chart: The chart to print.
    :param grammar: The grammar the chart was built with.
    :param show_tokens: Whether to print token texts next to their index.
    :return: The listing, one item per line.
    """

    lines = []
    for index, state_set in enumerate(chart):
        lines.extend(format_item(item, grammar) for item in state_set)
        if index < len(chart.tokens):
            lines.append(f"{index}: {chart.tokens[index].text}" if show_tokens else f"{index}")
    return "\n".join(lines)


def node_label(node: ParseNode, grammar: Grammar) -> str:
    if node.is_leaf and node.text is not None:
        return node.text
    return grammar.name(node.symbol)


def format_tree(node: ParseNode, grammar: Grammar, indent: str = "", last: bool = True) -> str:
    """Indented ASCII drawing of ``node``, using ``|-`` and ``\\-`` branches."""
    if last:
        line = f"{indent}\\-{node_label(node, grammar)}\n"
        child_indent = indent + "  "
    else:
        line = f"{indent}|-{node_label(node, grammar)}\n"
        child_indent = indent + "| "
    parts = [line]
    for i, child in enumerate(node.children):
        parts.append(format_tree(child, grammar, child_indent, i == len(node.children) - 1))
    return "".join(parts)


def to_bracketed(node: ParseNode, grammar: Grammar) -> str:
    """
    Formats a tree in bracket notation, e.g. ``[Sum [Number 1] + [Sum ...]]``.

    Terminal leaves are written as their token text. A node with a single
    terminal child is written compactly as ``[Label text]``.

    :param node: The root of the tree.
    :param grammar: Grammar used to resolve symbol names.
    :return: The bracketed string.
    """

    if node.is_leaf:
        return node_label(node, grammar)

    label = grammar.name(node.symbol)
    child_strs = [to_bracketed(c, grammar) for c in node.children]
    return f"[{label} " + " ".join(child_strs) + "]"


def to_nltk_tree(node: ParseNode, grammar: Grammar) -> Tree | str:
    """
    Converts a derivation tree to an :class:`nltk.Tree`. Terminal leaves
    become plain strings, as NLTK expects.
    """

    if node.is_leaf:
        return node_label(node, grammar)
    return Tree(grammar.name(node.symbol), [to_nltk_tree(c, grammar) for c in node.children])


def display_tree(node: ParseNode, grammar: Grammar, pretty_print: bool = True, draw: bool = False) -> None:
    """
    Prints a derivation tree in bracket notation and, optionally, as an NLTK
    text drawing or an NLTK window.

    :param node: The root of the tree.
    :param grammar: Grammar used to resolve symbol names.
    :param pretty_print: Whether to print the NLTK text drawing. Defaults to True.
    :param draw: Whether to open the interactive NLTK tree window. Defaults to False.
    :return: None.
    """

    print(to_bracketed(node, grammar))

    t = to_nltk_tree(node, grammar)
    if not isinstance(t, Tree):
        return
    if pretty_print:
        print()
        t.pretty_print()
    if draw:
        t.draw()
