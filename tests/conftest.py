import pytest

from earleytree import parse_rules

SUM_RULES = """\
Sum -> Number
Sum -> Number '+' Sum
Number -> '1'
Number -> Number '1'
"""


@pytest.fixture
def sum_grammar():
    return parse_rules(SUM_RULES)


@pytest.fixture
def names():
    """Nested (label, children) tuples of a tree, leaves as token text."""

    def _names(grammar, node):
        if node.is_leaf:
            return node.text
        return (grammar.name(node.symbol), [_names(grammar, c) for c in node.children])

    return _names
