from nltk import Tree

from earleytree import parse, recognize, tokenize
from earleytree.render import (display_tree, format_chart, format_grammar, format_item, format_tree, to_bracketed,
                               to_nltk_tree)


def test_format_grammar(sum_grammar):
    assert format_grammar(sum_grammar).splitlines() == [
        "Start symbol: Sum",
        "Sum -> Number",
        "Sum -> Number + Sum",
        "Number -> 1",
        "Number -> Number 1",
    ]


def test_format_chart(sum_grammar):
    chart = recognize(sum_grammar, tokenize(sum_grammar, "1"))
    lines = format_chart(chart, sum_grammar).splitlines()
    assert lines[0] == "(0) Sum -> • Number"
    assert "0: 1" in lines
    assert "(0) Number -> 1 •" in lines
    assert lines[-1] == "1: End of input"
    assert "0" in format_chart(chart, sum_grammar, show_tokens=False).splitlines()


def test_format_item_dot_position(sum_grammar):
    chart = recognize(sum_grammar, tokenize(sum_grammar, "1 +"))
    assert [format_item(i, sum_grammar) for i in chart[2]] == ["(0) Sum -> Number + • Sum",
                                                              "(2) Sum -> • Number",
                                                              "(2) Sum -> • Number + Sum",
                                                              "(2) Number -> • 1",
                                                              "(2) Number -> • Number 1"]


def test_format_tree(sum_grammar):
    tree = parse(sum_grammar, "1 + 1 1").tree
    assert format_tree(tree, sum_grammar) == (
        "\\-Sum\n"
        "  |-Number\n"
        "  | \\-1\n"
        "  |-+\n"
        "  \\-Sum\n"
        "    \\-Number\n"
        "      |-Number\n"
        "      | \\-1\n"
        "      \\-1\n"
    )


def test_to_bracketed(sum_grammar):
    tree = parse(sum_grammar, "1 + 1 1").tree
    assert to_bracketed(tree, sum_grammar) == "[Sum [Number 1] + [Sum [Number [Number 1] 1]]]"


def test_to_nltk_tree(sum_grammar):
    tree = to_nltk_tree(parse(sum_grammar, "1 + 1 1").tree, sum_grammar)
    assert isinstance(tree, Tree)
    assert tree.label() == "Sum"
    assert tree.leaves() == ["1", "+", "1", "1"]
    assert tree[2][0].label() == "Number"


def test_display_tree(sum_grammar, capsys):
    tree = parse(sum_grammar, "1 1").tree
    display_tree(tree, sum_grammar, pretty_print=True, draw=False)
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "[Sum [Number [Number 1] 1]]"
    assert len(out.splitlines()) > 2
