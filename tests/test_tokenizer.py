import pytest

from earleytree import UnknownTerminalError, tokenize
from earleytree.grammar import END_OF_INPUT_ID


def test_tokens_end_with_end_of_input(sum_grammar):
    tokens = tokenize(sum_grammar, "  1 + 1 1\n")
    assert [t.text for t in tokens[:-1]] == ["1", "+", "1", "1"]
    assert tokens[-1].terminal == END_OF_INPUT_ID
    one = sum_grammar.symbol_named("1").id
    assert tokens[0].terminal == one


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_empty_input_has_only_end_of_input(sum_grammar, text):
    tokens = tokenize(sum_grammar, text)
    assert len(tokens) == 1
    assert tokens[0].terminal == END_OF_INPUT_ID


def test_unknown_atom(sum_grammar):
    with pytest.raises(UnknownTerminalError) as exc:
        tokenize(sum_grammar, "1 + 2")
    assert exc.value.atom == "2"
    assert exc.value.position == 3


def test_non_terminal_names_are_not_tokens(sum_grammar):
    with pytest.raises(UnknownTerminalError):
        tokenize(sum_grammar, "Number")
