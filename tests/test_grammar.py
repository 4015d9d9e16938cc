import pytest

from earleytree import GrammarFormatError, parse_rules
from earleytree.grammar import END_OF_INPUT_ID, END_OF_INPUT_NAME, load_grammar, split_alternatives


def test_symbols_and_rules(sum_grammar):
    g = sum_grammar
    assert g.symbol(END_OF_INPUT_ID).name == END_OF_INPUT_NAME
    assert g.symbol(END_OF_INPUT_ID).is_terminal
    assert [s.name for s in g.symbols] == [END_OF_INPUT_NAME, "Sum", "Number", "+", "1"]
    assert g.start_symbol.name == "Sum"
    assert not g.symbol_named("Number").is_terminal
    assert g.symbol_named("+").is_terminal
    assert len(g.rules) == 4
    assert [r.id for r in g.rules] == [0, 1, 2, 3]


def test_rules_for_keeps_declaration_order(sum_grammar):
    g = sum_grammar
    number = g.symbol_named("Number").id
    bodies = [[g.name(s) for s in r.body] for r in g.rules_for(number)]
    assert bodies == [["1"], ["Number", "1"]]
    assert g.rules_for(g.symbol_named("1").id) == ()


def test_alternatives_and_comments():
    g = parse_rules("# a comment\n\nS -> 'a' | 'b' S\n")
    assert len(g.rules) == 2
    assert [len(r.body) for r in g.rules] == [1, 2]


def test_split_alternatives():
    assert split_alternatives(["a", "|", "b", "c"]) == [["a"], ["b", "c"]]
    assert split_alternatives(["'|'"]) == [["'|'"]]


def test_quoted_pipe_is_a_terminal():
    g = parse_rules("S -> 'a' '|' 'b'")
    assert g.symbol_named("|").is_terminal
    assert len(g.rules) == 1


def test_head_overrides_quoted_terminal():
    g = parse_rules("S -> 'A' 'b'\nA -> 'c'")
    assert not g.symbol_named("A").is_terminal
    assert g.symbol_named("b").is_terminal


def test_unquoted_atom_reuses_known_terminal():
    g = parse_rules("S -> 'x' x")
    x = g.symbol_named("x")
    assert x.is_terminal
    assert g.rules[0].body == (x.id, x.id)


def test_start_override():
    g = parse_rules("S -> A\nA -> 'a'", start="A")
    assert g.start_symbol.name == "A"


@pytest.mark.parametrize("text", [
    "S 'a'",
    "S = 'a'",
    "S",
    "-> 'a'",
    "S ->",
    "S -> 'a' |",
    "S -> ''",
    "'S' -> 'a'",
    "",
    "# only a comment",
])
def test_malformed_grammar(text):
    with pytest.raises(GrammarFormatError):
        parse_rules(text)


def test_error_reports_line_number():
    with pytest.raises(GrammarFormatError, match="Line 2: missing '->'") as exc:
        parse_rules("S -> 'a'\nS 'b'")
    assert exc.value.line == 2
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize("start", ["Nope", "a"])
def test_bad_start_symbol(start):
    with pytest.raises(GrammarFormatError):
        parse_rules("S -> 'a'", start=start)


def test_undefined_non_terminal_is_logged(caplog):
    with caplog.at_level("WARNING"):
        parse_rules("S -> Missing 'a'")
    assert "Missing" in caplog.text


def test_grammar_is_immutable(sum_grammar):
    with pytest.raises(AttributeError):
        sum_grammar.start = 2


def test_load_grammar(tmp_path):
    path = tmp_path / "g.txt"
    path.write_text("S -> 'a' S\nS -> 'a'\n", encoding="utf-8")
    g = load_grammar(path)
    assert len(g.rules) == 2
