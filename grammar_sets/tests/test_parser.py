import pytest

from grammar_sets.grammar.parser import parse_grammar
from grammar_sets.grammar.raw import RawRule

SRC = """\
:Start: S
:Terminals: a b   # 단말
:NonTerminals: S A
:Rules:
  S -> A b .
  A -> a .
  A -> EMPTY .
"""


def test_parse_sections():
    g = parse_grammar(SRC)
    assert g.start == "S"
    assert g.terminals == ["a", "b"]
    assert g.non_terminals == ["S", "A"]
    assert [(r.head, r.alternate) for r in g.rules] == [
        ("S", ["A", "b"]),
        ("A", ["a"]),
        ("A", ["EMPTY"]),
    ]


def test_rule_spans():
    g = parse_grammar(SRC)
    span = g.rules[1].span
    assert (span.line, span.col) == (6, 3)
    assert SRC[span.start:span.end] == "A -> a ."
    assert str(g.rules[0]) == "S -> A b ."


def test_single_line_and_unicode_names():
    g = parse_grammar(":Start: 식 :Terminals: x :NonTerminals: 식 :Rules: 식 -> x . 식->x 식.")
    assert g.start == "식"
    assert g.rules[1] == RawRule("식", ["x", "식"], g.rules[1].span)


@pytest.mark.parametrize("src, expected", [
    ("", "Expected ':Start:'"),
    (":Start: :Terminals: a", "Expected a single alphanumeric name"),
    (":Start: S :NonTerminals: S", "Expected ':Terminals:'"),
    (":Start: S :Terminals: :NonTerminals: S", "Expected a whitespace separated list"),
    (":Start: S :Terminals: a :NonTerminals: S", "Expected ':Rules:'"),
    (":Start: S :Terminals: a :NonTerminals: S :Rules:", "Expected alphanumeric name for head of rule"),
    (":Start: S :Terminals: a :NonTerminals: S :Rules: S a .", "Expected '->'"),
    (":Start: S :Terminals: a :NonTerminals: S :Rules: S -> a", "Expected '.'"),
])
def test_syntax_errors(src, expected):
    with pytest.raises(SyntaxError) as exc:
        parse_grammar(src)
    assert expected in str(exc.value)


def test_leftover_input():
    with pytest.raises(SyntaxError) as exc:
        parse_grammar(":Start: S :Terminals: a :NonTerminals: S :Rules: S -> a . .")
    assert "leftover input" in str(exc.value)


def test_unexpected_char_reports_position():
    with pytest.raises(SyntaxError) as exc:
        parse_grammar(":Start: S\n:Terminals: a @\n")
    msg = str(exc.value)
    assert "Unexpected char '@' at 2:15" in msg
    assert msg.endswith(":Terminals: a @\n              ^")
