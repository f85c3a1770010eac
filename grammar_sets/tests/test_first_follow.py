from pathlib import Path

from grammar_sets.grammar.loader import load_grammar_text
from grammar_sets.grammar.parser import parse_grammar
from grammar_sets.grammar.validate import Grammar, validate_grammar, validate_raw
from grammar_sets.sets.first_follow import (
    analyze, compute_first, compute_first_and_follow, first_of_sequence,
)
from grammar_sets.sets.symbols import EMPTY, END

GRAMMARS = Path(__file__).parent / "grammar_test"


def _grammar(start, terms, nonterms, rules) -> Grammar:
    g = validate_grammar(start, terms, nonterms, rules)
    assert isinstance(g, Grammar), g
    return g


def _from_file(name: str) -> Grammar:
    g = validate_raw(parse_grammar(load_grammar_text(str(GRAMMARS / name))))
    assert isinstance(g, Grammar)
    return g


def test_simple_scenario():
    g = _grammar("S", ["a", "b"], ["S", "A"], [("S", ["A", "b"]), ("A", ["a"])])
    first, follow = compute_first_and_follow(g)
    assert first == {"S": {"a"}, "A": {"a"}}
    assert follow == {"S": {"$"}, "A": {"b"}}


def test_epsilon_scenario():
    g = _grammar("S", ["a", "b"], ["S", "A"], [("S", ["A", "b"]), ("A", ["EMPTY"])])
    first, follow = compute_first_and_follow(g)
    assert first["A"] == {"EMPTY"}
    assert first["S"] == {"b"}
    assert follow["A"] == {"b"}
    assert follow["S"] == {"$"}


def test_expression_grammar():
    first, follow = compute_first_and_follow(_from_file("expr.g"))
    assert first == {
        "E": {"lparen", "id"},
        "T": {"lparen", "id"},
        "F": {"lparen", "id"},
        "Ep": {"plus", "EMPTY"},
        "Tp": {"times", "EMPTY"},
    }
    assert follow == {
        "E": {"rparen", "$"},
        "Ep": {"rparen", "$"},
        "T": {"plus", "rparen", "$"},
        "Tp": {"plus", "rparen", "$"},
        "F": {"times", "plus", "rparen", "$"},
    }


def test_left_recursion_terminates():
    g = _grammar(
        "E", ["plus", "id"], ["E", "T"],
        [("E", ["E", "plus", "T"]), ("E", ["T"]), ("T", ["id"])],
    )
    first, follow = compute_first_and_follow(g)
    assert first == {"E": {"id"}, "T": {"id"}}
    assert follow == {"E": {"plus", "$"}, "T": {"plus", "$"}}


def test_vanishing_remainder_propagates_head_follow():
    g = _grammar(
        "S", ["c"], ["S", "A", "B"],
        [("S", ["A", "B"]), ("S", ["c"]), ("A", ["EMPTY"]), ("B", ["EMPTY"])],
    )
    first, follow = compute_first_and_follow(g)
    assert first["S"] == {"c", "EMPTY"}
    assert follow["A"] == {"$"}
    assert follow["B"] == {"$"}


def test_nullable_prefix_extends_first():
    g = _grammar(
        "S", ["x", "y"], ["S", "A", "B"],
        [("S", ["A", "B", "y"]), ("A", ["EMPTY"]), ("A", ["x"]), ("B", ["EMPTY"])],
    )
    first, follow = compute_first_and_follow(g)
    assert first["S"] == {"x", "y"}
    assert follow["A"] == {"y"}
    assert follow["B"] == {"y"}


def test_terminal_first_is_itself():
    g = _from_file("expr.g")
    first, _ = compute_first(g)
    for t in g.terminals:
        assert first[t] == {t}


def test_follow_of_start_contains_end():
    for name in ("expr.g", "simple.g"):
        ff = analyze(_from_file(name))
        assert END in ff.follow[ff.grammar.start]


def test_epsilon_rule_puts_empty_in_first():
    ff = analyze(_from_file("expr.g"))
    g = ff.grammar
    for rule in g.rules:
        if rule.is_epsilon:
            assert EMPTY in ff.first[rule.head]


def test_rule_order_does_not_matter():
    rules = [
        ("E", ["T", "Ep"]), ("Ep", ["plus", "T", "Ep"]), ("Ep", ["EMPTY"]),
        ("T", ["F", "Tp"]), ("Tp", ["times", "F", "Tp"]), ("Tp", ["EMPTY"]),
        ("F", ["lparen", "E", "rparen"]), ("F", ["id"]),
    ]
    args = ("E", ["plus", "times", "lparen", "rparen", "id"], ["E", "Ep", "T", "Tp", "F"])
    forward = compute_first_and_follow(_grammar(*args, rules))
    backward = compute_first_and_follow(_grammar(*args, list(reversed(rules))))
    assert forward == backward


def test_recomputation_is_idempotent():
    g = _from_file("expr.g")
    assert compute_first_and_follow(g) == compute_first_and_follow(g)


def test_passes_reach_fixed_point():
    ff = analyze(_from_file("expr.g"))
    # 마지막 한 바퀴는 변화 없음을 확인하는 패스
    assert ff.first_passes >= 2
    assert ff.follow_passes >= 2


def test_first_of_sequence():
    g = _grammar("S", ["b"], ["S", "A"], [("S", ["A", "b"]), ("A", ["EMPTY"])])
    first, _ = compute_first(g)
    a = g.symbols.id_for_name("A")
    b = g.symbols.id_for_name("b")
    assert first_of_sequence(first, ()) == {EMPTY}
    assert first_of_sequence(first, (a,)) == {EMPTY}
    assert first_of_sequence(first, (a, b)) == {b}
    assert first_of_sequence(first, (EMPTY,)) == {EMPTY}
