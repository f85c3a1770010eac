"""grammar_sets – 문맥 자유 문법의 FIRST/FOLLOW 집합 계산기.

공개 진입점:
- validate_grammar(start, terminals, non_terminals, rules) -> Grammar | int
- compute_first_and_follow(grammar) -> (FIRST by name, FOLLOW by name)
"""

from .grammar.errors import Diagnostic, Diagnostics, ErrorKind
from .grammar.raw import RawGrammar, RawRule
from .grammar.validate import Grammar, Rule, validate_grammar, validate_raw
from .sets.symbols import EMPTY_NAME, END_NAME, SymbolClass, SymbolTable
from .sets.first_follow import FFResult, analyze, compute_first_and_follow
