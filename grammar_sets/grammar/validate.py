# grammar_sets/grammar/validate.py
"""RawGrammar(이름 기반)를 검증해 ID 기반 Grammar로 변환"""

from __future__     import annotations
from dataclasses    import dataclass
from typing         import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union
from .errors        import Diagnostics, ErrorKind
from .raw           import RawGrammar, RawRule
from ..sets.symbols import (
    EMPTY, EMPTY_NAME, DuplicateDeclaration, Marker, SymbolClass,
    SymbolTable, SymbolTableBuilder, is_empty_name, is_reserved_name,
)

# 우변 원소: 심볼 ID 또는 ε 표식
RuleSymbol = Union[int, Marker]
RawRuleLike = Union[RawRule, Tuple[str, Sequence[str]]]


@dataclass(frozen=True)
class Rule:
    """
    검증된 프로덕션 1개.
    - head     : 좌변 비단말 ID
    - alternate: 우변 심볼 ID 튜플. ε-프로덕션은 (EMPTY,) 한 원소
    - index    : 원래 선언 순번(출력/진단 순서용)
    """
    head: int
    alternate: Tuple[RuleSymbol, ...]
    index: int = 0

    @property
    def is_epsilon(self) -> bool:
        return self.alternate == (EMPTY,)


@dataclass(frozen=True, eq=False)
class Grammar:
    """
    Grammar
    =======
    검증이 끝난 불변 문법입니다. validate_grammar()만 만듭니다.

    불변식
    ------
    - 모든 Rule.head 는 non_terminals 에 속함
    - 모든 우변 ID 는 terminals 또는 non_terminals 에 속함
      (예외: ε-프로덕션의 유일한 원소 EMPTY)
    - start 는 non_terminals 에 속하고, start 를 좌변으로 하는 규칙이 1개 이상
    """
    symbols: SymbolTable
    terminals: FrozenSet[int]
    non_terminals: FrozenSet[int]
    rules: Tuple[Rule, ...]
    start: int

    @property
    def start_name(self) -> str:
        return self.symbols.name_for_id(self.start)

    def format_rule(self, rule: Rule) -> str:
        rhs = " ".join(
            EMPTY_NAME if s is EMPTY else self.symbols.name_for_id(s)
            for s in rule.alternate
        )
        return f"{self.symbols.name_for_id(rule.head)} -> {rhs} ."

    def __repr__(self) -> str:
        return (f"Grammar(start={self.start_name!r}, terminals={len(self.terminals)}, "
                f"non_terminals={len(self.non_terminals)}, rules={len(self.rules)})")


class _UndeclaredHead(Exception):
    """규칙 좌변이 어디에도 선언되지 않음 → 검증 중단 신호(모듈 내부 전용)."""


class _Validation:
    """
    단계별 검증기. 모든 단계는 같은 Diagnostics 에 오류를 누적합니다.

    1) 단말 등록       2) 비단말 등록      3) 시작기호 등록
    4) 규칙 검증       5) 시작 규칙 존재   6) 확정(오류 0개일 때만)
    """

    def __init__(self, sink: Diagnostics):
        self.sink = sink
        self.table = SymbolTableBuilder()
        self.terminals: set = set()
        self.non_terminals: set = set()
        self.rules: List[Rule] = []
        self.start_id: Optional[int] = None

    # ---------- 1) 단말 ----------
    def register_terminals(self, names: Iterable[str]) -> None:
        for name in names:
            if self._reserved(name, "terminal"):
                continue
            # 단말 블록이 가장 먼저 등록되므로 분류 충돌이 없음
            self.terminals.add(self.table.insert(name, SymbolClass.TERMINAL))

    # ---------- 2) 비단말 ----------
    def register_non_terminals(self, names: Iterable[str]) -> None:
        for name in names:
            if self._reserved(name, "non-terminal"):
                continue
            try:
                sid = self.table.insert(name, SymbolClass.NONTERMINAL)
            except DuplicateDeclaration:
                self.sink.report(
                    ErrorKind.CONFLICTING_DECLARATION,
                    f"{name} is listed as both a terminal and a non-terminal",
                    name=name,
                )
                continue
            self.non_terminals.add(sid)

    # ---------- 3) 시작기호 ----------
    def register_start(self, start: str) -> None:
        if self._reserved(start, "start symbol"):
            return
        try:
            sid = self.table.insert(start, SymbolClass.NONTERMINAL)
        except DuplicateDeclaration:
            self.sink.report(
                ErrorKind.START_SYMBOL_CONFLICT,
                f"{start} is listed as both a terminal and the start symbol",
                name=start,
            )
            return
        self.non_terminals.add(sid)
        self.start_id = sid

    # ---------- 4) 규칙 ----------
    def check_rules(self, rules: Iterable[RawRule], start: str) -> bool:
        """모든 규칙을 검증합니다. 시작기호를 좌변으로 하는 규칙이 있었는지 반환."""
        found_start_rule = False
        for index, raw in enumerate(rules):
            if raw.head == start:
                found_start_rule = True
            head_id = self._resolve_head(raw, index)
            if head_id is None:
                continue
            alternate = self._resolve_alternate(raw, index)
            self.rules.append(Rule(head=head_id, alternate=alternate, index=index))
        return found_start_rule

    def _resolve_head(self, raw: RawRule, index: int) -> Optional[int]:
        if is_empty_name(raw.head):
            self.sink.report(
                ErrorKind.EMPTY_AS_RULE_HEAD,
                f"{EMPTY_NAME} is reserved for the empty derivation and cannot be a rule head",
                name=raw.head, rule_index=index, span=raw.span,
            )
            return None
        if is_reserved_name(raw.head):
            self.sink.report(
                ErrorKind.RESERVED_NAME_MISUSE,
                f"{raw.head} is reserved for end of input and cannot be a rule head",
                name=raw.head, rule_index=index, span=raw.span,
            )
            return None
        found = self.table.lookup(raw.head)
        if found is None:
            self.sink.report(
                ErrorKind.UNDECLARED_RULE_HEAD,
                f"{raw.head} was used as a rule head but was not declared as a non-terminal",
                name=raw.head, rule_index=index, span=raw.span,
            )
            raise _UndeclaredHead(raw.head)
        sid, cls = found
        if cls is SymbolClass.TERMINAL:
            self.sink.report(
                ErrorKind.TERMINAL_USED_AS_HEAD,
                f"{raw.head} was listed as a terminal, but also used as a rule head",
                name=raw.head, rule_index=index, span=raw.span,
            )
        return sid

    def _resolve_alternate(self, raw: RawRule, index: int) -> Tuple[RuleSymbol, ...]:
        names = list(raw.alternate)
        # 빈 우변은 ε-프로덕션과 같게 취급
        if not names or (len(names) == 1 and is_empty_name(names[0])):
            return (EMPTY,)

        out: List[RuleSymbol] = []
        misplaced = False
        for name in names:
            if is_empty_name(name):
                misplaced = True
                continue
            found = self.table.lookup(name)
            if found is None:
                self.sink.report(
                    ErrorKind.UNDECLARED_SYMBOL,
                    f"{name} was used in a rule alternate, but was not declared",
                    name=name, rule_index=index, span=raw.span,
                )
                continue
            out.append(found[0])
        if misplaced:
            self.sink.report(
                ErrorKind.MISPLACED_EMPTY_SYMBOL,
                f"{EMPTY_NAME} must be the only symbol of an alternate: {raw.head} -> {' '.join(names)}",
                name=raw.head, rule_index=index, span=raw.span,
            )
        return tuple(out)

    # ---------- 5) 시작 규칙 ----------
    def check_start_rule(self, found: bool, start: str) -> None:
        if not found:
            self.sink.report(
                ErrorKind.START_SYMBOL_HAS_NO_RULE,
                f"there was no rule with the start symbol, {start}, as the head",
                name=start,
            )

    # ---------- 6) 확정 ----------
    def finalize(self) -> Grammar:
        # 단말/비단말 서로소 확인 (insert 단계에서 이미 보장됨)
        assert not (self.terminals & self.non_terminals)
        assert self.start_id is not None
        return Grammar(
            symbols=self.table.freeze(),
            terminals=frozenset(self.terminals),
            non_terminals=frozenset(self.non_terminals),
            rules=tuple(self.rules),
            start=self.start_id,
        )

    def _reserved(self, name: str, role: str) -> bool:
        if is_reserved_name(name):
            what = "the empty derivation" if is_empty_name(name) else "end of input"
            self.sink.report(
                ErrorKind.RESERVED_NAME_MISUSE,
                f"{name} is reserved for {what} and cannot be declared as a {role}",
                name=name,
            )
            return True
        return False


def _as_raw_rule(r: RawRuleLike) -> RawRule:
    if isinstance(r, RawRule):
        return r
    head, alternate = r
    return RawRule(head=head, alternate=list(alternate))


def validate_grammar(
    start: str,
    terminals: Sequence[str],
    non_terminals: Sequence[str],
    rules: Iterable[RawRuleLike],
    sink: Optional[Diagnostics] = None,
) -> Union[Grammar, int]:
    """
    validate_grammar
    ================
    선언(이름 문자열)과 규칙을 검증해 Grammar 를 만듭니다.

    - 오류는 모두 sink(Diagnostics)에 누적되고, 첫 오류에서 멈추지 않습니다.
    - 예외: 선언되지 않은 규칙 좌변(UndeclaredRuleHead)은 즉시 중단합니다.
    - 오류가 하나라도 있으면 Grammar 대신 **오류 개수(int)** 를 반환합니다.
      부분적으로 만들어진 구조는 밖으로 나가지 않습니다.
    """
    if sink is None:
        sink = Diagnostics()
    before = len(sink)
    v = _Validation(sink)
    raw_rules = [_as_raw_rule(r) for r in rules]

    v.register_terminals(terminals)
    v.register_non_terminals(non_terminals)
    v.register_start(start)
    try:
        found = v.check_rules(raw_rules, start)
    except _UndeclaredHead:
        return len(sink) - before
    v.check_start_rule(found, start)

    errors = len(sink) - before
    if errors:
        return errors
    return v.finalize()


def validate_raw(raw: RawGrammar, sink: Optional[Diagnostics] = None) -> Union[Grammar, int]:
    """파서가 만든 RawGrammar 를 그대로 검증합니다."""
    return validate_grammar(raw.start, raw.terminals, raw.non_terminals, raw.rules, sink)
