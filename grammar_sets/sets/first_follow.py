from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, Set, Tuple, Union
from dataclasses import dataclass
from ..grammar.validate import Grammar
from .symbols import EMPTY, END, Marker

# FIRST/FOLLOW 집합 원소: 단말 ID 또는 EMPTY/END 표식
Entry = Union[int, Marker]
SetMap = Dict[int, Set[Entry]]


@dataclass
class FFResult:
    """
    FFResult
    ========
    FIRST/FOLLOW 계산 결과(ID 기반) 컨테이너입니다.

    - first : 모든 **심볼 ID** → FIRST 집합
      * 단말 a : FIRST(a) = { a }
      * 비단말 A: 단말 ID들, 그리고 A가 ε을 유도하면 EMPTY
    - follow: 모든 **비단말 ID** → FOLLOW 집합(단말 ID들, END)
      * 시작기호 S 에는 항상 END 가 포함됩니다.
    - first_passes / follow_passes: 고정점까지 돈 반복 횟수(디버그용)
    """
    grammar: Grammar
    first: SetMap
    follow: SetMap
    first_passes: int = 0
    follow_passes: int = 0

    def label(self, entry: Entry) -> str:
        """집합 원소를 출력용 이름으로 되돌립니다."""
        if isinstance(entry, Marker):
            return entry.label
        return self.grammar.symbols.name_for_id(entry)

    def _by_name(self, sets: SetMap) -> Dict[str, FrozenSet[str]]:
        out: Dict[str, FrozenSet[str]] = {}
        for sid in self.grammar.non_terminals:
            out[self.grammar.symbols.name_for_id(sid)] = frozenset(self.label(e) for e in sets[sid])
        return out

    def first_by_name(self) -> Dict[str, FrozenSet[str]]:
        return self._by_name(self.first)

    def follow_by_name(self) -> Dict[str, FrozenSet[str]]:
        return self._by_name(self.follow)


def first_of_sequence(first: SetMap, seq: Iterable[Entry]) -> Set[Entry]:
    """
    심볼 시퀀스 seq 의 FIRST 집합.
    왼쪽부터 FIRST(X) \\ {EMPTY} 를 더하고, X 가 ε을 유도할 때만 다음 심볼로 진행합니다.
    모든 심볼이 ε을 유도하면(빈 시퀀스 포함) EMPTY 를 넣습니다.
    """
    out: Set[Entry] = set()
    for X in seq:
        if X is EMPTY:
            # ε-프로덕션의 유일한 원소
            continue
        fx = first.get(X)
        assert fx is not None, f"symbol id {X} missing from FIRST (validator contract)"
        out |= fx - {EMPTY}
        if EMPTY not in fx:
            return out
    out.add(EMPTY)
    return out


def compute_first(grammar: Grammar) -> Tuple[SetMap, int]:
    """
    FIRST 고정점
    -----------
    - 단말 T: FIRST(T) = { T } (초기화 후 변하지 않음)
    - H -> s1 ... sn: first_of_sequence(s1 ... sn) 를 FIRST(H) 에 합침
    - H -> EMPTY: EMPTY 를 FIRST(H) 에 추가 (first_of_sequence 가 그대로 처리)
    한 바퀴 동안 아무 집합도 커지지 않으면 종료합니다.
    """
    first: SetMap = {t: {t} for t in grammar.terminals}
    for A in grammar.non_terminals:
        first[A] = set()

    passes = 0
    changed = True
    while changed:
        changed = False
        passes += 1
        for rule in grammar.rules:
            f_alpha = first_of_sequence(first, rule.alternate)
            target = first[rule.head]
            before = len(target)
            target |= f_alpha
            if len(target) != before:
                changed = True
    return first, passes


def compute_follow(grammar: Grammar, first: SetMap) -> Tuple[SetMap, int]:
    """
    FOLLOW 고정점 (FIRST 계산이 끝난 뒤에만 호출)
    ------------------------------------------
    - FOLLOW(start) 에 END
    - H -> s1 ... sn 의 각 비단말 si 에 대해 β = s(i+1) ... sn 이라 하면
        * FOLLOW(si) ⊇ FIRST(β) \\ {EMPTY}
        * β 가 비었거나 ε을 유도하면 FOLLOW(si) ⊇ FOLLOW(H)
    """
    follow: SetMap = {A: set() for A in grammar.non_terminals}
    follow[grammar.start].add(END)

    passes = 0
    changed = True
    while changed:
        changed = False
        passes += 1
        for rule in grammar.rules:
            if rule.is_epsilon:
                continue
            alpha = rule.alternate
            for i, X in enumerate(alpha):
                if X not in grammar.non_terminals:
                    continue
                f_beta = first_of_sequence(first, alpha[i + 1:])
                add = f_beta - {EMPTY}
                if EMPTY in f_beta:
                    add |= follow[rule.head]
                target = follow[X]
                before = len(target)
                target |= add
                if len(target) != before:
                    changed = True
    return follow, passes


def analyze(grammar: Grammar) -> FFResult:
    """FIRST → FOLLOW 순서로 계산해 ID 기반 결과를 돌려줍니다."""
    first, fp = compute_first(grammar)
    follow, wp = compute_follow(grammar, first)
    return FFResult(grammar=grammar, first=first, follow=follow,
                    first_passes=fp, follow_passes=wp)


def compute_first_and_follow(grammar: Grammar) -> Tuple[Dict[str, FrozenSet[str]], Dict[str, FrozenSet[str]]]:
    """
    compute_first_and_follow
    ========================
    검증된 Grammar 의 모든 비단말에 대해
    (이름 → FIRST 라벨 집합, 이름 → FOLLOW 라벨 집합) 을 반환합니다.
    라벨은 선언된 심볼 이름, 또는 EMPTY_NAME('EMPTY') / END_NAME('$').
    """
    ff = analyze(grammar)
    return ff.first_by_name(), ff.follow_by_name()
