# grammar_sets/grammar/errors.py
"""문법 검증 진단(diagnostic) 정의와 수집기"""

from __future__     import annotations
from dataclasses    import dataclass, field
from enum           import Enum
from typing         import Iterator, List, Optional
from .raw           import Span


class ErrorKind(Enum):
    RESERVED_NAME_MISUSE     = "ReservedNameMisuse"
    CONFLICTING_DECLARATION  = "ConflictingDeclaration"
    START_SYMBOL_CONFLICT    = "StartSymbolConflict"
    EMPTY_AS_RULE_HEAD       = "EmptyAsRuleHead"
    TERMINAL_USED_AS_HEAD    = "TerminalUsedAsHead"
    UNDECLARED_RULE_HEAD     = "UndeclaredRuleHead"      # 치명적: 검증 즉시 중단
    UNDECLARED_SYMBOL        = "UndeclaredSymbol"
    MISPLACED_EMPTY_SYMBOL   = "MisplacedEmptySymbol"
    START_SYMBOL_HAS_NO_RULE = "StartSymbolHasNoRule"

    @property
    def fatal(self) -> bool:
        return self is ErrorKind.UNDECLARED_RULE_HEAD


@dataclass
class Diagnostic:
    """
    진단 1건.
    - kind      : 오류 종류
    - message   : 사람이 읽는 설명
    - name      : 관련 심볼 이름(없으면 None)
    - rule_index: 관련 규칙의 선언 순번(0-based, 규칙과 무관하면 None)
    - span      : 문법 텍스트 상 위치(파서를 거쳤을 때만)
    """
    kind: ErrorKind
    message: str
    name: Optional[str] = None
    rule_index: Optional[int] = None
    span: Optional[Span] = None

    def location(self) -> str:
        parts = []
        if self.span is not None:
            parts.append(f"{self.span.line}:{self.span.col}")
        if self.rule_index is not None:
            parts.append(f"rule #{self.rule_index + 1}")
        return ", ".join(parts)

    def __str__(self) -> str:
        where = self.location()
        return f"{self.message} ({where})" if where else self.message


@dataclass
class Diagnostics:
    """
    Diagnostics
    ===========
    검증 각 단계가 공유하는 진단 수집기(sink)입니다.
    전역 카운터 대신 이 객체를 단계 함수에 넘겨 오류를 누적합니다.
    오류 개수는 len(diagnostics) 입니다.
    """
    items: List[Diagnostic] = field(default_factory=list)

    def report(
        self,
        kind: ErrorKind,
        message: str,
        *,
        name: Optional[str] = None,
        rule_index: Optional[int] = None,
        span: Optional[Span] = None,
    ) -> Diagnostic:
        d = Diagnostic(kind, message, name=name, rule_index=rule_index, span=span)
        self.items.append(d)
        return d

    def count(self, kind: Optional[ErrorKind] = None) -> int:
        if kind is None:
            return len(self.items)
        return sum(1 for d in self.items if d.kind is kind)

    def kinds(self) -> List[ErrorKind]:
        return [d.kind for d in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)
