# grammar_sets/grammar/raw.py
"""검증 전(raw) 문법 표현
- RawRule   : head -> alternate .  (이름 문자열 그대로)
- RawGrammar: :Start: / :Terminals: / :NonTerminals: / :Rules: 네 부분
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Optional

@dataclass
class Span:
    start: int
    end: int
    line: int
    col: int

@dataclass
class RawRule:
    head: str
    alternate: List[str]
    span: Optional[Span] = None

    def __str__(self) -> str:
        return f"{self.head} -> {' '.join(self.alternate)} ."

@dataclass
class RawGrammar:
    start: str
    terminals: List[str] = field(default_factory=list)
    non_terminals: List[str] = field(default_factory=list)
    rules: List[RawRule] = field(default_factory=list)
