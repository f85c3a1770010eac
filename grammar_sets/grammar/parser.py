"""grammar_sets 문법 기술(.g) 파서
- :Start: NAME
- :Terminals: NAME+
- :NonTerminals: NAME+
- :Rules: (NAME -> NAME+ .)+
- 이름은 영숫자/밑줄, 공백·개행은 구분자, '#' 부터 줄 끝까지 주석
- ε-프로덕션은 우변에 예약어 EMPTY 하나만: A -> EMPTY .
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .raw import RawGrammar, RawRule, Span

# ---- Lexer 토큰 ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f\r]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"#[^\n]*"),
    ("SECTION",  r":[A-Za-z]+:"),
    ("ARROW",    r"->"),
    ("DOT",      r"\."),
    ("NAME",     r"[\p{L}\p{N}_]+"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC))

@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

def _scan(src: str) -> List[Tok]:
    """공백/개행/주석은 줄·칼럼 갱신만 하고 토큰스트림에는 **넣지 않는다**."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            snippet = _snippet_caret_at_pos(src, i)
            raise SyntaxError(f"Unexpected char {src[i]!r} at {line}:{col}\n{snippet}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        start, end = i, m.end()

        if kind not in ("WS", "COMMENT", "NEWLINE"):
            toks.append(Tok(kind, lex, start, end, line, col))

        if kind == "NEWLINE":
            line += 1
            col = 1
        else:
            col += len(lex)
        i = end

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---------- error handling utils ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [시작, 끝+1) 범위"""
    start = src.rfind("\n", 0, pos)
    start = 0 if start == -1 else start + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    """임의의 절대 위치 pos에 캐럿"""
    start, end = _line_bounds(src, pos)
    line_text = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line_text}\n{caret}"

def _describe(t: Tok) -> str:
    return "EOF" if t.kind == "EOF" else repr(t.lexeme)

# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def fail(self, expected: str, t: Optional[Tok] = None) -> SyntaxError:
        t = t or self.la()
        snippet = _snippet_caret_at_pos(self.src, t.start)
        return SyntaxError(
            f"Expected {expected}, got {_describe(t)} at {t.line}:{t.col}\n{snippet}"
        )

    def eat(self, kind: str, expected: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            raise self.fail(expected)
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            t = self.la()
            self.i += 1
            return t
        return None

    def section(self, label: str) -> Tok:
        t = self.la()
        if t.kind != "SECTION" or t.lexeme != label:
            raise self.fail(f"'{label}'")
        self.i += 1
        return t


# --- 구문 ---
def _parse_names(ts: _TS) -> List[str]:
    """공백으로 구분된 이름 1개 이상."""
    first = ts.eat("NAME", "a whitespace separated list of alphanumeric names")
    names = [first.lexeme]
    while (t := ts.match("NAME")) is not None:
        names.append(t.lexeme)
    return names

def _parse_rule(ts: _TS) -> RawRule:
    head = ts.eat("NAME", "alphanumeric name for head of rule")
    ts.eat("ARROW", "'->'")
    alternate = _parse_names(ts)
    dot = ts.eat("DOT", "'.'")
    return RawRule(
        head=head.lexeme,
        alternate=alternate,
        span=Span(head.start, dot.end, head.line, head.col),
    )

def _parse_rules(ts: _TS) -> List[RawRule]:
    rules = [_parse_rule(ts)]
    while ts.la().kind == "NAME":
        rules.append(_parse_rule(ts))
    return rules

def parse_grammar(src: str) -> RawGrammar:
    """
    문법 기술 텍스트를 RawGrammar 로 변환합니다.
    형식 오류는 위치(line:col)와 캐럿 스니펫을 담은 SyntaxError.
    """
    ts = _TS(_scan(src), src)

    ts.section(":Start:")
    start = ts.eat("NAME", "a single alphanumeric name")
    ts.section(":Terminals:")
    terminals = _parse_names(ts)
    ts.section(":NonTerminals:")
    non_terminals = _parse_names(ts)
    ts.section(":Rules:")
    rules = _parse_rules(ts)

    t = ts.la()
    if t.kind != "EOF":
        snippet = _snippet_caret_at_pos(src, t.start)
        raise SyntaxError(
            f"There was some leftover input at {t.line}:{t.col}: {_describe(t)}\n{snippet}"
        )

    return RawGrammar(
        start=start.lexeme,
        terminals=terminals,
        non_terminals=non_terminals,
        rules=rules,
    )
