"""FIRST/FOLLOW 결과와 검증 진단을 사람이 읽는 텍스트로 만듭니다."""
from __future__ import annotations
from typing import Dict, Iterable, List
from ..grammar.errors import Diagnostic
from .symbols import EMPTY_NAME, END_NAME

_MARKERS = (EMPTY_NAME, END_NAME)


def _entry_key(label: str):
    # 일반 심볼은 이름순, 표식(EMPTY, $)은 맨 뒤
    if label in _MARKERS:
        return (1, _MARKERS.index(label))
    return (0, label)


def format_set(labels: Iterable[str]) -> str:
    return "{" + ", ".join(sorted(labels, key=_entry_key)) + "}"


def format_table(title: str, sets: Dict[str, Iterable[str]]) -> str:
    """
    [TITLE] 헤더 + 비단말 이름순 한 줄씩.
        S : {a, b}
    """
    lines = [f"[{title}]"]
    if not sets:
        lines.append("(none)")
        return "\n".join(lines)
    width = max(len(name) for name in sets)
    for name in sorted(sets):
        lines.append(f"{name:>{width}} : {format_set(sets[name])}")
    return "\n".join(lines)


def format_diagnostics(diags: Iterable[Diagnostic]) -> str:
    lines: List[str] = [f"ERROR: {d}" for d in diags]
    lines.append(f"There were {len(lines)} errors")
    return "\n".join(lines)
