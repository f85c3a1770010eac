# grammar_sets/gsetc.py
"""gsetc – grammar_sets CLI

사용 예)
    $ python -m grammar_sets.gsetc check grammar_sets/tests/grammar_test/expr.g -D
    $ python -m grammar_sets.gsetc sets  grammar_sets/tests/grammar_test/expr.g

기능
----
- check : 문법을 읽어 검증(선언/규칙/시작기호)만 수행하고 요약 출력
- sets  : 검증 후 모든 비단말의 FIRST/FOLLOW 집합을 출력

종료 코드
--------
- 0: 성공
- 1: 입력 파일 없음/읽기 실패
- 2: 문법 기술 텍스트 구문 오류
- 3: 문법 검증 오류(오류마다 한 줄 + 개수)

디버그 모드(-D/--debug)를 켜면 단계별 진행 상황을 stderr에 출력합니다.
"""

from __future__ import annotations
import argparse
import pathlib
import sys
from typing import Optional

EXIT_OK = 0
EXIT_IO = 1
EXIT_SYNTAX = 2
EXIT_INVALID = 3

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


class _Invalid(Exception):
    """검증 실패. 진단은 이미 출력된 상태."""

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load_grammar(grammar_path: str, debug: bool):
    """
    문법 파일을 읽어 RawGrammar → 검증된 Grammar 까지 만듭니다.
    검증 실패 시 진단을 stderr에 출력하고 _Invalid.
    """
    from .grammar.loader import load_grammar_text
    from .grammar.parser import parse_grammar
    from .grammar.errors import Diagnostics
    from .grammar.validate import validate_raw
    from .sets.report import format_diagnostics

    src = load_grammar_text(grammar_path)
    raw = parse_grammar(src)
    if debug: _eprint("[DEBUG] RawGrammar ready | terms=%d nonterms=%d rules=%d" %
                      (len(raw.terminals), len(raw.non_terminals), len(raw.rules)))

    sink = Diagnostics()
    result = validate_raw(raw, sink)
    if isinstance(result, int):
        _eprint(format_diagnostics(sink))
        raise _Invalid(result)
    if debug: _eprint("[DEBUG] Grammar validated | %r" % (result,))
    if debug: _eprint("[DEBUG] %r" % (result.symbols,))
    return result


def _run(args, body) -> int:
    if not pathlib.Path(args.file).is_file():
        _eprint(f"[ERROR] The passed input file does not exist: {args.file}")
        return EXIT_IO
    try:
        g = _load_grammar(args.file, debug=args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return EXIT_SYNTAX
    except _Invalid:
        return EXIT_INVALID
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return EXIT_IO
    return body(g, args)

# ------------------------------
# 커맨드 구현
# ------------------------------

def _check(g, args) -> int:
    if args.debug:
        for rule in g.rules:
            _eprint(f"  #{rule.index + 1:<3} {g.format_rule(rule)}")
    print(f"[CHECK OK] start={g.start_name} terms={len(g.terminals)} "
          f"nonterms={len(g.non_terminals)} rules={len(g.rules)}")
    return EXIT_OK


def _sets(g, args) -> int:
    from .sets.first_follow import analyze
    from .sets.report import format_table

    ff = analyze(g)
    if args.debug: _eprint("[DEBUG] FIRST/FOLLOW computed | first passes=%d follow passes=%d" %
                           (ff.first_passes, ff.follow_passes))
    print(format_table("FIRST", ff.first_by_name()))
    print()
    print(format_table("FOLLOW", ff.follow_by_name()))
    return EXIT_OK


def cmd_check(args) -> int:
    return _run(args, _check)


def cmd_sets(args) -> int:
    return _run(args, _sets)

# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="gsetc", description="grammar FIRST/FOLLOW set calculator")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법을 읽어 선언과 규칙을 검증합니다")
    p_check.add_argument("file", help="문법 기술 파일")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_sets = sub.add_parser("sets", help="모든 비단말의 FIRST/FOLLOW 집합을 출력합니다")
    p_sets.add_argument("file", help="문법 기술 파일")
    p_sets.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_sets.set_defaults(func=cmd_sets)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
