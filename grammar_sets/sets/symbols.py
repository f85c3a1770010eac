"""심볼 이름에 순차 정수 ID를 부여하고 단말/비단말 분류를 관리합니다."""
from __future__     import annotations
from dataclasses    import dataclass, field
from enum           import Enum
from typing         import Dict, FrozenSet, Iterator, List, Optional, Tuple


# 문법 텍스트/출력에서 쓰는 예약 이름
EMPTY_NAME = "EMPTY"
END_NAME = "$"


class SymbolClass(Enum):
    """심볼 분류. EMPTY는 선언 가능한 심볼이 아니라 ε(빈 유도) 표식입니다."""
    TERMINAL = "terminal"
    NONTERMINAL = "nonterminal"
    EMPTY = "empty"


def is_empty_name(name: str) -> bool:
    """예약된 ε 이름인지 여부. 문자열 비교는 여기서만 합니다."""
    return name == EMPTY_NAME


def is_reserved_name(name: str) -> bool:
    """출력 표식(EMPTY, $)과 겹쳐 선언할 수 없는 이름인지 여부."""
    return is_empty_name(name) or name == END_NAME


class DuplicateDeclaration(ValueError):
    """같은 이름이 다른 분류로 이미 등록되어 있을 때."""

    def __init__(self, name: str, existing: SymbolClass, requested: SymbolClass):
        self.name = name
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"{name} is already declared as a {existing.value}, "
            f"cannot redeclare it as a {requested.value}"
        )


@dataclass
class SymbolTableBuilder:
    """
    SymbolTableBuilder
    ==================
    검증 단계에서 쓰는 **가변** 심볼 아레나입니다.

    - insert(name, cls): 다음 순번 ID를 배정합니다(0부터, 재사용 없음).
      * 같은 이름을 같은 분류로 다시 넣으면 기존 ID를 돌려줍니다.
      * 다른 분류로 넣으면 DuplicateDeclaration. 먼저 등록된 쪽이 유지됩니다.
    - lookup(name): (id, cls) 또는 None
    - freeze(): 불변 SymbolTable 스냅샷을 만듭니다.
    """
    _names: List[str] = field(default_factory=list)
    _classes: List[SymbolClass] = field(default_factory=list)
    _index: Dict[str, int] = field(default_factory=dict)

    def insert(self, name: str, cls: SymbolClass) -> int:
        if cls is SymbolClass.EMPTY:
            raise ValueError("EMPTY is a marker, not a declarable symbol")
        found = self._index.get(name)
        if found is not None:
            existing = self._classes[found]
            if existing is not cls:
                raise DuplicateDeclaration(name, existing, cls)
            return found
        sid = len(self._names)
        self._names.append(name)
        self._classes.append(cls)
        self._index[name] = sid
        return sid

    def lookup(self, name: str) -> Optional[Tuple[int, SymbolClass]]:
        sid = self._index.get(name)
        if sid is None:
            return None
        return sid, self._classes[sid]

    def __len__(self) -> int:
        return len(self._names)

    def freeze(self) -> "SymbolTable":
        """아레나를 한 번 훑어 조회 구조와 분류별 ID 집합을 만듭니다."""
        by_class: Dict[SymbolClass, set] = {c: set() for c in SymbolClass}
        for sid, cls in enumerate(self._classes):
            by_class[cls].add(sid)
        return SymbolTable(
            _id_to_name=tuple(self._names),
            _id_to_class=tuple(self._classes),
            _name_to_id=dict(self._index),
            _class_sets={c: frozenset(s) for c, s in by_class.items()},
        )


@dataclass(frozen=True, eq=False)
class SymbolTable:
    """
    SymbolTable
    ===========
    단말/비단말 **이름 ↔ 정수 ID 매핑**을 관리하는 불변 테이블입니다.
    검증(validate)과 FIRST/FOLLOW 계산이 모두 같은 ID를 쓰도록
    SymbolTableBuilder.freeze()로 한 번만 만들어집니다.

    설계 원칙
    --------
    - ID는 등록 순서대로 0, 1, 2, ... (단말 블록 → 비단말 블록 → 시작기호)
    - 단말 ID 집합과 비단말 ID 집합은 항상 서로소
    - ε(EMPTY)는 테이블에 저장되지 않습니다. ids_of_class(EMPTY)는 빈 집합.

    주요 메서드
    ----------
    - id_for_name(name) / name_for_id(id) / class_for_id(id)
    - ids_of_class(cls)
    - is_terminal(id) / is_nonterminal(id)
    """
    _id_to_name: Tuple[str, ...]
    _id_to_class: Tuple[SymbolClass, ...]
    _name_to_id: Dict[str, int]
    _class_sets: Dict[SymbolClass, FrozenSet[int]]

    # ----- 조회 -----
    def id_for_name(self, name: str) -> int:
        """심볼 이름을 ID로 변환합니다. 존재하지 않으면 KeyError."""
        return self._name_to_id[name]

    def name_for_id(self, id_: int) -> str:
        """심볼 ID를 이름으로 변환합니다. 범위를 벗어나면 IndexError."""
        self._check_id(id_)
        return self._id_to_name[id_]

    def class_for_id(self, id_: int) -> SymbolClass:
        self._check_id(id_)
        return self._id_to_class[id_]

    def ids_of_class(self, cls: SymbolClass) -> FrozenSet[int]:
        return self._class_sets[cls]

    def is_terminal(self, id_: int) -> bool:
        return id_ in self._class_sets[SymbolClass.TERMINAL]

    def is_nonterminal(self, id_: int) -> bool:
        return id_ in self._class_sets[SymbolClass.NONTERMINAL]

    def _check_id(self, id_: int) -> None:
        # 음수 인덱스가 튜플 끝에서 조회되는 것을 막습니다.
        if not 0 <= id_ < len(self._id_to_name):
            raise IndexError(f"unknown symbol id {id_}")

    # ----- 유틸 -----
    def names(self) -> Iterator[str]:
        return iter(self._id_to_name)

    def __len__(self) -> int:
        return len(self._id_to_name)

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_id

    def __repr__(self) -> str:
        terms = [self._id_to_name[i] for i in sorted(self._class_sets[SymbolClass.TERMINAL])]
        nonterms = [self._id_to_name[i] for i in sorted(self._class_sets[SymbolClass.NONTERMINAL])]
        return f"SymbolTable(terms={terms}, nonterms={nonterms})"


class Marker:
    """
    FIRST/FOLLOW 집합의 특수 원소(ε, 입력 끝).
    단말 ID(int)와 한 집합에 섞여 들어가므로 int와 절대 같지 않은 싱글턴입니다.
    """
    __slots__ = ("cls_name", "label")

    def __init__(self, cls_name: str, label: str):
        self.cls_name = cls_name
        self.label = label

    def __repr__(self) -> str:
        return self.cls_name


EMPTY = Marker("EMPTY", EMPTY_NAME)
END = Marker("END", END_NAME)
