# domain/variables.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

VariableMap = Mapping[str, Optional[str]]
VariableItems = Union[VariableMap, Iterable[Tuple[str, Optional[str]]]]


@dataclass(frozen=True)
class VariableStore:
    """
    Immutable name -> optional string mapping threaded through a workflow.

    None は「既知だが未設定」を表す。merged() は常に新しい store を返す。
    """

    _values: Mapping[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_values", MappingProxyType(dict(self._values)))

    @classmethod
    def of(cls, values: Optional[VariableItems] = None) -> "VariableStore":
        return cls(dict(values or {}))

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def is_set(self, name: str) -> bool:
        return self._values.get(name) is not None

    def merged(self, other: Optional[VariableItems]) -> "VariableStore":
        if not other:
            return self
        values = dict(self._values)
        values.update(dict(other))
        return VariableStore(values)

    def as_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VariableStore):
            return dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items(), key=lambda kv: kv[0])))

    def __repr__(self) -> str:
        return f"VariableStore({dict(self._values)!r})"
