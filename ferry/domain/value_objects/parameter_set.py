from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType


class ParameterSet(Mapping):
    """
    Value Object holding resolved substitution parameters (name -> value).
    Immutable once built; merging produces a new instance.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = MappingProxyType(
            {str(k): str(v) for k, v in (values or {}).items()}
        )

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def merged(self, overrides: Mapping[str, str]) -> "ParameterSet":
        """Return a new set where ``overrides`` win over existing keys."""
        values = dict(self._values)
        values.update(overrides)
        return ParameterSet(values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"ParameterSet({dict(self._values)!r})"
