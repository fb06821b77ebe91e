"""Value-tree primitives shared by the validator and the partial merge engine."""

from __future__ import annotations

from typing import Any, Final, Union

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]


class _Absent:
    """Marker for a field the model has not produced yet.

    A singleton: compare with `is ABSENT`. Falsy so that `value or default`
    reads naturally in UI code.
    """

    __slots__ = ()
    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()


def is_absent(value: object) -> bool:
    return value is ABSENT
