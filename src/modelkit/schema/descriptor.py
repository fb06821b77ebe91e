"""Schema descriptors: runtime-inspectable data shapes for structured generation.

A descriptor is a small recursive tree:

- `Primitive`  string / integer / number / boolean leaf with constraints
- `EnumOf`     closed set of string values
- `ListOf`     homogeneous list with an optional `Count`
- `Struct`     ordered named fields

Constraints are plain frozen values (`Range`, `Count`, `MemberOf`, `Regex`,
`Hint`). Compatibility with the node kind is checked at construction, so an
invalid descriptor never exists.

Example:
    >>> review = struct(
    ...     "MovieReview",
    ...     title=string(),
    ...     rating=integer(Range(1, 10)),
    ...     themes=list_of(string(), Count(1, 5)),
    ... )
    >>> review.field_names()
    ('title', 'rating', 'themes')
    >>> review.constraint_of("rating")
    Range(min=1, max=10)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from functools import cached_property
from typing import TypeAlias

from modelkit.errors import SchemaDefinitionError


class PrimitiveKind(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


class ConstraintKind(StrEnum):
    RANGE = "range"
    COUNT = "count"
    MEMBER_OF = "member_of"
    REGEX = "regex"
    HINT = "hint"


_NUMERIC = frozenset({PrimitiveKind.INTEGER, PrimitiveKind.NUMBER})


# ─────────────────────────────────────────────────────────────────────────────
# Constraints
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive numeric bounds. Either side may be open (None)."""
    min: float | None = None
    max: float | None = None

    kind = ConstraintKind.RANGE

    def __post_init__(self) -> None:
        if self.min is None and self.max is None:
            raise SchemaDefinitionError("Range needs at least one bound")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise SchemaDefinitionError(f"Range min {self.min} exceeds max {self.max}")

    def __str__(self) -> str:
        return f"range({_bound(self.min)}...{_bound(self.max)})"


@dataclass(frozen=True, slots=True)
class Count:
    """Inclusive length bounds for lists and strings."""
    min: int = 0
    max: int | None = None

    kind = ConstraintKind.COUNT

    def __post_init__(self) -> None:
        if self.min < 0:
            raise SchemaDefinitionError(f"Count min must be >= 0, got {self.min}")
        if self.max is not None and self.min > self.max:
            raise SchemaDefinitionError(f"Count min {self.min} exceeds max {self.max}")

    @classmethod
    def exactly(cls, n: int) -> Count:
        return cls(n, n)

    def __str__(self) -> str:
        return f"count({self.min}...{_bound(self.max)})"


@dataclass(frozen=True, slots=True)
class MemberOf:
    """Value must equal one of `values` (string equality)."""
    values: tuple[str, ...]

    kind = ConstraintKind.MEMBER_OF

    def __post_init__(self) -> None:
        if not self.values:
            raise SchemaDefinitionError("MemberOf needs at least one value")
        object.__setattr__(self, "values", tuple(self.values))

    def __str__(self) -> str:
        return f"member_of({', '.join(self.values)})"


@dataclass(frozen=True)
class Regex:
    """Pattern the string must match (full match unless the validator says otherwise)."""
    pattern: str

    kind = ConstraintKind.REGEX

    def __post_init__(self) -> None:
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise SchemaDefinitionError(f"Invalid regex {self.pattern!r}: {e}") from e

    @cached_property
    def compiled(self) -> re.Pattern[str]:
        return re.compile(self.pattern)

    def __str__(self) -> str:
        return f"regex({self.pattern})"


@dataclass(frozen=True, slots=True)
class Hint:
    """Free-text guidance for the model. Never validated."""
    description: str

    kind = ConstraintKind.HINT

    def __str__(self) -> str:
        return f"hint({self.description})"


Constraint: TypeAlias = Range | Count | MemberOf | Regex | Hint


def _bound(v: float | None) -> str:
    return "" if v is None else f"{v:g}" if isinstance(v, float) else str(v)


# ─────────────────────────────────────────────────────────────────────────────
# Nodes
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Primitive:
    kind: PrimitiveKind
    constraints: tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", tuple(self.constraints))
        for c in self.constraints:
            _check_primitive(self.kind, c)

    @property
    def description(self) -> str | None:
        return _description(self.constraints)

    def json_schema(self) -> dict[str, object]:
        out: dict[str, object] = {"type": self.kind.value}
        for c in self.constraints:
            match c:
                case Range(min=lo, max=hi):
                    if lo is not None:
                        out["minimum"] = lo
                    if hi is not None:
                        out["maximum"] = hi
                case Count(min=lo, max=hi):
                    out["minLength"] = lo
                    if hi is not None:
                        out["maxLength"] = hi
                case MemberOf(values=values):
                    out["enum"] = list(values)
                case Regex(pattern=pattern):
                    out["pattern"] = pattern
                case Hint(description=text):
                    out["description"] = text
        return out


@dataclass(frozen=True, slots=True)
class EnumOf:
    """Closed vocabulary. `values` lists every member in declaration order."""
    name: str
    values: tuple[str, ...]
    constraints: tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        if not self.values:
            raise SchemaDefinitionError(f"Enum '{self.name}' has no values")
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "constraints", tuple(self.constraints))
        for c in self.constraints:
            if not isinstance(c, Hint):
                raise SchemaDefinitionError(f"Enum '{self.name}' accepts only hints, got {c}")

    @property
    def description(self) -> str | None:
        return _description(self.constraints)

    def json_schema(self) -> dict[str, object]:
        out: dict[str, object] = {"type": "string", "enum": list(self.values), "title": self.name}
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True, slots=True)
class ListOf:
    element: SchemaNode
    constraints: tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", tuple(self.constraints))
        for c in self.constraints:
            if not isinstance(c, (Count, Hint)):
                raise SchemaDefinitionError(f"Lists accept only count and hint constraints, got {c}")

    @property
    def count(self) -> Count | None:
        return next((c for c in self.constraints if isinstance(c, Count)), None)

    @property
    def description(self) -> str | None:
        return _description(self.constraints)

    def json_schema(self) -> dict[str, object]:
        out: dict[str, object] = {"type": "array", "items": self.element.json_schema()}
        if (count := self.count) is not None:
            out["minItems"] = count.min
            if count.max is not None:
                out["maxItems"] = count.max
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True, slots=True)
class Struct:
    """Ordered named fields. Every field is required in a complete value."""
    name: str
    fields: dict[str, SchemaNode] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.fields:
            raise SchemaDefinitionError(f"Struct '{self.name}' has no fields")

    def __hash__(self) -> int:
        return hash((self.name, tuple(self.fields)))

    def field_names(self) -> tuple[str, ...]:
        return tuple(self.fields)

    def constraints_of(self, name: str) -> tuple[Constraint, ...]:
        node = self.fields[name]
        return getattr(node, "constraints", ())

    def constraint_of(self, name: str) -> Constraint | None:
        """First checkable constraint of a field, else its hint, else None."""
        constraints = self.constraints_of(name)
        checkable = [c for c in constraints if not isinstance(c, Hint)]
        return (checkable or list(constraints) or [None])[0]

    def json_schema(self) -> dict[str, object]:
        out: dict[str, object] = {
            "type": "object",
            "title": self.name,
            "properties": {k: v.json_schema() for k, v in self.fields.items()},
            "required": list(self.fields),
            "additionalProperties": False,
        }
        if self.description:
            out["description"] = self.description
        return out


SchemaNode: TypeAlias = Primitive | EnumOf | ListOf | Struct


def _description(constraints: tuple[Constraint, ...]) -> str | None:
    return next((c.description for c in constraints if isinstance(c, Hint)), None)


def _check_primitive(kind: PrimitiveKind, c: Constraint) -> None:
    ok = (
        isinstance(c, Hint)
        or (isinstance(c, Range) and kind in _NUMERIC)
        or (isinstance(c, (Count, MemberOf, Regex)) and kind is PrimitiveKind.STRING)
    )
    if not ok:
        raise SchemaDefinitionError(f"Constraint {c} is not compatible with {kind} fields")


# ─────────────────────────────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────────────────────────────


def _with_hint(constraints: tuple[Constraint, ...], description: str | None) -> tuple[Constraint, ...]:
    return (*constraints, Hint(description)) if description else constraints


def string(*constraints: Constraint, description: str | None = None) -> Primitive:
    return Primitive(PrimitiveKind.STRING, _with_hint(constraints, description))


def integer(*constraints: Constraint, description: str | None = None) -> Primitive:
    return Primitive(PrimitiveKind.INTEGER, _with_hint(constraints, description))


def number(*constraints: Constraint, description: str | None = None) -> Primitive:
    return Primitive(PrimitiveKind.NUMBER, _with_hint(constraints, description))


def boolean(*, description: str | None = None) -> Primitive:
    return Primitive(PrimitiveKind.BOOLEAN, _with_hint((), description))


def enum_of(name: str, values: tuple[str, ...] | list[str], *, description: str | None = None) -> EnumOf:
    return EnumOf(name, tuple(values), _with_hint((), description))


def list_of(element: SchemaNode, *constraints: Constraint, description: str | None = None) -> ListOf:
    return ListOf(element, _with_hint(constraints, description))


def struct(name: str, /, *, description: str | None = None, **fields: SchemaNode) -> Struct:
    return Struct(name, dict(fields), description)
