"""Constraint validation for generated value trees.

`validate` walks the whole value and collects every violation instead of
stopping at the first, so callers (and tests) see the complete picture:

    >>> schema = struct("Score", rating=integer(Range(1, 10)), tags=list_of(string(), Count(1, 3)))
    >>> result = validate(schema, {"rating": 12, "tags": []})
    >>> [(v.path, v.kind) for v in result.violations]
    [('rating', 'range'), ('tags', 'count')]

Hints are never checked. Regex constraints use a full match unless
`regex_mode="search"` is requested (or configured through settings).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, Literal

from modelkit.errors import SchemaViolation

from .descriptor import (
    Count,
    EnumOf,
    ListOf,
    MemberOf,
    Primitive,
    PrimitiveKind,
    Range,
    Regex,
    SchemaNode,
    Struct,
)
from .values import ABSENT

RegexMode = Literal["full", "search"]

# JSON integers are carried as signed 64-bit values
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


class ViolationKind(StrEnum):
    RANGE = "range"
    COUNT = "count"
    MEMBER_OF = "member_of"
    REGEX = "regex"
    TYPE = "type"
    MISSING = "missing"
    UNEXPECTED = "unexpected"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class Violation:
    """One failed check: where, which constraint, and what was observed."""
    path: str
    kind: ViolationKind
    observed: object
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message} (got {self.observed!r})"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    violations: tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self.violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self.violations)

    def at(self, path: str) -> list[Violation]:
        """Violations reported for one field path."""
        return [v for v in self.violations if v.path == path]

    def raise_for_violations(self) -> None:
        if self.violations:
            raise SchemaViolation(self.violations)


def validate(schema: SchemaNode, value: object, *, regex_mode: RegexMode | None = None) -> ValidationResult:
    """Check `value` against every constraint in `schema`."""
    if regex_mode is None:
        from modelkit.config import get_settings
        regex_mode = get_settings().validation.regex_mode
    return ValidationResult(tuple(_walk(schema, value, "", regex_mode)))


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _walk(node: SchemaNode, value: object, path: str, mode: RegexMode) -> Iterator[Violation]:
    if value is ABSENT:
        yield Violation(path, ViolationKind.ABSENT, value, "value was never generated")
        return

    match node:
        case Struct(fields=fields):
            if not isinstance(value, dict):
                yield Violation(path, ViolationKind.TYPE, value, f"expected object '{node.name}'")
                return
            for name, child in fields.items():
                if name not in value:
                    yield Violation(_join(path, name), ViolationKind.MISSING, None, "required field is missing")
                else:
                    yield from _walk(child, value[name], _join(path, name), mode)
            for extra in sorted(value.keys() - fields.keys(), key=str):
                yield Violation(_join(path, str(extra)), ViolationKind.UNEXPECTED, value[extra], "field is not in the schema")

        case ListOf(element=element):
            if not isinstance(value, (list, tuple)):
                yield Violation(path, ViolationKind.TYPE, value, "expected array")
                return
            if (count := node.count) is not None:
                yield from _check_count(count, len(value), value, path, "items")
            for i, item in enumerate(value):
                yield from _walk(element, item, f"{path}[{i}]", mode)

        case EnumOf(values=values):
            if not isinstance(value, str):
                yield Violation(path, ViolationKind.TYPE, value, f"expected one of {node.name}")
            elif value not in values:
                yield Violation(path, ViolationKind.MEMBER_OF, value, f"must be one of: {', '.join(values)}")

        case Primitive():
            yield from _check_primitive(node, value, path, mode)


def _check_primitive(node: Primitive, value: object, path: str, mode: RegexMode) -> Iterator[Violation]:
    if not _is_kind(node.kind, value):
        yield Violation(path, ViolationKind.TYPE, value, f"expected {node.kind}")
        return

    for c in node.constraints:
        match c:
            case Range(min=lo, max=hi):
                # written positively so NaN never satisfies a bound
                if not ((lo is None or lo <= value) and (hi is None or value <= hi)):  # type: ignore[operator]
                    yield Violation(path, ViolationKind.RANGE, value, f"must be within {c}")
            case Count():
                yield from _check_count(c, len(value), value, path, "characters")  # type: ignore[arg-type]
            case MemberOf(values=values):
                if value not in values:
                    yield Violation(path, ViolationKind.MEMBER_OF, value, f"must be one of: {', '.join(values)}")
            case Regex():
                matcher = c.compiled.fullmatch if mode == "full" else c.compiled.search
                if matcher(value) is None:  # type: ignore[arg-type]
                    yield Violation(path, ViolationKind.REGEX, value, f"must match /{c.pattern}/")


def _check_count(c: Count, n: int, value: object, path: str, unit: str) -> Iterator[Violation]:
    if n < c.min or (c.max is not None and n > c.max):
        yield Violation(path, ViolationKind.COUNT, value, f"must have {c.min}-{'' if c.max is None else c.max} {unit}, has {n}")


def _is_kind(kind: PrimitiveKind, value: object) -> bool:
    if isinstance(value, bool):
        return kind is PrimitiveKind.BOOLEAN
    if kind is PrimitiveKind.STRING:
        return isinstance(value, str)
    if kind is PrimitiveKind.INTEGER:
        return isinstance(value, int) and _INT64_MIN <= value <= _INT64_MAX
    if kind is PrimitiveKind.NUMBER:
        if isinstance(value, int):
            return _INT64_MIN <= value <= _INT64_MAX
        return isinstance(value, float)
    return False
