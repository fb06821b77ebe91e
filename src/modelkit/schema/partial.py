"""Partial values and the merge engine behind streaming generation.

While a structured response streams in, the model emits fragments of the
eventual value tree. `merge` folds each fragment into the snapshot built so
far, `Partial` is the read-only view handed to callers, and
`stream_partials` turns an upstream fragment source into a lazy sequence of
snapshots.

Rules:
- a field present in either input is present in the result
- when both sides hold a value the fragment wins
- `ABSENT` in a fragment never erases a value (presence is monotonic)
- a field or shape the schema does not know raises `SchemaMismatch`
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Iterator

from modelkit.errors import GenerationIncomplete, SchemaMismatch

from .descriptor import EnumOf, ListOf, Primitive, SchemaNode, Struct
from .validator import RegexMode, _join, validate
from .values import ABSENT, JsonValue


def empty(schema: SchemaNode) -> object:
    """Snapshot with nothing generated yet."""
    if isinstance(schema, Struct):
        return {name: ABSENT for name in schema.fields}
    return ABSENT


def merge(schema: SchemaNode, previous: object, fragment: object, *, path: str = "") -> object:
    """Fold `fragment` into `previous`. Neither input is modified.

    `None` in a fragment means "not generated yet", same as `ABSENT`.
    """
    if fragment is ABSENT or fragment is None:
        return previous

    match schema:
        case Struct(fields=fields):
            if not isinstance(fragment, dict):
                raise SchemaMismatch(path, f"expected object '{schema.name}', got {type(fragment).__name__}")
            base = previous if isinstance(previous, dict) else empty(schema)
            out = dict(base)  # type: ignore[arg-type]
            for name, value in fragment.items():
                if name not in fields:
                    raise SchemaMismatch(_join(path, str(name)), f"field is not part of '{schema.name}'")
                out[name] = merge(fields[name], out.get(name, ABSENT), value, path=_join(path, name))
            return out

        case ListOf(element=element):
            if not isinstance(fragment, (list, tuple)):
                raise SchemaMismatch(path, f"expected array, got {type(fragment).__name__}")
            base = list(previous) if isinstance(previous, list) else []
            for i, item in enumerate(fragment):
                if i < len(base):
                    base[i] = merge(element, base[i], item, path=f"{path}[{i}]")
                else:
                    base.append(merge(element, ABSENT, item, path=f"{path}[{i}]"))
            return base

        case EnumOf() | Primitive():
            if isinstance(fragment, (dict, list, tuple)):
                raise SchemaMismatch(path, f"expected a scalar, got {type(fragment).__name__}")
            return fragment

    raise SchemaMismatch(path, f"unknown schema node {schema!r}")


def missing_paths(schema: SchemaNode, value: object, path: str = "") -> Iterator[str]:
    """Paths of every leaf (or subtree) still absent in `value`."""
    if value is ABSENT:
        yield path or "<root>"
        return
    if isinstance(schema, Struct) and isinstance(value, dict):
        for name, child in schema.fields.items():
            yield from missing_paths(child, value.get(name, ABSENT), _join(path, name))
    elif isinstance(schema, ListOf) and isinstance(value, list):
        for i, item in enumerate(value):
            yield from missing_paths(schema.element, item, f"{path}[{i}]")


def _strip(value: object) -> object:
    """Deep copy without absent entries (used to expose a plain tree)."""
    if isinstance(value, dict):
        return {k: _strip(v) for k, v in value.items() if v is not ABSENT}
    if isinstance(value, list):
        return [_strip(v) for v in value if v is not ABSENT]
    return value


class Partial:
    """Read-only view of an in-progress structured generation.

    Fields that have not been generated read as `ABSENT`:

        >>> snap.get("title")
        'Dune'
        >>> snap.get("rating")
        ABSENT
        >>> snap.is_complete
        False
    """

    __slots__ = ("schema", "_value")

    def __init__(self, schema: SchemaNode, value: object | None = None) -> None:
        self.schema = schema
        self._value = empty(schema) if value is None else value

    @property
    def raw(self) -> object:
        """The underlying tree, `ABSENT` markers included."""
        return self._value

    def get(self, path: str, default: object = ABSENT) -> object:
        """Look up a dotted path (`location.city`, `themes.0`)."""
        node: object = self._value
        for part in path.split("."):
            if isinstance(node, dict):
                node = node.get(part, ABSENT)
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                return default
            if node is ABSENT:
                return default
        return node

    def __getitem__(self, name: str) -> object:
        return self.get(name)

    def is_present(self, path: str) -> bool:
        return self.get(path) is not ABSENT

    def missing_paths(self) -> list[str]:
        return list(missing_paths(self.schema, self._value))

    @property
    def is_complete(self) -> bool:
        return next(missing_paths(self.schema, self._value), None) is None

    def present(self) -> JsonValue:
        """Plain tree holding only the fields generated so far."""
        return _strip(self._value)  # type: ignore[return-value]

    def to_value(self) -> JsonValue:
        """Convert to the canonical fully-present value."""
        missing = self.missing_paths()
        if missing:
            raise GenerationIncomplete(missing)
        return self._value  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Partial) and self.schema == other.schema and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Partial({self.schema.name if isinstance(self.schema, Struct) else 'value'}, {self._value!r})"


async def stream_partials(
    schema: SchemaNode,
    source: AsyncIterator[object],
    *,
    regex_mode: RegexMode | None = None,
) -> AsyncIterator[Partial]:
    """Yield a merged snapshot for every fragment `source` produces.

    When the source is exhausted, the last snapshot must be complete
    (`GenerationIncomplete` otherwise) and valid (`SchemaViolation`
    otherwise). Closing this generator early closes `source`.
    """
    current: object = empty(schema)
    try:
        async for fragment in source:
            current = merge(schema, current, fragment)
            yield Partial(schema, current)
        final = Partial(schema, current)
        validate(schema, final.to_value(), regex_mode=regex_mode).raise_for_violations()
    finally:
        aclose = getattr(source, "aclose", None)
        if aclose is not None:
            await aclose()
