"""Derive descriptors from pydantic models annotated with `Guide`.

Structured types are declared as ordinary pydantic models; field-level
generation constraints ride along as `typing.Annotated` metadata:

    >>> class MovieReview(BaseModel):
    ...     title: str = ""
    ...     rating: Annotated[int, Guide(range=(1, 10))] = 5
    ...     themes: Annotated[list[str], Guide(count=(1, 5), description="Main themes")] = []
    >>> from_model(MovieReview).constraint_of("rating")
    Range(min=1, max=10)

`Guide` does not constrain the pydantic model itself: defaults stay usable
and the validator, not pydantic, enforces the constraints on generated values.
"""

from __future__ import annotations

import types
import typing
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, get_args, get_origin

from pydantic import BaseModel

from modelkit.errors import SchemaDefinitionError

from .descriptor import (
    Constraint,
    Count,
    EnumOf,
    Hint,
    ListOf,
    MemberOf,
    Primitive,
    PrimitiveKind,
    Range,
    Regex,
    SchemaNode,
    Struct,
)


@dataclass(frozen=True, slots=True)
class Guide:
    """Generation constraints for one model field.

    Attributes:
        range: inclusive (min, max) for int/float fields
        count: inclusive (min, max) length for list/str fields
        any_of: allowed string values
        regex: pattern for str fields
        description: free-text hint passed to the model
    """
    range: tuple[float | None, float | None] | None = None
    count: tuple[int, int | None] | None = None
    any_of: tuple[str, ...] | None = None
    regex: str | None = None
    description: str | None = None

    def constraints(self) -> tuple[Constraint, ...]:
        out: list[Constraint] = []
        if self.range is not None:
            out.append(Range(*self.range))
        if self.count is not None:
            out.append(Count(*self.count))
        if self.any_of is not None:
            out.append(MemberOf(tuple(self.any_of)))
        if self.regex is not None:
            out.append(Regex(self.regex))
        if self.description:
            out.append(Hint(self.description))
        return tuple(out)


_PRIMITIVES: dict[type, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    int: PrimitiveKind.INTEGER,
    float: PrimitiveKind.NUMBER,
    bool: PrimitiveKind.BOOLEAN,
}


@lru_cache(maxsize=128)
def from_model(model: type[BaseModel]) -> Struct:
    """Build (and cache) the `Struct` descriptor for a pydantic model class."""
    fields: dict[str, SchemaNode] = {}
    for name, info in model.model_fields.items():
        guides = [m for m in info.metadata if isinstance(m, Guide)]
        constraints = tuple(c for g in guides for c in g.constraints())
        if info.description and not any(isinstance(c, Hint) for c in constraints):
            constraints = (*constraints, Hint(info.description))
        try:
            fields[name] = _node_for(info.annotation, constraints, path=f"{model.__name__}.{name}")
        except SchemaDefinitionError as e:
            raise SchemaDefinitionError(f"{model.__name__}.{name}: {e}") from e
    return Struct(model.__name__, fields, _docstring(model))


def _node_for(tp: Any, constraints: tuple[Constraint, ...], *, path: str) -> SchemaNode:
    origin = get_origin(tp)
    if origin is Annotated:
        inner, *extra = get_args(tp)
        more = tuple(c for m in extra if isinstance(m, Guide) for c in m.constraints())
        return _node_for(inner, (*constraints, *more), path=path)
    if origin in (list, typing.List):
        (element,) = get_args(tp) or (Any,)
        return ListOf(_node_for(element, (), path=f"{path}[]"), constraints)
    if origin in (typing.Union, types.UnionType):
        raise SchemaDefinitionError(f"optional/union fields are not generable ({tp})")
    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return EnumOf(tp.__name__, tuple(str(m.value) for m in tp), constraints)
        if issubclass(tp, BaseModel):
            node = from_model(tp)
            desc = next((c.description for c in constraints if isinstance(c, Hint)), None)
            return Struct(node.name, node.fields, desc or node.description)
        # bool first: it is a subclass of int
        for base in (bool, str, int, float):
            if issubclass(tp, base):
                return Primitive(_PRIMITIVES[base], constraints)
    raise SchemaDefinitionError(f"unsupported field type {tp!r} at {path}")


def _docstring(model: type[BaseModel]) -> str | None:
    doc = (model.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else None
