"""Schema descriptors, constraint validation and partial-value merging."""

from .descriptor import (
    Constraint,
    ConstraintKind,
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
    boolean,
    enum_of,
    integer,
    list_of,
    number,
    string,
    struct,
)
from .guide import Guide, from_model
from .partial import Partial, empty, merge, missing_paths, stream_partials
from .validator import RegexMode, ValidationResult, Violation, ViolationKind, validate
from .values import ABSENT, JsonDict, JsonValue, is_absent

__all__ = [
    # Descriptors
    "SchemaNode", "Primitive", "PrimitiveKind", "EnumOf", "ListOf", "Struct",
    "Constraint", "ConstraintKind", "Range", "Count", "MemberOf", "Regex", "Hint",
    "string", "integer", "number", "boolean", "enum_of", "list_of", "struct",
    "Guide", "from_model",
    # Validation
    "validate", "ValidationResult", "Violation", "ViolationKind", "RegexMode",
    # Partial values
    "ABSENT", "is_absent", "JsonValue", "JsonDict",
    "Partial", "empty", "merge", "missing_paths", "stream_partials",
]
