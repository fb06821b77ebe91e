"""modelkit - schema-validated structured generation over a language model.

Declare a data shape (a pydantic model with `Guide` annotations, or a
descriptor built with `struct`/`list_of`/...), hand it to a `SessionManager`,
and get back a value that satisfies every constraint or an explicit error.

Quick Start:
    >>> from modelkit import SessionManager, SessionConfiguration
    >>> from modelkit.catalog import MovieReview
    >>>
    >>> manager = SessionManager(model, SessionConfiguration.precise())
    >>> await manager.initialize()
    >>> review = await manager.generate("Review the film Dune", MovieReview)
    >>>
    >>> async for snapshot in manager.generate_streaming("Review Dune", MovieReview):
    ...     print(snapshot.get("title"))
"""

__version__ = "0.1.0"

from .errors import (
    ErrorCode,
    ErrorInfo,
    GenerationFailed,
    GenerationIncomplete,
    ModelKitError,
    ModelNotReady,
    ModelUnavailable,
    SchemaDefinitionError,
    SchemaMismatch,
    SchemaViolation,
    SessionNotInitialized,
    ToolArgumentInvalid,
    ToolExecutionFailed,
    ToolNotFound,
)
from .models import Availability, GenerationRequest, LanguageModel, ModelResponse, ToolCallRequest
from .schema import (
    ABSENT,
    Count,
    Guide,
    Hint,
    MemberOf,
    Partial,
    Range,
    Regex,
    boolean,
    enum_of,
    from_model,
    integer,
    list_of,
    merge,
    number,
    string,
    struct,
    validate,
)
from .session import SessionConfiguration, SessionManager, Transcript
from .tools import BaseTool, ToolMetadata, ToolRegistry, tool

__all__ = [
    "__version__",
    # Session
    "SessionManager", "SessionConfiguration", "Transcript",
    # Model boundary
    "LanguageModel", "Availability", "GenerationRequest", "ModelResponse", "ToolCallRequest",
    # Schema
    "Guide", "from_model", "struct", "list_of", "enum_of", "string", "integer", "number", "boolean",
    "Range", "Count", "MemberOf", "Regex", "Hint", "validate", "merge", "Partial", "ABSENT",
    # Tools
    "BaseTool", "ToolMetadata", "ToolRegistry", "tool",
    # Errors
    "ModelKitError", "ErrorCode", "ErrorInfo",
    "ModelUnavailable", "ModelNotReady", "SessionNotInitialized",
    "GenerationFailed", "GenerationIncomplete",
    "SchemaDefinitionError", "SchemaMismatch", "SchemaViolation",
    "ToolNotFound", "ToolArgumentInvalid", "ToolExecutionFailed",
]
