"""Error handling for modelkit.

- ErrorCode / ErrorInfo: machine-readable codes and the serializable error form
- ModelKitError and subclasses: the exception taxonomy
- Result / Ok / Err: outcomes reported instead of raised (tool calls)
"""

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
    classify_exception,
)
from .result import Err, Ok, Result

__all__ = [
    "ErrorCode", "ErrorInfo", "classify_exception",
    "ModelKitError", "ModelUnavailable", "ModelNotReady", "SessionNotInitialized",
    "GenerationFailed", "GenerationIncomplete",
    "SchemaDefinitionError", "SchemaMismatch", "SchemaViolation",
    "ToolNotFound", "ToolArgumentInvalid", "ToolExecutionFailed",
    "Result", "Ok", "Err",
]
