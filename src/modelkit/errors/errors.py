"""Error taxonomy for sessions, schemas and tools.

Every failure raised by modelkit derives from `ModelKitError` and carries an
`ErrorCode` plus a `recoverable` flag. `ErrorInfo` is the serializable form used
when a failure has to be reported back to the model (failed tool calls) or to
logs.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Annotated, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

if TYPE_CHECKING:
    from modelkit.schema.validator import Violation


class ErrorCode(StrEnum):
    """Machine-readable failure codes."""
    MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"
    MODEL_NOT_READY = "MODEL_NOT_READY"
    SESSION_NOT_INITIALIZED = "SESSION_NOT_INITIALIZED"
    GENERATION_FAILED = "GENERATION_FAILED"
    GENERATION_INCOMPLETE = "GENERATION_INCOMPLETE"
    SCHEMA_DEFINITION = "SCHEMA_DEFINITION"
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    TOOL_ARGUMENT_INVALID = "TOOL_ARGUMENT_INVALID"
    TOOL_EXECUTION_FAILED = "TOOL_EXECUTION_FAILED"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


# Substring -> code, checked in order against "<ExcName> <message>".
# TOOL_NOT_FOUND only ever comes from ToolNotFound itself.
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timedout": ErrorCode.TIMEOUT,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.TOOL_EXECUTION_FAILED


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map an exception to an error code. modelkit errors keep their own code."""
    if isinstance(exc, ModelKitError):
        return exc.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


class ErrorInfo(BaseModel):
    """Structured, serializable description of a failure.

    Example:
        >>> info = ErrorInfo.create("get_forecast", "upstream timed out", ErrorCode.TIMEOUT)
        >>> print(info.render())
        **Tool Error (get_forecast):** upstream timed out
        _This error may be recoverable - consider retrying or trying an alternative approach._
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True)

    source: Annotated[str, Field(min_length=1, description="Tool or component that failed")]
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.UNKNOWN
    recoverable: bool = True
    details: str | None = Field(default=None, repr=False)

    @computed_field
    @property
    def is_retryable(self) -> bool:
        """Whether repeating the same call could plausibly succeed."""
        return self.code in _RETRYABLE_CODES

    @classmethod
    def create(
        cls,
        source: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        recoverable: bool = True,
        details: str | None = None,
    ) -> Self:
        return cls(source=source, message=message, code=code, recoverable=recoverable, details=details)

    @classmethod
    def from_exception(cls, source: str, exc: BaseException, *, include_trace: bool = False) -> Self:
        """Build from a caught exception with automatic code classification."""
        recoverable = exc.recoverable if isinstance(exc, ModelKitError) else True
        return cls(
            source=source,
            message=str(exc) or type(exc).__name__,
            code=classify_exception(exc),
            recoverable=recoverable,
            details=traceback.format_exc() if include_trace else None,
        )

    def render(self) -> str:
        """Format for model consumption."""
        parts = [f"**Tool Error ({self.source}):** {self.message}"]
        if self.recoverable:
            parts.append("\n_This error may be recoverable - consider retrying or trying an alternative approach._")
        if self.details:
            parts.append(f"\n\nDetails:\n```\n{self.details}\n```")
        return "".join(parts)

    __str__ = render


_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.MODEL_NOT_READY,
    ErrorCode.TIMEOUT,
    ErrorCode.TOOL_EXECUTION_FAILED,
})


# ─────────────────────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────────────────────


class ModelKitError(Exception):
    """Base class for every modelkit failure."""

    code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN
    recoverable: ClassVar[bool] = False

    def to_info(self, source: str = "modelkit") -> ErrorInfo:
        return ErrorInfo.create(source, str(self) or type(self).__name__, self.code, recoverable=self.recoverable)


class ModelUnavailable(ModelKitError):
    """The model collaborator is not available on this system."""

    code = ErrorCode.MODEL_UNAVAILABLE
    recoverable = True

    def __init__(self, message: str = "The system language model is not available on this device.") -> None:
        super().__init__(message)


class ModelNotReady(ModelKitError):
    """The model exists but is still downloading or loading."""

    code = ErrorCode.MODEL_NOT_READY
    recoverable = True

    def __init__(self, message: str = "The model is not ready. It may be downloading or initializing.") -> None:
        super().__init__(message)


class SessionNotInitialized(ModelKitError):
    code = ErrorCode.SESSION_NOT_INITIALIZED
    recoverable = True

    def __init__(self, message: str = "Session not initialized. Call initialize() first.") -> None:
        super().__init__(message)


class GenerationFailed(ModelKitError):
    """The model collaborator could not produce a response."""

    code = ErrorCode.GENERATION_FAILED

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Generation failed: {reason}")


class GenerationIncomplete(ModelKitError):
    """A stream finished while some fields were still absent."""

    code = ErrorCode.GENERATION_INCOMPLETE

    def __init__(self, missing: list[str] | tuple[str, ...]) -> None:
        self.missing = tuple(missing)
        shown = ", ".join(self.missing[:5]) + (" ..." if len(self.missing) > 5 else "")
        super().__init__(f"Generation ended with {len(self.missing)} absent field(s): {shown}")


class SchemaDefinitionError(ModelKitError, ValueError):
    """A descriptor was declared with an incompatible constraint or type."""

    code = ErrorCode.SCHEMA_DEFINITION


class SchemaMismatch(ModelKitError):
    """A fragment does not fit the shape of its schema."""

    code = ErrorCode.SCHEMA_MISMATCH

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path or '<root>'}: {message}")


class SchemaViolation(ModelKitError):
    """A value failed one or more schema constraints.

    The first violation is exposed through `field_path`, `constraint_kind` and
    `observed_value`; `violations` holds all of them.
    """

    code = ErrorCode.SCHEMA_VIOLATION

    def __init__(self, violations: tuple[Violation, ...] | list[Violation]) -> None:
        if not violations:
            raise ValueError("SchemaViolation requires at least one violation")
        self.violations = tuple(violations)
        first = self.violations[0]
        more = f" (+{len(self.violations) - 1} more)" if len(self.violations) > 1 else ""
        super().__init__(f"{first}{more}")

    @property
    def field_path(self) -> str:
        return self.violations[0].path

    @property
    def constraint_kind(self) -> str:
        return self.violations[0].kind

    @property
    def observed_value(self) -> object:
        return self.violations[0].observed


class ToolNotFound(ModelKitError, KeyError):
    code = ErrorCode.TOOL_NOT_FOUND

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"No tool registered under '{tool_name}'")

    def __str__(self) -> str:
        return str(self.args[0])


class ToolArgumentInvalid(ModelKitError):
    """Tool arguments failed the tool's argument schema. The tool was not run."""

    code = ErrorCode.TOOL_ARGUMENT_INVALID

    def __init__(self, tool_name: str, violations: tuple[Violation, ...] | list[Violation]) -> None:
        self.tool_name = tool_name
        self.violations = tuple(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid arguments for '{tool_name}': {detail}")


class ToolExecutionFailed(ModelKitError):
    code = ErrorCode.TOOL_EXECUTION_FAILED
    recoverable = True

    def __init__(self, tool_name: str, reason: str) -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Tool execution failed ({tool_name}): {reason}")
