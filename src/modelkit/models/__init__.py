"""Model collaborator protocol and the request/response types exchanged with it."""

from .base import (
    Availability,
    GenerationOptions,
    GenerationRequest,
    LanguageModel,
    ModelResponse,
    ToolCallRequest,
    ToolResultMessage,
    ToolSpec,
)

__all__ = [
    "Availability", "LanguageModel", "GenerationOptions", "GenerationRequest",
    "ModelResponse", "ToolCallRequest", "ToolResultMessage", "ToolSpec",
]
