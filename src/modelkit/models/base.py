"""The boundary to the language-model runtime.

modelkit never samples tokens itself. Everything it needs from a model is the
`LanguageModel` protocol: report availability, answer one request, or stream
fragments of a structured answer. Requests and responses are plain pydantic
models so that adapters for concrete runtimes stay small.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from enum import StrEnum
from typing import Annotated, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class Availability(StrEnum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    LOADING = "loading"


class GenerationOptions(BaseModel):
    """Sampling options snapshotted into a live session."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.7
    max_tokens: int = 4096


class ToolSpec(BaseModel):
    """What the model is told about one registered tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, Any] = Field(description="JSON Schema of the argument struct")


class ToolCallRequest(BaseModel):
    """A model-initiated request to run a tool."""

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResultMessage(BaseModel):
    """Outcome of one tool call, fed back to the model on the next round."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    name: str
    content: str
    is_error: bool = False


class GenerationRequest(BaseModel):
    """Everything the model needs for one round of one generation."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    output_schema: Any = Field(default=None, description="SchemaNode for structured output, None for text")
    json_schema: dict[str, Any] | None = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)
    tools: tuple[ToolSpec, ...] = ()
    history: tuple[Any, ...] = Field(default=(), description="Transcript entries preceding this prompt")
    tool_results: tuple[ToolResultMessage, ...] = ()
    round: int = 0

    @property
    def structured(self) -> bool:
        return self.output_schema is not None


class ModelResponse(BaseModel):
    """One model answer: text or a structured value, plus any tool calls it wants run first."""

    model_config = ConfigDict(frozen=True)

    content: Any = None
    tool_calls: tuple[ToolCallRequest, ...] = ()

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)


@runtime_checkable
class LanguageModel(Protocol):
    """The model collaborator."""

    def availability(self) -> Availability: ...

    async def respond(self, request: GenerationRequest) -> ModelResponse: ...

    def stream_response(self, request: GenerationRequest) -> AsyncIterator[object]:
        """Async iterator of value-tree fragments for `request.output_schema`."""
        ...
