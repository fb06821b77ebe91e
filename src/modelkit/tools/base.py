"""Tool abstractions: BaseTool and ToolMetadata.

A tool is a capability the model may ask to run during generation. Its
arguments are declared as a pydantic model (with `Guide` annotations for
constraints), which doubles as the argument schema the model sees and the
schema the invocation protocol validates against before running anything.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import PydanticUndefined

from modelkit.models import ToolSpec
from modelkit.schema import Struct, from_model


class ToolMetadata(BaseModel):
    """Metadata describing a tool.

    Attributes:
        name: Unique identifier (snake_case, e.g. "get_weather")
        description: What the tool does (shown to the model for selection)
        category: Grouping category (e.g. "weather", "search")
        enabled: Whether the tool is offered to the model
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[a-z][a-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: str = Field(default="general")
    enabled: bool = Field(default=True)


TParams = TypeVar("TParams", bound=BaseModel)


class BaseTool(ABC, Generic[TParams]):
    """Abstract base class for all tools.

    Subclasses must:
    - Define `metadata` class variable with ToolMetadata
    - Define `params_schema` class variable with the pydantic model type
    - Implement `_run(params)` returning a string result

    Override `_async_run(params)` for a native async implementation.

    Example:
        >>> class SearchParams(BaseModel):
        ...     query: Annotated[str, Guide(description="Search query")]
        ...     limit: Annotated[int, Guide(range=(1, 20))] = 5
        ...
        >>> class SearchTool(BaseTool[SearchParams]):
        ...     metadata = ToolMetadata(
        ...         name="web_search",
        ...         description="Search the web for information",
        ...         category="search",
        ...     )
        ...     params_schema = SearchParams
        ...
        ...     def _run(self, params: SearchParams) -> str:
        ...         return f"Results for: {params.query}"
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[BaseModel]]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def argument_schema(self) -> Struct:
        """Descriptor that tool-call arguments are validated against."""
        return from_model(self.params_schema)

    def with_defaults(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Fill in declared defaults for arguments the model left out."""
        out: dict[str, Any] = {}
        for name, info in self.params_schema.model_fields.items():
            if name in arguments:
                continue
            if info.default_factory is not None:
                out[name] = info.default_factory()  # type: ignore[call-arg]
            elif info.default is not PydanticUndefined:
                out[name] = info.default
        out.update(arguments)
        return out

    def spec(self) -> ToolSpec:
        """How this tool is presented in a generation request."""
        return ToolSpec(
            name=self.metadata.name,
            description=self.metadata.description,
            parameters=self.argument_schema.json_schema(),
        )

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    @abstractmethod
    def _run(self, params: TParams) -> str:
        """Execute the tool synchronously. Return a string for model consumption."""
        ...

    async def _async_run(self, params: TParams) -> str:
        """Default implementation wraps `_run` in a thread."""
        return await asyncio.to_thread(self._run, params)

    async def invoke(self, arguments: Mapping[str, Any]) -> str:
        """Run the capability with already-validated arguments."""
        params = self.params_schema.model_validate(dict(arguments))
        return await self._async_run(params)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.metadata.name!r}>"
