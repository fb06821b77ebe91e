"""Decorator-based tool definition for plain functions.

Example:
    >>> @tool(description="Convert a temperature to Fahrenheit")
    ... def to_fahrenheit(celsius: Annotated[float, Guide(range=(-90, 60))]) -> str:
    ...     '''Convert Celsius.
    ...
    ...     Args:
    ...         celsius: Temperature in degrees Celsius
    ...     '''
    ...     return f"{celsius * 9 / 5 + 32:.1f}F"
    ...
    >>> registry.register(to_fahrenheit)
"""

from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import Awaitable
from typing import Callable, get_type_hints, overload

from pydantic import BaseModel, Field, create_model

from .base import BaseTool, ToolMetadata

_PARAM_PATTERN = re.compile(
    r"^\s*(?P<name>\w+)\s*(?:\([^)]*\))?\s*:\s*(?P<desc>.+?)(?=\n\s*\w+\s*:|$)",
    re.MULTILINE | re.DOTALL,
)


def _parse_docstring_params(docstring: str | None) -> dict[str, str]:
    """Extract parameter descriptions from a Google-style `Args:` section."""
    if not docstring:
        return {}
    sections = re.split(r"\n\s*(?:Args|Arguments|Parameters)\s*:\s*\n", docstring, flags=re.IGNORECASE)
    if len(sections) < 2:
        return {}
    args_section = re.split(r"\n\s*(?:Returns|Raises|Examples?|Notes?)\s*:", sections[1], flags=re.IGNORECASE)[0]
    return {m.group("name"): " ".join(m.group("desc").split()) for m in _PARAM_PATTERN.finditer(args_section)}


def _generate_schema(func: Callable[..., object], model_name: str) -> type[BaseModel]:
    """Build the argument model from the function signature, keeping `Guide` metadata."""
    sig = inspect.signature(func)
    hints = get_type_hints(func, include_extras=True)
    param_docs = _parse_docstring_params(func.__doc__)

    fields: dict[str, tuple[object, object]] = {}
    for name, param in sig.parameters.items():
        if name in ("self", "cls"):
            continue
        field_type = hints.get(name, str)
        description = param_docs.get(name)
        if param.default is inspect.Parameter.empty:
            fields[name] = (field_type, Field(..., description=description))
        else:
            fields[name] = (field_type, Field(default=param.default, description=description))

    return create_model(model_name, **fields)  # type: ignore[call-overload]


class FunctionTool(BaseTool[BaseModel]):
    """BaseTool wrapping a sync or async function."""

    def __init__(
        self,
        func: Callable[..., str] | Callable[..., Awaitable[str]],
        metadata: ToolMetadata,
        params_schema: type[BaseModel],
    ) -> None:
        self._func = func
        self._is_async = inspect.iscoroutinefunction(func)
        self.metadata = metadata  # type: ignore[misc]
        self.params_schema = params_schema  # type: ignore[misc]

    def _run(self, params: BaseModel) -> str:
        if self._is_async:
            raise TypeError(f"{self.metadata.name} is async; use invoke()")
        return self._func(**_kwargs(params))  # type: ignore[return-value]

    async def _async_run(self, params: BaseModel) -> str:
        if self._is_async:
            return await self._func(**_kwargs(params))  # type: ignore[misc]
        return await asyncio.to_thread(self._run, params)

    @property
    def func(self) -> Callable[..., object]:
        return self._func


def _kwargs(params: BaseModel) -> dict[str, object]:
    # Keep nested models and enums as objects instead of dumping them
    return {name: getattr(params, name) for name in type(params).model_fields}


@overload
def tool(func: Callable[..., str]) -> FunctionTool: ...


@overload
def tool(
    *,
    name: str | None = None,
    description: str | None = None,
    category: str = "general",
) -> Callable[[Callable[..., object]], FunctionTool]: ...


def tool(
    func: Callable[..., object] | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
    category: str = "general",
) -> FunctionTool | Callable[[Callable[..., object]], FunctionTool]:
    """Turn a function into a FunctionTool.

    Args:
        func: The function to wrap (when used without parentheses)
        name: Tool name (defaults to the function name in snake_case)
        description: Tool description (defaults to the first docstring line)
        category: Tool category for grouping
    """
    def decorator(fn: Callable[..., object]) -> FunctionTool:
        tool_name = name or _to_snake_case(fn.__name__)
        tool_desc = description or _extract_description(fn.__doc__) or f"Execute {tool_name}"
        if len(tool_desc) < 10:
            tool_desc = f"{tool_desc} (function tool)"
        meta = ToolMetadata(name=tool_name, description=tool_desc, category=category)
        schema = _generate_schema(fn, f"{_to_pascal_case(tool_name)}Params")
        return FunctionTool(fn, meta, schema)  # type: ignore[arg-type]

    if func is not None:
        return decorator(func)
    return decorator


def _to_snake_case(name: str) -> str:
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _to_pascal_case(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _extract_description(docstring: str | None) -> str | None:
    if not docstring:
        return None
    first = docstring.strip().split("\n\n")[0]
    return " ".join(first.split()) or None
