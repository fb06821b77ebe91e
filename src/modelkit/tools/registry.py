"""Registry of the tools a session offers to the model.

The registry provides:
- Registration and lookup by name (names are unique)
- Tool specs and a formatted description for generation requests
- Snapshots, so a live session keeps the tool set it was created with
"""

from __future__ import annotations

from collections.abc import Iterator

from modelkit.errors import ToolNotFound
from modelkit.models import ToolSpec

from .base import BaseTool, ToolMetadata


class ToolRegistry:
    """Named collection of tools.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(WeatherTool())
        >>> "get_weather" in registry
        True
        >>> registry["get_forecast"]
        Traceback (most recent call last):
        ...
        modelkit.errors.errors.ToolNotFound: No tool registered under 'get_forecast'
    """

    __slots__ = ("_tools",)

    def __init__(self, tools: tuple[BaseTool, ...] | list[BaseTool] = ()) -> None:
        self._tools: dict[str, BaseTool] = {}
        self.register_all(*tools)

    def register(self, tool: BaseTool) -> None:
        name = tool.metadata.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered. Use unregister() first.")
        self._tools[name] = tool

    def unregister(self, name: str) -> bool:
        """Remove a tool by name. Returns True if found."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def __getitem__(self, name: str) -> BaseTool:
        """Get tool by name, raises ToolNotFound (a KeyError) if missing."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFound(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self, *, enabled_only: bool = True) -> list[ToolMetadata]:
        return [t.metadata for t in self._tools.values() if not enabled_only or t.metadata.enabled]

    # ─────────────────────────────────────────────────────────────────
    # Request rendering
    # ─────────────────────────────────────────────────────────────────

    def specs(self) -> tuple[ToolSpec, ...]:
        """Specs of every enabled tool, in registration order."""
        return tuple(t.spec() for t in self._tools.values() if t.metadata.enabled)

    def describe(self) -> str:
        """Formatted tool list for prompts."""
        return "\n".join(
            f"- **{m.name}** ({m.category}): {m.description}" for m in self.list_tools()
        )

    # ─────────────────────────────────────────────────────────────────
    # Bulk operations
    # ─────────────────────────────────────────────────────────────────

    def register_all(self, *tools: BaseTool) -> None:
        for tool in tools:
            self.register(tool)

    def clear(self) -> None:
        self._tools.clear()

    def snapshot(self) -> ToolRegistry:
        """Independent copy holding the same tool instances."""
        return ToolRegistry(tuple(self._tools.values()))

    def __repr__(self) -> str:
        return f"ToolRegistry({', '.join(self._tools)})"
