"""Tools the model can call during generation.

- BaseTool / ToolMetadata / @tool: defining tools
- ToolRegistry: the set of tools offered to a session
- execute_call / execute_calls / ToolCall: the invocation protocol
"""

from .base import BaseTool, ToolMetadata
from .decorator import FunctionTool, tool
from .invocation import InvalidTransition, ToolCall, ToolCallState, execute_call, execute_calls
from .prebuilt import DomainSearchTool, ForecastTool, SearchTool, WeatherTool
from .registry import ToolRegistry

__all__ = [
    "BaseTool", "ToolMetadata", "FunctionTool", "tool",
    "ToolRegistry",
    "ToolCall", "ToolCallState", "InvalidTransition", "execute_call", "execute_calls",
    "WeatherTool", "ForecastTool", "SearchTool", "DomainSearchTool",
]
