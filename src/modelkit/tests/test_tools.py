"""Tests for tools: registry, invocation protocol, decorator and prebuilt tools."""

from __future__ import annotations

import random
from datetime import date
from typing import Annotated

import pytest
from pydantic import BaseModel, ValidationError

from modelkit.errors import ToolArgumentInvalid, ToolExecutionFailed, ToolNotFound
from modelkit.schema import Guide, Range, ViolationKind
from modelkit.testing import RecordingTool, tool_call
from modelkit.tools import (
    DomainSearchTool,
    ForecastTool,
    InvalidTransition,
    SearchTool,
    ToolCall,
    ToolCallState,
    ToolMetadata,
    ToolRegistry,
    WeatherTool,
    execute_call,
    execute_calls,
    tool,
)

S = ToolCallState


class CountParams(BaseModel):
    count: Annotated[int, Guide(range=(1, 5))]


@tool(description="Add two small numbers together")
def add_numbers(a: Annotated[int, Guide(range=(0, 100))], b: int = 1) -> str:
    """Add numbers.

    Args:
        a: First number
        b: Second number
    """
    return str(a + b)


@tool
async def shout(text: str) -> str:
    """Uppercase the given text for emphasis."""
    return text.upper()


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def weather() -> WeatherTool:
    return WeatherTool(rng=random.Random(7))


@pytest.fixture
def registry(weather: WeatherTool) -> ToolRegistry:
    return ToolRegistry([weather, ForecastTool(rng=random.Random(7))])


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

class TestRegistry:
    def test_lookup(self, registry: ToolRegistry, weather: WeatherTool) -> None:
        assert registry["get_weather"] is weather
        assert "get_forecast" in registry
        assert len(registry) == 2
        assert registry.names() == ["get_weather", "get_forecast"]

    def test_missing_tool(self, registry: ToolRegistry) -> None:
        assert registry.get("nope") is None
        with pytest.raises(ToolNotFound):
            registry["nope"]
        with pytest.raises(KeyError):
            registry["nope"]

    def test_duplicate_name_rejected(self, registry: ToolRegistry) -> None:
        with pytest.raises(ValueError):
            registry.register(WeatherTool())

    def test_unregister(self, registry: ToolRegistry) -> None:
        assert registry.unregister("get_weather")
        assert not registry.unregister("get_weather")
        assert registry.names() == ["get_forecast"]

    def test_specs_carry_argument_schemas(self, registry: ToolRegistry) -> None:
        spec = {s.name: s for s in registry.specs()}["get_forecast"]
        assert set(spec.parameters["properties"]) == {"location", "days"}
        assert spec.parameters["properties"]["days"]["minimum"] == 1

    def test_describe(self, registry: ToolRegistry) -> None:
        assert "- **get_weather** (weather):" in registry.describe()

    def test_snapshot_is_independent(self, registry: ToolRegistry) -> None:
        copy = registry.snapshot()
        registry.clear()
        assert len(registry) == 0
        assert copy.names() == ["get_weather", "get_forecast"]


class TestToolDefinition:
    def test_metadata_name_must_be_snake_case(self) -> None:
        with pytest.raises(ValidationError):
            ToolMetadata(name="Bad Name", description="A description long enough")

    def test_argument_schema_from_params(self) -> None:
        schema = ForecastTool().argument_schema
        assert schema.field_names() == ("location", "days")
        assert schema.constraint_of("days") == Range(1, None)

    def test_with_defaults(self) -> None:
        assert ForecastTool().with_defaults({"location": "Oslo"}) == {"location": "Oslo", "days": 3}
        assert ForecastTool().with_defaults({"location": "Oslo", "days": 5})["days"] == 5

    def test_decorated_function(self) -> None:
        assert add_numbers.name == "add_numbers"
        assert add_numbers.metadata.description == "Add two small numbers together"
        assert add_numbers.argument_schema.constraint_of("a") == Range(0, 100)
        assert add_numbers.params_schema.model_fields["b"].description == "Second number"

    def test_description_from_docstring(self) -> None:
        assert shout.metadata.description == "Uppercase the given text for emphasis."

    @pytest.mark.asyncio
    async def test_async_function_tool(self) -> None:
        assert await shout.invoke({"text": "hi"}) == "HI"


# ─────────────────────────────────────────────────────────────────────────────
# Invocation protocol
# ─────────────────────────────────────────────────────────────────────────────

class TestStateMachine:
    def test_illegal_transitions(self) -> None:
        call = ToolCall(id="c1", name="x")
        with pytest.raises(InvalidTransition):
            call.transition(S.EXECUTING)
        call.fail(ToolNotFound("x"))
        with pytest.raises(InvalidTransition):
            call.complete("late")

    def test_message_requires_terminal_state(self) -> None:
        with pytest.raises(InvalidTransition):
            ToolCall(id="c1", name="x").to_message()


class TestExecuteCall:
    @pytest.mark.asyncio
    async def test_successful_call(self, registry: ToolRegistry) -> None:
        call = await execute_call(registry, tool_call("get_weather", id="c1", location="Oslo"))
        assert call.state is S.COMPLETED
        assert call.history == [S.REQUESTED, S.ARGUMENTS_VALIDATED, S.EXECUTING, S.COMPLETED]
        assert call.result.startswith("Weather in Oslo:")
        message = call.to_message()
        assert message.call_id == "c1" and not message.is_error

    @pytest.mark.asyncio
    async def test_invalid_arguments_never_invoke_the_tool(self) -> None:
        counter = RecordingTool(params=CountParams, tool_name="counter")
        call = await execute_call(ToolRegistry([counter]), tool_call("counter", count=9))
        assert call.history == [S.REQUESTED, S.FAILED]
        assert isinstance(call.error, ToolArgumentInvalid)
        assert call.error.violations[0].path == "count"
        assert counter.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_argument(self) -> None:
        echo = RecordingTool()
        call = await execute_call(ToolRegistry([echo]), tool_call("recorder"))
        assert isinstance(call.error, ToolArgumentInvalid)
        assert call.error.violations[0].kind == ViolationKind.MISSING
        assert echo.call_count == 0

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry: ToolRegistry) -> None:
        call = await execute_call(registry, tool_call("teleport", destination="Mars"))
        assert call.state is S.FAILED
        assert isinstance(call.error, ToolNotFound)

    @pytest.mark.asyncio
    async def test_capability_error_is_recorded(self) -> None:
        broken = RecordingTool(raises=RuntimeError("boom"))
        call = await execute_call(ToolRegistry([broken]), tool_call("recorder", text="hi"))
        assert call.history == [S.REQUESTED, S.ARGUMENTS_VALIDATED, S.EXECUTING, S.FAILED]
        assert isinstance(call.error, ToolExecutionFailed)
        assert call.error.reason == "boom"
        assert broken.invocations == [{"text": "hi"}]

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        slow = RecordingTool(delay=1.0)
        call = await execute_call(ToolRegistry([slow]), tool_call("recorder", text="hi"), timeout=0.01)
        assert isinstance(call.error, ToolExecutionFailed)
        assert "timed out" in call.error.reason

    @pytest.mark.asyncio
    async def test_failure_message_is_rendered_for_the_model(self) -> None:
        counter = RecordingTool(params=CountParams, tool_name="counter")
        call = await execute_call(ToolRegistry([counter]), tool_call("counter", count=0))
        message = call.to_message()
        assert message.is_error
        assert message.content.startswith("**Tool Error (counter):**")

    @pytest.mark.asyncio
    async def test_round_keeps_request_order(self) -> None:
        slow = RecordingTool(tool_name="slow", return_value="slow", delay=0.05)
        fast = RecordingTool(tool_name="fast", return_value="fast")
        registry = ToolRegistry([slow, fast])
        calls = await execute_calls(registry, [
            tool_call("slow", id="a", text="1"),
            tool_call("fast", id="b", text="2"),
        ])
        assert [(c.id, c.result) for c in calls] == [("a", "slow"), ("b", "fast")]

    @pytest.mark.asyncio
    async def test_decorated_tool_through_protocol(self) -> None:
        registry = ToolRegistry([add_numbers])
        ok = await execute_call(registry, tool_call("add_numbers", a=2))
        bad = await execute_call(registry, tool_call("add_numbers", a=500))
        assert ok.result == "3"
        assert isinstance(bad.error, ToolArgumentInvalid)


# ─────────────────────────────────────────────────────────────────────────────
# Prebuilt tools
# ─────────────────────────────────────────────────────────────────────────────

class TestForecast:
    def test_days_are_clamped_to_a_week(self) -> None:
        assert len(ForecastTool().forecast("Lisbon", 10)) == 7

    def test_consecutive_days_from_today(self) -> None:
        days = ForecastTool(today=lambda: date(2024, 1, 1)).forecast("Lisbon", 7)
        assert days[0].day == date(2024, 1, 1)
        assert days[-1].day == date(2024, 1, 7)

    @pytest.mark.asyncio
    async def test_ten_day_request_returns_seven(self) -> None:
        registry = ToolRegistry([ForecastTool(rng=random.Random(1))])
        call = await execute_call(registry, tool_call("get_forecast", location="Lisbon", days=10))
        assert call.state is S.COMPLETED
        assert call.result.count("chance of rain") == 7

    @pytest.mark.asyncio
    async def test_zero_days_is_invalid(self) -> None:
        registry = ToolRegistry([ForecastTool()])
        call = await execute_call(registry, tool_call("get_forecast", location="Lisbon", days=0))
        assert isinstance(call.error, ToolArgumentInvalid)


class TestSearch:
    def test_results_are_ranked(self) -> None:
        results = SearchTool(rng=random.Random(3)).search("asyncio")
        assert len(results) == 3
        scores = [r.relevance_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_domain_url_is_quoted(self) -> None:
        (result,) = DomainSearchTool().search("async io", "python.org")
        assert result.url == "https://python.org/search?q=async%20io"

    @pytest.mark.asyncio
    async def test_domain_must_look_like_a_domain(self) -> None:
        registry = ToolRegistry([DomainSearchTool()])
        call = await execute_call(registry, tool_call("search_domain", query="x", domain="not a domain"))
        assert isinstance(call.error, ToolArgumentInvalid)
        assert call.error.violations[0].kind == ViolationKind.REGEX
