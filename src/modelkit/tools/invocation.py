"""Tool-call invocation protocol.

Each model-requested call walks a small state machine:

    REQUESTED ──► ARGUMENTS_VALIDATED ──► EXECUTING ──► COMPLETED
        │                                     │
        └──────────────► FAILED ◄─────────────┘

Arguments are validated against the tool's argument schema before anything
runs; a call with invalid arguments (or naming an unknown tool) fails straight
from REQUESTED and the capability is never invoked. Failures are recorded on
the call, not raised, so the whole round can be reported back to the model.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from modelkit.errors import (
    Err,
    ModelKitError,
    Ok,
    Result,
    ToolArgumentInvalid,
    ToolExecutionFailed,
    ToolNotFound,
)
from modelkit.models import ToolCallRequest, ToolResultMessage
from modelkit.observability import get_logger
from modelkit.schema import validate

from .registry import ToolRegistry

log = get_logger("modelkit.tools")


class ToolCallState(StrEnum):
    REQUESTED = "requested"
    ARGUMENTS_VALIDATED = "arguments_validated"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[ToolCallState, frozenset[ToolCallState]] = {
    ToolCallState.REQUESTED: frozenset({ToolCallState.ARGUMENTS_VALIDATED, ToolCallState.FAILED}),
    ToolCallState.ARGUMENTS_VALIDATED: frozenset({ToolCallState.EXECUTING}),
    ToolCallState.EXECUTING: frozenset({ToolCallState.COMPLETED, ToolCallState.FAILED}),
    ToolCallState.COMPLETED: frozenset(),
    ToolCallState.FAILED: frozenset(),
}


class InvalidTransition(ModelKitError):
    """A tool call was moved along an edge the state machine does not have."""

    def __init__(self, current: ToolCallState, target: ToolCallState) -> None:
        self.current, self.target = current, target
        super().__init__(f"Illegal tool-call transition {current} -> {target}")


@dataclass(slots=True)
class ToolCall:
    """One tool call and its progress through the state machine."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    state: ToolCallState = ToolCallState.REQUESTED
    history: list[ToolCallState] = field(default_factory=lambda: [ToolCallState.REQUESTED])
    outcome: Result[str, ModelKitError] | None = None

    @classmethod
    def from_request(cls, request: ToolCallRequest) -> ToolCall:
        return cls(id=request.id, name=request.name, arguments=dict(request.arguments))

    def transition(self, target: ToolCallState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(self.state, target)
        self.state = target
        self.history.append(target)

    def complete(self, output: str) -> None:
        self.transition(ToolCallState.COMPLETED)
        self.outcome = Ok(output)

    def fail(self, error: ModelKitError) -> None:
        self.transition(ToolCallState.FAILED)
        self.outcome = Err(error)

    @property
    def done(self) -> bool:
        return self.state in (ToolCallState.COMPLETED, ToolCallState.FAILED)

    @property
    def result(self) -> str | None:
        return self.outcome.ok() if self.outcome is not None else None

    @property
    def error(self) -> ModelKitError | None:
        return self.outcome.err() if self.outcome is not None else None

    def to_message(self) -> ToolResultMessage:
        """What the model sees on the next round. Failures are rendered as ErrorInfo."""
        if not self.done:
            raise InvalidTransition(self.state, ToolCallState.COMPLETED)
        if (error := self.error) is not None:
            return ToolResultMessage(call_id=self.id, name=self.name, content=error.to_info(self.name).render(), is_error=True)
        return ToolResultMessage(call_id=self.id, name=self.name, content=self.result or "")


async def execute_call(
    registry: ToolRegistry,
    request: ToolCallRequest,
    *,
    timeout: float | None = None,
) -> ToolCall:
    """Validate and run one call. Never raises for tool-side failures."""
    call = ToolCall.from_request(request)
    tlog = log.bind_tool(request.name, call_id=request.id)

    tool = registry.get(request.name)
    if tool is None:
        call.fail(ToolNotFound(request.name))
        tlog.warning("tool not found")
        return call

    arguments = tool.with_defaults(request.arguments)
    result = validate(tool.argument_schema, arguments)
    if not result.ok:
        call.fail(ToolArgumentInvalid(request.name, result.violations))
        tlog.warning("tool arguments invalid", violations=[str(v) for v in result.violations])
        return call
    call.arguments = arguments
    call.transition(ToolCallState.ARGUMENTS_VALIDATED)

    call.transition(ToolCallState.EXECUTING)
    tlog.debug("executing")
    try:
        if timeout is None:
            output = await tool.invoke(arguments)
        else:
            output = await asyncio.wait_for(tool.invoke(arguments), timeout=timeout)
    except TimeoutError:
        call.fail(ToolExecutionFailed(request.name, f"timed out after {timeout}s"))
        tlog.warning("tool timed out", timeout=timeout)
    except ModelKitError as e:
        call.fail(e)
        tlog.warning("tool failed", error=str(e))
    except Exception as e:
        call.fail(ToolExecutionFailed(request.name, str(e) or type(e).__name__))
        tlog.warning("tool failed", error=str(e), error_type=type(e).__name__)
    else:
        call.complete(output)
        tlog.debug("tool completed")
    return call


async def execute_calls(
    registry: ToolRegistry,
    requests: Sequence[ToolCallRequest],
    *,
    timeout: float | None = None,
) -> list[ToolCall]:
    """Run one round of calls concurrently. Results come back in request order."""
    if not requests:
        return []
    return list(await asyncio.gather(*(execute_call(registry, r, timeout=timeout) for r in requests)))

