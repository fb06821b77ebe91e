"""Scripted model collaborator and recording tool for tests.

`ScriptedModel` plays back queued responses and stream fragments, records
every request it receives, and tracks whether its streams were closed:

    >>> model = ScriptedModel([
    ...     ModelResponse(tool_calls=(tool_call("get_weather", location="Oslo"),)),
    ...     {"city": "Oslo", "advice": "Bring a coat"},
    ... ])
    >>> manager = SessionManager(model)
"""

from __future__ import annotations

import asyncio
import itertools
from collections import deque
from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from modelkit.models import Availability, GenerationRequest, ModelResponse, ToolCallRequest
from modelkit.tools import BaseTool, ToolMetadata

_call_ids = itertools.count(1)


def tool_call(name: str, /, id: str | None = None, **arguments: Any) -> ToolCallRequest:
    """Build a tool-call request (ids are generated when omitted)."""
    return ToolCallRequest(id=id or f"call_{next(_call_ids)}", name=name, arguments=arguments)


class ScriptedModel:
    """In-memory `LanguageModel` driven by a script.

    Responses may be `ModelResponse` objects, plain content (wrapped in a
    `ModelResponse`), or exception instances (raised). `responder` computes
    a response from the request instead of using the queue. `delays` maps a
    prompt to seconds to sleep before answering it.
    """

    def __init__(
        self,
        responses: Iterable[Any] = (),
        *,
        streams: Iterable[Iterable[Any]] = (),
        status: Availability = Availability.AVAILABLE,
        responder: Callable[[GenerationRequest], Any] | None = None,
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.status = status
        self.requests: list[GenerationRequest] = []
        self.streams_opened = 0
        self.streams_closed = 0
        self.streams_exhausted = 0
        self._responses: deque[Any] = deque(responses)
        self._streams: deque[list[Any]] = deque(list(s) for s in streams)
        self._responder = responder
        self._delays = dict(delays or {})

    def availability(self) -> Availability:
        return self.status

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def queue_stream(self, fragments: Iterable[Any]) -> None:
        self._streams.append(list(fragments))

    async def respond(self, request: GenerationRequest) -> ModelResponse:
        self.requests.append(request)
        if delay := self._delays.get(request.prompt):
            await asyncio.sleep(delay)
        if self._responder is not None:
            item = self._responder(request)
        elif self._responses:
            item = self._responses.popleft()
        else:
            raise RuntimeError("ScriptedModel has no responses left")
        if isinstance(item, BaseException):
            raise item
        return item if isinstance(item, ModelResponse) else ModelResponse(content=item)

    def stream_response(self, request: GenerationRequest) -> AsyncIterator[Any]:
        self.requests.append(request)
        if not self._streams:
            raise RuntimeError("ScriptedModel has no streams left")
        return self._play(self._streams.popleft())

    async def _play(self, fragments: list[Any]) -> AsyncIterator[Any]:
        self.streams_opened += 1
        try:
            for fragment in fragments:
                if isinstance(fragment, BaseException):
                    raise fragment
                await asyncio.sleep(0)
                yield fragment
            self.streams_exhausted += 1
        finally:
            self.streams_closed += 1

    @property
    def open_streams(self) -> int:
        return self.streams_opened - self.streams_closed


# ─────────────────────────────────────────────────────────────────────────────
# Recording tool
# ─────────────────────────────────────────────────────────────────────────────


class _EchoParams(BaseModel):
    text: str


@dataclass
class RecordingTool(BaseTool[BaseModel]):
    """Tool that records invocations and answers with a fixed value or error.

    Wraps an argument model so validation behaves exactly as for a real tool.
    """

    params: type[BaseModel] = _EchoParams
    tool_name: str = "recorder"
    return_value: str = "ok"
    raises: Exception | None = None
    delay: float = 0.0
    invocations: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.metadata = ToolMetadata(name=self.tool_name, description=f"Recording tool {self.tool_name} for tests")  # type: ignore[misc]
        self.params_schema = self.params  # type: ignore[misc]

    @property
    def call_count(self) -> int:
        return len(self.invocations)

    def _run(self, params: BaseModel) -> str:
        raise NotImplementedError

    async def _async_run(self, params: BaseModel) -> str:
        self.invocations.append(params.model_dump(mode="json"))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        return self.return_value
