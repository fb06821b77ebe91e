"""Session orchestration: lifecycle, generation, tool rounds and the transcript.

A `SessionManager` owns the configuration, the registered tools and, once
initialized, a live session (options and tools snapshotted at initialize time,
plus the transcript). Mutating operations are serialized by an asyncio lock.
Generations hold the lock only to snapshot the live session and to append
their transcript entries, so independent generations (batch) run in parallel.

Example:
    >>> manager = SessionManager(model, SessionConfiguration.precise())
    >>> await manager.register_tool(WeatherTool())
    >>> await manager.initialize()
    >>> review = await manager.generate("Review the film Dune", MovieReview)
    >>> review.rating
    8
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, TypeVar, overload

import orjson
from pydantic import BaseModel

from modelkit.config import get_settings
from modelkit.errors import (
    GenerationFailed,
    ModelKitError,
    ModelNotReady,
    ModelUnavailable,
    SchemaMismatch,
    SessionNotInitialized,
)
from modelkit.models import (
    Availability,
    GenerationOptions,
    GenerationRequest,
    LanguageModel,
    ModelResponse,
    ToolResultMessage,
)
from modelkit.observability import get_logger
from modelkit.schema import Partial, SchemaNode, from_model, stream_partials, validate
from modelkit.tools import BaseTool, ToolRegistry, execute_calls

from .batch import gather_ordered
from .config import SessionConfiguration
from .transcript import PromptEntry, ResponseEntry, ToolCallEntry, Transcript, TranscriptEntry

M = TypeVar("M", bound=BaseModel)

log = get_logger("modelkit.session")


@dataclass(slots=True)
class LiveSession:
    """State allocated by `initialize` and dropped by `reset_session`."""

    id: str
    options: GenerationOptions
    tools: ToolRegistry
    max_tool_rounds: int
    transcript: Transcript = field(default_factory=Transcript)


class SessionManager:
    """Owns one logical session against a model collaborator."""

    def __init__(
        self,
        model: LanguageModel,
        configuration: SessionConfiguration | None = None,
        *,
        tools: Sequence[BaseTool] = (),
    ) -> None:
        self._model = model
        self._configuration = configuration or SessionConfiguration.from_settings()
        self._tools = ToolRegistry(tools)
        self._live: LiveSession | None = None
        self._lock = asyncio.Lock()

    # ─────────────────────────────────────────────────────────────────
    # Read-only state
    # ─────────────────────────────────────────────────────────────────

    @property
    def configuration(self) -> SessionConfiguration:
        return self._configuration

    @property
    def is_initialized(self) -> bool:
        return self._live is not None

    @property
    def transcript(self) -> Transcript:
        """Transcript of the live session (empty before initialize)."""
        return self._live.transcript if self._live is not None else Transcript()

    @property
    def registered_tools(self) -> list[str]:
        return self._tools.names()

    def availability(self) -> Availability:
        """Never takes the lock."""
        return self._model.availability()

    def is_model_available(self) -> bool:
        return self.availability() is Availability.AVAILABLE

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Allocate a live session. Raises ModelUnavailable / ModelNotReady."""
        async with self._lock:
            self._initialize_locked()

    async def reset_session(self) -> None:
        """Drop the transcript and live session, then initialize again."""
        async with self._lock:
            self._live = None
            self._initialize_locked()

    async def update_configuration(self, configuration: SessionConfiguration) -> None:
        """Replace the configuration and reset."""
        async with self._lock:
            self._configuration = configuration
            self._live = None
            self._initialize_locked()

    def _initialize_locked(self) -> None:
        match self._model.availability():
            case Availability.UNAVAILABLE:
                log.warning("model unavailable")
                raise ModelUnavailable()
            case Availability.LOADING:
                log.warning("model not ready")
                raise ModelNotReady()
        cfg = self._configuration
        self._live = LiveSession(
            id=uuid.uuid4().hex[:12],
            options=cfg.options(),
            tools=self._tools.snapshot(),
            max_tool_rounds=cfg.max_tool_rounds,
        )
        log.info("session initialized", session_id=self._live.id, temperature=cfg.temperature,
                 max_tokens=cfg.max_tokens, tools=self._live.tools.names())

    # ─────────────────────────────────────────────────────────────────
    # Tools (effective from the next initialize / reset)
    # ─────────────────────────────────────────────────────────────────

    async def register_tool(self, tool: BaseTool) -> None:
        async with self._lock:
            self._tools.register(tool)

    async def register_tools(self, tools: Sequence[BaseTool]) -> None:
        async with self._lock:
            self._tools.register_all(*tools)

    async def clear_tools(self) -> None:
        async with self._lock:
            self._tools.clear()

    # ─────────────────────────────────────────────────────────────────
    # Generation
    # ─────────────────────────────────────────────────────────────────

    @overload
    async def generate(self, prompt: str, schema: type[M]) -> M: ...
    @overload
    async def generate(self, prompt: str, schema: SchemaNode) -> Any: ...
    @overload
    async def generate(self, prompt: str, schema: None = None) -> str: ...

    async def generate(self, prompt: str, schema: SchemaNode | type[BaseModel] | None = None) -> Any:
        """Generate text, or a value validated against `schema`.

        A pydantic model class as `schema` returns an instance of that model.
        """
        node, model_cls = _resolve(schema)
        async with self._lock:
            live = self._require_live()

        entries, value = await self._run(live, prompt, node)
        await self._record(live, entries)
        return model_cls.model_validate(value) if model_cls is not None else value

    async def generate_streaming(
        self, prompt: str, schema: SchemaNode | type[BaseModel]
    ) -> AsyncIterator[Partial]:
        """Yield a `Partial` snapshot per streamed fragment.

        Closing the iterator early closes the upstream stream. The final
        snapshot is checked for completeness and validity before the
        response is recorded.
        """
        node, _ = _resolve(schema)
        if node is None:
            raise ValueError("generate_streaming requires a schema")
        async with self._lock:
            live = self._require_live()

        slog = log.bind(session_id=live.id)
        last: Partial | None = None
        try:
            request = self._request(live, prompt, node, history=live.transcript.entries)
            source = self._model.stream_response(request)
            # stream_partials owns closing the upstream source
            async with aclosing(stream_partials(node, source)) as partials:  # type: ignore[type-var]
                async for snapshot in partials:
                    last = snapshot
                    yield snapshot
        except ModelKitError as e:
            slog.warning("streaming generation failed", error=str(e), code=e.code)
            raise
        except Exception as e:
            slog.warning("streaming generation failed", error=str(e), error_type=type(e).__name__)
            raise GenerationFailed(str(e) or type(e).__name__) from e

        value = last.to_value() if last is not None else None
        await self._record(live, [PromptEntry(text=prompt), _response_entry(value)])
        slog.info("streaming generation completed")

    async def generate_batch(
        self,
        prompts: Sequence[str],
        schema: SchemaNode | type[BaseModel] | None = None,
        *,
        concurrency: int | None = None,
    ) -> list[Any]:
        """Run independent generations in parallel. Results are in input order."""
        limit = concurrency or get_settings().batch.concurrency
        return await gather_ordered(prompts, lambda p: self.generate(p, schema), concurrency=limit)

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    def _require_live(self) -> LiveSession:
        if self._live is None:
            raise SessionNotInitialized()
        return self._live

    async def _record(self, live: LiveSession, entries: list[TranscriptEntry]) -> None:
        """Append a generation's entries as one group, unless the session was reset meanwhile."""
        async with self._lock:
            if self._live is live:
                live.transcript.extend(entries)
            else:
                log.info("session replaced during generation; entries not recorded", session_id=live.id)

    @staticmethod
    def _request(
        live: LiveSession,
        prompt: str,
        node: SchemaNode | None,
        *,
        history: tuple[TranscriptEntry, ...],
        tool_results: tuple[ToolResultMessage, ...] = (),
        round: int = 0,
    ) -> GenerationRequest:
        return GenerationRequest(
            prompt=prompt,
            output_schema=node,
            json_schema=node.json_schema() if node is not None else None,
            options=live.options,
            tools=live.tools.specs(),
            history=history,
            tool_results=tool_results,
            round=round,
        )

    async def _respond(self, request: GenerationRequest) -> ModelResponse:
        try:
            return await self._model.respond(request)
        except ModelKitError:
            raise
        except Exception as e:
            raise GenerationFailed(str(e) or type(e).__name__) from e

    async def _run(
        self, live: LiveSession, prompt: str, node: SchemaNode | None
    ) -> tuple[list[TranscriptEntry], Any]:
        """One generation: model rounds, tool rounds, validation. Returns entries and value."""
        glog = log.bind(session_id=live.id, structured=node is not None)
        history = live.transcript.entries
        entries: list[TranscriptEntry] = [PromptEntry(text=prompt)]
        tool_results: tuple[ToolResultMessage, ...] = ()
        timeout = get_settings().tools.timeout

        rounds = 0
        while True:
            request = self._request(live, prompt, node, history=history, tool_results=tool_results, round=rounds)
            response = await self._respond(request)
            if not response.wants_tools:
                break
            if rounds >= live.max_tool_rounds:
                glog.warning("tool round limit exceeded", max_tool_rounds=live.max_tool_rounds)
                raise GenerationFailed(f"exceeded {live.max_tool_rounds} tool-call rounds")
            rounds += 1
            calls = await execute_calls(live.tools, response.tool_calls, timeout=timeout)
            glog.info("tool round completed", round=rounds, calls=[c.name for c in calls],
                      failed=sum(1 for c in calls if c.error is not None))
            entries.extend(ToolCallEntry.from_call(c) for c in calls)
            tool_results = (*tool_results, *(c.to_message() for c in calls))

        if node is None:
            text = "" if response.content is None else str(response.content)
            entries.append(ResponseEntry(text=text))
            glog.info("generation completed", tool_rounds=rounds)
            return entries, text

        value = _decode(response.content)
        result = validate(node, value)
        if not result.ok:
            glog.warning("structured output rejected", violations=[str(v) for v in result.violations])
            result.raise_for_violations()
        entries.append(_response_entry(value))
        glog.info("generation completed", tool_rounds=rounds)
        return entries, value


def _resolve(schema: SchemaNode | type[BaseModel] | None) -> tuple[SchemaNode | None, type[BaseModel] | None]:
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return from_model(schema), schema
    return schema, None


def _decode(content: Any) -> Any:
    """Structured content arrives as a value tree, a model instance, or JSON text."""
    if isinstance(content, BaseModel):
        return content.model_dump(mode="json")
    if isinstance(content, (str, bytes)):
        try:
            return orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise SchemaMismatch("", f"response is not valid JSON: {e}") from e
    return content


def _response_entry(value: Any) -> ResponseEntry:
    return ResponseEntry(text=orjson.dumps(value).decode(), structured=value)
