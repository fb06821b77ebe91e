"""Append-only transcript of one session."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from typing import Annotated, Any, Literal

import orjson
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from modelkit.tools import ToolCall


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PromptEntry(_Entry):
    kind: Literal["prompt"] = "prompt"
    text: str


class ResponseEntry(_Entry):
    """Model output. `structured` holds the validated value of a structured generation."""

    kind: Literal["response"] = "response"
    text: str
    structured: Any = None


class ToolCallEntry(_Entry):
    """One finished tool call: `result` on success, `error` (rendered) on failure."""

    kind: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    result: str | None = None
    error: str | None = None

    @classmethod
    def from_call(cls, call: ToolCall) -> ToolCallEntry:
        error = call.error
        return cls(
            call_id=call.id,
            name=call.name,
            arguments=call.arguments,
            result=call.result,
            error=str(error) if error is not None else None,
        )

    @property
    def failed(self) -> bool:
        return self.error is not None


TranscriptEntry = Annotated[PromptEntry | ResponseEntry | ToolCallEntry, Field(discriminator="kind")]

_entries_adapter: TypeAdapter[list[TranscriptEntry]] = TypeAdapter(list[TranscriptEntry])


class Transcript:
    """Ordered log of prompts, tool calls and responses.

    Entries are only ever appended. A generation appends its entries as one
    contiguous group (`extend`), so concurrent generations never interleave.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[TranscriptEntry] = ()) -> None:
        self._entries: list[TranscriptEntry] = list(entries)

    def append(self, entry: TranscriptEntry) -> None:
        self._entries.append(entry)

    def extend(self, entries: Iterable[TranscriptEntry]) -> None:
        self._entries.extend(entries)

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def prompts(self) -> list[PromptEntry]:
        return [e for e in self._entries if isinstance(e, PromptEntry)]

    def responses(self) -> list[ResponseEntry]:
        return [e for e in self._entries if isinstance(e, ResponseEntry)]

    def tool_calls(self) -> list[ToolCallEntry]:
        return [e for e in self._entries if isinstance(e, ToolCallEntry)]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self._entries)

    def __getitem__(self, i: int) -> TranscriptEntry:
        return self._entries[i]

    # ─────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────

    def to_json(self, *, indent: bool = False) -> bytes:
        """The whole log as a JSON array (for inspection, not persistence)."""
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(_entries_adapter.dump_python(self._entries, mode="json"), option=option)

    @classmethod
    def from_json(cls, data: bytes | str) -> Transcript:
        return cls(_entries_adapter.validate_json(data))

    def __repr__(self) -> str:
        return f"Transcript({len(self._entries)} entries)"
