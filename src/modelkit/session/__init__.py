"""Session orchestration.

- SessionManager: lifecycle, generation (plain, structured, streaming, batch)
- SessionConfiguration: clamped sampling options with presets
- Transcript: append-only log of prompts, tool calls and responses
"""

from .batch import gather_ordered
from .config import SessionConfiguration
from .manager import LiveSession, SessionManager
from .transcript import PromptEntry, ResponseEntry, ToolCallEntry, Transcript, TranscriptEntry

__all__ = [
    "SessionManager", "LiveSession", "SessionConfiguration",
    "Transcript", "TranscriptEntry", "PromptEntry", "ResponseEntry", "ToolCallEntry",
    "gather_ordered",
]
