"""Test doubles for code built on modelkit."""

from .fakes import RecordingTool, ScriptedModel, tool_call

__all__ = ["ScriptedModel", "RecordingTool", "tool_call"]
