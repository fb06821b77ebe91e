"""Session configuration."""

from __future__ import annotations

import math
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, field_validator

from modelkit.models import GenerationOptions

MIN_MAX_TOKENS = 100


class SessionConfiguration(BaseModel):
    """Sampling options for a session. Out-of-range values are clamped, not rejected.

    NaN is not a temperature and fails validation.

    Example:
        >>> SessionConfiguration(temperature=1.5, max_tokens=10)
        SessionConfiguration(temperature=1.0, max_tokens=100, max_tool_rounds=5)
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    temperature: float = 0.7
    max_tokens: int = 4096
    max_tool_rounds: int = 5

    @field_validator("temperature", mode="before")
    @classmethod
    def _clamp_temperature(cls, v: Any) -> Any:
        return min(max(float(v), 0.0), 1.0) if isinstance(v, (int, float)) else v

    @field_validator("max_tokens", mode="before")
    @classmethod
    def _floor_tokens(cls, v: Any) -> Any:
        return max(int(v), MIN_MAX_TOKENS) if _finite(v) else v

    @field_validator("max_tool_rounds", mode="before")
    @classmethod
    def _floor_rounds(cls, v: Any) -> Any:
        return max(int(v), 1) if _finite(v) else v

    # ─────────────────────────────────────────────────────────────────
    # Presets
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def default(cls) -> Self:
        return cls(temperature=0.7, max_tokens=4096)

    @classmethod
    def creative(cls) -> Self:
        """More varied outputs."""
        return cls(temperature=0.9, max_tokens=4096)

    @classmethod
    def precise(cls) -> Self:
        """Consistent outputs."""
        return cls(temperature=0.3, max_tokens=4096)

    @classmethod
    def from_settings(cls) -> Self:
        """Defaults from `MODELKIT_SESSION_*`."""
        from modelkit.config import get_settings
        s = get_settings().session
        return cls(temperature=s.temperature, max_tokens=s.max_tokens, max_tool_rounds=s.max_tool_rounds)

    def options(self) -> GenerationOptions:
        return GenerationOptions(temperature=self.temperature, max_tokens=self.max_tokens)


def _finite(v: Any) -> bool:
    return isinstance(v, int) or (isinstance(v, float) and math.isfinite(v))
