"""Weather tools - current conditions and a short forecast.

Both tools return simulated data; a seeded `random.Random` makes them
deterministic:

    >>> tool = ForecastTool(rng=random.Random(7))
    >>> len(tool.forecast("Lisbon", days=10))
    7
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from enum import StrEnum
from typing import Annotated, Callable, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from modelkit.schema import Guide

from ..base import BaseTool, ToolMetadata

MAX_FORECAST_DAYS = 7


class WeatherCondition(StrEnum):
    SUNNY = "Sunny"
    PARTLY_CLOUDY = "Partly Cloudy"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    STORMY = "Stormy"
    SNOWY = "Snowy"
    FOGGY = "Foggy"
    WINDY = "Windy"


class WeatherInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    temperature: float = Field(description="Degrees Celsius")
    condition: WeatherCondition
    humidity: int = Field(ge=0, le=100)
    wind_speed: float = Field(description="km/h")

    def describe(self) -> str:
        return (
            f"Weather in {self.location}:\n"
            f"Temperature: {self.temperature:.1f}°C\n"
            f"Condition: {self.condition.value}\n"
            f"Humidity: {self.humidity}%\n"
            f"Wind: {self.wind_speed:.1f} km/h"
        )


class DailyForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    high_temperature: float
    low_temperature: float
    condition: WeatherCondition
    precipitation_chance: float = Field(ge=0, le=100)

    def describe(self) -> str:
        return (
            f"{self.day:%b %d, %Y}:\n"
            f"High: {self.high_temperature:.1f}°C\n"
            f"Low: {self.low_temperature:.1f}°C\n"
            f"{self.condition.value}, {self.precipitation_chance:.0f}% chance of rain"
        )


class WeatherParams(BaseModel):
    location: Annotated[str, Guide(count=(1, None), description="City name or coordinates")]


class ForecastParams(BaseModel):
    location: Annotated[str, Guide(count=(1, None), description="City name or coordinates")]
    days: Annotated[int, Guide(range=(1, None), description="Number of days to forecast (1-7)")] = 3


class WeatherTool(BaseTool[WeatherParams]):
    """Current conditions for a location."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get_weather",
        description="Get the current weather for a city or location.",
        category="weather",
    )
    params_schema: ClassVar[type[WeatherParams]] = WeatherParams

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def current(self, location: str) -> WeatherInfo:
        r = self._rng
        return WeatherInfo(
            location=location,
            temperature=r.uniform(15, 35),
            condition=r.choice(list(WeatherCondition)),
            humidity=r.randint(30, 90),
            wind_speed=r.uniform(0, 30),
        )

    def _run(self, params: WeatherParams) -> str:
        return self.current(params.location).describe()


class ForecastTool(BaseTool[ForecastParams]):
    """Daily forecast, at most seven days ahead."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get_forecast",
        description="Get the weather forecast for the next few days (up to 7) for a location.",
        category="weather",
    )
    params_schema: ClassVar[type[ForecastParams]] = ForecastParams

    def __init__(self, *, rng: random.Random | None = None, today: Callable[[], date] = date.today) -> None:
        self._rng = rng or random.Random()
        self._today = today

    def forecast(self, location: str, days: int) -> list[DailyForecast]:
        """Forecast starting today. `days` is clamped to 0..7."""
        r, start = self._rng, self._today()
        return [
            DailyForecast(
                day=start + timedelta(days=offset),
                high_temperature=r.uniform(20, 38),
                low_temperature=r.uniform(10, 20),
                condition=r.choice(list(WeatherCondition)),
                precipitation_chance=r.uniform(0, 100),
            )
            for offset in range(max(0, min(days, MAX_FORECAST_DAYS)))
        ]

    def _run(self, params: ForecastParams) -> str:
        days = self.forecast(params.location, params.days)
        return f"Forecast for {params.location}:\n\n" + "\n\n".join(d.describe() for d in days)
