"""Sample tools with simulated data.

Includes:
- WeatherTool / ForecastTool: current conditions and a forecast of up to 7 days
- SearchTool / DomainSearchTool: general and domain-restricted search
"""

from .search import DomainSearchParams, DomainSearchTool, SearchParams, SearchResult, SearchTool
from .weather import (
    MAX_FORECAST_DAYS,
    DailyForecast,
    ForecastParams,
    ForecastTool,
    WeatherCondition,
    WeatherInfo,
    WeatherParams,
    WeatherTool,
)

__all__ = [
    # Weather
    "WeatherTool", "ForecastTool", "WeatherParams", "ForecastParams",
    "WeatherInfo", "DailyForecast", "WeatherCondition", "MAX_FORECAST_DAYS",
    # Search
    "SearchTool", "DomainSearchTool", "SearchParams", "DomainSearchParams", "SearchResult",
]
