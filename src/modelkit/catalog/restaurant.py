"""Restaurant listing with nested location and opening hours."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field

from modelkit.schema import Guide

CUISINES = (
    "Italian", "Mexican", "Japanese", "Chinese", "Indian",
    "French", "American", "Thai", "Mediterranean", "Other",
)


class PriceRange(StrEnum):
    BUDGET = "$"
    MODERATE = "$$"
    UPSCALE = "$$$"
    LUXURY = "$$$$"


class DayOfWeek(StrEnum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class RestaurantFeature(StrEnum):
    OUTDOOR_SEATING = "Outdoor Seating"
    DELIVERY = "Delivery"
    TAKEOUT = "Takeout"
    RESERVATIONS = "Reservations"
    WIFI = "Free WiFi"
    PARKING = "Parking"
    VEGETARIAN_OPTIONS = "Vegetarian Options"
    VEGAN_OPTIONS = "Vegan Options"
    GLUTEN_FREE = "Gluten-Free Options"
    LIVE_MUSIC = "Live Music"


class RestaurantLocation(BaseModel):
    address: str = ""
    city: str = ""
    neighborhood: str = ""
    zip_code: Annotated[str, Guide(regex=r"^\d{5}(-\d{4})?$", description="US ZIP code format")] = "00000"


class OperatingHours(BaseModel):
    open_time: Annotated[str, Guide(description="Opening time in HH:MM format")] = "11:00"
    close_time: Annotated[str, Guide(description="Closing time in HH:MM format")] = "22:00"
    days_open: list[DayOfWeek] = Field(default_factory=lambda: list(DayOfWeek))


class Restaurant(BaseModel):
    """Restaurant details extracted from a description or review."""

    name: str = ""
    cuisine_type: Annotated[str, Guide(any_of=CUISINES)] = "Other"
    price_range: Annotated[
        PriceRange, Guide(description="Price range from $ (cheap) to $$$$ (expensive)")
    ] = PriceRange.MODERATE
    location: RestaurantLocation = Field(default_factory=RestaurantLocation)
    hours: OperatingHours = Field(default_factory=OperatingHours)
    features: Annotated[list[RestaurantFeature], Guide(count=(0, 10))] = Field(default_factory=list)
    rating: Annotated[float, Guide(range=(1.0, 5.0))] = 3.0
