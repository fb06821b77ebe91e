"""Form data extracted from unstructured text."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from modelkit.schema import Guide

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PLATFORMS = ("Twitter", "LinkedIn", "GitHub", "Instagram", "Facebook", "Other")
CURRENCIES = ("USD", "EUR", "GBP", "JPY", "CAD", "AUD", "Other")


class SocialMediaHandle(BaseModel):
    platform: Annotated[str, Guide(any_of=PLATFORMS)] = "Other"
    handle: str = ""


class ContactInfo(BaseModel):
    """Contact details of one person."""

    first_name: str = ""
    last_name: str = ""
    email: Annotated[str, Guide(regex=EMAIL_PATTERN)] = "unknown@example.com"
    phone: Annotated[str, Guide(description="Phone number in any format")] = ""
    company: str = ""
    job_title: str = ""
    address: str = ""
    social_media: Annotated[list[SocialMediaHandle], Guide(count=(0, 5))] = Field(default_factory=list)


class EventInfo(BaseModel):
    """Details of an event announcement or invitation."""

    title: str = ""
    date: Annotated[str, Guide(description="Event date in ISO 8601 format if possible")] = ""
    time: Annotated[str, Guide(description="Event time or time range")] = ""
    location: str = ""
    is_virtual: bool = False
    virtual_link: str = ""
    description: Annotated[str, Guide(count=(10, 500))] = "No description available"
    attendees: Annotated[list[str], Guide(count=(0, 20))] = Field(default_factory=list)
    has_rsvp: bool = False
    rsvp_deadline: str = ""


class ProductInfo(BaseModel):
    """Product listing details."""

    name: str = ""
    description: Annotated[str, Guide(count=(20, 500))] = "Product description not available"
    price: Annotated[float, Guide(range=(0.0, 1_000_000.0))] = 0.0
    currency: Annotated[str, Guide(any_of=CURRENCIES)] = "USD"
    features: Annotated[list[str], Guide(count=(0, 10))] = Field(default_factory=list)
    categories: Annotated[list[str], Guide(count=(0, 5))] = Field(default_factory=list)
    brand: str = ""
    sku: str = ""
    in_stock: bool = False
    quantity: Annotated[int, Guide(range=(0, 10_000))] = 0
