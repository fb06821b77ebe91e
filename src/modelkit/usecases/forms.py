"""Extract form data (contacts, events, products) from free text."""

from __future__ import annotations

from modelkit.catalog import ContactInfo, EventInfo, ProductInfo
from modelkit.session import SessionManager

_CONTACT = """\
Extract contact information from the following text. Look for:
- Name (first and last)
- Email addresses
- Phone numbers
- Company/organization
- Job title
- Address
- Social media handles

Text:
---
{text}
---"""

_EVENT = """\
Extract event information from the following text. Look for:
- Event name/title
- Date and time
- Location
- Description
- Attendees mentioned
- RSVP/registration info

Text:
---
{text}
---"""

_PRODUCT = """\
Extract product information from the following text:

Text:
---
{text}
---"""


class SmartFormFiller:
    """Turns unstructured text into validated form records."""

    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def extract_contact(self, text: str) -> ContactInfo:
        return await self._session.generate(_CONTACT.format(text=text), ContactInfo)

    async def extract_event(self, text: str) -> EventInfo:
        return await self._session.generate(_EVENT.format(text=text), EventInfo)

    async def extract_product(self, text: str) -> ProductInfo:
        return await self._session.generate(_PRODUCT.format(text=text), ProductInfo)
