"""Plain-text summary of a draft, for copying into other tools.

The output uses the same labels the free-text parser understands, so a
summary pasted back into a text import yields the same event.
"""

from datetime import datetime
from decimal import Decimal

from eventimport.core.event_model import EventDraft

UNKNOWN = "TBD"


def format_date(value: datetime | None) -> str:
    if value is None:
        return UNKNOWN
    return value.strftime("%m/%d/%Y")


def format_time(value: datetime | None) -> str:
    if value is None:
        return UNKNOWN
    # 7:00 PM, not 07:00 PM
    return value.strftime("%I:%M %p").lstrip("0")


def _money(value: Decimal) -> str:
    # $10 rather than $10.00; keep cents when present
    if value == value.to_integral_value():
        return f"${value.to_integral_value()}"
    return f"${value:.2f}"


def format_cost(draft: EventDraft) -> str:
    """Free, $N, $N - $M, or TBD when the price is unknown."""
    if draft.is_free:
        return "Free"
    if draft.price_min is None and draft.price_max is None:
        return UNKNOWN

    low = draft.price_min if draft.price_min is not None else draft.price_max
    high = draft.price_max if draft.price_max is not None else draft.price_min
    if low == high:
        return _money(low)
    return f"{_money(low)} - {_money(high)}"


def format_address(draft: EventDraft) -> str | None:
    venue = draft.venue
    if venue is None:
        return None
    parts = [venue.address_line1, venue.city, venue.state, venue.postal_code]
    address = ", ".join(part for part in parts if part)
    return address or None


def format_summary(draft: EventDraft) -> str:
    """Render the draft as labeled lines."""
    address = format_address(draft)
    end_date = format_date(draft.end_time) if draft.end_time else format_date(draft.start_time)

    lines = [
        f"Event Name: {draft.title}",
        f"Event Start Date: {format_date(draft.start_time)}",
        f"Event Start Time: {format_time(draft.start_time)}",
        f"Event End Date: {end_date}",
        f"Event End Time: {format_time(draft.end_time)}",
        f"Location: {draft.venue.name if draft.venue else UNKNOWN}",
        f"Address: {address or UNKNOWN}",
        f"Host: {draft.host.name if draft.host else UNKNOWN}",
        f"Ticket Link: {draft.ticket_url or draft.source_url}",
        f"Description: {draft.description}",
        f"Cost: {format_cost(draft)}",
        f"full url to cover image: {draft.image_url or UNKNOWN}",
    ]
    return "\n".join(lines)
