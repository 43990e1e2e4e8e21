"""Turns extracted fields into a previewable EventDraft."""

from decimal import Decimal

from eventimport.core.event_model import (
    PLACEHOLDER_TITLE,
    EventDraft,
    EventStatus,
    ExtractedEvent,
)
from eventimport.logging import get_logger
from eventimport.utils.date_parser import parse_datetime, parse_or_now
from eventimport.utils.text import normalize_whitespace

logger = get_logger(__name__)


def derive_prices(prices: list[Decimal]) -> tuple[Decimal | None, Decimal | None, bool]:
    """Price range and free flag from offer prices.

    No offers means the price is unknown, which is not the same as free.

    Returns:
        (price_min, price_max, is_free)
    """
    if not prices:
        return None, None, False

    price_min = min(prices)
    price_max = max(prices)
    return price_min, price_max, price_min == 0 and price_max == 0


def normalize_event(extracted: ExtractedEvent) -> EventDraft:
    """Build the canonical draft from whichever extraction path ran.

    - status is always draft
    - a missing title becomes the "New Event" placeholder
    - unparseable start dates fall back to now (logged, not raised)
    - an end before the start is dropped
    """
    title = normalize_whitespace(extracted.title or "", preserve_newlines=False)
    if not title:
        title = PLACEHOLDER_TITLE

    start_time = parse_or_now(extracted.start_time, field="start_time")

    end_time = parse_datetime(extracted.end_time)
    if extracted.end_time and end_time is None:
        logger.warning("end_time_unparsed", value=extracted.end_time[:80])
    if end_time is not None and end_time < start_time:
        logger.warning(
            "end_time_before_start",
            start=start_time.isoformat(),
            end=end_time.isoformat(),
        )
        end_time = None

    price_min, price_max, is_free = derive_prices(extracted.offer_prices)

    return EventDraft(
        title=title,
        description=extracted.description or "",
        start_time=start_time,
        end_time=end_time,
        image_url=extracted.image_url,
        source_url=extracted.source_url,
        ticket_url=extracted.ticket_url,
        price_min=price_min,
        price_max=price_max,
        is_free=is_free,
        status=EventStatus.DRAFT,
        source=extracted.source,
        source_id=extracted.source_id,
        warning=extracted.warning,
        venue=extracted.venue,
        host=extracted.host,
    )
