"""Structured-data extractor for event pages.

Pulls event fields out of HTML, in priority order:

1. JSON-LD ``Event`` objects (``<script type="application/ld+json">``).
   Eventbrite, Meetup and most ticketing sites embed these for search
   engines; they carry dates, venue, organizer and offers.
2. Open Graph / ``<meta>`` tags, then ``<title>``, for any field the JSON-LD
   did not provide.

Each field is resolved independently. A block of broken JSON is skipped and
never aborts the other blocks or the meta fallback.
"""

import html
import json
from decimal import Decimal, InvalidOperation
from typing import Any

from bs4 import BeautifulSoup

from eventimport.core.event_model import EventSource, ExtractedEvent, HostInfo, VenueInfo
from eventimport.core.exceptions import JSONParseError
from eventimport.logging import get_logger
from eventimport.utils.text import clean_html, normalize_whitespace
from eventimport.utils.urls import extract_source_id, infer_source

logger = get_logger(__name__)

# schema.org types treated as an event
EVENT_TYPES = frozenset(
    {
        "Event",
        "BusinessEvent",
        "ComedyEvent",
        "EducationEvent",
        "ExhibitionEvent",
        "Festival",
        "FoodEvent",
        "MusicEvent",
        "SocialEvent",
        "SportsEvent",
        "TheaterEvent",
    }
)

# Venue name when a location has an address but no name
UNKNOWN_VENUE = "Unknown Venue"


def _is_event(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    types = obj.get("@type")
    if isinstance(types, str):
        return types in EVENT_TYPES
    if isinstance(types, list):
        return any(t in EVENT_TYPES for t in types if isinstance(t, str))
    return False


def _parse_jsonld_block(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON-LD: {e.msg}", raw_data=raw) from e


def _find_event(parsed: Any) -> dict[str, Any] | None:
    """Locate an Event object in a decoded JSON-LD value."""
    if isinstance(parsed, list):
        return next((item for item in parsed if _is_event(item)), None)

    if _is_event(parsed):
        return parsed

    # {"@context": ..., "@graph": [...]}
    if isinstance(parsed, dict) and isinstance(parsed.get("@graph"), list):
        return next((item for item in parsed["@graph"] if _is_event(item)), None)

    return None


def extract_jsonld_event(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Return the first JSON-LD Event object on the page.

    Args:
        soup: Parsed HTML document

    Returns:
        The Event dict, or None if no block holds one
    """
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.get_text()
        if not raw or not raw.strip():
            continue

        try:
            parsed = _parse_jsonld_block(raw)
        except JSONParseError as e:
            logger.warning("jsonld_parse_error", error=e.message, preview=e.raw_data)
            continue

        event = _find_event(parsed)
        if event is not None:
            return event

    return None


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _plain(value: Any) -> str | None:
    """Display text with HTML entities decoded ("Rock &amp; Roll")."""
    text = _text(value)
    return _text(html.unescape(text)) if text else None


def _image_url(value: Any) -> str | None:
    """image may be a URL, an ImageObject {url}, or a list of either."""
    value = _first(value)
    if isinstance(value, dict):
        return _text(value.get("url"))
    return _text(value)


def _venue(location: Any) -> VenueInfo | None:
    location = _first(location)
    if _text(location):
        return VenueInfo(name=_plain(location))
    if not isinstance(location, dict) or location.get("@type") == "VirtualLocation":
        return None

    name = _plain(location.get("name"))
    address = location.get("address")

    fields: dict[str, Any] = {}
    if isinstance(address, dict):
        country = address.get("addressCountry")
        if isinstance(country, dict):
            country = country.get("name")
        fields = {
            "address_line1": _text(address.get("streetAddress")),
            "city": _text(address.get("addressLocality")),
            "state": _text(address.get("addressRegion")),
            "postal_code": _text(address.get("postalCode")),
            "country": _text(country),
        }
    elif _text(address):
        fields = {"address_line1": _text(address)}

    # A place with an address but no name keeps its address
    if not name and not any(fields.values()):
        return None
    return VenueInfo(name=name or UNKNOWN_VENUE, **fields)


def _host(organizer: Any) -> HostInfo | None:
    organizer = _first(organizer)
    if isinstance(organizer, dict):
        name = _plain(organizer.get("name"))
        if name:
            return HostInfo(name=name, website_url=_text(organizer.get("url")))
    elif _text(organizer):
        return HostInfo(name=_plain(organizer))
    return None


def _price(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not price.is_finite() or price < 0:
        return None
    return price


def _offers(offers: Any) -> tuple[list[Decimal], str | None]:
    """Collect prices from Offer / AggregateOffer objects, plus the first offer URL."""
    if isinstance(offers, dict):
        offers = [offers]
    if not isinstance(offers, list):
        return [], None

    prices: list[Decimal] = []
    offer_url = None
    for offer in offers:
        if not isinstance(offer, dict):
            continue
        if offer_url is None:
            offer_url = _text(offer.get("url"))
        for key in ("price", "lowPrice", "highPrice"):
            price = _price(offer.get(key))
            if price is not None:
                prices.append(price)

    return prices, offer_url


def _meta(soup: BeautifulSoup, key: str) -> str | None:
    """Content of <meta property=key> or <meta name=key>, double-escaped entities decoded."""
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    if tag is None:
        return None
    return _plain(tag.get("content"))


def extract_structured_data(page: str, url: str) -> ExtractedEvent:
    """Extract a best-effort event from an HTML page.

    Args:
        page: Page HTML
        url: URL the page was fetched from

    Returns:
        ExtractedEvent; any field may be empty
    """
    soup = BeautifulSoup(page, "html.parser")
    source = infer_source(url)

    extracted = ExtractedEvent(
        source_url=url,
        source=source,
        source_id=extract_source_id(url) if source == EventSource.EVENTBRITE else None,
    )

    schema = extract_jsonld_event(soup)
    if schema is not None:
        extracted.title = _plain(schema.get("name"))
        description = _text(schema.get("description"))
        # clean_html decodes entities itself
        extracted.description = (
            clean_html(description) if description and "<" in description else _plain(description)
        )
        extracted.start_time = _text(schema.get("startDate"))
        extracted.end_time = _text(schema.get("endDate"))
        extracted.image_url = _image_url(schema.get("image"))
        extracted.venue = _venue(schema.get("location"))
        extracted.host = _host(schema.get("organizer"))
        extracted.offer_prices, offer_url = _offers(schema.get("offers"))
        extracted.ticket_url = offer_url
        logger.info("jsonld_event_found", url=url[:120], title=(extracted.title or "")[:60])

    if not extracted.title:
        extracted.title = _meta(soup, "og:title")
    if not extracted.title and soup.title and soup.title.string:
        extracted.title = _text(normalize_whitespace(soup.title.string, preserve_newlines=False))
    if not extracted.description:
        extracted.description = _meta(soup, "og:description") or _meta(soup, "description")
    if not extracted.image_url:
        extracted.image_url = _meta(soup, "og:image")
    if not extracted.ticket_url:
        extracted.ticket_url = url

    if schema is None and not (extracted.title or extracted.description):
        logger.warning("no_event_data_found", url=url[:120])
        extracted.warning = (
            "Could not automatically extract event details. Please enter them manually."
        )

    return extracted
