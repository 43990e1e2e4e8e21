"""Parser for operator-pasted event details.

Used for platforms that cannot be scraped: the operator copies the event
details into a block of ``Label: value`` lines, e.g.::

    Event Name: Jazz Night
    Start Date: May 1, 2025 7:00 PM
    Venue: The Blue Room
    Ticket URL: https://tickets.example.com/123
    Description: An evening of standards.
    Bring a friend!

Lines without a recognized label are treated as description text, wherever
they appear. The block produced by ``format_summary`` parses back cleanly.
"""

import re
from decimal import Decimal, InvalidOperation

from eventimport.core.event_model import EventSource, ExtractedEvent, HostInfo, VenueInfo
from eventimport.logging import get_logger
from eventimport.utils.text import normalize_whitespace

logger = get_logger(__name__)


def _label(*names: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*(?:{'|'.join(names)})\s*:\s*(.*)$", re.IGNORECASE)


# Field -> label pattern. Checked in order; the first match wins.
FIELD_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("title", _label("Event Name", "Title")),
    (
        "start_time",
        _label(
            "Start Date & Time",
            "Event Start Date",
            "Event Start Time",
            "Start Date",
            "Start Time",
            "Date",
            "Time",
        ),
    ),
    ("end_time", _label("End Date & Time", "Event End Date", "Event End Time", "End Date", "End Time")),
    ("ticket_url", _label("Ticket URL", "Ticket Link", "Tickets")),
    ("source_url", _label("Page URL", "URL", "Link")),
    ("venue", _label("Event Venue", "Venue", "Location")),
    ("description", _label("Description", "Details")),
    ("address", _label("Address")),
    ("host", _label("Host", "Organizer", "Hosted By")),
    ("cost", _label("Cost", "Price")),
    ("image_url", _label("full url to cover image", "Cover Image", "Image URL")),
    ("ignored", _label("Google Maps Link to Address", "Google Maps Link")),
]

# Fields whose values are joined when given twice ("Date: ..." then "Time: ...")
JOINED_FIELDS = frozenset({"start_time", "end_time"})

# Placeholder the summary writes for unknown values
UNKNOWN = "tbd"

# "$1,500" and "$1500.00" alike; commas only as thousands separators
PRICE_PATTERN = re.compile(r"\$?\s*(\d{1,3}(?:,\d{3})+(?!\d)(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)")


def _match_line(line: str) -> tuple[str, str] | None:
    for field_name, pattern in FIELD_PATTERNS:
        match = pattern.match(line)
        if match:
            return field_name, match.group(1).strip()
    return None


def parse_cost(value: str | None) -> list[Decimal]:
    """Prices from a cost line: "Free", "$15" or "$10 - $25".

    Anything else (including "TBD") yields no prices.
    """
    if not value:
        return []
    if value.strip().lower() == "free":
        return [Decimal(0)]

    prices = []
    for raw in PRICE_PATTERN.findall(value):
        try:
            prices.append(Decimal(raw.replace(",", "")))
        except InvalidOperation:
            continue
    return prices


def parse_event_text(text: str, source: EventSource = EventSource.MANUAL) -> ExtractedEvent:
    """Parse a pasted block of labeled lines.

    Args:
        text: Operator-pasted event details
        source: Platform chosen by the operator

    Returns:
        ExtractedEvent with the recognized fields
    """
    fields: dict[str, str] = {}
    description_lines: list[str] = []

    for line in text.splitlines():
        matched = _match_line(line)
        if matched is None:
            description_lines.append(line)
            continue

        field_name, value = matched
        if field_name == "description":
            description_lines.append(value)
            continue
        if not value or value.lower() == UNKNOWN:
            continue
        if field_name in JOINED_FIELDS and fields.get(field_name):
            # "Event Start Date: ..." followed by "Event Start Time: ..."
            fields[field_name] = f"{fields[field_name]} {value}"
        else:
            fields[field_name] = value

    description = normalize_whitespace("\n".join(description_lines))

    # Page URL is the canonical locator; the ticket link is kept on its own
    ticket_url = fields.get("ticket_url")
    source_url = fields.get("source_url") or ticket_url or ""

    # Address lines are consumed so they stay out of the description; free
    # text is not decomposed into structured address fields.
    venue_name = (fields.get("venue") or "").rstrip(", ")
    venue = VenueInfo(name=venue_name) if venue_name else None
    host = HostInfo(name=fields["host"]) if fields.get("host") else None

    logger.info(
        "free_text_parsed",
        source=source.value,
        fields=sorted(fields),
        description_length=len(description),
    )

    return ExtractedEvent(
        source_url=source_url,
        source=source,
        title=fields.get("title"),
        description=description,
        start_time=fields.get("start_time"),
        end_time=fields.get("end_time"),
        image_url=fields.get("image_url"),
        ticket_url=ticket_url,
        venue=venue,
        host=host,
        offer_prices=parse_cost(fields.get("cost")),
    )
