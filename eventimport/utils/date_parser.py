"""Date parsing for imported event times."""

from datetime import datetime, timezone

from dateutil import parser as dateutil_parser

from eventimport.logging import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(timezone.utc)


def parse_datetime(value: str | None) -> datetime | None:
    """Parse a date/time string into an aware datetime.

    Handles ISO 8601 (JSON-LD startDate, with or without milliseconds and
    offsets) and the free-form dates operators paste ("May 1, 2025 7:00 PM",
    "05/01/2025"). Values without an offset are taken as UTC.

    Args:
        value: Date string

    Returns:
        datetime or None if parsing failed
    """
    if not value or not value.strip():
        return None

    value = value.strip()
    try:
        parsed = dateutil_parser.isoparse(value)
    except ValueError:
        try:
            parsed = dateutil_parser.parse(value)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_or_now(value: str | None, field: str = "start_time") -> datetime:
    """Parse a date string, falling back to now.

    A failed parse is logged, never raised: the operator reviews the date in
    the preview before committing.
    """
    parsed = parse_datetime(value)
    if parsed is not None:
        return parsed

    if value:
        logger.warning("date_parse_fallback", field=field, value=value[:80])
    return utc_now()
