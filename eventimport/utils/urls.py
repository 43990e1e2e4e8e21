"""URL validation and source-platform detection."""

import re
from urllib.parse import urlparse

from eventimport.core.event_model import EventSource

# Host pattern -> platform, first match wins. A pattern without a dot is a
# brand label matched against any host label (eventbrite.com, eventbrite.co.uk).
PLATFORM_DOMAINS: list[tuple[str, EventSource]] = [
    ("eventbrite", EventSource.EVENTBRITE),
    ("meetup.com", EventSource.MEETUP),
    ("facebook.com", EventSource.FACEBOOK),
    ("fb.com", EventSource.FACEBOOK),
    ("ticketspice.com", EventSource.TICKETSPICE),
    ("instagram.com", EventSource.INSTAGRAM),
]

# Platform-native event ids are long digit runs (Eventbrite: /e/name-123456789012)
SOURCE_ID_PATTERN = re.compile(r"(\d{10,})")


def is_valid_url(url: str | None) -> bool:
    """Check if a string is a valid http(s) URL.

    Args:
        url: URL string to validate

    Returns:
        True if valid URL, False otherwise
    """
    if not url:
        return False

    try:
        result = urlparse(url.strip())
        # .port raises ValueError for a non-numeric or out-of-range port
        port_ok = result.port is None or result.port > 0
        return all([result.scheme in ("http", "https"), result.netloc, port_ok])
    except ValueError:
        return False


def extract_domain(url: str | None) -> str | None:
    """Extract the lowercase host from a URL, without port or leading 'www.'.

    Args:
        url: Full URL

    Returns:
        Domain name or None
    """
    if not url:
        return None

    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return None

    if not host:
        return None
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def domain_matches(domain: str | None, pattern: str) -> bool:
    """True if the domain is the pattern itself or one of its subdomains."""
    if not domain:
        return False
    pattern = pattern.lower().lstrip(".")
    return domain == pattern or domain.endswith("." + pattern)


def infer_source(url: str | None) -> EventSource:
    """Map a URL to its source platform.

    Known platforms without a storage value (e.g. tixr.com) and unknown
    sites both come back as manual.
    """
    domain = extract_domain(url)
    if not domain:
        return EventSource.MANUAL

    labels = domain.split(".")
    for pattern, source in PLATFORM_DOMAINS:
        if "." not in pattern:
            if pattern in labels[:-1]:
                return source
        elif domain_matches(domain, pattern):
            return source

    return EventSource.MANUAL


def extract_source_id(url: str | None) -> str | None:
    """Return the first run of 10+ digits in the URL, or None."""
    if not url:
        return None
    match = SOURCE_ID_PATTERN.search(url)
    return match.group(1) if match else None


def match_blocked_platform(url: str | None, blocked: dict[str, str]) -> str | None:
    """Return the display name of the blocked platform hosting this URL."""
    domain = extract_domain(url)
    for blocked_domain, name in blocked.items():
        if domain_matches(domain, blocked_domain):
            return name
    return None
