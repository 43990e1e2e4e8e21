"""Pytest configuration and shared fixtures."""

import json
import sys
from itertools import count
from typing import Any

import httpx
import pytest

from eventimport.config import Settings, get_settings
from eventimport.core.exceptions import UniqueViolationError

# Fix encoding for Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        import_request_timeout=5.0,
    )


# ============================================================
# HTTP
# ============================================================


class RecordingTransport(httpx.MockTransport):
    """MockTransport serving canned pages and recording every request."""

    def __init__(self, pages: dict[str, tuple[int, str]] | None = None):
        self.pages = pages or {}
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.pages.get(str(request.url), (404, "Not found"))
        return httpx.Response(status, text=body, headers={"content-type": "text/html"})


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


def _jsonld_page(event: dict[str, Any], head: str = "", body: str = "") -> str:
    """HTML page embedding `event` as a JSON-LD block."""
    return (
        "<html><head>"
        f"{head}"
        f'<script type="application/ld+json">{json.dumps(event)}</script>'
        f"</head><body>{body}</body></html>"
    )


def _og_page(title: str, description: str, image: str | None = None) -> str:
    """HTML page with Open Graph tags only."""
    tags = [
        f'<meta property="og:title" content="{title}">',
        f'<meta property="og:description" content="{description}">',
    ]
    if image:
        tags.append(f'<meta property="og:image" content="{image}">')
    return f"<html><head><title>Fallback</title>{''.join(tags)}</head><body></body></html>"


@pytest.fixture
def jsonld_page():
    return _jsonld_page


@pytest.fixture
def og_page():
    return _og_page


@pytest.fixture
def eventbrite_event() -> dict[str, Any]:
    """Typical Eventbrite JSON-LD Event."""
    return {
        "@context": "https://schema.org",
        "@type": "MusicEvent",
        "name": "Jazz Night",
        "description": "An evening of standards.",
        "startDate": "2025-05-01T19:00:00-05:00",
        "endDate": "2025-05-01T22:00:00-05:00",
        "image": "https://img.example.com/jazz.jpg",
        "location": {
            "@type": "Place",
            "name": "The Blue Room",
            "address": {
                "@type": "PostalAddress",
                "streetAddress": "123 Main St",
                "addressLocality": "Springfield",
                "addressRegion": "IL",
                "postalCode": "62701",
                "addressCountry": "US",
            },
        },
        "organizer": {"@type": "Organization", "name": "Blue Room Presents", "url": "https://blueroom.example.com"},
        "offers": [
            {"@type": "Offer", "price": "10.00", "url": "https://www.eventbrite.com/checkout/123456789012"},
            {"@type": "Offer", "price": "25.00"},
        ],
    }


# ============================================================
# STORAGE
# ============================================================


class FakeStore:
    """In-memory stand-in for SupabaseClient.

    Honors the UNIQUE(source, source_id) constraint on events. Set
    `fail_event_insert` to make the next event insert fail.
    """

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []
        self.venues: list[dict[str, Any]] = []
        self.hosts: list[dict[str, Any]] = []
        self.deleted: list[tuple[str, str]] = []
        self.fail_event_insert: Exception | None = None
        self._ids = count(1)

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    async def find_event_by_source(self, source: str, source_id: str) -> str | None:
        for row in self.events:
            if row.get("source") == source and row.get("source_id") == source_id:
                return row["id"]
        return None

    async def insert_event(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.fail_event_insert is not None:
            raise self.fail_event_insert
        if data.get("source_id") and await self.find_event_by_source(data["source"], data["source_id"]):
            raise UniqueViolationError("duplicate key value", operation="insert", table="events")
        row = {"id": self._new_id("event"), **data}
        self.events.append(row)
        return row

    async def find_venues_by_name(self, name: str) -> list[dict[str, Any]]:
        return [{"id": v["id"], "name": v["name"]} for v in self.venues if v["name"] == name]

    async def list_venues(self) -> list[dict[str, Any]]:
        return [{"id": v["id"], "name": v["name"]} for v in self.venues]

    async def insert_venue(self, data: dict[str, Any]) -> str:
        row = {"id": self._new_id("venue"), **data}
        self.venues.append(row)
        return row["id"]

    async def find_hosts_by_name(self, name: str, source: str) -> list[dict[str, Any]]:
        return [
            {"id": h["id"], "name": h["name"]}
            for h in self.hosts
            if h["name"] == name and h["source"] == source
        ]

    async def list_hosts(self, source: str) -> list[dict[str, Any]]:
        return [{"id": h["id"], "name": h["name"]} for h in self.hosts if h["source"] == source]

    async def insert_host(self, data: dict[str, Any]) -> str:
        row = {"id": self._new_id("host"), **data}
        self.hosts.append(row)
        return row["id"]

    async def delete_row(self, table: str, row_id: str) -> None:
        rows = getattr(self, table)
        rows[:] = [row for row in rows if row["id"] != row_id]
        self.deleted.append((table, row_id))


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
