"""Pydantic models for imported events that map to the Supabase schema."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)

PLACEHOLDER_TITLE = "New Event"

# venues.name / hosts.name column length
NAME_MAX_LENGTH = 500


def fit_name(value: object) -> object:
    """Strip a scraped or pasted name and cut it to the column length."""
    if isinstance(value, str):
        return value.strip()[:NAME_MAX_LENGTH]
    return value


class EventStatus(str, Enum):
    """Moderation status.

    Values must match Supabase event_status enum.
    """

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventSource(str, Enum):
    """Platform an event was imported from."""

    MANUAL = "manual"
    EVENTBRITE = "eventbrite"
    MEETUP = "meetup"
    TICKETSPICE = "ticketspice"
    FACEBOOK = "facebook"
    TIXR = "tixr"
    INSTAGRAM = "instagram"

    @property
    def storage_value(self) -> str:
        """Value written to the event_source column.

        The Supabase enum only knows manual, eventbrite, meetup, ticketspice
        and facebook; anything else is stored as manual.
        """
        if self in STORED_SOURCES:
            return self.value
        return EventSource.MANUAL.value


STORED_SOURCES = frozenset(
    {
        EventSource.MANUAL,
        EventSource.EVENTBRITE,
        EventSource.MEETUP,
        EventSource.TICKETSPICE,
        EventSource.FACEBOOK,
    }
)


class VenueInfo(BaseModel):
    """Venue sub-object (maps to venues table)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]
    address_line1: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def truncate_name(cls, value: object) -> object:
        return fit_name(value)

    def to_supabase_dict(self, default_country: str = "USA") -> dict:
        """Convert to a venues row."""
        return {
            "name": self.name,
            "address_line_1": self.address_line1,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country or default_country,
        }


class HostInfo(BaseModel):
    """Host/organizer sub-object (maps to hosts table)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]
    website_url: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def truncate_name(cls, value: object) -> object:
        return fit_name(value)

    def to_supabase_dict(self, source: "EventSource") -> dict:
        """Convert to a hosts row scoped by source platform."""
        return {
            "name": self.name,
            "source": source.storage_value,
            "website_url": self.website_url,
        }


class EventDraft(BaseModel):
    """Normalized event produced by an import, prior to persistence."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    description: str = ""
    start_time: datetime
    end_time: datetime | None = None
    image_url: str | None = None
    source_url: str = ""
    ticket_url: str | None = None

    price_min: Decimal | None = None
    price_max: Decimal | None = None
    is_free: bool = False

    status: EventStatus = EventStatus.DRAFT
    source: EventSource = EventSource.MANUAL
    source_id: str | None = None
    warning: str | None = None  # Advisory for the operator, never persisted

    venue: VenueInfo | None = None
    host: HostInfo | None = None

    @model_validator(mode="after")
    def check_prices(self) -> "EventDraft":
        """A free event costs 0 on both ends; a range must not be inverted."""
        if self.is_free:
            for name in ("price_min", "price_max"):
                value = getattr(self, name)
                if value is None:
                    setattr(self, name, Decimal(0))
                elif value != 0:
                    raise ValueError(f"{name} must be 0 when is_free is set")
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise ValueError("price_min must not exceed price_max")
        return self

    @field_serializer("price_min", "price_max", when_used="json")
    def serialize_price(self, value: Decimal | None) -> float | None:
        return float(value) if value is not None else None

    @property
    def dedup_key(self) -> tuple[str, str] | None:
        """(source, source_id) pair, or None when no platform id is known."""
        if not self.source_id:
            return None
        return (self.source.storage_value, self.source_id)

    def to_supabase_dict(self, venue_id: str | None = None, host_id: str | None = None) -> dict:
        """Convert to dictionary for Supabase insertion.

        Maps EventDraft fields to Supabase 'events' table columns. Imports are
        always written as drafts.
        """
        data = {
            "title": self.title,
            "description": self.description or None,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "image_url": self.image_url,
            "ticket_url": self.ticket_url,
            "price_min": float(self.price_min) if self.price_min is not None else None,
            "price_max": float(self.price_max) if self.price_max is not None else None,
            "is_free": self.is_free,
            "status": EventStatus.DRAFT.value,
            "source": self.source.storage_value,
            "source_id": self.source_id,
            "source_url": self.source_url or None,
            "venue_id": venue_id,
            "host_id": host_id,
        }

        # Remove None values to let Supabase use defaults
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class ExtractedEvent:
    """Raw fields pulled from a page or a pasted text block.

    Both extraction strategies fill this shape; the normalizer turns it into
    an EventDraft. Dates are kept as the raw strings found in the source.
    """

    source_url: str = ""
    source: EventSource = EventSource.MANUAL
    source_id: str | None = None
    title: str | None = None
    description: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    image_url: str | None = None
    ticket_url: str | None = None
    venue: VenueInfo | None = None
    host: HostInfo | None = None
    offer_prices: list[Decimal] = field(default_factory=list)
    warning: str | None = None


# ============================================================
# IMPORT REQUESTS (one variant per extraction strategy)
# ============================================================


class UrlImport(BaseModel):
    """Scrape an event page."""

    kind: Literal["url"] = "url"
    url: Annotated[str, Field(min_length=1)]


class TextImport(BaseModel):
    """Parse an operator-pasted block of labeled lines."""

    kind: Literal["text"] = "text"
    text: Annotated[str, Field(min_length=1)]
    source: EventSource = EventSource.MANUAL


ImportRequest = Annotated[UrlImport | TextImport, Field(discriminator="kind")]


# ============================================================
# RESULTS
# ============================================================


class CommitResult(BaseModel):
    """Outcome of persisting an approved draft."""

    event_id: str
    venue_id: str | None = None
    host_id: str | None = None
    created_venue: bool = False
    created_host: bool = False
    warnings: list[str] = Field(default_factory=list)


class ImportFailure(BaseModel):
    """A URL from a batch preview that could not be imported."""

    url: str
    error: str
    status_code: int | None = None


class BatchPreviewResult(BaseModel):
    """Drafts previewed from several URLs, with per-URL failures."""

    drafts: list[EventDraft] = Field(default_factory=list)
    failures: list[ImportFailure] = Field(default_factory=list)

    @computed_field
    @property
    def success_count(self) -> int:
        return len(self.drafts)

    @computed_field
    @property
    def failure_count(self) -> int:
        return len(self.failures)
