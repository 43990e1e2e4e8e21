"""Core modules for the event importer."""

from eventimport.core.event_model import (
    BatchPreviewResult,
    CommitResult,
    EventDraft,
    EventSource,
    EventStatus,
    HostInfo,
    ImportRequest,
    TextImport,
    UrlImport,
    VenueInfo,
)
from eventimport.core.exceptions import (
    ConfigurationError,
    DraftError,
    DuplicateEventError,
    EventImportError,
    FetchError,
    ParseError,
    StorageError,
    SupabaseError,
)

__all__ = [
    # Event models
    "EventDraft",
    "EventSource",
    "EventStatus",
    "HostInfo",
    "VenueInfo",
    # Requests and results
    "ImportRequest",
    "TextImport",
    "UrlImport",
    "BatchPreviewResult",
    "CommitResult",
    # Exceptions
    "EventImportError",
    "ConfigurationError",
    "FetchError",
    "ParseError",
    "DraftError",
    "StorageError",
    "SupabaseError",
    "DuplicateEventError",
]
