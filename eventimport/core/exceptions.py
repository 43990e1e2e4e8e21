"""Unified exception hierarchy for the event importer.

Exception categories:
- Configuration errors (missing Supabase credentials, invalid settings)
- Fetch errors (malformed URL, source unreachable or rejecting us)
- Parse errors (broken JSON-LD)
- Draft errors (approved draft missing a required field)
- Storage errors (Supabase failures, duplicate imports)

Every error carries the HTTP status the API layer answers with.
"""


class EventImportError(Exception):
    """Base exception for all event importer errors."""

    http_status: int = 500

    def __init__(self, message: str, source: str | None = None, details: dict | None = None):
        self.message = message
        self.source = source
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source:
            msg = f"[{self.source}] {msg}"
        return msg

    def to_payload(self) -> dict:
        """Body returned to API callers."""
        return {"error": self.message}


# ============================================================
# CONFIGURATION ERRORS
# ============================================================


class ConfigurationError(EventImportError):
    """Base class for configuration-related errors."""


class MissingCredentialsError(ConfigurationError):
    """Raised when Supabase credentials are not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing required setting: {setting}", details={"setting": setting})


# ============================================================
# FETCH ERRORS
# ============================================================


class FetchError(EventImportError):
    """Base class for source fetching errors."""

    http_status = 400


class InvalidURLError(FetchError):
    """Raised when the import locator is not a well-formed http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("A valid http(s) URL is required", details={"url": url})


class SourceAccessError(FetchError):
    """Raised when the source platform cannot be reached or rejects the request."""

    def __init__(
        self,
        url: str,
        status_code: int | None = None,
        reason: str | None = None,
        source: str | None = None,
    ):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            msg = (
                f"Could not access URL (status {status_code}). "
                "The site may be blocking automated access."
            )
        else:
            msg = f"Could not access URL: {reason or 'connection failed'}"
        details = {"url": url}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(msg, source=source, details=details)


class ManualEntryRequiredError(FetchError):
    """Raised when a one-shot import hits a platform that must be entered by hand."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message, details={"url": url})


# ============================================================
# PARSE ERRORS
# ============================================================


class ParseError(EventImportError):
    """Base class for data parsing errors."""

    http_status = 400


class JSONParseError(ParseError):
    """Raised when a JSON-LD block cannot be decoded."""

    def __init__(self, message: str, raw_data: str | None = None, source: str | None = None):
        self.raw_data = raw_data[:200] if raw_data else None
        super().__init__(message, source=source, details={"raw_data_preview": self.raw_data})


# ============================================================
# DRAFT ERRORS
# ============================================================


class DraftError(EventImportError):
    """Base class for approved drafts that cannot be committed as-is."""

    http_status = 400


class IncompleteDraftError(DraftError):
    """Raised when a required event field was left blank by the operator."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"An event {field} is required", details={"field": field})


# ============================================================
# STORAGE ERRORS
# ============================================================


class StorageError(EventImportError):
    """Base class for storage-related errors."""


class SupabaseError(StorageError):
    """Raised for Supabase-specific errors."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        table: str | None = None,
        source: str | None = None,
    ):
        self.operation = operation
        self.table = table
        super().__init__(
            message,
            source=source,
            details={"operation": operation, "table": table},
        )


class UniqueViolationError(SupabaseError):
    """Raised when an insert hits a unique constraint (Postgres 23505)."""


class DuplicateEventError(StorageError):
    """Raised when the (source, source_id) pair was already imported."""

    http_status = 409

    def __init__(self, existing_id: str, source: str | None = None, source_id: str | None = None):
        self.existing_id = existing_id
        self.source_id = source_id
        super().__init__(
            "Event already imported",
            source=source,
            details={"existing_id": existing_id, "source_id": source_id},
        )

    def to_payload(self) -> dict:
        return {"error": self.message, "existingId": self.existing_id}
