"""Supabase client for event, venue and host storage operations."""

from typing import Any

from postgrest.exceptions import APIError
from supabase import Client, create_client

from eventimport.config import get_settings
from eventimport.core.exceptions import (
    MissingCredentialsError,
    SupabaseError,
    UniqueViolationError,
)
from eventimport.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"


def _storage_error(e: APIError, operation: str, table: str) -> SupabaseError:
    logger.error("supabase_error", operation=operation, table=table, code=e.code, error=e.message)
    if e.code == UNIQUE_VIOLATION:
        return UniqueViolationError(e.message or str(e), operation=operation, table=table)
    return SupabaseError(e.message or str(e), operation=operation, table=table)


class SupabaseClient:
    """Client for the events, venues and hosts tables."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize Supabase client."""
        if client is None:
            settings = get_settings()
            if not settings.supabase_url:
                raise MissingCredentialsError("SUPABASE_URL")
            if not settings.supabase_service_role_key:
                raise MissingCredentialsError("SUPABASE_SERVICE_ROLE_KEY")
            client = create_client(settings.supabase_url, settings.supabase_service_role_key)

        self._client: Client = client

    @property
    def client(self) -> Client:
        """Get the Supabase client instance."""
        return self._client

    # ==========================================
    # Events
    # ==========================================

    async def find_event_by_source(self, source: str, source_id: str) -> str | None:
        """Id of the event imported from (source, source_id), if any."""
        try:
            response = (
                self._client.table("events")
                .select("id")
                .eq("source", source)
                .eq("source_id", source_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise _storage_error(e, "select", "events") from e
        return response.data[0]["id"] if response.data else None

    async def insert_event(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert an event row and return it."""
        try:
            response = self._client.table("events").insert(data).execute()
        except APIError as e:
            raise _storage_error(e, "insert", "events") from e

        if not response.data:
            raise SupabaseError("Insert returned no row", operation="insert", table="events")
        return response.data[0]

    # ==========================================
    # Venues
    # ==========================================

    async def find_venues_by_name(self, name: str) -> list[dict[str, Any]]:
        """Venues whose name is exactly `name`."""
        try:
            response = self._client.table("venues").select("id, name").eq("name", name).execute()
        except APIError as e:
            raise _storage_error(e, "select", "venues") from e
        return response.data

    async def list_venues(self) -> list[dict[str, Any]]:
        """All venue ids and names, for near-match checks."""
        try:
            response = self._client.table("venues").select("id, name").execute()
        except APIError as e:
            raise _storage_error(e, "select", "venues") from e
        return response.data

    async def insert_venue(self, data: dict[str, Any]) -> str:
        """Insert a venue row and return its id."""
        try:
            response = self._client.table("venues").insert(data).execute()
        except APIError as e:
            raise _storage_error(e, "insert", "venues") from e

        if not response.data:
            raise SupabaseError("Insert returned no row", operation="insert", table="venues")
        return response.data[0]["id"]

    # ==========================================
    # Hosts
    # ==========================================

    async def find_hosts_by_name(self, name: str, source: str) -> list[dict[str, Any]]:
        """Hosts named exactly `name` for this source platform."""
        try:
            response = (
                self._client.table("hosts")
                .select("id, name")
                .eq("name", name)
                .eq("source", source)
                .execute()
            )
        except APIError as e:
            raise _storage_error(e, "select", "hosts") from e
        return response.data

    async def list_hosts(self, source: str) -> list[dict[str, Any]]:
        """All host ids and names for this source platform."""
        try:
            response = self._client.table("hosts").select("id, name").eq("source", source).execute()
        except APIError as e:
            raise _storage_error(e, "select", "hosts") from e
        return response.data

    async def insert_host(self, data: dict[str, Any]) -> str:
        """Insert a host row and return its id."""
        try:
            response = self._client.table("hosts").insert(data).execute()
        except APIError as e:
            raise _storage_error(e, "insert", "hosts") from e

        if not response.data:
            raise SupabaseError("Insert returned no row", operation="insert", table="hosts")
        return response.data[0]["id"]

    # ==========================================
    # Cleanup
    # ==========================================

    async def delete_row(self, table: str, row_id: str) -> None:
        """Delete one row by id."""
        try:
            self._client.table(table).delete().eq("id", row_id).execute()
        except APIError as e:
            raise _storage_error(e, "delete", table) from e

    async def ping(self) -> int | None:
        """Row count of the events table; used by the health check."""
        try:
            result = self._client.table("events").select("id", count="exact").limit(1).execute()
        except APIError as e:
            raise _storage_error(e, "select", "events") from e
        return result.count


# Singleton instance
_client: SupabaseClient | None = None


def get_supabase_client() -> SupabaseClient:
    """Get or create Supabase client singleton."""
    global _client
    if _client is None:
        _client = SupabaseClient()
    return _client
