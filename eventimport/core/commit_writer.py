"""Persists an approved draft as venue, host and event rows.

The three inserts are not atomic. Venue and host rows created by a commit are
deleted again when the event insert fails, so a failed commit leaves no
orphans behind.
"""

from dataclasses import dataclass, field
from typing import Any

from eventimport.config import Settings, get_settings
from eventimport.core.event_model import CommitResult, EventDraft, HostInfo, VenueInfo
from eventimport.core.exceptions import (
    DuplicateEventError,
    SupabaseError,
    UniqueViolationError,
)
from eventimport.core.supabase_client import SupabaseClient
from eventimport.logging import get_logger
from eventimport.utils.text import name_similarity, normalize_name

logger = get_logger(__name__)


@dataclass
class _Resolved:
    """A venue or host id plus how it was obtained."""

    id: str
    created: bool = False
    warnings: list[str] = field(default_factory=list)


def similar_names(
    name: str,
    rows: list[dict[str, Any]],
    threshold: float,
) -> list[str]:
    """Existing names that look like `name` without being equal to it.

    Args:
        name: Candidate name
        rows: Existing rows with a "name" key
        threshold: Minimum similarity ratio (0-1)

    Returns:
        Matching names, most similar first
    """
    target = normalize_name(name)
    scored = []
    for row in rows:
        existing = row.get("name") or ""
        if existing == name:
            continue
        # Same name modulo case/accents/punctuation counts as a near match
        if normalize_name(existing) == target:
            scored.append((1.0, existing))
            continue
        score = name_similarity(name, existing)
        if score >= threshold:
            scored.append((score, existing))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [existing for _, existing in scored]


class CommitWriter:
    """Writes venue, host and event rows for an approved draft."""

    def __init__(self, store: SupabaseClient, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    async def _resolve_venue(self, venue: VenueInfo) -> _Resolved:
        threshold = self.settings.match_similarity_threshold
        exact = await self.store.find_venues_by_name(venue.name)

        if exact:
            resolved = _Resolved(id=exact[0]["id"])
            if len(exact) > 1:
                resolved.warnings.append(
                    f'{len(exact)} venues are named "{venue.name}"; reused {resolved.id}'
                )
            logger.info("venue_reused", venue_id=resolved.id, name=venue.name[:60])
            return resolved

        similar = similar_names(venue.name, await self.store.list_venues(), threshold)

        venue_id = await self.store.insert_venue(
            venue.to_supabase_dict(default_country=self.settings.default_venue_country)
        )
        resolved = _Resolved(id=venue_id, created=True)
        if similar:
            resolved.warnings.append(
                f'New venue "{venue.name}" looks like existing venue "{similar[0]}"'
            )
        logger.info("venue_created", venue_id=venue_id, name=venue.name[:60])
        return resolved

    async def _resolve_host(self, host: HostInfo, draft: EventDraft) -> _Resolved:
        threshold = self.settings.match_similarity_threshold
        source = draft.source.storage_value
        exact = await self.store.find_hosts_by_name(host.name, source)

        if exact:
            resolved = _Resolved(id=exact[0]["id"])
            if len(exact) > 1:
                resolved.warnings.append(
                    f'{len(exact)} {source} hosts are named "{host.name}"; reused {resolved.id}'
                )
            logger.info("host_reused", host_id=resolved.id, name=host.name[:60])
            return resolved

        similar = similar_names(host.name, await self.store.list_hosts(source), threshold)

        host_id = await self.store.insert_host(host.to_supabase_dict(draft.source))
        resolved = _Resolved(id=host_id, created=True)
        if similar:
            resolved.warnings.append(
                f'New host "{host.name}" looks like existing host "{similar[0]}"'
            )
        logger.info("host_created", host_id=host_id, name=host.name[:60])
        return resolved

    async def _rollback(self, venue: _Resolved | None, host: _Resolved | None) -> None:
        """Delete rows this commit created."""
        for table, resolved in (("hosts", host), ("venues", venue)):
            if resolved is None or not resolved.created:
                continue
            try:
                await self.store.delete_row(table, resolved.id)
            except SupabaseError as e:
                logger.error("rollback_failed", table=table, row_id=resolved.id, error=str(e))
            else:
                logger.info("commit_rollback", table=table, row_id=resolved.id)

    async def write(self, draft: EventDraft) -> CommitResult:
        """Insert the draft and its venue/host.

        Raises:
            DuplicateEventError: The (source, source_id) pair was inserted
                concurrently by someone else
            SupabaseError: Any other storage failure
        """
        venue: _Resolved | None = None
        host: _Resolved | None = None

        try:
            if draft.venue is not None:
                venue = await self._resolve_venue(draft.venue)
            if draft.host is not None:
                host = await self._resolve_host(draft.host, draft)

            row = await self.store.insert_event(
                draft.to_supabase_dict(
                    venue_id=venue.id if venue else None,
                    host_id=host.id if host else None,
                )
            )
        except UniqueViolationError as e:
            await self._rollback(venue, host)
            key = draft.dedup_key
            existing_id = await self.store.find_event_by_source(*key) if key else None
            if existing_id is None:
                raise
            logger.info("duplicate_detected", existing_id=existing_id, on="insert")
            raise DuplicateEventError(
                existing_id, source=key[0], source_id=key[1]
            ) from e
        except SupabaseError:
            await self._rollback(venue, host)
            raise

        warnings = (venue.warnings if venue else []) + (host.warnings if host else [])
        for warning in warnings:
            logger.warning("possible_duplicate_name", detail=warning)

        result = CommitResult(
            event_id=row["id"],
            venue_id=venue.id if venue else None,
            host_id=host.id if host else None,
            created_venue=bool(venue and venue.created),
            created_host=bool(host and host.created),
            warnings=warnings,
        )
        logger.info(
            "event_committed",
            event_id=result.event_id,
            source=draft.source.storage_value,
            created_venue=result.created_venue,
            created_host=result.created_host,
        )
        return result
