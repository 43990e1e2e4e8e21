"""Duplicate guard: refuses drafts whose (source, source_id) is already stored."""

from eventimport.core.event_model import EventDraft
from eventimport.core.exceptions import DuplicateEventError
from eventimport.core.supabase_client import SupabaseClient
from eventimport.logging import get_logger

logger = get_logger(__name__)


class DuplicateGuard:
    """Checks the events table before a commit.

    Drafts without a source_id (free text, unknown platforms) are never
    considered duplicates.
    """

    def __init__(self, store: SupabaseClient) -> None:
        self.store = store

    async def check(self, draft: EventDraft) -> None:
        """Raise DuplicateEventError if the draft was imported before."""
        key = draft.dedup_key
        if key is None:
            logger.debug("duplicate_check_skipped", title=draft.title[:60])
            return

        source, source_id = key
        existing_id = await self.store.find_event_by_source(source, source_id)
        if existing_id is not None:
            logger.info(
                "duplicate_detected",
                source=source,
                source_id=source_id,
                existing_id=existing_id,
            )
            raise DuplicateEventError(existing_id, source=source, source_id=source_id)
