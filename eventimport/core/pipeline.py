"""Event import pipeline.

Ties the stages together:

1. Fetch the page (or skip it for blocklisted platforms)
2. Extract fields from structured data, or from pasted text
3. Normalize into an EventDraft for operator review
4. On approval: duplicate check, then venue/host/event inserts

Usage:
    from eventimport.core.pipeline import ImportPipeline
    from eventimport.core.event_model import UrlImport

    pipeline = ImportPipeline()
    draft = await pipeline.preview(UrlImport(url="https://www.eventbrite.com/e/..."))
    result = await pipeline.commit(draft)
"""

from eventimport.config import Settings, get_settings
from eventimport.core.commit_writer import CommitWriter
from eventimport.core.duplicate_guard import DuplicateGuard
from eventimport.core.event_model import (
    BatchPreviewResult,
    CommitResult,
    EventDraft,
    ImportFailure,
    ImportRequest,
    TextImport,
    UrlImport,
)
from eventimport.core.exceptions import (
    EventImportError,
    IncompleteDraftError,
    ManualEntryRequiredError,
)
from eventimport.core.fetcher import SourceFetcher
from eventimport.core.normalizer import normalize_event
from eventimport.core.supabase_client import SupabaseClient, get_supabase_client
from eventimport.extractors import extract_structured_data, parse_event_text
from eventimport.logging import get_logger, log_import

logger = get_logger(__name__)


class ImportPipeline:
    """Preview and commit single events.

    Previews never touch storage, so the Supabase client is only created on
    the first commit.
    """

    def __init__(
        self,
        fetcher: SourceFetcher | None = None,
        store: SupabaseClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.fetcher = fetcher or SourceFetcher(self.settings)
        self._store = store
        self._guard: DuplicateGuard | None = None
        self._writer: CommitWriter | None = None

    @property
    def store(self) -> SupabaseClient:
        if self._store is None:
            self._store = get_supabase_client()
        return self._store

    @property
    def guard(self) -> DuplicateGuard:
        if self._guard is None:
            self._guard = DuplicateGuard(self.store)
        return self._guard

    @property
    def writer(self) -> CommitWriter:
        if self._writer is None:
            self._writer = CommitWriter(self.store, self.settings)
        return self._writer

    # ==========================================
    # Preview
    # ==========================================

    async def preview(self, request: ImportRequest) -> EventDraft:
        """Build a draft from a URL or a pasted text block.

        Raises:
            InvalidURLError: Malformed URL
            SourceAccessError: The page could not be fetched
        """
        if isinstance(request, UrlImport):
            return await self._preview_url(request.url)
        if isinstance(request, TextImport):
            return self._preview_text(request)
        raise TypeError(f"Unsupported import request: {type(request).__name__}")

    async def _preview_url(self, url: str) -> EventDraft:
        with log_import("url", url):
            fetched = await self.fetcher.fetch(url)
            if fetched.blocked:
                return fetched.template

            draft = normalize_event(extract_structured_data(fetched.html or "", fetched.url))
            logger.info(
                "preview_ready",
                title=draft.title[:60],
                source=draft.source.value,
                source_id=draft.source_id,
            )
            return draft

    def _preview_text(self, request: TextImport) -> EventDraft:
        with log_import("text", f"{len(request.text)} chars"):
            draft = normalize_event(parse_event_text(request.text, source=request.source))
            logger.info("preview_ready", title=draft.title[:60], source=draft.source.value)
            return draft

    async def preview_urls(self, urls: list[str]) -> BatchPreviewResult:
        """Preview several URLs, one at a time.

        A failing URL is recorded and the batch carries on. Blank entries are
        ignored.
        """
        result = BatchPreviewResult()

        for url in urls:
            url = url.strip()
            if not url:
                continue
            try:
                result.drafts.append(await self._preview_url(url))
            except EventImportError as e:
                logger.warning("batch_preview_failed", url=url[:120], error=e.message)
                result.failures.append(
                    ImportFailure(
                        url=url,
                        error=e.message,
                        status_code=getattr(e, "status_code", None),
                    )
                )

        logger.info(
            "batch_preview_complete",
            succeeded=result.success_count,
            failed=result.failure_count,
        )
        return result

    # ==========================================
    # Commit
    # ==========================================

    async def commit(self, draft: EventDraft) -> CommitResult:
        """Persist an operator-approved draft.

        Raises:
            IncompleteDraftError: The title was left blank
            DuplicateEventError: (source, source_id) already imported
            SupabaseError: Storage failure (nothing is left half-written)
        """
        with log_import("commit", draft.source_url or draft.title):
            # Manual-entry templates arrive with an empty title
            if not draft.title:
                logger.warning("commit_rejected_blank_title")
                raise IncompleteDraftError("title")
            await self.guard.check(draft)
            return await self.writer.write(draft)

    async def import_url(self, url: str) -> CommitResult:
        """Preview and commit a URL in one step, without operator review.

        Raises:
            ManualEntryRequiredError: The page needs manual entry (blocked
                platform or no event data found)
        """
        draft = await self.preview(UrlImport(url=url))
        if draft.warning:
            raise ManualEntryRequiredError(url, draft.warning)
        return await self.commit(draft)
