"""Tests for the import pipeline."""

from decimal import Decimal

import pytest

from eventimport.core.event_model import EventDraft, EventSource, EventStatus, TextImport, UrlImport
from eventimport.core.exceptions import (
    DuplicateEventError,
    IncompleteDraftError,
    InvalidURLError,
    ManualEntryRequiredError,
)
from eventimport.core.fetcher import SourceFetcher
from eventimport.core.pipeline import ImportPipeline

EVENTBRITE_URL = "https://www.eventbrite.com/e/jazz-night-123456789012"


@pytest.fixture
def pipeline(settings, transport, store) -> ImportPipeline:
    return ImportPipeline(fetcher=SourceFetcher(settings, transport=transport), store=store, settings=settings)


@pytest.fixture
def eventbrite_page(transport, eventbrite_event, jsonld_page):
    transport.pages[EVENTBRITE_URL] = (200, jsonld_page(eventbrite_event))
    return EVENTBRITE_URL


class TestPreview:
    """Tests for ImportPipeline.preview."""

    @pytest.mark.asyncio
    async def test_url_preview(self, pipeline, eventbrite_page, store):
        draft = await pipeline.preview(UrlImport(url=eventbrite_page))

        assert draft.title == "Jazz Night"
        assert draft.status == EventStatus.DRAFT
        assert draft.source == EventSource.EVENTBRITE
        assert draft.source_id == "123456789012"
        assert draft.price_min == Decimal(10)
        assert draft.price_max == Decimal(25)
        assert draft.is_free is False
        assert draft.venue.name == "The Blue Room"
        # Previews never write
        assert store.events == [] and store.venues == []

    @pytest.mark.asyncio
    async def test_text_preview(self, pipeline, transport):
        request = TextImport(text="Event Name: Foo\nStart Date: 2025-05-01\nDescription: Bar", source=EventSource.MEETUP)

        draft = await pipeline.preview(request)

        assert draft.title == "Foo"
        assert draft.start_time.date().isoformat() == "2025-05-01"
        assert draft.description == "Bar"
        assert draft.source == EventSource.MEETUP
        assert draft.source_id is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_blocked_platform_preview(self, pipeline, transport):
        draft = await pipeline.preview(UrlImport(url="https://www.facebook.com/events/1234567890"))

        assert draft.warning is not None
        assert draft.status == EventStatus.DRAFT
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_invalid_url(self, pipeline):
        with pytest.raises(InvalidURLError):
            await pipeline.preview(UrlImport(url="nope"))


class TestPreviewUrls:
    """Tests for batch previews."""

    @pytest.mark.asyncio
    async def test_failures_do_not_abort_batch(self, pipeline, eventbrite_page, transport):
        transport.pages["https://example.com/private"] = (403, "Forbidden")

        result = await pipeline.preview_urls(
            [eventbrite_page, "", "https://example.com/private", "not a url", "https://fb.com/events/1"]
        )

        assert result.success_count == 2
        assert result.failure_count == 2
        assert [d.title for d in result.drafts] == ["Jazz Night", ""]
        forbidden, invalid = result.failures
        assert forbidden.url == "https://example.com/private"
        assert forbidden.status_code == 403
        assert invalid.url == "not a url"
        assert invalid.status_code is None
        assert invalid.error == "A valid http(s) URL is required"

    @pytest.mark.asyncio
    async def test_bad_port_is_a_failure(self, pipeline, eventbrite_page, transport):
        result = await pipeline.preview_urls(["https://example.com:abc/e", eventbrite_page])

        assert result.success_count == 1
        assert result.failures[0].url == "https://example.com:abc/e"
        assert result.failures[0].error == "A valid http(s) URL is required"
        assert [str(r.url) for r in transport.requests] == [eventbrite_page]


class TestCommit:
    """Tests for committing drafts."""

    @pytest.mark.asyncio
    async def test_commit_approved_draft(self, pipeline, eventbrite_page, store):
        draft = await pipeline.preview(UrlImport(url=eventbrite_page))

        result = await pipeline.commit(draft)

        assert len(store.events) == 1
        assert store.events[0]["id"] == result.event_id
        assert store.events[0]["status"] == "draft"

    @pytest.mark.asyncio
    async def test_second_import_is_rejected(self, pipeline, eventbrite_page, store):
        """Importing the same URL twice stores one row and reports the first."""
        first = await pipeline.commit(await pipeline.preview(UrlImport(url=eventbrite_page)))

        with pytest.raises(DuplicateEventError) as exc_info:
            await pipeline.commit(await pipeline.preview(UrlImport(url=eventbrite_page)))

        assert exc_info.value.existing_id == first.event_id
        assert len(store.events) == 1
        assert len(store.venues) == 1

    @pytest.mark.asyncio
    async def test_free_text_drafts_are_never_duplicates(self, pipeline, store):
        draft = await pipeline.preview(TextImport(text="Event Name: Foo\nStart Date: 2025-05-01"))

        await pipeline.commit(draft)
        await pipeline.commit(draft)

        assert len(store.events) == 2

    @pytest.mark.asyncio
    async def test_operator_edits_are_committed(self, pipeline, eventbrite_page, store):
        draft = await pipeline.preview(UrlImport(url=eventbrite_page))
        edited = draft.model_copy(update={"title": "Jazz Night (Late Show)"})

        await pipeline.commit(edited)

        assert store.events[0]["title"] == "Jazz Night (Late Show)"

    @pytest.mark.asyncio
    async def test_blank_title_is_rejected(self, pipeline, store):
        """A manual-entry template committed without a title writes nothing."""
        template = await pipeline.preview(UrlImport(url="https://www.facebook.com/events/1234567890"))

        with pytest.raises(IncompleteDraftError) as exc_info:
            await pipeline.commit(template)

        assert exc_info.value.http_status == 400
        assert exc_info.value.message == "An event title is required"
        assert store.events == []
        assert store.venues == []

    @pytest.mark.asyncio
    async def test_whitespace_title_is_blank(self, pipeline, eventbrite_page, store):
        draft = await pipeline.preview(UrlImport(url=eventbrite_page))
        edited = EventDraft.model_validate({**draft.model_dump(), "title": "   "})

        with pytest.raises(IncompleteDraftError):
            await pipeline.commit(edited)

        assert store.events == []


class TestImportUrl:
    """Tests for one-step imports."""

    @pytest.mark.asyncio
    async def test_import_url(self, pipeline, eventbrite_page, store):
        result = await pipeline.import_url(eventbrite_page)

        assert result.event_id == store.events[0]["id"]

    @pytest.mark.asyncio
    async def test_blocked_platform_needs_manual_entry(self, pipeline, store, transport):
        with pytest.raises(ManualEntryRequiredError) as exc_info:
            await pipeline.import_url("https://www.instagram.com/p/abc/")

        assert "Instagram blocks automated access" in exc_info.value.message
        assert store.events == []
        assert transport.requests == []
