"""Tests for the source fetcher."""

import httpx
import pytest

from eventimport.core.event_model import EventSource, EventStatus
from eventimport.core.exceptions import InvalidURLError, SourceAccessError
from eventimport.core.fetcher import SourceFetcher


def raising_transport(exc_type: type[httpx.TransportError]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("simulated failure", request=request)

    return httpx.MockTransport(handler)


class TestBlockedPlatforms:
    """Blocklisted platforms are never requested."""

    @pytest.mark.asyncio
    async def test_facebook_returns_template_without_request(self, settings, transport):
        fetcher = SourceFetcher(settings, transport=transport)
        url = "https://www.facebook.com/events/1234567890"

        result = await fetcher.fetch(url)

        assert transport.requests == []
        assert result.blocked is True
        assert result.html is None
        draft = result.template
        assert draft.status == EventStatus.DRAFT
        assert draft.title == ""
        assert draft.source == EventSource.FACEBOOK
        assert draft.source_url == url
        assert draft.ticket_url == url
        assert draft.warning == "Facebook blocks automated access. Please enter event details manually."

    @pytest.mark.asyncio
    async def test_instagram_subdomain(self, settings, transport):
        fetcher = SourceFetcher(settings, transport=transport)

        result = await fetcher.fetch("https://m.instagram.com/p/abc/")

        assert transport.requests == []
        assert result.template.warning.startswith("Instagram blocks automated access")
        assert result.template.source.storage_value == "manual"

    @pytest.mark.asyncio
    async def test_tixr_is_blocked_by_default(self, settings, transport):
        fetcher = SourceFetcher(settings, transport=transport)

        result = await fetcher.fetch("https://www.tixr.com/groups/club/events/show-1")

        assert transport.requests == []
        assert result.template.warning.startswith("Tixr blocks automated access")
        assert result.template.source == EventSource.MANUAL

    @pytest.mark.asyncio
    async def test_blocklist_is_configurable(self, transport):
        from eventimport.config import Settings

        settings = Settings(import_blocked_platforms={"tiktok.com": "TikTok"})
        transport.pages["https://www.facebook.com/events/1"] = (200, "<html></html>")
        fetcher = SourceFetcher(settings, transport=transport)

        blocked = await fetcher.fetch("https://www.tiktok.com/@club/live")
        fetched = await fetcher.fetch("https://www.facebook.com/events/1")

        assert blocked.blocked is True
        assert fetched.blocked is False
        assert len(transport.requests) == 1


class TestFetch:
    """Tests for page retrieval."""

    @pytest.mark.asyncio
    async def test_success_sends_browser_headers(self, settings, transport):
        url = "https://example.com/event"
        transport.pages[url] = (200, "<html><title>Gala</title></html>")
        fetcher = SourceFetcher(settings, transport=transport)

        result = await fetcher.fetch(url)

        assert result.blocked is False
        assert result.html == "<html><title>Gala</title></html>"
        assert result.status_code == 200
        request = transport.requests[0]
        assert request.headers["user-agent"] == settings.import_user_agent
        assert request.headers["accept-language"] == "en-US,en;q=0.5"

    @pytest.mark.asyncio
    async def test_url_is_stripped(self, settings, transport):
        transport.pages["https://example.com/event"] = (200, "<html></html>")
        fetcher = SourceFetcher(settings, transport=transport)

        result = await fetcher.fetch("  https://example.com/event \n")

        assert result.url == "https://example.com/event"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/x", "https://example.com:abc/e"])
    async def test_invalid_url(self, settings, transport, url):
        fetcher = SourceFetcher(settings, transport=transport)

        with pytest.raises(InvalidURLError) as exc_info:
            await fetcher.fetch(url)

        assert exc_info.value.http_status == 400
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_rejected_status(self, settings, transport):
        url = "https://example.com/private"
        transport.pages[url] = (403, "Forbidden")
        fetcher = SourceFetcher(settings, transport=transport)

        with pytest.raises(SourceAccessError) as exc_info:
            await fetcher.fetch(url)

        assert exc_info.value.status_code == 403
        assert "status 403" in exc_info.value.message
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_connection_error(self, settings):
        fetcher = SourceFetcher(settings, transport=raising_transport(httpx.ConnectError))

        with pytest.raises(SourceAccessError) as exc_info:
            await fetcher.fetch("https://unreachable.example.com")

        assert exc_info.value.status_code is None
        assert exc_info.value.message == "Could not access URL: simulated failure"

    @pytest.mark.asyncio
    async def test_timeout(self, settings):
        fetcher = SourceFetcher(settings, transport=raising_transport(httpx.ReadTimeout))

        with pytest.raises(SourceAccessError) as exc_info:
            await fetcher.fetch("https://slow.example.com")

        assert "timed out after 5.0s" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_url_rejected_by_httpx(self, settings):
        """httpx.InvalidURL is not an HTTPError; it still surfaces as InvalidURLError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

        fetcher = SourceFetcher(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(InvalidURLError) as exc_info:
            await fetcher.fetch("https://example.com/event")

        assert exc_info.value.http_status == 400
        assert exc_info.value.details == {"url": "https://example.com/event"}
