"""Source fetcher: retrieves event pages with browser-like headers.

Platforms that reject automated retrieval are never requested; the fetcher
hands back a manual-entry template instead so the operator can fill the
draft in by hand.
"""

from dataclasses import dataclass

import httpx

from eventimport.config import Settings, get_settings
from eventimport.core.event_model import EventDraft
from eventimport.core.exceptions import InvalidURLError, SourceAccessError
from eventimport.logging import get_logger
from eventimport.utils.date_parser import utc_now
from eventimport.utils.urls import infer_source, is_valid_url, match_blocked_platform

logger = get_logger(__name__)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
}


@dataclass
class FetchResult:
    """Raw page content, or a template when the platform is blocked."""

    url: str
    html: str | None = None
    status_code: int | None = None
    template: EventDraft | None = None

    @property
    def blocked(self) -> bool:
        return self.template is not None


def manual_entry_template(url: str, platform_name: str) -> EventDraft:
    """Empty draft the operator completes by hand."""
    return EventDraft(
        title="",
        description="",
        start_time=utc_now(),
        source_url=url,
        ticket_url=url,
        source=infer_source(url),
        warning=(
            f"{platform_name} blocks automated access. "
            "Please enter event details manually."
        ),
    )


class SourceFetcher:
    """Fetch a single event page per call. No retries."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = dict(BASE_HEADERS)
        headers["User-Agent"] = self.settings.import_user_agent
        headers["Accept-Language"] = self.settings.import_accept_language
        return headers

    def blocked_platform(self, url: str) -> str | None:
        """Display name of the blocklisted platform hosting url, if any."""
        return match_blocked_platform(url, self.settings.import_blocked_platforms)

    async def fetch(self, url: str) -> FetchResult:
        """Fetch url, or short-circuit to a manual-entry template.

        Raises:
            InvalidURLError: url is not an http(s) URL, or httpx rejects it
            SourceAccessError: transport failure or non-2xx response
        """
        url = (url or "").strip()
        if not is_valid_url(url):
            raise InvalidURLError(url)

        platform = self.blocked_platform(url)
        if platform:
            logger.info("fetch_skipped_blocked_platform", url=url[:120], platform=platform)
            return FetchResult(url=url, template=manual_entry_template(url, platform))

        logger.info("fetch_start", url=url[:120])
        timeout = self.settings.import_request_timeout

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                headers=self._headers(),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.InvalidURL as e:
            # Not an HTTPError subclass
            logger.warning("fetch_invalid_url", url=url[:120], error=str(e))
            raise InvalidURLError(url) from e
        except httpx.TimeoutException as e:
            logger.error("fetch_timeout", url=url[:120], timeout=timeout)
            raise SourceAccessError(url, reason=f"timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            logger.error("fetch_transport_error", url=url[:120], error=str(e))
            raise SourceAccessError(url, reason=str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error("fetch_rejected", url=url[:120], status=response.status_code)
            raise SourceAccessError(url, status_code=response.status_code)

        logger.info("fetch_complete", url=url[:120], html_length=len(response.text))
        return FetchResult(url=url, html=response.text, status_code=response.status_code)
