"""Fetch a web page server-side and extract its main content."""

import asyncio
import logging
from typing import Optional, Self
from urllib.parse import urljoin

import aiohttp
from aiohttp.abc import AbstractResolver

from studio_core.extraction.errors import UrlFetchError
from studio_core.extraction.html import DEFAULT_MAX_CHARS, ExtractedPage, extract_main_content
from studio_core.extraction.url_guard import PublicOnlyResolver, validate_url

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
HTML_CONTENT_TYPES = ("text/html", "application/xhtml")
MAX_HTML_BYTES = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024


class UrlFetcher:
    """Fetch pages with a validated, redirect-aware GET.

    Redirects are followed by hand so every hop goes through the same
    scheme and private-address checks as the original URL. Sessions built
    by create_session() resolve host names through PublicOnlyResolver, so
    the address that is checked is the address that is connected to.

    Supports two usage patterns:

    1. Context manager (shared session for several URLs):
        async with UrlFetcher() as fetcher:
            page = await fetcher.fetch(url)

    2. Standalone calls (session created and closed per call):
        page = await UrlFetcher().fetch(url)
    """

    HEADERS = {
        "User-Agent": "Mozilla/5.0 (compatible; ContentStudio/1.0; +https://contentstudio.app)",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_chars: int = DEFAULT_MAX_CHARS,
        max_redirects: int = 5,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._max_chars = max_chars
        self._max_redirects = max_redirects
        self._session = session
        self._owns_session = False

    @classmethod
    def create_session(
        cls,
        resolver: Optional[AbstractResolver] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> aiohttp.ClientSession:
        """Session whose connector refuses non-public addresses.

        Must be called with a running event loop. `resolver` replaces the
        default DNS lookup underneath the public-address filter.
        """
        connector = aiohttp.TCPConnector(resolver=PublicOnlyResolver(resolver))
        return aiohttp.ClientSession(
            headers=cls.HEADERS,
            timeout=timeout or aiohttp.ClientTimeout(total=10.0),
            connector=connector,
        )

    async def __aenter__(self) -> Self:
        if self._session is None:
            self._session = self.create_session(timeout=self._timeout)
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session and self._owns_session:
            await self._session.close()
        if self._owns_session:
            self._session = None
            self._owns_session = False

    async def fetch(self, url: str) -> ExtractedPage:
        """Fetch `url` and return its title and main text.

        Raises:
            UrlValidationError: the URL (or a redirect target) was rejected
                before any request to it was made.
            UrlFetchError: network error, non-2xx status, non-HTML body,
                or too many redirects.
        """
        current = validate_url(url)

        if self._session is None:
            async with self:
                return await self._fetch(current)
        return await self._fetch(current)

    async def _fetch(self, url: str) -> ExtractedPage:
        assert self._session is not None
        current = url

        for _ in range(self._max_redirects + 1):
            logger.info("Fetching URL: %s", current)
            try:
                async with self._session.get(
                    current,
                    headers=self.HEADERS,
                    allow_redirects=False,
                    timeout=self._timeout,
                ) as resp:
                    if resp.status in REDIRECT_STATUSES:
                        location = resp.headers.get("Location")
                        if not location:
                            raise UrlFetchError(f"HTTP {resp.status} redirect without a Location header")
                        current = validate_url(urljoin(current, location))
                        continue

                    if not 200 <= resp.status < 300:
                        raise UrlFetchError(f"HTTP {resp.status}: {resp.reason or ''}".strip())

                    content_type = resp.headers.get("Content-Type", "")
                    if not any(t in content_type for t in HTML_CONTENT_TYPES):
                        raise UrlFetchError("URL does not return HTML content")

                    buf = bytearray()
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        buf.extend(chunk)
                        if len(buf) >= MAX_HTML_BYTES:
                            break
                    body = bytes(buf[:MAX_HTML_BYTES])
                    try:
                        html = body.decode(resp.charset or "utf-8", errors="replace")
                    except LookupError:
                        html = body.decode("utf-8", errors="replace")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise UrlFetchError(str(e) or type(e).__name__) from e

            page = extract_main_content(html, max_chars=self._max_chars)
            logger.info(
                "Extracted content from %s: title=%r, %d chars",
                current, page.title, len(page.content),
            )
            return page

        raise UrlFetchError(f"Too many redirects (max {self._max_redirects})")
