"""Server-side URL fetching and best-effort main-content extraction."""

from studio_core.extraction.errors import UnsafeUrlError, UrlFetchError, UrlValidationError
from studio_core.extraction.fetcher import UrlFetcher
from studio_core.extraction.html import ExtractedPage, extract_main_content
from studio_core.extraction.url_guard import PublicOnlyResolver, validate_url

__all__ = [
    "ExtractedPage",
    "PublicOnlyResolver",
    "UnsafeUrlError",
    "UrlFetchError",
    "UrlFetcher",
    "UrlValidationError",
    "extract_main_content",
    "validate_url",
]
