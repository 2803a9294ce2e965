"""URL fetch error hierarchy."""


class UrlFetchError(Exception):
    """Fetching or reading the page failed."""


class UrlValidationError(UrlFetchError):
    """The URL was rejected before any request was made."""


class UnsafeUrlError(UrlValidationError):
    """The URL points at a private, loopback or internal address."""
