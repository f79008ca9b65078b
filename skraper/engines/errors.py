"""Exceptions raised by the scraping engine and fetch clients."""


class SkraperError(Exception):
    """Base class for every error raised by skraper."""

    pass


class TransportError(SkraperError):
    """Raised when a page cannot be fetched or decoded.

    Covers network failures, non-2xx responses other than 404 and bodies
    that cannot be decoded. It always reaches the caller of the provider
    operation that triggered the fetch.

    Attributes:
        url: The URL that failed
        status_code: HTTP status code, or None when no response was received
        cause: Description of the underlying failure

    Example:
        >>> raise TransportError("https://ifunny.co/page2", 503, "Service Unavailable")
        TransportError: Failed to fetch 'https://ifunny.co/page2' (HTTP 503): Service Unavailable
    """

    def __init__(self, url: str, status_code: int | None = None, cause: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.cause = cause
        status = f" (HTTP {status_code})" if status_code is not None else ""
        message = f"Failed to fetch '{url}'{status}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class MalformedFragmentError(SkraperError):
    """Raised by a fragment mapper when a single raw post cannot be normalized.

    The pagination engine skips the fragment and carries on with the page.
    """

    pass
