"""HTTP fetch client used by providers to load pages, JSON and link previews."""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests
from bs4 import BeautifulSoup
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from skraper.config.settings import Settings, load_settings
from skraper.engines.errors import TransportError
from skraper.engines.extraction import absolute_url, aspect_ratio_of, meta_content, to_float


logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    """A request issued by a provider.

    Attributes:
        url: Absolute URL to fetch
        method: HTTP method
        headers: Extra headers merged over the client defaults
        body: Optional request body
    """
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | bytes | None = None


@dataclass(frozen=True)
class LinkPreview:
    """Open Graph metadata describing the media behind a link.

    Attributes:
        url: Canonical media URL
        media_type: "image", "video" or "audio"
        aspect_ratio: Width divided by height, if advertised
        title: og:title, if present
    """
    url: str
    media_type: str = "image"
    aspect_ratio: float | None = None
    title: str | None = None


def parse_link_preview(document: BeautifulSoup | None, base_url: str | None = None) -> LinkPreview | None:
    """Read Open Graph tags from a document.

    Video and audio tags win over the preview image. Relative media URLs are
    resolved against ``base_url``. Returns None when the document advertises
    no media at all.
    """
    if document is None:
        return None

    for media_type in ("video", "audio", "image"):
        url = absolute_url(
            meta_content(document, f"og:{media_type}:secure_url") or meta_content(document, f"og:{media_type}"),
            base_url,
        )
        if not url:
            continue

        aspect_ratio = None
        if media_type != "audio":
            aspect_ratio = aspect_ratio_of(
                to_float(meta_content(document, f"og:{media_type}:width")),
                to_float(meta_content(document, f"og:{media_type}:height")),
            )

        return LinkPreview(
            url=url,
            media_type=media_type,
            aspect_ratio=aspect_ratio,
            title=meta_content(document, "og:title"),
        )

    return None


class SkraperClient(ABC):
    """Fetch client shared by providers.

    Implementations provide ``fetch``; the structured helpers are built on
    top of it. A missing resource (HTTP 404) is reported as None, every
    other failure raises TransportError. Implementations must be safe for
    concurrent use by several in-flight requests.
    """

    @abstractmethod
    def fetch(self, request: HttpRequest) -> str | None:
        """Return the response body as text, or None if the resource does not exist.

        Raises:
            TransportError: On network errors, non-2xx responses other than 404
        """
        ...

    def fetch_document(self, request: HttpRequest) -> BeautifulSoup | None:
        """Fetch and parse a markup document."""
        content = self.fetch(request)
        if content is None:
            return None
        return BeautifulSoup(content, "lxml")

    def fetch_json(self, request: HttpRequest) -> Any | None:
        """Fetch and decode a JSON document.

        Raises:
            TransportError: If the body is not valid JSON
        """
        content = self.fetch(request)
        if content is None:
            return None
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON from {request.url}: {e}")
            raise TransportError(request.url, cause=f"invalid JSON: {e}") from e

    def fetch_link_preview(self, url: str) -> LinkPreview | None:
        """Fetch a page and read its Open Graph link preview."""
        return parse_link_preview(self.fetch_document(HttpRequest(url=url)), base_url=url)


def _is_transient(error: BaseException) -> bool:
    """Connection problems, timeouts, throttling and 5xx responses are retried."""
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(error, requests.HTTPError) and error.response is not None:
        status = error.response.status_code
        return status == 429 or status >= 500
    return False


class RequestsSkraperClient(SkraperClient):
    """SkraperClient backed by ``requests``.

    Each request is sent independently (no shared session), so one client
    can serve several threads. Transient failures are retried with
    exponential backoff as configured in Settings.

    Attributes:
        settings: Timeout, pacing and retry configuration
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize the client.

        Args:
            settings: Configuration settings; defaults to load_settings()
        """
        self.settings = settings or load_settings()

    def fetch(self, request: HttpRequest) -> str | None:
        retrying = Retrying(
            stop=stop_after_attempt(self.settings.max_retries + 1),
            wait=wait_exponential(multiplier=1, max=self.settings.retry_max_wait_seconds),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )

        try:
            response = retrying(self._send, request)
        except requests.RequestException as e:
            response = getattr(e, "response", None)
            status = response.status_code if response is not None else None
            logger.error(f"Fetch failed for {request.url}: {e}")
            raise TransportError(request.url, status_code=status, cause=str(e)) from e

        if response is None:
            logger.debug(f"Not found: {request.url}")
            return None

        return response.text

    def _send(self, request: HttpRequest) -> requests.Response | None:
        """Send one request; returns None for 404 and raises for other errors."""
        if self.settings.request_delay_seconds > 0:
            time.sleep(self.settings.request_delay_seconds)

        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html, application/json, */*",
        }
        headers.update(request.headers)

        logger.debug(f"{request.method} {request.url}")
        response = requests.request(
            request.method,
            request.url,
            headers=headers,
            data=request.body,
            timeout=self.settings.request_timeout_seconds,
        )

        if response.status_code == 404:
            return None

        response.raise_for_status()
        return response
