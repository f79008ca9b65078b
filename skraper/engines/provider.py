"""Provider protocol and base class shared by site adapters."""

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Protocol, runtime_checkable

from skraper.connectors.http import HttpRequest, LinkPreview, SkraperClient
from skraper.engines.errors import TransportError
from skraper.engines.extraction import build_full_url, registered_domain, to_audio, to_image, to_video
from skraper.engines.model import Image, Media, PageInfo, Post
from skraper.engines.pagination import (
    PaginationStats,
    next_page_number_cursor,
    page_number_cursor,
    paginate,
)


logger = logging.getLogger(__name__)


@runtime_checkable
class Skraper(Protocol):
    """Protocol defining the interface every provider implements.

    Attributes:
        name: Short provider identifier (e.g. "reddit")
        base_url: Canonical site URL
    """

    name: str
    base_url: str

    def supports(self, media_url: str) -> bool:
        """Return True if the URL belongs to this provider. Never performs I/O."""
        ...

    def get_posts(self, path: str) -> Iterator[Post]:
        """Lazily yield the posts of a feed, one page fetched at a time.

        Raises:
            TransportError: While iterating, if a page cannot be fetched
        """
        ...

    def get_page_info(self, path: str) -> PageInfo | None:
        """Return the owner of a path, or None if it does not exist."""
        ...

    def resolve(self, media: Media) -> Media:
        """Fill in the canonical URL and aspect ratio of a media reference."""
        ...


_PREVIEW_BUILDERS = {
    "image": to_image,
    "video": to_video,
    "audio": to_audio,
}


class BaseSkraper(ABC):
    """Base implementation of the Skraper protocol.

    Subclasses set ``name`` and ``base_url`` and implement the page hooks
    (``fetch_page``, ``extract_fragments``, ``map_fragment``) plus
    ``get_page_info``. Feeds paginated by a ``/pageN`` path suffix work out
    of the box; token-based feeds override ``initial_cursor`` and
    ``next_cursor``.

    Attributes:
        client: Fetch client used for every request
    """

    name: str = ""
    base_url: str = ""

    # Registered domains serving the provider's media besides base_url
    alternate_domains: tuple[str, ...] = ()

    # Path prefixes served as a single, unpaginated page
    unpaginated_prefixes: tuple[str, ...] = ()

    def __init__(self, client: SkraperClient):
        self.client = client

    def supports(self, media_url: str) -> bool:
        domain = registered_domain(media_url)
        return bool(domain) and (domain == registered_domain(self.base_url) or domain in self.alternate_domains)

    def get_posts(self, path: str, stats: PaginationStats | None = None) -> Iterator[Post]:
        return paginate(
            fetch_page=self.fetch_page,
            extract_fragments=self.extract_fragments,
            map_fragment=self.map_fragment,
            initial_cursor=self.initial_cursor(path),
            next_cursor=self.next_cursor,
            stats=stats,
        )

    @abstractmethod
    def get_page_info(self, path: str) -> PageInfo | None:
        ...

    def resolve(self, media: Media) -> Media:
        """Complete a media reference from its page's Open Graph preview.

        Media that already has a URL and an aspect ratio is returned as is
        without any request. When no preview can be obtained the input is
        returned unchanged.
        """
        if media.is_complete:
            return media

        try:
            preview = self.client.fetch_link_preview(media.url)
        except TransportError as e:
            logger.warning(f"Could not resolve {media.url}: {e}")
            return media

        if preview is None:
            return media
        return self._apply_preview(media, preview)

    # ── Pagination hooks ────────────────────────────────────────────────────

    def initial_cursor(self, path: str) -> str:
        return page_number_cursor(path, unpaginated_prefixes=self.unpaginated_prefixes)

    def next_cursor(self, cursor: str, page: Any) -> str | None:
        return next_page_number_cursor(cursor)

    @abstractmethod
    def fetch_page(self, cursor: str) -> Any | None:
        """Fetch the raw page at a cursor, or None if it does not exist."""
        ...

    @abstractmethod
    def extract_fragments(self, page: Any) -> Iterable[Any]:
        """Return the raw post fragments of a page in document order."""
        ...

    @abstractmethod
    def map_fragment(self, fragment: Any) -> Post | None:
        """Map one raw fragment to a Post, or None when it has no usable id."""
        ...

    # ── Helpers ─────────────────────────────────────────────────────────────

    def url_for(self, path: str) -> str:
        return build_full_url(self.base_url, path)

    def request_for(self, path: str, **headers: str) -> HttpRequest:
        return HttpRequest(url=self.url_for(path), headers=dict(headers))

    @staticmethod
    def _apply_preview(media: Media, preview: LinkPreview) -> Media:
        """Merge preview data into the media, keeping known values."""
        build = _PREVIEW_BUILDERS.get(preview.media_type, to_image)
        aspect_ratio = media.aspect_ratio if media.aspect_ratio is not None else preview.aspect_ratio

        # Plain links are retyped once the preview reveals what they point to
        if type(media) is Media or (type(media) is Image and build is not to_image):
            return build(preview.url, aspect_ratio=aspect_ratio) or media

        return dataclasses.replace(media, url=preview.url, aspect_ratio=aspect_ratio)
