"""Engines module - normalized model, extraction helpers and pagination."""

from skraper.engines.errors import (
    MalformedFragmentError,
    SkraperError,
    TransportError,
)
from skraper.engines.model import (
    Audio,
    Image,
    Media,
    PageInfo,
    PageStatistics,
    Post,
    PostStatistics,
    Video,
)
from skraper.engines.pagination import PaginationStats, paginate

__all__ = [
    # Model
    "Audio",
    "Image",
    "Media",
    "PageInfo",
    "PageStatistics",
    "Post",
    "PostStatistics",
    "Video",
    # Pagination
    "PaginationStats",
    "paginate",
    # Exceptions
    "MalformedFragmentError",
    "SkraperError",
    "TransportError",
]
