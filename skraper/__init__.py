"""skraper - pluggable scraping of social feeds into a shared post model.

Providers turn paginated HTML/JSON feeds into lazy streams of normalized
posts and expose page metadata and media resolution behind one protocol.
"""
from skraper.engines import (  # noqa: F401
    Audio,
    Image,
    Media,
    PageInfo,
    PageStatistics,
    Post,
    PostStatistics,
    Video,
    MalformedFragmentError,
    SkraperError,
    TransportError,
)
from skraper.connectors.http import HttpRequest, RequestsSkraperClient, SkraperClient  # noqa: F401
from skraper.engines.provider import BaseSkraper, Skraper  # noqa: F401
from skraper.providers import available_providers, find_provider  # noqa: F401
