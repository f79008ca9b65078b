"""Connectors module - fetch clients for remote pages."""

from skraper.connectors.http import (
    HttpRequest,
    LinkPreview,
    RequestsSkraperClient,
    SkraperClient,
    parse_link_preview,
)

__all__ = [
    "HttpRequest",
    "LinkPreview",
    "RequestsSkraperClient",
    "SkraperClient",
    "parse_link_preview",
]
