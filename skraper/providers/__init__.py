"""Providers module - site adapters and lookup by URL."""

import logging
from typing import Iterable

from skraper.connectors.http import RequestsSkraperClient, SkraperClient
from skraper.engines.provider import Skraper
from skraper.providers.ifunny import IFunnySkraper
from skraper.providers.reddit import RedditSkraper


logger = logging.getLogger(__name__)


def available_providers(client: SkraperClient | None = None) -> list[Skraper]:
    """Instantiate every bundled provider sharing one fetch client.

    Args:
        client: Fetch client; defaults to a RequestsSkraperClient

    Returns:
        Providers in lookup order
    """
    client = client or RequestsSkraperClient()
    return [
        IFunnySkraper(client),
        RedditSkraper(client),
    ]


def find_provider(url: str, providers: Iterable[Skraper] | None = None) -> Skraper | None:
    """Return the first provider whose ``supports(url)`` is true, or None."""
    candidates = providers if providers is not None else available_providers()
    for provider in candidates:
        if provider.supports(url):
            return provider

    logger.debug(f"No provider supports {url}")
    return None


__all__ = [
    "IFunnySkraper",
    "RedditSkraper",
    "available_providers",
    "find_provider",
]
