"""Shared test doubles for provider and pagination tests."""

import pytest

from skraper.connectors.http import HttpRequest, SkraperClient


class FakeClient(SkraperClient):
    """In-memory fetch client serving canned bodies by URL.

    URLs missing from ``pages`` behave like HTTP 404. Values that are
    exceptions are raised instead of returned. Every requested URL is
    recorded in ``calls`` so tests can assert on network activity.
    """

    def __init__(self, pages: dict[str, object] | None = None):
        self.pages = dict(pages or {})
        self.calls: list[str] = []

    def fetch(self, request: HttpRequest) -> str | None:
        self.calls.append(request.url)
        body = self.pages.get(request.url)
        if isinstance(body, Exception):
            raise body
        return body


@pytest.fixture
def make_client():
    """Factory fixture building a FakeClient from a URL -> body mapping."""
    return FakeClient
