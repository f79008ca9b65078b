"""Tests for provider lookup by URL."""

import pytest

from skraper.connectors.http import RequestsSkraperClient
from skraper.providers import available_providers, find_provider
from skraper.providers.ifunny import IFunnySkraper
from skraper.providers.reddit import RedditSkraper


class TestAvailableProviders:
    def test_all_bundled_providers_share_the_client(self, make_client):
        client = make_client()

        providers = available_providers(client)

        assert [type(p) for p in providers] == [IFunnySkraper, RedditSkraper]
        assert all(p.client is client for p in providers)

    def test_default_client_is_requests_backed(self):
        providers = available_providers()

        assert isinstance(providers[0].client, RequestsSkraperClient)


class TestFindProvider:
    @pytest.mark.parametrize("url,expected", [
        ("https://ifunny.co/video/abc", IFunnySkraper),
        ("https://www.reddit.com/r/memes", RedditSkraper),
        ("https://old.reddit.com/r/memes/comments/a1", RedditSkraper),
    ])
    def test_finds_provider_by_domain(self, url, expected, make_client):
        client = make_client()

        provider = find_provider(url, available_providers(client))

        assert isinstance(provider, expected)
        assert client.calls == []

    def test_unknown_domain_returns_none(self, make_client):
        assert find_provider("https://example.com/post/1", available_providers(make_client())) is None

    def test_defaults_to_bundled_providers(self):
        assert isinstance(find_provider("https://ifunny.co/picture/x"), IFunnySkraper)
