"""Unit tests for the Reddit provider parsing."""

import json
from datetime import datetime, timedelta, timezone

from skraper.engines.model import Image, PageStatistics, PostStatistics, Video
from skraper.providers.reddit import RedditSkraper


FIRST_LISTING = {
    "kind": "Listing",
    "data": {
        "after": "t3_b2",
        "children": [
            {
                "kind": "t3",
                "data": {
                    "id": "a1",
                    "title": "Monday again",
                    "selftext": "",
                    "created_utc": 1700000000.0,
                    "url": "https://i.redd.it/a1.jpg",
                    "is_video": False,
                    "ups": 1520,
                    "num_comments": 48,
                    "preview": {"images": [{"source": {"url": "https://preview.redd.it/a1.jpg?s=1&amp;w=2", "width": 1200, "height": 800}}]},
                },
            },
            {
                "kind": "t3",
                "data": {"title": "Deleted post without id"},
            },
            {
                "kind": "t3",
                "data": {
                    "id": "b2",
                    "title": "Cat video",
                    "selftext": "Turn the sound on",
                    "created_utc": 1700000100,
                    "url": "https://v.redd.it/b2",
                    "is_video": True,
                    "ups": 300,
                    "num_comments": 12,
                    "media": {
                        "reddit_video": {
                            "fallback_url": "https://v.redd.it/b2/DASH_720.mp4?source=fallback",
                            "width": 1280,
                            "height": 720,
                            "duration": 42,
                        }
                    },
                },
            },
        ],
    },
}

SECOND_LISTING = {
    "kind": "Listing",
    "data": {
        "after": None,
        "children": [
            {"kind": "t3", "data": {"id": "c3", "title": "No timestamp", "url": "https://example.com/article"}},
        ],
    },
}

EMPTY_LISTING = {"kind": "Listing", "data": {"after": None, "children": []}}

ABOUT = {
    "kind": "t5",
    "data": {
        "display_name": "memes",
        "title": "/r/Memes the original since 2008",
        "public_description": "Memes!",
        "subscribers": 35000000,
        "community_icon": "https://styles.redditmedia.com/icon.png?width=256&amp;s=abc",
        "icon_img": "",
        "banner_background_image": "",
        "banner_img": "https://b.thumbs.redditmedia.com/banner.png",
    },
}

FIRST_URL = "https://www.reddit.com/r/memes/hot.json?limit=25"
SECOND_URL = "https://www.reddit.com/r/memes/hot.json?limit=25&after=t3_b2"


def _provider(make_client, pages):
    client = make_client({url: json.dumps(body) for url, body in pages.items()})
    return RedditSkraper(client), client


class TestRedditListingParsing:
    """Listing children map to posts."""

    def test_follows_after_token_until_exhausted(self, make_client):
        """Pagination SHALL follow ``after`` and stop when it is null."""
        provider, client = _provider(make_client, {FIRST_URL: FIRST_LISTING, SECOND_URL: SECOND_LISTING})

        posts = list(provider.get_posts("/r/memes"))

        assert [post.id for post in posts] == ["a1", "b2", "c3"]
        assert client.calls == [FIRST_URL, SECOND_URL]

    def test_image_post_fields(self, make_client):
        provider, _ = _provider(make_client, {FIRST_URL: FIRST_LISTING})

        post = next(provider.get_posts("/r/memes"))

        assert post.text == "Monday again"
        assert post.published_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert post.media == (Image(url="https://i.redd.it/a1.jpg", aspect_ratio=1.5),)
        assert post.statistics == PostStatistics(likes=1520, comments=48)

    def test_video_post_fields(self, make_client):
        provider, _ = _provider(make_client, {FIRST_URL: FIRST_LISTING})

        posts = provider.get_posts("/r/memes")
        next(posts)
        post = next(posts)

        assert post.text == "Cat video\n\nTurn the sound on"
        assert post.media == (
            Video(
                url="https://v.redd.it/b2/DASH_720.mp4?source=fallback",
                aspect_ratio=1280 / 720,
                duration=timedelta(seconds=42),
            ),
        )

    def test_missing_timestamp_defaults_to_fetch_time(self, make_client):
        provider, _ = _provider(make_client, {FIRST_URL: SECOND_LISTING})

        before = datetime.now(timezone.utc)
        post = next(provider.get_posts("/r/memes"))

        assert post.published_at >= before
        assert post.media == (Image(url="https://example.com/article"),)

    def test_empty_listing_yields_nothing(self, make_client):
        provider, client = _provider(make_client, {FIRST_URL: EMPTY_LISTING})

        assert list(provider.get_posts("/r/memes/")) == []
        assert client.calls == [FIRST_URL]

    def test_custom_page_size(self, make_client):
        client = make_client({"https://www.reddit.com/r/memes/hot.json?limit=5": json.dumps(EMPTY_LISTING)})

        list(RedditSkraper(client, page_size=5).get_posts("/r/memes"))

        assert client.calls == ["https://www.reddit.com/r/memes/hot.json?limit=5"]


class TestRedditPageInfo:
    """Subreddit metadata comes from about.json."""

    def test_parse_about(self, make_client):
        provider, client = _provider(make_client, {"https://www.reddit.com/r/memes/about.json": ABOUT})

        info = provider.get_page_info("/r/memes")

        assert info.nick == "memes"
        assert info.name == "/r/Memes the original since 2008"
        assert info.description == "Memes!"
        assert info.statistics == PageStatistics(followers=35000000)
        assert info.avatar == Image(url="https://styles.redditmedia.com/icon.png?width=256&s=abc")
        assert info.cover == Image(url="https://b.thumbs.redditmedia.com/banner.png")

    def test_unknown_subreddit_returns_none(self, make_client):
        provider, _ = _provider(make_client, {})

        assert provider.get_page_info("/r/doesnotexist") is None

    def test_listing_instead_of_about_returns_none(self, make_client):
        provider, _ = _provider(make_client, {"https://www.reddit.com/r/memes/about.json": EMPTY_LISTING})

        assert provider.get_page_info("/r/memes") is None


class TestRedditSupports:
    def test_supports_reddit_hosts(self, make_client):
        provider = RedditSkraper(make_client())

        assert provider.supports("https://old.reddit.com/r/memes")
        assert provider.supports("https://www.reddit.com/r/memes/comments/a1")
        assert not provider.supports("https://ifunny.co/video/abc")


class TestRedditNegativeCounters:
    """Counters below zero read as absent instead of failing."""

    def test_negative_subscribers_in_about(self, make_client):
        about = json.loads(json.dumps(ABOUT))
        about["data"]["subscribers"] = -3
        provider, _ = _provider(make_client, {"https://www.reddit.com/r/memes/about.json": about})

        info = provider.get_page_info("/r/memes")

        assert info.nick == "memes"
        assert info.statistics == PageStatistics(followers=None)

    def test_negative_post_counters_keep_the_post(self, make_client):
        listing = {
            "kind": "Listing",
            "data": {
                "after": None,
                "children": [
                    {"kind": "t3", "data": {"id": "n1", "title": "Downvoted", "ups": -5, "num_comments": 2}},
                ],
            },
        }
        provider, _ = _provider(make_client, {FIRST_URL: listing})

        posts = list(provider.get_posts("/r/memes"))

        assert [post.id for post in posts] == ["n1"]
        assert posts[0].statistics == PostStatistics(likes=None, comments=2)
