"""Reddit provider reading the public JSON listings."""

import html
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from skraper.connectors.http import SkraperClient
from skraper.engines.extraction import (
    aspect_ratio_of,
    json_bool,
    json_by_path,
    json_count,
    json_float,
    json_int,
    json_string,
    to_datetime,
    to_image,
)
from skraper.engines.model import Media, PageInfo, PageStatistics, Post, PostStatistics, Video
from skraper.engines.provider import BaseSkraper


logger = logging.getLogger(__name__)


REDDIT_BASE_URL = "https://www.reddit.com"

# Posts requested per listing page
DEFAULT_PAGE_SIZE = 25


def _unescape(value: str | None) -> str | None:
    # Listing URLs come HTML-escaped ("&amp;")
    return html.unescape(value) if value else value


@dataclass(frozen=True)
class RedditItem:
    """Typed view of one ``t3`` listing child."""
    id: str | None
    title: str | None
    selftext: str | None
    created_utc: float | None
    url: str | None
    is_video: bool
    video_url: str | None
    video_width: int | None
    video_height: int | None
    video_duration: int | None
    preview_width: int | None
    preview_height: int | None
    ups: int | None
    num_comments: int | None

    @classmethod
    def from_json(cls, node: Any) -> "RedditItem":
        data = json_by_path(node, "data")
        return cls(
            id=json_string(data, "id"),
            title=json_string(data, "title"),
            selftext=json_string(data, "selftext"),
            created_utc=json_float(data, "created_utc"),
            url=_unescape(json_string(data, "url_overridden_by_dest", "url")),
            is_video=bool(json_bool(data, "is_video")),
            video_url=_unescape(json_string(
                data, "media.reddit_video.fallback_url", "secure_media.reddit_video.fallback_url"
            )),
            video_width=json_int(data, "media.reddit_video.width"),
            video_height=json_int(data, "media.reddit_video.height"),
            video_duration=json_int(data, "media.reddit_video.duration"),
            preview_width=json_int(data, "preview.images.0.source.width"),
            preview_height=json_int(data, "preview.images.0.source.height"),
            ups=json_count(data, "ups"),
            num_comments=json_count(data, "num_comments"),
        )

    def to_media(self) -> Media | None:
        if self.is_video and self.video_url:
            return Video(
                url=self.video_url,
                aspect_ratio=aspect_ratio_of(self.video_width, self.video_height),
                duration=timedelta(seconds=self.video_duration) if self.video_duration is not None else None,
            )
        return to_image(self.url, aspect_ratio=aspect_ratio_of(self.preview_width, self.preview_height))

    @property
    def text(self) -> str | None:
        if self.title and self.selftext:
            return f"{self.title}\n\n{self.selftext}"
        return self.title or self.selftext


def _with_query(url: str, **params: str) -> str:
    """Return the URL with the given query parameters set or replaced."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query))
    query.update(params)
    return urlunsplit(parts._replace(query=urlencode(query)))


class RedditSkraper(BaseSkraper):
    """Provider for subreddit and user listings such as ``/r/memes``.

    Pages are chained with the listing's ``after`` continuation token.
    """

    name = "reddit"
    base_url = REDDIT_BASE_URL
    alternate_domains = ("redd.it",)

    def __init__(self, client: SkraperClient, page_size: int = DEFAULT_PAGE_SIZE):
        super().__init__(client)
        self.page_size = page_size

    def initial_cursor(self, path: str) -> str:
        return f"{path.rstrip('/')}/hot.json?limit={self.page_size}"

    def next_cursor(self, cursor: str, page: Any) -> str | None:
        after = json_string(page, "data.after")
        if after is None:
            return None
        return _with_query(cursor, after=after)

    def fetch_page(self, cursor: str) -> Any | None:
        return self.client.fetch_json(self.request_for(cursor))

    def extract_fragments(self, page: Any) -> list[Any]:
        children = json_by_path(page, "data.children")
        return children if isinstance(children, list) else []

    def map_fragment(self, fragment: Any) -> Post | None:
        item = RedditItem.from_json(fragment)
        if item.id is None:
            return None

        media = item.to_media()
        published_at = to_datetime(item.created_utc)
        extra = {"published_at": published_at} if published_at is not None else {}

        return Post(
            id=item.id,
            media=(media,) if media else (),
            text=item.text,
            statistics=PostStatistics(likes=item.ups, comments=item.num_comments),
            **extra,
        )

    def get_page_info(self, path: str) -> PageInfo | None:
        response = self.client.fetch_json(self.request_for(f"{path.rstrip('/')}/about.json"))
        data = json_by_path(response, "data")

        nick = json_string(data, "display_name")
        if nick is None:
            return None

        return PageInfo(
            nick=nick,
            name=json_string(data, "title"),
            description=json_string(data, "public_description", "description"),
            statistics=PageStatistics(
                followers=json_count(data, "subscribers"),
            ),
            avatar=to_image(_unescape(json_string(data, "community_icon", "icon_img"))),
            cover=to_image(_unescape(json_string(data, "banner_background_image", "banner_img"))),
        )
