"""iFunny provider scraping the public HTML feed."""

import logging
from typing import Any

from bs4 import BeautifulSoup, Tag

from skraper.engines.errors import MalformedFragmentError
from skraper.engines.extraction import (
    attr,
    elements_by_class,
    extract_script_json,
    first_element_by_tag,
    json_by_path,
    json_count,
    json_string,
    to_float,
    to_image,
    to_video,
)
from skraper.engines.model import PageInfo, PageStatistics, Post
from skraper.engines.provider import BaseSkraper


logger = logging.getLogger(__name__)


IFUNNY_BASE_URL = "https://ifunny.co"

# Script assignment carrying the server-side rendered state
INITIAL_STATE_MARKER = "window.__INITIAL_STATE__ ="


class IFunnySkraper(BaseSkraper):
    """Provider for iFunny feeds such as ``/featured`` or ``/user/<nick>``.

    Feeds are paginated with a ``/pageN`` suffix; user pages are served as
    a single page.
    """

    name = "ifunny"
    base_url = IFUNNY_BASE_URL
    unpaginated_prefixes = ("/user",)

    def fetch_page(self, cursor: str) -> BeautifulSoup | None:
        return self.client.fetch_document(self.request_for(cursor))

    def extract_fragments(self, page: BeautifulSoup) -> list[Tag]:
        return elements_by_class(page, "stream__item")

    def map_fragment(self, fragment: Tag) -> Post | None:
        link = attr(first_element_by_tag(fragment, "a"), "href")
        if not link:
            return None

        post_id = link.split("?")[0].rstrip("/").rsplit("/", 1)[-1]

        # data-ratio is height / width
        ratio = to_float(attr(fragment, "data-ratio"))
        aspect_ratio = 1.0 / ratio if ratio else None

        if "video" in link or "gif" in link:
            media = to_video(link, aspect_ratio=aspect_ratio, base_url=self.base_url)
        else:
            img = first_element_by_tag(fragment, "img")
            media = to_image(
                attr(img, "data-src") or attr(img, "src"),
                aspect_ratio=aspect_ratio,
                base_url=self.base_url,
            )

        if media is None:
            raise MalformedFragmentError(f"No media URL for post {post_id}")

        return Post(
            id=post_id,
            media=(media,),
            text=attr(first_element_by_tag(fragment, "img"), "alt"),
        )

    def get_page_info(self, path: str) -> PageInfo | None:
        document = self.client.fetch_document(self.request_for(path))
        user = json_by_path(extract_script_json(document, INITIAL_STATE_MARKER), "user.data")
        if user is None:
            logger.debug(f"No user state found at {path}")
        return self._parse_user(user)

    @staticmethod
    def _parse_user(user: Any) -> PageInfo | None:
        nick = json_string(user, "nick")
        if nick is None:
            return None

        return PageInfo(
            nick=nick,
            name=nick,
            description=json_string(user, "about"),
            statistics=PageStatistics(
                posts=json_count(user, "num.total_posts"),
                followers=json_count(user, "num.subscribers"),
                following=json_count(user, "num.subscriptions"),
            ),
            avatar=to_image(json_string(user, "photo.thumb.large_url", "photo.url")),
            cover=to_image(json_string(user, "coverUrl", "cover_url")),
        )
