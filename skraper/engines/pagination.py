"""Pagination engine turning a paged remote listing into a lazy stream of posts.

The engine is a plain generator: it fetches a page only when the consumer
asks for the first post of that page, so at most one page is held ahead of
consumption. Closing the generator (breaking out of a loop, calling
``close()`` or dropping the last reference) stops all further fetching.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Sequence

from skraper.engines.errors import MalformedFragmentError
from skraper.engines.model import Post


logger = logging.getLogger(__name__)


# Exceptions a mapper may raise for a single malformed fragment
FRAGMENT_ERRORS = (
    MalformedFragmentError,
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    AttributeError,
)

PageFetcher = Callable[[str], Any | None]
FragmentExtractor = Callable[[Any], Iterable[Any]]
FragmentMapper = Callable[[Any], Post | None]
CursorAdvancer = Callable[[str, Any], str | None]


@dataclass
class PaginationStats:
    """Counters collected while a feed is paginated.

    Attributes:
        pages_fetched: Pages requested from the fetch client
        posts_yielded: Posts handed to the consumer
        fragments_skipped: Fragments that could not be mapped to a post
        stop_reason: "running", "empty_page", "last_page", "closed" or "failed"
    """
    pages_fetched: int = 0
    posts_yielded: int = 0
    fragments_skipped: int = 0
    stop_reason: str = "running"


def page_number_cursor(
    path: str,
    marker: str = "/page",
    unpaginated_prefixes: Sequence[str] = (),
) -> str:
    """Derive the first cursor of a page-numbered listing.

    Appends ``{marker}1`` to the path, unless the path starts with one of
    ``unpaginated_prefixes`` (a resource that is served as a single page).

    Example:
        >>> page_number_cursor("/featured/")
        '/featured/page1'
        >>> page_number_cursor("/user/memes", unpaginated_prefixes=("/user",))
        '/user/memes'
    """
    if any(path.startswith(prefix) for prefix in unpaginated_prefixes):
        return path
    return f"{path.rstrip('/')}{marker}1"


def next_page_number_cursor(cursor: str, marker: str = "/page") -> str | None:
    """Increment the page counter at the end of a cursor.

    Returns None when the cursor carries no counter, which ends pagination.

    Example:
        >>> next_page_number_cursor("/featured/page3")
        '/featured/page4'
        >>> next_page_number_cursor("/user/memes") is None
        True
    """
    match = re.search(rf"{re.escape(marker)}(\d+)$", cursor)
    if match is None:
        return None
    return f"{cursor[:match.start(1)]}{int(match.group(1)) + 1}"


def map_batch(
    fragments: Iterable[Any],
    map_fragment: FragmentMapper,
    stats: PaginationStats | None = None,
) -> list[Post]:
    """Map raw fragments to posts, keeping document order.

    A fragment is skipped when the mapper raises one of FRAGMENT_ERRORS,
    returns None, or returns a post without an identifier. A single
    malformed fragment never aborts the batch.
    """
    posts: list[Post] = []
    for index, fragment in enumerate(fragments):
        try:
            post = map_fragment(fragment)
        except FRAGMENT_ERRORS as e:
            logger.warning(f"Skipping malformed fragment #{index}: {e!r}")
            post = None

        if post is None or not post.id:
            if stats is not None:
                stats.fragments_skipped += 1
            continue

        posts.append(post)
    return posts


def _advance_page_number(cursor: str, page: Any) -> str | None:
    return next_page_number_cursor(cursor)


def paginate(
    fetch_page: PageFetcher,
    extract_fragments: FragmentExtractor,
    map_fragment: FragmentMapper,
    initial_cursor: str,
    next_cursor: CursorAdvancer | None = None,
    stats: PaginationStats | None = None,
) -> Iterator[Post]:
    """Lazily yield posts from consecutive pages.

    Each step fetches the page at the current cursor. An absent page or a
    page without fragments ends the sequence cleanly. Otherwise the page's
    posts are yielded in document order before the next cursor is derived
    with ``next_cursor(cursor, page)``; a None cursor ends the sequence.

    Errors raised by ``fetch_page`` propagate to the consumer unchanged;
    nothing is retried here.

    Args:
        fetch_page: Returns the raw page for a cursor, or None if absent
        extract_fragments: Returns the raw post fragments of a page
        map_fragment: Maps one fragment to a Post, or None to skip it
        initial_cursor: Cursor of the first page
        next_cursor: Derives the next cursor; defaults to page number increment
        stats: Optional counters updated while paginating

    Yields:
        Normalized posts
    """
    advance = next_cursor or _advance_page_number
    stats = stats if stats is not None else PaginationStats()
    cursor: str | None = initial_cursor

    try:
        while cursor is not None:
            page = fetch_page(cursor)
            stats.pages_fetched += 1

            fragments = list(extract_fragments(page)) if page is not None else []
            if not fragments:
                stats.stop_reason = "empty_page"
                return

            for post in map_batch(fragments, map_fragment, stats):
                stats.posts_yielded += 1
                yield post

            cursor = advance(cursor, page)

        stats.stop_reason = "last_page"
    except GeneratorExit:
        stats.stop_reason = "closed"
        raise
    except Exception:
        stats.stop_reason = "failed"
        raise
    finally:
        logger.info(
            f"Pagination from {initial_cursor!r} stopped ({stats.stop_reason}): "
            f"pages={stats.pages_fetched}, posts={stats.posts_yielded}, "
            f"skipped={stats.fragments_skipped}"
        )
