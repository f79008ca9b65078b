"""Extraction helpers for parsed markup and JSON trees.

Every helper treats a missing element, attribute or field as "not present"
and returns None (or an empty list) instead of raising. Providers compose
these helpers to turn raw pages into normalized models.
"""

import json
import logging
import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import urljoin, urlparse

import tldextract
from bs4 import BeautifulSoup, Tag
from dateutil import parser as date_parser
from dateutil.parser import ParserError

from skraper.engines.model import Audio, Image, Video


logger = logging.getLogger(__name__)


# Offline extractor: only the bundled public suffix snapshot is used
_TLD_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())

# Multipliers for abbreviated counters such as "1.2k" or "3M"
_COUNT_SUFFIXES = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}

Node = BeautifulSoup | Tag


# ── Markup ──────────────────────────────────────────────────────────────────

def first_element_by_tag(node: Node | None, tag: str) -> Tag | None:
    """Return the first descendant with the given tag name, or None."""
    if node is None:
        return None
    return node.find(tag)


def elements_by_class(node: Node | None, class_name: str) -> list[Tag]:
    """Return all descendants carrying the CSS class, in document order."""
    if node is None:
        return []
    return list(node.find_all(class_=class_name))


def elements_by_attribute(node: Node | None, name: str, value: str | None = None) -> list[Tag]:
    """Return all descendants carrying the attribute (optionally with a value)."""
    if node is None:
        return []
    return list(node.find_all(attrs={name: value if value is not None else True}))


def attr(node: Tag | None, name: str) -> str | None:
    """Return an attribute value as a stripped string, or None if absent or blank."""
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    value = value.strip()
    return value or None


def meta_content(document: Node | None, key: str) -> str | None:
    """Return the content of a <meta> tag matched by ``property`` or ``name``."""
    if document is None:
        return None
    meta = document.find("meta", attrs={"property": key}) or document.find("meta", attrs={"name": key})
    return attr(meta, "content")


def extract_script_json(document: Node | None, marker: str) -> Any | None:
    """Decode JSON assigned inside the first <script> containing ``marker``.

    Example:
        ``<script>window.__INITIAL_STATE__ = {"user": {}};</script>`` with
        marker ``"window.__INITIAL_STATE__ ="`` yields ``{"user": {}}``.
    """
    if document is None:
        return None

    for script in document.find_all("script"):
        text = script.string or script.get_text()
        if not text or marker not in text:
            continue

        payload = text[text.index(marker) + len(marker):].strip().rstrip(";").strip()
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to decode script JSON after '{marker}': {e}")
            return None

    return None


# ── JSON ────────────────────────────────────────────────────────────────────

def json_by_path(node: Any, path: str) -> Any | None:
    """Navigate a JSON tree by a dotted path.

    Mapping segments are looked up by key; numeric segments index into
    lists. Returns None as soon as a segment is missing or the current
    node cannot be navigated.

    Example:
        >>> json_by_path({"data": {"children": [{"id": "a1"}]}}, "data.children.0.id")
        'a1'
        >>> json_by_path({"data": {}}, "data.children.0.id") is None
        True
    """
    current = node
    for segment in path.split("."):
        if isinstance(current, dict):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def json_first_by_path(node: Any, *paths: str) -> Any | None:
    """Return the value of the first path that is present, trying left to right."""
    for path in paths:
        value = json_by_path(node, path)
        if value is not None:
            return value
    return None


def json_string(node: Any, *paths: str) -> str | None:
    """Read the first non-blank text leaf among the paths.

    Blank strings and the literal "null" read as absent, so the next path
    is tried.
    """
    for path in paths:
        value = json_by_path(node, path)
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            return "true" if value else "false"
        text = str(value).strip()
        if text and text != "null":
            return text
    return None


def json_int(node: Any, *paths: str) -> int | None:
    """Read an integer leaf, tolerating numeric strings."""
    value = json_first_by_path(node, *paths)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return to_int(value)
    return None


def json_count(node: Any, *paths: str) -> int | None:
    """Read a counter leaf; negative values read as absent."""
    value = json_int(node, *paths)
    if value is not None and value < 0:
        logger.debug(f"Ignoring negative counter {value} at {paths}")
        return None
    return value


def json_float(node: Any, *paths: str) -> float | None:
    """Read a decimal leaf, tolerating numeric strings."""
    value = json_first_by_path(node, *paths)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return to_float(value)
    return None


def json_bool(node: Any, *paths: str) -> bool | None:
    """Read a boolean leaf, tolerating "true"/"false" strings."""
    value = json_first_by_path(node, *paths)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


# ── Text coercion ───────────────────────────────────────────────────────────

def to_int(text: str | int | None) -> int | None:
    """Parse a counter such as "1,024", "1.2k" or "3M"; None on failure."""
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text

    cleaned = str(text).strip().replace(",", "").replace(" ", "").replace("\u00a0", "")
    if not cleaned:
        return None

    multiplier = 1
    suffix = cleaned[-1].lower()
    if suffix in _COUNT_SUFFIXES:
        multiplier = _COUNT_SUFFIXES[suffix]
        cleaned = cleaned[:-1]

    try:
        number = Decimal(cleaned) * multiplier
    except InvalidOperation:
        return None

    if not number.is_finite() or number != number.to_integral_value():
        return None
    return int(number)


def to_float(text: str | float | None) -> float | None:
    """Parse a decimal number; None on failure or non-finite values."""
    if text is None or isinstance(text, bool):
        return None
    try:
        number = float(str(text).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def to_datetime(value: str | int | float | datetime | None) -> datetime | None:
    """Parse epoch seconds or a free-form date string into a datetime.

    Returns None on parse failure instead of raising an exception.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        seconds = to_float(value)
        if seconds is None:
            try:
                parsed = date_parser.parse(value)
            except (ParserError, ValueError, OverflowError) as e:
                logger.debug(f"Failed to parse date '{value}': {e}")
                return None
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        value = seconds

    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


# ── URLs and media ──────────────────────────────────────────────────────────

def absolute_url(url: str | None, base_url: str | None = None) -> str | None:
    """Resolve protocol-relative and relative URLs; None for blank input."""
    if url is None:
        return None
    url = url.strip()
    if not url:
        return None
    if url.startswith("//"):
        return f"https:{url}"
    if base_url and not urlparse(url).scheme:
        if url.startswith("/"):
            return urljoin(base_url, url)
        return urljoin(base_url.rstrip("/") + "/", url.lstrip("/"))
    return url


def build_full_url(base_url: str, path: str) -> str:
    """Join a provider base URL and a path; absolute URLs pass through."""
    if urlparse(path).scheme in ("http", "https"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def host_of(url: str) -> str:
    """Return the lowercase host of a URL, accepting scheme-less input."""
    if "://" not in url and not url.startswith("//"):
        url = f"//{url}"
    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError:
        return ""
    return (hostname or "").lower()


def registered_domain(url: str) -> str:
    """Return the registrable domain of a URL (e.g. "reddit.com"), or ""."""
    extracted = _TLD_EXTRACT(host_of(url))
    if not extracted.domain or not extracted.suffix:
        return ""
    return f"{extracted.domain}.{extracted.suffix}"


def to_image(url: str | None, aspect_ratio: float | None = None, base_url: str | None = None) -> Image | None:
    """Wrap a URL into an Image; strings without a type signal default to images."""
    resolved = absolute_url(url, base_url)
    return Image(url=resolved, aspect_ratio=aspect_ratio) if resolved else None


def to_video(url: str | None, aspect_ratio: float | None = None, base_url: str | None = None) -> Video | None:
    resolved = absolute_url(url, base_url)
    return Video(url=resolved, aspect_ratio=aspect_ratio) if resolved else None


def to_audio(url: str | None, aspect_ratio: float | None = None, base_url: str | None = None) -> Audio | None:
    resolved = absolute_url(url, base_url)
    return Audio(url=resolved, aspect_ratio=aspect_ratio) if resolved else None


def aspect_ratio_of(width: float | int | None, height: float | int | None) -> float | None:
    """Width divided by height, or None when either side is unknown or zero."""
    if width is None or height is None or width <= 0 or height <= 0:
        return None
    return width / height
