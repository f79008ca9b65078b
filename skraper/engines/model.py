"""Normalized post, media and page models shared by every provider."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_non_negative(instance: object) -> None:
    """Reject negative counters; None means the provider did not expose the value."""
    for f in fields(instance):
        value = getattr(instance, f.name)
        if value is not None and value < 0:
            raise ValueError(f"{type(instance).__name__}.{f.name} must be non-negative, got {value}")


@dataclass(frozen=True)
class Media:
    """A remote media resource described by its URL.

    Attributes:
        url: Absolute URL of the resource
        aspect_ratio: Width divided by height, or None when unknown
    """
    url: str
    aspect_ratio: float | None = None

    @property
    def is_complete(self) -> bool:
        """True when both the URL and the aspect ratio are known."""
        return bool(self.url) and self.aspect_ratio is not None


@dataclass(frozen=True)
class Image(Media):
    pass


@dataclass(frozen=True)
class Video(Media):
    """A video resource with optional duration and preview thumbnail."""
    duration: timedelta | None = None
    thumbnail: Image | None = None


@dataclass(frozen=True)
class Audio(Media):
    """An audio resource with optional duration."""
    duration: timedelta | None = None


@dataclass(frozen=True)
class PostStatistics:
    """Engagement counters of a post, each optional."""
    likes: int | None = None
    reposts: int | None = None
    comments: int | None = None
    views: int | None = None

    def __post_init__(self) -> None:
        _check_non_negative(self)


@dataclass(frozen=True)
class Post:
    """A single normalized post.

    The identifier is unique within one provider and path, not globally.
    When the source does not expose a publish time, ``published_at`` defaults
    to the moment the post was produced.

    Attributes:
        id: Provider-local post identifier
        media: Attached media in source order, possibly empty
        text: Caption or body text
        published_at: Publication time (defaults to fetch time)
        statistics: Engagement counters
    """
    id: str
    media: tuple[Media, ...] = ()
    text: str | None = None
    published_at: datetime = field(default_factory=_utc_now)
    statistics: PostStatistics = field(default_factory=PostStatistics)

    def __post_init__(self) -> None:
        # Accept any sequence of media but store it immutably
        if not isinstance(self.media, tuple):
            object.__setattr__(self, "media", tuple(self.media))


@dataclass(frozen=True)
class PageStatistics:
    """Counters describing an account or channel, each optional."""
    posts: int | None = None
    followers: int | None = None
    following: int | None = None

    def __post_init__(self) -> None:
        _check_non_negative(self)


@dataclass(frozen=True)
class PageInfo:
    """Metadata of the account or channel that owns a path.

    Attributes:
        nick: Account handle
        name: Display name
        description: Profile description
        avatar: Avatar image
        cover: Cover/banner image
        statistics: Account counters
    """
    nick: str | None = None
    name: str | None = None
    description: str | None = None
    avatar: Image | None = None
    cover: Image | None = None
    statistics: PageStatistics = field(default_factory=PageStatistics)
