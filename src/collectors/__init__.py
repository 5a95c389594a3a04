"""
Metadata collectors, one per source platform.

Modules:
    youtube: Channel uploads via the YouTube Data API
    flickr: User albums via the Flickr REST API
    base: CollectorSpec, the registration record the orchestrator consumes
"""

from typing import Iterable, Optional

from src.sync.models import Category
from .base import CollectorSpec
from .flickr import get_albums
from .youtube import list_all_videos


YOUTUBE = "youtube"
FLICKR = "flickr"


def youtube_collector() -> CollectorSpec:
    return CollectorSpec(
        name="youtube-channel-scraper",
        category=Category.VIDEO,
        fetch=list_all_videos,
        field_map={
            "title": "title",
            "description": "description",
            "raw_timestamp": "publishedAt",
            "image_url": "thumbnailUrl",
            "embed_url": "embedLink",
        },
        # Hashtag and mention posts are not published
        exclude_prefixes=("#", "@"),
    )


def flickr_collector() -> CollectorSpec:
    return CollectorSpec(
        name="flickr-album-scraper",
        category=Category.ALBUM,
        fetch=get_albums,
        field_map={
            "title": "title",
            "description": "description",
            "raw_timestamp": "lastPhotoTimestamp",
            "image_url": "featureImageUrl",
            "embed_url": "link",
        },
        strip_title_date_prefix=True,
    )


COLLECTORS = {
    YOUTUBE: youtube_collector,
    FLICKR: flickr_collector,
}


def default_collectors(names: Optional[Iterable[str]] = None) -> list[CollectorSpec]:
    """
    Build the registered collectors, in registration order.

    Raises:
        ValueError: If an unknown collector name is requested
    """
    names = list(COLLECTORS) if names is None else list(names)
    unknown = [name for name in names if name not in COLLECTORS]
    if unknown:
        raise ValueError(
            f"Unknown source(s): {', '.join(unknown)}. Available: {', '.join(COLLECTORS)}"
        )
    return [COLLECTORS[name]() for name in names]


__all__ = [
    "CollectorSpec",
    "COLLECTORS",
    "FLICKR",
    "YOUTUBE",
    "default_collectors",
    "flickr_collector",
    "get_albums",
    "list_all_videos",
    "youtube_collector",
]
