"""
Collector registration.

A collector is a zero-argument callable returning raw item dictionaries for
one source platform. A CollectorSpec pairs it with the category of its items,
the platform-specific field names, and the source-specific title filter.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from src.sync.fetcher import is_http_url
from src.sync.models import Category, SourceItem
from src.sync.normalize import strip_date_prefix


REQUIRED_FIELDS = ("title", "raw_timestamp", "image_url", "embed_url")


@dataclass
class CollectorSpec:
    """A registered metadata collector and how to read its items."""

    name: str
    category: Category
    fetch: Callable[[], list[dict[str, Any]]]
    # SourceItem attribute -> key in the collector's dictionaries
    field_map: dict[str, str] = field(
        default_factory=lambda: {
            "title": "title",
            "description": "description",
            "raw_timestamp": "timestamp",
            "image_url": "imageUrl",
            "embed_url": "embedUrl",
        }
    )
    # Raw titles starting with any of these are never published
    exclude_prefixes: tuple[str, ...] = ()
    strip_title_date_prefix: bool = False

    def raw_title(self, raw: dict[str, Any]) -> str:
        return str(raw.get(self.field_map["title"]) or "")

    def is_excluded(self, raw: dict[str, Any]) -> bool:
        return bool(self.exclude_prefixes) and self.raw_title(raw).startswith(
            self.exclude_prefixes
        )

    def to_source_item(self, raw: dict[str, Any]) -> SourceItem:
        """
        Map a raw collector dictionary onto a SourceItem.

        Raises:
            ValueError: If a required field is missing or a URL is not absolute
        """
        missing = [
            self.field_map[name]
            for name in REQUIRED_FIELDS
            if raw.get(self.field_map[name]) is None
        ]
        if missing:
            raise ValueError(f"missing field(s): {', '.join(missing)}")

        title = self.raw_title(raw)
        if self.strip_title_date_prefix:
            title = strip_date_prefix(title)

        item = SourceItem(
            title=title,
            description=str(raw.get(self.field_map["description"]) or ""),
            raw_timestamp=str(raw[self.field_map["raw_timestamp"]]),
            image_url=str(raw[self.field_map["image_url"]]),
            embed_url=str(raw[self.field_map["embed_url"]]),
            category=self.category,
            source=self.name,
        )

        for name in ("image_url", "embed_url"):
            if not is_http_url(getattr(item, name)):
                raise ValueError(
                    f"{self.field_map[name]} is not an absolute URL: {getattr(item, name)!r}"
                )
        return item
