"""
Data models for the content sync pipeline.

Models:
    Category: Source category, carrying its tag list and embed field name
    SourceItem: Normalized view of one collector entry
    ArtifactPaths: Deterministic document/image locations for a slug
    FetchResult, BuildResult, BuildOutput: Per-step outcomes
    RunRecord, RunReport: Per-item outcome and the aggregated run report

RunRecord and RunReport serialize to the camelCase keys consumed by
external tooling.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class Category(Enum):
    """
    Source category of a media item.

    Each member carries the front-matter embed field and the tag list the
    site templates bind to. Both are a fixed external contract.
    """

    VIDEO = ("Video", "video_embed")
    ALBUM = ("Album", "flickr_embed")

    def __init__(self, tag: str, embed_field: str):
        self.tag = tag
        self.embed_field = embed_field

    @property
    def tags(self) -> list[str]:
        return [self.tag]


@dataclass
class SourceItem:
    """One media item as produced by a collector, after field mapping."""

    title: str
    description: str
    raw_timestamp: str
    image_url: str
    embed_url: str
    category: Category
    source: str = ""


@dataclass(frozen=True)
class ArtifactPaths:
    """Locations of the document and image for one slug."""

    document_path: Path
    image_path: Path

    @classmethod
    def for_slug(
        cls, slug: str, documents_root: Path, images_root: Path
    ) -> "ArtifactPaths":
        return cls(
            document_path=Path(documents_root) / f"{slug}.md",
            image_path=Path(images_root) / f"{slug}.jpg",
        )


@dataclass
class FetchResult:
    downloaded: bool
    image_path: Path
    attempts: int = 0
    error: Optional[str] = None


@dataclass
class BuildResult:
    created: bool
    document_path: Path
    date: Optional[str] = None
    needs_review: bool = False
    error: Optional[str] = None


@dataclass
class BuildOutput:
    """Verbatim output of the external site build command."""

    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exitCode": self.exit_code,
        }


@dataclass
class RunRecord:
    """Outcome of one item going through the fetcher and the builder."""

    title: str
    timestamp: str
    document_path: Optional[str]
    image_path: Optional[str]
    image_downloaded: bool
    document_created: bool
    source: str
    needs_review: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        record = {
            "title": self.title,
            "timestamp": self.timestamp,
            "documentPath": self.document_path,
            "imagePath": self.image_path,
            "imageDownloaded": self.image_downloaded,
            "documentCreated": self.document_created,
            "source": self.source,
        }
        if self.needs_review:
            record["needsReview"] = True
        if self.errors:
            record["errors"] = list(self.errors)
        return record


@dataclass
class RunReport:
    """Aggregated result of a sync run, printed once at the end."""

    items: list[RunRecord] = field(default_factory=list)
    build_output: Optional[BuildOutput] = None
    collector_errors: dict[str, str] = field(default_factory=dict)
    timed_out: bool = False
    files: Optional[dict[str, list[str]]] = None

    def to_dict(self) -> dict[str, Any]:
        report: dict[str, Any] = {"items": [item.to_dict() for item in self.items]}
        if self.build_output is not None:
            report["buildOutput"] = self.build_output.to_dict()
        if self.collector_errors:
            report["collectorErrors"] = dict(self.collector_errors)
        if self.timed_out:
            report["timedOut"] = True
        if self.files is not None:
            report["files"] = self.files
        return report
