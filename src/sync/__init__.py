"""
Core of the content sync pipeline.

Modules:
    normalize: Slug and date normalization
    fetcher: Resilient image download
    builder: Markdown document creation
    models: Items, paths, results and the run report
    config: SyncConfig

Both the fetcher and the builder check the filesystem before doing any
work, so running a sync twice never re-downloads or rewrites an artifact.
"""

from .config import SyncConfig, RETRYABLE_STATUSES
from .models import (
    ArtifactPaths,
    BuildOutput,
    BuildResult,
    Category,
    FetchResult,
    RunRecord,
    RunReport,
    SourceItem,
)
from .normalize import (
    INVALID_DATE,
    canonicalize_date,
    extract_embedded_date,
    slugify,
    split_description,
    strip_date_prefix,
    strip_directive,
)
from .fetcher import download_asset, is_local_url
from .builder import artifact_paths, build_document, render_document, resolve_date

__all__ = [
    "SyncConfig",
    "RETRYABLE_STATUSES",
    "ArtifactPaths",
    "BuildOutput",
    "BuildResult",
    "Category",
    "FetchResult",
    "RunRecord",
    "RunReport",
    "SourceItem",
    "INVALID_DATE",
    "canonicalize_date",
    "extract_embedded_date",
    "slugify",
    "split_description",
    "strip_date_prefix",
    "strip_directive",
    "download_asset",
    "is_local_url",
    "artifact_paths",
    "build_document",
    "render_document",
    "resolve_date",
]
