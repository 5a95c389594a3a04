"""
Markdown document builder.

Each item becomes ``<documents_root>/<slug>.md`` with a front-matter block
the static site templates bind to. A document that already exists is never
rewritten.
"""

import logging
from typing import Optional

from src.logger import log_function
from src.storage import BaseStorage, LocalStorage
from .config import SyncConfig
from .models import ArtifactPaths, BuildResult, Category, SourceItem
from .normalize import (
    canonicalize_date,
    extract_embedded_date,
    is_valid_date,
    slugify,
    split_description,
    strip_directive,
)


def artifact_paths(title: str, config: SyncConfig) -> ArtifactPaths:
    return ArtifactPaths.for_slug(
        slugify(title), config.documents_root, config.images_root
    )


def resolve_date(description: str, raw_timestamp: str) -> str:
    """
    Pick the authoritative publish date of an item.

    An ``Originally Published:`` directive in the description wins over the
    collector timestamp.
    """
    return extract_embedded_date(description) or canonicalize_date(raw_timestamp)


def render_document(
    title: str,
    summary: str,
    date: str,
    category: Category,
    embed_url: str,
    image_url: str,
    body: str,
) -> str:
    """Render front matter and body exactly as the site templates expect."""
    summary = summary.replace("\\", "\\\\").replace('"', '\\"')
    return (
        "---\n"
        f"title: {title}\n"
        f'description: "{summary}"\n'
        f"date: {date}\n"
        f"{category.embed_field}: '{embed_url}'\n"
        f"image: '{image_url}'\n"
        f"tags: [{', '.join(category.tags)}]\n"
        "---\n"
        "\n"
        f"{body}"
    )


@log_function(logger_name="content_sync", log_execution_time=True)
def build_document(
    item: SourceItem,
    config: SyncConfig,
    storage: Optional[BaseStorage] = None,
) -> BuildResult:
    """
    Create the markdown document for an item unless it already exists.

    Args:
        item: Normalized source item (title already stripped of any prefix)
        config: Sync configuration holding the output roots
        storage: Storage backend (defaults to LocalStorage)

    Returns:
        BuildResult. ``needs_review`` is set, and nothing is written, when no
        valid date can be resolved for the item.

    Raises:
        OSError: If the document cannot be written
    """
    logger = logging.getLogger("content_sync")
    storage = storage or LocalStorage()

    paths = artifact_paths(item.title, config)
    document_path = paths.document_path
    if not document_path.stem:
        logger.warning(f"Title {item.title!r} produces an empty slug")

    if storage.file_exist(config.documents_root, document_path.name):
        logger.info(f"Post already exists: {document_path.name}")
        return BuildResult(False, document_path)

    date = resolve_date(item.description, item.raw_timestamp)
    if not is_valid_date(date):
        logger.error(
            f"No valid date for '{item.title}' (timestamp {item.raw_timestamp!r}), "
            "document left for manual review"
        )
        return BuildResult(
            False,
            document_path,
            date=date,
            needs_review=True,
            error=f"unparseable timestamp: {item.raw_timestamp!r}",
        )

    summary, body = split_description(strip_directive(item.description))
    prefix = config.image_url_prefix.rstrip("/")
    content = render_document(
        title=item.title,
        summary=summary,
        date=date,
        category=item.category,
        embed_url=item.embed_url,
        image_url=f"{prefix}/{paths.image_path.name}",
        body=body,
    )

    try:
        storage.save_file(config.documents_root, document_path.name, content)
    except FileExistsError:
        logger.info(f"Post created concurrently: {document_path.name}")
        return BuildResult(False, document_path, date=date)

    logger.info(f"Created post: {document_path.name}")
    return BuildResult(True, document_path, date=date)
