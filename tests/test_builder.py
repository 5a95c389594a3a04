from unittest.mock import MagicMock

import pytest

from src.storage import LocalStorage
from src.sync.builder import build_document, render_document
from src.sync.models import Category, SourceItem


def make_item(**overrides) -> SourceItem:
    values = {
        "title": "My First Video",
        "description": "Short summary\n\nLonger body text.\n",
        "raw_timestamp": "2024-02-10T15:30:00Z",
        "image_url": "https://i.ytimg.com/vi/abc/maxresdefault.jpg",
        "embed_url": "https://www.youtube.com/embed/abc",
        "category": Category.VIDEO,
        "source": "youtube-channel-scraper",
    }
    values.update(overrides)
    return SourceItem(**values)


@pytest.fixture
def roots(config):
    storage = LocalStorage()
    storage.create_workspace(config.documents_root)
    storage.create_workspace(config.images_root)
    return config


def test_builds_video_document(roots):
    result = build_document(make_item(), roots)

    assert result.created is True
    assert result.document_path == roots.documents_root / "my-first-video.md"
    assert result.document_path.read_text(encoding="utf-8") == (
        "---\n"
        "title: My First Video\n"
        'description: "Short summary"\n'
        "date: 2024-02-10 00:00:00 +0000\n"
        "video_embed: 'https://www.youtube.com/embed/abc'\n"
        "image: '/images/my-first-video.jpg'\n"
        "tags: [Video]\n"
        "---\n"
        "\n"
        "Longer body text."
    )


def test_album_uses_flickr_embed_field(roots):
    item = make_item(
        title="Trip to Rome",
        embed_url="https://www.flickr.com/photos/me/albums/42",
        category=Category.ALBUM,
    )

    result = build_document(item, roots)
    text = result.document_path.read_text(encoding="utf-8")

    assert "flickr_embed: 'https://www.flickr.com/photos/me/albums/42'" in text
    assert "video_embed:" not in text
    assert "tags: [Album]" in text


def test_directive_date_takes_precedence(roots):
    item = make_item(
        description="Originally Published: 2020-01-01 00:00:00 +0000\nHello",
        raw_timestamp="2023:05:05 10:00:00",
    )

    result = build_document(item, roots)
    text = result.document_path.read_text(encoding="utf-8")

    assert result.date == "2020-01-01 00:00:00 +0000"
    assert "date: 2020-01-01 00:00:00 +0000\n" in text
    assert "Hello" in text
    assert "Originally Published" not in text


def test_existing_document_is_left_untouched(roots):
    existing = roots.documents_root / "my-first-video.md"
    existing.write_text("hand edited", encoding="utf-8")

    result = build_document(make_item(description="Changed"), roots)

    assert result.created is False
    assert existing.read_text(encoding="utf-8") == "hand edited"


def test_empty_description_is_valid(roots):
    result = build_document(make_item(description=""), roots)
    text = result.document_path.read_text(encoding="utf-8")

    assert result.created is True
    assert 'description: ""\n' in text
    assert text.endswith("tags: [Video]\n---\n\n")


def test_unparseable_date_is_flagged_for_review(roots):
    result = build_document(make_item(raw_timestamp="yesterday"), roots)

    assert result.created is False
    assert result.needs_review is True
    assert not result.document_path.exists()


def test_quotes_in_summary_are_escaped(roots):
    result = build_document(make_item(description='The "best" day'), roots)

    assert 'description: "The \\"best\\" day"\n' in result.document_path.read_text(encoding="utf-8")


def test_custom_image_prefix(roots):
    roots.image_url_prefix = "/static/img/"

    result = build_document(make_item(), roots)

    assert "image: '/static/img/my-first-video.jpg'" in result.document_path.read_text(encoding="utf-8")


def test_lost_creation_race_reports_not_created(roots):
    storage = MagicMock()
    storage.file_exist.return_value = False
    storage.save_file.side_effect = FileExistsError("my-first-video.md")

    result = build_document(make_item(), roots, storage=storage)

    assert result.created is False
    assert result.needs_review is False


def test_write_errors_propagate(roots):
    storage = MagicMock()
    storage.file_exist.return_value = False
    storage.save_file.side_effect = PermissionError("read-only")

    with pytest.raises(PermissionError):
        build_document(make_item(), roots, storage=storage)


def test_render_document_joins_tags():
    text = render_document("T", "S", "D", Category.VIDEO, "E", "/images/t.jpg", "B")
    assert text.splitlines()[6] == "tags: [Video]"
