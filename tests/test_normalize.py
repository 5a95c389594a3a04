import re

import pytest

from src.sync.normalize import (
    INVALID_DATE,
    canonicalize_date,
    extract_embedded_date,
    slugify,
    split_description,
    strip_date_prefix,
    strip_directive,
)


def test_slugify_is_insensitive_to_case_punctuation_and_spacing():
    assert slugify("Hello, World!  2024") == slugify("hello world 2024") == "hello-world-2024"


@pytest.mark.parametrize(
    "title",
    ["Café Déjà Vu", "  leading and trailing  ", "tabs\tand\nnewlines", "emoji 🎥 time", "a/b\\c:d*e?f"],
)
def test_slugify_only_emits_slug_characters(title):
    assert re.fullmatch(r"[a-z0-9-]*", slugify(title))


def test_slugify_drops_non_ascii_letters():
    assert slugify("Café Tour") == "caf-tour"


def test_slugify_of_symbols_only_is_empty():
    assert slugify("!!! ???") == "-"
    assert slugify("!!!") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2023:05:05 10:00:00", "2023-05-05 00:00:00 +0000"),
        ("2024-02-10T15:30:00Z", "2024-02-10 00:00:00 +0000"),
        ("2021-12-31 23:59:59", "2021-12-31 00:00:00 +0000"),
    ],
)
def test_canonicalize_date(raw, expected):
    assert canonicalize_date(raw) == expected


@pytest.mark.parametrize("raw", ["", "not a date", "2023-02-30", "05/05/2023"])
def test_canonicalize_date_returns_sentinel_for_bad_input(raw):
    assert canonicalize_date(raw) == INVALID_DATE


def test_strip_date_prefix():
    assert strip_date_prefix("2023-05 Trip to Rome") == "Trip to Rome"
    assert strip_date_prefix("2023-05   Trip") == "Trip"
    assert strip_date_prefix("Rome 2023-05") == "Rome 2023-05"
    assert strip_date_prefix("2023 Trip") == "2023 Trip"


def test_extract_embedded_date():
    description = "Intro\nOriginally Published: 2020-01-01 00:00:00 +0000\nMore"
    assert extract_embedded_date(description) == "2020-01-01 00:00:00 +0000"
    assert extract_embedded_date("Originally Published: sometime in 2020") is None
    assert extract_embedded_date("") is None


def test_strip_directive_removes_line_even_when_malformed():
    description = "Intro\nOriginally Published: sometime in 2020\nMore"
    assert strip_directive(description) == "Intro\nMore"


def test_split_description():
    assert split_description("First\n\n  Body text \n") == ("First", "Body text")
    assert split_description("Only line") == ("Only line", "")
    assert split_description("") == ("", "")
