"""Unit tests for text processing utilities."""

import pytest

from folio.utils.text_processing import (
    line_number_at,
    normalize_url_path,
    slugify,
    truncate_display,
)


@pytest.mark.unit
def test_slugify():
    """Test punctuation is dropped and whitespace becomes hyphens."""
    assert slugify("Functors, Applicatives & Monads in Java!") == "functors-applicatives-monads-in-java"
    assert slugify("Café  Crème") == "cafe-creme"
    assert slugify("---") == ""


@pytest.mark.unit
def test_slugify_max_len():
    """Test long slugs are cut without a trailing hyphen."""
    assert slugify("aaaa bbbb", max_len=5) == "aaaa"


@pytest.mark.unit
def test_normalize_url_path():
    """Test alias spellings compare equal."""
    assert normalize_url_path("/cv/") == "cv"
    assert normalize_url_path("cv") == "cv"
    assert normalize_url_path(" /posts//old-name/ ") == "posts/old-name"


@pytest.mark.unit
def test_line_number_at():
    """Test offsets map to 1-based lines."""
    text = "one\ntwo\nthree"
    assert line_number_at(text, 0) == 1
    assert line_number_at(text, 4) == 2
    assert line_number_at(text, len(text)) == 3


@pytest.mark.unit
def test_truncate_display():
    """Test truncation with ellipsis."""
    assert truncate_display("short", 10) == "short"
    assert truncate_display("this is a very long string", 10) == "this is..."
