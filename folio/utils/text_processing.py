"""Text processing utilities for content handling and display."""

import re
import unicodedata


def slugify(text: str, max_len: int = 80) -> str:
    """
    Convert arbitrary text to a URL slug.

    Accents are folded to ASCII, anything that is not a letter, digit, space or
    hyphen is dropped, and runs of whitespace/hyphens collapse to one hyphen.

    Args:
        text: Text to slugify (e.g., a post title)
        max_len: Maximum slug length

    Returns:
        Lowercase slug, possibly empty

    Example:
        >>> slugify("Functors, Applicatives & Monads in Java!")
        'functors-applicatives-monads-in-java'
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9\s-]", "", folded.lower())
    slug = re.sub(r"[\s-]+", "-", slug).strip("-")
    return slug[:max_len].rstrip("-")


def normalize_url_path(path: str) -> str:
    """
    Normalize a site-relative URL path for comparison.

    Leading/trailing slashes and surrounding whitespace are ignored, and
    repeated slashes collapse, so "/cv/", "cv" and "//cv" compare equal.

    Example:
        >>> normalize_url_path("/posts//old-name/")
        'posts/old-name'
    """
    return re.sub(r"/{2,}", "/", path.strip()).strip("/")


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line number of a character offset in text."""
    return text.count("\n", 0, offset) + 1


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("short", 10)
        'short'
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
