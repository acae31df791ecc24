"""
Content Document Structure

Defines the structured representation of content files:
- Post: dated blog entry with tags and categories
- Page: standalone page such as About/CV (date optional)

Documents are immutable. They are created from a source file (or text) and
never mutated programmatically; a changed file means a new document.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from folio.contexts.content.exceptions import MetadataError
from folio.contexts.content.frontmatter import split_front_matter
from folio.utils.text_processing import slugify

# Front-matter keys with dedicated attributes; everything else lands in params
KNOWN_FIELDS = {
    "title",
    "date",
    "tags",
    "categories",
    "aliases",
    "draft",
    "description",
    "slug",
}

TRUE_STRINGS = {"true", "yes", "on", "1"}
FALSE_STRINGS = {"false", "no", "off", "0"}

# Bundle entry files take their slug from the directory name
BUNDLE_STEMS = {"index", "_index"}


def coerce_date(value: Any, field_name: str = "date") -> date:
    """
    Coerce a front-matter value into a date.

    Accepts date and datetime objects (what YAML/TOML loaders produce for
    unquoted timestamps) and ISO 8601 strings, with optional time and
    optional "Z" or numeric UTC offset.

    Raises:
        MetadataError: If the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # "2019-03-01 10:00:00 +0100" -> "2019-03-01 10:00:00+0100"
        text = re.sub(r"\s+([+-]\d{2}:?\d{2})$", r"\1", text)
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise MetadataError(f"Unrecognized date value {value!r}", field_name=field_name)


def coerce_string_set(value: Any, field_name: str) -> Tuple[str, ...]:
    """
    Coerce a front-matter value into a de-duplicated tuple of strings.

    A single string becomes a one-element tuple and null becomes empty.
    First-seen order is kept so display order follows the author's.

    Raises:
        MetadataError: If the value (or any member) is not a string
    """
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise MetadataError(
            f"Expected a list of strings, got {type(value).__name__}", field_name=field_name
        )

    seen = {}
    for item in value:
        if not isinstance(item, str):
            raise MetadataError(
                f"Expected string members, got {item!r}", field_name=field_name
            )
        item = item.strip()
        if item:
            seen.setdefault(item, None)
    return tuple(seen)


def coerce_bool(value: Any, field_name: str) -> bool:
    """Coerce a front-matter value into a bool (accepts yes/no style strings)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    raise MetadataError(f"Expected a boolean, got {value!r}", field_name=field_name)


def coerce_text(value: Any, field_name: str) -> str:
    """Coerce a scalar front-matter value into a stripped string."""
    if value is None:
        return ""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value).strip()
    raise MetadataError(
        f"Expected text, got {type(value).__name__}", field_name=field_name
    )


def derive_slug(source_path: Optional[Path], title: str) -> str:
    """
    Derive a slug from the source file, falling back to the title.

    content/posts/monads.md        -> "monads"
    content/posts/monads/index.md  -> "monads"
    """
    if source_path is not None:
        stem = source_path.stem
        if stem in BUNDLE_STEMS:
            return source_path.parent.name
        return stem
    return slugify(title)


@dataclass(frozen=True)
class ContentDocument:
    """
    Fields shared by every content document.

    Attributes:
        title: Display title
        body: Markdown body (shortcodes unexpanded)
        date: Publication date (None only for undated pages)
        aliases: Additional URL paths that should resolve to this document
        description: Summary text
        draft: Drafts are excluded from listings unless explicitly requested
        slug: URL slug
        params: Front-matter keys without a dedicated attribute
        source_path: File the document was loaded from
        body_line: 1-based line in the source file where body starts
    """

    title: str
    body: str = ""
    date: Optional[date] = None
    aliases: Tuple[str, ...] = ()
    description: str = ""
    draft: bool = False
    slug: str = ""
    params: Dict[str, Any] = field(default_factory=dict, compare=False)
    source_path: Optional[Path] = None
    body_line: int = 1

    kind = "document"
    requires_date = False

    @property
    def metadata(self) -> Dict[str, Any]:
        """
        Front-matter view of the document.

        Used as the `page` context when rendering shortcode templates.
        """
        return {
            **self.params,
            "kind": self.kind,
            "title": self.title,
            "date": self.date,
            "aliases": list(self.aliases),
            "description": self.description,
            "draft": self.draft,
            "slug": self.slug,
        }

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_metadata(
        cls,
        data: Dict[str, Any],
        body: str = "",
        source_path: Optional[Path] = None,
        body_line: int = 1,
    ):
        """
        Build a document from an already-parsed front-matter mapping.

        Known keys are matched case-insensitively (content authors write
        "Title" as often as "title").

        Raises:
            MetadataError: If required fields are missing or any field has the wrong shape
        """
        lowered = {str(key).lower(): value for key, value in data.items()}
        params = {str(key): value for key, value in data.items() if str(key).lower() not in KNOWN_FIELDS}

        try:
            kwargs = cls._read_fields(lowered, source_path)
        except MetadataError as e:
            raise e.with_source(source_path) if source_path is not None else e

        return cls(
            body=body,
            params=params,
            source_path=source_path,
            body_line=body_line,
            **kwargs,
        )

    @classmethod
    def _read_fields(cls, data: Dict[str, Any], source_path: Optional[Path]) -> Dict[str, Any]:
        title = coerce_text(data.get("title"), "title")
        if not title:
            raise MetadataError(f"{cls.kind.capitalize()} is missing a title", field_name="title")

        raw_date = data.get("date")
        if raw_date is None or raw_date == "":
            if cls.requires_date:
                raise MetadataError(f"{cls.kind.capitalize()} is missing a date", field_name="date")
            doc_date = None
        else:
            doc_date = coerce_date(raw_date)

        slug = coerce_text(data.get("slug"), "slug") or derive_slug(source_path, title)

        return {
            "title": title,
            "date": doc_date,
            "aliases": coerce_string_set(data.get("aliases"), "aliases"),
            "description": coerce_text(data.get("description"), "description"),
            "draft": coerce_bool(data.get("draft", False), "draft"),
            "slug": slug,
        }

    @classmethod
    def from_text(cls, text: str, source_path: Optional[Path] = None):
        """
        Parse a full content file (front-matter + body).

        Raises:
            FrontMatterError: If the front-matter block cannot be parsed
            MetadataError: If the metadata does not describe a valid document
        """
        front_matter = split_front_matter(text, source_path=source_path)
        return cls.from_metadata(
            front_matter.data,
            body=front_matter.body,
            source_path=source_path,
            body_line=front_matter.body_line,
        )

    @classmethod
    def from_file(cls, path: Path):
        """Load a document from a Markdown file."""
        return cls.from_text(path.read_text(encoding="utf-8"), source_path=path)


@dataclass(frozen=True)
class Post(ContentDocument):
    """
    Dated blog post.

    Attributes:
        tags: Tag terms, de-duplicated in author order
        categories: Category terms, de-duplicated in author order
    """

    tags: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()

    kind = "post"
    requires_date = True

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            **super().metadata,
            "tags": list(self.tags),
            "categories": list(self.categories),
        }

    @classmethod
    def _read_fields(cls, data: Dict[str, Any], source_path: Optional[Path]) -> Dict[str, Any]:
        fields = super()._read_fields(data, source_path)
        fields["tags"] = coerce_string_set(data.get("tags"), "tags")
        fields["categories"] = coerce_string_set(data.get("categories"), "categories")
        return fields


@dataclass(frozen=True)
class Page(ContentDocument):
    """Standalone page (About, CV). Same lifecycle as Post; date is optional."""

    kind = "page"
