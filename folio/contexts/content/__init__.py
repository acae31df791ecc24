"""
Content Context

Responsibilities:
- Splits content files into front-matter and body (YAML or TOML blocks)
- Validates front-matter into immutable Post and Page documents
- Loads a content tree, collecting per-file failures instead of aborting
- Answers listing queries: date order, taxonomies, slugs, aliases

Owns: Front-matter parsing, document model, content tree loading
Never: Expands shortcodes
"""

from folio.contexts.content.collection import ContentCollection, LoadFailure, sort_by_date
from folio.contexts.content.document_structure import ContentDocument, Page, Post
from folio.contexts.content.exceptions import AliasConflictError, FrontMatterError, MetadataError
from folio.contexts.content.frontmatter import FrontMatter, dump_front_matter, split_front_matter

__all__ = [
    # Front-matter
    "FrontMatter",
    "split_front_matter",
    "dump_front_matter",
    # Documents
    "ContentDocument",
    "Post",
    "Page",
    # Collection
    "ContentCollection",
    "LoadFailure",
    "sort_by_date",
    # Errors
    "AliasConflictError",
    "FrontMatterError",
    "MetadataError",
]
