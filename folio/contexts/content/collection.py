"""
Content Collection

Loads a content directory tree into Posts and Pages and answers the queries a
site needs: date-sorted post listings, taxonomy terms, slug and alias lookups.

Loading follows the build-diagnostics model: a broken file is recorded as a
LoadFailure and loading carries on, so one bad post never hides problems in
the rest of the tree.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from folio.contexts.content.document_structure import ContentDocument, Page, Post
from folio.contexts.content.exceptions import AliasConflictError
from folio.contexts.content.logger import _log_debug, _log_warning, log_load_result
from folio.exceptions import ContentError
from folio.utils.text_processing import normalize_url_path

# Section list pages belong to the external generator's navigation
SKIPPED_FILENAMES = {"_index.md"}

TAXONOMIES = ("tags", "categories")

Document = Union[Post, Page]


@dataclass
class LoadFailure:
    """A content file that could not be turned into a document."""

    path: Path
    error: ContentError

    @property
    def line(self) -> Optional[int]:
        return self.error.line


@dataclass
class ContentCollection:
    """
    All documents under a content directory.

    Build with ContentCollection.load(); the instance itself is a plain
    container so tests can assemble one from in-memory documents.
    """

    content_dir: Optional[Path] = None
    documents: List[Document] = field(default_factory=list)
    failures: List[LoadFailure] = field(default_factory=list)

    @classmethod
    def load(
        cls, content_dir: Path, post_sections: Sequence[str] = ("posts",)
    ) -> "ContentCollection":
        """
        Walk content_dir for Markdown files and load each as a Post or Page.

        Files whose first path component (relative to content_dir) is one of
        post_sections are Posts; everything else is a Page.

        Args:
            content_dir: Root of the content tree
            post_sections: Top-level directories holding posts

        Returns:
            ContentCollection with documents and per-file load failures

        Raises:
            FileNotFoundError: If content_dir does not exist
        """
        if not content_dir.is_dir():
            raise FileNotFoundError(f"Content directory not found: {content_dir}")

        start = time.time()
        collection = cls(content_dir=content_dir)
        post_sections = set(post_sections)

        for path in sorted(content_dir.rglob("*.md")):
            if path.name in SKIPPED_FILENAMES:
                continue

            relative = path.relative_to(content_dir)
            doc_class = Post if relative.parts[0] in post_sections else Page

            try:
                document = doc_class.from_file(path)
            except ContentError as e:
                if e.source_path is None:
                    e.with_source(path)
                collection.failures.append(LoadFailure(path=path, error=e))
                _log_warning(f"Skipping {relative}: {e.message}")
                continue

            _log_debug(f"Loaded {document.kind} {relative} (slug: {document.slug})")
            collection.documents.append(document)

        collection._check_aliases()
        log_load_result(collection, time.time() - start)
        return collection

    def _check_aliases(self) -> None:
        """Record aliases claimed by more than one document as failures."""
        owners: Dict[str, Document] = {}
        for document in self.documents:
            for alias in document.aliases:
                key = normalize_url_path(alias)
                if key in owners and owners[key] is not document:
                    self.failures.append(
                        LoadFailure(
                            path=document.source_path,
                            error=AliasConflictError(
                                f"Alias '{alias}' is already claimed by "
                                f"{owners[key].source_path or owners[key].title}",
                                source_path=document.source_path,
                            ),
                        )
                    )
                else:
                    owners[key] = document

    # =========================================================================
    # QUERIES
    # =========================================================================

    def posts(self, include_drafts: bool = False) -> List[Post]:
        """Posts sorted newest first, then by title."""
        selected = [
            doc
            for doc in self.documents
            if isinstance(doc, Post) and (include_drafts or not doc.draft)
        ]
        return sort_by_date(selected)

    def pages(self, include_drafts: bool = True) -> List[Page]:
        """Pages sorted by source path."""
        selected = [
            doc
            for doc in self.documents
            if isinstance(doc, Page) and (include_drafts or not doc.draft)
        ]
        return sorted(selected, key=lambda doc: str(doc.source_path or doc.slug))

    def get(self, slug: str) -> Optional[Document]:
        """Find a document by slug (posts win over pages on collision)."""
        for doc in self.posts(include_drafts=True) + self.pages():
            if doc.slug == slug:
                return doc
        return None

    def resolve_alias(self, path: str) -> Optional[Document]:
        """Find the document that declares path among its aliases."""
        key = normalize_url_path(path)
        for doc in self.documents:
            if any(normalize_url_path(alias) == key for alias in doc.aliases):
                return doc
        return None

    def taxonomy(self, name: str, include_drafts: bool = False) -> Dict[str, List[Post]]:
        """
        Map each term of a taxonomy to the posts carrying it.

        Args:
            name: "tags" or "categories"
            include_drafts: Include draft posts

        Returns:
            Dict of term -> date-sorted posts, terms in alphabetical order

        Raises:
            ValueError: If name is not a known taxonomy
        """
        if name not in TAXONOMIES:
            raise ValueError(f"Unknown taxonomy '{name}'. Valid taxonomies: {TAXONOMIES}")

        terms: Dict[str, List[Post]] = defaultdict(list)
        for post in self.posts(include_drafts=include_drafts):
            for term in getattr(post, name):
                terms[term].append(post)

        return {term: terms[term] for term in sorted(terms, key=str.lower)}

    def __iter__(self):
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)


def sort_by_date(documents: Iterable[ContentDocument]) -> list:
    """Sort documents newest first; undated documents go last; ties break on title."""
    ordered = sorted(documents, key=lambda doc: doc.title.lower())
    return sorted(ordered, key=lambda doc: (doc.date is not None, doc.date or 0), reverse=True)
