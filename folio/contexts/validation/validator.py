"""
Content validation with actionable diagnostics.

Checks a loaded content tree the way a site build would, but collects every
problem instead of stopping at the first:
- every file's front-matter parses as valid metadata
- every shortcode invocation resolves to a non-empty fragment
- every path-kind shortcode parameter references a file that exists
- post slugs are unique (warning)
"""

import re
import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from folio.contexts.content.collection import ContentCollection
from folio.contexts.content.document_structure import Post
from folio.contexts.content.exceptions import AliasConflictError, FrontMatterError, MetadataError
from folio.contexts.templating.exceptions import (
    ShortcodeParameterError,
    ShortcodeRenderError,
    ShortcodeSyntaxError,
    UnknownShortcodeError,
)
from folio.contexts.templating.registries import ShortcodeRegistry
from folio.contexts.templating.renderer import RenderedShortcode, ShortcodeRenderer
from folio.contexts.validation.logger import (
    _log_debug,
    log_validation_result,
    log_validation_start,
)
from folio.exceptions import ContentError

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

# Most specific first
ISSUE_CODES = (
    (FrontMatterError, "front_matter"),
    (MetadataError, "metadata"),
    (AliasConflictError, "duplicate_alias"),
    (ShortcodeSyntaxError, "shortcode_syntax"),
    (UnknownShortcodeError, "unknown_shortcode"),
    (ShortcodeParameterError, "shortcode_parameter"),
    (ShortcodeRenderError, "shortcode_render"),
)

# Values that point off-site and cannot be checked on disk
EXTERNAL_REFERENCE = re.compile(r"^(?:[a-z][a-z0-9+.\-]*:|//)", re.IGNORECASE)


@dataclass
class ValidationIssue:
    """
    A single problem found in the content tree.

    Attributes:
        severity: "error" or "warning"
        code: Machine-readable issue type (e.g., "missing_file", "shortcode_parameter")
        path: Content file the issue is in
        line: 1-based line within the file
        message: Human-readable description
    """

    severity: str
    code: str
    path: Optional[Path]
    line: Optional[int]
    message: str

    @property
    def location(self) -> str:
        if self.path is None:
            return "<unknown>"
        return f"{self.path}:{self.line}" if self.line is not None else str(self.path)


@dataclass
class ValidationResult:
    """
    Result of validating a content tree.

    Attributes:
        issues: Every problem found, in discovery order
        documents_checked: Number of documents whose bodies were rendered
        shortcodes_checked: Number of shortcode invocations rendered
    """

    issues: List[ValidationIssue] = field(default_factory=list)
    documents_checked: int = 0
    shortcodes_checked: int = 0

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == SEVERITY_ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == SEVERITY_WARNING]

    @property
    def is_valid(self) -> bool:
        """Whether no errors were found (warnings do not fail validation)."""
        return not self.errors


def issue_from_error(error: ContentError) -> ValidationIssue:
    """Convert a caught content error into an error-severity issue."""
    code = "content"
    for error_class, error_code in ISSUE_CODES:
        if isinstance(error, error_class):
            code = error_code
            break
    return ValidationIssue(
        severity=SEVERITY_ERROR,
        code=code,
        path=error.source_path,
        line=error.line,
        message=error.message,
    )


def resolve_reference(
    value: str, source_path: Optional[Path], static_dir: Optional[Path]
) -> List[Path]:
    """
    Candidate files a path-kind parameter value may refer to.

    "/img/a.png" resolves under static_dir; "a.png" resolves next to the
    source file first (page bundle resource), then under static_dir.
    Query strings and fragments are ignored.

    Returns:
        Candidate paths in lookup order; empty for external references (URLs)
    """
    if EXTERNAL_REFERENCE.match(value):
        return []

    cleaned = value.split("#", 1)[0].split("?", 1)[0]
    candidates = []

    if cleaned.startswith("/"):
        if static_dir is not None:
            candidates.append(static_dir / cleaned.lstrip("/"))
        return candidates

    if source_path is not None:
        candidates.append(source_path.parent / cleaned)
    if static_dir is not None:
        candidates.append(static_dir / cleaned)
    return candidates


def _check_shortcode(
    traced: RenderedShortcode,
    source_path: Optional[Path],
    line_offset: int,
    static_dir: Optional[Path],
) -> List[ValidationIssue]:
    """Check one rendered invocation for an empty fragment and dangling paths."""
    issues = []
    invocation = traced.invocation
    line = invocation.line + line_offset

    if not traced.output.strip():
        issues.append(
            ValidationIssue(
                severity=SEVERITY_ERROR,
                code="empty_shortcode",
                path=source_path,
                line=line,
                message=f"[{invocation.name}] Rendered to an empty fragment",
            )
        )

    for param in traced.definition.parameters:
        if param.kind != "path":
            continue
        value = traced.params.get(param.name)
        if not value:
            continue

        candidates = resolve_reference(str(value), source_path, static_dir)
        if not candidates:
            continue
        if not any(candidate.is_file() for candidate in candidates):
            issues.append(
                ValidationIssue(
                    severity=SEVERITY_ERROR,
                    code="missing_file",
                    path=source_path,
                    line=line,
                    message=(
                        f"[{invocation.name}] Parameter '{param.name}' references missing file "
                        f"'{value}' (looked in: {', '.join(str(c) for c in candidates)})"
                    ),
                )
            )

    return issues


def _check_duplicate_slugs(collection: ContentCollection) -> List[ValidationIssue]:
    by_slug = defaultdict(list)
    for document in collection.documents:
        if isinstance(document, Post):
            by_slug[document.slug].append(document)

    issues = []
    for slug, documents in by_slug.items():
        if len(documents) < 2:
            continue
        for document in documents[1:]:
            issues.append(
                ValidationIssue(
                    severity=SEVERITY_WARNING,
                    code="duplicate_slug",
                    path=document.source_path,
                    line=None,
                    message=f"Slug '{slug}' is also used by {documents[0].source_path}",
                )
            )
    return issues


def validate_collection(
    collection: ContentCollection,
    renderer: ShortcodeRenderer = None,
    static_dir: Optional[Path] = None,
) -> ValidationResult:
    """
    Validate every document in a loaded collection.

    Drafts are validated too: a draft that breaks the build once published
    should be caught before it is.

    Args:
        collection: Loaded content (its load failures become issues)
        renderer: ShortcodeRenderer (defaults to bundled shortcodes only)
        static_dir: Directory absolute path references resolve under

    Returns:
        ValidationResult
    """
    renderer = renderer or ShortcodeRenderer()
    result = ValidationResult()

    for failure in collection.failures:
        result.issues.append(issue_from_error(failure.error))

    for document in collection.documents:
        result.documents_checked += 1
        rendered = renderer.render_document(document, collect_errors=True)
        result.issues.extend(issue_from_error(error) for error in rendered.errors)

        result.shortcodes_checked += rendered.shortcode_count
        for traced in rendered.shortcodes:
            result.issues.extend(
                _check_shortcode(
                    traced,
                    document.source_path,
                    line_offset=document.body_line - 1,
                    static_dir=static_dir,
                )
            )
        _log_debug(f"Checked {document.source_path} ({rendered.shortcode_count} shortcodes)")

    result.issues.extend(_check_duplicate_slugs(collection))
    return result


def validate_content_dir(
    content_dir: Path,
    static_dir: Optional[Path] = None,
    shortcode_paths: Sequence[Path] = (),
    post_sections: Sequence[str] = ("posts",),
    verbose: bool = False,
) -> ValidationResult:
    """
    Load and validate a content directory, logging the outcome.

    Args:
        content_dir: Root of the content tree
        static_dir: Directory absolute path references resolve under
        shortcode_paths: Site shortcode directories (lowest priority first)
        post_sections: Top-level directories holding posts
        verbose: Log every issue

    Returns:
        ValidationResult

    Raises:
        FileNotFoundError: If content_dir does not exist
    """
    start = time.time()
    log_validation_start(content_dir)

    collection = ContentCollection.load(content_dir, post_sections=post_sections)
    renderer = ShortcodeRenderer(ShortcodeRegistry(shortcode_paths))
    result = validate_collection(collection, renderer=renderer, static_dir=static_dir)

    log_validation_result(result, time.time() - start, verbose=verbose)
    return result


def generate_report(result: ValidationResult, relative_to: Optional[Path] = None) -> str:
    """
    Format a validation result as a plain-text report.

    One line per issue in "severity:code::path:line::message" form, followed
    by a summary line.

    Args:
        result: ValidationResult to format
        relative_to: Show paths relative to this directory when possible
    """
    lines = []

    for issue in result.issues:
        location = issue.location
        if relative_to is not None and issue.path is not None:
            try:
                location = str(issue.path.relative_to(relative_to))
                if issue.line is not None:
                    location += f":{issue.line}"
            except ValueError:
                pass
        lines.append(f"{issue.severity}:{issue.code}::{location}::{issue.message}")

    lines.append(
        f"Checked {result.documents_checked} documents, {result.shortcodes_checked} shortcodes: "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    return "\n".join(lines)
