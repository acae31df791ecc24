"""
Shortcode Renderer

Replaces shortcode invocations in body text with rendered fragments.

Rendering is a pure function of (text, registry, page metadata): literal
segments pass through untouched, each invocation's body is rendered first
(so nested shortcodes resolve inside-out), then the invocation's template is
rendered with its bound parameters.
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import TemplateError
from markupsafe import Markup

from folio.contexts.content.collection import ContentCollection
from folio.contexts.content.document_structure import ContentDocument
from folio.contexts.content.frontmatter import dump_front_matter, split_front_matter
from folio.contexts.templating.exceptions import ShortcodeRenderError, UnknownShortcodeError
from folio.contexts.templating.logger import _log_debug, log_render_result
from folio.contexts.templating.parameters import bind_parameters
from folio.contexts.templating.registries import ShortcodeRegistry
from folio.contexts.templating.shortcode_parser import has_shortcodes, parse_shortcodes
from folio.contexts.templating.shortcode_structure import (
    ShortcodeDefinition,
    ShortcodeInvocation,
)
from folio.exceptions import ContentError


@dataclass
class RenderedShortcode:
    """Trace entry for one rendered invocation (nested ones included)."""

    invocation: ShortcodeInvocation
    definition: ShortcodeDefinition
    params: Dict[str, Any]
    output: str
    ordinal: int


@dataclass
class RenderedDocument:
    """
    A document with its body's shortcodes expanded.

    errors is only filled when rendering with collect_errors=True; the
    failed invocations are left out of body.
    """

    document: ContentDocument
    body: str
    shortcodes: List[RenderedShortcode] = field(default_factory=list)
    errors: List[ContentError] = field(default_factory=list)

    @property
    def shortcode_count(self) -> int:
        return len(self.shortcodes)


@dataclass
class RenderResult:
    """Result from render_tree() for a single file."""

    success: bool
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None
    shortcode_count: int = 0
    time_s: float = 0.0


class _RenderState:
    """Per-render bookkeeping: ordinals by name, the trace and collected errors."""

    def __init__(self, page: Dict[str, Any], collect_errors: bool = False):
        self.page = page
        self.ordinals: Counter = Counter()
        self.trace: List[RenderedShortcode] = []
        self.errors: Optional[List[ContentError]] = [] if collect_errors else None

    def record(self, error: ContentError) -> None:
        """Keep error when collecting, otherwise raise it."""
        if self.errors is None:
            raise error
        self.errors.append(error)


class ShortcodeRenderer:
    """Renders shortcode invocations through a ShortcodeRegistry."""

    def __init__(self, registry: ShortcodeRegistry = None):
        self.registry = registry or ShortcodeRegistry()

    def render(self, text: str, document: ContentDocument = None) -> str:
        """
        Expand every shortcode in text.

        Args:
            text: Body text
            document: Document the text belongs to; its metadata is exposed
                      to templates as `page`

        Returns:
            Text with every invocation replaced by its fragment

        Raises:
            ShortcodeError: Syntax, unknown-name, parameter or template failure.
                            Line numbers are relative to text.
        """
        state = _RenderState(document.metadata if document is not None else {})
        return self._render_text(text, state, line_offset=0)

    def render_document(
        self, document: ContentDocument, collect_errors: bool = False
    ) -> RenderedDocument:
        """
        Expand the shortcodes in a document's body.

        Errors are re-targeted to the document's source file and file-relative
        line numbers.

        Args:
            document: Post or Page to render
            collect_errors: Record each failing invocation in the result's
                            errors and keep rendering the rest of the body

        Raises:
            ShortcodeError: As render(), with source_path and absolute line set
                            (only when collect_errors is False)
        """
        line_offset = document.body_line - 1
        state = _RenderState(document.metadata, collect_errors=collect_errors)
        try:
            body = self._render_text(document.body, state, line_offset=0)
        except ContentError as e:
            raise e.with_source(document.source_path, line_offset=line_offset)

        errors = [
            error.with_source(document.source_path, line_offset=line_offset)
            for error in state.errors or []
        ]
        return RenderedDocument(
            document=document, body=body, shortcodes=state.trace, errors=errors
        )

    def _render_text(self, text: str, state: _RenderState, line_offset: int) -> str:
        if not has_shortcodes(text):
            return text

        try:
            segments = parse_shortcodes(text, line_offset=line_offset)
        except ContentError as e:
            state.record(e)
            return ""

        parts = []
        for segment in segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            try:
                parts.append(self._render_invocation(segment, state))
            except ContentError as e:
                state.record(e)
        return "".join(parts)

    def _render_invocation(self, invocation: ShortcodeInvocation, state: _RenderState) -> str:
        if not self.registry.has(invocation.name):
            raise UnknownShortcodeError(
                f"Shortcode not found. Available shortcodes: {self.registry.names()}",
                shortcode_name=invocation.name,
                line=invocation.line,
                snippet=invocation.source,
            )
        definition = self.registry.get_definition(invocation.name)
        params = bind_parameters(definition, invocation)

        ordinal = state.ordinals[invocation.name]
        state.ordinals[invocation.name] += 1

        inner = None
        if invocation.body is not None:
            inner_text = self._render_text(
                invocation.body, state, line_offset=invocation.body_line - 1
            )
            inner = Markup(inner_text)

        template = self.registry.get_template(invocation.name)
        try:
            output = template.render(
                name=invocation.name,
                params=params,
                args=list(invocation.parameters),
                inner=inner,
                ordinal=ordinal,
                notation=invocation.notation,
                page=state.page,
            )
        except TemplateError as e:
            raise ShortcodeRenderError(
                "Template failed to render",
                shortcode_name=invocation.name,
                template_path=definition.template_path,
                original_error=e,
                line=invocation.line,
                snippet=invocation.source,
            ) from e

        _log_debug(f"Rendered {invocation.name} #{ordinal} at line {invocation.line}")
        state.trace.append(
            RenderedShortcode(
                invocation=invocation,
                definition=definition,
                params=params,
                output=output,
                ordinal=ordinal,
            )
        )
        return output


def render_file(
    source_path: Path, output_path: Path, renderer: ShortcodeRenderer, document_class
) -> RenderResult:
    """
    Render one content file and write it with its front-matter preserved.

    Args:
        source_path: Markdown file to render
        output_path: Where to write the rendered file (parents created)
        renderer: ShortcodeRenderer to use
        document_class: Post or Page

    Returns:
        RenderResult; content errors are captured, not raised

    Raises:
        ConfigError: If a shortcode's shortcode.yaml is malformed
    """
    start = time.time()
    try:
        text = source_path.read_text(encoding="utf-8")
        front_matter = split_front_matter(text, source_path=source_path)
        document = document_class.from_metadata(
            front_matter.data,
            body=front_matter.body,
            source_path=source_path,
            body_line=front_matter.body_line,
        )
        rendered = renderer.render_document(document)
        output = dump_front_matter(front_matter.data, rendered.body, source_path=source_path)
    except ContentError as e:
        return RenderResult(
            success=False, input_path=source_path, error=str(e), time_s=time.time() - start
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(output, encoding="utf-8")

    return RenderResult(
        success=True,
        input_path=source_path,
        output_path=output_path,
        shortcode_count=rendered.shortcode_count,
        time_s=time.time() - start,
    )


def render_tree(
    content_dir: Path,
    output_dir: Path,
    renderer: ShortcodeRenderer = None,
    post_sections=("posts",),
    include_drafts: bool = False,
) -> List[RenderResult]:
    """
    Render every document in a content tree into output_dir, mirroring paths.

    Files that fail to load or render are reported in the results and
    skipped; everything else is still written.

    Args:
        content_dir: Root of the content tree
        output_dir: Root of the rendered tree
        renderer: ShortcodeRenderer (defaults to bundled shortcodes only)
        post_sections: Top-level directories holding posts
        include_drafts: Also render draft documents

    Returns:
        One RenderResult per file considered
    """
    renderer = renderer or ShortcodeRenderer()
    collection = ContentCollection.load(content_dir, post_sections=post_sections)
    results: List[RenderResult] = []

    # A file can fail after loading (alias conflicts), so group by path
    errors_by_path: Dict[Path, List[str]] = {}
    for failure in collection.failures:
        errors_by_path.setdefault(failure.path, []).append(str(failure.error))

    for path, errors in errors_by_path.items():
        results.append(RenderResult(success=False, input_path=path, error="\n".join(errors)))
        log_render_result(str(path), results[-1], 0.0)

    for document in collection.documents:
        if document.source_path in errors_by_path:
            continue
        if document.draft and not include_drafts:
            _log_debug(f"Skipping draft {document.source_path}")
            continue

        relative = document.source_path.relative_to(content_dir)
        result = render_file(
            document.source_path, output_dir / relative, renderer, type(document)
        )
        log_render_result(str(relative), result, result.time_s)
        results.append(result)

    return results
