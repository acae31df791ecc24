"""
Templating Context

Responsibilities:
- Parses shortcode invocations out of document bodies
- Loads shortcode definitions (parameter declarations) and Jinja2 templates
- Binds invocation arguments to declared parameters
- Renders invocations into fragments, nested shortcodes inside-out
- Writes rendered copies of a content tree for the external site generator

Owns: Shortcode syntax, shortcode definitions and templates, rendering
Never: Decides whether content is valid beyond the shortcode it is rendering
"""

from folio.contexts.templating.exceptions import (
    ShortcodeError,
    ShortcodeParameterError,
    ShortcodeRenderError,
    ShortcodeSyntaxError,
    UnknownShortcodeError,
)
from folio.contexts.templating.parameters import bind_parameters
from folio.contexts.templating.registries import ShortcodeRegistry
from folio.contexts.templating.renderer import (
    RenderedDocument,
    RenderedShortcode,
    RenderResult,
    ShortcodeRenderer,
    render_file,
    render_tree,
)
from folio.contexts.templating.shortcode_parser import parse_arguments, parse_shortcodes
from folio.contexts.templating.shortcode_structure import (
    ShortcodeDefinition,
    ShortcodeInvocation,
    ShortcodeParameter,
)

__all__ = [
    # Parsing
    "parse_shortcodes",
    "parse_arguments",
    "ShortcodeInvocation",
    # Definitions
    "ShortcodeRegistry",
    "ShortcodeDefinition",
    "ShortcodeParameter",
    "bind_parameters",
    # Rendering
    "ShortcodeRenderer",
    "RenderedDocument",
    "RenderedShortcode",
    "RenderResult",
    "render_file",
    "render_tree",
    # Errors
    "ShortcodeError",
    "ShortcodeSyntaxError",
    "UnknownShortcodeError",
    "ShortcodeParameterError",
    "ShortcodeRenderError",
]
