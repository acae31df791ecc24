"""Custom exceptions for the templating context with shortcode references."""

from pathlib import Path
from typing import Optional

from folio.exceptions import ContentError


class ShortcodeError(ContentError):
    """
    Base class for content errors raised while resolving a shortcode.

    Attributes:
        shortcode_name: Name of the shortcode involved (None when the tag could not be read)
    """

    def __init__(
        self,
        message: str,
        shortcode_name: Optional[str] = None,
        source_path: Optional[Path] = None,
        line: Optional[int] = None,
        snippet: Optional[str] = None,
    ):
        self.shortcode_name = shortcode_name
        if shortcode_name:
            message = f"[{shortcode_name}] {message}"
        super().__init__(message, source_path=source_path, line=line, snippet=snippet)


class ShortcodeSyntaxError(ShortcodeError):
    """Raised when shortcode tags in body text cannot be tokenized or paired."""


class UnknownShortcodeError(ShortcodeError):
    """Raised when an invocation names a shortcode no search path defines."""


class ShortcodeParameterError(ShortcodeError):
    """
    Raised when invocation arguments do not satisfy the shortcode's declaration.

    Missing required parameters, unknown named parameters, surplus positional
    arguments, and inner-body policy violations all land here.
    """


class ShortcodeRenderError(ShortcodeError):
    """
    Raised when a shortcode template fails to load or render.

    Attributes:
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        shortcode_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
        **kwargs,
    ):
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]
        if template_path:
            parts.append(f"\nTemplate: {template_path}")
        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts), shortcode_name=shortcode_name, **kwargs)
