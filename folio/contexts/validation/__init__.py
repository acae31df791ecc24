"""
Validation Context

Responsibilities:
- Checks that every content file's front-matter describes a valid document
- Checks that every shortcode invocation resolves to a non-empty fragment
- Checks that file references made through shortcodes exist
- Formats diagnostics reports

Owns: Content diagnostics
Never: Modifies content files
"""

from folio.contexts.validation.validator import (
    ValidationIssue,
    ValidationResult,
    generate_report,
    resolve_reference,
    validate_collection,
    validate_content_dir,
)

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "validate_collection",
    "validate_content_dir",
    "resolve_reference",
    "generate_report",
]
