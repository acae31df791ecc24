"""
Shared utilities for FOLIO.

Common functionality used across contexts:
- Logger setup with provenance tracking
- Text processing helpers
- Timestamps
"""

from folio.utils.text_processing import normalize_url_path, slugify, truncate_display
from folio.utils.timestamp import now

__all__ = ["normalize_url_path", "slugify", "truncate_display", "now"]
