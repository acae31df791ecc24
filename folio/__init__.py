"""
FOLIO - content toolkit for a personal static blog

Parses, resolves and validates the Markdown content (posts, a CV/about page)
that an external static site generator turns into HTML.

Architecture:
- Content Context: front-matter parsing, Post/Page model, content tree loading
- Templating Context: shortcode parsing, definitions and rendering
- Validation Context: content-level checks and diagnostics reports
"""

__version__ = "0.1.0"
