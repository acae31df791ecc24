"""Content-level exceptions for front-matter and document metadata."""

from folio.exceptions import ContentError


class FrontMatterError(ContentError):
    """
    Raised when a front-matter block cannot be split or parsed.

    Covers an opening delimiter without a closing one, YAML/TOML syntax errors,
    blocks that parse to something other than a mapping, and metadata that
    cannot be written back out as YAML.
    """


class MetadataError(ContentError):
    """
    Raised when front-matter parses but its fields do not describe a valid document.

    Examples: a post without a title, an unparseable date, a tag that is not a string.

    Attributes:
        field_name: Front-matter key that failed validation (None for document-level problems)
    """

    def __init__(self, message: str, field_name: str = None, **kwargs):
        self.field_name = field_name
        if field_name:
            message = f"{message} (field: '{field_name}')"
        super().__init__(message, **kwargs)


class AliasConflictError(ContentError):
    """Raised when two documents claim the same alias path."""
