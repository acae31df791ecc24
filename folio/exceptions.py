"""Base exceptions shared by all FOLIO contexts."""

from pathlib import Path
from typing import Optional


class FolioError(Exception):
    """Root of all FOLIO exceptions."""


class ConfigError(FolioError):
    """Raised when the site configuration is missing required structure or has invalid values."""


class ContentError(FolioError):
    """
    A failure attributable to the content files rather than to FOLIO itself.

    Content errors are collected and reported as diagnostics by orchestration
    code (collection loading, validation, CLIs) instead of aborting the run.

    Attributes:
        message: Error description
        source_path: Content file the error was found in
        line: 1-based line number within the file
        snippet: Offending text
    """

    def __init__(
        self,
        message: str,
        source_path: Optional[Path] = None,
        line: Optional[int] = None,
        snippet: Optional[str] = None,
    ):
        self.message = message
        self.source_path = source_path
        self.line = line
        self.snippet = snippet
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        parts = [self.message]

        if self.source_path is not None:
            location = str(self.source_path)
            if self.line is not None:
                location += f":{self.line}"
            parts.append(f"\nIn: {location}")
        elif self.line is not None:
            parts.append(f"\nAt line: {self.line}")

        if self.snippet:
            snippet = self.snippet[:200] + "..." if len(self.snippet) > 200 else self.snippet
            parts.append(f"\nSource:\n{snippet}")

        return "\n".join(parts)

    def with_source(self, source_path: Path, line_offset: int = 0) -> "ContentError":
        """
        Attach a source path (and shift the line by the front-matter height).

        Body-relative errors get raised without knowing which file they came
        from; the loader re-targets them before reporting.
        """
        self.source_path = source_path
        if self.line is not None:
            self.line += line_offset
        self.args = (self._build_message(),)
        return self
