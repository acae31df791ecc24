"""
Front-matter splitting and parsing.

A content file may open with a metadata block:

    ---                         +++
    title: "Functors in Java"   title = "Functors in Java"
    tags: [java, fp]            tags = ["java", "fp"]
    ---                         +++

    Body text...                Body text...

YAML blocks are parsed with PyYAML's safe loader, TOML blocks with tomllib.
Files without an opening delimiter simply have no front-matter.
"""

import tomllib
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from folio.contexts.content.exceptions import FrontMatterError

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"

FORMAT_BY_DELIMITER = {
    YAML_DELIMITER: "yaml",
    TOML_DELIMITER: "toml",
}


@dataclass
class FrontMatter:
    """
    Result of splitting a content file.

    Attributes:
        format: "yaml", "toml", or None when the file has no front-matter
        data: Parsed metadata mapping (empty when format is None)
        body: Text after the closing delimiter
        body_line: 1-based line number in the original file where body starts
    """

    format: Optional[str]
    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    body_line: int = 1


def _normalize_newlines(text: str) -> str:
    return text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(text: str, source_path: Optional[Path] = None) -> FrontMatter:
    """
    Split a content file into parsed front-matter and body.

    Args:
        text: Full file contents
        source_path: Optional path, attached to errors for diagnostics

    Returns:
        FrontMatter with format, data, body and body_line

    Raises:
        FrontMatterError: If the block is unterminated, fails to parse, or is not a mapping
    """
    text = _normalize_newlines(text)
    lines = text.split("\n")

    delimiter = lines[0].rstrip()
    if delimiter not in FORMAT_BY_DELIMITER:
        return FrontMatter(format=None, data={}, body=text, body_line=1)

    fmt = FORMAT_BY_DELIMITER[delimiter]

    closing_index = None
    for i in range(1, len(lines)):
        if lines[i].rstrip() == delimiter:
            closing_index = i
            break

    if closing_index is None:
        raise FrontMatterError(
            f"Unterminated {fmt.upper()} front-matter: no closing '{delimiter}' line",
            source_path=source_path,
            line=1,
        )

    raw = "\n".join(lines[1:closing_index])
    body = "\n".join(lines[closing_index + 1 :])
    data = _parse_block(raw, fmt, source_path)

    return FrontMatter(format=fmt, data=data, body=body, body_line=closing_index + 2)


def _parse_block(raw: str, fmt: str, source_path: Optional[Path]) -> Dict[str, Any]:
    """Parse the raw text between delimiters into a mapping."""
    if fmt == "toml":
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as e:
            raise FrontMatterError(
                f"Invalid TOML front-matter: {e}", source_path=source_path, snippet=raw
            ) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        # +2: one for the opening delimiter, one for 1-based numbering
        line = mark.line + 2 if mark is not None else None
        raise FrontMatterError(
            f"Invalid YAML front-matter: {getattr(e, 'problem', None) or e}",
            source_path=source_path,
            line=line,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front-matter must be a mapping, got {type(data).__name__}",
            source_path=source_path,
            line=2,
            snippet=raw,
        )
    return data


def _to_yaml_value(value: Any) -> Any:
    """Convert values the safe dumper has no tag for (TOML local times)."""
    if isinstance(value, dict):
        return {key: _to_yaml_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_yaml_value(item) for item in value]
    if isinstance(value, time):
        return value.isoformat()
    return value


def dump_front_matter(
    data: Dict[str, Any], body: str, source_path: Optional[Path] = None
) -> str:
    """
    Serialize metadata as a YAML front-matter block followed by body.

    Args:
        data: Metadata mapping (dates and datetimes are emitted as YAML
              timestamps, times of day as "HH:MM:SS" strings)
        body: Body text, appended verbatim
        source_path: Optional path, attached to errors for diagnostics

    Returns:
        Full file contents

    Raises:
        FrontMatterError: If a value has no YAML representation
    """
    if not data:
        return body
    try:
        block = yaml.safe_dump(
            _to_yaml_value(data),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=1000,
        )
    except yaml.YAMLError as e:
        raise FrontMatterError(
            f"Front-matter cannot be written as YAML: {e}", source_path=source_path
        ) from e
    return f"{YAML_DELIMITER}\n{block}{YAML_DELIMITER}\n{body}"
