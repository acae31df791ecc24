"""
Shortcode Parser

Splits document body text into literal segments and shortcode invocations.

Supported syntax:
    {{< name arg1 "arg two" >}}             positional arguments
    {{< name key="value" other=`raw` >}}    named arguments
    {{< name >}}body{{< /name >}}           paired, with body
    {{% name %}}body{{% /name %}}           markdown notation
    {{< name />}}                           self-closing, never paired
    {{</* name */>}}                        escaped, emitted as {{< name >}}

A tag is paired when a closing tag for the same name follows it at the same
nesting depth of that name. Bodies are returned unparsed; the renderer parses
them again, so nested shortcodes resolve inside-out.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from folio.contexts.templating.exceptions import ShortcodeSyntaxError
from folio.contexts.templating.shortcode_structure import (
    NOTATION_HTML,
    NOTATION_MARKDOWN,
    ShortcodeInvocation,
)
from folio.utils.text_processing import line_number_at

TAG_START = re.compile(r"\{\{([<%])")

CLOSERS = {"<": ">}}", "%": "%}}"}
NOTATIONS = {"<": NOTATION_HTML, "%": NOTATION_MARKDOWN}

NAME_PATTERN = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.\-/]*\Z")

ARGUMENT_PATTERN = re.compile(
    r"""
    (?:(?P<key>[A-Za-z_][\w-]*)=)?
    (?:
        "(?P<quoted>(?:[^"\\]|\\.)*)"
      | `(?P<raw>[^`]*)`
      | (?P<bare>[^\s"`]+)
    )
    """,
    re.VERBOSE | re.DOTALL,
)

# A bare word only starts with "key=" when the value after it failed to match
DANGLING_KEY_PATTERN = re.compile(r"([A-Za-z_][\w-]*)=")

ESCAPE_SEQUENCES = {"n": "\n", "t": "\t"}

Segment = Union[str, ShortcodeInvocation]


@dataclass
class _Tag:
    """A single tag found while scanning, before pairing."""

    kind: str  # "open", "close" or "literal"
    start: int
    end: int
    name: str = ""
    args: str = ""
    marker: str = "<"
    self_closing: bool = False
    text: str = ""


def _unescape(value: str) -> str:
    return re.sub(
        r"\\(.)", lambda m: ESCAPE_SEQUENCES.get(m.group(1), m.group(1)), value, flags=re.DOTALL
    )


def parse_arguments(
    args: str, shortcode_name: Optional[str] = None, line: Optional[int] = None
) -> Tuple[Tuple[str, ...], Dict[str, str]]:
    """
    Parse the argument string of an opening tag.

    Args:
        args: Text after the shortcode name (e.g., 'src="/img/a.png" alt=`A "B"`')
        shortcode_name: For error messages
        line: For error messages

    Returns:
        (positional, named) where positional is a tuple of values and named a dict

    Raises:
        ShortcodeSyntaxError: If the arguments are malformed, a named argument is
                              repeated, or positional and named arguments are mixed

    Example:
        >>> parse_arguments('"Senior Engineer" Acme 2019-2021')
        (('Senior Engineer', 'Acme', '2019-2021'), {})
        >>> parse_arguments('summary="Show more" open=true')
        ((), {'summary': 'Show more', 'open': 'true'})
    """
    positional: List[str] = []
    named: Dict[str, str] = {}

    pos = 0
    length = len(args)
    while pos < length:
        if args[pos].isspace():
            pos += 1
            continue

        match = ARGUMENT_PATTERN.match(args, pos)
        if match is None or match.end() < length and not args[match.end()].isspace():
            raise ShortcodeSyntaxError(
                f"Malformed argument near: {args[pos:pos + 40]!r}",
                shortcode_name=shortcode_name,
                line=line,
                snippet=args,
            )

        if match.group("quoted") is not None:
            value = _unescape(match.group("quoted"))
        elif match.group("raw") is not None:
            value = match.group("raw")
        else:
            value = match.group("bare")

        key = match.group("key")
        if key is None and match.group("bare") is not None:
            dangling = DANGLING_KEY_PATTERN.match(value)
            if dangling is not None:
                raise ShortcodeSyntaxError(
                    f"Named argument '{dangling.group(1)}' has no value",
                    shortcode_name=shortcode_name,
                    line=line,
                    snippet=args,
                )

        if key is None:
            positional.append(value)
        elif key in named:
            raise ShortcodeSyntaxError(
                f"Named argument '{key}' given more than once",
                shortcode_name=shortcode_name,
                line=line,
                snippet=args,
            )
        else:
            named[key] = value

        pos = match.end()

    if positional and named:
        raise ShortcodeSyntaxError(
            "Positional and named arguments cannot be mixed in one invocation",
            shortcode_name=shortcode_name,
            line=line,
            snippet=args,
        )

    return tuple(positional), named


def _find_closer(text: str, start: int, closer: str) -> int:
    """Find the tag closer, skipping over quoted argument values."""
    quote = None
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if quote == '"' and ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ('"', "`"):
            quote = ch
        elif text.startswith(closer, i):
            return i
        i += 1
    return -1


def _scan_tags(text: str, line_offset: int) -> List[_Tag]:
    """Find every shortcode tag in text, in order."""
    tags = []
    pos = 0

    while True:
        match = TAG_START.search(text, pos)
        if match is None:
            break

        start = match.start()
        marker = match.group(1)
        closer = CLOSERS[marker]
        inner_start = match.end()
        line = line_number_at(text, start) + line_offset

        # Escaped tag: emit the tag text literally without the comment markers
        if text.startswith("/*", inner_start):
            escaped_closer = "*/" + closer
            end_index = text.find(escaped_closer, inner_start + 2)
            if end_index == -1:
                raise ShortcodeSyntaxError(
                    f"Unterminated escaped shortcode: no closing '{escaped_closer}'",
                    line=line,
                    snippet=text[start : start + 80],
                )
            literal = "{{" + marker + text[inner_start + 2 : end_index] + closer
            tag_end = end_index + len(escaped_closer)
            tags.append(_Tag(kind="literal", start=start, end=tag_end, text=literal))
            pos = tag_end
            continue

        end_index = _find_closer(text, inner_start, closer)
        if end_index == -1:
            raise ShortcodeSyntaxError(
                f"Unterminated shortcode tag: no closing '{closer}'",
                line=line,
                snippet=text[start : start + 80],
            )
        tag_end = end_index + len(closer)
        content = text[inner_start:end_index].strip()

        if not content:
            raise ShortcodeSyntaxError("Empty shortcode tag", line=line, snippet=text[start:tag_end])

        if content.startswith("/"):
            name = content[1:].strip()
            kind = "close"
            args = ""
            self_closing = False
        else:
            kind = "open"
            self_closing = content.endswith("/")
            if self_closing:
                content = content[:-1].rstrip()
            parts = content.split(None, 1)
            name = parts[0] if parts else ""
            args = parts[1] if len(parts) > 1 else ""

        if not NAME_PATTERN.match(name):
            raise ShortcodeSyntaxError(
                f"Invalid shortcode name {name!r}", line=line, snippet=text[start:tag_end]
            )

        tags.append(
            _Tag(
                kind=kind,
                start=start,
                end=tag_end,
                name=name,
                args=args,
                marker=marker,
                self_closing=self_closing,
            )
        )
        pos = tag_end

    return tags


def _find_matching_close(tags: List[_Tag], open_index: int) -> Optional[int]:
    """Index of the closing tag pairing with tags[open_index], or None if standalone."""
    name = tags[open_index].name
    depth = 0
    for j in range(open_index + 1, len(tags)):
        tag = tags[j]
        if tag.name != name:
            continue
        if tag.kind == "open" and not tag.self_closing:
            depth += 1
        elif tag.kind == "close":
            if depth == 0:
                return j
            depth -= 1
    return None


def parse_shortcodes(text: str, line_offset: int = 0) -> List[Segment]:
    """
    Split text into literal strings and ShortcodeInvocation objects.

    Args:
        text: Body text to parse
        line_offset: Added to every reported line (for bodies nested in a larger text)

    Returns:
        List of segments in document order. Adjacent literal text is merged;
        escaped tags appear in their unescaped literal form.

    Raises:
        ShortcodeSyntaxError: On unterminated tags, invalid names, malformed
                              arguments, or a closing tag with no opening tag
    """
    tags = _scan_tags(text, line_offset)
    segments: List[Segment] = []
    cursor = 0
    i = 0

    def add_literal(literal: str) -> None:
        if not literal:
            return
        if segments and isinstance(segments[-1], str):
            segments[-1] += literal
        else:
            segments.append(literal)

    while i < len(tags):
        tag = tags[i]
        add_literal(text[cursor : tag.start])

        if tag.kind == "literal":
            add_literal(tag.text)
            cursor = tag.end
            i += 1
            continue

        line = line_number_at(text, tag.start) + line_offset

        if tag.kind == "close":
            raise ShortcodeSyntaxError(
                "Closing tag without a matching opening tag",
                shortcode_name=tag.name,
                line=line,
                snippet=text[tag.start : tag.end],
            )

        positional, named = parse_arguments(tag.args, shortcode_name=tag.name, line=line)
        close_index = None if tag.self_closing else _find_matching_close(tags, i)

        if close_index is None:
            body = None
            end = tag.end
            body_line = line
            next_index = i + 1
        else:
            close = tags[close_index]
            body = text[tag.end : close.start]
            end = close.end
            body_line = line_number_at(text, tag.end) + line_offset
            next_index = close_index + 1

        segments.append(
            ShortcodeInvocation(
                name=tag.name,
                parameters=positional,
                named=named,
                body=body,
                notation=NOTATIONS[tag.marker],
                self_closing=tag.self_closing,
                start=tag.start,
                end=end,
                line=line,
                body_line=body_line,
                source=text[tag.start : tag.end],
            )
        )
        cursor = end
        i = next_index

    add_literal(text[cursor:])
    return segments


def has_shortcodes(text: str) -> bool:
    """Cheap check for whether text contains anything that looks like a shortcode tag."""
    return TAG_START.search(text) is not None
