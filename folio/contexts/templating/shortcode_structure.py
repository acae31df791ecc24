"""
Shortcode Data Structures

- ShortcodeInvocation: one tag (or tag pair) found in body text
- ShortcodeParameter / ShortcodeDefinition: what a shortcode accepts, read from
  its shortcode.yaml next to the template
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from folio.exceptions import ConfigError

NOTATION_HTML = "html"  # {{< name >}}
NOTATION_MARKDOWN = "markdown"  # {{% name %}}

PARAMETER_KINDS = ("text", "path")
INNER_POLICIES = ("none", "optional", "required")


@dataclass(frozen=True)
class ShortcodeInvocation:
    """
    A shortcode call as written in a document body.

    Stateless; its only identity is its lexical position in the text it was
    parsed from.

    Attributes:
        name: Shortcode name (e.g., "cv_entry")
        parameters: Positional arguments in order
        named: Named arguments (key=value)
        body: Text between the opening and closing tags; None when standalone
        notation: NOTATION_HTML or NOTATION_MARKDOWN
        self_closing: Written as {{< name />}}
        start: Offset of the opening tag in the parsed text
        end: Offset just past the closing tag (or the opening tag when standalone)
        line: 1-based line of the opening tag
        body_line: 1-based line where body starts (equals line when standalone)
        source: Raw text of the opening tag
    """

    name: str
    parameters: Tuple[str, ...] = ()
    named: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    notation: str = NOTATION_HTML
    self_closing: bool = False
    start: int = 0
    end: int = 0
    line: int = 1
    body_line: int = 1
    source: str = ""

    @property
    def is_paired(self) -> bool:
        return self.body is not None


@dataclass(frozen=True)
class ShortcodeParameter:
    """
    A declared shortcode parameter.

    Attributes:
        name: Parameter name, used for named arguments and in templates (params.<name>)
        required: Invocation fails when no argument is given
        default: Value used when an optional parameter is omitted
        kind: "text", or "path" for values that reference a file (checked by validation)
        description: Human-readable help shown by the shortcodes listing
    """

    name: str
    required: bool = False
    default: Any = None
    kind: str = "text"
    description: str = ""


@dataclass(frozen=True)
class ShortcodeDefinition:
    """
    Everything known about a shortcode before it is invoked.

    Attributes:
        name: Shortcode name (its directory name)
        template_path: Path to template.html.jinja
        parameters: Declared parameters in positional order
        inner: "none", "optional" or "required" body policy
        description: Human-readable summary
        declared: False when the directory has no shortcode.yaml; then any
                  named argument passes through and positionals stay in args
    """

    name: str
    template_path: Path
    parameters: Tuple[ShortcodeParameter, ...] = ()
    inner: str = "optional"
    description: str = ""
    declared: bool = True

    @property
    def parameter_names(self) -> List[str]:
        return [param.name for param in self.parameters]

    @property
    def required_parameters(self) -> List[str]:
        return [param.name for param in self.parameters if param.required]

    def get_parameter(self, name: str) -> Optional[ShortcodeParameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    @classmethod
    def from_config(
        cls, name: str, config: Dict[str, Any], template_path: Path, config_path: Path = None
    ) -> "ShortcodeDefinition":
        """
        Build a definition from a parsed shortcode.yaml mapping.

        Raises:
            ConfigError: If the declaration is malformed
        """
        where = config_path or template_path.parent
        inner = config.get("inner", "optional")
        if inner not in INNER_POLICIES:
            raise ConfigError(
                f"Shortcode '{name}' has invalid inner policy '{inner}'. "
                f"Valid policies: {INNER_POLICIES} ({where})"
            )

        parameters = []
        seen = set()
        for raw in config.get("params") or []:
            if isinstance(raw, str):
                raw = {"name": raw}
            if not isinstance(raw, dict) or not raw.get("name"):
                raise ConfigError(f"Shortcode '{name}' has a parameter without a name ({where})")

            param_name = str(raw["name"])
            if param_name in seen:
                raise ConfigError(
                    f"Shortcode '{name}' declares parameter '{param_name}' twice ({where})"
                )
            seen.add(param_name)

            kind = raw.get("kind", "text")
            if kind not in PARAMETER_KINDS:
                raise ConfigError(
                    f"Shortcode '{name}' parameter '{param_name}' has invalid kind '{kind}'. "
                    f"Valid kinds: {PARAMETER_KINDS} ({where})"
                )

            parameters.append(
                ShortcodeParameter(
                    name=param_name,
                    required=bool(raw.get("required", False)),
                    default=raw.get("default"),
                    kind=kind,
                    description=raw.get("description", ""),
                )
            )

        return cls(
            name=name,
            template_path=template_path,
            parameters=tuple(parameters),
            inner=inner,
            description=config.get("description", ""),
            declared=True,
        )
