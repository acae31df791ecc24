"""
Templating Registries

Loads and caches shortcode definitions and their Jinja2 templates.

Each shortcode lives in its own directory:

    <shortcodes_dir>/<name>/template.html.jinja   required
    <shortcodes_dir>/<name>/shortcode.yaml        parameter declaration (optional)

Search paths are given lowest priority first; the bundled shortcodes shipped
with FOLIO are always searched last, so a site can override any of them by
providing a directory with the same name.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from folio.contexts.templating.exceptions import ShortcodeRenderError, UnknownShortcodeError
from folio.contexts.templating.shortcode_structure import ShortcodeDefinition
from folio.exceptions import ConfigError

BUNDLED_SHORTCODES_PATH = Path(__file__).parent / "shortcodes"

TEMPLATE_FILENAME = "template.html.jinja"
DEFINITION_FILENAME = "shortcode.yaml"


class ShortcodeRegistry:
    """
    Registry for loading and caching shortcode definitions and templates.

    Templates render with StrictUndefined so a template referring to a value
    the invocation did not supply fails loudly instead of emitting an empty
    string, and with HTML autoescaping for argument values.
    """

    def __init__(self, search_paths: Optional[Iterable[Path]] = None):
        """
        Initialize the shortcode registry.

        Args:
            search_paths: Site shortcode directories, lowest priority first.
                          Directories that do not exist are ignored.
        """
        paths = [BUNDLED_SHORTCODES_PATH]
        for path in search_paths or []:
            path = Path(path)
            if path.is_dir() and path.resolve() != BUNDLED_SHORTCODES_PATH.resolve():
                paths.append(path)

        # Highest priority first, which is the order FileSystemLoader searches in
        self.search_paths: List[Path] = list(reversed(paths))
        self._definitions: Dict[str, ShortcodeDefinition] = {}
        self._templates: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader([str(path) for path in self.search_paths]),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html", "jinja"), default=True),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def _find_directory(self, name: str) -> Optional[Path]:
        for base in self.search_paths:
            candidate = base / name
            if (candidate / TEMPLATE_FILENAME).is_file():
                return candidate
        return None

    def names(self) -> List[str]:
        """All available shortcode names, sorted."""
        found = set()
        for base in self.search_paths:
            for template_path in base.glob(f"*/{TEMPLATE_FILENAME}"):
                found.add(template_path.parent.name)
        return sorted(found)

    def has(self, name: str) -> bool:
        return name in self._definitions or self._find_directory(name) is not None

    def get_definition(self, name: str) -> ShortcodeDefinition:
        """
        Get a shortcode definition by name, loading and caching it if necessary.

        Args:
            name: Shortcode name (e.g., 'cv_entry')

        Returns:
            ShortcodeDefinition

        Raises:
            UnknownShortcodeError: If no search path has a template for this name
            ConfigError: If shortcode.yaml exists but is malformed
        """
        if name in self._definitions:
            return self._definitions[name]

        directory = self._find_directory(name)
        if directory is None:
            raise UnknownShortcodeError(
                f"Shortcode not found. Available shortcodes: {self.names()}",
                shortcode_name=name,
            )

        template_path = directory / TEMPLATE_FILENAME
        config_path = directory / DEFINITION_FILENAME

        if config_path.exists():
            config = self._load_config(name, config_path)
            definition = ShortcodeDefinition.from_config(
                name, config, template_path, config_path=config_path
            )
        else:
            definition = ShortcodeDefinition(
                name=name, template_path=template_path, declared=False
            )

        self._definitions[name] = definition
        return definition

    @staticmethod
    def _load_config(name: str, config_path: Path) -> Dict[str, Any]:
        try:
            config = OmegaConf.load(config_path)
        except (OmegaConfBaseException, OSError, ValueError) as e:
            raise ConfigError(f"Could not read {config_path} for shortcode '{name}': {e}") from e

        if not OmegaConf.is_dict(config):
            raise ConfigError(f"{config_path} must contain a mapping")
        return OmegaConf.to_container(config, resolve=True)

    def get_template(self, name: str) -> Template:
        """
        Get a shortcode template by name, loading and caching it if necessary.

        Raises:
            UnknownShortcodeError: If the shortcode does not exist
            ShortcodeRenderError: If the template has Jinja2 syntax errors
        """
        if name in self._templates:
            return self._templates[name]

        definition = self.get_definition(name)
        try:
            template = self.env.get_template(f"{name}/{TEMPLATE_FILENAME}")
        except TemplateError as e:
            raise ShortcodeRenderError(
                "Template failed to load",
                shortcode_name=name,
                template_path=definition.template_path,
                original_error=e,
            ) from e

        self._templates[name] = template
        return template

    def definitions(self) -> List[ShortcodeDefinition]:
        """Definitions for every available shortcode."""
        return [self.get_definition(name) for name in self.names()]

    def clear_cache(self):
        """Clear the definition and template caches."""
        self._definitions.clear()
        self._templates.clear()

    def is_cached(self, name: str) -> bool:
        """Check if a shortcode template is in the cache."""
        return name in self._templates

    def get_template_source(self, name: str) -> str:
        """
        Get the raw template source for a shortcode.

        Useful for showing expected output in error messages and listings.
        """
        return self.get_definition(name).template_path.read_text(encoding="utf-8")
