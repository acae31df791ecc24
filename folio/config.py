"""
Site Configuration

Loads site.yaml over structured defaults with OmegaConf. Paths in the file are
resolved relative to the file's own directory so a site can be checked from
any working directory.

Environment variables (read through python-dotenv):
    FOLIO_SITE_CONFIG      Path to site.yaml (default: ./site.yaml)
    FOLIO_LOGS_PATH        Root for per-run log directories (default: outs/logs)
    FOLIO_SHORTCODES_PATH  Extra shortcode directory searched after the site's own
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from folio.exceptions import ConfigError

load_dotenv()
SITE_CONFIG_PATH = Path(os.getenv("FOLIO_SITE_CONFIG", "site.yaml"))
LOGS_PATH = Path(os.getenv("FOLIO_LOGS_PATH", "outs/logs"))
EXTRA_SHORTCODES_PATH = os.getenv("FOLIO_SHORTCODES_PATH")


@dataclass
class SiteSchema:
    """Structured defaults for site.yaml (OmegaConf validates types and keys against this)."""

    title: str = ""
    base_url: str = "/"
    content_dir: str = "content"
    static_dir: str = "static"
    shortcodes_dir: str = "shortcodes"
    output_dir: str = "outs/rendered"
    post_sections: List[str] = field(default_factory=lambda: ["posts"])
    build_drafts: bool = False


@dataclass
class SiteConfig:
    """Resolved site configuration with absolute paths."""

    title: str
    base_url: str
    root: Path
    content_dir: Path
    static_dir: Path
    shortcodes_dir: Path
    output_dir: Path
    post_sections: tuple
    build_drafts: bool

    @property
    def shortcode_search_paths(self) -> List[Path]:
        """Site shortcode directories, lowest priority first (bundled ones are added by the registry)."""
        paths = [self.shortcodes_dir]
        if EXTRA_SHORTCODES_PATH:
            paths.append(Path(EXTRA_SHORTCODES_PATH))
        return paths


def load_site_config(config_path: Optional[Path] = None, root: Optional[Path] = None) -> SiteConfig:
    """
    Load site.yaml and merge it over the structured defaults.

    Args:
        config_path: Path to site.yaml (defaults to FOLIO_SITE_CONFIG). A missing
                     file is not an error: all defaults apply.
        root: Directory relative paths resolve against (defaults to the config
              file's directory)

    Returns:
        SiteConfig with absolute paths

    Raises:
        ConfigError: If the file has unknown keys, wrong value types, or is not a mapping
    """
    if config_path is None:
        config_path = SITE_CONFIG_PATH
    config_path = Path(config_path)

    if root is None:
        root = config_path.resolve().parent

    schema = OmegaConf.structured(SiteSchema)

    try:
        if config_path.exists():
            loaded = OmegaConf.load(config_path)
            if not OmegaConf.is_dict(loaded):
                raise ConfigError(f"Site config must be a mapping: {config_path}")
            merged = OmegaConf.merge(schema, loaded)
        else:
            merged = schema
        values = OmegaConf.to_container(merged, resolve=True)
    except OmegaConfBaseException as e:
        raise ConfigError(f"Invalid site config {config_path}: {e}") from e

    def resolve(value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else (root / path).resolve()

    return SiteConfig(
        title=values["title"],
        base_url=values["base_url"],
        root=root,
        content_dir=resolve(values["content_dir"]),
        static_dir=resolve(values["static_dir"]),
        shortcodes_dir=resolve(values["shortcodes_dir"]),
        output_dir=resolve(values["output_dir"]),
        post_sections=tuple(values["post_sections"]),
        build_drafts=values["build_drafts"],
    )
