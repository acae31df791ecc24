"""Unit tests for ShortcodeRegistry class."""

import pytest
from jinja2 import StrictUndefined

from folio.contexts.templating.exceptions import ShortcodeRenderError, UnknownShortcodeError
from folio.contexts.templating.registries import (
    BUNDLED_SHORTCODES_PATH,
    DEFINITION_FILENAME,
    TEMPLATE_FILENAME,
    ShortcodeRegistry,
)
from folio.exceptions import ConfigError


def _write_shortcode(base, name, template, definition=None):
    directory = base / name
    directory.mkdir(parents=True)
    (directory / TEMPLATE_FILENAME).write_text(template, encoding="utf-8")
    if definition is not None:
        (directory / DEFINITION_FILENAME).write_text(definition, encoding="utf-8")
    return directory


@pytest.mark.unit
def test_registry_init():
    """Test ShortcodeRegistry initialization with bundled shortcodes only."""
    registry = ShortcodeRegistry()

    assert registry.search_paths == [BUNDLED_SHORTCODES_PATH]
    assert registry.env.undefined is StrictUndefined
    assert registry._templates == {}


@pytest.mark.unit
def test_bundled_shortcodes_available():
    """Test the bundled shortcodes are listed."""
    names = ShortcodeRegistry().names()

    assert {"cv_entry", "details", "figure"} <= set(names)
    assert names == sorted(names)


@pytest.mark.unit
def test_get_definition_bundled():
    """Test loading a bundled definition from its shortcode.yaml."""
    definition = ShortcodeRegistry().get_definition("cv_entry")

    assert definition.declared
    assert definition.parameter_names == ["title", "organization", "period", "location"]
    assert definition.required_parameters == ["title", "organization"]
    assert definition.inner == "optional"
    assert definition.template_path.name == TEMPLATE_FILENAME


@pytest.mark.unit
def test_get_definition_not_found():
    """Test error handling for a missing shortcode."""
    with pytest.raises(UnknownShortcodeError) as exc_info:
        ShortcodeRegistry().get_definition("youtube")

    assert exc_info.value.shortcode_name == "youtube"
    assert "cv_entry" in exc_info.value.message


@pytest.mark.unit
def test_template_caching():
    """Test that templates are cached after first load."""
    registry = ShortcodeRegistry()

    template1 = registry.get_template("figure")
    assert registry.is_cached("figure")

    template2 = registry.get_template("figure")
    assert template1 is template2


@pytest.mark.unit
def test_clear_cache():
    """Test cache clearing."""
    registry = ShortcodeRegistry()
    registry.get_template("details")
    assert len(registry._templates) == 1

    registry.clear_cache()
    assert len(registry._templates) == 0
    assert len(registry._definitions) == 0


@pytest.mark.unit
def test_site_shortcode_overrides_bundled(tmp_path):
    """Test a site directory with the same name takes priority."""
    _write_shortcode(tmp_path, "figure", "<img src=\"{{ params.src }}\">", "params: [src]\n")
    registry = ShortcodeRegistry([tmp_path])

    definition = registry.get_definition("figure")
    assert definition.template_path.parent == tmp_path / "figure"
    assert definition.parameter_names == ["src"]
    assert registry.get_template_source("figure") == "<img src=\"{{ params.src }}\">"


@pytest.mark.unit
def test_later_search_paths_win(tmp_path):
    """Test search paths are given lowest priority first."""
    low = tmp_path / "theme"
    high = tmp_path / "site"
    _write_shortcode(low, "note", "low")
    _write_shortcode(high, "note", "high")

    registry = ShortcodeRegistry([low, high])
    assert registry.get_template("note").render() == "high"


@pytest.mark.unit
def test_missing_search_path_is_ignored(tmp_path):
    """Test nonexistent directories do not break the registry."""
    registry = ShortcodeRegistry([tmp_path / "missing"])

    assert registry.search_paths == [BUNDLED_SHORTCODES_PATH]


@pytest.mark.unit
def test_undeclared_shortcode(tmp_path):
    """Test a directory without shortcode.yaml yields an undeclared definition."""
    _write_shortcode(tmp_path, "note", "<aside>{{ inner }}</aside>")
    definition = ShortcodeRegistry([tmp_path]).get_definition("note")

    assert not definition.declared
    assert definition.parameters == ()


@pytest.mark.unit
def test_malformed_definition_file(tmp_path):
    """Test a shortcode.yaml that is not a mapping is a configuration error."""
    _write_shortcode(tmp_path, "bad", "x", "- just\n- a list\n")

    with pytest.raises(ConfigError) as exc_info:
        ShortcodeRegistry([tmp_path]).get_definition("bad")

    assert "must contain a mapping" in str(exc_info.value)


@pytest.mark.unit
def test_template_syntax_error(tmp_path):
    """Test a broken template surfaces as ShortcodeRenderError."""
    _write_shortcode(tmp_path, "broken", "{% if %}")

    with pytest.raises(ShortcodeRenderError) as exc_info:
        ShortcodeRegistry([tmp_path]).get_template("broken")

    error = exc_info.value
    assert "Template failed to load" in error.message
    assert error.template_path == tmp_path / "broken" / TEMPLATE_FILENAME
    assert error.original_error is not None


@pytest.mark.unit
def test_autoescape_enabled():
    """Test argument values are HTML-escaped."""
    template = ShortcodeRegistry().get_template("details")
    output = template.render(params={"summary": "<b>", "open": "false"}, inner="x")

    assert "<summary>&lt;b&gt;</summary>" in output
    assert "<details>" in output
