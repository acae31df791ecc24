"""Unit tests for binding invocation arguments to declared parameters."""

from pathlib import Path

import pytest

from folio.contexts.templating.exceptions import ShortcodeParameterError
from folio.contexts.templating.parameters import bind_parameters
from folio.contexts.templating.shortcode_parser import parse_shortcodes
from folio.contexts.templating.shortcode_structure import ShortcodeDefinition
from folio.exceptions import ConfigError

CV_ENTRY = ShortcodeDefinition.from_config(
    "cv_entry",
    {
        "inner": "optional",
        "params": [
            {"name": "title", "required": True},
            {"name": "organization", "required": True},
            {"name": "period", "default": ""},
            {"name": "location", "default": ""},
        ],
    },
    template_path=Path("cv_entry/template.html.jinja"),
)

FIGURE = ShortcodeDefinition.from_config(
    "figure",
    {"inner": "none", "params": [{"name": "src", "required": True, "kind": "path"}, "caption"]},
    template_path=Path("figure/template.html.jinja"),
)

DETAILS = ShortcodeDefinition.from_config(
    "details",
    {"inner": "required", "params": [{"name": "summary", "required": True}]},
    template_path=Path("details/template.html.jinja"),
)


def _invocation(text):
    return next(segment for segment in parse_shortcodes(text) if not isinstance(segment, str))


@pytest.mark.unit
def test_bind_positional():
    """Test positional arguments fill parameters in declaration order."""
    params = bind_parameters(CV_ENTRY, _invocation('{{< cv_entry "Engineer" "Acme" >}}'))

    assert params == {"title": "Engineer", "organization": "Acme", "period": "", "location": ""}


@pytest.mark.unit
def test_bind_named_keeps_declaration_order():
    """Test named arguments bind by name and the result follows declaration order."""
    invocation = _invocation('{{< cv_entry location=Berlin organization=Acme title=CTO >}}')
    params = bind_parameters(CV_ENTRY, invocation)

    assert list(params) == ["title", "organization", "period", "location"]
    assert params["location"] == "Berlin"


@pytest.mark.unit
def test_missing_required_parameters():
    """Test every missing required parameter is named."""
    with pytest.raises(ShortcodeParameterError) as exc_info:
        bind_parameters(CV_ENTRY, _invocation("text\n{{< cv_entry period=2020 >}}"))

    error = exc_info.value
    assert "Missing required parameter(s): title, organization" in error.message
    assert error.shortcode_name == "cv_entry"
    assert error.line == 2


@pytest.mark.unit
def test_too_many_positional():
    """Test surplus positional arguments."""
    with pytest.raises(ShortcodeParameterError) as exc_info:
        bind_parameters(CV_ENTRY, _invocation("{{< cv_entry a b c d e >}}"))

    assert "Takes at most 4 positional arguments" in exc_info.value.message


@pytest.mark.unit
def test_unknown_named_parameter():
    """Test named arguments must be declared."""
    with pytest.raises(ShortcodeParameterError) as exc_info:
        bind_parameters(FIGURE, _invocation("{{< figure src=a.png colour=red >}}"))

    assert "Unknown parameter(s) ['colour']" in exc_info.value.message


@pytest.mark.unit
def test_string_parameter_declaration():
    """Test a bare string in params declares an optional parameter."""
    caption = FIGURE.get_parameter("caption")

    assert caption is not None
    assert caption.required is False
    assert caption.default is None
    assert FIGURE.get_parameter("src").kind == "path"


@pytest.mark.unit
def test_inner_required():
    """Test a body is required when inner is 'required'."""
    with pytest.raises(ShortcodeParameterError) as exc_info:
        bind_parameters(DETAILS, _invocation('{{< details summary="More" >}}'))

    assert "Requires a body" in exc_info.value.message
    assert "{{< /details >}}" in exc_info.value.message


@pytest.mark.unit
def test_inner_none():
    """Test a body is rejected when inner is 'none'."""
    with pytest.raises(ShortcodeParameterError) as exc_info:
        bind_parameters(FIGURE, _invocation("{{< figure src=a.png >}}x{{< /figure >}}"))

    assert "Does not accept a body" in exc_info.value.message


@pytest.mark.unit
def test_undeclared_shortcode_passes_named_through():
    """Test shortcodes without shortcode.yaml accept any named argument."""
    undeclared = ShortcodeDefinition(
        name="note", template_path=Path("note/template.html.jinja"), declared=False
    )
    params = bind_parameters(undeclared, _invocation("{{< note kind=warning >}}"))

    assert params == {"kind": "warning"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "config,message",
    [
        ({"inner": "sometimes"}, "invalid inner policy"),
        ({"params": [{"required": True}]}, "parameter without a name"),
        ({"params": ["a", "a"]}, "declares parameter 'a' twice"),
        ({"params": [{"name": "a", "kind": "url"}]}, "invalid kind 'url'"),
    ],
)
def test_malformed_definitions(config, message):
    """Test shortcode.yaml problems are configuration errors."""
    with pytest.raises(ConfigError) as exc_info:
        ShortcodeDefinition.from_config("x", config, template_path=Path("x/template.html.jinja"))

    assert message in str(exc_info.value)
