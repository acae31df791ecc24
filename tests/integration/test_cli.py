"""
Smoke tests for the command-line scripts.

Each CLI runs against the fixture sites through typer's CliRunner with logs
written under tmp_path.
"""

from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from scripts.check_content import app as check_app
from scripts.list_posts import app as list_app
from scripts.render_content import app as render_app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
SITE_CONFIG = FIXTURES_PATH / "site" / "site.yaml"
BROKEN_CONFIG = FIXTURES_PATH / "broken_site" / "site.yaml"

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logger():
    # The CLIs attach a sink to the runner's captured stdout
    yield
    logger.remove()


@pytest.mark.integration
def test_check_valid_site(tmp_path):
    """Test a valid site exits 0 with a summary."""
    result = runner.invoke(
        check_app, ["check", "--config", str(SITE_CONFIG), "--logs-path", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert "Checked 4 documents, 7 shortcodes: 0 errors, 0 warnings" in result.output
    assert "Content is valid" in result.output
    assert list(tmp_path.glob("check_*/validate.log"))


@pytest.mark.integration
def test_check_broken_site(tmp_path):
    """Test errors are listed and the exit status is 1."""
    result = runner.invoke(
        check_app, ["check", "--config", str(BROKEN_CONFIG), "--logs-path", str(tmp_path)]
    )

    assert result.exit_code == 1
    assert "error:shortcode_parameter::posts/missing-param.md:8::" in result.output
    assert "error:unknown_shortcode::posts/unknown.md:6::" in result.output
    assert "Content has errors" in result.output


@pytest.mark.integration
def test_check_missing_content_dir(tmp_path):
    """Test a missing content directory exits 1."""
    result = runner.invoke(
        check_app,
        [
            "check",
            str(tmp_path / "missing"),
            "--config",
            str(SITE_CONFIG),
            "--logs-path",
            str(tmp_path / "logs"),
        ],
    )

    assert result.exit_code == 1
    assert "Content directory not found" in result.output


@pytest.mark.integration
def test_check_invalid_config(tmp_path):
    """Test a malformed site config exits 2."""
    config = tmp_path / "site.yaml"
    config.write_text("titel: typo\n", encoding="utf-8")

    result = runner.invoke(check_app, ["check", "--config", str(config)])

    assert result.exit_code == 2


@pytest.mark.integration
def test_check_shows_help_without_command():
    result = runner.invoke(check_app, [])

    assert result.exit_code == 0
    assert "check" in result.output


@pytest.mark.integration
def test_render_single_file_to_stdout():
    """Test rendering one file prints the expanded body."""
    source = FIXTURES_PATH / "site" / "content" / "posts" / "functors-in-java.md"
    result = runner.invoke(render_app, ["render", str(source), "--config", str(SITE_CONFIG)])

    assert result.exit_code == 0, result.output
    assert "<figcaption>Mapping over a box</figcaption>" in result.output
    assert "title:" not in result.output


@pytest.mark.integration
def test_render_tree(tmp_path):
    """Test rendering the content tree writes every published file."""
    out = tmp_path / "rendered"
    result = runner.invoke(
        render_app,
        [
            "render",
            str(FIXTURES_PATH / "site" / "content"),
            "--out",
            str(out),
            "--config",
            str(SITE_CONFIG),
            "--logs-path",
            str(tmp_path / "logs"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert f"Rendered 3 of 3 files into {out}" in result.output
    assert (out / "posts" / "monads" / "index.md").exists()


@pytest.mark.integration
def test_render_file_with_error():
    """Test a render failure exits 1."""
    source = FIXTURES_PATH / "broken_site" / "content" / "posts" / "unknown.md"
    result = runner.invoke(render_app, ["render", str(source), "--config", str(BROKEN_CONFIG)])

    assert result.exit_code == 1
    assert "[youtube] Shortcode not found" in result.output


@pytest.mark.integration
def test_list_shortcodes():
    """Test bundled and site shortcodes are listed with their parameters."""
    result = runner.invoke(render_app, ["shortcodes", "--config", str(SITE_CONFIG)])

    assert result.exit_code == 0, result.output
    for name in ("cv_entry", "details", "figure", "note"):
        assert name in result.output
    assert "- src (required, path)" in result.output
    assert "undeclared" in result.output


@pytest.mark.integration
def test_list_posts(tmp_path):
    """Test posts are listed newest first without drafts."""
    result = runner.invoke(
        list_app, ["--config", str(SITE_CONFIG), "--logs-path", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("2019-06-10  Monads Without Tears")
    assert lines[1].startswith("2019-03-01  Functors in Java")
    assert "2 posts" in result.output
    assert "Optional Chaining" not in result.output


@pytest.mark.integration
def test_list_posts_with_drafts_and_tag(tmp_path):
    """Test filtering by tag with drafts included."""
    result = runner.invoke(
        list_app,
        ["--config", str(SITE_CONFIG), "--drafts", "--tag", "java", "--logs-path", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    assert "Optional Chaining [draft]" in result.output
    assert "3 posts" in result.output


@pytest.mark.integration
def test_list_taxonomy(tmp_path):
    """Test term counts."""
    result = runner.invoke(
        list_app,
        ["--config", str(SITE_CONFIG), "--taxonomy", "tags", "--logs-path", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    assert "java: 2" in result.output
    assert "monads: 1" in result.output


@pytest.fixture
def site_with_broken_shortcode(tmp_path):
    """A site whose only shortcode has a shortcode.yaml that is not a mapping."""
    (tmp_path / "site.yaml").write_text('title: "Broken shortcode"\n', encoding="utf-8")
    content = tmp_path / "content"
    content.mkdir()
    (content / "about.md").write_text(
        '---\ntitle: "About"\n---\n{{< note >}}Hi{{< /note >}}\n', encoding="utf-8"
    )
    shortcode = tmp_path / "shortcodes" / "note"
    shortcode.mkdir(parents=True)
    (shortcode / "template.html.jinja").write_text("<aside>{{ inner }}</aside>", encoding="utf-8")
    (shortcode / "shortcode.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")
    return tmp_path


@pytest.mark.integration
def test_render_tree_with_broken_shortcode_config(site_with_broken_shortcode):
    """Test a malformed shortcode.yaml exits 2 when rendering a tree."""
    site = site_with_broken_shortcode
    result = runner.invoke(
        render_app,
        [
            "render",
            str(site / "content"),
            "--out",
            str(site / "out"),
            "--config",
            str(site / "site.yaml"),
            "--logs-path",
            str(site / "logs"),
        ],
    )

    assert result.exit_code == 2
    assert "must contain a mapping" in result.output
    assert not (site / "out" / "about.md").exists()


@pytest.mark.integration
@pytest.mark.parametrize("write_to_file", [False, True])
def test_render_file_with_broken_shortcode_config(site_with_broken_shortcode, write_to_file):
    """Test a malformed shortcode.yaml exits 2 when rendering one file."""
    site = site_with_broken_shortcode
    args = ["render", str(site / "content" / "about.md"), "--config", str(site / "site.yaml")]
    if write_to_file:
        args += ["--out", str(site / "out.md"), "--logs-path", str(site / "logs")]

    result = runner.invoke(render_app, args)

    assert result.exit_code == 2
    assert "must contain a mapping" in result.output
