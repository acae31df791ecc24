"""
Integration tests for rendering content files and trees.

Rendered files keep their front-matter (re-emitted as YAML) and have every
shortcode in the body expanded.
"""

from datetime import date
from pathlib import Path

import pytest

from folio.contexts.content.document_structure import Page, Post
from folio.contexts.content.frontmatter import split_front_matter
from folio.contexts.templating.registries import ShortcodeRegistry
from folio.contexts.templating.renderer import ShortcodeRenderer, render_file, render_tree

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
SITE = FIXTURES_PATH / "site"
BROKEN = FIXTURES_PATH / "broken_site"


@pytest.fixture
def site_renderer():
    return ShortcodeRenderer(ShortcodeRegistry([SITE / "shortcodes"]))


@pytest.mark.integration
def test_render_tree_fixture_site(tmp_path, site_renderer):
    """Test every published document is rendered into a mirrored tree."""
    results = render_tree(SITE / "content", tmp_path, renderer=site_renderer)

    assert all(result.success for result in results)
    written = sorted(str(path.relative_to(tmp_path)) for path in tmp_path.rglob("*.md"))
    assert written == ["about.md", "posts/functors-in-java.md", "posts/monads/index.md"]
    assert sum(result.shortcode_count for result in results) == 7


@pytest.mark.integration
def test_render_tree_with_drafts(tmp_path, site_renderer):
    """Test drafts are rendered only when requested."""
    render_tree(SITE / "content", tmp_path, renderer=site_renderer, include_drafts=True)

    assert (tmp_path / "posts" / "optional-chaining.md").exists()


@pytest.mark.integration
def test_rendered_page_content(tmp_path, site_renderer):
    """Test the rendered About page keeps metadata and expands shortcodes."""
    render_tree(SITE / "content", tmp_path, renderer=site_renderer)
    rendered = split_front_matter((tmp_path / "about.md").read_text(encoding="utf-8"))

    assert rendered.format == "yaml"
    assert rendered.data["title"] == "About"
    assert rendered.data["date"] == date(2020, 1, 15)
    assert rendered.data["aliases"] == ["/cv/", "/resume"]

    assert "{{<" not in rendered.body
    assert '<span class="cv-entry-title">Senior Software Engineer</span>' in rendered.body
    assert '<span class="cv-entry-location">Berlin</span>' in rendered.body
    assert "<strong>" not in rendered.body
    assert "Led the migration of the billing platform to **Java 17**." in rendered.body
    assert "<summary>Older positions</summary>" in rendered.body
    assert '<span class="cv-entry-organization">Globex</span>' in rendered.body
    assert "I write about functional programming on the JVM." in rendered.body


@pytest.mark.integration
def test_rendered_toml_post_becomes_yaml(tmp_path, site_renderer):
    """Test TOML front-matter is re-emitted as YAML with the same values."""
    render_tree(SITE / "content", tmp_path, renderer=site_renderer)
    text = (tmp_path / "posts" / "monads" / "index.md").read_text(encoding="utf-8")
    rendered = split_front_matter(text)

    assert text.startswith("---\n")
    assert rendered.data["title"] == "Monads Without Tears"
    assert rendered.data["tags"] == ["java", "monads", "functional-programming"]
    assert '<aside class="note">Assumes you read the functor post.</aside>' in rendered.body
    assert '<img src="diagram.svg" alt="Bind, drawn">' in rendered.body


@pytest.mark.integration
def test_escaped_shortcode_survives_rendering(tmp_path, site_renderer):
    """Test escaped tags come out as literal tag text."""
    render_tree(SITE / "content", tmp_path, renderer=site_renderer)
    body = (tmp_path / "posts" / "functors-in-java.md").read_text(encoding="utf-8")

    assert '{{< figure src="x.png" >}}' in body
    assert '<figcaption>Mapping over a box</figcaption>' in body


@pytest.mark.integration
def test_render_tree_broken_site(tmp_path):
    """Test failures are reported per file and valid files are still written."""
    results = render_tree(BROKEN / "content", tmp_path)
    failed = {result.input_path.name for result in results if not result.success}

    assert {"bad-yaml.md", "no-title.md", "missing-param.md", "unknown.md"} <= failed
    assert (tmp_path / "first.md").exists()
    assert (tmp_path / "posts" / "missing-image.md").exists()
    assert not (tmp_path / "posts" / "missing-param.md").exists()


@pytest.mark.integration
def test_render_tree_skips_alias_conflicts(tmp_path):
    """Test a file that loses an alias conflict gets one failed result and is not written."""
    results = render_tree(BROKEN / "content", tmp_path)
    second = [result for result in results if result.input_path.name == "second.md"]

    assert len(second) == 1
    assert not second[0].success
    assert "already claimed" in second[0].error
    assert not (tmp_path / "second.md").exists()
    assert len(results) == len({result.input_path for result in results})


@pytest.mark.integration
def test_render_file_reports_errors(tmp_path):
    """Test render_file captures content errors in its result."""
    source = BROKEN / "content" / "posts" / "missing-param.md"
    result = render_file(source, tmp_path / "out.md", ShortcodeRenderer(), Post)

    assert not result.success
    assert result.output_path is None
    assert "missing-param.md:8" in result.error
    assert not (tmp_path / "out.md").exists()


@pytest.mark.integration
def test_render_file_without_front_matter(tmp_path):
    """Test a file with no front-matter fails as a Page without a title."""
    source = tmp_path / "plain.md"
    source.write_text("Just text\n", encoding="utf-8")

    result = render_file(source, tmp_path / "out" / "plain.md", ShortcodeRenderer(), Page)

    assert not result.success
    assert "missing a title" in result.error


@pytest.mark.integration
def test_render_tree_toml_local_time(tmp_path):
    """Test a TOML time of day is written as a string instead of aborting the tree."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "about.md").write_text(
        '+++\ntitle = "About"\nupdated = 07:32:00\n+++\nHello\n', encoding="utf-8"
    )
    (content / "contact.md").write_text('---\ntitle: "Contact"\n---\nMail me\n', encoding="utf-8")

    results = render_tree(content, tmp_path / "out")

    assert [result.success for result in results] == [True, True]
    rendered = split_front_matter((tmp_path / "out" / "about.md").read_text(encoding="utf-8"))
    assert rendered.data == {"title": "About", "updated": "07:32:00"}
    assert rendered.body == "Hello\n"
    assert (tmp_path / "out" / "contact.md").exists()
