#!/usr/bin/env python3
"""
Shortcode Rendering CLI

Expands shortcodes in content files so the external site generator receives
plain Markdown/HTML.

Commands:
    render     - Render one file (to stdout or --out) or a whole content tree
    shortcodes - List available shortcodes and their parameters

Examples:\n

    render_content.py render content/about.md                 # Print rendered file

    render_content.py render content --out outs/rendered      # Render the whole tree

    render_content.py shortcodes                              # List shortcodes
"""

import time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from folio.config import LOGS_PATH, SITE_CONFIG_PATH, load_site_config
from folio.contexts.content.document_structure import Page, Post
from folio.contexts.templating.logger import (
    log_render_result,
    log_render_start,
    setup_templating_logger,
)
from folio.contexts.templating.registries import ShortcodeRegistry
from folio.contexts.templating.renderer import ShortcodeRenderer, render_file, render_tree
from folio.exceptions import ConfigError, ContentError
from folio.utils.timestamp import now

app = typer.Typer(
    help="Expand shortcodes in blog content",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_site(config_path: Path):
    try:
        return load_site_config(config_path)
    except ConfigError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)


def _document_class(source: Path, content_dir: Path, post_sections) -> type:
    try:
        relative = source.resolve().relative_to(content_dir.resolve())
    except ValueError:
        return Page
    return Post if relative.parts and relative.parts[0] in post_sections else Page


@app.command("render")
def render_command(
    source: Annotated[
        Path,
        typer.Argument(help="Content file or directory to render", exists=True),
    ],
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output file (for a file) or directory (for a tree)"),
    ] = None,
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="Path to site.yaml"),
    ] = SITE_CONFIG_PATH,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", help="Also render drafts when rendering a tree"),
    ] = False,
    logs_path: Annotated[
        Path,
        typer.Option("--logs-path", help="Root directory for run logs"),
    ] = LOGS_PATH,
):
    """
    Render shortcodes in a file or a whole content tree.

    A single file without --out is printed to stdout (body only, front-matter
    dropped). Everything else is written with its original front-matter.
    """
    site = _load_site(config_path)
    renderer = ShortcodeRenderer(ShortcodeRegistry(site.shortcode_search_paths))

    if source.is_file() and out is None:
        document_class = _document_class(source, site.content_dir, site.post_sections)
        try:
            document = document_class.from_file(source)
            rendered = renderer.render_document(document)
        except ContentError as e:
            typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        except ConfigError as e:
            typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
        typer.echo(rendered.body)
        return

    log_dir = logs_path / f"render_{now()}"
    log_file = setup_templating_logger(log_dir, phase="render")
    log_render_start(source.name, source, log_file)

    if source.is_file():
        start = time.time()
        document_class = _document_class(source, site.content_dir, site.post_sections)
        try:
            result = render_file(source, out, renderer, document_class)
        except ConfigError as e:
            typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
        log_render_result(source.name, result, time.time() - start)
        if not result.success:
            typer.secho(f"ERROR: {result.error}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        typer.secho(f"✓ Rendered {source} -> {out}", fg=typer.colors.GREEN)
        return

    output_dir = out or site.output_dir
    try:
        results = render_tree(
            source,
            output_dir,
            renderer=renderer,
            post_sections=site.post_sections,
            include_drafts=drafts or site.build_drafts,
        )
    except ConfigError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    failed = [result for result in results if not result.success]

    typer.echo(f"Rendered {len(results) - len(failed)} of {len(results)} files into {output_dir}")
    typer.echo(f"Log: {log_file}")
    if failed:
        for result in failed:
            typer.secho(f"  ✗ {result.input_path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command("shortcodes")
def shortcodes_command(
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="Path to site.yaml"),
    ] = SITE_CONFIG_PATH,
):
    """List available shortcodes with their parameters."""
    site = _load_site(config_path)
    registry = ShortcodeRegistry(site.shortcode_search_paths)

    try:
        definitions = registry.definitions()
    except ConfigError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    for definition in definitions:
        typer.secho(definition.name, bold=True)
        if definition.description:
            typer.echo(f"  {definition.description}")
        if not definition.declared:
            typer.echo("  (undeclared: named arguments pass through unchecked)")
            continue
        typer.echo(f"  body: {definition.inner}")
        for param in definition.parameters:
            flags = "required" if param.required else f"default: {param.default!r}"
            kind = f", {param.kind}" if param.kind != "text" else ""
            typer.echo(f"  - {param.name} ({flags}{kind}) {param.description}".rstrip())


if __name__ == "__main__":
    app()
