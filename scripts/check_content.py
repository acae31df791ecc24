#!/usr/bin/env python3
"""
Content Validation CLI

Checks a content tree the way a site build would and reports every problem:
broken front-matter, shortcodes that fail to resolve, dangling file references.

Examples:\n

    check_content.py check                          # Use content_dir from site.yaml

    check_content.py check path/to/content          # Check a specific tree

    check_content.py check --config site.yaml -v    # Show every issue in the log
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from folio.config import LOGS_PATH, SITE_CONFIG_PATH, load_site_config
from folio.contexts.validation.logger import setup_validation_logger
from folio.contexts.validation.validator import generate_report, validate_content_dir
from folio.exceptions import ConfigError
from folio.utils.timestamp import now

app = typer.Typer(
    help="Validate blog content: front-matter, shortcodes and file references",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("check")
def check_command(
    content_dir: Annotated[
        Optional[Path],
        typer.Argument(help="Content directory (defaults to content_dir from the site config)"),
    ] = None,
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="Path to site.yaml"),
    ] = SITE_CONFIG_PATH,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every issue, not just the first few"),
    ] = False,
    logs_path: Annotated[
        Path,
        typer.Option("--logs-path", help="Root directory for run logs"),
    ] = LOGS_PATH,
):
    """
    Validate a content tree and print a report.

    Exits with status 1 when any error is found; warnings alone pass.
    """
    try:
        site = load_site_config(config_path)
    except ConfigError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    content_dir = content_dir or site.content_dir

    log_dir = logs_path / f"check_{now()}"
    log_file = setup_validation_logger(log_dir, content_dir=content_dir)

    try:
        result = validate_content_dir(
            content_dir,
            static_dir=site.static_dir,
            shortcode_paths=site.shortcode_search_paths,
            post_sections=site.post_sections,
            verbose=verbose,
        )
    except FileNotFoundError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ConfigError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    typer.echo("")
    typer.echo(generate_report(result, relative_to=content_dir))
    typer.echo(f"Log: {log_file}")

    if not result.is_valid:
        typer.secho("\n✗ Content has errors", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("\n✓ Content is valid", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
