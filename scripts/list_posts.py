#!/usr/bin/env python3
"""
List posts by date.

Usage:
    python scripts/list_posts.py
    python scripts/list_posts.py --tag java --drafts
    python scripts/list_posts.py path/to/content --taxonomy categories
"""

from pathlib import Path
from typing import Optional

import typer

from folio.config import LOGS_PATH, SITE_CONFIG_PATH, load_site_config
from folio.contexts.content.collection import TAXONOMIES, ContentCollection
from folio.contexts.content.logger import setup_content_logger
from folio.exceptions import ConfigError
from folio.utils.timestamp import now

app = typer.Typer(help="List blog posts.", add_completion=False)


@app.command()
def main(
    content_dir: Optional[Path] = typer.Argument(
        None, help="Content directory (defaults to content_dir from the site config)"
    ),
    config_path: Path = typer.Option(SITE_CONFIG_PATH, "--config", "-c", help="Path to site.yaml"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Only posts with this tag"),
    category: Optional[str] = typer.Option(None, "--category", help="Only posts in this category"),
    drafts: bool = typer.Option(False, "--drafts", help="Include drafts"),
    taxonomy: Optional[str] = typer.Option(
        None, "--taxonomy", help="Show term counts for 'tags' or 'categories' instead"
    ),
    logs_path: Path = typer.Option(LOGS_PATH, "--logs-path", help="Root directory for run logs"),
):
    """List posts newest first, or the terms of a taxonomy."""
    try:
        site = load_site_config(config_path)
    except ConfigError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(2)

    content_dir = content_dir or site.content_dir
    setup_content_logger(
        logs_path / f"list_{now()}", content_dir=content_dir, console_level="WARNING"
    )

    try:
        collection = ContentCollection.load(content_dir, post_sections=site.post_sections)
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    include_drafts = drafts or site.build_drafts

    if taxonomy:
        if taxonomy not in TAXONOMIES:
            typer.echo(f"ERROR: Unknown taxonomy '{taxonomy}'. Valid: {TAXONOMIES}", err=True)
            raise typer.Exit(1)
        for term, posts in collection.taxonomy(taxonomy, include_drafts=include_drafts).items():
            typer.echo(f"{term}: {len(posts)}")
        return

    posts = collection.posts(include_drafts=include_drafts)
    if tag:
        posts = [post for post in posts if tag in post.tags]
    if category:
        posts = [post for post in posts if category in post.categories]

    for post in posts:
        marker = " [draft]" if post.draft else ""
        tags = f"  ({', '.join(post.tags)})" if post.tags else ""
        typer.echo(f"{post.date.isoformat()}  {post.title}{marker}{tags}")

    typer.echo(f"\n{len(posts)} posts")

    if collection.failures:
        typer.secho(
            f"! {len(collection.failures)} files failed to load (run check_content.py for details)",
            fg=typer.colors.YELLOW,
            err=True,
        )


if __name__ == "__main__":
    app()
