"""Command-line interface for postkit.

This module defines the CLI commands using the Click framework.

Commands:
- check: Report front matter problems and unterminated code fences.
- render: Render one post to HTML.
- list: List published posts, newest first.
- new: Create a new draft post.
- publish: Clear the draft flag of a post.
- build: Render every post into the output directory.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .build import BuildError, load_config, render_posts
from .checks import ERROR, check_file, has_errors
from .collections import PostCollection
from .content import FilePostLoader, PostProcessor, load_post, new_post, publish, write_post
from .frontmatter import PostFormatError
from .renderers import render_post
from .utils import slugify

_SEVERITY_COLORS = {"error": "red", "warning": "yellow"}


@click.group()
@click.version_option(version=__version__, prog_name="postkit")
def cli():
    """Tools for Markdown blog posts with front matter."""


@cli.command()
@click.argument(
    "paths", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--strict", is_flag=True, help="Treat unterminated code fences as errors")
def check(paths: tuple[Path, ...], strict: bool):
    """Check posts for front matter and code fence problems."""
    project_root = Path.cwd()
    config = load_config(project_root)
    strict = strict or bool(config.get("strict_fences"))
    files = list(paths) or FilePostLoader(_content_dir(project_root, config)).iter_files()

    failed = False
    total = 0
    for path in files:
        issues = check_file(path, strict_fences=strict)
        total += len(issues)
        for issue in issues:
            color = _SEVERITY_COLORS.get(issue.severity, "white")
            line = issue.format(_display_path(path, project_root))
            click.echo(click.style(line, fg=color, bold=issue.severity == ERROR))
        failed = failed or has_errors(issues)

    if failed:
        raise SystemExit(1)
    if not total:
        click.echo(f"Checked {len(files)} post(s), no issues found")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write HTML to this file instead of stdout",
)
def render(path: Path, output: Path | None):
    """Render a post body to HTML."""
    config = load_config(Path.cwd())
    post = _load_or_fail(path)
    html = render_post(post, highlight=bool(config.get("highlight", True)))
    if output is None:
        click.echo(html, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    click.echo(f"Wrote {output}")


@cli.command(name="list")
@click.option("--drafts", is_flag=True, help="Include draft posts")
def list_posts(drafts: bool):
    """List posts, newest first."""
    project_root = Path.cwd()
    config = load_config(project_root)
    processor = PostProcessor(_content_dir(project_root, config))
    try:
        posts = PostCollection(processor.load(include_drafts=drafts)).sorted()
    except PostFormatError as exc:
        raise click.ClickException(str(exc)) from None
    if not posts:
        click.echo("No published posts" if not drafts else "No posts")
        return
    for post in posts:
        line = f"{post.date:%Y-%m-%d}  {post.title}"
        if post.draft:
            line += "  " + click.style("[draft]", fg="yellow")
        click.echo(line)


@cli.command()
@click.argument("title", required=False)
def new(title: str | None):
    """Create a new draft post."""
    project_root = Path.cwd()
    config = load_config(project_root)
    content_dir = project_root / config["content_dir"]

    if title is None:
        title = questionary.text(
            "Post title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
    title = title.strip()
    if not title:
        raise click.ClickException("Title cannot be empty")

    target = content_dir / "posts" / f"{slugify(title)}.md"
    if target.exists():
        raise click.ClickException(
            f"File already exists: {_display_path(target, project_root)}"
        )
    when = datetime.now().astimezone().replace(microsecond=0)
    write_post(new_post(title, when), target)
    click.echo(f"Created {_display_path(target, project_root)}")


@cli.command(name="publish")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def publish_command(path: Path):
    """Mark a post as published."""
    post = _load_or_fail(path)
    if not post.draft:
        click.echo(f"{path} is already published")
        return
    try:
        published = publish(post)
    except PostFormatError as exc:
        raise click.ClickException(str(exc)) from None
    write_post(published, path)
    click.echo(f"Published {path}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def build(drafts: bool):
    """Render every post into the output directory."""
    project_root = Path.cwd()
    try:
        result = render_posts(project_root, include_drafts=drafts)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from None
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(
            click.style(f"  File: {_display_path(exc.source_path, project_root)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Rendered {len(result.posts)} posts into {result.output_dir}")


def _content_dir(project_root: Path, config: dict) -> Path:
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise click.ClickException(f"No content directory found at {content_dir}")
    return content_dir


def _load_or_fail(path: Path):
    try:
        return load_post(path)
    except PostFormatError as exc:
        raise click.ClickException(str(exc)) from None


def _display_path(path: Path, project_root: Path) -> Path:
    try:
        return path.resolve().relative_to(project_root.resolve())
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
