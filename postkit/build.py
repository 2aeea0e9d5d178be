"""Rendering posts to HTML files.

This module loads the project configuration, renders every post in the
content directory and writes one HTML fragment per post.

Key functions:
- load_config: Loads project configuration from postkit.yaml.
- render_posts: Renders all posts into the output directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .collections import PostCollection
from .content import FilePostLoader, Post, load_post
from .frontmatter import PostFormatError
from .renderers import RendererRegistry
from .utils import ensure_clean_dir


class BuildError(Exception):
    """Error while rendering posts, with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


CONFIG_FILENAME = "postkit.yaml"

DEFAULT_CONFIG = {
    "content_dir": "content",
    "output_dir": "public",
    "strict_fences": False,
    "highlight": True,
}


@dataclass
class BuildResult:
    """Result of a render run.

    Attributes:
        posts: Posts that were written, newest first.
        output_dir: Directory the HTML files were written to.
        config: Configuration used for the run.
    """

    posts: PostCollection
    output_dir: Path
    config: dict[str, Any]


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from postkit.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def render_posts(
    project_root: Path,
    include_drafts: bool = False,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Render every post to ``<output_dir>/<slug>.html``.

    The output directory is emptied first. Drafts are skipped unless
    ``include_drafts`` is set.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to render draft posts.
        output_dir_override: Optional output directory instead of the configured one.

    Returns:
        BuildResult with the rendered posts.

    Raises:
        FileNotFoundError: If the content directory does not exist.
        ValueError: If the output directory would contain the content directory.
        BuildError: If a post cannot be parsed or rendered.
    """
    config = load_config(project_root)
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")
    output_dir = output_dir_override or (project_root / config["output_dir"])
    if content_dir.resolve().is_relative_to(output_dir.resolve()):
        raise ValueError(
            f"Refusing to clean output directory {output_dir}: it contains the content directory"
        )
    ensure_clean_dir(output_dir)

    registry = RendererRegistry(highlight=bool(config.get("highlight", True)))
    written: dict[str, Post] = {}
    for path in FilePostLoader(content_dir).iter_files():
        try:
            post = load_post(path)
        except PostFormatError as exc:
            raise BuildError(path, exc.message, exc) from exc
        if post.draft and not include_drafts:
            continue
        if post.slug in written:
            raise BuildError(
                path, f"slug '{post.slug}' is already used by {written[post.slug].path}"
            )
        renderer = registry.get_renderer(path)
        if renderer is None:
            raise BuildError(path, "no renderer for this file type")
        try:
            html, _ = renderer.render(post.body)
        except Exception as exc:
            raise BuildError(path, _format_error_message(exc), exc) from exc
        (output_dir / f"{post.slug}.html").write_text(html, encoding="utf-8")
        written[post.slug] = post

    return BuildResult(
        posts=PostCollection(written.values()).sorted(),
        output_dir=output_dir,
        config=config,
    )


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message."""
    return f"{type(exc).__name__}: {exc}"
