"""Post loading and lifecycle for postkit.

This module turns Markdown files with front matter into Post objects,
writes them back out byte for byte, and implements the one lifecycle
transition a post has: publishing.

Key classes:
- Post: Frozen dataclass for a single post.
- FilePostLoader: Discovers post files under a content directory.
- PostProcessor: Facade that loads every post, drafts optional.

Key functions:
- parse_post / load_post: Build a Post from text or from a file.
- new_post: Build a fresh draft.
- publish: Return a published copy of a post.
- write_post: Write a post back to disk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .frontmatter import (
    CompositeFieldExtractor,
    PostFormatError,
    dump_frontmatter,
    parse_frontmatter,
    split_frontmatter,
)
from .utils import is_internal_path, is_markdown, slugify

if TYPE_CHECKING:
    from .protocols import ContentLoader

DRAFT_LINE_RE = re.compile(
    r"^(?P<prefix>(?:draft|\"draft\"|'draft')[ \t]*:[ \t]*(?:!!bool[ \t]+)?)"
    r"(?P<value>true|True|TRUE|yes|Yes|YES|on|On|ON)\b",
    re.MULTILINE,
)


@dataclass(frozen=True)
class Post:
    """A blog post: front matter fields plus an immutable Markdown body.

    Attributes:
        title: Post title.
        date: Publication timestamp.
        draft: Whether the post is unpublished.
        body: Markdown text following the front matter.
        slug: URL-friendly name, from the file stem or the title.
        path: Source file, when loaded from disk.
        frontmatter: Full parsed front matter mapping.
        raw_frontmatter: Exact front matter text, delimiters included.
        body_line: 1-based line where the body starts in the source.
    """

    title: str
    date: datetime
    draft: bool
    body: str
    slug: str
    path: Path | None = None
    frontmatter: dict[str, Any] = field(default_factory=dict, compare=False)
    raw_frontmatter: str = ""
    body_line: int = 1

    def to_text(self) -> str:
        """Serialize the post.

        A post parsed from text serializes back to exactly that text.
        """
        if self.raw_frontmatter:
            return self.raw_frontmatter + self.body
        return dump_frontmatter(self.title, self.date, self.draft) + self.body


def parse_post(
    text: str,
    path: Path | None = None,
    extractor: CompositeFieldExtractor | None = None,
) -> Post:
    """Build a Post from source text.

    Args:
        text: Full file content.
        path: Optional source path, used for the slug and error messages.
        extractor: Optional custom field extractor.

    Returns:
        Post object.

    Raises:
        PostFormatError: If the front matter is missing or invalid.
    """
    try:
        block = split_frontmatter(text)
        fields = parse_frontmatter(block, extractor)
    except PostFormatError as exc:
        if exc.path is None:
            exc.path = path
        raise
    slug = slugify(path.stem) if path is not None else slugify(fields["title"])
    return Post(
        title=fields["title"],
        date=fields["date"],
        draft=fields["draft"],
        body=block.body,
        slug=slug,
        path=path,
        frontmatter=fields["frontmatter"],
        raw_frontmatter=block.raw,
        body_line=block.body_line,
    )


def read_text(path: Path) -> str:
    """Read a file as UTF-8 without translating line endings.

    Raises:
        PostFormatError: If the file is not valid UTF-8.
    """
    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PostFormatError(
            f"file is not valid UTF-8 (byte 0x{data[exc.start]:02x} at offset {exc.start})",
            line=data.count(b"\n", 0, exc.start) + 1,
            path=path,
        ) from exc


def load_post(path: Path) -> Post:
    """Load and parse a post file."""
    return parse_post(read_text(path), path)


def write_post(post: Post, path: Path | None = None) -> Path:
    """Write a post to disk.

    Args:
        post: Post to write.
        path: Target path, defaults to the post's own path.

    Returns:
        The path written to.
    """
    target = path or post.path
    if target is None:
        raise ValueError("post has no path; pass one explicitly")
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8", newline="") as f:
        f.write(post.to_text())
    return target


def new_post(title: str, when: datetime, body: str = "\n") -> Post:
    """Create a new draft post.

    Args:
        title: Post title.
        when: Timestamp to record as the post date.
        body: Initial Markdown body.

    Returns:
        Draft Post with no source path.
    """
    return Post(
        title=title,
        date=when,
        draft=True,
        body=body,
        slug=slugify(title),
        frontmatter={"title": title, "date": when, "draft": True},
    )


def publish(post: Post) -> Post:
    """Return a copy of ``post`` with the draft flag cleared.

    Only the ``draft:`` line of the front matter changes, the body is
    left as is. Publishing a published post returns it unchanged.

    Raises:
        PostFormatError: If the draft line cannot be rewritten in place.
    """
    if not post.draft:
        return post
    raw = post.raw_frontmatter
    if raw:
        raw, count = DRAFT_LINE_RE.subn(r"\g<prefix>false", raw, count=1)
        if not count:
            raise PostFormatError(
                "cannot locate the 'draft: true' line in front matter", path=post.path
            )
    return replace(
        post,
        draft=False,
        raw_frontmatter=raw,
        frontmatter={**post.frontmatter, "draft": False},
    )


class FilePostLoader:
    """Discovers post files under a content directory.

    Directories starting with an underscore are skipped.

    Attributes:
        content_dir: Directory containing posts.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return every Markdown file, sorted by relative path."""
        files: list[Path] = []
        for path in self.content_dir.rglob("*"):
            if path.is_dir() or not is_markdown(path):
                continue
            if is_internal_path(path.relative_to(self.content_dir)):
                continue
            files.append(path)
        return sorted(files)


class PostProcessor:
    """Facade for loading posts from a content directory.

    Attributes:
        content_dir: Directory containing posts.
    """

    def __init__(self, content_dir: Path, content_loader: ContentLoader | None = None):
        """Initialize the processor.

        Args:
            content_dir: Path to the content directory.
            content_loader: Optional custom content loader.
        """
        self.content_dir = content_dir
        self._content_loader = content_loader or FilePostLoader(content_dir)

    def load(self, include_drafts: bool = False) -> list[Post]:
        """Load every post.

        Args:
            include_drafts: Whether to keep posts marked as drafts.

        Returns:
            List of Post objects, in file order.

        Raises:
            PostFormatError: If any post cannot be parsed.
        """
        posts: list[Post] = []
        for path in self._content_loader.iter_files():
            post = load_post(path)
            if post.draft and not include_drafts:
                continue
            posts.append(post)
        return posts
