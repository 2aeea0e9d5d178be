"""Content renderers for postkit.

Renders a post body from Markdown to an HTML fragment. Headings get
stable anchor ids and fenced code blocks tagged with a language are
highlighted with Pygments.

Rendering is a pure function of the input text: every call builds a fresh
parser and renderer, so rendering the same body twice gives identical
output.

Key classes:
- Heading: A heading collected while rendering.
- MarkdownRenderer: Renders Markdown to HTML.
- RendererRegistry: Picks a renderer for a file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .utils import MARKDOWN_SUFFIXES, escape_html

if TYPE_CHECKING:
    from .content import Post
    from .protocols import ContentRenderer


@dataclass
class Heading:
    """A heading extracted while rendering.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The rendered text of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer with heading anchors and syntax highlighting.

    Attributes:
        headings: Headings collected during rendering, in order.
        use_highlight: Whether to run fenced code through Pygments.
    """

    def __init__(self, use_highlight: bool = True):
        super().__init__(escape=False)
        self.use_highlight = use_highlight
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading with an id that is unique within the document."""
        base_id = _generate_heading_id(text) or "section"

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        self.headings.append(Heading(id=heading_id, text=text, level=level))
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block, highlighted when its language is known.

        Args:
            code: The code content.
            info: Info string of the fence (e.g., 'java').

        Returns:
            HTML string for the block.
        """
        language = info.split()[0] if info and info.strip() else ""
        if language and self.use_highlight:
            try:
                lexer = get_lexer_by_name(language, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        lang_class = f' class="language-{escape_html(language)}"' if language else ""
        return f"<pre><code{lang_class}>{escape_html(code)}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown post bodies to HTML."""

    def __init__(self, highlight: bool = True):
        """Initialize the renderer.

        Args:
            highlight: Whether to syntax-highlight fenced code blocks.
        """
        self.highlight = highlight

    @property
    def source_type(self) -> str:
        """Return the source type identifier."""
        return "markdown"

    def can_render(self, path: Path) -> bool:
        return path.suffix.lower() in MARKDOWN_SUFFIXES

    def render(self, content: str) -> tuple[str, list[Heading]]:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            Tuple of (rendered HTML, list of Heading objects).
        """
        renderer = _HighlightRenderer(use_highlight=self.highlight)
        markdown = mistune.create_markdown(
            renderer=renderer, plugins=["strikethrough", "footnotes", "table", "url"]
        )
        html = markdown(content)
        return html, renderer.headings


class RendererRegistry:
    """Registry of content renderers, checked in registration order."""

    def __init__(self, highlight: bool = True):
        """Initialize the registry with the Markdown renderer."""
        self._renderers: list[ContentRenderer] = []
        self.register(MarkdownRenderer(highlight=highlight))

    def register(self, renderer: ContentRenderer) -> None:
        """Register a new renderer."""
        self._renderers.append(renderer)

    def get_renderer(self, path: Path) -> ContentRenderer | None:
        """Return the first renderer that can handle ``path``, or None."""
        for renderer in self._renderers:
            if renderer.can_render(path):
                return renderer
        return None


def render_post(post: Post, highlight: bool = True) -> str:
    """Render a post's body to HTML. The front matter is not rendered."""
    html, _ = MarkdownRenderer(highlight=highlight).render(post.body)
    return html
