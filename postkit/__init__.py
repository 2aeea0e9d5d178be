"""postkit: tooling for a Markdown blog post with YAML front matter.

The package loads posts, validates their front matter, flags fenced code
blocks that were never closed, renders Markdown to HTML and lists the posts
that are ready to publish.

The main entry point is the CLI module, which provides commands for checking,
rendering, listing, creating and publishing posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
