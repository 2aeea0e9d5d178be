"""Utility functions for postkit.

This module contains small helpers shared by the rest of the package:
string processing, path checks and output directory handling.

Key functions:
    slugify: Convert filenames or titles to URL slugs.
    escape_html: Escape special HTML characters.
    is_markdown: Check if a path is a Markdown file.
    is_internal_path: Check if a path lives under an underscore directory.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

MARKDOWN_SUFFIXES = (".md", ".markdown")


def slugify(name: str) -> str:
    """Convert a filename stem or a title to a slug, dropping any date prefix.

    Args:
        name: Filename stem or free-form title.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("2019-03-10-solid-principles")
        'solid-principles'

        >>> slugify("SOLID Principles")
        'solid-principles'
    """
    cleaned = name
    if "-" in cleaned:
        parts = cleaned.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            cleaned = "-".join(parts[3:])
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Args:
        text: Text to escape.

    Returns:
        Text with &, <, > and double quotes replaced by entities.
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a Markdown extension (case-insensitive).
    """
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (a directory component starts with _).

    Args:
        path: Relative path to check.

    Returns:
        True if any parent component starts with an underscore.
    """
    return any(part.startswith("_") for part in path.parts[:-1])


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)
