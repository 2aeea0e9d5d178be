"""Protocol definitions for postkit.

This module defines the interfaces used between the loading, validation
and rendering layers, so each concrete implementation can be swapped
out in tests or extended without touching its callers.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .renderers import Heading


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering a post body to HTML."""

    @abstractmethod
    def can_render(self, path: Path) -> bool:
        """Check if this renderer can handle the given file.

        Args:
            path: Path to the source file.

        Returns:
            True if this renderer can process the file.
        """
        ...

    @abstractmethod
    def render(self, content: str) -> tuple[str, list[Heading]]:
        """Render content to HTML.

        Args:
            content: Source content to render.

        Returns:
            Tuple of (rendered HTML, list of headings).
        """
        ...

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'markdown')."""
        ...


@runtime_checkable
class FieldExtractor(Protocol):
    """Protocol for validating one front matter field.

    Implementations read a single key from the parsed mapping and either
    return the normalized value or raise FieldError.
    """

    key: str

    @abstractmethod
    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        """Extract and validate the field.

        Args:
            data: Parsed front matter mapping.

        Returns:
            Dictionary with the field name as its only key.

        Raises:
            FieldError: If the field is missing or has the wrong type.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering post files."""

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return all post files, in a stable order."""
        ...
