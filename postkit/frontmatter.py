"""Front matter parsing and validation for postkit.

A post starts with a YAML block delimited by ``---`` lines. The block must
hold exactly three fields with fixed types:

- ``title``: non-empty string
- ``date``: timestamp, ideally with a timezone offset
- ``draft``: boolean

Each field is validated by its own extractor; CompositeFieldExtractor runs
them in order and merges the results.

Key classes:
- FrontmatterBlock: The raw block split off the top of a post.
- TitleField, DateField, DraftField: One extractor per field.
- CompositeFieldExtractor: Runs all field extractors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from .protocols import FieldExtractor

FRONTMATTER_DELIMITER = "---"
BOM = "\ufeff"
BARE_DATE_RE = re.compile(r"^\d{4}-?\d{2}-?\d{2}$")
REQUIRED_FIELDS = ("title", "date", "draft")


class PostFormatError(Exception):
    """A post whose front matter cannot be used.

    Attributes:
        message: Human-readable error message.
        line: 1-based line number in the source file, when known.
        path: Source file, when known.
    """

    def __init__(self, message: str, line: int | None = None, path: Path | None = None):
        self.message = message
        self.line = line
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        location = str(self.path) if self.path else "<post>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"


class FieldError(PostFormatError):
    """A required front matter field is missing or has the wrong type."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class FrontmatterBlock:
    """Front matter split off the top of a post.

    Attributes:
        raw: Exact source text of the block, delimiters included.
        inner: YAML text between the delimiters.
        body: Everything after the closing delimiter.
        body_line: 1-based line number where the body starts.
    """

    raw: str
    inner: str
    body: str
    body_line: int

    def line_of(self, key: str) -> int | None:
        """Return the source line of a top-level key, if present."""
        for offset, line in enumerate(self.inner.splitlines()):
            name, sep, _ = line.partition(":")
            if sep and name.strip().strip("\"'") == key and not line[:1].isspace():
                return offset + 2
        return None


def split_frontmatter(text: str) -> FrontmatterBlock:
    """Split the front matter block off a post.

    Args:
        text: Raw file content.

    Returns:
        The front matter block and the remaining body.

    Raises:
        PostFormatError: If the text does not open with ``---`` or the
            block is never closed.
    """
    lines = text.splitlines(keepends=True)
    # A leading byte order mark stays in the raw block so the file round-trips.
    if not lines or lines[0].lstrip(BOM).strip() != FRONTMATTER_DELIMITER:
        raise PostFormatError("missing front matter: file must start with '---'", line=1)
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            return FrontmatterBlock(
                raw="".join(lines[: index + 1]),
                inner="".join(lines[1:index]),
                body="".join(lines[index + 1 :]),
                body_line=index + 2,
            )
    raise PostFormatError("front matter block opened but never closed with '---'", line=1)


def load_frontmatter(block: FrontmatterBlock) -> dict[str, Any]:
    """Parse the YAML inside a front matter block.

    Raises:
        PostFormatError: If the YAML is invalid or is not a mapping.
    """
    try:
        data = yaml.safe_load(block.inner)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 2 if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        raise PostFormatError(f"invalid YAML in front matter: {problem}", line=line) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PostFormatError("front matter must be a mapping of keys to values", line=2)
    return data


class TitleField:
    """Validates the ``title`` field."""

    key = "title"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.key not in data:
            raise FieldError(self.key, "missing required field 'title'")
        value = data[self.key]
        if not isinstance(value, str) or not value.strip():
            raise FieldError(self.key, "'title' must be a non-empty string")
        return {"title": value}


class DateField:
    """Validates the ``date`` field.

    Accepts a YAML timestamp or an ISO-8601 string. A calendar date without
    a time is rejected. Naive datetimes pass here; the checker warns about
    them.
    """

    key = "date"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.key not in data:
            raise FieldError(self.key, "missing required field 'date'")
        value = data[self.key]
        if isinstance(value, datetime):
            return {"date": value}
        bare_string = isinstance(value, str) and BARE_DATE_RE.match(value.strip())
        if isinstance(value, date) or bare_string:
            raise FieldError(
                self.key, "'date' must be a timestamp with a time and offset, not a bare date"
            )
        if isinstance(value, str):
            try:
                return {"date": datetime.fromisoformat(value.strip())}
            except ValueError:
                raise FieldError(
                    self.key, f"'date' is not an ISO-8601 timestamp: {value!r}"
                ) from None
        raise FieldError(self.key, f"'date' must be a timestamp, got {type(value).__name__}")


class DraftField:
    """Validates the ``draft`` field. Only real booleans are accepted."""

    key = "draft"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.key not in data:
            raise FieldError(self.key, "missing required field 'draft'")
        value = data[self.key]
        if not isinstance(value, bool):
            raise FieldError(self.key, f"'draft' must be true or false, got {value!r}")
        return {"draft": value}


class CompositeFieldExtractor:
    """Runs every field extractor over a front matter mapping.

    Later extractors can override keys produced by earlier ones.
    """

    def __init__(self, extractors: list[FieldExtractor] | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: FieldExtractor implementations. Defaults to the
                title, date and draft extractors.
        """
        if extractors is None:
            self._extractors: list[FieldExtractor] = [TitleField(), DateField(), DraftField()]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor: FieldExtractor) -> None:
        """Add an extractor to the composite."""
        self._extractors.append(extractor)

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(data))
        return result


default_field_extractor = CompositeFieldExtractor()


def parse_frontmatter(
    block: FrontmatterBlock,
    extractor: CompositeFieldExtractor | None = None,
) -> dict[str, Any]:
    """Parse and validate a front matter block.

    Args:
        block: Block returned by split_frontmatter.
        extractor: Optional custom field extractor.

    Returns:
        Dictionary with the validated fields plus ``frontmatter``, the full
        parsed mapping (unknown keys included).

    Raises:
        PostFormatError: If the block cannot be parsed or a field is invalid.
    """
    data = load_frontmatter(block)
    extractor = extractor or default_field_extractor
    try:
        fields = extractor.extract(data)
    except FieldError as exc:
        exc.line = block.line_of(exc.field) or 1
        raise
    fields["frontmatter"] = data
    return fields


def extra_fields(data: dict[str, Any]) -> list[str]:
    """Return front matter keys other than the required ones, in source order."""
    return [str(key) for key in data if key not in REQUIRED_FIELDS]


def dump_frontmatter(title: str, when: datetime, draft: bool) -> str:
    """Serialize the three required fields as a front matter block.

    Args:
        title: Post title.
        when: Publication timestamp.
        draft: Draft flag.

    Returns:
        Front matter text, delimiters and trailing newline included.
    """
    title_line = yaml.safe_dump(
        {"title": title}, allow_unicode=True, default_flow_style=False, width=10_000
    ).rstrip("\n")
    lines = [
        FRONTMATTER_DELIMITER,
        title_line,
        f"date: {when.isoformat()}",
        f"draft: {'true' if draft else 'false'}",
        FRONTMATTER_DELIMITER,
    ]
    return "\n".join(lines) + "\n"
