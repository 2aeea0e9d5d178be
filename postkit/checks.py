"""Structural checks for posts.

Collects every problem in a post instead of stopping at the first one:
front matter errors, unexpected front matter keys, dates without a
timezone offset, and fenced code blocks that were never closed.

Unterminated fences are warnings by default. They are authoring defects
to flag, and a Markdown renderer still produces output for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .content import read_text
from .fences import scan_fences
from .frontmatter import (
    FrontmatterBlock,
    PostFormatError,
    extra_fields,
    parse_frontmatter,
    split_frontmatter,
)

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    """A single problem found in a post.

    Attributes:
        severity: "error" or "warning".
        line: 1-based line number, None when not tied to a line.
        message: Human-readable description.
        code: Short machine-readable identifier.
    """

    severity: str
    line: int | None
    message: str
    code: str

    def format(self, path: Path | str | None = None) -> str:
        location = str(path) if path is not None else "<post>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.severity}: {self.message}"


def check_text(text: str, strict_fences: bool = False) -> list[Issue]:
    """Check a post's source text.

    Args:
        text: Full file content.
        strict_fences: Report unterminated fences as errors.

    Returns:
        Issues sorted by line number.
    """
    issues: list[Issue] = []
    try:
        block = split_frontmatter(text)
    except PostFormatError as exc:
        issues.append(Issue(ERROR, exc.line, exc.message, "frontmatter"))
        body, body_line = text, 1
    else:
        body, body_line = block.body, block.body_line
        issues.extend(_check_frontmatter(block))

    fence_severity = ERROR if strict_fences else WARNING
    for fence in scan_fences(body, first_line=body_line).unterminated:
        label = f"'{fence.marker}{fence.info}'"
        if fence.reopened_at is not None:
            message = (
                f"code fence {label} is never closed "
                f"(next fence opens at line {fence.reopened_at})"
            )
        else:
            message = f"code fence {label} is never closed before end of file"
        issues.append(Issue(fence_severity, fence.start_line, message, "fence-unterminated"))

    return sorted(issues, key=lambda issue: issue.line or 0)


def _check_frontmatter(block: FrontmatterBlock) -> list[Issue]:
    try:
        fields = parse_frontmatter(block)
    except PostFormatError as exc:
        return [Issue(ERROR, exc.line, exc.message, "frontmatter")]

    issues: list[Issue] = []
    for key in extra_fields(fields["frontmatter"]):
        issues.append(
            Issue(
                WARNING,
                block.line_of(key),
                f"unexpected front matter field '{key}'",
                "frontmatter-extra",
            )
        )
    if fields["date"].tzinfo is None:
        issues.append(
            Issue(
                WARNING,
                block.line_of("date"),
                "'date' has no timezone offset",
                "date-naive",
            )
        )
    return issues


def check_file(path: Path, strict_fences: bool = False) -> list[Issue]:
    """Check a post file on disk. Undecodable files are reported as an error."""
    try:
        text = read_text(path)
    except PostFormatError as exc:
        return [Issue(ERROR, exc.line, exc.message, "encoding")]
    return check_text(text, strict_fences=strict_fences)


def has_errors(issues: list[Issue]) -> bool:
    return any(issue.severity == ERROR for issue in issues)
