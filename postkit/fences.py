"""Fenced code block scanning for postkit.

A fence opens with three or more backticks or tildes, indented by at most
three spaces, optionally followed by an info string naming the language.
It closes on a line of the same character, at least as long, with nothing
after it.

A strict Markdown parser treats a forgotten closing fence as "the rest of
the document is code" until some later bare fence closes it. To point the
author at the actual mistake, the scanner also treats an opener with an
info string found inside an open fence (e.g. ```` ```java ````) as the
start of a new block, and reports the previous one as unterminated.

The scanner only reports. It never rewrites the text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<marker>`{3,}|~{3,})(?P<info>.*)$")


@dataclass(frozen=True)
class FenceBlock:
    """A fenced code block found in a document.

    Attributes:
        start_line: 1-based line of the opening fence.
        end_line: 1-based line of the closing fence, None if never closed.
        marker: The opening fence characters (e.g. ```` ``` ````).
        info: Info string after the opening fence, stripped.
        reopened_at: Line of the opener that cut this block short, if any.
    """

    start_line: int
    end_line: int | None
    marker: str
    info: str = ""
    reopened_at: int | None = None

    @property
    def closed(self) -> bool:
        return self.end_line is not None

    @property
    def language(self) -> str:
        return self.info.split()[0] if self.info else ""


@dataclass
class FenceReport:
    """Every fenced block of a document, in source order."""

    blocks: list[FenceBlock] = field(default_factory=list)

    @property
    def unterminated(self) -> list[FenceBlock]:
        return [block for block in self.blocks if not block.closed]

    @property
    def ok(self) -> bool:
        return not self.unterminated


def _opener(line: str) -> tuple[str, str] | None:
    match = FENCE_RE.match(line)
    if match is None:
        return None
    marker = match.group("marker")
    info = match.group("info").strip()
    # Backtick fences may not carry backticks in their info string.
    if marker[0] == "`" and "`" in info:
        return None
    return marker, info


def _closes(line: str, marker: str) -> bool:
    match = FENCE_RE.match(line)
    if match is None:
        return False
    candidate = match.group("marker")
    return (
        candidate[0] == marker[0]
        and len(candidate) >= len(marker)
        and not match.group("info").strip()
    )


def scan_fences(text: str, first_line: int = 1) -> FenceReport:
    """Find every fenced code block and whether it was closed.

    Args:
        text: Markdown text to scan.
        first_line: Line number of the first line of ``text``, so that a
            body scanned apart from its front matter reports file lines.

    Returns:
        FenceReport listing the blocks in order of their opening line.
    """
    report = FenceReport()
    start = 0
    marker = ""
    info = ""
    open_fence = False

    for offset, line in enumerate(text.splitlines()):
        lineno = first_line + offset
        if not open_fence:
            opened = _opener(line)
            if opened is not None:
                marker, info = opened
                start = lineno
                open_fence = True
            continue

        if _closes(line, marker):
            report.blocks.append(FenceBlock(start, lineno, marker, info))
            open_fence = False
            continue

        reopened = _opener(line)
        if (
            reopened is not None
            and reopened[1]
            and reopened[0][0] == marker[0]
            and len(reopened[0]) >= len(marker)
        ):
            report.blocks.append(FenceBlock(start, None, marker, info, reopened_at=lineno))
            marker, info = reopened
            start = lineno

    if open_fence:
        report.blocks.append(FenceBlock(start, None, marker, info))
    return report
