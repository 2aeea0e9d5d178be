from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timezone

from .content import Post


def _sort_date(date: datetime) -> datetime:
    # Naive dates are read as UTC so they compare with offset-aware ones.
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.draft)

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.draft)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, then by slug.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        return PostCollection(
            sorted(self._posts, key=lambda p: (_sort_date(p.date), p.slug), reverse=reverse)
        )

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
