from datetime import datetime, timedelta, timezone

from postkit.collections import PostCollection
from postkit.content import Post


def make(title, date, draft=False):
    return Post(title=title, date=date, draft=draft, body="", slug=title.lower())


def test_published_and_drafts():
    posts = PostCollection(
        [
            make("A", datetime(2024, 1, 2, tzinfo=timezone.utc)),
            make("B", datetime(2024, 1, 3, tzinfo=timezone.utc), draft=True),
            make("C", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ]
    )
    assert len(posts) == 3
    assert [p.title for p in posts.published()] == ["A", "C"]
    assert [p.title for p in posts.drafts()] == ["B"]
    assert posts[0].title == "A"


def test_sorted_and_latest():
    posts = PostCollection(
        [
            make("a", datetime(2024, 1, 2, tzinfo=timezone.utc)),
            make("b", datetime(2024, 1, 3, tzinfo=timezone.utc)),
            make("c", datetime(2024, 1, 2, tzinfo=timezone.utc)),
        ]
    )
    assert [p.slug for p in posts.sorted()] == ["b", "c", "a"]
    assert [p.slug for p in posts.sorted(reverse=False)] == ["a", "c", "b"]
    assert [p.slug for p in posts.latest(1)] == ["b"]


def test_sorting_mixes_aware_and_naive_dates():
    ist = timezone(timedelta(hours=5, minutes=30))
    posts = PostCollection(
        [
            # 12:30 UTC
            make("aware", datetime(2024, 1, 1, 18, 0, tzinfo=ist)),
            make("naive", datetime(2024, 1, 1, 13, 0)),
        ]
    )
    assert [p.slug for p in posts.sorted()] == ["naive", "aware"]
