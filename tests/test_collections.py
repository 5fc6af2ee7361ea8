from datetime import datetime
from pathlib import Path

from jotter.collections import PostCollection, TopicCollection
from jotter.content import Document


def make_post(slug: str, date: datetime, topic: str | None = None, kind: str = "post"):
    return Document(
        title=slug.title(),
        layout="post",
        topic=topic,
        body="",
        content="",
        description="",
        date=date,
        slug=slug,
        url=f"/{slug}/",
        kind=kind,
        path=Path(f"_posts/{slug}.md"),
        source_type="markdown",
    )


def test_post_collection_helpers():
    a = make_post("a", datetime(2024, 1, 1), topic="ruby")
    b = make_post("b", datetime(2024, 3, 1), topic="life")
    c = make_post("c", datetime(2024, 2, 1), topic="ruby", kind="draft")
    posts = PostCollection([a, b, c])

    assert len(posts) == 3
    assert posts[0] is a
    assert [p.slug for p in posts.sorted()] == ["b", "c", "a"]
    assert [p.slug for p in posts.sorted(reverse=False)] == ["a", "c", "b"]
    assert [p.slug for p in posts.latest(2)] == ["b", "c"]
    assert [p.slug for p in posts.with_topic("ruby")] == ["a", "c"]
    assert [p.slug for p in posts.drafts()] == ["c"]
    assert [p.slug for p in posts.published()] == ["a", "b"]


def test_same_day_posts_sort_by_slug():
    day = datetime(2024, 1, 1)
    posts = PostCollection([make_post("alpha", day), make_post("beta", day)])
    assert [p.slug for p in posts.sorted()] == ["beta", "alpha"]


def test_topic_collection():
    a = make_post("a", datetime(2024, 1, 1), topic="ruby")
    b = make_post("b", datetime(2024, 3, 1), topic="life")
    topics = TopicCollection({"ruby": [a], "life": [b]})

    assert list(topics) == ["life", "ruby"]
    assert len(topics) == 2
    assert isinstance(topics["ruby"], PostCollection)
    assert topics.get("missing") is None
    assert [p.slug for p in topics["life"]] == ["b"]
