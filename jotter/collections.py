from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import Document


class PostCollection(Sequence[Document]):
    """Lightweight helper for working with lists of posts in templates and code."""

    def __init__(self, posts: Iterable[Document]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def with_topic(self, topic: str) -> PostCollection:
        return PostCollection(p for p in self._posts if p.topic == topic)

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.kind == "draft")

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.kind == "post")

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, then by slug.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        return PostCollection(
            sorted(self._posts, key=lambda p: (p.date, p.slug), reverse=reverse)
        )

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"


class TopicCollection(Mapping[str, PostCollection]):
    """Mapping of topic name to PostCollection."""

    def __init__(self, mapping: Mapping[str, Iterable[Document]]):
        self._mapping = {k: PostCollection(v) for k, v in sorted(mapping.items())}

    def __getitem__(self, key: str) -> PostCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TopicCollection({len(self._mapping)} topics)"
