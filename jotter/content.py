"""Content processing for Jotter.

This module discovers the content store of a project, parses front matter,
renders document bodies and builds Document objects.

Key classes:
- Document: Dataclass representing a post, draft or page.
- FileContentLoader: Discovers posts, drafts and site files on disk.
- PermalinkBuilder: Derives output URLs for documents.
- DefaultDocumentBuilder: Builds and validates Document instances.
- ContentProcessor: Facade that loads the whole content store.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import BuildError, FrontMatterError
from .extractors import (
    CompositeMetadataExtractor,
    default_metadata_extractor,
    has_frontmatter,
)
from .renderers import RendererRegistry
from .utils import is_internal_path, parse_post_filename, slugify

POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"
REQUIRED_KEYS = ("layout", "title")
PERMALINK_TOKEN_RE = re.compile(r":(year|month|day|title|topic)")


@dataclass
class Document:
    """A post, draft or page of the site.

    Attributes:
        title: Title declared in front matter.
        layout: Layout template identifier declared in front matter.
        topic: Optional category tag.
        body: Raw body text after the front matter.
        content: Rendered HTML of the body.
        description: Short plain-text description.
        date: Publish date.
        slug: URL-friendly slug.
        url: Output URL.
        kind: "post", "draft" or "page".
        path: Path to the source file.
        source_type: "markdown" or "html".
        front_matter: Full parsed front matter.
        dated: Whether the date comes from the filename or front matter
            rather than the file modification time.
    """

    title: str
    layout: str
    topic: str | None
    body: str
    content: str
    description: str
    date: datetime
    slug: str
    url: str
    kind: str
    path: Path
    source_type: str
    front_matter: dict[str, Any] = field(default_factory=dict)
    dated: bool = True

    @property
    def is_post(self) -> bool:
        return self.kind in ("post", "draft")

    @property
    def output_path(self) -> str:
        """Path of the rendered file relative to the destination.

        URLs ending in a slash become `<url>/index.html`; other URLs map
        to that exact path.
        """
        rel = self.url.strip("/")
        if self.url.endswith("/") or not rel:
            return f"{rel}/index.html" if rel else "index.html"
        return rel


@dataclass
class SiteContent:
    """Everything the content store contributes to one build."""

    posts: list[Document]
    pages: list[Document]
    static_files: list[Path]

    @property
    def documents(self) -> list[Document]:
        return [*self.posts, *self.pages]


def validate_front_matter(front_matter: Mapping[str, Any]) -> None:
    """Check the keys every document must declare.

    Args:
        front_matter: Parsed front matter.

    Raises:
        FrontMatterError: If layout or title is missing or not a non-empty
            string, or topic is present but not a string.
    """
    for key in REQUIRED_KEYS:
        value = front_matter.get(key)
        if value is None:
            raise FrontMatterError(f"Missing required front matter key '{key}'")
        if not isinstance(value, str) or not value.strip():
            raise FrontMatterError(f"Front matter key '{key}' must be a non-empty string")
    topic = front_matter.get("topic")
    if topic is not None and not isinstance(topic, str):
        raise FrontMatterError("Front matter key 'topic' must be a string")


class FileContentLoader:
    """Discovers content files in a project directory.

    Attributes:
        project_root: Root directory of the project.
        destination: Output directory, never treated as content.
        exclude: Glob patterns (relative POSIX paths) to leave out.
    """

    def __init__(
        self,
        project_root: Path,
        destination: Path | None = None,
        exclude: Iterable[str] = (),
    ):
        self.project_root = project_root
        self.destination = destination
        self.exclude = list(exclude)

    def iter_posts(self) -> list[Path]:
        return self._iter_dir(self.project_root / POSTS_DIR)

    def iter_drafts(self) -> list[Path]:
        return self._iter_dir(self.project_root / DRAFTS_DIR)

    def iter_site_files(self) -> list[Path]:
        """List files that become pages or static files.

        Returns:
            Sorted list of non-internal files outside the destination.
        """
        files: list[Path] = []
        for path in sorted(self.project_root.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.project_root)
            if is_internal_path(rel) or self._is_excluded(rel):
                continue
            if self.destination is not None and self._is_in_destination(path):
                continue
            files.append(path)
        return files

    def _iter_dir(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(
            path
            for path in directory.rglob("*")
            if path.is_file()
            and not any(
                part.startswith(".") for part in path.relative_to(directory).parts
            )
        )

    def _is_excluded(self, rel: Path) -> bool:
        posix = rel.as_posix()
        return any(
            fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(rel.parts[0], pattern)
            for pattern in self.exclude
        )

    def _is_in_destination(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.destination.resolve())
        except ValueError:
            return False
        return True


class PermalinkBuilder:
    """Derives output URLs for documents.

    Posts and drafts follow the configured pattern, which may use the
    placeholders :year, :month, :day, :title and :topic. Pages map their
    path to a directory-style URL.
    """

    def __init__(self, pattern: str = "/:year/:month/:day/:title/"):
        self.pattern = pattern

    def post_url(self, date: datetime, slug: str, topic: str | None) -> str:
        values = {
            "year": f"{date.year:04d}",
            "month": f"{date.month:02d}",
            "day": f"{date.day:02d}",
            "title": slug,
            "topic": slugify(topic) if topic else "",
        }
        url = PERMALINK_TOKEN_RE.sub(lambda m: values[m.group(1)], self.pattern)
        return self.normalize(url)

    def page_url(self, rel: Path) -> str:
        segments = [p for p in rel.parent.parts if p]
        if rel.stem != "index":
            segments.append(slugify(rel.stem))
        path = "/".join(segments)
        return f"/{path}/" if path else "/"

    @staticmethod
    def normalize(url: str) -> str:
        url = re.sub(r"/{2,}", "/", f"/{url}")
        return url


class DefaultDocumentBuilder:
    """Builds Document objects from source files.

    Attributes:
        project_root: Root directory of the project.
        renderer_registry: Registry of body renderers.
        metadata_extractor: Composite metadata extractor.
        permalinks: Permalink builder.
    """

    def __init__(
        self,
        project_root: Path,
        permalink: str = "/:year/:month/:day/:title/",
        renderer_registry: RendererRegistry | None = None,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.project_root = project_root
        self.renderer_registry = renderer_registry or RendererRegistry()
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.permalinks = PermalinkBuilder(permalink)

    def can_build(self, path: Path) -> bool:
        return self.renderer_registry.get_renderer(path) is not None

    def build(self, path: Path, kind: str) -> Document | None:
        """Build a Document from a source file.

        Args:
            path: Path to the source file.
            kind: "post", "draft" or "page".

        Returns:
            Document, or None when its front matter sets `published: false`.

        Raises:
            BuildError: If the filename or front matter is invalid.
        """
        raw = path.read_text(encoding="utf-8")
        try:
            metadata = self.metadata_extractor.extract(raw, path)
            front_matter = metadata.get("frontmatter", {})
            validate_front_matter(front_matter)
        except FrontMatterError as exc:
            raise BuildError(path, str(exc), exc) from exc

        if front_matter.get("published") is False:
            return None

        parsed = parse_post_filename(path.stem)
        if kind == "post" and parsed is None:
            raise BuildError(
                path, "Post filenames must start with a valid YYYY-MM-DD- date"
            )
        slug = parsed[1] if parsed else slugify(path.stem)
        topic = front_matter.get("topic")

        renderer = self.renderer_registry.get_renderer(path)
        body = metadata.get("body", raw)
        content = renderer.render(body)

        url = front_matter.get("permalink")
        if url:
            url = self.permalinks.normalize(str(url))
        elif kind == "page":
            url = self.permalinks.page_url(path.relative_to(self.project_root))
        else:
            url = self.permalinks.post_url(metadata["date"], slug, topic)

        return Document(
            title=front_matter["title"],
            layout=front_matter["layout"],
            topic=topic,
            body=body,
            content=content,
            description=metadata.get("description", ""),
            date=metadata["date"],
            slug=slug,
            url=url,
            kind=kind,
            path=path,
            source_type=renderer.source_type,
            front_matter=front_matter,
            dated=metadata.get("dated", True),
        )


class ContentProcessor:
    """Facade for loading the content store of a project.

    Attributes:
        project_root: Root directory of the project.
    """

    def __init__(
        self,
        project_root: Path,
        content_loader: FileContentLoader | None = None,
        document_builder: DefaultDocumentBuilder | None = None,
    ):
        self.project_root = project_root
        self._content_loader = content_loader or FileContentLoader(project_root)
        self._document_builder = document_builder or DefaultDocumentBuilder(
            project_root
        )

    def load(self, include_drafts: bool = False) -> SiteContent:
        """Load posts, pages and static files.

        Args:
            include_drafts: Whether to include documents from _drafts.

        Returns:
            SiteContent with posts sorted newest first.

        Raises:
            BuildError: If a document is invalid or two documents share a URL.
        """
        posts: list[Document] = []
        for path in self._content_loader.iter_posts():
            self._append(posts, path, "post")
        if include_drafts:
            for path in self._content_loader.iter_drafts():
                self._append(posts, path, "draft")

        pages: list[Document] = []
        static_files: list[Path] = []
        for path in self._content_loader.iter_site_files():
            if self._document_builder.can_build(path) and has_frontmatter(
                path.read_text(encoding="utf-8")
            ):
                self._append(pages, path, "page")
            else:
                static_files.append(path)

        self._check_unique_urls([*posts, *pages])
        posts.sort(key=lambda d: (d.date, d.slug), reverse=True)
        return SiteContent(posts=posts, pages=pages, static_files=static_files)

    def _append(self, documents: list[Document], path: Path, kind: str) -> None:
        if not self._document_builder.can_build(path):
            return
        document = self._document_builder.build(path, kind)
        if document is not None:
            documents.append(document)

    @staticmethod
    def _check_unique_urls(documents: Iterable[Document]) -> None:
        seen: dict[str, Path] = {}
        for document in documents:
            if document.url in seen:
                raise BuildError(
                    document.path,
                    f"URL {document.url} is already used by {seen[document.url]}",
                )
            seen[document.url] = document.path
