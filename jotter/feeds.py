"""Feed generation for Jotter.

This module writes sitemap.xml and feed.xml from the site content. Feed
generation is separate from build orchestration, and new formats are added
by subclassing FeedGenerator and registering the subclass.

Output depends only on the content and the configuration, never on the
wall clock, so two builds of the same input produce the same bytes.

Classes:
    FeedGenerator: Base class for feed generators.
    SitemapGenerator: Generates sitemap.xml.
    RSSGenerator: Generates an RSS 2.0 feed of posts.
    FeedRegistry: Registry for managing feed generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .html_utils import escape_html

if TYPE_CHECKING:
    from .content import Document, SiteContent

RFC822_FORMAT = "%a, %d %b %Y %H:%M:%S +0000"


class FeedGenerator(ABC):
    """Abstract base class for feed generators."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename for this feed."""
        ...

    @abstractmethod
    def generate(self, content: SiteContent, site: Mapping[str, Any]) -> str | None:
        """Generate feed content.

        Args:
            content: Loaded site content.
            site: Site configuration.

        Returns:
            Feed content as a string, or None if the feed cannot be
            generated (e.g., no site url configured).
        """
        ...


def _base_url(site: Mapping[str, Any]) -> str:
    url = str(site.get("url") or "").rstrip("/")
    if not url:
        return ""
    baseurl = str(site.get("baseurl") or "").strip("/")
    return f"{url}/{baseurl}" if baseurl else url


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml listing every post and page.

    Requires 'url' in the site configuration. Only documents with a date
    from their filename or front matter get a <lastmod> entry.
    """

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, content: SiteContent, site: Mapping[str, Any]) -> str | None:
        base_url = _base_url(site)
        if not base_url:
            return None

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for document in sorted(content.documents, key=lambda d: d.url):
            loc = escape_html(f"{base_url}{document.url}")
            if document.dated:
                lastmod = document.date.strftime("%Y-%m-%d")
                lines.append(f"  <url><loc>{loc}</loc><lastmod>{lastmod}</lastmod></url>")
            else:
                lines.append(f"  <url><loc>{loc}</loc></url>")
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed with posts newest first.

    Requires 'url' in the site configuration; uses 'title' and
    'description' when present.
    """

    def __init__(self, limit: int = 20):
        self.limit = limit

    @property
    def filename(self) -> str:
        return "feed.xml"

    def generate(self, content: SiteContent, site: Mapping[str, Any]) -> str | None:
        base_url = _base_url(site)
        if not base_url:
            return None

        posts = sorted(content.posts, key=lambda p: (p.date, p.slug), reverse=True)
        posts = posts[: self.limit]
        title = escape_html(str(site.get("title") or "Jotter Feed"))
        description = escape_html(str(site.get("description") or ""))

        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0"><channel>',
            f"<title>{title}</title>",
            f"<link>{escape_html(base_url)}/</link>",
            f"<description>{description}</description>",
        ]
        if posts:
            rss.append(f"<lastBuildDate>{posts[0].date.strftime(RFC822_FORMAT)}</lastBuildDate>")
        rss.extend(self._item(post, base_url) for post in posts)
        rss.append("</channel></rss>")
        return "\n".join(rss) + "\n"

    @staticmethod
    def _item(post: Document, base_url: str) -> str:
        link = escape_html(f"{base_url}{post.url}")
        summary = escape_html(post.description or post.title)
        category = f"<category>{escape_html(post.topic)}</category>" if post.topic else ""
        return (
            f"<item><title>{escape_html(post.title)}</title><link>{link}</link>"
            f"<guid>{link}</guid>{category}"
            f"<description>{summary}</description>"
            f"<pubDate>{post.date.strftime(RFC822_FORMAT)}</pubDate></item>"
        )


class FeedRegistry:
    """Registry for managing feed generators."""

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        self._generators.append(generator)

    def render_all(
        self, content: SiteContent, site: Mapping[str, Any]
    ) -> dict[str, str]:
        """Render all registered feeds.

        Returns:
            Mapping of output filename to feed content, in registration
            order. Feeds that cannot be generated are left out.
        """
        rendered: dict[str, str] = {}
        for generator in self._generators:
            output = generator.generate(content, site)
            if output is not None:
                rendered[generator.filename] = output
        return rendered

    @staticmethod
    def write_all(output_dir: Path, rendered: Mapping[str, str]) -> list[str]:
        """Write rendered feeds to the output directory.

        Returns:
            List of filenames that were written.
        """
        for filename, output in rendered.items():
            (output_dir / filename).write_text(output, encoding="utf-8")
        return list(rendered)


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with the sitemap and RSS generators."""
    registry = FeedRegistry()
    registry.register(SitemapGenerator())
    registry.register(RSSGenerator())
    return registry
