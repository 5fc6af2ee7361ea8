"""Template rendering engine for Jotter.

This module uses Jinja2 to render documents with their layouts. The
engine receives the frozen SiteConfig for the build and exposes it to
templates as `site`; it never writes to it.

Key class:
- TemplateEngine: Handles template rendering and provides context to templates.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from .collections import PostCollection, TopicCollection
from .config import SiteConfig
from .content import Document
from .html_utils import join_root_url

__all__ = ["INCLUDES_DIR", "LAYOUTS_DIR", "TemplateEngine"]

LAYOUTS_DIR = "_layouts"
INCLUDES_DIR = "_includes"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        project_root: Project directory holding _layouts and _includes.
        site: Read-only site configuration.
        env: Jinja2 environment.
        posts: Collection of all posts, newest first.
        topics: Mapping of topic to posts.
        warnings: Non-fatal problems found while rendering.
    """

    def __init__(self, project_root: Path, site: SiteConfig):
        """Initialize the template engine.

        Args:
            project_root: Directory with _layouts and _includes.
            site: Site configuration for this build.
        """
        self.project_root = project_root
        self.site = site
        self.env = Environment(
            loader=FileSystemLoader(
                [
                    project_root / LAYOUTS_DIR,
                    project_root / INCLUDES_DIR,
                    project_root,
                ]
            ),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.posts = PostCollection([])
        self.topics = TopicCollection({})
        self.warnings: list[str] = []
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = self.site
        self.env.globals["posts"] = self.posts
        self.env.globals["topics"] = self.topics
        self.env.globals["url_for"] = self._url_for

    def update_collections(
        self, posts: Iterable[Document], topics: Mapping[str, Iterable[Document]]
    ) -> None:
        """Update the post and topic collections.

        Args:
            posts: Iterable of all posts.
            topics: Mapping of topic names to posts.
        """
        self.posts = PostCollection(posts).sorted()
        self.topics = TopicCollection(topics)
        self.env.globals["posts"] = self.posts
        self.env.globals["topics"] = self.topics

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying baseurl if configured.

        Args:
            path: Path to generate URL for.

        Returns:
            URL with the baseurl prefix if configured.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        return join_root_url(str(self.site.get("baseurl") or ""), path)

    def render_document(self, document: Document) -> str:
        """Render a document with its layout.

        Args:
            document: Document to render.

        Returns:
            Rendered HTML string.
        """
        context = {
            "page": document,
            "front_matter": document.front_matter,
        }
        body_html = self._render_body(document, context)
        layout_template = self._resolve_layout_template(document.layout)
        if layout_template is None:
            self.warnings.append(
                f"{document.path}: layout '{document.layout}' does not exist; "
                "rendering body only"
            )
            return body_html
        return layout_template.render(content=Markup(body_html), **context)

    def _render_body(self, document: Document, context: dict[str, Any]) -> str:
        if document.source_type == "html":
            template = self.env.from_string(document.content)
            return template.render(**context)
        return document.content

    def _resolve_layout_template(self, layout: str):
        """Resolve the layout template in _layouts.

        Args:
            layout: Layout identifier from front matter.

        Returns:
            Jinja2 Template object, or None if no layout file exists.
        """
        layouts_dir = self.project_root / LAYOUTS_DIR
        for name in (f"{layout}.html", f"{layout}.html.jinja", f"{layout}.jinja", layout):
            if not (layouts_dir / name).is_file():
                continue
            try:
                return self.env.get_template(name)
            except TemplateNotFound:
                continue
        return None

    def render_string(self, template: str, context: dict[str, Any]) -> str:
        """Render a template string.

        Args:
            template: Template string to render.
            context: Variables to make available in the template.

        Returns:
            Rendered string.
        """
        tmpl = self.env.from_string(template)
        return tmpl.render(**context)
