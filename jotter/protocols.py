"""Protocol definitions for Jotter.

These protocols describe the seams between the builder and its
collaborators, so renderers, extractors and generators can be swapped or
mocked in tests without touching the build loop.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import MutableMapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import Document


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering document bodies.

    Implementations handle one source type (Markdown, HTML).
    """

    @abstractmethod
    def can_render(self, path: Path) -> bool:
        """Check if this renderer can handle the given file.

        Args:
            path: Path to the source file.

        Returns:
            True if this renderer can process the file.
        """
        ...

    @abstractmethod
    def render(self, content: str) -> str:
        """Render a document body to HTML.

        Args:
            content: Source body, without front matter.

        Returns:
            Rendered HTML.
        """
        ...

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'markdown', 'html')."""
        ...


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting metadata from content."""

    @abstractmethod
    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary of extracted metadata.
        """
        ...


@runtime_checkable
class Generator(Protocol):
    """Protocol for build-time generators.

    A generator runs once per build, before rendering, and may write keys
    into the configuration mapping.
    """

    @abstractmethod
    def generate(self, config: MutableMapping[str, Any]) -> None:
        """Populate the configuration of the current build.

        Args:
            config: Mutable configuration mapping.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for rendering documents with their layouts."""

    @abstractmethod
    def render_document(self, document: Document) -> str:
        """Render a document with its layout.

        Args:
            document: Document to render.

        Returns:
            Rendered HTML string.
        """
        ...

    @abstractmethod
    def render_string(self, template: str, context: dict[str, Any]) -> str:
        """Render a template string.

        Args:
            template: Template string to render.
            context: Variables to make available in the template.

        Returns:
            Rendered string.
        """
        ...
