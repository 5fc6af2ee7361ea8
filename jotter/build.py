"""Site building functionality for Jotter.

This module contains the core logic for building a static blog from source
files. One build runs these steps in order:

1. Load `_config.yml` on top of the defaults.
2. Run the registered generators once against the mutable configuration
   (by default this copies GA_TRACKING_CODE into `ga_tracking_code`).
3. Freeze the configuration into a SiteConfig.
4. Load posts, drafts, pages and static files.
5. Render every document with its layout and write it out.
6. Copy static files and write the feeds.

Key functions:
- build_site: Main function to build the entire site.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import TemplateSyntaxError

from .config import DEFAULT_CONFIG, SiteConfig, load_config
from .content import (
    DRAFTS_DIR,
    POSTS_DIR,
    ContentProcessor,
    DefaultDocumentBuilder,
    Document,
    FileContentLoader,
    SiteContent,
)
from .errors import BuildError
from .feeds import create_default_feed_registry
from .generators import GeneratorRegistry, create_default_generator_registry
from .renderers import RendererRegistry
from .templates import INCLUDES_DIR, LAYOUTS_DIR, TemplateEngine
from .utils import build_topics_index, ensure_clean_dir, is_internal_path

__all__ = ["BuildError", "BuildResult", "build_site"]

SOURCE_DIRS = (POSTS_DIR, DRAFTS_DIR, LAYOUTS_DIR, INCLUDES_DIR)


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        content: Posts, pages and static files of the site.
        output_dir: Directory where the site was built.
        site: Site configuration used for rendering.
        feeds: Filenames of the feeds that were written.
        warnings: Non-fatal problems found during the build.
    """

    content: SiteContent
    output_dir: Path
    site: SiteConfig
    feeds: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def documents(self) -> list[Document]:
        return self.content.documents


def build_site(
    project_root: Path,
    include_drafts: bool = False,
    destination: Path | None = None,
    generators: GeneratorRegistry | None = None,
    environ: Mapping[str, str] | None = None,
    clean_output: bool = True,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to include documents from _drafts.
        destination: Optional output directory overriding the config.
        generators: Generators to run before rendering. Defaults to the
            environment-variable injector. Cannot be combined with
            `environ`; pass the environment to the generators instead.
        environ: Environment for the default generators; defaults to
            os.environ.
        clean_output: Whether to wipe the output directory before writing.

    Returns:
        BuildResult with the content, output directory and site config.

    Raises:
        FileNotFoundError: If the project directory does not exist.
        ValueError: If both `generators` and `environ` are given.
        BuildError: If a source file or template is invalid, the
            destination would overwrite sources, or two outputs collide.
    """
    if generators is not None and environ is not None:
        raise ValueError(
            "Pass either generators or environ, not both; environ is only "
            "used by the default generators"
        )
    if not project_root.is_dir():
        raise FileNotFoundError(f"Expected project directory at {project_root}")

    config = load_config(project_root)
    registry = generators
    if registry is None:
        registry = create_default_generator_registry(environ)
    registry.run(config)
    site = SiteConfig(config)

    output_dir = destination or (project_root / site.destination)
    _check_destination(project_root, output_dir, project_root / site.destination)

    processor = ContentProcessor(
        project_root,
        content_loader=FileContentLoader(
            project_root, output_dir, site.exclude_patterns
        ),
        document_builder=DefaultDocumentBuilder(
            project_root,
            permalink=str(site.get("permalink") or DEFAULT_CONFIG["permalink"]),
            renderer_registry=RendererRegistry(site.markdown_extensions),
        ),
    )
    content = processor.load(include_drafts=include_drafts)
    feed_registry = create_default_feed_registry()
    rendered_feeds = feed_registry.render_all(content, site)
    _check_output_paths(project_root, content, rendered_feeds)

    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    engine = TemplateEngine(project_root, site)
    engine.update_collections(content.posts, build_topics_index(content.posts))
    for document in content.documents:
        try:
            rendered = engine.render_document(document)
        except TemplateSyntaxError as exc:
            raise BuildError(
                document.path,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except Exception as exc:
            raise BuildError(document.path, _format_error_message(exc), exc) from exc
        _write_document(output_dir, document, rendered)

    for path in content.static_files:
        target = output_dir / path.relative_to(project_root)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)

    feeds = feed_registry.write_all(output_dir, rendered_feeds)
    return BuildResult(
        content=content,
        output_dir=output_dir,
        site=site,
        feeds=feeds,
        warnings=list(engine.warnings),
    )


def _check_destination(project_root: Path, output_dir: Path, default_dir: Path) -> None:
    """Refuse destinations that would wipe or be read back as sources.

    A destination inside the project must not be one of the special
    source directories. Unless it is the configured destination, it must
    also start with `_` or `.` so later builds do not load it as content.
    """
    root = project_root.resolve()
    out = output_dir.resolve()
    if out == root or out in root.parents:
        raise BuildError(
            output_dir, "Destination must not be the project directory or above it"
        )
    try:
        rel = out.relative_to(root)
    except ValueError:
        return
    if rel.parts[0] in SOURCE_DIRS:
        raise BuildError(
            output_dir, f"Destination must not be inside the {rel.parts[0]} directory"
        )
    if out != default_dir.resolve() and not is_internal_path(rel):
        raise BuildError(
            output_dir,
            "Destination inside the project must start with '_' or be the "
            "configured destination; other directories hold site files",
        )


def _check_output_paths(
    project_root: Path, content: SiteContent, feeds: Mapping[str, str]
) -> None:
    """Make sure no two outputs are written to the same file."""
    seen: dict[str, Path] = {}
    for document in content.documents:
        target = document.output_path
        if target in seen:
            raise BuildError(
                document.path, f"Output {target} is also written by {seen[target]}"
            )
        seen[target] = document.path
    for path in content.static_files:
        target = path.relative_to(project_root).as_posix()
        if target in seen:
            raise BuildError(path, f"Output {target} is also written by {seen[target]}")
        seen[target] = path
    for filename in feeds:
        if filename in seen:
            raise BuildError(
                seen[filename], f"Output {filename} is reserved for the generated feed"
            )


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"

    return f"{error_type}: {error_msg}"


def _write_document(output_dir: Path, document: Document, rendered: str) -> None:
    """Write a rendered document to its output path.

    Args:
        output_dir: Base output directory.
        document: Document being written.
        rendered: Rendered HTML content.
    """
    target = output_dir / document.output_path
    try:
        target.resolve().relative_to(output_dir.resolve())
    except ValueError:
        raise BuildError(
            document.path, f"URL {document.url} points outside the destination"
        ) from None
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(rendered, encoding="utf-8")
