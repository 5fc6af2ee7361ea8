from pathlib import Path

from jotter.config import SiteConfig
from jotter.extractors import (
    CompositeMetadataExtractor,
    DateExtractor,
    DescriptionExtractor,
    FrontmatterExtractor,
)
from jotter.generators import EnvironmentVariablesGenerator
from jotter.protocols import ContentRenderer, Generator, MetadataExtractor, TemplateRenderer
from jotter.renderers import HTMLRenderer, MarkdownRenderer, RendererRegistry
from jotter.templates import TemplateEngine


def test_renderers_implement_content_renderer():
    assert isinstance(MarkdownRenderer(), ContentRenderer)
    assert isinstance(HTMLRenderer(), ContentRenderer)


def test_extractors_implement_metadata_extractor():
    for extractor in (
        FrontmatterExtractor(),
        DateExtractor(),
        DescriptionExtractor(),
        CompositeMetadataExtractor(),
    ):
        assert isinstance(extractor, MetadataExtractor)


def test_template_engine_implements_template_renderer(tmp_path):
    assert isinstance(TemplateEngine(tmp_path, SiteConfig({})), TemplateRenderer)


def test_generator_protocol():
    assert isinstance(EnvironmentVariablesGenerator({}), Generator)


def test_renderer_registry_selection(tmp_path):
    registry = RendererRegistry(markdown_extensions=["md", "txt"])
    assert registry.get_renderer(Path("a.md")).source_type == "markdown"
    assert registry.get_renderer(Path("a.txt")).source_type == "markdown"
    assert registry.get_renderer(Path("a.html")).source_type == "html"
    assert registry.get_renderer(Path("a.css")) is None

    class Plain:
        source_type = "plain"

        def can_render(self, path):
            return path.suffix == ".rst"

        def render(self, content):
            return content

    registry.register(Plain())
    assert registry.get_renderer(Path("a.rst")).source_type == "plain"


def test_markdown_rendering_details():
    html = MarkdownRenderer().render(
        "# Title\n\n# Title\n\n```nosuchlang\n<x>\n```\n\n~~gone~~\n"
    )
    assert '<h1 id="title">Title</h1>' in html
    assert '<h1 id="title-1">Title</h1>' in html
    assert '<pre><code class="language-nosuchlang">&lt;x&gt;\n</code></pre>' in html
    assert "<del>gone</del>" in html


def test_composite_extractor_merges_in_order(tmp_path):
    path = tmp_path / "2024-01-02-x.md"
    path.write_text("---\ntitle: T\n---\nFirst para.\n", encoding="utf-8")

    class Override:
        def extract(self, content, path):
            return {"description": "custom"}

    composite = CompositeMetadataExtractor()
    composite.add_extractor(Override())
    metadata = composite.extract(path.read_text(encoding="utf-8"), path)
    assert metadata["frontmatter"] == {"title": "T"}
    assert metadata["body"] == "First para.\n"
    assert metadata["date"].year == 2024
    assert metadata["dated"] is True
    assert metadata["description"] == "custom"
