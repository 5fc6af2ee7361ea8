from datetime import datetime
from pathlib import Path

import pytest

from jotter.config import SiteConfig
from jotter.content import Document
from jotter.templates import TemplateEngine


def make_document(path: Path, **overrides) -> Document:
    values = dict(
        title="Hello",
        layout="default",
        topic=None,
        body="Hi",
        content="<p>Hi</p>",
        description="Hi",
        date=datetime(2024, 1, 15),
        slug="hello",
        url="/2024/01/15/hello/",
        kind="post",
        path=path,
        source_type="markdown",
    )
    values.update(overrides)
    return Document(**values)


def create_layouts(tmp_path: Path) -> Path:
    (tmp_path / "_layouts").mkdir()
    (tmp_path / "_includes").mkdir()
    (tmp_path / "_includes" / "analytics.html").write_text(
        "{% if site.ga_tracking_code %}<script>gtag('config', '{{ site.ga_tracking_code }}');</script>{% endif %}",
        encoding="utf-8",
    )
    (tmp_path / "_layouts" / "default.html").write_text(
        "<title>{{ page.title }} | {{ site.title }}</title>"
        '{% include "analytics.html" %}{% block body %}{{ content }}{% endblock %}',
        encoding="utf-8",
    )
    (tmp_path / "_layouts" / "post.html").write_text(
        '{% extends "default.html" %}{% block body %}<article>{{ content }}</article>{% endblock %}',
        encoding="utf-8",
    )
    return tmp_path


def test_renders_with_layout_and_tracking_code(tmp_path):
    root = create_layouts(tmp_path)
    site = SiteConfig({"title": "Blog", "ga_tracking_code": "UA-12345"})
    engine = TemplateEngine(root, site)

    rendered = engine.render_document(make_document(root / "x.md"))
    assert "<title>Hello | Blog</title>" in rendered
    assert "gtag('config', 'UA-12345');" in rendered
    assert "<p>Hi</p>" in rendered
    assert engine.warnings == []


def test_absent_tracking_code_omits_snippet(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, SiteConfig({"title": "Blog", "ga_tracking_code": None}))
    rendered = engine.render_document(make_document(root / "x.md"))
    assert "<script>" not in rendered
    assert "<p>Hi</p>" in rendered

    engine = TemplateEngine(root, SiteConfig({"title": "Blog"}))
    assert "<script>" not in engine.render_document(make_document(root / "x.md"))


def test_layout_inheritance(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, SiteConfig({"title": "Blog"}))
    rendered = engine.render_document(make_document(root / "x.md", layout="post"))
    assert "<article><p>Hi</p></article>" in rendered
    assert "<title>Hello | Blog</title>" in rendered


def test_missing_layout_renders_body_with_warning(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, SiteConfig({}))
    rendered = engine.render_document(make_document(root / "x.md", layout="nope"))
    assert rendered == "<p>Hi</p>"
    assert len(engine.warnings) == 1
    assert "layout 'nope' does not exist" in engine.warnings[0]


def test_html_bodies_are_jinja_templates(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, SiteConfig({"title": "Blog", "baseurl": "/blog"}))
    post = make_document(root / "_posts" / "2024-01-15-hello.md", topic="ruby")
    engine.update_collections([post], {"ruby": [post]})

    index = make_document(
        root / "index.html",
        kind="page",
        url="/",
        source_type="html",
        content="{% for p in posts %}<a href=\"{{ url_for(p.url) }}\">{{ p.title }}</a>{% endfor %}"
        "{{ topics['ruby'] | length }}",
    )
    rendered = engine.render_document(index)
    assert '<a href="/blog/2024/01/15/hello/">Hello</a>1' in rendered


def test_site_config_is_read_only(tmp_path):
    engine = TemplateEngine(tmp_path, SiteConfig({"title": "Blog"}))
    with pytest.raises(TypeError):
        engine.site["title"] = "Other"
    assert engine.render_string("{{ site.title }}", {}) == "Blog"


def test_url_for(tmp_path):
    engine = TemplateEngine(tmp_path, SiteConfig({}))
    assert engine._url_for("css/main.css") == "/css/main.css"
    assert engine._url_for("https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"

    engine = TemplateEngine(tmp_path, SiteConfig({"baseurl": "/blog/"}))
    assert engine._url_for("/feed.xml") == "/blog/feed.xml"
