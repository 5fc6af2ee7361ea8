from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

from jotter import utils
from jotter.html_utils import escape_html, join_root_url


def test_slugify():
    assert utils.slugify("Hello, World!") == "hello-world"
    assert utils.slugify("---") == "index"


def test_parse_post_filename():
    assert utils.parse_post_filename("2024-01-15-hello-world") == (
        datetime(2024, 1, 15),
        "hello-world",
    )
    assert utils.parse_post_filename("2024-01-15-Hello_World") == (
        datetime(2024, 1, 15),
        "hello-world",
    )
    assert utils.parse_post_filename("hello-world") is None
    assert utils.parse_post_filename("2024-13-45-bad-date") is None
    assert utils.parse_post_filename("2024-01-15") is None


def test_path_classification(tmp_path):
    assert utils.is_markdown(tmp_path / "post.md")
    assert utils.is_markdown(tmp_path / "post.MARKDOWN")
    assert not utils.is_markdown(tmp_path / "post.txt")
    assert utils.is_markdown(tmp_path / "post.txt", extensions=["txt"])
    assert utils.is_html(tmp_path / "index.html")
    assert not utils.is_html(tmp_path / "index.md")

    assert utils.is_internal_path(Path("_layouts/default.html"))
    assert utils.is_internal_path(Path(".git/config"))
    assert not utils.is_internal_path(Path("css/main.css"))


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "out"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "old.html").write_text("old", encoding="utf-8")
    utils.ensure_clean_dir(target)
    assert target.exists()
    assert list(target.iterdir()) == []


def test_build_topics_index_skips_posts_without_topic():
    a = SimpleNamespace(topic="ruby")
    b = SimpleNamespace(topic=None)
    c = SimpleNamespace(topic="ruby")
    d = SimpleNamespace(topic="life")
    assert utils.build_topics_index([a, b, c, d]) == {"ruby": [a, c], "life": [d]}


def test_html_helpers():
    assert escape_html('<a href="x">Tom & Jerry</a>') == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&lt;/a&gt;"
    )
    assert join_root_url("https://example.com/", "about") == "https://example.com/about"
    assert join_root_url("", "about") == "/about"
    assert join_root_url("/blog", "/feed.xml") == "/blog/feed.xml"
