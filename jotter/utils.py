"""Utility functions for Jotter.

This module contains small helpers used throughout the Jotter codebase:
string processing, post filename parsing, path classification and output
directory handling.

Key functions:
    slugify: Convert filenames and titles to URL slugs.
    parse_post_filename: Split a YYYY-MM-DD-slug post filename.
    build_topics_index: Build index of posts by topic.
    is_markdown: Check if a path is a Markdown file.
    is_html: Check if a path is an HTML file.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

POST_FILENAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")


def slugify(name: str) -> str:
    """Convert a filename stem or title to a URL slug.

    Args:
        name: Filename stem or free text.

    Returns:
        Lowercase slug with non-alphanumerics collapsed to hyphens.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def parse_post_filename(stem: str) -> tuple[datetime, str] | None:
    """Split a post filename stem into its publish date and slug.

    Args:
        stem: Filename stem (without extension).

    Returns:
        Tuple of (date, slug), or None when the stem has no valid
        YYYY-MM-DD- prefix.

    Examples:
        >>> parse_post_filename("2024-01-15-hello-world")
        (datetime(2024, 1, 15, 0, 0), 'hello-world')

        >>> parse_post_filename("hello-world") is None
        True
    """
    match = POST_FILENAME_RE.match(stem)
    if not match:
        return None
    year, month, day, rest = match.groups()
    try:
        date = datetime(int(year), int(month), int(day))
    except ValueError:
        return None
    return date, slugify(rest)


def is_markdown(path: Path, extensions: Iterable[str] = ("md", "markdown")) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.
        extensions: Accepted extensions without the leading dot.

    Returns:
        True if the suffix matches one of the extensions (case-insensitive).
    """
    return path.suffix.lower().lstrip(".") in {ext.lower() for ext in extensions}


def is_html(path: Path) -> bool:
    """Check if a path is an HTML file.

    Args:
        path: Path to check.

    Returns:
        True if the file has an .html or .htm extension.
    """
    return path.suffix.lower() in (".html", ".htm")


def is_internal_path(path: Path) -> bool:
    """Check if a relative path is internal to the generator.

    Internal paths (layouts, includes, posts, hidden files) have a
    component starting with an underscore or a dot.

    Args:
        path: Path relative to the project root.

    Returns:
        True if any path component starts with "_" or ".".
    """
    return any(part.startswith(("_", ".")) for part in path.parts)


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)


def build_topics_index(posts: Iterable) -> dict[str, list]:
    """Build an index mapping topics to the posts filed under them.

    Args:
        posts: Iterable of Document objects with a 'topic' attribute.

    Returns:
        Dictionary mapping topic names to lists of posts, in input order.
    """
    topics: dict[str, list] = {}
    for post in posts:
        if post.topic:
            topics.setdefault(post.topic, []).append(post)
    return topics
