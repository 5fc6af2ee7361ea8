"""Metadata extractors for Jotter.

This module contains implementations of the MetadataExtractor protocol.
Each extractor handles a single type of metadata.

Key classes:
- FrontmatterExtractor: Splits the YAML header from the body.
- DateExtractor: Derives the publish date from the filename, front matter
  or file.
- DescriptionExtractor: Extracts a short description from the body.
- CompositeMetadataExtractor: Runs several extractors and merges results.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from .errors import FrontMatterError
from .utils import parse_post_filename

FRONTMATTER_RE = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)
EMPTY_FRONTMATTER_RE = re.compile(r"^---[ \t]*\r?\n---[ \t]*(?:\r?\n|$)")


def has_frontmatter(text: str) -> bool:
    """Check whether text starts with a front-matter block.

    Args:
        text: Raw file content.

    Returns:
        True if the first line is a `---` delimiter followed by a closing one.
    """
    return bool(FRONTMATTER_RE.match(text) or EMPTY_FRONTMATTER_RE.match(text))


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, remaining body). Content without a
        front-matter block yields an empty dict and the text unchanged.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping.
    """
    empty = EMPTY_FRONTMATTER_RE.match(text)
    if empty:
        return {}, text[empty.end() :]
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid front matter YAML: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError("Front matter must be a mapping of keys to values")
    return data, text[match.end() :]


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first prose paragraph from text.

    Skips headings, images and code fences, strips HTML tags and Jinja
    syntax, collapses whitespace and truncates to the limit.

    Args:
        text: Body text to extract from.
        limit: Maximum character length of result.

    Returns:
        Cleaned first paragraph, truncated to limit characters.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```", "{%")):
            continue
        para = re.sub(r"<[^>]+>", "", para)
        para = re.sub(r"\{[%#{].*?[%#}]\}", "", para)
        collapsed = " ".join(para.split())
        if collapsed:
            return collapsed[:limit]
    return ""


class FrontmatterExtractor:
    """Extracts the YAML front matter and the body after it."""

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        frontmatter, body = extract_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}


class DateExtractor:
    """Derives the publish date of a document.

    Looks for a YYYY-MM-DD- prefix in the filename, then a `date` key in
    the front matter. Documents with neither (usually pages) fall back to
    the file modification time and are marked as undated.
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        parsed = parse_post_filename(path.stem)
        if parsed is not None:
            return {"date": parsed[0], "dated": True}
        frontmatter, _ = extract_frontmatter(content)
        value = frontmatter.get("date")
        if value is not None:
            return {"date": parse_frontmatter_date(value), "dated": True}
        return {"date": datetime.fromtimestamp(path.stat().st_mtime), "dated": False}


def parse_frontmatter_date(value: Any) -> datetime:
    """Convert a front-matter `date` value to a datetime.

    PyYAML already turns ISO dates into date or datetime objects; strings
    are parsed with datetime.fromisoformat.

    Raises:
        FrontMatterError: If the value is not a date.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).replace(tzinfo=None)
        except ValueError as exc:
            raise FrontMatterError(
                f"Front matter 'date' is not a valid date: {value!r}"
            ) from exc
    raise FrontMatterError(f"Front matter 'date' is not a valid date: {value!r}")


class DescriptionExtractor:
    """Extracts a short plain-text description from the body."""

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        _, body = extract_frontmatter(content)
        return {"description": first_paragraph(body)}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Runs every extractor on the content and merges their results; later
    extractors override earlier ones.
    """

    def __init__(self, extractors: list | None = None):
        if extractors is None:
            self._extractors = [
                FrontmatterExtractor(),
                DateExtractor(),
                DescriptionExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        """Add an extractor to the composite.

        Args:
            extractor: A MetadataExtractor implementation.
        """
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract all metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary with all extracted metadata.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(content, path))
        return result


default_metadata_extractor = CompositeMetadataExtractor()
