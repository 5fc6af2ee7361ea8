"""Site configuration for Jotter.

The configuration is built once per build: defaults, then `_config.yml`,
then whatever the registered generators write. It is then frozen into a
SiteConfig and handed to the template engine, which only reads it.

Key names:
- DEFAULT_CONFIG: Built-in defaults.
- load_config: Loads defaults merged with `_config.yml`.
- SiteConfig: Read-only mapping consulted by templates.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import BuildError

CONFIG_FILENAME = "_config.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "",
    "description": "",
    "url": "",
    "baseurl": "",
    "destination": "_site",
    "permalink": "/:year/:month/:day/:title/",
    "markdown_ext": ["md", "markdown"],
    "exclude": [],
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from _config.yml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Mutable dictionary of configuration values, with defaults applied.

    Raises:
        BuildError: If _config.yml is not valid YAML.
    """
    config_path = project_root / CONFIG_FILENAME
    config = {
        key: list(value) if isinstance(value, list) else value
        for key, value in DEFAULT_CONFIG.items()
    }
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise BuildError(config_path, f"Invalid YAML: {exc}", exc) from exc
        if isinstance(loaded, dict):
            config.update(loaded)
    return config


class SiteConfig(Mapping[str, Any]):
    """Read-only view of the configuration for one build.

    Templates access keys either as `site["title"]` or `site.title`;
    Jinja2 falls back to item lookup for attribute access on mappings.
    Missing keys read as None through `.get()`.
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"SiteConfig({self._values!r})"

    @property
    def destination(self) -> str:
        return str(self._values.get("destination") or DEFAULT_CONFIG["destination"])

    @property
    def markdown_extensions(self) -> list[str]:
        value = self._values.get("markdown_ext", DEFAULT_CONFIG["markdown_ext"])
        if isinstance(value, str):
            return [ext.strip().lstrip(".") for ext in value.split(",") if ext.strip()]
        return [str(ext).lstrip(".") for ext in value]

    @property
    def exclude_patterns(self) -> list[str]:
        value = self._values.get("exclude") or []
        if isinstance(value, str):
            return [value]
        return [str(pattern) for pattern in value]
