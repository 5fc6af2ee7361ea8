"""Build-time generators for Jotter.

Generators run once per build, after `_config.yml` is loaded and before any
document is rendered. Each one may write keys into the mutable
configuration mapping; the result is then frozen into a SiteConfig.

Key classes:
- EnvironmentVariablesGenerator: Copies GA_TRACKING_CODE into the config.
- GeneratorRegistry: Ordered collection of generators run by the builder.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from typing import Any


class EnvironmentVariablesGenerator:
    """Copies an environment variable into the site configuration.

    An unset variable writes None, overwriting any static value for the
    key, so layouts can test `{% if site.ga_tracking_code %}` and omit the
    analytics snippet. The value is never validated.

    Attributes:
        variable: Name of the environment variable to read.
        key: Configuration key to write.
    """

    variable = "GA_TRACKING_CODE"
    key = "ga_tracking_code"

    def __init__(self, environ: Mapping[str, str] | None = None):
        """Initialize the generator.

        Args:
            environ: Environment to read from. Defaults to os.environ,
                looked up when the generator runs.
        """
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def generate(self, config: MutableMapping[str, Any]) -> None:
        """Write the environment value into the configuration.

        Args:
            config: Configuration mapping of the current build.
        """
        config[self.key] = self.environ.get(self.variable)


class GeneratorRegistry:
    """Registry for build-time generators.

    Generators run in registration order, each exactly once per call to
    run().
    """

    def __init__(self) -> None:
        self._generators: list = []

    def register(self, generator) -> None:
        """Register a generator.

        Args:
            generator: An object implementing the Generator protocol.
        """
        self._generators.append(generator)

    def __len__(self) -> int:
        return len(self._generators)

    def run(self, config: MutableMapping[str, Any]) -> None:
        """Run every registered generator against the configuration.

        Args:
            config: Configuration mapping of the current build.
        """
        for generator in self._generators:
            generator.generate(config)


def create_default_generator_registry(
    environ: Mapping[str, str] | None = None,
) -> GeneratorRegistry:
    """Create a registry holding the environment-variable injector.

    Args:
        environ: Optional environment mapping; defaults to os.environ.

    Returns:
        GeneratorRegistry with a single EnvironmentVariablesGenerator.
    """
    registry = GeneratorRegistry()
    registry.register(EnvironmentVariablesGenerator(environ))
    return registry
