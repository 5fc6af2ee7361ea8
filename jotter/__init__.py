"""Jotter static blog generator.

Jotter turns a directory of Markdown posts with YAML front matter into a
static site using Jinja2 layouts. Before rendering, build-time generators
populate the site configuration; the default one copies the
GA_TRACKING_CODE environment variable into `ga_tracking_code` so layouts
can embed analytics only when a tracking code is set.

The main entry point is the CLI module, which provides commands for
scaffolding a blog, creating posts and building the site.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
