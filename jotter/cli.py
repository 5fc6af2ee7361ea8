"""Command-line interface for Jotter.

This module defines the CLI commands using the Click framework.

Commands:
- new: Scaffold a new blog project.
- build: Build the site into the destination directory.
- post: Create a new dated post interactively.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .content import POSTS_DIR
from .errors import FrontMatterError
from .extractors import extract_frontmatter
from .utils import parse_post_filename, slugify

_SKELETON_DIR = Path(__file__).parent / "skeleton"
_NO_TOPIC = "(no topic)"
_NEW_TOPIC = "(new topic)"


@click.group()
@click.version_option(version=__version__, prog_name="jotter")
def cli():
    """Jotter static blog generator."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new blog project."""
    target = Path(name).resolve()
    if target.exists() and not target.is_dir():
        raise click.ClickException(f"Not a directory: {target}")
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Jotter blog created at {target}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include posts from _drafts")
@click.option(
    "--destination",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (overrides destination in _config.yml)",
)
def build(drafts: bool, destination: Path | None):
    """Build the site into the destination directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(
            project_root, include_drafts=drafts, destination=destination
        )
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(
            click.style(f"  File: {_display_path(exc.source_path, project_root)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None

    for warning in result.warnings:
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    if result.site.get("ga_tracking_code") is None:
        click.echo("GA_TRACKING_CODE is not set; analytics will be omitted.")
    click.echo(
        f"Built {len(result.content.posts)} posts and {len(result.content.pages)} "
        f"pages into {result.output_dir}"
    )


@cli.command()
def post():
    """Create a new post interactively."""
    project_root = Path.cwd()
    posts_dir = project_root / POSTS_DIR
    if not (project_root / "_config.yml").exists():
        raise click.ClickException(
            "No _config.yml found. Run this command from a Jotter project root."
        )

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    topic = questionary.select(
        "Topic:",
        choices=[_NO_TOPIC, *_get_existing_topics(posts_dir), _NEW_TOPIC],
        style=_questionary_style(),
    ).ask()
    if topic is None:
        raise click.Abort()
    if topic == _NEW_TOPIC:
        topic = questionary.text(
            "New topic:",
            validate=lambda x: len(x.strip()) > 0 or "Topic cannot be empty",
            style=_questionary_style(),
        ).ask()
        if topic is None:
            raise click.Abort()
        topic = topic.strip()
    elif topic == _NO_TOPIC:
        topic = None

    slug = slugify(title)
    existing = _get_existing_slugs(posts_dir)
    if slug in existing:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {existing[slug]}"
        )

    filename = f"{datetime.now().strftime('%Y-%m-%d')}-{slug}.md"
    target_path = posts_dir / filename
    posts_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(_post_template(title, topic), encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _post_template(title: str, topic: str | None) -> str:
    lines = ["---", "layout: post"]
    if topic:
        lines.append(f"topic: {_yaml_scalar(topic)}")
    lines.append(f"title: {_yaml_scalar(title)}")
    lines.extend(["---", "", ""])
    return "\n".join(lines)


def _yaml_scalar(value: str) -> str:
    """Quote a value so YAML reads it back as the same string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _get_existing_topics(posts_dir: Path) -> list[str]:
    """Collect the topics already used by posts, sorted."""
    topics: set[str] = set()
    if not posts_dir.is_dir():
        return []
    for path in posts_dir.glob("*.md"):
        try:
            front_matter, _ = extract_frontmatter(path.read_text(encoding="utf-8"))
        except FrontMatterError:
            continue
        topic = front_matter.get("topic")
        if isinstance(topic, str) and topic.strip():
            topics.add(topic.strip())
    return sorted(topics)


def _get_existing_slugs(posts_dir: Path) -> dict[str, str]:
    """Map slugs of existing posts to their filenames."""
    slugs: dict[str, str] = {}
    if posts_dir.is_dir():
        for f in sorted(posts_dir.iterdir()):
            parsed = parse_post_filename(f.stem) if f.is_file() else None
            if parsed:
                slugs[parsed[1]] = f.name
    return slugs


def _display_path(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new blog.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SKELETON_DIR.rglob("*"):
        if src_path.is_dir() or "__pycache__" in src_path.parts:
            continue
        dest_path = root / src_path.relative_to(_SKELETON_DIR)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)

    (root / ".gitignore").write_text("_site/\n", encoding="utf-8")
    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("JOTTER_SKIP_GIT_INIT") == "1":
        return
    git_bin = shutil.which("git")
    if not git_bin:
        return
    try:
        subprocess.run(
            [git_bin, "init"],
            cwd=root,
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError):
        click.echo("git init failed; run it manually if you want version control.")
