"""Command-line interface for Stele.

This module defines the CLI commands using Click framework.

Commands:
- render: Render content into the output directory.
- serve: Serve the output directory for preview.
- new: Scaffold a new Stele project.
- post: Create a new content file interactively.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import click
import questionary

from . import __version__
from .config import load_config
from .content import ContentLoader
from .errors import ConfigError, DiscoveryError, FileWriteError, SiteError
from .utils import slugify

if TYPE_CHECKING:
    from .build import BuildResult

# Path to the default project skeleton
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold" / "default"


@click.group()
@click.version_option(version=__version__, prog_name="stele")
def cli():
    """Stele static site generator."""


@cli.command()
@click.option("--drafts", is_flag=True, help="List drafts in the document index")
@click.option(
    "--no-clean",
    "no_clean",
    is_flag=True,
    help="Keep files already in the output directory",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of documents to render in parallel",
)
@click.option("--watch", is_flag=True, help="Re-render when sources change")
def render(drafts: bool, no_clean: bool, jobs: int, watch: bool):
    """Render all content into the output directory."""
    project_root = Path.cwd()
    from .build import render_site

    try:
        result = render_site(
            project_root,
            include_drafts=drafts,
            clean_output=not no_clean,
            jobs=jobs,
        )
    except SiteError as exc:
        _report_fatal(exc)
        raise SystemExit(1) from None

    _report_result(result, project_root)
    if watch:
        from .watch import Watcher

        watcher = Watcher(
            project_root,
            include_drafts=drafts,
            jobs=jobs,
            clean_output=not no_clean,
            on_result=lambda res: _report_result(res, project_root),
            on_error=_report_fatal,
        )
        watcher.start()
        return
    if not result.ok:
        raise SystemExit(1)


@cli.command()
@click.option("--host", required=False, help="Interface to bind (overrides config.yaml)")
@click.option(
    "--port",
    type=click.IntRange(0, 65535),
    required=False,
    help="Port to run the server on (overrides config.yaml)",
)
def serve(host: str | None, port: int | None):
    """Serve the output directory over HTTP."""
    project_root = Path.cwd()
    from .server import DevServer

    try:
        config = load_config(project_root).replace(host=host, port=port)
    except ConfigError as exc:
        _report_fatal(exc)
        raise SystemExit(1) from None

    server = DevServer(config.output_dir, host=config.host, port=config.port)
    try:
        server.bind()
    except OSError as exc:
        raise click.ClickException(
            f"Could not listen on {config.host}:{config.port}: {exc.strerror or exc}"
        ) from exc
    server.start()


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Stele project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Stele site created at {target}")


@cli.command()
def post():
    """Create a new content file interactively."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        _report_fatal(exc)
        raise SystemExit(1) from None
    content_dir = config.content_dir

    if not content_dir.exists():
        raise click.ClickException(
            f"No {content_dir.name}/ directory found. Run this command from a Stele project root."
        )

    folder = questionary.select(
        "Select folder:",
        choices=_get_content_folders(content_dir),
        style=_questionary_style(),
    ).ask()
    if folder is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    templates = _get_template_names(config.templates_dir)
    template = config.default_template
    if templates:
        default_choice = "post" if "post" in templates else templates[0]
        template = questionary.select(
            "Template:",
            choices=templates,
            default=default_choice,
            style=_questionary_style(),
        ).ask()
        if template is None:
            raise click.Abort()

    draft = questionary.confirm("Mark as draft?", default=True, style=_questionary_style()).ask()
    if draft is None:
        raise click.Abort()

    add_date = questionary.confirm(
        "Prefix filename with today's date? (YYYY-MM-DD-)",
        default=True,
        style=_questionary_style(),
    ).ask()
    if add_date is None:
        raise click.Abort()

    today = datetime.now()
    target_dir = content_dir if folder == ". (root)" else content_dir / folder
    target_path = target_dir / _post_filename(title, today if add_date else None)
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _post_text(title, template, draft, today), encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _report_fatal(exc: SiteError) -> None:
    """Print a fatal error in the same shape as per-document errors."""
    if isinstance(exc, ConfigError):
        label = "Configuration error:"
    elif isinstance(exc, DiscoveryError):
        label = "Discovery failed:"
    elif isinstance(exc, FileWriteError):
        label = "Write failed:"
    else:
        label = "Render failed:"
    click.echo(click.style(label, fg="red", bold=True), err=True)
    click.echo(click.style(f"  {exc}", fg="white"), err=True)


def _report_result(result: BuildResult, project_root: Path) -> None:
    """Print warnings, per-document errors and the summary of a render."""
    for warning in result.warnings:
        click.echo(
            click.style(f"Warning: {_display_path(warning.path, project_root)}: {warning.message}", fg="yellow"),
            err=True,
        )
    for error in result.errors:
        click.echo(click.style("Document failed:", fg="red", bold=True), err=True)
        click.echo(
            click.style(f"  File: {_display_path(error.source_path, project_root)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {error.message}", fg="white"), err=True)
    click.echo(
        f"Rendered {len(result.rendered)} documents into "
        f"{_display_path(result.output_dir, project_root)}"
    )
    if result.errors:
        click.echo(
            click.style(f"{len(result.errors)} document(s) failed", fg="red", bold=True),
            err=True,
        )


def _display_path(path: Path, project_root: Path) -> str:
    try:
        return str(path.relative_to(project_root))
    except ValueError:
        return str(path)


def _get_content_folders(content_dir: Path) -> list[str]:
    """Get list of folders in the content directory, root option first.

    Hidden folders are excluded.
    """
    folders = []
    for path in sorted(content_dir.rglob("*")):
        rel = path.relative_to(content_dir)
        if path.is_dir() and not any(part.startswith(".") for part in rel.parts):
            folders.append(rel.as_posix())
    folders.insert(0, ". (root)")
    return folders


def _get_template_names(templates_dir: Path) -> list[str]:
    """Get selectable template identifiers; ``_``-prefixed partials are left out."""
    if not templates_dir.is_dir():
        return []
    templates = ContentLoader(templates_dir, templates_dir).discover_templates()
    return [name for name in templates if not Path(name).name.startswith("_")]


def _post_filename(title: str, day: datetime | None) -> str:
    slug = slugify(title)
    if day is not None:
        return f"{day.strftime('%Y-%m-%d')}-{slug}.md"
    return f"{slug}.md"


def _post_text(title: str, template: str, draft: bool, day: datetime) -> str:
    """Front matter and heading for a new content file."""
    escaped = title.replace('"', '\\"')
    lines = [
        "---",
        f'title: "{escaped}"',
        f"date: {day.strftime('%Y-%m-%d')}",
        f"template: {template}",
        f"draft: {'true' if draft else 'false'}",
        "---",
        "",
        "",
    ]
    return "\n".join(lines)


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
    """Create the directory structure and files for a new Stele project.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)

    (root / ".gitignore").write_text("/public/\n", encoding="utf-8")
    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("STELE_SKIP_GIT_INIT") == "1":
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
        # Non-fatal: user can run git init manually
        click.echo("git init failed; skipping repository setup", err=True)
