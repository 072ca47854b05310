"""Utility functions for Stele.

This module contains small helpers used throughout the Stele codebase:
string processing, path handling and lenient value parsing.

Key functions:
    slugify: Convert text to a URL slug.
    titleize: Convert filenames to human-readable titles.
    parse_bool: Interpret YAML and string flags.
    parse_tags: Normalize a tags value into a list.
    output_path_for: Map a content path to its HTML output path.
    is_markdown: Check if a path is a Markdown file.
    is_hidden: Check if a relative path has a dot-prefixed component.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

TEMPLATE_SUFFIXES = (".html.jinja", ".jinja", ".html", ".htm", ".xml")

_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}


def slugify(name: str) -> str:
    """Convert text to a lowercase, hyphen-separated slug.

    Args:
        name: Text such as a title or filename stem.

    Returns:
        URL-friendly slug, or "untitled" when nothing usable remains.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "untitled"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = Path(filename).stem
    if "-" in base:
        parts = base.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            base = "-".join(parts[3:])
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def parse_bool(value: Any) -> bool:
    """Interpret a front matter or config flag.

    YAML already turns ``true``/``false`` into booleans; strings such as
    ``"yes"`` or ``"1"`` written in quotes are accepted too.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def parse_tags(value: Any) -> list[str]:
    """Normalize a tags value into a list of unique strings.

    Accepts a YAML list or a comma-separated string.

    Examples:
        >>> parse_tags("python, raku")
        ['python', 'raku']
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = [str(value)]
    tags: list[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def as_datetime(value: Any) -> datetime | None:
    """Coerce a front matter date into a datetime, or None.

    YAML yields ``date`` or ``datetime`` objects for unquoted dates; quoted
    ISO strings are parsed as well. Aware datetimes are converted to naive
    UTC so dates from different documents stay comparable.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def first_heading(text: str) -> str | None:
    """Return the text of the first level-1 Markdown heading, if any."""
    in_fence = False
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_fence = not in_fence
            continue
        if not in_fence and stripped.startswith("# "):
            return stripped[2:].strip() or None
    return None


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_hidden(rel: Path) -> bool:
    """Check if any component of a relative path starts with a dot."""
    return any(part.startswith(".") for part in rel.parts)


def strip_template_suffix(name: str) -> str:
    """Remove a known template suffix from a name.

    Examples:
        >>> strip_template_suffix("blog/post.html.jinja")
        'blog/post'

        >>> strip_template_suffix("default")
        'default'
    """
    lowered = name.lower()
    for suffix in TEMPLATE_SUFFIXES:
        if lowered.endswith(suffix):
            return name[: -len(suffix)]
    return name


def output_path_for(rel: Path) -> Path:
    """Map a content path to its output path by rewriting the extension.

    Examples:
        >>> output_path_for(Path("posts/hello.md")).as_posix()
        'posts/hello.html'
    """
    return rel.with_suffix(".html")


def url_for_output(rel_output: Path) -> str:
    """Return the root-relative URL of an output file.

    ``index.html`` files collapse to their directory so links read
    ``/posts/`` rather than ``/posts/index.html``.
    """
    posix = rel_output.as_posix()
    if rel_output.name == "index.html":
        parent = rel_output.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{posix}"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    path.mkdir(parents=True, exist_ok=True)
