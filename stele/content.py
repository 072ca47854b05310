"""Content discovery for Stele.

This module finds the inputs of a render: Markdown documents with YAML
front matter under the content root, and templates under the templates
root. Loading never renders anything; it only reads files and parses
front matter.

Key classes:
- ContentDocument: Immutable front matter + body of one content file.
- Template: A named template file.
- LoadResult: Everything discovered in one pass, plus problems found.
- ContentLoader: Walks the source trees and builds the above.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .errors import DocumentError, FrontMatterError, NotFoundError
from .utils import (
    as_datetime,
    first_heading,
    is_hidden,
    is_markdown,
    output_path_for,
    parse_bool,
    parse_tags,
    strip_template_suffix,
    titleize,
    url_for_output,
)

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<meta>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def parse_front_matter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from the body.

    Args:
        text: Raw file content.
        path: Source path, for error reporting.

    Returns:
        Tuple of (front matter dict, body). Text without a front matter
        block yields an empty dict and the text unchanged.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group("meta"))
    except (yaml.YAMLError, ValueError) as exc:
        # PyYAML raises ValueError for timestamps like 2024-02-30
        raise FrontMatterError(path, f"Invalid front matter: {exc}", exc) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(path, "Front matter must be a mapping of keys to values")
    return {str(key): value for key, value in data.items()}, text[match.end() :]


@dataclass(frozen=True)
class ContentDocument:
    """One content file: front matter plus raw body text.

    Attributes:
        path: Absolute path to the source file.
        rel_path: Path relative to the content root.
        front_matter: Read-only mapping parsed from the front matter block.
        body: Markdown text after the front matter.
    """

    path: Path
    rel_path: Path
    front_matter: Mapping[str, Any]
    body: str

    @classmethod
    def from_text(cls, path: Path, rel_path: Path, text: str) -> ContentDocument:
        front_matter, body = parse_front_matter(text, path)
        return cls(
            path=path,
            rel_path=rel_path,
            front_matter=MappingProxyType(front_matter),
            body=body,
        )

    @property
    def title(self) -> str:
        value = self.front_matter.get("title")
        if value:
            return str(value)
        return first_heading(self.body) or titleize(self.rel_path.name)

    @property
    def template(self) -> str | None:
        value = self.front_matter.get("template")
        return str(value) if value else None

    @property
    def draft(self) -> bool:
        return parse_bool(self.front_matter.get("draft"))

    @property
    def date(self) -> datetime | None:
        return as_datetime(self.front_matter.get("date"))

    @property
    def author(self) -> str | None:
        value = self.front_matter.get("author")
        return str(value) if value else None

    @property
    def tags(self) -> list[str]:
        return parse_tags(self.front_matter.get("tags"))

    @property
    def folder(self) -> str:
        parent = self.rel_path.parent.as_posix()
        return "" if parent == "." else parent

    @property
    def output_path(self) -> Path:
        return output_path_for(self.rel_path)

    @property
    def url(self) -> str:
        return url_for_output(self.output_path)

    @property
    def depth(self) -> int:
        """Number of folders between the output root and this document."""
        return len(self.output_path.parts) - 1


@dataclass(frozen=True)
class Template:
    """A template file addressed by identifier.

    Attributes:
        name: Identifier, e.g. ``default`` or ``blog/post``.
        path: Absolute path to the template file.
        loader_name: Path relative to the templates root, as Jinja2 sees it.
    """

    name: str
    path: Path
    loader_name: str


@dataclass(frozen=True)
class LoadWarning:
    """A non-fatal problem found while loading."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class LoadResult:
    """Documents and templates found by one ContentLoader pass.

    Attributes:
        documents: Loaded documents, ordered by relative path.
        templates: Templates keyed by identifier.
        warnings: Files that were skipped.
        errors: Documents that could not be loaded.
    """

    documents: list[ContentDocument] = field(default_factory=list)
    templates: dict[str, Template] = field(default_factory=dict)
    warnings: list[LoadWarning] = field(default_factory=list)
    errors: list[DocumentError] = field(default_factory=list)


class ContentLoader:
    """Discovers content documents and templates.

    Attributes:
        content_dir: Root of the Markdown tree.
        templates_dir: Root of the template tree.
    """

    def __init__(self, content_dir: Path, templates_dir: Path):
        self.content_dir = content_dir
        self.templates_dir = templates_dir

    def load(self) -> LoadResult:
        """Load every document and template.

        Returns:
            LoadResult with documents, templates, warnings and errors.

        Raises:
            NotFoundError: If the content root does not exist.
        """
        if not self.content_dir.is_dir():
            raise NotFoundError(self.content_dir, f"Content directory not found: {self.content_dir}")
        result = LoadResult()
        for path in self.iter_content_files():
            rel = path.relative_to(self.content_dir)
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                result.warnings.append(LoadWarning(path, f"Skipped unreadable file ({exc})"))
                continue
            try:
                result.documents.append(ContentDocument.from_text(path, rel, text))
            except FrontMatterError as exc:
                result.errors.append(exc)
        if self.templates_dir.is_dir():
            result.templates = self.discover_templates()
        else:
            result.warnings.append(
                LoadWarning(self.templates_dir, "Templates directory not found")
            )
        return result

    def iter_content_files(self) -> list[Path]:
        """Return Markdown files under the content root, sorted by path."""
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            rel = path.relative_to(self.content_dir)
            if is_hidden(rel) or path.is_dir():
                continue
            if is_markdown(path):
                files.append(path)
        return files

    def discover_templates(self) -> dict[str, Template]:
        """Map template identifiers to template files.

        When two files share an identifier (``post.html`` and
        ``post.jinja``), the first in sorted order wins.
        """
        templates: dict[str, Template] = {}
        for path in sorted(self.templates_dir.rglob("*")):
            rel = path.relative_to(self.templates_dir)
            if is_hidden(rel) or path.is_dir():
                continue
            loader_name = rel.as_posix()
            name = strip_template_suffix(loader_name)
            templates.setdefault(name, Template(name=name, path=path, loader_name=loader_name))
        return templates
