"""Site rendering for Stele.

This module contains the core logic for rendering a site from source files.
It loads configuration and content, applies templates, and writes the
output tree.

Errors that concern a single document (bad front matter, unknown template,
a template that fails) are collected on the result; every other document
still renders. Missing sources, a broken config.yaml and write failures
stop the run.

Key functions:
- render_site: Render the whole site into the output directory.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .config import SiteConfig, load_config
from .content import ContentDocument, ContentLoader, LoadWarning
from .errors import DocumentError
from .templates import TemplateEngine
from .writer import OutputWriter


@dataclass
class RenderedDocument:
    """A document together with its rendered HTML."""

    document: ContentDocument
    html: str


@dataclass
class BuildResult:
    """Result of a site render.

    Attributes:
        rendered: Documents that rendered and were written, in path order.
        output_dir: Directory the site was written to.
        errors: Per-document errors, in path order.
        warnings: Skipped files and other non-fatal notices.
        static_files: Static files copied into the output.
    """

    rendered: list[RenderedDocument]
    output_dir: Path
    errors: list[DocumentError] = field(default_factory=list)
    warnings: list[LoadWarning] = field(default_factory=list)
    static_files: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _render_one(engine: TemplateEngine, document: ContentDocument) -> RenderedDocument | DocumentError:
    try:
        return RenderedDocument(document=document, html=engine.render(document))
    except DocumentError as exc:
        return exc


def render_site(
    project_root: Path,
    include_drafts: bool = False,
    clean_output: bool = True,
    jobs: int = 1,
    config: SiteConfig | None = None,
) -> BuildResult:
    """Render the entire site.

    Args:
        project_root: Root directory of the project.
        include_drafts: List drafts in the document index even when the
            configuration says otherwise. Drafts are always written.
        clean_output: Empty the output directory before writing.
        jobs: Number of documents to render concurrently.
        config: Pre-loaded configuration; loaded from config.yaml if None.

    Returns:
        BuildResult with rendered documents, errors and warnings.

    Raises:
        ConfigError: If config.yaml is unusable or output-dir would overlap
            the sources.
        NotFoundError: If the content directory does not exist.
        FileWriteError: If the output cannot be written.
    """
    if config is None:
        config = load_config(project_root)
    else:
        config.validate()
    loaded = ContentLoader(config.content_dir, config.templates_dir).load()

    engine = TemplateEngine(config, loaded.templates)
    engine.set_documents(loaded.documents, include_drafts or config.index_drafts)

    if jobs > 1 and len(loaded.documents) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(lambda doc: _render_one(engine, doc), loaded.documents))
    else:
        outcomes = [_render_one(engine, doc) for doc in loaded.documents]

    rendered = [o for o in outcomes if isinstance(o, RenderedDocument)]
    errors = list(loaded.errors) + [o for o in outcomes if isinstance(o, DocumentError)]
    errors.sort(key=lambda e: str(e.source_path))

    writer = OutputWriter(config.output_dir)
    writer.prepare(clean=clean_output)
    static_files = writer.copy_static(config.static_dir)
    for item in rendered:
        writer.write(item.document.output_path, item.html)

    return BuildResult(
        rendered=rendered,
        output_dir=config.output_dir,
        errors=errors,
        warnings=list(loaded.warnings),
        static_files=static_files,
    )
