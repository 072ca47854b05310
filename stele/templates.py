"""Template rendering engine for Stele.

This module uses Jinja2 to apply a named template to a content document.
Template lookup, link resolution against the configured base URL and the
template context all live here.

Key class:
- TemplateEngine: Resolves templates and renders documents to HTML.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)
from markupsafe import Markup, escape

from .collections import DocumentCollection
from .config import SiteConfig
from .content import ContentDocument, Template
from .errors import TemplateNotFoundError, TemplateRenderError
from .html_utils import rebase_html_urls, resolve_link
from .renderers import Heading, MarkdownRenderer, highlight_css
from .utils import strip_template_suffix

__all__ = ["TemplateEngine", "render_toc"]


def render_toc(headings: Iterable[Heading]) -> Markup:
    """Render headings as a nested ``<ul>`` table of contents.

    Args:
        headings: Headings in document order.

    Returns:
        Markup-safe HTML, or empty Markup if there are no headings.
    """
    html_parts: list[str] = []
    level_stack: list[int] = []

    for heading in headings:
        level = heading.level

        # Close nested lists if going to a shallower level
        while level_stack and level_stack[-1] > level:
            level_stack.pop()
            html_parts.append("</li></ul>")

        if level_stack and level_stack[-1] == level:
            html_parts.append("</li>")
        else:
            html_parts.append("<ul>")
            level_stack.append(level)

        html_parts.append(f'<li><a href="#{escape(heading.id)}">{escape(heading.text)}</a>')

    while level_stack:
        level_stack.pop()
        html_parts.append("</li></ul>")

    return Markup("".join(html_parts))


def _format_error_message(exc: Exception) -> str:
    """Format a template exception into a user-friendly message."""
    error_type = type(exc).__name__
    if isinstance(exc, TemplateSyntaxError):
        where = f" in {exc.name}" if exc.name else ""
        return f"Template syntax error{where} on line {exc.lineno}: {exc.message}"
    if error_type == "UndefinedError":
        return f"Undefined variable: {exc}"
    if isinstance(exc, TemplateNotFound):
        return f"Included template not found: {exc}"
    return f"{error_type}: {exc}"


class TemplateEngine:
    """Applies Jinja2 templates to content documents.

    The engine is read-only once the document index is set, so render()
    may be called from several threads at once.

    Attributes:
        config: Site configuration.
        templates: Known templates keyed by identifier.
        env: Jinja2 environment rooted at the templates directory.
        documents: Index of documents exposed to templates.
    """

    def __init__(
        self,
        config: SiteConfig,
        templates: Mapping[str, Template],
        markdown: MarkdownRenderer | None = None,
    ):
        self.config = config
        self.templates = dict(templates)
        self.markdown = markdown or MarkdownRenderer()
        self.env = Environment(
            loader=FileSystemLoader(str(config.templates_dir)),
            autoescape=select_autoescape(["html", "htm", "xml"]),
        )
        self.documents = DocumentCollection([])
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = dict(self.config.options)
        self.env.globals["base_url"] = self.config.base_url
        self.env.globals["documents"] = self.documents
        self.env.globals["render_toc"] = render_toc
        self.env.globals["highlight_css"] = lambda selector=".highlight": Markup(highlight_css(selector))

    def set_documents(self, documents: Iterable[ContentDocument], include_drafts: bool) -> None:
        """Set the document index templates see as ``documents``.

        Args:
            documents: Every loaded document.
            include_drafts: Keep drafts in the index.
        """
        collection = DocumentCollection(documents)
        if not include_drafts:
            collection = collection.published()
        self.documents = collection.sorted()
        self.env.globals["documents"] = self.documents

    def resolve(self, document: ContentDocument) -> Template:
        """Find the template a document asks for.

        The front matter ``template`` field wins; otherwise the configured
        default template is used.

        Raises:
            TemplateNotFoundError: If no template has that identifier.
        """
        requested = document.template or self.config.default_template
        name = strip_template_suffix(requested.strip().strip("/"))
        template = self.templates.get(name)
        if template is None:
            raise TemplateNotFoundError(document.path, requested)
        return template

    def url_for(self, path: str, depth: int = 0) -> str:
        """Resolve a site path against the base URL.

        Args:
            path: Path inside the site, with or without a leading slash.
            depth: Folder depth of the page that holds the link.

        Returns:
            URL to emit in that page.
        """
        if "://" in path or path.startswith(("//", "#", "mailto:", "tel:")):
            return path
        target = path if path.startswith("/") else f"/{path}"
        return resolve_link(target, self.config.base_url, depth)

    def render(self, document: ContentDocument) -> str:
        """Render a document through its template.

        Args:
            document: Document to render.

        Returns:
            Rendered HTML string.

        Raises:
            TemplateNotFoundError: If the template cannot be resolved.
            TemplateRenderError: If the template fails to compile or render.
        """
        template = self.resolve(document)
        body_html, headings = self.markdown.render(document.body)
        url_for = functools.partial(self.url_for, depth=document.depth)
        context = {
            "page": document,
            "content": Markup(body_html),
            "toc": headings,
            "url_for": url_for,
            "page_url": url_for(document.url),
        }
        try:
            jinja_template = self.env.get_template(template.loader_name)
            rendered = jinja_template.render(**context)
        except Exception as exc:
            raise TemplateRenderError(document.path, _format_error_message(exc), exc) from exc
        # Links written by url_for are already resolved and pass through unchanged
        return rebase_html_urls(rendered, self.config.base_url, document.depth)
