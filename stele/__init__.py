"""Stele static site generator.

This package renders a tree of Markdown documents with YAML front matter
through named Jinja2 templates into a static HTML site, and serves the
result locally for preview.

The main entry point is the CLI module, which provides commands for
scaffolding projects, rendering sites and running the preview server.

Pipeline:
- config: site options from config.yaml.
- content: discovery of documents and templates.
- templates: applying a template to a document.
- writer: writing the output tree.
- server: static preview of the output tree.
"""

__all__ = ["__version__"]
__version__ = "0.2.0"
