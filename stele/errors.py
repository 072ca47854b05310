"""Error types for Stele.

Errors fall into two groups:

- Fatal errors stop a render: ConfigError, DiscoveryError (and its
  NotFoundError subclass) and FileWriteError.
- Document errors affect a single content file: FrontMatterError,
  TemplateNotFoundError and TemplateRenderError. The build collects them,
  keeps rendering the remaining documents, and reports them at the end.
"""

from __future__ import annotations

from pathlib import Path


class SiteError(Exception):
    """Base class for all Stele errors."""


class ConfigError(SiteError):
    """config.yaml could not be read or has the wrong shape."""

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class DiscoveryError(SiteError):
    """Content discovery could not start."""


class NotFoundError(DiscoveryError):
    """A required source directory does not exist.

    Attributes:
        path: The missing directory.
    """

    def __init__(self, path: Path, message: str | None = None):
        self.path = path
        super().__init__(message or f"Source directory not found: {path}")


class DocumentError(SiteError):
    """Error tied to a single content document.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class FrontMatterError(DocumentError):
    """The front matter block is not valid YAML or not a mapping."""


class TemplateNotFoundError(DocumentError):
    """The template a document asks for does not exist.

    Attributes:
        template: The identifier that failed to resolve.
    """

    def __init__(self, source_path: Path, template: str):
        self.template = template
        super().__init__(source_path, f"Template not found: {template!r}")


class TemplateRenderError(DocumentError):
    """The resolved template failed to compile or render."""


class FileWriteError(SiteError):
    """Writing into the output directory failed.

    Attributes:
        path: Destination that could not be written.
        original_error: The underlying OSError.
    """

    def __init__(self, path: Path, original_error: OSError):
        self.path = path
        self.original_error = original_error
        reason = original_error.strerror or str(original_error)
        super().__init__(f"Could not write {path}: {reason}")
