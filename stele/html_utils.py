"""HTML utility functions for Stele.

This module provides HTML escaping and the link rewriting that applies the
configured base URL to generated pages.

A base URL is either anchored (``/``, ``/blog/`` or ``https://example.com``)
for sites served from a web server, or relative (``.``, ``./``, ``docs/``)
for sites browsed straight from the filesystem. Relative bases are
re-anchored to each page's depth so the same link works from every folder.

Functions:
    escape_html: Escape special HTML characters in a string.
    is_relative_base: Tell relative bases from anchored ones.
    join_base_url: Join an anchored base URL with a path.
    resolve_link: Resolve a root-relative link for a page at a given depth.
    rebase_html_urls: Apply resolve_link to href, src and action attributes.
"""

from __future__ import annotations

import re

# URL attribute regex pattern for finding href, src, action attributes
_URL_ATTR_RE = re.compile(
    r'(?P<prefix>\b(?:href|src|action)=["\'])(?P<url>[^"\']+)(?P<suffix>["\'])'
)

# URL prefixes that should not be modified
_URL_SKIP_PREFIXES = (
    "http://",
    "https://",
    "//",
    "mailto:",
    "tel:",
    "#",
    "javascript:",
    "data:",
)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_QUERY_OR_FRAGMENT_RE = re.compile(r"[?#]")


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Examples:
        >>> escape_html('<a href="x">Tom & Jerry</a>')
        '&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&lt;/a&gt;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def is_relative_base(base_url: str) -> bool:
    """Return True for bases meant for filesystem browsing.

    Examples:
        >>> is_relative_base("./")
        True

        >>> is_relative_base("/blog/")
        False
    """
    return not (base_url.startswith("/") or _SCHEME_RE.match(base_url))


def join_base_url(base_url: str, path: str) -> str:
    """Safely join an anchored base URL and a path, avoiding double slashes.

    Examples:
        >>> join_base_url('https://example.com', '/about.html')
        'https://example.com/about.html'

        >>> join_base_url('/', 'about.html')
        '/about.html'
    """
    base = base_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def _relative_prefix(base_url: str, depth: int) -> str:
    base = base_url.strip()
    while base.startswith("./"):
        base = base[2:]
    if base == ".":
        base = ""
    if base and not base.endswith("/"):
        base += "/"
    return "../" * depth + base


def resolve_link(path: str, base_url: str, depth: int = 0) -> str:
    """Resolve a root-relative link against the base URL.

    Args:
        path: Link target such as ``/posts/`` or ``/css/site.css``.
        base_url: Configured base URL.
        depth: Number of directories between the output root and the page
            holding the link; only used for relative bases.

    Returns:
        The link to emit. External links and fragments are returned as-is.

    Examples:
        >>> resolve_link('/about.html', 'https://example.com/blog/')
        'https://example.com/blog/about.html'

        >>> resolve_link('/posts/', '.', depth=1)
        '../posts/index.html'
    """
    if not path or path.startswith(_URL_SKIP_PREFIXES):
        return path
    if not is_relative_base(base_url):
        return join_base_url(base_url, path)
    target = path.lstrip("/")
    fragment = ""
    marker = _QUERY_OR_FRAGMENT_RE.search(target)
    if marker:
        target, fragment = target[: marker.start()], target[marker.start() :]
    if target == "" or target.endswith("/"):
        target += "index.html"
    return f"{_relative_prefix(base_url, depth)}{target}{fragment}"


def rebase_html_urls(html: str, base_url: str, depth: int = 0) -> str:
    """Rewrite root-relative URLs in HTML against the base URL.

    Only values starting with a single ``/`` are rewritten. Relative links,
    external URLs, anchors, mailto/tel, javascript: and data: URLs are left
    unchanged, and so are links already under an anchored base path such as
    ``/blog/``, which makes rewriting idempotent.

    Examples:
        >>> rebase_html_urls('<a href="/about.html">About</a>', 'https://example.com')
        '<a href="https://example.com/about.html">About</a>'

        >>> rebase_html_urls('<a href="notes.html">Notes</a>', 'https://example.com')
        '<a href="notes.html">Notes</a>'
    """
    if base_url == "/":
        return html
    resolved_prefix = f"{base_url.rstrip('/')}/" if base_url.startswith("/") else None

    def repl(match: re.Match) -> str:
        url = match.group("url")
        if not url.startswith("/") or url.startswith("//"):
            return match.group(0)
        if resolved_prefix and url.startswith(resolved_prefix):
            return match.group(0)
        rebased = resolve_link(url, base_url, depth)
        return f"{match.group('prefix')}{rebased}{match.group('suffix')}"

    return _URL_ATTR_RE.sub(repl, html)
