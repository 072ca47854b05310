from pathlib import Path

import pytest


def write_files(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


SAMPLE_SITE = {
    "config.yaml": "title: Test Site\nauthor: Jo\nbase-url: /\n",
    "templates/default.html": (
        "<title>{{ page.title }} | {{ site.title }}</title><main>{{ content }}</main>"
    ),
    "templates/post.html": (
        "<article><h1>{{ page.title }}</h1>{{ content }}</article>"
        "<a class=\"home\" href=\"{{ url_for('/') }}\">home</a>"
    ),
    "templates/list.html": (
        "<ul>{% for doc in documents %}<li>{{ doc.title }}</li>{% endfor %}</ul>"
    ),
    "content/index.md": "---\ntitle: Home\ntemplate: list\n---\n\nWelcome\n",
    "content/about.md": "# About Us\n\nSee the [first post](/posts/first.html).\n",
    "content/posts/first.md": (
        "---\ntitle: First\ntemplate: post\ndate: 2024-01-02\n---\n\nHello **world**\n"
    ),
    "content/posts/second.md": (
        "---\ntitle: Second\ntemplate: post\ndate: 2024-03-04\ndraft: true\n---\n\nLater\n"
    ),
    "static/css/site.css": "body { color: black; }\n",
}


@pytest.fixture
def site_project(tmp_path):
    """A small project with a home index, a page, a post and a draft."""
    return write_files(tmp_path / "site", SAMPLE_SITE)


@pytest.fixture
def make_files():
    return write_files
