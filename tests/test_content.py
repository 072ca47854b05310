from datetime import datetime
from pathlib import Path

import pytest

from stele.content import ContentDocument, ContentLoader, parse_front_matter
from stele.errors import FrontMatterError, NotFoundError


def test_parse_front_matter_splits_body():
    meta, body = parse_front_matter("---\ntitle: Hi\ndraft: true\n---\nBody\n", Path("a.md"))
    assert meta == {"title": "Hi", "draft": True}
    assert body == "Body\n"


def test_parse_front_matter_absent_and_empty():
    assert parse_front_matter("# Just text\n", Path("a.md")) == ({}, "# Just text\n")
    assert parse_front_matter("---\n---\nBody", Path("a.md")) == ({}, "Body")
    assert parse_front_matter("---\ntitle: End\n---", Path("a.md")) == ({"title": "End"}, "")


def test_parse_front_matter_errors():
    with pytest.raises(FrontMatterError):
        parse_front_matter("---\ntitle: [oops\n---\nBody", Path("a.md"))
    with pytest.raises(FrontMatterError) as exc_info:
        parse_front_matter("---\n- a\n- b\n---\nBody", Path("a.md"))
    assert exc_info.value.source_path == Path("a.md")


def test_impossible_date_is_a_front_matter_error():
    with pytest.raises(FrontMatterError) as exc_info:
        parse_front_matter("---\ndate: 2024-13-45\n---\nBody", Path("bad-date.md"))
    assert exc_info.value.source_path == Path("bad-date.md")
    assert isinstance(exc_info.value.original_error, ValueError)


def test_document_properties():
    doc = ContentDocument.from_text(
        Path("/src/content/posts/2024-01-15-calls.md"),
        Path("posts/2024-01-15-calls.md"),
        "---\ndate: 2024-01-15\ntags: raku, syntax\nauthor: Jo\ndraft: 'yes'\n---\n# Method Calls\n\nText",
    )
    assert doc.title == "Method Calls"
    assert doc.template is None
    assert doc.draft is True
    assert doc.date == datetime(2024, 1, 15)
    assert doc.tags == ["raku", "syntax"]
    assert doc.author == "Jo"
    assert doc.folder == "posts"
    assert doc.output_path == Path("posts/2024-01-15-calls.html")
    assert doc.url == "/posts/2024-01-15-calls.html"
    assert doc.depth == 1


def test_document_title_fallbacks_and_index_url():
    from_meta = ContentDocument.from_text(
        Path("/c/index.md"), Path("index.md"), "---\ntitle: Home\ntemplate: list\n---\n# Other\n"
    )
    assert from_meta.title == "Home"
    assert from_meta.template == "list"
    assert from_meta.url == "/"
    assert from_meta.depth == 0

    from_name = ContentDocument.from_text(
        Path("/c/docs/getting-started.md"), Path("docs/getting-started.md"), "No heading"
    )
    assert from_name.title == "Getting Started"
    assert from_name.draft is False
    assert from_name.date is None


def test_document_is_immutable():
    doc = ContentDocument.from_text(Path("/c/a.md"), Path("a.md"), "---\ntitle: A\n---\n")
    with pytest.raises(AttributeError):
        doc.body = "changed"
    with pytest.raises(TypeError):
        doc.front_matter["title"] = "B"


def test_loader_discovers_documents_and_templates(tmp_path, make_files):
    make_files(
        tmp_path,
        {
            "content/index.md": "# Home",
            "content/posts/b.md": "# B",
            "content/posts/a.md": "# A",
            "content/notes.txt": "ignored",
            "content/.drafts/secret.md": "# Hidden",
            "templates/default.html": "{{ content }}",
            "templates/blog/post.html.jinja": "{{ content }}",
            "templates/_base.html": "base",
        },
    )
    result = ContentLoader(tmp_path / "content", tmp_path / "templates").load()
    assert [d.rel_path.as_posix() for d in result.documents] == [
        "index.md",
        "posts/a.md",
        "posts/b.md",
    ]
    assert set(result.templates) == {"default", "blog/post", "_base"}
    assert result.templates["blog/post"].loader_name == "blog/post.html.jinja"
    assert result.warnings == []
    assert result.errors == []


def test_loader_missing_root_raises(tmp_path):
    with pytest.raises(NotFoundError) as exc_info:
        ContentLoader(tmp_path / "nope", tmp_path / "templates").load()
    assert exc_info.value.path == tmp_path / "nope"


def test_loader_skips_unreadable_and_collects_front_matter_errors(tmp_path, make_files):
    make_files(
        tmp_path,
        {
            "content/good.md": "# Good",
            "content/bad-meta.md": "---\ntitle: [\n---\nbody",
            "templates/default.html": "{{ content }}",
        },
    )
    (tmp_path / "content" / "binary.md").write_bytes(b"\xff\xfe\xfa invalid utf-8")
    result = ContentLoader(tmp_path / "content", tmp_path / "templates").load()
    assert [d.rel_path.name for d in result.documents] == ["good.md"]
    assert len(result.warnings) == 1
    assert result.warnings[0].path.name == "binary.md"
    assert "unreadable" in result.warnings[0].message
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], FrontMatterError)


def test_loader_warns_on_missing_templates_dir(tmp_path, make_files):
    make_files(tmp_path, {"content/a.md": "# A"})
    result = ContentLoader(tmp_path / "content", tmp_path / "templates").load()
    assert result.templates == {}
    assert "Templates directory not found" in str(result.warnings[0])
