from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from stele.utils import (
    as_datetime,
    ensure_clean_dir,
    first_heading,
    is_hidden,
    output_path_for,
    parse_bool,
    parse_tags,
    slugify,
    strip_template_suffix,
    titleize,
    url_for_output,
)


def test_slugify_and_titleize():
    assert slugify("Method Calls: A Tour!") == "method-calls-a-tour"
    assert slugify("???") == "untitled"
    assert titleize("2024-01-15-hello-world.md") == "Hello World"
    assert titleize("getting_started.md") == "Getting Started"
    assert titleize("---.md") == "Untitled"


def test_parse_bool():
    assert parse_bool(True) is True
    assert parse_bool("yes") is True
    assert parse_bool(" TRUE ") is True
    assert parse_bool(1) is True
    assert parse_bool("false") is False
    assert parse_bool("no") is False
    assert parse_bool(None) is False
    assert parse_bool(0) is False
    assert parse_bool([True]) is False


def test_parse_tags():
    assert parse_tags("python, raku,python") == ["python", "raku"]
    assert parse_tags(["a", "b", ""]) == ["a", "b"]
    assert parse_tags(None) == []
    assert parse_tags(42) == ["42"]


def test_as_datetime():
    assert as_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2)
    assert as_datetime("2024-01-02") == datetime(2024, 1, 2)
    assert as_datetime("not a date") is None
    assert as_datetime(None) is None
    aware = datetime(2024, 1, 2, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_datetime(aware) == datetime(2024, 1, 2, 10, 0)


def test_first_heading_skips_code_fences():
    text = "```\n# not a heading\n```\n\n# Real Title\n"
    assert first_heading(text) == "Real Title"
    assert first_heading("## Sub only") is None


def test_path_helpers():
    assert is_hidden(Path(".git/config"))
    assert not is_hidden(Path("posts/a.md"))
    assert strip_template_suffix("blog/post.html.jinja") == "blog/post"
    assert strip_template_suffix("feed.xml") == "feed"
    assert strip_template_suffix("default") == "default"
    assert output_path_for(Path("posts/a.md")) == Path("posts/a.html")
    assert url_for_output(Path("index.html")) == "/"
    assert url_for_output(Path("posts/index.html")) == "/posts/"
    assert url_for_output(Path("posts/a.html")) == "/posts/a.html"


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "out"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "file.txt").write_text("x", encoding="utf-8")
    (target / "top.txt").write_text("y", encoding="utf-8")
    ensure_clean_dir(target)
    assert target.is_dir()
    assert list(target.iterdir()) == []

    fresh = tmp_path / "fresh" / "dir"
    ensure_clean_dir(fresh)
    assert fresh.is_dir()
