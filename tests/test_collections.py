from pathlib import Path

from stele.collections import DocumentCollection
from stele.content import ContentDocument


def doc(rel: str, front_matter: str = "") -> ContentDocument:
    text = f"---\n{front_matter}\n---\n" if front_matter else ""
    return ContentDocument.from_text(Path("/c") / rel, Path(rel), text)


def make_collection() -> DocumentCollection:
    return DocumentCollection(
        [
            doc("index.md", "title: Home"),
            doc("posts/a.md", "title: A\ndate: 2024-01-01\ntags: [raku]"),
            doc("posts/b.md", "title: B\ndate: 2024-05-01\ndraft: true\ntags: [python, raku]"),
            doc("posts/c.md", "title: C\ndate: 2024-01-01"),
            doc("posts/deep/d.md", "title: D"),
            doc("postscript.md", "title: PS"),
        ]
    )


def test_sequence_behaviour():
    docs = make_collection()
    assert len(docs) == 6
    assert docs[0].title == "Home"
    assert [d.title for d in docs[1:3]] == ["A", "B"]


def test_filters():
    docs = make_collection()
    assert [d.title for d in docs.drafts()] == ["B"]
    assert "B" not in [d.title for d in docs.published()]
    assert [d.title for d in docs.with_tag("raku")] == ["A", "B"]
    assert [d.title for d in docs.in_folder("posts")] == ["A", "B", "C", "D"]
    assert [d.title for d in docs.in_folder("/posts/deep/")] == ["D"]
    assert docs.tags() == ["python", "raku"]


def test_sorted_newest_first_with_undated_last():
    docs = make_collection()
    assert [d.title for d in docs.sorted()] == ["B", "A", "C", "Home", "D", "PS"]
    assert [d.title for d in docs.sorted(reverse=False)] == ["Home", "D", "PS", "A", "C", "B"]
    assert [d.title for d in docs.latest(2)] == ["B", "A"]


def test_in_folder_root_contains_everything():
    docs = make_collection()
    assert len(docs.in_folder("")) == len(docs)
    assert len(docs.in_folder("/")) == len(docs)
