from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime

from .content import ContentDocument


class DocumentCollection(Sequence[ContentDocument]):
    """Lightweight helper for working with lists of documents in templates and code."""

    def __init__(self, documents: Iterable[ContentDocument]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[ContentDocument]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def in_folder(self, folder: str) -> DocumentCollection:
        """Documents directly inside ``folder`` or below it.

        The content root (``""`` or ``"/"``) contains every document.
        """
        prefix = folder.strip("/")
        if not prefix:
            return DocumentCollection(self._documents)
        return DocumentCollection(
            d for d in self._documents if d.folder == prefix or d.folder.startswith(f"{prefix}/")
        )

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if tag in d.tags)

    def drafts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.draft)

    def published(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if not d.draft)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort documents by date, then by relative path.

        With reverse=True (the default) the newest document comes first and
        undated documents come last. Ties on date are always broken by path
        in ascending order so the result is stable between builds.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new DocumentCollection with sorted documents.
        """
        dated = [d for d in self._documents if d.date is not None]
        undated = [d for d in self._documents if d.date is None]
        by_path = sorted(dated, key=lambda d: d.rel_path.as_posix())
        ordered = sorted(by_path, key=lambda d: d.date or datetime.min, reverse=reverse)
        undated.sort(key=lambda d: d.rel_path.as_posix())
        return DocumentCollection(ordered + undated if reverse else undated + ordered)

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.sorted()[:count])

    def tags(self) -> list[str]:
        """All tags used in the collection, alphabetically."""
        return sorted({tag for d in self._documents for tag in d.tags})

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"
