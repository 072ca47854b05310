"""Output writing for Stele.

Rendered pages and static files end up in the output directory through
OutputWriter. Writes are idempotent: a file whose bytes already match is
left alone, so re-rendering unchanged input changes nothing on disk.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .errors import FileWriteError
from .utils import ensure_clean_dir, is_hidden


class OutputWriter:
    """Writes files below an output directory.

    Attributes:
        output_dir: Root of the generated site.
        written: Relative paths whose content changed during this run.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.written: list[Path] = []

    def prepare(self, clean: bool = True) -> None:
        """Create the output directory, emptying it first when ``clean``."""
        try:
            if clean:
                ensure_clean_dir(self.output_dir)
            else:
                self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileWriteError(self.output_dir, exc) from exc

    def write(self, rel_path: Path, html: str) -> Path:
        """Write rendered HTML to ``rel_path`` below the output directory.

        Args:
            rel_path: Output path relative to the output directory.
            html: Rendered HTML.

        Returns:
            The absolute destination path.

        Raises:
            FileWriteError: If the directory or file cannot be written.
        """
        return self._write_bytes(rel_path, html.encode("utf-8"))

    def copy_static(self, static_dir: Path) -> list[Path]:
        """Copy a static tree into the output root, keeping its layout.

        Hidden files and folders are skipped. Missing ``static_dir`` is not
        an error.

        Returns:
            Relative paths of every static file in the output.
        """
        copied: list[Path] = []
        if not static_dir.is_dir():
            return copied
        for source in sorted(static_dir.rglob("*")):
            rel = source.relative_to(static_dir)
            if is_hidden(rel) or source.is_dir():
                continue
            try:
                payload = source.read_bytes()
            except OSError as exc:
                raise FileWriteError(self.output_dir / rel, exc) from exc
            dest = self._write_bytes(rel, payload)
            try:
                shutil.copymode(source, dest)
            except OSError as exc:
                raise FileWriteError(dest, exc) from exc
            copied.append(rel)
        return copied

    def _write_bytes(self, rel_path: Path, payload: bytes) -> Path:
        target = self.output_dir / rel_path
        try:
            if target.is_file() and target.read_bytes() == payload:
                return target
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(payload)
        except OSError as exc:
            raise FileWriteError(target, exc) from exc
        self.written.append(rel_path)
        return target
