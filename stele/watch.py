"""Re-render on change for ``stele render --watch``.

Watches the content, templates and static folders plus config.yaml and
re-renders the site when something changes. Rebuilds are debounced and
skipped when no source file changed size or mtime.

Key classes:
- Watcher: Owns the observer and the rebuild guard.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import BuildResult, render_site
from .config import CONFIG_FILENAME, SiteConfig, load_config
from .errors import ConfigError, SiteError

# Upper bound on back-to-back renders while sources keep changing
_MAX_PASSES = 5


class Watcher:
    """Re-renders the site whenever its sources change.

    Attributes:
        project_root: Root directory of the project.
        include_drafts: Passed through to render_site.
        jobs: Passed through to render_site.
        clean_output: Passed through to render_site.
        on_result: Called with every BuildResult.
        on_error: Called with fatal errors raised by a rebuild.
    """

    def __init__(
        self,
        project_root: Path,
        include_drafts: bool = False,
        jobs: int = 1,
        clean_output: bool = True,
        on_result: Callable[[BuildResult], None] | None = None,
        on_error: Callable[[SiteError], None] | None = None,
    ):
        self.project_root = project_root
        self.include_drafts = include_drafts
        self.jobs = jobs
        self.clean_output = clean_output
        self.on_result = on_result or (lambda result: None)
        self.on_error = on_error or (lambda exc: print(f"Render failed: {exc}"))
        self._observer: Observer | None = None
        self._rebuilding = False
        self._last_rebuild_at = 0.0
        self._last_signature: tuple | None = None
        self._debounce_seconds = 0.1

    def _config(self) -> SiteConfig:
        try:
            return load_config(self.project_root)
        except ConfigError:
            # The next rebuild reports the broken file; watch the default layout meanwhile.
            return SiteConfig.from_mapping(self.project_root)

    def watched_paths(self) -> list[Path]:
        config = self._config()
        return [config.content_dir, config.templates_dir, config.static_dir]

    def start(self) -> None:  # pragma: no cover - integration path
        self._last_signature = self._compute_signature()
        handler = _ChangeHandler(self)
        observer = Observer()
        for folder in self.watched_paths():
            if folder.exists():
                observer.schedule(handler, str(folder), recursive=True)
        # Root (non-recursive) picks up config.yaml edits
        observer.schedule(handler, str(self.project_root), recursive=False)
        observer.start()
        self._observer = observer
        print(f"Watching {self.project_root} for changes (Ctrl-C to stop)")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def output_dir(self) -> Path:
        return self._config().output_dir

    def rebuild(self) -> None:
        """Re-render until the sources stop changing.

        Calls made while a rebuild is running return at once; the running
        rebuild re-checks the sources after each render, so edits saved
        mid-render are picked up without another file event.
        """
        if self._rebuilding:
            return
        wait = self._debounce_seconds - (time.time() - self._last_rebuild_at)
        if wait > 0:
            time.sleep(wait)
        self._rebuilding = True
        try:
            for _ in range(_MAX_PASSES):
                signature = self._compute_signature()
                if signature == self._last_signature:
                    break
                self._render_once()
                self._last_signature = signature
        finally:
            self._rebuilding = False
            self._last_rebuild_at = time.time()

    def _render_once(self) -> None:
        print("Change detected; rendering...")
        try:
            result = render_site(
                self.project_root,
                include_drafts=self.include_drafts,
                clean_output=self.clean_output,
                jobs=self.jobs,
            )
        except SiteError as exc:
            self.on_error(exc)
        else:
            self.on_result(result)

    def _compute_signature(self) -> tuple | None:
        entries: list[tuple] = []
        config_path = self.project_root / CONFIG_FILENAME
        roots = [config_path, *self.watched_paths()]
        for root in roots:
            if not root.exists():
                continue
            paths = [root] if root.is_file() else sorted(root.rglob("*"))
            for path in paths:
                if path.is_dir():
                    continue
                try:
                    stat = path.stat()
                except OSError:
                    continue
                rel = path.relative_to(self.project_root)
                entries.append((rel.as_posix(), stat.st_mtime_ns, stat.st_size))
        return tuple(entries) if entries else None


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: Watcher):
        super().__init__()
        self.watcher = watcher
        self._output_dir = watcher.output_dir()

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(event.src_path)
        try:
            path.relative_to(self._output_dir)
            return
        except ValueError:
            pass
        if path.parent == self.watcher.project_root and path.name != CONFIG_FILENAME:
            return
        self.watcher.rebuild()
