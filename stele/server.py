"""Preview server for Stele.

Serves the rendered output directory as static files:
- A directory request resolves to its index.html when present.
- Directory listings are never produced; missing paths get a 404
  (with the site's 404.html as body when present).
- Responses carry no-cache headers so a re-render shows up on reload.

Nothing is computed per request; the server only reads the output tree.

Key classes:
- DevServer: Binds and runs the HTTP server.
- _StaticHandler: HTTP request handler enforcing the rules above.
"""

from __future__ import annotations

import functools
import threading
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path


class _StaticHandler(SimpleHTTPRequestHandler):
    """Static file handler without directory listings."""

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def list_directory(self, path):  # pragma: no cover - exercised via send_head
        # Never expose directory listings; treat as missing content.
        return self._serve_404()

    def log_message(self, format, *args):
        if getattr(self.server, "quiet", False):
            return
        super().log_message(format, *args)

    def _serve_404(self):
        """Send a 404, using 404.html from the output root as body when present."""
        error_page = Path(self.directory) / "404.html"
        if error_page.is_file():
            encoded = error_page.read_bytes()
            self.send_response(HTTPStatus.NOT_FOUND)
            self.send_header("Content-type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(encoded)
            return None
        self.send_error(HTTPStatus.NOT_FOUND, "File not found")
        return None

    def send_head(self):
        path_obj = Path(self.translate_path(self.path))
        if path_obj.is_dir():
            if not (path_obj / "index.html").is_file():
                return self._serve_404()
            # The base class redirects "/posts" to "/posts/" and then serves index.html.
            return super().send_head()
        if not path_obj.is_file():
            return self._serve_404()
        return super().send_head()


class DevServer:
    """Serves an output directory over HTTP.

    Attributes:
        output_dir: Directory being served.
        host: Interface to bind.
        port: Port to bind; 0 picks a free port.
        quiet: Suppress per-request log lines.
    """

    def __init__(self, output_dir: Path, host: str = "localhost", port: int = 3000, quiet: bool = False):
        self.output_dir = output_dir
        self.host = host
        self.port = port
        self.quiet = quiet
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def bind(self) -> ThreadingHTTPServer:
        """Create the listening socket; updates ``port`` when it was 0."""
        handler = functools.partial(_StaticHandler, directory=str(self.output_dir))
        httpd = ThreadingHTTPServer((self.host, self.port), handler)
        httpd.daemon_threads = True
        httpd.quiet = self.quiet
        self.port = httpd.server_address[1]
        self._httpd = httpd
        return httpd

    def start(self) -> None:  # pragma: no cover - integration path
        httpd = self._httpd or self.bind()
        if not self.output_dir.is_dir():
            print(f"Output directory {self.output_dir} does not exist yet; every request will 404.")
        print(f"Serving {self.output_dir} at {self.url}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("Stopping server.")
        finally:
            self.stop()

    def start_in_thread(self) -> threading.Thread:
        """Serve from a daemon thread and return it."""
        httpd = self._httpd or self.bind()
        self._thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        if self._httpd is None:
            return
        httpd, self._httpd = self._httpd, None
        if self._thread is not None:
            httpd.shutdown()
            self._thread.join()
            self._thread = None
        httpd.server_close()
