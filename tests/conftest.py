"""Shared pytest fixtures for code-sync tests."""

import json
import threading
import zipfile
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep temp files and settings lookups inside the test directory."""
    monkeypatch.setenv("CODE_SYNC_TEMP_DIR", str(tmp_path / "scratch"))
    monkeypatch.setenv("CODE_SYNC_CONFIG_DIR", str(tmp_path / "no-config"))


@pytest.fixture
def scratch_dir(tmp_path):
    """Directory runners download into (see _isolated_env)."""
    return tmp_path / "scratch"


def build_zip(path, entries):
    """
    Write a ZIP file.

    entries maps archive names to bytes; names ending in "/" are directories.
    """
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return path


@pytest.fixture
def make_zip(tmp_path):
    """Factory for ZIP archives under tmp_path/archives."""
    archives = tmp_path / "archives"
    archives.mkdir()

    def _make(entries, name="archive.zip"):
        return build_zip(archives / name, entries)

    return _make


@pytest.fixture
def sample_zip(make_zip):
    """Two-entry archive: README.txt and pkg/main.bin."""
    return make_zip(
        {
            "README.txt": b"hello from the archive\n",
            "pkg/": b"",
            "pkg/main.bin": bytes(range(256)) * 4,
        }
    )


@pytest.fixture
def write_manifest(tmp_path):
    """Write a package.json with the given code-sync tasks."""

    def _write(tasks, path=None, section="code-sync"):
        manifest = path or tmp_path / "package.json"
        manifest.write_text(json.dumps({"name": "demo", "version": "1.0.0", section: tasks}, indent=2))
        return manifest

    return _write


class ArchiveServer:
    """Local HTTP server with canned responses per path."""

    def __init__(self):
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[tuple[str, dict[str, str]]] = []
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                server.requests.append((self.path, dict(self.headers)))
                status, headers, body = server.routes.get(self.path, (404, {}, b"not found"))
                self.send_response(status)
                for key, value in headers.items():
                    self.send_header(key, value)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format, *args):
                pass

        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def serve_file(self, path: str, file_path) -> str:
        self.routes[path] = (200, {"Content-Type": "application/zip"}, file_path.read_bytes())
        return self.url(path)

    def serve(self, path: str, status: int = 200, body: bytes = b"", headers: dict | None = None) -> str:
        self.routes[path] = (status, headers or {}, body)
        return self.url(path)

    def redirect(self, path: str, location: str, status: int = 301) -> str:
        self.routes[path] = (status, {"Location": location}, b"")
        return self.url(path)


@pytest.fixture
def http_server():
    """Running ArchiveServer, shut down after the test."""
    server = ArchiveServer()
    server.thread.start()
    yield server
    server.httpd.shutdown()
    server.httpd.server_close()
