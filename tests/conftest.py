"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplewebserver import HTTPServer, ServerConfig


INDEX_HTML = (
    "<html>\n"
    "<head><title>Town Square</title></head>\n"
    "<body>\n"
    "<h1>Welcome to <cs371server></h1>\n"
    "<p>Today is <cs371date></p>\n"
    "</body>\n"
    "</html>\n"
)


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """A document root with a couple of pages in it."""
    (tmp_path / "index.html").write_text(INDEX_HTML)
    (tmp_path / "plain.html").write_text("<html><body>No tags here</body></html>\n")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "about.html").write_text("<p>About <cs371server></p>\n")
    return tmp_path


@pytest.fixture
def sample_request() -> bytes:
    """Sample request for an existing page."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes, return everything received until close."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


def make_test_server(document_root: Path, **kwargs) -> TestServer:
    config = ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        document_root=str(document_root),
        log_level="WARNING",
        **kwargs,
    )
    return TestServer(HTTPServer(config, configure_logs=False))


@pytest.fixture
def test_server(document_root: Path) -> Generator[TestServer, None, None]:
    """A running server serving the document_root fixture."""
    test_srv = make_test_server(document_root)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def strict_server(document_root: Path) -> Generator[TestServer, None, None]:
    """A running server with strict_status enabled."""
    test_srv = make_test_server(document_root, strict_status=True)
    test_srv.start()

    yield test_srv

    test_srv.stop()
