"""
Unit tests for PageHandler, driven over a local socket pair.
"""

import json
import logging
import socket
import threading
from pathlib import Path

import pytest

from simplewebserver.config import ServerConfig
from simplewebserver.core.connection import Connection, ConnectionState
from simplewebserver.handlers import PageHandler
from simplewebserver.http.pages import NOT_FOUND_PAGE


def exchange(handler: PageHandler, raw: bytes, close_after_send: bool = False):
    """
    Run one exchange through handler.handle() and return (bytes, conn).

    The server end of a socketpair is wrapped in a Connection; the client
    end writes the request and reads until the handler closes.
    """
    server_sock, client_sock = socket.socketpair()
    conn = Connection(socket=server_sock, address=("127.0.0.1", 50000), timeout=5.0)

    thread = threading.Thread(target=handler.handle, args=(conn,))
    thread.start()

    with client_sock:
        client_sock.settimeout(5.0)
        client_sock.sendall(raw)
        if close_after_send:
            client_sock.shutdown(socket.SHUT_WR)

        chunks = []
        while True:
            chunk = client_sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)

    thread.join(5.0)
    assert not thread.is_alive()
    return b"".join(chunks), conn


def body_of(raw: bytes) -> str:
    return raw.partition(b"\n\n")[2].decode()


@pytest.fixture
def handler(document_root: Path) -> PageHandler:
    return PageHandler.from_config(ServerConfig(document_root=str(document_root)))


class TestPageHandler:
    """Tests for one full exchange."""

    def test_serves_file(self, handler: PageHandler, sample_request: bytes):
        raw, conn = exchange(handler, sample_request)

        assert raw.startswith(b"HTTP/1.1 200 OK\n")
        body = body_of(raw)
        assert "Darkwater Town Square Server" in body
        assert "<cs371server>" not in body
        assert conn.state == ConnectionState.CLOSED

    def test_missing_file(self, handler: PageHandler):
        raw, _ = exchange(handler, b"GET /missing.html HTTP/1.1\r\n\r\n")

        assert raw.startswith(b"HTTP/1.1 200 OK\n")
        assert body_of(raw) == NOT_FOUND_PAGE

    def test_nul_byte_in_path_gets_not_found_page(self, handler: PageHandler):
        raw, conn = exchange(handler, b"GET /a\x00b.html HTTP/1.1\r\n\r\n")

        assert raw.startswith(b"HTTP/1.1 200 OK\n")
        assert body_of(raw) == NOT_FOUND_PAGE
        assert conn.state == ConnectionState.CLOSED

    def test_default_page(self, handler: PageHandler):
        raw, _ = exchange(handler, b"\r\n")
        assert "<h3>Default Page</h3>" in body_of(raw)

    def test_client_closes_before_blank_line(self, handler: PageHandler):
        raw, _ = exchange(handler, b"GET /index.html HTTP/1.1\r\nHost: x\r\n", close_after_send=True)
        assert "Welcome to Darkwater Town Square Server" in body_of(raw)

    def test_read_timeout_falls_back_to_default(self, document_root: Path):
        handler = PageHandler.from_config(ServerConfig(document_root=str(document_root)))
        server_sock, client_sock = socket.socketpair()
        conn = Connection(socket=server_sock, address=("127.0.0.1", 50001), timeout=0.2)

        with client_sock:
            client_sock.sendall(b"GET /data.json HTTP/1.1\r\n")  # never terminated
            handler.handle(conn)
            client_sock.settimeout(5.0)
            raw = b""
            while True:
                chunk = client_sock.recv(4096)
                if not chunk:
                    break
                raw += chunk

        assert "<h3>Default Page</h3>" in body_of(raw)
        assert conn.state == ConnectionState.CLOSED

    def test_unexpected_error_closes_without_response(self, handler: PageHandler, monkeypatch, caplog):
        def explode(path, now=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(handler.builder, "build", explode)

        with caplog.at_level(logging.ERROR, logger="simplewebserver"):
            raw, conn = exchange(handler, b"\r\n")

        assert raw == b""
        assert conn.state == ConnectionState.CLOSED
        assert "boom" in caplog.text

    def test_access_log_text(self, handler: PageHandler, sample_request: bytes, caplog):
        with caplog.at_level(logging.INFO, logger="simplewebserver.access"):
            exchange(handler, sample_request)

        records = [r for r in caplog.records if r.name == "simplewebserver.access"]
        assert len(records) == 1
        message = records[0].getMessage()
        assert '"GET /index.html HTTP/1.1" 200 file' in message

    def test_access_log_json(self, document_root: Path, caplog):
        handler = PageHandler.from_config(ServerConfig(
            document_root=str(document_root),
            log_format="json",
        ))

        with caplog.at_level(logging.INFO, logger="simplewebserver.access"):
            exchange(handler, b"GET /missing.html HTTP/1.1\r\n\r\n")

        records = [r for r in caplog.records if r.name == "simplewebserver.access"]
        entry = json.loads(records[0].getMessage())
        assert entry["outcome"] == "not_found"
        assert entry["status_code"] == 200
        assert entry["request_line"] == "GET /missing.html HTTP/1.1"
        assert entry["path"].endswith("missing.html")

    def test_strict_status(self, document_root: Path):
        handler = PageHandler.from_config(ServerConfig(
            document_root=str(document_root),
            strict_status=True,
        ))
        raw, _ = exchange(handler, b"GET /missing.html HTTP/1.1\r\n\r\n")
        assert raw.startswith(b"HTTP/1.1 404 Not Found\n")
