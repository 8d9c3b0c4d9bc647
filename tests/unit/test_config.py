"""
Unit tests for ServerConfig and the CLI argument mapping.
"""

import os
from pathlib import Path

import pytest

from simplewebserver.config import ServerConfig
from simplewebserver.__main__ import config_from_args


class TestServerConfig:
    """Tests for ServerConfig defaults and validation."""

    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.timeout == 30.0
        assert config.document_root == os.getcwd()
        assert config.server_name == "Darkwater Town Square Server"
        assert config.content_type == "text/html"
        assert config.strict_status is False
        config.validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 70000},
        {"backlog": 0},
        {"timeout": 0},
        {"timeout": -3.0},
        {"log_level": "CHATTY"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, tmp_path: Path, kwargs):
        config = ServerConfig(document_root=str(tmp_path), **kwargs)
        with pytest.raises(ValueError):
            config.validate()

    def test_validate_missing_root(self, tmp_path: Path):
        config = ServerConfig(document_root=str(tmp_path / "nope"))
        with pytest.raises(ValueError, match="document_root"):
            config.validate()

    def test_port_zero_and_no_timeout_allowed(self, tmp_path: Path):
        ServerConfig(port=0, timeout=None, document_root=str(tmp_path)).validate()

    def test_from_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("HTTP_PORT", "3000")
        monkeypatch.setenv("HTTP_TIMEOUT", "0")
        monkeypatch.setenv("HTTP_DOCUMENT_ROOT", str(tmp_path))
        monkeypatch.setenv("HTTP_STRICT_STATUS", "true")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HTTP_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.timeout is None
        assert config.document_root == str(tmp_path)
        assert config.strict_status is True
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_defaults(self, tmp_path: Path, monkeypatch):
        for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_TIMEOUT", "HTTP_DOCUMENT_ROOT",
                     "HTTP_STRICT_STATUS", "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)

        config = ServerConfig.from_env()

        assert config.port == 8080
        assert config.timeout == 30.0
        assert config.document_root == os.getcwd()
        assert config.strict_status is False


class TestConfigFromArgs:
    """Tests for command-line parsing."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_TIMEOUT", "HTTP_DOCUMENT_ROOT",
                     "HTTP_STRICT_STATUS", "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        config = config_from_args([])
        assert config.port == 8080
        assert config.timeout == 30.0
        assert config.strict_status is False

    def test_arguments(self, tmp_path: Path):
        config = config_from_args([
            "--host", "0.0.0.0",
            "--port", "3000",
            "--root", str(tmp_path),
            "--timeout", "0",
            "--strict-status",
            "--log-level", "debug",
            "--log-format", "json",
        ])

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.document_root == str(tmp_path)
        assert config.timeout is None
        assert config.strict_status is True
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_env_supplies_defaults(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "9999")
        assert config_from_args([]).port == 9999
        assert config_from_args(["--port", "1234"]).port == 1234
