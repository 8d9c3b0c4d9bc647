"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m simplewebserver --port 3000                     │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 python -m simplewebserver                  │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    CONTENT
    - document_root, content_type, strict_status

    SERVER IDENTITY
    - server_header, server_name

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections before new ones are refused.
    """

    timeout: Optional[float] = 30.0
    """
    Per-connection read/write deadline in seconds.
    None = block forever (a client that never sends a newline holds its
    thread until it disconnects).
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = field(default_factory=os.getcwd)
    """
    Directory requested paths are resolved against.
    Defaults to the working directory at the time the config is created.
    """

    content_type: str = "text/html"
    """
    Content-Type sent with every response.
    """

    strict_status: bool = False
    """
    Send "404 Not Found" as the status line with the 404 page.
    Off by default: existing clients expect "200 OK" on every response.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_header: str = "Jon's very own server"
    """
    Value of the Server header.
    """

    server_name: str = "Darkwater Town Square Server"
    """
    Value substituted for the <cs371server> marker in pages.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG also logs every request line received.
    """

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST            Server host (default: 127.0.0.1)
        HTTP_PORT            Server port (default: 8080)
        HTTP_TIMEOUT         Connection deadline in seconds, 0 = none (default: 30)
        HTTP_DOCUMENT_ROOT   Directory to serve (default: working directory)
        HTTP_STRICT_STATUS   "1"/"true" to send 404 status lines (default: off)
        HTTP_LOG_LEVEL       Logging level (default: INFO)
        HTTP_LOG_FORMAT      Access log format (default: text)

        =====================================================================
        """
        timeout = float(os.getenv("HTTP_TIMEOUT", "30"))
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            timeout=timeout or None,
            document_root=os.getenv("HTTP_DOCUMENT_ROOT") or os.getcwd(),
            strict_status=_env_bool("HTTP_STRICT_STATUS"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails immediately instead of on
        the first request.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not os.path.isdir(self.document_root):
            raise ValueError(f"document_root is not a directory: {self.document_root}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
