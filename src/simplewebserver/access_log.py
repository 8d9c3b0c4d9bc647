"""
=============================================================================
ACCESS LOGGING
=============================================================================

One structured record per exchange, written to the "simplewebserver.access"
logger, plus the logging setup used by the server and the CLI.

=============================================================================
LOG FORMATS
=============================================================================

TEXT (Apache-like, human readable):

    127.0.0.1 - - [19/Oct/2026:13:05:07 +0000] "GET /index.html HTTP/1.1" 200 file 812 0.42ms

JSON (for log aggregators):

    {"connection_id": "1f3a9c2e", "client_ip": "127.0.0.1",
     "request_line": "GET /index.html HTTP/1.1", "path": "/srv/www/index.html",
     "outcome": "file", "status_code": 200, "content_length": 812,
     "duration_ms": 0.42, "timestamp": "19/Oct/2026:13:05:07 +0000"}

The namespaced logger can be routed separately:

    logging.getLogger("simplewebserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger("simplewebserver.access")


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class RequestLog:
    """
    Structured log entry for one exchange.

    connection_id:  Short id, same as in the diagnostic log lines
    client_ip:      Client's IP address
    request_line:   Captured request line, or None
    path:           Resolved path, or None
    outcome:        Which page was served (file, not_found, default)
    status_code:    Status line code that was sent
    content_length: Body size in bytes
    duration_ms:    Time from accept to close
    timestamp:      When the exchange finished
    """

    connection_id: str
    client_ip: str
    request_line: Optional[str]
    path: Optional[str]
    outcome: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "connection_id": self.connection_id,
            "client_ip": self.client_ip,
            "request_line": self.request_line,
            "path": self.path,
            "outcome": self.outcome,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Format as an Apache-like access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.request_line or "-"}" {self.status_code} {self.outcome} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_exchange(entry: RequestLog, log_format: str = "text", level: int = logging.INFO) -> None:
    """Emit an access log record in the configured format."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def access_timestamp() -> str:
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the server process.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    logging.getLogger("simplewebserver").setLevel(numeric_level)
