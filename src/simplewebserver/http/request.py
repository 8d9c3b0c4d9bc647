"""
=============================================================================
REQUEST READER
=============================================================================

Reads the inbound side of a connection and turns it into (at most) one
filesystem path.

This server does NOT parse HTTP properly. It only cares about ONE line:

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /index.html HTTP/1.1\n      ← contains "GET" and "html"    │
    │  Host: localhost:8080\n          ← ignored                      │
    │  User-Agent: curl/8.0\n          ← ignored                      │
    │  \n                              ← empty line = stop reading    │
    └─────────────────────────────────────────────────────────────────┘

RULES:
─────────

1. Lines are read one at a time with a blocking, buffered readline().
   There is no line-length limit.
2. A line containing BOTH "GET" and "html" is captured. A later
   qualifying line overwrites an earlier one (last one wins).
3. An empty line ends the request. This is the only normal exit.
4. Any I/O fault (reset, timeout, peer closing early) ends the loop.
   The fault is logged, NOT raised: whatever was captured so far is
   still used, and no capture means the default page.

=============================================================================
PATH RESOLUTION
=============================================================================

The request line is cut by FIXED lengths, not by splitting on spaces:

    GET /docs/index.html HTTP/1.1
    └──┘└──────────────┘└───────┘
     4 chars   path      9 chars

    path  = line[4:-9]                  → "/docs/index.html"
    path  = path with "/" → os.sep      → "\\docs\\index.html" on Windows
    final = document_root + path        → "/srv/www/docs/index.html"

SECURITY:
─────────

The requested segment is joined straight onto the document root, so a
".." segment could walk out of it:

    GET /../../etc/passwd.html HTTP/1.1

Any ".." segment makes resolution fail, which means the default page.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


logger = logging.getLogger(__name__)


METHOD_MARKER = "GET"
RESOURCE_MARKER = "html"

METHOD_PREFIX_LENGTH = len("GET ")         # 4
PROTOCOL_SUFFIX_LENGTH = len(" HTTP/1.1")  # 9


def is_request_line(line: str) -> bool:
    """Check if a line names an HTML resource to fetch."""
    return METHOD_MARKER in line and RESOURCE_MARKER in line


def read_request_line(stream, conn_id: str = "-") -> Optional[str]:
    """
    Read lines until the blank terminator and return the captured line.

    Args:
        stream: Binary stream with a readline() method (a socket file,
                io.BytesIO in tests).
        conn_id: Connection id used to prefix log messages.

    Returns:
        The last line containing "GET" and "html", or None.
    """
    captured: Optional[str] = None

    while True:
        try:
            raw = stream.readline()
        except OSError as e:
            # Timeouts, resets: keep what we have
            logger.warning(f"[{conn_id}] Request read error: {e}")
            break

        if not raw:
            # EOF before the blank line
            logger.warning(f"[{conn_id}] Request read error: connection closed before end of headers")
            break

        line = raw.decode("utf-8", errors="replace").rstrip("\n").rstrip("\r")
        logger.debug(f"[{conn_id}] Request line: ({line})")

        if is_request_line(line):
            captured = line

        if not line:
            break

    return captured


def resolve_path(request_line: str, document_root: Union[str, Path]) -> Optional[Path]:
    """
    Resolve a captured request line to an absolute filesystem path.

    Args:
        request_line: The captured "GET <path> HTTP/1.x" line.
        document_root: Directory the requested path is relative to.

    Returns:
        The resolved path, or None if the line is too short to carry a
        path or the path tries to leave the document root.
    """
    if len(request_line) <= METHOD_PREFIX_LENGTH + PROTOCOL_SUFFIX_LENGTH:
        return None

    segment = request_line[METHOD_PREFIX_LENGTH:-PROTOCOL_SUFFIX_LENGTH]

    if ".." in segment.replace("\\", "/").split("/"):
        logger.warning(f"Path traversal attempt rejected: {segment}")
        return None

    segment = segment.replace("/", os.sep).lstrip(os.sep)

    return Path(os.path.abspath(document_root)) / segment


@dataclass(frozen=True)
class CapturedRequest:
    """
    What one connection asked for.

    Attributes:
        request_line: The captured line, or None if none qualified.
        path: The resolved path, or None (no line, or resolution failed).
    """

    request_line: Optional[str] = None
    path: Optional[Path] = None

    @property
    def captured(self) -> bool:
        """True if a qualifying request line was seen."""
        return self.request_line is not None


class RequestReader:
    """
    Reads one request from a connection and resolves it to a path.

    The resolved path is RETURNED, never stored on the reader, so a
    single reader can serve any number of connections concurrently.

    Usage:
        reader = RequestReader(document_root="/srv/www")
        path = reader.read(conn)   # Optional[Path]
    """

    def __init__(self, document_root: Union[str, Path, None] = None):
        self.document_root = Path(document_root or os.getcwd())

    def read_request(self, stream, conn_id: str = "-") -> CapturedRequest:
        """Read the request, keeping both the line and its resolved path."""
        request_line = read_request_line(stream, conn_id)
        if request_line is None:
            return CapturedRequest()
        return CapturedRequest(
            request_line=request_line,
            path=resolve_path(request_line, self.document_root),
        )

    def read(self, stream, conn_id: str = "-") -> Optional[Path]:
        """
        Read the request and resolve it.

        Returns:
            The resolved path, or None when nothing qualifying was sent
            or resolution failed. Never raises on I/O errors.
        """
        return self.read_request(stream, conn_id).path


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. read_request_line(): last GET/html line before the blank line
# 2. resolve_path(): fixed-length strip, ".." rejection, os.sep, document root
# 3. RequestReader: both steps, returning the result instead of storing it
#
# KNOWN LIMITATION:
# - With ServerConfig.timeout=None a client that never sends "\n" holds its
#   thread until it disconnects
# =============================================================================
