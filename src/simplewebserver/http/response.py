"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the one response a connection gets.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RESPONSE AS SENT ON THE WIRE                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\n                        ← status line            │
    │    Date: Oct 19, 2026 1:05:07 PM\n          ← now, in GMT            │
    │    Server: Jon's very own server\n          ← fixed identification  │
    │    Connection: close\n                      ← no keep-alive         │
    │    Content-Type: text/html\n                ← caller-supplied       │
    │    \n                                       ← end of headers        │
    │    <html>...</html>                         ← tag-substituted page  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

WIRE COMPATIBILITY NOTES:
─────────────────────────

- Lines end in a bare "\n", not "\r\n". Browsers and curl accept this.
- There is no Content-Length: the body ends when the connection closes.
- The status line is "200 OK" even for the 404 page unless the builder
  is created with strict_status=True.
- The Date header uses a medium "Mon d, yyyy h:mm:ss AM" style rather
  than the RFC 7231 format. Existing clients parse this form.

=============================================================================
BODY SELECTION
=============================================================================

    build(path)
        │
        ├── path is None ─────────────► DEFAULT_PAGE     (200)
        │
        └── load_page(path)
                ├── text ─────────────► file text        (200)
                └── None ─────────────► NOT_FOUND_PAGE   (200, or 404 strict)

Whatever is chosen goes through substitute_tags() exactly once.

=============================================================================
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from .status_codes import HTTPStatus
from .pages import (
    DEFAULT_PAGE,
    DEFAULT_SERVER_NAME,
    NOT_FOUND_PAGE,
    load_page,
    substitute_tags,
)


DEFAULT_SERVER_HEADER = "Jon's very own server"
DEFAULT_CONTENT_TYPE = "text/html"

LINE_END = "\n"


class PageOutcome(Enum):
    """Which page ended up in the body."""
    FILE = "file"              # Requested file was read
    NOT_FOUND = "not_found"    # Requested file missing or unreadable
    DEFAULT = "default"        # No usable request line


@dataclass(frozen=True)
class HTTPResponse:
    """
    A complete response, ready to be written.

    Header and body are serialized separately because they are written
    separately: the header goes out first, then the body.
    """

    status: HTTPStatus
    date: str
    server: str
    content_type: str
    body: str
    outcome: PageOutcome = PageOutcome.DEFAULT
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 200 OK"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def header_lines(self) -> list[str]:
        """Header lines in wire order (status line first, no blank line)."""
        return [
            self.status_line,
            f"Date: {self.date}",
            f"Server: {self.server}",
            "Connection: close",
            f"Content-Type: {self.content_type}",
        ]

    def header_bytes(self) -> bytes:
        """Status line and headers, terminated by the blank line."""
        return (LINE_END.join(self.header_lines) + LINE_END + LINE_END).encode("utf-8")

    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8")

    def to_bytes(self) -> bytes:
        """The full response as one byte string."""
        return self.header_bytes() + self.body_bytes()


class ResponseBuilder:
    """
    Builds responses for resolved paths.

    The builder holds configuration only. The path to serve is passed to
    build() and nothing about it is kept afterwards, so one builder can be
    shared by every connection thread.

    Usage:
        builder = ResponseBuilder()
        response = builder.build(Path("/srv/www/index.html"))
        conn.send(response.header_bytes())
        conn.send(response.body_bytes())
    """

    def __init__(
        self,
        server_header: str = DEFAULT_SERVER_HEADER,
        server_name: str = DEFAULT_SERVER_NAME,
        content_type: str = DEFAULT_CONTENT_TYPE,
        strict_status: bool = False,
    ):
        """
        Args:
            server_header: Value of the Server header.
            server_name: Value substituted for <cs371server>.
            content_type: Value of the Content-Type header.
            strict_status: Send "404 Not Found" with the 404 page instead
                           of "200 OK".
        """
        self.server_header = server_header
        self.server_name = server_name
        self.content_type = content_type
        self.strict_status = strict_status

    def body(self, path: Optional[Path], now: Optional[datetime] = None) -> tuple[str, PageOutcome]:
        """
        Choose and render the page for a resolved path.

        Returns:
            (substituted page text, which page it was)
        """
        if path is None:
            page, outcome = DEFAULT_PAGE, PageOutcome.DEFAULT
        else:
            page = load_page(path)
            if page is None:
                page, outcome = NOT_FOUND_PAGE, PageOutcome.NOT_FOUND
            else:
                outcome = PageOutcome.FILE

        local_now = now.astimezone() if now else None
        return substitute_tags(page, self.server_name, local_now), outcome

    def build(self, path: Optional[Path], now: Optional[datetime] = None) -> HTTPResponse:
        """
        Build the response for an optional resolved path.

        Args:
            path: Resolved path, or None for the default page.
            now: Response time (aware datetime). Defaults to the current time.

        Returns:
            The complete response.
        """
        now = now or datetime.now(timezone.utc)
        text, outcome = self.body(path, now)

        status = HTTPStatus.OK
        if self.strict_status and outcome is PageOutcome.NOT_FOUND:
            status = HTTPStatus.NOT_FOUND

        return HTTPResponse(
            status=status,
            date=format_header_date(now),
            server=self.server_header,
            content_type=self.content_type,
            body=text,
            outcome=outcome,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_header_date(dt: datetime) -> str:
    """
    Format a datetime for the Date header, in GMT.

    Format: Mon d, yyyy h:mm:ss AM
    Example: Oct 19, 2026 1:05:07 PM

    Naive datetimes are taken as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)

    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"

    return (
        f"{months[dt.month - 1]} {dt.day}, {dt.year} "
        f"{hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"
    )
