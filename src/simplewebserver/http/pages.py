"""
=============================================================================
PAGES AND TEMPLATE MARKERS
=============================================================================

Every body the server sends is a PAGE: text that passes through tag
substitution right before it is written.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        WHERE A PAGE COMES FROM                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   resolved path present ──► load_page(path)                          │
    │          │                      │                                    │
    │          │                      ├── readable   → file text           │
    │          │                      └── OSError    → NOT_FOUND_PAGE      │
    │          │                                                           │
    │   no resolved path ────────► DEFAULT_PAGE                            │
    │                                                                      │
    │                    ▼                                                 │
    │          substitute_tags(page) ──► body                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TEMPLATE MARKERS
=============================================================================

    <cs371date>     → today's date, MM-DD-YYYY (local time)
    <cs371server>   → the server name ("Darkwater Town Square Server")

Substitution is a literal str.replace() of EVERY occurrence of each
marker. No regex: a page containing "<cs371date>" twice gets the date
twice. The markers do not overlap, so the order of the two replacements
does not matter.

=============================================================================
LOSSY LINE JOIN
=============================================================================

Files are read line by line and concatenated WITHOUT the line breaks:

    <html>
    <body>        ──►   <html><body><p>Hi</p></body></html>
    <p>Hi</p>
    </body></html>

Markers are single-line literals, so this never splits or joins a
marker. Trailing whitespace-only lines are dropped, mirroring a
token-based reader that stops at the last token in the file.

=============================================================================
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


DATE_TAG = "<cs371date>"
SERVER_TAG = "<cs371server>"

DEFAULT_SERVER_NAME = "Darkwater Town Square Server"

NOT_FOUND_PAGE = (
    "<html><head></head><body><h1>404 Page Not Found!</h1>"
    "<p>Sorry, pardner. You should've taken that left turn at Albuquerque.</p>"
    "</body></html>"
)

DEFAULT_PAGE = (
    "<html><head></head><body><h3>Default Page</h3>"
    "<p><cs371date></p><p><cs371server></p></body></html>"
)


def format_tag_date(now: Optional[datetime] = None) -> str:
    """Format a date for the <cs371date> marker (MM-DD-YYYY)."""
    now = now or datetime.now()
    return f"{now.month:02d}-{now.day:02d}-{now.year:04d}"


def substitute_tags(
    page: str,
    server_name: str = DEFAULT_SERVER_NAME,
    now: Optional[datetime] = None,
) -> str:
    """
    Replace every template marker in a page.

    Args:
        page: Page text (file contents or a built-in page).
        server_name: Value for <cs371server>.
        now: Date for <cs371date>. Defaults to the current local time.

    Returns:
        The page with no <cs371date> or <cs371server> left in it.
    """
    page = page.replace(DATE_TAG, format_tag_date(now))
    page = page.replace(SERVER_TAG, server_name)
    return page


def load_page(path: Path) -> Optional[str]:
    """
    Load a page from disk, joining its lines without separators.

    Any OSError (missing file, directory, permission denied) or a path
    open() refuses outright (an embedded NUL byte) means the page cannot
    be served; the caller falls back to NOT_FOUND_PAGE.

    Args:
        path: Absolute path of the file to load.

    Returns:
        The joined file text, or None if the file could not be read.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = [line.rstrip("\r\n") for line in f]
    except (OSError, ValueError) as e:
        logger.info(f"Cannot read {path!r}: {e}")
        return None

    # Nothing after the last non-blank line makes it into the page
    while lines and not lines[-1].strip():
        lines.pop()

    return "".join(lines)
