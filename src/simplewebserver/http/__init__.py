"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The protocol side of the server, with no sockets in it:

    http/
    ├── request.py       # RequestReader: lines in → Optional[Path] out
    ├── pages.py         # Built-in pages, file loading, tag substitution
    ├── response.py      # ResponseBuilder: Optional[Path] in → HTTPResponse out
    └── status_codes.py  # HTTPStatus (200, 404)

Everything here works on plain streams and paths, so it can be tested
with io.BytesIO and a temporary directory.

=============================================================================
"""

from .request import (
    RequestReader,
    CapturedRequest,
    read_request_line,
    resolve_path,
    is_request_line,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    PageOutcome,
    format_header_date,
)
from .pages import (
    DEFAULT_PAGE,
    NOT_FOUND_PAGE,
    load_page,
    substitute_tags,
)
from .status_codes import HTTPStatus

__all__ = [
    "RequestReader",
    "CapturedRequest",
    "read_request_line",
    "resolve_path",
    "is_request_line",
    "HTTPResponse",
    "ResponseBuilder",
    "PageOutcome",
    "format_header_date",
    "DEFAULT_PAGE",
    "NOT_FOUND_PAGE",
    "load_page",
    "substitute_tags",
    "HTTPStatus",
]
