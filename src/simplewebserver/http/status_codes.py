"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server only ever emits two status lines:

    HTTP/1.1 200 OK            ← every response by default
    HTTP/1.1 404 Not Found     ← 404 fallback page, only with strict_status

Existing clients of this server expect 200 even
when the body is the "not found" page, so 200 stays the default and the
404 status line is opt-in (see ServerConfig.strict_status).

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.OK.phrase
        'OK'
    """

    OK = 200            # File, default page, and (by default) the 404 page
    NOT_FOUND = 404     # 404 page when strict_status is enabled

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 200 OK
                     ─── ──
                      │   │
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """Check if this is an error status (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
