"""
=============================================================================
PAGE HANDLER
=============================================================================

Runs one connection from accept to close.

=============================================================================
FLOW
=============================================================================

    handle(conn)
        │
        ├── 1. READ      RequestReader.read_request(conn)
        │                  └── CapturedRequest(request_line, path)
        │
        ├── 2. BUILD     ResponseBuilder.build(path)
        │                  └── HTTPResponse (file / 404 page / default page)
        │
        ├── 3. HEADER    conn.send(response.header_bytes())
        │
        ├── 4. BODY      conn.send(response.body_bytes())
        │
        └── 5. CLOSE     always, via the Connection context manager

Strictly sequential within a connection. Nothing is shared between
connections except the (read-only) reader and builder configuration, so
any number of threads can call handle() on the same PageHandler.

=============================================================================
FAILURE ISOLATION
=============================================================================

No exception leaves handle(). Read faults are absorbed by the reader
(default page), file errors by the builder (404 page), send failures end
the exchange early, and anything unexpected is logged with its traceback.
In every case the connection is closed and the thread ends normally.

=============================================================================
"""

import logging
import time
from typing import Optional

from ..access_log import RequestLog, access_timestamp, log_exchange
from ..config import ServerConfig
from ..core.connection import Connection, ConnectionState
from ..http.request import RequestReader, CapturedRequest
from ..http.response import HTTPResponse, ResponseBuilder


logger = logging.getLogger(__name__)


class PageHandler:
    """
    Serves one request per connection.

    Usage:
        handler = PageHandler.from_config(config)

        # In a connection thread:
        handler.handle(conn)
    """

    def __init__(
        self,
        reader: Optional[RequestReader] = None,
        builder: Optional[ResponseBuilder] = None,
        log_format: str = "text",
    ):
        self.reader = reader or RequestReader()
        self.builder = builder or ResponseBuilder()
        self.log_format = log_format

    @classmethod
    def from_config(cls, config: ServerConfig) -> "PageHandler":
        """Create a handler wired to a ServerConfig."""
        return cls(
            reader=RequestReader(config.document_root),
            builder=ResponseBuilder(
                server_header=config.server_header,
                server_name=config.server_name,
                content_type=config.content_type,
                strict_status=config.strict_status,
            ),
            log_format=config.log_format,
        )

    def handle(self, conn: Connection) -> None:
        """
        Run the exchange to completion. Never raises.

        Args:
            conn: An open connection. It is closed when this returns.
        """
        logger.debug(f"[{conn.id}] Handling connection from {conn.client_ip}")
        start_time = time.time()
        request = CapturedRequest()
        response: Optional[HTTPResponse] = None

        with conn:
            try:
                request = self.reader.read_request(conn, conn.id)
                conn.state = (ConnectionState.REQUEST_CAPTURED if request.captured
                              else ConnectionState.NO_REQUEST_CAPTURED)

                response = self.builder.build(request.path)
                self._write(conn, response)
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")

        logger.debug(f"[{conn.id}] Done handling connection")

        if response is not None:
            self._log(conn, request, response, start_time)

    def _write(self, conn: Connection, response: HTTPResponse) -> None:
        """Send header then body, stopping at the first failed send."""
        if not conn.send(response.header_bytes()):
            return
        conn.state = ConnectionState.HEADER_WRITTEN

        if not conn.send(response.body_bytes()):
            return
        conn.state = ConnectionState.BODY_WRITTEN

    def _log(
        self,
        conn: Connection,
        request: CapturedRequest,
        response: HTTPResponse,
        start_time: float,
    ) -> None:
        entry = RequestLog(
            connection_id=conn.id,
            client_ip=conn.client_ip,
            request_line=request.request_line,
            path=str(request.path) if request.path else None,
            outcome=response.outcome.value,
            status_code=int(response.status),
            content_length=len(response.body_bytes()),
            duration_ms=(time.time() - start_time) * 1000,
            timestamp=access_timestamp(),
        )
        log_exchange(entry, self.log_format)
