"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of a single exchange.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. The client might send

    GET /index.html HTTP/1.1\n
    \n

and the server might receive it as "GET /ind" + "ex.html HTTP/1.1\n\n"
or any other split. We need LINES, so the socket is wrapped in a
buffered file object:

    reader = sock.makefile("rb")
    reader.readline()   → b"GET /index.html HTTP/1.1\n"   (blocks until "\n")
    reader.readline()   → b"\n"

readline() blocks until a whole line has arrived (or the connection
closes, or the socket timeout fires). No polling, no sleeping.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

Each connection carries exactly one exchange:

    AWAITING_REQUEST ──┬──► REQUEST_CAPTURED ────┐
                       │                         ├──► HEADER_WRITTEN ──► BODY_WRITTEN
                       └──► NO_REQUEST_CAPTURED ─┘                             │
                                                                               ▼
           (any failure, from any state) ───────────────────────────────►   CLOSED

If the header was never written, the client just sees the socket close.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, BinaryIO
import uuid


logger = logging.getLogger(__name__)

# Bounds on discarding unread request bytes at close
DRAIN_TIMEOUT = 0.1
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and for tests that check how far an exchange got.
    """
    AWAITING_REQUEST = "awaiting_request"        # Accepted, reading lines
    REQUEST_CAPTURED = "request_captured"        # A GET/html line was seen
    NO_REQUEST_CAPTURED = "no_request_captured"  # Nothing qualifying was seen
    HEADER_WRITTEN = "header_written"            # Status line + headers sent
    BODY_WRITTEN = "body_written"                # Page sent
    CLOSED = "closed"                            # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. LINE READING                                                     │
    │     └── readline() over a buffered socket file                       │
    │                                                                      │
    │  2. DEADLINES                                                        │
    │     └── Optional socket timeout for reads and writes                 │
    │                                                                      │
    │  3. STATE TRACKING                                                   │
    │     └── Where in the exchange we are, for logs and tests             │
    │                                                                      │
    │  4. CLOSE                                                            │
    │     └── Always closes, on success or failure, exactly once           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
        timeout: Read/write deadline in seconds, None to block forever.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.AWAITING_REQUEST
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = 30.0

    # Internal state (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Configure the socket and open the buffered reader."""
        self.socket.settimeout(self.timeout)
        self._reader = self.socket.makefile("rb")

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else "-"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def readline(self) -> bytes:
        """
        Read one line, including its terminator.

        Returns b"" when the client has closed its side.

        Raises:
            OSError: On reset or timeout (socket.timeout is an OSError).
        """
        return self._reader.readline()

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send data to the client.

        Uses sendall() so the whole buffer goes out or an error is raised.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees a clean end
        of the body (there is no Content-Length). Anything the client sent
        after the blank line is then drained: a socket closed with unread
        input is reset, and a reset can cut the body short.
        Finally the reader and the socket are released. Safe to call more
        than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone
        else:
            self._drain()

        try:
            self._reader.close()
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def _drain(self):
        """Discard pending input until EOF, DRAIN_TIMEOUT or DRAIN_LIMIT."""
        discarded = 0
        try:
            self.socket.settimeout(DRAIN_TIMEOUT)
            while discarded < DRAIN_LIMIT:
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                discarded += len(chunk)
        except OSError:
            pass  # Timeout or reset: nothing more to wait for

        if discarded:
            logger.debug(f"[{self.id}] Discarded {discarded} unread request bytes")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows using Connection with 'with' statement for automatic cleanup:

            with conn:
                line = conn.readline()
                conn.send(response)
            # Connection closed here, whatever happened inside
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
