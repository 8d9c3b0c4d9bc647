"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the components together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │              ┌──────────────────┴──────────────────┐                │
    │              ▼                                     ▼                │
    │      ┌──────────────┐                      ┌──────────────┐         │
    │      │ SocketServer │── Connection ──────► │ PageHandler  │         │
    │      │ (accept loop)│   (new thread each)  │ (one exchange)│        │
    │      └──────────────┘                      └──────────────┘         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts, wraps the socket in a Connection

    2. DISPATCH
       └── A new thread is started for the connection

    3. READ → RESOLVE → HEADER → BODY (in that thread)
       └── PageHandler.handle(conn)

    4. CLOSE
       └── Always, one exchange per connection, no keep-alive

=============================================================================
THREAD PER CONNECTION
=============================================================================

Each connection gets its own thread and shares nothing with the others.
A slow client only ties up its own thread (and only for up to
ServerConfig.timeout seconds, if set). On shutdown we stop accepting
and give in-flight threads a bounded time to finish.

=============================================================================
"""

import logging
import threading
import time
from typing import Optional, Tuple

from .access_log import configure_logging
from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import PageHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Thread-per-connection web server.

    Usage:
        server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
        server.run()   # Blocks until Ctrl+C / SIGTERM / shutdown()

    From another thread (tests):
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        server.wait_until_ready(5.0)
        ...
        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None, configure_logs: bool = True):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.
            configure_logs: Call configure_logging() when run() starts.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._handler = PageHandler.from_config(self.config)
        self._configure_logs = configure_logs

        # Only touched from the accept thread
        self._workers: list[threading.Thread] = []

        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port), once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        if self._configure_logs:
            configure_logging(self.config.log_level)

        self._running = True
        logger.info(
            f"Starting server on {self.config.host}:{self.config.port}, "
            f"serving {self.config.document_root}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Stop accepting connections. run() returns once in-flight work ends."""
        self._socket_server.shutdown()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _shutdown(self, timeout: float = 30.0):
        """Wait for in-flight connection threads, at most timeout in total."""
        logger.info("Shutting down server...")
        self._running = False

        deadline = time.monotonic() + timeout
        for worker in self._workers:
            worker.join(max(0.0, deadline - time.monotonic()))
            if worker.is_alive():
                logger.warning(f"{worker.name} still running at shutdown deadline")

        self._workers.clear()
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION DISPATCH
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a thread for a new connection.

        Called by SocketServer on the accept thread for each connection.
        If no thread can be started the connection is closed unanswered
        and the server keeps accepting.
        """
        self._workers = [w for w in self._workers if w.is_alive()]

        worker = threading.Thread(
            target=self._handler.handle,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            logger.error(f"[{conn.id}] Cannot start connection thread: {e}")
            conn.close()
            return

        self._workers.append(worker)


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create a server instance.

    Example:
        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    return HTTPServer(config)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Component wiring: ServerConfig → SocketServer + PageHandler
# 2. Dispatch: one daemon thread per accepted connection
# 3. Lifecycle: startup, signal/shutdown(), bounded join of in-flight work
#
# KEY DESIGN DECISIONS:
# - Thread per connection (no pool): each exchange is short and independent
# - Handler and builder hold configuration only, never per-request state
# =============================================================================
