"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    core/
    ├── socket_server.py  # Listening socket and accept loop
    └── connection.py     # One accepted client socket, one exchange

    ┌────────────────┐   accept()   ┌──────────────┐   handler(conn)
    │  SocketServer  │ ───────────► │  Connection  │ ─────────────────► thread
    └────────────────┘              └──────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
