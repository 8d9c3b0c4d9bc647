"""
=============================================================================
SIMPLEWEBSERVER - A Minimal One-Request-Per-Connection HTTP File Server
=============================================================================

Accepts a TCP connection, reads the request up to the blank line, serves
the requested HTML file (or a built-in page) with two template markers
filled in, and closes the connection.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ONE CONNECTION, ONE EXCHANGE                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   client ──► "GET /index.html HTTP/1.1\n ... \n"                     │
    │                        │                                             │
    │                        ▼                                             │
    │              RequestReader  ──► /srv/www/index.html (or nothing)     │
    │                        │                                             │
    │                        ▼                                             │
    │              ResponseBuilder ──► header + tag-substituted page       │
    │                        │                                             │
    │                        ▼                                             │
    │   client ◄── "HTTP/1.1 200 OK\n...\n\n<html>...</html>"  then close  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simplewebserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simplewebserver)
    ├── server.py            # HTTPServer: accept loop + thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Access log records, logging setup
    ├── core/
    │   ├── socket_server.py # Listening socket, signals, shutdown
    │   └── connection.py    # One client socket, line reads, close
    ├── http/
    │   ├── request.py       # Request line capture and path resolution
    │   ├── response.py      # Response header/body building
    │   ├── pages.py         # Built-in pages, file loading, template tags
    │   └── status_codes.py  # HTTPStatus
    └── handlers/
        └── page.py          # PageHandler: one exchange, start to finish

=============================================================================
QUICK START
=============================================================================

    from simplewebserver import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
    server.run()

    # Then:
    #   curl http://127.0.0.1:8080/index.html

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
