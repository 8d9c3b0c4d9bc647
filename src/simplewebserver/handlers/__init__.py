"""
=============================================================================
CONNECTION HANDLERS
=============================================================================

A handler owns one connection from accept to close:

    ┌───────────────────────────────────────────────────────────────────┐
    │                                                                    │
    │   Connection ──► PageHandler.handle(conn) ──► (closed connection)  │
    │                                                                    │
    └───────────────────────────────────────────────────────────────────┘

There is no routing: every connection gets the same pipeline, and the
request line alone decides which page comes back.

=============================================================================
"""

from .page import PageHandler

__all__ = ["PageHandler"]
