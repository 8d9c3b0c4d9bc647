"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m simplewebserver

    # Custom port and document root
    python -m simplewebserver --port 3000 --root ./www

    # Listen on all interfaces
    python -m simplewebserver --host 0.0.0.0

    # Real 404 status lines, JSON access logs
    python -m simplewebserver --strict-status --log-format json

Environment variables (see ServerConfig.from_env) supply the defaults;
command-line arguments override them.

=============================================================================
"""

import argparse
import sys
from typing import Optional

from . import __version__
from .config import ServerConfig, LOG_LEVELS, LOG_FORMATS
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, seeded with environment defaults."""
    parser = argparse.ArgumentParser(
        prog="simplewebserver",
        description="Minimal HTTP file server: one request per connection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m simplewebserver                       # Serve the working directory
  python -m simplewebserver --port 3000           # Custom port
  python -m simplewebserver --root ./www          # Serve ./www
  python -m simplewebserver --timeout 0           # No read/write deadline
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout or 0,
        help="Per-connection read/write deadline in seconds, 0 for none "
             f"(default: {defaults.timeout or 0})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help="Directory to serve files from (default: working directory)"
    )

    parser.add_argument(
        "--strict-status",
        action="store_true",
        default=defaults.strict_status,
        help="Send '404 Not Found' with the not-found page instead of '200 OK'"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"SimpleWebServer {__version__}"
    )

    return parser


def config_from_args(argv: Optional[list] = None) -> ServerConfig:
    """Parse command-line arguments into a ServerConfig."""
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    return ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout or None,
        document_root=args.root,
        strict_status=args.strict_status,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    try:
        config = config_from_args(argv)
        server = HTTPServer(config)
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
