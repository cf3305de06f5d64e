"""
=============================================================================
CLI ENTRY POINT
=============================================================================

Command-line interface for running the server.

=============================================================================
USAGE
=============================================================================

    # Run with defaults (0.0.0.0:4221, files from the current directory)
    python -m minihttp

    # Serve and store /files/ under another directory
    python -m minihttp -directory /tmp/files
    python -m minihttp --directory /tmp/files

    # Custom port, more workers, verbose logs
    python -m minihttp --port 8080 --workers 32 --log-level DEBUG

=============================================================================
12-FACTOR APP: ENTRY POINT
=============================================================================

1. Read configuration: defaults ← environment (HTTP_*) ← CLI flags
2. Construct ServerConfig + HTTPServer
3. server.run() until SIGINT/SIGTERM

Exit status is 1 when the configuration is invalid or the port cannot be
bound ("Failed to bind to port 4221").

=============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .middleware import LoggingMiddleware
from .server import HTTPServer


logger = logging.getLogger("minihttp")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Unset options fall back to the environment."""
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="A minimal HTTP/1.1 server: echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                          # Run with defaults
  python -m minihttp -directory /tmp/files    # Base directory for /files/
  python -m minihttp --port 8080              # Custom port
  python -m minihttp --log-level DEBUG        # Verbose logging
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "-directory", "--directory",
        dest="directory",
        default=None,
        help="Directory /files/ reads from and writes to (default: .)"
    )

    parser.add_argument(
        "--allow-path-traversal",
        action="store_true",
        default=None,
        help="Allow file names that resolve outside the directory"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 4221)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Read timeout in seconds (default: 30)"
    )

    parser.add_argument(
        "--follow-content-length",
        action="store_true",
        default=None,
        help="Keep reading until the Content-Length body has arrived"
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Maximum worker threads (default: 64)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> ServerConfig:
    """
    Overlay parsed CLI arguments on the environment configuration.

    Only options given on the command line override; everything else keeps
    its HTTP_* or default value.
    """
    config = ServerConfig.from_env()

    for name in (
        "directory", "host", "port", "timeout", "log_level", "log_format",
        "allow_path_traversal", "follow_content_length",
    ):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)

    if args.workers is not None:
        config.max_workers = args.workers
        config.min_workers = min(config.min_workers, args.workers)

    return config


def main(argv: Optional[List[str]] = None):
    """
    Main CLI entry point.

    Args:
        argv: Arguments to parse (default: sys.argv[1:]).
    """
    args = build_parser().parse_args(argv)
    config = build_config(args)

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    # Logging is always enabled (it's essential for debugging)
    server.use(LoggingMiddleware(log_format=config.log_format))

    try:
        server.run()
    except OSError as e:
        logger.error(f"Failed to bind to port {config.port}: {e}")
        print(f"Failed to bind to port {config.port}", file=sys.stderr)
        sys.exit(1)


# This allows running: python -m minihttp
if __name__ == "__main__":
    main()
