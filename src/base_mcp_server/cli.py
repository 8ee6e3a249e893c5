#!/usr/bin/env python3
# src/base_mcp_server/cli.py
"""
CLI entry point for the MCP session server.
"""

import argparse
import logging
import sys

from .config import ServerConfig
from .constants import LOG_FORMAT, LOG_LEVELS
from .core import MCPServer
from .demo import register_demo_capabilities

logger = logging.getLogger(__name__)


def setup_logging(level: str = "info", debug: bool = False) -> None:
    """Set up logging configuration on stderr."""
    resolved = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="base-mcp-server",
        description="Session-oriented MCP server over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run on the default host and port
  base-mcp-server

  # Run on a custom port with debug logging
  base-mcp-server --port 9000 --debug

  # Expire idle sessions after five minutes
  base-mcp-server --idle-timeout 300

Environment Variables:
  MCP_SERVER_NAME                Server name (default: mcp-server)
  MCP_SERVER_VERSION             Server version (default: 1.0.0)
  MCP_HOST                       Host to bind to (default: 127.0.0.1)
  PORT                           Port to bind to (default: 3000)
  MCP_LOG_LEVEL                  Logging level (debug|info|warning|error|critical)
  MCP_DNS_REBINDING_PROTECTION   Set to 1 to enforce MCP_ALLOWED_HOSTS
  MCP_ALLOWED_HOSTS              Comma-separated Host header allow-list
  MCP_SESSION_IDLE_TIMEOUT       Seconds before an idle session is evicted
  MCP_SESSION_SWEEP_INTERVAL     Seconds between idle sweeps
  MCP_AUTO_CREATE_SESSIONS       Set to 1 to create sessions without initialize
  MCP_HANDLER_TIMEOUT            Per-request timeout in seconds
        """,
    )
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--log-level", default=None, choices=list(LOG_LEVELS), help="Logging level")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--idle-timeout", type=float, default=None, help="Session idle timeout in seconds")
    parser.add_argument("--no-demo", action="store_true", help="Don't register the demo tool and resource")
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-derived config with command-line flags layered on top."""
    return ServerConfig.from_env(
        host=args.host,
        port=args.port,
        log_level="debug" if args.debug else args.log_level,
        idle_timeout=args.idle_timeout,
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(config.log_level, debug=args.debug)

    server = MCPServer(config)
    if not args.no_demo:
        register_demo_capabilities(server)

    logger.info(f"Starting {config.name} v{config.version}")
    server.run()


if __name__ == "__main__":
    main()
