# =============================================================================
# main.py  -  Entry Point for the Doppio Coffee MCP Server
# =============================================================================
#
# HOW TO RUN:
#   python main.py                     Serve MCP tools over stdio
#   python main.py --check-backend     Probe the backend and exit 0/1
#   python main.py --clear-preferences Forget saved defaults and exit
#
# An MCP client (Claude Desktop, an ADK agent, ...) launches this process and
# talks to it over stdin/stdout.  Diagnostics go to stderr only.
# =============================================================================

import argparse
import asyncio
import logging
import sys

from core import __version__, config
from tools.mcp_server import api, mcp, preferences


def main() -> int:
    """Parse arguments and run the requested mode."""
    parser = argparse.ArgumentParser(
        prog="doppio-coffee-mcp",
        description="MCP server for browsing and ordering DOPPIO coffee",
    )
    parser.add_argument(
        "--check-backend",
        action="store_true",
        help="Check that the backend API is reachable, then exit",
    )
    parser.add_argument(
        "--clear-preferences",
        action="store_true",
        help=f"Reset saved preferences ({preferences.path}), then exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"doppio-coffee-mcp {__version__}",
    )
    args = parser.parse_args()

    if args.check_backend:
        healthy = asyncio.run(api.health_check())
        logging.info(f"Backend {api.api_url} is {'healthy' if healthy else 'unreachable'}")
        return 0 if healthy else 1

    if args.clear_preferences:
        preferences.clear()
        logging.info(f"Preferences cleared ({preferences.path})")
        return 0

    if config.API_KEY:
        logging.info("Doppio Coffee MCP server running on stdio")
    else:
        logging.warning("Doppio Coffee MCP server running on stdio (DOPPIO_API_KEY is not set; backend calls will be rejected)")
    mcp.run(show_banner=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
