#!/usr/bin/env python3
"""
Entry point for the CHUK Siteswap MCP Server.

This module provides the main entry point for the MCP server,
supporting multiple transport modes (stdio, http). With --compile it
compiles one pattern and prints it instead of serving.
"""

import argparse
import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def compile_once(config: str, output_format: str) -> int:
    """Compile one pattern to stdout; user errors go to stderr with exit code 1."""
    from chuk_mcp_siteswap.compiler import SiteswapCompiler
    from chuk_mcp_siteswap.errors import PatternUserError

    try:
        result = SiteswapCompiler().compile(config)
    except PatternUserError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if output_format == "yaml":
        print(result.to_yaml(), end="")
    else:
        print(result.to_json())
    return 0


def main() -> None:
    """Main entry point with transport detection."""
    parser = argparse.ArgumentParser(description="CHUK Siteswap MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--compile",
        metavar="CONFIG",
        help="Compile a pattern or configuration string and exit",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format for --compile (default: json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.compile is not None:
        sys.exit(compile_once(args.compile, args.format))

    # Import after argument parsing so --debug covers tool registration
    from chuk_mcp_siteswap.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Siteswap MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Siteswap MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
