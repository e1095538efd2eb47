#!/usr/bin/env python3
"""
Entry point for the CHUK Rhythm MCP Server.

This module provides the main entry point, supporting:
- serve: run the MCP server (stdio or http transport)
- parse: parse a token stream file and print the resulting score
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHUK Rhythm MCP Server")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Run the MCP server (default)")
    serve.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )

    parse = commands.add_parser("parse", help="Parse a token stream file")
    parse.add_argument("path", type=Path, help="YAML or JSON token stream file")
    parse.add_argument(
        "--strict",
        action="store_true",
        help="Fail on invalid instrument declarations",
    )
    parse.add_argument(
        "--summary",
        action="store_true",
        help="Print only the score summary",
    )
    return parser


def _serve(transport: str, port: int) -> None:
    # Import after argument parsing to avoid issues
    from chuk_mcp_rhythm.async_server import mcp

    if transport == "stdio":
        logger.info("Starting CHUK Rhythm MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Rhythm MCP Server (http:{port})")
        asyncio.run(mcp.run_http(port=port))


def _parse_file(path: Path, strict: bool, summary: bool) -> int:
    from chuk_mcp_rhythm.parser import parse
    from chuk_mcp_rhythm.streams import TokenStreamLoader

    loader = TokenStreamLoader(library_path=path.parent)
    try:
        stream = loader.load_file(path)
        score = parse(stream.tokens, strict=strict)
    except ValueError as e:
        logger.error(f"Failed to parse {path}: {e}")
        return 1

    output = score.summary() if summary else score.to_dict()
    print(json.dumps(output, indent=2))
    for issue in score.diagnostics.issues:
        logger.warning(str(issue))
    return 0


def main() -> None:
    """Main entry point with command and transport detection."""
    args = _build_parser().parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "parse":
        sys.exit(_parse_file(args.path, args.strict, args.summary))

    _serve(getattr(args, "transport", "stdio"), getattr(args, "port", 8000))


if __name__ == "__main__":
    main()
