#!/usr/bin/env python3
"""
Async Rhythm MCP Server using chuk-mcp-server

This server provides MCP tools for compiling depth-annotated token streams
into normalized rhythm trees.

The server provides tools for:
- Parsing token streams (inline JSON or named stream files)
- Listing the available token stream files
- Classifying how two time spans relate
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_rhythm.streams import TokenStreamLoader
from chuk_mcp_rhythm.tools import register_parsing_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-rhythm")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
STREAMS_DIR = BASE_PATH / "streams"
STREAMS_LIBRARY_PATH = Path(__file__).parent / "streams" / "library"

# Create loaders
stream_loader = TokenStreamLoader(
    library_path=STREAMS_LIBRARY_PATH,
    project_path=STREAMS_DIR,
)

# Register all tools
parsing_tools = register_parsing_tools(mcp, stream_loader)

# Export tool functions for direct access
rhythm_parse_tokens = parsing_tools["rhythm_parse_tokens"]
rhythm_parse_stream = parsing_tools["rhythm_parse_stream"]
rhythm_list_streams = parsing_tools["rhythm_list_streams"]
rhythm_span_relationship = parsing_tools["rhythm_span_relationship"]

logger.info("CHUK Rhythm MCP Server initialized")
logger.info(f"  Library path: {STREAMS_LIBRARY_PATH}")
logger.info(f"  Streams dir: {STREAMS_DIR}")
