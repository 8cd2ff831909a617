#!/usr/bin/env python3
"""
Async Siteswap MCP Server using chuk-mcp-server

This server provides MCP tools for compiling juggling patterns written in
siteswap notation into time-indexed throw matrices that layout and
animation code can consume.

The server provides tools for:
- Compiling vanilla, synchronous, multiplex and passing siteswaps
- Converting hand siteswaps (object pattern + hand pattern) to siteswap
- Parsing hand and body movement specifications
- Exporting compiled patterns as YAML
"""

import logging

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_siteswap.compiler import SiteswapCompiler
from chuk_mcp_siteswap.tools import register_siteswap_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-siteswap")

# Compiler shared by all tools
compiler = SiteswapCompiler()

# Register all tools
siteswap_tools = register_siteswap_tools(mcp, compiler)

# Export tool functions for direct access
siteswap_compile = siteswap_tools["siteswap_compile"]
siteswap_validate = siteswap_tools["siteswap_validate"]
siteswap_convert_hss = siteswap_tools["siteswap_convert_hss"]
siteswap_parse_hands = siteswap_tools["siteswap_parse_hands"]
siteswap_parse_body = siteswap_tools["siteswap_parse_body"]
siteswap_export_yaml = siteswap_tools["siteswap_export_yaml"]

logger.info("CHUK Siteswap MCP Server initialized")
