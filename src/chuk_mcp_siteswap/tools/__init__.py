"""
MCP tool implementations.

Tools are organized by domain:
- siteswap - Pattern compilation, hand siteswap conversion, movement specs
"""

from chuk_mcp_siteswap.tools.siteswap import register_siteswap_tools

__all__ = [
    "register_siteswap_tools",
]
