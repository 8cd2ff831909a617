"""
Pydantic models for the siteswap compiler.

This module provides:
- ParameterList: `key=value;...` configuration strings
- PatternConfig: validated compiler parameters
"""

from chuk_mcp_siteswap.models.config import ParameterList, PatternConfig

__all__ = [
    "ParameterList",
    "PatternConfig",
]
