"""
Compilation pipeline - turns pattern configurations into throw matrices.

The pipeline:
    config string → PatternConfig
    → (hand siteswap synthesis) → parse tree
    → annotated tree → ThrowMatrix → CompiledPattern
"""

from chuk_mcp_siteswap.compiler.result import SCHEMA_VERSION, CompiledPattern
from chuk_mcp_siteswap.compiler.siteswap import SiteswapCompiler, compile_pattern

__all__ = [
    # Compiler
    "SiteswapCompiler",
    "compile_pattern",
    # Result
    "CompiledPattern",
    "SCHEMA_VERSION",
]
