"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_siteswap.compiler import SiteswapCompiler


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def compiler() -> SiteswapCompiler:
    """A fresh siteswap compiler."""
    return SiteswapCompiler()


@pytest.fixture
def hands_two_beats() -> str:
    """Hands specification with a two-beat period."""
    return "(10)(32.5).(-10)(-32.5)."
