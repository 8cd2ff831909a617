"""
Core helpers - the arithmetic and text layer.

- Permutation: juggler permutations with left/right reversal
- lcm: least common multiple used for period computations
- expand_repeats / split_outside_parens: shorthand handling for notations
"""

from chuk_mcp_siteswap.core.permutation import Permutation, lcm
from chuk_mcp_siteswap.core.text import expand_repeats, split_outside_parens

__all__ = [
    # Arithmetic
    "Permutation",
    "lcm",
    # Text
    "expand_repeats",
    "split_outside_parens",
]
