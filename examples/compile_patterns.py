#!/usr/bin/env python3
"""
Example: Compiling Juggling Patterns.

Compiles a handful of solo, synchronous, passing and hand siteswap
patterns and prints their summaries, then exports one as YAML.

Usage:
    python examples/compile_patterns.py
"""

from chuk_mcp_siteswap.compiler import SiteswapCompiler
from chuk_mcp_siteswap.errors import PatternUserError

PATTERNS = [
    "3",
    "531",
    "(4,2x)*",
    "[43]14",
    "<3p|3p><3|3>",
    "pattern=3;hss=2;handspec=(2,1)",
    "pattern=(4,2x)*;hands=(10)(32.5).(-10)(-32.5).",
    "43",
]


def main() -> None:
    """Compile each pattern and show what came out."""
    print("CHUK Siteswap Compiler Demo")
    print("=" * 40)
    print()

    compiler = SiteswapCompiler()

    for config in PATTERNS:
        try:
            result = compiler.compile(config)
        except PatternUserError as e:
            print(f"{config}: invalid ({e})")
            print()
            continue

        summary = result.summary()
        print(f"{config}")
        print(f"  Pattern: {summary['pattern']}")
        print(f"  Jugglers: {summary['jugglers']}, objects: {summary['paths']}, period: {summary['period']}")
        print(f"  Max throw: {summary['max_throw']}, bps: {summary['bps']:.2f}")
        print(f"  Switch repeat: {summary['switch_repeat']}")
        print(f"  Throws/passes/holds per period: "
              f"{summary['throws_per_period']}/{summary['passes_per_period']}/{summary['holds_per_period']}")
        print(f"  Values (juggler 1): {result.throw_values()}")
        print()

    print("YAML export of 531:")
    print(compiler.compile("531").to_yaml())


if __name__ == "__main__":
    main()
