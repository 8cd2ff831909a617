"""
Juggling notations - siteswap, hand siteswap, and movement specifications.

This module provides:
- parse_pattern: siteswap text -> typed parse tree
- TreeAnnotator / MatrixBuilder / ModifierResolver: the three compiler passes
- ThrowMatrix / Throw: the compiled time-indexed throws
- HSSConverter: object + hand siteswap -> siteswap text
- HandPathSpec / BodyPathSpec: hand and body movement specifications
"""

from chuk_mcp_siteswap.notation.annotator import Annotation, AnnotationContext, TreeAnnotator
from chuk_mcp_siteswap.notation.hss import (
    HandSpecMap,
    HSSConverter,
    HSSResult,
    default_handspec,
    parse_handspec,
)
from chuk_mcp_siteswap.notation.matrix import (
    HOLD,
    THROW,
    UNRESOLVED,
    MatrixBuilder,
    Throw,
    ThrowMatrix,
    ThrowModifier,
    emit,
)
from chuk_mcp_siteswap.notation.parser import parse_pattern
from chuk_mcp_siteswap.notation.paths import BodyPathSpec, BodyPosition, Coordinate, HandPathSpec
from chuk_mcp_siteswap.notation.resolver import ModifierResolver
from chuk_mcp_siteswap.notation.symmetry import Symmetry, pattern_symmetries

__all__ = [
    # Parsing
    "parse_pattern",
    # Passes
    "Annotation",
    "AnnotationContext",
    "TreeAnnotator",
    "MatrixBuilder",
    "ModifierResolver",
    "emit",
    # Throws
    "Throw",
    "ThrowMatrix",
    "ThrowModifier",
    "HOLD",
    "THROW",
    "UNRESOLVED",
    # Symmetry
    "Symmetry",
    "pattern_symmetries",
    # Hand siteswap
    "HSSConverter",
    "HSSResult",
    "HandSpecMap",
    "parse_handspec",
    "default_handspec",
    # Movement
    "HandPathSpec",
    "BodyPathSpec",
    "Coordinate",
    "BodyPosition",
]
