"""
CompiledPattern - the output of the siteswap compiler.

This is the stable, inspectable representation handed to layout and
animation. It is designed to be:
- Deterministic: same configuration -> same result
- Serializable: JSON/YAML for inspection and golden-file testing
- Diffable: throws are listed in canonical order (beat index, juggler, hand, slot)

Schema version: siteswap/v1
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import yaml

from chuk_mcp_siteswap.models.config import PatternConfig
from chuk_mcp_siteswap.notation.matrix import Throw, ThrowMatrix
from chuk_mcp_siteswap.notation.paths import BodyPathSpec, HandPathSpec
from chuk_mcp_siteswap.notation.symmetry import Symmetry

# Current schema version
SCHEMA_VERSION = "siteswap/v1"


@dataclass
class CompiledPattern:
    """A fully compiled pattern: throws, symmetries and movement specs."""

    config: PatternConfig
    pattern: str  # Final pattern text (after HSS synthesis and period alignment)
    jugglers: int
    paths: int
    period: int
    max_occupancy: int
    max_throw: int
    indexes: int
    matrix: ThrowMatrix
    symmetries: list[Symmetry] = field(default_factory=list)
    hands: HandPathSpec | None = None
    body: BodyPathSpec | None = None
    dwell_beats: tuple[float, ...] | None = None
    bps: float = 0.0
    schema: str = SCHEMA_VERSION

    @property
    def switch_repeat(self) -> bool:
        return len(self.symmetries) > 1

    def throws(self, first_period_only: bool = False) -> list[Throw]:
        """Throws in canonical order, optionally only those made in the first period."""
        if first_period_only:
            return [t for t in self.matrix if t.index < self.period]
        return list(self.matrix)

    def throw_values(self, juggler: int = 1) -> list[int]:
        """Nonzero throw values made by `juggler` during the first period, in order."""
        return [t.value for t in self.throws(first_period_only=True) if t.source_juggler == juggler and t.value > 0]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a dictionary for JSON/YAML serialization.

        Throws are in canonical order for deterministic diffs.
        """
        return {
            "schema": self.schema,
            "config": self.config.to_config_string(),
            "pattern": self.pattern,
            "jugglers": self.jugglers,
            "paths": self.paths,
            "period": self.period,
            "max_occupancy": self.max_occupancy,
            "max_throw": self.max_throw,
            "indexes": self.indexes,
            "bps": self.bps,
            "symmetries": [s.to_dict() for s in self.symmetries],
            "hands": self.hands.to_dict() if self.hands else None,
            "body": self.body.to_dict() if self.body else None,
            "dwell_beats": list(self.dwell_beats) if self.dwell_beats is not None else None,
            "throws": self.matrix.to_list(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        """Serialize to YAML string, keys kept in insertion order."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def summary(self) -> dict[str, Any]:
        """Generate a summary for quick inspection."""
        first_period = self.throws(first_period_only=True)
        return {
            "pattern": self.pattern,
            "jugglers": self.jugglers,
            "paths": self.paths,
            "period": self.period,
            "max_throw": self.max_throw,
            "max_occupancy": self.max_occupancy,
            "bps": self.bps,
            "switch_repeat": self.switch_repeat,
            "throws_per_period": sum(1 for t in first_period if t.value > 0),
            "passes_per_period": sum(1 for t in first_period if t.is_pass),
            "holds_per_period": sum(1 for t in first_period if t.modifier.is_hold and t.value > 0),
        }
