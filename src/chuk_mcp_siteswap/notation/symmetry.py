"""
Pattern symmetries handed to layout.

Every pattern repeats after its period (a delay symmetry). Switch-repeated
patterns also repeat after half a period with every juggler's hands swapped.
"""

from __future__ import annotations

from dataclasses import dataclass

from chuk_mcp_siteswap.constants import SymmetryKind
from chuk_mcp_siteswap.core.permutation import Permutation


@dataclass(frozen=True)
class Symmetry:
    """A symmetry: juggler permutation applied after `delay` beats."""

    kind: SymmetryKind
    jugglers: int
    permutation: Permutation
    delay: int

    @classmethod
    def create(cls, kind: SymmetryKind, jugglers: int, delay: int, permutation: str | None = None) -> Symmetry:
        """Build a symmetry from a permutation string (identity when None)."""
        if permutation is None:
            perm = Permutation.identity(jugglers)
        else:
            perm = Permutation.from_string(jugglers, permutation)
        return cls(kind=kind, jugglers=jugglers, permutation=perm, delay=delay)

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "jugglers": self.jugglers,
            "permutation": self.permutation.to_string(),
            "delay": self.delay,
        }


def pattern_symmetries(jugglers: int, period: int, switch_repeat: bool) -> list[Symmetry]:
    symmetries = [Symmetry.create(SymmetryKind.DELAY, jugglers, period)]
    if switch_repeat:
        swap_hands = "".join(f"({j},{j}*)" for j in range(1, jugglers + 1))
        symmetries.append(Symmetry.create(SymmetryKind.SWITCH_DELAY, jugglers, period // 2, swap_hands))
    return symmetries
