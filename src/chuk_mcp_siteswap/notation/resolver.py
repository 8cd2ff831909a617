"""
Third compiler pass - decide whether each ambiguous '2' is a hold or a throw.
"""

from __future__ import annotations

import dataclasses
import logging

from chuk_mcp_siteswap.constants import Hand
from .matrix import HOLD, THROW, Throw, ThrowMatrix

logger = logging.getLogger(__name__)


class ModifierResolver:
    """
    Resolve every unresolved modifier in a throw matrix.

    A '2' that returns to the same hand is a hold, unless that hand makes a
    real throw on the next beat (anything other than a zero placeholder), in
    which case it has to be a short throw. Already-resolved throws are left
    alone, so resolving twice changes nothing.
    """

    def resolve(self, matrix: ThrowMatrix) -> ThrowMatrix:
        resolved = 0
        for throw in list(matrix):
            if throw.modifier.is_resolved:
                continue
            modifier = THROW if self._hand_busy_next_beat(matrix, throw) else HOLD
            matrix.place(dataclasses.replace(throw, modifier=modifier))
            resolved += 1
        if resolved:
            logger.debug("Resolved %d ambiguous hold/throw modifier(s)", resolved)
        return matrix

    @staticmethod
    def _hand_busy_next_beat(matrix: ThrowMatrix, throw: Throw) -> bool:
        next_index = throw.index + 1
        if next_index >= matrix.indexes:
            return False
        hand: Hand = throw.source_hand
        return any(
            other is not None and other.target_index != next_index
            for other in matrix.slots(throw.source_juggler, hand, next_index)
        )
