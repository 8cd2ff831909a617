"""
Second compiler pass - the time-indexed throw matrix.

The matrix is indexed [juggler][hand][beat index][slot] and spans
`max_throw + period + 1` beat indexes, so every throw made during the first
period can be followed to where it lands.

`emit()` is a pure generator over an annotated tree. For a switch-repeated
pattern (`*`) it walks the elements a second time with the hands swapped,
half a period later.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from chuk_mcp_siteswap.constants import HOLD_TAG, THROW_TAG, ErrorMessages, Hand, ModifierKind
from chuk_mcp_siteswap.errors import CompilerInternalError
from .annotator import Annotation
from .tree import (
    GroupedPattern,
    MultiThrow,
    PassingGroup,
    PassingMultiThrow,
    PassingPairedThrow,
    PassingSequence,
    PassingThrows,
    Pattern,
    SoloMultiThrow,
    SoloPairedThrow,
    SoloSequence,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThrowModifier:
    """
    Hold, throw (optionally tagged, e.g. "B" for a bounce) or not yet known.

    An unresolved modifier comes from a '2' that stays in the same hand: it
    is a hold unless the hand is busy throwing on the next beat.
    """

    kind: ModifierKind
    tag: str | None = None

    @classmethod
    def from_text(cls, text: str) -> ThrowModifier:
        if text and set(text) == {HOLD_TAG}:
            return HOLD
        return cls(ModifierKind.THROW, text)

    @property
    def is_hold(self) -> bool:
        return self.kind is ModifierKind.HOLD

    @property
    def is_resolved(self) -> bool:
        return self.kind is not ModifierKind.UNRESOLVED

    def __str__(self) -> str:
        return self.tag if self.tag is not None else "?"


HOLD = ThrowModifier(ModifierKind.HOLD, HOLD_TAG)
THROW = ThrowModifier(ModifierKind.THROW, THROW_TAG)
UNRESOLVED = ThrowModifier(ModifierKind.UNRESOLVED)


@dataclass(frozen=True)
class Throw:
    """One object leaving one hand at one beat index."""

    source_juggler: int
    source_hand: Hand
    index: int
    slot: int
    dest_juggler: int
    dest_hand: Hand
    target_index: int
    modifier: ThrowModifier
    hands_index: int | None = None

    @property
    def value(self) -> int:
        return self.target_index - self.index

    @property
    def is_pass(self) -> bool:
        return self.source_juggler != self.dest_juggler

    def to_dict(self) -> dict:
        return {
            "juggler": self.source_juggler,
            "hand": self.source_hand.letter,
            "index": self.index,
            "slot": self.slot,
            "value": self.value,
            "dest_juggler": self.dest_juggler,
            "dest_hand": self.dest_hand.letter,
            "target_index": self.target_index,
            "modifier": str(self.modifier),
            "hands_index": self.hands_index,
        }


class ThrowMatrix:
    """4-D throw storage: [juggler][hand][beat index][slot] -> Throw or None."""

    def __init__(self, jugglers: int, indexes: int, max_occupancy: int) -> None:
        self.jugglers = jugglers
        self.indexes = indexes
        self.max_occupancy = max_occupancy
        self._cells: list[list[list[list[Throw | None]]]] = [
            [[[None] * max_occupancy for _ in range(indexes)] for _ in Hand] for _ in range(jugglers)
        ]
        self._frozen = False

    def _check(self, juggler: int, hand: int, index: int, slot: int) -> None:
        if not (
            1 <= juggler <= self.jugglers
            and 0 <= index < self.indexes
            and 0 <= slot < self.max_occupancy
            and hand in (Hand.RIGHT, Hand.LEFT)
        ):
            raise CompilerInternalError(
                ErrorMessages.MISSING_SLOT.format(juggler=juggler, hand=hand, index=index, slot=slot)
            )

    def get(self, juggler: int, hand: int, index: int, slot: int) -> Throw | None:
        self._check(juggler, hand, index, slot)
        return self._cells[juggler - 1][hand][index][slot]

    def slots(self, juggler: int, hand: int, index: int) -> list[Throw | None]:
        """All slots of one hand at one beat index."""
        if not (1 <= juggler <= self.jugglers and 0 <= index < self.indexes):
            raise CompilerInternalError(
                ErrorMessages.MISSING_SLOT.format(juggler=juggler, hand=hand, index=index, slot=0)
            )
        return list(self._cells[juggler - 1][hand][index])

    def place(self, throw: Throw) -> None:
        """Store `throw` at its own (juggler, hand, index, slot) position."""
        if self._frozen:
            raise CompilerInternalError(ErrorMessages.MATRIX_FROZEN)
        self._check(throw.source_juggler, throw.source_hand, throw.index, throw.slot)
        self._cells[throw.source_juggler - 1][throw.source_hand][throw.index][throw.slot] = throw

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __iter__(self) -> Iterator[Throw]:
        """Throws ordered by beat index, then juggler, hand and slot."""
        for index in range(self.indexes):
            for juggler in range(self.jugglers):
                for hand in Hand:
                    for throw in self._cells[juggler][hand][index]:
                        if throw is not None:
                            yield throw

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ThrowMatrix):
            return NotImplemented
        return (self.jugglers, self.indexes, self.max_occupancy, self._cells) == (
            other.jugglers,
            other.indexes,
            other.max_occupancy,
            other._cells,
        )

    def to_list(self) -> list[dict]:
        return [throw.to_dict() for throw in self]


@dataclass(frozen=True)
class EmitContext:
    """Pattern-wide values needed to turn tree nodes into throws."""

    jugglers: int
    period: int
    indexes: int
    # Hand movement period per juggler, when a hands specification is in use
    hand_periods: Sequence[int] | None = None


def emit(node: object, switched: bool, beat_offset: int, ctx: EmitContext) -> Iterator[Throw]:
    """Yield the throws described by an annotated node."""
    if isinstance(node, Pattern):
        for element in node.elements:
            yield from emit(element, switched, beat_offset, ctx)
        if node.switch_repeat:
            for element in node.elements:
                yield from emit(element, not switched, beat_offset + node.beats // 2, ctx)
    elif isinstance(node, GroupedPattern):
        for child in node.copies:
            yield from emit(child, switched, beat_offset, ctx)
    elif isinstance(node, (SoloSequence, PassingThrows)):
        for item in node.items:
            yield from emit(item, switched, beat_offset, ctx)
    elif isinstance(node, PassingSequence):
        for group in node.groups:
            yield from emit(group, switched, beat_offset, ctx)
    elif isinstance(node, PassingGroup):
        for section in node.sections:
            yield from emit(section, switched, beat_offset, ctx)
    elif isinstance(node, (SoloPairedThrow, PassingPairedThrow)):
        yield from emit(node.left, switched, beat_offset, ctx)
        yield from emit(node.right, switched, beat_offset, ctx)
    elif isinstance(node, (SoloMultiThrow, PassingMultiThrow)):
        yield from _emit_multi(node, switched, beat_offset, ctx)


def _emit_multi(node: MultiThrow, switched: bool, beat_offset: int, ctx: EmitContext) -> Iterator[Throw]:
    source_hand = Hand.LEFT if node.left != switched else Hand.RIGHT
    for index in range(node.beat_num + beat_offset, ctx.indexes, ctx.period):
        for slot, single in enumerate(node.throws):
            dest_hand = source_hand if single.value % 2 == 0 else source_hand.other
            if single.crossing:
                dest_hand = dest_hand.other

            same_hand = single.source_juggler == single.dest_juggler and source_hand == dest_hand
            if single.modifier is not None:
                modifier = ThrowModifier.from_text(single.modifier)
            elif same_hand and single.value <= 1:
                modifier = HOLD
            elif same_hand and single.value == 2:
                modifier = UNRESOLVED
            else:
                modifier = THROW

            dest_juggler = single.dest_juggler
            if dest_juggler > ctx.jugglers:
                dest_juggler = 1 + (dest_juggler - 1) % ctx.jugglers

            hands_index = None
            if ctx.hand_periods is not None:
                hands_index = index + (1 if node.sync and source_hand == Hand.RIGHT else 0)
                hands_index %= ctx.hand_periods[single.source_juggler - 1]

            # Zero throws are kept as placeholders so multiplex slots stay aligned
            yield Throw(
                source_juggler=single.source_juggler,
                source_hand=source_hand,
                index=index,
                slot=slot,
                dest_juggler=dest_juggler,
                dest_hand=dest_hand,
                target_index=index + single.value,
                modifier=modifier,
                hands_index=hands_index,
            )


class MatrixBuilder:
    """Second pass: fill a ThrowMatrix from an annotated tree."""

    def build(
        self,
        tree: Pattern,
        annotation: Annotation,
        hand_periods: Sequence[int] | None = None,
    ) -> ThrowMatrix:
        matrix = ThrowMatrix(annotation.jugglers, annotation.indexes, annotation.max_occupancy)
        ctx = EmitContext(
            jugglers=annotation.jugglers,
            period=annotation.period,
            indexes=annotation.indexes,
            hand_periods=hand_periods,
        )
        for throw in emit(tree, False, 0, ctx):
            matrix.place(throw)
        logger.debug("Built throw matrix with %d throws over %d indexes", len(matrix), matrix.indexes)
        return matrix
