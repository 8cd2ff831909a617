"""
First compiler pass - annotate the parse tree.

Walks the tree depth-first, left to right, and fills in:
- absolute beat numbers for every throw
- which hand makes each async throw (alternating, overridable by R/L)
- beats and throw sums per node, for the average test
- whether the pattern is "vanilla async" (needs hand-swapped doubling if odd)
- max throw value and max multiplex width for sizing the throw matrix

The only cross-node mutable state is the per-juggler hand parity, kept in an
AnnotationContext that is passed down the traversal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chuk_mcp_siteswap.constants import ErrorMessages
from chuk_mcp_siteswap.errors import CompilerInternalError, PatternUserError
from .tree import (
    GroupedPattern,
    HandSpec,
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
    Wildcard,
)

logger = logging.getLogger(__name__)


@dataclass
class AnnotationContext:
    """Traversal state for the first pass."""

    # Per juggler: are async throws on even beats made by the right hand?
    right_on_even: list[bool]
    max_throw: int = 0
    max_occupancy: int = 0

    @classmethod
    def for_jugglers(cls, jugglers: int) -> AnnotationContext:
        return cls(right_on_even=[True] * jugglers)

    def is_left(self, juggler: int, beat_num: int) -> bool:
        return (beat_num % 2 == 0) != self.right_on_even[juggler - 1]

    def force_hand(self, juggler: int, beat_num: int, left: bool) -> None:
        """Make the throw of `juggler` at `beat_num` come from the given hand."""
        self.right_on_even[juggler - 1] = (beat_num % 2 == 0) != left


@dataclass(frozen=True)
class Annotation:
    """Pattern-wide results of the first pass."""

    jugglers: int
    period: int
    throw_sum: int
    number_of_paths: int
    max_throw: int
    max_occupancy: int
    switch_repeat: bool
    odd_period: bool  # vanilla async pattern doubled to an even period
    indexes: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "indexes", self.max_throw + self.period + 1)

    @property
    def base_period(self) -> int:
        """Period before automatic doubling of odd vanilla async patterns."""
        return self.period // 2 if self.odd_period else self.period


class TreeAnnotator:
    """First pass over a parsed pattern."""

    def annotate(self, tree: Pattern) -> Annotation:
        """
        Annotate `tree` in place and return the pattern-wide aggregates.

        Raises:
            PatternUserError: Bad average, or no beats/objects to juggle.
            CompilerInternalError: The pattern contains a wildcard.
        """
        ctx = AnnotationContext.for_jugglers(tree.jugglers)
        tree.beat_num = 0
        self._visit(tree, ctx)

        odd_period = False
        if not tree.switch_repeat and tree.vanilla_async and tree.beats % 2 == 1:
            tree.switch_repeat = True
            tree.beats *= 2
            tree.throw_sum *= 2
            odd_period = True
            logger.debug("Vanilla async pattern with odd period; doubling with hands switched")

        if tree.beats == 0:
            raise PatternUserError(ErrorMessages.NO_BEATS)
        if tree.throw_sum % tree.beats != 0:
            raise PatternUserError(ErrorMessages.BAD_AVERAGE.format(throw_sum=tree.throw_sum, beats=tree.beats))

        annotation = Annotation(
            jugglers=tree.jugglers,
            period=tree.beats,
            throw_sum=tree.throw_sum,
            number_of_paths=tree.throw_sum // tree.beats,
            max_throw=ctx.max_throw,
            max_occupancy=ctx.max_occupancy,
            switch_repeat=tree.switch_repeat,
            odd_period=odd_period,
        )
        logger.debug(
            "period=%d paths=%d max_throw=%d max_occupancy=%d",
            annotation.period,
            annotation.number_of_paths,
            annotation.max_throw,
            annotation.max_occupancy,
        )
        return annotation

    def _visit(self, node: object, ctx: AnnotationContext) -> None:
        if isinstance(node, Pattern):
            self._pattern(node, ctx)
        elif isinstance(node, GroupedPattern):
            self._grouped(node, ctx)
        elif isinstance(node, SoloSequence):
            node.throw_sum = 0
            node.vanilla_async = True
            for item in node.items:
                item.beat_num = node.beat_num + item.seq_beat
                self._visit(item, ctx)
                node.throw_sum += _throw_sum(item)
                node.vanilla_async = node.vanilla_async and _vanilla(item)
        elif isinstance(node, PassingSequence):
            node.throw_sum = 0
            node.vanilla_async = True
            for group in node.groups:
                group.beat_num = node.beat_num
                self._visit(group, ctx)
                node.throw_sum += group.throw_sum
                node.vanilla_async = node.vanilla_async and group.vanilla_async
        elif isinstance(node, PassingGroup):
            node.throw_sum = 0
            node.vanilla_async = True
            for section in node.sections:
                section.beat_num = node.beat_num
                self._visit(section, ctx)
                node.throw_sum += section.throw_sum
                node.vanilla_async = node.vanilla_async and section.vanilla_async
        elif isinstance(node, PassingThrows):
            node.throw_sum = 0
            node.vanilla_async = True
            for item in node.items:
                # seq_beat counts from the start of the passing sequence
                item.beat_num = node.beat_num + item.seq_beat
                self._visit(item, ctx)
                node.throw_sum += _throw_sum(item)
                node.vanilla_async = node.vanilla_async and _vanilla(item)
        elif isinstance(node, (SoloPairedThrow, PassingPairedThrow)):
            node.throw_sum = 0
            for index, multi in enumerate((node.left, node.right)):
                multi.beat_num = node.beat_num
                self._visit(multi, ctx)
                multi.left = index == 0
                multi.sync = True
                node.throw_sum += multi.throw_sum
        elif isinstance(node, (SoloMultiThrow, PassingMultiThrow)):
            self._multi(node, ctx)
        elif isinstance(node, HandSpec):
            ctx.force_hand(node.source_juggler, node.beat_num, node.left)
        elif isinstance(node, Wildcard):
            raise CompilerInternalError(ErrorMessages.WILDCARD_UNRESOLVED)
        else:
            raise CompilerInternalError(f"Unexpected node {type(node).__name__} in first pass")

    def _pattern(self, node: Pattern, ctx: AnnotationContext) -> None:
        node.beats = 0
        node.throw_sum = 0
        node.vanilla_async = True
        for element in node.elements:
            element.beat_num = node.beat_num + node.beats
            self._visit(element, ctx)
            node.beats += element.beats
            node.throw_sum += element.throw_sum
            node.vanilla_async = node.vanilla_async and element.vanilla_async
        if node.switch_repeat:
            node.beats *= 2
            node.throw_sum *= 2

    def _grouped(self, node: GroupedPattern, ctx: AnnotationContext) -> None:
        copies = node.make_copies()
        first = copies[0]
        first.beat_num = node.beat_num
        self._visit(first, ctx)
        for i, child in enumerate(copies[1:], start=1):
            child.beat_num = node.beat_num + i * first.beats
            self._visit(child, ctx)
        node.beats = first.beats * node.repeats
        node.throw_sum = first.throw_sum * node.repeats
        node.vanilla_async = first.vanilla_async

    def _multi(self, node: MultiThrow, ctx: AnnotationContext) -> None:
        node.throw_sum = 0
        node.vanilla_async = True
        for single in node.throws:
            single.beat_num = node.beat_num
            single.vanilla_async = not single.crossing
            ctx.max_throw = max(ctx.max_throw, single.value)
            node.throw_sum += single.value
            node.vanilla_async = node.vanilla_async and single.vanilla_async
        node.left = ctx.is_left(node.source_juggler, node.beat_num)
        node.sync = False
        ctx.max_occupancy = max(ctx.max_occupancy, len(node.throws))


def _throw_sum(item: object) -> int:
    return getattr(item, "throw_sum", 0)


def _vanilla(item: object) -> bool:
    if isinstance(item, (SoloPairedThrow, PassingPairedThrow)):
        return False
    if isinstance(item, HandSpec):
        return item.beat_num == 0
    return item.vanilla_async  # type: ignore[attr-defined]
