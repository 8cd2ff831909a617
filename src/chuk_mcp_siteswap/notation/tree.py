"""
Siteswap parse tree - one dataclass per node kind.

The parser fills in the structural fields (values, children, beat offsets
within a sequence). The first compiler pass fills in the annotation fields
(beat_num, beats, throw_sum, vanilla_async, left, sync), which default to
neutral values until then.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union


@dataclass
class SoloSingleThrow:
    """One object thrown by the (single) juggler of a solo pattern."""

    value: int
    crossing: bool = False
    modifier: str | None = None
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    vanilla_async: bool = True

    @property
    def source_juggler(self) -> int:
        return 1

    @property
    def dest_juggler(self) -> int:
        return 1


@dataclass
class PassingSingleThrow:
    """One object thrown by a juggler of a passing pattern."""

    value: int
    source_juggler: int
    dest_juggler: int
    crossing: bool = False
    modifier: str | None = None
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    vanilla_async: bool = True


SingleThrow = Union[SoloSingleThrow, PassingSingleThrow]


@dataclass
class SoloMultiThrow:
    """All objects released by one hand on one beat (one unless multiplexed)."""

    throws: list[SoloSingleThrow]
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True
    left: bool = False
    sync: bool = False

    @property
    def source_juggler(self) -> int:
        return 1


@dataclass
class PassingMultiThrow:
    throws: list[PassingSingleThrow]
    source_juggler: int
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True
    left: bool = False
    sync: bool = False


MultiThrow = Union[SoloMultiThrow, PassingMultiThrow]


@dataclass
class SoloPairedThrow:
    """A synchronous (left, right) pair of throws."""

    left: SoloMultiThrow
    right: SoloMultiThrow
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0


@dataclass
class PassingPairedThrow:
    left: PassingMultiThrow
    right: PassingMultiThrow
    source_juggler: int
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0


@dataclass
class HandSpec:
    """Forces the next throw of a juggler into the given hand (`R` or `L`)."""

    left: bool
    source_juggler: int = 1
    seq_beat: int = 0
    # annotations
    beat_num: int = 0


SoloItem = Union[SoloPairedThrow, SoloMultiThrow, HandSpec]
PassingItem = Union[PassingPairedThrow, PassingMultiThrow, HandSpec]


@dataclass
class SoloSequence:
    """A run of consecutive solo beats."""

    items: list[SoloItem]
    beats: int
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True


@dataclass
class PassingThrows:
    """One juggler's section of a passing group."""

    items: list[PassingItem]
    source_juggler: int
    beats: int
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True


@dataclass
class PassingGroup:
    """`<...|...>`: simultaneous sections, one per juggler."""

    sections: list[PassingThrows]
    jugglers: int
    beats: int
    seq_beat: int = 0
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True


@dataclass
class PassingSequence:
    """A run of consecutive passing groups."""

    groups: list[PassingGroup]
    jugglers: int
    beats: int
    # annotations
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True


@dataclass
class Wildcard:
    """`?` placeholder for a transition sequence."""

    beats: int = 1
    position: int | None = None


@dataclass
class Pattern:
    """A sequence of elements, optionally switch-repeated (`*`)."""

    elements: list[Element]
    jugglers: int = 1
    switch_repeat: bool = False
    # annotations
    beats: int = 0
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True


@dataclass
class GroupedPattern:
    """`(pattern^N)`: a pattern repeated N times."""

    pattern: Pattern
    repeats: int
    # annotations: one deep copy of `pattern` per repeat, beat-shifted
    copies: list[Pattern] = field(default_factory=list)
    beats: int = 0
    beat_num: int = 0
    throw_sum: int = 0
    vanilla_async: bool = True

    def make_copies(self) -> list[Pattern]:
        self.copies = [self.pattern] + [copy.deepcopy(self.pattern) for _ in range(self.repeats - 1)]
        return self.copies


Element = Union[GroupedPattern, SoloSequence, PassingSequence, Wildcard]
