"""
Hand siteswap (HSS) conversion.

A hand siteswap describes juggling with two separate sequences:
- the object pattern: ordinary siteswap for the props ("3", "[43]1", "5B")
- the hand pattern: siteswap for the hands themselves ("2", "312")

plus a handspec saying which juggler owns each hand: "(1,2)(3,4)" gives
juggler 1 hands 1 (left) and 2 (right), juggler 2 hands 3 and 4.

HSSConverter validates the three inputs, works out which hand throws on
every beat and how long each hand may dwell, then writes the result as a
synchronous passing pattern that the ordinary siteswap parser accepts:

    HSSConverter().convert("3", "2", "(2,1)").pattern == "<(0,3)!><(3,0)!>"
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from chuk_mcp_siteswap.constants import DWELL_DEFAULT, HSS_DWELL_DEFAULT, HSS_DWELL_MARGIN, ErrorMessages
from chuk_mcp_siteswap.core.permutation import lcm
from chuk_mcp_siteswap.errors import HSSError

logger = logging.getLogger(__name__)

_VALUE_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"
_BOUNCE_NEXT = {"B": "FLH", "BH": "FL"}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObjectThrow:
    """One prop thrown on one beat, with its optional bounce tag (B, BF, BHL, ...)."""

    value: int
    bounce: str | None = None


@dataclass(frozen=True)
class ObjectPattern:
    """Parsed object pattern: the throws made on each beat."""

    beats: tuple[tuple[ObjectThrow, ...], ...]

    @property
    def period(self) -> int:
        return len(self.beats)

    @property
    def objects(self) -> int:
        return sum(t.value for beat in self.beats for t in beat) // self.period


@dataclass(frozen=True)
class HandPattern:
    """Parsed hand pattern: one hand throw per beat."""

    values: tuple[int, ...]

    @property
    def period(self) -> int:
        return len(self.values)

    @property
    def hands(self) -> int:
        return sum(self.values) // self.period


@dataclass(frozen=True)
class HandAssignment:
    juggler: int
    left: bool

    @property
    def side(self) -> str:
        return "left" if self.left else "right"


@dataclass(frozen=True)
class HandSpecMap:
    """Hand number (from 1) -> owning juggler and side."""

    assignments: tuple[HandAssignment, ...]

    def __getitem__(self, hand: int) -> HandAssignment:
        return self.assignments[hand - 1]

    def __len__(self) -> int:
        return len(self.assignments)

    @property
    def jugglers(self) -> int:
        return max((a.juggler for a in self.assignments), default=1)

    def to_dict(self) -> dict:
        return {str(h): {"juggler": a.juggler, "side": a.side} for h, a in enumerate(self.assignments, start=1)}


@dataclass(frozen=True)
class HSSResult:
    """Output of a conversion: the synthesized pattern and per-beat dwell."""

    pattern: str
    dwell_beats: tuple[float, ...]
    period: int
    jugglers: int
    hands: int
    hand_orbit_period: int
    handmap: HandSpecMap

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "dwell_beats": list(self.dwell_beats),
            "period": self.period,
            "jugglers": self.jugglers,
            "hands": self.hands,
            "hand_orbit_period": self.hand_orbit_period,
            "handmap": self.handmap.to_dict(),
        }


# ---------------------------------------------------------------------------
# Object and hand patterns
# ---------------------------------------------------------------------------


def parse_object_pattern(text: str) -> ObjectPattern:
    """
    Parse an object pattern and run the average test.

    Values are 0-9 and a-z, `[...]` groups a multiplex throw, and each value
    may carry a bounce suffix B, BF, BL, BH, BHF or BHL. Whitespace separates.
    """
    which = "object"
    beats: list[list[ObjectThrow]] = []
    in_multiplex = False
    multiplex_start = 0
    bounce: str | None = None  # bounce text of the latest throw, while still extendable

    for pos, ch in enumerate(text, start=1):
        if ch in _VALUE_CHARS:
            throw = ObjectThrow(int(ch, 36))
            if in_multiplex:
                beats[-1].append(throw)
            else:
                beats.append([throw])
            bounce = ""
        elif ch.isspace():
            bounce = None
        elif ch == "[" and not in_multiplex:
            in_multiplex = True
            multiplex_start = pos
            beats.append([])
            bounce = None
        elif ch == "]" and in_multiplex:
            if not beats[-1]:
                raise HSSError(ErrorMessages.HSS_SYNTAX.format(which=which), pos)
            in_multiplex = False
            bounce = None
        elif bounce is not None and _extends_bounce(bounce, ch):
            bounce += ch
            last = beats[-1][-1]
            beats[-1][-1] = ObjectThrow(last.value, bounce)
            if bounce not in _BOUNCE_NEXT:
                bounce = None
        else:
            raise HSSError(ErrorMessages.HSS_SYNTAX.format(which=which), pos)

    if in_multiplex:
        raise HSSError(ErrorMessages.HSS_UNTERMINATED_MULTIPLEX, multiplex_start)
    if not beats:
        raise HSSError(ErrorMessages.HSS_EMPTY.format(which=which))

    total = sum(t.value for beat in beats for t in beat)
    if total % len(beats) != 0:
        raise HSSError(ErrorMessages.HSS_BAD_AVERAGE.format(what="objects", which=which))
    return ObjectPattern(tuple(tuple(beat) for beat in beats))


def _extends_bounce(bounce: str, ch: str) -> bool:
    if bounce == "":
        return ch == "B"
    return ch in _BOUNCE_NEXT.get(bounce, "")


def parse_hand_pattern(text: str) -> HandPattern:
    """Parse a hand pattern (single values only) and run the average test."""
    which = "hand"
    values: list[int] = []
    for pos, ch in enumerate(text, start=1):
        if ch in _VALUE_CHARS:
            values.append(int(ch, 36))
        elif not ch.isspace():
            raise HSSError(ErrorMessages.HSS_SYNTAX.format(which=which), pos)
    if not values:
        raise HSSError(ErrorMessages.HSS_EMPTY.format(which=which))
    if sum(values) % len(values) != 0:
        raise HSSError(ErrorMessages.HSS_BAD_AVERAGE.format(what="hands", which=which))
    return HandPattern(tuple(values))


def check_object_permutation(pattern: ObjectPattern) -> None:
    """Every beat must catch exactly as many props as it throws."""
    period = pattern.period
    landing = [0] * period
    for i, beat in enumerate(pattern.beats):
        for throw in beat:
            landing[(throw.value + i) % period] += 1
    for beat, (count, thrown) in enumerate(zip(landing, pattern.beats)):
        if count != len(thrown):
            raise HSSError(ErrorMessages.HSS_OBJECT_PERMUTATION.format(count=count, beat=beat + 1, expected=len(thrown)))


def hand_orbits(pattern: HandPattern) -> list[list[int]]:
    """
    Cycles of the hand permutation, as lists of beat numbers.

    Raises:
        HSSError: If two hand throws land on the same beat.
    """
    period = pattern.period
    target = [(value + i) % period for i, value in enumerate(pattern.values)]
    hits = [0] * period
    for t in target:
        hits[t] += 1
    for beat, count in enumerate(hits):
        if count != 1:
            raise HSSError(ErrorMessages.HSS_HAND_PERMUTATION.format(beat=beat + 1))

    orbits: list[list[int]] = []
    seen = [False] * period
    for start in range(period):
        if seen[start]:
            continue
        orbit = [start]
        seen[start] = True
        beat = target[start]
        while beat != start:
            orbit.append(beat)
            seen[beat] = True
            beat = target[beat]
        orbits.append(orbit)
    return orbits


def hand_orbit_period(pattern: HandPattern) -> int:
    """
    Beats for a hand to come back round its orbit.

    Every orbit that carries a hand must take the same number of beats.
    """
    sums = sorted({sum(pattern.values[b] for b in orbit) for orbit in hand_orbits(pattern)} - {0})
    if len(sums) > 1:
        raise HSSError(ErrorMessages.HSS_HAND_ORBITS.format(sums=", ".join(map(str, sums))))
    return lcm(*sums)


# ---------------------------------------------------------------------------
# Handspec
# ---------------------------------------------------------------------------


def parse_handspec(text: str, hands: int) -> HandSpecMap:
    """
    Parse a handspec like "(1,2)(3,4)" for `hands` hands.

    Group n belongs to juggler n; the number before the comma is that
    juggler's left hand and the number after it the right hand. Either may
    be omitted, but not both. Every hand 1..hands must appear exactly once.
    """
    owners: dict[int, HandAssignment] = {}
    juggler = 0
    pos = 0
    length = len(text)

    def skip_space(p: int) -> int:
        while p < length and text[p].isspace():
            p += 1
        return p

    def read_hand(p: int) -> tuple[int | None, int]:
        p = skip_space(p)
        start = p
        while p < length and text[p].isdigit():
            p += 1
        number = int(text[start:p]) if p > start else None
        return number, skip_space(p)

    def assign(hand: int | None, left: bool, at: int) -> None:
        if hand is None:
            return
        if not 1 <= hand <= hands:
            raise HSSError(ErrorMessages.HANDSPEC_OUT_OF_RANGE.format(hand=hand, hands=hands), at)
        if hand in owners:
            raise HSSError(ErrorMessages.HANDSPEC_DUPLICATE.format(hand=hand), at)
        owners[hand] = HandAssignment(juggler=juggler, left=left)

    while True:
        pos = skip_space(pos)
        if pos >= length:
            break
        if text[pos] != "(":
            raise HSSError(ErrorMessages.HANDSPEC_SYNTAX, pos + 1)
        juggler += 1
        group_start = pos + 1

        left_hand, pos = read_hand(pos + 1)
        if pos >= length:
            raise HSSError(ErrorMessages.HANDSPEC_UNTERMINATED, group_start)
        if text[pos] != ",":
            raise HSSError(ErrorMessages.HANDSPEC_SYNTAX, pos + 1)
        assign(left_hand, True, pos + 1)

        right_hand, pos = read_hand(pos + 1)
        if pos >= length:
            raise HSSError(ErrorMessages.HANDSPEC_UNTERMINATED, group_start)
        if text[pos] != ")":
            raise HSSError(ErrorMessages.HANDSPEC_SYNTAX, pos + 1)
        assign(right_hand, False, pos + 1)

        if left_hand is None and right_hand is None:
            raise HSSError(ErrorMessages.HANDSPEC_EMPTY_JUGGLER.format(juggler=juggler), group_start)
        pos += 1

    if juggler == 0:
        raise HSSError(ErrorMessages.HANDSPEC_SYNTAX)
    if juggler > hands:
        raise HSSError(ErrorMessages.HANDSPEC_TOO_MANY_JUGGLERS)
    for hand in range(1, hands + 1):
        if hand not in owners:
            raise HSSError(ErrorMessages.HANDSPEC_UNASSIGNED.format(hand=hand))
    return HandSpecMap(tuple(owners[h] for h in range(1, hands + 1)))


def default_handspec(hands: int) -> HandSpecMap:
    """Hands 1..ceil(N/2) are the right hands of jugglers 1, 2, ...; the rest their left hands."""
    jugglers = (hands + 1) // 2
    return HandSpecMap(
        tuple(
            HandAssignment(juggler=h + 1, left=False) if h < jugglers else HandAssignment(juggler=h + 1 - jugglers, left=True)
            for h in range(hands)
        )
    )


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class HSSConverter:
    """
    Convert object pattern + hand pattern (+ handspec) to siteswap.

    Args:
        hold: Turn throws that match the hand's own throw into holds (H).
        dwellmax: Let each hand dwell as long as it can before throwing again.
        dwell: Dwell (beats) to use when hands never throw on successive beats.
    """

    def __init__(self, hold: bool = False, dwellmax: bool = True, dwell: float = DWELL_DEFAULT) -> None:
        self.hold = hold
        self.dwellmax = dwellmax
        self.dwell = dwell

    def convert(self, pattern: str, hss: str, handspec: str | None = None) -> HSSResult:
        """
        Raises:
            HSSError: If any of the three inputs is invalid.
        """
        objects = parse_object_pattern(pattern)
        hand_pattern = parse_hand_pattern(hss)
        check_object_permutation(objects)
        orbit = hand_orbit_period(hand_pattern)

        hands = hand_pattern.hands
        handmap = parse_handspec(handspec, hands) if handspec is not None else default_handspec(hands)

        period = lcm(objects.period, orbit)
        beats = [objects.beats[i % objects.period] for i in range(period)]
        hand_values = [hand_pattern.values[i % hand_pattern.period] for i in range(period)]

        owners = self._beat_owners(beats, hand_values, handmap)
        dwell = self._dwell_beats(beats, owners)
        text = self._synthesize(beats, hand_values, owners, handmap.jugglers)

        logger.debug("HSS '%s' over '%s' -> %s", hss, pattern, text)
        return HSSResult(
            pattern=text,
            dwell_beats=tuple(dwell),
            period=period,
            jugglers=handmap.jugglers,
            hands=hands,
            hand_orbit_period=orbit,
            handmap=handmap,
        )

    @staticmethod
    def _beat_owners(
        beats: list[tuple[ObjectThrow, ...]],
        hand_values: list[int],
        handmap: HandSpecMap,
    ) -> list[HandAssignment | None]:
        """Which juggler/hand throws on each beat (None where the hand pattern has a 0)."""
        period = len(beats)
        hand_ids: list[int | None] = [None] * period
        owners: list[HandAssignment | None] = [None] * period
        next_hand = 0
        for i in range(period):
            if hand_values[i] == 0:
                if any(t.value != 0 for t in beats[i]):
                    raise HSSError(ErrorMessages.HSS_NO_HAND.format(beat=i + 1))
                continue
            if hand_ids[i] is None:
                next_hand += 1
                beat = i
                while True:
                    hand_ids[beat] = next_hand
                    beat = (beat + hand_values[beat]) % period
                    if beat == i:
                        break
            owners[i] = handmap[hand_ids[i]]  # type: ignore[index]
        return owners

    def _dwell_beats(self, beats: list[tuple[ObjectThrow, ...]], owners: list[HandAssignment | None]) -> list[float]:
        period = len(beats)

        # Smallest throw caught on each beat; dwell must end before it lands
        min_caught = [0] * period
        for i, beat in enumerate(beats):
            for throw in beat:
                if throw.value > 0:
                    target = (i + throw.value) % period
                    if min_caught[target] == 0 or throw.value < min_caught[target]:
                        min_caught[target] = throw.value

        if not self.dwellmax:
            successive = any(owners[i] == owners[(i + 1) % period] for i in range(period))
            dwell = [HSS_DWELL_DEFAULT if successive else self.dwell] * period
            for i in range(period):
                if min_caught[i] and dwell[i] >= min_caught[i]:
                    dwell[i] = min_caught[i] - HSS_DWELL_MARGIN
        else:
            dwell = [0.0] * period
            for i in range(period):
                gap = 1
                j = (i + 1) % period
                while owners[j] != owners[i]:
                    j = (j + 1) % period
                    gap += 1
                dwell[j] = gap - HSS_DWELL_MARGIN
            for i in range(period):
                if min_caught[i] and dwell[i] >= min_caught[i]:
                    dwell[i] = min_caught[i] - HSS_DWELL_MARGIN
                elif dwell[i] <= 0:
                    dwell[i] = HSS_DWELL_DEFAULT

        _separate_dwell_instants(dwell)
        return dwell

    def _synthesize(
        self,
        beats: list[tuple[ObjectThrow, ...]],
        hand_values: list[int],
        owners: list[HandAssignment | None],
        jugglers: int,
    ) -> str:
        period = len(beats)
        parts: list[str] = []
        for i, beat in enumerate(beats):
            owner = owners[i]
            throws = [self._throw_text(i, throw, hand_values[i], owners, period) for throw in beat]
            if len(throws) > 1:
                active = "[" + "/".join(throws) + "]"
            else:
                active = throws[0]

            sections = []
            for juggler in range(1, jugglers + 1):
                mine = owner is not None and owner.juggler == juggler
                if owner is not None and owner.left:
                    sections.append(f"({active if mine else '0'},0)!")
                else:
                    sections.append(f"(0,{active if mine else '0'})!")
            parts.append("<" + "|".join(sections) + ">")
        return "".join(parts)

    def _throw_text(
        self,
        beat: int,
        throw: ObjectThrow,
        hand_value: int,
        owners: list[HandAssignment | None],
        period: int,
    ) -> str:
        source = owners[beat]
        target = owners[(beat + throw.value) % period]
        source_left = source.left if source else None
        target_left = target.left if target else None

        crossing = (throw.value % 2 == 0) != (source_left == target_left)
        text = _value_text(throw.value) + ("x" if crossing else "")
        source_juggler = source.juggler if source else 0
        target_juggler = target.juggler if target else 0
        if source_juggler != target_juggler:
            text += f"p{target_juggler}"
        elif self.hold and throw.value == hand_value:
            text += "H"
        return text + (throw.bounce or "")


def _value_text(value: int) -> str:
    """Siteswap text for a throw value ('p' and 'x' are not usable as values)."""
    char = _VALUE_CHARS[value] if value < len(_VALUE_CHARS) else ""
    if char and char not in "px":
        return char
    return "{" + str(value) + "}"


def _separate_dwell_instants(dwell: list[float]) -> None:
    """Nudge dwell times so no two catches fall on the same instant modulo the period."""
    period = len(dwell)
    for _ in range(period):
        found = False
        for i in range(period):
            clashes = [
                (i + j) % period
                for j in range(1, period)
                if _same_instant(dwell[(i + j) % period] - dwell[i] - j, period)
            ]
            remaining = len(clashes)
            for k in sorted(clashes):
                dwell[k] += HSS_DWELL_DEFAULT / remaining
                remaining -= 1
            found = found or bool(clashes)
        if not found:
            return


def _same_instant(offset: float, period: int) -> bool:
    remainder = abs(math.fmod(offset, period))
    return math.isclose(remainder, 0.0, abs_tol=1e-9) or math.isclose(remainder, period, abs_tol=1e-9)
