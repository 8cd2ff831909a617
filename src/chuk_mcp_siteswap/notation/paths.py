"""
Hand and body movement specifications.

Both mini-languages describe, per juggler, a periodic sequence of beats:

    hands: "(10)(32.5).(-10)(-32.5)."     # two beats, two hand positions each
    body:  "<(0,-50).(90,50)|(180,50)>"   # two jugglers, facing angle + position

Jugglers are separated by `|` or `!`, beats by `.`, and `(stuff)^N`
repeats. `<>{}` are decoration and ignored.

Hands beats are lists of positions `(x[,z[,y]])` running from the throw
(always the first position) to the catch (the last position, or the one
after a `C` marker). `-` is a position to interpolate. A leading `T` marks
the throw explicitly.

Body beats are lists of `(angle[,x[,y[,z]]])`, z defaulting to 100 cm; an
empty beat means one interpolated position.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from chuk_mcp_siteswap.constants import BODY_DEFAULT_Z, ErrorMessages
from chuk_mcp_siteswap.core.text import expand_repeats, split_outside_parens
from chuk_mcp_siteswap.errors import PathSpecError

_DECORATION = re.compile(r"[<>{}]")
_JUGGLER_SEPARATOR = re.compile(r"[|!]")


@dataclass(frozen=True)
class Coordinate:
    x: float
    y: float
    z: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class BodyPosition:
    angle: float
    x: float
    y: float
    z: float = BODY_DEFAULT_Z

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.x, self.y, self.z)

    def to_dict(self) -> dict:
        return {"angle": self.angle, "x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class HandBeat:
    """Hand positions for one beat; None entries are interpolated."""

    coordinates: tuple[Coordinate | None, ...]
    catch_index: int
    throw_index: int = 0

    def to_dict(self) -> dict:
        return {
            "coordinates": [c.to_dict() if c else None for c in self.coordinates],
            "throw_index": self.throw_index,
            "catch_index": self.catch_index,
        }


@dataclass(frozen=True)
class BodyBeat:
    positions: tuple[BodyPosition | None, ...]

    def to_dict(self) -> dict:
        return {"positions": [p.to_dict() if p else None for p in self.positions]}


def _sections(text: str, which: str) -> list[list[str]]:
    """Split a specification into jugglers, then beats."""
    clean = _DECORATION.sub("", expand_repeats(text))
    sections = []
    for part in _JUGGLER_SEPARATOR.split(clean):
        # every '.' ends a beat, so ".." holds an empty beat
        beats = split_outside_parens(part, ".", keep_empty=True)
        if not beats[-1].strip():
            beats.pop()
        sections.append(beats)
    if any(not beats for beats in sections):
        raise PathSpecError(ErrorMessages.PATH_EMPTY.format(which=which))
    return sections


def _numbers(beat: str, pos: int, which: str, limit: int) -> tuple[list[float], int]:
    """Parse the `(a,b,...)` group opening at `pos`; return values and the position after it."""
    close = beat.find(")", pos + 1)
    if close < 0:
        raise PathSpecError(ErrorMessages.PATH_UNTERMINATED.format(which=which))
    values = []
    for part in beat[pos + 1 : close].split(","):
        try:
            value = float(part.strip())
        except ValueError:
            raise PathSpecError(ErrorMessages.PATH_BAD_NUMBER.format(text=part.strip(), which=which)) from None
        if not math.isfinite(value):
            raise PathSpecError(ErrorMessages.PATH_BAD_NUMBER.format(text=part.strip(), which=which))
        values.append(value)
    if len(values) > limit:
        raise PathSpecError(ErrorMessages.PATH_TOO_MANY_COMPONENTS.format(which=which))
    return values, close + 1


class _PeriodicSpec:
    """Shared juggler/beat lookup; juggler numbers wrap around the sections."""

    jugglers: tuple[tuple, ...]

    @property
    def number_of_jugglers(self) -> int:
        return len(self.jugglers)

    def _juggler(self, juggler: int) -> tuple:
        return self.jugglers[(juggler - 1) % len(self.jugglers)]

    def period(self, juggler: int) -> int:
        return len(self._juggler(juggler))


@dataclass(frozen=True)
class HandPathSpec(_PeriodicSpec):
    """Parsed `hands` specification."""

    jugglers: tuple[tuple[HandBeat, ...], ...]

    @classmethod
    def parse(cls, text: str) -> HandPathSpec:
        """
        Raises:
            PathSpecError: On any malformed beat.
        """
        return cls(tuple(tuple(_parse_hand_beat(b) for b in beats) for beats in _sections(text, "hands")))

    def beat(self, juggler: int, pos: int) -> HandBeat:
        return self._juggler(juggler)[pos]

    def number_of_coordinates(self, juggler: int, pos: int) -> int:
        return len(self.beat(juggler, pos).coordinates)

    def catch_index(self, juggler: int, pos: int) -> int:
        return self.beat(juggler, pos).catch_index

    def coordinate(self, juggler: int, pos: int, index: int) -> Coordinate | None:
        """Hand position, or None when it is to be interpolated or out of range."""
        if pos >= self.period(juggler) or index >= self.number_of_coordinates(juggler, pos):
            return None
        return self.beat(juggler, pos).coordinates[index]

    def to_string(self) -> str:
        """Canonical hands text for this specification."""
        sections = []
        for beats in self.jugglers:
            parts = []
            for beat in beats:
                tokens = []
                last = len(beat.coordinates) - 1
                for index, coord in enumerate(beat.coordinates):
                    if index == beat.catch_index and index != last:
                        tokens.append("C")
                    tokens.append("-" if coord is None else f"({_fmt(coord.x)},{_fmt(coord.z)},{_fmt(coord.y)})")
                parts.append("".join(tokens) + ".")
            sections.append("".join(parts))
        return "|".join(sections)

    def to_dict(self) -> dict:
        return {
            "jugglers": [[beat.to_dict() for beat in beats] for beats in self.jugglers],
            "periods": [len(beats) for beats in self.jugglers],
        }


def _parse_hand_beat(beat: str) -> HandBeat:
    which = "hands"
    coords: list[Coordinate | None] = []
    catch_index: int | None = None
    got_throw = False
    pos = 0
    while pos < len(beat):
        ch = beat[pos]
        if ch.isspace():
            pos += 1
        elif ch == "-":
            coords.append(None)
            pos += 1
        elif ch in "Tt":
            if coords:
                raise PathSpecError(ErrorMessages.PATH_THROW_NOT_FIRST)
            if got_throw:
                raise PathSpecError(ErrorMessages.PATH_DUPLICATE_THROW)
            got_throw = True
            pos += 1
        elif ch in "Cc":
            if not coords:
                raise PathSpecError(ErrorMessages.PATH_CATCH_FIRST)
            if catch_index is not None:
                raise PathSpecError(ErrorMessages.PATH_DUPLICATE_CATCH)
            catch_index = len(coords)
            pos += 1
        elif ch == "(":
            values, pos = _numbers(beat, pos, which, 3)
            values += [0.0] * (3 - len(values))
            # written (x, z, y)
            coords.append(Coordinate(x=values[0], y=values[2], z=values[1]))
        else:
            raise PathSpecError(ErrorMessages.PATH_BAD_CHARACTER.format(char=ch, which=which))

    if len(coords) < 2:
        raise PathSpecError(ErrorMessages.PATH_TOO_FEW)
    if coords[0] is None:
        raise PathSpecError(ErrorMessages.PATH_NO_THROW)
    if catch_index is None:
        catch_index = len(coords) - 1
    if catch_index >= len(coords) or coords[catch_index] is None:
        raise PathSpecError(ErrorMessages.PATH_NO_CATCH)
    return HandBeat(coordinates=tuple(coords), catch_index=catch_index)


@dataclass(frozen=True)
class BodyPathSpec(_PeriodicSpec):
    """Parsed `body` specification."""

    jugglers: tuple[tuple[BodyBeat, ...], ...]

    @classmethod
    def parse(cls, text: str) -> BodyPathSpec:
        return cls(tuple(tuple(_parse_body_beat(b) for b in beats) for beats in _sections(text, "body")))

    def beat(self, juggler: int, pos: int) -> BodyBeat:
        return self._juggler(juggler)[pos]

    def number_of_positions(self, juggler: int, pos: int) -> int:
        return len(self.beat(juggler, pos).positions)

    def position(self, juggler: int, pos: int, index: int) -> BodyPosition | None:
        if pos >= self.period(juggler) or index >= self.number_of_positions(juggler, pos):
            return None
        return self.beat(juggler, pos).positions[index]

    def to_dict(self) -> dict:
        return {
            "jugglers": [[beat.to_dict() for beat in beats] for beats in self.jugglers],
            "periods": [len(beats) for beats in self.jugglers],
        }


def _parse_body_beat(beat: str) -> BodyBeat:
    which = "body"
    positions: list[BodyPosition | None] = []
    pos = 0
    while pos < len(beat):
        ch = beat[pos]
        if ch.isspace():
            pos += 1
        elif ch == "-":
            positions.append(None)
            pos += 1
        elif ch == "(":
            values, pos = _numbers(beat, pos, which, 4)
            defaults = [0.0, 0.0, 0.0, BODY_DEFAULT_Z]
            values += defaults[len(values) :]
            positions.append(BodyPosition(*values))
        else:
            raise PathSpecError(ErrorMessages.PATH_BAD_CHARACTER.format(char=ch, which=which))
    return BodyBeat(tuple(positions) if positions else (None,))


def _fmt(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)
