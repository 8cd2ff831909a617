"""
Tests for hand siteswap conversion.

Tests cover:
- Object and hand pattern parsing and their permutation tests
- Hand orbits and the orbit period
- Handspec parsing and validation
- Synthesized siteswap text and dwell times
"""

import pytest

from chuk_mcp_siteswap.errors import HSSError
from chuk_mcp_siteswap.notation import HSSConverter, default_handspec, parse_handspec
from chuk_mcp_siteswap.notation.hss import (
    check_object_permutation,
    hand_orbit_period,
    hand_orbits,
    parse_hand_pattern,
    parse_object_pattern,
)


class TestObjectPattern:
    """Tests for object pattern parsing."""

    def test_vanilla(self) -> None:
        """One throw per beat."""
        pattern = parse_object_pattern("531")
        assert pattern.period == 3
        assert pattern.objects == 3

    def test_multiplex(self) -> None:
        """Brackets group several throws on one beat."""
        pattern = parse_object_pattern("[43]1")
        assert pattern.period == 2
        assert [t.value for t in pattern.beats[0]] == [4, 3]
        assert pattern.objects == 4

    def test_letters(self) -> None:
        """Letters are base-36 values."""
        pattern = parse_object_pattern("b1")
        assert pattern.beats[0][0].value == 11

    def test_bounce(self) -> None:
        """Bounce suffixes attach to the preceding throw."""
        pattern = parse_object_pattern("5BHL 5B")
        assert pattern.beats[0][0].bounce == "BHL"
        assert pattern.beats[1][0].bounce == "B"

    def test_bad_character(self) -> None:
        """Unknown characters are reported with their position."""
        with pytest.raises(HSSError) as exc_info:
            parse_object_pattern("3$")
        assert exc_info.value.position == 2

    def test_unterminated_multiplex(self) -> None:
        """An unclosed bracket points at the bracket."""
        with pytest.raises(HSSError, match="Unterminated multiplex") as exc_info:
            parse_object_pattern("3[45")
        assert exc_info.value.position == 2

    def test_empty_multiplex(self) -> None:
        """Brackets must hold a throw."""
        with pytest.raises(HSSError, match="Syntax error"):
            parse_object_pattern("[]")

    def test_empty(self) -> None:
        """An empty object pattern is rejected."""
        with pytest.raises(HSSError, match="Empty object pattern"):
            parse_object_pattern("  ")

    def test_bad_average(self) -> None:
        """Throw sum must divide by the period."""
        with pytest.raises(HSSError, match="Bad average"):
            parse_object_pattern("43")


class TestObjectPermutation:
    """Tests for the object permutation test."""

    def test_valid(self) -> None:
        """Valid siteswaps pass."""
        check_object_permutation(parse_object_pattern("531"))
        check_object_permutation(parse_object_pattern("[43]1"))
        check_object_permutation(parse_object_pattern("35"))

    def test_collision(self) -> None:
        """Throws landing together on a single-throw beat fail."""
        with pytest.raises(HSSError, match="not a valid siteswap"):
            check_object_permutation(parse_object_pattern("321"))


class TestHandPattern:
    """Tests for hand patterns and orbits."""

    def test_hands(self) -> None:
        """The average of the hand pattern is the number of hands."""
        assert parse_hand_pattern("2").hands == 2
        assert parse_hand_pattern("312").hands == 2

    def test_orbits(self) -> None:
        """Orbits are the cycles of the hand permutation."""
        assert hand_orbits(parse_hand_pattern("312")) == [[0], [1, 2]]

    def test_orbit_period(self) -> None:
        """The orbit period is the throw sum around any orbit."""
        assert hand_orbit_period(parse_hand_pattern("2")) == 2
        assert hand_orbit_period(parse_hand_pattern("312")) == 3
        assert hand_orbit_period(parse_hand_pattern("1")) == 1

    def test_hand_collision(self) -> None:
        """Two hands may not arrive on the same beat."""
        with pytest.raises(HSSError, match="collision"):
            hand_orbits(parse_hand_pattern("321"))

    def test_unequal_orbits(self) -> None:
        """Orbits with different throw sums are rejected."""
        with pytest.raises(HSSError, match="unequal"):
            hand_orbit_period(parse_hand_pattern("42"))

    def test_multiplex_not_allowed(self) -> None:
        """Hand patterns take single values only."""
        with pytest.raises(HSSError, match="Syntax error in hand pattern"):
            parse_hand_pattern("[22]")


class TestHandspec:
    """Tests for handspec parsing."""

    def test_two_jugglers(self) -> None:
        """Group n belongs to juggler n, left hand first."""
        handmap = parse_handspec("(1,2)(3,4)", 4)
        assert handmap.jugglers == 2
        assert handmap[1].juggler == 1 and handmap[1].left
        assert handmap[2].juggler == 1 and not handmap[2].left
        assert handmap[4].juggler == 2 and handmap[4].side == "right"

    def test_one_hand_each(self) -> None:
        """A juggler may have only one hand."""
        handmap = parse_handspec("(,1)(2,)", 2)
        assert handmap[1].juggler == 1 and not handmap[1].left
        assert handmap[2].juggler == 2 and handmap[2].left

    def test_whitespace(self) -> None:
        """Whitespace is allowed between tokens."""
        handmap = parse_handspec(" ( 2 , 1 ) ", 2)
        assert handmap[2].left

    def test_unassigned(self) -> None:
        """Every hand must be assigned."""
        with pytest.raises(HSSError, match="not assigned"):
            parse_handspec("(1,2)", 3)

    def test_duplicate(self) -> None:
        """No hand may be assigned twice."""
        with pytest.raises(HSSError, match="more than once"):
            parse_handspec("(1,1)", 2)

    def test_out_of_range(self) -> None:
        """Hand numbers must exist."""
        with pytest.raises(HSSError, match="out of range"):
            parse_handspec("(1,5)", 2)

    def test_empty_juggler(self) -> None:
        """Every juggler needs at least one hand."""
        with pytest.raises(HSSError, match="at least one hand"):
            parse_handspec("(,)(1,2)", 2)

    def test_unterminated(self) -> None:
        """Groups must be closed."""
        with pytest.raises(HSSError, match="Unterminated"):
            parse_handspec("(1,2", 2)

    def test_syntax(self) -> None:
        """Anything outside a group is a syntax error."""
        with pytest.raises(HSSError) as exc_info:
            parse_handspec("x", 2)
        assert exc_info.value.position == 1

    def test_default(self) -> None:
        """Default: first half are right hands, second half left hands."""
        handmap = default_handspec(4)
        assert [(a.juggler, a.side) for a in handmap.assignments] == [
            (1, "right"),
            (2, "right"),
            (1, "left"),
            (2, "left"),
        ]


class TestConverter:
    """Tests for HSSConverter."""

    def test_cascade_two_hands(self) -> None:
        """3 over 2 with hands swapped is the 3 cascade in sync form."""
        result = HSSConverter().convert("3", "2", "(2,1)")
        assert result.pattern == "<(0,3)!><(3,0)!>"
        assert result.period == 2
        assert result.jugglers == 1
        assert result.hands == 2
        assert result.hand_orbit_period == 2

    def test_one_hand(self) -> None:
        """A single hand throws to itself."""
        result = HSSConverter().convert("3", "1")
        assert result.pattern == "<(0,3x)!>"
        assert result.period == 1
        assert result.dwell_beats == pytest.approx((0.3,))

    def test_dwellmax(self) -> None:
        """With dwellmax, hands dwell until just before their next throw."""
        result = HSSConverter().convert("3", "2", "(2,1)")
        assert result.dwell_beats == pytest.approx((1.3, 1.3))

    def test_fixed_dwell(self) -> None:
        """Without dwellmax the configured dwell is used."""
        result = HSSConverter(dwellmax=False, dwell=1.0).convert("3", "2", "(2,1)")
        assert result.dwell_beats == pytest.approx((1.0, 1.0))

    def test_dwell_kept_on_empty_beats(self) -> None:
        """Beats where nothing is caught keep their dwell."""
        result = HSSConverter().convert("330", "2")
        assert result.period == 6
        assert result.dwell_beats == pytest.approx((1.3,) * 6)

    def test_fixed_dwell_kept_on_empty_beats(self) -> None:
        """Without dwellmax, empty beats keep the configured dwell."""
        result = HSSConverter(dwellmax=False, dwell=1.0).convert("330", "2")
        assert result.dwell_beats[2] == pytest.approx(1.0)
        assert result.dwell_beats[5] == pytest.approx(1.0)

    def test_hold(self) -> None:
        """hold turns throws matching the hand throw into holds."""
        result = HSSConverter(hold=True).convert("2", "2")
        assert "2H" in result.pattern

    def test_passing(self) -> None:
        """Hands of different jugglers produce passes."""
        result = HSSConverter().convert("3", "2", "(1,)(2,)")
        assert result.jugglers == 2
        assert result.pattern == "<(3xp2,0)!|(0,0)!><(0,0)!|(3xp1,0)!>"

    def test_no_hand_available(self) -> None:
        """Objects can't be thrown on a beat without a hand."""
        with pytest.raises(HSSError, match="no hand"):
            HSSConverter().convert("3", "40")

    def test_invalid_object_pattern(self) -> None:
        """The object permutation test runs before conversion."""
        with pytest.raises(HSSError, match="not a valid siteswap"):
            HSSConverter().convert("321", "1")

    def test_to_dict(self) -> None:
        """Result serializes with its handmap."""
        data = HSSConverter().convert("3", "2", "(2,1)").to_dict()
        assert data["handmap"]["1"] == {"juggler": 1, "side": "right"}
        assert data["handmap"]["2"] == {"juggler": 1, "side": "left"}
