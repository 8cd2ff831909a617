"""
Tests for the siteswap parser.

Tests cover:
- Solo async, sync, multiplex and switch-repeated patterns
- Passing patterns and pass targets
- Throw values (digits, letters, braces) and modifiers
- Grouped repeats, hand specifiers, wildcards
- Syntax and consistency errors
"""

import pytest

from chuk_mcp_siteswap.errors import SiteswapSyntaxError
from chuk_mcp_siteswap.notation import parse_pattern
from chuk_mcp_siteswap.notation.tree import (
    GroupedPattern,
    HandSpec,
    PassingMultiThrow,
    PassingSequence,
    SoloMultiThrow,
    SoloPairedThrow,
    SoloSequence,
    Wildcard,
)


def _first_throw(text: str):
    sequence = parse_pattern(text).elements[0]
    return sequence.items[0].throws[0]


class TestSoloPatterns:
    """Tests for solo patterns."""

    def test_vanilla(self) -> None:
        """Async throws form one solo sequence."""
        pattern = parse_pattern("531")
        assert pattern.jugglers == 1
        assert len(pattern.elements) == 1
        sequence = pattern.elements[0]
        assert isinstance(sequence, SoloSequence)
        assert [item.throws[0].value for item in sequence.items] == [5, 3, 1]
        assert sequence.beats == 3

    def test_beat_offsets(self) -> None:
        """Each item records its beat inside the sequence."""
        sequence = parse_pattern("531").elements[0]
        assert [item.seq_beat for item in sequence.items] == [0, 1, 2]

    def test_sync_pair(self) -> None:
        """A synchronous pair takes two beats."""
        pattern = parse_pattern("(4,2x)*")
        assert pattern.switch_repeat
        sequence = pattern.elements[0]
        pair = sequence.items[0]
        assert isinstance(pair, SoloPairedThrow)
        assert pair.left.throws[0].value == 4
        assert pair.right.throws[0].crossing
        assert sequence.beats == 2

    def test_sync_pair_one_beat(self) -> None:
        """`!` makes a synchronous pair take one beat."""
        sequence = parse_pattern("(4,3x)!(2,0)!(3x,0)!").elements[0]
        assert sequence.beats == 3
        assert [item.seq_beat for item in sequence.items] == [0, 1, 2]

    def test_multiplex(self) -> None:
        """Square brackets group a multiplex throw."""
        multi = parse_pattern("[34]").elements[0].items[0]
        assert isinstance(multi, SoloMultiThrow)
        assert [t.value for t in multi.throws] == [3, 4]

    def test_multiplex_with_slashes(self) -> None:
        """Slashes between multiplex members are allowed."""
        multi = parse_pattern("[3/4]").elements[0].items[0]
        assert [t.value for t in multi.throws] == [3, 4]


class TestThrowValues:
    """Tests for throw values and modifiers."""

    def test_letter_value(self) -> None:
        """Letters are base-36 values."""
        assert _first_throw("a").value == 10
        assert _first_throw("z").value == 35

    def test_brace_value(self) -> None:
        """Braces hold multi-digit values."""
        assert _first_throw("{12}").value == 12
        assert _first_throw("{ 49 }").value == 49

    def test_modifiers(self) -> None:
        """Modifier letters follow the value and optional x."""
        assert _first_throw("3BHL").modifier == "BHL"
        assert _first_throw("3xH").modifier == "H"
        assert _first_throw("3xH").crossing
        assert _first_throw("3").modifier is None

    def test_repeated_modifiers(self) -> None:
        """Consecutive modifiers are joined."""
        assert _first_throw("3BB").modifier == "BB"


class TestPassingPatterns:
    """Tests for passing patterns."""

    def test_two_jugglers(self) -> None:
        """Sections of a passing group belong to successive jugglers."""
        pattern = parse_pattern("<3p|3p><3|3>")
        assert pattern.jugglers == 2
        sequence = pattern.elements[0]
        assert isinstance(sequence, PassingSequence)
        assert len(sequence.groups) == 2
        assert sequence.beats == 2

    def test_default_pass_target(self) -> None:
        """A bare `p` passes to the next juggler."""
        group = parse_pattern("<3p|3p>").elements[0].groups[0]
        first = group.sections[0].items[0]
        second = group.sections[1].items[0]
        assert isinstance(first, PassingMultiThrow)
        assert first.throws[0].dest_juggler == 2
        # wraps to juggler 1 when the matrix is built
        assert second.throws[0].dest_juggler == 3

    def test_explicit_pass_target(self) -> None:
        """`pN` passes to juggler N."""
        group = parse_pattern("<3p2|3p1>").elements[0].groups[0]
        assert group.sections[0].items[0].throws[0].dest_juggler == 2
        assert group.sections[1].items[0].throws[0].dest_juggler == 1

    def test_self_throw(self) -> None:
        """A throw without `p` stays with its juggler."""
        group = parse_pattern("<3|3>").elements[0].groups[0]
        assert group.sections[1].items[0].throws[0].dest_juggler == 2

    def test_group_beat_offsets(self) -> None:
        """Later groups carry their offset in the passing sequence."""
        sequence = parse_pattern("<33|33><3|3>").elements[0]
        assert sequence.groups[1].seq_beat == 2
        assert sequence.groups[1].sections[0].items[0].seq_beat == 2


class TestStructure:
    """Tests for grouping, hand specifiers and wildcards."""

    def test_grouped_repeat(self) -> None:
        """`(pattern^N)` groups a repeated sub-pattern."""
        pattern = parse_pattern("(645^2)65x")
        grouped = pattern.elements[0]
        assert isinstance(grouped, GroupedPattern)
        assert grouped.repeats == 2
        assert isinstance(pattern.elements[1], SoloSequence)

    def test_nested_switch_repeat(self) -> None:
        """A switch-repeated pattern can be grouped."""
        grouped = parse_pattern("((6x,4)*^2)").elements[0]
        assert grouped.pattern.switch_repeat

    def test_hand_specifiers(self) -> None:
        """R and L force the hand of the next throw."""
        items = parse_pattern("R3L3").elements[0].items
        assert isinstance(items[0], HandSpec)
        assert not items[0].left
        assert items[2].left
        # hand specifiers take no beats
        assert items[2].seq_beat == 1

    def test_wildcards_merge(self) -> None:
        """Consecutive wildcards become one element."""
        pattern = parse_pattern("3??3")
        assert len(pattern.elements) == 3
        wildcard = pattern.elements[1]
        assert isinstance(wildcard, Wildcard)
        assert wildcard.beats == 2

    def test_whitespace_ignored(self) -> None:
        """Whitespace between tokens is ignored."""
        sequence = parse_pattern("5 3 1").elements[0]
        assert sequence.beats == 3


class TestParseErrors:
    """Tests for syntax and consistency errors."""

    def test_unexpected_character(self) -> None:
        """Unknown characters are reported with their position."""
        with pytest.raises(SiteswapSyntaxError) as exc_info:
            parse_pattern("3$")
        assert exc_info.value.position == 2

    def test_unbalanced(self) -> None:
        """Unterminated constructs are syntax errors."""
        with pytest.raises(SiteswapSyntaxError):
            parse_pattern("(4,2")

    def test_empty(self) -> None:
        """An empty pattern is a syntax error."""
        with pytest.raises(SiteswapSyntaxError):
            parse_pattern("")

    def test_inconsistent_jugglers(self) -> None:
        """Every passing group needs the same number of jugglers."""
        with pytest.raises(SiteswapSyntaxError, match="Inconsistent number of jugglers"):
            parse_pattern("<3|3><3|3|3>")

    def test_solo_mixed_with_passing(self) -> None:
        """Solo throws imply one juggler."""
        with pytest.raises(SiteswapSyntaxError, match="Inconsistent number of jugglers"):
            parse_pattern("3<3|3>")

    def test_inconsistent_beats(self) -> None:
        """Sections of a passing group must span the same beats."""
        with pytest.raises(SiteswapSyntaxError, match="Inconsistent number of beats"):
            parse_pattern("<33|3>")

    def test_bad_pass_target(self) -> None:
        """Pass targets count from 1."""
        with pytest.raises(SiteswapSyntaxError, match="Pass target"):
            parse_pattern("<3p0|3>")

    def test_bad_repeat_count(self) -> None:
        """Repeat counts must be positive."""
        with pytest.raises(SiteswapSyntaxError, match="Repeat count"):
            parse_pattern("(3^0)")

    def test_error_is_value_error(self) -> None:
        """Syntax errors are ValueErrors for callers that only know the stdlib."""
        with pytest.raises(ValueError):
            parse_pattern("3)")
