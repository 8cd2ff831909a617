"""
Tests for core helpers.

Tests cover:
- lcm
- Juggler permutations (cycle and explicit notation, reversal, validation)
- Repeat expansion and splitting outside parentheses
"""

import pytest

from chuk_mcp_siteswap.core import Permutation, expand_repeats, lcm, split_outside_parens
from chuk_mcp_siteswap.errors import PatternUserError


class TestLcm:
    """Tests for lcm."""

    def test_no_values(self) -> None:
        """lcm of nothing is 1."""
        assert lcm() == 1

    def test_values(self) -> None:
        """lcm of several values."""
        assert lcm(4, 6) == 12
        assert lcm(3, 5, 2) == 30
        assert lcm(7) == 7


class TestPermutation:
    """Tests for Permutation."""

    def test_identity(self) -> None:
        """Identity maps every element (and its reverse) to itself."""
        perm = Permutation.identity(3)
        assert perm.cycle(2) == [2]
        assert perm.cycle(-2) == [-2]
        assert perm.to_string() == "(1)(2)(3)"

    def test_swap_cycle(self) -> None:
        """A 2-cycle swaps jugglers and their reverses."""
        perm = Permutation.from_string(2, "(1,2)")
        assert perm.cycle(1) == [1, 2]
        assert perm.cycle(-1) == [-1, -2]
        assert perm.to_string() == "(1,2)"

    def test_reversed_element(self) -> None:
        """`2*` maps onto the mirrored juggler 2."""
        perm = Permutation.from_string(2, "(1,2*)")
        assert perm.cycle(1) == [1, -2]
        assert perm.cycle(2) == [2, -1]
        assert perm.to_string() == "(1,2*)"

    def test_hand_swap(self) -> None:
        """(1,1*) swaps a juggler's hands."""
        perm = Permutation.from_string(1, "(1,1*)")
        assert perm.cycle(1) == [1, -1]
        assert str(perm) == "(1,1*)"

    def test_explicit_mapping(self) -> None:
        """Comma-separated explicit mapping."""
        perm = Permutation.from_string(3, "2,3,1")
        assert perm.cycle(1) == [1, 2, 3]
        assert perm.to_string() == "(1,2,3)"

    def test_cycle(self) -> None:
        """Cycle of an element, starting from it."""
        perm = Permutation.from_string(4, "(1,3)(2,4)")
        assert perm.cycle(1) == [1, 3]
        assert perm.cycle(4) == [4, 2]

    def test_out_of_range(self) -> None:
        """Juggler numbers must be in range."""
        with pytest.raises(PatternUserError, match="out of range"):
            Permutation.from_string(2, "(1,3)")

    def test_not_one_to_one(self) -> None:
        """An element may appear only once."""
        with pytest.raises(PatternUserError, match="not one-to-one"):
            Permutation.from_string(2, "(1,1)")
        with pytest.raises(PatternUserError, match="not one-to-one"):
            Permutation.from_string(2, "2,2")

    def test_syntax(self) -> None:
        """Non-numeric elements are rejected."""
        with pytest.raises(PatternUserError, match="Syntax error"):
            Permutation.from_string(2, "(a,1)")
        with pytest.raises(PatternUserError, match="Syntax error"):
            Permutation.from_string(3, "1,2")


class TestExpandRepeats:
    """Tests for expand_repeats."""

    def test_simple(self) -> None:
        """A repeated group is copied N times without its parentheses."""
        assert expand_repeats("he(l)^2o") == "hello"

    def test_nested(self) -> None:
        """Repeats expand recursively."""
        assert expand_repeats("((ab)^2c)^2") == "ababcababc"

    def test_spaces_around_caret(self) -> None:
        """Whitespace around ^ is allowed."""
        assert expand_repeats("(x) ^ 3") == "xxx"

    def test_plain_parens_kept(self) -> None:
        """Parentheses not followed by ^N are copied through."""
        assert expand_repeats("(10)(32.5).") == "(10)(32.5)."

    def test_repeat_of_coordinates(self) -> None:
        """Coordinates inside a repeated group keep their parentheses."""
        assert expand_repeats("((10)(20).)^2") == "(10)(20).(10)(20)."


class TestSplitOutsideParens:
    """Tests for split_outside_parens."""

    def test_split(self) -> None:
        """Delimiters inside parentheses don't split."""
        assert split_outside_parens("a.(b.c).d", ".") == ["a", "(b.c)", "d"]

    def test_drops_blank_pieces(self) -> None:
        """A trailing delimiter leaves no extra piece."""
        assert split_outside_parens("(10)(32.5).", ".") == ["(10)(32.5)"]

    def test_keep_empty(self) -> None:
        """Blank pieces can be kept."""
        assert split_outside_parens("a..b", ".", keep_empty=True) == ["a", "", "b"]
