"""
Tests for pattern configuration.

Tests cover:
- ParameterList splitting and lookup
- PatternConfig validation and defaults
- Canonical configuration strings
"""

import pytest

from chuk_mcp_siteswap.constants import DWELL_DEFAULT
from chuk_mcp_siteswap.errors import ConfigError
from chuk_mcp_siteswap.models import ParameterList, PatternConfig


class TestParameterList:
    """Tests for ParameterList."""

    def test_read(self) -> None:
        """Pairs are split on ; and =."""
        params = ParameterList("pattern=3;bps=4.5")
        assert params.get("pattern") == "3"
        assert params.get("bps") == "4.5"
        assert len(params) == 2

    def test_case_insensitive(self) -> None:
        """Names match case-insensitively; the original spelling is kept."""
        params = ParameterList("Pattern=3")
        assert params.get("pattern") == "3"
        assert "PATTERN" in params
        assert params.names() == ["Pattern"]

    def test_later_wins(self) -> None:
        """A repeated name keeps the last value."""
        params = ParameterList("pattern=3;pattern=531")
        assert params.get("pattern") == "531"
        assert len(params) == 1

    def test_values_with_equals_and_parens(self) -> None:
        """Only the first = splits; parentheses are kept."""
        params = ParameterList("handspec=(1,2)(3,4);title=a=b")
        assert params.get("handspec") == "(1,2)(3,4)"
        assert params.get("title") == "a=b"

    def test_blank_tokens_ignored(self) -> None:
        """Empty tokens and newlines are ignored."""
        params = ParameterList("pattern=3;;\nbps=2;")
        assert params.names() == ["pattern", "bps"]

    def test_missing_value(self) -> None:
        """A token without = is an error."""
        with pytest.raises(ConfigError, match="has no value"):
            ParameterList("pattern=3;oops")

    def test_remove(self) -> None:
        """Removing returns the value."""
        params = ParameterList("pattern=3;bps=2")
        assert params.remove("bps") == "2"
        assert params.get("bps") is None
        assert str(params) == "pattern=3"


class TestPatternConfig:
    """Tests for PatternConfig."""

    def test_bare_pattern(self) -> None:
        """A string without = is the pattern itself."""
        config = PatternConfig.from_string("531")
        assert config.pattern == "531"
        assert config.bps is None
        assert config.dwell == DWELL_DEFAULT
        assert not config.hold
        assert config.dwellmax

    def test_full(self) -> None:
        """Every compiler key is parsed."""
        config = PatternConfig.from_string(
            "pattern=3;bps=5;dwell=1.0;hss=2;hold=true;dwellmax=false;handspec=(2,1)"
        )
        assert config.bps == 5.0
        assert config.dwell == 1.0
        assert config.hss == "2"
        assert config.hold
        assert not config.dwellmax
        assert config.handspec == "(2,1)"

    def test_extras(self) -> None:
        """Unknown keys are kept for other consumers."""
        config = PatternConfig.from_string("pattern=3;prop=ball;title=Cascade")
        assert config.extras == {"prop": "ball", "title": "Cascade"}

    def test_blank_optional(self) -> None:
        """Blank optional values are treated as absent."""
        config = PatternConfig.from_string("pattern=3;hands=")
        assert config.hands is None

    def test_no_pattern(self) -> None:
        """pattern is required."""
        with pytest.raises(ConfigError, match="No pattern"):
            PatternConfig.from_string("bps=3")

    def test_bad_flag(self) -> None:
        """Flags accept only true/false."""
        with pytest.raises(ConfigError, match="hold"):
            PatternConfig.from_string("pattern=3;hold=maybe")

    def test_bad_bps(self) -> None:
        """bps must be positive."""
        with pytest.raises(ConfigError, match="bps"):
            PatternConfig.from_string("pattern=3;bps=-1")

    def test_bad_dwell(self) -> None:
        """dwell must be strictly between 0 and 2."""
        with pytest.raises(ConfigError, match="dwell"):
            PatternConfig.from_string("pattern=3;dwell=2.5")

    def test_frozen(self) -> None:
        """Configurations are immutable."""
        config = PatternConfig.from_string("3")
        with pytest.raises(Exception):
            config.pattern = "531"  # type: ignore[misc]


class TestConfigString:
    """Tests for canonical configuration strings."""

    def test_defaults_left_out(self) -> None:
        """Only non-default values are written."""
        assert PatternConfig.from_string("pattern=3;dwell=1.3").to_config_string() == "pattern=3"

    def test_canonical_order(self) -> None:
        """Keys come out in canonical order, extras last."""
        config = PatternConfig.from_string("title=x;hands=(10)(20).;bps=4;pattern=3")
        assert config.to_config_string() == "pattern=3;bps=4;hands=(10)(20).;title=x"

    def test_hss_keys(self) -> None:
        """HSS options are written only with hss."""
        config = PatternConfig.from_string("pattern=3;hss=2;hold=true;handspec=(2,1)")
        assert config.to_config_string() == "pattern=3;hss=2;hold=true;handspec=(2,1)"

    def test_round_trip(self) -> None:
        """A canonical string parses back to the same configuration."""
        config = PatternConfig.from_string("pattern=(4,2x)*;bps=5.5;dwell=1;prop=ring")
        assert PatternConfig.from_string(config.to_config_string()) == config
