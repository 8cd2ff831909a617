"""
Pattern configuration - the `key=value;key=value` layer.

A pattern is configured with a string like

    pattern=(4,2x)*;bps=5.0;hands=(10)(32.5).

or just the pattern itself ("531"). ParameterList does the splitting;
PatternConfig validates the keys the compiler understands and keeps the
rest (prop, title, colors, ...) for whoever else needs them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from chuk_mcp_siteswap.constants import (
    CONFIG_KEY_ORDER,
    DWELL_DEFAULT,
    DWELLMAX_DEFAULT,
    HOLD_DEFAULT,
    ErrorMessages,
)
from chuk_mcp_siteswap.errors import ConfigError


class ParameterList:
    """Ordered, case-insensitive `name=value` pairs; later assignments win."""

    def __init__(self, source: str | None = None) -> None:
        self._params: dict[str, tuple[str, str]] = {}
        if source:
            self.read(source)

    def read(self, source: str) -> None:
        """
        Raises:
            ConfigError: If a non-empty token has no `=`.
        """
        source = source.replace("\n", "").replace("\r", "")
        for token in source.split(";"):
            index = token.find("=")
            if index > 0:
                name = token[:index].strip()
                if name:
                    self.add(name, token[index + 1 :].strip())
            elif token.strip():
                raise ConfigError(ErrorMessages.CONFIG_NO_VALUE.format(token=token.strip()))

    def add(self, name: str, value: str) -> None:
        self._params[name.lower()] = (name, value)

    def get(self, name: str) -> str | None:
        entry = self._params.get(name.lower())
        return entry[1] if entry else None

    def remove(self, name: str) -> str | None:
        entry = self._params.pop(name.lower(), None)
        return entry[1] if entry else None

    def names(self) -> list[str]:
        return [name for name, _ in self._params.values()]

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._params

    def __str__(self) -> str:
        return ";".join(f"{name}={value}" for name, value in self._params.values())


class PatternConfig(BaseModel):
    """Validated compiler parameters."""

    pattern: str = Field(..., min_length=1, description="Siteswap (or HSS object) pattern")
    bps: float | None = Field(None, gt=0, description="Beats per second; derived from the throws when unset")
    dwell: float = Field(DWELL_DEFAULT, gt=0, lt=2, description="Dwell time in beats")
    hands: str | None = Field(None, description="Hand movement specification")
    body: str | None = Field(None, description="Body movement specification")
    hss: str | None = Field(None, description="Hand siteswap; `pattern` is then the object pattern")
    hold: bool = Field(HOLD_DEFAULT, description="HSS: hold props that match the hand throw")
    dwellmax: bool = Field(DWELLMAX_DEFAULT, description="HSS: maximize dwell times")
    handspec: str | None = Field(None, description="HSS: hand-to-juggler assignment")
    extras: dict[str, str] = Field(default_factory=dict, description="Parameters for other consumers")

    model_config = {"frozen": True}

    @field_validator("hold", "dwellmax", mode="before")
    @classmethod
    def validate_flag(cls, v: Any) -> Any:
        """Only the literals true/false are accepted."""
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered not in ("true", "false"):
                raise ValueError(f"expected 'true' or 'false', got '{v}'")
            return lowered == "true"
        return v

    @field_validator("hands", "body", "hss", "handspec", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_parameters(cls, params: ParameterList) -> PatternConfig:
        """
        Build from parsed parameters.

        Raises:
            ConfigError: If the pattern is missing or a value is invalid.
        """
        values: dict[str, Any] = {}
        extras: dict[str, str] = {}
        for name in params.names():
            value = params.get(name)
            if name.lower() in CONFIG_KEY_ORDER:
                values[name.lower()] = value
            else:
                extras[name] = value or ""
        if not values.get("pattern"):
            raise ConfigError(ErrorMessages.CONFIG_NO_PATTERN)
        try:
            return cls(**values, extras=extras)
        except ValidationError as e:
            error = e.errors()[0]
            key = str(error["loc"][0]) if error["loc"] else "?"
            raise ConfigError(ErrorMessages.CONFIG_BAD_VALUE.format(key=key, reason=error["msg"])) from e

    @classmethod
    def from_string(cls, text: str) -> PatternConfig:
        """Parse a configuration string; a string without `=` is the pattern itself."""
        if "=" not in text:
            text = f"pattern={text}"
        return cls.from_parameters(ParameterList(text))

    def to_config_string(self) -> str:
        """Configuration string with keys in canonical order, defaults left out."""
        params = ParameterList()
        params.add("pattern", self.pattern)
        if self.bps is not None:
            params.add("bps", _fmt(self.bps))
        if self.dwell != DWELL_DEFAULT:
            params.add("dwell", _fmt(self.dwell))
        for key in ("hands", "body", "hss"):
            value = getattr(self, key)
            if value is not None:
                params.add(key, value)
        if self.hss is not None:
            if self.hold != HOLD_DEFAULT:
                params.add("hold", str(self.hold).lower())
            if self.dwellmax != DWELLMAX_DEFAULT:
                params.add("dwellmax", str(self.dwellmax).lower())
            if self.handspec is not None:
                params.add("handspec", self.handspec)
        for name, value in self.extras.items():
            params.add(name, value)
        return str(params)


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
