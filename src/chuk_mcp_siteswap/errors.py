"""
Exception hierarchy for the siteswap compiler.

Two tiers:
- PatternUserError: the input is wrong. Carries a message and, where known,
  the 1-based character position of the offending input.
- CompilerInternalError: the compiler hit a defect or an unsupported feature.
"""

from __future__ import annotations

from chuk_mcp_siteswap.constants import ErrorKind


class JugglingError(Exception):
    """Base class for all compiler errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": str(self)}


class PatternUserError(JugglingError, ValueError):
    """Invalid user input."""

    kind = ErrorKind.USER

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["position"] = self.position
        return data


class SiteswapSyntaxError(PatternUserError):
    """Pattern text does not match the siteswap grammar."""


class HSSError(PatternUserError):
    """Invalid object pattern, hand pattern or handspec in a hand siteswap."""


class PathSpecError(PatternUserError):
    """Invalid hands or body movement specification."""


class ConfigError(PatternUserError):
    """Invalid configuration string or parameter value."""


class CompilerInternalError(JugglingError, RuntimeError):
    """Compiler defect or unimplemented feature."""

    kind = ErrorKind.INTERNAL
