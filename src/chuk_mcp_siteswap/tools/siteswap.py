"""
Siteswap tools - MCP tools for compiling and inspecting juggling patterns.

Tools for compiling patterns, converting hand siteswaps and parsing hand
and body movement specifications.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_siteswap.compiler import SiteswapCompiler
from chuk_mcp_siteswap.constants import DWELL_DEFAULT, SuccessMessages
from chuk_mcp_siteswap.errors import JugglingError, PatternUserError
from chuk_mcp_siteswap.notation.hss import HSSConverter
from chuk_mcp_siteswap.notation.paths import BodyPathSpec, HandPathSpec

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _error(e: Exception) -> str:
    """JSON error payload; compiler errors carry their kind and position."""
    if isinstance(e, JugglingError):
        return json.dumps({"status": "error", **e.to_dict()})
    return json.dumps({"status": "error", "message": str(e)})


def register_siteswap_tools(
    mcp: ChukMCPServer,
    compiler: SiteswapCompiler | None = None,
) -> dict[str, Any]:
    """
    Register siteswap tools with the MCP server.

    Args:
        mcp: The MCP server instance
        compiler: Compiler to use (a new one when omitted)

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    compiler = compiler or SiteswapCompiler()

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_compile(config: str, include_throws: bool = True) -> str:
        """
        Compile a juggling pattern.

        Accepts a bare siteswap ("531", "(4,2x)*", "<3p|3p><3|3>") or a
        configuration string with `key=value` pairs separated by `;`.

        Args:
            config: Pattern or configuration string (e.g., "pattern=3;hss=2;handspec=(2,1)")
            include_throws: Include every throw of the compiled matrix

        Returns:
            JSON string with pattern summary, symmetries and throws

        Example:
            siteswap_compile(config="pattern=(4,2x)*;bps=5")
        """
        try:
            result = compiler.compile(config)
            data = result.to_dict()
            if not include_throws:
                data.pop("throws")

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.PATTERN_COMPILED.format(
                        pattern=result.pattern,
                        jugglers=result.jugglers,
                        paths=result.paths,
                        period=result.period,
                    ),
                    "summary": result.summary(),
                    "compiled": data,
                }
            )
        except Exception as e:
            logger.exception("Failed to compile pattern")
            return _error(e)

    tools["siteswap_compile"] = siteswap_compile

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_validate(config: str) -> str:
        """
        Check whether a pattern compiles.

        Invalid input is reported as `valid: false` with the reason and,
        where known, the character position. Only compiler defects are
        reported as errors.

        Args:
            config: Pattern or configuration string

        Returns:
            JSON string with validation result

        Example:
            siteswap_validate(config="35")
        """
        try:
            result = compiler.compile(config)
            return json.dumps(
                {
                    "status": "success",
                    "valid": True,
                    "message": SuccessMessages.PATTERN_VALID.format(pattern=result.pattern),
                    "jugglers": result.jugglers,
                    "paths": result.paths,
                    "period": result.period,
                }
            )
        except PatternUserError as e:
            return json.dumps({"status": "success", "valid": False, "error": e.to_dict()})
        except Exception as e:
            logger.exception("Failed to validate pattern")
            return _error(e)

    tools["siteswap_validate"] = siteswap_validate

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_convert_hss(
        pattern: str,
        hss: str,
        handspec: str | None = None,
        hold: bool = False,
        dwellmax: bool = True,
        dwell: float | None = None,
    ) -> str:
        """
        Convert a hand siteswap to ordinary siteswap.

        Args:
            pattern: Object pattern (e.g., "3", "[43]1", "5B")
            hss: Hand pattern (e.g., "2", "312")
            handspec: Hand-to-juggler assignment (e.g., "(1,2)(3,4)")
            hold: Turn throws matching the hand's own throw into holds
            dwellmax: Let each hand dwell as long as possible
            dwell: Dwell in beats when hands never throw on successive beats

        Returns:
            JSON string with the synthesized pattern and per-beat dwell

        Example:
            siteswap_convert_hss(pattern="3", hss="2", handspec="(2,1)")
        """
        try:
            converter = HSSConverter(
                hold=hold,
                dwellmax=dwellmax,
                dwell=dwell if dwell is not None else DWELL_DEFAULT,
            )
            result = converter.convert(pattern, hss, handspec)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.HSS_CONVERTED.format(hss=hss, pattern=pattern),
                    **result.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to convert hand siteswap")
            return _error(e)

    tools["siteswap_convert_hss"] = siteswap_convert_hss

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_parse_hands(hands: str) -> str:
        """
        Parse a hand movement specification.

        Args:
            hands: Hands specification (e.g., "(10)(32.5).(-10)(-32.5).")

        Returns:
            JSON string with per-juggler beats of hand positions

        Example:
            siteswap_parse_hands(hands="(10)(32.5).")
        """
        try:
            spec = HandPathSpec.parse(hands)
            return json.dumps(
                {
                    "status": "success",
                    "number_of_jugglers": spec.number_of_jugglers,
                    "canonical": spec.to_string(),
                    **spec.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to parse hands specification")
            return _error(e)

    tools["siteswap_parse_hands"] = siteswap_parse_hands

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_parse_body(body: str) -> str:
        """
        Parse a body movement specification.

        Args:
            body: Body specification (e.g., "<(0,-50).|(180,50).>")

        Returns:
            JSON string with per-juggler beats of body positions

        Example:
            siteswap_parse_body(body="(90).(270).")
        """
        try:
            spec = BodyPathSpec.parse(body)
            return json.dumps(
                {
                    "status": "success",
                    "number_of_jugglers": spec.number_of_jugglers,
                    **spec.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to parse body specification")
            return _error(e)

    tools["siteswap_parse_body"] = siteswap_parse_body

    @mcp.tool  # type: ignore[arg-type]
    async def siteswap_export_yaml(config: str) -> str:
        """
        Export a compiled pattern as YAML.

        Useful for inspection and golden-file comparisons.

        Args:
            config: Pattern or configuration string

        Returns:
            JSON string with YAML content

        Example:
            siteswap_export_yaml(config="531")
        """
        try:
            result = compiler.compile(config)
            return json.dumps(
                {
                    "status": "success",
                    "pattern": result.pattern,
                    "yaml": result.to_yaml(),
                }
            )
        except Exception as e:
            logger.exception("Failed to export pattern")
            return _error(e)

    tools["siteswap_export_yaml"] = siteswap_export_yaml

    return tools
