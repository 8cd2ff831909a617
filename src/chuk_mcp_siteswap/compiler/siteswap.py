"""
Siteswap Compiler - compiles a pattern configuration to a throw matrix.

This is the central compilation pipeline:
    config string -> PatternConfig -> (HSS synthesis) -> parse tree
    -> annotated tree -> ThrowMatrix -> resolved, frozen ThrowMatrix

The compiler:
1. Converts a hand siteswap to ordinary siteswap when `hss` is set
2. Parses the hands/body movement specifications
3. Parses the pattern and runs the three passes
4. Repeats the pattern when hand or body periods don't divide it
5. Derives symmetries and a default throwing rate

Every stage raises eagerly, so a CompiledPattern is only ever returned
whole.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chuk_mcp_siteswap.compiler.result import CompiledPattern
from chuk_mcp_siteswap.constants import BPS_BY_THROW_VALUE, BPS_DEFAULT, ErrorMessages
from chuk_mcp_siteswap.core.permutation import lcm
from chuk_mcp_siteswap.errors import ConfigError, PatternUserError
from chuk_mcp_siteswap.models.config import PatternConfig
from chuk_mcp_siteswap.notation.annotator import Annotation, TreeAnnotator
from chuk_mcp_siteswap.notation.hss import HSSConverter
from chuk_mcp_siteswap.notation.matrix import MatrixBuilder, ThrowMatrix
from chuk_mcp_siteswap.notation.parser import parse_pattern
from chuk_mcp_siteswap.notation.paths import BodyPathSpec, HandPathSpec
from chuk_mcp_siteswap.notation.resolver import ModifierResolver
from chuk_mcp_siteswap.notation.symmetry import pattern_symmetries

logger = logging.getLogger(__name__)


@dataclass
class _Passes:
    """Output of one parse + three-pass run."""

    annotation: Annotation
    matrix: ThrowMatrix


class SiteswapCompiler:
    """
    Compiles a pattern configuration to a CompiledPattern.

    The compiler holds no state between calls, so one instance can be
    shared freely.
    """

    def __init__(self) -> None:
        self.annotator = TreeAnnotator()
        self.builder = MatrixBuilder()
        self.resolver = ModifierResolver()

    def compile(self, config: PatternConfig | str) -> CompiledPattern:
        """
        Compile a pattern.

        Args:
            config: A PatternConfig, a `key=value;...` string or a bare pattern

        Returns:
            CompiledPattern with the frozen throw matrix and metadata

        Raises:
            PatternUserError: Any invalid input (syntax, average, HSS, specs).
            CompilerInternalError: An unsupported feature or compiler defect.
        """
        if isinstance(config, str):
            config = PatternConfig.from_string(config)

        pattern = config.pattern
        dwell_beats = None
        if config.hss is not None:
            converter = HSSConverter(hold=config.hold, dwellmax=config.dwellmax, dwell=config.dwell)
            converted = converter.convert(config.pattern, config.hss, config.handspec)
            pattern = converted.pattern
            dwell_beats = converted.dwell_beats

        hands = HandPathSpec.parse(config.hands) if config.hands is not None else None
        body = BodyPathSpec.parse(config.body) if config.body is not None else None

        passes = self._run_passes(pattern, hands)
        if hands is not None or body is not None:
            pattern, passes = self._align_periods(pattern, passes, hands, body)

        annotation = passes.annotation
        if body is not None and body.number_of_jugglers < annotation.jugglers:
            raise ConfigError(
                ErrorMessages.BODY_TOO_FEW_JUGGLERS.format(found=body.number_of_jugglers, needed=annotation.jugglers)
            )
        if annotation.number_of_paths == 0:
            raise PatternUserError(ErrorMessages.NO_OBJECTS)

        matrix = passes.matrix
        matrix.freeze()

        result = CompiledPattern(
            config=config,
            pattern=pattern,
            jugglers=annotation.jugglers,
            paths=annotation.number_of_paths,
            period=annotation.period,
            max_occupancy=annotation.max_occupancy,
            max_throw=annotation.max_throw,
            indexes=annotation.indexes,
            matrix=matrix,
            symmetries=pattern_symmetries(annotation.jugglers, annotation.period, annotation.switch_repeat),
            hands=hands,
            body=body,
            dwell_beats=dwell_beats,
            bps=config.bps if config.bps is not None else self._default_bps(matrix),
        )
        logger.debug("Compiled %s", result.summary())
        return result

    def _run_passes(self, pattern: str, hands: HandPathSpec | None) -> _Passes:
        tree = parse_pattern(pattern)
        annotation = self.annotator.annotate(tree)
        hand_periods = None
        if hands is not None:
            hand_periods = [hands.period(j) for j in range(1, annotation.jugglers + 1)]
        matrix = self.builder.build(tree, annotation, hand_periods)
        self.resolver.resolve(matrix)
        return _Passes(annotation, matrix)

    def _align_periods(
        self,
        pattern: str,
        passes: _Passes,
        hands: HandPathSpec | None,
        body: BodyPathSpec | None,
    ) -> tuple[str, _Passes]:
        """Repeat the pattern until hand and body periods divide it."""
        jugglers = range(1, passes.annotation.jugglers + 1)
        base_period = passes.annotation.base_period
        periods = [base_period]
        if hands is not None:
            periods += [hands.period(j) for j in jugglers]
        if body is not None:
            periods += [body.period(j) for j in jugglers]

        total = lcm(*periods)
        if total == base_period:
            return pattern, passes

        repeats = total // base_period
        pattern = f"({pattern}^{repeats})"
        logger.debug("Repeating pattern %d times to match hand/body period %d", repeats, total)
        return pattern, self._run_passes(pattern, hands)

    @staticmethod
    def _default_bps(matrix: ThrowMatrix) -> float:
        """Average table rate over every throw above 2 in the matrix."""
        rates = [
            BPS_BY_THROW_VALUE[min(throw.value, len(BPS_BY_THROW_VALUE) - 1)]
            for throw in matrix
            if throw.value > 2
        ]
        if not rates:
            return BPS_DEFAULT
        return sum(rates) / len(rates)


def compile_pattern(config: PatternConfig | str) -> CompiledPattern:
    """
    Convenience function to compile a pattern.

    Args:
        config: PatternConfig, configuration string or bare pattern

    Returns:
        CompiledPattern
    """
    return SiteswapCompiler().compile(config)
