"""
Siteswap pattern parser.

Turns pattern text into the typed tree of `notation.tree`:

    parse_pattern("(4,2x)*")      -> Pattern(switch_repeat=True, ...)
    parse_pattern("<3p|3p><3|3>") -> Pattern(jugglers=2, ...)

The grammar lives in `grammar.lark`. Consecutive solo items are gathered into
one SoloSequence and consecutive passing groups into one PassingSequence,
with each throw carrying its beat offset inside that sequence.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from chuk_mcp_siteswap.constants import ErrorMessages
from chuk_mcp_siteswap.errors import SiteswapSyntaxError
from .tree import (
    Element,
    GroupedPattern,
    HandSpec,
    PassingGroup,
    PassingItem,
    PassingMultiThrow,
    PassingPairedThrow,
    PassingSequence,
    PassingSingleThrow,
    PassingThrows,
    Pattern,
    SoloItem,
    SoloMultiThrow,
    SoloPairedThrow,
    SoloSequence,
    SoloSingleThrow,
    Wildcard,
)

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

_PARSER = Lark(
    _GRAMMAR_PATH.read_text(),
    parser="earley",
    lexer="basic",
    start="pattern",
    propagate_positions=True,
)


def parse_pattern(text: str) -> Pattern:
    """
    Parse siteswap pattern text.

    Raises:
        SiteswapSyntaxError: If the text is not a well-formed pattern.
    """
    try:
        tree = _PARSER.parse(text)
    except UnexpectedCharacters as e:
        raise SiteswapSyntaxError(ErrorMessages.UNEXPECTED_CHARACTER.format(char=e.char), e.column) from e
    except UnexpectedEOF as e:
        raise SiteswapSyntaxError(ErrorMessages.PATTERN_INCOMPLETE) from e
    except UnexpectedToken as e:
        if e.token.type == "$END":
            raise SiteswapSyntaxError(ErrorMessages.PATTERN_INCOMPLETE) from e
        raise SiteswapSyntaxError(ErrorMessages.UNEXPECTED_TOKEN.format(token=e.token), e.column) from e
    except UnexpectedInput as e:
        raise SiteswapSyntaxError(ErrorMessages.PATTERN_INCOMPLETE, getattr(e, "column", None)) from e

    pattern = _TreeBuilder().build(tree)
    logger.debug("Parsed '%s': %d juggler(s)", text, pattern.jugglers)
    return pattern


class _TreeBuilder:
    """Builds typed nodes from the lark tree, tracking the juggler count."""

    def __init__(self) -> None:
        self._jugglers: int | None = None

    def build(self, tree: Tree) -> Pattern:
        pattern = self._pattern(tree)
        self._set_jugglers(pattern, self._jugglers or 1)
        return pattern

    def _set_jugglers(self, pattern: Pattern, jugglers: int) -> None:
        pattern.jugglers = jugglers
        for element in pattern.elements:
            if isinstance(element, GroupedPattern):
                self._set_jugglers(element.pattern, jugglers)

    def _check_jugglers(self, found: int, node: Tree) -> None:
        if self._jugglers is None:
            self._jugglers = found
        elif self._jugglers != found:
            raise SiteswapSyntaxError(
                ErrorMessages.INCONSISTENT_JUGGLERS.format(expected=self._jugglers, found=found),
                _column(node),
            )

    # ------------------------------------------------------------------
    # Pattern level
    # ------------------------------------------------------------------

    def _pattern(self, tree: Tree) -> Pattern:
        elements: list[Element] = []
        solo_run: list[Tree] = []
        passing_run: list[Tree] = []
        switch_repeat = False

        def flush() -> None:
            if solo_run:
                elements.append(self._solo_sequence(solo_run))
                solo_run.clear()
            if passing_run:
                elements.append(self._passing_sequence(passing_run))
                passing_run.clear()

        for child in tree.children:
            if isinstance(child, Token):
                if child.type == "SWITCH":
                    switch_repeat = True
                    continue
                # WILDCARD
                flush()
                if elements and isinstance(elements[-1], Wildcard):
                    elements[-1].beats += 1
                else:
                    elements.append(Wildcard(beats=1, position=child.column))
            elif child.data == "solo_item":
                if passing_run:
                    flush()
                solo_run.append(child)
            elif child.data == "passing_group":
                if solo_run:
                    flush()
                passing_run.append(child)
            else:
                flush()
                elements.append(self._grouped(child))
        flush()
        return Pattern(elements=elements, switch_repeat=switch_repeat)

    def _grouped(self, tree: Tree) -> GroupedPattern:
        inner, repeat = tree.children
        count = int(str(repeat).lstrip("^").strip())
        if count < 1:
            raise SiteswapSyntaxError(ErrorMessages.BAD_REPEAT_COUNT.format(count=count), repeat.column)
        return GroupedPattern(pattern=self._pattern(inner), repeats=count)

    # ------------------------------------------------------------------
    # Solo
    # ------------------------------------------------------------------

    def _solo_sequence(self, trees: list[Tree]) -> SoloSequence:
        self._check_jugglers(1, trees[0])
        items: list[SoloItem] = []
        beat = 0
        for tree in trees:
            first = tree.children[0]
            if isinstance(first, Token):
                items.append(HandSpec(left=first == "L", source_juggler=1, seq_beat=beat))
            elif first.data == "solo_multi":
                items.append(self._solo_multi(first, beat))
                beat += 1
            else:
                synced = len(tree.children) > 1
                left_tree, right_tree = first.children
                items.append(
                    SoloPairedThrow(
                        left=self._solo_multi(left_tree, beat),
                        right=self._solo_multi(right_tree, beat),
                        seq_beat=beat,
                    )
                )
                beat += 1 if synced else 2
        return SoloSequence(items=items, beats=beat)

    def _solo_multi(self, tree: Tree, beat: int) -> SoloMultiThrow:
        throws = []
        for single in tree.children:
            value, crossing, _, modifier = _single_parts(single)
            throws.append(SoloSingleThrow(value=value, crossing=crossing, modifier=modifier, seq_beat=beat))
        return SoloMultiThrow(throws=throws, seq_beat=beat)

    # ------------------------------------------------------------------
    # Passing
    # ------------------------------------------------------------------

    def _passing_sequence(self, trees: list[Tree]) -> PassingSequence:
        groups: list[PassingGroup] = []
        beat = 0
        for tree in trees:
            group = self._passing_group(tree, beat)
            groups.append(group)
            beat += group.beats
        return PassingSequence(groups=groups, jugglers=groups[0].jugglers, beats=beat)

    def _passing_group(self, tree: Tree, beat: int) -> PassingGroup:
        sections = [self._passing_throws(child, juggler, beat) for juggler, child in enumerate(tree.children, start=1)]
        self._check_jugglers(len(sections), tree)
        if any(s.beats != sections[0].beats for s in sections):
            raise SiteswapSyntaxError(ErrorMessages.INCONSISTENT_BEATS, _column(tree))
        return PassingGroup(sections=sections, jugglers=len(sections), beats=sections[0].beats, seq_beat=beat)

    def _passing_throws(self, tree: Tree, juggler: int, beat: int) -> PassingThrows:
        items: list[PassingItem] = []
        sub = 0
        for item in tree.children:
            first = item.children[0]
            if isinstance(first, Token):
                items.append(HandSpec(left=first == "L", source_juggler=juggler, seq_beat=beat + sub))
            elif first.data == "passing_multi":
                items.append(self._passing_multi(first, juggler, beat + sub))
                sub += 1
            else:
                synced = len(item.children) > 1
                left_tree, right_tree = first.children
                items.append(
                    PassingPairedThrow(
                        left=self._passing_multi(left_tree, juggler, beat + sub),
                        right=self._passing_multi(right_tree, juggler, beat + sub),
                        source_juggler=juggler,
                        seq_beat=beat + sub,
                    )
                )
                sub += 1 if synced else 2
        return PassingThrows(items=items, source_juggler=juggler, beats=sub, seq_beat=beat)

    def _passing_multi(self, tree: Tree, juggler: int, beat: int) -> PassingMultiThrow:
        throws = []
        for single in tree.children:
            value, crossing, target, modifier = _single_parts(single)
            if target is None:
                dest = juggler
            elif target == "":
                dest = juggler + 1
            else:
                dest = int(target)
                if dest < 1:
                    raise SiteswapSyntaxError(ErrorMessages.BAD_PASS_TARGET.format(target=dest), _column(single))
            throws.append(
                PassingSingleThrow(
                    value=value,
                    source_juggler=juggler,
                    dest_juggler=dest,
                    crossing=crossing,
                    modifier=modifier,
                    seq_beat=beat,
                )
            )
        return PassingMultiThrow(throws=throws, source_juggler=juggler, seq_beat=beat)


def _single_parts(tree: Tree) -> tuple[int, bool, str | None, str | None]:
    """(value, crossing, pass target text or None, modifier or None) of a single throw."""
    value = 0
    crossing = False
    target: str | None = None
    modifiers: list[str] = []
    for child in tree.children:
        if isinstance(child, Tree):
            value = _value(child.children[0])
        elif child.type == "CROSS":
            crossing = True
        elif child.type == "PASS":
            target = str(child)[1:]
        elif child.type == "MODIFIER":
            modifiers.append(str(child))
    return value, crossing, target, "".join(modifiers) or None


def _value(token: Token) -> int:
    if token.type == "DIGIT":
        return int(token)
    if token.type == "LETTER":
        return int(str(token), 36)
    return int(str(token).strip("{} \t\r\n"))


def _column(tree: Tree) -> int | None:
    return getattr(tree.meta, "column", None)
