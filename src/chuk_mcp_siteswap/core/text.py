"""
Text helpers shared by the notation parsers.
"""

from __future__ import annotations

import re

_REPEAT = re.compile(r"\s*\^\s*(\d+)")


def expand_repeats(text: str) -> str:
    """
    Expand `(stuff)^N` shorthand, recursively.

    The parentheses around a repeated group are dropped; parentheses not
    followed by `^N` are copied through unchanged.

    Examples:
        expand_repeats("he(l)^2o") == "hello"
        expand_repeats("((ab)^2c)^2") == "ababcababc"
    """
    out: list[str] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == "(":
            close = _matching_paren(text, pos)
            match = _REPEAT.match(text, close + 1) if close is not None else None
            if match is not None:
                inner = expand_repeats(text[pos + 1 : close])
                out.append(inner * int(match.group(1)))
                pos = match.end()
                continue
        out.append(ch)
        pos += 1
    return "".join(out)


def _matching_paren(text: str, start: int) -> int | None:
    depth = 0
    for pos in range(start, len(text)):
        if text[pos] == "(":
            depth += 1
        elif text[pos] == ")":
            depth -= 1
            if depth == 0:
                return pos
    return None


def split_outside_parens(text: str, delimiter: str, keep_empty: bool = False) -> list[str]:
    """Split on `delimiter` where it is not inside parentheses, dropping blank pieces unless `keep_empty`."""
    pieces: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == delimiter and depth == 0:
            pieces.append("".join(current))
            current = []
        else:
            current.append(ch)
    pieces.append("".join(current))
    if keep_empty:
        return pieces
    return [p for p in pieces if p.strip()]
