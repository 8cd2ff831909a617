"""
Permutations of jugglers (or objects), plus the lcm helper.

A permutation may map an element onto the *reverse* of another element:
for juggler permutations, `2*` means juggler 2 with left and right swapped.
Reversed elements are represented as negative integers.

Two string forms are accepted:
- Cycle notation: "(1,2)(3,4*)"
- Explicit mapping: "2,1,3" (element i maps to the i-th number)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce

from chuk_mcp_siteswap.constants import ErrorMessages
from chuk_mcp_siteswap.errors import PatternUserError


def lcm(*values: int) -> int:
    """Least common multiple of positive integers (1 for no values)."""
    return reduce(lambda a, b: a * b // math.gcd(a, b), values, 1)


@dataclass(frozen=True)
class Permutation:
    """
    A permutation of `size` elements numbered from 1.

    With `reverses`, the mapping covers -size..size and the image of a
    reversed element is the reverse of the image: perm(-i) == -perm(i).
    An element mapped to 0 is not covered by the permutation.
    """

    size: int
    mapping: tuple[int, ...]
    reverses: bool = True

    @classmethod
    def identity(cls, size: int, reverses: bool = True) -> Permutation:
        if reverses:
            return cls(size, tuple(range(-size, size + 1)), True)
        return cls(size, tuple(range(1, size + 1)), False)

    @classmethod
    def from_string(cls, size: int, spec: str, reverses: bool = True) -> Permutation:
        """Parse cycle notation or an explicit comma-separated mapping."""
        if "(" not in spec:
            return cls._from_explicit(size, spec, reverses)
        return cls._from_cycles(size, spec, reverses)

    @classmethod
    def _from_explicit(cls, size: int, spec: str, reverses: bool) -> Permutation:
        tokens = [t.strip() for t in spec.split(",")]
        if len(tokens) != size:
            raise PatternUserError(ErrorMessages.PERMUTATION_SYNTAX.format(spec=spec))
        images = [_parse_element(t, spec, reverses) for t in tokens]
        seen: set[int] = set()
        for image in images:
            if not 1 <= abs(image) <= size:
                raise PatternUserError(ErrorMessages.PERMUTATION_RANGE.format(juggler=image, size=size))
            if abs(image) in seen:
                raise PatternUserError(ErrorMessages.PERMUTATION_NOT_BIJECTIVE.format(spec=spec))
            seen.add(abs(image))
        if not reverses:
            return cls(size, tuple(images), False)
        mapping = [0] * (2 * size + 1)
        for elem, image in enumerate(images, start=1):
            mapping[elem + size] = image
            mapping[-elem + size] = -image
        return cls(size, tuple(mapping), True)

    @classmethod
    def _from_cycles(cls, size: int, spec: str, reverses: bool) -> Permutation:
        offset = size if reverses else -1
        mapping = [0] * (2 * size + 1 if reverses else size)
        used = [False] * len(mapping)

        for chunk in spec.split(")"):
            chunk = chunk.strip()
            if not chunk:
                continue
            if not chunk.startswith("("):
                raise PatternUserError(ErrorMessages.PERMUTATION_SYNTAX.format(spec=spec))
            last: int | None = None
            for token in chunk[1:].split(","):
                num = _parse_element(token.strip(), spec, reverses)
                low = -size if reverses else 1
                if num == 0 or not low <= num <= size:
                    raise PatternUserError(ErrorMessages.PERMUTATION_RANGE.format(juggler=num, size=size))
                if used[num + offset]:
                    raise PatternUserError(ErrorMessages.PERMUTATION_NOT_BIJECTIVE.format(spec=spec))
                used[num + offset] = True
                if last is None:
                    mapping[num + offset] = num
                else:
                    mapping[num + offset] = mapping[last + offset]
                    mapping[last + offset] = num
                    if reverses and used[-last + offset] and mapping[-last + offset] != -num:
                        raise PatternUserError(ErrorMessages.PERMUTATION_NOT_BIJECTIVE.format(spec=spec))
                last = num

        if reverses:
            for i in range(1, size + 1):
                pos, neg = used[i + size], used[-i + size]
                if pos and not neg:
                    mapping[-i + size] = -mapping[i + size]
                elif neg and not pos:
                    mapping[i + size] = -mapping[-i + size]
                elif not pos and not neg:
                    mapping[i + size] = 0
                    mapping[-i + size] = 0
        else:
            for i in range(size):
                if not used[i]:
                    mapping[i] = i + 1
        return cls(size, tuple(mapping), reverses)

    def _image(self, elem: int) -> int:
        return self.mapping[elem + self.size] if self.reverses else self.mapping[elem - 1]

    def cycle(self, elem: int) -> list[int]:
        """The cycle containing `elem`, starting from it."""
        result = [elem]
        current = self._image(elem)
        while current != elem:
            result.append(current)
            current = self._image(current)
        return result

    def to_string(self) -> str:
        """Cycle notation; elements the permutation does not cover are left out."""
        parts: list[str] = []
        printed: set[int] = set()
        for start in range(1, self.size + 1):
            if start in printed or self._image(start) == 0:
                continue
            members = self.cycle(start)
            printed.update(abs(m) for m in members)
            parts.append("(" + ",".join(_format_element(m) for m in members) + ")")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def _parse_element(token: str, spec: str, reverses: bool) -> int:
    negate = reverses and token.endswith("*")
    if negate:
        token = token[:-1].strip()
    if not token.isdigit():
        raise PatternUserError(ErrorMessages.PERMUTATION_SYNTAX.format(spec=spec))
    return -int(token) if negate else int(token)


def _format_element(num: int) -> str:
    return str(num) if num >= 0 else f"{-num}*"
