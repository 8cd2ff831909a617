"""
Constants and enums for the siteswap compiler.

No magic strings - use enums and named constants for constrained values.
"""

from enum import Enum, IntEnum

# Hand indices inside the throw matrix
RIGHT_HAND = 0
LEFT_HAND = 1


class Hand(IntEnum):
    """Hand index used by the throw matrix."""

    RIGHT = RIGHT_HAND
    LEFT = LEFT_HAND

    @property
    def other(self) -> "Hand":
        return Hand.LEFT if self is Hand.RIGHT else Hand.RIGHT

    @property
    def letter(self) -> str:
        return "R" if self is Hand.RIGHT else "L"


class ModifierKind(str, Enum):
    """Resolution state of a throw modifier."""

    HOLD = "hold"  # Object stays in the hand
    THROW = "throw"  # Object is released, possibly with a tag (B, BF, ...)
    UNRESOLVED = "unresolved"  # A '2' that may be a hold or a short throw


class SymmetryKind(str, Enum):
    """Pattern symmetry kinds consumed by layout."""

    DELAY = "delay"
    SWITCH = "switch"
    SWITCH_DELAY = "switchdelay"


class ErrorKind(str, Enum):
    """Error tiers reported to callers."""

    USER = "user"
    INTERNAL = "internal"


# Default modifier tags
THROW_TAG = "T"
HOLD_TAG = "H"

# MHN pattern defaults
DWELL_DEFAULT = 1.3
HOLD_DEFAULT = False
DWELLMAX_DEFAULT = True
BPS_DEFAULT = 2.0

# Hand siteswap conversion
HSS_DWELL_DEFAULT = 0.3
HSS_DWELL_MARGIN = 0.7

# Body elevation (cm) when a body coordinate omits it
BODY_DEFAULT_Z = 100.0

# Beats-per-second lookup indexed by throw value (values above 9 clamp to 9)
BPS_BY_THROW_VALUE: tuple[float, ...] = (2.0, 2.0, 2.0, 2.9, 3.4, 4.1, 4.25, 5.0, 5.0, 5.5)

# Canonical key order for configuration strings
CONFIG_KEY_ORDER: tuple[str, ...] = (
    "pattern",
    "bps",
    "dwell",
    "hands",
    "body",
    "hss",
    "hold",
    "dwellmax",
    "handspec",
)


class ErrorMessages:
    """Standardized error messages."""

    # Parser
    UNEXPECTED_CHARACTER = "Unexpected character '{char}'."
    UNEXPECTED_TOKEN = "Unexpected '{token}' in pattern."
    PATTERN_INCOMPLETE = "Pattern ended unexpectedly."
    INCONSISTENT_JUGGLERS = "Inconsistent number of jugglers: expected {expected}, found {found}."
    INCONSISTENT_BEATS = "Inconsistent number of beats between jugglers in passing group."
    BAD_PASS_TARGET = "Pass target must be a juggler number of at least 1, got {target}."
    BAD_REPEAT_COUNT = "Repeat count must be at least 1, got {count}."

    # First pass
    BAD_AVERAGE = "Bad average number of objects: throw sum {throw_sum} over {beats} beats."
    NO_BEATS = "Pattern has no beats."
    NO_OBJECTS = "Pattern has no objects."
    WILDCARD_UNRESOLVED = "Wildcard transitions are not supported."

    # Matrix
    MISSING_SLOT = "No matrix slot for juggler {juggler} hand {hand} beat {index} slot {slot}."
    MATRIX_FROZEN = "Throw matrix is read-only once compiled."

    # Hand siteswap conversion
    HSS_SYNTAX = "Syntax error in {which} pattern."
    HSS_UNTERMINATED_MULTIPLEX = "Unterminated multiplex bracket in object pattern."
    HSS_EMPTY = "Empty {which} pattern."
    HSS_BAD_AVERAGE = "Bad average number of {what} in {which} pattern."
    HSS_OBJECT_PERMUTATION = "Object pattern is not a valid siteswap: {count} throws land on beat {beat}, which throws {expected}."
    HSS_HAND_PERMUTATION = "Hand pattern is not a valid siteswap: collision at beat {beat}."
    HSS_HAND_ORBITS = "Hand pattern orbits have unequal throw sums: {sums}."
    HSS_NO_HAND = "Object throw scheduled at beat {beat} where no hand is available."
    HANDSPEC_SYNTAX = "Syntax error in handspec."
    HANDSPEC_UNTERMINATED = "Unterminated group in handspec."
    HANDSPEC_OUT_OF_RANGE = "Hand number {hand} out of range 1-{hands} in handspec."
    HANDSPEC_DUPLICATE = "Hand number {hand} assigned more than once in handspec."
    HANDSPEC_EMPTY_JUGGLER = "Juggler {juggler} must have at least one hand in handspec."
    HANDSPEC_TOO_MANY_JUGGLERS = "Handspec names more jugglers than there are hands."
    HANDSPEC_UNASSIGNED = "Hand number {hand} is not assigned to a juggler in handspec."

    # Path specs
    PATH_UNTERMINATED = "Unterminated parenthesis in {which} specification."
    PATH_BAD_NUMBER = "Malformed number '{text}' in {which} specification."
    PATH_TOO_MANY_COMPONENTS = "Too many coordinates in {which} specification."
    PATH_THROW_NOT_FIRST = "'T' must be the first token of a hands beat."
    PATH_DUPLICATE_THROW = "'T' given more than once in a hands beat."
    PATH_DUPLICATE_CATCH = "'C' given more than once in a hands beat."
    PATH_CATCH_FIRST = "'C' cannot come before any coordinate."
    PATH_TOO_FEW = "A hands beat needs at least two coordinates."
    PATH_NO_THROW = "The throw position of a hands beat must be a coordinate."
    PATH_NO_CATCH = "The catch position of a hands beat must be a coordinate."
    PATH_BAD_CHARACTER = "Unrecognized character '{char}' in {which} specification."
    PATH_EMPTY = "Empty {which} specification."

    # Configuration
    CONFIG_NO_VALUE = "Parameter '{token}' has no value."
    CONFIG_NO_PATTERN = "No pattern given."
    CONFIG_BAD_VALUE = "Invalid value for '{key}': {reason}"
    BODY_TOO_FEW_JUGGLERS = "Body specification describes {found} jugglers, pattern needs {needed}."

    # Permutations
    PERMUTATION_SYNTAX = "Syntax error in juggler permutation '{spec}'."
    PERMUTATION_RANGE = "Juggler {juggler} out of range 1-{size} in permutation."
    PERMUTATION_NOT_BIJECTIVE = "Juggler permutation '{spec}' is not one-to-one."


class SuccessMessages:
    """Standardized success messages."""

    PATTERN_COMPILED = "Compiled '{pattern}': {jugglers} juggler(s), {paths} object(s), period {period}."
    PATTERN_VALID = "Pattern '{pattern}' is valid."
    HSS_CONVERTED = "Converted hand siteswap '{hss}' over object pattern '{pattern}'."
