"""Fair Dice game model.

Core types for the non-transitive dice game: dice, the error taxonomy
shared by the commitment protocol and the probability engine, player
roles and round outcomes. Nothing in this module prints or exits; the
interactive orchestration lives in ``play``.
"""

from __future__ import annotations

import dataclasses
import enum

# Fewest dice a game can be started with.
MIN_DICE = 3


# =============================================================================
# ANSI Color Constants
# =============================================================================

class _Colors:
    """ANSI escape codes for terminal coloring."""
    BLUE = "\033[94m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


# =============================================================================
# Errors
# =============================================================================

class FairDiceError(Exception):
    """Base class for all errors raised by the game core."""


class InvalidRange(FairDiceError, ValueError):
    """A commitment range size is negative or otherwise malformed."""


class OutOfRange(FairDiceError, ValueError):
    """A value lies outside the inclusive range ``[0, range_size]``."""


class EntropyUnavailable(FairDiceError):
    """The operating system's secure random source failed."""


class InsufficientPool(FairDiceError, ValueError):
    """Too few distinct dice for the requested comparison."""


class DiceParseError(FairDiceError, ValueError):
    """Dice supplied on the command line could not be parsed."""


# =============================================================================
# Enums
# =============================================================================

class PlayerRole(enum.Enum):
    """One of the two parties in a game."""
    USER = enum.auto()
    COMPUTER = enum.auto()

    @property
    def label(self) -> str:
        return "You" if self is PlayerRole.USER else "Computer"


class Outcome(enum.Enum):
    """Result of comparing the two thrown faces."""
    USER_WIN = enum.auto()
    COMPUTER_WIN = enum.auto()
    DRAW = enum.auto()


# =============================================================================
# Die
# =============================================================================

@dataclasses.dataclass(frozen=True)
class Die:
    """A die with an ordered, immutable sequence of faces.

    Two dice may carry identical faces, so a die is identified by
    ``die_id`` (its position in the parsed dice list) whenever it has
    to be excluded from a pool.

    Attributes:
        die_id: Stable identifier, unique within one game.
        faces: Face values in the order they were supplied.
    """
    die_id: int
    faces: tuple[int, ...]

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the die stays hashable.
        object.__setattr__(self, "faces", tuple(self.faces))
        if not self.faces:
            raise ValueError("A die must have at least one face")

    @property
    def face_count(self) -> int:
        """Number of faces on this die."""
        return len(self.faces)

    def face_at(self, index: int) -> int:
        """Return the face shown for a throw result index.

        Raises:
            OutOfRange: If ``index`` is not a valid face position.
        """
        if not (0 <= index < self.face_count):
            raise OutOfRange(
                f"Face index must be 0-{self.face_count - 1}, got {index}"
            )
        return self.faces[index]

    def __str__(self) -> str:
        return "[" + ",".join(str(face) for face in self.faces) + "]"


# =============================================================================
# Parsing
# =============================================================================

def parse_die(token: str, die_id: int) -> Die:
    """Parse a comma-separated face list such as ``"2,2,4,4,9,9"``.

    Args:
        token: The face list. Whitespace around faces is ignored.
        die_id: Identifier to assign to the parsed die.

    Returns:
        The parsed Die.

    Raises:
        DiceParseError: If a face is empty, not an integer, or negative.
    """
    faces: list[int] = []
    for raw_face in token.split(","):
        face = raw_face.strip()
        try:
            value = int(face)
        except ValueError:
            raise DiceParseError(
                f"Invalid die face {face!r} in {token!r}"
            ) from None
        if value < 0:
            raise DiceParseError(
                f"Die faces must be non-negative, got {value} in {token!r}"
            )
        faces.append(value)
    return Die(die_id=die_id, faces=tuple(faces))


def parse_dice(tokens: list[str], min_dice: int = MIN_DICE) -> list[Die]:
    """Parse one die per token, assigning ids in order.

    Args:
        tokens: Face lists, one per die.
        min_dice: Fewest dice accepted.

    Returns:
        The parsed dice, ``die_id`` matching their position.

    Raises:
        DiceParseError: If fewer than ``min_dice`` tokens are supplied
            or any token fails to parse.
    """
    if len(tokens) < min_dice:
        raise DiceParseError(
            f"At least {min_dice} dice are required, got {len(tokens)}"
        )
    return [parse_die(token, die_id) for die_id, token in enumerate(tokens)]


# =============================================================================
# Helpers
# =============================================================================

def available_dice(
    dice: list[Die], exclude: tuple[Die, ...] | list[Die] = (),
) -> list[Die]:
    """Return the dice whose ids are not taken by ``exclude``."""
    taken = {die.die_id for die in exclude}
    return [die for die in dice if die.die_id not in taken]


def decide_outcome(user_value: int, computer_value: int) -> Outcome:
    """Compare two thrown faces; the strictly greater face wins."""
    if user_value > computer_value:
        return Outcome.USER_WIN
    if computer_value > user_value:
        return Outcome.COMPUTER_WIN
    return Outcome.DRAW
