"""Probability engine for Fair Dice.

Exact comparative probabilities between dice. A die beats another on a
throw when its face is strictly greater; ties count for neither side.
All probabilities are ``fractions.Fraction`` values computed by integer
counting, so repeated comparisons never drift. Rounding happens only in
the table formatting helpers at the bottom of this module.

The same numbers drive two things: the computer's die selection
(``select_computer_die``) and the help matrix shown to the user
(``print_probability_table``).
"""

from __future__ import annotations

import dataclasses
import fractions

import tabulate

import fair_dice

_C = fair_dice._Colors


# =============================================================================
# Pairwise Probabilities
# =============================================================================

def _count_pairs(a: fair_dice.Die, b: fair_dice.Die) -> tuple[int, int]:
    """Count (wins for a, ties) over all face pairs."""
    wins = 0
    ties = 0
    for face_a in a.faces:
        for face_b in b.faces:
            if face_a > face_b:
                wins += 1
            elif face_a == face_b:
                ties += 1
    return wins, ties


def win_probability(a: fair_dice.Die, b: fair_dice.Die) -> fractions.Fraction:
    """Probability that a throw of ``a`` is strictly greater than ``b``.

    Every face pair is equally likely, so this is the number of pairs
    where ``a`` wins divided by ``a.face_count * b.face_count``.
    """
    wins, _ = _count_pairs(a, b)
    return fractions.Fraction(wins, a.face_count * b.face_count)


def tie_probability(a: fair_dice.Die, b: fair_dice.Die) -> fractions.Fraction:
    """Probability that ``a`` and ``b`` show the same value."""
    _, ties = _count_pairs(a, b)
    return fractions.Fraction(ties, a.face_count * b.face_count)


def average_win_probability(
    die: fair_dice.Die, pool: list[fair_dice.Die],
) -> fractions.Fraction:
    """Mean win probability of ``die`` against every other die in ``pool``.

    Dice are matched by ``die_id``, so a different die with the same
    faces still counts as an opponent.

    Raises:
        InsufficientPool: If ``pool`` has fewer than 2 distinct dice, or
            no die other than ``die``.
    """
    distinct_ids = {other.die_id for other in pool}
    opponents = [other for other in pool if other.die_id != die.die_id]
    if len(distinct_ids) < 2 or not opponents:
        raise fair_dice.InsufficientPool(
            f"Need at least 2 distinct dice to average, got "
            f"{len(distinct_ids)}"
        )
    total = sum(
        (win_probability(die, other) for other in opponents),
        fractions.Fraction(0),
    )
    return total / len(opponents)


# =============================================================================
# Probability Matrix
# =============================================================================

@dataclasses.dataclass(frozen=True)
class ProbabilityMatrix:
    """Win probabilities for every ordered pair of dice.

    ``rows[i][j]`` is the probability that ``dice[i]`` beats ``dice[j]``.
    Diagonal cells compare a die with itself and are computed like any
    other cell.

    Attributes:
        dice: The dice, in row/column order.
        rows: Square table of exact probabilities.
    """
    dice: tuple[fair_dice.Die, ...]
    rows: tuple[tuple[fractions.Fraction, ...], ...]

    @property
    def size(self) -> int:
        return len(self.dice)

    def probability(
        self, row_die: fair_dice.Die, column_die: fair_dice.Die,
    ) -> fractions.Fraction:
        """Look up a cell by die rather than by position."""
        return self.rows[self._index(row_die)][self._index(column_die)]

    def _index(self, die: fair_dice.Die) -> int:
        for i, candidate in enumerate(self.dice):
            if candidate.die_id == die.die_id:
                return i
        raise KeyError(f"Die {die.die_id} is not in this matrix")


def build_probability_matrix(
    dice: list[fair_dice.Die],
) -> ProbabilityMatrix:
    """Compute a fresh win-probability matrix over ``dice``.

    Raises:
        InsufficientPool: If ``dice`` is empty.
    """
    if not dice:
        raise fair_dice.InsufficientPool("Cannot build a matrix of no dice")
    rows = tuple(
        tuple(win_probability(row_die, column_die) for column_die in dice)
        for row_die in dice
    )
    return ProbabilityMatrix(dice=tuple(dice), rows=rows)


# =============================================================================
# Strategy
# =============================================================================

def rank_dice(
    dice: list[fair_dice.Die],
) -> list[tuple[fair_dice.Die, fractions.Fraction]]:
    """Rank dice by average win probability, best first.

    Dice with equal averages keep their original order.

    Raises:
        InsufficientPool: If fewer than 2 distinct dice are given.
    """
    ranked = [(die, average_win_probability(die, dice)) for die in dice]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked


def select_computer_die(
    dice: list[fair_dice.Die],
    exclude: tuple[fair_dice.Die, ...] | list[fair_dice.Die] = (),
) -> fair_dice.Die:
    """Pick the computer's die.

    Moving first (nothing excluded), the computer takes the die with the
    best average win probability against all others. Moving second, it
    takes the remaining die most likely to beat the first excluded die,
    which is the user's choice. Ties keep the earliest die.

    Args:
        dice: All dice in the game.
        exclude: Dice already taken, matched by ``die_id``.

    Returns:
        The selected die.

    Raises:
        InsufficientPool: If no die is available, or when moving first
            with fewer than 2 dice.
    """
    candidates = fair_dice.available_dice(dice, exclude)
    if not candidates:
        raise fair_dice.InsufficientPool("No available dice to select")

    if not exclude:
        def score(die: fair_dice.Die) -> fractions.Fraction:
            return average_win_probability(die, candidates)
    else:
        opponent = exclude[0]

        def score(die: fair_dice.Die) -> fractions.Fraction:
            return win_probability(die, opponent)

    best_die = candidates[0]
    best_score = score(best_die)
    for die in candidates[1:]:
        die_score = score(die)
        if die_score > best_score:
            best_die = die
            best_score = die_score
    return best_die


# =============================================================================
# Display Helpers
# =============================================================================

_CORNER_LABEL = "User dice v"
TABLE_TITLE = "Probability of the win for the user:"


def _format_cell(probability: fractions.Fraction, diagonal: bool) -> str:
    text = f"{float(probability):.4f}"
    if diagonal:
        return f"- ({text})"
    return text


def format_probability_table(dice: list[fair_dice.Die]) -> str:
    """Render the help matrix as a grid table.

    Rows are the user's die, columns the opponent's die, and each cell
    is the probability that the row die wins, to 4 decimals.
    """
    matrix = build_probability_matrix(dice)
    header = [_CORNER_LABEL] + [str(die) for die in matrix.dice]
    body = [
        [str(row_die)] + [
            _format_cell(cell, diagonal=(i == j))
            for j, cell in enumerate(row)
        ]
        for i, (row_die, row) in enumerate(zip(matrix.dice, matrix.rows))
    ]
    return tabulate.tabulate(
        body, headers=header, tablefmt="grid", disable_numparse=True,
    )


def print_probability_table(dice: list[fair_dice.Die]) -> None:
    """Print the help matrix with a title."""
    print()
    print(f"{_C.CYAN}{_C.BOLD}{TABLE_TITLE}{_C.RESET}")
    print(format_probability_table(dice))
    print()


def print_dice_ranking(dice: list[fair_dice.Die]) -> None:
    """Print dice ordered by average win probability."""
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    print(f"{_C.BOLD}Dice ranked by average win probability{_C.RESET}")
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    for rank, (die, probability) in enumerate(rank_dice(dice), 1):
        print(
            f"  {rank:>2}. {str(die):<24} "
            f"{_C.GREEN}{float(probability):.1%}{_C.RESET}"
            f"  {_C.DIM}({probability}){_C.RESET}"
        )
    print()
