"""Automated Fair Dice simulations.

Plays many rounds through the full commit-reveal protocol with a
scripted counterpart standing in for the user, verifies every published
HMAC, and compares the empirical results with the exact probabilities
from ``compute_probabilities``.

Usage:
    python simulate.py 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7 --games 500
"""

from __future__ import annotations

import argparse
import dataclasses
import fractions
import random
import sys
import time
from typing import Callable, Iterable

import tqdm

import compute_probabilities
import fair_dice
import fair_random

_C = fair_dice._Colors

DEFAULT_NUM_ROUNDS = 10_000
DEFAULT_NUM_GAMES = 1_000

CommitmentFactory = Callable[[int], fair_random.Commitment]


# =============================================================================
# Metrics
# =============================================================================

@dataclasses.dataclass
class MatchupStats:
    """Tally of throws between two fixed dice."""
    die_a: fair_dice.Die
    die_b: fair_dice.Die
    rounds: int = 0
    wins_a: int = 0
    wins_b: int = 0
    ties: int = 0

    def record(self, value_a: int, value_b: int) -> None:
        self.rounds += 1
        if value_a > value_b:
            self.wins_a += 1
        elif value_b > value_a:
            self.wins_b += 1
        else:
            self.ties += 1

    @property
    def win_rate_a(self) -> float:
        return self.wins_a / self.rounds if self.rounds else 0.0

    @property
    def win_rate_b(self) -> float:
        return self.wins_b / self.rounds if self.rounds else 0.0

    @property
    def tie_rate(self) -> float:
        return self.ties / self.rounds if self.rounds else 0.0


class PlayerMetrics:
    """Track per-player results across simulated games."""

    def __init__(self, role: fair_dice.PlayerRole) -> None:
        self.role = role
        self.outcomes: list[fair_dice.Outcome] = []
        self.first_moves = 0
        self.dice_used: dict[int, int] = {}

    def record(
        self, outcome: fair_dice.Outcome, die: fair_dice.Die, moved_first: bool,
    ) -> None:
        """Record one finished game from this player's side."""
        self.outcomes.append(outcome)
        self.dice_used[die.die_id] = self.dice_used.get(die.die_id, 0) + 1
        if moved_first:
            self.first_moves += 1

    @property
    def games(self) -> int:
        return len(self.outcomes)

    @property
    def wins(self) -> int:
        winning = (
            fair_dice.Outcome.USER_WIN
            if self.role is fair_dice.PlayerRole.USER
            else fair_dice.Outcome.COMPUTER_WIN
        )
        return sum(1 for outcome in self.outcomes if outcome is winning)

    @property
    def draws(self) -> int:
        return sum(
            1 for outcome in self.outcomes
            if outcome is fair_dice.Outcome.DRAW
        )

    @property
    def win_rate(self) -> float:
        if not self.outcomes:
            return 0.0
        return self.wins / self.games


# =============================================================================
# Protocol Rounds
# =============================================================================

def _fair_number(
    max_index: int,
    counterpart: random.Random,
    commitment_factory: CommitmentFactory,
) -> int:
    """Run one commit-reveal round and check the published HMAC."""
    commitment = commitment_factory(max_index)
    published = commitment.reveal_digest()
    result = commitment.combine(counterpart.randint(0, max_index))
    secret_value, key = commitment.reveal_secret_and_key()
    if not fair_random.verify_commitment(published, secret_value, key):
        raise RuntimeError("Revealed secret does not match the published HMAC")
    return result


def _fair_throw(
    die: fair_dice.Die,
    counterpart: random.Random,
    commitment_factory: CommitmentFactory,
) -> int:
    return die.face_at(
        _fair_number(die.face_count - 1, counterpart, commitment_factory)
    )


def _progress(iterable: Iterable[int], total: int, desc: str, enabled: bool) -> Iterable[int]:
    if not enabled:
        return iterable
    return tqdm.tqdm(
        iterable, total=total, desc=desc, unit=" rounds", dynamic_ncols=True,
    )


# =============================================================================
# Simulations
# =============================================================================

def simulate_matchup(
    die_a: fair_dice.Die,
    die_b: fair_dice.Die,
    num_rounds: int = DEFAULT_NUM_ROUNDS,
    seed: int | None = None,
    show_progress: bool = False,
    commitment_factory: CommitmentFactory = fair_random.create_commitment,
) -> MatchupStats:
    """Throw two dice against each other ``num_rounds`` times.

    Each throw is a full commit-reveal round. ``seed`` only fixes the
    counterpart's numbers; the committed secrets stay cryptographically
    random, so results vary between runs.

    Args:
        die_a: First die.
        die_b: Second die.
        num_rounds: Number of throws of each die.
        seed: Optional seed for the counterpart's numbers.
        show_progress: If True, display a tqdm progress bar.
        commitment_factory: Creates each round's commitment.

    Returns:
        The tallied MatchupStats.
    """
    counterpart = random.Random(seed)
    stats = MatchupStats(die_a=die_a, die_b=die_b)
    for _ in _progress(range(num_rounds), num_rounds, "Matchup", show_progress):
        value_a = _fair_throw(die_a, counterpart, commitment_factory)
        value_b = _fair_throw(die_b, counterpart, commitment_factory)
        stats.record(value_a, value_b)
    return stats


def simulate_games(
    dice: list[fair_dice.Die],
    num_games: int = DEFAULT_NUM_GAMES,
    seed: int | None = None,
    show_progress: bool = False,
    commitment_factory: CommitmentFactory = fair_random.create_commitment,
) -> dict[fair_dice.PlayerRole, PlayerMetrics]:
    """Play full games where the user picks dice at random.

    The first move is decided by a fair coin the simulated user
    guesses; the computer follows ``select_computer_die``.

    Returns:
        PlayerMetrics for both roles.
    """
    counterpart = random.Random(seed)
    metrics = {
        role: PlayerMetrics(role) for role in fair_dice.PlayerRole
    }
    for _ in _progress(range(num_games), num_games, "Games", show_progress):
        guess = counterpart.randint(0, 1)
        coin = commitment_factory(1).resolve(guess)
        user_first = guess == coin.secret_value

        if user_first:
            user_die = counterpart.choice(dice)
            computer_die = compute_probabilities.select_computer_die(
                dice, exclude=(user_die,),
            )
        else:
            computer_die = compute_probabilities.select_computer_die(dice)
            user_die = counterpart.choice(
                fair_dice.available_dice(dice, (computer_die,))
            )

        computer_value = _fair_throw(computer_die, counterpart, commitment_factory)
        user_value = _fair_throw(user_die, counterpart, commitment_factory)
        outcome = fair_dice.decide_outcome(user_value, computer_value)

        metrics[fair_dice.PlayerRole.USER].record(outcome, user_die, user_first)
        metrics[fair_dice.PlayerRole.COMPUTER].record(
            outcome, computer_die, not user_first,
        )
    return metrics


# =============================================================================
# Reports
# =============================================================================

def print_matchup_report(stats: MatchupStats) -> None:
    """Print empirical rates next to the exact probabilities."""
    exact_a = compute_probabilities.win_probability(stats.die_a, stats.die_b)
    exact_b = compute_probabilities.win_probability(stats.die_b, stats.die_a)
    exact_tie = compute_probabilities.tie_probability(stats.die_a, stats.die_b)
    print(
        f"  {_C.BOLD}{stats.die_a}{_C.RESET} vs "
        f"{_C.BOLD}{stats.die_b}{_C.RESET}  "
        f"{_C.DIM}({stats.rounds:,} rounds){_C.RESET}"
    )
    rows: list[tuple[str, float, fractions.Fraction]] = [
        ("first wins", stats.win_rate_a, exact_a),
        ("second wins", stats.win_rate_b, exact_b),
        ("ties", stats.tie_rate, exact_tie),
    ]
    for label, empirical, exact in rows:
        print(
            f"    {label:<12} {empirical:>7.2%}  "
            f"{_C.DIM}exact {float(exact):.2%}{_C.RESET}"
        )
    print()


def print_game_report(
    metrics: dict[fair_dice.PlayerRole, PlayerMetrics],
    dice: list[fair_dice.Die],
) -> None:
    """Print per-player results of ``simulate_games``."""
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    print(f"{_C.BOLD}Simulated games{_C.RESET}")
    print(f"{_C.BOLD}{'─' * 60}{_C.RESET}")
    for role, player in metrics.items():
        color = _C.GREEN if player.win_rate >= 0.5 else _C.YELLOW
        print(
            f"  {role.label:<9} {color}{player.win_rate:>7.2%}{_C.RESET} won"
            f"  ({player.wins}/{player.games}, {player.draws} draws,"
            f" moved first {player.first_moves} times)"
        )
        for die in dice:
            used = player.dice_used.get(die.die_id, 0)
            if used:
                print(f"    {_C.DIM}{str(die):<24} {used:>6}{_C.RESET}")
    print()


# ── Main ────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Simulate fair dice games and matchups.",
    )
    parser.add_argument("dice", nargs="*", help="Comma-separated die faces")
    parser.add_argument("--rounds", type=int, default=DEFAULT_NUM_ROUNDS)
    parser.add_argument("--games", type=int, default=DEFAULT_NUM_GAMES)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--no-progress", action="store_true", help="Hide progress bars",
    )
    args = parser.parse_args(argv)

    try:
        dice = fair_dice.parse_dice(args.dice)
        _run(dice, args)
    except fair_dice.FairDiceError as exc:
        print(f"{_C.RED}Error: {exc}{_C.RESET}")
        return 1
    return 0


def _run(dice: list[fair_dice.Die], args: argparse.Namespace) -> None:
    show_progress = not args.no_progress
    compute_probabilities.print_dice_ranking(dice)

    start = time.time()
    for i, die_a in enumerate(dice):
        for die_b in dice[i + 1:]:
            stats = simulate_matchup(
                die_a, die_b, num_rounds=args.rounds, seed=args.seed,
                show_progress=show_progress,
            )
            print_matchup_report(stats)

    metrics = simulate_games(
        dice, num_games=args.games, seed=args.seed,
        show_progress=show_progress,
    )
    print_game_report(metrics, dice)
    print(f"  {_C.DIM}Finished in {time.time() - start:.1f}s{_C.RESET}")


if __name__ == "__main__":
    sys.exit(main())
