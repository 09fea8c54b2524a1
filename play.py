"""Interactive Fair Dice game.

Plays one game of non-transitive dice against the computer in the
terminal. Every random number is generated with the commit-reveal
protocol from ``fair_random``: the computer shows an HMAC of its
number, the user adds a number of their own, and only then does the
computer reveal its number and key so the HMAC can be checked.

Usage:
    python play.py 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3

At every prompt ``X`` exits and ``?`` shows the win probability table.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable

import compute_probabilities
import fair_dice
import fair_random

_C = fair_dice._Colors

EXIT_OPTION = "X"
HELP_OPTION = "?"
USAGE_EXAMPLE = "python play.py 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"


class GameExit(Exception):
    """The user chose to leave the game."""


class DiceGame:
    """One game between the computer and a user.

    All terminal interaction goes through ``input_fn`` and ``output_fn``
    so a game can be scripted. ``commitment_factory`` creates the
    commitment for each random number.
    """

    def __init__(
        self,
        dice: list[fair_dice.Die],
        input_fn: Callable[[str], str] | None = None,
        output_fn: Callable[[str], None] | None = None,
        commitment_factory: Callable[[int], fair_random.Commitment] = (
            fair_random.create_commitment
        ),
    ) -> None:
        self.dice = dice
        self._input = input_fn or input
        self._output = output_fn or print
        self._commit = commitment_factory
        self.first_player: fair_dice.PlayerRole | None = None
        self.user_die: fair_dice.Die | None = None
        self.computer_die: fair_dice.Die | None = None

    # -----------------------------------------------------------------
    # Prompting
    # -----------------------------------------------------------------

    def show_help(self) -> None:
        self._output(
            f"{_C.CYAN}{compute_probabilities.TABLE_TITLE}{_C.RESET}"
        )
        self._output(compute_probabilities.format_probability_table(self.dice))

    def _prompt(self, options: list[tuple[str, str]]) -> str:
        """Show a menu and return the key of a valid choice.

        Args:
            options: (key, label) pairs. Keys are matched
                case-insensitively.

        Raises:
            GameExit: If the user selects the exit option.
        """
        keys = [key for key, _ in options]
        while True:
            for key, label in options:
                self._output(f"{key} - {label}")
            self._output(f"{EXIT_OPTION} - exit")
            self._output(f"{HELP_OPTION} - help")
            choice = self._input("Your selection: ").strip().upper()
            if choice == EXIT_OPTION:
                raise GameExit()
            if choice == HELP_OPTION:
                self.show_help()
                continue
            if choice in keys:
                return choice
            self._output(
                f"{_C.YELLOW}Please enter one of: {', '.join(keys)}, "
                f"{EXIT_OPTION}, or {HELP_OPTION}.{_C.RESET}"
            )

    def _reveal(self, commitment: fair_random.Commitment) -> None:
        secret_value, _ = commitment.reveal_secret_and_key()
        self._output(
            f"My selection: {secret_value} (KEY={commitment.key_hex})."
        )

    # -----------------------------------------------------------------
    # Game Phases
    # -----------------------------------------------------------------

    def determine_first_player(self) -> fair_dice.PlayerRole:
        """Decide the first move with a fair coin the user guesses.

        The user moves first if their guess equals the computer's
        committed bit.
        """
        commitment = self._commit(1)
        self._output("Let's determine who makes the first move.")
        self._output(
            f"I selected a random value in the range 0..1 "
            f"(HMAC={commitment.hmac_hex})."
        )
        self._output("Try to guess my selection.")
        guess = int(self._prompt([("0", "0"), ("1", "1")]))
        result = commitment.resolve(guess)
        self._reveal(commitment)
        self._output(f"The result is {result.describe()}.")
        if guess == result.secret_value:
            self.first_player = fair_dice.PlayerRole.USER
            self._output("You make the first move.")
        else:
            self.first_player = fair_dice.PlayerRole.COMPUTER
            self._output("I make the first move.")
        return self.first_player

    def _prompt_user_die(
        self, exclude: tuple[fair_dice.Die, ...] = (),
    ) -> fair_dice.Die:
        choices = fair_dice.available_dice(self.dice, exclude)
        self._output("Choose your dice:")
        key = self._prompt([(str(i), str(die)) for i, die in enumerate(choices)])
        return choices[int(key)]

    def select_dice(self) -> tuple[fair_dice.Die, fair_dice.Die]:
        """Both players pick a die, first mover first.

        Returns:
            (user_die, computer_die).
        """
        if self.first_player is None:
            self.determine_first_player()
        if self.first_player is fair_dice.PlayerRole.USER:
            self.user_die = self._prompt_user_die()
            self.computer_die = compute_probabilities.select_computer_die(
                self.dice, exclude=(self.user_die,),
            )
            self._output(f"You choose the {self.user_die} dice.")
            self._output(f"I choose the {self.computer_die} dice.")
        else:
            self.computer_die = compute_probabilities.select_computer_die(
                self.dice,
            )
            self._output(f"I choose the {self.computer_die} dice.")
            self.user_die = self._prompt_user_die(exclude=(self.computer_die,))
            self._output(f"You choose the {self.user_die} dice.")
        return self.user_die, self.computer_die

    def fair_roll(self, max_index: int) -> fair_random.RoundResult:
        """Generate a fair number in ``[0, max_index]`` with the user."""
        commitment = self._commit(max_index)
        self._output(
            f"I selected a random value in the range 0..{max_index} "
            f"(HMAC={commitment.hmac_hex})."
        )
        self._output(f"Add your number modulo {max_index + 1}.")
        options = [(str(i), str(i)) for i in range(max_index + 1)]
        user_number = int(self._prompt(options))
        result = commitment.resolve(user_number)
        self._reveal(commitment)
        self._output(
            f"The fair number generation result is {result.describe()}."
        )
        return result

    def perform_throws(self) -> tuple[int, int]:
        """Throw the computer's die, then the user's.

        Returns:
            (user_value, computer_value).
        """
        if self.user_die is None or self.computer_die is None:
            self.select_dice()
        assert self.user_die is not None and self.computer_die is not None

        self._output("It's time for my throw.")
        computer_roll = self.fair_roll(self.computer_die.face_count - 1)
        computer_value = self.computer_die.face_at(computer_roll.result)
        self._output(f"My throw is {computer_value}.")

        self._output("It's time for your throw.")
        user_roll = self.fair_roll(self.user_die.face_count - 1)
        user_value = self.user_die.face_at(user_roll.result)
        self._output(f"Your throw is {user_value}.")
        return user_value, computer_value

    def play(self) -> fair_dice.Outcome:
        """Run a full game and announce the winner."""
        self.determine_first_player()
        self.select_dice()
        user_value, computer_value = self.perform_throws()
        outcome = fair_dice.decide_outcome(user_value, computer_value)
        if outcome is fair_dice.Outcome.USER_WIN:
            self._output(
                f"{_C.GREEN}You win ({user_value} > {computer_value})!{_C.RESET}"
            )
        elif outcome is fair_dice.Outcome.COMPUTER_WIN:
            self._output(
                f"{_C.RED}I win ({computer_value} > {user_value})!{_C.RESET}"
            )
        else:
            self._output(f"It's a draw ({user_value} = {computer_value}).")
        return outcome


# ── Main ────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play provably fair non-transitive dice.",
        epilog=f"Example: {USAGE_EXAMPLE}",
    )
    parser.add_argument(
        "dice", nargs="*",
        help="Comma-separated faces of one die, e.g. 2,2,4,4,9,9",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse dice from ``argv`` and play one game.

    Returns:
        0 when the game finishes or the user exits, 1 on invalid input.
    """
    args = _build_parser().parse_args(argv)
    try:
        dice = fair_dice.parse_dice(args.dice)
        DiceGame(dice).play()
    except (GameExit, EOFError):
        print("Thanks for playing!")
    except fair_dice.FairDiceError as exc:
        print(f"{_C.RED}Error: {exc}{_C.RESET}")
        print(f"Example: {USAGE_EXAMPLE}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
