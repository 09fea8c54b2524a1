"""Win probabilities for Efron-style non-transitive dice.

Prints the help matrix and the average-win ranking for three dice where
A beats B, B beats C and C beats A, each with probability 5/9, then
shows which die the computer would take against each user choice.
"""

import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import compute_probabilities
import fair_dice

_C = fair_dice._Colors


def main() -> None:
    dice = fair_dice.parse_dice(["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"])

    compute_probabilities.print_probability_table(dice)
    compute_probabilities.print_dice_ranking(dice)

    print(f"{_C.BOLD}Computer replies{_C.RESET}")
    for user_die in dice:
        reply = compute_probabilities.select_computer_die(
            dice, exclude=(user_die,),
        )
        probability = compute_probabilities.win_probability(reply, user_die)
        print(
            f"  user {str(user_die):<16} -> computer {str(reply):<16}"
            f" wins {probability} ({float(probability):.1%})"
        )


if __name__ == "__main__":
    main()
