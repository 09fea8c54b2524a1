"""Unit tests for the fair_dice game model."""

import unittest

from fair_dice import (
    DiceParseError,
    Die,
    FairDiceError,
    InsufficientPool,
    OutOfRange,
    Outcome,
    PlayerRole,
    available_dice,
    decide_outcome,
    parse_die,
    parse_dice,
)


class TestDie(unittest.TestCase):
    """Tests for the Die dataclass."""

    def test_faces_stored_as_tuple(self) -> None:
        die = Die(0, [1, 2, 3])  # type: ignore[arg-type]
        self.assertEqual(die.faces, (1, 2, 3))
        self.assertEqual(die.face_count, 3)

    def test_empty_faces_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Die(0, ())

    def test_frozen(self) -> None:
        die = Die(0, (1, 2))
        with self.assertRaises(AttributeError):
            die.faces = (3, 4)  # type: ignore[misc]

    def test_identical_faces_are_distinct_dice(self) -> None:
        a = Die(0, (1, 2, 3))
        b = Die(1, (1, 2, 3))
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_str(self) -> None:
        self.assertEqual(str(Die(0, (2, 2, 4, 4, 9, 9))), "[2,2,4,4,9,9]")

    def test_face_at(self) -> None:
        die = Die(0, (5, 7, 9))
        self.assertEqual(die.face_at(0), 5)
        self.assertEqual(die.face_at(2), 9)
        with self.assertRaises(OutOfRange):
            die.face_at(3)
        with self.assertRaises(OutOfRange):
            die.face_at(-1)


class TestParsing(unittest.TestCase):
    """Tests for parse_die and parse_dice."""

    def test_parse_die(self) -> None:
        die = parse_die("2, 2,4 ,4,9,9", die_id=4)
        self.assertEqual(die.die_id, 4)
        self.assertEqual(die.faces, (2, 2, 4, 4, 9, 9))

    def test_single_face(self) -> None:
        self.assertEqual(parse_die("7", 0).faces, (7,))

    def test_non_integer_face(self) -> None:
        with self.assertRaises(DiceParseError) as ctx:
            parse_die("1,two,3", 0)
        self.assertIn("two", str(ctx.exception))

    def test_float_face_rejected(self) -> None:
        with self.assertRaises(DiceParseError):
            parse_die("1,2.5,3", 0)

    def test_empty_face_rejected(self) -> None:
        with self.assertRaises(DiceParseError):
            parse_die("1,,3", 0)

    def test_negative_face_rejected(self) -> None:
        with self.assertRaises(DiceParseError):
            parse_die("1,-2,3", 0)

    def test_parse_dice_assigns_ids(self) -> None:
        dice = parse_dice(["1,2", "3,4", "1,2"])
        self.assertEqual([d.die_id for d in dice], [0, 1, 2])
        self.assertEqual(dice[0].faces, dice[2].faces)

    def test_too_few_dice(self) -> None:
        with self.assertRaises(DiceParseError):
            parse_dice(["1,2", "3,4"])
        with self.assertRaises(DiceParseError):
            parse_dice([])

    def test_custom_minimum(self) -> None:
        self.assertEqual(len(parse_dice(["1"], min_dice=1)), 1)

    def test_errors_share_base_class(self) -> None:
        for error in (DiceParseError, InsufficientPool, OutOfRange):
            self.assertTrue(issubclass(error, FairDiceError))
            self.assertTrue(issubclass(error, ValueError))


class TestHelpers(unittest.TestCase):
    """Tests for available_dice, decide_outcome and enums."""

    def setUp(self) -> None:
        self.dice = parse_dice(["1,2", "3,4", "1,2"])

    def test_available_dice_excludes_by_id(self) -> None:
        remaining = available_dice(self.dice, (self.dice[0],))
        self.assertEqual([d.die_id for d in remaining], [1, 2])

    def test_available_dice_no_exclusion(self) -> None:
        self.assertEqual(available_dice(self.dice), self.dice)

    def test_decide_outcome(self) -> None:
        self.assertEqual(decide_outcome(5, 3), Outcome.USER_WIN)
        self.assertEqual(decide_outcome(3, 5), Outcome.COMPUTER_WIN)
        self.assertEqual(decide_outcome(4, 4), Outcome.DRAW)

    def test_role_labels(self) -> None:
        self.assertEqual(PlayerRole.USER.label, "You")
        self.assertEqual(PlayerRole.COMPUTER.label, "Computer")


if __name__ == "__main__":
    unittest.main()
