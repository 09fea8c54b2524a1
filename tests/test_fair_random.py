"""Unit tests for the commit-reveal protocol."""

import collections
import hashlib
import hmac
import unittest
from unittest import mock

import fair_random
from fair_dice import EntropyUnavailable, InvalidRange, OutOfRange


class TestEncoding(unittest.TestCase):
    """Tests for encode_value and compute_digest."""

    def test_fixed_width_big_endian(self) -> None:
        self.assertEqual(fair_random.encode_value(0), b"\x00\x00\x00\x00")
        self.assertEqual(fair_random.encode_value(1), b"\x00\x00\x00\x01")
        self.assertEqual(fair_random.encode_value(258), b"\x00\x00\x01\x02")

    def test_digest_is_hmac_sha3_256(self) -> None:
        key = bytes(range(32))
        expected = hmac.new(key, b"\x00\x00\x00\x05", hashlib.sha3_256).digest()
        self.assertEqual(fair_random.compute_digest(key, 5), expected)
        self.assertEqual(len(expected), 32)

    def test_digest_depends_on_key(self) -> None:
        self.assertNotEqual(
            fair_random.compute_digest(bytes(32), 1),
            fair_random.compute_digest(b"\x01" * 32, 1),
        )


class TestCreateCommitment(unittest.TestCase):
    """Tests for create_commitment."""

    def test_secret_in_range(self) -> None:
        for _ in range(50):
            c = fair_random.create_commitment(5)
            self.assertTrue(0 <= c.secret_value <= 5)
            self.assertEqual(c.range_size, 5)
            self.assertEqual(len(c.key), fair_random.KEY_SIZE_BYTES)

    def test_zero_range(self) -> None:
        c = fair_random.create_commitment(0)
        self.assertEqual(c.secret_value, 0)
        self.assertEqual(c.combine(0), 0)
        self.assertTrue(c.verify())

    def test_keys_are_fresh(self) -> None:
        keys = {fair_random.create_commitment(1).key for _ in range(20)}
        self.assertEqual(len(keys), 20)

    def test_negative_range(self) -> None:
        with self.assertRaises(InvalidRange):
            fair_random.create_commitment(-1)

    def test_non_integer_range(self) -> None:
        for bad in (1.5, "3", None, True):
            with self.assertRaises(InvalidRange):
                fair_random.create_commitment(bad)  # type: ignore[arg-type]

    def test_range_too_large_for_encoding(self) -> None:
        with self.assertRaises(InvalidRange):
            fair_random.create_commitment(fair_random.MAX_RANGE_SIZE + 1)

    def test_invalid_range_draws_no_entropy(self) -> None:
        with mock.patch.object(fair_random.secrets, "randbelow") as randbelow, \
                mock.patch.object(fair_random.secrets, "token_bytes") as token_bytes:
            with self.assertRaises(InvalidRange):
                fair_random.create_commitment(-3)
        randbelow.assert_not_called()
        token_bytes.assert_not_called()

    def test_entropy_failure(self) -> None:
        with mock.patch.object(
            fair_random.secrets, "token_bytes", side_effect=OSError("no entropy"),
        ):
            with self.assertRaises(EntropyUnavailable):
                fair_random.create_commitment(3)

    def test_repr_hides_secret(self) -> None:
        c = fair_random.commitment_from_secret(9, 7, b"\xab" * 32)
        text = repr(c)
        self.assertNotIn("secret_value", text)
        self.assertNotIn("key=", text)

    def test_secret_is_uniform(self) -> None:
        """Chi-square goodness of fit over 6 values (df=5)."""
        samples = 6000
        counts = collections.Counter(
            fair_random.create_commitment(5).secret_value
            for _ in range(samples)
        )
        expected = samples / 6
        chi_square = sum(
            (counts[value] - expected) ** 2 / expected for value in range(6)
        )
        # p < 0.00001 for df=5
        self.assertLess(chi_square, 30.0)

    def test_every_value_is_reachable(self) -> None:
        seen = {fair_random.create_commitment(3).secret_value for _ in range(400)}
        self.assertEqual(seen, {0, 1, 2, 3})


class TestCombine(unittest.TestCase):
    """Tests for Commitment.combine and resolve."""

    def test_modular_sum(self) -> None:
        c = fair_random.commitment_from_secret(5, 4, bytes(32))
        self.assertEqual(c.combine(0), 4)
        self.assertEqual(c.combine(1), 5)
        self.assertEqual(c.combine(2), 0)
        self.assertEqual(c.combine(5), 3)

    def test_closure_for_all_inputs(self) -> None:
        for range_size in range(0, 7):
            for secret_value in range(range_size + 1):
                c = fair_random.commitment_from_secret(
                    range_size, secret_value, bytes(32),
                )
                for value in range(range_size + 1):
                    self.assertTrue(0 <= c.combine(value) <= range_size)

    def test_out_of_range_contribution(self) -> None:
        c = fair_random.create_commitment(2)
        for bad in (-1, 3, 100):
            with self.assertRaises(OutOfRange):
                c.combine(bad)

    def test_non_integer_contribution(self) -> None:
        c = fair_random.create_commitment(2)
        for bad in (1.0, "1", None, True):
            with self.assertRaises(OutOfRange):
                c.combine(bad)  # type: ignore[arg-type]

    def test_resolve_record(self) -> None:
        c = fair_random.commitment_from_secret(5, 4, bytes(32))
        result = c.resolve(3)
        self.assertEqual(result.secret_value, 4)
        self.assertEqual(result.counterpart_value, 3)
        self.assertEqual(result.result, 1)
        self.assertEqual(result.modulus, 6)
        self.assertEqual(result.describe(), "3 + 4 = 1 (mod 6)")


class TestVerification(unittest.TestCase):
    """Tests for the reveal and verify steps."""

    def test_round_trip(self) -> None:
        for range_size in (0, 1, 5, 19, fair_random.MAX_RANGE_SIZE):
            c = fair_random.create_commitment(range_size)
            published = c.reveal_digest()
            c.combine(0)
            secret_value, key = c.reveal_secret_and_key()
            self.assertEqual(
                fair_random.compute_digest(key, secret_value), published,
            )
            self.assertTrue(
                fair_random.verify_commitment(published, secret_value, key)
            )

    def test_hex_inputs(self) -> None:
        c = fair_random.create_commitment(9)
        self.assertTrue(
            fair_random.verify_commitment(c.hmac_hex, c.secret_value, c.key_hex)
        )
        self.assertEqual(len(c.hmac_hex), 64)
        self.assertEqual(len(c.key_hex), 64)

    def test_tampered_secret_fails(self) -> None:
        c = fair_random.commitment_from_secret(9, 3, b"\x11" * 32)
        self.assertFalse(fair_random.verify_commitment(c.digest, 4, c.key))

    def test_tampered_key_fails(self) -> None:
        c = fair_random.commitment_from_secret(9, 3, b"\x11" * 32)
        self.assertFalse(fair_random.verify_commitment(c.digest, 3, b"\x12" * 32))

    def test_negative_secret_fails(self) -> None:
        c = fair_random.commitment_from_secret(9, 3, b"\x11" * 32)
        self.assertFalse(fair_random.verify_commitment(c.digest, -1, c.key))

    def test_non_integer_secret_fails(self) -> None:
        c = fair_random.commitment_from_secret(9, 1, b"\x11" * 32)
        for bad in ("1", 1.0, None, True):
            self.assertFalse(fair_random.verify_commitment(c.digest, bad, c.key))

    def test_malformed_hex(self) -> None:
        with self.assertRaises(ValueError):
            fair_random.verify_commitment("zz", 0, bytes(32))


class TestCommitmentFromSecret(unittest.TestCase):
    """Tests for commitment_from_secret."""

    def test_matches_created_commitment(self) -> None:
        c = fair_random.create_commitment(7)
        rebuilt = fair_random.commitment_from_secret(7, c.secret_value, c.key)
        self.assertEqual(rebuilt.digest, c.digest)

    def test_secret_out_of_range(self) -> None:
        with self.assertRaises(OutOfRange):
            fair_random.commitment_from_secret(3, 4, bytes(32))

    def test_bad_key_length(self) -> None:
        with self.assertRaises(ValueError):
            fair_random.commitment_from_secret(3, 1, bytes(16))


if __name__ == "__main__":
    unittest.main()
