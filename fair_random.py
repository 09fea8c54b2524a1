"""Provably fair random values for two parties.

The computer commits to a secret value in ``[0, range_size]`` by
publishing ``HMAC-SHA3-256(key, value)``. The user then picks their own
number in the same range, and the result is the sum of both modulo
``range_size + 1``. Revealing the secret and key afterwards lets anyone
recompute the HMAC and confirm the computer's value was fixed before
the user's choice was known.

Protocol order (enforced by the caller, see ``play``):

    1. ``create_commitment()``         -> show ``hmac_hex``
    2. collect the user's number
    3. ``Commitment.combine()``        -> the round result
    4. ``reveal_secret_and_key()``     -> show secret and ``key_hex``
"""

from __future__ import annotations

import dataclasses
import hashlib
import hmac
import secrets

from fair_dice import EntropyUnavailable, InvalidRange, OutOfRange

# Key length in bytes (256 bits of entropy).
KEY_SIZE_BYTES = 32

# Secret values are hashed as a fixed-width big-endian unsigned integer.
VALUE_WIDTH_BYTES = 4

# Largest range size whose values fit the fixed-width encoding.
MAX_RANGE_SIZE = 2 ** (8 * VALUE_WIDTH_BYTES) - 1

_HASH = hashlib.sha3_256


# =============================================================================
# Encoding and Hashing
# =============================================================================

def encode_value(value: int) -> bytes:
    """Encode a secret value as a fixed-width big-endian byte string."""
    return value.to_bytes(VALUE_WIDTH_BYTES, "big")


def compute_digest(key: bytes, value: int) -> bytes:
    """Compute the keyed hash committing to ``value`` under ``key``."""
    return hmac.new(key, encode_value(value), _HASH).digest()


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return bytes.fromhex(data)
    return bytes(data)


def verify_commitment(
    digest: bytes | str, secret_value: int, key: bytes | str,
) -> bool:
    """Check that a revealed secret and key reproduce a published digest.

    ``digest`` and ``key`` may be given as raw bytes or as the hex text
    shown on screen.

    Raises:
        ValueError: If a hex string is malformed.
    """
    if not _is_int(secret_value) or not (0 <= secret_value <= MAX_RANGE_SIZE):
        return False
    expected = compute_digest(_as_bytes(key), secret_value)
    return hmac.compare_digest(expected, _as_bytes(digest))


# =============================================================================
# Validation
# =============================================================================

def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_range_size(range_size: object) -> None:
    if not _is_int(range_size):
        raise InvalidRange(
            f"range_size must be an integer, got {range_size!r}"
        )
    if not (0 <= range_size <= MAX_RANGE_SIZE):  # type: ignore[operator]
        raise InvalidRange(
            f"range_size must be 0-{MAX_RANGE_SIZE}, got {range_size}"
        )


def _check_in_range(value: object, range_size: int, name: str) -> None:
    if not _is_int(value) or not (0 <= value <= range_size):  # type: ignore[operator]
        raise OutOfRange(
            f"{name} must be an integer in 0-{range_size}, got {value!r}"
        )


# =============================================================================
# Commitment
# =============================================================================

@dataclasses.dataclass(frozen=True)
class RoundResult:
    """The outcome of combining both parties' numbers.

    Attributes:
        secret_value: The computer's committed number.
        counterpart_value: The number supplied by the user.
        result: ``(secret_value + counterpart_value) % modulus``.
        modulus: ``range_size + 1``.
    """
    secret_value: int
    counterpart_value: int
    result: int
    modulus: int

    def describe(self) -> str:
        """Human-readable equation for display."""
        return (
            f"{self.counterpart_value} + {self.secret_value} = "
            f"{self.result} (mod {self.modulus})"
        )


@dataclasses.dataclass(frozen=True)
class Commitment:
    """A committed secret value for one round.

    Obtain instances through ``create_commitment()``; a commitment is
    used for a single round and then discarded.

    Attributes:
        range_size: Inclusive upper bound of the value range.
        secret_value: The committed value, ``0 <= secret_value <= range_size``.
        key: Random HMAC key.
        digest: ``HMAC-SHA3-256(key, encode_value(secret_value))``.
    """
    range_size: int
    secret_value: int = dataclasses.field(repr=False)
    key: bytes = dataclasses.field(repr=False)
    digest: bytes

    @property
    def modulus(self) -> int:
        return self.range_size + 1

    @property
    def hmac_hex(self) -> str:
        """The digest as uppercase hex text, safe to show before the reveal."""
        return self.digest.hex().upper()

    @property
    def key_hex(self) -> str:
        """The key as uppercase hex text; show only after ``combine``."""
        return self.key.hex().upper()

    def reveal_digest(self) -> bytes:
        """Return the digest to publish before the counterpart chooses."""
        return self.digest

    def combine(self, counterpart_value: int) -> int:
        """Combine the secret with the counterpart's number.

        Raises:
            OutOfRange: If ``counterpart_value`` is outside
                ``[0, range_size]``.
        """
        _check_in_range(counterpart_value, self.range_size, "counterpart_value")
        return (self.secret_value + counterpart_value) % self.modulus

    def resolve(self, counterpart_value: int) -> RoundResult:
        """Like ``combine()``, but return the full record for display."""
        result = self.combine(counterpart_value)
        return RoundResult(
            secret_value=self.secret_value,
            counterpart_value=counterpart_value,
            result=result,
            modulus=self.modulus,
        )

    def reveal_secret_and_key(self) -> tuple[int, bytes]:
        """Return the secret and key so the digest can be checked."""
        return self.secret_value, self.key

    def verify(self) -> bool:
        """Recompute the digest from the secret and key."""
        return verify_commitment(self.digest, self.secret_value, self.key)


def create_commitment(range_size: int) -> Commitment:
    """Draw a fresh secret in ``[0, range_size]`` and commit to it.

    The range is validated before any random material is drawn.

    Args:
        range_size: Inclusive upper bound; 0 yields a secret of 0.

    Returns:
        A new Commitment with a freshly drawn secret and key.

    Raises:
        InvalidRange: If ``range_size`` is not an integer in
            ``[0, MAX_RANGE_SIZE]``.
        EntropyUnavailable: If the secure random source fails.
    """
    _check_range_size(range_size)
    try:
        secret_value = secrets.randbelow(range_size + 1)
        key = secrets.token_bytes(KEY_SIZE_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyUnavailable(
            f"Secure random source failed: {exc}"
        ) from exc
    return Commitment(
        range_size=range_size,
        secret_value=secret_value,
        key=key,
        digest=compute_digest(key, secret_value),
    )


def commitment_from_secret(
    range_size: int, secret_value: int, key: bytes,
) -> Commitment:
    """Rebuild a commitment from known secret material.

    Used to replay a published round or to script a round with a fixed
    secret.

    Raises:
        InvalidRange: If ``range_size`` is invalid.
        OutOfRange: If ``secret_value`` is outside ``[0, range_size]``.
        ValueError: If ``key`` is not ``KEY_SIZE_BYTES`` long.
    """
    _check_range_size(range_size)
    _check_in_range(secret_value, range_size, "secret_value")
    key = bytes(key)
    if len(key) != KEY_SIZE_BYTES:
        raise ValueError(
            f"key must be {KEY_SIZE_BYTES} bytes, got {len(key)}"
        )
    return Commitment(
        range_size=range_size,
        secret_value=secret_value,
        key=key,
        digest=compute_digest(key, secret_value),
    )
