"""Walk through one commit-reveal round and check it independently.

Run with the HMAC, secret and key printed by ``play.py`` to check a
round from a real game:

    python examples/verify_commitment.py HMAC SECRET KEY
"""

import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import fair_dice
import fair_random

_C = fair_dice._Colors


def _report(ok: bool) -> None:
    if ok:
        print(f"{_C.GREEN}HMAC matches: the value was fixed in advance.{_C.RESET}")
    else:
        print(f"{_C.RED}HMAC mismatch: the revealed value was changed.{_C.RESET}")


def main() -> None:
    if len(sys.argv) == 4:
        digest, secret_text, key = sys.argv[1:]
        try:
            ok = fair_random.verify_commitment(digest, int(secret_text), key)
        except ValueError as exc:
            print(f"{_C.RED}Error: {exc}{_C.RESET}")
            print(__doc__)
            sys.exit(1)
        _report(ok)
        return

    commitment = fair_random.create_commitment(5)
    print(f"Published HMAC: {commitment.hmac_hex}")

    user_number = 3
    result = commitment.resolve(user_number)
    print(f"User adds {user_number}: {result.describe()}")

    secret_value, key = commitment.reveal_secret_and_key()
    print(f"Revealed secret {secret_value}, key {key.hex().upper()}")
    _report(fair_random.verify_commitment(commitment.hmac_hex, secret_value, key))

    tampered = (secret_value + 1) % commitment.modulus
    print(f"Claiming {tampered} instead:")
    _report(fair_random.verify_commitment(commitment.hmac_hex, tampered, key))


if __name__ == "__main__":
    main()
