"""
Round constants for the Poseidon2 permutation over KoalaBear.

The constants are derived deterministically ("nothing up my sleeve") by
rejection-sampling a SHAKE-256 stream seeded with the instance parameters.
Any party can regenerate them from the seed string alone.
"""

import hashlib

from ..koalabear.field import Fp, P

DOMAIN_TAG: str = "imt-spec/poseidon2/koalabear"
"""Prefix of every seed used to derive round constants."""


def derive_round_constants(width: int, rounds_f: int, rounds_p: int) -> list[Fp]:
    """
    Derives the flat list of round constants for one Poseidon2 instance.

    The layout matches the order in which the permutation consumes them:
    `width` constants per full round and one constant per partial round,
    i.e. `rounds_f * width + rounds_p` elements in total.

    Each candidate is 4 bytes of the SHAKE-256 stream (little-endian), masked to
    31 bits and accepted only if it is below P, which keeps the constants uniform.

    Args:
        width: The state width `t` of the permutation.
        rounds_f: Total number of full rounds.
        rounds_p: Total number of partial rounds.

    Returns:
        The round constants as field elements.
    """
    count = rounds_f * width + rounds_p
    seed = f"{DOMAIN_TAG}/t={width}/rf={rounds_f}/rp={rounds_p}".encode()

    # A candidate is rejected with probability 2^24 / 2^31, so twice the
    # minimum stream length almost always suffices on the first pass.
    stream_len = 8 * count
    constants: list[Fp] = []
    while len(constants) < count:
        stream = hashlib.shake_256(seed).digest(stream_len)
        constants = []
        for i in range(0, stream_len, 4):
            candidate = int.from_bytes(stream[i : i + 4], byteorder="little") & 0x7FFFFFFF
            if candidate < P:
                constants.append(Fp(value=candidate))
                if len(constants) == count:
                    break
        stream_len *= 2

    return constants


ROUND_CONSTANTS_16: list[Fp] = derive_round_constants(width=16, rounds_f=8, rounds_p=20)
"""Round constants for the width-16 instance (8 full, 20 partial rounds)."""

ROUND_CONSTANTS_24: list[Fp] = derive_round_constants(width=24, rounds_f=8, rounds_p=23)
"""Round constants for the width-24 instance (8 full, 23 partial rounds)."""
