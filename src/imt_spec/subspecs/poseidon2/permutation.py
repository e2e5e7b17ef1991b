"""
A minimal Python specification for the Poseidon2 permutation over KoalaBear.

The design is based on the paper "Poseidon2: A Faster Version of the Poseidon
Hash Function" (https://eprint.iacr.org/2023/323).
"""

from itertools import chain
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..koalabear.field import Fp
from .constants import (
    ROUND_CONSTANTS_16,
    ROUND_CONSTANTS_24,
)

# =================================================================
# Poseidon2 Parameter Definitions
# =================================================================

S_BOX_DEGREE = 3
"""
The S-box exponent `d`.

For fields where `gcd(d, p-1) = 1`, `x -> x^d` is a permutation.

For KoalaBear, `d=3` is chosen for its low degree.
"""


class Poseidon2Params(BaseModel):
    """Parameters for a specific Poseidon2 instance."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width: int = Field(gt=0, multiple_of=4, description="The size of the state (t).")
    rounds_f: int = Field(gt=0, multiple_of=2, description="Total number of 'full' rounds.")
    rounds_p: int = Field(ge=0, description="Total number of 'partial' rounds.")
    internal_diag_vectors: List[Fp] = Field(
        min_length=1,
        description="Diagonal vectors for the efficient internal linear layer matrix (M_I).",
    )
    round_constants: List[Fp] = Field(
        min_length=1,
        description="The list of pre-computed constants for all rounds.",
    )

    @model_validator(mode="after")
    def check_lengths(self) -> "Poseidon2Params":
        """Ensures vector lengths match the configuration."""
        if len(self.internal_diag_vectors) != self.width:
            raise ValueError("Length of internal_diag_vectors must equal width.")

        expected_constants = (self.rounds_f * self.width) + self.rounds_p
        if len(self.round_constants) != expected_constants:
            raise ValueError("Incorrect number of round constants provided.")

        return self


# Parameters for WIDTH = 16
PARAMS_16 = Poseidon2Params(
    width=16,
    rounds_f=8,
    rounds_p=20,
    internal_diag_vectors=[
        Fp(value=-2),
        Fp(value=1),
        Fp(value=2),
        Fp(value=1) / Fp(value=2),
        Fp(value=3),
        Fp(value=4),
        Fp(value=-1) / Fp(value=2),
        Fp(value=-3),
        Fp(value=-4),
        Fp(value=1) / Fp(value=2**8),
        Fp(value=1) / Fp(value=8),
        Fp(value=1) / Fp(value=2**24),
        Fp(value=-1) / Fp(value=2**8),
        Fp(value=-1) / Fp(value=8),
        Fp(value=-1) / Fp(value=16),
        Fp(value=-1) / Fp(value=2**24),
    ],
    round_constants=ROUND_CONSTANTS_16,
)

# Parameters for WIDTH = 24
PARAMS_24 = Poseidon2Params(
    width=24,
    rounds_f=8,
    rounds_p=23,
    internal_diag_vectors=[
        Fp(value=-2),
        Fp(value=1),
        Fp(value=2),
        Fp(value=1) / Fp(value=2),
        Fp(value=3),
        Fp(value=4),
        Fp(value=-1) / Fp(value=2),
        Fp(value=-3),
        Fp(value=-4),
        Fp(value=1) / Fp(value=2**8),
        Fp(value=1) / Fp(value=4),
        Fp(value=1) / Fp(value=8),
        Fp(value=1) / Fp(value=16),
        Fp(value=1) / Fp(value=32),
        Fp(value=1) / Fp(value=64),
        Fp(value=1) / Fp(value=2**24),
        Fp(value=-1) / Fp(value=2**8),
        Fp(value=-1) / Fp(value=8),
        Fp(value=-1) / Fp(value=16),
        Fp(value=-1) / Fp(value=32),
        Fp(value=-1) / Fp(value=64),
        Fp(value=-1) / Fp(value=2**7),
        Fp(value=-1) / Fp(value=2**9),
        Fp(value=-1) / Fp(value=2**24),
    ],
    round_constants=ROUND_CONSTANTS_24,
)

# Base 4x4 matrix, used in the external linear layer.
M4_MATRIX = [
    [Fp(value=2), Fp(value=3), Fp(value=1), Fp(value=1)],
    [Fp(value=1), Fp(value=2), Fp(value=3), Fp(value=1)],
    [Fp(value=1), Fp(value=1), Fp(value=2), Fp(value=3)],
    [Fp(value=3), Fp(value=1), Fp(value=1), Fp(value=2)],
]


def _apply_m4(chunk: List[Fp]) -> List[Fp]:
    """Applies the 4x4 M4 matrix to a 4-element chunk of the state."""
    return [sum((row[j] * chunk[j] for j in range(4)), Fp(value=0)) for row in M4_MATRIX]


def external_linear_layer(state: List[Fp], width: int) -> List[Fp]:
    """
    Applies the external linear layer (M_E).

    Used in the full rounds. The state is split into 4-element chunks, each
    chunk is multiplied by M4, and then the circulant `circ(2*M4, M4, ..., M4)`
    structure is completed by adding, to every element, the sum of the elements
    at the same offset in all chunks (Appendix B of the paper).

    Args:
        state: The current state vector.
        width: The width `t` of the state.

    Returns:
        The state vector after applying the external linear layer.
    """
    state_after_m4 = list(
        chain.from_iterable(_apply_m4(state[i : i + 4]) for i in range(0, width, 4))
    )

    # sums[k] = state[k] + state[4 + k] + state[8 + k] + ... up to width
    sums = [sum((state_after_m4[j + k] for j in range(0, width, 4)), Fp(value=0)) for k in range(4)]

    return [s + sums[i % 4] for i, s in enumerate(state_after_m4)]


def internal_linear_layer(state: List[Fp], params: Poseidon2Params) -> List[Fp]:
    """
    Applies the internal linear layer (M_I).

    The matrix is M_I = J + D with J the all-ones matrix and D diagonal, so
    `M_I * s = sum(s) + D * s` and the product costs O(t) instead of O(t^2).

    Args:
        state: The current state vector.
        params: The Poseidon2Params object containing the diagonal vectors.

    Returns:
        The state vector after applying the internal linear layer.
    """
    total = sum(state, Fp(value=0))
    return [total + d * s for d, s in zip(params.internal_diag_vectors, state, strict=True)]


def permute(state: List[Fp], params: Poseidon2Params) -> List[Fp]:
    """
    Performs the full Poseidon2 permutation on the given state.

    The permutation follows the structure:
    Initial Layer -> Full Rounds -> Partial Rounds -> Full Rounds

    Args:
        state: A list of Fp elements representing the current state.
        params: The object defining the permutation's configuration.

    Returns:
        The new state after applying the permutation.

    Raises:
        ValueError: If the state does not have exactly `params.width` elements.
    """
    if len(state) != params.width:
        raise ValueError(f"Input state must have length {params.width}")

    round_constants = params.round_constants
    half_rounds_f = params.rounds_f // 2
    const_idx = 0

    # 1. Initial Linear Layer
    state = external_linear_layer(list(state), params.width)

    # 2. First Half of Full Rounds (R_F / 2)
    for _r in range(half_rounds_f):
        state = [s + round_constants[const_idx + i] for i, s in enumerate(state)]
        const_idx += params.width
        state = [s**S_BOX_DEGREE for s in state]
        state = external_linear_layer(state, params.width)

    # 3. Partial Rounds (R_P)
    for _r in range(params.rounds_p):
        # Only the first element goes through the S-box.
        state[0] += round_constants[const_idx]
        const_idx += 1
        state[0] = state[0] ** S_BOX_DEGREE
        state = internal_linear_layer(state, params)

    # 4. Second Half of Full Rounds (R_F / 2)
    for _r in range(half_rounds_f):
        state = [s + round_constants[const_idx + i] for i, s in enumerate(state)]
        const_idx += params.width
        state = [s**S_BOX_DEGREE for s in state]
        state = external_linear_layer(state, params.width)

    return state


def compress(input_vec: List[Fp], params: Poseidon2Params, output_len: int) -> List[Fp]:
    """
    Poseidon2 in compression mode: `Truncate(Permute(padded) + padded)`.

    The input is zero-padded to the state width, permuted, fed forward by adding
    the padded input back element-wise, and truncated to `output_len`.

    Args:
        input_vec: The field elements to compress, at most `params.width` of them.
        params: The permutation instance.
        output_len: The number of field elements in the output.

    Returns:
        A list of `output_len` field elements.

    Raises:
        ValueError: If the input is longer than the state or shorter than the output.
    """
    if len(input_vec) > params.width:
        raise ValueError(f"Input vector exceeds the state width {params.width}.")
    if len(input_vec) < output_len:
        raise ValueError("Input vector is too short for requested output length.")

    padded_input = [Fp(value=0)] * params.width
    padded_input[: len(input_vec)] = input_vec

    permuted_state = permute(padded_input, params)

    final_state = [p + i for p, i in zip(permuted_state, padded_input, strict=True)]
    return final_state[:output_len]
