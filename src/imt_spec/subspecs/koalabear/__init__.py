"""Specifications for the KoalaBear finite field."""

from .field import P_BITS, Fp, P, int_to_base_p

__all__ = [
    "P",
    "P_BITS",
    "Fp",
    "int_to_base_p",
]
