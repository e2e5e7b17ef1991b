"""Specifications for the BN254 scalar field."""

from .field import R_BITS, R_BYTES, Fr, R

__all__ = [
    "R",
    "R_BITS",
    "R_BYTES",
    "Fr",
]
