# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# field.py

"""
Base and scalar field arithmetic for BN254.

The base field Fp is the coordinate field of G1 (and, through Fp2, of G2).
The scalar field Fr has the prime order of both groups; public inputs and
batch challenges live there.

Raw integers coming off the wire are never silently reduced: a value at or
above the modulus is rejected, since wrapping would let two different
encodings stand for the same element.
"""

import secrets

from py_ecc.fields import FQ as PrimeFieldElement
from py_ecc.optimized_bn128 import FQ, FQ2, curve_order, field_modulus

from snark_verifier.errors import DivisionByZero, InvalidFieldElement


class Fr(PrimeFieldElement):
    """Element of the BN254 scalar field."""

    field_modulus = curve_order

    def inverse(self) -> "Fr":
        return inverse(self)


def _check_range(value: int, modulus: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidFieldElement(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value >= modulus:
        raise InvalidFieldElement(f"{name} out of range: {value} not in [0, {modulus})")
    return value


def to_fq(value: int) -> FQ:
    """
    Build a base-field element from a canonical integer.

    Args:
        value: Integer in `[0, p)`.

    Returns:
        The corresponding `FQ` element.

    Raises:
        InvalidFieldElement: If `value` is negative or not below `p`.
    """
    return FQ(_check_range(value, field_modulus, "base field element"))


def to_fq2(c0: int, c1: int) -> FQ2:
    """Build `c0 + c1*u` in Fp2 from two canonical integers."""
    _check_range(c0, field_modulus, "Fp2 real part")
    _check_range(c1, field_modulus, "Fp2 imaginary part")
    return FQ2([c0, c1])


def to_fr(value: int) -> Fr:
    """
    Build a scalar-field element from a canonical integer.

    Raises:
        InvalidFieldElement: If `value` is negative or not below `r`.
    """
    return Fr(_check_range(value, curve_order, "scalar"))


def reduce_fr(value: int) -> Fr:
    """Reduce an arbitrary integer into Fr. Only for hash outputs, never for wire data."""
    return Fr(value % curve_order)


def inverse(element: PrimeFieldElement) -> PrimeFieldElement:
    """
    Multiplicative inverse in the element's own prime field.

    py_ecc maps zero to zero when inverting; that is never what a verifier
    wants, so zero is refused here.

    Raises:
        DivisionByZero: If `element` is zero.
    """
    if element.n == 0:
        raise DivisionByZero("zero has no multiplicative inverse")
    return type(element)(1) / element


def random_scalar() -> Fr:
    """
    Sample a uniformly random non-zero scalar with the `secrets` module.

    Returns:
        Fr: A random element of `[1, r)`.
    """
    return Fr(secrets.randbelow(curve_order - 1) + 1)


# moduli
field_modulus = field_modulus
curve_order = curve_order
