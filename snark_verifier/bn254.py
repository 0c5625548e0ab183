# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# bn254.py

"""
G1 and G2 point handling on BN254 on top of `py_ecc.optimized_bn128`.

Points are py_ecc's projective triples `(x, y, z)`; the identity has `z == 0`.
On the wire the identity is written as all-zero affine coordinates, which
is what the Ethereum precompiles expect.

G1 has cofactor 1, so lying on the curve is enough. G2 lives on a twist
whose group order has a large cofactor, so every decoded G2 point must also
pass `[r]Q == O`.
"""

from typing import Iterable, Sequence

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    G1,
    G2,
    Z1,
    Z2,
    add,
    b,
    b2,
    curve_order,
    double,
    eq,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    normalize,
)

from snark_verifier.errors import PointNotOnCurve, InvalidSubgroup
from snark_verifier.field import Fr, to_fq, to_fq2

G1Point = tuple[FQ, FQ, FQ]
G2Point = tuple[FQ2, FQ2, FQ2]


def g1_point(scalar: int) -> G1Point:
    """Return `[scalar]G1`."""
    return multiply(G1, int(scalar) % curve_order)


def g2_point(scalar: int) -> G2Point:
    """Return `[scalar]G2`."""
    return multiply(G2, int(scalar) % curve_order)


def is_identity(point: G1Point | G2Point) -> bool:
    return is_inf(point)


def validate_g1(point: G1Point) -> G1Point:
    """
    Check that a G1 point lies on `y^2 = x^3 + 3`.

    Raises:
        PointNotOnCurve: If the curve equation does not hold.
    """
    if not is_on_curve(point, b):
        raise PointNotOnCurve(f"G1 point {g1_to_affine(point, check=False)} is not on the curve")
    return point


def validate_g2(point: G2Point) -> G2Point:
    """
    Check that a G2 point lies on the twist and in the order-`r` subgroup.

    Raises:
        PointNotOnCurve: If the twist equation does not hold.
        InvalidSubgroup: If `[r]Q` is not the identity.
    """
    if not is_on_curve(point, b2):
        raise PointNotOnCurve("G2 point is not on the twisted curve")
    if not is_inf(multiply(point, curve_order)):
        raise InvalidSubgroup("G2 point is not in the order-r subgroup")
    return point


def g1_from_affine(x: int, y: int) -> G1Point:
    """
    Build and validate a G1 point from affine integer coordinates.

    Args:
        x: Affine x coordinate, canonical in `[0, p)`.
        y: Affine y coordinate, canonical in `[0, p)`.

    Returns:
        The projective point; `(0, 0)` maps to the identity.

    Raises:
        InvalidFieldElement: If a coordinate is not below the field prime.
        PointNotOnCurve: If the point is not on the curve.
    """
    fx, fy = to_fq(x), to_fq(y)
    if x == 0 and y == 0:
        return Z1
    return validate_g1((fx, fy, FQ.one()))


def g2_from_affine(x: Sequence[int], y: Sequence[int]) -> G2Point:
    """
    Build and validate a G2 point from affine Fp2 coordinates.

    Args:
        x: `(c0, c1)` of the x coordinate, real part first.
        y: `(c0, c1)` of the y coordinate, real part first.

    Returns:
        The projective point; all-zero coordinates map to the identity.

    Raises:
        InvalidFieldElement: If a limb is not below the field prime.
        PointNotOnCurve: If the point is not on the twist.
        InvalidSubgroup: If the point is outside the prime-order subgroup.
    """
    fx, fy = to_fq2(x[0], x[1]), to_fq2(y[0], y[1])
    if not any((x[0], x[1], y[0], y[1])):
        return Z2
    return validate_g2((fx, fy, FQ2.one()))


def g1_to_affine(point: G1Point, check: bool = True) -> tuple[int, int]:
    """Affine integer coordinates of a G1 point, `(0, 0)` for the identity."""
    if check:
        validate_g1(point)
    if is_inf(point):
        return 0, 0
    x, y = normalize(point)
    return x.n, y.n


def g2_to_affine(point: G2Point) -> tuple[tuple[int, int], tuple[int, int]]:
    """Affine coordinates `((x_c0, x_c1), (y_c0, y_c1))`, all zero for the identity."""
    if is_inf(point):
        return (0, 0), (0, 0)
    x, y = normalize(point)
    return (int(x.coeffs[0]), int(x.coeffs[1])), (int(y.coeffs[0]), int(y.coeffs[1]))


def combine(left: G1Point | G2Point, right: G1Point | G2Point) -> G1Point | G2Point:
    """Group addition."""
    return add(left, right)


def twice(point: G1Point | G2Point) -> G1Point | G2Point:
    if is_inf(point):
        return point
    return double(point)


def invert(point: G1Point | G2Point) -> G1Point | G2Point:
    """Group negation."""
    return neg(point)


def scale(point: G1Point | G2Point, scalar: int | Fr) -> G1Point | G2Point:
    """
    Scalar multiplication `[scalar]point`.

    The scalar is reduced modulo `r`, which is sound because every point
    handled here has already been checked to lie in the order-`r` group.
    """
    return multiply(point, int(scalar) % curve_order)


def equal(left: G1Point | G2Point, right: G1Point | G2Point) -> bool:
    if is_inf(left) or is_inf(right):
        return is_inf(left) and is_inf(right)
    return eq(left, right)


def linear_combination(points: Iterable[G1Point], scalars: Iterable[int | Fr]) -> G1Point:
    """
    Compute `sum(s_i * P_i)` over G1.

    Both iterables must have the same length; the caller checks arity.
    """
    acc = Z1
    for point, scalar in zip(points, scalars, strict=True):
        s = int(scalar) % curve_order
        if s == 0:
            continue
        acc = add(acc, multiply(point, s))
    return acc


# identity elements
g1_identity = Z1
g2_identity = Z2
g1_generator = G1
g2_generator = G2
