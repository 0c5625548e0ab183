# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# pairing.py

"""
Optimal ate pairing on BN254 and multi-pairing equality checks.

`py_ecc` takes its arguments as `pairing(Q, P)` with Q in G2; this module
keeps the mathematical order `e(P, Q)` with P in G1.

A product of pairings is evaluated as a product of Miller loop outputs
followed by a single final exponentiation, so an n-pairing check costs n
Miller loops and one exponentiation instead of n of each.
"""

import logging
from typing import Sequence

from py_ecc.optimized_bn128 import FQ12, final_exponentiate, is_inf, pairing

from snark_verifier.bn254 import G1Point, G2Point, validate_g1, validate_g2
from snark_verifier.errors import InvalidInput

logger = logging.getLogger(__name__)

GTElement = FQ12


def pair(p: G1Point, q: G2Point, final_exponentiate_result: bool = True) -> GTElement:
    """
    Compute `e(p, q)`.

    Args:
        p: Point in G1.
        q: Point in G2.
        final_exponentiate_result: When False, return the raw Miller loop value.

    Returns:
        GTElement: The pairing value in Fp12 (identity when either point is infinity).

    Raises:
        PointNotOnCurve, InvalidSubgroup: If an argument is not a valid group element.
    """
    validate_g1(p)
    validate_g2(q)
    return pairing(q, p, final_exponentiate=final_exponentiate_result)


def miller_product(g1_points: Sequence[G1Point], g2_points: Sequence[G2Point]) -> GTElement:
    """
    Multiply the Miller loop outputs of `(g1_points[i], g2_points[i])`.

    Points are assumed validated by the caller. Pairs with an identity
    component contribute the neutral element and are skipped.

    Raises:
        InvalidInput: If the sequences are empty or differ in length.
    """
    if len(g1_points) == 0 or len(g2_points) == 0:
        raise InvalidInput("pairing check needs at least one (G1, G2) pair")
    if len(g1_points) != len(g2_points):
        raise InvalidInput(
            f"pairing check length mismatch: {len(g1_points)} G1 vs {len(g2_points)} G2 points"
        )

    acc = FQ12.one()
    for p, q in zip(g1_points, g2_points):
        if is_inf(p) or is_inf(q):
            continue
        acc *= pairing(q, p, final_exponentiate=False)
    return acc


def pairing_check(
    g1_points: Sequence[G1Point], g2_points: Sequence[G2Point], validate: bool = True
) -> bool:
    """
    Decide whether `prod_i e(g1_points[i], g2_points[i]) == 1` in GT.

    Mirrors the BN254 pairing precompile: every point is validated, the
    product is accumulated without intermediate exponentiations, and a
    mismatch is reported as False rather than raised.

    Args:
        g1_points: Non-empty sequence of G1 points.
        g2_points: Sequence of G2 points of the same length.
        validate: Skip point validation only when every point is already known good.

    Returns:
        bool: True iff the product of pairings is the identity.

    Raises:
        InvalidInput: If the sequences are empty or differ in length.
        PointNotOnCurve, InvalidSubgroup: If any point is invalid.
    """
    if validate:
        for p in g1_points:
            validate_g1(p)
        for q in g2_points:
            validate_g2(q)

    product = miller_product(g1_points, g2_points)
    result = final_exponentiate(product) == FQ12.one()
    logger.debug("pairing check over %d pairs: %s", len(g1_points), result)
    return result


gt_identity = FQ12.one()
