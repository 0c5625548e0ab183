# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# groth16.py

"""
Groth16 proofs, verifying keys and single-proof verification over BN254.

A proof is accepted iff

    e(A, B) == e(alpha, beta) * e(vk_x, gamma) * e(C, delta)

with `vk_x = IC[0] + sum(inputs[i] * IC[i + 1])`. It is evaluated as one
product of four pairings against the identity:

    e(-A, B) * e(alpha, beta) * e(vk_x, gamma) * e(C, delta) == 1
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from snark_verifier.abi import decode_words, encode_words
from snark_verifier.bn254 import (
    G1Point,
    G2Point,
    combine,
    g1_from_affine,
    g1_to_affine,
    g2_from_affine,
    g2_to_affine,
    invert,
    linear_combination,
    validate_g1,
    validate_g2,
)
from snark_verifier.constants import PROOF_WORDS, WORD_SIZE
from snark_verifier.errors import InputLengthMismatch, InvalidPublicInput, MalformedEncoding
from snark_verifier.field import Fr, curve_order
from snark_verifier.pairing import pairing_check

logger = logging.getLogger(__name__)


def g2_words(point: G2Point) -> list[int]:
    """Wire words of a G2 point: `x.c1, x.c0, y.c1, y.c0`."""
    (x0, x1), (y0, y1) = g2_to_affine(point)
    return [x1, x0, y1, y0]


def g2_from_words(words: Sequence[int]) -> G2Point:
    """Inverse of `g2_words`."""
    x1, x0, y1, y0 = words
    return g2_from_affine((x0, x1), (y0, y1))


@dataclass(frozen=True, eq=False)
class Proof:
    """
    A Groth16 proof `(A, B, C)`.

    Points are validated on construction; equality compares the canonical
    affine encoding, so the same proof built along different projective
    paths compares equal.
    """

    a: G1Point
    b: G2Point
    c: G1Point

    def __post_init__(self):
        validate_g1(self.a)
        validate_g2(self.b)
        validate_g1(self.c)

    @classmethod
    def from_words(cls, words: Sequence[int]) -> "Proof":
        """
        Build a proof from its 8-word wire record.

        Raises:
            MalformedEncoding: If the record does not have exactly 8 words
                or a coordinate is not below the field prime.
            PointNotOnCurve, InvalidSubgroup: If a point is invalid.
        """
        if len(words) != PROOF_WORDS:
            raise MalformedEncoding(f"proof record has {len(words)} words, expected {PROOF_WORDS}")
        return cls(
            a=g1_from_affine(words[0], words[1]),
            b=g2_from_words(words[2:6]),
            c=g1_from_affine(words[6], words[7]),
        )

    @classmethod
    def from_calldata(
        cls,
        a: Sequence[int | str],
        b: Sequence[Sequence[int | str]],
        c: Sequence[int | str],
    ) -> "Proof":
        """
        Build a proof from the `verifyProof(a, b, c, inputs)` argument shape.

        Args:
            a: `[x, y]` of A.
            b: `[[x.c1, x.c0], [y.c1, y.c0]]` of B, imaginary part first.
            c: `[x, y]` of C.
        """
        if len(a) != 2 or len(c) != 2 or len(b) != 2 or any(len(limbs) != 2 for limbs in b):
            raise MalformedEncoding("proof calldata must be a[2], b[2][2], c[2]")
        words = [a[0], a[1], b[0][0], b[0][1], b[1][0], b[1][1], c[0], c[1]]
        return cls.from_words([to_uint(w) for w in words])

    @classmethod
    def from_bytes(cls, data: bytes) -> "Proof":
        if len(data) != PROOF_WORDS * WORD_SIZE:
            raise MalformedEncoding(
                f"proof must be {PROOF_WORDS * WORD_SIZE} bytes, got {len(data)}"
            )
        return cls.from_words(decode_words(data))

    def to_words(self) -> list[int]:
        return [*g1_to_affine(self.a), *g2_words(self.b), *g1_to_affine(self.c)]

    def to_bytes(self) -> bytes:
        return encode_words(self.to_words())

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return self.to_words() == other.to_words()

    def __hash__(self):
        return hash(tuple(self.to_words()))


@dataclass(frozen=True, eq=False)
class VerifyingKey:
    """
    A Groth16 verifying key.

    `ic` holds the constant term first, then one G1 point per public input.
    The key is immutable once built and safe to share between threads.
    """

    alpha: G1Point
    beta: G2Point
    gamma: G2Point
    delta: G2Point
    ic: tuple[G1Point, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "ic", tuple(self.ic))
        if len(self.ic) == 0:
            raise InputLengthMismatch("verifying key needs at least the constant IC term")
        validate_g1(self.alpha)
        validate_g2(self.beta)
        validate_g2(self.gamma)
        validate_g2(self.delta)
        for point in self.ic:
            validate_g1(point)

    @property
    def input_count(self) -> int:
        return len(self.ic) - 1

    def to_words(self) -> list[int]:
        words = [*g1_to_affine(self.alpha)]
        for point in (self.beta, self.gamma, self.delta):
            words.extend(g2_words(point))
        for point in self.ic:
            words.extend(g1_to_affine(point))
        return words

    def __eq__(self, other):
        if not isinstance(other, VerifyingKey):
            return NotImplemented
        return self.to_words() == other.to_words()

    def __hash__(self):
        return hash(tuple(self.to_words()))


def to_uint(value: int | str) -> int:
    """Parse an integer given as int, decimal string or `0x` hex string."""
    if isinstance(value, bool):
        raise MalformedEncoding("booleans are not integers here")
    if isinstance(value, int):
        return value
    s = str(value).strip().lower()
    try:
        if s.startswith("0x"):
            return int(s, 16)
        return int(s)
    except ValueError as e:
        raise MalformedEncoding(f"not an integer: {value!r}") from e


def public_scalars(public_inputs: Sequence[int | str | Fr], vk: VerifyingKey) -> list[int]:
    """
    Check arity and range of public inputs.

    Raises:
        InputLengthMismatch: If the count differs from `vk.input_count`.
        InvalidPublicInput: If a value is not in `[0, r)`.
    """
    if len(public_inputs) != vk.input_count:
        raise InputLengthMismatch(
            f"got {len(public_inputs)} public inputs, verifying key expects {vk.input_count}"
        )
    scalars = []
    for i, value in enumerate(public_inputs):
        s = value.n if isinstance(value, Fr) else to_uint(value)
        if s < 0 or s >= curve_order:
            raise InvalidPublicInput(f"public input {i} = {s} is outside the scalar field")
        scalars.append(s)
    return scalars


def prepare_inputs(vk: VerifyingKey, public_inputs: Sequence[int | str | Fr]) -> G1Point:
    """
    Compute `vk_x = IC[0] + sum(inputs[i] * IC[i + 1])`.

    Args:
        vk: The verifying key.
        public_inputs: One scalar per public input of the circuit.

    Returns:
        G1Point: The input commitment `vk_x`.

    Raises:
        InputLengthMismatch: On wrong arity.
        InvalidPublicInput: On a value outside the scalar field.
    """
    scalars = public_scalars(public_inputs, vk)
    return combine(vk.ic[0], linear_combination(vk.ic[1:], scalars))


def verify(proof: Proof, public_inputs: Sequence[int | str | Fr], vk: VerifyingKey) -> bool:
    """
    Verify a single Groth16 proof.

    Args:
        proof: A decoded, validated proof.
        public_inputs: Public inputs in circuit order, without the leading one.
        vk: The verifying key.

    Returns:
        bool: True iff the pairing equation holds.

    Raises:
        InputLengthMismatch, InvalidPublicInput: If the public inputs are unusable.
    """
    vk_x = prepare_inputs(vk, public_inputs)
    ok = pairing_check(
        [invert(proof.a), vk.alpha, vk_x, proof.c],
        [proof.b, vk.beta, vk.gamma, vk.delta],
        validate=False,
    )
    logger.debug("groth16 proof verification: %s", ok)
    return ok
