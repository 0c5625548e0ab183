# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# batch.py

"""
Randomized batch verification of Groth16 proofs under one verifying key.

For proofs `(A_i, B_i, C_i)` with input commitments `vk_x_i` and non-zero
challenges `r_i`, the N individual equations are folded into

    prod_i e(r_i*A_i, B_i)
        * e(-(sum r_i)*alpha, beta)
        * e(-sum r_i*vk_x_i, gamma)
        * e(-sum r_i*C_i, delta) == 1

which costs N + 3 Miller loops and one final exponentiation. If any single
proof is invalid the folded check passes with probability at most 1/r over
the choice of challenges.

Challenges are derived from a hash of the whole batch, so they are fixed
only after every proof and input is fixed, and verification stays
reproducible.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from snark_verifier.abi import decode_proofs, decode_public_inputs, encode_words
from snark_verifier.bn254 import invert, linear_combination, scale
from snark_verifier.constants import BATCH_DOMAIN_TAG, MAX_BATCH_SIZE
from snark_verifier.errors import (
    BatchTooLarge,
    EmptyBatch,
    InputLengthMismatch,
    InvalidInput,
)
from snark_verifier.field import Fr, curve_order
from snark_verifier.groth16 import Proof, VerifyingKey, public_scalars, to_uint
from snark_verifier.hashing import to_scalar, transcript
from snark_verifier.pairing import pairing_check

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPayload:
    """Decoded proofs, their public inputs and one challenge per proof."""

    proofs: tuple[Proof, ...]
    public_inputs: tuple[tuple[int, ...], ...]
    challenges: tuple[Fr, ...]

    def __len__(self) -> int:
        return len(self.proofs)


def _check_size(count: int, max_batch_size: int) -> None:
    if count == 0:
        raise EmptyBatch("a batch must contain at least one proof")
    if count > max_batch_size:
        raise BatchTooLarge(f"batch of {count} proofs exceeds the limit of {max_batch_size}")


def derive_challenges(
    proofs: Sequence[Proof], public_inputs: Sequence[Sequence[int]]
) -> list[Fr]:
    """
    Derive one non-zero challenge per proof from the batch transcript.

    The transcript covers every proof and every input vector in order, so
    reordering, dropping or duplicating an entry changes all challenges.

    Args:
        proofs: The batch proofs.
        public_inputs: The matching input vectors.

    Returns:
        list[Fr]: Challenges in `[1, r)`.
    """
    chunks = []
    for proof, inputs in zip(proofs, public_inputs, strict=True):
        chunks.append(proof.to_bytes())
        chunks.append(encode_words([to_uint(v) for v in inputs]))
    seed = bytes.fromhex(transcript(BATCH_DOMAIN_TAG, *chunks))

    challenges = []
    for i in range(len(proofs)):
        counter = 0
        while True:
            r = to_scalar(
                transcript(BATCH_DOMAIN_TAG, seed, i.to_bytes(8, "big"), counter.to_bytes(8, "big"))
            )
            if r.n != 0:
                break
            counter += 1
        challenges.append(r)
    return challenges


def _check_challenges(challenges: Sequence[int | Fr], count: int) -> list[int]:
    if len(challenges) != count:
        raise InputLengthMismatch(f"got {len(challenges)} challenges for {count} proofs")
    values = []
    for i, c in enumerate(challenges):
        v = c.n if isinstance(c, Fr) else int(c)
        if v <= 0 or v >= curve_order:
            raise InvalidInput(f"challenge {i} must be in [1, r), got {v}")
        values.append(v)
    return values


def verify_batch(
    proofs: Sequence[Proof],
    public_inputs: Sequence[Sequence[int | str | Fr]],
    vk: VerifyingKey,
    challenges: Sequence[int | Fr] | None = None,
    max_batch_size: int = MAX_BATCH_SIZE,
) -> bool:
    """
    Verify many proofs with a single aggregated pairing check.

    Args:
        proofs: Decoded proofs; duplicates are allowed and each one counts.
        public_inputs: One input vector per proof.
        vk: The shared verifying key.
        challenges: Optional caller-chosen non-zero scalars, one per proof.
            Derived from the batch transcript when omitted.
        max_batch_size: Upper bound on the number of proofs.

    Returns:
        bool: True iff the aggregated equation holds.

    Raises:
        EmptyBatch: If there are no proofs.
        BatchTooLarge: If there are more than `max_batch_size` proofs.
        InputLengthMismatch: If the counts of proofs, inputs and challenges differ
            or an input vector has the wrong arity.
        InvalidPublicInput: If an input lies outside the scalar field.
        InvalidInput: If a supplied challenge is zero or out of range.
    """
    n = len(proofs)
    _check_size(n, max_batch_size)
    if len(public_inputs) != n:
        raise InputLengthMismatch(f"got {len(public_inputs)} input vectors for {n} proofs")

    scalars = [public_scalars(inputs, vk) for inputs in public_inputs]
    if challenges is None:
        challenges = derive_challenges(proofs, scalars)
    r = _check_challenges(challenges, n)

    # sum_i r_i * vk_x_i folded into one combination over the IC points
    ic_weights = [sum(r) % curve_order]
    for j in range(vk.input_count):
        ic_weights.append(sum(r_i * s[j] for r_i, s in zip(r, scalars)) % curve_order)

    vk_x_sum = linear_combination(vk.ic, ic_weights)
    c_sum = linear_combination([p.c for p in proofs], r)
    alpha_sum = scale(vk.alpha, ic_weights[0])

    g1_points = [scale(p.a, r_i) for p, r_i in zip(proofs, r)]
    g1_points += [invert(alpha_sum), invert(vk_x_sum), invert(c_sum)]
    g2_points = [p.b for p in proofs] + [vk.beta, vk.gamma, vk.delta]

    ok = pairing_check(g1_points, g2_points, validate=False)
    if ok:
        logger.debug("batch of %d proofs verified", n)
    else:
        logger.warning("batch of %d proofs failed verification", n)
    return ok


def decode_batch(
    publics_data: bytes,
    proofs_data: bytes,
    vk: VerifyingKey,
    max_batch_size: int = MAX_BATCH_SIZE,
) -> BatchPayload:
    """
    Decode ABI-encoded public inputs and proofs into a `BatchPayload`.

    Sizes are checked on the raw records before any point is built, so an
    oversized batch is refused without curve arithmetic.

    Args:
        publics_data: ABI `uint256[k][]` with `k = vk.input_count`.
        proofs_data: ABI `uint256[8][]`.
        vk: The verifying key fixing the input arity.
        max_batch_size: Upper bound on the number of proofs.

    Returns:
        BatchPayload: Validated proofs, inputs and derived challenges.

    Raises:
        MalformedEncoding: On any structural problem in either section.
        EmptyBatch, BatchTooLarge, InputLengthMismatch: On count problems.
        InvalidPoint: If a proof point is invalid.
        InvalidPublicInput: If an input lies outside the scalar field.
    """
    publics = decode_public_inputs(publics_data, vk.input_count)
    records = decode_proofs(proofs_data)
    _check_size(len(records), max_batch_size)
    if len(publics) != len(records):
        raise InputLengthMismatch(
            f"payload carries {len(records)} proofs but {len(publics)} input vectors"
        )

    proofs = tuple(Proof.from_words(words) for words in records)
    inputs = tuple(tuple(public_scalars(v, vk)) for v in publics)
    return BatchPayload(
        proofs=proofs,
        public_inputs=inputs,
        challenges=tuple(derive_challenges(proofs, inputs)),
    )


def verify_encoded_batch(
    publics_data: bytes,
    proofs_data: bytes,
    vk: VerifyingKey,
    max_batch_size: int = MAX_BATCH_SIZE,
) -> bool:
    """Decode a batch and run `verify_batch` on it."""
    payload = decode_batch(publics_data, proofs_data, vk, max_batch_size)
    return verify_batch(
        payload.proofs,
        payload.public_inputs,
        vk,
        challenges=payload.challenges,
        max_batch_size=max_batch_size,
    )
