# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# verifier.py

"""
Contract-style entry points bound to one immutable verifying key.

    verifier = Verifier.from_file("vk.json")
    verifier.verify_proof(a, b, c, inputs)          # one proof
    verifier.verify(publics_bytes, proofs_bytes)    # ABI-encoded batch
    verifier.verify_payload(framed_bytes)           # both sections in one frame

A `Verifier` holds no mutable state, so one instance can serve any number
of threads. Swapping keys means building a new instance.
"""

import logging
from pathlib import Path
from typing import Sequence

from snark_verifier import batch, groth16
from snark_verifier.abi import hex_to_bytes, split_payload
from snark_verifier.constants import MAX_BATCH_SIZE
from snark_verifier.groth16 import Proof, VerifyingKey
from snark_verifier.keys import load_verifying_key

logger = logging.getLogger(__name__)


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return hex_to_bytes(data)
    return bytes(data)


class Verifier:
    __slots__ = ("_vk", "_max_batch_size")

    def __init__(self, vk: VerifyingKey, max_batch_size: int = MAX_BATCH_SIZE):
        if max_batch_size < 1:
            raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")
        self._vk = vk
        self._max_batch_size = max_batch_size

    @classmethod
    def from_file(cls, path: str | Path, max_batch_size: int = MAX_BATCH_SIZE) -> "Verifier":
        return cls(load_verifying_key(path), max_batch_size)

    @property
    def verifying_key(self) -> VerifyingKey:
        return self._vk

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def verify_proof(
        self,
        a: Sequence[int | str],
        b: Sequence[Sequence[int | str]],
        c: Sequence[int | str],
        public_inputs: Sequence[int | str],
    ) -> bool:
        """
        Verify one proof given in `verifyProof` calldata shape.

        Args:
            a: `[x, y]` of A.
            b: `[[x.c1, x.c0], [y.c1, y.c0]]` of B.
            c: `[x, y]` of C.
            public_inputs: Exactly `input_count` integers (or decimal/hex strings).

        Returns:
            bool: Whether the proof is valid.

        Raises:
            MalformedEncoding, InvalidPoint: If the proof cannot be decoded.
            InputLengthMismatch, InvalidPublicInput: If the inputs are unusable.
        """
        proof = Proof.from_calldata(a, b, c)
        return groth16.verify(proof, public_inputs, self._vk)

    def verify(self, publics_data: bytes | str, proofs_data: bytes | str) -> bool:
        """
        Verify an ABI-encoded batch: `uint256[k][]` inputs and `uint256[8][]` proofs.

        Hex strings (with or without `0x`) are accepted in place of bytes.
        """
        publics_data = _as_bytes(publics_data)
        proofs_data = _as_bytes(proofs_data)
        logger.debug(
            "verifying batch: %d bytes of inputs, %d bytes of proofs",
            len(publics_data),
            len(proofs_data),
        )
        return batch.verify_encoded_batch(
            publics_data, proofs_data, self._vk, self._max_batch_size
        )

    def verify_payload(self, payload: bytes | str) -> bool:
        """
        Verify a framed request `u32_be(len(publics)) || publics || proofs`.
        """
        publics_data, proofs_data = split_payload(_as_bytes(payload))
        return self.verify(publics_data, proofs_data)
