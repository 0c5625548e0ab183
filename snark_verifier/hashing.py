# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import hashlib
import binascii

from snark_verifier.constants import H2S_DOMAIN_TAG
from snark_verifier.field import Fr, reduce_fr


def generate(input_string: str) -> str:
    """
    Calculates the blake2b_256 hash digest of the input hex string.

    Args:
        input_string (str): Hex-encoded bytes to be hashed.

    Returns:
        str: The blake2b_256 hash digest as a hex string.
    """
    hash_digest = hashlib.blake2b(
        binascii.unhexlify(input_string), digest_size=32
    ).hexdigest()

    return hash_digest


def transcript(domain_tag: str, *chunks: bytes) -> str:
    """
    Hash a domain-separated transcript.

    Each chunk is length-prefixed (8 bytes, big-endian) so that distinct
    chunk boundaries can never produce the same preimage.

    Args:
        domain_tag: Hex-encoded domain tag, see `constants`.
        chunks: Transcript entries in order.

    Returns:
        str: Hex digest of `domain_tag || len(c0) || c0 || len(c1) || c1 ...`.
    """
    body = b"".join(len(c).to_bytes(8, "big") + c for c in chunks)
    return generate(domain_tag + body.hex())


def to_scalar(hash_digest: str) -> Fr:
    """
    Map a hex digest into the scalar field.

        s = H(H2S_DOMAIN_TAG || digest) mod r
    """
    return reduce_fr(int(generate(H2S_DOMAIN_TAG + hash_digest), 16))
