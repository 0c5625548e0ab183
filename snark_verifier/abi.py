# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# abi.py

"""
Byte codec for proofs and public inputs.

Everything is built from 32-byte big-endian words. Batches use the Solidity
ABI encoding of a single dynamic array of fixed-size `uint256[k]` records:

    word 0      offset of the array body, always 0x20
    word 1      number of records N
    word 2..    N * k words, record after record

A proof record is 8 words, with Fp2 limbs written imaginary part first as
the Ethereum pairing precompile expects:

    A.x  A.y  B.x.c1  B.x.c0  B.y.c1  B.y.c0  C.x  C.y

Decoding is strict: the offset, the count and the total length must agree
exactly, and nothing is left over.
"""

from typing import Sequence

from snark_verifier.constants import (
    ABI_ARRAY_OFFSET,
    FRAME_PREFIX_SIZE,
    PROOF_WORDS,
    WORD_SIZE,
)
from snark_verifier.errors import InvalidFieldElement, MalformedEncoding

WORD_LIMIT = 1 << (8 * WORD_SIZE)


def hex_to_bytes(h: str) -> bytes:
    """Decode a hex string, with or without a `0x` prefix."""
    h = h.strip().lower()
    if h.startswith("0x"):
        h = h[2:]
    try:
        return bytes.fromhex(h)
    except ValueError as e:
        raise MalformedEncoding(f"invalid hex string: {e}") from e


def encode_word(value: int) -> bytes:
    if value < 0 or value >= WORD_LIMIT:
        raise InvalidFieldElement(f"value does not fit in a {WORD_SIZE}-byte word: {value}")
    return value.to_bytes(WORD_SIZE, "big")


def decode_words(data: bytes) -> list[int]:
    """
    Split `data` into 32-byte big-endian words.

    Raises:
        MalformedEncoding: If the length is not a multiple of the word size.
    """
    if len(data) % WORD_SIZE != 0:
        raise MalformedEncoding(
            f"length {len(data)} is not a multiple of the {WORD_SIZE}-byte word size"
        )
    return [
        int.from_bytes(data[i : i + WORD_SIZE], "big") for i in range(0, len(data), WORD_SIZE)
    ]


def encode_words(values: Sequence[int]) -> bytes:
    return b"".join(encode_word(v) for v in values)


def encode_array(records: Sequence[Sequence[int]], arity: int) -> bytes:
    """
    ABI-encode `records` as a dynamic array of `uint256[arity]`.

    Raises:
        MalformedEncoding: If a record does not have exactly `arity` words.
    """
    words = [ABI_ARRAY_OFFSET, len(records)]
    for i, record in enumerate(records):
        if len(record) != arity:
            raise MalformedEncoding(f"record {i} has {len(record)} words, expected {arity}")
        words.extend(record)
    return encode_words(words)


def decode_array(data: bytes, arity: int) -> list[list[int]]:
    """
    Decode an ABI dynamic array of `uint256[arity]` records.

    Args:
        data: The encoded bytes.
        arity: Number of words per record.

    Returns:
        The records as lists of integers.

    Raises:
        MalformedEncoding: On a wrong offset, a truncated header, or a body
            whose length disagrees with the declared record count.
    """
    if arity <= 0:
        raise MalformedEncoding(f"record arity must be positive, got {arity}")
    if len(data) < 2 * WORD_SIZE:
        raise MalformedEncoding(f"array header truncated: {len(data)} bytes")
    if len(data) % WORD_SIZE != 0:
        raise MalformedEncoding(
            f"length {len(data)} is not a multiple of the {WORD_SIZE}-byte word size"
        )

    offset = int.from_bytes(data[:WORD_SIZE], "big")
    if offset != ABI_ARRAY_OFFSET:
        raise MalformedEncoding(f"unexpected array offset {offset:#x}, expected {ABI_ARRAY_OFFSET:#x}")

    count = int.from_bytes(data[WORD_SIZE : 2 * WORD_SIZE], "big")
    body = data[2 * WORD_SIZE :]
    # compare against the body first so a huge count never drives allocation
    if count > len(body) // (arity * WORD_SIZE) or len(body) != count * arity * WORD_SIZE:
        raise MalformedEncoding(
            f"array declares {count} records of {arity} words but carries {len(body)} bytes"
        )

    words = decode_words(body)
    return [words[i : i + arity] for i in range(0, len(words), arity)]


def encode_proofs(records: Sequence[Sequence[int]]) -> bytes:
    """ABI-encode raw proof records of 8 words each."""
    return encode_array(records, PROOF_WORDS)


def decode_proofs(data: bytes) -> list[list[int]]:
    """Decode an ABI `uint256[8][]` into raw proof records."""
    return decode_array(data, PROOF_WORDS)


def encode_public_inputs(records: Sequence[Sequence[int]], size: int) -> bytes:
    """ABI-encode public-input vectors of `size` words each."""
    return encode_array(records, size)


def decode_public_inputs(data: bytes, size: int) -> list[list[int]]:
    """Decode an ABI `uint256[size][]` into public-input vectors."""
    return decode_array(data, size)


def frame_payload(first: bytes, second: bytes) -> bytes:
    """
    Join two sections as `u32_be(len(first)) || first || second`.
    """
    if len(first) >= 1 << (8 * FRAME_PREFIX_SIZE):
        raise MalformedEncoding(f"first section too large to frame: {len(first)} bytes")
    return len(first).to_bytes(FRAME_PREFIX_SIZE, "big") + first + second


def split_payload(data: bytes) -> tuple[bytes, bytes]:
    """
    Inverse of `frame_payload`.

    Raises:
        MalformedEncoding: If the prefix is missing or points past the end.
    """
    if len(data) < FRAME_PREFIX_SIZE:
        raise MalformedEncoding(f"frame prefix truncated: {len(data)} bytes")
    first_len = int.from_bytes(data[:FRAME_PREFIX_SIZE], "big")
    end = FRAME_PREFIX_SIZE + first_len
    if end > len(data):
        raise MalformedEncoding(
            f"frame declares {first_len} bytes but only {len(data) - FRAME_PREFIX_SIZE} follow"
        )
    return data[FRAME_PREFIX_SIZE:end], data[end:]
