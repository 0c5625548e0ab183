# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# packing.py

"""
Pack small application values into a single public-input integer.

A circuit that takes many small values (moves, piece positions) exposes
them as one field element: `value = sum(v_i * base**i)`. Unpacking reads
fixed-width bit chunks back out, least significant first.
"""

from snark_verifier.errors import MalformedEncoding


def pack(values: list[int], base: int) -> int:
    """
    Pack `values` little-endian in the given base.

    Args:
        values: Digits, each expected to be below `base`.
        base: Radix of the packing, at least 2.

    Returns:
        int: `sum(values[i] * base**i)`.

    Raises:
        ValueError: If the base is below 2 or a digit is out of range.
    """
    if base < 2:
        raise ValueError(f"base must be at least 2, got {base}")
    packed = 0
    factor = 1
    for i, v in enumerate(values):
        if v < 0 or v >= base:
            raise ValueError(f"digit {i} = {v} does not fit base {base}")
        packed += v * factor
        factor *= base
    return packed


def unpack(value: int, bit: int, length: int) -> list[int]:
    """
    Split `value` into `length` chunks of `bit` bits, least significant first.

    Missing high chunks are zero.

    Raises:
        MalformedEncoding: If `value` is negative or needs more than `length` chunks.
    """
    if bit <= 0:
        raise ValueError(f"chunk width must be positive, got {bit}")
    if value < 0:
        raise MalformedEncoding(f"cannot unpack negative value {value}")
    mask = (1 << bit) - 1
    chunks = []
    for _ in range(length):
        chunks.append(value & mask)
        value >>= bit
    if value:
        raise MalformedEncoding(f"value has more than {length} chunks of {bit} bits")
    return chunks
