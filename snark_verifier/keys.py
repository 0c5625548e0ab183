# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# keys.py

"""
Verifying key serialization.

JSON follows the snarkjs `verification_key.json` field layout (decimal
strings, Fp2 as `[c0, c1]`, optional projective third coordinate), so a key
exported by snarkjs loads unchanged:

    {
      "protocol": "groth16",
      "curve": "bn128",
      "nPublic": 2,
      "vk_alpha_1": [x, y],
      "vk_beta_2": [[x_c0, x_c1], [y_c0, y_c1]],
      "vk_gamma_2": ...,
      "vk_delta_2": ...,
      "IC": [[x, y], ...]
    }

The binary layout is a versioned record:

    u8 version || u32_be len(IC) || alpha || beta || gamma || delta || IC...

with every coordinate a 32-byte big-endian word and G2 limbs imaginary
part first.
"""

import logging
from pathlib import Path
from typing import Any, Sequence

from snark_verifier.abi import decode_words, encode_words
from snark_verifier.bn254 import g1_from_affine, g1_to_affine, g2_from_affine, g2_to_affine
from snark_verifier.constants import VK_ENCODING_VERSION, WORD_SIZE
from snark_verifier.errors import MalformedEncoding
from snark_verifier.files import load_json, save_json
from snark_verifier.groth16 import VerifyingKey, g2_from_words, to_uint

logger = logging.getLogger(__name__)

_HEADER_SIZE = 5


def _affine(coords: Sequence[Any], name: str) -> Sequence[Any]:
    # snarkjs appends the projective z coordinate, always 1 for exported keys
    if len(coords) == 3:
        z = coords[2]
        limbs = [to_uint(v) for v in z] if isinstance(z, (list, tuple)) else [to_uint(z)]
        if limbs[0] != 1 or any(limbs[1:]):
            raise MalformedEncoding(f"{name}: projective coordinate must be 1")
        coords = coords[:2]
    if len(coords) != 2:
        raise MalformedEncoding(f"{name}: expected 2 coordinates, got {len(coords)}")
    return coords


def _g1_from_json(coords: Sequence[Any], name: str):
    x, y = _affine(coords, name)
    return g1_from_affine(to_uint(x), to_uint(y))


def _g2_from_json(coords: Sequence[Any], name: str):
    x, y = _affine(coords, name)
    if len(x) != 2 or len(y) != 2:
        raise MalformedEncoding(f"{name}: Fp2 coordinates need two limbs")
    return g2_from_affine((to_uint(x[0]), to_uint(x[1])), (to_uint(y[0]), to_uint(y[1])))


def verifying_key_from_json(data: dict[str, Any]) -> VerifyingKey:
    """
    Parse a verifying key from its JSON form.

    Args:
        data: Dict with `vk_alpha_1`, `vk_beta_2`, `vk_gamma_2`, `vk_delta_2`
            and `IC`; `nPublic` is optional but must agree with `IC` if given.

    Returns:
        VerifyingKey: The validated key.

    Raises:
        MalformedEncoding: On missing fields or bad coordinate shapes.
        PointNotOnCurve, InvalidSubgroup: If a point is invalid.
    """
    try:
        alpha = data["vk_alpha_1"]
        beta = data["vk_beta_2"]
        gamma = data["vk_gamma_2"]
        delta = data["vk_delta_2"]
        ic = data["IC"]
    except KeyError as e:
        raise MalformedEncoding(f"verifying key JSON is missing {e}") from e

    if "curve" in data and data["curve"] not in ("bn128", "bn254"):
        raise MalformedEncoding(f"unsupported curve {data['curve']!r}")
    if "nPublic" in data and int(data["nPublic"]) != len(ic) - 1:
        raise MalformedEncoding(
            f"nPublic={data['nPublic']} disagrees with {len(ic)} IC points"
        )

    return VerifyingKey(
        alpha=_g1_from_json(alpha, "vk_alpha_1"),
        beta=_g2_from_json(beta, "vk_beta_2"),
        gamma=_g2_from_json(gamma, "vk_gamma_2"),
        delta=_g2_from_json(delta, "vk_delta_2"),
        ic=tuple(_g1_from_json(p, f"IC[{i}]") for i, p in enumerate(ic)),
    )


def verifying_key_to_json(vk: VerifyingKey) -> dict[str, Any]:
    """Serialize a key to the canonical JSON form with decimal strings."""

    def g1(point):
        return [str(v) for v in g1_to_affine(point)]

    def g2(point):
        return [[str(v) for v in limbs] for limbs in g2_to_affine(point)]

    return {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": vk.input_count,
        "vk_alpha_1": g1(vk.alpha),
        "vk_beta_2": g2(vk.beta),
        "vk_gamma_2": g2(vk.gamma),
        "vk_delta_2": g2(vk.delta),
        "IC": [g1(p) for p in vk.ic],
    }


def verifying_key_to_bytes(vk: VerifyingKey) -> bytes:
    header = VK_ENCODING_VERSION.to_bytes(1, "big") + len(vk.ic).to_bytes(4, "big")
    return header + encode_words(vk.to_words())


def verifying_key_from_bytes(data: bytes) -> VerifyingKey:
    """
    Decode the versioned binary verifying key record.

    Raises:
        MalformedEncoding: On a wrong version, a truncated header or a body
            whose length disagrees with the IC count.
    """
    if len(data) < _HEADER_SIZE:
        raise MalformedEncoding(f"verifying key header truncated: {len(data)} bytes")
    version = data[0]
    if version != VK_ENCODING_VERSION:
        raise MalformedEncoding(f"unsupported verifying key encoding version {version}")
    n_ic = int.from_bytes(data[1:_HEADER_SIZE], "big")
    if n_ic == 0:
        raise MalformedEncoding("verifying key needs at least one IC point")
    expected = (2 + 3 * 4 + 2 * n_ic) * WORD_SIZE
    body = data[_HEADER_SIZE:]
    if len(body) != expected:
        raise MalformedEncoding(f"verifying key body is {len(body)} bytes, expected {expected}")

    w = decode_words(body)
    return VerifyingKey(
        alpha=g1_from_affine(w[0], w[1]),
        beta=g2_from_words(w[2:6]),
        gamma=g2_from_words(w[6:10]),
        delta=g2_from_words(w[10:14]),
        ic=tuple(g1_from_affine(w[i], w[i + 1]) for i in range(14, len(w), 2)),
    )


def load_verifying_key(path: str | Path) -> VerifyingKey:
    """
    Load a verifying key from a `.json` file or a binary record file.

    Args:
        path: Path to the key.

    Returns:
        VerifyingKey: The validated key.
    """
    path = Path(path)
    if path.suffix == ".json":
        vk = verifying_key_from_json(load_json(path))
    else:
        vk = verifying_key_from_bytes(path.read_bytes())
    logger.info("loaded verifying key from %s with %d public inputs", path, vk.input_count)
    return vk


def save_verifying_key(path: str | Path, vk: VerifyingKey) -> None:
    """Write a key as JSON (for a `.json` path) or as the binary record."""
    path = Path(path)
    if path.suffix == ".json":
        save_json(path, verifying_key_to_json(vk))
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(verifying_key_to_bytes(vk))
