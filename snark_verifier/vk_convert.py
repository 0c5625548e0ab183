# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# vk_convert.py

"""
Convert a snarkjs verification key into the verifier's canonical key files.

snarkjs outputs:
  - verification_key.json: {protocol, curve, nPublic, vk_alpha_1, vk_beta_2,
    vk_gamma_2, vk_delta_2, vk_alphabeta_12, IC}

The canonical JSON keeps only what verification needs, drops the projective
third coordinates, and is written only after every point has been checked.
An output path without a `.json` suffix receives the binary record instead.
"""

import json
import sys
from pathlib import Path
from typing import Any

from snark_verifier.errors import MalformedEncoding
from snark_verifier.files import load_json
from snark_verifier.groth16 import VerifyingKey
from snark_verifier.keys import (
    save_verifying_key,
    verifying_key_from_json,
    verifying_key_to_json,
)


def _parse_snarkjs(vk: dict[str, Any]) -> VerifyingKey:
    protocol = vk.get("protocol", "groth16")
    if protocol != "groth16":
        raise MalformedEncoding(f"unsupported protocol {protocol!r}")
    return verifying_key_from_json(vk)


def snarkjs_to_canonical(vk: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a snarkjs verification key and return its canonical JSON form.

    Args:
        vk: Dict from snarkjs' verification_key.json

    Returns:
        Canonical JSON representation of the verifying key

    Raises:
        MalformedEncoding: If the protocol is not groth16 or a field is malformed.
        InvalidPoint: If a point is not a valid group element.
    """
    return verifying_key_to_json(_parse_snarkjs(vk))


def convert_vk_file(
    input_path: str | Path,
    output_path: str | Path,
) -> None:
    """
    Read snarkjs verification_key.json and write the canonical key file.

    Args:
        input_path: Path to snarkjs' verification_key.json
        output_path: Path to write; `.json` for JSON, anything else for binary
    """
    vk = _parse_snarkjs(load_json(input_path))
    save_verifying_key(output_path, vk)


def main() -> None:
    """CLI: read verification_key.json from arg, write canonical JSON to stdout or file."""
    if len(sys.argv) < 2:
        print(
            "Usage: python -m snark_verifier.vk_convert <verification_key.json> [output]",
            file=sys.stderr,
        )
        sys.exit(1)

    input_path = sys.argv[1]

    if len(sys.argv) >= 3:
        convert_vk_file(input_path, sys.argv[2])
    else:
        canonical = snarkjs_to_canonical(load_json(input_path))
        json.dump(canonical, sys.stdout, indent=4)
        print()


if __name__ == "__main__":
    main()
