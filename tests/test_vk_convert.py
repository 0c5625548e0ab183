# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/test_vk_convert.py

import json
import sys

import pytest

from snark_verifier.errors import MalformedEncoding
from snark_verifier.keys import load_verifying_key, verifying_key_to_json
from snark_verifier.vk_convert import convert_vk_file, main, snarkjs_to_canonical


@pytest.fixture
def snarkjs_vk(setup):
    data = verifying_key_to_json(setup.vk)
    data["vk_alpha_1"] = data["vk_alpha_1"] + ["1"]
    data["IC"] = [p + ["1"] for p in data["IC"]]
    data["vk_alphabeta_12"] = []
    return data


class TestSnarkjsToCanonical:
    """Test snarkjs key conversion."""

    def test_drops_projective_coordinates(self, snarkjs_vk):
        result = snarkjs_to_canonical(snarkjs_vk)

        assert len(result["vk_alpha_1"]) == 2
        assert all(len(p) == 2 for p in result["IC"])

    def test_drops_unused_fields(self, snarkjs_vk):
        result = snarkjs_to_canonical(snarkjs_vk)

        assert "vk_alphabeta_12" not in result

    def test_rejects_other_protocols(self, snarkjs_vk):
        snarkjs_vk["protocol"] = "plonk"

        with pytest.raises(MalformedEncoding):
            snarkjs_to_canonical(snarkjs_vk)


class TestConvertVkFile:
    """Test file conversion."""

    def test_json_output(self, setup, snarkjs_vk, tmp_path):
        input_path = tmp_path / "verification_key.json"
        output_path = tmp_path / "out" / "vk.json"
        input_path.write_text(json.dumps(snarkjs_vk))

        convert_vk_file(input_path, output_path)

        assert output_path.exists()
        assert load_verifying_key(output_path) == setup.vk

    def test_binary_output(self, setup, snarkjs_vk, tmp_path):
        input_path = tmp_path / "verification_key.json"
        output_path = tmp_path / "vk.bin"
        input_path.write_text(json.dumps(snarkjs_vk))

        convert_vk_file(str(input_path), str(output_path))

        assert load_verifying_key(output_path) == setup.vk


class TestMain:
    def test_usage(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["snark-vk-convert"])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 1
        assert "Usage" in capsys.readouterr().err

    def test_stdout(self, setup, snarkjs_vk, tmp_path, monkeypatch, capsys):
        input_path = tmp_path / "verification_key.json"
        input_path.write_text(json.dumps(snarkjs_vk))
        monkeypatch.setattr(sys, "argv", ["snark-vk-convert", str(input_path)])

        main()

        out = json.loads(capsys.readouterr().out)
        assert out == verifying_key_to_json(setup.vk)
