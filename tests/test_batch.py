# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/test_batch.py

import logging
import random

import pytest

from snark_verifier.abi import encode_proofs, encode_public_inputs, hex_to_bytes
from snark_verifier.batch import (
    decode_batch,
    derive_challenges,
    verify_batch,
    verify_encoded_batch,
)
from snark_verifier.errors import (
    BatchTooLarge,
    EmptyBatch,
    InputLengthMismatch,
    InvalidInput,
    InvalidPublicInput,
    MalformedEncoding,
)
from snark_verifier.field import curve_order
from conftest import SAMPLE_INPUTS


def _split(pairs):
    return [p for p, _ in pairs], [x for _, x in pairs]


def _encode(pairs):
    proofs, inputs = _split(pairs)
    publics = encode_public_inputs(inputs, len(inputs[0]))
    return publics, encode_proofs([p.to_words() for p in proofs])


class TestVerifyBatch:
    def test_valid_batch(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        assert verify_batch(proofs, inputs, setup.vk) is True

    def test_single_proof_batch(self, setup, sample_proof):
        assert verify_batch([sample_proof], [SAMPLE_INPUTS], setup.vk) is True

    def test_duplicates_are_verified_each_time(self, setup, sample_proof):
        assert verify_batch([sample_proof] * 3, [SAMPLE_INPUTS] * 3, setup.vk) is True

    def test_foreign_proof_fails_batch(self, setup, other_setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        foreign = other_setup.prove(SAMPLE_INPUTS, random.Random(11))
        assert verify_batch(proofs + [foreign], inputs + [SAMPLE_INPUTS], setup.vk) is False

    def test_wrong_input_fails_batch(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        inputs = [list(x) for x in inputs]
        inputs[1][1] += 1
        assert verify_batch(proofs, inputs, setup.vk) is False

    def test_failure_is_logged(self, setup, sample_proof, caplog):
        with caplog.at_level(logging.WARNING, logger="snark_verifier.batch"):
            assert not verify_batch([sample_proof], [[0, 0]], setup.vk)
        assert "failed verification" in caplog.text

    def test_empty_batch(self, setup):
        with pytest.raises(EmptyBatch):
            verify_batch([], [], setup.vk)

    def test_batch_too_large(self, setup, sample_proof):
        with pytest.raises(BatchTooLarge):
            verify_batch([sample_proof] * 3, [SAMPLE_INPUTS] * 3, setup.vk, max_batch_size=2)

    def test_count_mismatch(self, setup, sample_proof):
        with pytest.raises(InputLengthMismatch):
            verify_batch([sample_proof] * 2, [SAMPLE_INPUTS], setup.vk)

    def test_arity_mismatch(self, setup, sample_proof):
        with pytest.raises(InputLengthMismatch):
            verify_batch([sample_proof], [[1]], setup.vk)

    def test_input_out_of_range(self, setup, sample_proof):
        with pytest.raises(InvalidPublicInput):
            verify_batch([sample_proof], [[1, curve_order]], setup.vk)


class TestChallenges:
    def test_supplied_challenges(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        assert verify_batch(proofs, inputs, setup.vk, challenges=[1, 2, curve_order - 1])

    def test_unit_challenges_still_catch_a_bad_proof(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        inputs = [list(x) for x in inputs]
        inputs[0][0] += 1
        assert not verify_batch(proofs, inputs, setup.vk, challenges=[1, 1, 1])

    def test_zero_challenge_is_refused(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        with pytest.raises(InvalidInput):
            verify_batch(proofs, inputs, setup.vk, challenges=[1, 0, 1])

    def test_challenge_out_of_range_is_refused(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        with pytest.raises(InvalidInput):
            verify_batch(proofs, inputs, setup.vk, challenges=[1, curve_order, 1])

    def test_wrong_challenge_count(self, setup, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        with pytest.raises(InputLengthMismatch):
            verify_batch(proofs, inputs, setup.vk, challenges=[1, 2])

    def test_derived_challenges_are_deterministic(self, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        first = derive_challenges(proofs, inputs)
        second = derive_challenges(proofs, inputs)
        assert [c.n for c in first] == [c.n for c in second]
        assert all(0 < c.n < curve_order for c in first)
        assert len({c.n for c in first}) == len(first)

    def test_derived_challenges_depend_on_order(self, sample_proofs):
        proofs, inputs = _split(sample_proofs)
        forward = derive_challenges(proofs, inputs)
        backward = derive_challenges(proofs[::-1], inputs[::-1])
        assert [c.n for c in forward] != [c.n for c in backward[::-1]]


class TestEncodedBatch:
    def test_decode_batch(self, setup, sample_proofs):
        publics, proofs = _encode(sample_proofs)
        payload = decode_batch(publics, proofs, setup.vk)
        assert len(payload) == 3
        assert list(payload.proofs) == [p for p, _ in sample_proofs]
        assert [list(x) for x in payload.public_inputs] == [x for _, x in sample_proofs]
        assert len(payload.challenges) == 3

    def test_verify_encoded_batch(self, setup, sample_proofs):
        publics, proofs = _encode(sample_proofs)
        assert verify_encoded_batch(publics, proofs, setup.vk) is True

    def test_section_count_mismatch(self, setup, sample_proofs):
        publics, _ = _encode(sample_proofs)
        _, proofs = _encode(sample_proofs[:2])
        with pytest.raises(InputLengthMismatch):
            decode_batch(publics, proofs, setup.vk)

    def test_empty_sections(self, setup):
        publics = encode_public_inputs([], 2)
        proofs = encode_proofs([])
        with pytest.raises(EmptyBatch):
            decode_batch(publics, proofs, setup.vk)

    def test_oversized_batch_refused_before_decoding_points(self, setup):
        # all-ones words are not field elements; the size check must fire first
        records = [[(1 << 256) - 1] * 8] * 3
        publics = encode_public_inputs([[0, 0]] * 3, 2)
        with pytest.raises(BatchTooLarge):
            decode_batch(publics, encode_proofs(records), setup.vk, max_batch_size=2)

    def test_truncated_proofs_section(self, setup, sample_proofs):
        publics, proofs = _encode(sample_proofs)
        with pytest.raises(MalformedEncoding):
            decode_batch(publics, proofs[:-1], setup.vk)

    def test_literal_batch(self, ludo_vk, ludo_vectors):
        publics = hex_to_bytes(ludo_vectors["batch"]["publics"])
        proofs = hex_to_bytes(ludo_vectors["batch"]["proofs"])
        assert verify_encoded_batch(publics, proofs, ludo_vk) is True
