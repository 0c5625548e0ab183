# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/conftest.py

"""
Shared fixtures.

Accepting proofs are produced with a simulated trusted setup: the trapdoor
scalars are known, so for any `a, b` the matching `c` can be solved from

    a*b = alpha*beta + L(x)*gamma + c*delta   (mod r)

where `L(x) = ic_0 + sum(x_i * ic_{i+1})`.
"""

import json
import random
from dataclasses import dataclass
from pathlib import Path

import pytest

from snark_verifier.bn254 import g1_point, g2_point
from snark_verifier.errors import VerifierError
from snark_verifier.field import curve_order
from snark_verifier.groth16 import Proof, VerifyingKey, verify
from snark_verifier.keys import load_verifying_key

VECTORS_DIR = Path(__file__).resolve().parent.parent / "test-vectors"
LUDO_VECTORS_PATH = VECTORS_DIR / "ludo-game-vectors.json"
LUDO_VK_PATH = VECTORS_DIR / "ludo-game-vk.json"

SAMPLE_INPUTS = [1, 1092739377885103454644040430160177557655257088]


@dataclass
class SimulatedSetup:
    alpha: int
    beta: int
    gamma: int
    delta: int
    ic: list[int]
    vk: VerifyingKey

    def prove(self, inputs, rng: random.Random) -> Proof:
        a = rng.randrange(1, curve_order)
        b = rng.randrange(1, curve_order)
        lin = self.ic[0] + sum(x * u for x, u in zip(inputs, self.ic[1:]))
        rhs = a * b - self.alpha * self.beta - lin * self.gamma
        c = rhs * pow(self.delta, -1, curve_order) % curve_order
        return Proof(a=g1_point(a), b=g2_point(b), c=g1_point(c))


def make_setup(n_inputs: int, seed: int) -> SimulatedSetup:
    rng = random.Random(seed)
    alpha, beta, gamma, delta = (rng.randrange(1, curve_order) for _ in range(4))
    ic = [rng.randrange(1, curve_order) for _ in range(n_inputs + 1)]
    vk = VerifyingKey(
        alpha=g1_point(alpha),
        beta=g2_point(beta),
        gamma=g2_point(gamma),
        delta=g2_point(delta),
        ic=tuple(g1_point(u) for u in ic),
    )
    return SimulatedSetup(alpha, beta, gamma, delta, ic, vk)


def verify_or_reject(proof_words, inputs, vk) -> bool:
    """Verify raw proof words, treating any decoding/validation error as a rejection."""
    try:
        return verify(Proof.from_words(proof_words), inputs, vk)
    except VerifierError:
        return False


@pytest.fixture(scope="session")
def setup() -> SimulatedSetup:
    return make_setup(n_inputs=2, seed=2048)


@pytest.fixture(scope="session")
def other_setup() -> SimulatedSetup:
    return make_setup(n_inputs=2, seed=60)


@pytest.fixture(scope="session")
def sample_proof(setup) -> Proof:
    return setup.prove(SAMPLE_INPUTS, random.Random(1))


@pytest.fixture(scope="session")
def sample_proofs(setup) -> list[tuple[Proof, list[int]]]:
    rng = random.Random(7)
    inputs = [SAMPLE_INPUTS, [0, 42], [5, curve_order - 1]]
    return [(setup.prove(x, rng), x) for x in inputs]


@pytest.fixture(scope="session")
def ludo_vectors() -> dict:
    return json.loads(LUDO_VECTORS_PATH.read_text())


@pytest.fixture(scope="session")
def ludo_vk() -> VerifyingKey:
    if not LUDO_VK_PATH.exists():
        pytest.skip(f"deployed verifying key not provided at {LUDO_VK_PATH}")
    return load_verifying_key(LUDO_VK_PATH)
