# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# errors.py

"""
Exception taxonomy for proof verification.

Every error derives from `VerifierError`, itself a `ValueError`, so callers
that only care about "bad input" can keep catching `ValueError`. A proof
that is well formed but does not satisfy the pairing equation is never an
error: the verifier returns `False` for it.
"""


class VerifierError(ValueError):
    """Base class for every verification failure that is not a plain `False`."""


class MalformedEncoding(VerifierError):
    """Structural problem in a byte encoding: length, header or word range."""


class InvalidFieldElement(MalformedEncoding):
    """An integer does not fit into the field it is meant to live in."""


class InvalidPoint(VerifierError):
    """A decoded point failed curve or subgroup membership."""


class PointNotOnCurve(InvalidPoint):
    pass


class InvalidSubgroup(InvalidPoint):
    pass


class InputLengthMismatch(VerifierError):
    """Arity of public inputs (or batch sections) does not match."""


class InvalidPublicInput(VerifierError):
    """A public input lies outside the scalar field."""


class EmptyBatch(VerifierError):
    pass


class BatchTooLarge(VerifierError):
    pass


class InvalidInput(VerifierError):
    """Bad arguments handed to the pairing engine."""


class DivisionByZero(VerifierError, ZeroDivisionError):
    pass
