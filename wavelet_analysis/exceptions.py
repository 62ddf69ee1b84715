# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Exception types for the wavelet analysis package.

Arithmetic failures use the builtin ``ArithmeticError`` family:
``ZeroDivisionError`` for division by a zero complex value and
``FloatingPointError`` when a transform would produce NaN or Inf.
"""


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument the engine cannot accept.

    Subclasses ``ValueError`` so code that catches ``ValueError`` keeps working.
    """
