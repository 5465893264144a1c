# scalar_aad/core/errors.py
"""Exception types raised by the AAD core."""


class ScalarAADError(Exception):
    """Base class for errors raised by scalar_aad."""


class UnsupportedOperandKind(ScalarAADError, TypeError):
    """
    An operation received an argument of the wrong kind.

    Raised for a non-numeric power exponent, a non-Value operand, a
    non-numeric leaf value, or operands that live on different tapes.
    """
