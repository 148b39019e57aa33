"""Typed errors raised by the health-factor computation.

Every error aborts the whole computation. Nothing is retried and the
previously stored health factor is left as it was.
"""
from __future__ import annotations


class HfError(Exception):
    """Base class for health-factor computation failures."""


class ArithmeticOverflow(HfError):
    """A fixed-point step exceeded its representable range."""


class DivisionByZero(HfError):
    """A divide was attempted with a zero divisor."""


class InvalidDecimals(HfError):
    """Decimal exponent too large to exponentiate into 64 bits."""


class InvalidInput(HfError):
    """Structurally malformed entry, rejected before any arithmetic."""


class InvalidPrice(InvalidInput):
    """Oracle price is not strictly positive or out of range."""


class InvalidLiqThreshold(InvalidInput):
    """Liquidation threshold outside 0..10000 bps."""


class InvalidBorrowFactor(InvalidInput):
    """Borrow factor is neither 0 nor within 1000..10000 bps."""
