"""Exact rational numbers for the exact-mode engine.

Exact values are SymPy ``Rational`` objects, so they are always stored in
lowest terms with a positive denominator and zero is ``0/1``.  What SymPy
does not give us is a width limit: MatrixMaster mirrors fixed-width integer
arithmetic and fails loudly instead of growing numbers without bound, so
every operation here goes through :func:`checked`.

Tokens accepted by :func:`parse_exact_token`::

    7   -3   +4          integers
    2/3  -5/4            fractions (zero denominator rejected)
    0.25  -.5  3.        decimals
    1.5e-3  2E4          scientific notation
"""

import logging
import math
import re

from sympy import Integer, Rational

from matrixmaster.errors import (
    ExactOverflowError,
    UnsupportedTokenError,
    ZeroDenominatorError,
)

LOG = logging.getLogger(__name__)

EXACT_INTEGER_BITS = 64

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_FRACTION_RE = re.compile(r"^([+-]?\d+)/(\d+)$")
_DECIMAL_RE = re.compile(r"^([+-]?)(\d*)\.(\d*)$")
_SCIENTIFIC_RE = re.compile(r"^([+-]?(?:\d*\.\d+|\d+\.\d*|\d+))[eE]([+-]?\d+)$")

# 10**40 is already far outside 64-bit range; stop before building huge ints.
_MAX_DECIMAL_EXPONENT = 40

ZERO = Integer(0)
ONE = Integer(1)


def _limit(bits: int) -> int:
    return 2 ** (bits - 1) - 1


def checked(value, bits: int = EXACT_INTEGER_BITS):
    """Return *value* as a Rational, raising if it leaves the integer range."""
    value = Rational(value)
    limit = _limit(bits)
    if abs(value.p) > limit or value.q > limit:
        LOG.debug("exact value %s exceeds %d-bit range", value, bits)
        raise ExactOverflowError(value, bits)
    return value


def add(a, b, bits: int = EXACT_INTEGER_BITS):
    return checked(a + b, bits)


def subtract(a, b, bits: int = EXACT_INTEGER_BITS):
    return checked(a - b, bits)


def multiply(a, b, bits: int = EXACT_INTEGER_BITS):
    return checked(a * b, bits)


def divide(a, b, bits: int = EXACT_INTEGER_BITS):
    if b == 0:
        raise ZeroDivisionError("exact division by zero")
    return checked(Rational(a) / Rational(b), bits)


def negate(a, bits: int = EXACT_INTEGER_BITS):
    return checked(-a, bits)


def _decimal_to_rational(sign: str, whole: str, frac: str, exponent: int,
                         token: str, bits: int):
    digits = (whole or "0") + frac
    numerator = int(digits)
    if numerator == 0:
        return ZERO
    scale = exponent - len(frac)
    if abs(scale) > _MAX_DECIMAL_EXPONENT:
        raise ExactOverflowError(token, bits)
    if scale >= 0:
        value = Rational(numerator * 10 ** scale, 1)
    else:
        value = Rational(numerator, 10 ** (-scale))
    if sign == "-":
        value = -value
    return checked(value, bits)


def parse_exact_token(token: str, bits: int = EXACT_INTEGER_BITS):
    """Parse one raw token into an exact Rational.

    Raises :class:`UnsupportedTokenError` (or its zero-denominator subclass)
    without a location; callers pin the location with ``error.at(...)``.
    """
    raw = token
    token = (token or "").strip()
    if not token:
        raise UnsupportedTokenError(raw, reason="empty entry")

    if _INTEGER_RE.match(token):
        return checked(Integer(int(token)), bits)

    m = _FRACTION_RE.match(token)
    if m:
        num, den = int(m.group(1)), int(m.group(2))
        if den == 0:
            raise ZeroDenominatorError(raw)
        return checked(Rational(num, den), bits)

    m = _SCIENTIFIC_RE.match(token)
    if m:
        mantissa, exponent = m.group(1), int(m.group(2))
        sign = ""
        if mantissa[0] in "+-":
            sign, mantissa = mantissa[0], mantissa[1:]
        whole, _, frac = mantissa.partition(".")
        return _decimal_to_rational(sign, whole, frac, exponent, raw, bits)

    m = _DECIMAL_RE.match(token)
    if m and (m.group(2) or m.group(3)):
        return _decimal_to_rational(m.group(1), m.group(2), m.group(3), 0, raw, bits)

    raise UnsupportedTokenError(raw)


def parse_float_token(token: str) -> float:
    """Parse one raw token into a float using the same grammar as exact mode."""
    raw = token
    token = (token or "").strip()
    if not token:
        raise UnsupportedTokenError(raw, reason="empty entry")

    m = _FRACTION_RE.match(token)
    if m:
        den = int(m.group(2))
        if den == 0:
            raise ZeroDenominatorError(raw)
        return float(Rational(int(m.group(1)), den))

    m = _DECIMAL_RE.match(token)
    is_decimal = bool(m and (m.group(2) or m.group(3)))
    if not (is_decimal or _INTEGER_RE.match(token) or _SCIENTIFIC_RE.match(token)):
        raise UnsupportedTokenError(raw)
    value = float(token)
    if not math.isfinite(value):
        raise UnsupportedTokenError(raw, reason="outside floating-point range")
    return value


def format_exact(value) -> str:
    """Render a Rational as ``p`` or ``p/q``."""
    value = Rational(value)
    if value.q == 1:
        return str(value.p)
    return f"{value.p}/{value.q}"
