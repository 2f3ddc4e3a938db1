"""Text rendering helpers shared by both engines."""

import math
import re

from sympy import Rational, Symbol, expand

_SUPERSCRIPT = str.maketrans("0123456789+-", "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻")


def _to_superscript(text: str) -> str:
    """Convert a string of digits / signs into Unicode superscript."""
    return text.translate(_SUPERSCRIPT)


def fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def format_vector(field, vector) -> str:
    return "(" + ", ".join(field.format(x) for x in vector) + ")"


def matrix_entries(field, matrix) -> list[list[str]]:
    return [[field.format(x) for x in row] for row in matrix]


def vector_entries(field, vector) -> list[str]:
    return [field.format(x) for x in vector]


def _sympy_coefficient(field, value):
    if field.name == "exact":
        return Rational(value)
    return float(value)


def format_polynomial(field, coefficients, variable: str = "x") -> str:
    """Render ``c0 + c1·x + c2·x² ...`` from a coefficient vector.

    The expression is built with SymPy so terms come out in descending
    degree with signs merged, then exponents are turned into superscripts
    and ``2*x`` into ``2x``.
    """
    x = Symbol(variable)
    expr = 0
    for power, c in enumerate(coefficients):
        if field.is_zero(c):
            continue
        expr += _sympy_coefficient(field, c) * x ** power
    expr = expand(expr)
    if expr == 0:
        return "0"
    s = str(expr)
    if field.name == "numeric":
        s = re.sub(r"\d+\.\d+", lambda m: fmt_num(float(m.group(0))), s)
    s = re.sub(r"\*\*(\d+)", lambda m: _to_superscript(m.group(1)), s)
    s = re.sub(r"(\d)\*([A-Za-z])", r"\1\2", s)
    return s


def format_matrix_inline(field, matrix) -> str:
    """Single-line ``[[1, 2], [3, 4]]`` rendering for answers."""
    return "[" + ", ".join(
        "[" + ", ".join(field.format(x) for x in row) + "]" for row in matrix
    ) + "]"
