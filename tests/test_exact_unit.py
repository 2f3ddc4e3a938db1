"""Tests for exact rationals, token parsing and number formatting."""

import pytest
from sympy import Rational

from matrixmaster import exact
from matrixmaster.errors import (
    ExactOverflowError,
    MissingInputError,
    RaggedMatrixError,
    StructuralError,
    DimensionMismatchError,
    UnsupportedTokenError,
    ZeroDenominatorError,
)
from matrixmaster.fields import ExactField, NumericField
from matrixmaster.formatting import fmt_num, format_polynomial, format_vector
from matrixmaster.parsing import parse_matrix, parse_vector, parse_vectors


# ── Token grammar ───────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "token,expected",
    [
        ("7", Rational(7)),
        ("-3", Rational(-3)),
        ("+4", Rational(4)),
        ("2/3", Rational(2, 3)),
        ("-3/6", Rational(-1, 2)),
        ("0.25", Rational(1, 4)),
        ("-.5", Rational(-1, 2)),
        ("3.", Rational(3)),
        ("1.5e-3", Rational(3, 2000)),
        ("2E4", Rational(20000)),
        ("  12 ", Rational(12)),
    ],
)
def test_parse_exact_token(token: str, expected) -> None:
    assert exact.parse_exact_token(token) == expected


def test_fractions_are_reduced_with_positive_denominator() -> None:
    value = exact.parse_exact_token("-4/6")
    assert (value.p, value.q) == (-2, 3)
    assert exact.parse_exact_token("0/5") == 0
    assert exact.format_exact(exact.parse_exact_token("0/5")) == "0"


def test_zero_denominator_rejected() -> None:
    with pytest.raises(ZeroDenominatorError, match="zero denominator"):
        exact.parse_exact_token("1/0")
    with pytest.raises(ZeroDenominatorError):
        exact.parse_float_token("3/0")


@pytest.mark.parametrize("token", ["abc", "1/2/3", "1..2", "e5", "", "  ", "2x", "1/-2"])
def test_unsupported_tokens(token: str) -> None:
    with pytest.raises(UnsupportedTokenError):
        exact.parse_exact_token(token)
    with pytest.raises(UnsupportedTokenError):
        exact.parse_float_token(token)


def test_parse_float_token() -> None:
    assert exact.parse_float_token("1/4") == 0.25
    assert exact.parse_float_token("-2.5") == -2.5
    assert exact.parse_float_token("1e-3") == pytest.approx(0.001)
    with pytest.raises(UnsupportedTokenError, match="outside floating-point range"):
        exact.parse_float_token("1e400")


# ── Overflow-checked arithmetic ─────────────────────────────────────────

class TestExactArithmetic:
    def test_operations_renormalize(self):
        a, b = Rational(1, 2), Rational(1, 3)
        assert exact.add(a, b) == Rational(5, 6)
        assert exact.subtract(a, b) == Rational(1, 6)
        assert exact.multiply(a, b) == Rational(1, 6)
        assert exact.divide(a, b) == Rational(3, 2)
        assert exact.negate(a) == Rational(-1, 2)

    def test_divide_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            exact.divide(Rational(1), Rational(0))

    def test_overflow_is_reported(self):
        big = Rational(2 ** 62)
        with pytest.raises(ExactOverflowError, match="64-bit"):
            exact.multiply(big, Rational(4))

    def test_overflowing_token(self):
        with pytest.raises(ExactOverflowError):
            exact.parse_exact_token("99999999999999999999")

    def test_huge_exponent_stops_early(self):
        with pytest.raises(ExactOverflowError):
            exact.parse_exact_token("1e500")

    def test_narrow_width(self):
        assert exact.checked(127, bits=8) == 127
        with pytest.raises(ExactOverflowError):
            exact.checked(128, bits=8)

    def test_format(self):
        assert exact.format_exact(Rational(-4, 6)) == "-2/3"
        assert exact.format_exact(Rational(10, 5)) == "2"


# ── Formatting ──────────────────────────────────────────────────────────

class TestFmtNum:
    def test_integer(self):
        assert fmt_num(7.0) == "7"

    def test_clean_decimal(self):
        assert fmt_num(2.5) == "2.5"

    def test_rounded_to_ten_places(self):
        assert fmt_num(2 / 3) == "0.6666666667"

    def test_negative_zero(self):
        assert fmt_num(-1e-13) == "0"

    def test_non_finite(self):
        assert fmt_num(float("inf")) == "inf"


def test_vector_text() -> None:
    field = ExactField()
    assert format_vector(field, [Rational(1, 2), Rational(-3)]) == "(1/2, -3)"


def test_polynomial_text() -> None:
    field = ExactField()
    assert format_polynomial(field, [Rational(1), Rational(0), Rational(0)]) == "1"
    assert format_polynomial(field, [Rational(0), Rational(0), Rational(1)]) == "x²"
    assert format_polynomial(field, [Rational(3), Rational(2), Rational(0)]) == "2x + 3"
    assert format_polynomial(field, [Rational(0)] * 3) == "0"


# ── Parsing with locations ──────────────────────────────────────────────

class TestParsing:
    def test_matrix_token_location(self):
        with pytest.raises(UnsupportedTokenError) as info:
            parse_matrix(ExactField(), [["1", "2"], ["3", "x"]], "matrix A")
        assert str(info.value) == "matrix A: 'x' at row 2, column 2: unsupported number format."
        assert info.value.location == (2, 2)

    def test_zero_denominator_location(self):
        with pytest.raises(ZeroDenominatorError, match="row 1, column 2: zero denominator"):
            parse_matrix(NumericField(), [["1", "1/0"]], "matrix A")

    def test_vector_set_location(self):
        with pytest.raises(ZeroDenominatorError) as info:
            parse_vectors(ExactField(), [["1", "2"], ["3", "1/0"]], "basis B")
        assert "at vector 2, entry 2" in str(info.value)
        assert info.value.kind == "zero_denominator"

    def test_ragged_rows(self):
        with pytest.raises(RaggedMatrixError, match="row 2 has 1 entries"):
            parse_matrix(ExactField(), [["1", "2"], ["3"]])

    def test_missing_inputs(self):
        with pytest.raises(MissingInputError):
            parse_matrix(ExactField(), [])
        with pytest.raises(MissingInputError):
            parse_vector(ExactField(), [])
        with pytest.raises(StructuralError, match="at least one vector"):
            parse_vectors(ExactField(), [])

    def test_vector_lengths_must_agree(self):
        with pytest.raises(DimensionMismatchError):
            parse_vectors(ExactField(), [["1", "2"], ["1"]])

    def test_numeric_parse(self):
        assert parse_matrix(NumericField(), [["1/2", "2e1"]]) == [[0.5, 20.0]]
