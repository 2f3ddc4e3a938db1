"""Tests for matrix algebra: products, powers, determinants and inverses."""

import pytest
from sympy import Rational

from matrixmaster import algebra
from matrixmaster.errors import DimensionMismatchError, StructuralError
from matrixmaster.fields import ExactField, NumericField
from matrixmaster.parsing import parse_matrix

EXACT = ExactField()
NUMERIC = NumericField()


def _m(rows, field=EXACT):
    return parse_matrix(field, rows)


# ── Elementwise and products ────────────────────────────────────────────

class TestArithmetic:
    def test_add_and_subtract(self):
        a, b = _m([["1", "2"], ["3", "4"]]), _m([["1/2", "0"], ["0", "1"]])
        assert algebra.add(EXACT, a, b) == [[Rational(3, 2), 2], [3, 5]]
        assert algebra.subtract(EXACT, a, b) == [[Rational(1, 2), 2], [3, 3]]

    def test_shape_mismatch(self):
        with pytest.raises(DimensionMismatchError, match="same shape"):
            algebra.add(EXACT, _m([["1", "2"]]), _m([["1"], ["2"]]))

    def test_multiply(self):
        a, b = _m([["1", "2"], ["3", "4"]]), _m([["5", "6"], ["7", "8"]])
        assert algebra.multiply(EXACT, a, b) == [[19, 22], [43, 50]]

    def test_multiply_inner_dimension(self):
        with pytest.raises(DimensionMismatchError, match="inner dimensions"):
            algebra.multiply(EXACT, _m([["1", "2"]]), _m([["1", "2"]]))

    def test_matrix_vector(self):
        a = _m([["1", "2"], ["3", "4"]])
        assert algebra.matrix_vector(EXACT, a, [Rational(1), Rational(-1)]) == [-1, -1]
        with pytest.raises(DimensionMismatchError):
            algebra.matrix_vector(EXACT, a, [Rational(1)])

    def test_transpose(self):
        assert algebra.transpose(_m([["1", "2", "3"]])) == [[1], [2], [3]]

    def test_power_and_trace(self):
        a = _m([["1", "1"], ["0", "1"]])
        assert algebra.power(EXACT, a, 3) == [[1, 3], [0, 1]]
        assert algebra.trace(EXACT, _m([["1", "2"], ["3", "4"]])) == 5

    def test_large_power_uses_squaring(self):
        ident = algebra.identity(EXACT, 2)
        assert algebra.power(EXACT, ident, 10 ** 9) == ident

    @pytest.mark.parametrize("k", [1, 2, 5, 8])
    def test_power_matches_repeated_product(self, k):
        a = _m([["1", "1"], ["1", "0"]])
        expected = a
        for _ in range(k - 1):
            expected = algebra.multiply(EXACT, expected, a)
        assert algebra.power(EXACT, a, k) == expected

    def test_power_needs_positive_exponent(self):
        with pytest.raises(StructuralError):
            algebra.power(EXACT, _m([["1"]]), 0)

    def test_trace_needs_square(self):
        with pytest.raises(DimensionMismatchError, match="square"):
            algebra.trace(EXACT, _m([["1", "2"]]))


# ── Determinant and inverse ─────────────────────────────────────────────

class TestDeterminantInverse:
    def test_two_by_two(self):
        a = _m([["1", "2"], ["3", "4"]])
        assert algebra.determinant(EXACT, a) == -2
        assert algebra.inverse(EXACT, a) == [[-2, 1], [Rational(3, 2), Rational(-1, 2)]]

    def test_row_swap_flips_sign(self):
        steps = []
        assert algebra.determinant(EXACT, _m([["0", "1"], ["1", "0"]]), steps) == -1
        assert steps[0] == "R1 ↔ R2 (sign flips)"

    def test_singular(self):
        a = _m([["1", "2"], ["2", "4"]])
        assert algebra.determinant(EXACT, a) == 0
        assert algebra.inverse(EXACT, a) is None

    @pytest.mark.parametrize(
        "rows",
        [
            [["1", "2"], ["3", "4"]],
            [["2", "0", "1"], ["1", "3", "2"], ["1", "1", "2"]],
            [["1/2", "1/3"], ["1/4", "1/5"]],
        ],
    )
    def test_det_of_inverse_is_reciprocal(self, rows):
        a = _m(rows)
        inv = algebra.inverse(EXACT, a)
        assert algebra.determinant(EXACT, a) * algebra.determinant(EXACT, inv) == 1
        assert algebra.multiply(EXACT, a, inv) == algebra.identity(EXACT, len(a))

        a = _m(rows, NUMERIC)
        inv = algebra.inverse(NUMERIC, a)
        product = algebra.determinant(NUMERIC, a) * algebra.determinant(NUMERIC, inv)
        assert abs(product - 1) <= 1e-9

    def test_numeric_small_pivots_keep_determinant(self):
        a = [[1e-5, 0.0], [0.0, 1e-5]]
        det = algebra.determinant(NUMERIC, a)
        assert det == pytest.approx(1e-10)
        inv = algebra.inverse(NUMERIC, a)
        assert abs(det * algebra.determinant(NUMERIC, inv) - 1) <= 1e-9

    def test_numeric_near_singular_has_no_inverse(self):
        a = [[1.0, 2.0], [2.0, 4.0 + 1e-12]]
        assert algebra.inverse(NUMERIC, a) is None
        assert algebra.determinant(NUMERIC, a) == 0.0

    def test_matrices_equal(self):
        assert algebra.matrices_equal(NUMERIC, [[1.0]], [[1.0 + 1e-12]])
        assert not algebra.matrices_equal(NUMERIC, [[1.0]], [[1.0, 0.0]])
