"""Tests for basis tests, sums, intersections, span and independence."""

import pytest
from sympy import Rational

from matrixmaster.errors import DimensionMismatchError, StructuralError
from matrixmaster.fields import ExactField, NumericField
from matrixmaster.parsing import parse_vectors
from matrixmaster.subspaces import (
    basis_test,
    coordinates,
    direct_sum_check,
    extend_to_basis,
    independence,
    prune,
    relate_subspaces,
    span_membership,
    subspace_intersection,
    subspace_sum,
    verify_relation,
)

EXACT = ExactField()


def _vs(vectors, field=EXACT):
    return parse_vectors(field, vectors)


# ── Basis test / prune / extend ─────────────────────────────────────────

class TestBasis:
    def test_standard_basis(self):
        result = basis_test(EXACT, _vs([["1", "0"], ["0", "1"]]))
        assert result.is_basis
        assert result.pivot_indices == (0, 1)

    def test_dependent_set_extracts_pivots(self):
        result = basis_test(EXACT, _vs([["1", "2", "0"], ["2", "4", "0"], ["0", "0", "1"]]))
        assert not result.independent
        assert not result.spans
        assert result.rank == 2
        assert result.basis == [[1, 2, 0], [0, 0, 1]]

    def test_dimension_must_match(self):
        with pytest.raises(DimensionMismatchError):
            basis_test(EXACT, _vs([["1", "0"]]), dimension=3)

    def test_prune(self):
        kept, indices = prune(EXACT, _vs([["1", "1"], ["2", "2"], ["0", "1"]]))
        assert indices == (0, 2)
        assert kept == [[1, 1], [0, 1]]

    def test_extend_tries_standard_vectors_in_order(self):
        result = extend_to_basis(EXACT, _vs([["1", "1", "0"]]))
        assert result.added_standard == (0, 2)
        assert result.complete
        assert result.basis == [[1, 1, 0], [1, 0, 0], [0, 0, 1]]

    def test_extend_prunes_first(self):
        result = extend_to_basis(EXACT, _vs([["1", "0"], ["2", "0"]]))
        assert result.kept_indices == (0,)
        assert result.added_standard == (1,)


# ── Sum / intersection / direct sum ─────────────────────────────────────

class TestRelations:
    def test_direct_sum_in_plane(self):
        relation = direct_sum_check(EXACT, _vs([["1", "0"]]), _vs([["0", "1"]]))
        assert relation.is_direct_sum
        assert relation.dim_intersection == 0
        assert relation.dim_sum == 2

    def test_intersection_of_coordinate_planes(self):
        u = _vs([["1", "0", "0"], ["0", "1", "0"]])
        w = _vs([["0", "1", "0"], ["0", "0", "1"]])
        basis = subspace_intersection(EXACT, u, w)
        assert len(basis) == 1
        x, y, z = basis[0]
        assert x == 0 and z == 0 and y != 0
        assert not direct_sum_check(EXACT, u, w).is_direct_sum

    def test_sum(self):
        basis, pivots = subspace_sum(EXACT, _vs([["1", "0", "0"]]), _vs([["2", "0", "0"], ["0", "0", "1"]]))
        assert pivots == (0, 2)
        assert basis == [[1, 0, 0], [0, 0, 1]]

    @pytest.mark.parametrize(
        "u,w",
        [
            ([["1", "0"]], [["0", "1"]]),
            ([["1", "0", "0"], ["0", "1", "0"]], [["0", "1", "0"], ["0", "0", "1"]]),
            ([["1", "2", "3"]], [["2", "4", "6"]]),
            ([["1", "1", "0", "0"], ["0", "1", "1", "0"]], [["1", "0", "-1", "0"], ["0", "0", "0", "1"]]),
            ([["1", "0"], ["0", "1"], ["1", "1"]], [["1", "-1"]]),
        ],
    )
    @pytest.mark.parametrize("field", [ExactField(), NumericField()], ids=["exact", "numeric"])
    def test_dimension_formula(self, field, u, w):
        relation = relate_subspaces(field, _vs(u, field), _vs(w, field))
        assert relation.dim_u + relation.dim_w - relation.dim_intersection == relation.dim_sum

    def test_ambient_dimensions_must_match(self):
        with pytest.raises(DimensionMismatchError):
            subspace_sum(EXACT, _vs([["1", "0"]]), _vs([["1", "0", "0"]]))

    def test_empty_set(self):
        with pytest.raises(StructuralError):
            subspace_sum(EXACT, [], _vs([["1"]]))


# ── Span / coordinates / independence ──────────────────────────────────

class TestSpanCoordinates:
    def test_span_witness(self):
        result = span_membership(EXACT, _vs([["1", "0"], ["0", "1"]]), [Rational(3), Rational(4)])
        assert result.in_span and result.unique
        assert result.coefficients == [3, 4]

    def test_not_in_span(self):
        result = span_membership(EXACT, _vs([["1", "1", "0"]]), [Rational(0), Rational(0), Rational(1)])
        assert not result.in_span
        assert result.coefficients is None

    def test_coordinates_unique(self):
        result = coordinates(EXACT, _vs([["1", "1"], ["1", "-1"]]), [Rational(3), Rational(1)])
        assert result.coefficients == [2, 1]

    def test_coordinates_in_dependent_set(self):
        vectors = _vs([["1", "0"], ["2", "0"]])
        result = coordinates(EXACT, vectors, [Rational(4), Rational(0)])
        assert result.in_span and not result.unique
        assert result.coefficients == [4, 0]
        assert result.homogeneous == [[-2, 1]]

    def test_target_required(self):
        with pytest.raises(StructuralError, match="requires a target vector"):
            span_membership(EXACT, _vs([["1", "0"]]), None)

    def test_target_length(self):
        with pytest.raises(DimensionMismatchError):
            coordinates(EXACT, _vs([["1", "0"]]), [Rational(1)])


class TestIndependence:
    def test_dependent_pair(self):
        vectors = _vs([["1", "2"], ["2", "4"]])
        result = independence(EXACT, vectors)
        assert not result.independent
        c1, c2 = result.relation
        assert c1 == -2 * c2
        assert verify_relation(EXACT, vectors, result.relation)

    def test_independent(self):
        result = independence(NumericField(), _vs([["1", "0"], ["1", "1"]], NumericField()))
        assert result.independent
        assert result.relation is None
