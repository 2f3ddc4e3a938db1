"""Tests for linear map analysis relative to domain/codomain bases."""

import pytest
from sympy import Rational

from matrixmaster import algebra
from matrixmaster.errors import DimensionMismatchError, SingularBasisError, StructuralError
from matrixmaster.fields import ExactField, NumericField
from matrixmaster.linear_maps import analyze_linear_map
from matrixmaster.parsing import parse_matrix, parse_vectors

EXACT = ExactField()


def _std(n, field=EXACT):
    return algebra.identity(field, n)


def test_projection_in_standard_bases() -> None:
    a = parse_matrix(EXACT, [["1", "0"], ["0", "0"]])
    report = analyze_linear_map(EXACT, _std(2), _std(2), matrix=a)
    assert report.rank == 1
    assert report.nullity == 1
    assert not report.injective and not report.surjective and not report.bijective
    assert report.kernel_basis == [[0, 1]]
    assert report.range_basis == [[1, 0]]
    assert report.representation == a
    assert report.similarity.similar


def test_change_of_basis_keeps_invariants() -> None:
    a = parse_matrix(EXACT, [["2", "0"], ["0", "3"]])
    beta = parse_vectors(EXACT, [["1", "1"], ["1", "-1"]])
    report = analyze_linear_map(EXACT, beta, _std(2), matrix=a)
    sim = report.similarity
    assert report.bijective
    assert sim.similar
    assert sim.trace_beta == sim.trace_gamma == 5
    assert sim.det_beta == sim.det_gamma == 6
    assert sim.rep_gamma == a
    assert sim.rep_beta == [[Rational(5, 2), Rational(-1, 2)], [Rational(-1, 2), Rational(5, 2)]]
    # [T]^β_γ with γ standard is A·B
    assert report.representation == [[2, 2], [3, -3]]


def test_matrix_recovered_from_basis_images() -> None:
    beta = parse_vectors(EXACT, [["1", "1"], ["1", "-1"]])
    images = parse_matrix(EXACT, [["3", "-1"], ["7", "-1"]])
    report = analyze_linear_map(EXACT, beta, _std(2), images=images)
    assert report.standard_matrix == [[1, 2], [3, 4]]


def test_rectangular_map_skips_similarity() -> None:
    a = parse_matrix(EXACT, [["1", "0", "0"], ["0", "1", "0"]])
    report = analyze_linear_map(EXACT, _std(3), _std(2), matrix=a)
    assert report.surjective and not report.injective
    assert report.kernel_basis == [[0, 0, 1]]
    assert report.similarity is None


def test_numeric_mode() -> None:
    field = NumericField()
    a = parse_matrix(field, [["1", "2"], ["3", "4"]])
    beta = parse_vectors(field, [["1", "1"], ["0", "1"]])
    report = analyze_linear_map(field, beta, _std(2, field), matrix=a)
    assert report.similarity.similar
    assert report.similarity.det_beta == pytest.approx(-2.0)


class TestFailures:
    def test_singular_domain_basis(self):
        beta = parse_vectors(EXACT, [["1", "2"], ["2", "4"]])
        with pytest.raises(SingularBasisError, match="domain basis matrix is singular"):
            analyze_linear_map(EXACT, beta, _std(2), matrix=_std(2))

    def test_basis_must_be_square(self):
        beta = parse_vectors(EXACT, [["1", "0"]])
        with pytest.raises(DimensionMismatchError, match="needs exactly 2"):
            analyze_linear_map(EXACT, beta, _std(2), matrix=_std(2))

    def test_map_shape(self):
        with pytest.raises(DimensionMismatchError, match="must be 2×2"):
            analyze_linear_map(EXACT, _std(2), _std(2), matrix=_std(3))

    def test_exactly_one_definition(self):
        with pytest.raises(StructuralError):
            analyze_linear_map(EXACT, _std(2), _std(2))
        with pytest.raises(StructuralError):
            analyze_linear_map(EXACT, _std(2), _std(2), matrix=_std(2), images=_std(2))
