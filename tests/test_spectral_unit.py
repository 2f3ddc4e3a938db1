"""Tests for the numeric factorizations and power-iteration estimates."""

import numpy as np
import pytest

from matrixmaster import spectral


class TestQR:
    def test_reconstructs_matrix(self):
        a = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
        result = spectral.qr_decomposition(a)
        assert result.ok
        q, r = np.array(result.q), np.array(result.r)
        assert np.allclose(q @ r, a)
        assert np.allclose(q.T @ q, np.eye(2))
        assert np.allclose(r, np.triu(r))

    def test_dependent_columns_fail(self):
        result = spectral.qr_decomposition([[1.0, 2.0], [2.0, 4.0]])
        assert not result.ok
        assert "column 2" in result.reason


class TestLU:
    def test_partial_pivoting(self):
        a = [[1.0, 2.0], [3.0, 4.0]]
        result = spectral.lu_decomposition(a)
        assert result.ok
        assert result.permutation == [1, 0]
        l, u = np.array(result.l), np.array(result.u)
        assert np.allclose(l @ u, np.array(a)[result.permutation])
        assert np.allclose(np.diag(l), 1.0)

    def test_three_by_three(self):
        a = [[2.0, 1.0, 1.0], [4.0, -6.0, 0.0], [-2.0, 7.0, 2.0]]
        result = spectral.lu_decomposition(a)
        assert result.ok
        assert np.allclose(np.array(result.l) @ np.array(result.u), np.array(a)[result.permutation])

    def test_singular_fails(self):
        result = spectral.lu_decomposition([[1.0, 2.0], [2.0, 4.0]])
        assert not result.ok
        assert "no pivot" in result.reason

    def test_non_square_fails(self):
        assert not spectral.lu_decomposition([[1.0, 2.0, 3.0]]).ok


class TestPowerIteration:
    def test_dominant_eigenvalue(self):
        result = spectral.dominant_eigenpair([[2.0, 0.0], [0.0, 1.0]])
        assert result.ok
        assert result.value == pytest.approx(2.0, abs=1e-6)
        assert abs(result.vector[0]) == pytest.approx(1.0, abs=1e-4)
        assert result.iterations <= spectral.POWER_ITERATION_LIMIT

    def test_symmetric_matrix(self):
        result = spectral.dominant_eigenpair([[2.0, 1.0], [1.0, 2.0]])
        assert result.ok
        assert result.value == pytest.approx(3.0)

    def test_collapsing_iterate(self):
        result = spectral.dominant_eigenpair([[0.0, 1.0], [0.0, 0.0]])
        assert not result.ok
        assert result.reason == "the iterate collapsed to zero"

    def test_iteration_budget(self):
        result = spectral.dominant_eigenpair([[2.0, 0.0], [0.0, 1.0]], max_iterations=3)
        assert not result.ok
        assert "did not converge in 3 iterations" in result.reason


class TestSingularValues:
    def test_diagonal(self):
        result = spectral.singular_values([[3.0, 0.0], [0.0, 2.0]])
        assert result.complete
        assert result.values == pytest.approx([3.0, 2.0], abs=1e-6)

    def test_rank_one(self):
        result = spectral.singular_values([[1.0, 1.0], [1.0, 1.0]])
        assert result.values == pytest.approx([2.0], abs=1e-6)

    def test_zero_matrix(self):
        result = spectral.singular_values([[0.0, 0.0], [0.0, 0.0]])
        assert result.values == []
        assert result.complete

    def test_repeated_values_are_not_separated(self):
        # deflation removes the whole eigenspace seen by the ones seed
        result = spectral.singular_values([[1.0, 0.0], [0.0, 1.0]])
        assert result.values == pytest.approx([1.0])
