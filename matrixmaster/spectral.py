"""Numeric-only factorizations and spectral estimates using NumPy.

None of these raise on numerical trouble.  A near-dependent column, a
missing pivot or a power iteration that never settles comes back as a
result with ``ok=False`` and a ``reason`` the caller can show.

``singular_values`` is a plain power-iteration/deflation approximation on
``AᵀA``.  It does not separate repeated singular values and is not a
substitute for a real SVD.
"""

import logging
import math
from dataclasses import dataclass, field as dc_field

import numpy as np

LOG = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-9
POWER_ITERATION_LIMIT = 120


@dataclass(frozen=True)
class QRResult:
    ok: bool
    q: list = dc_field(default_factory=list)
    r: list = dc_field(default_factory=list)
    reason: str = ""


@dataclass(frozen=True)
class LUResult:
    ok: bool
    l: list = dc_field(default_factory=list)
    u: list = dc_field(default_factory=list)
    permutation: list = dc_field(default_factory=list)
    reason: str = ""


@dataclass(frozen=True)
class EigenResult:
    ok: bool
    value: float | None = None
    vector: list = dc_field(default_factory=list)
    iterations: int = 0
    reason: str = ""


@dataclass(frozen=True)
class SingularValueResult:
    values: list
    complete: bool
    reason: str = ""


def _as_array(matrix) -> np.ndarray:
    return np.array(matrix, dtype=np.float64)


def _clean(arr: np.ndarray, tol: float) -> list:
    out = np.where(np.abs(arr) <= tol, 0.0, arr)
    return out.tolist()


def qr_decomposition(matrix, tolerance: float = DEFAULT_TOLERANCE) -> QRResult:
    """``A = QR`` by modified Gram-Schmidt.

    Each column has its projections onto the earlier orthonormal columns
    removed one at a time.  A residual norm at or below *tolerance* means
    the columns are (nearly) dependent and the factorization fails.
    """
    a = _as_array(matrix)
    m, n = a.shape
    q = np.zeros((m, n))
    r = np.zeros((n, n))
    for j in range(n):
        v = a[:, j].copy()
        for i in range(j):
            r[i, j] = q[:, i] @ v
            v = v - r[i, j] * q[:, i]
        norm = float(np.linalg.norm(v))
        if norm <= tolerance:
            LOG.debug("QR: column %d residual %.3e", j + 1, norm)
            return QRResult(False, reason=(
                f"column {j + 1} is (nearly) a combination of the previous "
                f"columns; QR needs independent columns"))
        r[j, j] = norm
        q[:, j] = v / norm
    return QRResult(True, _clean(q, tolerance), _clean(r, tolerance))


def lu_decomposition(matrix, tolerance: float = DEFAULT_TOLERANCE) -> LUResult:
    """``PA = LU`` with partial pivoting.

    ``permutation[i]`` is the original row that ends up in row ``i``; ``L``
    is unit lower triangular and holds the multipliers.
    """
    a = _as_array(matrix)
    m, n = a.shape
    if m != n:
        return LUResult(False, reason=f"LU needs a square matrix; got {m}×{n}")
    u = a.copy()
    l = np.eye(n)
    perm = list(range(n))
    for k in range(n):
        p = k + int(np.argmax(np.abs(u[k:, k])))
        if abs(u[p, k]) <= tolerance:
            return LUResult(False, reason=f"column {k + 1} has no pivot above tolerance")
        if p != k:
            u[[k, p], :] = u[[p, k], :]
            l[[k, p], :k] = l[[p, k], :k]
            perm[k], perm[p] = perm[p], perm[k]
        for i in range(k + 1, n):
            l[i, k] = u[i, k] / u[k, k]
            u[i, k:] = u[i, k:] - l[i, k] * u[k, k:]
    return LUResult(True, _clean(l, tolerance), _clean(u, tolerance), perm)


def dominant_eigenpair(matrix, tolerance: float = DEFAULT_TOLERANCE,
                       max_iterations: int = POWER_ITERATION_LIMIT) -> EigenResult:
    """Dominant eigenvalue/eigenvector by power iteration.

    Starts from the normalized all-ones vector and stops once successive
    Rayleigh quotients agree within *tolerance*.
    """
    a = _as_array(matrix)
    m, n = a.shape
    if m != n:
        return EigenResult(False, reason=f"eigenvalues need a square matrix; got {m}×{n}")
    v = np.ones(n) / math.sqrt(n)
    previous = None
    for iteration in range(1, max_iterations + 1):
        w = a @ v
        norm = float(np.linalg.norm(w))
        if norm <= tolerance:
            return EigenResult(False, iterations=iteration,
                               reason="the iterate collapsed to zero")
        v = w / norm
        estimate = float(v @ (a @ v))
        if previous is not None and abs(estimate - previous) <= tolerance:
            return EigenResult(True, estimate, _clean(v, tolerance), iteration)
        previous = estimate
    LOG.warning("power iteration did not converge in %d iterations", max_iterations)
    return EigenResult(False, previous, _clean(v, tolerance), max_iterations,
                       reason=f"did not converge in {max_iterations} iterations")


def singular_values(matrix, tolerance: float = DEFAULT_TOLERANCE,
                    max_iterations: int = POWER_ITERATION_LIMIT) -> SingularValueResult:
    """Estimate singular values by deflating the dominant eigenpair of ``AᵀA``."""
    a = _as_array(matrix)
    gram = a.T @ a
    values = []
    reason = ""
    complete = True
    for _ in range(gram.shape[0]):
        pair = dominant_eigenpair(gram, tolerance, max_iterations)
        if not pair.ok:
            if pair.reason != "the iterate collapsed to zero":
                complete = False
                reason = pair.reason
            break
        if pair.value <= tolerance:
            break
        values.append(math.sqrt(pair.value))
        vec = np.array(pair.vector)
        gram = gram - pair.value * np.outer(vec, vec)
    values.sort(reverse=True)
    return SingularValueResult(values, complete, reason)
