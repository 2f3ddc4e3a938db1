"""Dimension-checked matrix algebra over either field.

Matrices are lists of rows and vectors are flat lists.  Nothing here
mutates its arguments.  ``inverse`` returns ``None`` for a singular
matrix: that is an answer to report, not an error.
"""

import logging

from matrixmaster.errors import DimensionMismatchError, StructuralError
from matrixmaster.rref import rref

LOG = logging.getLogger(__name__)


def shape(matrix) -> tuple:
    return len(matrix), (len(matrix[0]) if matrix else 0)


def shape_str(matrix) -> str:
    m, n = shape(matrix)
    return f"{m}×{n}"


def identity(field, n: int) -> list:
    return [[field.one if i == j else field.zero for j in range(n)] for i in range(n)]


def _require_square(matrix, what: str) -> int:
    m, n = shape(matrix)
    if m != n:
        raise DimensionMismatchError(f"{what} needs a square matrix; got {m}×{n}.")
    return n


def _require_same_shape(a, b, what: str) -> None:
    if shape(a) != shape(b):
        raise DimensionMismatchError(
            f"{what} needs matrices of the same shape; got {shape_str(a)} and {shape_str(b)}."
        )


def add(field, a, b) -> list:
    _require_same_shape(a, b, "Matrix addition")
    return [[field.add(x, y) for x, y in zip(ra, rb)] for ra, rb in zip(a, b)]


def subtract(field, a, b) -> list:
    _require_same_shape(a, b, "Matrix subtraction")
    return [[field.sub(x, y) for x, y in zip(ra, rb)] for ra, rb in zip(a, b)]


def multiply(field, a, b) -> list:
    (m, k), (k2, n) = shape(a), shape(b)
    if k != k2:
        raise DimensionMismatchError(
            f"Cannot multiply {m}×{k} by {k2}×{n}: inner dimensions differ."
        )
    out = []
    for i in range(m):
        row = []
        for j in range(n):
            total = field.zero
            for t in range(k):
                total = field.add(total, field.mul(a[i][t], b[t][j]))
            row.append(field.clean(total))
        out.append(row)
    return out


def matrix_vector(field, a, v) -> list:
    m, n = shape(a)
    if n != len(v):
        raise DimensionMismatchError(
            f"Cannot multiply a {m}×{n} matrix by a vector with {len(v)} entries."
        )
    out = []
    for row in a:
        total = field.zero
        for x, y in zip(row, v):
            total = field.add(total, field.mul(x, y))
        out.append(field.clean(total))
    return out


def vector_add(field, u, v) -> list:
    if len(u) != len(v):
        raise DimensionMismatchError(
            f"Vector addition needs equal lengths; got {len(u)} and {len(v)}."
        )
    return [field.add(x, y) for x, y in zip(u, v)]


def scalar_vector(field, c, v) -> list:
    return [field.mul(c, x) for x in v]


def scalar_matrix(field, c, a) -> list:
    return [[field.mul(c, x) for x in row] for row in a]


def transpose(matrix) -> list:
    if not matrix:
        return []
    return [[row[j] for row in matrix] for j in range(len(matrix[0]))]


def power(field, a, exponent: int) -> list:
    """``A^k`` by repeated squaring, ``k >= 1``.

    Only powers ``A^(2^j)`` with ``2^j <= k`` are formed, so no intermediate
    product exceeds the requested power.
    """
    _require_square(a, "Matrix power")
    if exponent < 1:
        raise StructuralError(f"The exponent must be at least 1; got {exponent}.")
    result = None
    base = [list(row) for row in a]
    k = exponent
    while True:
        if k & 1:
            result = base if result is None else multiply(field, result, base)
        k >>= 1
        if not k:
            return result
        base = multiply(field, base, base)


def trace(field, a):
    n = _require_square(a, "Trace")
    total = field.zero
    for i in range(n):
        total = field.add(total, a[i][i])
    return total


def determinant(field, a, steps: list | None = None):
    """Determinant by triangularization with row-swap sign tracking.

    A column with no usable pivot makes the determinant zero immediately.
    """
    n = _require_square(a, "Determinant")
    work = [list(row) for row in a]
    sign = 1
    for c in range(n):
        p = field.choose_pivot([work[i][c] for i in range(n)], c)
        if p is None:
            if steps is not None:
                steps.append(f"Column {c + 1} has no pivot, so det = 0")
            return field.zero
        if p != c:
            work[c], work[p] = work[p], work[c]
            sign = -sign
            if steps is not None:
                steps.append(f"R{c + 1} ↔ R{p + 1} (sign flips)")
        pivot = work[c][c]
        for i in range(c + 1, n):
            if field.is_zero(work[i][c]):
                continue
            factor = field.div(work[i][c], pivot)
            work[i] = [field.clean(field.sub(x, field.mul(factor, y)))
                       for x, y in zip(work[i], work[c])]
    det = field.from_int(sign)
    for i in range(n):
        det = field.mul(det, work[i][i])
    if steps is not None:
        diag = " · ".join(field.format(work[i][i]) for i in range(n))
        prefix = "" if sign > 0 else "-"
        steps.append(f"det = {prefix}({diag}) = {field.format(det)}")
    return det


def inverse(field, a, steps: list | None = None):
    """Gauss-Jordan on ``[A | I]``; None when some column lacks a pivot."""
    n = _require_square(a, "Inverse")
    augmented = [list(row) + ident for row, ident in zip(a, identity(field, n))]
    summary = rref(field, augmented, steps)
    if tuple(p for p in summary.pivot_columns if p < n) != tuple(range(n)):
        LOG.debug("inverse: only %d of %d pivots", len([p for p in summary.pivot_columns if p < n]), n)
        return None
    return [row[n:] for row in summary.matrix]


def matrices_equal(field, a, b) -> bool:
    if shape(a) != shape(b):
        return False
    return all(field.equals(x, y) for ra, rb in zip(a, b) for x, y in zip(ra, rb))
