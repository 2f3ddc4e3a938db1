"""Gaussian elimination shared by every workflow.

``rref`` is the single implementation of reduced row-echelon form; the
pivot strategy and zero test come from the field object, so exact and
numeric mode run the same loop.  The working copy is mutated in place and
never escapes: callers always receive fresh lists.
"""

import logging
from dataclasses import dataclass

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class RrefSummary:
    """Reduced matrix plus pivot columns in elimination order."""

    matrix: list
    pivot_columns: tuple

    @property
    def rank(self) -> int:
        return len(self.pivot_columns)

    @property
    def column_count(self) -> int:
        return len(self.matrix[0]) if self.matrix else 0

    @property
    def free_columns(self) -> tuple:
        pivots = set(self.pivot_columns)
        return tuple(c for c in range(self.column_count) if c not in pivots)

    @property
    def nullity(self) -> int:
        return self.column_count - self.rank


def _copy(matrix) -> list:
    return [list(row) for row in matrix]


def _combine_step(field, target: int, factor, source: int) -> str:
    """``R2 → R2 - 3·R1`` style description for row -= factor·source."""
    negative = field.to_float(factor) < 0
    magnitude = field.neg(factor) if negative else factor
    coef = "" if field.equals(magnitude, field.one) else field.format(magnitude) + "·"
    sign = "+" if negative else "-"
    return f"R{target + 1} → R{target + 1} {sign} {coef}R{source + 1}"


def rref(field, matrix, steps: list | None = None) -> RrefSummary:
    """Reduce *matrix* to RREF.

    For each column left to right the field picks a pivot row at or below
    the current pivot row; the row is swapped into place, scaled so the
    pivot is one and the column is cleared in every other row.  When
    *steps* is a list, one line per row operation is appended to it.
    """
    work = _copy(matrix)
    m = len(work)
    n = len(work[0]) if m else 0
    pivots = []
    r = 0
    for c in range(n):
        if r >= m:
            break
        p = field.choose_pivot([work[i][c] for i in range(m)], r)
        if p is None:
            LOG.debug("column %d has no pivot", c + 1)
            continue
        if p != r:
            work[r], work[p] = work[p], work[r]
            if steps is not None:
                steps.append(f"R{r + 1} ↔ R{p + 1}")

        pivot = work[r][c]
        work[r] = [field.clean(field.div(x, pivot)) for x in work[r]]
        if steps is not None and not field.equals(pivot, field.one):
            steps.append(f"R{r + 1} → R{r + 1} / {field.format(pivot)}")
        work[r][c] = field.one

        for i in range(m):
            if i == r:
                continue
            factor = work[i][c]
            if field.is_zero(factor):
                work[i][c] = field.zero
                continue
            work[i] = [field.clean(field.sub(a, field.mul(factor, b)))
                       for a, b in zip(work[i], work[r])]
            work[i][c] = field.zero
            if steps is not None:
                steps.append(_combine_step(field, i, factor, r))

        pivots.append(c)
        r += 1
    return RrefSummary(work, tuple(pivots))


def ref(field, matrix) -> list:
    """Row echelon form by forward elimination only (no scaling).

    Uses the same pivot rule as :func:`rref`; shown next to the RREF in
    result panels.
    """
    work = _copy(matrix)
    m = len(work)
    n = len(work[0]) if m else 0
    r = 0
    for c in range(n):
        if r >= m:
            break
        p = field.choose_pivot([work[i][c] for i in range(m)], r)
        if p is None:
            continue
        if p != r:
            work[r], work[p] = work[p], work[r]
        pivot = work[r][c]
        for i in range(r + 1, m):
            if field.is_zero(work[i][c]):
                work[i][c] = field.zero
                continue
            factor = field.div(work[i][c], pivot)
            work[i] = [field.clean(field.sub(a, field.mul(factor, b)))
                       for a, b in zip(work[i], work[r])]
            work[i][c] = field.zero
        r += 1
    return work


def rank(field, matrix) -> int:
    if not matrix:
        return 0
    return rref(field, matrix).rank


def null_space_basis(field, summary: RrefSummary, columns: int | None = None) -> list:
    """One basis vector per free column, with that free variable set to 1.

    *columns* restricts the variables to the first ``columns`` columns,
    which is how augmented systems drop their right-hand side.
    """
    n = summary.column_count if columns is None else columns
    pivot_rows = [(k, p) for k, p in enumerate(summary.pivot_columns) if p < n]
    basis = []
    for f in summary.free_columns:
        if f >= n:
            continue
        vec = [field.zero] * n
        vec[f] = field.one
        for k, p in pivot_rows:
            vec[p] = field.neg(summary.matrix[k][f])
        basis.append(vec)
    return basis


def column_space_basis(matrix, summary: RrefSummary) -> list:
    """Original columns at the pivot positions."""
    return [[row[c] for row in matrix] for c in summary.pivot_columns]


def row_space_basis(summary: RrefSummary) -> list:
    """Nonzero rows of the RREF."""
    return [list(summary.matrix[k]) for k in range(summary.rank)]
