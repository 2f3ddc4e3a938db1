"""Linear system classification from the RREF of an augmented matrix."""

import logging
from dataclasses import dataclass, field as dc_field

from matrixmaster.errors import DimensionMismatchError
from matrixmaster.parsing import columns_to_matrix
from matrixmaster.rref import RrefSummary, null_space_basis, rref

LOG = logging.getLogger(__name__)

UNIQUE = "unique"
INFINITE = "infinite"
INCONSISTENT = "inconsistent"


@dataclass(frozen=True)
class SolveOutcome:
    """Tagged result: ``kind`` is one of unique / infinite / inconsistent.

    ``solution`` is set only for unique systems and ``free_variables``
    (0-based column indices) only for infinite ones.
    """

    kind: str
    summary: RrefSummary
    variable_count: int
    solution: list | None = None
    free_variables: tuple = dc_field(default_factory=tuple)
    inconsistent_row: int | None = None


def classify(field, augmented, steps: list | None = None) -> SolveOutcome:
    """Classify ``[A | b]`` as unique, infinite or inconsistent.

    Every RREF row is scanned: an all-zero coefficient part with a nonzero
    right-hand side makes the system inconsistent.  Otherwise a pivot in
    every variable column means a unique solution and anything less an
    infinite family.
    """
    if not augmented or len(augmented[0]) < 2:
        raise DimensionMismatchError(
            "The augmented matrix needs at least 2 columns: "
            "coefficients plus one result column."
        )
    n = len(augmented[0]) - 1
    summary = rref(field, augmented, steps)

    for k, row in enumerate(summary.matrix):
        if all(field.is_zero(x) for x in row[:n]) and not field.is_zero(row[n]):
            LOG.debug("row %d reads 0 = %s", k + 1, field.format(row[n]))
            return SolveOutcome(INCONSISTENT, summary, n, inconsistent_row=k)

    variable_pivots = [p for p in summary.pivot_columns if p < n]
    if len(variable_pivots) == n:
        solution = [field.zero] * n
        for k, p in enumerate(summary.pivot_columns):
            solution[p] = summary.matrix[k][n]
        return SolveOutcome(UNIQUE, summary, n, solution=solution)

    free = tuple(c for c in range(n) if c not in variable_pivots)
    return SolveOutcome(INFINITE, summary, n, free_variables=free)


def particular_solution(field, outcome: SolveOutcome) -> list | None:
    """A solution with every free variable set to 0, or None if inconsistent."""
    if outcome.kind == INCONSISTENT:
        return None
    if outcome.kind == UNIQUE:
        return list(outcome.solution)
    n = outcome.variable_count
    solution = [field.zero] * n
    for k, p in enumerate(outcome.summary.pivot_columns):
        if p < n:
            solution[p] = outcome.summary.matrix[k][n]
    return solution


def homogeneous_directions(field, outcome: SolveOutcome) -> list:
    """Null-space basis of the coefficient part of the system."""
    return null_space_basis(field, outcome.summary, outcome.variable_count)


def solve_with_columns(field, columns, target, steps: list | None = None) -> SolveOutcome:
    """Solve ``c1·v1 + ... + ck·vk = target`` for the given column vectors."""
    if any(len(col) != len(target) for col in columns):
        raise DimensionMismatchError(
            f"The target vector has {len(target)} entries but the basis "
            f"vectors have {len(columns[0])}."
        )
    augmented = [row + [t] for row, t in zip(columns_to_matrix(columns), target)]
    return classify(field, augmented, steps)


def residuals(field, augmented, solution) -> list:
    """``A·x - b`` for each equation, used to verify a solution."""
    n = len(augmented[0]) - 1
    out = []
    for row in augmented:
        total = field.zero
        for a, x in zip(row[:n], solution):
            total = field.add(total, field.mul(a, x))
        out.append(field.sub(total, row[n]))
    return out
