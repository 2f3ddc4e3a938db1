"""Solve workflow: classify ``[A | b]`` and describe its solution set."""

import logging

from matrixmaster.formatting import format_vector
from matrixmaster.systems import (
    INCONSISTENT,
    UNIQUE,
    classify,
    homogeneous_directions,
    particular_solution,
    residuals,
)
from matrixmaster.workflows.common import (
    ResultBuilder,
    combination_text,
    require_matrix,
    variable_names,
)

LOG = logging.getLogger(__name__)


def _parametric_line(field, summary, row: int, pivot: int, free, names) -> str:
    """``x1 = 2 - x2`` for one pivot row of an infinite family."""
    rhs = summary.matrix[row][-1]
    coefficients = [field.neg(summary.matrix[row][f]) for f in free]
    tail = combination_text(field, coefficients, [names[f] for f in free])
    if tail == "0":
        return f"{names[pivot]} = {field.format(rhs)}"
    if field.is_zero(rhs):
        return f"{names[pivot]} = {tail}"
    if tail.startswith("-"):
        return f"{names[pivot]} = {field.format(rhs)} - {tail[1:]}"
    return f"{names[pivot]} = {field.format(rhs)} + {tail}"


def run(request, field, settings=None):
    augmented = require_matrix(field, request.matrix, "augmented matrix")
    out = ResultBuilder(field)
    out.steps.append("Row-reduce the augmented matrix [A | b]")
    outcome = classify(field, augmented, out.steps)
    summary = outcome.summary
    n = outcome.variable_count
    names = variable_names(n)

    coefficient_rank = len([p for p in summary.pivot_columns if p < n])
    out.note(f"rank(A) = {coefficient_rank}, rank([A | b]) = {summary.rank}, variables = {n}")
    out.row_reduction("augmented matrix [A | b]", augmented, summary.matrix,
                      separator_after_column=n - 1)
    out.matrix_payload("Solve RREF", summary.matrix)

    if outcome.kind == INCONSISTENT:
        k = outcome.inconsistent_row
        out.answer("Inconsistent system: no solution")
        out.note(f"Row {k + 1} of the RREF reads 0 = {field.format(summary.matrix[k][n])}")
        LOG.debug("solve: inconsistent at row %d", k + 1)
        return out.build()

    if outcome.kind == UNIQUE:
        solution = outcome.solution
        out.answer("Unique solution: " + ", ".join(
            f"{name} = {field.format(x)}" for name, x in zip(names, solution)))
        out.vector_object("x", solution)
        out.vector_payload("Solve solution", "x", solution)
        check = residuals(field, augmented, solution)
        if all(field.is_zero(r) for r in check):
            out.note(f"Substitution check: all {len(augmented)} equations hold")
        else:
            out.note("Substitution check failed: residuals " + format_vector(field, check))
        return out.build()

    free = outcome.free_variables
    free_names = ", ".join(names[f] for f in free)
    out.answer(f"Infinitely many solutions; free variable(s): {free_names}")
    for row, pivot in enumerate(summary.pivot_columns):
        if pivot < n:
            out.note(_parametric_line(field, summary, row, pivot, free, names))
    for f in free:
        out.note(f"{names[f]} is free")

    particular = particular_solution(field, outcome)
    out.note("Particular solution (free variables = 0): " + format_vector(field, particular))
    out.vector_object("particular solution", particular)
    out.vector_payload("Solve particular solution", "x_p", particular)
    for f, direction in zip(free, homogeneous_directions(field, outcome)):
        out.vector_object(f"direction for {names[f]}", direction)
    return out.build()
