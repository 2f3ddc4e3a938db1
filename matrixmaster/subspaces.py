"""Subspace workflows built on the row-reduction core.

Every operation puts a set of vectors side by side as columns and reads
the answer off the RREF pivots or its null space.
"""

import logging
from dataclasses import dataclass, field as dc_field

from matrixmaster.errors import DimensionMismatchError, StructuralError
from matrixmaster.parsing import columns_to_matrix
from matrixmaster.rref import RrefSummary, null_space_basis, rank, rref
from matrixmaster.systems import (
    INCONSISTENT,
    UNIQUE,
    SolveOutcome,
    homogeneous_directions,
    particular_solution,
    solve_with_columns,
)

LOG = logging.getLogger(__name__)


def _require_vectors(vectors, label: str) -> int:
    if not vectors:
        raise StructuralError(f"{label} requires at least one vector.")
    return len(vectors[0])


def _require_same_space(u, w) -> int:
    du = _require_vectors(u, "U")
    dw = _require_vectors(w, "W")
    if du != dw:
        raise DimensionMismatchError(
            f"U lives in R^{du} but W lives in R^{dw}; both sets need the same ambient dimension."
        )
    return du


def _reduce_columns(field, vectors) -> RrefSummary:
    return rref(field, columns_to_matrix(vectors))


def is_zero_vector(field, vector) -> bool:
    return all(field.is_zero(x) for x in vector)


def standard_basis_vector(field, n: int, i: int) -> list:
    return [field.one if j == i else field.zero for j in range(n)]


def linear_combination(field, coefficients, vectors) -> list:
    n = len(vectors[0])
    out = [field.zero] * n
    for c, vec in zip(coefficients, vectors):
        if field.is_zero(c):
            continue
        out = [field.add(a, field.mul(c, b)) for a, b in zip(out, vec)]
    return [field.clean(x) for x in out]


# ── Basis test / extract / extend / prune ───────────────────────────────

@dataclass(frozen=True)
class BasisTestResult:
    rank: int
    dimension: int
    vector_count: int
    independent: bool
    spans: bool
    pivot_indices: tuple
    basis: list

    @property
    def is_basis(self) -> bool:
        return self.independent and self.spans


def basis_test(field, vectors, dimension: int | None = None) -> BasisTestResult:
    """Independence, spanning and an extracted basis for *vectors*."""
    n = _require_vectors(vectors, "A basis test")
    dimension = n if dimension is None else dimension
    if dimension != n:
        raise DimensionMismatchError(
            f"The vectors have {n} entries but the ambient dimension is {dimension}."
        )
    summary = _reduce_columns(field, vectors)
    r = summary.rank
    return BasisTestResult(
        rank=r,
        dimension=dimension,
        vector_count=len(vectors),
        independent=r == len(vectors),
        spans=r == dimension,
        pivot_indices=summary.pivot_columns,
        basis=[list(vectors[i]) for i in summary.pivot_columns],
    )


def prune(field, vectors) -> tuple:
    """Keep the pivot-column vectors; returns ``(vectors, indices)``."""
    _require_vectors(vectors, "Pruning")
    summary = _reduce_columns(field, vectors)
    return [list(vectors[i]) for i in summary.pivot_columns], summary.pivot_columns


@dataclass(frozen=True)
class ExtendResult:
    kept_indices: tuple
    added_standard: tuple
    basis: list
    dimension: int

    @property
    def complete(self) -> bool:
        return len(self.basis) == self.dimension


def extend_to_basis(field, vectors, dimension: int | None = None) -> ExtendResult:
    """Prune *vectors*, then append standard basis vectors that raise rank.

    ``e_1 ... e_n`` are tried in index order and a candidate is kept only
    when it strictly increases the rank.  Stops at full rank or when the
    candidates run out.
    """
    n = _require_vectors(vectors, "Extending to a basis")
    dimension = n if dimension is None else dimension
    if dimension != n:
        raise DimensionMismatchError(
            f"The vectors have {n} entries but the ambient dimension is {dimension}."
        )
    basis, kept = prune(field, vectors)
    current = len(basis)
    added = []
    for i in range(n):
        if current >= dimension:
            break
        candidate = standard_basis_vector(field, n, i)
        new_rank = rank(field, columns_to_matrix(basis + [candidate]))
        if new_rank > current:
            basis.append(candidate)
            added.append(i)
            current = new_rank
    if current < dimension:
        LOG.warning("extend_to_basis stopped at rank %d of %d", current, dimension)
    return ExtendResult(tuple(kept), tuple(added), basis, dimension)


# ── Sum / intersection / direct sum ─────────────────────────────────────

@dataclass(frozen=True)
class SubspaceRelation:
    dim_u: int
    dim_w: int
    dim_sum: int
    dim_intersection: int
    sum_basis: list
    intersection_basis: list
    u_basis: list = dc_field(default_factory=list)
    w_basis: list = dc_field(default_factory=list)

    @property
    def is_direct_sum(self) -> bool:
        return self.dim_intersection == 0

    @property
    def dimension_formula_holds(self) -> bool:
        return self.dim_u + self.dim_w - self.dim_intersection == self.dim_sum


def subspace_sum(field, u, w) -> tuple:
    """Basis of U + W from the pivot columns of ``[U | W]``."""
    _require_same_space(u, w)
    combined = list(u) + list(w)
    summary = _reduce_columns(field, combined)
    return [list(combined[i]) for i in summary.pivot_columns], summary.pivot_columns


def subspace_intersection(field, u, w) -> list:
    """Basis of U ∩ W.

    Relations ``U·a = W·b`` are the null space of ``[U | -W]``; each
    relation's U-part gives a vector ``Σ a_i u_i`` in the intersection.
    Zero candidates are dropped and an independent subset is kept.
    """
    _require_same_space(u, w)
    k = len(u)
    negated_w = [[field.neg(x) for x in vec] for vec in w]
    summary = _reduce_columns(field, list(u) + negated_w)
    candidates = []
    for relation in null_space_basis(field, summary):
        vec = linear_combination(field, relation[:k], u)
        if not is_zero_vector(field, vec):
            candidates.append(vec)
    if not candidates:
        return []
    basis, _ = prune(field, candidates)
    return basis


def relate_subspaces(field, u, w) -> SubspaceRelation:
    """Dimensions and bases of U, W, U + W and U ∩ W together."""
    _require_same_space(u, w)
    u_basis, _ = prune(field, u)
    w_basis, _ = prune(field, w)
    sum_basis, _ = subspace_sum(field, u, w)
    intersection = subspace_intersection(field, u, w)
    relation = SubspaceRelation(
        dim_u=len(u_basis),
        dim_w=len(w_basis),
        dim_sum=len(sum_basis),
        dim_intersection=len(intersection),
        sum_basis=sum_basis,
        intersection_basis=intersection,
        u_basis=u_basis,
        w_basis=w_basis,
    )
    if not relation.dimension_formula_holds:
        LOG.warning("dimension formula failed: %d + %d - %d != %d",
                    relation.dim_u, relation.dim_w,
                    relation.dim_intersection, relation.dim_sum)
    return relation


def direct_sum_check(field, u, w) -> SubspaceRelation:
    """U ⊕ W holds iff the intersection is trivial; see ``is_direct_sum``."""
    return relate_subspaces(field, u, w)


# ── Span membership / coordinates / independence ────────────────────────

@dataclass(frozen=True)
class SpanResult:
    in_span: bool
    unique: bool
    coefficients: list | None
    homogeneous: list
    outcome: SolveOutcome


def _span_solve(field, vectors, target, steps=None) -> SpanResult:
    n = _require_vectors(vectors, "The basis")
    if target is None or len(target) == 0:
        raise StructuralError("This analysis requires a target vector x.")
    if len(target) != n:
        raise DimensionMismatchError(
            f"The target vector has {len(target)} entries but the basis vectors have {n}."
        )
    outcome = solve_with_columns(field, vectors, target, steps)
    if outcome.kind == INCONSISTENT:
        return SpanResult(False, False, None, [], outcome)
    return SpanResult(
        in_span=True,
        unique=outcome.kind == UNIQUE,
        coefficients=particular_solution(field, outcome),
        homogeneous=homogeneous_directions(field, outcome),
        outcome=outcome,
    )


def span_membership(field, vectors, target, steps=None) -> SpanResult:
    """Is *target* a combination of *vectors*?  Witness coefficients if so."""
    return _span_solve(field, vectors, target, steps)


def coordinates(field, vectors, target, steps=None) -> SpanResult:
    """Coordinates of *target* relative to *vectors*.

    Unique when the vectors are independent; otherwise one witness with the
    free variables at zero plus the homogeneous directions.
    """
    return _span_solve(field, vectors, target, steps)


@dataclass(frozen=True)
class IndependenceResult:
    independent: bool
    rank: int
    vector_count: int
    relation: list | None
    pivot_indices: tuple


def independence(field, vectors, steps=None) -> IndependenceResult:
    """Rank test; a dependent set also gets a literal relation ``Σ c_i v_i = 0``."""
    _require_vectors(vectors, "An independence test")
    summary = rref(field, columns_to_matrix(vectors), steps)
    independent = summary.rank == len(vectors)
    relation = None
    if not independent:
        relation = null_space_basis(field, summary)[0]
    return IndependenceResult(independent, summary.rank, len(vectors),
                              relation, summary.pivot_columns)


def verify_relation(field, vectors, relation) -> bool:
    return is_zero_vector(field, linear_combination(field, relation, vectors))
