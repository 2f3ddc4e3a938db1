"""Linear map analysis relative to a domain basis β and codomain basis γ.

Bases arrive as lists of vectors and are used as the columns of ``B`` and
``G``.  The map is given either by its standard matrix ``A`` or by the
images ``Y = [T(b1) ... T(bn)]`` of the domain basis, in which case
``A = Y·B⁻¹``.
"""

import logging
from dataclasses import dataclass

from matrixmaster import algebra
from matrixmaster.errors import (
    DimensionMismatchError,
    SingularBasisError,
    StructuralError,
)
from matrixmaster.parsing import columns_to_matrix
from matrixmaster.rref import column_space_basis, null_space_basis, rref

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarityReport:
    change_gamma_from_beta: list
    change_beta_from_gamma: list
    rep_beta: list
    rep_gamma: list
    similar: bool
    trace_beta: object
    trace_gamma: object
    det_beta: object
    det_gamma: object


@dataclass(frozen=True)
class LinearMapAnalysis:
    standard_matrix: list
    domain_dimension: int
    codomain_dimension: int
    rank: int
    nullity: int
    kernel_basis: list
    range_basis: list
    injective: bool
    surjective: bool
    representation: list
    similarity: SimilarityReport | None

    @property
    def bijective(self) -> bool:
        return (self.injective and self.surjective
                and self.domain_dimension == self.codomain_dimension)


def _basis_matrix(field, vectors, which: str) -> tuple:
    """Return ``(matrix, inverse)`` for a basis used as columns."""
    if not vectors:
        raise StructuralError(f"The {which} basis requires at least one vector.")
    dim = len(vectors[0])
    if len(vectors) != dim:
        raise DimensionMismatchError(
            f"The {which} basis has {len(vectors)} vectors in R^{dim}; "
            f"a basis of R^{dim} needs exactly {dim}."
        )
    matrix = columns_to_matrix(vectors)
    inv = algebra.inverse(field, matrix)
    if inv is None:
        raise SingularBasisError(which)
    return matrix, inv


def analyze_linear_map(field, domain_basis, codomain_basis,
                       matrix=None, images=None) -> LinearMapAnalysis:
    """Rank, kernel, range, mapping properties and basis representations.

    Exactly one of *matrix* (standard matrix ``A``, m×n) and *images*
    (``Y``, m×n) must be given.
    """
    b, b_inv = _basis_matrix(field, domain_basis, "domain")
    g, g_inv = _basis_matrix(field, codomain_basis, "codomain")
    n, m = len(b), len(g)

    if (matrix is None) == (images is None):
        raise StructuralError(
            "Define the map either by its matrix A or by the basis images Y."
        )
    source = matrix if matrix is not None else images
    label = "map matrix A" if matrix is not None else "image matrix Y"
    if algebra.shape(source) != (m, n):
        raise DimensionMismatchError(
            f"The {label} must be {m}×{n} (codomain × domain); "
            f"got {algebra.shape_str(source)}."
        )
    a = [list(row) for row in matrix] if matrix is not None else algebra.multiply(field, images, b_inv)

    summary = rref(field, a)
    rank = summary.rank
    representation = algebra.multiply(field, algebra.multiply(field, g_inv, a), b)

    similarity = None
    if m == n:
        c_gb = algebra.multiply(field, g_inv, b)
        c_bg = algebra.multiply(field, b_inv, g)
        rep_beta = algebra.multiply(field, algebra.multiply(field, b_inv, a), b)
        rep_gamma = algebra.multiply(field, algebra.multiply(field, g_inv, a), g)
        conjugated = algebra.multiply(field, algebra.multiply(field, c_gb, rep_beta), c_bg)
        similarity = SimilarityReport(
            change_gamma_from_beta=c_gb,
            change_beta_from_gamma=c_bg,
            rep_beta=rep_beta,
            rep_gamma=rep_gamma,
            similar=algebra.matrices_equal(field, rep_gamma, conjugated),
            trace_beta=algebra.trace(field, rep_beta),
            trace_gamma=algebra.trace(field, rep_gamma),
            det_beta=algebra.determinant(field, rep_beta),
            det_gamma=algebra.determinant(field, rep_gamma),
        )
        if not similarity.similar:
            LOG.warning("similarity check failed for a %d×%d map", n, n)

    return LinearMapAnalysis(
        standard_matrix=a,
        domain_dimension=n,
        codomain_dimension=m,
        rank=rank,
        nullity=n - rank,
        kernel_basis=null_space_basis(field, summary),
        range_basis=column_space_basis(a, summary),
        injective=rank == n,
        surjective=rank == m,
        representation=representation,
        similarity=similarity,
    )
