"""Spaces workflow: basis tests, extend/prune, sums, intersections, direct sums.

Vectors are coordinate vectors.  With a polynomial preset they stand for
polynomials of degree ≤ d (ascending coefficients) and with a matrix preset
for m×n matrices flattened row by row; result vectors are rendered back into
those shapes as structured objects.
"""

import logging

from matrixmaster import presets
from matrixmaster.errors import DimensionMismatchError, MissingInputError, StructuralError
from matrixmaster.models import BasisInput, SpacesKind, SpacesPreset, VectorInput
from matrixmaster.subspaces import (
    basis_test,
    direct_sum_check,
    extend_to_basis,
    prune,
    subspace_intersection,
    subspace_sum,
)
from matrixmaster.workflows.common import (
    ResultBuilder,
    require_vector_set,
    variable_names,
    vector_names,
)

LOG = logging.getLogger(__name__)


class _Ambient:
    """Names and rendering for the ambient space of a spaces request."""

    def __init__(self, request):
        self.preset = request.spaces_preset
        self.degree = request.polynomial_degree
        self.rows = request.matrix_space_rows
        self.columns = request.matrix_space_columns
        self.dimension = presets.preset_dimension(self.preset, self.degree, self.rows, self.columns)

    def title(self, n: int) -> str:
        if self.preset == SpacesPreset.POLYNOMIAL_SPACE:
            return f"P{self.degree}"
        if self.preset == SpacesPreset.MATRIX_SPACE:
            return f"M{self.rows}×{self.columns}"
        return f"R^{n}"

    def standard_names(self, n: int) -> list[str]:
        if self.preset == SpacesPreset.POLYNOMIAL_SPACE:
            return [name for name, _ in presets.polynomial_space_basis(self.degree)]
        if self.preset == SpacesPreset.MATRIX_SPACE:
            return [name for name, _ in presets.matrix_space_basis(self.rows, self.columns)]
        return variable_names(n, "e")

    def preset_basis(self) -> BasisInput:
        if self.preset == SpacesPreset.POLYNOMIAL_SPACE:
            pairs = presets.polynomial_space_basis(self.degree)
        else:
            pairs = presets.matrix_space_basis(self.rows, self.columns)
        return BasisInput(name=self.title(0),
                          vectors=[VectorInput(name=n, entries=e) for n, e in pairs])

    def check(self, vectors, label: str) -> None:
        if self.dimension is not None and len(vectors[0]) != self.dimension:
            raise DimensionMismatchError(
                f"{label}: vectors have {len(vectors[0])} coordinates but "
                f"{self.title(0)} has dimension {self.dimension}."
            )

    def render(self, out: ResultBuilder, label: str, vector) -> None:
        if self.preset == SpacesPreset.POLYNOMIAL_SPACE:
            out.polynomial_object(label, vector)
        elif self.preset == SpacesPreset.MATRIX_SPACE:
            out.matrix_object(label, presets.reshape(vector, self.rows, self.columns))
        else:
            out.vector_object(label, vector)


def _vector_set(field, basis_input, label: str, ambient: _Ambient, allow_preset: bool = False):
    """Parsed vectors and their display names."""
    if (basis_input is None or not basis_input.vectors) and allow_preset \
            and ambient.preset != SpacesPreset.NONE:
        basis_input = ambient.preset_basis()
    if basis_input is None or not basis_input.vectors:
        raise MissingInputError(f"{label} is missing. Enter at least one vector.")
    vectors = require_vector_set(field, basis_input, label)
    ambient.check(vectors, label)
    return vectors, vector_names(basis_input, len(vectors))


def _render_all(out, ambient, prefix: str, vectors) -> None:
    for i, vec in enumerate(vectors, start=1):
        ambient.render(out, f"{prefix} {i}", vec)


def _basis_test(request, field, ambient, out: ResultBuilder) -> None:
    vectors, names = _vector_set(field, request.basis, "vector set", ambient, allow_preset=True)
    n = len(vectors[0])
    space = ambient.title(n)
    result = basis_test(field, vectors)
    out.note(f"rank = {result.rank}, vectors = {result.vector_count}, dim {space} = {result.dimension}")
    out.note(f"Independent: {'yes' if result.independent else 'no'}")
    out.note(f"Spans {space}: {'yes' if result.spans else 'no'}")
    if result.is_basis:
        out.answer(f"The vectors form a basis of {space}")
    else:
        reasons = []
        if not result.independent:
            reasons.append("dependent")
        if not result.spans:
            reasons.append(f"does not span {space}")
        out.answer(f"Not a basis of {space} ({', '.join(reasons)})")
    kept = ", ".join(names[i] for i in result.pivot_indices)
    out.answer(f"Extracted basis: {kept} (dim = {result.rank})")
    _render_all(out, ambient, "extracted basis vector", result.basis)
    out.basis_payload("Spaces extracted basis", result.basis)


def _extend_prune(request, field, ambient, out: ResultBuilder) -> None:
    vectors, names = _vector_set(field, request.basis, "vector set", ambient)
    n = len(vectors[0])
    space = ambient.title(n)
    pruned, kept = prune(field, vectors)
    dropped = [i for i in range(len(vectors)) if i not in kept]
    out.steps.append("Prune: keep the pivot columns of [v1 ... vk]")
    if dropped:
        out.note("Dropped dependent vector(s): " + ", ".join(names[i] for i in dropped))
    out.basis_payload("Spaces pruned basis", pruned)

    result = extend_to_basis(field, vectors, ambient.dimension or n)
    standard = ambient.standard_names(n)
    out.steps.append("Extend: try standard basis vectors in order, keeping those that raise the rank")
    if result.added_standard:
        out.note("Added: " + ", ".join(standard[i] for i in result.added_standard))
    if result.complete:
        out.answer(f"Extended to a basis of {space} with {len(result.basis)} vectors")
    else:
        out.answer(f"Stopped at {len(result.basis)} of {result.dimension} vectors")
    _render_all(out, ambient, "basis vector", result.basis)
    out.basis_payload("Spaces extended basis", result.basis)


def _pair(request, field, ambient):
    u, _ = _vector_set(field, request.basis, "U", ambient)
    w, _ = _vector_set(field, request.secondary_basis, "W", ambient)
    return u, w


def _sum(request, field, ambient, out: ResultBuilder) -> None:
    u, w = _pair(request, field, ambient)
    out.steps.append("Reduce [U | W] and keep its pivot columns")
    basis, _ = subspace_sum(field, u, w)
    out.answer(f"dim(U + W) = {len(basis)}")
    _render_all(out, ambient, "U + W basis vector", basis)
    out.basis_payload("Spaces sum basis", basis)


def _intersection(request, field, ambient, out: ResultBuilder) -> None:
    u, w = _pair(request, field, ambient)
    out.steps.append("Solve U·a = W·b through the null space of [U | -W]")
    basis = subspace_intersection(field, u, w)
    out.answer(f"dim(U ∩ W) = {len(basis)}")
    if not basis:
        out.note("U ∩ W = {0}")
    _render_all(out, ambient, "U ∩ W basis vector", basis)
    out.basis_payload("Spaces intersection basis", basis)


def _direct_sum(request, field, ambient, out: ResultBuilder) -> None:
    u, w = _pair(request, field, ambient)
    relation = direct_sum_check(field, u, w)
    out.note(f"dim(U ∩ W) = {relation.dim_intersection}")
    out.note(f"dim U + dim W - dim(U ∩ W) = dim(U + W): "
             f"{relation.dim_u} + {relation.dim_w} - {relation.dim_intersection} = {relation.dim_sum}")
    if relation.is_direct_sum:
        out.answer("U + W is a direct sum")
        _render_all(out, ambient, "U ⊕ W basis vector", relation.sum_basis)
        out.basis_payload("Spaces direct sum basis", relation.sum_basis)
    else:
        out.answer("U + W is not a direct sum")
        out.note("The intersection is nontrivial; its basis is the obstruction")
        _render_all(out, ambient, "obstruction vector", relation.intersection_basis)
        out.basis_payload("Spaces intersection basis", relation.intersection_basis)


def run(request, field, settings=None):
    kind = request.spaces_kind
    ambient = _Ambient(request)
    out = ResultBuilder(field)
    LOG.debug("spaces: %s (preset %s)", kind.value, ambient.preset.value)
    if kind == SpacesKind.BASIS_TEST_EXTRACT:
        _basis_test(request, field, ambient, out)
    elif kind == SpacesKind.BASIS_EXTEND_PRUNE:
        _extend_prune(request, field, ambient, out)
    elif kind == SpacesKind.SUBSPACE_SUM:
        _sum(request, field, ambient, out)
    elif kind == SpacesKind.SUBSPACE_INTERSECTION:
        _intersection(request, field, ambient, out)
    elif kind == SpacesKind.DIRECT_SUM_CHECK:
        _direct_sum(request, field, ambient, out)
    else:
        raise StructuralError(f"Unsupported spaces kind: {kind}")
    return out.build()
