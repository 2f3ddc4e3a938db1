"""Analyze workflow: matrix properties, span, independence, coordinates, linear maps."""

import logging

from matrixmaster import algebra, spectral
from matrixmaster.errors import StructuralError
from matrixmaster.formatting import fmt_num, format_vector
from matrixmaster.linear_maps import analyze_linear_map
from matrixmaster.models import AnalyzeKind, LinearMapDefinition
from matrixmaster.rref import column_space_basis, null_space_basis, row_space_basis, rref
from matrixmaster.subspaces import coordinates, independence, span_membership, verify_relation
from matrixmaster.systems import INCONSISTENT
from matrixmaster.workflows.common import (
    ResultBuilder,
    combination_text,
    require_matrix,
    require_vector,
    require_vector_set,
    variable_names,
    vector_names,
)

LOG = logging.getLogger(__name__)


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


# ── Matrix properties ───────────────────────────────────────────────────

def _spectral_outputs(a, field, settings, selection, out: ResultBuilder) -> None:
    wanted = [
        (selection.include_qr, "QR decomposition"),
        (selection.include_lu, "LU decomposition"),
        (selection.include_eigen, "Dominant eigenpair"),
        (selection.include_singular_values, "Singular values"),
    ]
    if field.name != "numeric":
        for flag, title in wanted:
            if flag:
                out.note(f"{title} is only available in numeric mode.")
        return

    tol = field.tolerance
    limit = settings.power_iteration_limit if settings is not None else spectral.POWER_ITERATION_LIMIT

    if selection.include_qr:
        qr = spectral.qr_decomposition(a, tol)
        if qr.ok:
            out.answer("QR: A = QR")
            out.matrix_object("Q", qr.q)
            out.matrix_object("R", qr.r)
            out.matrix_payload("Analyze QR factor Q", qr.q)
            out.matrix_payload("Analyze QR factor R", qr.r)
        else:
            out.note(f"QR failed: {qr.reason}")

    if selection.include_lu:
        lu = spectral.lu_decomposition(a, tol)
        if lu.ok:
            out.answer("LU: PA = LU")
            out.note("Row order P: " + ", ".join(f"R{i + 1}" for i in lu.permutation))
            out.matrix_object("L", lu.l)
            out.matrix_object("U", lu.u)
            out.matrix_payload("Analyze LU factor L", lu.l)
            out.matrix_payload("Analyze LU factor U", lu.u)
        else:
            out.note(f"LU failed: {lu.reason}")

    if selection.include_eigen:
        pair = spectral.dominant_eigenpair(a, tol, limit)
        if pair.ok:
            out.answer(f"dominant eigenvalue ≈ {fmt_num(pair.value)}")
            out.note(f"Power iteration converged after {pair.iterations} iterations")
            out.vector_object("dominant eigenvector", pair.vector)
            out.vector_payload("Analyze dominant eigenvector", "q", pair.vector)
        else:
            out.note(f"Power iteration failed: {pair.reason}")

    if selection.include_singular_values:
        sv = spectral.singular_values(a, tol, limit)
        values = ", ".join(fmt_num(s) for s in sv.values) or "none above tolerance"
        out.answer(f"singular values ≈ {values}")
        out.note("Singular values are estimated by power iteration on AᵀA with deflation")
        if not sv.complete:
            out.note(f"Singular value estimate is incomplete: {sv.reason}")


def _matrix_properties(request, field, settings, out: ResultBuilder) -> None:
    selection = request.properties
    if not selection.any_selected():
        raise StructuralError("Select at least one Analyze output.")
    a = require_matrix(field, request.matrix, "matrix A")
    m, n = algebra.shape(a)
    out.steps.append(f"Row-reduce A ({m}×{n})")
    summary = rref(field, a, out.steps)
    out.matrix_payload("Analyze RREF", summary.matrix)
    pivots = ", ".join(str(p + 1) for p in summary.pivot_columns) or "none"
    out.note(f"Pivot columns: {pivots}")

    if selection.include_rank_nullity:
        out.answer(f"rank(A) = {summary.rank}")
        out.answer(f"nullity(A) = {summary.nullity}")
        out.note(f"Rank-nullity check: {summary.rank} + {summary.nullity} = {n}")

    if selection.include_column_space_basis:
        basis = column_space_basis(a, summary)
        out.answer(f"dim Col(A) = {len(basis)}")
        for i, vec in enumerate(basis, start=1):
            out.vector_object(f"Col(A) basis vector {i}", vec)
        out.basis_payload("Analyze column space basis", basis)

    if selection.include_row_space_basis:
        basis = row_space_basis(summary)
        out.answer(f"dim Row(A) = {len(basis)}")
        for i, vec in enumerate(basis, start=1):
            out.vector_object(f"Row(A) basis vector {i}", vec)
        out.basis_payload("Analyze row space basis", basis)

    if selection.include_null_space_basis:
        basis = null_space_basis(field, summary)
        out.answer(f"dim Null(A) = {len(basis)}")
        if not basis:
            out.note("Null(A) = {0}")
        for i, vec in enumerate(basis, start=1):
            out.vector_object(f"Null(A) basis vector {i}", vec)
        out.basis_payload("Analyze null space basis", basis)

    square = m == n
    if not square and (selection.include_determinant or selection.include_trace
                       or selection.include_inverse):
        out.note(f"Determinant, trace and inverse need a square matrix; A is {m}×{n}")

    det = None
    if square and selection.include_determinant:
        det_steps = []
        det = algebra.determinant(field, a, det_steps)
        out.steps.extend(det_steps)
        out.answer(f"det(A) = {field.format(det)}")

    if square and selection.include_trace:
        out.answer(f"tr(A) = {field.format(algebra.trace(field, a))}")

    if square and selection.include_inverse:
        inv = algebra.inverse(field, a)
        if inv is None:
            out.answer("A is not invertible")
            out.note(f"RREF has {summary.rank} pivots; an inverse needs {n}")
        else:
            out.answer("A is invertible")
            out.matrix_object("A⁻¹", inv)
            out.matrix_payload("Analyze inverse", inv)
            if det is not None:
                product = field.mul(det, algebra.determinant(field, inv))
                out.note(f"det(A)·det(A⁻¹) = {field.format(field.clean(product))}")

    if selection.include_row_reduction_panels:
        out.row_reduction("matrix A", a, summary.matrix)

    _spectral_outputs(a, field, settings, selection, out)


# ── Span / coordinates / independence ───────────────────────────────────

def _target(field, request):
    if request.vector is None or not request.vector.entries:
        raise StructuralError("This analysis requires a target vector x.")
    return require_vector(field, request.vector, f"vector {request.vector.name}")


def _span_membership(request, field, out: ResultBuilder) -> None:
    vectors = require_vector_set(field, request.basis, "basis B")
    target = _target(field, request)
    basis_name = request.basis.name
    target_name = request.vector.name
    names = vector_names(request.basis, len(vectors))
    result = span_membership(field, vectors, target, out.steps)

    if not result.in_span:
        out.answer(f"{target_name} is not in span({basis_name})")
        k = result.outcome.inconsistent_row
        out.note(f"Row {k + 1} of [{basis_name} | {target_name}] reduces to 0 = "
                 f"{field.format(result.outcome.summary.matrix[k][-1])}")
        return
    out.answer(f"{target_name} in span({basis_name})")
    out.note(f"{target_name} = {combination_text(field, result.coefficients, names)}")
    if not result.unique:
        out.note("The coefficients are not unique: the vectors are dependent")
    out.vector_object("witness coefficients", result.coefficients)
    out.vector_payload("Analyze span witness coefficients", "c", result.coefficients)


def _coordinates(request, field, out: ResultBuilder) -> None:
    vectors = require_vector_set(field, request.basis, "basis B")
    target = _target(field, request)
    basis_name = request.basis.name
    target_name = request.vector.name
    names = vector_names(request.basis, len(vectors))
    result = coordinates(field, vectors, target, out.steps)
    label = f"[{target_name}]_{basis_name}"

    if result.outcome.kind == INCONSISTENT:
        out.answer(f"{target_name} is not in span({basis_name}); no coordinate vector")
        return
    out.answer(f"{label} = {format_vector(field, result.coefficients)}")
    out.note(f"{target_name} = {combination_text(field, result.coefficients, names)}")
    out.vector_object(label, result.coefficients)
    out.vector_payload("Analyze coordinate vector", label, result.coefficients)
    if not result.unique:
        out.note(f"{basis_name} is dependent, so coordinates are not unique; "
                 f"shown with free coefficients = 0")
        for i, direction in enumerate(result.homogeneous, start=1):
            out.note(f"Add any multiple of {format_vector(field, direction)}")
            out.vector_object(f"homogeneous direction {i}", direction)


def _independence(request, field, out: ResultBuilder) -> None:
    vectors = require_vector_set(field, request.basis, "basis B")
    names = vector_names(request.basis, len(vectors))
    result = independence(field, vectors, out.steps)
    out.note(f"rank = {result.rank} for {result.vector_count} vector(s)")
    if result.independent:
        out.answer("Linearly independent")
        return
    out.answer("Linearly dependent")
    relation = result.relation
    coefficient_names = variable_names(len(vectors), "c")
    out.note(f"Dependence relation: {combination_text(field, relation, names)} = 0")
    out.note(", ".join(f"{c} = {field.format(x)}" for c, x in zip(coefficient_names, relation)))
    if not verify_relation(field, vectors, relation):
        LOG.warning("dependence relation failed verification")
        out.note("Warning: the relation does not verify within tolerance")
    out.vector_object("dependence relation", relation)
    out.vector_payload("Analyze dependence relation", "c", relation)


# ── Linear maps ─────────────────────────────────────────────────────────

def _basis_or_standard(field, basis_input, dim: int, label: str, out: ResultBuilder) -> list:
    if basis_input is None or not basis_input.vectors:
        out.note(f"{label} basis: standard basis of R^{dim}")
        return [[field.one if i == j else field.zero for i in range(dim)] for j in range(dim)]
    return require_vector_set(field, basis_input, f"{label} basis")


def _linear_maps(request, field, out: ResultBuilder) -> None:
    by_images = request.linear_map_definition == LinearMapDefinition.BASIS_IMAGES
    label = "image matrix Y" if by_images else "map matrix A"
    source = require_matrix(field, request.matrix, label)
    m, n = algebra.shape(source)
    domain = _basis_or_standard(field, request.basis, n, "domain β", out)
    codomain = _basis_or_standard(field, request.secondary_basis, m, "codomain γ", out)

    if by_images:
        report = analyze_linear_map(field, domain, codomain, images=source)
        out.steps.append("Recover the standard matrix A = Y·B⁻¹")
        out.matrix_object("A", report.standard_matrix)
        out.matrix_payload("Linear maps standard matrix", report.standard_matrix)
    else:
        report = analyze_linear_map(field, domain, codomain, matrix=source)
    out.steps.append("[T]^β_γ = G⁻¹·A·B")

    out.answer(f"rank(T) = {report.rank}")
    out.answer(f"nullity(T) = {report.nullity}")
    if report.bijective:
        out.answer("T is bijective")
    else:
        out.answer(f"injective: {_yes_no(report.injective)}, "
                   f"surjective: {_yes_no(report.surjective)}")
    out.note(f"Rank-nullity check: {report.rank} + {report.nullity} = {report.domain_dimension}")
    out.matrix_object("[T]^β_γ", report.representation)
    out.matrix_payload("Linear maps [T]^beta_gamma", report.representation)
    for i, vec in enumerate(report.kernel_basis, start=1):
        out.vector_object(f"ker(T) basis vector {i}", vec)
    for i, vec in enumerate(report.range_basis, start=1):
        out.vector_object(f"range(T) basis vector {i}", vec)
    if not report.kernel_basis:
        out.note("ker(T) = {0}")

    sim = report.similarity
    if sim is None:
        out.note(f"Similarity: not applicable (domain dimension {n} ≠ codomain dimension {m})")
        return
    out.matrix_object("C(γ←β)", sim.change_gamma_from_beta)
    out.matrix_object("C(β←γ)", sim.change_beta_from_gamma)
    out.matrix_object("[T]_β", sim.rep_beta)
    out.matrix_object("[T]_γ", sim.rep_gamma)
    out.matrix_payload("Linear maps [T]_beta", sim.rep_beta)
    out.matrix_payload("Linear maps [T]_gamma", sim.rep_gamma)
    verdict = "verified" if sim.similar else "FAILED"
    out.note(f"Similarity [T]_γ = C(γ←β)·[T]_β·C(β←γ): {verdict}")
    out.note(f"tr([T]_β) = {field.format(sim.trace_beta)}, tr([T]_γ) = {field.format(sim.trace_gamma)}")
    out.note(f"det([T]_β) = {field.format(sim.det_beta)}, det([T]_γ) = {field.format(sim.det_gamma)}")


def run(request, field, settings=None):
    kind = request.analyze_kind
    out = ResultBuilder(field)
    LOG.debug("analyze: %s", kind.value)
    if kind == AnalyzeKind.MATRIX_PROPERTIES:
        _matrix_properties(request, field, settings, out)
    elif kind == AnalyzeKind.SPAN_MEMBERSHIP:
        _span_membership(request, field, out)
    elif kind == AnalyzeKind.INDEPENDENCE:
        _independence(request, field, out)
    elif kind == AnalyzeKind.COORDINATES:
        _coordinates(request, field, out)
    elif kind == AnalyzeKind.LINEAR_MAPS:
        _linear_maps(request, field, out)
    else:
        raise StructuralError(f"Unsupported analyze kind: {kind}")
    return out.build()
