"""Operate workflow: matrix/vector arithmetic and free-form expressions."""

import logging
import re

from matrixmaster import algebra
from matrixmaster.errors import StructuralError, UnsupportedTokenError
from matrixmaster.expressions import MATRIX, SCALAR, VECTOR, evaluate_expression, referenced_names
from matrixmaster.formatting import format_matrix_inline, format_vector
from matrixmaster.models import OperateKind
from matrixmaster.workflows.common import ResultBuilder, require_matrix, require_vector

LOG = logging.getLogger(__name__)

SOURCE = "Operate result"


def _scalar(field, token: str):
    try:
        return field.parse(token)
    except UnsupportedTokenError as e:
        raise UnsupportedTokenError(e.token, "scalar c", reason=e.reason) from None


def _exponent(token: str) -> int:
    text = (token or "").strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        raise StructuralError(f"The exponent must be a whole number; got '{token}'.")
    return int(text)


def _emit(out: ResultBuilder, label: str, kind: str, value) -> None:
    field = out.field
    if kind == SCALAR:
        out.answer(f"{label} = {field.format(value)}")
    elif kind == MATRIX:
        out.answer(f"{label} = {format_matrix_inline(field, value)}")
        out.note(f"Result is {algebra.shape_str(value)}")
        out.matrix_object(label, value)
        out.matrix_payload(SOURCE, value)
    else:
        out.answer(f"{label} = {format_vector(field, value)}")
        out.note(f"Result has {len(value)} entries")
        out.vector_object(label, value)
        out.vector_payload(SOURCE, "r", value)


def _expression(request, field, out: ResultBuilder) -> None:
    text = request.expression
    used = referenced_names(text)
    matrices = {
        "A": require_matrix(field, request.matrix, "matrix A") if "A" in used else None,
        "B": require_matrix(field, request.secondary_matrix, "matrix B") if "B" in used else None,
    }
    vectors = {
        "v": require_vector(field, request.vector, "vector v") if "v" in used else None,
        "u": require_vector(field, request.secondary_vector, "vector u") if "u" in used else None,
    }
    for name in sorted(used):
        if name in matrices:
            out.steps.append(f"{name} is {algebra.shape_str(matrices[name])}")
        else:
            out.steps.append(f"{name} has {len(vectors[name])} entries")
    kind, value = evaluate_expression(field, text, matrices, vectors)
    out.steps.append(f"Evaluate {text.strip()}")
    _emit(out, text.strip(), kind, value)


def run(request, field, settings=None):
    kind = request.operate_kind
    out = ResultBuilder(field)
    LOG.debug("operate: %s", kind.value)

    if kind == OperateKind.EXPRESSION:
        _expression(request, field, out)
        return out.build()

    if kind in (OperateKind.VECTOR_ADD, OperateKind.SCALAR_VECTOR_MULTIPLY):
        v = require_vector(field, request.vector, "vector v")
        if kind == OperateKind.VECTOR_ADD:
            u = require_vector(field, request.secondary_vector, "vector u")
            out.steps.append("Add entry by entry")
            _emit(out, "v + u", VECTOR, algebra.vector_add(field, v, u))
        else:
            c = _scalar(field, request.scalar)
            out.steps.append(f"Multiply every entry by {field.format(c)}")
            _emit(out, "c * v", VECTOR, algebra.scalar_vector(field, c, v))
        return out.build()

    a = require_matrix(field, request.matrix, "matrix A")
    out.steps.append(f"A is {algebra.shape_str(a)}")

    if kind in (OperateKind.MATRIX_ADD, OperateKind.MATRIX_SUBTRACT, OperateKind.MATRIX_MULTIPLY):
        b = require_matrix(field, request.secondary_matrix, "matrix B")
        out.steps.append(f"B is {algebra.shape_str(b)}")
        if kind == OperateKind.MATRIX_ADD:
            _emit(out, "A + B", MATRIX, algebra.add(field, a, b))
        elif kind == OperateKind.MATRIX_SUBTRACT:
            _emit(out, "A - B", MATRIX, algebra.subtract(field, a, b))
        else:
            out.steps.append("Entry (i, j) is row i of A dotted with column j of B")
            _emit(out, "A * B", MATRIX, algebra.multiply(field, a, b))
    elif kind == OperateKind.MATRIX_VECTOR_PRODUCT:
        v = require_vector(field, request.vector, "vector v")
        _emit(out, "A * v", VECTOR, algebra.matrix_vector(field, a, v))
    elif kind == OperateKind.POWER:
        k = _exponent(request.exponent)
        out.steps.append(f"Compute A^{k} by repeated squaring")
        _emit(out, f"A^{k}", MATRIX, algebra.power(field, a, k))
    elif kind == OperateKind.TRACE:
        out.steps.append("Sum the diagonal entries")
        _emit(out, "tr(A)", SCALAR, algebra.trace(field, a))
    elif kind == OperateKind.TRANSPOSE:
        out.steps.append("Swap rows and columns")
        _emit(out, "A^T", MATRIX, algebra.transpose(a))
    else:
        raise StructuralError(f"Unsupported operate kind: {kind}")
    return out.build()
