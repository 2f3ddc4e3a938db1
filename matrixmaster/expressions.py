"""Operate-expression evaluation such as ``2A - B^T`` or ``A(v + u)``.

The text is parsed with SymPy using non-commutative symbols for ``A``,
``B``, ``v`` and ``u`` so products keep their order, and with evaluation
turned off so nothing cancels or folds before the operands are known
(``A - A`` stays a matrix difference).  The tree is then walked and every
node is computed in the request's field.
"""

import logging
import re

from sympy import Add, Function, Integer, Mul, Pow, Symbol
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

from matrixmaster import algebra
from matrixmaster.errors import DimensionMismatchError, UnsupportedExpressionError

LOG = logging.getLogger(__name__)

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,  # "0.5A" keeps an exact 1/2 coefficient
)

MATRIX_NAMES = ("A", "B")
VECTOR_NAMES = ("v", "u")

_TRANSPOSE = Function("transpose")
_ALLOWED = set("ABuvT0123456789 \t+-*/^().'")

SCALAR = "scalar"
MATRIX = "matrix"
VECTOR = "vector"


def _expand_implicit_names(s: str) -> str:
    """Split runs like ``AB`` or ``Av`` into ``A*B`` / ``A*v``."""
    names = set(MATRIX_NAMES + VECTOR_NAMES)

    def _repl(m):
        tok = m.group(0)
        if len(tok) > 1 and all(ch in names for ch in tok):
            return "*".join(tok)
        return tok
    return re.sub(r"[A-Za-z]+", _repl, s)


def _preprocess(text: str) -> str:
    s = (text or "").strip()
    if not s:
        raise UnsupportedExpressionError("The operate expression is empty.")
    bad = sorted(set(ch for ch in s if ch not in _ALLOWED))
    if bad:
        raise UnsupportedExpressionError(
            f"Invalid character(s) in expression: {' '.join(bad)}. "
            f"Use A, B, v, u, numbers, + - * ^ ( ) and ^T for transpose."
        )
    # A^T and A' both mean transpose(A)
    s = re.sub(r"([AB])\s*(\^\s*T\b|')", r"transpose(\1)", s)
    if "T" in s.replace("transpose", ""):
        raise UnsupportedExpressionError(
            "Transpose (^T) is only supported directly on A or B."
        )
    return _expand_implicit_names(s)


def parse_expression(text: str):
    """Parse operate-expression text into a SymPy expression tree."""
    s = _preprocess(text)
    local = {name: Symbol(name, commutative=False) for name in MATRIX_NAMES + VECTOR_NAMES}
    local["transpose"] = _TRANSPOSE
    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS,
                          evaluate=False)
    except Exception as e:
        raise UnsupportedExpressionError(
            f"Could not parse expression: '{text}'. Error: {e}"
        ) from e


def _describe(value) -> str:
    kind, data = value
    if kind == MATRIX:
        return f"{algebra.shape_str(data)} matrix"
    if kind == VECTOR:
        return f"vector of length {len(data)}"
    return "scalar"


def _add(field, a, b):
    if a[0] != b[0]:
        raise DimensionMismatchError(f"Cannot add a {_describe(a)} and a {_describe(b)}.")
    if a[0] == SCALAR:
        return SCALAR, field.add(a[1], b[1])
    if a[0] == MATRIX:
        return MATRIX, algebra.add(field, a[1], b[1])
    return VECTOR, algebra.vector_add(field, a[1], b[1])


def _mul(field, a, b):
    if a[0] == SCALAR and b[0] == SCALAR:
        return SCALAR, field.mul(a[1], b[1])
    if a[0] == SCALAR:
        if b[0] == MATRIX:
            return MATRIX, algebra.scalar_matrix(field, a[1], b[1])
        return VECTOR, algebra.scalar_vector(field, a[1], b[1])
    if b[0] == SCALAR:
        return _mul(field, b, a)
    if a[0] == MATRIX and b[0] == MATRIX:
        return MATRIX, algebra.multiply(field, a[1], b[1])
    if a[0] == MATRIX and b[0] == VECTOR:
        return VECTOR, algebra.matrix_vector(field, a[1], b[1])
    raise DimensionMismatchError(
        f"Cannot multiply a {_describe(a)} by a {_describe(b)}."
    )


def _scalar_power(field, x, k: int):
    # "a/b" parses as a * b^-1
    if k < 0:
        if field.is_zero(x):
            raise UnsupportedExpressionError("Division by zero in expression.")
        return field.div(field.one, _scalar_power(field, x, -k))
    result = field.one
    while k:
        if k & 1:
            result = field.mul(result, x)
        k >>= 1
        if k:
            x = field.mul(x, x)
    return result


def _evaluate(node, field, env: dict):
    if node.is_Number:
        return SCALAR, field.from_sympy(node)

    if node.is_Symbol:
        value = env.get(node.name)
        if value is None:
            raise UnsupportedExpressionError(
                f"'{node.name}' is not available in this expression. "
                f"Provide it as an input or use only A, B, v and u."
            )
        return value

    if isinstance(node, Add):
        total = None
        for arg in node.args:
            term = _evaluate(arg, field, env)
            total = term if total is None else _add(field, total, term)
        return total

    if isinstance(node, Mul):
        product = (SCALAR, field.one)
        for arg in node.args:
            product = _mul(field, product, _evaluate(arg, field, env))
        return product

    if isinstance(node, Pow):
        base, exponent = node.args
        exponent = exponent.doit()
        if not isinstance(exponent, Integer):
            raise UnsupportedExpressionError(
                f"Only integer powers are supported; got ^{exponent}."
            )
        value = _evaluate(base, field, env)
        k = int(exponent)
        if value[0] == MATRIX:
            if k < 1:
                raise UnsupportedExpressionError(
                    f"Only positive integer powers of a matrix are supported; got ^{k}."
                )
            return MATRIX, algebra.power(field, value[1], k)
        if value[0] == SCALAR:
            return SCALAR, _scalar_power(field, value[1], k)
        raise DimensionMismatchError("A vector cannot be raised to a power.")

    if node.func == _TRANSPOSE:
        value = _evaluate(node.args[0], field, env)
        if value[0] != MATRIX:
            raise DimensionMismatchError("Transpose applies to matrices only.")
        return MATRIX, algebra.transpose(value[1])

    raise UnsupportedExpressionError(f"Unsupported construct in expression: {node}")


def evaluate_expression(field, text: str, matrices: dict, vectors: dict):
    """Evaluate *text* and return ``(kind, value)``.

    *matrices* maps ``"A"``/``"B"`` and *vectors* maps ``"v"``/``"u"`` to
    parsed values; names mapped to None are treated as unavailable.
    """
    tree = parse_expression(text)
    env = {}
    for name, value in matrices.items():
        if value is not None:
            env[name] = (MATRIX, value)
    for name, value in vectors.items():
        if value is not None:
            env[name] = (VECTOR, value)
    LOG.debug("evaluating expression tree %s", tree)
    return _evaluate(tree, field, env)


def referenced_names(text: str) -> set:
    """Names among A, B, v, u that the expression actually uses."""
    tree = parse_expression(text)
    return {s.name for s in tree.free_symbols}
