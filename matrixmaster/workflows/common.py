"""Helpers shared by the workflow modules: input parsing and result assembly."""

from matrixmaster.errors import MissingInputError
from matrixmaster.formatting import (
    format_polynomial,
    matrix_entries,
    vector_entries,
)
from matrixmaster.models import (
    ComputationResult,
    MatrixObject,
    MatrixPayload,
    PolynomialObject,
    RowReductionPanels,
    VectorObject,
    VectorPayload,
)
from matrixmaster.parsing import columns_to_matrix, parse_matrix, parse_vector, parse_vectors
from matrixmaster.rref import ref


def variable_names(count: int, prefix: str = "x") -> list[str]:
    return [f"{prefix}{i}" for i in range(1, count + 1)]


def require_matrix(field, rows, label: str) -> list:
    return parse_matrix(field, rows, label)


def require_vector(field, vector_input, label: str) -> list:
    if vector_input is None:
        raise MissingInputError(f"{label} is missing. Enter at least one entry.")
    return parse_vector(field, vector_input.entries, label)


def require_vector_set(field, basis_input, label: str) -> list:
    if basis_input is None:
        raise MissingInputError(f"{label} is missing. Enter at least one vector.")
    return parse_vectors(field, basis_input.token_vectors, label)


def vector_names(basis_input, count: int) -> list[str]:
    """Names from the input when they are present and distinct, else v1..vk."""
    names = [v.name for v in basis_input.vectors] if basis_input is not None else []
    if len(set(names)) != count or not all(names):
        return variable_names(count, "v")
    return names


def combination_text(field, coefficients, names) -> str:
    """``2·v1 - v2 + 1/2·v3`` with zero terms dropped."""
    parts = []
    for c, name in zip(coefficients, names):
        if field.is_zero(c):
            continue
        negative = field.to_float(c) < 0
        magnitude = field.neg(c) if negative else c
        coef = "" if field.equals(magnitude, field.one) else field.format(magnitude) + "·"
        term = f"{coef}{name}"
        if not parts:
            parts.append(f"-{term}" if negative else term)
        else:
            parts.append(f"- {term}" if negative else f"+ {term}")
    return " ".join(parts) if parts else "0"


class ResultBuilder:
    """Accumulates the pieces of a :class:`ComputationResult`.

    Answer fragments are joined with ``"; "``.  Matrices and vectors are
    formatted with the request's field when they are added, so the builder
    never holds raw numbers.
    """

    def __init__(self, field):
        self.field = field
        self.answers: list[str] = []
        self.diagnostics: list[str] = []
        self.steps: list[str] = []
        self.payloads: list = []
        self.objects: list = []
        self.panels = None

    def answer(self, text: str) -> None:
        self.answers.append(text)

    def note(self, text: str) -> None:
        self.diagnostics.append(text)

    def matrix_payload(self, source: str, matrix) -> None:
        self.payloads.append(MatrixPayload(source=source, entries=matrix_entries(self.field, matrix)))

    def basis_payload(self, source: str, vectors) -> None:
        """Vectors as the columns of one matrix payload."""
        if vectors:
            self.matrix_payload(source, columns_to_matrix(vectors))

    def vector_payload(self, source: str, name: str, vector) -> None:
        self.payloads.append(
            VectorPayload(source=source, name=name, entries=vector_entries(self.field, vector))
        )

    def matrix_object(self, label: str, matrix) -> None:
        self.objects.append(MatrixObject(label=label, entries=matrix_entries(self.field, matrix)))

    def vector_object(self, label: str, vector) -> None:
        self.objects.append(VectorObject(label=label, entries=vector_entries(self.field, vector)))

    def polynomial_object(self, label: str, coefficients, variable: str = "x") -> None:
        self.objects.append(PolynomialObject(
            label=label,
            coefficients=vector_entries(self.field, coefficients),
            variable=variable,
            text=format_polynomial(self.field, coefficients, variable),
        ))

    def row_reduction(self, label: str, matrix, reduced, separator_after_column=None) -> None:
        self.panels = RowReductionPanels(
            source_label=label,
            ref_entries=matrix_entries(self.field, ref(self.field, matrix)),
            rref_entries=matrix_entries(self.field, reduced),
            separator_after_column=separator_after_column,
        )

    def build(self) -> ComputationResult:
        return ComputationResult(
            answer="; ".join(self.answers),
            diagnostics=list(self.diagnostics),
            steps=list(self.steps),
            reusable_payloads=list(self.payloads),
            structured_objects=list(self.objects),
            row_reduction_panels=self.panels,
        )
