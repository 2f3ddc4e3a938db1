"""Request / result data model shared by both engines.

Requests carry raw string tokens; nothing is parsed until an engine runs.
Both models are frozen: a request is read, never modified, and a result is
produced once per request.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Destination(str, Enum):
    SOLVE = "solve"
    OPERATE = "operate"
    ANALYZE = "analyze"
    SPACES = "spaces"
    LIBRARY = "library"

    @property
    def title(self) -> str:
        return self.value.capitalize()


class MathMode(str, Enum):
    EXACT = "exact"
    NUMERIC = "numeric"

    @property
    def title(self) -> str:
        return self.value.capitalize()


class OperateKind(str, Enum):
    MATRIX_ADD = "matrix_add"
    MATRIX_SUBTRACT = "matrix_subtract"
    MATRIX_MULTIPLY = "matrix_multiply"
    MATRIX_VECTOR_PRODUCT = "matrix_vector_product"
    VECTOR_ADD = "vector_add"
    SCALAR_VECTOR_MULTIPLY = "scalar_vector_multiply"
    EXPRESSION = "expression"
    POWER = "power"
    TRACE = "trace"
    TRANSPOSE = "transpose"


class AnalyzeKind(str, Enum):
    MATRIX_PROPERTIES = "matrix_properties"
    SPAN_MEMBERSHIP = "span_membership"
    INDEPENDENCE = "independence"
    COORDINATES = "coordinates"
    LINEAR_MAPS = "linear_maps"


class LinearMapDefinition(str, Enum):
    MATRIX = "matrix"
    BASIS_IMAGES = "basis_images"


class SpacesKind(str, Enum):
    BASIS_TEST_EXTRACT = "basis_test_extract"
    BASIS_EXTEND_PRUNE = "basis_extend_prune"
    SUBSPACE_SUM = "subspace_sum"
    SUBSPACE_INTERSECTION = "subspace_intersection"
    DIRECT_SUM_CHECK = "direct_sum_check"


class SpacesPreset(str, Enum):
    NONE = "none"
    POLYNOMIAL_SPACE = "polynomial_space"
    MATRIX_SPACE = "matrix_space"


# =============================================================================
# INPUTS
# =============================================================================


class VectorInput(BaseModel):
    """A named vector of raw tokens."""

    name: str = "v"
    entries: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class BasisInput(BaseModel):
    """A named, ordered set of raw-token vectors."""

    name: str = "B"
    vectors: list[VectorInput] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def token_vectors(self) -> list[list[str]]:
        return [list(v.entries) for v in self.vectors]


class MatrixPropertiesSelection(BaseModel):
    """Which outputs the matrix-properties analysis reports.

    The spectral outputs (QR, LU, eigenpair, singular values) are numeric
    only and off by default.
    """

    include_rank_nullity: bool = True
    include_column_space_basis: bool = True
    include_row_space_basis: bool = True
    include_null_space_basis: bool = True
    include_determinant: bool = True
    include_trace: bool = True
    include_inverse: bool = True
    include_row_reduction_panels: bool = True
    include_qr: bool = False
    include_lu: bool = False
    include_eigen: bool = False
    include_singular_values: bool = False

    model_config = {"frozen": True}

    def any_selected(self) -> bool:
        return any(self.model_dump().values())


class ComputationRequest(BaseModel):
    destination: Destination
    mode: MathMode = MathMode.EXACT

    matrix: list[list[str]] = Field(default_factory=list)
    secondary_matrix: list[list[str]] = Field(default_factory=list)
    vector: Optional[VectorInput] = None
    secondary_vector: Optional[VectorInput] = None
    basis: Optional[BasisInput] = None
    secondary_basis: Optional[BasisInput] = None

    scalar: str = "1"
    exponent: str = "2"
    expression: str = ""

    operate_kind: OperateKind = OperateKind.MATRIX_ADD
    analyze_kind: AnalyzeKind = AnalyzeKind.MATRIX_PROPERTIES
    linear_map_definition: LinearMapDefinition = LinearMapDefinition.MATRIX
    spaces_kind: SpacesKind = SpacesKind.BASIS_TEST_EXTRACT

    properties: MatrixPropertiesSelection = Field(default_factory=MatrixPropertiesSelection)
    spaces_preset: SpacesPreset = SpacesPreset.NONE
    polynomial_degree: int = Field(default=2, ge=0)
    matrix_space_rows: int = Field(default=2, ge=1)
    matrix_space_columns: int = Field(default=2, ge=1)

    model_config = {"frozen": True}


# =============================================================================
# OUTPUTS
# =============================================================================


class MatrixPayload(BaseModel):
    """A matrix another workflow can take as input."""

    kind: Literal["matrix"] = "matrix"
    source: str
    entries: list[list[str]]

    model_config = {"frozen": True}


class VectorPayload(BaseModel):
    kind: Literal["vector"] = "vector"
    source: str
    name: str
    entries: list[str]

    model_config = {"frozen": True}


ReusablePayload = Annotated[Union[MatrixPayload, VectorPayload], Field(discriminator="kind")]


class MatrixObject(BaseModel):
    kind: Literal["matrix"] = "matrix"
    label: str
    entries: list[list[str]]

    model_config = {"frozen": True}


class VectorObject(BaseModel):
    kind: Literal["vector"] = "vector"
    label: str
    entries: list[str]

    model_config = {"frozen": True}


class PolynomialObject(BaseModel):
    """Polynomial given by ascending coefficients, plus its display text."""

    kind: Literal["polynomial"] = "polynomial"
    label: str
    coefficients: list[str]
    variable: str = "x"
    text: str

    model_config = {"frozen": True}


MathObject = Annotated[
    Union[MatrixObject, VectorObject, PolynomialObject], Field(discriminator="kind")
]


class RowReductionPanels(BaseModel):
    source_label: str
    ref_entries: list[list[str]]
    rref_entries: list[list[str]]
    separator_after_column: Optional[int] = None

    model_config = {"frozen": True}


class ComputationResult(BaseModel):
    answer: str
    diagnostics: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    reusable_payloads: list[ReusablePayload] = Field(default_factory=list)
    structured_objects: list[MathObject] = Field(default_factory=list)
    row_reduction_panels: Optional[RowReductionPanels] = None

    model_config = {"frozen": True}
