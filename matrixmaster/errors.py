"""Error taxonomy for the MatrixMaster engine.

Every parse or precondition failure raises a :class:`MatrixEngineError`
subclass.  They derive from ``ValueError`` so callers that only know about
``ValueError`` (the HTTP layer, older scripts) keep working, and every
message is already human-readable so it can be shown to the user unchanged.
"""


class MatrixEngineError(ValueError):
    """Base class; ``kind`` names the cause for programmatic handling."""

    kind = "engine"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WrongModeError(MatrixEngineError):
    kind = "wrong_mode"

    def __init__(self, engine_mode: str, request_mode: str):
        super().__init__(
            f"The {engine_mode} engine cannot run a {request_mode}-mode request."
        )
        self.engine_mode = engine_mode
        self.request_mode = request_mode


class MissingInputError(MatrixEngineError):
    kind = "missing_input"


class RaggedMatrixError(MatrixEngineError):
    kind = "ragged_matrix"

    def __init__(self, label: str, row: int, expected: int, found: int):
        super().__init__(
            f"{label}: row {row} has {found} entries but row 1 has {expected}. "
            f"All rows must have the same length."
        )
        self.label = label
        self.row = row


class UnsupportedTokenError(MatrixEngineError):
    """A cell that does not match the token grammar.

    ``location`` is ``(row, column)`` for matrices and
    ``(vector index, entry index)`` for vector sets, both 1-based.
    """

    kind = "unsupported_token"

    def __init__(self, token: str, label: str = "", location: tuple | None = None,
                 reason: str = "unsupported number format",
                 in_vector: bool = False):
        where = ""
        if location is not None:
            if in_vector:
                where = f" at vector {location[0]}, entry {location[1]}"
            else:
                where = f" at row {location[0]}, column {location[1]}"
        prefix = f"{label}: " if label else ""
        super().__init__(f"{prefix}'{token}'{where}: {reason}.")
        self.token = token
        self.label = label
        self.location = location
        self.reason = reason
        self.in_vector = in_vector

    def at(self, label: str, location: tuple, in_vector: bool = False):
        """Return a copy of this error pinned to a cell of a named input."""
        return UnsupportedTokenError(self.token, label, location,
                                     reason=self.reason, in_vector=in_vector)


class ZeroDenominatorError(UnsupportedTokenError):
    kind = "zero_denominator"

    def __init__(self, token: str, label: str = "", location: tuple | None = None,
                 in_vector: bool = False):
        super().__init__(token, label, location, reason="zero denominator",
                         in_vector=in_vector)

    def at(self, label: str, location: tuple, in_vector: bool = False):
        return ZeroDenominatorError(self.token, label, location, in_vector=in_vector)


class DimensionMismatchError(MatrixEngineError):
    kind = "dimension_mismatch"


class StructuralError(MatrixEngineError):
    """Structural precondition such as an empty basis or a missing target."""

    kind = "structural"


class SingularBasisError(MatrixEngineError):
    kind = "singular_basis"

    def __init__(self, which: str):
        super().__init__(
            f"The {which} basis matrix is singular; its vectors do not form a basis."
        )
        self.which = which


class UnsupportedExpressionError(MatrixEngineError):
    kind = "unsupported_expression"


class ExactOverflowError(MatrixEngineError):
    kind = "overflow"

    def __init__(self, value, bits: int):
        super().__init__(
            f"Exact arithmetic overflow: {value} does not fit in "
            f"{bits}-bit integers. Switch to numeric mode for this input."
        )
        self.bits = bits
