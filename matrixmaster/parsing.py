"""Turn raw string tokens from a request into field matrices and vectors.

Inputs arrive as untyped strings and are parsed fresh on every request.
Locations in error messages are 1-based.
"""

from matrixmaster.errors import (
    DimensionMismatchError,
    MissingInputError,
    RaggedMatrixError,
    StructuralError,
    UnsupportedTokenError,
)


def parse_matrix(field, rows, label: str = "matrix A") -> list:
    """Parse a grid of tokens into a list of rows of field numbers."""
    if not rows or not any(len(r) for r in rows):
        raise MissingInputError(f"{label} is missing. Enter at least one row.")
    width = len(rows[0])
    if width == 0:
        raise MissingInputError(f"{label} has no columns.")
    for i, row in enumerate(rows, start=1):
        if len(row) != width:
            raise RaggedMatrixError(label, i, width, len(row))

    matrix = []
    for i, row in enumerate(rows, start=1):
        parsed = []
        for j, token in enumerate(row, start=1):
            try:
                parsed.append(field.parse(token))
            except UnsupportedTokenError as e:
                raise e.at(label, (i, j)) from None
        matrix.append(parsed)
    return matrix


def parse_vector(field, entries, label: str = "vector v", index: int = 1) -> list:
    if not entries:
        raise MissingInputError(f"{label} is missing. Enter at least one entry.")
    vector = []
    for j, token in enumerate(entries, start=1):
        try:
            vector.append(field.parse(token))
        except UnsupportedTokenError as e:
            raise e.at(label, (index, j), in_vector=True) from None
    return vector


def parse_vectors(field, vectors, label: str = "basis") -> list:
    """Parse a set of vectors that must share one ambient dimension.

    *vectors* is a sequence of token lists.  An empty set is a structural
    error because every basis workflow needs at least one vector.
    """
    if not vectors:
        raise StructuralError(f"{label} requires at least one vector.")
    parsed = [parse_vector(field, entries, label, index)
              for index, entries in enumerate(vectors, start=1)]
    dim = len(parsed[0])
    for index, vec in enumerate(parsed, start=1):
        if len(vec) != dim:
            raise DimensionMismatchError(
                f"{label}: vector {index} has {len(vec)} entries but vector 1 "
                f"has {dim}. All vectors must live in the same space."
            )
    return parsed


def columns_to_matrix(vectors) -> list:
    """Stack vectors side by side as the columns of a matrix."""
    if not vectors:
        return []
    return [[vec[i] for vec in vectors] for i in range(len(vectors[0]))]

