"""Standard bases for the Spaces presets.

Polynomials of degree ≤ d are coordinatized by their ascending coefficient
vectors in R^(d+1); m×n matrices are flattened row by row into R^(mn).
"""

from matrixmaster.errors import StructuralError
from matrixmaster.formatting import _to_superscript


def monomial_name(power: int, variable: str = "x") -> str:
    if power == 0:
        return "1"
    if power == 1:
        return variable
    return variable + _to_superscript(str(power))


def polynomial_space_basis(degree: int, variable: str = "x") -> list[tuple[str, list[str]]]:
    """Monomials ``1, x, x², ...`` as ``(name, coefficient tokens)`` pairs."""
    if degree < 0:
        raise StructuralError(f"Polynomial degree must be at least 0; got {degree}.")
    size = degree + 1
    return [
        (monomial_name(k, variable), ["1" if i == k else "0" for i in range(size)])
        for k in range(size)
    ]


def matrix_space_basis(rows: int, columns: int) -> list[tuple[str, list[str]]]:
    """Matrix units ``E11 ... Emn`` flattened row-major."""
    if rows < 1 or columns < 1:
        raise StructuralError(
            f"A matrix space needs at least one row and one column; got {rows}×{columns}."
        )
    size = rows * columns
    out = []
    for i in range(rows):
        for j in range(columns):
            k = i * columns + j
            out.append((f"E{i + 1}{j + 1}", ["1" if t == k else "0" for t in range(size)]))
    return out


def reshape(vector, rows: int, columns: int) -> list:
    """Undo the row-major flattening used by :func:`matrix_space_basis`."""
    if len(vector) != rows * columns:
        raise StructuralError(
            f"A vector of length {len(vector)} cannot be shown as a {rows}×{columns} matrix."
        )
    return [list(vector[i * columns:(i + 1) * columns]) for i in range(rows)]


def preset_dimension(preset, degree: int = 2, rows: int = 2, columns: int = 2) -> int | None:
    """Ambient dimension implied by a preset, or None for plain R^n."""
    preset = getattr(preset, "value", preset)
    if preset == "polynomial_space":
        return degree + 1
    if preset == "matrix_space":
        return rows * columns
    return None
