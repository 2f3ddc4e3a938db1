"""Number systems the algorithms are written against.

Row reduction, determinants, inverses and the subspace workflows are
implemented once and take a *field* object.  The two fields differ only in
their number type, how they pick a pivot and what "zero" means:

- :class:`ExactField` works on SymPy rationals, takes the first nonzero
  entry as pivot and compares exactly.
- :class:`NumericField` works on floats, takes the largest-magnitude entry
  as pivot and treats anything within ``tolerance`` of zero as zero.
"""

from matrixmaster import exact
from matrixmaster.formatting import fmt_num

DEFAULT_TOLERANCE = 1e-9


class ExactField:
    name = "exact"

    def __init__(self, bits: int = exact.EXACT_INTEGER_BITS):
        self.bits = bits
        self.zero = exact.ZERO
        self.one = exact.ONE

    def parse(self, token: str):
        return exact.parse_exact_token(token, self.bits)

    def from_int(self, value: int):
        return exact.checked(value, self.bits)

    def from_sympy(self, value):
        return exact.checked(value, self.bits)

    def add(self, a, b):
        return exact.add(a, b, self.bits)

    def sub(self, a, b):
        return exact.subtract(a, b, self.bits)

    def mul(self, a, b):
        return exact.multiply(a, b, self.bits)

    def div(self, a, b):
        return exact.divide(a, b, self.bits)

    def neg(self, a):
        return exact.negate(a, self.bits)

    def is_zero(self, a) -> bool:
        return a == 0

    def equals(self, a, b) -> bool:
        return a == b

    def clean(self, a):
        return a

    def choose_pivot(self, column_values: list, start: int):
        """Index of the first nonzero entry at or below *start*, else None."""
        for i in range(start, len(column_values)):
            if column_values[i] != 0:
                return i
        return None

    def format(self, a) -> str:
        return exact.format_exact(a)

    def to_float(self, a) -> float:
        return float(a)


class NumericField:
    name = "numeric"

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        self.tolerance = tolerance
        self.zero = 0.0
        self.one = 1.0

    def parse(self, token: str) -> float:
        return exact.parse_float_token(token)

    def from_int(self, value: int) -> float:
        return float(value)

    def from_sympy(self, value) -> float:
        return float(value)

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def mul(self, a, b):
        return a * b

    def div(self, a, b):
        return a / b

    def neg(self, a):
        return -a

    def is_zero(self, a) -> bool:
        return abs(a) <= self.tolerance

    def equals(self, a, b) -> bool:
        return abs(a - b) <= self.tolerance

    def clean(self, a):
        """Clamp values inside the tolerance band to exactly zero."""
        return 0.0 if abs(a) <= self.tolerance else a

    def choose_pivot(self, column_values: list, start: int):
        """Index of the largest-magnitude entry at or below *start*.

        Returns None when even the largest entry is within tolerance.
        """
        best = None
        best_mag = self.tolerance
        for i in range(start, len(column_values)):
            mag = abs(column_values[i])
            if mag > best_mag:
                best, best_mag = i, mag
        return best

    def format(self, a) -> str:
        return fmt_num(a)

    def to_float(self, a) -> float:
        return float(a)


def field_for(mode: str, tolerance: float = DEFAULT_TOLERANCE,
              bits: int = exact.EXACT_INTEGER_BITS):
    """Return the field object for ``"exact"`` or ``"numeric"``."""
    mode = getattr(mode, "value", mode)
    if mode == "exact":
        return ExactField(bits)
    if mode == "numeric":
        return NumericField(tolerance)
    raise ValueError(f"Unknown math mode: {mode!r}")
