"""One module per destination; each exposes ``run(request, field, settings)``."""

from matrixmaster.workflows import analyze, operate, solve, spaces

__all__ = ["analyze", "operate", "solve", "spaces"]
