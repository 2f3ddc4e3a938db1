"""
Computation engines for MatrixMaster.

Two engines share every algorithm and differ only in the field they run
over.  Each engine accepts requests of its own mode only, dispatches on the
request destination and returns a :class:`ComputationResult`.  Engines hold
no per-request state, so one instance may serve concurrent callers.
"""

import logging
from typing import Optional

from matrixmaster.config import EngineSettings, load_settings
from matrixmaster.errors import MatrixEngineError, StructuralError, WrongModeError
from matrixmaster.fields import field_for
from matrixmaster.models import ComputationRequest, ComputationResult, Destination, MathMode
from matrixmaster.workflows import analyze, operate, solve, spaces

LOG = logging.getLogger(__name__)

FAILURE_ANSWER = "Computation failed"

LIBRARY_RESULT = ComputationResult(
    answer="Library request passed through",
    diagnostics=["Saved vectors are managed by the library store, not the engine."],
)

_WORKFLOWS = {
    Destination.SOLVE: solve.run,
    Destination.OPERATE: operate.run,
    Destination.ANALYZE: analyze.run,
    Destination.SPACES: spaces.run,
}


class _MatrixEngine:
    mode: MathMode

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or load_settings()
        self.field = field_for(self.mode, self.settings.tolerance,
                               self.settings.exact_integer_bits)

    def compute(self, request: ComputationRequest) -> ComputationResult:
        if request.mode != self.mode:
            raise WrongModeError(self.mode.value, request.mode.value)
        if request.destination == Destination.LIBRARY:
            return LIBRARY_RESULT
        workflow = _WORKFLOWS.get(request.destination)
        if workflow is None:
            raise StructuralError(f"Unsupported destination: {request.destination}")
        LOG.debug("%s engine: dispatching %s", self.mode.value, request.destination.value)
        result = workflow(request, self.field, self.settings)
        LOG.info("%s %s request completed: %s",
                 self.mode.value, request.destination.value, result.answer)
        return result


class ExactMatrixEngine(_MatrixEngine):
    """Rational arithmetic with overflow-checked fixed-width integers."""

    mode = MathMode.EXACT


class NumericMatrixEngine(_MatrixEngine):
    """Floating point arithmetic with a fixed zero tolerance."""

    mode = MathMode.NUMERIC


def engine_for(mode, settings: Optional[EngineSettings] = None) -> _MatrixEngine:
    if MathMode(mode) == MathMode.EXACT:
        return ExactMatrixEngine(settings)
    return NumericMatrixEngine(settings)


def compute(request: ComputationRequest, settings: Optional[EngineSettings] = None) -> ComputationResult:
    """Run *request* on the engine matching its mode; engine errors propagate."""
    return engine_for(request.mode, settings).compute(request)


def safe_compute(request: ComputationRequest,
                 settings: Optional[EngineSettings] = None) -> ComputationResult:
    """Like :func:`compute`, but an engine error becomes a failure result."""
    try:
        return compute(request, settings)
    except MatrixEngineError as e:
        LOG.info("computation failed (%s): %s", e.kind, e.message)
        return ComputationResult(answer=FAILURE_ANSWER, diagnostics=[e.message])
