"""MatrixMaster: exact and numeric linear algebra engines."""

from matrixmaster.config import EngineSettings, load_settings
from matrixmaster.engine import ExactMatrixEngine, NumericMatrixEngine, compute, safe_compute
from matrixmaster.errors import MatrixEngineError
from matrixmaster.models import ComputationRequest, ComputationResult

__all__ = [
    "ComputationRequest",
    "ComputationResult",
    "EngineSettings",
    "ExactMatrixEngine",
    "MatrixEngineError",
    "NumericMatrixEngine",
    "compute",
    "load_settings",
    "safe_compute",
]
