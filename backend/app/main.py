from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from matrixmaster.config import load_settings
from matrixmaster.engine import compute
from matrixmaster.errors import MatrixEngineError
from matrixmaster.models import ComputationRequest, ComputationResult

app = FastAPI(title="MatrixMaster API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SETTINGS = load_settings()


@app.post("/api/compute", response_model=ComputationResult)
def compute_request(req: ComputationRequest):
    try:
        return compute(req, SETTINGS)
    except MatrixEngineError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Engine error: {str(e)}")
