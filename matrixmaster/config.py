"""
Engine settings for MatrixMaster.

Settings live in an optional JSON file (``MATRIXMASTER_SETTINGS`` may point
at it).  A missing or unreadable file is not an error: the defaults below
are used and any keys the file does provide are merged over them.
"""

import json
import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

LOG = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "MATRIXMASTER_SETTINGS"

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "tolerance": 1e-9,             # numeric "is zero" threshold
    "power_iteration_limit": 120,  # eigen / singular value iterations
    "exact_integer_bits": 64,      # exact-mode integer width
    "log_level": "WARNING",
}


class EngineSettings(BaseModel):
    tolerance: float = Field(default=1e-9, gt=0)
    power_iteration_limit: int = Field(default=120, ge=1)
    exact_integer_bits: int = Field(default=64, ge=8)
    log_level: str = "WARNING"

    model_config = {"frozen": True}


def _read_json(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        LOG.warning("ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        LOG.warning("ignoring settings file %s: expected a JSON object", path)
        return {}
    return data


def load_settings(path: Optional[str] = None, overrides: Optional[dict] = None) -> EngineSettings:
    """Defaults, then the JSON file, then *overrides*; unknown keys are dropped."""
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    merged = dict(DEFAULT_SETTINGS)
    if path:
        merged.update(_read_json(path))
    if overrides:
        merged.update(overrides)
    return EngineSettings(**{k: v for k, v in merged.items() if k in DEFAULT_SETTINGS})


def configure_logging(level: str = DEFAULT_SETTINGS["log_level"]) -> None:
    """Attach a basic stderr handler; call from applications, not on import."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
