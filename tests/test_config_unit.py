import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from matrixmaster import config


@pytest.fixture(autouse=True)
def _no_env_settings(monkeypatch):
    monkeypatch.delenv(config.SETTINGS_ENV_VAR, raising=False)


def test_defaults() -> None:
    settings = config.load_settings()
    assert settings.tolerance == 1e-9
    assert settings.power_iteration_limit == 120
    assert settings.exact_integer_bits == 64
    assert settings.log_level == "WARNING"


def test_file_merges_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"tolerance": 1e-6, "unknown": 1}), encoding="utf-8")
    settings = config.load_settings(str(path))
    assert settings.tolerance == 1e-6
    assert settings.power_iteration_limit == 120


def test_env_var_points_at_file(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"power_iteration_limit": 10}), encoding="utf-8")
    monkeypatch.setenv(config.SETTINGS_ENV_VAR, str(path))
    assert config.load_settings().power_iteration_limit == 10


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unreadable_file_falls_back(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")
    assert config.load_settings(str(path)) == config.EngineSettings()


def test_missing_file_falls_back(tmp_path: Path) -> None:
    assert config.load_settings(str(tmp_path / "nope.json")) == config.EngineSettings()


def test_overrides_win(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"tolerance": 1e-6}), encoding="utf-8")
    settings = config.load_settings(str(path), overrides={"tolerance": 1e-4})
    assert settings.tolerance == 1e-4


def test_settings_are_validated_and_frozen() -> None:
    with pytest.raises(ValidationError):
        config.load_settings(overrides={"tolerance": -1})
    settings = config.EngineSettings()
    with pytest.raises(ValidationError):
        settings.tolerance = 0.1


def test_configure_logging(monkeypatch) -> None:
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    config.configure_logging("debug")
    assert calls["level"] == logging.DEBUG
