from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from conftest import BELLADONNA_CASE
from remedycore.config import BUNDLED_DATA_DIR, Settings, get_settings
from remedycore.engine import DEFAULT_PARAMS, DataLoadError, FailurePolicy
from remedycore.pipeline.engine_wrapper import build_engine, get_engine, run_engine, suggest_remedies


def test_settings_defaults(monkeypatch):
    for var in ("DATA_DIR", "FAILURE_POLICY", "DEFAULT_LIMIT", "MAX_LIMIT", "SCORING_PARAMS_PATH"):
        monkeypatch.delenv(var, raising=False)
    s = get_settings()
    assert s.DATA_DIR == BUNDLED_DATA_DIR
    assert s.FAILURE_POLICY == "open"
    assert s.DEFAULT_LIMIT == 10
    assert s.MAX_LIMIT == 50
    assert s.SCORING_PARAMS_PATH is None


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("FAILURE_POLICY", " Closed ")
    monkeypatch.setenv("DEFAULT_LIMIT", "5")
    s = get_settings()
    assert s.DATA_DIR == tmp_path
    assert s.FAILURE_POLICY == "closed"
    assert s.DEFAULT_LIMIT == 5


@pytest.mark.parametrize("field,value", [("FAILURE_POLICY", "maybe"), ("MAX_LIMIT", 0), ("DEFAULT_LIMIT", -3)])
def test_settings_rejects_invalid(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_build_engine_from_settings(data_dir, tmp_path):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"pattern_bonus": 150}), encoding="utf-8")

    engine = build_engine(Settings(DATA_DIR=data_dir, SCORING_PARAMS_PATH=params, FAILURE_POLICY="closed"))

    assert engine.failure_policy is FailurePolicy.CLOSED
    assert engine.params.pattern_bonus == 150.0
    assert engine.store.repertory_path == data_dir / "repertory_full.json"
    # data loads lazily
    assert engine.store.is_loaded is False


def test_build_engine_default_params(data_dir):
    assert build_engine(Settings(DATA_DIR=data_dir)).params is DEFAULT_PARAMS


def test_build_engine_bad_params_file(data_dir, tmp_path):
    with pytest.raises(DataLoadError):
        build_engine(Settings(DATA_DIR=data_dir, SCORING_PARAMS_PATH=tmp_path / "missing.json"))


def test_get_engine_is_cached(monkeypatch, data_dir):
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    assert get_engine() is get_engine()


def test_run_engine_returns_records(monkeypatch, data_dir):
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    records = run_engine([{"clinical": "head pain throbbing", "type": "keynote"}])
    assert len(records) == 1
    rec = records[0]
    assert rec["fullName"] == "Belladonna"
    assert rec["shortName"] == "Bell"
    assert rec["score"] == pytest.approx(77.62)
    assert rec["percentMatch"] == 100.0
    assert rec["clinicalJustification"] == "Covers 1 decisive symptom."


def test_suggest_remedies_uses_default_limit(monkeypatch):
    monkeypatch.setenv("DEFAULT_LIMIT", "2")
    out = suggest_remedies(BELLADONNA_CASE, "acute")
    assert len(out) == 2
    assert out[0].full_name == "Belladonna"


def test_run_engine_empty(monkeypatch, tmp_path):
    # nothing to match, so the missing data is never read
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    assert run_engine([]) == []
