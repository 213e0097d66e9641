# src/remedycore/pipeline/engine_wrapper.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List

from remedycore.config import Settings, get_settings
from remedycore.engine import DEFAULT_PARAMS, RemedyEngine, RepertoryStore, Suggestion, load_params

_log = logging.getLogger("remedycore.pipeline")


def build_engine(settings: Settings) -> RemedyEngine:
    store = RepertoryStore.from_dir(
        settings.DATA_DIR,
        repertory_file=settings.REPERTORY_FILE,
        remedy_map_file=settings.REMEDY_MAP_FILE,
        remedy_patterns_file=settings.REMEDY_PATTERNS_FILE,
    )
    params = load_params(str(settings.SCORING_PARAMS_PATH)) if settings.SCORING_PARAMS_PATH else DEFAULT_PARAMS
    _log.info(
        "engine configured data_dir=%s params=%s failure_policy=%s",
        settings.DATA_DIR,
        settings.SCORING_PARAMS_PATH or "defaults",
        settings.FAILURE_POLICY,
    )
    return RemedyEngine(store, params=params, failure_policy=settings.FAILURE_POLICY)


@lru_cache
def get_engine() -> RemedyEngine:
    """Process-wide engine built from settings. Reference data loads on first suggestion."""
    return build_engine(get_settings())


def suggest_remedies(symptoms: Any, profile: Any = None, limit: int | None = None) -> List[Suggestion]:
    if limit is None:
        limit = get_settings().DEFAULT_LIMIT
    return get_engine().suggest_remedies(symptoms, profile, limit)


def run_engine(symptoms: Any, profile: Any = None, limit: int | None = None) -> List[Dict[str, Any]]:
    """Suggest remedies and return case-store records (camelCase dicts)."""
    return [s.to_record() for s in suggest_remedies(symptoms, profile, limit)]
