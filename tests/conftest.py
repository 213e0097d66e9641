from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from remedycore.config import get_settings
from remedycore.engine import RemedyEngine, RepertoryStore
from remedycore.pipeline.engine_wrapper import get_engine


BELL_REPERTORY = {
    "categories": [
        {
            "title": "Head",
            "rubrics": [
                {"title": "Head Pain Throbbing", "remedies": [{"abbreviation": "Bell", "grade": 3}]},
            ],
        }
    ]
}
BELL_MAP = {"Bell": "Belladonna"}

# Classic acute Belladonna presentation.
BELLADONNA_CASE = [
    {"clinical": "MIND RESTLESSNESS", "type": "mental"},
    {"clinical": "MIND IRRITABILITY", "type": "mental"},
    {"clinical": "HEAD PAIN THROBBING", "type": "keynote"},
    {"clinical": "HEAD PAIN RIGHT SIDED", "type": "physical"},
    {"clinical": "EYE PHOTOPHOBIA", "type": "keynote"},
    {"clinical": "FEVER SUDDEN ONSET", "type": "keynote"},
    {"clinical": "FEVER HEAT", "type": "physical"},
    {"clinical": "FEVER PERSPIRATION ABSENT", "type": "keynote"},
    {"clinical": "SKIN RED", "type": "physical"},
    {"clinical": "HEAD PAIN VIOLENT", "type": "keynote"},
]


def write_data_dir(
    target: Path,
    repertory: Any = BELL_REPERTORY,
    remedy_map: Any = BELL_MAP,
    remedy_patterns: Any = None,
) -> Path:
    target.mkdir(parents=True, exist_ok=True)
    (target / "repertory_full.json").write_text(json.dumps(repertory), encoding="utf-8")
    (target / "remedy_map.json").write_text(json.dumps(remedy_map), encoding="utf-8")
    (target / "remedy_patterns.json").write_text(json.dumps(remedy_patterns or {}), encoding="utf-8")
    return target


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return write_data_dir(tmp_path / "data")


@pytest.fixture
def make_engine() -> Callable[..., RemedyEngine]:
    def _make(
        repertory: Any = BELL_REPERTORY,
        remedy_map: Any = BELL_MAP,
        remedy_patterns: Optional[Any] = None,
        **kwargs: Any,
    ) -> RemedyEngine:
        return RemedyEngine(RepertoryStore.from_data(repertory, remedy_map, remedy_patterns), **kwargs)

    return _make


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()
