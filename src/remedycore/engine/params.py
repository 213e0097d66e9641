"""
src/remedycore/engine/params.py

Scoring constants. Defaults reproduce the reference weighting; a JSON file can
override any subset of them (see ``load_params``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from remedycore.engine.errors import DataLoadError
from remedycore.engine.store import read_json

DECISIVE_KEYWORDS = (
    "sudden", "violent", "throbbing", "intense", "acute", "rapid",
    "burning", "shooting", "tearing", "bursting", "pulsating",
)

CHARACTERISTIC_MODALITIES = (
    "worse from light", "worse from noise", "worse from jar",
    "worse from motion", "better from pressure", "better from cold",
)

POLYCHRESTS = (
    "Belladonna", "Sulphur", "Calcarea Carbonica", "Lycopodium", "Phosphorus",
    "Natrum Muriaticum", "Arsenicum Album", "Pulsatilla", "Nux Vomica", "Bryonia",
)


def _default_grade_mult() -> Dict[str, float]:
    # key: "<grade>:<level>"
    return {"3:4": 2.5, "3:3": 1.8, "2:4": 1.5}


def _default_type_mult() -> Dict[str, float]:
    return {"keynote": 1.4, "mental": 1.25}


@dataclass(frozen=True)
class ScoringParams:
    # classification
    decisive_keywords: Tuple[str, ...] = DECISIVE_KEYWORDS
    characteristic_modalities: Tuple[str, ...] = CHARACTERISTIC_MODALITIES
    general_keywords: Tuple[str, ...] = ("general", "fever", "sleep")

    # tokenization
    min_term_length: int = 2

    # per-match weighting
    grade_mult: Dict[str, float] = field(default_factory=_default_grade_mult)

    # composite score
    rubric_match_weight: float = 10.0
    intensity_weight: float = 5.0
    type_mult: Dict[str, float] = field(default_factory=_default_type_mult)

    # remedy signatures
    pattern_bonus: float = 200.0
    default_min_match: int = 3

    # acute case detection
    sudden_tokens: Tuple[str, ...] = ("sudden", "onset")
    violent_tokens: Tuple[str, ...] = ("violent", "intense", "severe")
    rapid_tokens: Tuple[str, ...] = ("rapid",)
    acute_min_signals: int = 2
    acute_bonus_base: float = 20.0
    acute_bonus_per_signal: float = 10.0

    # polychrest handling
    polychrests: Tuple[str, ...] = POLYCHRESTS
    polychrest_penalty: float = 0.88
    polychrest_min_characteristic: int = 2

    # justification
    keynote_min_characteristic: int = 2

    def grade_multiplier(self, grade: int, level: int) -> float:
        return float(self.grade_mult.get(f"{grade}:{level}", 1.0))


DEFAULT_PARAMS = ScoringParams()


def _tuple(cfg: dict, key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = cfg.get(key)
    if value is None:
        return default
    return tuple(str(v).lower() for v in value)


def load_params(config_path: str) -> ScoringParams:
    cfg = read_json(config_path, what="scoring params file")
    if not isinstance(cfg, dict):
        raise DataLoadError(f"scoring params must be a JSON object: {config_path}")

    d = DEFAULT_PARAMS
    try:
        return ScoringParams(
            decisive_keywords=_tuple(cfg, "decisive_keywords", d.decisive_keywords),
            characteristic_modalities=_tuple(cfg, "characteristic_modalities", d.characteristic_modalities),
            general_keywords=_tuple(cfg, "general_keywords", d.general_keywords),
            min_term_length=int(cfg.get("min_term_length", d.min_term_length)),
            grade_mult={str(k): float(v) for k, v in cfg.get("grade_mult", d.grade_mult).items()},
            rubric_match_weight=float(cfg.get("rubric_match_weight", d.rubric_match_weight)),
            intensity_weight=float(cfg.get("intensity_weight", d.intensity_weight)),
            type_mult={str(k): float(v) for k, v in cfg.get("type_mult", d.type_mult).items()},
            pattern_bonus=float(cfg.get("pattern_bonus", d.pattern_bonus)),
            default_min_match=int(cfg.get("default_min_match", d.default_min_match)),
            sudden_tokens=_tuple(cfg, "sudden_tokens", d.sudden_tokens),
            violent_tokens=_tuple(cfg, "violent_tokens", d.violent_tokens),
            rapid_tokens=_tuple(cfg, "rapid_tokens", d.rapid_tokens),
            acute_min_signals=int(cfg.get("acute_min_signals", d.acute_min_signals)),
            acute_bonus_base=float(cfg.get("acute_bonus_base", d.acute_bonus_base)),
            acute_bonus_per_signal=float(cfg.get("acute_bonus_per_signal", d.acute_bonus_per_signal)),
            polychrests=tuple(str(p) for p in cfg.get("polychrests", d.polychrests)),
            polychrest_penalty=float(cfg.get("polychrest_penalty", d.polychrest_penalty)),
            polychrest_min_characteristic=int(
                cfg.get("polychrest_min_characteristic", d.polychrest_min_characteristic)
            ),
            keynote_min_characteristic=int(cfg.get("keynote_min_characteristic", d.keynote_min_characteristic)),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise DataLoadError(f"invalid scoring params in {config_path}: {e}") from e
