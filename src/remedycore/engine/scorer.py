"""
src/remedycore/engine/scorer.py

Remedy Scorer: turns accumulated RemedyStats into one composite score.

    base               = rubric_matches * 10 + total_grade
    weighted_intensity = sum(effective_grades) * 5
    score = round((base + weighted_intensity) * type_mult * polychrest
                  + pattern_bonus + acute_bonus, 2)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from remedycore.engine.models import PatientProfile, RemedyPattern, RemedyStats
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams
from remedycore.engine.patterns import CasePattern, PatternMatch, detect_remedy_pattern, polychrest_penalty


@dataclass(frozen=True)
class ScoredRemedy:
    stats: RemedyStats
    score: float
    base_score: float
    weighted_intensity: float
    type_multiplier: float
    polychrest_penalty: float
    pattern: Optional[PatternMatch]
    pattern_bonus: float
    acute_bonus: float

    @property
    def pattern_locked(self) -> bool:
        return self.pattern is not None and self.pattern.matched

    @property
    def boosts(self) -> List[str]:
        out: List[str] = []
        if self.pattern_locked:
            out.append("pattern_lock")
        if self.acute_bonus > 0:
            out.append("acute_pattern")
        for t in ("keynote", "mental"):
            if t in self.stats.matched_symptom_types:
                out.append(t)
        if self.polychrest_penalty < 1.0:
            out.append("polychrest_penalty")
        return out


def type_multiplier(matched_types, params: ScoringParams = DEFAULT_PARAMS) -> float:
    mult = 1.0
    for t in sorted(matched_types):
        mult *= params.type_mult.get(t, 1.0)
    return mult


def score_remedy(
    stats: RemedyStats,
    profile: PatientProfile,
    case: CasePattern,
    symptom_text: str,
    patterns: Mapping[str, RemedyPattern],
    params: ScoringParams = DEFAULT_PARAMS,
) -> ScoredRemedy:
    base = stats.rubric_matches * params.rubric_match_weight + stats.total_grade
    intensity = sum(stats.effective_grades) * params.intensity_weight
    t_mult = type_multiplier(stats.matched_symptom_types, params)
    penalty = polychrest_penalty(stats.full_name, stats.characteristic_match_count, params)

    pattern = detect_remedy_pattern(stats.full_name, symptom_text, patterns, params)
    pattern_bonus = params.pattern_bonus + pattern.match_strength if pattern and pattern.matched else 0.0

    acute_bonus = 0.0
    if profile.is_acute and case.is_acute_case and pattern and pattern.pattern.acute_remedy:
        acute_bonus = params.acute_bonus_base + case.acute_signal_count * params.acute_bonus_per_signal

    score = round((base + intensity) * t_mult * penalty + pattern_bonus + acute_bonus, 2)
    return ScoredRemedy(
        stats=stats,
        score=score,
        base_score=base,
        weighted_intensity=intensity,
        type_multiplier=t_mult,
        polychrest_penalty=penalty,
        pattern=pattern,
        pattern_bonus=pattern_bonus,
        acute_bonus=acute_bonus,
    )


def score_all(
    remedy_stats: Dict[str, RemedyStats],
    profile: PatientProfile,
    case: CasePattern,
    symptom_text: str,
    patterns: Mapping[str, RemedyPattern],
    params: ScoringParams = DEFAULT_PARAMS,
) -> List[ScoredRemedy]:
    return [score_remedy(s, profile, case, symptom_text, patterns, params) for s in remedy_stats.values()]
