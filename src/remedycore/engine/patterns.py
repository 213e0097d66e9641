"""
src/remedycore/engine/patterns.py

Whole-case heuristics used by the scorer:

- Case Pattern Detector: does the symptom set as a whole look acute?
- Remedy Pattern Detector: does the symptom text carry a known remedy signature?
- PolyChrest penalty: broad remedies need characteristic evidence to rank highly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from remedycore.engine.models import RemedyPattern, Symptom
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams


def combined_text(symptoms: Iterable[Symptom]) -> str:
    return " ".join(s.text for s in symptoms)


# ----------------------------
# Case pattern (acute detection)
# ----------------------------

@dataclass(frozen=True)
class CasePattern:
    acute_signal_count: int
    is_acute_case: bool


def detect_case_pattern(symptoms: Iterable[Symptom], params: ScoringParams = DEFAULT_PARAMS) -> CasePattern:
    text = combined_text(symptoms)
    signals = (params.sudden_tokens, params.violent_tokens, params.rapid_tokens)
    count = sum(1 for tokens in signals if any(t in text for t in tokens))
    return CasePattern(acute_signal_count=count, is_acute_case=count >= params.acute_min_signals)


# ----------------------------
# Remedy signature
# ----------------------------

@dataclass(frozen=True)
class PatternMatch:
    pattern: RemedyPattern
    match_count: int
    matched: bool
    match_strength: float


def detect_remedy_pattern(
    full_name: str,
    text: str,
    patterns: Mapping[str, RemedyPattern],
    params: ScoringParams = DEFAULT_PARAMS,
) -> Optional[PatternMatch]:
    """
    ``text`` is the lowercased concatenation of all symptom texts.
    Returns None when the remedy has no registered signature.
    """
    pattern = patterns.get(full_name)
    if pattern is None:
        return None

    match_count = sum(1 for k in pattern.keywords if k in text)
    min_match = pattern.min_match or params.default_min_match
    strength = (match_count / len(pattern.keywords) * 100) if pattern.keywords else 0.0
    return PatternMatch(
        pattern=pattern,
        match_count=match_count,
        matched=match_count >= min_match,
        match_strength=strength,
    )


# ----------------------------
# PolyChrest penalty
# ----------------------------

def polychrest_penalty(full_name: str, characteristic_match_count: int, params: ScoringParams = DEFAULT_PARAMS) -> float:
    if full_name in params.polychrests and characteristic_match_count < params.polychrest_min_characteristic:
        return params.polychrest_penalty
    return 1.0
