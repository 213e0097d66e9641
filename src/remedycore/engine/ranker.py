"""
src/remedycore/engine/ranker.py

Ranker/Normalizer and Justification Generator.

Ranking is a stable sort on score (descending). Equal scores keep the order in
which remedies were first encountered, which follows repertory file order and
carries no clinical meaning.
"""
from __future__ import annotations

from typing import List, Sequence

from remedycore.engine.models import Suggestion
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams
from remedycore.engine.scorer import ScoredRemedy

FALLBACK_JUSTIFICATION = "Matched relevant rubrics."


def build_justification(item: ScoredRemedy, params: ScoringParams = DEFAULT_PARAMS) -> str:
    stats = item.stats
    clauses: List[str] = []

    if item.pattern_locked:
        description = item.pattern.pattern.description or "known remedy"
        clauses.append(f"Matches the {description} pattern ({item.pattern.match_strength:.0f}% keyword strength)")
    if stats.decisive_symptom_count > 0:
        n = stats.decisive_symptom_count
        clauses.append(f"Covers {n} decisive symptom{'s' if n != 1 else ''}")
    if item.acute_bonus > 0:
        clauses.append("Acute presentation pattern recognized")
    if stats.characteristic_match_count >= params.keynote_min_characteristic:
        clauses.append("Keynote characteristics present")

    if not clauses:
        return FALLBACK_JUSTIFICATION
    return ". ".join(clauses) + "."


def rank(scored: Sequence[ScoredRemedy], limit: int = 10, params: ScoringParams = DEFAULT_PARAMS) -> List[Suggestion]:
    ordered = sorted(scored, key=lambda s: s.score, reverse=True)

    max_score = ordered[0].score if ordered else 0.0
    if not max_score:
        max_score = 1.0

    out: List[Suggestion] = []
    for item in ordered[: max(0, int(limit))]:
        stats = item.stats
        out.append(
            Suggestion(
                full_name=stats.full_name,
                short_name=stats.abbreviation,
                score=item.score,
                percent_match=round(item.score / max_score * 100, 1),
                clinical_justification=build_justification(item, params),
                coverage=len(stats.matched_symptoms),
                rubric_matches=stats.rubric_matches,
                decisive_symptom_count=stats.decisive_symptom_count,
                characteristic_match_count=stats.characteristic_match_count,
                intensity=round(sum(stats.effective_grades), 2),
                pattern_locked=item.pattern_locked,
                pattern_description=item.pattern.pattern.description if item.pattern_locked else None,
                acute_remedy_bonus=item.acute_bonus > 0,
                boosts=item.boosts,
            )
        )
    return out
