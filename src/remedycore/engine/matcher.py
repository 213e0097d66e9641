"""
src/remedycore/engine/matcher.py

Rubric Matcher: walks every category/rubric of the repertory for each symptom
and accumulates per-remedy statistics.

Matching is a loose substring-overlap heuristic, not a tokenizer/stemmer: a
search term matches a word when either contains the other, so "ear" matches
"fear" and "head" matches "forehead". Tests pin this behaviour.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from remedycore.engine.classifier import classify
from remedycore.engine.models import Category, Classification, RemedyStats, Rubric, Symptom
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams
from remedycore.engine.store import RepertorySnapshot

_log = logging.getLogger("remedycore.engine.matcher")

_SYMPTOM_PUNCT = re.compile(r"[;,\-]")
_RUBRIC_SPLIT = re.compile(r"[;,\-\s+]+")


# ----------------------------
# Tokenization
# ----------------------------

def search_terms(text: str, min_len: int = 2) -> List[str]:
    cleaned = _SYMPTOM_PUNCT.sub(" ", text).lower()
    return [t for t in cleaned.split() if len(t) >= min_len]


def rubric_words(title: str, min_len: int = 2) -> List[str]:
    return [w for w in _RUBRIC_SPLIT.split(title.lower()) if len(w) >= min_len]


def _overlaps(a: str, b: str) -> bool:
    return a in b or b in a


# ----------------------------
# Single rubric decision
# ----------------------------

@dataclass(frozen=True)
class RubricMatch:
    category_match: bool
    matched_rubric_count: int
    quality: float

    @property
    def fired(self) -> bool:
        return (self.category_match and self.matched_rubric_count >= 1) or self.matched_rubric_count >= 2


def match_rubric(terms: Sequence[str], category_words: Sequence[str], words: Sequence[str]) -> RubricMatch:
    category_match = any(_overlaps(t, c) for t in terms for c in category_words)
    matched = sum(1 for t in terms if any(_overlaps(t, w) for w in words))
    quality = (matched + (1 if category_match else 0)) / max(1, len(terms))
    return RubricMatch(category_match=category_match, matched_rubric_count=matched, quality=quality)


# ----------------------------
# Accumulation over the repertory
# ----------------------------

_Index = List[Tuple[List[str], List[Tuple[Rubric, List[str]]]]]


def _build_index(categories: Sequence[Category], min_len: int) -> _Index:
    return [
        (search_terms(c.title, min_len), [(r, rubric_words(r.title, min_len)) for r in c.rubrics])
        for c in categories
    ]


def _record(
    stats: RemedyStats,
    grade: int,
    effective_grade: float,
    symptom_index: int,
    symptom: Symptom,
    cls: Classification,
) -> None:
    stats.rubric_matches += 1
    stats.total_grade += grade
    stats.effective_grades.append(effective_grade)
    stats.matched_symptoms.add(symptom_index)
    sym_type = symptom.type.lower()
    if sym_type != "physical":
        stats.matched_symptom_types.add(sym_type)
    if cls.is_decisive:
        stats.decisive_symptom_count += 1
    if cls.level == 4:
        stats.characteristic_match_count += 1


def accumulate(
    symptoms: Sequence[Symptom],
    snapshot: RepertorySnapshot,
    params: ScoringParams = DEFAULT_PARAMS,
) -> Dict[str, RemedyStats]:
    """
    Returns remedy abbreviation -> RemedyStats, in first-encountered order
    (symptom order, then repertory file order).
    """
    min_len = params.min_term_length
    index = _build_index(snapshot.categories, min_len)
    remedy_map = snapshot.remedy_map
    out: Dict[str, RemedyStats] = {}

    for i, symptom in enumerate(symptoms):
        terms = search_terms(symptom.clinical, min_len)
        cls = classify(symptom, params)
        _log.debug("symptom=%r level=%d terms=%s", symptom.clinical, cls.level, terms)
        if not terms:
            continue

        for category_words, rubrics in index:
            for rubric, words in rubrics:
                m = match_rubric(terms, category_words, words)
                if not m.fired:
                    continue

                for rg in rubric.remedies:
                    stats = out.get(rg.abbreviation)
                    if stats is None:
                        stats = RemedyStats(
                            full_name=remedy_map.get(rg.abbreviation, rg.abbreviation),
                            abbreviation=rg.abbreviation,
                        )
                        out[rg.abbreviation] = stats
                    effective = rg.grade * params.grade_multiplier(rg.grade, cls.level) * m.quality
                    _record(stats, rg.grade, effective, i, symptom, cls)

    _log.debug("remedies matched: %d", len(out))
    return out
