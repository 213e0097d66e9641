from __future__ import annotations

import pytest

from remedycore.engine.models import PatientProfile, RemedyPattern, RemedyStats
from remedycore.engine.patterns import CasePattern
from remedycore.engine.scorer import score_all, score_remedy, type_multiplier

CHRONIC = PatientProfile()
ACUTE = PatientProfile(type="acute")
NOT_ACUTE = CasePattern(acute_signal_count=0, is_acute_case=False)
ACUTE_CASE = CasePattern(acute_signal_count=3, is_acute_case=True)


def _stats(full_name="Glonoinum", characteristic=2, types=("keynote", "mental")):
    return RemedyStats(
        full_name=full_name,
        abbreviation=full_name[:4],
        rubric_matches=2,
        total_grade=5,
        decisive_symptom_count=2,
        characteristic_match_count=characteristic,
        matched_symptom_types=set(types),
        effective_grades=[3.0, 2.0],
        matched_symptoms={0, 1},
    )


def _pattern(acute=False):
    return {"Glonoinum": RemedyPattern(keywords=("heat", "sun", "throbbing"), min_match=2,
                                       description="sunstroke congestion", acute_remedy=acute)}


def test_type_multiplier():
    assert type_multiplier(set()) == 1.0
    assert type_multiplier({"keynote"}) == pytest.approx(1.4)
    assert type_multiplier({"mental"}) == pytest.approx(1.25)
    assert type_multiplier({"keynote", "mental"}) == pytest.approx(1.75)
    assert type_multiplier({"unknown"}) == 1.0


def test_composite_score():
    # (2*10 + 5 + 5.0*5) * 1.4 * 1.25
    s = score_remedy(_stats(), CHRONIC, NOT_ACUTE, "", {})
    assert s.base_score == 25
    assert s.weighted_intensity == 25
    assert s.score == pytest.approx(87.5)
    assert s.pattern is None
    assert s.pattern_locked is False
    assert s.boosts == ["keynote", "mental"]


def test_polychrest_penalized_without_characteristics():
    penalized = score_remedy(_stats("Sulphur", characteristic=1), CHRONIC, NOT_ACUTE, "", {})
    full = score_remedy(_stats("Sulphur", characteristic=2), CHRONIC, NOT_ACUTE, "", {})
    assert penalized.score == pytest.approx(77.0)
    assert full.score == pytest.approx(87.5)
    assert "polychrest_penalty" in penalized.boosts
    assert "polychrest_penalty" not in full.boosts


def test_pattern_bonus_added_after_multipliers():
    s = score_remedy(_stats(), CHRONIC, NOT_ACUTE, "throbbing head heat", _pattern())
    assert s.pattern_locked is True
    assert s.pattern_bonus == pytest.approx(200 + 200 / 3)
    assert s.score == pytest.approx(354.17)
    assert s.boosts[0] == "pattern_lock"


def test_pattern_below_threshold_adds_nothing():
    s = score_remedy(_stats(), CHRONIC, NOT_ACUTE, "throbbing", _pattern())
    assert s.pattern is not None
    assert s.pattern_locked is False
    assert s.score == pytest.approx(87.5)


def test_acute_bonus_with_locked_pattern():
    s = score_remedy(_stats(), ACUTE, ACUTE_CASE, "throbbing head heat", _pattern(acute=True))
    assert s.acute_bonus == 50
    assert s.score == pytest.approx(404.17)
    assert s.boosts[:2] == ["pattern_lock", "acute_pattern"]


def test_acute_bonus_does_not_need_locked_pattern():
    s = score_remedy(_stats(), ACUTE, ACUTE_CASE, "nothing relevant", _pattern(acute=True))
    assert s.pattern_locked is False
    assert s.score == pytest.approx(137.5)


@pytest.mark.parametrize(
    "profile,case,acute",
    [
        (CHRONIC, ACUTE_CASE, True),
        (ACUTE, NOT_ACUTE, True),
        (ACUTE, ACUTE_CASE, False),
    ],
)
def test_acute_bonus_requires_all_three(profile, case, acute):
    s = score_remedy(_stats(), profile, case, "", _pattern(acute=acute))
    assert s.acute_bonus == 0
    assert s.score == pytest.approx(87.5)


def test_acute_bonus_needs_registered_pattern():
    s = score_remedy(_stats(), ACUTE, ACUTE_CASE, "", {})
    assert s.acute_bonus == 0


def test_score_all_keeps_input_order():
    stats = {"Glon": _stats(), "Sulph": _stats("Sulphur", characteristic=0)}
    out = score_all(stats, CHRONIC, NOT_ACUTE, "", {})
    assert [s.stats.full_name for s in out] == ["Glonoinum", "Sulphur"]
