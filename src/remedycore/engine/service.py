"""
src/remedycore/engine/service.py

RemedyEngine: the public entry point of the engine.

    symptoms + profile
      -> classify / match every rubric          (matcher.accumulate)
      -> composite score per remedy             (scorer.score_all)
      -> sort, normalize, justify, truncate     (ranker.rank)

After the store has loaded, a call is a pure function of
(symptoms, profile, limit, repertory snapshot); the engine keeps no per-call
state on the instance, so one engine can serve concurrent callers.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from remedycore.engine.errors import ComputationError
from remedycore.engine.matcher import accumulate
from remedycore.engine.models import PatientProfile, Suggestion, Symptom, coerce_symptoms
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams
from remedycore.engine.patterns import combined_text, detect_case_pattern
from remedycore.engine.ranker import rank
from remedycore.engine.scorer import score_all
from remedycore.engine.store import RepertorySnapshot, RepertoryStore

_log = logging.getLogger("remedycore.engine.service")

DEFAULT_LIMIT = 10


class FailurePolicy(str, Enum):
    OPEN = "open"      # log and return [] so case creation is never blocked
    CLOSED = "closed"  # raise ComputationError


class RemedyEngine:
    def __init__(
        self,
        store: RepertoryStore,
        params: ScoringParams = DEFAULT_PARAMS,
        failure_policy: FailurePolicy | str = FailurePolicy.OPEN,
    ) -> None:
        self.store = store
        self.params = params
        self.failure_policy = FailurePolicy(failure_policy)

    def suggest_remedies(
        self, symptoms: Any, profile: Any = None, limit: Optional[int] = DEFAULT_LIMIT
    ) -> List[Suggestion]:
        """
        Rank remedies for the given symptoms.

        ``limit=None`` means DEFAULT_LIMIT. Empty or unusable symptom input
        returns [] without touching the data.
        DataLoadError from the store always propagates.
        """
        sx = coerce_symptoms(symptoms)
        if not sx:
            return []

        if limit is None:
            limit = DEFAULT_LIMIT

        snapshot = self.store.load()
        patient = PatientProfile.from_raw(profile)

        try:
            return self._run(sx, patient, limit, snapshot)
        except Exception as e:
            _log.exception(
                "remedy computation failed symptoms=%d policy=%s",
                len(sx),
                self.failure_policy.value,
            )
            if self.failure_policy is FailurePolicy.CLOSED:
                raise ComputationError(f"remedy computation failed: {e}") from e
            return []

    def _run(
        self,
        symptoms: List[Symptom],
        profile: PatientProfile,
        limit: int,
        snapshot: RepertorySnapshot,
    ) -> List[Suggestion]:
        stats = accumulate(symptoms, snapshot, self.params)
        if not stats:
            _log.info("no rubric matched symptoms=%d", len(symptoms))
            return []

        case = detect_case_pattern(symptoms, self.params)
        scored = score_all(stats, profile, case, combined_text(symptoms), snapshot.remedy_patterns, self.params)
        results = rank(scored, limit, self.params)

        _log.info(
            "suggested %d of %d candidate remedies",
            len(results),
            len(stats),
            extra={
                "symptoms": len(symptoms),
                "case_type": profile.type,
                "acute_signals": case.acute_signal_count,
                "top": results[0].short_name if results else None,
            },
        )
        return results
