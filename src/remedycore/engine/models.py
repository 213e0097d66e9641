"""
src/remedycore/engine/models.py

Data models shared by every engine stage.

Reference data (Category / Rubric / RemedyGrade / RemedyPattern) is frozen and
held in tuples so a loaded repertory can be shared across calls. RemedyStats is
the only mutable type and lives for exactly one engine call.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

_log = logging.getLogger("remedycore.engine.models")

SYMPTOM_TYPES = ("mental", "keynote", "physical")
CASE_TYPES = ("acute", "chronic")


# ----------------------------
# Reference data
# ----------------------------

@dataclass(frozen=True)
class RemedyGrade:
    abbreviation: str
    grade: int  # 1..3, 3 = most characteristic


@dataclass(frozen=True)
class Rubric:
    title: str
    remedies: Tuple[RemedyGrade, ...]


@dataclass(frozen=True)
class Category:
    title: str
    rubrics: Tuple[Rubric, ...]


@dataclass(frozen=True)
class RemedyPattern:
    keywords: Tuple[str, ...]
    min_match: int
    description: str
    acute_remedy: bool = False


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class Symptom:
    clinical: str
    friendly: str = ""
    type: str = "physical"

    @property
    def text(self) -> str:
        return self.clinical.lower()


@dataclass(frozen=True)
class PatientProfile:
    type: str = "chronic"
    miasm: Optional[str] = None
    constitution: Optional[str] = None

    @property
    def is_acute(self) -> bool:
        return self.type.lower() == "acute"

    @classmethod
    def from_raw(cls, raw: Any) -> "PatientProfile":
        if isinstance(raw, PatientProfile):
            return raw
        if isinstance(raw, str):
            return cls(type=_case_type(raw))
        if isinstance(raw, Mapping):
            return cls(
                type=_case_type(raw.get("type") or raw.get("caseType")),
                miasm=raw.get("miasm") or None,
                constitution=raw.get("constitution") or None,
            )
        return cls()


def _case_type(raw: Any) -> str:
    value = str(raw or "").strip().lower()
    if value not in CASE_TYPES:
        if value:
            _log.debug("unknown case type %r, treating as chronic", raw)
        return "chronic"
    return value


def _symptom_type(raw: Any) -> str:
    value = raw.strip().lower() if isinstance(raw, str) else ""
    if value not in SYMPTOM_TYPES:
        if value:
            _log.debug("unknown symptom type %r, treating as physical", raw)
        return "physical"
    return value


def _symptom_from_mapping(item: Mapping) -> Optional[Symptom]:
    clinical = item.get("clinical") or item.get("text") or item.get("friendly")
    if not isinstance(clinical, str) or not clinical.strip():
        return None
    friendly = item.get("friendly")
    return Symptom(
        clinical=clinical.strip(),
        friendly=friendly.strip() if isinstance(friendly, str) else "",
        type=_symptom_type(item.get("type")),
    )


def coerce_symptoms(raw: Any) -> List[Symptom]:
    """
    Normalize whatever the summarizer produced into a list of Symptom.

    Accepts:
      A) Symptom instances
      B) plain strings (older summaries), treated as physical symptoms
      C) mappings with clinical / text / friendly / type keys (unknown type -> physical)
      D) a summary mapping carrying the list under "symptoms"
    Blank or unrecognized entries are skipped.
    """
    if not raw:
        return []
    if isinstance(raw, Mapping):
        raw = raw.get("symptoms") or []
    elif isinstance(raw, (str, Symptom)):
        raw = [raw]

    try:
        items = list(raw)
    except TypeError:
        _log.debug("symptom input is not iterable: %r", type(raw).__name__)
        return []

    out: List[Symptom] = []
    for item in items:
        if isinstance(item, Symptom):
            if item.clinical.strip():
                out.append(item)
        elif isinstance(item, str):
            if item.strip():
                out.append(Symptom(clinical=item.strip()))
        elif isinstance(item, Mapping):
            sym = _symptom_from_mapping(item)
            if sym is not None:
                out.append(sym)
        else:
            _log.debug("skipping unrecognized symptom entry: %r", item)
    return out


# ----------------------------
# Per-call working state
# ----------------------------

@dataclass(frozen=True)
class Classification:
    level: int
    category: str
    is_decisive: bool


@dataclass
class RemedyStats:
    full_name: str
    abbreviation: str
    rubric_matches: int = 0
    total_grade: int = 0
    decisive_symptom_count: int = 0
    characteristic_match_count: int = 0
    matched_symptom_types: Set[str] = field(default_factory=set)
    effective_grades: List[float] = field(default_factory=list)
    matched_symptoms: Set[int] = field(default_factory=set)


# ----------------------------
# Output
# ----------------------------

@dataclass
class Suggestion:
    full_name: str
    short_name: str
    score: float
    percent_match: float = 0.0
    clinical_justification: str = ""

    coverage: int = 0
    rubric_matches: int = 0
    decisive_symptom_count: int = 0
    characteristic_match_count: int = 0
    intensity: float = 0.0
    pattern_locked: bool = False
    pattern_description: Optional[str] = None
    acute_remedy_bonus: bool = False
    boosts: List[str] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        """Shape persisted by the case store alongside a case record."""
        return {
            "fullName": self.full_name,
            "shortName": self.short_name,
            "score": self.score,
            "percentMatch": self.percent_match,
            "clinicalJustification": self.clinical_justification,
            "coverage": self.coverage,
            "decisiveSymptomCount": self.decisive_symptom_count,
            "characteristicMatchCount": self.characteristic_match_count,
            "patternLocked": self.pattern_locked,
            "patternDescription": self.pattern_description,
            "acuteRemedyBonus": self.acute_remedy_bonus,
            "boosts": list(self.boosts),
        }


def iter_remedy_grades(categories: Iterable[Category]) -> Iterable[RemedyGrade]:
    for category in categories:
        for rubric in category.rubrics:
            yield from rubric.remedies
