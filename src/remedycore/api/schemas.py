# src/remedycore/api/schemas.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from remedycore.engine import PatientProfile, Suggestion, Symptom


class SymptomIn(BaseModel):
    clinical: str = Field(..., min_length=1, description="Rubric-like clinical phrase")
    friendly: str = Field("", description="Plain-language wording shown to the practitioner")
    type: Literal["mental", "keynote", "physical"] = "physical"

    def to_engine(self) -> Symptom:
        return Symptom(clinical=self.clinical, friendly=self.friendly, type=self.type)


class PatientProfileIn(BaseModel):
    type: Literal["acute", "chronic"] = "chronic"
    miasm: Optional[str] = None
    constitution: Optional[str] = None

    def to_engine(self) -> PatientProfile:
        return PatientProfile(type=self.type, miasm=self.miasm, constitution=self.constitution)


class SuggestRequest(BaseModel):
    symptoms: List[SymptomIn] = Field(default_factory=list)
    profile: PatientProfileIn = Field(default_factory=PatientProfileIn)
    limit: int = Field(10, ge=1, le=50, description="Number of top remedies to return")


class SuggestionOut(BaseModel):
    full_name: str
    short_name: str
    score: float
    percent_match: float = Field(..., ge=0, le=100)
    clinical_justification: str
    coverage: int
    rubric_matches: int
    decisive_symptom_count: int
    characteristic_match_count: int
    intensity: float
    pattern_locked: bool
    pattern_description: Optional[str] = None
    acute_remedy_bonus: bool
    boosts: List[str]

    @classmethod
    def from_engine(cls, s: Suggestion) -> "SuggestionOut":
        return cls(
            full_name=s.full_name,
            short_name=s.short_name,
            score=s.score,
            percent_match=s.percent_match,
            clinical_justification=s.clinical_justification,
            coverage=s.coverage,
            rubric_matches=s.rubric_matches,
            decisive_symptom_count=s.decisive_symptom_count,
            characteristic_match_count=s.characteristic_match_count,
            intensity=s.intensity,
            pattern_locked=s.pattern_locked,
            pattern_description=s.pattern_description,
            acute_remedy_bonus=s.acute_remedy_bonus,
            boosts=list(s.boosts),
        )


class SuggestResponse(BaseModel):
    results: List[SuggestionOut]
    request_id: Optional[str] = None
