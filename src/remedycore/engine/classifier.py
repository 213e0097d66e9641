"""
src/remedycore/engine/classifier.py

Symptom Classifier: assigns a clinical-importance level (1..4) to a symptom.

    4  DECISIVE_CHARACTERISTIC  keynote type, decisive keyword or characteristic modality
    3  MENTAL_EMOTIONAL         mental type
    2  PHYSICAL_GENERAL         mentions general / fever / sleep
    1  COMMON_LOCAL             everything else

Matching is case-insensitive substring search; first rule that fires wins.
"""
from __future__ import annotations

from remedycore.engine.models import Classification, Symptom
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams

DECISIVE_CHARACTERISTIC = "DECISIVE_CHARACTERISTIC"
MENTAL_EMOTIONAL = "MENTAL_EMOTIONAL"
PHYSICAL_GENERAL = "PHYSICAL_GENERAL"
COMMON_LOCAL = "COMMON_LOCAL"


def classify(symptom: Symptom, params: ScoringParams = DEFAULT_PARAMS) -> Classification:
    text = symptom.text
    sym_type = symptom.type.lower()

    if (
        sym_type == "keynote"
        or any(k in text for k in params.decisive_keywords)
        or any(m in text for m in params.characteristic_modalities)
    ):
        return Classification(level=4, category=DECISIVE_CHARACTERISTIC, is_decisive=True)

    if sym_type == "mental":
        return Classification(level=3, category=MENTAL_EMOTIONAL, is_decisive=False)

    if any(k in text for k in params.general_keywords):
        return Classification(level=2, category=PHYSICAL_GENERAL, is_decisive=False)

    return Classification(level=1, category=COMMON_LOCAL, is_decisive=False)
