from remedycore.engine.errors import ComputationError, DataLoadError, EngineError
from remedycore.engine.models import PatientProfile, Suggestion, Symptom, coerce_symptoms
from remedycore.engine.params import DEFAULT_PARAMS, ScoringParams, load_params
from remedycore.engine.service import FailurePolicy, RemedyEngine
from remedycore.engine.store import RepertoryStore

__all__ = [
    "ComputationError",
    "DataLoadError",
    "EngineError",
    "FailurePolicy",
    "PatientProfile",
    "RemedyEngine",
    "RepertoryStore",
    "ScoringParams",
    "DEFAULT_PARAMS",
    "Suggestion",
    "Symptom",
    "coerce_symptoms",
    "load_params",
]
