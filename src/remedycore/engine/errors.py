"""
src/remedycore/engine/errors.py

Error taxonomy for the remedy suggestion engine.

    EngineError        base, carries a stable machine-readable ``code``
    DataLoadError      reference data missing/malformed (fatal, never swallowed)
    ComputationError   unexpected failure while matching/scoring one call
"""
from __future__ import annotations

__all__ = [
    "EngineError",
    "DataLoadError",
    "ComputationError",
]


class EngineError(Exception):
    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code


class DataLoadError(EngineError):
    def __init__(self, message: str) -> None:
        super().__init__("DATA_LOAD_ERROR", message)


class ComputationError(EngineError):
    def __init__(self, message: str) -> None:
        super().__init__("COMPUTATION_ERROR", message)
