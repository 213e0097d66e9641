"""
src/remedycore/engine/store.py

Repertory Store: loads the three static reference datasets once, on first use,
and hands out an immutable snapshot.

    repertory_full.json   { categories: [ { title, rubrics: [ { title, remedies: [ { abbreviation, grade } ] } ] } ] }
    remedy_map.json       { "<abbreviation>": "<full name>", ... }
    remedy_patterns.json  { "<full name>": { keywords, minMatch, description, acuteRemedy }, ... }

Any missing or malformed file raises DataLoadError. The engine cannot work
without its reference data, so this error is never downgraded.
"""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from remedycore.engine.errors import DataLoadError
from remedycore.engine.models import Category, RemedyGrade, RemedyPattern, Rubric, iter_remedy_grades

_log = logging.getLogger("remedycore.engine.store")

REPERTORY_FILE = "repertory_full.json"
REMEDY_MAP_FILE = "remedy_map.json"
REMEDY_PATTERNS_FILE = "remedy_patterns.json"


# ----------------------------
# Utilities: reading JSON
# ----------------------------

def read_json(path: str | Path, what: str = "reference file") -> Any:
    """JSON files must be UTF-8 (a BOM is tolerated); anything else is a DataLoadError."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise DataLoadError(f"{what} not readable: {path} ({e.strerror or e})") from e
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DataLoadError(f"{what} is not valid UTF-8: {path} (byte offset {e.start})") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"{what} is not valid JSON: {path} (line {e.lineno}: {e.msg})") from e


# ----------------------------
# File schemas
# ----------------------------

class _RemedyGradeIn(BaseModel):
    abbreviation: str = Field(min_length=1)
    grade: int = Field(default=1, ge=1, le=3)

    @field_validator("grade", mode="before")
    @classmethod
    def _missing_grade_is_one(cls, v: Any) -> Any:
        return 1 if v is None else v


class _RubricIn(BaseModel):
    title: str
    remedies: List[_RemedyGradeIn] = Field(default_factory=list)


class _CategoryIn(BaseModel):
    title: str
    rubrics: List[_RubricIn] = Field(default_factory=list)


class _RepertoryIn(BaseModel):
    categories: List[_CategoryIn]


class _PatternIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keywords: List[str] = Field(default_factory=list)
    min_match: Optional[int] = Field(default=None, alias="minMatch")
    description: str = ""
    acute_remedy: bool = Field(default=False, alias="acuteRemedy")


_REMEDY_MAP = TypeAdapter(Dict[str, str])
_PATTERNS = TypeAdapter(Dict[str, _PatternIn])


def _parse_repertory(raw: Any, source: str) -> Tuple[Category, ...]:
    try:
        parsed = _RepertoryIn.model_validate(raw)
    except ValidationError as e:
        raise DataLoadError(f"malformed repertory ({source}): {e.error_count()} error(s); first: {e.errors()[0]['msg']}") from e
    return tuple(
        Category(
            title=c.title,
            rubrics=tuple(
                Rubric(
                    title=r.title,
                    remedies=tuple(RemedyGrade(abbreviation=g.abbreviation, grade=g.grade) for g in r.remedies),
                )
                for r in c.rubrics
            ),
        )
        for c in parsed.categories
    )


def _parse_remedy_map(raw: Any, source: str) -> Mapping[str, str]:
    try:
        return MappingProxyType(dict(_REMEDY_MAP.validate_python(raw)))
    except ValidationError as e:
        raise DataLoadError(f"malformed remedy map ({source}): {e.errors()[0]['msg']}") from e


def _parse_patterns(raw: Any, source: str) -> Mapping[str, RemedyPattern]:
    try:
        parsed = _PATTERNS.validate_python(raw)
    except ValidationError as e:
        raise DataLoadError(f"malformed remedy patterns ({source}): {e.errors()[0]['msg']}") from e
    out: Dict[str, RemedyPattern] = {}
    for name, p in parsed.items():
        keywords = tuple(dict.fromkeys(k.lower() for k in p.keywords if k))
        out[name] = RemedyPattern(
            keywords=keywords,
            min_match=int(p.min_match or 0),  # 0 = unset, engine applies its default
            description=p.description,
            acute_remedy=bool(p.acute_remedy),
        )
    return MappingProxyType(out)


# ----------------------------
# Store
# ----------------------------

@dataclass(frozen=True)
class RepertorySnapshot:
    categories: Tuple[Category, ...]
    remedy_map: Mapping[str, str]
    remedy_patterns: Mapping[str, RemedyPattern]

    @property
    def rubric_count(self) -> int:
        return sum(len(c.rubrics) for c in self.categories)


class RepertoryStore:
    """
    Read-only repository of the reference datasets.

    Construct once and pass it to the engine. The files are read on the first
    ``load()`` call; later calls return the same snapshot.
    """

    def __init__(
        self,
        repertory_path: str | Path,
        remedy_map_path: str | Path,
        remedy_patterns_path: str | Path,
    ) -> None:
        self.repertory_path = Path(repertory_path)
        self.remedy_map_path = Path(remedy_map_path)
        self.remedy_patterns_path = Path(remedy_patterns_path)
        self._lock = threading.Lock()
        self._snapshot: Optional[RepertorySnapshot] = None

    @classmethod
    def from_dir(
        cls,
        data_dir: str | Path,
        repertory_file: str = REPERTORY_FILE,
        remedy_map_file: str = REMEDY_MAP_FILE,
        remedy_patterns_file: str = REMEDY_PATTERNS_FILE,
    ) -> "RepertoryStore":
        d = Path(data_dir)
        return cls(d / repertory_file, d / remedy_map_file, d / remedy_patterns_file)

    @classmethod
    def from_data(
        cls,
        repertory: Any,
        remedy_map: Any,
        remedy_patterns: Any = None,
    ) -> "RepertoryStore":
        """Build an already-loaded store from in-memory data (same validation as files)."""
        store = cls("<memory>", "<memory>", "<memory>")
        store._snapshot = RepertorySnapshot(
            categories=_parse_repertory(repertory, "<memory>"),
            remedy_map=_parse_remedy_map(remedy_map, "<memory>"),
            remedy_patterns=_parse_patterns(remedy_patterns or {}, "<memory>"),
        )
        return store

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def load(self) -> RepertorySnapshot:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._read_files()
            return self._snapshot

    def _read_files(self) -> RepertorySnapshot:
        for p in (self.repertory_path, self.remedy_map_path, self.remedy_patterns_path):
            if not p.is_file():
                raise DataLoadError(f"reference file not found: {p}")

        snapshot = RepertorySnapshot(
            categories=_parse_repertory(read_json(self.repertory_path), str(self.repertory_path)),
            remedy_map=_parse_remedy_map(read_json(self.remedy_map_path), str(self.remedy_map_path)),
            remedy_patterns=_parse_patterns(read_json(self.remedy_patterns_path), str(self.remedy_patterns_path)),
        )
        _log.info(
            "repertory loaded: categories=%d rubrics=%d grade_entries=%d mapped_remedies=%d patterns=%d",
            len(snapshot.categories),
            snapshot.rubric_count,
            sum(1 for _ in iter_remedy_grades(snapshot.categories)),
            len(snapshot.remedy_map),
            len(snapshot.remedy_patterns),
        )
        return snapshot
