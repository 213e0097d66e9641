"""
Command-line runner for the remedy suggestion engine.

Case file (JSON) may be either a plain symptom list or a summarizer payload:

    [ {"clinical": "HEAD PAIN THROBBING", "type": "keynote"}, "fever heat", ... ]

    { "symptoms": [...], "profile": {"type": "acute"} }
"""
from __future__ import annotations

import argparse
from collections.abc import Mapping
from pathlib import Path
from typing import List, Optional

import pandas as pd

from remedycore.config import get_settings
from remedycore.core.logging import setup_json_logging
from remedycore.engine import EngineError, PatientProfile, coerce_symptoms
from remedycore.engine.store import read_json
from remedycore.pipeline.engine_wrapper import build_engine


COLS_SHOW = ["full_name", "short_name", "score", "percent_match", "coverage", "decisive_symptom_count",
             "characteristic_match_count", "pattern_locked"]


def _profile_from_args(case: object, args: argparse.Namespace) -> PatientProfile:
    base = PatientProfile.from_raw(case.get("profile") if isinstance(case, Mapping) else None)
    return PatientProfile(
        type=(args.course or base.type).lower(),
        miasm=args.miasm or base.miasm,
        constitution=args.constitution or base.constitution,
    )


def main(argv: Optional[List[str]] = None) -> None:
    settings = get_settings()

    ap = argparse.ArgumentParser(description="Remedy suggestion engine")
    ap.add_argument("--case", required=True, help="Case JSON: symptom list or {symptoms, profile}")
    ap.add_argument("--course", default=None, choices=["acute", "chronic"], help="Overrides the case profile type")
    ap.add_argument("--miasm", default=None)
    ap.add_argument("--constitution", default=None)
    ap.add_argument("--top", type=int, default=settings.DEFAULT_LIMIT, help="Top N remedies to output")
    ap.add_argument("--data-dir", default=None, help="Folder with repertory_full.json, remedy_map.json, remedy_patterns.json")
    ap.add_argument("--params", default=None, help="Scoring params JSON overriding the defaults")
    ap.add_argument("--failure-policy", default=None, choices=["open", "closed"])
    ap.add_argument("--out", default="output", help="Output folder")

    args = ap.parse_args(argv)
    setup_json_logging(settings.LOG_LEVEL)

    overrides = {}
    if args.data_dir:
        overrides["DATA_DIR"] = Path(args.data_dir)
    if args.params:
        overrides["SCORING_PARAMS_PATH"] = Path(args.params)
    if args.failure_policy:
        overrides["FAILURE_POLICY"] = args.failure_policy
    run_settings = settings.model_copy(update=overrides) if overrides else settings

    try:
        case = read_json(args.case, what="case file")
        engine = build_engine(run_settings)
        profile = _profile_from_args(case, args)
        suggestions = engine.suggest_remedies(coerce_symptoms(case), profile, args.top)
    except EngineError as e:
        raise SystemExit(f"[ERROR] {e}")

    df = pd.DataFrame([vars(s) for s in suggestions], columns=list(COLS_SHOW) + ["clinical_justification"])

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "result.csv"
    df.to_csv(out_path, index=False, encoding="utf-8-sig")

    if df.empty:
        print("\n[INFO] No remedies matched the given symptoms.\n")
        print(f"Saved to: {out_path}")
        return

    print(f"\n=== TOP RESULTS ({profile.type}) ===\n")
    print(df[COLS_SHOW].to_string(index=False))
    print(f"\nSaved to: {out_path}")


if __name__ == "__main__":
    main()
