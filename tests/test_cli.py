from __future__ import annotations

import json

import pandas as pd
import pytest

from conftest import BELLADONNA_CASE
from remedycore.cli import COLS_SHOW, main


def _write_case(tmp_path, case):
    p = tmp_path / "case.json"
    p.write_text(json.dumps(case), encoding="utf-8")
    return p


def test_cli_writes_ranked_csv(tmp_path, capsys):
    case = _write_case(tmp_path, {"symptoms": BELLADONNA_CASE, "profile": {"type": "acute"}})
    out_dir = tmp_path / "out"

    main(["--case", str(case), "--top", "3", "--out", str(out_dir)])

    printed = capsys.readouterr().out
    assert "=== TOP RESULTS (acute) ===" in printed
    assert "Belladonna" in printed

    df = pd.read_csv(out_dir / "result.csv", encoding="utf-8-sig")
    assert list(df.columns) == COLS_SHOW + ["clinical_justification"]
    assert len(df) == 3
    assert df.iloc[0]["full_name"] == "Belladonna"
    assert df["score"].is_monotonic_decreasing


def test_cli_course_flag_overrides_case_profile(tmp_path, capsys):
    case = _write_case(tmp_path, BELLADONNA_CASE)
    main(["--case", str(case), "--course", "acute", "--out", str(tmp_path / "out")])
    assert "=== TOP RESULTS (acute) ===" in capsys.readouterr().out


def test_cli_no_match(tmp_path, data_dir, capsys):
    case = _write_case(tmp_path, ["toenail fungus"])
    out_dir = tmp_path / "out"
    main(["--case", str(case), "--data-dir", str(data_dir), "--out", str(out_dir)])

    assert "No remedies matched" in capsys.readouterr().out
    df = pd.read_csv(out_dir / "result.csv", encoding="utf-8-sig")
    assert df.empty


def test_cli_missing_data_exits(tmp_path):
    case = _write_case(tmp_path, BELLADONNA_CASE)
    with pytest.raises(SystemExit) as exc:
        main(["--case", str(case), "--data-dir", str(tmp_path / "nowhere"), "--out", str(tmp_path / "out")])
    assert str(exc.value).startswith("[ERROR] reference file not found")


def test_cli_bad_case_file_exits(tmp_path):
    case = tmp_path / "case.json"
    case.write_text("[{oops", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--case", str(case), "--out", str(tmp_path / "out")])
    assert str(exc.value).startswith("[ERROR] case file is not valid JSON")

    with pytest.raises(SystemExit) as exc:
        main(["--case", str(tmp_path / "missing.json"), "--out", str(tmp_path / "out")])
    assert str(exc.value).startswith("[ERROR] case file not readable")


def test_cli_params_override(tmp_path, data_dir, capsys):
    case = _write_case(tmp_path, [{"clinical": "head pain throbbing", "type": "keynote"}])
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"polychrest_min_characteristic": 1}), encoding="utf-8")
    out_dir = tmp_path / "out"

    main(["--case", str(case), "--data-dir", str(data_dir), "--params", str(params), "--out", str(out_dir)])

    df = pd.read_csv(out_dir / "result.csv", encoding="utf-8-sig")
    assert df.iloc[0]["score"] == pytest.approx(88.2)
