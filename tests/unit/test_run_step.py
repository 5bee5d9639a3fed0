# bibliometric_eval/tests/unit/test_run_step.py
"""Unit tests for the YAML-driven step runner."""

from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

import pytest
import yaml

from scripts import run_step

ROOT = Path(__file__).resolve().parents[2]
FIXTURE = ROOT / "tests" / "fixtures" / "scopus" / "scopus_sample.csv"


def _write_config(tmp_path: Path) -> Path:
    config = {
        "steps": {
            "export_parse": {"input_path": "data/scopus.csv"},
            "aggregation": {"input_path": str(FIXTURE), "top_n": 2, "min_citations": 20},
            "frontend_export": {"input_path": str(FIXTURE), "output_dir": "out", "schema_version": 3},
        }
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


def test_dry_run_resolves_relative_paths(tmp_path: Path, capsys) -> None:
    config_path = _write_config(tmp_path)

    exit_code = run_step.main(["--config", str(config_path), "--dry-run", "--json", "frontend_export"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["step"] == "frontend_export"
    assert payload["config"]["output_dir"] == str((tmp_path / "out").resolve())
    assert payload["config"]["schema_version"] == 3
    assert payload["config"]["top_n"] == 10


def test_aggregation_emits_json_result(tmp_path: Path, capsys) -> None:
    config_path = _write_config(tmp_path)

    exit_code = run_step.main(["--config", str(config_path), "--json", "aggregation"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    result = payload["result"]
    assert result["total_publications"] == 5
    assert result["publications_by_author"] == [["Doe, Alice", 2], ["Smith, John", 3]]
    assert result["citations_by_publication"] == [["Paper C 10.1/c", 25]]
    assert ["NaN", 1] in result["publications_by_year"]
    assert payload["summary"].startswith("Aggregated 5 publication(s)")


def test_input_flag_overrides_configured_path(tmp_path: Path, capsys) -> None:
    config_path = _write_config(tmp_path)

    run_step.main(["--config", str(config_path), "--input", str(FIXTURE), "export_parse"])

    assert "Parsed 5 publication(s)" in capsys.readouterr().out


def test_unknown_step_in_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("steps: {}\n", encoding="utf-8")

    with pytest.raises(KeyError):
        run_step.main(["--config", str(config_path), "aggregation"])
