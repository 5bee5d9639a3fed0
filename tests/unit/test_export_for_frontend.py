# bibliometric_eval/tests/unit/test_export_for_frontend.py
"""Unit tests for the dashboard hand-off bundle."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import List, Sequence

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from scripts import export_for_frontend
from scripts.aggregate_publications import aggregate
from scripts.publications import Publication

ROOT = Path(__file__).resolve().parents[2]
FIXTURES = ROOT / "tests" / "fixtures" / "scopus"


def _resolve(name: str):
    return {"Germany": "DEU"}.get(name)


def test_build_bundle_shapes() -> None:
    publications = [
        Publication(authors=("A", "B"), title="One", year=2020, cited_by=15, doi="10.1/one", country="Germany"),
        Publication(authors=("A",), title="Two", country="Germany"),
    ]
    result = aggregate(publications, _resolve)

    bundle = export_for_frontend.build_bundle(result, schema_version=2, source="scopus.csv")

    assert bundle["schema_version"] == 2
    assert bundle["source"] == "scopus.csv"
    assert bundle["total_publications"] == 2
    assert bundle["publications_by_year"] == [
        {"id": "Publications", "data": [{"x": "2020", "y": 1}, {"x": "NaN", "y": 1}]}
    ]
    assert bundle["publications_by_country"] == {"domain": [0, 2], "data": [{"id": "DEU", "value": 2}]}
    assert bundle["citations_by_country"] == {"domain": [0, 15], "data": [{"id": "DEU", "value": 15}]}
    assert bundle["publications_by_author"] == [
        {"author": "B", "Publications": 1},
        {"author": "A", "Publications": 2},
    ]
    assert bundle["citations_by_author"] == [
        {"author": "B", "Citations": 15},
        {"author": "A", "Citations": 15},
    ]
    assert bundle["citations_by_publication"] == {
        "name": "Publications",
        "children": [{"name": "One 10.1/one", "citations": 15}],
    }
    json.dumps(bundle)


def test_run_writes_bundle(tmp_path: Path, monkeypatch) -> None:
    captured: List[Publication] = []

    def fake_write_parquet(publications: Sequence[Publication], path: Path) -> None:
        captured.extend(publications)
        path.write_text("dummy", encoding="utf-8")

    monkeypatch.setattr(export_for_frontend, "_write_publications_parquet", fake_write_parquet)

    config = export_for_frontend.FrontendExportConfig(
        input_path=FIXTURES / "scopus_sample.csv",
        output_dir=tmp_path / "frontend",
    )
    result = export_for_frontend.run(config)

    assert result.total_publications == 5
    assert result.bundle_path == tmp_path / "frontend" / "bibliometrics.json"
    assert result.publications_path.exists()
    assert [pub.title for pub in captured] == ["Paper A", "Paper B", "Paper C", "Paper D", "Paper E"]

    bundle = json.loads(result.bundle_path.read_text(encoding="utf-8"))
    assert bundle["source"] == "scopus_sample.csv"
    assert bundle["publications_by_year"][0]["data"] == [
        {"x": "2020", "y": 2},
        {"x": "2021", "y": 1},
        {"x": "NaN", "y": 1},
        {"x": "2019", "y": 1},
    ]
    assert bundle["citations_by_publication"]["children"] == [
        {"name": "Paper C 10.1/c", "citations": 25},
        {"name": "Paper A 10.1/a", "citations": 12},
        {"name": "Paper E 10.1/e", "citations": 10},
    ]
