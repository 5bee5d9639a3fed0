# bibliometric_eval/scripts/export_for_frontend.py
"""Step 3 of the pipeline - write the chart hand-off bundle.

Parses an export, aggregates it, and writes two artefacts into ``output_dir``:

* ``bibliometrics.json`` - every derived view in the shapes the dashboard
  charts consume (line series, choropleth features with a colour domain,
  horizontal bar rows, and a tree map)
* ``publications.parquet`` - the parsed publication table behind the
  "show publications" listing

Example bundle excerpt::

    {
      "schema_version": 1,
      "total_publications": 2,
      "publications_by_year": [{"id": "Publications", "data": [{"x": "2020", "y": 2}]}],
      "publications_by_country": {"domain": [0, 1], "data": [{"id": "USA", "value": 1}]},
      ...
    }

Unparsed years are written as the string ``"NaN"`` on the x axis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from .aggregate_publications import (
    DEFAULT_MIN_CITATIONS,
    DEFAULT_TOP_N,
    AggregationResult,
    CountryTally,
    aggregate,
)
from .parse_publications import ExportParseConfig, run as run_export_parse
from .publications import Number, Publication, is_missing


@dataclass
class FrontendExportConfig:
    """Configuration for assembling the dashboard artefacts."""

    input_path: Path
    output_dir: Path
    schema_version: int = 1
    top_n: int = DEFAULT_TOP_N
    min_citations: int = DEFAULT_MIN_CITATIONS
    bundle_name: str = "bibliometrics.json"
    publications_name: str = "publications.parquet"


@dataclass
class FrontendExportResult:
    """Locations of the written artefacts."""

    total_publications: int
    bundle_path: Path
    publications_path: Path


def run(config: FrontendExportConfig) -> FrontendExportResult:
    parsed = run_export_parse(ExportParseConfig(input_path=config.input_path))
    result = aggregate(
        parsed.publications,
        top_n=config.top_n,
        min_citations=config.min_citations,
    )

    config.output_dir.mkdir(parents=True, exist_ok=True)
    bundle_path = config.output_dir / config.bundle_name
    publications_path = config.output_dir / config.publications_name

    payload = build_bundle(result, schema_version=config.schema_version, source=config.input_path.name)
    _write_bundle_json(payload, bundle_path)
    _write_publications_parquet(parsed.publications, publications_path)
    logging.info("Wrote dashboard bundle → %s, publications → %s", bundle_path, publications_path)

    return FrontendExportResult(
        total_publications=result.total_publications,
        bundle_path=bundle_path,
        publications_path=publications_path,
    )


def build_bundle(result: AggregationResult, *, schema_version: int, source: str) -> Dict[str, Any]:
    """Convert an :class:`AggregationResult` into chart-ready JSON data."""
    return {
        "schema_version": schema_version,
        "source": source,
        "total_publications": result.total_publications,
        "publications_by_year": [
            {
                "id": "Publications",
                "data": [{"x": _year_label(year), "y": count} for year, count in result.publications_by_year],
            }
        ],
        "publications_by_country": _choropleth(result.publications_by_country),
        "publications_by_author": _bars(result.publications_by_author, "Publications"),
        "citations_by_country": _choropleth(result.citations_by_country),
        "citations_by_author": _bars(result.citations_by_author, "Citations"),
        "citations_by_publication": {
            "name": "Publications",
            "children": [
                {"name": name, "citations": citations}
                for name, citations in result.citations_by_publication
            ],
        },
    }


def _year_label(year: Number) -> str:
    return "NaN" if is_missing(year) else str(year)


def _choropleth(tally: CountryTally) -> Dict[str, Any]:
    return {
        "domain": [0, tally.maximum],
        "data": [{"id": code, "value": value} for code, value in tally.values.items()],
    }


def _bars(ranking: Iterable[tuple[str, Number]], key: str) -> List[Dict[str, Any]]:
    return [{"author": author, key: value} for author, value in ranking]


def _write_bundle_json(payload: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)


def _write_publications_parquet(publications: Sequence[Publication], path: Path) -> None:
    try:
        import pandas as pd  # type: ignore
    except ImportError as exc:  # pragma: no cover - dependency check
        raise RuntimeError(
            "Frontend export requires pandas to write Parquet outputs. "
            "Install pandas (pip install pandas pyarrow) and retry."
        ) from exc

    records = [
        {
            "title": publication.title,
            "authors": list(publication.authors),
            "year": None if is_missing(publication.year) else publication.year,
            "cited_by": None if is_missing(publication.cited_by) else publication.cited_by,
            "doi": publication.doi,
            "country": publication.country,
        }
        for publication in publications
    ]
    df = pd.DataFrame(records, columns=["title", "authors", "year", "cited_by", "doi", "country"])
    df["year"] = df["year"].astype("Int64")
    df["cited_by"] = df["cited_by"].astype("Int64")
    df.to_parquet(path, index=False)


__all__ = [
    "FrontendExportConfig",
    "FrontendExportResult",
    "build_bundle",
    "run",
]
