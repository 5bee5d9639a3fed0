# bibliometric_eval/scripts/run_step.py
"""Command-line front-end for running individual pipeline steps.

Reads a YAML configuration (see ``configs/default.yaml``) and wires the typed
config objects defined in ``scripts/`` to their corresponding ``run`` functions.
Typical invocation:

``python scripts/run_step.py --config configs/default.yaml aggregation``.

Use ``--dry-run`` to inspect resolved configuration without executing a step
and ``--json`` to receive machine-readable output for orchestration tooling.

Supported steps map directly to the ``steps`` stanza in the YAML config, and
any dataclass returned by a step is serialised to JSON when ``--json`` is
supplied. ``--input`` overrides the export path configured for the step.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

try:  # Support both package-style (`python -m`) and script-style invocation.
    from .parse_publications import ExportParseConfig, run as run_export_parse
    from .aggregate_publications import (
        DEFAULT_MIN_CITATIONS,
        DEFAULT_TOP_N,
        AggregationConfig,
        run as run_aggregation,
    )
    from .export_for_frontend import FrontendExportConfig, run as run_frontend_export
except ImportError:  # pragma: no cover - executed only when run as a stand-alone script.
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
    from scripts.parse_publications import ExportParseConfig, run as run_export_parse
    from scripts.aggregate_publications import (
        DEFAULT_MIN_CITATIONS,
        DEFAULT_TOP_N,
        AggregationConfig,
        run as run_aggregation,
    )
    from scripts.export_for_frontend import FrontendExportConfig, run as run_frontend_export


STEPS = ("export_parse", "aggregation", "frontend_export")


def main(argv: list[str] | None = None) -> int:
    """Entry point for invoking individual pipeline steps."""
    default_config_path = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

    parser = argparse.ArgumentParser(description="Run bibliometric evaluation steps.")
    parser.add_argument(
        "--config",
        type=Path,
        default=default_config_path,
        help="Path to YAML configuration file.",
    )
    parser.add_argument("step", choices=STEPS, help="Step to execute.")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Export file to process (overrides the configured input_path).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve configuration and exit without running the step.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit results (or dry-run config) as JSON for downstream tooling.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root logger level.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(message)s")

    config_path = args.config.expanduser().resolve()
    config_data = _load_config(config_path)
    steps_cfg = config_data.get("steps", {})
    step_cfg = dict(steps_cfg.get(args.step) or {})
    if args.step not in steps_cfg:
        raise KeyError(f"Step '{args.step}' not found in configuration.")
    if args.input is not None:
        step_cfg["input_path"] = str(args.input.expanduser().resolve())

    base_dir = config_path.parent

    if args.step == "export_parse":
        step_config = _parse_export_parse_config(step_cfg, base_dir)
        if args.dry_run:
            _emit_config(args.step, step_config, args.json)
            return 0
        result = run_export_parse(step_config)
    elif args.step == "aggregation":
        step_config = _parse_aggregation_config(step_cfg, base_dir)
        if args.dry_run:
            _emit_config(args.step, step_config, args.json)
            return 0
        result = run_aggregation(step_config)
    elif args.step == "frontend_export":
        step_config = _parse_frontend_export_config(step_cfg, base_dir)
        if args.dry_run:
            _emit_config(args.step, step_config, args.json)
            return 0
        result = run_frontend_export(step_config)
    else:
        raise RuntimeError(f"Unsupported step: {args.step}")

    _emit_result(args.step, result, args.json)
    return 0


def _load_config(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _resolve_path(base_dir: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = (base_dir / candidate).resolve()
    return candidate


def _parse_export_parse_config(config: Mapping[str, Any], base_dir: Path) -> ExportParseConfig:
    return ExportParseConfig(input_path=_resolve_path(base_dir, config["input_path"]))


def _parse_aggregation_config(config: Mapping[str, Any], base_dir: Path) -> AggregationConfig:
    return AggregationConfig(
        input_path=_resolve_path(base_dir, config["input_path"]),
        top_n=int(config.get("top_n", DEFAULT_TOP_N)),
        min_citations=int(config.get("min_citations", DEFAULT_MIN_CITATIONS)),
    )


def _parse_frontend_export_config(config: Mapping[str, Any], base_dir: Path) -> FrontendExportConfig:
    return FrontendExportConfig(
        input_path=_resolve_path(base_dir, config["input_path"]),
        output_dir=_resolve_path(base_dir, config["output_dir"]),
        schema_version=int(config.get("schema_version", 1)),
        top_n=int(config.get("top_n", DEFAULT_TOP_N)),
        min_citations=int(config.get("min_citations", DEFAULT_MIN_CITATIONS)),
        bundle_name=config.get("bundle_name", "bibliometrics.json"),
        publications_name=config.get("publications_name", "publications.parquet"),
    )


def _emit_config(step: str, config: Any, as_json: bool) -> None:
    payload = {"step": step, "config": _to_serialisable(config)}
    if as_json:
        print(json.dumps(payload, indent=2))
    else:
        print(f"[DRY-RUN] {step} configuration:\n{yaml.safe_dump(payload, sort_keys=False)}")


def _emit_result(step: str, result: Any, as_json: bool) -> None:
    summary = _result_summary(step, result)
    payload = {
        "step": step,
        "summary": summary,
        "result": _to_serialisable(result),
    }
    if as_json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(summary)


def _result_summary(step: str, result: Any) -> str:
    if step == "export_parse":
        summary = "Parsed {total} publication(s) from {path} (unparsed years={years}, unparsed citations={cites}).".format(
            total=result.total_rows,
            path=result.input_path,
            years=result.unparsed_years,
            cites=result.unparsed_citations,
        )
        if result.missing_columns:
            summary += " Missing columns: " + ", ".join(result.missing_columns)
        return summary
    if step == "aggregation":
        return (
            "Aggregated {total} publication(s): {years} year(s), {countries} countries "
            "(max publications={pub_max}, max citations={cite_max}), {cited} publication(s) over the citation threshold."
        ).format(
            total=result.total_publications,
            years=len(result.publications_by_year),
            countries=len(result.publications_by_country.values),
            pub_max=result.publications_by_country.maximum,
            cite_max=result.citations_by_country.maximum,
            cited=len(result.citations_by_publication),
        )
    if step == "frontend_export":
        return "Exported {total} publication(s) to {bundle} and {table}.".format(
            total=result.total_publications,
            bundle=result.bundle_path,
            table=result.publications_path,
        )
    return f"Step {step} completed."


def _to_serialisable(obj: Any) -> Any:
    if is_dataclass(obj):
        return {item.name: _to_serialisable(getattr(obj, item.name)) for item in fields(obj)}
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, float) and math.isnan(obj):
        return "NaN"
    if isinstance(obj, dict):
        return {str(key): _to_serialisable(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_to_serialisable(value) for value in obj]
    return obj


if __name__ == "__main__":
    sys.exit(main())
