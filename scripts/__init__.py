# bibliometric_eval/scripts/__init__.py
"""Expose step modules for the bibliometric evaluation pipeline."""

from . import (
    aggregate_publications,
    country_lookup,
    export_for_frontend,
    parse_publications,
    publications,
    run_step,
    session,
)

__all__ = [
    "aggregate_publications",
    "country_lookup",
    "export_for_frontend",
    "parse_publications",
    "publications",
    "run_step",
    "session",
]
