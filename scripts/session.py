# bibliometric_eval/scripts/session.py
"""Hold one loaded export and its derived views.

A session keeps exactly one :class:`SessionSnapshot`. Loading a new export
parses and aggregates into local variables first and only then swaps the
snapshot in a single assignment, so a reader never sees publications from one
file next to views from another. A load that raises leaves the previous
snapshot untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from . import country_lookup
from .aggregate_publications import (
    DEFAULT_MIN_CITATIONS,
    DEFAULT_TOP_N,
    AggregationResult,
    CountryResolver,
    aggregate,
)
from .parse_publications import parse_rows, read_export
from .publications import Publication


@dataclass(frozen=True)
class SessionSnapshot:
    """Publications from one export together with the views derived from them."""

    source: str
    publications: Tuple[Publication, ...]
    result: AggregationResult


class AnalysisSession:
    """Last-load-wins holder for the current export."""

    def __init__(
        self,
        resolve: CountryResolver = country_lookup.resolve,
        *,
        top_n: int = DEFAULT_TOP_N,
        min_citations: int = DEFAULT_MIN_CITATIONS,
    ) -> None:
        self._resolve = resolve
        self._top_n = top_n
        self._min_citations = min_citations
        self._snapshot: Optional[SessionSnapshot] = None

    @property
    def snapshot(self) -> Optional[SessionSnapshot]:
        return self._snapshot

    @property
    def publications(self) -> Tuple[Publication, ...]:
        snapshot = self._snapshot
        return snapshot.publications if snapshot else ()

    @property
    def result(self) -> Optional[AggregationResult]:
        snapshot = self._snapshot
        return snapshot.result if snapshot else None

    def load(self, path: Path) -> SessionSnapshot:
        """Replace the current snapshot with one built from ``path``."""
        rows = read_export(path)
        return self.load_rows(rows, source=str(path))

    def load_rows(self, rows: Sequence[Sequence[str]], source: str = "<rows>") -> SessionSnapshot:
        publications = tuple(parse_rows(rows))
        result = aggregate(
            publications,
            self._resolve,
            top_n=self._top_n,
            min_citations=self._min_citations,
        )
        snapshot = SessionSnapshot(source=source, publications=publications, result=result)
        previous = self._snapshot
        self._snapshot = snapshot
        if previous is not None:
            logging.info("Replaced session data from %s with %s", previous.source, source)
        logging.info("Loaded %d publication(s) from %s", len(publications), source)
        return snapshot

    def clear(self) -> None:
        self._snapshot = None


__all__ = ["AnalysisSession", "SessionSnapshot"]
