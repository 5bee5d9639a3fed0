# bibliometric_eval/scripts/aggregate_publications.py
"""Step 2 of the pipeline - derive chart views from parsed publications.

Every view is a pure function of the publication sequence (plus the country
resolver for the two country-keyed views) and can be computed on its own:

* publications per year, in order of first appearance
* publications and citations per country, each with the largest bucket value
  (the upper bound of the choropleth colour scale)
* top ``N`` authors by publications and by citations, smallest first
* publications with at least ``min_citations`` citations, most cited first

:func:`aggregate` bundles all six into one immutable
:class:`AggregationResult`, which is what callers hand to the chart layer.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from . import country_lookup
from .parse_publications import ExportParseConfig, run as run_export_parse
from .publications import NOT_A_NUMBER, Number, Publication, is_missing

DEFAULT_TOP_N = 10
DEFAULT_MIN_CITATIONS = 10

CountryResolver = Callable[[str], Optional[str]]


@dataclass
class AggregationConfig:
    """Configuration for parsing an export and aggregating its views."""

    input_path: Path
    top_n: int = DEFAULT_TOP_N
    min_citations: int = DEFAULT_MIN_CITATIONS


@dataclass(frozen=True)
class CountryTally:
    """Per-country totals keyed by alpha-3 code."""

    values: Dict[str, Number] = field(default_factory=dict)
    maximum: Number = 0


@dataclass(frozen=True)
class AggregationResult:
    """All derived views for one loaded export."""

    total_publications: int
    publications_by_year: Tuple[Tuple[Number, int], ...]
    publications_by_country: CountryTally
    publications_by_author: Tuple[Tuple[str, int], ...]
    citations_by_country: CountryTally
    citations_by_author: Tuple[Tuple[str, Number], ...]
    citations_by_publication: Tuple[Tuple[str, Number], ...]


def run(config: AggregationConfig) -> AggregationResult:
    parsed = run_export_parse(ExportParseConfig(input_path=config.input_path))
    result = aggregate(
        parsed.publications,
        top_n=config.top_n,
        min_citations=config.min_citations,
    )
    logging.info(
        "Aggregated %d publication(s): %d year bucket(s), %d country bucket(s), %d highly cited",
        result.total_publications,
        len(result.publications_by_year),
        len(result.publications_by_country.values),
        len(result.citations_by_publication),
    )
    return result


def aggregate(
    publications: Sequence[Publication],
    resolve: CountryResolver = country_lookup.resolve,
    *,
    top_n: int = DEFAULT_TOP_N,
    min_citations: int = DEFAULT_MIN_CITATIONS,
) -> AggregationResult:
    """Compute every view from ``publications`` in one call."""
    return AggregationResult(
        total_publications=len(publications),
        publications_by_year=publications_by_year(publications),
        publications_by_country=publications_by_country(publications, resolve),
        publications_by_author=publications_by_author(publications, top_n=top_n),
        citations_by_country=citations_by_country(publications, resolve),
        citations_by_author=citations_by_author(publications, top_n=top_n),
        citations_by_publication=citations_by_publication(publications, min_citations=min_citations),
    )


def publications_by_year(publications: Iterable[Publication]) -> Tuple[Tuple[Number, int], ...]:
    counts: Counter[Number] = Counter()
    for publication in publications:
        counts[NOT_A_NUMBER if is_missing(publication.year) else publication.year] += 1
    return tuple(counts.items())


def publications_by_country(
    publications: Iterable[Publication],
    resolve: CountryResolver = country_lookup.resolve,
) -> CountryTally:
    return _tally_countries(publications, resolve, lambda publication: 1)


def citations_by_country(
    publications: Iterable[Publication],
    resolve: CountryResolver = country_lookup.resolve,
) -> CountryTally:
    return _tally_countries(publications, resolve, _citation_weight)


def publications_by_author(
    publications: Iterable[Publication],
    *,
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[Tuple[str, int], ...]:
    return _top_ascending(_tally_authors(publications, lambda publication: 1), top_n)


def citations_by_author(
    publications: Iterable[Publication],
    *,
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[Tuple[str, Number], ...]:
    return _top_ascending(_tally_authors(publications, _citation_weight), top_n)


def citations_by_publication(
    publications: Iterable[Publication],
    *,
    min_citations: int = DEFAULT_MIN_CITATIONS,
) -> Tuple[Tuple[str, Number], ...]:
    # NaN never compares >= min_citations, so unparsed counts drop out here.
    kept = [
        (publication.display_name, publication.cited_by)
        for publication in publications
        if publication.cited_by >= min_citations
    ]
    kept.sort(key=lambda entry: entry[1], reverse=True)
    return tuple(kept)


def _citation_weight(publication: Publication) -> Number:
    # Unparsed counts still open a bucket but add nothing to it.
    return 0 if is_missing(publication.cited_by) else publication.cited_by


def _tally_countries(
    publications: Iterable[Publication],
    resolve: CountryResolver,
    weight: Callable[[Publication], Number],
) -> CountryTally:
    values: Counter[str] = Counter()
    maximum: Number = 0
    for publication in publications:
        code = resolve(publication.country)
        if not code:
            continue
        values[code] += weight(publication)
        if values[code] > maximum:
            maximum = values[code]
    return CountryTally(values=dict(values), maximum=maximum)


def _tally_authors(
    publications: Iterable[Publication],
    weight: Callable[[Publication], Number],
) -> Counter[str]:
    totals: Counter[str] = Counter()
    for publication in publications:
        for author in publication.authors:
            if author:
                totals[author] += weight(publication)
    return totals


def _top_ascending(totals: Counter[str], top_n: int) -> Tuple[Tuple[str, Number], ...]:
    """Pick the ``top_n`` largest buckets and return them smallest first.

    ``most_common`` keeps insertion order among equal totals, so the author
    seen first wins a place at the cut-off.
    """
    ranked = totals.most_common(top_n)
    ranked.reverse()
    return tuple(ranked)


__all__ = [
    "AggregationConfig",
    "AggregationResult",
    "CountryResolver",
    "CountryTally",
    "DEFAULT_MIN_CITATIONS",
    "DEFAULT_TOP_N",
    "aggregate",
    "citations_by_author",
    "citations_by_country",
    "citations_by_publication",
    "publications_by_author",
    "publications_by_country",
    "publications_by_year",
    "run",
]
