# bibliometric_eval/scripts/parse_publications.py
"""Step 1 of the pipeline - turn a bibliographic export into publications.

Reads a Scopus-style CSV export (header row plus data rows) and converts every
data row into a :class:`~scripts.publications.Publication`. Only six columns
are recognised, matched by exact, case-sensitive header name:

``Author full names``, ``Title``, ``Year``, ``Cited by``, ``DOI``,
``Affiliations``

All other columns are ignored. Parsing never drops or rejects a row: missing
columns and short rows produce empty strings, and ``Year`` / ``Cited by`` cells
that are not integers produce :data:`~scripts.publications.NOT_A_NUMBER`.

Example
-------
```python
from pathlib import Path
from scripts import parse_publications

config = parse_publications.ExportParseConfig(input_path=Path("data/scopus.csv"))
result = parse_publications.run(config)
print(len(result.publications))
```
"""

from __future__ import annotations

import csv
import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .publications import (
    AFFILIATIONS_COLUMN,
    AFFILIATION_SEPARATOR,
    AUTHORS_COLUMN,
    AUTHOR_SEPARATOR,
    CITED_BY_COLUMN,
    DOI_COLUMN,
    NOT_A_NUMBER,
    Number,
    Publication,
    TITLE_COLUMN,
    YEAR_COLUMN,
    is_missing,
)

SUPPORTED_SUFFIXES = (".csv", ".txt")

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


class UnsupportedExportError(ValueError):
    """Raised when an input file is not a CSV or plain-text export."""


@dataclass
class ExportParseConfig:
    """Configuration for parsing a bibliographic export."""

    input_path: Path


@dataclass
class ExportParseResult:
    """Parsed publications plus data-quality counters."""

    input_path: Path
    total_rows: int
    publications: List[Publication]
    missing_columns: List[str] = field(default_factory=list)
    unparsed_years: int = 0
    unparsed_citations: int = 0


@dataclass(frozen=True)
class ColumnIndex:
    """Header positions of the recognised columns (``None`` when absent)."""

    authors: Optional[int] = None
    title: Optional[int] = None
    year: Optional[int] = None
    cited_by: Optional[int] = None
    doi: Optional[int] = None
    affiliations: Optional[int] = None

    def missing(self) -> List[str]:
        names = {
            AUTHORS_COLUMN: self.authors,
            TITLE_COLUMN: self.title,
            YEAR_COLUMN: self.year,
            CITED_BY_COLUMN: self.cited_by,
            DOI_COLUMN: self.doi,
            AFFILIATIONS_COLUMN: self.affiliations,
        }
        return [name for name, index in names.items() if index is None]


def run(config: ExportParseConfig) -> ExportParseResult:
    """Read ``config.input_path`` and parse every data row."""
    rows = read_export(config.input_path)
    publications, columns = _parse_with_columns(rows)
    missing_columns = columns.missing() if columns is not None else []

    result = ExportParseResult(
        input_path=config.input_path,
        total_rows=len(publications),
        publications=publications,
        missing_columns=missing_columns,
        unparsed_years=sum(1 for pub in publications if is_missing(pub.year)),
        unparsed_citations=sum(1 for pub in publications if is_missing(pub.cited_by)),
    )
    logging.info(
        "Parsed %d publication(s) from %s (unparsed years=%d, unparsed citations=%d)",
        len(publications),
        config.input_path,
        result.unparsed_years,
        result.unparsed_citations,
    )
    return result


def read_export(path: Path) -> List[List[str]]:
    """Load all non-empty CSV lines from an export file."""
    if not path.exists():
        raise FileNotFoundError(f"Export file not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedExportError(
            f"{path.name} is not a recognised file type (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
        )

    _raise_field_size_limit()
    # utf-8-sig strips the BOM Scopus writes at the start of its exports.
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        rows = [row for row in csv.reader(handle) if row]
    logging.debug("Read %d line(s) from %s", len(rows), path)
    return rows


def _raise_field_size_limit() -> None:
    # References and author-affiliation cells can exceed the 128 KiB default.
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 10


def locate(header: Sequence[str], column_name: str) -> Optional[int]:
    for index, name in enumerate(header):
        if name == column_name:
            return index
    return None


def locate_columns(header: Sequence[str]) -> ColumnIndex:
    columns = ColumnIndex(
        authors=locate(header, AUTHORS_COLUMN),
        title=locate(header, TITLE_COLUMN),
        year=locate(header, YEAR_COLUMN),
        cited_by=locate(header, CITED_BY_COLUMN),
        doi=locate(header, DOI_COLUMN),
        affiliations=locate(header, AFFILIATIONS_COLUMN),
    )
    missing = columns.missing()
    if header and missing:
        logging.warning("Export header is missing column(s): %s", ", ".join(missing))
    return columns


def parse_rows(rows: Sequence[Sequence[str]]) -> List[Publication]:
    """Parse ``rows`` (header first) into publications, preserving order."""
    publications, _ = _parse_with_columns(rows)
    return publications


def _parse_with_columns(rows: Sequence[Sequence[str]]) -> Tuple[List[Publication], Optional[ColumnIndex]]:
    if not rows:
        return [], None
    columns = locate_columns(rows[0])
    return [parse_row(row, columns) for row in rows[1:]], columns


def parse_row(row: Sequence[str], columns: ColumnIndex) -> Publication:
    authors_cell = _cell(row, columns.authors)
    affiliations_cell = _cell(row, columns.affiliations)
    return Publication(
        authors=tuple(authors_cell.split(AUTHOR_SEPARATOR)) if authors_cell else (),
        title=_cell(row, columns.title),
        year=parse_int(_cell(row, columns.year)),
        cited_by=parse_int(_cell(row, columns.cited_by)),
        doi=_cell(row, columns.doi),
        country=affiliations_cell.split(AFFILIATION_SEPARATOR)[-1] if affiliations_cell else "",
    )


def parse_int(value: Optional[str]) -> Number:
    """Parse the leading base-10 integer of ``value``.

    Mirrors a lenient integer parse: surrounding whitespace and trailing text
    are tolerated (``"2020abc"`` -> 2020, ``"12.7"`` -> 12), anything without
    leading digits yields :data:`NOT_A_NUMBER`.
    """
    if not value:
        return NOT_A_NUMBER
    match = _LEADING_INT.match(value)
    if match is None:
        return NOT_A_NUMBER
    return int(match.group(1))


def _cell(row: Sequence[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index] or ""


__all__ = [
    "ColumnIndex",
    "ExportParseConfig",
    "ExportParseResult",
    "UnsupportedExportError",
    "locate",
    "locate_columns",
    "parse_int",
    "parse_row",
    "parse_rows",
    "read_export",
    "run",
]
