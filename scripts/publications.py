# bibliometric_eval/scripts/publications.py
"""Publication records parsed from a bibliographic export.

A :class:`Publication` is built once per data row by
:mod:`scripts.parse_publications` and never changed afterwards. Numeric fields
that fail to parse hold :data:`NOT_A_NUMBER` instead of raising, so callers
should check them with :func:`is_missing` rather than comparing by value
(``nan != nan``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple, Union

AUTHORS_COLUMN = "Author full names"
TITLE_COLUMN = "Title"
YEAR_COLUMN = "Year"
CITED_BY_COLUMN = "Cited by"
DOI_COLUMN = "DOI"
AFFILIATIONS_COLUMN = "Affiliations"

RECOGNISED_COLUMNS: Tuple[str, ...] = (
    AUTHORS_COLUMN,
    TITLE_COLUMN,
    YEAR_COLUMN,
    CITED_BY_COLUMN,
    DOI_COLUMN,
    AFFILIATIONS_COLUMN,
)

AUTHOR_SEPARATOR = "; "
AFFILIATION_SEPARATOR = ", "

# Shared object so every unparsed year lands in the same dict bucket.
NOT_A_NUMBER: float = float("nan")

Number = Union[int, float]


def is_missing(value: Number) -> bool:
    return isinstance(value, float) and math.isnan(value)


@dataclass(frozen=True)
class Publication:
    """One bibliographic record from a single export row."""

    authors: Tuple[str, ...] = field(default_factory=tuple)
    title: str = ""
    year: Number = NOT_A_NUMBER
    cited_by: Number = NOT_A_NUMBER
    doi: str = ""
    country: str = ""

    @property
    def display_name(self) -> str:
        """Title with the DOI appended when one is present."""
        if self.doi == "":
            return self.title
        return f"{self.title} {self.doi}"


__all__ = [
    "AFFILIATIONS_COLUMN",
    "AFFILIATION_SEPARATOR",
    "AUTHORS_COLUMN",
    "AUTHOR_SEPARATOR",
    "CITED_BY_COLUMN",
    "DOI_COLUMN",
    "NOT_A_NUMBER",
    "Number",
    "Publication",
    "RECOGNISED_COLUMNS",
    "TITLE_COLUMN",
    "YEAR_COLUMN",
    "is_missing",
]
