# bibliometric_eval/scripts/country_lookup.py
"""Resolve free-text country names to ISO 3166-1 alpha-3 codes.

The chart layer joins country views against world geometry keyed by alpha-3
codes, so every code returned here must be an alpha-3 code. Lookups go through
``pycountry`` (names, official names, common names and codes, matched
case-insensitively) after a small alias table covering spellings that appear
in Scopus affiliations but not in ISO 3166.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional

import pycountry

COUNTRY_ALIASES: Dict[str, str] = {
    "south korea": "KOR",
    "north korea": "PRK",
    "russia": "RUS",
    "turkey": "TUR",
    "iran": "IRN",
    "vietnam": "VNM",
    "syria": "SYR",
    "laos": "LAO",
    "czech republic": "CZE",
    "macedonia": "MKD",
    "moldova": "MDA",
    "tanzania": "TZA",
    "venezuela": "VEN",
    "bolivia": "BOL",
    "taiwan": "TWN",
    "hong kong": "HKG",
    "palestine": "PSE",
    "ivory coast": "CIV",
    "cape verde": "CPV",
    "brunei": "BRN",
    "democratic republic congo": "COD",
    "russian federation": "RUS",
    "usa": "USA",
    "uk": "GBR",
}


@lru_cache(maxsize=4096)
def resolve(name: Optional[str]) -> Optional[str]:
    """Return the alpha-3 code for ``name`` or ``None`` when unrecognised."""
    if not name:
        return None
    text = name.strip()
    if not text:
        return None

    alias = COUNTRY_ALIASES.get(text.lower())
    if alias is not None:
        return alias
    try:
        return pycountry.countries.lookup(text).alpha_3
    except LookupError:
        logging.debug("Unrecognised country name %r", text)
        return None


__all__ = ["COUNTRY_ALIASES", "resolve"]
