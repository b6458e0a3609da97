"""Canonical keys for free-text agency, agent, suburb and street identifiers.

Rows are typed in by many agents with inconsistent formatting ("Pullenvale",
"Pullenvale QLD 4069", "pullenvale qld (4069)").  Every aggregation groups on
the values returned here, so these functions never raise: anything that
cannot be mapped degrades to ``UNKNOWN`` and stays in the totals.
"""
from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Trailing "qld", "4069", "(4069)", "qld (4069)" ... in any order/repetition.
_TRAILING_TOKEN = re.compile(r"(?:\s+|^)(?:qld|\(\s*\d{4}\s*\)|\d{4})$")
_WHITESPACE = re.compile(r"\s+")

# Cleaned lower-case suburb name -> canonical label.
SUBURB_LABELS = {
    "pullenvale": "PULLENVALE 4069",
    "pulllenvale": "PULLENVALE 4069",
    "brookfield": "BROOKFIELD 4069",
    "anstead": "ANSTEAD 4070",
    "chapel hill": "CHAPEL HILL 4069",
    "chapell hill": "CHAPEL HILL 4069",
    "chapell": "CHAPEL HILL 4069",
    "kenmore": "KENMORE 4069",
    "kenmore hills": "KENMORE HILLS 4069",
    "fig tree pocket": "FIG TREE POCKET 4069",
    "pinjarra hills": "PINJARRA HILLS 4069",
    "pinjara hills": "PINJARRA HILLS 4069",
    "moggill": "MOGGILL 4070",
    "bellbowrie": "BELLBOWRIE 4070",
}

CANONICAL_SUBURBS = tuple(sorted(set(SUBURB_LABELS.values())))


def _clean(raw) -> str:
    if raw is None:
        return ""
    return _WHITESPACE.sub(" ", str(raw)).strip()


def _capitalize(raw) -> str:
    text = _clean(raw)
    if not text:
        return UNKNOWN
    return text[0].upper() + text[1:].lower()


def normalize_agency(raw) -> str:
    """``"  harcourts SUCCESS "`` -> ``"Harcourts success"``; blank -> Unknown."""
    return _capitalize(raw)


def normalize_agent(raw) -> str:
    return _capitalize(raw)


def _strip_suburb_tokens(raw) -> str:
    text = _clean(raw).lower()
    previous = None
    while text and text != previous:
        previous = text
        text = _TRAILING_TOKEN.sub("", text).strip()
    return text


def normalize_suburb(raw) -> str:
    """Map a free-text suburb to its canonical label, e.g. ``"PULLENVALE 4069"``."""
    cleaned = _strip_suburb_tokens(raw)
    label = SUBURB_LABELS.get(cleaned)
    if label is None:
        if cleaned:
            logger.debug("Unmapped suburb %r", raw)
        return UNKNOWN
    return label


def suburb_key(raw) -> str:
    """Grouping key for suburb equality checks.

    Known suburbs collapse to their canonical label.  Unmapped ones keep their
    cleaned text so two different unknown suburbs never match each other.
    """
    cleaned = _strip_suburb_tokens(raw)
    if not cleaned:
        return UNKNOWN
    return SUBURB_LABELS.get(cleaned, cleaned)


def normalize_street(raw) -> str:
    """Streets match on the trimmed string only; "Main St" and "Main Street" stay apart."""
    if raw is None:
        return ""
    return str(raw).strip()


def street_key(suburb, street) -> str:
    """Suburb-namespaced street key used when several plans are folded together."""
    return f"{suburb_key(suburb)}: {normalize_street(street)}"


def display_suburb(raw) -> str:
    """Canonical label when known, otherwise the trimmed input (or Unknown)."""
    label = normalize_suburb(raw)
    if label != UNKNOWN:
        return label
    return _clean(raw) or UNKNOWN
