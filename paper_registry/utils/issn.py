"""ISSN normalization utilities for matching Crossref ISSNs against the ranking table."""
import re
from typing import Iterable, List, Optional

_NON_ISSN_CHARS = re.compile(r"[^0-9Xx]")

# A complete ISSN inside free text: 4 digits, optional separator, 3 digits, check char.
# Lookarounds stop a match from starting or ending inside a longer digit run.
_ISSN_TOKEN = re.compile(r"(?<![0-9Xx])\d{4}[\s\-\u2010-\u2015]?\d{3}[\dXx](?![0-9Xx])")


def normalize_issn(raw: Optional[str]) -> str:
    """
    Canonicalize an ISSN into its comparable form.

    Every character that is not a digit or the check symbol X is dropped and the
    result is upper-cased, so "1234-567x", "1234567X" and " 1234 567X " all
    normalize to "1234567X".

    Args:
        raw: ISSN as supplied by any source (may be None or empty)

    Returns:
        Normalized key, or "" when nothing survives
    """
    if not raw:
        return ""
    return _NON_ISSN_CHARS.sub("", raw).upper()


def normalize_candidates(raws: Iterable[Optional[str]]) -> List[str]:
    """Normalize candidate ISSNs, dropping empties and duplicates (first seen wins)."""
    seen = set()
    keys = []
    for raw in raws:
        key = normalize_issn(raw)
        if key and key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


def extract_issns(text: Optional[str]) -> List[str]:
    """
    Find every complete ISSN token in a free-text cell.

    Ranking exports sometimes hold several ISSNs in one cell
    ("0028-0836; 1476-4687"). Only whole tokens are returned, so a digit
    group is never matched across two neighbouring ISSNs.

    Args:
        text: Cell value from the ranking store

    Returns:
        Normalized ISSN keys in the order they appear
    """
    if not text:
        return []
    return [normalize_issn(token) for token in _ISSN_TOKEN.findall(text)]


def format_issn(key: str) -> str:
    """Render a normalized 8-character key in the hyphenated NNNN-NNNC form."""
    key = normalize_issn(key)
    if len(key) != 8:
        return key
    return f"{key[:4]}-{key[4:]}"
