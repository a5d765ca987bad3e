"""JCR import task - Turn a JCR export into ranking-table rows."""
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from paper_registry.utils.issn import normalize_issn
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)

COLUMN_ALIASES = {
    "issn": ("issn", "print issn", "issn (print)"),
    "eissn": ("eissn", "e-issn", "electronic issn", "online issn", "issn (online)"),
    "journal_title": ("journal title", "journal name", "full journal title", "title"),
    "impact_factor": ("if", "jif", "impact factor", "journal impact factor"),
    "category": ("category", "subject category", "jcr category"),
    "category_rank": ("category rank", "rank"),
    "category_size": ("category size", "journals in category"),
    "combined_rank": ("jif rank", "category ranking", "rank in category"),
}

_RANK_PAIR = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")


def _resolve_columns(columns: List[str]) -> Dict[str, str]:
    """Map canonical field name -> actual header present in the export."""
    lowered = {str(c).strip().lower(): c for c in columns}
    resolved = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in lowered:
                resolved[field] = lowered[alias]
                break
    return resolved


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def parse_impact_factor(value: Any) -> Optional[Decimal]:
    """Impact factor cell to Decimal; "N/A", "<0.1" and blanks become None."""
    text = _clean(value)
    if text is None:
        return None
    try:
        return Decimal(text.replace(",", ""))
    except InvalidOperation:
        return None


def parse_int(value: Any) -> Optional[int]:
    text = _clean(value)
    if text is None:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


def parse_rank_pair(value: Any) -> Tuple[Optional[int], Optional[int]]:
    """"5/150" -> (5, 150); anything else -> (None, None)."""
    text = _clean(value)
    match = _RANK_PAIR.match(text) if text else None
    if not match:
        return None, None
    return int(match.group(1)), int(match.group(2))


def _row_issns(record: Dict[str, Any], columns: Dict[str, str]) -> List[str]:
    """Print ISSN then eISSN, skipping "N/A" style placeholders and duplicates."""
    issns = []
    seen = set()
    for field in ("issn", "eissn"):
        if field not in columns:
            continue
        issn = _clean(record.get(columns[field]))
        key = normalize_issn(issn)
        if key and key not in seen:
            seen.add(key)
            issns.append(issn)
    return issns


def rows_from_frame(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a JCR export frame into ranking-table rows.

    A journal with both a print ISSN and an eISSN yields one row per ISSN, so
    either one matches. Rows with neither are skipped. ISSNs are stored as
    exported; the repository derives the normalized match key.

    Args:
        frame: Export loaded with every column as text

    Returns:
        Dicts accepted by RankingRepository.bulk_insert
    """
    columns = _resolve_columns(list(frame.columns))
    if "issn" not in columns and "eissn" not in columns:
        raise ValueError(f"No ISSN column in export (columns: {list(frame.columns)})")

    rows = []
    skipped = 0
    for record in frame.to_dict(orient="records"):
        issns = _row_issns(record, columns)
        if not issns:
            skipped += 1
            continue

        rank = size = None
        if "category_rank" in columns:
            rank = parse_int(record.get(columns["category_rank"]))
        if "category_size" in columns:
            size = parse_int(record.get(columns["category_size"]))
        if (rank is None or size is None) and "combined_rank" in columns:
            rank, size = parse_rank_pair(record.get(columns["combined_rank"]))

        impact_factor = None
        if "impact_factor" in columns:
            impact_factor = parse_impact_factor(record.get(columns["impact_factor"]))

        for issn in issns:
            rows.append(
                {
                    "issn": issn,
                    "journal_title": _clean(record.get(columns.get("journal_title"))) or "",
                    "impact_factor": float(impact_factor) if impact_factor is not None else None,
                    "category": _clean(record.get(columns.get("category"))),
                    "category_rank": rank,
                    "category_size": size,
                }
            )

    if skipped:
        logger.warning(f"Skipped {skipped} export rows without an ISSN")
    return rows


def read_jcr_export(path: Path) -> List[Dict[str, Any]]:
    """Read a CSV or Excel JCR export into ranking-table rows."""
    path = Path(path)
    if path.suffix.lower() in (".xlsx", ".xls"):
        frame = pd.read_excel(path, dtype=str)
    else:
        frame = pd.read_csv(path, dtype=str)

    logger.info(f"Loaded {len(frame)} rows from {path}")
    return rows_from_frame(frame)
