"""Ranking lookup task - Find journal-ranking rows for a work's candidate ISSNs."""
from typing import List, Optional, Sequence

from paper_registry.database.connection import DatabaseConnection
from paper_registry.database.repositories import RankingRepository
from paper_registry.models.records import RankingRow
from paper_registry.utils.config import settings
from paper_registry.utils.errors import LookupFailure
from paper_registry.utils.issn import extract_issns, normalize_candidates, normalize_issn
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


def sort_by_impact_factor(rows: Sequence[RankingRow]) -> List[RankingRow]:
    """
    Stable sort, highest impact factor first.

    Rows without an impact factor sort after every row that has one; equal
    values keep their incoming order.
    """
    return sorted(
        rows,
        key=lambda row: (row.impact_factor is None, -(row.impact_factor or 0)),
    )


class RankingLookup:
    """Query the ranking table for every ISSN variant of a work."""

    def __init__(
        self,
        db: DatabaseConnection,
        table: Optional[str] = None,
        fuzzy_fallback: Optional[bool] = None,
    ):
        """
        Args:
            db: Connection to the database holding the ranking table
            table: Ranking table name, defaults to settings.ranking_table
            fuzzy_fallback: Try a bounded pattern match when the exact lookup
                finds nothing. Defaults to settings.ranking_fuzzy_fallback.
        """
        self.db = db
        self.table = table or settings.ranking_table
        self.fuzzy_fallback = (
            settings.ranking_fuzzy_fallback if fuzzy_fallback is None else fuzzy_fallback
        )

    def lookup(self, candidate_issns: Sequence[str]) -> List[RankingRow]:
        """
        Find ranking rows for the candidate ISSNs.

        Args:
            candidate_issns: ISSNs from the metadata source, any formatting

        Returns:
            Matching rows sorted by impact factor descending. Equal impact
            factors are ordered by the first candidate ISSN they matched, then
            by insertion order. Empty when there are no candidates, no match,
            or the ranking store failed.
        """
        if not candidate_issns:
            return []

        keys = normalize_candidates(candidate_issns)
        if not keys:
            logger.info(f"No usable ISSN among candidates {list(candidate_issns)}")
            return []

        try:
            rows = self._query(keys)
        except LookupFailure as e:
            logger.warning(f"Ranking lookup failed for {keys}, continuing without a match: {e}")
            return []

        rows = sorted(rows, key=lambda row: _candidate_position(row, keys))
        rows = sort_by_impact_factor(rows)

        logger.info(f"Ranking lookup {keys}: {len(rows)} candidate rows")
        return rows

    def _query(self, keys: List[str]) -> List[RankingRow]:
        """Exact normalized lookup, then the optional fuzzy fallback."""
        try:
            with self.db.get_session() as session:
                repo = RankingRepository(session, self.table)
                rows = repo.find_by_issns(keys)

                if not rows and self.fuzzy_fallback:
                    rows = self._fuzzy_lookup(repo, keys)

                return rows
        except Exception as e:
            raise LookupFailure(str(e)) from e

    def _fuzzy_lookup(self, repo: RankingRepository, keys: List[str]) -> List[RankingRow]:
        """
        Pattern match for cells holding several ISSNs ("0028-0836; 1476-4687"),
        whose issn_key is not a single ISSN.

        The LIKE pattern only narrows the scan. A row is kept only when one whole
        ISSN token in its cell normalizes to the candidate key, so a key never
        matches digits that straddle two ISSNs or sit inside a longer number.
        """
        rows: List[RankingRow] = []
        seen = set()

        for key in keys:
            if len(key) != 8:
                continue

            pattern = f"%{key[:4]}%{key[4:]}%"
            for row in repo.find_by_pattern(pattern):
                if key not in extract_issns(row.issn):
                    continue
                if row in seen:
                    continue
                seen.add(row)
                rows.append(row)

        if rows:
            logger.info(f"Fuzzy ISSN fallback matched {len(rows)} rows for {keys}")
        return rows


def _candidate_position(row: RankingRow, keys: List[str]) -> int:
    """Index of the first candidate ISSN this row matched (first-seen order)."""
    tokens = extract_issns(row.issn) or [normalize_issn(row.issn)]
    positions = [keys.index(token) for token in tokens if token in keys]
    return min(positions, default=len(keys))
