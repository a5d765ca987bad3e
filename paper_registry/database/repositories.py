"""Data access layer - Repository pattern for database operations."""
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import DateTime, bindparam, text

from paper_registry.models.records import PaperRecord, RankingRow
from paper_registry.utils.config import settings
from paper_registry.utils.issn import normalize_candidates, normalize_issn
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP column type."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PaperRepository:
    """Repository for papers table operations."""

    def __init__(self, session, clock: Callable[[], datetime] = _utcnow):
        """
        Initialize with database session.

        Args:
            session: SQLAlchemy session
            clock: Source of created_at timestamps
        """
        self.session = session
        self.clock = clock

    def list_all(self) -> List[PaperRecord]:
        """
        Get every stored paper, newest first.

        Returns:
            Paper records ordered by created_at descending (id breaks ties)
        """
        query = text(
            """
            SELECT id, doi, title, journal, year, impact_factor, percentile, created_at
            FROM papers
            ORDER BY created_at DESC, id DESC
        """
        ).columns(created_at=DateTime)

        rows = self.session.execute(query).fetchall()
        return [_row_to_paper(row) for row in rows]

    def get_by_id(self, paper_id: int) -> Optional[PaperRecord]:
        """
        Get paper by ID.

        Args:
            paper_id: Store-assigned paper ID

        Returns:
            Paper record or None if not found
        """
        query = text(
            """
            SELECT id, doi, title, journal, year, impact_factor, percentile, created_at
            FROM papers
            WHERE id = :paper_id
        """
        ).columns(created_at=DateTime)

        row = self.session.execute(query, {"paper_id": paper_id}).fetchone()
        if not row:
            return None
        return _row_to_paper(row)

    def insert(self, record: PaperRecord) -> PaperRecord:
        """
        Insert one paper record.

        Args:
            record: Unsaved record from the record builder

        Returns:
            Copy of the record with id and created_at assigned
        """
        insert_query = text(
            """
            INSERT INTO papers (
                doi, title, journal, year, impact_factor, percentile, created_at
            ) VALUES (
                :doi, :title, :journal, :year, :impact_factor, :percentile, :created_at
            )
            RETURNING id
        """
        ).bindparams(bindparam("created_at", type_=DateTime))

        created_at = self.clock()
        params = record.to_insert_params()
        params["created_at"] = created_at

        paper_id = self.session.execute(insert_query, params).scalar_one()

        logger.info(f"Inserted paper {paper_id} ({record.doi})")
        return record.model_copy(update={"id": paper_id, "created_at": created_at})

    def delete_by_id(self, paper_id: int) -> bool:
        """
        Delete paper by ID.

        Args:
            paper_id: Store-assigned paper ID

        Returns:
            True if a row was deleted, False if no such ID exists
        """
        query = text("DELETE FROM papers WHERE id = :paper_id")
        result = self.session.execute(query, {"paper_id": paper_id})
        deleted = (result.rowcount or 0) > 0

        if deleted:
            logger.info(f"Deleted paper {paper_id}")
        else:
            logger.info(f"Delete requested for unknown paper {paper_id}")
        return deleted


class RankingRepository:
    """Repository for the journal-ranking (JCR) table."""

    def __init__(self, session, table: Optional[str] = None):
        """
        Initialize with database session.

        Args:
            session: SQLAlchemy session
            table: Ranking table name, defaults to settings.ranking_table
        """
        table = table or settings.ranking_table
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid ranking table name: {table!r}")
        self.session = session
        self.table = table

    def _select(self, where: str) -> str:
        return f"""
            SELECT "ISSN", "Journal Title", "IF", "Category",
                "Category Rank", "Category Size"
            FROM {self.table}
            WHERE {where}
            ORDER BY id
        """

    def get_by_issn(self, issn: str) -> List[RankingRow]:
        """
        Point lookup: every category row for one ISSN, in any formatting.

        Args:
            issn: ISSN as supplied by the caller

        Returns:
            Ranking rows (possibly empty)
        """
        return self.find_by_issns([issn])

    def find_by_issns(self, issns: List[str]) -> List[RankingRow]:
        """
        Batch lookup of rows whose issn_key equals the normalized form of any given ISSN.

        Args:
            issns: ISSNs in any formatting

        Returns:
            Ranking rows in insertion order
        """
        keys = normalize_candidates(issns)
        if not keys:
            return []

        query = text(self._select("issn_key IN :keys")).bindparams(
            bindparam("keys", expanding=True)
        )

        rows = self.session.execute(query, {"keys": keys}).fetchall()
        logger.debug(f"find_by_issns({keys}) -> {len(rows)} rows")
        return _rows_to_ranking(rows)

    def find_by_pattern(self, pattern: str) -> List[RankingRow]:
        """
        Case-insensitive LIKE lookup on the raw ISSN column.

        Args:
            pattern: SQL LIKE pattern, e.g. "%0028%0836%"

        Returns:
            Ranking rows in insertion order. Callers must verify each row.
        """
        query = text(self._select('UPPER("ISSN") LIKE :pattern'))
        rows = self.session.execute(query, {"pattern": pattern.upper()}).fetchall()
        logger.debug(f"find_by_pattern({pattern}) -> {len(rows)} rows")
        return _rows_to_ranking(rows)

    def bulk_insert(self, rows: List[Dict[str, Any]]) -> int:
        """
        Bulk insert ranking rows, filling issn_key from the ISSN.

        Args:
            rows: Dicts with issn, journal_title, impact_factor, category,
                  category_rank, category_size

        Returns:
            Number of rows written
        """
        if not rows:
            return 0

        insert_query = text(
            f"""
            INSERT INTO {self.table} (
                "ISSN", "Journal Title", "IF", "Category",
                "Category Rank", "Category Size", issn_key
            ) VALUES (
                :issn, :journal_title, :impact_factor, :category,
                :category_rank, :category_size, :issn_key
            )
        """
        )

        for row in rows:
            self.session.execute(insert_query, {**row, "issn_key": normalize_issn(row["issn"])})

        logger.info(f"Inserted {len(rows)} ranking rows into {self.table}")
        return len(rows)


def _row_to_paper(row: Any) -> PaperRecord:
    return PaperRecord(**dict(row._mapping))


def _rows_to_ranking(rows: List[Any]) -> List[RankingRow]:
    """Convert SELECT rows to RankingRow, skipping rows with unparseable values."""
    ranking_rows = []
    for row in rows:
        try:
            ranking_rows.append(
                RankingRow(
                    issn=row[0],
                    journal_title=row[1] or "",
                    impact_factor=row[2],
                    category=row[3],
                    category_rank=row[4],
                    category_size=row[5],
                )
            )
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed ranking row for ISSN {row[0]}: {e}")
    return ranking_rows
