"""Paper registration task - DOI to stored, ranked paper record."""
import asyncio
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from paper_registry.api.base import BaseAPIClient
from paper_registry.database.connection import DatabaseConnection
from paper_registry.database.repositories import PaperRepository
from paper_registry.models.records import PaperRecord, WorkMetadata
from paper_registry.tasks.impact_metrics import compute_display
from paper_registry.tasks.match_resolver import resolve_match
from paper_registry.tasks.ranking_lookup import RankingLookup
from paper_registry.tasks.record_builder import build_record
from paper_registry.utils.errors import APIError, StoreWriteFailure
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class PaperRegistrationTask:
    """Fetch metadata, resolve the journal ranking and store one paper.

    The steps run strictly in sequence. A fetch failure aborts before anything
    is written; a ranking failure only degrades the record to fallback values.
    """

    def __init__(
        self,
        fetcher: BaseAPIClient,
        ranking_lookup: RankingLookup,
        db: DatabaseConnection,
        fetch_timeout: Optional[float] = None,
    ):
        """
        Args:
            fetcher: Metadata source client
            ranking_lookup: Ranking table lookup
            db: Connection to the paper store
            fetch_timeout: Seconds to wait for the metadata source (None = no limit)
        """
        self.fetcher = fetcher
        self.ranking_lookup = ranking_lookup
        self.db = db
        self.fetch_timeout = fetch_timeout

    async def execute(self, doi: str) -> PaperRecord:
        """
        Register a paper.

        Args:
            doi: DOI as submitted

        Returns:
            Stored record with id and created_at

        Raises:
            APIError: Metadata fetch failed (NotFoundError, MalformedResponseError, ...)
            StoreWriteFailure: Insert failed
        """
        logger.info(f"Registering paper {doi}")

        work = await self._fetch(doi)

        # Blocking database work runs off the event loop.
        rows = await asyncio.to_thread(self.ranking_lookup.lookup, work.issn_candidates)
        match = resolve_match(rows)
        display = compute_display(match)
        record = build_record(doi, work, display, match)

        if match.matched:
            logger.info(
                f"{doi}: matched ISSN {match.row.issn} -> {record.journal} "
                f"(IF {display.impact_factor}, percentile {display.percentile})"
            )
        else:
            logger.info(
                f"{doi}: no ranking match for ISSNs {list(work.issn_candidates)}, "
                f"using container title {work.container_title!r}"
            )

        return await asyncio.to_thread(self._store, record)

    async def _fetch(self, doi: str) -> WorkMetadata:
        try:
            if self.fetch_timeout is None:
                return await self.fetcher.fetch(doi)
            return await asyncio.wait_for(self.fetcher.fetch(doi), timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Metadata fetch for {doi} timed out after {self.fetch_timeout}s")
            raise APIError(f"Metadata fetch timed out for {doi}")
        except APIError as e:
            logger.error(f"Metadata fetch for {doi} failed: {e}")
            raise

    def _store(self, record: PaperRecord) -> PaperRecord:
        try:
            with self.db.get_session() as session:
                return PaperRepository(session).insert(record)
        except SQLAlchemyError as e:
            logger.error(f"Storing paper {record.doi} failed: {e}")
            raise StoreWriteFailure(f"Failed to store paper {record.doi}: {e}")
