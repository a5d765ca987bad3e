"""Paper service - The add/list/delete operations behind the API and CLI."""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from paper_registry.api.base import BaseAPIClient
from paper_registry.api.crossref import CrossrefClient
from paper_registry.cache.redis_client import RedisCache
from paper_registry.database.connection import DatabaseConnection
from paper_registry.database.repositories import PaperRepository
from paper_registry.models.records import PaperRecord
from paper_registry.tasks.paper_registration import PaperRegistrationTask
from paper_registry.tasks.ranking_lookup import RankingLookup
from paper_registry.utils.config import settings
from paper_registry.utils.errors import DatabaseError, StoreDeleteFailure, ValidationError
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class PaperService:
    """Registered papers: add by DOI, list newest first, delete by id."""

    def __init__(
        self,
        db: DatabaseConnection,
        fetcher: BaseAPIClient,
        ranking_lookup: Optional[RankingLookup] = None,
        fetch_timeout: Optional[float] = None,
    ):
        self.db = db
        self.fetcher = fetcher
        self.ranking_lookup = ranking_lookup or RankingLookup(db)
        self.registration = PaperRegistrationTask(
            fetcher, self.ranking_lookup, db, fetch_timeout=fetch_timeout
        )

    async def add_paper(self, doi: str) -> PaperRecord:
        """Register a DOI. Blank input is rejected before any request is made."""
        doi = (doi or "").strip()
        if not doi:
            raise ValidationError("A DOI is required")
        return await self.registration.execute(doi)

    def list_papers(self) -> List[PaperRecord]:
        """All stored papers, newest first."""
        try:
            with self.db.get_session() as session:
                return PaperRepository(session).list_all()
        except SQLAlchemyError as e:
            logger.error(f"Listing papers failed: {e}")
            raise DatabaseError(f"Failed to list papers: {e}")

    def delete_paper(self, paper_id: int) -> bool:
        """
        Delete a paper by id.

        Returns:
            True if deleted, False if the id does not exist (nothing changes)

        Raises:
            StoreDeleteFailure: The store could not perform the delete
        """
        try:
            with self.db.get_session() as session:
                return PaperRepository(session).delete_by_id(paper_id)
        except SQLAlchemyError as e:
            logger.error(f"Deleting paper {paper_id} failed: {e}")
            raise StoreDeleteFailure(f"Failed to delete paper {paper_id}: {e}")

    async def close(self) -> None:
        await self.fetcher.close()


def create_paper_service(database_url: Optional[str] = None) -> PaperService:
    """Wire a PaperService from settings (Crossref, ranking table, optional Redis)."""
    db = DatabaseConnection(database_url)
    cache = RedisCache() if settings.redis_enabled else None
    return PaperService(db, CrossrefClient(cache=cache))
