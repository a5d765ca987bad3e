"""Crossref API client."""
from typing import Optional, Dict, Any, List
from urllib.parse import quote

import httpx

from paper_registry.api.base import BaseAPIClient
from paper_registry.cache.redis_client import RedisCache
from paper_registry.models.records import WorkMetadata
from paper_registry.utils.config import (
    CROSSREF_BASE_URL,
    CROSSREF_REQUEST_TIMEOUT,
    CROSSREF_USER_AGENT,
)
from paper_registry.utils.errors import MalformedResponseError
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class CrossrefClient(BaseAPIClient):
    """Crossref works API client, the metadata source for DOI registration."""

    def __init__(
        self,
        cache: Optional[RedisCache] = None,
        base_url: str = CROSSREF_BASE_URL,
        timeout: int = CROSSREF_REQUEST_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Crossref client.

        Args:
            cache: Redis cache instance (optional)
            base_url: Crossref API root
            timeout: Request timeout in seconds
            client: Pre-built httpx client (optional)
        """
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            headers={"User-Agent": CROSSREF_USER_AGENT},
            client=client,
        )
        self.cache = cache

    async def fetch(self, doi: str) -> WorkMetadata:
        """
        Get work metadata by DOI.

        Args:
            doi: DOI identifier, passed through unvalidated

        Returns:
            Parsed work metadata

        Raises:
            NotFoundError: Crossref does not know the DOI
            MalformedResponseError: title, container title or creation date missing
            APIError: Transport failure or non-success status
        """
        cache_key = f"crossref:work:{doi.lower()}"

        message = self.cache.get(cache_key) if self.cache else None
        if message is None:
            payload = await self._make_request(
                method="GET", endpoint=f"works/{quote(doi, safe='/')}"
            )
            message = payload.get("message") if isinstance(payload, dict) else None
            if not isinstance(message, dict):
                raise MalformedResponseError(f"No message in Crossref response for {doi}")

            work = self.parse_work(doi, message)
            if self.cache:
                self.cache.set(cache_key, message)
            return work

        return self.parse_work(doi, message)

    def parse_work(self, doi: str, message: Dict[str, Any]) -> WorkMetadata:
        """
        Convert a Crossref work message to WorkMetadata.

        Args:
            doi: DOI the caller asked for (kept as the record's DOI)
            message: The "message" object of a /works/{doi} response

        Returns:
            WorkMetadata

        Raises:
            MalformedResponseError: If a required field is absent
        """
        title = _first_text(message.get("title"))
        if not title:
            raise MalformedResponseError(f"Crossref work {doi} has no title")

        container_title = _first_text(message.get("container-title"))
        if not container_title:
            raise MalformedResponseError(f"Crossref work {doi} has no container-title")

        year = _created_year(message)
        if year is None:
            raise MalformedResponseError(f"Crossref work {doi} has no created date")

        return WorkMetadata(
            doi=doi,
            title=title,
            container_title=container_title,
            issn_candidates=tuple(self.extract_issns(message)),
            year=year,
        )

    @staticmethod
    def extract_issns(message: Dict[str, Any]) -> List[str]:
        """
        Candidate ISSNs in Crossref order: the ISSN list first, then any
        print/electronic values from issn-type not already listed.
        """
        candidates: List[str] = []
        for issn in message.get("ISSN") or []:
            if isinstance(issn, str) and issn.strip() and issn.strip() not in candidates:
                candidates.append(issn.strip())

        for entry in message.get("issn-type") or []:
            value = entry.get("value") if isinstance(entry, dict) else None
            if isinstance(value, str) and value.strip() and value.strip() not in candidates:
                candidates.append(value.strip())

        return candidates


def _first_text(value: Any) -> Optional[str]:
    """Crossref wraps most text fields in lists; take the first non-blank one."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str) and item.strip():
                return item.strip()
    return None


def _created_year(message: Dict[str, Any]) -> Optional[int]:
    try:
        year = message["created"]["date-parts"][0][0]
    except (KeyError, IndexError, TypeError):
        return None
    try:
        return int(year)
    except (TypeError, ValueError):
        return None
