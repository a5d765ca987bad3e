"""Pydantic models for fetched metadata, ranking rows and stored paper records."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paper_registry.utils.config import NOT_AVAILABLE


class WorkMetadata(BaseModel):
    """Work metadata returned by the metadata source for one DOI."""

    model_config = ConfigDict(frozen=True)

    doi: str
    title: str
    container_title: str
    issn_candidates: Tuple[str, ...] = ()
    year: int


class RankingRow(BaseModel):
    """One row of the journal-ranking table (one journal in one subject category)."""

    model_config = ConfigDict(frozen=True)

    issn: str
    journal_title: str = ""
    impact_factor: Optional[Decimal] = None
    category: Optional[str] = None
    category_rank: Optional[int] = None
    category_size: Optional[int] = None

    @field_validator("impact_factor", mode="before")
    @classmethod
    def coerce_impact_factor(cls, v):
        """Go through str() so binary floats keep their printed value (7.1, not 7.0999...)."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v or v.upper() in (NOT_AVAILABLE, "NA", "NONE"):
                return None
            return v
        if isinstance(v, float):
            return str(v)
        return v


class ResolvedMatch(BaseModel):
    """The ranking row chosen for a work, or none."""

    model_config = ConfigDict(frozen=True)

    row: Optional[RankingRow] = None

    @property
    def matched(self) -> bool:
        return self.row is not None


class DisplayMetrics(BaseModel):
    """Display strings derived from a resolved match."""

    model_config = ConfigDict(frozen=True)

    impact_factor: str = NOT_AVAILABLE
    percentile: str = NOT_AVAILABLE


class PaperRecord(BaseModel):
    """Paper record as persisted. id and created_at are assigned by the store."""

    id: Optional[int] = None
    doi: str
    title: str
    journal: str
    year: int
    impact_factor: str = NOT_AVAILABLE
    percentile: str = NOT_AVAILABLE
    created_at: Optional[datetime] = None

    @field_validator("doi")
    @classmethod
    def validate_doi(cls, v):
        """DOI is required."""
        if not v or not v.strip():
            raise ValueError("doi is required")
        return v.strip()

    def to_insert_params(self) -> dict:
        """Column values for an INSERT (store-assigned fields excluded)."""
        return self.model_dump(exclude={"id", "created_at"})


class PaperCreate(BaseModel):
    """Request body for registering a paper."""

    doi: str = Field(..., description="DOI of the work, e.g. 10.1038/s41586-020-2012-7")
