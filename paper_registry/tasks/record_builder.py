"""Record builder - Assemble the paper record from metadata and ranking data."""
from typing import Optional

from paper_registry.models.records import (
    DisplayMetrics,
    PaperRecord,
    ResolvedMatch,
    WorkMetadata,
)


def build_record(
    doi: str,
    work: WorkMetadata,
    display: DisplayMetrics,
    match: Optional[ResolvedMatch] = None,
) -> PaperRecord:
    """
    Build an unsaved PaperRecord. Pure data assembly, no I/O.

    Args:
        doi: DOI as submitted
        work: Metadata from the metadata source
        display: Impact factor and percentile strings
        match: Resolved ranking match (None or unmatched falls back to
               the metadata container title)

    Returns:
        PaperRecord with id and created_at unset
    """
    journal = work.container_title
    if match is not None and match.row is not None and match.row.journal_title.strip():
        journal = match.row.journal_title.strip()

    return PaperRecord(
        doi=doi,
        title=work.title,
        journal=journal,
        year=work.year,
        impact_factor=display.impact_factor,
        percentile=display.percentile,
    )
