"""Match resolution - Pick the single ranking row shown for a work."""
from typing import Sequence

from paper_registry.models.records import RankingRow, ResolvedMatch
from paper_registry.tasks.ranking_lookup import sort_by_impact_factor
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_match(rows: Sequence[RankingRow]) -> ResolvedMatch:
    """
    Resolve candidate rows to one match.

    The row with the highest impact factor wins across every ISSN variant and
    every subject category of the journal; ties go to the first row seen and
    rows without an impact factor only win when no row has one. Rows from
    RankingLookup are already in this order, so sorting again keeps them as-is.

    Args:
        rows: Candidate ranking rows

    Returns:
        ResolvedMatch, with row None when there are no candidates
    """
    if not rows:
        return ResolvedMatch(row=None)

    best = sort_by_impact_factor(rows)[0]
    logger.debug(
        f"Resolved {len(rows)} candidates to {best.issn} "
        f"({best.category or 'no category'}, IF={best.impact_factor})"
    )
    return ResolvedMatch(row=best)
