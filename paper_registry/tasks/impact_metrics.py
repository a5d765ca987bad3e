"""Impact metrics - Display strings for impact factor and category percentile."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from paper_registry.models.records import DisplayMetrics, RankingRow, ResolvedMatch
from paper_registry.utils.config import (
    IMPACT_FACTOR_PLACES,
    NOT_AVAILABLE,
    PERCENTILE_PLACES,
)


def format_impact_factor(row: Optional[RankingRow]) -> str:
    """Impact factor to exactly three decimals (half-up), or N/A."""
    if row is None or row.impact_factor is None:
        return NOT_AVAILABLE
    value = Decimal(row.impact_factor).quantize(Decimal(IMPACT_FACTOR_PLACES), rounding=ROUND_HALF_UP)
    return f"{value}"


def format_percentile(row: Optional[RankingRow]) -> str:
    """
    Category percentile as 100 * rank / size, one decimal (half-up) plus "%".

    A missing, zero or negative rank or size gives N/A instead of a division.
    """
    if row is None:
        return NOT_AVAILABLE

    rank, size = row.category_rank, row.category_size
    if rank is None or size is None or rank <= 0 or size <= 0:
        return NOT_AVAILABLE

    percentile = (Decimal(100) * Decimal(rank) / Decimal(size)).quantize(
        Decimal(PERCENTILE_PLACES), rounding=ROUND_HALF_UP
    )
    return f"{percentile}%"


def compute_display(match: ResolvedMatch) -> DisplayMetrics:
    """
    Derive the stored display strings from a resolved match.

    The strings are persisted as-is and never recomputed from stored values.
    """
    return DisplayMetrics(
        impact_factor=format_impact_factor(match.row),
        percentile=format_percentile(match.row),
    )
