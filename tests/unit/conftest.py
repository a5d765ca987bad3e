"""Fixtures for unit tests: ranking tables seeded with realistic data-quality problems."""
import pytest

from tests.conftest import make_ranking_dict


@pytest.fixture
def two_category_rows():
    """One journal, one ISSN, two subject categories with different IFs."""
    return [
        make_ranking_dict(issn="1234-5678", category="A", impact_factor=2.5, category_rank=10, category_size=100),
        make_ranking_dict(issn="1234-5678", category="B", impact_factor=7.1, category_rank=2, category_size=50),
    ]


@pytest.fixture
def nature_rows():
    """Ranking table holding only the print ISSN of Nature."""
    return [
        make_ranking_dict(
            issn="0028-0836",
            journal_title="NATURE",
            impact_factor=49.962,
            category="MULTIDISCIPLINARY SCIENCES",
            category_rank=5,
            category_size=150,
        ),
    ]
