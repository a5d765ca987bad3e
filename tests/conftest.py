"""
Pytest configuration and shared factories.

- Adds the project root to sys.path so backend/ and scripts/ import in tests.
- Provides an in-memory SQLite database with the papers and ranking tables.
- Adds terminal formatting for clear visual output when running tests.
"""
import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from paper_registry.database.connection import DatabaseConnection  # noqa: E402
from paper_registry.database.repositories import RankingRepository  # noqa: E402
from paper_registry.database.schema import create_schema  # noqa: E402
from paper_registry.models.records import PaperRecord, RankingRow, WorkMetadata  # noqa: E402

NATURE_DOI = "10.1038/s41586-020-2012-7"


# ─── Data factories ──────────────────────────────────────────────────────

def make_work(
    doi=NATURE_DOI,
    title="A pneumonia outbreak associated with a new coronavirus of probable bat origin",
    container_title="Nature",
    issn_candidates=("1476-4687", "0028-0836"),
    year=2020,
):
    return WorkMetadata(
        doi=doi,
        title=title,
        container_title=container_title,
        issn_candidates=tuple(issn_candidates),
        year=year,
    )


def make_row(
    issn="1234-5678",
    journal_title="JOURNAL OF TESTING",
    impact_factor=None,
    category="TESTING",
    category_rank=None,
    category_size=None,
):
    return RankingRow(
        issn=issn,
        journal_title=journal_title,
        impact_factor=impact_factor,
        category=category,
        category_rank=category_rank,
        category_size=category_size,
    )


def make_ranking_dict(
    issn="1234-5678",
    journal_title="JOURNAL OF TESTING",
    impact_factor=None,
    category="TESTING",
    category_rank=None,
    category_size=None,
):
    """Row in the shape RankingRepository.bulk_insert takes."""
    return {
        "issn": issn,
        "journal_title": journal_title,
        "impact_factor": impact_factor,
        "category": category,
        "category_rank": category_rank,
        "category_size": category_size,
    }


def make_record(doi=NATURE_DOI, title="Test Paper", journal="Nature", year=2020,
                impact_factor="N/A", percentile="N/A"):
    return PaperRecord(
        doi=doi,
        title=title,
        journal=journal,
        year=year,
        impact_factor=impact_factor,
        percentile=percentile,
    )


class FakeFetcher:
    """Metadata source stand-in: returns canned works or raises canned errors."""

    def __init__(self, works=None, errors=None, delays=None):
        self.works = works or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls = []
        self.closed = False

    async def fetch(self, doi):
        import asyncio

        self.calls.append(doi)
        if doi in self.delays:
            await asyncio.sleep(self.delays[doi])
        if doi in self.errors:
            raise self.errors[doi]
        return self.works[doi]

    async def close(self):
        self.closed = True


# ─── Database fixtures ───────────────────────────────────────────────────

@pytest.fixture
def db():
    """Fresh in-memory SQLite database with both tables, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    connection = DatabaseConnection(engine=engine)
    yield connection
    connection.dispose()


@pytest.fixture
def seed_rankings(db):
    """Insert ranking rows: seed_rankings([make_ranking_dict(...), ...])."""

    def _seed(rows):
        with db.get_session() as session:
            RankingRepository(session).bulk_insert(rows)

    return _seed


# ─── Terminal formatting for visual clarity ───────────────────────────────

BANNER = "=" * 60
SECTION = "-" * 60


def pytest_configure(config):
    """Print banner at start of test run."""
    if config.getoption("verbose", 0) >= 0:
        print(f"\n{BANNER}")
        print("  Paper Registry - Test Run")
        print(f"{BANNER}\n")


def pytest_sessionfinish(session, exitstatus):
    """Print summary and banner at end of run."""
    print(f"\n{SECTION}")
    if exitstatus == 0:
        print("  Result: ALL PASSED")
    else:
        print("  Result: FAILED (see above)")
    print(f"{BANNER}\n")
