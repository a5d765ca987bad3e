"""Schema for the papers table and the journal-ranking table."""
from sqlalchemy import text
from sqlalchemy.engine import Engine

from paper_registry.utils.config import settings
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)

PAPERS_SQL = """
CREATE TABLE IF NOT EXISTS papers (
    id {id_type},
    doi TEXT NOT NULL,
    title TEXT NOT NULL,
    journal TEXT,
    year INTEGER,
    impact_factor TEXT NOT NULL DEFAULT 'N/A',
    percentile TEXT NOT NULL DEFAULT 'N/A',
    created_at TIMESTAMP NOT NULL
)
"""

PAPERS_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_papers_created_at ON papers (created_at)"
)

# Column names follow the JCR export headers, hence the quoting.
# issn_key is normalize_issn("ISSN"); lookups match on it.
RANKING_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id {id_type},
    "ISSN" TEXT NOT NULL,
    "Journal Title" TEXT,
    "IF" NUMERIC,
    "Category" TEXT,
    "Category Rank" INTEGER,
    "Category Size" INTEGER,
    issn_key TEXT NOT NULL
)
"""

RANKING_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_{table}_issn_key ON {table} (issn_key)"


def _id_column_type(engine: Engine) -> str:
    if engine.dialect.name == "sqlite":
        return "INTEGER PRIMARY KEY AUTOINCREMENT"
    return "SERIAL PRIMARY KEY"


def create_schema(engine: Engine, ranking_table: str = None) -> None:
    """
    Create both tables and their indexes if they do not exist.

    Args:
        engine: SQLAlchemy engine (PostgreSQL or SQLite)
        ranking_table: Ranking table name, defaults to settings.ranking_table
    """
    table = ranking_table or settings.ranking_table

    with engine.begin() as conn:
        id_type = _id_column_type(engine)
        conn.execute(text(PAPERS_SQL.format(id_type=id_type)))
        conn.execute(text(PAPERS_INDEX_SQL))
        conn.execute(text(RANKING_SQL.format(table=table, id_type=id_type)))
        conn.execute(text(RANKING_INDEX_SQL.format(table=table)))

    logger.info(f"Schema ready (papers, {table}) on {engine.dialect.name}")


def drop_schema(engine: Engine, ranking_table: str = None) -> None:
    """Drop both tables."""
    table = ranking_table or settings.ranking_table

    with engine.begin() as conn:
        conn.execute(text("DROP TABLE IF EXISTS papers"))
        conn.execute(text(f"DROP TABLE IF EXISTS {table}"))

    logger.info(f"Dropped papers and {table}")
