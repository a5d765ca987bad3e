"""Load a JCR export (CSV or Excel) into the journal-ranking table.

Expected headers (case-insensitive, extra columns ignored):
    ISSN and/or eISSN, Journal Title (or "Journal name"), IF (or "JIF", "Impact Factor"),
    Category, and either "Category Rank" + "Category Size" or a combined
    "JIF Rank" column holding "5/150".

Usage:
    python scripts/load_jcr.py jcr_2024.csv
    python scripts/load_jcr.py jcr_2024.xlsx --replace
"""
import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import text

from paper_registry.database.connection import DatabaseConnection
from paper_registry.database.repositories import RankingRepository
from paper_registry.database.schema import create_schema
from paper_registry.tasks.jcr_import import read_jcr_export
from paper_registry.utils.config import settings


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Import a JCR export into the ranking table")
    parser.add_argument("path", type=Path, help="CSV or XLSX export")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--replace", action="store_true", help="Empty the ranking table first")
    args = parser.parse_args()

    if not args.path.exists():
        print(f"❌ {args.path} not found")
        sys.exit(1)

    rows = read_jcr_export(args.path)
    print(f"Read {len(rows)} ranking rows from {args.path}")

    db = DatabaseConnection(args.database_url)
    try:
        create_schema(db.engine)
        with db.get_session() as session:
            if args.replace:
                session.execute(text(f"DELETE FROM {settings.ranking_table}"))
            written = RankingRepository(session).bulk_insert(rows)
        print(f"✅ Loaded {written} rows into {settings.ranking_table}")
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
