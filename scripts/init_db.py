"""Initialize database schema for the paper registry."""
import argparse

from dotenv import load_dotenv

from paper_registry.database.connection import DatabaseConnection
from paper_registry.database.schema import create_schema, drop_schema


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Create the papers and ranking tables")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--drop", action="store_true", help="Drop both tables first")
    args = parser.parse_args()

    db = DatabaseConnection(args.database_url)
    try:
        if args.drop:
            drop_schema(db.engine)
        create_schema(db.engine)
        print("✅ Schema created successfully!")
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
