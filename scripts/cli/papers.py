"""CLI for registering papers by DOI and managing the stored list."""
import argparse
import asyncio
import sys
from typing import List, Optional

from dotenv import load_dotenv

from paper_registry.models.records import PaperRecord
from paper_registry.tasks.paper_service import PaperService, create_paper_service
from paper_registry.utils.errors import (
    APIError,
    DatabaseError,
    ValidationError,
)

# ── Terminal colours ─────────────────────────────────────────────────
BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"


def header(title: str) -> None:
    print(f"\n{BOLD}{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}{RESET}")


def _truncate(value: str, width: int) -> str:
    return value if len(value) <= width else value[: width - 1] + "…"


def print_papers(papers: List[PaperRecord]) -> None:
    """Table of stored papers: id, year, title, journal, IF, percentile."""
    if not papers:
        print(f"  {DIM}No papers registered yet.{RESET}")
        return

    print(f"  {'ID':>5}  {'Year':<4}  {'Title':<40}  {'Journal':<25}  {'IF':>8}  {'Pct':>6}")
    for p in papers:
        print(
            f"  {p.id:>5}  {p.year:<4}  {_truncate(p.title, 40):<40}  "
            f"{_truncate(p.journal, 25):<25}  {BLUE}{p.impact_factor:>8}{RESET}  {p.percentile:>6}"
        )


def confirm(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ").strip().lower()
    return answer in ("y", "yes")


async def cmd_add(service: PaperService, doi: str) -> int:
    try:
        record = await service.add_paper(doi)
    except ValidationError as e:
        print(f"{RED}✗ {e}{RESET}")
        return 2
    except APIError:
        print(f"{RED}✗ Could not retrieve metadata for this DOI.{RESET}")
        return 1
    except DatabaseError:
        print(f"{RED}✗ Could not save the paper.{RESET}")
        return 1

    print(f"{GREEN}✓ Registered #{record.id}{RESET}: {record.title}")
    print(f"  {record.journal} ({record.year})  IF {record.impact_factor}  percentile {record.percentile}")
    return 0


def cmd_list(service: PaperService) -> int:
    try:
        papers = service.list_papers()
    except DatabaseError:
        print(f"{RED}✗ Could not load papers.{RESET}")
        return 1

    header(f"Registered papers ({len(papers)})")
    print_papers(papers)
    return 0


def cmd_delete(service: PaperService, paper_id: int, assume_yes: bool) -> int:
    if not assume_yes and not confirm(f"Delete paper #{paper_id}?"):
        print(f"{YELLOW}Cancelled.{RESET}")
        return 0

    try:
        deleted = service.delete_paper(paper_id)
    except DatabaseError:
        print(f"{RED}✗ Could not delete paper #{paper_id}.{RESET}")
        return 1

    if not deleted:
        print(f"{RED}✗ No paper with id {paper_id}.{RESET}")
        return 1

    print(f"{GREEN}✓ Deleted paper #{paper_id}{RESET}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Register papers by DOI with journal impact data")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Fetch, rank and store a paper")
    add.add_argument("doi", help="DOI, e.g. 10.1038/s41586-020-2012-7")

    sub.add_parser("list", help="List stored papers, newest first")

    delete = sub.add_parser("delete", help="Delete a stored paper")
    delete.add_argument("paper_id", type=int)
    delete.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    return parser


async def run(args: argparse.Namespace, service: PaperService) -> int:
    try:
        if args.command == "add":
            return await cmd_add(service, args.doi)
        if args.command == "list":
            return cmd_list(service)
        return cmd_delete(service, args.paper_id, args.yes)
    finally:
        await service.close()


def main(argv: Optional[List[str]] = None, service: Optional[PaperService] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    service = service or create_paper_service(args.database_url)
    return asyncio.run(run(args, service))


if __name__ == "__main__":
    sys.exit(main())
