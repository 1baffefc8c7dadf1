"""
List jobs from MongoDB, page by page, exactly as the dashboard sees them.

Usage:
    python scripts/list_jobs.py                              # First page, newest first
    python scripts/list_jobs.py --limit 50                   # 50 jobs per page
    python scripts/list_jobs.py --filter saved --sort company_az
    python scripts/list_jobs.py --all                        # Walk every page
    python scripts/list_jobs.py --cursor <token>             # Continue from a token
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.errors import InvalidArgument, StoreUnavailable
from src.common.repositories import get_job_repository
from src.pagination import JobFilter, JobSort, QueryPlanner


def print_page(jobs, page_number: int) -> None:
    print(f"Page {page_number}")
    print("=" * 110)
    print(f"{'POSTED':<20} | {'FLAGS':<5} | {'COMPANY':<22} | {'TITLE':<50}")
    print("=" * 110)

    for job in jobs:
        posted = job.posted_at.strftime("%Y-%m-%d %H:%M") if job.posted_at else "N/A"
        flags = "".join([
            "S" if job.saved else "-",
            "A" if job.archived else "-",
            "R" if job.read else "-",
            "P" if job.applied_at else "-",
        ])
        company = (job.company or "N/A")[:22]
        title = (job.title or "N/A")[:50]
        print(f"{posted:<20} | {flags:<5} | {company:<22} | {title:<50}")
    print()


def list_jobs(filter="all", sort="posted_newest", limit=20, cursor=None, walk_all=False):
    """
    Print one page of jobs, or every page when walk_all is set.

    Args:
        filter: Listing filter
        sort: Listing sort order
        limit: Jobs per page
        cursor: Token to resume from
        walk_all: Follow nextCursor until the last page
    """
    planner = QueryPlanner(get_job_repository())

    page_number = 1
    total = 0
    while True:
        page = planner.get_page(filter=filter, sort=sort, cursor=cursor, limit=limit)
        if not page.jobs and page_number == 1:
            print("❌ No jobs found matching criteria.")
            return

        print_page(page.jobs, page_number)
        total += len(page.jobs)

        if not page.has_next_page:
            print(f"End of listing ({total} jobs shown)")
            return
        if not walk_all:
            print(f"More jobs available. Continue with: --cursor {page.next_cursor}")
            return

        cursor = page.next_cursor
        page_number += 1


def main():
    parser = argparse.ArgumentParser(description="List jobs from MongoDB")
    parser.add_argument("--filter", default="all", choices=[f.value for f in JobFilter])
    parser.add_argument("--sort", default="posted_newest", choices=[s.value for s in JobSort])
    parser.add_argument("--limit", type=int, default=20, help="Jobs per page")
    parser.add_argument("--cursor", default=None, help="Resume from a nextCursor token")
    parser.add_argument("--all", action="store_true", dest="walk_all", help="Walk every page")

    args = parser.parse_args()

    try:
        list_jobs(
            filter=args.filter,
            sort=args.sort,
            limit=args.limit,
            cursor=args.cursor,
            walk_all=args.walk_all,
        )
    except InvalidArgument as e:
        parser.error(str(e))
    except StoreUnavailable as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
