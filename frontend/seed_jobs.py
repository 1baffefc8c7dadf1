"""
Populate the jobs collection with fake postings for local development.

Postings are spread over the last 30 days at minute granularity, so several
share a posted_at and the _id tie-break gets exercised. Flags are set on a
minority of documents and left off the rest, like records ingested before
the flags existed.

Usage:
    python -m frontend.seed_jobs                   # 20 postings
    python -m frontend.seed_jobs --count 200       # 200 postings
    python -m frontend.seed_jobs --clear --count 5 # wipe the collection first
"""

import argparse
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from src.common.repositories import JobRepositoryInterface, get_job_repository

EMPLOYERS = [
    "Northwind Traders", "Contoso", "Fabrikam", "Globex", "Initech", "Umbrella Labs",
    "Hooli", "Pied Piper", "Vandelay Industries", "Stark Analytics", "Wayne Logistics",
    "Tyrell Systems", "Cyberdyne", "Soylent Foods", "Aperture Science",
]

TITLES = [
    "Python Developer",
    "Senior Backend Engineer",
    "Data Platform Engineer",
    "DevOps Engineer",
    "Lead Software Engineer",
    "Machine Learning Engineer",
    "Full Stack Developer",
    "Solutions Architect",
]

CITIES = ["Berlin", "Munich", "Amsterdam", "Dublin", "Lisbon", "Zurich", "Remote (EU)", "Remote"]

FLAG_RATES = {"saved": 0.2, "read": 0.35, "archived": 0.1}


def generate_sample_job(now: datetime, rng: Optional[random.Random] = None) -> dict:
    """Build one fake posting (no _id; the store assigns it)."""
    rng = rng or random
    employer = rng.choice(EMPLOYERS)
    title = rng.choice(TITLES)
    slug = employer.lower().replace(" ", "")
    source_id = f"{rng.randrange(10**6, 10**7)}"
    salary_floor = rng.choice([None, rng.randrange(60_000, 140_000, 5_000)])

    document = {
        "id": source_id,
        "title": title,
        "company": employer,
        "company_url": f"https://www.{slug}.example",
        "url": f"https://www.{slug}.example/careers/{source_id}",
        "summary": f"{employer} is looking for a {title}.",
        "location": rng.choice(CITIES),
        "workplace_type": rng.choice(["remote", "hybrid", "onsite"]),
        "salary_min": salary_floor,
        "salary_max": salary_floor + 30_000 if salary_floor else None,
        "posted_at": (now - timedelta(minutes=rng.randrange(30 * 24 * 60))).replace(second=0, microsecond=0),
    }
    for flag, rate in FLAG_RATES.items():
        if rng.random() < rate:
            document[flag] = True
    return document


def seed_jobs(count: int = 20, clear: bool = False, repo: Optional[JobRepositoryInterface] = None) -> int:
    """
    Insert `count` fake postings.

    Args:
        count: How many postings to insert
        clear: Delete every existing job first
        repo: Target repository (default: the configured one)

    Returns:
        Number of postings inserted
    """
    repo = repo or get_job_repository()

    if clear:
        removed = repo.delete_many({}).matched_count
        print(f"Removed {removed} existing jobs")

    now = datetime.now(timezone.utc)
    inserted = repo.insert_many([generate_sample_job(now) for _ in range(count)])

    print(f"Inserted {len(inserted)} sample jobs")
    print(f"Total jobs: {repo.count_documents({})}")
    return len(inserted)


def main():
    parser = argparse.ArgumentParser(description="Insert fake job postings for local development")
    parser.add_argument("--count", type=int, default=20, help="Postings to insert")
    parser.add_argument("--clear", action="store_true", help="Delete existing jobs first")
    args = parser.parse_args()

    seed_jobs(count=args.count, clear=args.clear)


if __name__ == "__main__":
    main()
