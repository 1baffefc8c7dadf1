"""
Shared fixtures for all tests: job document factories and an in-memory
job repository.
"""

import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional

import pytest
from bson import ObjectId

sys.path.insert(0, str(Path(__file__).parent))

from helpers.memory_repository import BASE_TIME, InMemoryJobRepository


@pytest.fixture
def make_job():
    """Factory for minimal job documents; flags are omitted unless given."""
    counter = {"n": 0}

    def _make_job(posted_at=None, company: Optional[str] = "Acme", **fields):
        counter["n"] += 1
        document = {
            "_id": ObjectId(),
            "id": f"src-{counter['n']}",
            "title": f"Engineer {counter['n']}",
            "company": company,
            "url": f"https://jobs.example.com/{counter['n']}",
            "posted_at": posted_at if posted_at is not None else BASE_TIME,
        }
        document.update(fields)
        return document

    return _make_job


@pytest.fixture
def memory_repo():
    return InMemoryJobRepository()


@pytest.fixture
def mixed_jobs(make_job):
    """
    A dataset that stresses ordering: repeated timestamps and companies,
    missing posted_at/company values, and flags present, absent and false.
    """
    jobs = []
    companies = ["Acme", "Globex", "Initech", "Acme", None, "Umbrella", "Globex"]
    for i in range(35):
        posted_at = BASE_TIME - timedelta(hours=i // 3)  # three jobs per timestamp
        fields = {}
        if i % 4 == 0:
            fields["saved"] = True
        elif i % 4 == 1:
            fields["saved"] = False
        if i % 5 == 0:
            fields["archived"] = True
        if i % 3 == 0:
            fields["read"] = True
        job = make_job(posted_at=posted_at, company=companies[i % len(companies)], **fields)
        if i % 11 == 1:
            del job["posted_at"]
        jobs.append(job)
    return jobs
