"""
Storage access for the jobs collection.

    from src.common.repositories import get_job_repository
    from src.pagination import QueryPlanner

    page = QueryPlanner(get_job_repository()).get_page(filter="saved", sort="company_az")

Tests substitute any JobRepositoryInterface implementation.
"""

from .base import JobRepositoryInterface, WriteResult
from .config import RepositoryConfig, get_job_repository, reset_repository

__all__ = [
    "JobRepositoryInterface",
    "RepositoryConfig",
    "WriteResult",
    "get_job_repository",
    "reset_repository",
]
