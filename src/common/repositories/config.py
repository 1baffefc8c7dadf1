"""
Job repository settings and the process-wide instance.

The service owns the store connection: get_job_repository() builds one
AtlasJobRepository per process from the environment and hands it to the
query planner and the actions service. Neither of those opens connections.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .base import JobRepositoryInterface

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


@dataclass
class RepositoryConfig:
    """Where the jobs collection lives and how long to wait for it."""

    mongodb_uri: str
    database: str = "jobNotifier"
    collection: str = "seenJobs"
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Read MONGODB_URI (required), MONGODB_DATABASE, MONGODB_COLLECTION and
        MONGODB_TIMEOUT_MS.

        Raises:
            ValueError: MONGODB_URI missing or MONGODB_TIMEOUT_MS not a positive integer
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        raw_timeout = os.getenv("MONGODB_TIMEOUT_MS") or str(DEFAULT_TIMEOUT_MS)
        if not raw_timeout.isdigit() or int(raw_timeout) == 0:
            raise ValueError(f"MONGODB_TIMEOUT_MS must be a positive integer, got '{raw_timeout}'")

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("MONGODB_DATABASE") or "jobNotifier",
            collection=os.getenv("MONGODB_COLLECTION") or "seenJobs",
            timeout_ms=int(raw_timeout),
        )


_instance: Optional[JobRepositoryInterface] = None


def get_job_repository() -> JobRepositoryInterface:
    """
    Return the shared job repository, creating it on first use.

    Raises:
        ValueError: Store settings missing or invalid
    """
    global _instance

    if _instance is None:
        from .atlas_repository import AtlasJobRepository

        config = RepositoryConfig.from_env()
        _instance = AtlasJobRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.collection,
            timeout_ms=config.timeout_ms,
        )
        logger.info(f"Job repository ready for {config.database}.{config.collection}")
    return _instance


def reset_repository() -> None:
    """Close and forget the shared repository; the next call rebuilds it."""
    global _instance

    close = getattr(_instance, "close", None)
    if callable(close):
        close()
    _instance = None
