"""One-time MongoDB index creation for the jobs listing.

Creates one compound index per listing sort order so every page fetch is an
index range scan.

Run once after deployment:
    python scripts/setup_indexes.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.logger import setup_logging
from src.common.repositories import get_job_repository

logger = logging.getLogger("setup_indexes")


def create_indexes() -> None:
    """Create the listing indexes on the configured jobs collection."""
    repo = get_job_repository()
    names = repo.ensure_indexes()
    logger.info(f"All indexes created successfully: {', '.join(names)}")


if __name__ == "__main__":
    setup_logging()
    create_indexes()
