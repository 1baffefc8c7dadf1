"""
MongoDB Job Repository

pymongo implementation of JobRepositoryInterface for the seenJobs
collection.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.common.errors import StoreUnavailable

from .base import JobRepositoryInterface, WriteResult

logger = logging.getLogger(__name__)

# One index per listing order, each ending in _id so the sort is total.
# The posted_at index also serves posted_oldest by reverse traversal.
LISTING_INDEXES = [
    ("posted_at_id_idx", [("posted_at", DESCENDING), ("_id", DESCENDING)]),
    ("company_asc_id_idx", [("company", ASCENDING), ("_id", DESCENDING)]),
    ("company_desc_id_idx", [("company", DESCENDING), ("_id", DESCENDING)]),
]


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB {operation} failed: {e}")
        raise StoreUnavailable(f"Job store unavailable during {operation}: {e}") from e


class AtlasJobRepository(JobRepositoryInterface):
    """
    MongoDB repository for job documents.

    Connection Management:
    - One MongoClient per repository, created lazily on first use
    - PyMongo pools connections internally and is thread-safe
    - The owner of the repository (see config.get_job_repository) closes it

    Error Handling:
    - Every PyMongoError is re-raised as StoreUnavailable
    - No retries
    """

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "jobNotifier",
        collection: str = "seenJobs",
        timeout_ms: int = 5000,
    ):
        """
        Initialize repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name (default: "jobNotifier")
            collection: Collection name (default: "seenJobs")
            timeout_ms: Server selection/connect/socket timeout
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection
        self._timeout_ms = timeout_ms
        self._client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    def _get_collection(self) -> Collection:
        if self._collection is None:
            # Short timeouts so an unreachable store fails the request quickly
            self._client = MongoClient(
                self._mongodb_uri,
                serverSelectionTimeoutMS=self._timeout_ms,
                connectTimeoutMS=self._timeout_ms,
                socketTimeoutMS=self._timeout_ms,
            )
            self._collection = self._client[self._database_name][self._collection_name]
            logger.info(
                f"Job repository connected: {self._database_name}.{self._collection_name}"
            )
        return self._collection

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Find a single job document."""
        with _store_errors("find_one"):
            return self._get_collection().find_one(filter)

    def find(
        self,
        filter: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """Find multiple job documents."""
        with _store_errors("find"):
            cursor = self._get_collection().find(filter, projection)
            if sort:
                cursor = cursor.sort(sort)
            if limit > 0:
                cursor = cursor.limit(limit)
            return list(cursor)

    def count_documents(self, filter: Dict[str, Any]) -> int:
        """Count documents matching the filter."""
        with _store_errors("count_documents"):
            return self._get_collection().count_documents(filter)

    def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        """Update a single document."""
        with _store_errors("update_one"):
            result = self._get_collection().update_one(filter, update)

        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        """Update multiple documents."""
        with _store_errors("update_many"):
            result = self._get_collection().update_many(filter, update)

        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    def insert_many(self, documents: List[Dict[str, Any]]) -> List[str]:
        """Insert documents, returning their new _id values."""
        if not documents:
            return []
        with _store_errors("insert_many"):
            result = self._get_collection().insert_many(documents)
        return [str(inserted_id) for inserted_id in result.inserted_ids]

    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete multiple documents."""
        with _store_errors("delete_many"):
            result = self._get_collection().delete_many(filter)

        return WriteResult(
            matched_count=result.deleted_count,
            modified_count=result.deleted_count,
        )

    def ensure_indexes(self) -> List[str]:
        """Create the listing indexes (no-op for indexes that already exist)."""
        names = []
        with _store_errors("create_index"):
            collection = self._get_collection()
            for name, keys in LISTING_INDEXES:
                names.append(collection.create_index(keys, name=name))
                logger.info(f"Ensured index {name} on {self._collection_name}")
        return names

    def ping(self) -> bool:
        """Ping the server. Never raises."""
        try:
            self._get_collection()
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        """Close the client. A later call reconnects."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._collection = None
        logger.info("Job repository connection closed")
