"""
Repository Interface Definitions

Defines the abstract interface for the jobs collection. The query planner
and the job actions service receive an implementation at construction, so
a real MongoDB store and an in-memory fake are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class WriteResult:
    """
    Result of a write operation.

    Attributes:
        matched_count: Number of documents that matched the filter
        modified_count: Number of documents actually modified
        upserted_id: ID of inserted/upserted document (if any)
    """
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None


class JobRepositoryInterface(ABC):
    """
    Abstract interface for jobs collection operations.

    Implementations:
    - AtlasJobRepository: pymongo-backed MongoDB store

    Store failures are raised as StoreUnavailable. Nothing is retried here;
    retry policy belongs to the caller.
    """

    @abstractmethod
    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Find a single job document.

        Args:
            filter: MongoDB query filter (e.g., {"_id": ObjectId(...)})

        Returns:
            Document dict if found, None otherwise
        """
        pass

    @abstractmethod
    def find(
        self,
        filter: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple job documents.

        Args:
            filter: MongoDB query filter
            projection: Fields to include/exclude
            sort: Sort order as list of (field, direction) tuples
            limit: Maximum documents to return (0 = no limit)

        Returns:
            List of matching documents in sort order
        """
        pass

    @abstractmethod
    def count_documents(self, filter: Dict[str, Any]) -> int:
        """Count documents matching the filter."""
        pass

    @abstractmethod
    def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        """
        Update a single document.

        Args:
            filter: MongoDB query filter
            update: Update operations (e.g., {"$set": {...}})

        Returns:
            WriteResult with match/modify counts
        """
        pass

    @abstractmethod
    def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        """Update every document matching the filter."""
        pass

    @abstractmethod
    def insert_many(self, documents: List[Dict[str, Any]]) -> List[str]:
        """
        Insert documents.

        Returns:
            Inserted _id values as strings, in input order
        """
        pass

    @abstractmethod
    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete every document matching the filter."""
        pass

    @abstractmethod
    def ensure_indexes(self) -> List[str]:
        """
        Create the compound indexes backing each listing sort order.

        Returns:
            Names of the indexes ensured
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the store answers, False otherwise."""
        pass
