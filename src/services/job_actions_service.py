"""
Point updates on job status flags.

Save, archive, read and applied are single-document $set updates keyed by
_id. Setting a flag to the value it already has is a no-op, so every action
is safe to repeat. None of them touch cursors already handed out; a client
paging while flags change may see a gap or a duplicate (see planner).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId

from src.common.errors import InvalidArgument, JobNotFound
from src.common.repositories.base import JobRepositoryInterface
from src.models.job import JobRecord
from src.pagination.keys import JobFilter, filter_conditions

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of a single-job flag update."""

    job_id: str
    field: str
    value: Any
    modified: bool

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.isoformat() if isinstance(self.value, datetime) else self.value
        return {
            "success": True,
            "job_id": self.job_id,
            self.field: value,
            "modified": self.modified,
        }


def parse_job_id(job_id: str) -> ObjectId:
    """Convert a job id string to ObjectId, raising InvalidArgument if malformed."""
    if not isinstance(job_id, str) or not ObjectId.is_valid(job_id):
        raise InvalidArgument(f"Invalid job_id format: {job_id!r}")
    return ObjectId(job_id)


class JobActionsService:
    """Status-flag mutations on the jobs collection."""

    def __init__(self, repository: JobRepositoryInterface):
        self._repository = repository

    def get_job(self, job_id: str) -> JobRecord:
        document = self._repository.find_one({"_id": parse_job_id(job_id)})
        if document is None:
            raise JobNotFound(job_id)
        return JobRecord.from_document(document)

    def _set_field(self, job_id: str, field: str, value: Any) -> ActionResult:
        object_id = parse_job_id(job_id)
        result = self._repository.update_one({"_id": object_id}, {"$set": {field: value}})

        if result.matched_count == 0:
            raise JobNotFound(job_id)

        logger.info(f"Job {job_id}: {field} -> {value!r} (modified={bool(result.modified_count)})")
        return ActionResult(
            job_id=job_id,
            field=field,
            value=value,
            modified=result.modified_count > 0,
        )

    def set_saved(self, job_id: str, saved: bool) -> ActionResult:
        return self._set_field(job_id, "saved", bool(saved))

    def set_archived(self, job_id: str, archived: bool) -> ActionResult:
        return self._set_field(job_id, "archived", bool(archived))

    def set_read(self, job_id: str, read: bool) -> ActionResult:
        return self._set_field(job_id, "read", bool(read))

    def set_applied(self, job_id: str, applied: bool, now: Optional[datetime] = None) -> ActionResult:
        """
        Mark a job applied (stamps appliedAt) or not applied (clears it).

        A job that is already applied keeps its original appliedAt.
        """
        if not applied:
            return self._set_field(job_id, "appliedAt", None)

        object_id = parse_job_id(job_id)
        applied_at = now or datetime.now(timezone.utc)
        result = self._repository.update_one(
            {"_id": object_id, "appliedAt": None},
            {"$set": {"appliedAt": applied_at}},
        )

        if result.matched_count == 0:
            document = self._repository.find_one({"_id": object_id})
            if document is None:
                raise JobNotFound(job_id)
            logger.info(f"Job {job_id}: already applied at {document.get('appliedAt')}")
            return ActionResult(job_id=job_id, field="appliedAt", value=document.get("appliedAt"), modified=False)

        logger.info(f"Job {job_id}: appliedAt -> {applied_at!r}")
        return ActionResult(job_id=job_id, field="appliedAt", value=applied_at, modified=True)

    def archive_matching(self, filter: Any = JobFilter.ALL) -> int:
        """
        Archive every non-archived job the given listing filter currently shows.

        Args:
            filter: JobFilter or its string value

        Returns:
            Number of jobs archived

        Raises:
            InvalidArgument: Unknown filter
        """
        job_filter = JobFilter.parse(filter)
        if job_filter == JobFilter.ARCHIVED:
            return 0

        query = {"$and": filter_conditions(job_filter)}
        result = self._repository.update_many(query, {"$set": {"archived": True}})

        logger.info(f"Bulk archived {result.modified_count} jobs (filter={job_filter.value})")
        return result.modified_count
