"""
Keyset pagination over the jobs collection.

plan_page() turns (filter, sort, cursor, limit) into a QuerySpec: a Mongo
filter, a compound sort and a fetch limit of limit + 1. QueryPlanner runs
that plan against an injected repository and assembles the Page. There is
no skip/offset anywhere: with an index matching the sort, each page costs an
index seek plus limit + 1 documents.

Pages are not a snapshot of the collection. A job inserted ahead of the
cursor in the active order shows up on a later page. A job inserted behind
the cursor, or one whose saved/read/archived flag flips while a client is
paging, can be skipped or returned twice. That is accepted behaviour of
keyset pagination and is not corrected here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING

from src.common.errors import CursorError, InvalidArgument
from src.common.repositories.base import JobRepositoryInterface
from src.models.job import JobRecord
from src.pagination.cursor import Cursor, cursor_from_document, decode_cursor, encode_cursor
from src.pagination.keys import SORT_ORDERS, JobFilter, JobSort, SortOrder, filter_conditions

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


@dataclass
class QuerySpec:
    """
    Plan for fetching one page.

    Attributes:
        filter: MongoDB query filter (range predicate AND filter predicate)
        sort: Sort order as list of (field, direction) tuples
        limit: Page size requested by the caller
        job_filter: Filter the page was planned for
        job_sort: Sort the next cursor will be minted under
        cursor: Decoded cursor applied to the range predicate, None on a first page
    """
    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    limit: int
    job_filter: JobFilter
    job_sort: JobSort
    cursor: Optional[Cursor] = None

    @property
    def fetch_limit(self) -> int:
        # One record past the page tells us whether another page exists
        return self.limit + 1


@dataclass
class Page:
    """One page of jobs plus the token for the next one (None on the last page)."""
    jobs: List[JobRecord]
    next_cursor: Optional[str] = None

    @property
    def has_next_page(self) -> bool:
        return self.next_cursor is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobs": [job.to_json() for job in self.jobs],
            "nextCursor": self.next_cursor,
        }


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be an integer, got {limit!r}")
    if limit <= 0:
        raise InvalidArgument(f"limit must be positive, got {limit}")
    return limit


def _resolve_cursor(token: Optional[str], sort: JobSort) -> Optional[Cursor]:
    """Decode a cursor token, or return None to restart from the first page."""
    if not token:
        return None
    try:
        return decode_cursor(token, expected_sort=sort)
    except CursorError as e:
        # Stale, bookmarked, tampered or minted for another sort
        logger.debug(f"Discarding cursor, restarting pagination: {e}")
        return None


def _after(direction: int) -> str:
    return "$gt" if direction == ASCENDING else "$lt"


def _range_predicate(cursor: Cursor, order: SortOrder) -> Dict[str, Any]:
    """
    Match jobs strictly after the cursor position in the given order.

    Lexicographic comparison on (primary, _id):
        primary <after> v  OR  (primary == v AND _id <after_id> id)

    MongoDB sorts null/missing values below everything else, so a
    descending walk still has the null-valued jobs ahead of it and an
    ascending walk from a null cursor still has every non-null job ahead.
    """
    field = cursor.primary_field
    value = cursor.primary
    tie = {field: value, "_id": {_after(order.id_direction): cursor.key}}

    if value is None:
        if order.direction == ASCENDING:
            return {"$or": [{field: {"$ne": None}}, tie]}
        return tie

    ahead: List[Dict[str, Any]] = [{field: {_after(order.direction): value}}]
    if order.direction != ASCENDING:
        ahead.append({field: None})
    return {"$or": ahead + [tie]}


def plan_page(
    filter: Any = JobFilter.ALL,
    sort: Any = JobSort.POSTED_NEWEST,
    cursor: Optional[str] = None,
    limit: Any = DEFAULT_LIMIT,
) -> QuerySpec:
    """
    Build the query for one page. Pure: no I/O.

    Args:
        filter: JobFilter or its string value
        sort: JobSort or its string value
        cursor: Opaque token from a previous page. Undecodable tokens and
            tokens minted for another sort are ignored (first page).
        limit: Page size, a positive int

    Returns:
        QuerySpec for the page

    Raises:
        InvalidArgument: Unknown filter/sort or non-positive limit
    """
    job_filter = JobFilter.parse(filter)
    job_sort = JobSort.parse(sort)
    limit = _validate_limit(limit)
    order = SORT_ORDERS[job_sort]

    decoded = _resolve_cursor(cursor, job_sort)

    conditions: List[Dict[str, Any]] = []
    if decoded is not None:
        conditions.append(_range_predicate(decoded, order))
    conditions.extend(filter_conditions(job_filter))

    return QuerySpec(
        filter={"$and": conditions},
        sort=order.mongo_sort(),
        limit=limit,
        job_filter=job_filter,
        job_sort=job_sort,
        cursor=decoded,
    )


class QueryPlanner:
    """
    Fetches listing pages from a job repository.

    Stateless between calls: all pagination state travels in the cursor
    token held by the client, so concurrent sessions never interact.
    """

    def __init__(self, repository: JobRepositoryInterface):
        self._repository = repository

    def get_page(
        self,
        filter: Any = JobFilter.ALL,
        sort: Any = JobSort.POSTED_NEWEST,
        cursor: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
    ) -> Page:
        """
        Fetch one page of jobs.

        Raises:
            InvalidArgument: Before any query, for bad filter/sort/limit
            StoreUnavailable: If the repository query fails (not retried)
        """
        spec = plan_page(filter, sort, cursor, limit)

        documents = self._repository.find(spec.filter, sort=spec.sort, limit=spec.fetch_limit)

        has_next_page = len(documents) > spec.limit
        kept = documents[:spec.limit]

        next_cursor = None
        if has_next_page:
            next_cursor = encode_cursor(cursor_from_document(kept[-1], spec.job_sort))

        logger.debug(
            f"Fetched {len(kept)} jobs (filter={spec.job_filter.value}, sort={spec.job_sort.value}, "
            f"cursor={'yes' if spec.cursor else 'no'}, more={has_next_page})"
        )

        return Page(
            jobs=[JobRecord.from_document(doc) for doc in kept],
            next_cursor=next_cursor,
        )
