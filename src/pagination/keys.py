"""
Sort orders and filters for the jobs listing.

Both sets are closed. Values outside them raise InvalidArgument instead of
falling back to a default, so a typo in a query string is a 400, not a
silently different listing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple, Type, TypeVar

from pymongo import ASCENDING, DESCENDING

from src.common.errors import InvalidArgument

E = TypeVar("E", bound=Enum)


def _parse_choice(enum_cls: Type[E], value: Any, label: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidArgument(
            f"Invalid {label} '{value}'. Must be one of: {choices}"
        ) from None


class JobSort(str, Enum):
    """Total orders over jobs. Every order is tie-broken by _id."""
    POSTED_NEWEST = "posted_newest"
    POSTED_OLDEST = "posted_oldest"
    COMPANY_AZ = "company_az"
    COMPANY_ZA = "company_za"

    @classmethod
    def parse(cls, value: Any) -> "JobSort":
        return _parse_choice(cls, value, "sort")


class JobFilter(str, Enum):
    """Status filters. Only ARCHIVED returns archived jobs."""
    ALL = "all"
    BROWSE = "browse"
    SAVED = "saved"
    UNREAD = "unread"
    READ = "read"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, value: Any) -> "JobFilter":
        return _parse_choice(cls, value, "filter")


@dataclass(frozen=True)
class SortOrder:
    """Primary sort field plus direction, with _id as the tie-break."""
    field: str
    direction: int
    id_direction: int

    def mongo_sort(self) -> List[Tuple[str, int]]:
        return [(self.field, self.direction), ("_id", self.id_direction)]


SORT_ORDERS: Dict[JobSort, SortOrder] = {
    JobSort.POSTED_NEWEST: SortOrder("posted_at", DESCENDING, DESCENDING),
    JobSort.POSTED_OLDEST: SortOrder("posted_at", ASCENDING, ASCENDING),
    JobSort.COMPANY_AZ: SortOrder("company", ASCENDING, DESCENDING),
    JobSort.COMPANY_ZA: SortOrder("company", DESCENDING, DESCENDING),
}


def _flag_set(name: str) -> Dict[str, Any]:
    return {name: True}


def _flag_unset(name: str) -> Dict[str, Any]:
    # $ne also matches documents where the field is missing (older records).
    return {name: {"$ne": True}}


def filter_conditions(job_filter: JobFilter) -> List[Dict[str, Any]]:
    """
    Build the Mongo conditions for a filter, to be combined with $and.

    Args:
        job_filter: Filter to translate

    Returns:
        Fresh list of condition documents (safe to mutate)
    """
    job_filter = JobFilter.parse(job_filter)

    if job_filter == JobFilter.ARCHIVED:
        return [_flag_set("archived")]

    conditions = {
        JobFilter.ALL: [],
        JobFilter.BROWSE: [_flag_unset("saved")],
        JobFilter.SAVED: [_flag_set("saved")],
        JobFilter.UNREAD: [_flag_unset("read")],
        JobFilter.READ: [_flag_set("read")],
    }[job_filter]
    conditions.append(_flag_unset("archived"))
    return conditions
