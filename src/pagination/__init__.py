"""
Cursor-based pagination for the jobs listing.

Public API:
- QueryPlanner: fetches pages from an injected job repository
- plan_page(): pure (filter, sort, cursor, limit) -> QuerySpec
- encode_cursor() / decode_cursor(): opaque token codec
- JobFilter, JobSort: the closed filter and sort sets
"""

from .cursor import CompanyCursor, Cursor, PostedCursor, decode_cursor, encode_cursor
from .keys import JobFilter, JobSort
from .planner import DEFAULT_LIMIT, Page, QueryPlanner, QuerySpec, plan_page

__all__ = [
    "QueryPlanner",
    "QuerySpec",
    "Page",
    "plan_page",
    "DEFAULT_LIMIT",
    "Cursor",
    "PostedCursor",
    "CompanyCursor",
    "encode_cursor",
    "decode_cursor",
    "JobFilter",
    "JobSort",
]
