"""
Unit tests for src/pagination/keys.py

Tests the closed filter and sort sets and their Mongo translations.
"""

import pytest
from pymongo import ASCENDING, DESCENDING

from src.common.errors import InvalidArgument
from src.pagination.keys import SORT_ORDERS, JobFilter, JobSort, filter_conditions


class TestParse:
    """Tests for JobFilter.parse / JobSort.parse."""

    @pytest.mark.parametrize("value", ["all", "browse", "saved", "unread", "read", "archived"])
    def test_filter_values(self, value):
        assert JobFilter.parse(value).value == value

    @pytest.mark.parametrize("value", ["posted_newest", "posted_oldest", "company_az", "company_za"])
    def test_sort_values(self, value):
        assert JobSort.parse(value).value == value

    def test_enum_passes_through(self):
        assert JobSort.parse(JobSort.COMPANY_ZA) is JobSort.COMPANY_ZA

    @pytest.mark.parametrize("value", ["", "ALL", "starred", None, 3])
    def test_unknown_filter_rejected(self, value):
        with pytest.raises(InvalidArgument, match="Invalid filter"):
            JobFilter.parse(value)

    def test_unknown_sort_lists_choices(self):
        with pytest.raises(InvalidArgument) as exc_info:
            JobSort.parse("relevance")

        message = str(exc_info.value)
        assert "relevance" in message
        assert "posted_newest" in message
        assert "company_za" in message


class TestSortOrders:
    """Every sort is a total order ending in _id."""

    def test_every_sort_defined(self):
        assert set(SORT_ORDERS) == set(JobSort)

    @pytest.mark.parametrize("sort,expected", [
        (JobSort.POSTED_NEWEST, [("posted_at", DESCENDING), ("_id", DESCENDING)]),
        (JobSort.POSTED_OLDEST, [("posted_at", ASCENDING), ("_id", ASCENDING)]),
        (JobSort.COMPANY_AZ, [("company", ASCENDING), ("_id", DESCENDING)]),
        (JobSort.COMPANY_ZA, [("company", DESCENDING), ("_id", DESCENDING)]),
    ])
    def test_mongo_sort(self, sort, expected):
        assert SORT_ORDERS[sort].mongo_sort() == expected


class TestFilterConditions:
    """Tests for filter -> Mongo condition translation."""

    @pytest.mark.parametrize("job_filter,expected", [
        (JobFilter.ALL, [{"archived": {"$ne": True}}]),
        (JobFilter.BROWSE, [{"saved": {"$ne": True}}, {"archived": {"$ne": True}}]),
        (JobFilter.SAVED, [{"saved": True}, {"archived": {"$ne": True}}]),
        (JobFilter.UNREAD, [{"read": {"$ne": True}}, {"archived": {"$ne": True}}]),
        (JobFilter.READ, [{"read": True}, {"archived": {"$ne": True}}]),
        (JobFilter.ARCHIVED, [{"archived": True}]),
    ])
    def test_conditions(self, job_filter, expected):
        assert filter_conditions(job_filter) == expected

    def test_accepts_string(self):
        assert filter_conditions("saved") == filter_conditions(JobFilter.SAVED)

    def test_returns_fresh_list(self):
        """Callers append range predicates; that must not leak between calls."""
        first = filter_conditions(JobFilter.BROWSE)
        first.append({"injected": True})

        assert {"injected": True} not in filter_conditions(JobFilter.BROWSE)
