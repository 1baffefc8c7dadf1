"""
Unit tests for src/pagination/cursor.py

Tests opaque cursor tokens:
- Round trips for both cursor families, including null sort values
- Tokens are URL safe
- Malformed tokens raise MalformedCursor
- Tokens minted for another sort raise SortMismatch
"""

import base64
import json
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from src.common.errors import CursorError, MalformedCursor, SortMismatch
from src.pagination.cursor import (
    CompanyCursor,
    PostedCursor,
    cursor_from_document,
    decode_cursor,
    encode_cursor,
)
from src.pagination.keys import JobSort


def _token(payload) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


OID = str(ObjectId())


class TestRoundTrip:
    """Tests that decode(encode(c)) == c."""

    @pytest.mark.parametrize("sort", [JobSort.POSTED_NEWEST, JobSort.POSTED_OLDEST])
    def test_posted_cursor(self, sort):
        cursor = PostedCursor(sort, datetime(2025, 3, 4, 5, 6, 7, 890000), OID)

        assert decode_cursor(encode_cursor(cursor)) == cursor

    def test_posted_cursor_timezone_aware(self):
        cursor = PostedCursor(JobSort.POSTED_NEWEST, datetime(2025, 3, 4, 5, 6, tzinfo=timezone.utc), OID)

        decoded = decode_cursor(encode_cursor(cursor))

        assert decoded.posted_at == cursor.posted_at
        assert decoded.posted_at.tzinfo is not None

    @pytest.mark.parametrize("sort", [JobSort.COMPANY_AZ, JobSort.COMPANY_ZA])
    def test_company_cursor(self, sort):
        cursor = CompanyCursor(sort, "Zürich Insurance & Co.", OID)

        assert decode_cursor(encode_cursor(cursor)) == cursor

    def test_null_primary_values(self):
        """Jobs without posted_at or company still produce usable cursors."""
        posted = PostedCursor(JobSort.POSTED_NEWEST, None, OID)
        company = CompanyCursor(JobSort.COMPANY_AZ, None, OID)

        assert decode_cursor(encode_cursor(posted)) == posted
        assert decode_cursor(encode_cursor(company)) == company

    def test_token_is_url_safe(self):
        """Tokens go straight into a query string."""
        cursor = CompanyCursor(JobSort.COMPANY_ZA, "??>>~~ÿÿ" * 5, OID)

        token = encode_cursor(cursor)

        assert token.isascii()
        assert not set(token) & {"+", "/", "=", "&", "?"}

    @pytest.mark.parametrize("job_id,id_type,key", [
        ("job-0042", "str", "job-0042"),
        ("0123456789abcdef01234567", "str", "0123456789abcdef01234567"),
        ("42", "int", 42),
        ("-7", "int", -7),
    ])
    def test_non_object_ids(self, job_id, id_type, key):
        """String and integer _ids survive the round trip with their type."""
        cursor = PostedCursor(JobSort.POSTED_NEWEST, datetime(2025, 1, 1), job_id, id_type)

        decoded = decode_cursor(encode_cursor(cursor))

        assert decoded == cursor
        assert decoded.key == key
        assert type(decoded.key) is type(key)

    def test_object_id_key(self):
        assert PostedCursor(JobSort.POSTED_NEWEST, None, OID).key == ObjectId(OID)

    def test_expected_sort_matching_is_accepted(self):
        cursor = PostedCursor(JobSort.POSTED_OLDEST, datetime(2025, 1, 1), OID)

        assert decode_cursor(encode_cursor(cursor), expected_sort=JobSort.POSTED_OLDEST) == cursor


class TestMalformed:
    """Tests that undecodable tokens raise MalformedCursor."""

    @pytest.mark.parametrize("token", [
        "",
        "!!!not base64!!!",
        "abc",
        base64.urlsafe_b64encode(b"not json").decode().rstrip("="),
        base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode().rstrip("="),
        _token([1, 2, 3]),
        _token("just a string"),
        _token({"sort": "relevance", "id": OID, "posted_at": None}),
        _token({"id": OID, "posted_at": None}),
        _token({"sort": "posted_newest", "id": "not-an-object-id", "posted_at": None}),
        _token({"sort": "posted_newest", "id": 12345, "posted_at": None}),
        _token({"sort": "posted_newest", "id": OID}),
        _token({"sort": "company_az", "id": OID, "posted_at": None}),
        _token({"sort": "posted_newest", "id": OID, "posted_at": "yesterday"}),
        _token({"sort": "posted_newest", "id": OID, "posted_at": 1700000000}),
        _token({"sort": "company_az", "id": OID, "company": ["Acme"]}),
        _token({"sort": "posted_newest", "id": "job-7", "idType": "uuid", "posted_at": None}),
        _token({"sort": "posted_newest", "id": "seven", "idType": "int", "posted_at": None}),
        _token({"sort": "posted_newest", "id": "007", "idType": "int", "posted_at": None}),
    ])
    def test_raises_malformed(self, token):
        with pytest.raises(MalformedCursor):
            decode_cursor(token)

    def test_truncated_token(self):
        token = encode_cursor(PostedCursor(JobSort.POSTED_NEWEST, datetime(2025, 1, 1), OID))

        with pytest.raises(MalformedCursor):
            decode_cursor(token[: len(token) // 2])

    def test_deeply_nested_payload(self):
        token = base64.urlsafe_b64encode(b"[" * 3000).decode("ascii").rstrip("=")

        with pytest.raises(MalformedCursor):
            decode_cursor(token)

    def test_oversized_token(self):
        cursor = CompanyCursor(JobSort.COMPANY_AZ, "A" * 5000, OID)

        with pytest.raises(MalformedCursor, match="too long"):
            decode_cursor(encode_cursor(cursor))

    def test_malformed_is_cursor_error(self):
        with pytest.raises(CursorError):
            decode_cursor("%%%")


class TestSortMismatch:
    """Tests that a cursor only continues the sort it was minted under."""

    def test_other_family(self):
        token = encode_cursor(PostedCursor(JobSort.POSTED_NEWEST, datetime(2025, 1, 1), OID))

        with pytest.raises(SortMismatch) as exc_info:
            decode_cursor(token, expected_sort=JobSort.COMPANY_AZ)

        assert exc_info.value.cursor_sort == "posted_newest"
        assert exc_info.value.requested_sort == "company_az"

    def test_same_family_other_direction(self):
        """posted_newest and posted_oldest cursors are not interchangeable."""
        token = encode_cursor(CompanyCursor(JobSort.COMPANY_AZ, "Acme", OID))

        with pytest.raises(SortMismatch):
            decode_cursor(token, expected_sort=JobSort.COMPANY_ZA)

    def test_no_expected_sort_skips_check(self):
        token = encode_cursor(CompanyCursor(JobSort.COMPANY_ZA, "Acme", OID))

        assert decode_cursor(token).sort == JobSort.COMPANY_ZA


class TestCursorFromDocument:
    """Tests for building cursors from stored job documents."""

    def test_posted_sort(self):
        oid = ObjectId()
        posted_at = datetime(2025, 2, 2, 10, 0)
        document = {"_id": oid, "posted_at": posted_at, "company": "Acme"}

        cursor = cursor_from_document(document, JobSort.POSTED_NEWEST)

        assert cursor == PostedCursor(JobSort.POSTED_NEWEST, posted_at, str(oid))

    def test_company_sort(self):
        oid = ObjectId()
        document = {"_id": oid, "posted_at": datetime(2025, 2, 2), "company": "Acme"}

        cursor = cursor_from_document(document, "company_za")

        assert cursor == CompanyCursor(JobSort.COMPANY_ZA, "Acme", str(oid))

    def test_missing_field_gives_null_primary(self):
        oid = ObjectId()

        cursor = cursor_from_document({"_id": oid}, JobSort.COMPANY_AZ)

        assert cursor.primary is None
        assert cursor.id == str(oid)

    def test_string_id(self):
        cursor = cursor_from_document({"_id": "job-003", "company": "Acme"}, JobSort.COMPANY_AZ)

        assert cursor == CompanyCursor(JobSort.COMPANY_AZ, "Acme", "job-003", "str")
        assert decode_cursor(encode_cursor(cursor)).key == "job-003"

    def test_integer_id(self):
        cursor = cursor_from_document({"_id": 17, "posted_at": None}, JobSort.POSTED_OLDEST)

        assert cursor.key == 17
        assert decode_cursor(encode_cursor(cursor)).key == 17

    @pytest.mark.parametrize("job_id", [True, 1.5, {"a": 1}])
    def test_unsupported_id_type(self, job_id):
        with pytest.raises(TypeError):
            cursor_from_document({"_id": job_id}, JobSort.POSTED_NEWEST)
