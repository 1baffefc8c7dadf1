"""
Opaque pagination cursors.

A cursor marks where the previous page stopped: the last job's sort-key
value, its _id, and the sort order it was minted under. Each sort family has
its own cursor type carrying only the field its comparator reads, so a
company cursor can never be applied to a date order.

Tokens are compact JSON in URL-safe base64 without padding. They are not
signed: the filter is re-applied on every request, so a tampered token can
only move the caller to a different position in data it could read anyway.

Job _ids are usually ObjectIds, but string and integer _ids are carried too.
The id's type travels in the token ("idType", omitted for ObjectIds) so the
range predicate compares against the same BSON type the collection stores.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Union

from bson import ObjectId

from src.common.errors import MalformedCursor, SortMismatch
from src.pagination.keys import JobSort

# Real tokens are a few hundred characters at most
MAX_TOKEN_LENGTH = 4096

ID_OBJECT_ID = "oid"
ID_STRING = "str"
ID_INTEGER = "int"


def _is_integer_text(text: str) -> bool:
    try:
        return str(int(text)) == text
    except ValueError:
        return False


class _CursorBase:
    @property
    def key(self) -> Union[ObjectId, str, int]:
        """The _id value as stored, for comparison in the range predicate."""
        if self.id_type == ID_STRING:
            return self.id
        if self.id_type == ID_INTEGER:
            return int(self.id)
        return ObjectId(self.id)


@dataclass(frozen=True)
class PostedCursor(_CursorBase):
    """Continuation point for the posted_at orders."""
    sort: JobSort
    posted_at: Optional[datetime]
    id: str
    id_type: str = ID_OBJECT_ID

    primary_field: ClassVar[str] = "posted_at"
    sorts: ClassVar[Tuple[JobSort, ...]] = (JobSort.POSTED_NEWEST, JobSort.POSTED_OLDEST)

    @property
    def primary(self) -> Optional[datetime]:
        return self.posted_at


@dataclass(frozen=True)
class CompanyCursor(_CursorBase):
    """Continuation point for the company name orders."""
    sort: JobSort
    company: Optional[str]
    id: str
    id_type: str = ID_OBJECT_ID

    primary_field: ClassVar[str] = "company"
    sorts: ClassVar[Tuple[JobSort, ...]] = (JobSort.COMPANY_AZ, JobSort.COMPANY_ZA)

    @property
    def primary(self) -> Optional[str]:
        return self.company


Cursor = Union[PostedCursor, CompanyCursor]


def _cursor_type(sort: JobSort):
    return PostedCursor if sort in PostedCursor.sorts else CompanyCursor


def _id_parts(value: Any) -> Tuple[str, str]:
    if isinstance(value, ObjectId):
        return str(value), ID_OBJECT_ID
    if isinstance(value, bool):
        raise TypeError(f"Cannot build a cursor from a boolean _id: {value!r}")
    if isinstance(value, int):
        return str(value), ID_INTEGER
    if isinstance(value, str):
        return value, ID_STRING
    raise TypeError(f"Cannot build a cursor from _id of type {type(value).__name__}")


def cursor_from_document(document: Mapping[str, Any], sort: JobSort) -> Cursor:
    """
    Build the cursor pointing at a stored job document under a sort.

    Raises:
        TypeError: The document's _id is not an ObjectId, string or integer
    """
    sort = JobSort(sort)
    cursor_type = _cursor_type(sort)
    job_id, id_type = _id_parts(document["_id"])
    return cursor_type(sort, document.get(cursor_type.primary_field), job_id, id_type)


def encode_cursor(cursor: Cursor) -> str:
    """Serialize a cursor to an opaque, query-string safe token."""
    payload: Dict[str, Any] = {"sort": JobSort(cursor.sort).value, "id": cursor.id}
    if cursor.id_type != ID_OBJECT_ID:
        payload["idType"] = cursor.id_type
    if isinstance(cursor, PostedCursor):
        payload["posted_at"] = cursor.posted_at.isoformat() if cursor.posted_at else None
    else:
        payload["company"] = cursor.company

    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _read_payload(token: str) -> Dict[str, Any]:
    if not isinstance(token, str) or not token:
        raise MalformedCursor("Cursor token is empty")
    if len(token) > MAX_TOKEN_LENGTH:
        raise MalformedCursor(f"Cursor token is too long ({len(token)} characters)")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError, RecursionError) as e:
        raise MalformedCursor(f"Cursor token could not be decoded: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedCursor("Cursor payload is not an object")
    return payload


def _read_id(payload: Dict[str, Any]) -> Tuple[str, str]:
    job_id = payload.get("id")
    id_type = payload.get("idType", ID_OBJECT_ID)

    if not isinstance(job_id, str):
        raise MalformedCursor(f"Invalid cursor id: {job_id!r}")
    if id_type == ID_OBJECT_ID:
        valid = ObjectId.is_valid(job_id)
    elif id_type == ID_INTEGER:
        valid = _is_integer_text(job_id)
    else:
        valid = id_type == ID_STRING
    if not valid:
        raise MalformedCursor(f"Invalid cursor id: {job_id!r} ({id_type!r})")
    return job_id, id_type


def decode_cursor(token: str, expected_sort: Optional[JobSort] = None) -> Cursor:
    """
    Deserialize a token produced by encode_cursor().

    Args:
        token: Opaque cursor token from a previous page
        expected_sort: Sort the caller is paginating; a cursor minted under
            any other sort is rejected

    Returns:
        PostedCursor or CompanyCursor

    Raises:
        MalformedCursor: Token is not a well-formed cursor
        SortMismatch: Token is well formed but belongs to another sort
    """
    payload = _read_payload(token)

    try:
        sort = JobSort(payload.get("sort"))
    except ValueError:
        raise MalformedCursor(f"Unknown cursor sort: {payload.get('sort')!r}") from None

    job_id, id_type = _read_id(payload)

    cursor_type = _cursor_type(sort)
    if cursor_type.primary_field not in payload:
        raise MalformedCursor(f"Cursor is missing '{cursor_type.primary_field}'")

    value = payload[cursor_type.primary_field]
    if value is not None and not isinstance(value, str):
        raise MalformedCursor(f"Invalid cursor value: {value!r}")

    if cursor_type is PostedCursor and value is not None:
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            raise MalformedCursor(f"Invalid cursor timestamp: {value!r}") from None

    if expected_sort is not None and sort != expected_sort:
        raise SortMismatch(sort.value, JobSort(expected_sort).value)

    return cursor_type(sort, value, job_id, id_type)
