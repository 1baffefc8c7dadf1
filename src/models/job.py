"""
Pydantic models for job documents and job API payloads.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class JobRecord(BaseModel):
    """
    A job posting as returned by the API.

    Only the fields pagination and the status flags depend on are declared.
    Everything else on the stored document (summary, salary, tools, ...) is
    carried through as extra fields untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    object_id: str = Field(..., alias="_id", description="Store identifier (ObjectId hex, or the stored string or integer _id).")
    id: Optional[str] = Field(None, description="Identifier from the ingestion source.")
    title: Optional[str] = None
    company: Optional[str] = None
    url: Optional[str] = None
    location: Optional[str] = None
    posted_at: Optional[datetime] = None
    saved: bool = False
    archived: bool = False
    read: bool = False
    applied_at: Optional[datetime] = Field(None, alias="appliedAt")

    @field_validator("object_id", "id", mode="before")
    @classmethod
    def _ids_as_strings(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("saved", "archived", "read", mode="before")
    @classmethod
    def _missing_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "JobRecord":
        """Validate a raw MongoDB document, stringifying any ObjectId values."""
        return cls.model_validate({
            key: str(value) if isinstance(value, ObjectId) else value
            for key, value in document.items()
        })

    def to_json(self) -> Dict[str, Any]:
        """JSON-safe dict using stored field names (_id, appliedAt)."""
        return self.model_dump(mode="json", by_alias=True)


class SavedUpdate(BaseModel):
    saved: StrictBool


class ArchivedUpdate(BaseModel):
    archived: StrictBool


class AppliedUpdate(BaseModel):
    applied: StrictBool


class ReadUpdate(BaseModel):
    read: StrictBool


class BulkArchiveRequest(BaseModel):
    """Archive every job currently matching a listing filter."""

    filter: str = "all"
