"""Pydantic models for records held in the store, keyed by the store's field names."""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UploadStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class TaskStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    CANCELLED = "Cancelled"


class TaskPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def coerce_reference(value: Any) -> Any:
    """
    Normalize a lookup value as the store returns or the caller passes it.

    Integers (or numeric strings) become {"Id": n}; empty values become None;
    resolved {"Id", "Name"} objects pass through unchanged.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("reference must be a record id")
    if isinstance(value, (int, str)):
        return {"Id": int(value)}
    return value


class Reference(BaseModel):
    """Resolved pointer to another record."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")
    name: Optional[str] = Field(default=None, alias="Name")


class StoreRecord(BaseModel):
    """
    Fields every record type carries.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")
    name: str = Field(default="", alias="Name")
    tags: str = Field(default="", alias="Tags")
    created_on: Optional[datetime] = Field(default=None, alias="CreatedOn")
    modified_on: Optional[datetime] = Field(default=None, alias="ModifiedOn")

    @field_validator("name", "tags", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> Any:
        return "" if value is None else value


class Upload(StoreRecord):
    """
    A file selected for upload and its lifecycle state.

    Progress is 0 while pending or in error, non-decreasing while uploading,
    and exactly 100 once completed.
    """
    size: int = Field(default=0, ge=0, alias="size_c")
    mime_type: str = Field(default="", alias="type_c")
    status: UploadStatus = Field(default=UploadStatus.PENDING, alias="status_c")
    progress: int = Field(default=0, ge=0, le=100, alias="progress_c")
    uploaded_at: Optional[datetime] = Field(default=None, alias="uploaded_at_c")
    url: Optional[str] = Field(default=None, alias="url_c")

    @field_validator("size", "progress", mode="before")
    @classmethod
    def _zero_when_missing(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("mime_type", mode="before")
    @classmethod
    def _blank_type(cls, value: Any) -> Any:
        return "" if value is None else value


class Task(StoreRecord):
    """A unit of work, loosely linked to an upload and an upload session."""
    description: str = Field(default="", alias="description_c")
    status: TaskStatus = Field(default=TaskStatus.NEW, alias="status_c")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, alias="priority_c")
    due_date: Optional[date] = Field(default=None, alias="due_date_c")
    assigned_to: Optional[Reference] = Field(default=None, alias="assigned_to_c")
    upload: Optional[Reference] = Field(default=None, alias="upload_c")
    upload_session: Optional[Reference] = Field(default=None, alias="upload_session_c")
    created_by: Optional[Reference] = Field(default=None, alias="CreatedBy")
    modified_by: Optional[Reference] = Field(default=None, alias="ModifiedBy")

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return TaskStatus.NEW if value in (None, "") else value

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: Any) -> Any:
        return TaskPriority.MEDIUM if value in (None, "") else value

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            return value.split("T")[0]
        return value

    @field_validator("assigned_to", "upload", "upload_session", "created_by", "modified_by", mode="before")
    @classmethod
    def _reference(cls, value: Any) -> Any:
        return coerce_reference(value)

    def matches_search(self, needle: str) -> bool:
        """Case-insensitive substring match on name, description and tags."""
        needle = needle.lower()
        return (
            needle in self.name.lower()
            or needle in self.description.lower()
            or needle in self.tags.lower()
        )


class UploadSession(StoreRecord):
    """A batch of uploads started together."""
    file_ids: List[int] = Field(default_factory=list, alias="files_c")
    total_size: int = Field(default=0, alias="total_size_c")
    started_at: Optional[datetime] = Field(default=None, alias="started_at_c")
    completed_at: Optional[datetime] = Field(default=None, alias="completed_at_c")

    @field_validator("file_ids", mode="before")
    @classmethod
    def _decode_file_ids(cls, value: Any) -> Any:
        if value in (None, ""):
            return []
        if isinstance(value, str):
            return json.loads(value)
        return value

    @field_validator("total_size", mode="before")
    @classmethod
    def _zero_total(cls, value: Any) -> Any:
        return 0 if value is None else value
