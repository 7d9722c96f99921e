"""Create and partial-update payloads for store records."""

from datetime import date, datetime
from typing import Any, Dict, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from controller.models.records import (
    Reference,
    StoreRecord,
    TaskPriority,
    TaskStatus,
    UploadStatus,
)

RecordT = TypeVar("RecordT", bound=StoreRecord)

REFERENCE_FIELDS = ("assigned_to", "upload", "upload_session")


def _reference_id(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, Reference):
        return value.id
    if isinstance(value, dict):
        return value.get("Id")
    return value


class RecordPatch(BaseModel):
    """
    Base class for partial updates.

    Only fields that were explicitly given (including an explicit None, which
    clears the value) are sent to the store and merged into cached records.
    """
    model_config = ConfigDict(populate_by_name=True)

    def to_fields(self) -> Dict[str, Any]:
        """Explicitly-set fields keyed by store field name, JSON-ready."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def local_updates(self) -> Dict[str, Any]:
        """Explicitly-set fields keyed by model attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def is_empty(self) -> bool:
        return not self.model_fields_set

    def apply_to(self, record: RecordT) -> RecordT:
        return record.model_copy(update=self.local_updates())


class UploadDraft(BaseModel):
    """Fields for a new upload record."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    tags: str = Field(default="", alias="Tags")
    size: int = Field(ge=0, alias="size_c")
    mime_type: str = Field(alias="type_c")
    status: UploadStatus = Field(default=UploadStatus.PENDING, alias="status_c")
    progress: int = Field(default=0, ge=0, le=100, alias="progress_c")
    uploaded_at: Optional[datetime] = Field(default=None, alias="uploaded_at_c")
    url: Optional[str] = Field(default=None, alias="url_c")

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class UploadPatch(RecordPatch):
    name: Optional[str] = Field(default=None, alias="Name")
    tags: Optional[str] = Field(default=None, alias="Tags")
    size: Optional[int] = Field(default=None, ge=0, alias="size_c")
    mime_type: Optional[str] = Field(default=None, alias="type_c")
    status: Optional[UploadStatus] = Field(default=None, alias="status_c")
    progress: Optional[int] = Field(default=None, ge=0, le=100, alias="progress_c")
    uploaded_at: Optional[datetime] = Field(default=None, alias="uploaded_at_c")
    url: Optional[str] = Field(default=None, alias="url_c")


class TaskDraft(BaseModel):
    """Fields for a new task; status and priority default to New and Medium."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    tags: str = Field(default="", alias="Tags")
    description: str = Field(default="", alias="description_c")
    status: TaskStatus = Field(default=TaskStatus.NEW, alias="status_c")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, alias="priority_c")
    due_date: Optional[date] = Field(default=None, alias="due_date_c")
    assigned_to: Optional[int] = Field(default=None, alias="assigned_to_c")
    upload: Optional[int] = Field(default=None, alias="upload_c")
    upload_session: Optional[int] = Field(default=None, alias="upload_session_c")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator(*REFERENCE_FIELDS, mode="before")
    @classmethod
    def _reference(cls, value: Any) -> Any:
        return _reference_id(value)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TaskPatch(RecordPatch):
    name: Optional[str] = Field(default=None, alias="Name")
    tags: Optional[str] = Field(default=None, alias="Tags")
    description: Optional[str] = Field(default=None, alias="description_c")
    status: Optional[TaskStatus] = Field(default=None, alias="status_c")
    priority: Optional[TaskPriority] = Field(default=None, alias="priority_c")
    due_date: Optional[date] = Field(default=None, alias="due_date_c")
    assigned_to: Optional[int] = Field(default=None, alias="assigned_to_c")
    upload: Optional[int] = Field(default=None, alias="upload_c")
    upload_session: Optional[int] = Field(default=None, alias="upload_session_c")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator(*REFERENCE_FIELDS, mode="before")
    @classmethod
    def _reference(cls, value: Any) -> Any:
        return _reference_id(value)

    def local_updates(self) -> Dict[str, Any]:
        updates = super().local_updates()
        for name in REFERENCE_FIELDS:
            if name in updates and updates[name] is not None:
                updates[name] = Reference(id=updates[name])
        return updates
