"""Pydantic schemas for record store requests and responses."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldName(BaseModel):
    """Name of a single field in a field selection."""
    Name: str


class FieldSpec(BaseModel):
    """One entry of a field allow-list, serialized as {"field": {"Name": ...}}."""
    field: FieldName

    @classmethod
    def of(cls, name: str) -> "FieldSpec":
        return cls(field=FieldName(Name=name))


class WhereCondition(BaseModel):
    """Server-side filter on a single field."""
    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(alias="FieldName")
    operator: str = Field(default="ExactMatch", alias="Operator")
    values: List[Any] = Field(alias="Values")


class OrderBy(BaseModel):
    """Sort instruction."""
    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(alias="fieldName")
    sort_type: str = Field(default="DESC", alias="sorttype")


class PagingInfo(BaseModel):
    """Page window for fetch requests."""
    limit: int
    offset: int = 0


class FetchParams(BaseModel):
    """Request body for fetch and get-by-id calls."""
    model_config = ConfigDict(populate_by_name=True)

    fields: List[FieldSpec]
    where: Optional[List[WhereCondition]] = None
    order_by: Optional[List[OrderBy]] = Field(default=None, alias="orderBy")
    paging_info: Optional[PagingInfo] = Field(default=None, alias="pagingInfo")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FieldError(BaseModel):
    """Per-field error attached to a failed record result."""
    model_config = ConfigDict(populate_by_name=True)

    field_label: Optional[str] = Field(default=None, alias="fieldLabel")
    message: Optional[str] = None

    def __str__(self) -> str:
        if self.field_label:
            return f"{self.field_label}: {self.message or 'invalid value'}"
        return self.message or "invalid value"


class RecordResult(BaseModel):
    """Outcome of one record in a create/update/delete batch."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    errors: List[FieldError] = []
    message: Optional[str] = None


class MutationResponse(BaseModel):
    """Response model for create, update and delete calls."""
    success: bool
    message: Optional[str] = None
    results: Optional[List[RecordResult]] = None


class FetchResponse(BaseModel):
    """Response model for fetch calls."""
    data: Optional[List[Dict[str, Any]]] = None


class RecordResponse(BaseModel):
    """Response model for get-by-id calls."""
    data: Optional[Dict[str, Any]] = None
