"""
Response envelope and the camelCase schema base.

Every JSON body the API returns has the same four keys:

    {"success": true,  "data": {...}, "error": null,  "metadata": {...}}
    {"success": false, "data": null,  "error": {...}, "metadata": {...}}

Envelope keys stay snake_case (`request_id`); resource fields inside `data`
are camelCase.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notelens.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Resource schema: dumps `folder_id` as `folderId`, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Machine-readable `code` (e.g. RES_NOT_FOUND), human `message`, optional context."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response wrapping `data`."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Failed response; built only by the exception handlers."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
