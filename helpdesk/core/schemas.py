"""Response envelope shared by every endpoint.

Success:  {"success": true, "data": {...}, "error": null}
Failure:  {"success": false, "error": {"code": "INVALID_TICKET", "message": "...",
           "details": null}}
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    error: dict[str, Any] | None = None


class EmptyData(BaseModel):
    """Payload of operations that only report success."""


class ErrorDetail(BaseModel):
    code: str = Field(..., description="ErrorKind value or another machine-readable code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(None, description="Offending field and similar context")


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail


def success_response(data: T) -> ApiResponse[T]:
    return ApiResponse(success=True, data=data)
