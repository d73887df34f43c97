"""
velada/schemas/common.py
Response envelope shared by every JSON endpoint

{
    "success": bool,
    "data": ...,        (on success)
    "error": str,       (on failure)
    "message": str,
    "code": str         (on failure)
}
"""
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


class PaginationMetaSchema(BaseModel):
    total: int
    limit: int
    offset: int
    page: int
    total_pages: int


class PaginatedData(BaseModel, Generic[T]):
    items: List[T]
    pagination: PaginationMetaSchema


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    """Build the success envelope as a plain dict."""
    content = {"success": True, "data": data}
    if message:
        content["message"] = message
    return content
