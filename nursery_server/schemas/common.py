from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """Generic API response"""
    success: bool = Field(description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Payload")
    message: Optional[str] = Field(None, description="Message")


class ErrorResponse(BaseModel):
    """Error response"""
    success: bool = Field(False, description="Request failed")
    message: str = Field(description="Error message")
    error_code: str = Field(description="Error code")
    details: Dict[str, Any] = Field(default_factory=dict, description="Error details")

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": False,
                "message": "Duplicate slot detected: MONDAY from 09:00 to 09:30",
                "error_code": "DUPLICATE_ENTRY",
                "details": {"day": "MONDAY", "index": 2},
            }
        }
    }


class PaginationInfo(BaseModel):
    """Pagination info"""
    total: int
    page: int
    page_size: int
    total_pages: int


class PaginatedData(BaseModel, Generic[T]):
    """Paginated payload"""
    items: List[T]
    pagination: PaginationInfo
    meta: Optional[Dict[str, Any]] = None
