from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict, List

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    success: bool = Field(True, description="Always true for successful responses.")
    message: str = Field(..., description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")

class FieldError(BaseModel):
    field: str = Field(..., description="Dotted location of the offending input")
    message: str = Field(..., description="Why the value was rejected")

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Error code for client handling")
    errors: Optional[List[FieldError]] = Field(None, description="Per-field validation errors")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    timestamp: str = Field(..., description="ISO 8601 timestamp of error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Unique request identifier for debugging")
