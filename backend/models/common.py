"""
Common response models.

Error schema shared by all routers.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned with every 4xx/5xx response."""

    detail: str = Field(description="Error message")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Caller does not own the resource"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
}
