"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints."""

    message: str


class ErrorResponse(BaseModel):
    """Error body; every non-2xx response uses this shape."""

    error: str
