"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | list[Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail


def error_body(code: str, message: str, detail: dict[str, Any] | list[Any] | None = None) -> dict[str, Any]:
    """Build the structured error payload as a plain dict."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump()
