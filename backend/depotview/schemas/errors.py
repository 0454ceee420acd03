# backend/depotview/schemas/errors.py
"""
Pydantic schemas for error responses.

These schemas provide a consistent error format across all API endpoints.
Used by global exception handlers in main.py.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    Standard error response format.

    Every handled error, whatever its status code, is rendered with this
    body so the frontend needs a single parser.
    """

    error: str = Field(
        ...,
        description="Error type/code (e.g., 'ClientNotFoundError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Additional error context (optional)"
    )


class ValidationErrorDetail(BaseModel):
    """
    Validation error response format.

    Used for Pydantic request validation errors (422 responses).
    """

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="List of validation errors"
    )
