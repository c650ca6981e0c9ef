"""
Response envelope shared by every route.

Every body has the shape `{success, message?, data?, errors?}`.
Error envelopes are produced by the centralized error handlers.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Uniform response wrapper.

    Attributes:
        success: False only for error responses.
        message: Optional human-readable summary.
        data: The payload of a successful response.
        errors: Validation or failure details.
    """

    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None
    errors: Optional[list[str]] = None


class ErrorEnvelope(BaseModel):
    """Body of every error response."""

    success: bool = False
    message: str
    errors: Optional[list[str]] = None


def ok(data: Any = None, message: Optional[str] = None) -> dict[str, Any]:
    """Build a success envelope."""
    return {"success": True, "message": message, "data": data}


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope, "description": "Validation or business rule error"},
    401: {"model": ErrorEnvelope, "description": "Missing or expired credentials"},
    403: {"model": ErrorEnvelope, "description": "Invalid token or insufficient role"},
    404: {"model": ErrorEnvelope, "description": "Resource not found"},
}
