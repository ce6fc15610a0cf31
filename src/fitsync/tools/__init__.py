"""MCP tool definitions."""

from datetime import datetime, timezone
from typing import Any

from fitsync.exceptions import ApplicationError

__all__ = ["create_error_response", "error_from_exception"]


def create_error_response(
    message: str,
    error_type: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create standardized error response for MCP tools.

    Args:
        message: User-friendly error message
        error_type: Error type name (e.g., ValidationError, ConflictError)
        details: Optional additional details

    Returns:
        Structured error response dictionary
    """
    response = {
        "error": True,
        "message": message,
        "error_type": error_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        response["details"] = details
    return response


def error_from_exception(error: Exception) -> dict[str, Any]:
    """Convert the error carried by a failed Result into a tool response."""
    if isinstance(error, ApplicationError):
        details = {k: v for k, v in error.to_dict().items() if k != "message"}
        return create_error_response(error.message, type(error).__name__, details or None)
    return create_error_response(str(error), type(error).__name__)
