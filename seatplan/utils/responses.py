"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import status
from fastapi.responses import JSONResponse

from seatplan.schemas.common import ErrorResponse

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = status.HTTP_400_BAD_REQUEST
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def validation_error(message: str) -> JSONResponse:
    """Payload rejected before anything was stored"""
    return error_response(message, error_code="invalid_payload")

def not_found_error(resource: str = "Resource") -> JSONResponse:
    """Create not found error"""
    return error_response(
        f"{resource} not found",
        error_code="not_found",
        status_code=status.HTTP_404_NOT_FOUND
    )

def storage_error(message: str, exc: Exception) -> JSONResponse:
    """Storage failure surfaced to the client"""
    return error_response(
        message,
        error_code="storage_error",
        details=str(exc),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
