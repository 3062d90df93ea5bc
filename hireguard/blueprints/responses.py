"""
Standard JSON response envelopes shared by every blueprint.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import jsonify
from pydantic import BaseModel, Field

from hireguard.monitoring.logging import get_correlation_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class APIResponse(BaseModel):
    """Standard API response model."""
    success: bool = Field(description="Operation success status")
    message: str = Field(description="Response message")
    data: Optional[Any] = Field(default=None, description="Response data")
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Response metadata")
    timestamp: datetime = Field(default_factory=_utc_now)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    success: bool = False
    message: str = Field(description="Error message")
    error_code: Optional[str] = Field(default=None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Error details")
    errors: Optional[List[str]] = Field(default=None, description="Error messages")
    timestamp: datetime = Field(default_factory=_utc_now)
    correlation_id: Optional[str] = Field(default=None, description="Request correlation id")


def format_api_response(data=None, message="Operation completed successfully",
                        status_code=200, meta=None):
    """Format standardized API response."""
    response = APIResponse(
        success=status_code < 400,
        message=message,
        data=data,
        meta=meta,
    )
    return jsonify(response.model_dump(mode='json')), status_code


def format_error_response(message, error_code=None, details=None, status_code=400, errors=None):
    """Format standardized error response."""
    error_response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details,
        errors=errors,
        correlation_id=get_correlation_id(),
    )
    return jsonify(error_response.model_dump(mode='json')), status_code


__all__ = [
    'APIResponse',
    'ErrorResponse',
    'format_api_response',
    'format_error_response',
]
