"""
Error Taxonomy and Exception Classes for hireguard

This module defines the closed error taxonomy shared by the classifier, the error
loggers and the retry handler, together with the exception classes raised by the
library itself.

The taxonomy follows two fixed lookup rules:
- Every classified failure maps to exactly one ErrorType
- Severity is a pure function of ErrorType (ERROR_SEVERITY_MAP), never set independently

Classes:
    ErrorType: Category of a classified failure
    ErrorSeverity: Coarse priority level driving log verbosity
    ApplicationError: Operational error tagged with an ErrorType and context
    ConfigurationError: Invalid or unsupported configuration
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """
    Error category classification for operational failures.

    Values equal the member names so a tag can be carried as plain text in
    JSON payloads and on foreign exception objects.
    """
    VALIDATION = "VALIDATION"
    NETWORK = "NETWORK"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    SERVER = "SERVER"
    CLIENT = "CLIENT"
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(str, Enum):
    """
    Error severity classification.

    Provides standardized severity levels enabling appropriate log levels and
    monitoring alerting thresholds.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


ERROR_SEVERITY_MAP: Dict[ErrorType, ErrorSeverity] = {
    ErrorType.VALIDATION: ErrorSeverity.LOW,
    ErrorType.NETWORK: ErrorSeverity.MEDIUM,
    ErrorType.AUTHENTICATION: ErrorSeverity.HIGH,
    ErrorType.AUTHORIZATION: ErrorSeverity.HIGH,
    ErrorType.SERVER: ErrorSeverity.MEDIUM,
    ErrorType.CLIENT: ErrorSeverity.LOW,
    ErrorType.UNKNOWN: ErrorSeverity.MEDIUM,
}


def coerce_error_type(value: Any) -> Optional[ErrorType]:
    """
    Convert an explicit type tag into an ErrorType.

    Accepts ErrorType members and their names in any letter case. Returns None
    for anything outside the taxonomy.
    """
    if isinstance(value, ErrorType):
        return value
    if isinstance(value, str):
        try:
            return ErrorType(value.strip().upper())
        except ValueError:
            return None
    return None


class ApplicationError(Exception):
    """
    Operational error tagged with an ErrorType.

    Raised by API-calling code that wants the classifier to skip heuristics:
    the explicit ``type`` attribute is honoured verbatim, ``user_message``
    short-circuits canned message resolution and ``status_code`` participates
    in HTTP status classification.

    Attributes:
        message (str): Developer-facing error message
        type (ErrorType): Explicit classification tag
        user_message (Optional[str]): Message safe to show to end users
        code (Optional[str]): Machine-readable error code
        status_code (Optional[int]): HTTP status associated with the failure
        context (Dict[str, Any]): Error context captured at creation
        timestamp (datetime): Error occurrence timestamp

    Example:
        raise ApplicationError("Profile service unavailable",
                               error_type=ErrorType.SERVER,
                               status_code=503)
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNKNOWN,
        user_message: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = coerce_error_type(error_type) or ErrorType.UNKNOWN
        self.user_message = user_message
        self.code = code
        self.status_code = status_code
        self.context = dict(context or {})
        self.timestamp = datetime.now(timezone.utc)

    @property
    def severity(self) -> ErrorSeverity:
        return ERROR_SEVERITY_MAP[self.type]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for JSON responses and structured logs."""
        return {
            'message': self.message,
            'type': self.type.value,
            'severity': self.severity.value,
            'user_message': self.user_message,
            'code': self.code,
            'status_code': self.status_code,
            'context': self.context,
            'timestamp': self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, type={self.type.value})"


class ConfigurationError(Exception):
    """Raised when settings are missing, malformed or unsupported."""


__all__ = [
    'ErrorType',
    'ErrorSeverity',
    'ERROR_SEVERITY_MAP',
    'coerce_error_type',
    'ApplicationError',
    'ConfigurationError',
]
