"""
Error classification for API-calling code.

Maps an arbitrary caught failure (an httpx or requests exception, an
ApplicationError, a foreign exception, or a decoded JSON error body) onto the
closed ErrorType taxonomy, derives severity from the type, resolves a user-facing
message and packages everything as an ErrorInfo for the error loggers.

Resolution order for determine_error_type (first match wins):
    1. HTTP status code found on the failure, looked up in HTTP_STATUS_ERROR_MAP
    2. transport-level failure with no response at all -> NETWORK
    3. explicit ``type`` tag -> that type
    4. lower-cased message containing 'validation' / 'network'
    5. UNKNOWN

Classification is total and idempotent: every input maps to exactly one
ErrorType, and classifying the same input twice gives the same answer.
"""

import platform
import traceback
from typing import Any, Dict, Mapping, Optional, Union

import httpx
import requests

from hireguard import __version__
from hireguard.business.exceptions import (
    ERROR_SEVERITY_MAP,
    ApplicationError,
    ErrorSeverity,
    ErrorType,
    coerce_error_type,
)
from hireguard.business.models import ErrorContext, ErrorInfo

ContextInput = Optional[Union[ErrorContext, Mapping[str, Any]]]

DEFAULT_USER_AGENT = f"hireguard/{__version__} (python {platform.python_version()})"

ERROR_MESSAGES: Dict[str, str] = {
    # Profile management errors
    'PROFILE_FETCH_FAILED': 'Failed to load profile information',
    'PROFILE_UPDATE_FAILED': 'Failed to update profile',
    'PROFILE_PICTURE_UPLOAD_FAILED': 'Failed to upload profile picture',
    'PROFILE_VALIDATION_FAILED': 'Profile validation failed',

    # Network errors
    'NETWORK_ERROR': 'Network connection error. Please check your internet connection.',
    'TIMEOUT_ERROR': 'Request timed out. Please try again.',
    'SERVER_ERROR': 'Server error. Please try again later.',

    # Authentication errors
    'UNAUTHORIZED': 'You are not authorized to perform this action.',
    'FORBIDDEN': 'Access denied. You do not have permission to perform this action.',
    'SESSION_EXPIRED': 'Your session has expired. Please log in again.',

    # Validation errors
    'REQUIRED_FIELD': 'This field is required.',
    'INVALID_EMAIL': 'Please enter a valid email address.',
    'INVALID_URL': 'Please enter a valid URL.',
    'INVALID_PHONE': 'Please enter a valid phone number.',
    'INVALID_FILE_TYPE': 'Invalid file type. Please select a valid file.',
    'FILE_TOO_LARGE': 'File is too large. Please select a smaller file.',

    # Generic errors
    'UNKNOWN_ERROR': 'An unexpected error occurred. Please try again.',
    'OPERATION_FAILED': 'Operation failed. Please try again.',
}

HTTP_STATUS_ERROR_MAP: Dict[int, ErrorType] = {
    400: ErrorType.CLIENT,
    401: ErrorType.AUTHENTICATION,
    403: ErrorType.AUTHORIZATION,
    404: ErrorType.CLIENT,
    408: ErrorType.NETWORK,
    409: ErrorType.CLIENT,
    422: ErrorType.VALIDATION,
    429: ErrorType.CLIENT,
    500: ErrorType.SERVER,
    502: ErrorType.NETWORK,
    503: ErrorType.NETWORK,
    504: ErrorType.NETWORK,
}

# (substrings, message key), checked in order against the lower-cased message
_USER_MESSAGE_PATTERNS = (
    (('network', 'connection'), 'NETWORK_ERROR'),
    (('timeout',), 'TIMEOUT_ERROR'),
    (('server', '500'), 'SERVER_ERROR'),
    (('unauthorized', '401'), 'UNAUTHORIZED'),
    (('forbidden', '403'), 'FORBIDDEN'),
    (('validation',), 'PROFILE_VALIDATION_FAILED'),
)

_MISSING = object()

_TRANSPORT_ERRORS = (httpx.TransportError, ConnectionError, TimeoutError)


def _lookup(source: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if source is None:
        return default
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def _has_field(source: Any, name: str) -> bool:
    if isinstance(source, Mapping):
        return name in source
    return _lookup(source, name, _MISSING) is not _MISSING


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def extract_status_code(error: Any) -> Optional[int]:
    """
    Find the HTTP status carried by a failure.

    The response object wins over status attributes on the failure itself.
    """
    response = _lookup(error, 'response')
    for source, names in ((response, ('status_code', 'status')), (error, ('status_code', 'status'))):
        for name in names:
            status = _as_status(_lookup(source, name))
            if status is not None:
                return status
    return None


def is_transport_failure(error: Any) -> bool:
    """True when the failure happened before any HTTP response arrived."""
    if isinstance(error, httpx.HTTPStatusError):
        return False
    if isinstance(error, _TRANSPORT_ERRORS):
        return True
    if isinstance(error, requests.RequestException):
        return error.response is None
    if isinstance(error, (httpx.HTTPError, ApplicationError)):
        return False
    return _has_field(error, 'response') and _lookup(error, 'response') is None


def error_message(error: Any) -> str:
    """Developer-facing message text of a failure, possibly empty."""
    message = _lookup(error, 'message')
    if isinstance(message, str):
        return message
    if isinstance(error, BaseException):
        return str(error)
    return ''


def determine_error_type(error: Any) -> ErrorType:
    """
    Classify a caught failure.

    Args:
        error: Any caught failure object or error mapping

    Returns:
        Exactly one ErrorType
    """
    status = extract_status_code(error)
    if status is not None and status in HTTP_STATUS_ERROR_MAP:
        return HTTP_STATUS_ERROR_MAP[status]

    if status is None and is_transport_failure(error):
        return ErrorType.NETWORK

    tagged = coerce_error_type(_lookup(error, 'type'))
    if tagged is not None:
        return tagged

    message = error_message(error).lower()
    if 'validation' in message:
        return ErrorType.VALIDATION
    if 'network' in message:
        return ErrorType.NETWORK

    return ErrorType.UNKNOWN


def get_severity(error_type: ErrorType) -> ErrorSeverity:
    return ERROR_SEVERITY_MAP[error_type]


def get_user_friendly_message(error: Any, fallback: Optional[str] = None) -> str:
    """
    Resolve the message to show an end user for a failure.

    An explicit ``user_message`` wins; otherwise the lower-cased message text
    selects a canned message; otherwise the fallback or the generic message.
    """
    user_message = _lookup(error, 'user_message')
    if isinstance(user_message, str) and user_message:
        return user_message

    message = error_message(error).lower()
    if message:
        for needles, key in _USER_MESSAGE_PATTERNS:
            if any(needle in message for needle in needles):
                return ERROR_MESSAGES[key]

    return fallback or ERROR_MESSAGES['UNKNOWN_ERROR']


def create_error_context(context: ContextInput = None, **overrides: Any) -> ErrorContext:
    """
    Build an ErrorContext stamped with the current time.

    Caller-supplied values (from ``context`` then ``overrides``) take
    precedence over the default user agent. A timestamp carried by an existing
    ErrorContext is replaced with a fresh one.
    """
    if isinstance(context, ErrorContext):
        values = context.model_dump(exclude_none=True, exclude={'timestamp'})
    else:
        values = {key: value for key, value in dict(context or {}).items() if value is not None}
    values.update({key: value for key, value in overrides.items() if value is not None})
    values.setdefault('user_agent', DEFAULT_USER_AGENT)
    values.pop('timestamp', None)
    return ErrorContext(**values)


def _error_code(error: Any) -> Optional[str]:
    code = _lookup(error, 'code')
    if code is not None and not isinstance(code, BaseException):
        return str(code)
    status = extract_status_code(error)
    return str(status) if status is not None else None


def _stack(error: Any) -> Optional[str]:
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        return ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    return None


def format_error_for_logging(error: Any, context: ContextInput = None, **overrides: Any) -> ErrorInfo:
    """Classify a failure and package it as an ErrorInfo."""
    return ErrorInfo(
        type=determine_error_type(error),
        message=error_message(error) or 'Unknown error',
        user_message=get_user_friendly_message(error),
        code=_error_code(error),
        context=create_error_context(context, **overrides),
        original_error=error,
        stack=_stack(error),
    )


def create_error(message: str, error_type: ErrorType = ErrorType.UNKNOWN,
                 context: ContextInput = None) -> ApplicationError:
    """Build an ApplicationError tagged with a type and a stamped context."""
    error_context = create_error_context(context)
    return ApplicationError(message, error_type=error_type,
                            context=error_context.model_dump(mode='json', exclude_none=True))


def create_validation_error(field: str, message: str, context: ContextInput = None) -> ApplicationError:
    """Build a VALIDATION-tagged ApplicationError for one field."""
    return create_error(
        f"Validation error for field '{field}': {message}",
        ErrorType.VALIDATION,
        create_error_context(context, action='validation'),
    )


__all__ = [
    'DEFAULT_USER_AGENT',
    'ERROR_MESSAGES',
    'HTTP_STATUS_ERROR_MAP',
    'extract_status_code',
    'is_transport_failure',
    'error_message',
    'determine_error_type',
    'get_severity',
    'get_user_friendly_message',
    'create_error_context',
    'format_error_for_logging',
    'create_error',
    'create_validation_error',
]
