"""
Error classification, error loggers and the retrying error handler.

Usage:
    from hireguard.integrations import ErrorHandler, ConsoleErrorLogger

    handler = ErrorHandler(ConsoleErrorLogger())
    profile = await handler.handle_error(fetch_profile, {'action': 'profile_fetch'})
"""

from .classifier import (
    ERROR_MESSAGES,
    HTTP_STATUS_ERROR_MAP,
    create_error,
    create_error_context,
    create_validation_error,
    determine_error_type,
    format_error_for_logging,
    get_severity,
    get_user_friendly_message,
)
from .loggers import ConsoleErrorLogger, ErrorLogger, RemoteErrorLogger
from .retry import (
    ErrorHandler,
    ProfileErrorHandler,
    create_error_handler,
    get_default_error_handler,
    set_default_error_handler,
)

__all__ = [
    'ERROR_MESSAGES',
    'HTTP_STATUS_ERROR_MAP',
    'create_error',
    'create_error_context',
    'create_validation_error',
    'determine_error_type',
    'format_error_for_logging',
    'get_severity',
    'get_user_friendly_message',
    'ConsoleErrorLogger',
    'ErrorLogger',
    'RemoteErrorLogger',
    'ErrorHandler',
    'ProfileErrorHandler',
    'create_error_handler',
    'get_default_error_handler',
    'set_default_error_handler',
]
