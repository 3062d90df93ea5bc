"""
Retry handling for API-calling operations using tenacity.

ErrorHandler runs an operation up to ``max_retries`` times, reporting every
attempt to an injected ErrorLogger and sleeping ``retry_delay * attempt``
seconds between attempts. Authentication and authorization failures, and any
call made with ``retryable=False``, stop after the first attempt. When the
attempts run out the last failure is re-raised unchanged.

Attempt state machine:
    attempt n: run operation
        success -> log success, return result
        failure -> log '<action>_attempt_<n>'
            non-retryable or AUTHENTICATION/AUTHORIZATION -> re-raise
            n == limit -> re-raise
            otherwise sleep retry_delay * n, attempt n + 1

The async entry point never blocks the event loop; handle_error_sync applies
the same policy with a blocking sleep for synchronous callers.
"""

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import structlog
from prometheus_client import Counter
from tenacity import (
    AsyncRetrying,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from hireguard.business.exceptions import ErrorType
from hireguard.business.models import ErrorContext
from .classifier import ContextInput, create_error_context, determine_error_type
from .loggers import (
    DEFAULT_ERROR_ENDPOINT,
    DEFAULT_MAX_PENDING,
    ConsoleErrorLogger,
    ErrorLogger,
    RemoteErrorLogger,
)

logger = structlog.get_logger("integrations.retry")

NON_RETRYABLE_TYPES = frozenset({ErrorType.AUTHENTICATION, ErrorType.AUTHORIZATION})

Operation = Callable[[], Union[Any, Awaitable[Any]]]

# Prometheus metrics
operation_attempts_total = Counter(
    'hireguard_operation_attempts_total',
    'Operation attempts made by the error handler',
    ['action', 'outcome']
)

classified_failures_total = Counter(
    'hireguard_classified_failures_total',
    'Failed operation attempts by classified error type',
    ['action', 'error_type', 'severity']
)


def is_retryable_error(error: BaseException) -> bool:
    """Only ordinary exceptions outside the auth types are retried."""
    if not isinstance(error, Exception):
        return False
    return determine_error_type(error) not in NON_RETRYABLE_TYPES


class ErrorHandler:
    """
    Runs operations with logging and linear-backoff retries.

    Args:
        error_logger: Sink every attempt is reported to
        max_retries: Attempt limit for retryable operations (at least 1)
        retry_delay: Base backoff in seconds; attempt n waits retry_delay * n
        sleep: Coroutine function used between async attempts
        sync_sleep: Function used between synchronous attempts

    Example:
        handler = ErrorHandler(ConsoleErrorLogger(), max_retries=3, retry_delay=0.5)
        profile = await handler.handle_error(fetch_profile, {'action': 'profile_fetch'})
    """

    def __init__(
        self,
        error_logger: ErrorLogger,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        sync_sleep: Callable[[float], Any] = time.sleep,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        self.logger = error_logger
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._sync_sleep = sync_sleep

    def _policy(self, retryable: bool) -> dict:
        return {
            'stop': stop_after_attempt(self.max_retries if retryable else 1),
            'wait': wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            'retry': retry_if_exception(is_retryable_error),
            'reraise': True,
        }

    def _record_failure(self, error: Exception, context: ErrorContext, attempt: int) -> None:
        action = context.action or 'operation'
        info = self.logger.log_error(error, context, action=f'{action}_attempt_{attempt}',
                                     attempt=attempt)
        operation_attempts_total.labels(action=action, outcome='failure').inc()
        classified_failures_total.labels(
            action=action,
            error_type=info.type.value,
            severity=info.severity.value,
        ).inc()

    def _record_success(self, context: ErrorContext, attempt: int) -> None:
        action = context.action or 'operation'
        self.logger.log_success(create_error_context(context, action=f'{action}_attempt_{attempt}',
                                                     attempt=attempt))
        operation_attempts_total.labels(action=action, outcome='success').inc()

    async def _run_attempt(self, operation: Operation, context: ErrorContext, attempt: int) -> Any:
        try:
            result = operation()
            if inspect.isawaitable(result):
                result = await result
        except Exception as error:
            self._record_failure(error, context, attempt)
            raise
        self._record_success(context, attempt)
        return result

    def _run_attempt_sync(self, operation: Callable[[], Any], context: ErrorContext, attempt: int) -> Any:
        try:
            result = operation()
        except Exception as error:
            self._record_failure(error, context, attempt)
            raise
        self._record_success(context, attempt)
        return result

    async def handle_error(self, operation: Operation, context: ContextInput = None,
                           retryable: bool = True) -> Any:
        """
        Run ``operation`` with retries.

        Args:
            operation: Zero-argument callable returning a value or an awaitable
            context: Error context; ``action`` names the operation in logs
            retryable: False limits the call to a single attempt

        Returns:
            The operation's result from the first successful attempt

        Raises:
            The last failure once attempts are exhausted or a terminal
            error type is seen
        """
        error_context = create_error_context(context)
        async for attempt in AsyncRetrying(sleep=self._sleep, **self._policy(retryable)):
            with attempt:
                return await self._run_attempt(operation, error_context,
                                               attempt.retry_state.attempt_number)

    def handle_error_sync(self, operation: Callable[[], Any], context: ContextInput = None,
                          retryable: bool = True) -> Any:
        """Blocking variant of handle_error for synchronous callers."""
        error_context = create_error_context(context)
        for attempt in Retrying(sleep=self._sync_sleep, **self._policy(retryable)):
            with attempt:
                return self._run_attempt_sync(operation, error_context,
                                              attempt.retry_state.attempt_number)

    def handle_validation_error(self, field: str, message: str, context: ContextInput = None) -> None:
        self.logger.log_validation_error(field, message, context)

    def handle_network_error(self, error: Any, context: ContextInput = None) -> None:
        self.logger.log_network_error(error, context)

    def handle_auth_error(self, error: Any, context: ContextInput = None) -> None:
        self.logger.log_auth_error(error, context)


class ProfileErrorHandler:
    """Profile operations wrapped with their standard error context."""

    def __init__(self, error_handler: Optional[ErrorHandler] = None):
        self.error_handler = error_handler or get_default_error_handler()

    async def handle_profile_fetch(self, operation: Operation, user_id: Optional[str] = None) -> Any:
        return await self.error_handler.handle_error(operation, {
            'action': 'profile_fetch',
            'user_id': user_id,
        })

    async def handle_profile_update(self, operation: Operation, user_id: Optional[str] = None,
                                    profile_id: Optional[str] = None) -> Any:
        return await self.error_handler.handle_error(operation, {
            'action': 'profile_update',
            'user_id': user_id,
            'profile_id': profile_id,
        })

    async def handle_profile_picture_upload(self, operation: Operation,
                                            user_id: Optional[str] = None) -> Any:
        return await self.error_handler.handle_error(operation, {
            'action': 'profile_picture_upload',
            'user_id': user_id,
        })

    def handle_validation_error(self, field: str, message: str, user_id: Optional[str] = None) -> None:
        self.error_handler.handle_validation_error(field, message, {
            'action': 'profile_validation',
            'user_id': user_id,
        })


# ============================================================================
# FACTORY AND PROCESS-WIDE DEFAULT
# ============================================================================

def _setting(config: Any, key: str, default: Any) -> Any:
    if config is None:
        return default
    if isinstance(config, Mapping):
        return config.get(key, default)
    return getattr(config, key, default)


def create_error_handler(config: Any = None) -> ErrorHandler:
    """
    Build an ErrorHandler from a configuration class or Flask config mapping.

    ERROR_REPORTING_MODE 'remote' selects the RemoteErrorLogger posting to
    ERROR_REPORTING_ENDPOINT; anything else logs to the console.
    """
    mode = str(_setting(config, 'ERROR_REPORTING_MODE', 'console')).lower()
    if mode == 'remote':
        error_logger: ErrorLogger = RemoteErrorLogger(
            endpoint=_setting(config, 'ERROR_REPORTING_ENDPOINT', DEFAULT_ERROR_ENDPOINT),
            timeout=float(_setting(config, 'ERROR_REPORTING_TIMEOUT', 5.0)),
            max_workers=int(_setting(config, 'ERROR_REPORTING_WORKERS', 2)),
            max_pending=int(_setting(config, 'ERROR_REPORTING_MAX_PENDING', DEFAULT_MAX_PENDING)),
        )
    else:
        error_logger = ConsoleErrorLogger()

    handler = ErrorHandler(
        error_logger,
        max_retries=int(_setting(config, 'RETRY_MAX_ATTEMPTS', 3)),
        retry_delay=float(_setting(config, 'RETRY_DELAY_SECONDS', 1.0)),
    )
    logger.debug("Error handler created",
                 reporting_mode=mode,
                 max_retries=handler.max_retries,
                 retry_delay=handler.retry_delay)
    return handler


_default_handler: Optional[ErrorHandler] = None


def get_default_error_handler() -> ErrorHandler:
    """Return the process-wide handler, creating a console-backed one on first use."""
    global _default_handler
    if _default_handler is None:
        _default_handler = create_error_handler()
    return _default_handler


def set_default_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Install the process-wide handler; None resets it to the lazy default."""
    global _default_handler
    _default_handler = handler


__all__ = [
    'NON_RETRYABLE_TYPES',
    'is_retryable_error',
    'ErrorHandler',
    'ProfileErrorHandler',
    'create_error_handler',
    'get_default_error_handler',
    'set_default_error_handler',
]
