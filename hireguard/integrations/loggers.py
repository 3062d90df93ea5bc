"""
Error loggers.

ErrorLogger is the sink the retry handler reports every attempt to: failures as
classified ErrorInfo through ``log``, successes through ``log_success``.
Two implementations ship with the package:

- ConsoleErrorLogger writes classified errors through structlog, choosing the
  log level from the error severity (CRITICAL/HIGH -> error, MEDIUM -> warning,
  LOW -> info).
- RemoteErrorLogger POSTs the serialized ErrorInfo to an error collection
  endpoint using requests on a small background thread pool. Delivery is
  fire-and-forget: any delivery failure, and any report arriving while the
  delivery backlog is full, is downgraded to the console logger and never
  reaches the caller.
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, Optional, Set

import requests
import structlog

from hireguard.business.exceptions import ErrorSeverity, ErrorType
from hireguard.business.models import ErrorContext, ErrorInfo
from .classifier import ContextInput, create_error_context, format_error_for_logging

logger = structlog.get_logger("integrations.loggers")

DEFAULT_ERROR_ENDPOINT = 'http://localhost:8000/api/errors'
DEFAULT_MAX_PENDING = 100


class ErrorLogger(ABC):
    """
    Base class for error sinks.

    Subclasses implement ``log``; the convenience methods classify the failure
    and stamp the context before handing the ErrorInfo over. Each returns the
    ErrorInfo it logged.
    """

    @abstractmethod
    def log(self, info: ErrorInfo) -> None:
        """Record one classified error."""

    def log_error(self, error: Any, context: ContextInput = None, **overrides: Any) -> ErrorInfo:
        info = format_error_for_logging(error, context, **overrides)
        self.log(info)
        return info

    def log_validation_error(self, field: str, message: str, context: ContextInput = None) -> ErrorInfo:
        info = ErrorInfo(
            type=ErrorType.VALIDATION,
            message=f"Validation error for field '{field}': {message}",
            user_message=message,
            context=create_error_context(context, action='validation'),
        )
        self.log(info)
        return info

    def log_network_error(self, error: Any, context: ContextInput = None) -> ErrorInfo:
        return self.log_error(error, context, action='network_request')

    def log_auth_error(self, error: Any, context: ContextInput = None) -> ErrorInfo:
        return self.log_error(error, context, action='authentication')

    def log_success(self, context: ErrorContext) -> None:
        """Record a successful attempt. Successes are never shipped remotely."""
        logger.info("Operation succeeded",
                    action=context.action,
                    attempt=context.attempt,
                    user_id=context.user_id,
                    profile_id=context.profile_id)


class ConsoleErrorLogger(ErrorLogger):
    """Writes classified errors to the structured application log."""

    LEVELS = {
        ErrorSeverity.CRITICAL: 'error',
        ErrorSeverity.HIGH: 'error',
        ErrorSeverity.MEDIUM: 'warning',
        ErrorSeverity.LOW: 'info',
    }

    def __init__(self, bound_logger: Optional[Any] = None):
        self._logger = bound_logger or structlog.get_logger("integrations.errors")

    def log(self, info: ErrorInfo) -> None:
        method = getattr(self._logger, self.LEVELS.get(info.severity, 'info'))
        fields: Dict[str, Any] = {
            'error_type': info.type.value,
            'severity': info.severity.value,
            'user_message': info.user_message,
            'code': info.code,
            'context': info.context.model_dump(mode='json', exclude_none=True),
        }
        if info.stack:
            fields['stack'] = info.stack
        method(f"[{info.type.value}] {info.severity.value}: {info.message}", **fields)


class RemoteErrorLogger(ErrorLogger):
    """
    Ships classified errors to a remote collection endpoint.

    Args:
        endpoint: URL accepting a JSON ErrorInfo via POST
        timeout: Per-request timeout in seconds
        session: Optional requests session; one is created (and closed) if omitted
        max_workers: Size of the delivery thread pool
        max_pending: Deliveries allowed in flight; further reports go to the fallback
        fallback: Logger used when delivery fails; console logger by default

    ``log`` returns immediately. Call ``flush`` to wait for pending deliveries
    and ``close`` at shutdown.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ERROR_ENDPOINT,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        max_workers: int = 2,
        max_pending: int = DEFAULT_MAX_PENDING,
        fallback: Optional[ErrorLogger] = None,
    ):
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_pending = max_pending
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._fallback = fallback or ConsoleErrorLogger()
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='error-reporter')
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    def log(self, info: ErrorInfo) -> None:
        try:
            payload = info.model_dump(mode='json')
        except ValueError as error:
            # unserializable form_data or context values
            self._report_failure(info, str(error))
            return

        with self._lock:
            if len(self._pending) >= self.max_pending:
                future = None
                reason = f"delivery backlog full ({self.max_pending} pending)"
            else:
                try:
                    future = self._executor.submit(self._deliver, info, payload)
                except RuntimeError as error:
                    # executor already shut down
                    future = None
                    reason = str(error)
                else:
                    self._pending.add(future)

        if future is None:
            self._report_failure(info, reason)
            return
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _deliver(self, info: ErrorInfo, payload: Dict[str, Any]) -> bool:
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except Exception as error:
            # futures are never inspected; every failure ends at the fallback
            self._report_failure(info, f"{type(error).__name__}: {error}")
            return False
        return True

    def _report_failure(self, info: ErrorInfo, reason: str) -> None:
        logger.error("Failed to log error remotely",
                     endpoint=self.endpoint,
                     delivery_error=reason,
                     error_type=info.type.value)
        self._fallback.log(info)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every pending delivery has finished or ``timeout`` elapses."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)
        if self._owns_session:
            self._session.close()


__all__ = [
    'DEFAULT_ERROR_ENDPOINT',
    'DEFAULT_MAX_PENDING',
    'ErrorLogger',
    'ConsoleErrorLogger',
    'RemoteErrorLogger',
]
