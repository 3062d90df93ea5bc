"""Monitoring package: structlog configuration and correlation id tracking."""

from hireguard.monitoring.logging import (
    CORRELATION_ID_HEADER,
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_structured_logging,
)

__all__ = [
    'CORRELATION_ID_HEADER',
    'clear_correlation_id',
    'get_correlation_id',
    'get_logger',
    'set_correlation_id',
    'setup_structured_logging',
]
