"""
Structured logging configuration.

Configures structlog on top of the standard library logging module so that
every ``structlog.get_logger("...")`` call in the package renders through the
same processor chain: logger name, level, ISO timestamp, the current
correlation id, exception formatting, then a JSON or console renderer.

Correlation ids are held in a context variable. The Flask layer sets one per
request from the ``X-Correlation-ID`` header (or generates one) and clears it
when the request ends.
"""

import logging
import logging.config
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

from hireguard.config.settings import BaseConfig

CORRELATION_ID_HEADER = 'X-Correlation-ID'

correlation_id_context: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


# ============================================================================
# CORRELATION IDS
# ============================================================================

def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set the correlation id for the current context.

    Args:
        correlation_id: Incoming id; a new one is generated if empty

    Returns:
        The correlation id that was set
    """
    correlation_id = correlation_id or generate_correlation_id()
    correlation_id_context.set(correlation_id)
    return correlation_id


def get_correlation_id() -> Optional[str]:
    return correlation_id_context.get()


def clear_correlation_id() -> None:
    correlation_id_context.set(None)


def add_correlation_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor adding the current correlation id to every event."""
    correlation_id = correlation_id_context.get()
    if correlation_id and 'correlation_id' not in event_dict:
        event_dict['correlation_id'] = correlation_id
    return event_dict


# ============================================================================
# SETUP
# ============================================================================

def setup_structured_logging(config: Any = BaseConfig) -> structlog.stdlib.BoundLogger:
    """
    Configure structlog and the standard library root logger.

    Args:
        config: Configuration class or mapping providing LOG_LEVEL,
            LOG_FORMAT, LOG_COLORS and APP_NAME

    Returns:
        Logger bound to the application name
    """
    def setting(key: str, default: Any) -> Any:
        if isinstance(config, dict):
            return config.get(key, default)
        return getattr(config, key, default)

    log_level = str(setting('LOG_LEVEL', 'INFO')).upper()
    log_format = setting('LOG_FORMAT', 'json')

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == 'console':
        processors.append(structlog.dev.ConsoleRenderer(colors=bool(setting('LOG_COLORS', False))))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'plain': {'format': '%(message)s'},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'plain',
                'stream': 'ext://sys.stdout',
            },
        },
        'loggers': {
            '': {
                'handlers': ['console'],
                'level': log_level,
            },
        },
    })

    logger = get_logger(setting('APP_NAME', 'hireguard'))
    logger.info("Structured logging initialized",
                log_level=log_level,
                log_format=log_format)
    return logger


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or 'hireguard')


__all__ = [
    'CORRELATION_ID_HEADER',
    'correlation_id_context',
    'generate_correlation_id',
    'set_correlation_id',
    'get_correlation_id',
    'clear_correlation_id',
    'add_correlation_id',
    'setup_structured_logging',
    'get_logger',
]
