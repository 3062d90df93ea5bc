"""
Flask application factory.

create_app() selects and validates the environment configuration, configures
structured logging, builds the error handler for the configured reporting mode
and registers the blueprints. Every request carries a correlation id taken from
the ``X-Correlation-ID`` header or generated, echoed back on the response and
attached to every log event emitted while the request is handled.
"""

import time
from typing import Any, Optional

import structlog
from flask import Flask, g, request
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from werkzeug.exceptions import HTTPException

from hireguard.blueprints import register_blueprints
from hireguard.blueprints.responses import format_error_response
from hireguard.config.settings import create_app_config
from hireguard.integrations.loggers import RemoteErrorLogger
from hireguard.integrations.retry import create_error_handler
from hireguard.monitoring.logging import (
    CORRELATION_ID_HEADER,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
    setup_structured_logging,
)

logger = structlog.get_logger("hireguard.app")


def _configure_request_hooks(app: Flask) -> None:
    @app.before_request
    def before_request_logging():
        g.request_start_time = time.time()
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        logger.debug("Request started",
                     method=request.method,
                     path=request.path,
                     correlation_id=correlation_id)

    @app.after_request
    def after_request_logging(response):
        duration = time.time() - getattr(g, 'request_start_time', time.time())
        correlation_id = get_correlation_id()
        if correlation_id:
            response.headers[CORRELATION_ID_HEADER] = correlation_id
        logger.info("Request completed",
                    method=request.method,
                    path=request.path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2))
        return response

    @app.teardown_request
    def teardown_request_cleanup(exception=None):
        if exception is not None:
            logger.error("Request teardown with exception",
                         exception=str(exception),
                         exception_type=type(exception).__name__)
        clear_correlation_id()


def _configure_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return format_error_response(
            message=error.description or error.name,
            error_code=error.name.upper().replace(' ', '_'),
            status_code=error.code or 500,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error("Unexpected error",
                     error_message=str(error),
                     error_type=type(error).__name__,
                     endpoint=request.endpoint,
                     method=request.method,
                     exc_info=True)
        return format_error_response(
            message="An unexpected error occurred. Please try again later.",
            error_code="INTERNAL_SERVER_ERROR",
            status_code=500,
        )


def _configure_metrics(app: Flask) -> None:
    @app.route('/metrics')
    def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}


def create_app(config_name: Optional[str] = None, **config_overrides: Any) -> Flask:
    """
    Create the Flask application.

    Args:
        config_name: Environment name (development, testing, production);
            defaults to HIREGUARD_ENV, then FLASK_ENV
        **config_overrides: Configuration values applied after the environment class

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If the environment is unknown or its settings are
            invalid outside debug mode

    Examples:
        app = create_app('testing')
        application = create_app('production', ERROR_REPORTING_ENDPOINT='https://errors.example.com/api/errors')
    """
    config_class = create_app_config(config_name)

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config.update(config_overrides)

    setup_structured_logging(app.config)

    error_handler = create_error_handler(app.config)
    app.extensions['hireguard'] = {'error_handler': error_handler}

    _configure_request_hooks(app)
    _configure_error_handlers(app)
    _configure_metrics(app)
    register_blueprints(app)

    logger.info("Application created",
                environment=app.config['ENVIRONMENT'],
                error_reporting_mode=app.config['ERROR_REPORTING_MODE'],
                blueprints=sorted(app.blueprints))
    return app


def shutdown_app(app: Flask) -> None:
    """Flush and close a remote error logger owned by ``app``."""
    error_handler = app.extensions.get('hireguard', {}).get('error_handler')
    if error_handler is not None and isinstance(error_handler.logger, RemoteErrorLogger):
        error_handler.logger.close()
        logger.info("Remote error logger closed", endpoint=error_handler.logger.endpoint)


__all__ = [
    'create_app',
    'shutdown_app',
]
