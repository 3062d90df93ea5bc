"""
Error collection endpoint.

``POST /api/errors`` receives ErrorInfo payloads shipped by RemoteErrorLogger
instances (or any other client) and writes them to the structured log. The
severity sent by the client is ignored and recomputed from the error type, so
a client cannot escalate or hide an error by mislabelling it.
"""

import structlog
from flask import Blueprint, request
from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate
from prometheus_client import Counter
from pydantic import ValidationError as PydanticValidationError

from hireguard.business.exceptions import ErrorType
from hireguard.business.models import ErrorContext, ErrorInfo
from hireguard.business.validators import to_snake_case
from hireguard.integrations.classifier import get_user_friendly_message
from hireguard.integrations.loggers import ConsoleErrorLogger
from .responses import format_api_response, format_error_response

logger = structlog.get_logger("blueprints.errors")

errors_bp = Blueprint('errors', __name__, url_prefix='/api')

ingest_logger = ConsoleErrorLogger(structlog.get_logger("api.error_ingest"))

REPORTED_ERRORS = Counter(
    'hireguard_reported_errors_total',
    'Client error reports accepted by the collection endpoint',
    ['error_type', 'severity']
)


class ErrorReportSchema(Schema):
    """Incoming error report; unknown keys (including severity) are dropped."""
    type = fields.String(required=True, validate=validate.OneOf([member.value for member in ErrorType]))
    message = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    user_message = fields.String(load_default=None, allow_none=True)
    code = fields.String(load_default=None, allow_none=True)
    context = fields.Dict(keys=fields.String(), load_default=dict)
    stack = fields.String(load_default=None, allow_none=True)

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize_type(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('type'), str):
            data = dict(data, type=data['type'].strip().upper())
        return data


def _context_fields(context):
    """Convert context keys to snake_case; form_data contents are kept as submitted."""
    return {to_snake_case(key): value for key, value in context.items()}


@errors_bp.route('/errors', methods=['POST'])
def ingest_error():
    """
    Accept one error report.

    Returns:
        202 with the classified type and recomputed severity
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError({'_schema': ['Request body must be a JSON object']})

    report = ErrorReportSchema().load(payload)
    info = ErrorInfo(
        type=ErrorType(report['type']),
        message=report['message'],
        user_message=report['user_message'] or get_user_friendly_message(report),
        code=report['code'],
        context=ErrorContext(**_context_fields(report['context'])),
        stack=report['stack'],
    )

    ingest_logger.log(info)
    REPORTED_ERRORS.labels(error_type=info.type.value, severity=info.severity.value).inc()

    return format_api_response(
        data={'type': info.type.value, 'severity': info.severity.value},
        message="Error report accepted",
        status_code=202,
    )


@errors_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    """Handle marshmallow validation errors."""
    logger.warning("Error report rejected", validation_errors=e.messages)
    return format_error_response(
        message="Error report validation failed",
        error_code="VALIDATION_ERROR",
        details={'validation_errors': e.messages},
        status_code=400,
    )


@errors_bp.errorhandler(PydanticValidationError)
def handle_context_validation_error(e):
    """Handle malformed error contexts."""
    logger.warning("Error report context rejected", error_count=e.error_count())
    return format_error_response(
        message="Error report context is invalid",
        error_code="INVALID_CONTEXT",
        details={'validation_errors': e.errors(include_url=False, include_context=False,
                                               include_input=False)},
        status_code=400,
    )


__all__ = [
    'errors_bp',
    'ErrorReportSchema',
]
